"""
Trae-MCP Utility Functions

Project discovery and Trae AI installation detection utilities.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from .core.constants import ENV_VAR_EXECUTABLE, ENV_VAR_PROJECT_DIR
from .core.platform import PlatformProfile, get_platform_profile
from .editor.types import TraeInstallation

logger = logging.getLogger(__name__)


def is_unity_project(directory: Path) -> bool:
    """Check if a directory looks like a Unity project root."""
    return (directory / "Assets").is_dir() and (directory / "ProjectSettings").is_dir()


def find_project_root(start_dir: Optional[Path] = None) -> Optional[Path]:
    """
    Find the Unity project root by searching upward from start_dir.

    Search order:
    1. TRAE_MCP_PROJECT_DIR environment variable (if set)
    2. start_dir parameter or cwd

    Args:
        start_dir: Starting directory for search (defaults to cwd)

    Returns:
        Path to the project root, or None if not found
    """
    starts: list[Path] = []
    env_dir = os.environ.get(ENV_VAR_PROJECT_DIR)
    if env_dir:
        starts.append(Path(env_dir))
    starts.append(Path(start_dir) if start_dir is not None else Path.cwd())

    for start in starts:
        current = start.resolve()
        while True:
            if is_unity_project(current):
                return current

            parent = current.parent
            if parent == current:
                break
            current = parent

    return None


def find_solution_file(project_root: Path) -> Path:
    """
    Get the solution file path for a project.

    Uses the single *.sln in the root when there is exactly one, otherwise
    the conventional <root name>.sln (which may not exist yet).
    """
    solutions = sorted(project_root.glob("*.sln"))
    if len(solutions) == 1:
        return solutions[0]
    return project_root / f"{project_root.name}.sln"


def is_candidate_for_discovery(path: str, profile: Optional[PlatformProfile] = None) -> bool:
    """Check if a path looks like a Trae executable (or .app bundle on macOS)."""
    profile = profile or get_platform_profile()
    candidate = Path(path)
    exists = candidate.is_dir() if profile.candidate_is_directory else candidate.is_file()
    return exists and profile.executable_pattern.match(path) is not None


def get_real_path(path: str, profile: Optional[PlatformProfile] = None) -> str:
    """Resolve symlinks on macOS (apps are often linked into /Applications)."""
    profile = profile or get_platform_profile()
    if profile.name == "macos":
        return os.path.realpath(path)
    return path


def _manifest_base(editor_path: str, profile: PlatformProfile) -> Optional[Path]:
    real_path = Path(get_real_path(editor_path, profile))

    if profile.name == "windows":
        # Executable sits next to the resources directory
        return real_path.parent
    elif profile.name == "macos":
        return real_path / "Contents"
    else:
        # Either [trae]/trae or [trae]/bin/trae
        parent = real_path.parent
        return parent.parent if parent.name == "bin" else parent


def parse_version(text: str) -> tuple[int, ...]:
    """
    Parse the numeric part of a version string ("1.2.3-insider" -> (1, 2, 3)).

    Raises:
        ValueError: If the numeric part is not dotted integers
    """
    numeric = text.split("-")[0].strip()
    return tuple(int(part) for part in numeric.split("."))


def read_manifest_version(
    editor_path: str, profile: Optional[PlatformProfile] = None
) -> tuple[tuple[int, ...], bool]:
    """
    Read version information from the installation's package.json.

    Returns:
        (version, is_prerelease) - version is empty when it cannot be read
    """
    profile = profile or get_platform_profile()
    try:
        manifest_base = _manifest_base(editor_path, profile)
        if manifest_base is None:
            return (), False

        manifest_path = manifest_base / "resources" / "app" / "package.json"
        if not manifest_path.is_file():
            return (), False

        with open(manifest_path, "r", encoding="utf-8") as f:
            manifest = json.load(f)

        version_text = str(manifest.get("version", ""))
        return parse_version(version_text), "insider" in version_text.lower()
    except (OSError, ValueError, AttributeError) as e:
        logger.debug(f"Could not read version for {editor_path}: {e}")
        return (), False


def try_discover_installation(
    editor_path: Optional[str], profile: Optional[PlatformProfile] = None
) -> Optional[TraeInstallation]:
    """
    Build a TraeInstallation for a candidate path.

    Args:
        editor_path: Candidate executable or .app bundle

    Returns:
        TraeInstallation, or None if the path is not a Trae installation
    """
    profile = profile or get_platform_profile()
    if not editor_path or not is_candidate_for_discovery(editor_path, profile):
        return None

    version, is_prerelease = read_manifest_version(editor_path, profile)
    is_prerelease = is_prerelease or "insider" in editor_path.lower()

    name = "Trae AI"
    if is_prerelease:
        name += " - Insider"
    if version:
        name += f" [{'.'.join(str(part) for part in (version + (0, 0, 0))[:3])}]"

    return TraeInstallation(
        name=name,
        path=editor_path,
        version=version,
        is_prerelease=is_prerelease,
    )


def get_installation_candidates(profile: Optional[PlatformProfile] = None) -> list[str]:
    """Get well-known Trae installation paths for the platform."""
    profile = profile or get_platform_profile()
    candidates: list[str] = []

    override = os.environ.get(ENV_VAR_EXECUTABLE)
    if override:
        candidates.append(override)

    if profile.name == "windows":
        local_app_data = os.environ.get("LOCALAPPDATA", str(Path.home() / "AppData" / "Local"))
        program_files = os.environ.get("ProgramFiles", "C:\\Program Files")
        for base_path in (Path(local_app_data) / "Programs", Path(program_files)):
            candidates.append(str(base_path / "Trae" / "Trae.exe"))
            candidates.append(str(base_path / "Trae AI" / "Trae.exe"))
            candidates.append(str(base_path / "Trae Insiders" / "Trae - Insiders.exe"))
            candidates.append(str(base_path / "Trae AI Insiders" / "Trae - Insiders.exe"))
    elif profile.name == "macos":
        applications = Path("/Applications")
        try:
            candidates.extend(str(p) for p in sorted(applications.glob("Trae*.app")))
        except OSError:
            pass
    else:
        candidates.extend(["/usr/bin/trae", "/bin/trae", "/usr/local/bin/trae"])

    return list(dict.fromkeys(candidates))


def find_trae_installations(profile: Optional[PlatformProfile] = None) -> list[TraeInstallation]:
    """
    Find all installed Trae AI editors.

    Returns:
        Discovered installations, in candidate order
    """
    profile = profile or get_platform_profile()
    installations = []
    for candidate in get_installation_candidates(profile):
        installation = try_discover_installation(candidate, profile)
        if installation is not None:
            logger.info(f"Discovered {installation.name} at {installation.path}")
            installations.append(installation)
    return installations
