"""
Platform profiles for Trae-MCP.

Every OS-dependent decision (state directories, process names, installation
patterns, path normalization, launch wrapping and process creation flags)
lives in a PlatformProfile selected once per process.
"""

import os
import platform
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from .constants import (
    CREATE_NEW_PROCESS_GROUP,
    CREATE_NO_WINDOW,
    DETACHED_PROCESS,
    ENV_VAR_STORAGE_DIR,
)


@dataclass(frozen=True)
class PlatformProfile:
    """OS-specific settings used by discovery, matching and launching."""

    name: str  # "windows" | "macos" | "linux"
    config_root: Path  # Directory holding the editor's "User" folder
    process_names: tuple[str, ...]
    executable_pattern: re.Pattern
    candidate_is_directory: bool  # macOS installations are .app bundles
    ensure_leading_slash: bool
    wraps_with_open: bool
    file_manager: str

    @property
    def workspace_storage_dir(self) -> Path:
        """Base directory of the editor's per-window state folders."""
        override = os.environ.get(ENV_VAR_STORAGE_DIR)
        if override:
            return Path(override)
        return self.config_root / "User" / "workspaceStorage"

    def extensions_base_dir(self, prerelease: bool = False) -> Path:
        """
        Directory where the editor installs extensions.

        Uses the product's own spelling (~/.trae, ~/.trae-insiders). Older
        integrations looked under ~/.trea, which the editor never creates.
        """
        folder = ".trae-insiders" if prerelease else ".trae"
        return Path.home() / folder / "extensions"

    def captured_process_kwargs(self) -> dict[str, Any]:
        """
        Popen keyword arguments for a bounded, captured run.

        The child leads its own process group so a timeout can kill it
        together with any descendants holding its pipes. On Windows no
        console window is shown.
        """
        if self.name == "windows":
            return {"creationflags": CREATE_NO_WINDOW | CREATE_NEW_PROCESS_GROUP}
        return {"start_new_session": True}

    def detached_process_kwargs(self) -> dict[str, Any]:
        """Popen keyword arguments for a fire-and-forget launch."""
        if self.name == "windows":
            return {"creationflags": DETACHED_PROCESS | CREATE_NEW_PROCESS_GROUP}
        return {"start_new_session": True}

    def matches_process_name(self, process_name: Optional[str]) -> bool:
        """Check a process display name against the editor allow-list."""
        if not process_name:
            return False
        name = process_name.lower()
        if name.endswith(".exe"):
            name = name[: -len(".exe")]
        return any(name == candidate.lower() for candidate in self.process_names)


def _windows_profile() -> PlatformProfile:
    appdata = os.environ.get("APPDATA")
    roaming = Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
    return PlatformProfile(
        name="windows",
        config_root=roaming / "Trae",
        process_names=("trae",),
        executable_pattern=re.compile(r".*Tr(ae|ea).*\.exe$", re.IGNORECASE),
        candidate_is_directory=False,
        ensure_leading_slash=False,
        wraps_with_open=False,
        file_manager="explorer",
    )


def _macos_profile() -> PlatformProfile:
    return PlatformProfile(
        name="macos",
        config_root=Path.home() / "Library" / "Application Support" / "Trae",
        process_names=("Trae", "Trae Helper"),
        executable_pattern=re.compile(r".*Tr(ae|ea).*\.app$", re.IGNORECASE),
        candidate_is_directory=True,
        ensure_leading_slash=True,
        wraps_with_open=True,
        file_manager="open",
    )


def _linux_profile() -> PlatformProfile:
    return PlatformProfile(
        name="linux",
        config_root=Path.home() / ".config" / "Trae",
        process_names=("Trae",),
        executable_pattern=re.compile(r".*tr(ae|ea)$", re.IGNORECASE),
        candidate_is_directory=False,
        ensure_leading_slash=True,
        wraps_with_open=False,
        file_manager="xdg-open",
    )


def profile_for(system_name: str) -> PlatformProfile:
    """
    Build the profile for a platform.system() value.

    Args:
        system_name: "Windows", "Darwin" or anything else (treated as Linux)

    Returns:
        PlatformProfile for that platform
    """
    if system_name == "Windows":
        return _windows_profile()
    elif system_name == "Darwin":
        return _macos_profile()
    else:
        return _linux_profile()


@lru_cache(maxsize=1)
def get_platform_profile() -> PlatformProfile:
    """Get the profile of the running platform (selected once)."""
    return profile_for(platform.system())
