"""
Trae-MCP Auto Configuration

Create and patch the project-local .trae workspace files (recommended
extensions, settings and debugger launch configuration) for Unity projects.

The directory uses the editor's own spelling, .trae. Some older Unity
integrations wrote to .trea instead; the editor does not read that folder.
"""

import json
import logging
from pathlib import Path
from typing import Any

from .core.constants import UNITY_EXTENSION_ID

logger = logging.getLogger(__name__)

# Workspace directory inside the project root
WORKSPACE_DIR_NAME = ".trae"

# Presence of this file disables patching of existing workspace files
PATCH_DISABLE_FILE = ".vstupatchdisable"

ATTACH_CONFIGURATION = {
    "name": "Attach to Unity",
    "type": "vstuc",
    "request": "attach",
}

DEFAULT_LAUNCH = {
    "version": "0.2.0",
    "configurations": [ATTACH_CONFIGURATION],
}

DEFAULT_FILES_EXCLUDE = {
    "**/.git": True,
    "**/.DS_Store": True,
    "**/*.meta": True,
    "**/*.*.meta": True,
    "**/*.unity": True,
    "**/*.unityproj": True,
    "**/*.mat": True,
    "**/*.fbx": True,
    "**/*.FBX": True,
    "**/*.tga": True,
    "**/*.cubemap": True,
    "**/*.prefab": True,
    "**/Library": True,
    "**/ProjectSettings": True,
    "**/Temp": True,
}

DEFAULT_SETTINGS = {"files.exclude": DEFAULT_FILES_EXCLUDE}

DEFAULT_EXTENSIONS = {"recommendations": [UNITY_EXTENSION_ID]}


def _write_json(path: Path, document: Any) -> None:
    # Same indentation as the default documents
    with open(path, "w", encoding="utf-8") as f:
        json.dump(document, f, indent=4)
        f.write("\n")


def _read_json_object(path: Path) -> dict[str, Any]:
    """
    Read a JSON object from a workspace file.

    Raises:
        OSError: If the file cannot be read
        ValueError: If the content is not a JSON object
    """
    with open(path, "r", encoding="utf-8") as f:
        document = json.load(f)
    if not isinstance(document, dict):
        raise ValueError("top-level value is not an object")
    return document


def _create_default(path: Path, document: Any) -> tuple[bool, bool, str]:
    try:
        _write_json(path, document)
    except OSError as e:
        return False, False, f"Write Failed: {e}"
    logger.info(f"Created {path}")
    return True, True, f"Created {path.name}"


def check_extensions_file(workspace_dir: Path, enable_patch: bool = True) -> tuple[bool, bool, str]:
    """
    Check and fix the recommended extensions file.

    Args:
        workspace_dir: Path to the .trae directory
        enable_patch: Whether an existing file may be modified

    Returns:
        (ok, modified, message)
    """
    extensions_file = workspace_dir / "extensions.json"
    if not extensions_file.exists():
        return _create_default(extensions_file, DEFAULT_EXTENSIONS)

    if not enable_patch:
        return True, False, "Patching disabled"

    try:
        extensions = _read_json_object(extensions_file)
    except json.JSONDecodeError as e:
        return False, False, f"JSON Parse Error: {e}"
    except (OSError, ValueError) as e:
        return False, False, f"Read Failed: {e}"

    recommendations = extensions.get("recommendations")
    if not isinstance(recommendations, list):
        recommendations = []
        extensions["recommendations"] = recommendations

    if UNITY_EXTENSION_ID in recommendations:
        return True, False, f"{UNITY_EXTENSION_ID} already recommended"

    recommendations.append(UNITY_EXTENSION_ID)
    try:
        _write_json(extensions_file, extensions)
    except OSError as e:
        return False, False, f"Write Failed: {e}"
    return True, True, f"Added {UNITY_EXTENSION_ID} recommendation"


def check_settings_file(workspace_dir: Path, enable_patch: bool = True) -> tuple[bool, bool, str]:
    """
    Check and fix files.exclude entries in the settings file.

    Only missing entries are added; user values are kept.

    Returns:
        (ok, modified, message)
    """
    settings_file = workspace_dir / "settings.json"
    if not settings_file.exists():
        return _create_default(settings_file, DEFAULT_SETTINGS)

    if not enable_patch:
        return True, False, "Patching disabled"

    try:
        settings = _read_json_object(settings_file)
    except json.JSONDecodeError as e:
        return False, False, f"JSON Parse Error: {e}"
    except (OSError, ValueError) as e:
        return False, False, f"Read Failed: {e}"

    files_exclude = settings.get("files.exclude")
    if not isinstance(files_exclude, dict):
        files_exclude = {}
        settings["files.exclude"] = files_exclude

    added = [key for key in DEFAULT_FILES_EXCLUDE if key not in files_exclude]
    if not added:
        return True, False, "files.exclude correctly configured"

    for key in added:
        files_exclude[key] = DEFAULT_FILES_EXCLUDE[key]

    try:
        _write_json(settings_file, settings)
    except OSError as e:
        return False, False, f"Write Failed: {e}"
    return True, True, f"Added {len(added)} files.exclude entr{'y' if len(added) == 1 else 'ies'}"


def check_launch_file(workspace_dir: Path, enable_patch: bool = True) -> tuple[bool, bool, str]:
    """
    Check and fix the Unity attach configuration in the launch file.

    Returns:
        (ok, modified, message)
    """
    launch_file = workspace_dir / "launch.json"
    if not launch_file.exists():
        return _create_default(launch_file, DEFAULT_LAUNCH)

    if not enable_patch:
        return True, False, "Patching disabled"

    try:
        launch = _read_json_object(launch_file)
    except json.JSONDecodeError as e:
        return False, False, f"JSON Parse Error: {e}"
    except (OSError, ValueError) as e:
        return False, False, f"Read Failed: {e}"

    configurations = launch.get("configurations")
    if not isinstance(configurations, list):
        configurations = []
        launch["configurations"] = configurations

    if any(
        isinstance(entry, dict) and entry.get("type") == ATTACH_CONFIGURATION["type"]
        for entry in configurations
    ):
        return True, False, "Unity attach configuration present"

    configurations.append(dict(ATTACH_CONFIGURATION))
    try:
        _write_json(launch_file, launch)
    except OSError as e:
        return False, False, f"Write Failed: {e}"
    return True, True, "Added Unity attach configuration"


def _update_status(result: dict[str, Any], modified: bool, success: bool) -> None:
    """Update result status based on check outcome."""
    if not success:
        result["status"] = "error"
    elif modified and result["status"] == "ok":
        result["status"] = "fixed"


def run_config_check(project_root: Path) -> dict[str, Any]:
    """
    Create or patch every workspace file of a project.

    Args:
        project_root: Path to the project root directory

    Returns:
        Result dictionary with status, per-file results, and summary
    """
    workspace_dir = project_root / WORKSPACE_DIR_NAME
    result: dict[str, Any] = {
        "status": "ok",
        "workspace_dir": str(workspace_dir),
        "patch_enabled": True,
        "summary": "",
    }

    try:
        workspace_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        result["status"] = "error"
        result["summary"] = f"Cannot create {workspace_dir}: {e}"
        return result

    enable_patch = not (workspace_dir / PATCH_DISABLE_FILE).exists()
    result["patch_enabled"] = enable_patch

    checks = (
        ("extensions", check_extensions_file),
        ("settings", check_settings_file),
        ("launch", check_launch_file),
    )
    for key, check in checks:
        ok, modified, message = check(workspace_dir, enable_patch)
        result[key] = {"ok": ok, "modified": modified, "message": message}
        _update_status(result, modified, ok)
        if not ok:
            logger.warning(f"{key} file check failed: {message}")

    if result["status"] == "fixed":
        fix_count = sum(result[key]["modified"] for key, _ in checks)
        result["summary"] = f"Updated {fix_count} file(s)."
    elif result["status"] == "error":
        result["summary"] = "Some workspace files could not be updated."
    else:
        result["summary"] = "All workspace files correct."

    return result
