"""
WorkspaceScanner - Discovers folders open in running Trae windows.

Trae persists one state folder per window under its workspaceStorage
directory. Each folder may hold a workspace.json ("folder" URI) and a
window.json ("workspace" URI). This module reads those files and reports
the local folders they point to.

The storage folders cannot be attributed to a specific PID, so every Trae
process reports the union of all windows' folders.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Iterable, Optional
from urllib.parse import unquote

import psutil

from ..core.constants import (
    FILE_URI_PREFIX,
    WINDOW_STATE_FILE,
    WINDOW_STATE_KEY,
    WORKSPACE_STATE_FILE,
    WORKSPACE_STATE_KEY,
)
from ..core.platform import PlatformProfile, get_platform_profile

logger = logging.getLogger(__name__)

_DRIVE_LETTER = re.compile(r"^[A-Za-z]:")


def parse_file_uri(value: Any) -> Optional[str]:
    """
    Convert a file:/// URI to a local path.

    Args:
        value: URI string from a state file

    Returns:
        Decoded path ("/Users/x/proj", "c:/proj"), or None for other schemes
    """
    if not isinstance(value, str) or not value.startswith(FILE_URI_PREFIX):
        return None

    path = unquote(value[len(FILE_URI_PREFIX):])
    if not path:
        return None
    if _DRIVE_LETTER.match(path):
        return path
    return "/" + path


def _read_state_path(state_file: Path, key: str) -> Optional[str]:
    """Read one state file and extract the local path stored under key."""
    if not state_file.is_file():
        return None

    content = state_file.read_text(encoding="utf-8")
    if not content.strip():
        return None

    document = json.loads(content)
    if not isinstance(document, dict):
        raise ValueError(f"expected a JSON object, got {type(document).__name__}")

    return parse_file_uri(document.get(key))


def read_storage_workspaces(storage_dir: Path) -> list[str]:
    """
    Collect every local folder recorded in the workspaceStorage directory.

    Unreadable or malformed state files are logged and skipped.

    Args:
        storage_dir: The editor's workspaceStorage directory

    Returns:
        Distinct folder paths in discovery order (empty if the directory is missing)
    """
    if not storage_dir.is_dir():
        logger.warning(f"Workspace storage directory not found: {storage_dir}")
        return []

    logger.debug(f"Looking for workspaces in: {storage_dir}")

    found: dict[str, None] = {}
    try:
        window_dirs = sorted(p for p in storage_dir.iterdir() if p.is_dir())
    except OSError as e:
        logger.warning(f"Cannot list workspace storage directory {storage_dir}: {e}")
        return []

    for window_dir in window_dirs:
        for file_name, key in (
            (WORKSPACE_STATE_FILE, WORKSPACE_STATE_KEY),
            (WINDOW_STATE_FILE, WINDOW_STATE_KEY),
        ):
            state_file = window_dir / file_name
            try:
                path = _read_state_path(state_file, key)
            except (OSError, UnicodeDecodeError, ValueError) as e:
                # json.JSONDecodeError is a ValueError
                logger.warning(f"Error reading workspace state file {state_file}: {e}")
                continue
            if path is not None:
                found.setdefault(path, None)

    return list(found)


def get_process_workspaces(
    process: psutil.Process,
    storage_dir: Optional[Path] = None,
    profile: Optional[PlatformProfile] = None,
) -> list[str]:
    """
    Get the folders possibly open in a Trae process.

    Raises:
        psutil.NoSuchProcess: If the process has exited
    """
    if not process.is_running():
        raise psutil.NoSuchProcess(process.pid)

    if storage_dir is None:
        storage_dir = (profile or get_platform_profile()).workspace_storage_dir
    return read_storage_workspaces(storage_dir)


def discover_open_workspaces(
    processes: Iterable[psutil.Process],
    storage_dir: Optional[Path] = None,
    profile: Optional[PlatformProfile] = None,
) -> dict[psutil.Process, list[str]]:
    """
    Map each live Trae process to the folders it may have open.

    Processes that cannot be inspected are logged and left out.
    """
    result: dict[psutil.Process, list[str]] = {}
    for process in processes:
        try:
            result[process] = get_process_workspaces(process, storage_dir, profile)
        except Exception as e:
            logger.error(f"Error checking process {getattr(process, 'pid', '?')}: {e}")
    return result


def find_editor_processes(profile: Optional[PlatformProfile] = None) -> list[psutil.Process]:
    """
    List running Trae processes.

    Returns:
        Processes whose name is on the profile's allow-list, in enumeration order
    """
    profile = profile or get_platform_profile()
    processes: list[psutil.Process] = []
    seen: set[int] = set()

    # process_iter skips vanished processes and reports denied names as None
    for process in psutil.process_iter(["name"]):
        name = process.info.get("name")
        if process.pid in seen or not profile.matches_process_name(name):
            continue
        seen.add(process.pid)
        processes.append(process)

    logger.debug(f"Found {len(processes)} Trae process(es)")
    return processes
