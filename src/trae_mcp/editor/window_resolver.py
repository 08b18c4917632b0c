"""
WindowResolver - Decides whether Trae should reuse a window or open a new one.

A target directory matches an open workspace when the two paths are equal or
one contains the other, compared case-insensitively with '/' separators.
"""

import logging
from pathlib import Path
from typing import Callable, Iterable, Optional

import psutil

from ..core.platform import PlatformProfile, get_platform_profile
from .types import LaunchDecision, LaunchMode, PathMatch
from .workspace_scanner import find_editor_processes, get_process_workspaces

logger = logging.getLogger(__name__)

WorkspaceLookup = Callable[[psutil.Process], Iterable[str]]


def normalize_path(path: str, profile: Optional[PlatformProfile] = None) -> str:
    """
    Normalize a path for matching.

    Backslashes become '/', trailing separators are dropped, the result is
    lower-cased and, outside Windows, always starts with '/'.
    """
    profile = profile or get_platform_profile()
    normalized = path.replace("\\", "/").rstrip("/").lower()
    if profile.ensure_leading_slash and not normalized.startswith("/"):
        normalized = "/" + normalized
    return normalized


def match_paths(
    target: str, candidate: str, profile: Optional[PlatformProfile] = None
) -> PathMatch:
    """Classify how a candidate workspace relates to the target directory."""
    target = normalize_path(target, profile)
    candidate = normalize_path(candidate, profile)

    if target == candidate:
        return PathMatch.EQUAL
    if target.startswith(candidate + "/"):
        return PathMatch.TARGET_IS_DESCENDANT
    if candidate.startswith(target + "/"):
        return PathMatch.CANDIDATE_IS_DESCENDANT
    return PathMatch.UNRELATED


def resolve_launch_mode(
    target_directory: str,
    processes: Optional[Iterable[psutil.Process]] = None,
    profile: Optional[PlatformProfile] = None,
    storage_dir: Optional[Path] = None,
    workspaces_for: Optional[WorkspaceLookup] = None,
) -> LaunchDecision:
    """
    Find a running Trae process whose open workspace covers the target.

    Args:
        target_directory: Directory the editor should open
        processes: Candidate processes (defaults to all running Trae processes)
        profile: Platform profile (defaults to the running platform)
        storage_dir: workspaceStorage override passed to the scanner
        workspaces_for: Workspace lookup override (defaults to the scanner)

    Returns:
        REUSE with the first matching process, or NEW_WINDOW
    """
    profile = profile or get_platform_profile()
    if processes is None:
        processes = find_editor_processes(profile)
    lookup = workspaces_for or (
        lambda process: get_process_workspaces(process, storage_dir, profile)
    )

    for process in processes:
        try:
            for workspace in lookup(process):
                relation = match_paths(target_directory, workspace, profile)
                if relation.is_match:
                    logger.info(
                        f"Reusing Trae window (PID: {process.pid}) with workspace "
                        f"{workspace} ({relation.value})"
                    )
                    return LaunchDecision(LaunchMode.REUSE, process=process, workspace=workspace)
        except Exception as e:
            logger.error(f"Error checking process {getattr(process, 'pid', '?')}: {e}")
            continue

    logger.info(f"No Trae window has {target_directory} open")
    return LaunchDecision(LaunchMode.NEW_WINDOW)
