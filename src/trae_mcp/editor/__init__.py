"""
Editor subsystem package.

This package contains the components used to drive a Trae AI installation.

Subsystems:
- process_runner: Bounded process execution and fire-and-forget launching
- workspace_scanner: Discovery of folders open in running Trae windows
- window_resolver: Window reuse decision for a target directory
- LaunchManager: Opening files and folders in the editor
"""

from .launch_manager import LaunchManager, build_goto_argument, build_open_arguments
from .process_runner import execute, launch
from .types import (
    LaunchDecision,
    LaunchMode,
    PathMatch,
    ProcessExecutionRequest,
    ProcessExecutionResult,
    TraeInstallation,
)
from .window_resolver import match_paths, normalize_path, resolve_launch_mode
from .workspace_scanner import discover_open_workspaces, find_editor_processes

__all__ = [
    # Types
    "LaunchDecision",
    "LaunchMode",
    "PathMatch",
    "ProcessExecutionRequest",
    "ProcessExecutionResult",
    "TraeInstallation",
    # Subsystems
    "LaunchManager",
    "build_goto_argument",
    "build_open_arguments",
    "discover_open_workspaces",
    "execute",
    "find_editor_processes",
    "launch",
    "match_paths",
    "normalize_path",
    "resolve_launch_mode",
]
