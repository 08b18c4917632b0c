"""
Trae-MCP: MCP Server for opening Unity projects in Trae AI

This package provides a FastMCP-based server and a small library that
discover Trae AI installations, keep project workspace files up to date,
and open files in a running Trae window when one already has the project open.
"""

__version__ = "0.1.0"

from .autoconfig import run_config_check
from .editor.launch_manager import LaunchManager
from .editor.process_runner import execute, launch
from .editor.types import ProcessExecutionRequest, ProcessExecutionResult, TraeInstallation
from .editor.window_resolver import resolve_launch_mode
from .utils import find_trae_installations

__all__ = [
    "LaunchManager",
    "ProcessExecutionRequest",
    "ProcessExecutionResult",
    "TraeInstallation",
    "execute",
    "find_trae_installations",
    "launch",
    "resolve_launch_mode",
    "run_config_check",
]
