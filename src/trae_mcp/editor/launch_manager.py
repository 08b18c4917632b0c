"""
LaunchManager - Opens files and folders in Trae AI.

This subsystem handles:
- Building the editor command line (window reuse, goto-file)
- Choosing between reusing a running window and opening a new one
- Querying the installed editor version
- Locating Roslyn analyzers shipped with the Unity extension
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

from ..core.constants import (
    FLAG_GOTO,
    FLAG_NEW_WINDOW,
    FLAG_REUSE_WINDOW,
    FLAG_VERSION,
    UNITY_EXTENSION_ID,
    VERSION_TIMEOUT_SECONDS,
)
from ..core.platform import PlatformProfile, get_platform_profile
from . import process_runner
from .process_runner import quote_argument
from .types import LaunchDecision, LaunchMode, ProcessExecutionRequest, TraeInstallation
from .window_resolver import resolve_launch_mode

logger = logging.getLogger(__name__)


def build_goto_argument(path: str, line: int, column: int) -> str:
    """Build the goto-file argument, clamping line to >= 1 and column to >= 0."""
    line = max(1, line)
    column = max(0, column)
    return f"{FLAG_GOTO} {quote_argument(path)}:{line}:{column}"


def build_open_arguments(
    mode: LaunchMode,
    directory: str,
    path: Optional[str] = None,
    line: int = 1,
    column: int = 0,
) -> str:
    """
    Build the editor arguments for opening a folder and optionally a file.

    A reused window already has the folder open, so only the file is sent.
    """
    if mode is LaunchMode.REUSE:
        if not path:
            return f"{FLAG_REUSE_WINDOW} {quote_argument(directory)}"
        return f"{FLAG_REUSE_WINDOW} {build_goto_argument(path, line, column)}"

    if not path:
        return f"{FLAG_NEW_WINDOW} {quote_argument(directory)}"
    return f"{FLAG_NEW_WINDOW} {quote_argument(directory)} {build_goto_argument(path, line, column)}"


def reveal_in_file_manager(directory: str, profile: Optional[PlatformProfile] = None) -> None:
    """
    Open a folder in the OS file manager.

    Raises:
        OSError: If the file manager cannot be started
    """
    profile = profile or get_platform_profile()
    process_runner.launch(profile.file_manager, quote_argument(directory), profile)


class LaunchManager:
    """
    Opens targets in a Trae AI installation.

    Window reuse detection is best-effort: any inconclusive result falls back
    to opening a new window.
    """

    def __init__(
        self,
        installation: TraeInstallation,
        profile: Optional[PlatformProfile] = None,
        storage_dir: Optional[Path] = None,
    ):
        """
        Initialize LaunchManager.

        Args:
            installation: The editor installation to drive
            profile: Platform profile (defaults to the running platform)
            storage_dir: workspaceStorage override for window detection
        """
        self._installation = installation
        self._profile = profile or get_platform_profile()
        self._storage_dir = storage_dir

    @property
    def installation(self) -> TraeInstallation:
        return self._installation

    @property
    def cli_path(self) -> str:
        """Path of the editor's command-line entry point."""
        if self._profile.name == "macos":
            return str(Path(self._installation.path) / "Contents" / "Resources" / "app" / "bin" / "trae")
        return self._installation.path

    def launch_command(self, arguments: str) -> tuple[str, str]:
        """
        Get the (executable, arguments) pair that starts the editor.

        On macOS the bundle is started through `open -n <app> --args ...`.
        """
        if self._profile.wraps_with_open:
            return "open", f"-n {quote_argument(self._installation.path)} --args {arguments}"
        return self._installation.path, arguments

    def _launch(self, arguments: str) -> None:
        executable, launch_arguments = self.launch_command(arguments)
        logger.info(f"Starting editor: {executable} {launch_arguments}")
        process_runner.launch(executable, launch_arguments, self._profile)

    def resolve(self, directory: str) -> LaunchDecision:
        """Decide whether a running window already covers the directory."""
        return resolve_launch_mode(
            directory, profile=self._profile, storage_dir=self._storage_dir
        )

    def open(
        self,
        path: Optional[str],
        line: int,
        column: int,
        solution: str,
    ) -> dict[str, Any]:
        """
        Open the solution's folder, optionally at a file location.

        Args:
            path: File to open (None or empty to open only the folder)
            line: 1-based line (clamped to >= 1)
            column: 0-based column (clamped to >= 0)
            solution: Solution file whose directory is the workspace

        Returns:
            Result dictionary with the launch mode and arguments

        Raises:
            OSError: If the new-window launch cannot be started
        """
        directory = os.path.dirname(solution)

        decision = self.resolve(directory)
        if decision.mode is LaunchMode.REUSE:
            arguments = build_open_arguments(LaunchMode.REUSE, directory, path, line, column)
            try:
                self._launch(arguments)
                return {
                    "success": True,
                    "mode": LaunchMode.REUSE.value,
                    "arguments": arguments,
                    "pid": decision.process.pid if decision.process is not None else None,
                    "workspace": decision.workspace,
                }
            except (OSError, ValueError) as e:
                logger.error(f"Error using existing instance: {e}")

        arguments = build_open_arguments(LaunchMode.NEW_WINDOW, directory, path, line, column)
        self._launch(arguments)
        return {
            "success": True,
            "mode": LaunchMode.NEW_WINDOW.value,
            "arguments": arguments,
            "pid": None,
            "workspace": None,
        }

    def query_version(self, timeout_ms: int = int(VERSION_TIMEOUT_SECONDS * 1000)) -> dict[str, Any]:
        """
        Ask the editor CLI for its version.

        Returns:
            Result dictionary containing:
            - success: Whether the CLI answered in time
            - version: First line of the CLI output (if succeeded)
            - stdout/stderr: Captured output
            - error: Error message (if failed)
        """
        result = process_runner.execute(
            ProcessExecutionRequest(
                executable_path=self.cli_path,
                arguments=FLAG_VERSION,
                timeout_ms=timeout_ms,
            ),
            self._profile,
        )

        response = result.to_dict()
        if not result.success:
            if response["error"] is None:
                response["error"] = f"Version query timed out after {timeout_ms} ms"
            return response

        lines = result.stdout.splitlines()
        response["version"] = lines[0].strip() if lines else None
        return response

    def get_extension_path(self) -> Optional[Path]:
        """Get the newest installed Unity extension directory, if any."""
        extensions_dir = self._profile.extensions_base_dir(self._installation.is_prerelease)
        if not extensions_dir.is_dir():
            return None

        matches = sorted(
            (p for p in extensions_dir.glob(f"{UNITY_EXTENSION_ID}*") if p.is_dir()),
            key=lambda p: p.name,
            reverse=True,
        )
        return matches[0] if matches else None

    def get_analyzers(self) -> list[str]:
        """List analyzer assemblies shipped with the Unity extension."""
        extension_path = self.get_extension_path()
        if extension_path is None:
            return []

        analyzers_dir = extension_path / "Analyzers"
        if not analyzers_dir.is_dir():
            return []

        return sorted(str(p) for p in analyzers_dir.rglob("*Analyzers.dll"))
