"""Editor management tools."""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any, Optional

from pydantic import Field

if TYPE_CHECKING:
    from fastmcp import FastMCP

    from ..state import ServerState

logger = logging.getLogger(__name__)


def register_tools(mcp: "FastMCP", state: "ServerState") -> None:
    """Register editor management tools."""

    from ..editor.workspace_scanner import discover_open_workspaces, find_editor_processes
    from ..utils import find_trae_installations

    @mcp.tool(name="editor_list_installations")
    def list_installations() -> dict[str, Any]:
        """
        List Trae AI installations found in well-known locations.

        Returns:
            Result containing:
            - success: Always True
            - installations: List of installations (name, path, version, is_prerelease)
        """
        installations = find_trae_installations()
        return {
            "success": True,
            "installations": [installation.to_dict() for installation in installations],
        }

    @mcp.tool(name="editor_instances")
    def list_instances() -> dict[str, Any]:
        """
        List running Trae processes and the folders open in Trae windows.

        The folders are read from Trae's per-window state and cannot be tied
        to a specific process, so every process reports the same folders.

        Returns:
            Result containing:
            - success: Always True
            - instances: List of {pid, name, workspaces}
        """
        processes = find_editor_processes()
        workspaces = discover_open_workspaces(processes)
        return {
            "success": True,
            "instances": [
                {
                    "pid": process.pid,
                    "name": process.info.get("name") if hasattr(process, "info") else None,
                    "workspaces": paths,
                }
                for process, paths in workspaces.items()
            ],
        }

    @mcp.tool(name="editor_open")
    def open_in_editor(
        file_path: Annotated[
            Optional[str],
            Field(default=None, description="File to open; omit to open only the project folder"),
        ],
        line: Annotated[int, Field(default=1, description="1-based line number (values below 1 become 1)")],
        column: Annotated[int, Field(default=0, description="Column number (values below 0 become 0)")],
        solution_path: Annotated[
            Optional[str],
            Field(
                default=None,
                description="Solution file whose folder is the workspace; defaults to the bound project's .sln",
            ),
        ],
    ) -> dict[str, Any]:
        """
        Open the project folder in Trae AI, optionally at a file location.

        If a running Trae window already has the project folder (or a folder
        containing it, or inside it) open, that window is reused. Otherwise a
        new window is opened.

        Args:
            file_path: File to open (optional)
            line: Line number to jump to
            column: Column number to jump to
            solution_path: Solution file; its directory is the workspace folder

        Returns:
            Result containing:
            - success: Whether the editor was started
            - mode: "reuse" or "new_window"
            - arguments: Command-line arguments sent to the editor
            - pid: PID of the reused Trae process (reuse mode only)
            - error: Error message (if failed)
        """
        solution = solution_path or str(state.get_solution_path())
        launch_manager = state.get_launch_manager()

        try:
            return launch_manager.open(file_path, line, column, solution)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to open editor: {e}")
            return {"success": False, "error": f"Failed to open editor: {e}"}

    @mcp.tool(name="editor_version")
    def get_editor_version(
        timeout_seconds: Annotated[
            float,
            Field(default=10.0, ge=0, description="Maximum time in seconds to wait for the editor CLI"),
        ],
    ) -> dict[str, Any]:
        """
        Ask the Trae command-line interface for its version.

        Args:
            timeout_seconds: Maximum time to wait before the CLI is killed

        Returns:
            Result containing:
            - success: Whether the CLI answered in time
            - version: First line of the CLI output
            - stdout/stderr: Captured output
            - timed_out: Whether the CLI was killed
            - error: Error message (if failed)
        """
        launch_manager = state.get_launch_manager()
        result = launch_manager.query_version(timeout_ms=int(timeout_seconds * 1000))
        result["installation"] = launch_manager.installation.to_dict()
        result["cli_path"] = str(Path(launch_manager.cli_path))
        return result
