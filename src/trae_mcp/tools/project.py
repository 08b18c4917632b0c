"""Project management tools."""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any

from pydantic import Field

if TYPE_CHECKING:
    from fastmcp import FastMCP

    from ..state import ServerState

logger = logging.getLogger(__name__)


def register_tools(mcp: "FastMCP", state: "ServerState") -> None:
    """Register project management tools."""

    from ..autoconfig import run_config_check
    from ..editor.launch_manager import reveal_in_file_manager
    from ..utils import find_project_root, find_solution_file

    @mcp.tool(name="project_set_path")
    def set_project_path(
        project_path: Annotated[
            str,
            Field(description="Absolute path to the Unity project directory (or any folder inside it)"),
        ],
    ) -> dict[str, Any]:
        """
        Set the Unity project path for the MCP server.

        The path may point at the project root or any directory below it;
        the root is the nearest ancestor holding Assets and ProjectSettings.

        Args:
            project_path: Absolute path to the Unity project directory

        Returns:
            Result with success status and detected project information
        """
        project_dir = Path(project_path)
        if not project_dir.exists():
            return {"success": False, "error": f"Path does not exist: {project_path}"}

        if not project_dir.is_dir():
            return {
                "success": False,
                "error": f"Path is not a directory: {project_path}",
            }

        project_root = find_project_root(start_dir=project_dir)
        if project_root is None:
            return {
                "success": False,
                "error": f"No Unity project (Assets + ProjectSettings) found at: {project_path}",
            }

        previous_root = state.project_root
        logger.info(f"Setting project path: {project_root}")
        state.project_root = project_root

        result: dict[str, Any] = {
            "success": True,
            "project_name": project_root.name,
            "project_path": str(project_root),
            "solution_file": str(find_solution_file(project_root)),
        }
        if previous_root is not None and previous_root != project_root:
            result["previous_project"] = str(previous_root)
        return result

    @mcp.tool(name="workspace_configure")
    def configure_workspace() -> dict[str, Any]:
        """
        Create or update the project's .trae workspace files.

        This will:
        1. Create .trae/extensions.json recommending the Unity extension
        2. Create .trae/settings.json hiding Unity-generated files
        3. Create .trae/launch.json with an "Attach to Unity" configuration

        Existing files are patched with missing entries only. Put an empty
        .trae/.vstupatchdisable file in the project to turn patching off.

        Returns:
            Configuration result with per-file status and summary
        """
        project_root = state.require_project_root()
        result = run_config_check(project_root)
        result["success"] = result["status"] != "error"
        return result

    @mcp.tool(name="project_reveal")
    def reveal_project() -> dict[str, Any]:
        """
        Open the bound project folder in the system file manager.

        Returns:
            Result with success status
        """
        project_root = state.require_project_root()
        try:
            reveal_in_file_manager(str(project_root))
        except (OSError, ValueError) as e:
            return {"success": False, "error": f"Failed to open file manager: {e}"}
        return {"success": True, "project_path": str(project_root)}
