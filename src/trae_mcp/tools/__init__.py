"""MCP Tools package for Trae-MCP server.

This package contains all MCP tool definitions organized by functionality:
- project: Project path, workspace file and file manager tools
- editor: Installation discovery, running instances and file opening tools
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fastmcp import FastMCP

    from ..state import ServerState


def register_all_tools(mcp: "FastMCP", state: "ServerState") -> None:
    """Register all MCP tools with the server.

    Args:
        mcp: The FastMCP server instance
        state: The server state for accessing the bound project and installation
    """
    from . import editor, project

    project.register_tools(mcp, state)
    editor.register_tools(mcp, state)
