"""
Trae-MCP Server

FastMCP-based MCP server for opening Unity projects in Trae AI.
"""

import logging
import os
import signal
import sys
from pathlib import Path
from typing import Any

import mcp.types as mt
from fastmcp import FastMCP
from fastmcp.server.middleware import CallNext, Middleware, MiddlewareContext

from .core.constants import ENV_VAR_LOG_FILE
from .state import ServerState
from .tools import register_all_tools
from .utils import find_project_root

# Configure logging
_log_file = Path(
    os.environ.get(ENV_VAR_LOG_FILE)
    or Path(__file__).parent.parent.parent.resolve() / "trae-mcp.log"
)

# Log to stderr first so problems while adding the file handler are visible
logging.basicConfig(
    level=logging.INFO,
    format="[%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)
logger = logging.getLogger(__name__)

try:
    _log_file.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(_log_file, mode="a", encoding="utf-8")
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logging.getLogger().addHandler(file_handler)

    logger.info(f"Logging to file: {_log_file}")
except OSError as e:
    logger.error(f"Failed to setup file logging: {e}")
    logger.info(f"Attempted log file path: {_log_file}")

# Global state
state = ServerState()


def _initialize_server() -> bool:
    """
    Bind to the Unity project containing the working directory, if any.

    Returns:
        True if a project was detected, False otherwise
    """
    logger.info("Initializing Trae-MCP server...")
    logger.info(f"Working directory: {Path.cwd()}")

    project_root = find_project_root()
    if project_root is None:
        logger.info("No Unity project found in the working directory")
        return False

    logger.info(f"Detected project: {project_root}")
    state.project_root = project_root
    return True


class ClientDetectionMiddleware(Middleware):
    """Record the MCP client name and auto-detect the project."""

    async def on_initialize(
        self,
        context: MiddlewareContext[mt.InitializeRequest],
        call_next: CallNext[mt.InitializeRequest, mt.InitializeResult | None],
    ) -> mt.InitializeResult | None:
        client_info = context.message.params.clientInfo
        state.client_name = client_info.name if client_info else "unknown"

        logger.info("=" * 70)
        logger.info(f"TRAE-MCP SERVER INITIALIZED - Client: {state.client_name}")
        logger.info("=" * 70)

        result = await call_next(context)

        if state.project_root is None and not _initialize_server():
            logger.info(
                f"Client '{state.client_name}' needs to call project_set_path to set the project path"
            )

        return result


# Create FastMCP instance
mcp = FastMCP(
    name="trae-mcp",
    middleware=[ClientDetectionMiddleware()],
    instructions="""
Trae-MCP opens Unity projects and source files in the Trae AI editor.

**Project Initialization:**
- If started from inside a Unity project, the server binds to it automatically
- Otherwise use the 'project_set_path' tool to set the Unity project directory

Available tools:
- project_set_path: Set the Unity project directory
- workspace_configure: Create or patch .trae/extensions.json, settings.json and launch.json
- project_reveal: Open the project folder in the system file manager
- editor_list_installations: List installed Trae AI editors
- editor_instances: List running Trae processes and their open folders
- editor_open: Open the project (optionally a file at line/column), reusing a window when possible
- editor_version: Query the Trae CLI version
""",
)

register_all_tools(mcp, state)


def _signal_handler(signum: int, frame: Any) -> None:
    """Handle termination signals (SIGTERM, SIGINT)."""
    sig_name = signal.Signals(signum).name
    logger.info(f"Received signal {sig_name} ({signum})")
    sys.exit(0)


def main() -> None:
    """Main entry point for the MCP server."""
    if sys.platform != "win32":
        signal.signal(signal.SIGTERM, _signal_handler)
        signal.signal(signal.SIGINT, _signal_handler)
    else:
        # Windows: SIGTERM is not supported, only SIGINT (Ctrl+C) and SIGBREAK
        signal.signal(signal.SIGINT, _signal_handler)
        if hasattr(signal, "SIGBREAK"):
            signal.signal(signal.SIGBREAK, _signal_handler)

    logger.info("Starting Trae-MCP server...")
    mcp.run()


if __name__ == "__main__":
    main()
