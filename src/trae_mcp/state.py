"""Global state management for Trae-MCP server."""

import logging
from pathlib import Path
from typing import Optional

from .editor.launch_manager import LaunchManager
from .editor.types import TraeInstallation
from .utils import find_solution_file, find_trae_installations

logger = logging.getLogger(__name__)


class ServerState:
    """Centralized state for the MCP server.

    This class manages all global state for the Trae-MCP server, including:
    - The bound Unity project root
    - The Trae installation used for launching (discovered lazily)
    - Client name (detected from MCP client)
    """

    def __init__(self) -> None:
        self._project_root: Optional[Path] = None
        self._installation: Optional[TraeInstallation] = None
        self._launch_manager: Optional[LaunchManager] = None
        self._client_name: Optional[str] = None

    @property
    def project_root(self) -> Optional[Path]:
        """Get the bound project root (may be None)."""
        return self._project_root

    @project_root.setter
    def project_root(self, value: Optional[Path]) -> None:
        """Set the bound project root."""
        self._project_root = value

    @property
    def client_name(self) -> Optional[str]:
        """Get the MCP client name."""
        return self._client_name

    @client_name.setter
    def client_name(self, value: Optional[str]) -> None:
        """Set the MCP client name."""
        self._client_name = value

    def require_project_root(self) -> Path:
        """Get the project root, raising RuntimeError if not bound.

        Raises:
            RuntimeError: If no project has been bound
        """
        if self._project_root is None:
            raise RuntimeError(
                "Project not initialized. "
                "Please call the 'project_set_path' tool first to set the Unity project directory."
            )
        return self._project_root

    def get_solution_path(self) -> Path:
        """Get the solution file of the bound project."""
        return find_solution_file(self.require_project_root())

    def get_installation(self) -> Optional[TraeInstallation]:
        """Get the Trae installation to launch, discovering it on first use."""
        if self._installation is None:
            installations = find_trae_installations()
            if installations:
                # Prefer stable releases over Insider builds
                installations.sort(key=lambda i: i.is_prerelease)
                self._installation = installations[0]
                logger.info(f"Using {self._installation.name} at {self._installation.path}")
        return self._installation

    def get_launch_manager(self) -> LaunchManager:
        """Get the LaunchManager for the selected installation.

        Raises:
            RuntimeError: If no Trae installation can be found
        """
        if self._launch_manager is None:
            installation = self.get_installation()
            if installation is None:
                raise RuntimeError(
                    "No Trae AI installation found. "
                    "Set TRAE_MCP_EXECUTABLE to the editor executable."
                )
            self._launch_manager = LaunchManager(installation)
        return self._launch_manager
