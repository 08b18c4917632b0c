"""
Shared pytest fixtures for Trae-MCP tests.

This module provides fixtures for:
- Temporary Unity project layouts
- Fake Trae workspaceStorage directories
- Platform profiles independent of the host OS
- Running small Python child processes
"""

import json
import os
import shlex
import sys
from pathlib import Path
from typing import Optional

import pytest

TESTS_DIR = Path(__file__).parent

# Keep server logs out of the source tree (set before trae_mcp.server is imported)
os.environ.setdefault("TRAE_MCP_LOG_FILE", str(TESTS_DIR / "test_output" / "trae-mcp.log"))


def python_arguments(code: str) -> str:
    """Argument string running `code` with the current interpreter."""
    return f"-c {shlex.quote(code)}"


@pytest.fixture
def python_exe() -> str:
    """Path to the running interpreter, used as a well-behaved child process."""
    return sys.executable


@pytest.fixture
def linux_profile():
    from trae_mcp.core.platform import profile_for

    return profile_for("Linux")


@pytest.fixture
def windows_profile():
    from trae_mcp.core.platform import profile_for

    return profile_for("Windows")


@pytest.fixture
def macos_profile():
    from trae_mcp.core.platform import profile_for

    return profile_for("Darwin")


@pytest.fixture
def unity_project(tmp_path: Path) -> Path:
    """
    Create a minimal Unity project layout.

    Returns:
        Path to the project root (contains Assets, ProjectSettings and a .sln)
    """
    root = tmp_path / "MyGame"
    (root / "Assets" / "Scripts").mkdir(parents=True)
    (root / "ProjectSettings").mkdir()
    (root / "MyGame.sln").write_text("", encoding="utf-8")
    return root


class StorageBuilder:
    """Writes fake per-window state folders into a workspaceStorage directory."""

    def __init__(self, root: Path):
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)
        self._count = 0

    def add_window(
        self,
        folder: Optional[str] = None,
        workspace: Optional[str] = None,
        raw_workspace_json: Optional[str] = None,
        raw_window_json: Optional[str] = None,
    ) -> Path:
        """Add one window folder; `raw_*` values are written verbatim."""
        self._count += 1
        window_dir = self.root / f"{self._count:04d}abcdef"
        window_dir.mkdir()

        if raw_workspace_json is not None:
            (window_dir / "workspace.json").write_text(raw_workspace_json, encoding="utf-8")
        elif folder is not None:
            (window_dir / "workspace.json").write_text(
                json.dumps({"folder": folder}), encoding="utf-8"
            )

        if raw_window_json is not None:
            (window_dir / "window.json").write_text(raw_window_json, encoding="utf-8")
        elif workspace is not None:
            (window_dir / "window.json").write_text(
                json.dumps({"workspace": workspace}), encoding="utf-8"
            )

        return window_dir


@pytest.fixture
def storage(tmp_path: Path) -> StorageBuilder:
    """Empty fake workspaceStorage directory."""
    return StorageBuilder(tmp_path / "workspaceStorage")
