"""
Type definitions for the editor subsystem.

This module contains shared type definitions used across all editor subsystems.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from ..core.constants import DEFAULT_TIMEOUT_MS

# Callback type definitions
OutputCallback = Callable[[str], None]


@dataclass(frozen=True)
class ProcessExecutionRequest:
    """A single bounded execution of an external program."""

    executable_path: str
    arguments: str = ""  # One shell-style argument string, paths already quoted
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    capture_output: bool = True
    output_callback: Optional[OutputCallback] = None  # Called once per stdout line

    def __post_init__(self) -> None:
        if self.timeout_ms < 0:
            raise ValueError(f"timeout_ms must be >= 0, got {self.timeout_ms}")
        if self.output_callback is not None and not self.capture_output:
            raise ValueError("output_callback requires capture_output=True")


@dataclass
class ProcessExecutionResult:
    """Outcome of a bounded execution. Partial output is kept on failure."""

    success: bool
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False
    error: Optional[str] = None  # Launch failure message

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "stdout": self.stdout,
            "stderr": self.stderr,
            "timed_out": self.timed_out,
            "error": self.error,
        }


class PathMatch(Enum):
    """Relation between a normalized target path and a candidate path."""

    EQUAL = "equal"
    TARGET_IS_DESCENDANT = "target_is_descendant"
    CANDIDATE_IS_DESCENDANT = "candidate_is_descendant"
    UNRELATED = "unrelated"

    @property
    def is_match(self) -> bool:
        return self is not PathMatch.UNRELATED


class LaunchMode(Enum):
    """How the editor should be asked to open a target."""

    REUSE = "reuse"
    NEW_WINDOW = "new_window"


@dataclass
class LaunchDecision:
    """Result of window-reuse resolution."""

    mode: LaunchMode
    process: Optional[Any] = None  # psutil.Process owning the matching window
    workspace: Optional[str] = None  # Open workspace that matched


@dataclass
class TraeInstallation:
    """A discovered Trae AI installation."""

    name: str
    path: str  # Executable (Windows/Linux) or .app bundle (macOS)
    version: tuple[int, ...] = ()
    is_prerelease: bool = False
    supports_analyzers: bool = True
    latest_language_version: str = "13.0"

    @property
    def version_string(self) -> Optional[str]:
        if not self.version:
            return None
        return ".".join(str(part) for part in self.version)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "version": self.version_string,
            "is_prerelease": self.is_prerelease,
            "supports_analyzers": self.supports_analyzers,
            "latest_language_version": self.latest_language_version,
        }
