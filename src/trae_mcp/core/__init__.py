"""
Trae-MCP Core Module

Shared constants and platform profile selection.
"""

from .constants import (
    DEFAULT_TIMEOUT_MS,
    ENV_VAR_EXECUTABLE,
    ENV_VAR_LOG_FILE,
    ENV_VAR_PROJECT_DIR,
    ENV_VAR_STORAGE_DIR,
    UNITY_EXTENSION_ID,
)
from .platform import PlatformProfile, get_platform_profile, profile_for

__all__ = [
    # Constants
    "DEFAULT_TIMEOUT_MS",
    "ENV_VAR_EXECUTABLE",
    "ENV_VAR_LOG_FILE",
    "ENV_VAR_PROJECT_DIR",
    "ENV_VAR_STORAGE_DIR",
    "UNITY_EXTENSION_ID",
    # Platform
    "PlatformProfile",
    "get_platform_profile",
    "profile_for",
]
