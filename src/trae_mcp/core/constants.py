"""
Shared constants for Trae-MCP.

Environment variable names, editor command-line flags and timing limits
used by the process runner and the launch manager.
"""

# Environment variable names
ENV_VAR_PROJECT_DIR = "TRAE_MCP_PROJECT_DIR"  # Project directory for auto-detection
ENV_VAR_EXECUTABLE = "TRAE_MCP_EXECUTABLE"  # Extra installation candidate
ENV_VAR_STORAGE_DIR = "TRAE_MCP_STORAGE_DIR"  # Overrides workspaceStorage location
ENV_VAR_LOG_FILE = "TRAE_MCP_LOG_FILE"  # Log file path

# Process runner timing
DEFAULT_TIMEOUT_MS = 300000  # 5 minutes
KILL_WAIT_SECONDS = 5.0  # Time allowed for a killed process to be reaped
READER_JOIN_SECONDS = 1.0  # Time allowed for pipe readers to finish after exit/kill
VERSION_TIMEOUT_SECONDS = 10.0

# Win32 process creation flags (subprocess only defines them on Windows hosts)
CREATE_NEW_PROCESS_GROUP = 0x00000200
DETACHED_PROCESS = 0x00000008
CREATE_NO_WINDOW = 0x08000000

# Editor command-line flags
FLAG_REUSE_WINDOW = "--reuse-window"
FLAG_NEW_WINDOW = "--new-window"
FLAG_GOTO = "-g"
FLAG_VERSION = "--version"

# Persisted window state written by the editor (read-only for us)
WORKSPACE_STATE_FILE = "workspace.json"
WINDOW_STATE_FILE = "window.json"
WORKSPACE_STATE_KEY = "folder"
WINDOW_STATE_KEY = "workspace"
FILE_URI_PREFIX = "file:///"

# Unity integration extension
UNITY_EXTENSION_ID = "visualstudiotoolsforunity.vstuc"
