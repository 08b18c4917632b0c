"""Tests for trae_mcp.editor.workspace_scanner module."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import psutil
import pytest

from trae_mcp.editor.workspace_scanner import (
    discover_open_workspaces,
    find_editor_processes,
    get_process_workspaces,
    parse_file_uri,
    read_storage_workspaces,
)


def _live_process(pid: int) -> MagicMock:
    process = MagicMock()
    process.pid = pid
    process.is_running.return_value = True
    return process


class TestParseFileUri:
    """Tests for parse_file_uri function."""

    def test_posix_path(self):
        assert parse_file_uri("file:///Users/x/proj") == "/Users/x/proj"

    def test_url_decoded(self):
        assert parse_file_uri("file:///home/me/My%20Game") == "/home/me/My Game"

    def test_windows_drive_letter(self):
        assert parse_file_uri("file:///c%3A/Projects/Game") == "c:/Projects/Game"

    def test_other_scheme_ignored(self):
        assert parse_file_uri("vscode-remote://ssh-remote+box/home/me/proj") is None

    def test_non_string_ignored(self):
        assert parse_file_uri(None) is None
        assert parse_file_uri(42) is None

    def test_empty_path_ignored(self):
        assert parse_file_uri("file:///") is None


class TestReadStorageWorkspaces:
    """Tests for read_storage_workspaces function."""

    def test_missing_directory_is_empty(self, tmp_path: Path):
        assert read_storage_workspaces(tmp_path / "nope") == []

    def test_reads_both_state_files(self, storage):
        storage.add_window(folder="file:///home/me/alpha")
        storage.add_window(workspace="file:///home/me/beta")

        assert read_storage_workspaces(storage.root) == ["/home/me/alpha", "/home/me/beta"]

    def test_duplicates_collapse(self, storage):
        storage.add_window(folder="file:///home/me/alpha", workspace="file:///home/me/alpha")
        storage.add_window(folder="file:///home/me/alpha")

        assert read_storage_workspaces(storage.root) == ["/home/me/alpha"]

    def test_malformed_json_is_isolated(self, storage):
        """One broken window must not hide the others."""
        storage.add_window(raw_workspace_json="{ not json", workspace="file:///home/me/kept")
        storage.add_window(folder="file:///home/me/other")

        assert read_storage_workspaces(storage.root) == ["/home/me/kept", "/home/me/other"]

    def test_torn_write_is_skipped(self, storage):
        storage.add_window(raw_workspace_json='{"folder": "file:///home/me/ha')
        storage.add_window(folder="file:///home/me/ok")

        assert read_storage_workspaces(storage.root) == ["/home/me/ok"]

    def test_non_object_and_missing_fields_skipped(self, storage):
        storage.add_window(raw_workspace_json="[1, 2, 3]")
        storage.add_window(raw_window_json='{"other": "value"}')
        storage.add_window(raw_workspace_json='{"folder": 7}')
        storage.add_window(raw_workspace_json="")

        assert read_storage_workspaces(storage.root) == []

    def test_remote_workspace_ignored(self, storage):
        storage.add_window(folder="vscode-remote://wsl+Ubuntu/home/me/proj")

        assert read_storage_workspaces(storage.root) == []

    def test_loose_files_ignored(self, storage):
        (storage.root / "stray.json").write_text("{}", encoding="utf-8")
        storage.add_window(folder="file:///home/me/alpha")

        assert read_storage_workspaces(storage.root) == ["/home/me/alpha"]


class TestGetProcessWorkspaces:
    """Tests for per-process workspace lookup."""

    def test_exited_process_raises(self, storage):
        process = _live_process(10)
        process.is_running.return_value = False

        with pytest.raises(psutil.NoSuchProcess):
            get_process_workspaces(process, storage.root)

    def test_uses_profile_storage_dir(self, storage, linux_profile, monkeypatch):
        storage.add_window(folder="file:///home/me/alpha")
        monkeypatch.setenv("TRAE_MCP_STORAGE_DIR", str(storage.root))

        assert get_process_workspaces(_live_process(10), profile=linux_profile) == [
            "/home/me/alpha"
        ]


class TestDiscoverOpenWorkspaces:
    """Tests for discover_open_workspaces function."""

    def test_every_process_reports_the_union(self, storage):
        """
        Storage folders cannot be tied to a PID, so each process gets the
        folders of all windows. This is a known approximation.
        """
        storage.add_window(folder="file:///home/me/alpha")
        storage.add_window(folder="file:///home/me/beta")
        first, second = _live_process(1), _live_process(2)

        result = discover_open_workspaces([first, second], storage.root)

        expected = ["/home/me/alpha", "/home/me/beta"]
        assert result == {first: expected, second: expected}

    def test_failing_process_is_left_out(self, storage):
        storage.add_window(folder="file:///home/me/alpha")
        broken = _live_process(1)
        broken.is_running.side_effect = psutil.AccessDenied(1)
        healthy = _live_process(2)

        result = discover_open_workspaces([broken, healthy], storage.root)

        assert list(result) == [healthy]
        assert result[healthy] == ["/home/me/alpha"]


class TestFindEditorProcesses:
    """Tests for find_editor_processes function."""

    def _proc(self, pid: int, name):
        process = MagicMock()
        process.pid = pid
        process.info = {"name": name}
        return process

    def test_filters_by_profile_names(self, macos_profile):
        processes = [
            self._proc(1, "Finder"),
            self._proc(2, "Trae"),
            self._proc(3, "Trae Helper"),
            self._proc(4, None),
        ]
        with patch("trae_mcp.editor.workspace_scanner.psutil.process_iter", return_value=processes):
            found = find_editor_processes(macos_profile)

        assert [p.pid for p in found] == [2, 3]

    def test_windows_names_ignore_exe_and_case(self, windows_profile):
        processes = [self._proc(7, "Trae.exe"), self._proc(8, "notepad.exe")]
        with patch("trae_mcp.editor.workspace_scanner.psutil.process_iter", return_value=processes):
            found = find_editor_processes(windows_profile)

        assert [p.pid for p in found] == [7]

    def test_duplicate_pids_collapse(self, linux_profile):
        processes = [self._proc(5, "Trae"), self._proc(5, "Trae")]
        with patch("trae_mcp.editor.workspace_scanner.psutil.process_iter", return_value=processes):
            found = find_editor_processes(linux_profile)

        assert [p.pid for p in found] == [5]
