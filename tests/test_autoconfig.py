"""Tests for trae_mcp.autoconfig module."""

import json
from pathlib import Path

import pytest

from trae_mcp.autoconfig import (
    DEFAULT_FILES_EXCLUDE,
    check_extensions_file,
    check_launch_file,
    check_settings_file,
    run_config_check,
)


@pytest.fixture
def workspace_dir(tmp_path: Path) -> Path:
    directory = tmp_path / ".trae"
    directory.mkdir()
    return directory


def _read(path: Path):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _write(path: Path, document) -> None:
    path.write_text(json.dumps(document), encoding="utf-8")


class TestCheckExtensionsFile:
    """Tests for check_extensions_file function."""

    def test_creates_default(self, workspace_dir: Path):
        ok, modified, msg = check_extensions_file(workspace_dir)

        assert (ok, modified) == (True, True)
        assert msg == "Created extensions.json"
        assert _read(workspace_dir / "extensions.json") == {
            "recommendations": ["visualstudiotoolsforunity.vstuc"]
        }

    def test_adds_recommendation_and_keeps_others(self, workspace_dir: Path):
        _write(workspace_dir / "extensions.json", {"recommendations": ["ms-dotnettools.csharp"]})

        ok, modified, msg = check_extensions_file(workspace_dir)

        assert (ok, modified) == (True, True)
        assert "Added" in msg
        assert _read(workspace_dir / "extensions.json")["recommendations"] == [
            "ms-dotnettools.csharp",
            "visualstudiotoolsforunity.vstuc",
        ]

    def test_already_recommended(self, workspace_dir: Path):
        _write(workspace_dir / "extensions.json", {"recommendations": ["visualstudiotoolsforunity.vstuc"]})

        ok, modified, msg = check_extensions_file(workspace_dir)

        assert (ok, modified) == (True, False)
        assert "already recommended" in msg

    def test_invalid_json_is_left_untouched(self, workspace_dir: Path):
        target = workspace_dir / "extensions.json"
        target.write_text("{ broken", encoding="utf-8")

        ok, modified, msg = check_extensions_file(workspace_dir)

        assert (ok, modified) == (False, False)
        assert msg.startswith("JSON Parse Error")
        assert target.read_text(encoding="utf-8") == "{ broken"

    def test_patch_disabled(self, workspace_dir: Path):
        _write(workspace_dir / "extensions.json", {"recommendations": []})

        ok, modified, msg = check_extensions_file(workspace_dir, enable_patch=False)

        assert (ok, modified, msg) == (True, False, "Patching disabled")
        assert _read(workspace_dir / "extensions.json") == {"recommendations": []}


class TestCheckSettingsFile:
    """Tests for check_settings_file function."""

    def test_creates_default(self, workspace_dir: Path):
        ok, modified, _ = check_settings_file(workspace_dir)

        assert (ok, modified) == (True, True)
        assert _read(workspace_dir / "settings.json")["files.exclude"] == DEFAULT_FILES_EXCLUDE

    def test_keeps_user_values(self, workspace_dir: Path):
        """Existing entries, even ones that disagree with defaults, are preserved."""
        user_exclude = dict(DEFAULT_FILES_EXCLUDE)
        user_exclude["**/*.meta"] = False
        del user_exclude["**/Temp"]
        _write(
            workspace_dir / "settings.json",
            {"editor.fontSize": 14, "files.exclude": user_exclude},
        )

        ok, modified, msg = check_settings_file(workspace_dir)

        assert (ok, modified) == (True, True)
        assert msg == "Added 1 files.exclude entry"
        settings = _read(workspace_dir / "settings.json")
        assert settings["editor.fontSize"] == 14
        assert settings["files.exclude"]["**/*.meta"] is False
        assert settings["files.exclude"]["**/Temp"] is True

    def test_correctly_configured(self, workspace_dir: Path):
        _write(workspace_dir / "settings.json", {"files.exclude": DEFAULT_FILES_EXCLUDE})

        ok, modified, msg = check_settings_file(workspace_dir)

        assert (ok, modified) == (True, False)
        assert "correctly configured" in msg

    def test_non_object_document(self, workspace_dir: Path):
        _write(workspace_dir / "settings.json", ["not", "an", "object"])

        ok, modified, msg = check_settings_file(workspace_dir)

        assert (ok, modified) == (False, False)
        assert msg.startswith("Read Failed")


class TestCheckLaunchFile:
    """Tests for check_launch_file function."""

    def test_creates_default(self, workspace_dir: Path):
        ok, modified, _ = check_launch_file(workspace_dir)

        launch = _read(workspace_dir / "launch.json")
        assert (ok, modified) == (True, True)
        assert launch["version"] == "0.2.0"
        assert launch["configurations"][0]["type"] == "vstuc"

    def test_appends_attach_configuration(self, workspace_dir: Path):
        node = {"name": "Node", "type": "node", "request": "launch"}
        _write(workspace_dir / "launch.json", {"version": "0.2.0", "configurations": [node]})

        ok, modified, msg = check_launch_file(workspace_dir)

        configurations = _read(workspace_dir / "launch.json")["configurations"]
        assert (ok, modified, msg) == (True, True, "Added Unity attach configuration")
        assert configurations[0] == node
        assert configurations[1]["request"] == "attach"

    def test_existing_attach_configuration(self, workspace_dir: Path):
        custom = {"name": "My attach", "type": "vstuc", "request": "attach"}
        _write(workspace_dir / "launch.json", {"configurations": [custom]})

        ok, modified, _ = check_launch_file(workspace_dir)

        assert (ok, modified) == (True, False)


class TestRunConfigCheck:
    """Tests for run_config_check function."""

    def test_fresh_project_is_fixed(self, unity_project: Path):
        result = run_config_check(unity_project)

        assert result["status"] == "fixed"
        assert result["patch_enabled"] is True
        assert result["summary"] == "Updated 3 file(s)."
        for name in ("extensions.json", "settings.json", "launch.json"):
            assert (unity_project / ".trae" / name).is_file()

    def test_second_run_is_ok(self, unity_project: Path):
        run_config_check(unity_project)
        result = run_config_check(unity_project)

        assert result["status"] == "ok"
        assert result["summary"] == "All workspace files correct."
        assert not any(result[key]["modified"] for key in ("extensions", "settings", "launch"))

    def test_patch_disable_marker(self, unity_project: Path):
        workspace_dir = unity_project / ".trae"
        workspace_dir.mkdir()
        (workspace_dir / ".vstupatchdisable").write_text("", encoding="utf-8")
        _write(workspace_dir / "settings.json", {"files.exclude": {}})

        result = run_config_check(unity_project)

        assert result["patch_enabled"] is False
        assert result["settings"]["message"] == "Patching disabled"
        assert _read(workspace_dir / "settings.json") == {"files.exclude": {}}
        # Missing files are still created
        assert result["launch"]["modified"] is True

    def test_error_status(self, unity_project: Path):
        workspace_dir = unity_project / ".trae"
        workspace_dir.mkdir()
        (workspace_dir / "launch.json").write_text("not json", encoding="utf-8")

        result = run_config_check(unity_project)

        assert result["status"] == "error"
        assert result["launch"]["ok"] is False
        assert result["summary"] == "Some workspace files could not be updated."

    def test_workspace_dir_cannot_be_created(self, tmp_path: Path):
        blocker = tmp_path / "project"
        blocker.mkdir()
        (blocker / ".trae").write_text("a file, not a directory", encoding="utf-8")

        result = run_config_check(blocker)

        assert result["status"] == "error"
        assert "Cannot create" in result["summary"]
