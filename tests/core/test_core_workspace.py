from __future__ import annotations

from pathlib import Path

import pytest

from mcq_generator.core import workspace


def test_ensure_workspace_creates_layout(workspace_root):
    layout = workspace.ensure_workspace()
    assert layout.home == workspace_root.resolve()
    assert [name for name, _ in layout.items()] == [
        "config",
        "logs",
        "exports",
    ]
    for _, directory in layout.items():
        assert directory.is_dir()
    assert layout.created["home"] is True

    again = workspace.ensure_workspace()
    assert again.created["home"] is False
    assert again.created["logs"] is False


def test_explicit_path_wins_over_env(tmp_path):
    target = tmp_path / "explicit"
    layout = workspace.ensure_workspace(path=target)
    assert layout.home == target.resolve()
    assert layout.path_for("exports") == target.resolve() / "exports"


def test_env_mapping_is_respected(tmp_path):
    target = tmp_path / "from-env"
    layout = workspace.ensure_workspace(
        env={workspace.WORKSPACE_ENV: str(target)}
    )
    assert layout.home == target.resolve()


def test_no_create_does_not_touch_disk(tmp_path):
    target = tmp_path / "dry"
    layout = workspace.ensure_workspace(path=target, create=False)
    assert not target.exists()
    assert layout.created == {
        "home": False,
        "config": False,
        "logs": False,
        "exports": False,
    }


def test_file_in_place_of_workspace(tmp_path):
    target = tmp_path / "file"
    target.write_text("x", encoding="utf-8")
    with pytest.raises(workspace.WorkspaceError, match="not a directory"):
        workspace.ensure_workspace(path=target)


def test_file_in_place_of_subdirectory(tmp_path):
    target = tmp_path / "ws2"
    target.mkdir()
    (target / "logs").write_text("x", encoding="utf-8")
    with pytest.raises(workspace.WorkspaceError, match="non-directory"):
        workspace.ensure_workspace(path=target)


def test_unknown_directory_key(tmp_path):
    layout = workspace.ensure_workspace(path=tmp_path / "ws3")
    with pytest.raises(KeyError):
        layout.path_for("cache")


def test_default_location_falls_back_to_tmp(tmp_path, monkeypatch):
    locked = tmp_path / "locked"
    monkeypatch.setattr(workspace, "DEFAULT_WORKSPACE", locked)
    monkeypatch.setattr(
        workspace.tempfile, "gettempdir", lambda: str(tmp_path / "tmp")
    )
    original_mkdir = Path.mkdir

    def _mkdir(self, *args, **kwargs):
        if self == locked:
            raise PermissionError("denied")
        return original_mkdir(self, *args, **kwargs)

    monkeypatch.setattr(Path, "mkdir", _mkdir)
    layout = workspace.ensure_workspace(env={})
    assert layout.home == tmp_path / "tmp" / "mcq-generator"
