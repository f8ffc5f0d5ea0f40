from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from iconctl.cli import cli


def write_config(tmp_path: Path, search_path: Path) -> Path:
    cfg = tmp_path / "config.yaml"
    cfg.write_text(
        f"""
version: 1
search_path: {search_path}
        """.strip()
    )
    return cfg


def write_icon_set(root: Path) -> Path:
    d = root / "Assets.xcassets" / "AppIcon.appiconset"
    d.mkdir(parents=True)
    (d / "Contents.json").write_text(
        json.dumps({"images": [{"filename": "icon.png", "size": "1024x1024", "idiom": "universal"}]})
    )
    (d / "icon.png").write_bytes(b"")
    return d


def test_inspect_json(tmp_path):
    d = write_icon_set(tmp_path)
    runner = CliRunner()
    res = runner.invoke(cli, ["--json-output", "inspect", str(d)])  # type: ignore[arg-type]
    assert res.exit_code == 0, res.output
    data = json.loads(res.output)
    assert data["format"] == "single_size"
    assert data["files"] == [str(d / "icon.png")]


def test_inspect_table(tmp_path):
    d = write_icon_set(tmp_path)
    runner = CliRunner()
    res = runner.invoke(cli, ["inspect", str(d)])
    assert res.exit_code == 0, res.output
    assert "FIELD" in res.output and "single_size" in res.output
    assert "icon.png" in res.output


def test_inspect_permission_error_exits_2(tmp_path, monkeypatch):
    def boom(_path):
        raise PermissionError(13, "Permission denied", "Contents.json")

    monkeypatch.setattr("iconlib.catalog.IconSetInspector", boom)

    runner = CliRunner()
    res = runner.invoke(cli, ["inspect", str(tmp_path)])
    assert res.exit_code == 2
    assert "Permission denied" in res.output


def test_discover_uses_config_search_path(tmp_path, monkeypatch):
    project = tmp_path / "project"
    write_icon_set(project)
    monkeypatch.setenv("ICONCTL_CONFIG", str(write_config(tmp_path, project)))

    runner = CliRunner()
    res = runner.invoke(cli, ["--json-output", "discover"])  # type: ignore[arg-type]
    assert res.exit_code == 0, res.output
    data = json.loads(res.output)
    assert [s["name"] for s in data["icon_sets"]] == ["AppIcon.appiconset"]
    assert data["icon_sets"][0]["format"] == "single_size"


def test_discover_table(tmp_path, monkeypatch):
    monkeypatch.delenv("ICONCTL_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    write_icon_set(tmp_path)

    runner = CliRunner()
    res = runner.invoke(cli, ["discover", "--path", str(tmp_path)])
    assert res.exit_code == 0, res.output
    assert "NAME" in res.output and "AppIcon.appiconset" in res.output


def test_discover_with_glob_returns_pattern(tmp_path, monkeypatch):
    monkeypatch.delenv("ICONCTL_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))

    runner = CliRunner()
    res = runner.invoke(cli, ["--json-output", "discover", "--glob", "*.png"])  # type: ignore[arg-type]
    assert res.exit_code == 0, res.output
    assert json.loads(res.output) == {"glob": "*.png"}


def test_files_lists_badgeable_icons(tmp_path, monkeypatch):
    monkeypatch.delenv("ICONCTL_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    d = write_icon_set(tmp_path)

    runner = CliRunner()
    res = runner.invoke(cli, ["--json-output", "files", "--path", str(tmp_path)])  # type: ignore[arg-type]
    assert res.exit_code == 0, res.output
    assert json.loads(res.output)["files"] == [str(d / "icon.png")]


def test_files_with_glob_expands_pattern(tmp_path, monkeypatch):
    monkeypatch.delenv("ICONCTL_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    d = write_icon_set(tmp_path)
    (tmp_path / "other.jpg").write_bytes(b"")

    runner = CliRunner()
    res = runner.invoke(cli, ["files", "--path", str(tmp_path), "--glob", "**/*.png"])
    assert res.exit_code == 0, res.output
    assert res.output.strip().splitlines() == [str(d / "icon.png")]


def test_bad_config_exits_2(tmp_path, monkeypatch):
    monkeypatch.setenv("ICONCTL_CONFIG", str(tmp_path / "missing.yaml"))

    runner = CliRunner()
    res = runner.invoke(cli, ["discover"])
    assert res.exit_code == 2
    assert "ICONCTL_CONFIG" in res.output


def test_config_show_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("ICONCTL_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setenv("XDG_CONFIG_DIRS", str(tmp_path / "xdg-dirs"))

    runner = CliRunner()
    res = runner.invoke(cli, ["--json-output", "config", "show"])  # type: ignore[arg-type]
    assert res.exit_code == 0, res.output
    data = json.loads(res.output)
    assert data["search_path"] == "."
    assert data["source_path"] is None


def test_empty_glob_option_overrides_config(tmp_path, monkeypatch):
    cfg = tmp_path / "config.yaml"
    cfg.write_text('version: 1\nglob: "**/*.png"\n')
    monkeypatch.setenv("ICONCTL_CONFIG", str(cfg))

    runner = CliRunner()
    res = runner.invoke(cli, ["--json-output", "discover", "--path", str(tmp_path), "--glob", ""])  # type: ignore[arg-type]
    assert res.exit_code == 0, res.output
    assert json.loads(res.output) == {"glob": ""}
