"""Tests for CLI commands."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from tuidesigner._version import __version__
from tuidesigner.cli import app


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run every command from an empty directory so no config file is picked up."""
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir


def flat(output: str) -> str:
    """Console output with rich line wrapping undone."""
    return " ".join(output.split())


def write_design(path: Path, raw: dict[str, Any]) -> Path:
    path.write_text(json.dumps(raw), encoding="utf-8")
    return path


class TestVersion:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.strip() == f"tuidesigner {__version__}"

    def test_version_from_installed_metadata(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from tuidesigner import _version

        monkeypatch.setattr(_version, "_metadata_version", lambda name: "9.8.7")
        assert _version.get_version() == "9.8.7"

    def test_version_when_not_installed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from importlib.metadata import PackageNotFoundError

        from tuidesigner import _version

        def missing(name: str) -> str:
            raise PackageNotFoundError(name)

        monkeypatch.setattr(_version, "_metadata_version", missing)
        assert _version.get_version() == "0.0.0"


class TestGenerate:
    def test_writes_project(self, cli_runner: CliRunner, design_file: Path, tmp_path: Path) -> None:
        out = tmp_path / "out"
        result = cli_runner.invoke(app, ["generate", str(design_file), str(out)])
        assert result.exit_code == 0, result.output
        assert "Generated 3 files for textual" in flat(result.output)
        assert "Next steps" in result.output
        assert (out / "dashboard.py").is_file()
        assert (out / "requirements.txt").is_file()
        assert (out / "README.md").is_file()
        assert os.access(out / "dashboard.py", os.X_OK)

    def test_modular_rust_project(
        self, cli_runner: CliRunner, design_file: Path, tmp_path: Path
    ) -> None:
        out = tmp_path / "rs"
        result = cli_runner.invoke(
            app,
            ["generate", str(design_file), str(out), "--framework", "ratatui", "--format", "modular"],
        )
        assert result.exit_code == 0, result.output
        for name in ("src/main.rs", "src/widgets.rs", "src/data_sources.rs", "src/lib.rs", "Cargo.toml"):
            assert (out / name).is_file()

    def test_no_comments(self, cli_runner: CliRunner, design_file: Path, tmp_path: Path) -> None:
        out = tmp_path / "js"
        result = cli_runner.invoke(
            app, ["generate", str(design_file), str(out), "-f", "blessed", "--no-comments"]
        )
        assert result.exit_code == 0, result.output
        assert "Generated by tuidesigner" not in (out / "dashboard.js").read_text(encoding="utf-8")

    def test_default_output_dir(
        self, cli_runner: CliRunner, design_file: Path, isolated_cwd: Path
    ) -> None:
        result = cli_runner.invoke(app, ["generate", str(design_file), "-f", "bubble_tea"])
        assert result.exit_code == 0, result.output
        assert (isolated_cwd / "output" / "main.go").is_file()
        assert (isolated_cwd / "output" / "go.mod").is_file()

    def test_config_file_defaults(
        self, cli_runner: CliRunner, design_file: Path, isolated_cwd: Path
    ) -> None:
        (isolated_cwd / "tuidesigner.toml").write_text(
            '[generation]\nframework = "blessed"\noutput_dir = "dash"\n', encoding="utf-8"
        )
        result = cli_runner.invoke(app, ["generate", str(design_file)])
        assert result.exit_code == 0, result.output
        assert (isolated_cwd / "dash" / "dashboard.js").is_file()
        assert (isolated_cwd / "dash" / "package.json").is_file()

    def test_flag_overrides_config(
        self, cli_runner: CliRunner, design_file: Path, isolated_cwd: Path
    ) -> None:
        (isolated_cwd / "tuidesigner.toml").write_text(
            '[generation]\nframework = "blessed"\n', encoding="utf-8"
        )
        result = cli_runner.invoke(app, ["generate", str(design_file), "-f", "textual"])
        assert result.exit_code == 0, result.output
        assert (isolated_cwd / "output" / "dashboard.py").is_file()

    def test_explicit_config_option(
        self, cli_runner: CliRunner, design_file: Path, tmp_path: Path, isolated_cwd: Path
    ) -> None:
        config = tmp_path / "gen.toml"
        config.write_text('[generation]\noutput_format = "modular"\n', encoding="utf-8")
        result = cli_runner.invoke(app, ["generate", str(design_file), "--config", str(config)])
        assert result.exit_code == 0, result.output
        assert (isolated_cwd / "output" / "app.py").is_file()

    def test_bad_config(
        self, cli_runner: CliRunner, design_file: Path, isolated_cwd: Path
    ) -> None:
        (isolated_cwd / "tuidesigner.toml").write_text("[generation\n", encoding="utf-8")
        result = cli_runner.invoke(app, ["generate", str(design_file)])
        assert result.exit_code == 1
        assert "Invalid TOML" in flat(result.output)

    def test_missing_design(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(app, ["generate", str(tmp_path / "missing.json")])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_invalid_design_writes_nothing(
        self, cli_runner: CliRunner, tmp_path: Path, minimal_dict: dict[str, Any]
    ) -> None:
        minimal_dict["widgets"][0]["type"] = "pie_chart"
        design = write_design(tmp_path / "bad.json", minimal_dict)
        out = tmp_path / "out"
        result = cli_runner.invoke(app, ["generate", str(design), str(out)])
        assert result.exit_code == 1
        assert "Design validation failed" in result.output
        assert "pie_chart" in result.output
        assert not out.exists()

    def test_unknown_framework_option(self, cli_runner: CliRunner, design_file: Path) -> None:
        result = cli_runner.invoke(app, ["generate", str(design_file), "-f", "curses"])
        assert result.exit_code != 0


class TestValidate:
    def test_valid(self, cli_runner: CliRunner, design_file: Path) -> None:
        result = cli_runner.invoke(app, ["validate", str(design_file)])
        assert result.exit_code == 0, result.output
        assert "Design is valid:" in result.output
        assert "9 widgets, 3 data sources" in result.output
        assert "warning:" not in result.output

    def test_overlap_is_a_warning(
        self, cli_runner: CliRunner, tmp_path: Path, dashboard_dict: dict[str, Any]
    ) -> None:
        dashboard_dict["widgets"][1]["position"] = {"x": 30, "y": 0}
        design = write_design(tmp_path / "overlap.json", dashboard_dict)
        result = cli_runner.invoke(app, ["validate", str(design)])
        assert result.exit_code == 0, result.output
        assert "warning: Widget title overlaps with cpu-card" in flat(result.output)

    def test_overlap_fails_in_strict_mode(
        self, cli_runner: CliRunner, tmp_path: Path, dashboard_dict: dict[str, Any]
    ) -> None:
        dashboard_dict["widgets"][1]["position"] = {"x": 30, "y": 0}
        design = write_design(tmp_path / "overlap.json", dashboard_dict)
        result = cli_runner.invoke(app, ["validate", str(design), "--strict"])
        assert result.exit_code == 1
        assert "strict mode" in flat(result.output)

    def test_invalid(self, cli_runner: CliRunner, tmp_path: Path, minimal_dict: dict[str, Any]) -> None:
        minimal_dict["widgets"][0]["dataSource"] = "missing"
        design = write_design(tmp_path / "bad.json", minimal_dict)
        result = cli_runner.invoke(app, ["validate", str(design)])
        assert result.exit_code == 1
        assert "unknown data source 'missing'" in flat(result.output)

    def test_framework_check(
        self, cli_runner: CliRunner, tmp_path: Path, minimal_dict: dict[str, Any]
    ) -> None:
        second = dict(minimal_dict["widgets"][0], id="hello_", position={"x": 30, "y": 0})
        minimal_dict["widgets"].append(second)
        design = write_design(tmp_path / "clash.json", minimal_dict)
        assert cli_runner.invoke(app, ["validate", str(design)]).exit_code == 0
        result = cli_runner.invoke(app, ["validate", str(design), "-f", "ratatui"])
        assert result.exit_code == 1
        assert "HelloWidget" in result.output


class TestListings:
    def test_frameworks(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["frameworks"])
        assert result.exit_code == 0
        for name in ("textual", "ratatui", "blessed"):
            assert name in result.output

    def test_widgets(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["widgets"])
        assert result.exit_code == 0
        assert "Widgets" in result.output
        assert "gauge" in result.output
        assert "table" in result.output

    def test_no_args_shows_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, [])
        assert "generate" in result.output
