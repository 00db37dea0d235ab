"""Tests for generator config files."""

from __future__ import annotations

from pathlib import Path

import pytest

from tuidesigner.codegen.options import OutputFormat
from tuidesigner.config import GeneratorConfig, find_config_file, load_generator_config
from tuidesigner.core.errors import ConfigError
from tuidesigner.core.ir import Framework


def write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadGeneratorConfig:
    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        config = load_generator_config(tmp_path / "tuidesigner.toml")
        assert config == GeneratorConfig()
        assert config.framework is Framework.TEXTUAL
        assert config.output_dir == Path("output")

    def test_tuidesigner_toml(self, tmp_path: Path) -> None:
        path = write(
            tmp_path / "tuidesigner.toml",
            """
[generation]
framework = "ratatui"
output_format = "modular"
include_comments = false
output_dir = "build/dash"
""",
        )
        config = load_generator_config(path)
        assert config.framework is Framework.RATATUI
        assert config.output_format is OutputFormat.MODULAR
        assert config.include_comments is False
        assert config.use_mock_data is True
        assert config.output_dir == Path("build/dash")

    def test_pyproject_tool_section(self, tmp_path: Path) -> None:
        path = write(
            tmp_path / "pyproject.toml",
            """
[project]
name = "ops"

[tool.tuidesigner.generation]
framework = "blessed"
use_mock_data = false
""",
        )
        config = load_generator_config(path)
        assert config.framework is Framework.BLESSED
        assert config.use_mock_data is False

    def test_pyproject_without_section(self, tmp_path: Path) -> None:
        path = write(tmp_path / "pyproject.toml", '[project]\nname = "ops"\n')
        assert load_generator_config(path) == GeneratorConfig()

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = write(tmp_path / "tuidesigner.toml", "[generation\nframework = ")
        with pytest.raises(ConfigError, match="Invalid TOML") as exc_info:
            load_generator_config(path)
        assert exc_info.value.path == path
        assert str(exc_info.value).startswith(str(path))

    def test_invalid_framework(self, tmp_path: Path) -> None:
        path = write(tmp_path / "tuidesigner.toml", '[generation]\nframework = "curses"\n')
        with pytest.raises(ConfigError, match="framework"):
            load_generator_config(path)

    def test_unknown_key(self, tmp_path: Path) -> None:
        path = write(tmp_path / "tuidesigner.toml", "[generation]\ncolour = true\n")
        with pytest.raises(ConfigError, match="colour"):
            load_generator_config(path)

    def test_generation_must_be_table(self, tmp_path: Path) -> None:
        path = write(tmp_path / "tuidesigner.toml", 'generation = "textual"\n')
        with pytest.raises(ConfigError, match="must be a table"):
            load_generator_config(path)

    def test_searches_working_directory(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        write(tmp_path / "tuidesigner.toml", '[generation]\nframework = "bubble_tea"\n')
        monkeypatch.chdir(tmp_path)
        assert load_generator_config().framework is Framework.BUBBLE_TEA


class TestFindConfigFile:
    def test_prefers_tuidesigner_toml(self, tmp_path: Path) -> None:
        write(tmp_path / "pyproject.toml", "")
        own = write(tmp_path / "tuidesigner.toml", "")
        assert find_config_file(tmp_path) == own

    def test_falls_back_to_pyproject(self, tmp_path: Path) -> None:
        pyproject = write(tmp_path / "pyproject.toml", "")
        assert find_config_file(tmp_path) == pyproject

    def test_nothing_found(self, tmp_path: Path) -> None:
        assert find_config_file(tmp_path) is None


class TestToOptions:
    def test_config_values(self) -> None:
        config = GeneratorConfig(framework=Framework.RATATUI, include_comments=False)
        options = config.to_options()
        assert options.framework is Framework.RATATUI
        assert options.include_comments is False

    def test_none_overrides_ignored(self) -> None:
        config = GeneratorConfig(framework=Framework.RATATUI)
        assert config.to_options(framework=None).framework is Framework.RATATUI

    def test_overrides_win(self) -> None:
        config = GeneratorConfig(use_mock_data=True)
        options = config.to_options(use_mock_data=False, output_format=OutputFormat.MODULAR)
        assert options.use_mock_data is False
        assert options.output_format is OutputFormat.MODULAR
