"""
Generator configuration.

Defaults for ``tuidesigner generate`` can live in a ``tuidesigner.toml``
file:

    [generation]
    framework = "ratatui"
    output_format = "modular"
    include_comments = true
    use_mock_data = false
    output_dir = "dashboard"

or under ``[tool.tuidesigner.generation]`` in ``pyproject.toml``. Command
line flags always win over the file.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from tuidesigner.codegen.options import CodeGenOptions, OutputFormat
from tuidesigner.core.errors import ConfigError
from tuidesigner.core.ir import Framework

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "tuidesigner.toml"
PYPROJECT_FILENAME = "pyproject.toml"


class GeneratorConfig(BaseModel):
    """Generation defaults read from a config file."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    framework: Framework = Framework.TEXTUAL
    output_format: OutputFormat = OutputFormat.SINGLE
    include_comments: bool = True
    use_mock_data: bool = True
    output_dir: Path = Path("output")

    def to_options(self, **overrides: Any) -> CodeGenOptions:
        """
        Build CodeGenOptions, letting non-None ``overrides`` replace config values.
        """
        values = {
            "framework": self.framework,
            "output_format": self.output_format,
            "include_comments": self.include_comments,
            "use_mock_data": self.use_mock_data,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return CodeGenOptions(**values)


def _generation_section(data: dict[str, Any], path: Path) -> dict[str, Any]:
    if path.name == PYPROJECT_FILENAME:
        data = data.get("tool", {}).get("tuidesigner", {})
    section = data.get("generation", {})
    if not isinstance(section, dict):
        raise ConfigError("[generation] must be a table", path)
    return section


def find_config_file(directory: Path) -> Path | None:
    """``tuidesigner.toml`` in ``directory``, else its ``pyproject.toml``, else None."""
    for name in (CONFIG_FILENAME, PYPROJECT_FILENAME):
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def load_generator_config(path: Path | None = None) -> GeneratorConfig:
    """
    Load generation defaults.

    Args:
        path: Config file to read. When None, the current directory is
            searched with ``find_config_file``.

    Returns:
        The parsed config; defaults when the file or its section is missing

    Raises:
        ConfigError: if the file is not valid TOML or has invalid values
    """
    if path is None:
        path = find_config_file(Path.cwd())
        if path is None:
            return GeneratorConfig()

    if not path.is_file():
        logger.debug("No config file at %s, using defaults", path)
        return GeneratorConfig()

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML: {e}", path) from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file: {e.strerror or e}", path) from e

    section = _generation_section(data, path)
    try:
        config = GeneratorConfig.model_validate(section)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in error['loc'])}: {error['msg']}" for error in e.errors()
        )
        raise ConfigError(f"Invalid [generation] settings: {problems}", path) from e

    logger.debug("Loaded generator config from %s", path)
    return config
