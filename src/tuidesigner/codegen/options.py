"""
Code generation options.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from tuidesigner.core.ir import Framework


class OutputFormat(str, Enum):
    """How generated source is split into files."""

    SINGLE = "single"
    MODULAR = "modular"


class CodeGenOptions(BaseModel):
    """
    Options for one generation run.

    Attributes:
        framework: Target runtime
        output_format: One entry file, or app/widgets/data-sources files
        include_comments: Emit banner and per-widget comments
        use_mock_data: Unbound widgets simulate data in the generated app
    """

    model_config = ConfigDict(frozen=True)

    framework: Framework = Framework.TEXTUAL
    output_format: OutputFormat = OutputFormat.SINGLE
    include_comments: bool = True
    use_mock_data: bool = True

    @property
    def modular(self) -> bool:
        return self.output_format is OutputFormat.MODULAR
