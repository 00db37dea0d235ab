"""
tuidesigner - compile terminal dashboard designs into runnable TUI projects.

A design document (widgets placed on a character grid, bound to data
sources) is validated into an immutable IR and handed to one of four
target adapters: Textual, Bubble Tea, Ratatui or blessed.

    from tuidesigner import CodeGenOptions, CodeGenerator, Framework, load_design

    design = load_design(Path("dashboard.json"))
    result = CodeGenerator.default().generate(
        design, CodeGenOptions(framework=Framework.RATATUI)
    )
"""

from __future__ import annotations

from ._version import __version__
from .codegen import CodeGenerator, CodeGenOptions, GeneratedCode, GeneratedFile, OutputFormat
from .core import ir
from .core.errors import (
    AdapterNotFoundError,
    ConfigError,
    DesignerError,
    DesignLoadError,
    DesignValidationError,
)
from .core.ir import Design, Framework
from .core.validator import lint_design, load_design, validate_design

__all__ = [
    "__version__",
    "ir",
    "AdapterNotFoundError",
    "CodeGenOptions",
    "CodeGenerator",
    "ConfigError",
    "Design",
    "DesignLoadError",
    "DesignValidationError",
    "DesignerError",
    "Framework",
    "GeneratedCode",
    "GeneratedFile",
    "OutputFormat",
    "lint_design",
    "load_design",
    "validate_design",
]
