"""
Code generation: adapter contract, generator façade and shared widget behaviour.
"""

from .generator import (
    CodeGenerator,
    Dependencies,
    FileRole,
    FrameworkAdapter,
    GeneratedCode,
    GeneratedFile,
    GenerationContext,
)
from .options import CodeGenOptions, OutputFormat

__all__ = [
    "CodeGenOptions",
    "CodeGenerator",
    "Dependencies",
    "FileRole",
    "FrameworkAdapter",
    "GeneratedCode",
    "GeneratedFile",
    "GenerationContext",
    "OutputFormat",
]
