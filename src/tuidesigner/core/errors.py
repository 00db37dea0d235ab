"""
Error types for design loading, validation and code generation.
"""

from collections.abc import Iterable
from pathlib import Path


class DesignerError(Exception):
    """Base exception for all tuidesigner errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class DesignLoadError(DesignerError):
    """
    Raised when a design document cannot be read.

    Examples:
    - Missing file
    - File is not valid JSON
    - Top-level value is not an object
    """

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)


class DesignValidationError(DesignerError):
    """
    Raised when a design fails validation.

    Carries every collected problem in ``errors`` so callers can report
    them all at once. Nothing is generated for a design that raises this.

    Examples:
    - Field out of range (gridSize 0, width 500)
    - Unknown widget type
    - Data source config with the wrong shape for its kind
    - Widget referencing an undeclared data source
    - Widget type not supported by the selected framework
    """

    def __init__(self, message: str, errors: Iterable[str] = ()):
        self.errors = list(errors)
        super().__init__(message)

    @classmethod
    def from_errors(cls, errors: Iterable[str]) -> "DesignValidationError":
        """Build the aggregated 'Design validation failed' error."""
        errors = list(errors)
        return cls(f"Design validation failed: {', '.join(errors)}", errors)


class AdapterNotFoundError(DesignerError):
    """
    Raised when no adapter is registered for the requested framework.

    This is a configuration error of the generator, not of the design.
    """

    def __init__(self, framework: str):
        self.framework = framework
        super().__init__(f"No adapter registered for framework: {framework}")


class ConfigError(DesignerError):
    """
    Raised when a generator config file is unreadable or invalid.

    A missing file is not an error; defaults apply.
    """

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)
