"""
Design validation.

``validate_design`` is the gate in front of every generator: it turns a raw
design document into an immutable Design or raises DesignValidationError
with every problem it found. It runs in three passes:

1. Schema: field types, ranges, enums and data source union shape
2. Widgets: known widget types and typed property records
3. References: unique ids and data source bindings

The bounds and collision checks are advisory. They report problems but
never block generation; ``lint_design`` runs both.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from tuidesigner.core.errors import DesignLoadError, DesignValidationError
from tuidesigner.core.ir import Design, Widget, WidgetType, property_model_for
from tuidesigner.layout.placement import rectangles_overlap

logger = logging.getLogger(__name__)


def _format_location(loc: Iterable[Any]) -> str:
    return ".".join(str(part) for part in loc)


def _pydantic_errors(exc: ValidationError, prefix: str = "") -> list[str]:
    """Flatten a pydantic ValidationError into 'location: message' strings."""
    messages = []
    for error in exc.errors():
        location = _format_location(error["loc"])
        if prefix:
            location = f"{prefix}.{location}" if location else prefix
        messages.append(f"{location}: {error['msg']}" if location else error["msg"])
    return messages


def check_widget_types(design: Design) -> list[str]:
    """Reject unknown widget types and property bags that don't fit their type."""
    errors: list[str] = []
    known = WidgetType.values()
    for index, widget in enumerate(design.widgets):
        if widget.type not in known:
            errors.append(
                f"widgets.{index}.type: Widget type '{widget.type}' is not supported "
                f"(expected one of: {', '.join(known)})"
            )
            continue
        try:
            property_model_for(widget.type).model_validate(widget.properties)
        except ValidationError as e:
            errors.extend(_pydantic_errors(e, prefix=f"widgets.{index}.properties"))
    return errors


def check_unique_ids(design: Design) -> list[str]:
    errors: list[str] = []
    seen: set[str] = set()
    for widget in design.widgets:
        if widget.id in seen:
            errors.append(f"Duplicate widget id '{widget.id}'")
        seen.add(widget.id)

    seen = set()
    for source in design.data_sources:
        if source.id in seen:
            errors.append(f"Duplicate data source id '{source.id}'")
        seen.add(source.id)
    return errors


def check_data_source_references(design: Design) -> list[str]:
    """Every widget dataSource must name a declared data source."""
    declared = {source.id for source in design.data_sources}
    return [
        f"Widget {widget.id} references unknown data source '{widget.data_source}'"
        for widget in design.widgets
        if widget.data_source is not None and widget.data_source not in declared
    ]


def check_bounds(widgets: Sequence[Widget], width: int, height: int) -> list[str]:
    """Advisory: report widgets that leave the canvas."""
    errors: list[str] = []
    for widget in widgets:
        if widget.position.x < 0 or widget.position.y < 0:
            errors.append(f"Widget {widget.id} has negative position")
        if widget.position.x + widget.size.width > width:
            errors.append(f"Widget {widget.id} exceeds dashboard width")
        if widget.position.y + widget.size.height > height:
            errors.append(f"Widget {widget.id} exceeds dashboard height")
    return errors


def check_collisions(widgets: Sequence[Widget]) -> list[str]:
    """Advisory: report each overlapping pair once, in design order."""
    errors: list[str] = []
    for i, first in enumerate(widgets):
        for second in widgets[i + 1 :]:
            if rectangles_overlap(first, second):
                errors.append(f"Widget {first.id} overlaps with {second.id}")
    return errors


def lint_design(design: Design) -> list[str]:
    """Run the advisory layout checks (bounds and collisions)."""
    dimensions = design.settings.dimensions
    return check_bounds(design.widgets, dimensions.width, dimensions.height) + check_collisions(
        design.widgets
    )


def validate_design(raw: Mapping[str, Any] | Design) -> Design:
    """
    Validate a design document.

    Args:
        raw: Parsed design document (camelCase keys) or an existing Design

    Returns:
        The validated, immutable Design

    Raises:
        DesignValidationError: with every problem found in ``errors``
    """
    if isinstance(raw, Design):
        design = raw
    else:
        try:
            design = Design.model_validate(raw)
        except ValidationError as e:
            raise DesignValidationError.from_errors(_pydantic_errors(e)) from e

    errors = check_widget_types(design)
    errors.extend(check_unique_ids(design))
    errors.extend(check_data_source_references(design))
    if errors:
        raise DesignValidationError.from_errors(errors)

    logger.debug(
        "Validated design %r: %d widgets, %d data sources",
        design.metadata.name,
        len(design.widgets),
        len(design.data_sources),
    )
    return design


def load_design(path: Path) -> Design:
    """
    Read and validate a JSON design file.

    Raises:
        DesignLoadError: if the file is missing or not a JSON object
        DesignValidationError: if the document is not a valid design
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DesignLoadError(f"Cannot read design file: {e.strerror or e}", path) from e

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise DesignLoadError(f"Invalid JSON at line {e.lineno}: {e.msg}", path) from e

    if not isinstance(raw, dict):
        raise DesignLoadError("Design document must be a JSON object", path)

    return validate_design(raw)
