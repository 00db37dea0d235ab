"""
Widget catalogue.

Display metadata for each widget type (name, icon, description, default
and minimum size) as shown by the editor palette and ``tuidesigner widgets``.
Property defaults come from the typed property records in ``core.ir``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from tuidesigner.core.ir import PROPERTY_MODELS, Size, WidgetType


@dataclass(frozen=True)
class WidgetDefinition:
    """Palette entry for one widget type."""

    type: WidgetType
    name: str
    icon: str
    description: str
    default_size: Size
    min_size: Size

    def default_properties(self) -> dict[str, Any]:
        return default_properties(self.type)


def _size(width: int, height: int) -> Size:
    return Size(width=width, height=height)


WIDGET_DEFINITIONS: dict[WidgetType, WidgetDefinition] = {
    WidgetType.TEXT: WidgetDefinition(
        WidgetType.TEXT,
        "Text",
        "[T]",
        "Static or dynamic text display",
        _size(20, 5),
        _size(10, 3),
    ),
    WidgetType.LINE_CHART: WidgetDefinition(
        WidgetType.LINE_CHART,
        "Line Chart",
        "[/]",
        "Line graph for time-series data",
        _size(40, 15),
        _size(20, 10),
    ),
    WidgetType.BAR_CHART: WidgetDefinition(
        WidgetType.BAR_CHART,
        "Bar Chart",
        "[|]",
        "Horizontal or vertical bar charts",
        _size(40, 15),
        _size(20, 10),
    ),
    WidgetType.TABLE: WidgetDefinition(
        WidgetType.TABLE,
        "Table",
        "[#]",
        "Data tables with sorting/filtering",
        _size(40, 20),
        _size(20, 10),
    ),
    WidgetType.PROGRESS_BAR: WidgetDefinition(
        WidgetType.PROGRESS_BAR,
        "Progress Bar",
        "[=]",
        "Progress indicators",
        _size(30, 3),
        _size(15, 3),
    ),
    WidgetType.SPARKLINE: WidgetDefinition(
        WidgetType.SPARKLINE,
        "Sparkline",
        "[.]",
        "Compact trend indicators",
        _size(20, 5),
        _size(10, 3),
    ),
    WidgetType.GAUGE: WidgetDefinition(
        WidgetType.GAUGE,
        "Gauge",
        "[O]",
        "Circular progress indicators",
        _size(15, 10),
        _size(10, 8),
    ),
    WidgetType.LOG_VIEWER: WidgetDefinition(
        WidgetType.LOG_VIEWER,
        "Log Viewer",
        "[L]",
        "Scrollable log display",
        _size(50, 20),
        _size(30, 10),
    ),
    WidgetType.METRIC_CARD: WidgetDefinition(
        WidgetType.METRIC_CARD,
        "Metric Card",
        "[M]",
        "Single metric display",
        _size(15, 8),
        _size(10, 6),
    ),
}


def get_widget_definition(widget_type: str) -> WidgetDefinition | None:
    """Catalogue entry for a widget type string, or None if unknown."""
    try:
        return WIDGET_DEFINITIONS[WidgetType(widget_type)]
    except ValueError:
        return None


def default_properties(widget_type: WidgetType) -> dict[str, Any]:
    """Default property bag for a widget type, with document (camelCase) keys."""
    record = PROPERTY_MODELS[widget_type]()
    return record.model_dump(mode="json", by_alias=True)


def list_widget_definitions() -> list[WidgetDefinition]:
    return list(WIDGET_DEFINITIONS.values())
