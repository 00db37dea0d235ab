"""
Widget types for the design IR.

Each widget has geometry, an optional binding to a data source, and a
property bag whose shape depends on the widget type. The property bag is
kept raw on the Widget itself; ``widget_properties()`` resolves it to the
typed record for that widget type, with every default filled in.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import ConfigDict, Field, model_validator

from .base import DesignModel


class WidgetType(str, Enum):
    """The nine widget variants every target can render."""

    TEXT = "text"
    LINE_CHART = "line_chart"
    BAR_CHART = "bar_chart"
    TABLE = "table"
    PROGRESS_BAR = "progress_bar"
    SPARKLINE = "sparkline"
    GAUGE = "gauge"
    LOG_VIEWER = "log_viewer"
    METRIC_CARD = "metric_card"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class Position(DesignModel):
    """Top-left corner in cells."""

    x: int = Field(ge=0)
    y: int = Field(ge=0)


class Size(DesignModel):
    """Widget size in cells."""

    width: int = Field(ge=1)
    height: int = Field(ge=1)


class BorderStyle(str, Enum):
    SINGLE = "single"
    DOUBLE = "double"
    ROUNDED = "rounded"
    HEAVY = "heavy"
    ASCII = "ascii"
    NONE = "none"


class WidgetStyle(DesignModel):
    """Optional per-widget styling."""

    border_style: BorderStyle = BorderStyle.SINGLE
    border_color: str | None = None
    background_color: str | None = None
    text_color: str | None = None
    padding: int = Field(default=0, ge=0, le=5)


class Widget(DesignModel):
    """
    A single visual element of a design.

    ``type`` is kept as a plain string: document validation rejects unknown
    types, but adapters still guard against them when handed a Design that
    was built in code.

    Attributes:
        id: Unique widget identifier
        type: Widget variant (see WidgetType)
        position: Top-left corner
        size: Width and height
        title: Optional border title
        data_source: Id of the DataSource feeding this widget
        style: Optional border/colour overrides
        properties: Raw type-specific properties (see widget_properties())
    """

    id: str = Field(min_length=1)
    type: str
    position: Position
    size: Size
    title: str | None = None
    data_source: str | None = None
    style: WidgetStyle | None = None
    properties: dict[str, Any] = Field(default_factory=dict)

    @property
    def widget_type(self) -> WidgetType | None:
        """The WidgetType for this widget, or None for unknown types."""
        try:
            return WidgetType(self.type)
        except ValueError:
            return None

    @property
    def display_title(self) -> str:
        return self.title or self.type.replace("_", " ").title()


# =============================================================================
# Typed widget properties
# =============================================================================


class WidgetProperties(DesignModel):
    """Base for typed property records. Unknown keys are ignored."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
    )


class TextAlign(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class TextProperties(WidgetProperties):
    content: str = "Text content"
    align: TextAlign = TextAlign.LEFT
    wrap: bool = True


class LineChartProperties(WidgetProperties):
    x_label: str = "Time"
    y_label: str = "Value"
    show_grid: bool = True
    show_legend: bool = True
    max_points: int = Field(default=50, ge=10, le=500)


class BarOrientation(str, Enum):
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


class BarChartProperties(WidgetProperties):
    orientation: BarOrientation = BarOrientation.VERTICAL
    show_values: bool = True
    show_legend: bool = True
    max_bars: int = Field(default=10, ge=1, le=50)


class TableProperties(WidgetProperties):
    show_headers: bool = True
    sortable: bool = True
    filterable: bool = False
    max_rows: int = Field(default=100, ge=1, le=1000)


class ProgressColor(str, Enum):
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


class ProgressBarProperties(WidgetProperties):
    show_percentage: bool = True
    color: ProgressColor = ProgressColor.BLUE
    animated: bool = False
    min: float = 0
    max: float = 100

    @model_validator(mode="after")
    def check_range(self) -> ProgressBarProperties:
        if self.max <= self.min:
            raise ValueError("max must be greater than min")
        return self


class SparklineStyle(str, Enum):
    LINE = "line"
    BAR = "bar"


class SparklineProperties(WidgetProperties):
    style: SparklineStyle = SparklineStyle.LINE
    show_min_max: bool = True
    show_current: bool = True


class GaugeProperties(WidgetProperties):
    min: float = 0
    max: float = 100
    show_value: bool = True
    units: str = "%"

    @model_validator(mode="after")
    def check_range(self) -> GaugeProperties:
        if self.max <= self.min:
            raise ValueError("max must be greater than min")
        return self


class LogViewerProperties(WidgetProperties):
    max_lines: int = Field(default=1000, ge=1, le=100000)
    auto_scroll: bool = True
    show_timestamp: bool = True
    filter: str = ""


class MetricFormat(str, Enum):
    NUMBER = "number"
    PERCENTAGE = "percentage"
    BYTES = "bytes"


class MetricCardProperties(WidgetProperties):
    label: str = "Metric"
    format: MetricFormat = MetricFormat.NUMBER
    trend: bool = False
    sparkline: bool = False


class GenericProperties(WidgetProperties):
    """Fallback record for widget types no target knows about."""

    model_config = ConfigDict(frozen=True, extra="allow")


PROPERTY_MODELS: dict[WidgetType, type[WidgetProperties]] = {
    WidgetType.TEXT: TextProperties,
    WidgetType.LINE_CHART: LineChartProperties,
    WidgetType.BAR_CHART: BarChartProperties,
    WidgetType.TABLE: TableProperties,
    WidgetType.PROGRESS_BAR: ProgressBarProperties,
    WidgetType.SPARKLINE: SparklineProperties,
    WidgetType.GAUGE: GaugeProperties,
    WidgetType.LOG_VIEWER: LogViewerProperties,
    WidgetType.METRIC_CARD: MetricCardProperties,
}


def property_model_for(widget_type: str) -> type[WidgetProperties]:
    """Property record class for a widget type string."""
    try:
        return PROPERTY_MODELS[WidgetType(widget_type)]
    except ValueError:
        return GenericProperties


def widget_properties(widget: Widget) -> WidgetProperties:
    """
    Resolve a widget's raw property bag to its typed record.

    Raises pydantic.ValidationError if the bag does not fit the record;
    ``validate_design`` reports those before any generator sees the widget.
    """
    return property_model_for(widget.type).model_validate(widget.properties)
