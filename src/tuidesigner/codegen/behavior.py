"""
Language-neutral widget behaviour.

Every target renders the same nine widgets. The numbers, glyphs, sample
data and initial state that define *what* a widget does live here once;
the per-target template modules only decide *how* to spell it in their
language. The formatting functions are the reference implementations the
emitted helpers mirror.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from tuidesigner.core.ir import (
    BarChartProperties,
    GaugeProperties,
    MetricCardProperties,
    ProgressBarProperties,
    SparklineStyle,
    TextProperties,
    Theme,
    Widget,
    WidgetType,
    widget_properties,
)

if TYPE_CHECKING:
    from tuidesigner.codegen.options import CodeGenOptions


# =============================================================================
# Timing (milliseconds unless noted)
# =============================================================================

ANIMATION_TICK_MS = 200
SIMULATION_TICK_MS = 1000
HTTP_TIMEOUT_SECONDS = 10
COMMAND_TIMEOUT_SECONDS = 30

# =============================================================================
# Glyphs
# =============================================================================

FILL_GLYPH = "█"
EMPTY_GLYPH = "░"
SPARKLINE_LINE_RAMP = "_▁▂▃▄▅▆▇█"
SPARKLINE_BAR_RAMP = "▁▂▃▄▅▆▇█"
SPARKLINE_FLAT_LINE = "─"
GAUGE_GLYPHS = "○◔◑◕●"
TREND_UP = "↗"
TREND_DOWN = "↘"
TREND_FLAT = "→"
PLOT_POINT = "•"
PLOT_GRID = "·"

# =============================================================================
# Per-widget constants
# =============================================================================

PROGRESS_STEP = 2
BAR_BAND = 5
GAUGE_ARC_CELLS = 20
SPARKLINE_STEP = 3

# Standalone sparklines keep a longer history than the sparkline drawn
# inside a metric card.
SPARKLINE_HISTORY = 50
METRIC_CARD_HISTORY = 20
METRIC_CARD_SPARK_POINTS = 10
METRIC_CARD_DRIFT = 0.05

BYTE_UNITS = ("B", "KB", "MB", "GB", "TB")

# Keys tried, in order, to pull a widget value out of a cached source entry
VALUE_KEYS = ("value", "data", "content", "output")

# =============================================================================
# Sample data
# =============================================================================

LINE_CHART_LABELS = ["00:00", "00:05", "00:10", "00:15", "00:20", "00:25"]
LINE_CHART_VALUES = [23, 25, 24, 27, 30, 28]
LINE_CHART_SERIES = "Series 1"

BAR_CHART_SAMPLE = [["A", 25], ["B", 40], ["C", 15], ["D", 30]]

TABLE_HEADERS = ["ID", "Name", "Status", "Value"]
TABLE_ROWS = [
    ["001", "Item A", "Active", "125"],
    ["002", "Item B", "Pending", "87"],
    ["003", "Item C", "Complete", "203"],
    ["004", "Item D", "Active", "156"],
]
TABLE_COLUMN_WIDTH = 10

SPARKLINE_SAMPLE = [23, 25, 24, 27, 30, 28, 26, 29, 31, 28, 25, 27]

GAUGE_SAMPLE = 45
PROGRESS_SAMPLE = 45

METRIC_CARD_SAMPLE = 42.5
METRIC_CARD_PREVIOUS = 38.2
METRIC_CARD_SAMPLE_HISTORY = [30, 32, 35, 38, 40, 42, 39, 41, 43, 42.5]

LOG_SAMPLE = [
    ["INFO", "Application started"],
    ["INFO", "Connected to data source"],
    ["DEBUG", "Polling interval set"],
    ["WARN", "High memory usage detected"],
    ["INFO", "Processing request"],
    ["ERROR", "Connection timeout"],
]

# =============================================================================
# Themes
# =============================================================================


@dataclass(frozen=True)
class Palette:
    """Border, accent and text colours as portable color names."""

    border: str
    accent: str
    text: str


THEME_PALETTES: dict[Theme, Palette] = {
    Theme.DARK: Palette(border="blue", accent="cyan", text="white"),
    Theme.LIGHT: Palette(border="black", accent="blue", text="black"),
    Theme.MONOKAI: Palette(border="magenta", accent="yellow", text="white"),
    Theme.DRACULA: Palette(border="magenta", accent="green", text="white"),
    Theme.NORD: Palette(border="cyan", accent="blue", text="white"),
    Theme.CUSTOM: Palette(border="white", accent="cyan", text="white"),
}


# =============================================================================
# Reference formatting
# =============================================================================


def format_bytes(value: float) -> str:
    """Format a byte count on the 1024 ladder with one decimal, e.g. '1.5 KB'."""
    size = float(value)
    for unit in BYTE_UNITS[:-1]:
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} {BYTE_UNITS[-1]}"


def format_number(value: float) -> str:
    if value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"{value / 1_000:.1f}K"
    return f"{value:.1f}"


def format_percentage(value: float) -> str:
    return f"{value:.1f}%"


def format_metric_value(value: float, fmt: str = "number") -> str:
    """Format a metric card value in one of number, percentage or bytes."""
    if fmt == "percentage":
        return format_percentage(value)
    if fmt == "bytes":
        return format_bytes(value)
    return format_number(value)


def sparkline_glyphs(values: list[float], style: str = "line") -> str:
    """Min/max-normalized glyph ramp over ``values``."""
    if not values:
        return ""
    ramp = SPARKLINE_BAR_RAMP if style == SparklineStyle.BAR.value else SPARKLINE_LINE_RAMP
    low, high = min(values), max(values)
    if high == low:
        if ramp is SPARKLINE_BAR_RAMP:
            return ramp[len(ramp) // 2] * len(values)
        return SPARKLINE_FLAT_LINE * len(values)
    span = high - low
    top = len(ramp) - 1
    return "".join(ramp[int((v - low) / span * top)] for v in values)


def normalize(value: float, low: float, high: float) -> float:
    """Clamp ``value`` into [low, high] and scale it to [0, 1]."""
    if high <= low:
        return 0.0
    return min(max((value - low) / (high - low), 0.0), 1.0)


def gauge_glyph(value: float, low: float = 0, high: float = 100) -> tuple[str, str]:
    """Circular glyph and 20-cell arc for a gauge value."""
    ratio = normalize(value, low, high)
    glyph = GAUGE_GLYPHS[int(ratio * (len(GAUGE_GLYPHS) - 1))]
    filled = int(ratio * GAUGE_ARC_CELLS)
    return glyph, FILL_GLYPH * filled + EMPTY_GLYPH * (GAUGE_ARC_CELLS - filled)


def trend_indicator(current: float, previous: float | None) -> str:
    if previous is None or current == previous:
        return f"{TREND_FLAT} No change"
    diff = current - previous
    if diff > 0:
        return f"{TREND_UP} +{diff:.1f}"
    return f"{TREND_DOWN} {diff:.1f}"


def bar_bands(values: list[float]) -> list[int]:
    """Band thresholds for a vertical bar chart, top row first."""
    if not values:
        return []
    top = int(math.ceil(max(max(values), 0) / BAR_BAND)) * BAR_BAND
    return list(range(top, 0, -BAR_BAND))


def advance_progress(percent: float) -> float:
    """One animation tick: +2, wrapping to 0 once past 100."""
    percent += PROGRESS_STEP
    return 0.0 if percent > 100 else percent


# =============================================================================
# Initial widget state
# =============================================================================


@dataclass
class WidgetBehavior:
    """
    What a widget starts with and whether it simulates data.

    ``state`` holds plain JSON-like values (numbers, strings, lists) that
    every target can write as a literal.
    """

    widget: Widget
    kind: WidgetType | None
    simulate: bool
    state: dict[str, Any] = field(default_factory=dict)

    @property
    def bound(self) -> bool:
        return self.widget.data_source is not None

    @property
    def inner_width(self) -> int:
        """Content width inside a one-cell border."""
        return max(self.widget.size.width - 2, 1)

    @property
    def inner_height(self) -> int:
        return max(self.widget.size.height - 2, 1)

    @property
    def tick_ms(self) -> int | None:
        """Timer period for this widget's tick, or None if it never ticks."""
        if self.kind is WidgetType.PROGRESS_BAR:
            props = widget_properties(self.widget)
            assert isinstance(props, ProgressBarProperties)
            return ANIMATION_TICK_MS if props.animated and not self.bound else None
        if self.simulate and self.kind in SIMULATED_TYPES:
            return SIMULATION_TICK_MS
        return None


SIMULATED_TYPES = frozenset({WidgetType.SPARKLINE, WidgetType.METRIC_CARD, WidgetType.LOG_VIEWER})


# Portable colour names as ANSI palette indices
ANSI_COLOR_CODES = {
    "black": 0,
    "red": 1,
    "green": 2,
    "yellow": 3,
    "blue": 4,
    "magenta": 5,
    "cyan": 6,
    "white": 7,
    "gray": 8,
    "grey": 8,
}


def ansi_color(name: str) -> str:
    """Hex colours pass through; names map to ANSI indices (white if unknown)."""
    if name.startswith("#"):
        return name
    return str(ANSI_COLOR_CODES.get(name.lower(), ANSI_COLOR_CODES["white"]))


def widget_colors(widget: Widget, theme: Theme) -> tuple[str, str]:
    """(border, text) colour names for a widget, from its style or the theme."""
    palette = THEME_PALETTES[theme]
    border = palette.border
    text = palette.text
    if widget.widget_type is WidgetType.PROGRESS_BAR:
        props = widget_properties(widget)
        assert isinstance(props, ProgressBarProperties)
        text = props.color.value
    if widget.style is not None:
        border = widget.style.border_color or border
        text = widget.style.text_color or text
    return border, text


def widget_behavior(widget: Widget, options: CodeGenOptions) -> WidgetBehavior:
    """Resolve the initial state of a widget for code generation."""
    kind = widget.widget_type
    bound = widget.data_source is not None
    simulate = options.use_mock_data and not bound
    behavior = WidgetBehavior(widget=widget, kind=kind, simulate=simulate)

    if kind is None:
        behavior.simulate = False
        return behavior

    props = widget_properties(widget)
    state = behavior.state

    if kind is WidgetType.TEXT:
        assert isinstance(props, TextProperties)
        state["content"] = props.content
    elif kind is WidgetType.LINE_CHART:
        state["labels"] = list(LINE_CHART_LABELS)
        state["values"] = list(LINE_CHART_VALUES)
    elif kind is WidgetType.BAR_CHART:
        assert isinstance(props, BarChartProperties)
        state["bars"] = [list(bar) for bar in BAR_CHART_SAMPLE[: props.max_bars]]
    elif kind is WidgetType.TABLE:
        state["headers"] = list(TABLE_HEADERS)
        state["rows"] = [list(row) for row in TABLE_ROWS]
    elif kind is WidgetType.PROGRESS_BAR:
        assert isinstance(props, ProgressBarProperties)
        state["percent"] = 0 if (bound or props.animated) else PROGRESS_SAMPLE
    elif kind is WidgetType.SPARKLINE:
        state["values"] = [] if bound else list(SPARKLINE_SAMPLE)
    elif kind is WidgetType.GAUGE:
        assert isinstance(props, GaugeProperties)
        state["value"] = props.min if bound else GAUGE_SAMPLE
    elif kind is WidgetType.LOG_VIEWER:
        state["seed"] = [] if bound else [list(entry) for entry in LOG_SAMPLE]
    elif kind is WidgetType.METRIC_CARD:
        assert isinstance(props, MetricCardProperties)
        if bound:
            state.update(value=0.0, previous=None, history=[])
        else:
            state.update(
                value=METRIC_CARD_SAMPLE,
                previous=METRIC_CARD_PREVIOUS,
                history=list(METRIC_CARD_SAMPLE_HISTORY),
            )

    return behavior
