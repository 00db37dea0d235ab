"""
Textual widget templates.

One generator per widget type. Each returns the source of a ``Static``
subclass named ``<Id>Widget`` with:

- ``render_text()`` building the widget text from its state
- ``update_data(value)`` receiving values pushed by the data updater
- ``tick()`` for animated or simulated widgets

The shared helpers the classes call (formatting, glyph ramps) are
emitted once by ``generate_helpers``.
"""

from __future__ import annotations

from collections.abc import Callable

from tuidesigner.codegen import behavior as bh
from tuidesigner.codegen.behavior import WidgetBehavior, widget_behavior
from tuidesigner.codegen.options import CodeGenOptions
from tuidesigner.codegen.utils import (
    comment_text,
    identifier,
    py_literal,
    py_str,
    widget_class_name,
)
from tuidesigner.core.ir import Widget, WidgetType, widget_properties


def generate_helpers() -> str:
    """Constants and helper functions shared by every widget class."""
    return f'''
FILL = {py_str(bh.FILL_GLYPH)}
EMPTY = {py_str(bh.EMPTY_GLYPH)}
LINE_RAMP = {py_str(bh.SPARKLINE_LINE_RAMP)}
BAR_RAMP = {py_str(bh.SPARKLINE_BAR_RAMP)}
FLAT_LINE = {py_str(bh.SPARKLINE_FLAT_LINE)}
GAUGE_GLYPHS = {py_str(bh.GAUGE_GLYPHS)}
POINT = {py_str(bh.PLOT_POINT)}
GRID = {py_str(bh.PLOT_GRID)}
BAR_BAND = {bh.BAR_BAND}
ARC_CELLS = {bh.GAUGE_ARC_CELLS}
COLUMN_WIDTH = {bh.TABLE_COLUMN_WIDTH}


def to_number(value, default=0.0):
    """Best-effort conversion of pushed data to a float."""
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return default


def plain_number(value):
    value = float(value)
    if value == int(value):
        return str(int(value))
    return f"{{value:.1f}}"


def format_bytes(value):
    size = float(value)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024:
            return f"{{size:.1f}} {{unit}}"
        size /= 1024
    return f"{{size:.1f}} TB"


def format_number(value):
    if value >= 1_000_000:
        return f"{{value / 1_000_000:.1f}}M"
    if value >= 1_000:
        return f"{{value / 1_000:.1f}}K"
    return f"{{value:.1f}}"


def format_metric_value(value, fmt="number"):
    if fmt == "percentage":
        return f"{{value:.1f}}%"
    if fmt == "bytes":
        return format_bytes(value)
    return format_number(value)


def sparkline_glyphs(values, style="line"):
    """Min/max-normalized glyph ramp."""
    if not values:
        return ""
    ramp = BAR_RAMP if style == "bar" else LINE_RAMP
    low, high = min(values), max(values)
    if high == low:
        return ramp[len(ramp) // 2] * len(values) if style == "bar" else FLAT_LINE * len(values)
    top = len(ramp) - 1
    return "".join(ramp[int((v - low) / (high - low) * top)] for v in values)


def normalize(value, low, high):
    if high <= low:
        return 0.0
    return min(max((value - low) / (high - low), 0.0), 1.0)


def trend_text(current, previous):
    if previous is None or current == previous:
        return "{bh.TREND_FLAT} No change"
    diff = current - previous
    if diff > 0:
        return f"{bh.TREND_UP} +{{diff:.1f}}"
    return f"{bh.TREND_DOWN} {{diff:.1f}}"


def layout_text(text, width, align="left", wrap=True):
    """Wrap or clip each line to width, then align it."""
    lines = []
    for line in str(text).split("\\n"):
        if wrap and len(line) > width:
            chunks = [line[i : i + width] for i in range(0, len(line), width)]
        else:
            chunks = [line[:width]]
        for chunk in chunks:
            if align == "center":
                chunk = chunk.center(width).rstrip()
            elif align == "right":
                chunk = chunk.rjust(width)
            lines.append(chunk)
    return "\\n".join(lines)
'''.strip("\n")


# =============================================================================
# Class skeleton
# =============================================================================


def _body(lines: list[str]) -> str:
    return "\n".join(f"        {line}" if line else "" for line in lines)


def _widget_class(
    b: WidgetBehavior,
    options: CodeGenOptions,
    description: str,
    state: list[str],
    render: list[str],
    update: list[str],
    tick: list[str] | None = None,
    extra: str = "",
) -> str:
    widget = b.widget
    cls = widget_class_name(widget.id)
    lines = []
    if options.include_comments:
        lines.append(f"# {description}: {comment_text(widget.id)}")
    lines.append(f"class {cls}(Static):")
    lines.append(f'    """{description} widget."""')
    lines.append("")
    lines.append("    def __init__(self) -> None:")
    lines.append(f"        super().__init__(id={py_str(identifier(widget.id))}, markup=False)")
    lines.append(f"        self.widget_title = {py_str(widget.display_title)}")
    lines.append(f"        self.data_source = {py_literal(widget.data_source)}")
    lines.append(f"        self.inner_width = {b.inner_width}")
    lines.append(f"        self.inner_height = {b.inner_height}")
    lines.append(_body(state))
    lines.append("")
    lines.append("    def on_mount(self) -> None:")
    lines.append("        self.border_title = self.widget_title")
    lines.append("        self.refresh_view()")
    if tick is not None and b.tick_ms is not None:
        lines.append(f"        self.set_interval({b.tick_ms / 1000}, self.tick)")
    lines.append("")
    lines.append("    def refresh_view(self) -> None:")
    lines.append("        self.update(self.render_text())")
    lines.append("")
    lines.append("    def render_text(self) -> str:")
    lines.append(_body(render))
    lines.append("")
    lines.append("    def update_data(self, value) -> None:")
    lines.append(_body(update))
    lines.append("        self.refresh_view()")
    if tick is not None:
        lines.append("")
        lines.append("    def tick(self) -> None:")
        lines.append(_body(tick))
        lines.append("        self.refresh_view()")
    if extra:
        lines.append("")
        lines.append(extra.strip("\n"))
    return "\n".join(lines)


# =============================================================================
# Widget templates
# =============================================================================


def generate_text(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    return _widget_class(
        b,
        options,
        "Text",
        state=[
            f"self.text_content = {py_str(b.state['content'])}",
            f"self.text_align = {py_str(props.align.value)}",
            f"self.text_wrap = {props.wrap!r}",
            "self.bound_value = None",
        ],
        render=[
            "if self.bound_value is None:",
            "    text = self.text_content",
            "else:",
            '    text = f"{self.widget_title}: {self.bound_value}"',
            "return layout_text(text, self.inner_width, self.text_align, self.text_wrap)",
        ],
        update=[
            "if isinstance(value, (int, float)) and not isinstance(value, bool):",
            "    value = format_number(value)",
            "self.bound_value = str(value)",
        ],
    )


def generate_line_chart(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    return _widget_class(
        b,
        options,
        "Line chart",
        state=[
            f"self.labels = {py_literal(b.state['labels'])}",
            f"self.values = {py_literal(b.state['values'])}",
            f"self.x_label = {py_str(props.x_label)}",
            f"self.y_label = {py_str(props.y_label)}",
            f"self.show_grid = {props.show_grid!r}",
            f"self.show_legend = {props.show_legend!r}",
            f"self.max_points = {props.max_points}",
            "self.live = False",
        ],
        render=[
            "rows = max(self.inner_height - 1 - (1 if self.show_legend else 0), 1)",
            "values = self.values[-self.max_points :]",
            "lines = []",
            "if values:",
            "    low, high = min(values), max(values)",
            "    span = (high - low) or 1",
            "    levels = [int((v - low) / span * (rows - 1)) for v in values]",
            "    for row in range(rows - 1, -1, -1):",
            '        blank = GRID if self.show_grid else " "',
            '        lines.append(" ".join(POINT if level == row else blank for level in levels))',
            "if self.labels:",
            '    lines.append(f"{self.x_label}: {self.labels[0]} .. {self.labels[-1]}")',
            "else:",
            '    lines.append(f"{self.x_label}: last {len(values)} samples")',
            "if self.show_legend:",
            f'    lines.append(f"{{POINT}} {bh.LINE_CHART_SERIES} ({{self.y_label}})")',
            'return "\\n".join(lines)',
        ],
        update=[
            "if isinstance(value, list):",
            "    self.values = [to_number(v) for v in value][-self.max_points :]",
            "else:",
            "    if not self.live:",
            "        self.values = []",
            "    self.values = (self.values + [to_number(value)])[-self.max_points :]",
            "self.labels = []",
            "self.live = True",
        ],
    )


def generate_bar_chart(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    extra = '''
    def render_vertical(self, bars) -> str:
        values = [value for _, value in bars]
        widths = [
            max(2, len(str(label)), len(plain_number(value)) if self.show_values else 0)
            for label, value in bars
        ]
        rows = max(self.inner_height - 2, 1)
        band = BAR_BAND
        while math.ceil(max(max(values), 0) / band) > rows:
            band += BAR_BAND
        top = math.ceil(max(max(values), 0) / band) * band
        lines = []
        for level in range(top, 0, -band):
            cells = [(FILL if v >= level else " ") * w for v, w in zip(values, widths)]
            lines.append(" ".join(cells).rstrip())
        if self.show_legend:
            lines.append(" ".join(str(label).ljust(w) for (label, _), w in zip(bars, widths)))
        if self.show_values:
            lines.append(" ".join(plain_number(v).ljust(w) for v, w in zip(values, widths)))
        return "\\n".join(lines)

    def render_horizontal(self, bars) -> str:
        label_width = max(len(str(label)) for label, _ in bars)
        top = max(max(value for _, value in bars), 1)
        room = max(self.inner_width - label_width - 8, 1)
        lines = []
        for label, value in bars:
            line = f"{str(label).ljust(label_width)} │{FILL * int(max(value, 0) / top * room)}"
            if self.show_values:
                line += f" {plain_number(value)}"
            lines.append(line)
        return "\\n".join(lines)
'''
    return _widget_class(
        b,
        options,
        "Bar chart",
        state=[
            f"self.bars = {py_literal(b.state['bars'])}",
            f"self.orientation = {py_str(props.orientation.value)}",
            f"self.show_values = {props.show_values!r}",
            f"self.show_legend = {props.show_legend!r}",
            f"self.max_bars = {props.max_bars}",
        ],
        render=[
            "bars = self.bars[: self.max_bars]",
            "if not bars:",
            '    return "No data"',
            'if self.orientation == "horizontal":',
            "    return self.render_horizontal(bars)",
            "return self.render_vertical(bars)",
        ],
        update=[
            "if isinstance(value, dict):",
            "    bars = [[str(k), to_number(v)] for k, v in value.items()]",
            "elif isinstance(value, list):",
            "    bars = []",
            "    for index, item in enumerate(value):",
            "        if isinstance(item, (list, tuple)) and len(item) >= 2:",
            "            bars.append([str(item[0]), to_number(item[1])])",
            "        else:",
            "            bars.append([str(index + 1), to_number(item)])",
            "else:",
            "    return",
            "self.bars = bars[: self.max_bars]",
        ],
        extra=extra,
    )


def generate_table(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    return _widget_class(
        b,
        options,
        "Table",
        state=[
            f"self.headers = {py_literal(b.state['headers'])}",
            f"self.rows = {py_literal(b.state['rows'])}",
            f"self.show_headers = {props.show_headers!r}",
            f"self.sortable = {props.sortable!r}",
            f"self.filterable = {props.filterable!r}",
            f"self.max_rows = {props.max_rows}",
        ],
        render=[
            "def fmt(cells):",
            '    return " ".join(str(c)[:COLUMN_WIDTH].ljust(COLUMN_WIDTH) for c in cells).rstrip()',
            "",
            "lines = []",
            "if self.show_headers:",
            "    lines.append(fmt(self.headers))",
            '    lines.append("─" * min(len(self.headers) * (COLUMN_WIDTH + 1), self.inner_width))',
            "lines.extend(fmt(row) for row in self.rows[: self.max_rows])",
            'return "\\n".join(lines)',
        ],
        update=[
            "if not isinstance(value, list) or not value:",
            "    return",
            "if isinstance(value[0], dict):",
            "    self.headers = [str(key) for key in value[0]]",
            '    rows = [[str(item.get(h, "")) for h in self.headers] for item in value]',
            "else:",
            "    rows = [[str(c) for c in row] if isinstance(row, (list, tuple)) else [str(row)] for row in value]",
            "self.rows = rows[: self.max_rows]",
        ],
    )


def generate_progress_bar(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    return _widget_class(
        b,
        options,
        "Progress bar",
        state=[
            f"self.percent = {float(b.state['percent'])!r}",
            f"self.show_percentage = {props.show_percentage!r}",
            f"self.animated = {props.animated!r}",
            f"self.min_value = {props.min!r}",
            f"self.max_value = {props.max!r}",
        ],
        render=[
            "width = max(self.inner_width - (8 if self.show_percentage else 0), 1)",
            "filled = int(self.percent / 100 * width)",
            "bar = FILL * filled + EMPTY * (width - filled)",
            "if self.show_percentage:",
            '    return f"{bar} {self.percent:.1f}%"',
            "return bar",
        ],
        update=[
            "self.percent = normalize(to_number(value), self.min_value, self.max_value) * 100",
        ],
        tick=[
            f"self.percent += {bh.PROGRESS_STEP}",
            "if self.percent > 100:",
            "    self.percent = 0.0",
        ],
    )


def generate_sparkline(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    return _widget_class(
        b,
        options,
        "Sparkline",
        state=[
            f"self.values = {py_literal(b.state['values'])}",
            f"self.ramp_style = {py_str(props.style.value)}",
            f"self.show_min_max = {props.show_min_max!r}",
            f"self.show_current = {props.show_current!r}",
            f"self.history = {bh.SPARKLINE_HISTORY}",
        ],
        render=[
            "values = self.values[-self.inner_width :]",
            "lines = [sparkline_glyphs(values, self.ramp_style)]",
            "parts = []",
            "if values and self.show_min_max:",
            '    parts.append(f"Min: {plain_number(min(values))}")',
            '    parts.append(f"Max: {plain_number(max(values))}")',
            "if values and self.show_current:",
            '    parts.append(f"Current: {plain_number(values[-1])}")',
            "if parts:",
            '    lines.append("  ".join(parts))',
            'return "\\n".join(lines)',
        ],
        update=[
            "if isinstance(value, list):",
            "    self.values = [to_number(v) for v in value][-self.history :]",
            "else:",
            "    self.values = (self.values + [to_number(value)])[-self.history :]",
        ],
        tick=[
            "last = self.values[-1] if self.values else 0",
            f"step = random.randint(-{bh.SPARKLINE_STEP}, {bh.SPARKLINE_STEP})",
            "self.values = (self.values + [max(0, last + step)])[-self.history :]",
        ],
    )


def generate_gauge(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    return _widget_class(
        b,
        options,
        "Gauge",
        state=[
            f"self.value = {float(b.state['value'])!r}",
            f"self.min_value = {props.min!r}",
            f"self.max_value = {props.max!r}",
            f"self.show_value = {props.show_value!r}",
            f"self.units = {py_str(props.units)}",
        ],
        render=[
            "ratio = normalize(self.value, self.min_value, self.max_value)",
            "glyph = GAUGE_GLYPHS[int(ratio * (len(GAUGE_GLYPHS) - 1))]",
            "filled = int(ratio * ARC_CELLS)",
            "lines = [glyph, FILL * filled + EMPTY * (ARC_CELLS - filled)]",
            "if self.show_value:",
            '    lines.append(f"{plain_number(self.value)}{self.units}")',
            'return "\\n".join(lines)',
        ],
        update=[
            "self.value = to_number(value, self.value)",
        ],
    )


def generate_log_viewer(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    extra = '''
    def append_entry(self, level: str, message: str) -> None:
        line = f"{level}: {message}"
        if self.show_timestamp:
            line = f"[{datetime.now():%H:%M:%S}] {line}"
        self.entries.append(line)
        if len(self.entries) > self.max_lines:
            self.entries = self.entries[-self.max_lines :]
'''
    return _widget_class(
        b,
        options,
        "Log viewer",
        state=[
            f"self.max_lines = {props.max_lines}",
            f"self.auto_scroll = {props.auto_scroll!r}",
            f"self.show_timestamp = {props.show_timestamp!r}",
            f"self.filter_text = {py_str(props.filter)}",
            f"self.samples = {py_literal(bh.LOG_SAMPLE)}",
            "self.sample_index = 0",
            "self.entries = []",
            f"for level, message in {py_literal(b.state['seed'])}:",
            "    self.append_entry(level, message)",
        ],
        render=[
            "lines = self.entries",
            "if self.filter_text:",
            "    needle = self.filter_text.lower()",
            "    lines = [line for line in lines if needle in line.lower()]",
            "visible = max(self.inner_height, 1)",
            "lines = lines[-visible:] if self.auto_scroll else lines[:visible]",
            'return "\\n".join(lines)',
        ],
        update=[
            "if isinstance(value, list):",
            "    items = [str(item) for item in value]",
            "else:",
            "    items = [line for line in str(value).splitlines() if line.strip()]",
            "for item in items:",
            '    self.append_entry("INFO", item)',
        ],
        tick=[
            "level, message = self.samples[self.sample_index % len(self.samples)]",
            "self.sample_index += 1",
            "self.append_entry(level, message)",
        ],
        extra=extra,
    )


def generate_metric_card(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    extra = f'''
    def record(self, value: float) -> None:
        self.previous = self.value
        self.value = value
        self.history = (self.history + [value])[-{bh.METRIC_CARD_HISTORY}:]
'''
    return _widget_class(
        b,
        options,
        "Metric card",
        state=[
            f"self.label = {py_str(props.label)}",
            f"self.fmt = {py_str(props.format.value)}",
            f"self.show_trend = {props.trend!r}",
            f"self.show_sparkline = {props.sparkline!r}",
            f"self.value = {float(b.state['value'])!r}",
            f"self.previous = {py_literal(b.state['previous'])}",
            f"self.history = {py_literal(b.state['history'])}",
        ],
        render=[
            "lines = [self.label, format_metric_value(self.value, self.fmt)]",
            "if self.show_trend:",
            "    lines.append(trend_text(self.value, self.previous))",
            "if self.show_sparkline and len(self.history) > 1:",
            f'    lines.append(sparkline_glyphs(self.history[-{bh.METRIC_CARD_SPARK_POINTS}:], "bar"))',
            'return "\\n".join(lines)',
        ],
        update=[
            "self.record(to_number(value, self.value))",
        ],
        tick=[
            f"drift = random.uniform(-{bh.METRIC_CARD_DRIFT}, {bh.METRIC_CARD_DRIFT})",
            "self.record(round(self.value * (1 + drift), 2))",
        ],
        extra=extra,
    )


def generate_placeholder(widget: Widget, options: CodeGenOptions) -> str:
    """Static label for widget types no template exists for."""
    b = WidgetBehavior(widget=widget, kind=None, simulate=False)
    return _widget_class(
        b,
        options,
        "Placeholder",
        state=[f"self.widget_type = {py_str(widget.type)}"],
        render=['return f"{self.widget_title} ({self.widget_type})"'],
        update=["pass"],
    )


WIDGET_GENERATORS: dict[WidgetType, Callable[[Widget, CodeGenOptions], str]] = {
    WidgetType.TEXT: generate_text,
    WidgetType.LINE_CHART: generate_line_chart,
    WidgetType.BAR_CHART: generate_bar_chart,
    WidgetType.TABLE: generate_table,
    WidgetType.PROGRESS_BAR: generate_progress_bar,
    WidgetType.SPARKLINE: generate_sparkline,
    WidgetType.GAUGE: generate_gauge,
    WidgetType.LOG_VIEWER: generate_log_viewer,
    WidgetType.METRIC_CARD: generate_metric_card,
}


def generate_widget(widget: Widget, options: CodeGenOptions) -> str:
    """Dispatch to the template for ``widget.type``; unknown types get a placeholder."""
    kind = widget.widget_type
    if kind is None:
        return generate_placeholder(widget, options)
    return WIDGET_GENERATORS[kind](widget, options)
