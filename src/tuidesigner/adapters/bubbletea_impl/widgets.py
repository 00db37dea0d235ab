"""
Bubble Tea (Go) widget templates.

Each widget becomes a struct implementing ``DashboardWidget``:

- ``Render()`` builds the widget text from its state
- ``Update(value)`` receives values pushed by the data updater
- ``Tick()`` is called on every animation tick; animated and simulated
  widgets count elapsed time and act on their own period

Templates are written with 4-space indentation and converted to tabs
when emitted.
"""

from __future__ import annotations

from collections.abc import Callable

from tuidesigner.codegen import behavior as bh
from tuidesigner.codegen.behavior import WidgetBehavior, widget_behavior
from tuidesigner.codegen.options import CodeGenOptions
from tuidesigner.codegen.utils import (
    comment_text,
    go_str,
    number_literal,
    tab_indent,
    widget_class_name,
)
from tuidesigner.core.ir import Widget, WidgetType, widget_properties


# =============================================================================
# Go literals
# =============================================================================


def go_bool(value: bool) -> str:
    return "true" if value else "false"


def go_floats(values: list[float]) -> str:
    return "[]float64{" + ", ".join(number_literal(v) for v in values) + "}"


def go_strings(values: list[str]) -> str:
    return "[]string{" + ", ".join(go_str(str(v)) for v in values) + "}"


def go_string_rows(rows: list[list[str]]) -> str:
    return "[][]string{" + ", ".join("{" + ", ".join(go_str(str(c)) for c in row) + "}" for row in rows) + "}"


def go_pairs(pairs: list[list[str]]) -> str:
    return "[][2]string{" + ", ".join(f"{{{go_str(a)}, {go_str(b)}}}" for a, b in pairs) + "}"


def go_bars(bars: list[list]) -> str:
    items = ", ".join(f"{{{go_str(str(label))}, {number_literal(value)}}}" for label, value in bars)
    return "[]bar{" + items + "}"


# =============================================================================
# Helpers
# =============================================================================

HELPER_FUNCTIONS = """
// DashboardWidget is implemented by every generated widget.
type DashboardWidget interface {
    Title() string
    Render() string
    Update(value interface{})
    Tick()
}

type bar struct {
    label string
    value float64
}

func toNumber(value interface{}, fallback float64) float64 {
    switch v := value.(type) {
    case float64:
        return v
    case float32:
        return float64(v)
    case int:
        return float64(v)
    case int64:
        return float64(v)
    case uint64:
        return float64(v)
    case bool:
        if v {
            return 1
        }
        return 0
    case string:
        if f, err := strconv.ParseFloat(strings.TrimSpace(v), 64); err == nil {
            return f
        }
    }
    return fallback
}

func displayValue(value interface{}) string {
    switch v := value.(type) {
    case float64:
        return formatNumber(v)
    case int:
        return formatNumber(float64(v))
    case int64:
        return formatNumber(float64(v))
    }
    return fmt.Sprint(value)
}

func plainNumber(v float64) string {
    if v == math.Trunc(v) {
        return strconv.FormatFloat(v, 'f', 0, 64)
    }
    return fmt.Sprintf("%.1f", v)
}

func formatBytes(v float64) string {
    for _, unit := range []string{"B", "KB", "MB", "GB"} {
        if v < 1024 {
            return fmt.Sprintf("%.1f %s", v, unit)
        }
        v /= 1024
    }
    return fmt.Sprintf("%.1f TB", v)
}

func formatNumber(v float64) string {
    if v >= 1000000 {
        return fmt.Sprintf("%.1fM", v/1000000)
    }
    if v >= 1000 {
        return fmt.Sprintf("%.1fK", v/1000)
    }
    return fmt.Sprintf("%.1f", v)
}

func formatMetricValue(v float64, format string) string {
    switch format {
    case "percentage":
        return fmt.Sprintf("%.1f%%", v)
    case "bytes":
        return formatBytes(v)
    }
    return formatNumber(v)
}

func minMax(values []float64) (float64, float64) {
    low, high := values[0], values[0]
    for _, v := range values {
        low = math.Min(low, v)
        high = math.Max(high, v)
    }
    return low, high
}

func lastN(values []float64, n int) []float64 {
    if len(values) > n {
        return values[len(values)-n:]
    }
    return values
}

// sparklineGlyphs maps values onto a min/max-normalized glyph ramp.
func sparklineGlyphs(values []float64, style string) string {
    if len(values) == 0 {
        return ""
    }
    ramp := []rune(lineRamp)
    if style == "bar" {
        ramp = []rune(barRamp)
    }
    low, high := minMax(values)
    if high == low {
        if style == "bar" {
            return strings.Repeat(string(ramp[len(ramp)/2]), len(values))
        }
        return strings.Repeat(flatLine, len(values))
    }
    top := float64(len(ramp) - 1)
    var b strings.Builder
    for _, v := range values {
        b.WriteRune(ramp[int((v-low)/(high-low)*top)])
    }
    return b.String()
}

func normalize(v, low, high float64) float64 {
    if high <= low {
        return 0
    }
    return math.Min(math.Max((v-low)/(high-low), 0), 1)
}

func trendText(current, previous float64, hasPrevious bool) string {
    if !hasPrevious || current == previous {
        return trendFlat + " No change"
    }
    diff := current - previous
    if diff > 0 {
        return fmt.Sprintf("%s +%.1f", trendUp, diff)
    }
    return fmt.Sprintf("%s %.1f", trendDown, diff)
}

func truncate(s string, n int) string {
    runes := []rune(s)
    if len(runes) > n {
        return string(runes[:n])
    }
    return s
}

func padRight(s string, width int) string {
    if n := utf8.RuneCountInString(s); n < width {
        return s + strings.Repeat(" ", width-n)
    }
    return s
}

func formatRow(cells []string) string {
    parts := make([]string, len(cells))
    for i, cell := range cells {
        parts[i] = padRight(truncate(cell, columnWidth), columnWidth)
    }
    return strings.TrimRight(strings.Join(parts, " "), " ")
}

// layoutText wraps or clips each line to width, then aligns it.
func layoutText(text string, width int, align string, wrap bool) string {
    var lines []string
    for _, line := range strings.Split(text, "\\n") {
        runes := []rune(line)
        var chunks []string
        if wrap && len(runes) > width {
            for i := 0; i < len(runes); i += width {
                end := i + width
                if end > len(runes) {
                    end = len(runes)
                }
                chunks = append(chunks, string(runes[i:end]))
            }
        } else {
            chunks = []string{truncate(line, width)}
        }
        for _, chunk := range chunks {
            pad := width - utf8.RuneCountInString(chunk)
            switch align {
            case "center":
                chunk = strings.TrimRight(strings.Repeat(" ", pad/2)+chunk, " ")
            case "right":
                chunk = strings.Repeat(" ", pad) + chunk
            }
            lines = append(lines, chunk)
        }
    }
    return strings.Join(lines, "\\n")
}
"""


def generate_helpers() -> str:
    """Glyph constants, the widget interface and shared helper functions."""
    constants = f"""
const (
    fill             = {go_str(bh.FILL_GLYPH)}
    empty            = {go_str(bh.EMPTY_GLYPH)}
    lineRamp         = {go_str(bh.SPARKLINE_LINE_RAMP)}
    barRamp          = {go_str(bh.SPARKLINE_BAR_RAMP)}
    flatLine         = {go_str(bh.SPARKLINE_FLAT_LINE)}
    gaugeGlyphs      = {go_str(bh.GAUGE_GLYPHS)}
    point            = {go_str(bh.PLOT_POINT)}
    grid             = {go_str(bh.PLOT_GRID)}
    trendUp          = {go_str(bh.TREND_UP)}
    trendDown        = {go_str(bh.TREND_DOWN)}
    trendFlat        = {go_str(bh.TREND_FLAT)}
    barBand          = {bh.BAR_BAND}
    arcCells         = {bh.GAUGE_ARC_CELLS}
    columnWidth      = {bh.TABLE_COLUMN_WIDTH}
    animationTickMs  = {bh.ANIMATION_TICK_MS}
)
"""
    return tab_indent(constants.strip("\n") + "\n" + HELPER_FUNCTIONS.rstrip("\n"))


# =============================================================================
# Struct skeleton
# =============================================================================


def _aligned(pairs: list[tuple[str, str]], sep: str) -> list[str]:
    width = max(len(name) for name, _ in pairs)
    return [f"{name}{sep}{' ' * (width - len(name))}{value}" for name, value in pairs]


def _widget_struct(
    b: WidgetBehavior,
    options: CodeGenOptions,
    description: str,
    fields: list[tuple[str, str, str | None]],
    render: str,
    update: str,
    tick: str | None = None,
    init: str = "",
    extra: str = "",
) -> str:
    """
    Assemble one widget struct.

    ``fields`` are (name, Go type, initial literal or None). ``render``,
    ``update``, ``tick`` and ``init`` are method bodies at one level of
    indentation; ``extra`` holds additional methods.
    """
    widget = b.widget
    name = widget_class_name(widget.id)
    ticks = tick is not None and b.tick_ms is not None
    all_fields = [("title", "string", go_str(widget.display_title))]
    all_fields += [("width", "int", str(b.inner_width)), ("height", "int", str(b.inner_height))]
    if ticks and b.tick_ms != bh.ANIMATION_TICK_MS:
        all_fields.append(("elapsed", "int", None))
    all_fields += fields

    lines = []
    if options.include_comments:
        lines.append(f"// {name} is the {description.lower()} widget {comment_text(widget.id)}.")
    lines.append(f"type {name} struct {{")
    lines += [f"    {line}" for line in _aligned([(f, t) for f, t, _ in all_fields], " ")]
    lines.append("}")
    lines.append("")
    lines.append(f"func New{name}() *{name} {{")
    lines.append(f"    w := &{name}{{")
    initial = [(f"{f}:", v) for f, _, v in all_fields if v is not None]
    lines += [f"        {line}," for line in _aligned(initial, " ")]
    lines.append("    }")
    if init:
        lines.append(init.strip("\n"))
    lines.append("    return w")
    lines.append("}")
    lines.append("")
    lines.append(f"func (w *{name}) Title() string {{ return w.title }}")
    lines.append("")
    lines.append(f"func (w *{name}) Render() string {{")
    lines.append(render.strip("\n"))
    lines.append("}")
    lines.append("")
    lines.append(f"func (w *{name}) Update(value interface{{}}) {{")
    lines.append(update.strip("\n"))
    lines.append("}")
    lines.append("")
    if ticks:
        lines.append(f"func (w *{name}) Tick() {{")
        if b.tick_ms != bh.ANIMATION_TICK_MS:
            lines += [
                "    w.elapsed += animationTickMs",
                f"    if w.elapsed < {b.tick_ms} {{",
                "        return",
                "    }",
                "    w.elapsed = 0",
            ]
        lines.append(tick.strip("\n"))
        lines.append("}")
    else:
        lines.append(f"func (w *{name}) Tick() {{}}")
    if extra:
        lines.append("")
        lines.append(extra.strip("\n").replace("WIDGET", name))
    return tab_indent("\n".join(lines))


# =============================================================================
# Widget templates
# =============================================================================


def generate_text(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    return _widget_struct(
        b,
        options,
        "Text",
        fields=[
            ("content", "string", go_str(b.state["content"])),
            ("align", "string", go_str(props.align.value)),
            ("wrap", "bool", go_bool(props.wrap)),
            ("bound", "string", None),
            ("hasBound", "bool", None),
        ],
        render="""
    text := w.content
    if w.hasBound {
        text = w.title + ": " + w.bound
    }
    return layoutText(text, w.width, w.align, w.wrap)
""",
        update="""
    w.bound = displayValue(value)
    w.hasBound = true
""",
    )


def generate_line_chart(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    return _widget_struct(
        b,
        options,
        "Line chart",
        fields=[
            ("labels", "[]string", go_strings(b.state["labels"])),
            ("values", "[]float64", go_floats(b.state["values"])),
            ("xLabel", "string", go_str(props.x_label)),
            ("yLabel", "string", go_str(props.y_label)),
            ("showGrid", "bool", go_bool(props.show_grid)),
            ("showLegend", "bool", go_bool(props.show_legend)),
            ("maxPoints", "int", str(props.max_points)),
            ("live", "bool", None),
        ],
        render=f"""
    rows := w.height - 1
    if w.showLegend {{
        rows--
    }}
    if rows < 1 {{
        rows = 1
    }}
    values := lastN(w.values, w.maxPoints)
    var lines []string
    if len(values) > 0 {{
        low, high := minMax(values)
        span := high - low
        if span == 0 {{
            span = 1
        }}
        blank := " "
        if w.showGrid {{
            blank = grid
        }}
        for row := rows - 1; row >= 0; row-- {{
            cells := make([]string, len(values))
            for i, v := range values {{
                cells[i] = blank
                if int((v-low)/span*float64(rows-1)) == row {{
                    cells[i] = point
                }}
            }}
            lines = append(lines, strings.Join(cells, " "))
        }}
    }}
    if len(w.labels) > 0 {{
        lines = append(lines, fmt.Sprintf("%s: %s .. %s", w.xLabel, w.labels[0], w.labels[len(w.labels)-1]))
    }} else {{
        lines = append(lines, fmt.Sprintf("%s: last %d samples", w.xLabel, len(values)))
    }}
    if w.showLegend {{
        lines = append(lines, fmt.Sprintf("%s {bh.LINE_CHART_SERIES} (%s)", point, w.yLabel))
    }}
    return strings.Join(lines, "\\n")
""",
        update="""
    if list, ok := value.([]interface{}); ok {
        values := make([]float64, 0, len(list))
        for _, item := range list {
            values = append(values, toNumber(item, 0))
        }
        w.values = lastN(values, w.maxPoints)
    } else {
        if !w.live {
            w.values = nil
        }
        w.values = lastN(append(w.values, toNumber(value, 0)), w.maxPoints)
    }
    w.labels = nil
    w.live = true
""",
    )


BAR_CHART_METHODS = """
func (w *WIDGET) renderVertical(bars []bar) string {
    widths := make([]int, len(bars))
    top := 0.0
    for i, b := range bars {
        width := 2
        if n := utf8.RuneCountInString(b.label); n > width {
            width = n
        }
        if w.showValues {
            if n := len(plainNumber(b.value)); n > width {
                width = n
            }
        }
        widths[i] = width
        top = math.Max(top, b.value)
    }
    rows := w.height - 2
    if rows < 1 {
        rows = 1
    }
    band := barBand
    for int(math.Ceil(top/float64(band))) > rows {
        band += barBand
    }
    var lines []string
    for level := int(math.Ceil(top/float64(band))) * band; level > 0; level -= band {
        cells := make([]string, len(bars))
        for i, b := range bars {
            glyph := " "
            if b.value >= float64(level) {
                glyph = fill
            }
            cells[i] = strings.Repeat(glyph, widths[i])
        }
        lines = append(lines, strings.TrimRight(strings.Join(cells, " "), " "))
    }
    if w.showLegend {
        labels := make([]string, len(bars))
        for i, b := range bars {
            labels[i] = padRight(b.label, widths[i])
        }
        lines = append(lines, strings.Join(labels, " "))
    }
    if w.showValues {
        values := make([]string, len(bars))
        for i, b := range bars {
            values[i] = padRight(plainNumber(b.value), widths[i])
        }
        lines = append(lines, strings.Join(values, " "))
    }
    return strings.Join(lines, "\\n")
}

func (w *WIDGET) renderHorizontal(bars []bar) string {
    labelWidth := 0
    top := 1.0
    for _, b := range bars {
        if n := utf8.RuneCountInString(b.label); n > labelWidth {
            labelWidth = n
        }
        top = math.Max(top, b.value)
    }
    room := w.width - labelWidth - 8
    if room < 1 {
        room = 1
    }
    var lines []string
    for _, b := range bars {
        cells := int(math.Max(b.value, 0) / top * float64(room))
        line := padRight(b.label, labelWidth) + " │" + strings.Repeat(fill, cells)
        if w.showValues {
            line += " " + plainNumber(b.value)
        }
        lines = append(lines, line)
    }
    return strings.Join(lines, "\\n")
}
"""


def generate_bar_chart(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    return _widget_struct(
        b,
        options,
        "Bar chart",
        fields=[
            ("bars", "[]bar", go_bars(b.state["bars"])),
            ("orientation", "string", go_str(props.orientation.value)),
            ("showValues", "bool", go_bool(props.show_values)),
            ("showLegend", "bool", go_bool(props.show_legend)),
            ("maxBars", "int", str(props.max_bars)),
        ],
        render="""
    bars := w.bars
    if len(bars) > w.maxBars {
        bars = bars[:w.maxBars]
    }
    if len(bars) == 0 {
        return "No data"
    }
    if w.orientation == "horizontal" {
        return w.renderHorizontal(bars)
    }
    return w.renderVertical(bars)
""",
        update="""
    var bars []bar
    switch v := value.(type) {
    case map[string]interface{}:
        keys := make([]string, 0, len(v))
        for key := range v {
            keys = append(keys, key)
        }
        sort.Strings(keys)
        for _, key := range keys {
            bars = append(bars, bar{key, toNumber(v[key], 0)})
        }
    case []interface{}:
        for i, item := range v {
            if pair, ok := item.([]interface{}); ok && len(pair) >= 2 {
                bars = append(bars, bar{fmt.Sprint(pair[0]), toNumber(pair[1], 0)})
            } else {
                bars = append(bars, bar{strconv.Itoa(i + 1), toNumber(item, 0)})
            }
        }
    default:
        return
    }
    if len(bars) > w.maxBars {
        bars = bars[:w.maxBars]
    }
    w.bars = bars
""",
        extra=BAR_CHART_METHODS,
    )


def generate_table(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    return _widget_struct(
        b,
        options,
        "Table",
        fields=[
            ("headers", "[]string", go_strings(b.state["headers"])),
            ("rows", "[][]string", go_string_rows(b.state["rows"])),
            ("showHeaders", "bool", go_bool(props.show_headers)),
            ("sortable", "bool", go_bool(props.sortable)),
            ("filterable", "bool", go_bool(props.filterable)),
            ("maxRows", "int", str(props.max_rows)),
        ],
        render="""
    var lines []string
    if w.showHeaders {
        lines = append(lines, formatRow(w.headers))
        rule := len(w.headers) * (columnWidth + 1)
        if rule > w.width {
            rule = w.width
        }
        lines = append(lines, strings.Repeat("─", rule))
    }
    rows := w.rows
    if len(rows) > w.maxRows {
        rows = rows[:w.maxRows]
    }
    for _, row := range rows {
        lines = append(lines, formatRow(row))
    }
    return strings.Join(lines, "\\n")
""",
        update="""
    list, ok := value.([]interface{})
    if !ok || len(list) == 0 {
        return
    }
    var rows [][]string
    if first, ok := list[0].(map[string]interface{}); ok {
        headers := make([]string, 0, len(first))
        for key := range first {
            headers = append(headers, key)
        }
        sort.Strings(headers)
        for _, item := range list {
            record, _ := item.(map[string]interface{})
            row := make([]string, len(headers))
            for i, header := range headers {
                if cell, found := record[header]; found {
                    row[i] = fmt.Sprint(cell)
                }
            }
            rows = append(rows, row)
        }
        w.headers = headers
    } else {
        for _, item := range list {
            if cells, ok := item.([]interface{}); ok {
                row := make([]string, len(cells))
                for i, cell := range cells {
                    row[i] = fmt.Sprint(cell)
                }
                rows = append(rows, row)
            } else {
                rows = append(rows, []string{fmt.Sprint(item)})
            }
        }
    }
    if len(rows) > w.maxRows {
        rows = rows[:w.maxRows]
    }
    w.rows = rows
""",
    )


def generate_progress_bar(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    return _widget_struct(
        b,
        options,
        "Progress bar",
        fields=[
            ("percent", "float64", number_literal(b.state["percent"])),
            ("showPercentage", "bool", go_bool(props.show_percentage)),
            ("animated", "bool", go_bool(props.animated)),
            ("minValue", "float64", number_literal(props.min)),
            ("maxValue", "float64", number_literal(props.max)),
        ],
        render="""
    width := w.width
    if w.showPercentage {
        width -= 8
    }
    if width < 1 {
        width = 1
    }
    filled := int(w.percent / 100 * float64(width))
    bar := strings.Repeat(fill, filled) + strings.Repeat(empty, width-filled)
    if w.showPercentage {
        return fmt.Sprintf("%s %.1f%%", bar, w.percent)
    }
    return bar
""",
        update="""
    w.percent = normalize(toNumber(value, 0), w.minValue, w.maxValue) * 100
""",
        tick=f"""
    w.percent += {bh.PROGRESS_STEP}
    if w.percent > 100 {{
        w.percent = 0
    }}
""",
    )


def generate_sparkline(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    return _widget_struct(
        b,
        options,
        "Sparkline",
        fields=[
            ("values", "[]float64", go_floats(b.state["values"])),
            ("style", "string", go_str(props.style.value)),
            ("showMinMax", "bool", go_bool(props.show_min_max)),
            ("showCurrent", "bool", go_bool(props.show_current)),
        ],
        render="""
    values := lastN(w.values, w.width)
    lines := []string{sparklineGlyphs(values, w.style)}
    var parts []string
    if len(values) > 0 && w.showMinMax {
        low, high := minMax(values)
        parts = append(parts, "Min: "+plainNumber(low), "Max: "+plainNumber(high))
    }
    if len(values) > 0 && w.showCurrent {
        parts = append(parts, "Current: "+plainNumber(values[len(values)-1]))
    }
    if len(parts) > 0 {
        lines = append(lines, strings.Join(parts, "  "))
    }
    return strings.Join(lines, "\\n")
""",
        update=f"""
    if list, ok := value.([]interface{{}}); ok {{
        values := make([]float64, 0, len(list))
        for _, item := range list {{
            values = append(values, toNumber(item, 0))
        }}
        w.values = lastN(values, {bh.SPARKLINE_HISTORY})
    }} else {{
        w.values = lastN(append(w.values, toNumber(value, 0)), {bh.SPARKLINE_HISTORY})
    }}
""",
        tick=f"""
    last := 0.0
    if len(w.values) > 0 {{
        last = w.values[len(w.values)-1]
    }}
    step := float64(rand.Intn({2 * bh.SPARKLINE_STEP + 1}) - {bh.SPARKLINE_STEP})
    w.values = lastN(append(w.values, math.Max(0, last+step)), {bh.SPARKLINE_HISTORY})
""",
    )


def generate_gauge(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    return _widget_struct(
        b,
        options,
        "Gauge",
        fields=[
            ("value", "float64", number_literal(b.state["value"])),
            ("minValue", "float64", number_literal(props.min)),
            ("maxValue", "float64", number_literal(props.max)),
            ("showValue", "bool", go_bool(props.show_value)),
            ("units", "string", go_str(props.units)),
        ],
        render="""
    ratio := normalize(w.value, w.minValue, w.maxValue)
    glyphs := []rune(gaugeGlyphs)
    filled := int(ratio * arcCells)
    lines := []string{
        string(glyphs[int(ratio*float64(len(glyphs)-1))]),
        strings.Repeat(fill, filled) + strings.Repeat(empty, arcCells-filled),
    }
    if w.showValue {
        lines = append(lines, plainNumber(w.value)+w.units)
    }
    return strings.Join(lines, "\\n")
""",
        update="""
    w.value = toNumber(value, w.value)
""",
    )


LOG_VIEWER_METHODS = """
func (w *WIDGET) appendEntry(level, message string) {
    line := level + ": " + message
    if w.showTimestamp {
        line = "[" + time.Now().Format("15:04:05") + "] " + line
    }
    w.entries = append(w.entries, line)
    if len(w.entries) > w.maxLines {
        w.entries = w.entries[len(w.entries)-w.maxLines:]
    }
}
"""


def generate_log_viewer(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    return _widget_struct(
        b,
        options,
        "Log viewer",
        fields=[
            ("maxLines", "int", str(props.max_lines)),
            ("autoScroll", "bool", go_bool(props.auto_scroll)),
            ("showTimestamp", "bool", go_bool(props.show_timestamp)),
            ("filter", "string", go_str(props.filter)),
            ("samples", "[][2]string", go_pairs(bh.LOG_SAMPLE)),
            ("sampleIndex", "int", None),
            ("entries", "[]string", None),
        ],
        init=f"""
    for _, entry := range {go_pairs(b.state["seed"])} {{
        w.appendEntry(entry[0], entry[1])
    }}
""",
        render="""
    lines := w.entries
    if w.filter != "" {
        needle := strings.ToLower(w.filter)
        var matched []string
        for _, line := range lines {
            if strings.Contains(strings.ToLower(line), needle) {
                matched = append(matched, line)
            }
        }
        lines = matched
    }
    visible := w.height
    if len(lines) > visible {
        if w.autoScroll {
            lines = lines[len(lines)-visible:]
        } else {
            lines = lines[:visible]
        }
    }
    return strings.Join(lines, "\\n")
""",
        update="""
    if list, ok := value.([]interface{}); ok {
        for _, item := range list {
            w.appendEntry("INFO", fmt.Sprint(item))
        }
        return
    }
    for _, line := range strings.Split(fmt.Sprint(value), "\\n") {
        if strings.TrimSpace(line) != "" {
            w.appendEntry("INFO", line)
        }
    }
""",
        tick="""
    sample := w.samples[w.sampleIndex%len(w.samples)]
    w.sampleIndex++
    w.appendEntry(sample[0], sample[1])
""",
        extra=LOG_VIEWER_METHODS,
    )


def generate_metric_card(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    previous = b.state["previous"]
    extra = f"""
func (w *WIDGET) record(v float64) {{
    w.previous = w.value
    w.hasPrevious = true
    w.value = v
    w.history = lastN(append(w.history, v), {bh.METRIC_CARD_HISTORY})
}}
"""
    return _widget_struct(
        b,
        options,
        "Metric card",
        fields=[
            ("label", "string", go_str(props.label)),
            ("format", "string", go_str(props.format.value)),
            ("showTrend", "bool", go_bool(props.trend)),
            ("showSparkline", "bool", go_bool(props.sparkline)),
            ("value", "float64", number_literal(b.state["value"])),
            ("previous", "float64", None if previous is None else number_literal(previous)),
            ("hasPrevious", "bool", None if previous is None else "true"),
            ("history", "[]float64", go_floats(b.state["history"])),
        ],
        render=f"""
    lines := []string{{w.label, formatMetricValue(w.value, w.format)}}
    if w.showTrend {{
        lines = append(lines, trendText(w.value, w.previous, w.hasPrevious))
    }}
    if w.showSparkline && len(w.history) > 1 {{
        lines = append(lines, sparklineGlyphs(lastN(w.history, {bh.METRIC_CARD_SPARK_POINTS}), "bar"))
    }}
    return strings.Join(lines, "\\n")
""",
        update="""
    w.record(toNumber(value, w.value))
""",
        tick=f"""
    drift := (rand.Float64()*2 - 1) * {bh.METRIC_CARD_DRIFT}
    w.record(math.Round(w.value*(1+drift)*100) / 100)
""",
        extra=extra,
    )


def generate_placeholder(widget: Widget, options: CodeGenOptions) -> str:
    """Static label for widget types no template exists for."""
    b = WidgetBehavior(widget=widget, kind=None, simulate=False)
    return _widget_struct(
        b,
        options,
        "Placeholder",
        fields=[("widgetType", "string", go_str(widget.type))],
        render="""
    return w.title + " (" + w.widgetType + ")"
""",
        update="",
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
