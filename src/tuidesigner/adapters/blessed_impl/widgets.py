"""
blessed (Node.js) widget templates.

Each widget becomes a plain class with ``render()``, ``update(value)`` and
``tick()``. The app owns one blessed box per widget and copies
``render()`` into it; widgets never touch the screen themselves.
"""

from __future__ import annotations

from collections.abc import Callable

from tuidesigner.codegen import behavior as bh
from tuidesigner.codegen.behavior import WidgetBehavior, widget_behavior
from tuidesigner.codegen.options import CodeGenOptions
from tuidesigner.codegen.utils import comment_text, js_literal, js_str, widget_class_name
from tuidesigner.core.ir import Widget, WidgetType, widget_properties

HELPER_FUNCTIONS = """
function toNumber(value, fallback = 0) {
  if (typeof value === "number") return value;
  if (typeof value === "boolean") return value ? 1 : 0;
  const text = String(value).trim();
  const parsed = text === "" ? NaN : Number(text);
  return Number.isNaN(parsed) ? fallback : parsed;
}

function valueText(value) {
  return typeof value === "string" ? value : JSON.stringify(value);
}

function displayValue(value) {
  return typeof value === "number" ? formatNumber(value) : valueText(value);
}

function plainNumber(value) {
  return Number.isInteger(value) ? String(value) : value.toFixed(1);
}

function formatBytes(value) {
  let size = value;
  for (const unit of ["B", "KB", "MB", "GB"]) {
    if (size < 1024) return `${size.toFixed(1)} ${unit}`;
    size /= 1024;
  }
  return `${size.toFixed(1)} TB`;
}

function formatNumber(value) {
  if (value >= 1000000) return `${(value / 1000000).toFixed(1)}M`;
  if (value >= 1000) return `${(value / 1000).toFixed(1)}K`;
  return value.toFixed(1);
}

function formatMetricValue(value, format) {
  if (format === "percentage") return `${value.toFixed(1)}%`;
  if (format === "bytes") return formatBytes(value);
  return formatNumber(value);
}

// Min/max-normalized glyph ramp.
function sparklineGlyphs(values, style) {
  if (values.length === 0) return "";
  const ramp = Array.from(style === "bar" ? BAR_RAMP : LINE_RAMP);
  const low = Math.min(...values);
  const high = Math.max(...values);
  if (high === low) {
    return (style === "bar" ? ramp[Math.floor(ramp.length / 2)] : FLAT_LINE).repeat(values.length);
  }
  const top = ramp.length - 1;
  return values.map((v) => ramp[Math.trunc(((v - low) / (high - low)) * top)]).join("");
}

function normalize(value, low, high) {
  if (high <= low) return 0;
  return Math.min(Math.max((value - low) / (high - low), 0), 1);
}

function trendText(current, previous) {
  if (previous === null || current === previous) return `${TREND_FLAT} No change`;
  const diff = current - previous;
  if (diff > 0) return `${TREND_UP} +${diff.toFixed(1)}`;
  return `${TREND_DOWN} ${diff.toFixed(1)}`;
}

function truncate(text, width) {
  return Array.from(text).slice(0, width).join("");
}

function formatRow(cells) {
  return cells
    .map((cell) => truncate(String(cell), COLUMN_WIDTH).padEnd(COLUMN_WIDTH))
    .join(" ")
    .trimEnd();
}

function randomInt(low, high) {
  return Math.floor(Math.random() * (high - low + 1)) + low;
}

function clockTime() {
  return new Date().toTimeString().slice(0, 8);
}

// Wrap or clip each line to width, then align it.
function layoutText(text, width, align, wrap) {
  const lines = [];
  for (const line of String(text).split("\\n")) {
    const chars = Array.from(line);
    const chunks = [];
    if (wrap && chars.length > width) {
      for (let i = 0; i < chars.length; i += width) chunks.push(chars.slice(i, i + width).join(""));
    } else {
      chunks.push(truncate(line, width));
    }
    for (const chunk of chunks) {
      const pad = width - Array.from(chunk).length;
      if (align === "center") lines.push((" ".repeat(Math.floor(pad / 2)) + chunk).trimEnd());
      else if (align === "right") lines.push(" ".repeat(pad) + chunk);
      else lines.push(chunk);
    }
  }
  return lines.join("\\n");
}
"""


def generate_helpers() -> str:
    """Glyph and timing constants plus shared helper functions."""
    constants = f"""
const FILL = {js_str(bh.FILL_GLYPH)};
const EMPTY = {js_str(bh.EMPTY_GLYPH)};
const LINE_RAMP = {js_str(bh.SPARKLINE_LINE_RAMP)};
const BAR_RAMP = {js_str(bh.SPARKLINE_BAR_RAMP)};
const FLAT_LINE = {js_str(bh.SPARKLINE_FLAT_LINE)};
const GAUGE_GLYPHS = {js_str(bh.GAUGE_GLYPHS)};
const POINT = {js_str(bh.PLOT_POINT)};
const GRID = {js_str(bh.PLOT_GRID)};
const TREND_UP = {js_str(bh.TREND_UP)};
const TREND_DOWN = {js_str(bh.TREND_DOWN)};
const TREND_FLAT = {js_str(bh.TREND_FLAT)};
const BAR_BAND = {bh.BAR_BAND};
const ARC_CELLS = {bh.GAUGE_ARC_CELLS};
const COLUMN_WIDTH = {bh.TABLE_COLUMN_WIDTH};
const ANIMATION_TICK_MS = {bh.ANIMATION_TICK_MS};
const PROGRESS_STEP = {bh.PROGRESS_STEP};
const SPARKLINE_STEP = {bh.SPARKLINE_STEP};
const SPARKLINE_HISTORY = {bh.SPARKLINE_HISTORY};
const METRIC_CARD_HISTORY = {bh.METRIC_CARD_HISTORY};
const METRIC_CARD_SPARK_POINTS = {bh.METRIC_CARD_SPARK_POINTS};
const METRIC_CARD_DRIFT = {bh.METRIC_CARD_DRIFT};
const SERIES_NAME = {js_str(bh.LINE_CHART_SERIES)};
const LOG_SAMPLES = {js_literal(bh.LOG_SAMPLE)};
"""
    return constants.strip("\n") + "\n" + HELPER_FUNCTIONS.rstrip("\n")


# =============================================================================
# Class skeleton
# =============================================================================


def _method(name: str, params: str, body: str) -> list[str]:
    body = body.strip("\n")
    if not body:
        return [f"  {name}({params}) {{}}"]
    return [f"  {name}({params}) {{", body, "  }"]


def _widget_class(
    b: WidgetBehavior,
    options: CodeGenOptions,
    description: str,
    state: list[tuple[str, str]],
    render: str,
    update: str,
    tick: str | None = None,
    init: str = "",
    extra: str = "",
) -> str:
    """
    Assemble one widget class.

    ``state`` is a list of (property, JS expression) pairs. Method bodies
    are written at four spaces; ``extra`` holds additional methods.
    """
    widget = b.widget
    name = widget_class_name(widget.id)
    ticks = tick is not None and b.tick_ms is not None
    props = [
        ("title", js_str(widget.display_title)),
        ("width", str(b.inner_width)),
        ("height", str(b.inner_height)),
    ]
    if ticks and b.tick_ms != bh.ANIMATION_TICK_MS:
        props.append(("elapsed", "0"))
    props += state

    lines = []
    if options.include_comments:
        lines.append(f"// {description}: {comment_text(widget.id)}")
    lines.append(f"class {name} {{")
    lines.append("  constructor() {")
    lines += [f"    this.{prop} = {value};" for prop, value in props]
    if init:
        lines.append(init.strip("\n"))
    lines.append("  }")
    lines.append("")
    lines += _method("render", "", render)
    lines.append("")
    lines += _method("update", "value", update)
    lines.append("")
    if ticks:
        gate = ""
        if b.tick_ms != bh.ANIMATION_TICK_MS:
            gate = "\n".join(
                [
                    "    this.elapsed += ANIMATION_TICK_MS;",
                    f"    if (this.elapsed < {b.tick_ms}) return;",
                    "    this.elapsed = 0;",
                ]
            )
        lines += _method("tick", "", f"{gate}\n{tick.strip(chr(10))}")
    else:
        lines += _method("tick", "", "")
    if extra:
        lines.append("")
        lines.append(extra.strip("\n"))
    lines.append("}")
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
            ("content", js_str(b.state["content"])),
            ("align", js_str(props.align.value)),
            ("wrap", js_literal(props.wrap)),
            ("bound", "null"),
        ],
        render="""
    const text = this.bound === null ? this.content : `${this.title}: ${this.bound}`;
    return layoutText(text, this.width, this.align, this.wrap);
""",
        update="""
    this.bound = displayValue(value);
""",
    )


def generate_line_chart(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    return _widget_class(
        b,
        options,
        "Line chart",
        state=[
            ("labels", js_literal(b.state["labels"])),
            ("values", js_literal(b.state["values"])),
            ("xLabel", js_str(props.x_label)),
            ("yLabel", js_str(props.y_label)),
            ("showGrid", js_literal(props.show_grid)),
            ("showLegend", js_literal(props.show_legend)),
            ("maxPoints", str(props.max_points)),
            ("live", "false"),
        ],
        render="""
    const rows = Math.max(this.height - 1 - (this.showLegend ? 1 : 0), 1);
    const values = this.values.slice(-this.maxPoints);
    const lines = [];
    if (values.length > 0) {
      const low = Math.min(...values);
      const high = Math.max(...values);
      const span = high - low || 1;
      const blank = this.showGrid ? GRID : " ";
      const levels = values.map((v) => Math.trunc(((v - low) / span) * (rows - 1)));
      for (let row = rows - 1; row >= 0; row--) {
        lines.push(levels.map((level) => (level === row ? POINT : blank)).join(" "));
      }
    }
    if (this.labels.length > 0) {
      lines.push(`${this.xLabel}: ${this.labels[0]} .. ${this.labels[this.labels.length - 1]}`);
    } else {
      lines.push(`${this.xLabel}: last ${values.length} samples`);
    }
    if (this.showLegend) lines.push(`${POINT} ${SERIES_NAME} (${this.yLabel})`);
    return lines.join("\\n");
""",
        update="""
    if (Array.isArray(value)) {
      this.values = value.map((v) => toNumber(v)).slice(-this.maxPoints);
    } else {
      if (!this.live) this.values = [];
      this.values = [...this.values, toNumber(value)].slice(-this.maxPoints);
    }
    this.labels = [];
    this.live = true;
""",
    )


BAR_CHART_METHODS = """
  renderVertical(bars) {
    const values = bars.map(([, value]) => value);
    const widths = bars.map(([label, value]) =>
      Math.max(2, Array.from(String(label)).length, this.showValues ? plainNumber(value).length : 0)
    );
    const rows = Math.max(this.height - 2, 1);
    const top = Math.max(...values, 0);
    let band = BAR_BAND;
    while (Math.ceil(top / band) > rows) band += BAR_BAND;
    const lines = [];
    for (let level = Math.ceil(top / band) * band; level > 0; level -= band) {
      lines.push(values.map((v, i) => (v >= level ? FILL : " ").repeat(widths[i])).join(" ").trimEnd());
    }
    if (this.showLegend) lines.push(bars.map(([label], i) => String(label).padEnd(widths[i])).join(" "));
    if (this.showValues) lines.push(values.map((v, i) => plainNumber(v).padEnd(widths[i])).join(" "));
    return lines.join("\\n");
  }

  renderHorizontal(bars) {
    const labelWidth = Math.max(...bars.map(([label]) => Array.from(String(label)).length));
    const top = Math.max(...bars.map(([, value]) => value), 1);
    const room = Math.max(this.width - labelWidth - 8, 1);
    return bars
      .map(([label, value]) => {
        let line = `${String(label).padEnd(labelWidth)} │${FILL.repeat(Math.trunc((Math.max(value, 0) / top) * room))}`;
        if (this.showValues) line += ` ${plainNumber(value)}`;
        return line;
      })
      .join("\\n");
  }
"""


def generate_bar_chart(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    return _widget_class(
        b,
        options,
        "Bar chart",
        state=[
            ("bars", js_literal(b.state["bars"])),
            ("orientation", js_str(props.orientation.value)),
            ("showValues", js_literal(props.show_values)),
            ("showLegend", js_literal(props.show_legend)),
            ("maxBars", str(props.max_bars)),
        ],
        render="""
    const bars = this.bars.slice(0, this.maxBars);
    if (bars.length === 0) return "No data";
    return this.orientation === "horizontal" ? this.renderHorizontal(bars) : this.renderVertical(bars);
""",
        update="""
    let bars;
    if (Array.isArray(value)) {
      bars = value.map((item, index) =>
        Array.isArray(item) && item.length >= 2
          ? [String(item[0]), toNumber(item[1])]
          : [String(index + 1), toNumber(item)]
      );
    } else if (value !== null && typeof value === "object") {
      bars = Object.entries(value).map(([key, v]) => [key, toNumber(v)]);
    } else {
      return;
    }
    this.bars = bars.slice(0, this.maxBars);
""",
        extra=BAR_CHART_METHODS,
    )


def generate_table(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    return _widget_class(
        b,
        options,
        "Table",
        state=[
            ("headers", js_literal(b.state["headers"])),
            ("rows", js_literal(b.state["rows"])),
            ("showHeaders", js_literal(props.show_headers)),
            ("sortable", js_literal(props.sortable)),
            ("filterable", js_literal(props.filterable)),
            ("maxRows", str(props.max_rows)),
        ],
        render="""
    const lines = [];
    if (this.showHeaders) {
      lines.push(formatRow(this.headers));
      lines.push("─".repeat(Math.min(this.headers.length * (COLUMN_WIDTH + 1), this.width)));
    }
    for (const row of this.rows.slice(0, this.maxRows)) lines.push(formatRow(row));
    return lines.join("\\n");
""",
        update="""
    if (!Array.isArray(value) || value.length === 0) return;
    let rows;
    const first = value[0];
    if (first !== null && typeof first === "object" && !Array.isArray(first)) {
      this.headers = Object.keys(first);
      rows = value.map((item) => this.headers.map((h) => (item && h in item ? valueText(item[h]) : "")));
    } else {
      rows = value.map((row) => (Array.isArray(row) ? row.map(valueText) : [valueText(row)]));
    }
    this.rows = rows.slice(0, this.maxRows);
""",
    )


def generate_progress_bar(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    return _widget_class(
        b,
        options,
        "Progress bar",
        state=[
            ("percent", js_literal(b.state["percent"])),
            ("showPercentage", js_literal(props.show_percentage)),
            ("animated", js_literal(props.animated)),
            ("minValue", js_literal(props.min)),
            ("maxValue", js_literal(props.max)),
        ],
        render="""
    const width = Math.max(this.width - (this.showPercentage ? 8 : 0), 1);
    const filled = Math.min(Math.trunc((this.percent / 100) * width), width);
    const bar = FILL.repeat(filled) + EMPTY.repeat(width - filled);
    return this.showPercentage ? `${bar} ${this.percent.toFixed(1)}%` : bar;
""",
        update="""
    this.percent = normalize(toNumber(value), this.minValue, this.maxValue) * 100;
""",
        tick="""
    this.percent += PROGRESS_STEP;
    if (this.percent > 100) this.percent = 0;
""",
    )


def generate_sparkline(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    return _widget_class(
        b,
        options,
        "Sparkline",
        state=[
            ("values", js_literal(b.state["values"])),
            ("style", js_str(props.style.value)),
            ("showMinMax", js_literal(props.show_min_max)),
            ("showCurrent", js_literal(props.show_current)),
        ],
        render="""
    const values = this.values.slice(-this.width);
    const lines = [sparklineGlyphs(values, this.style)];
    const parts = [];
    if (values.length > 0 && this.showMinMax) {
      parts.push(`Min: ${plainNumber(Math.min(...values))}`);
      parts.push(`Max: ${plainNumber(Math.max(...values))}`);
    }
    if (values.length > 0 && this.showCurrent) {
      parts.push(`Current: ${plainNumber(values[values.length - 1])}`);
    }
    if (parts.length > 0) lines.push(parts.join("  "));
    return lines.join("\\n");
""",
        update="""
    if (Array.isArray(value)) {
      this.values = value.map((v) => toNumber(v)).slice(-SPARKLINE_HISTORY);
    } else {
      this.values = [...this.values, toNumber(value)].slice(-SPARKLINE_HISTORY);
    }
""",
        tick="""
    const last = this.values.length > 0 ? this.values[this.values.length - 1] : 0;
    const step = randomInt(-SPARKLINE_STEP, SPARKLINE_STEP);
    this.values = [...this.values, Math.max(0, last + step)].slice(-SPARKLINE_HISTORY);
""",
    )


def generate_gauge(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    return _widget_class(
        b,
        options,
        "Gauge",
        state=[
            ("value", js_literal(b.state["value"])),
            ("minValue", js_literal(props.min)),
            ("maxValue", js_literal(props.max)),
            ("showValue", js_literal(props.show_value)),
            ("units", js_str(props.units)),
        ],
        render="""
    const ratio = normalize(this.value, this.minValue, this.maxValue);
    const glyphs = Array.from(GAUGE_GLYPHS);
    const filled = Math.trunc(ratio * ARC_CELLS);
    const lines = [glyphs[Math.trunc(ratio * (glyphs.length - 1))], FILL.repeat(filled) + EMPTY.repeat(ARC_CELLS - filled)];
    if (this.showValue) lines.push(`${plainNumber(this.value)}${this.units}`);
    return lines.join("\\n");
""",
        update="""
    this.value = toNumber(value, this.value);
""",
    )


LOG_VIEWER_METHODS = """
  appendEntry(level, message) {
    let line = `${level}: ${message}`;
    if (this.showTimestamp) line = `[${clockTime()}] ${line}`;
    this.entries.push(line);
    if (this.entries.length > this.maxLines) this.entries = this.entries.slice(-this.maxLines);
  }
"""


def generate_log_viewer(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    init = ""
    if b.state["seed"]:
        init = f"""
    for (const [level, message] of {js_literal(b.state["seed"])}) {{
      this.appendEntry(level, message);
    }}
"""
    return _widget_class(
        b,
        options,
        "Log viewer",
        state=[
            ("maxLines", str(props.max_lines)),
            ("autoScroll", js_literal(props.auto_scroll)),
            ("showTimestamp", js_literal(props.show_timestamp)),
            ("filter", js_str(props.filter)),
            ("sampleIndex", "0"),
            ("entries", "[]"),
        ],
        init=init,
        render="""
    let lines = this.entries;
    if (this.filter) {
      const needle = this.filter.toLowerCase();
      lines = lines.filter((line) => line.toLowerCase().includes(needle));
    }
    const visible = Math.max(this.height, 1);
    lines = this.autoScroll ? lines.slice(-visible) : lines.slice(0, visible);
    return lines.join("\\n");
""",
        update="""
    const items = Array.isArray(value)
      ? value.map(valueText)
      : valueText(value).split("\\n").filter((line) => line.trim() !== "");
    for (const item of items) this.appendEntry("INFO", item);
""",
        tick="""
    const [level, message] = LOG_SAMPLES[this.sampleIndex % LOG_SAMPLES.length];
    this.sampleIndex += 1;
    this.appendEntry(level, message);
""",
        extra=LOG_VIEWER_METHODS,
    )


def generate_metric_card(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    extra = """
  record(value) {
    this.previous = this.value;
    this.value = value;
    this.history = [...this.history, value].slice(-METRIC_CARD_HISTORY);
  }
"""
    return _widget_class(
        b,
        options,
        "Metric card",
        state=[
            ("label", js_str(props.label)),
            ("format", js_str(props.format.value)),
            ("showTrend", js_literal(props.trend)),
            ("showSparkline", js_literal(props.sparkline)),
            ("value", js_literal(b.state["value"])),
            ("previous", js_literal(b.state["previous"])),
            ("history", js_literal(b.state["history"])),
        ],
        render="""
    const lines = [this.label, formatMetricValue(this.value, this.format)];
    if (this.showTrend) lines.push(trendText(this.value, this.previous));
    if (this.showSparkline && this.history.length > 1) {
      lines.push(sparklineGlyphs(this.history.slice(-METRIC_CARD_SPARK_POINTS), "bar"));
    }
    return lines.join("\\n");
""",
        update="""
    this.record(toNumber(value, this.value));
""",
        tick="""
    const drift = (Math.random() * 2 - 1) * METRIC_CARD_DRIFT;
    this.record(Math.round(this.value * (1 + drift) * 100) / 100);
""",
        extra=extra,
    )


def generate_placeholder(widget: Widget, options: CodeGenOptions) -> str:
    """Static label for widget types no template exists for."""
    b = WidgetBehavior(widget=widget, kind=None, simulate=False)
    return _widget_class(
        b,
        options,
        "Placeholder",
        state=[("widgetType", js_str(widget.type))],
        render="""
    return `${this.title} (${this.widgetType})`;
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
