"""
Ratatui (Rust) widget templates.

Each widget becomes a struct implementing the ``DashboardWidget`` trait.
``render_text`` returns the text drawn inside the widget's bordered block,
``update`` takes pushed ``serde_json::Value`` data, and ``tick`` runs on
every animation tick. Simulated widgets draw from a small xorshift
generator so the generated crate needs no extra dependency for it.
"""

from __future__ import annotations

from collections.abc import Callable

from tuidesigner.codegen import behavior as bh
from tuidesigner.codegen.behavior import WidgetBehavior, widget_behavior
from tuidesigner.codegen.options import CodeGenOptions
from tuidesigner.codegen.utils import (
    comment_text,
    indent,
    number_literal,
    rust_str,
    widget_class_name,
)
from tuidesigner.core.ir import Widget, WidgetType, widget_properties


def rust_bool(value: bool) -> str:
    return "true" if value else "false"


def rust_string(value: str) -> str:
    return f"String::from({rust_str(value)})"


def rust_floats(values: list[float]) -> str:
    if not values:
        return "Vec::new()"
    return "vec![" + ", ".join(number_literal(v) for v in values) + "]"


def rust_strings(values: list[str]) -> str:
    return "strings(&[" + ", ".join(rust_str(str(v)) for v in values) + "])"


def rust_rows(rows: list[list[str]]) -> str:
    if not rows:
        return "Vec::new()"
    return "vec![" + ", ".join(rust_strings(row) for row in rows) + "]"


def rust_bars(bars: list[list]) -> str:
    items = ", ".join(f"({rust_str(str(label))}, {number_literal(value)})" for label, value in bars)
    return f"bars(&[{items}])"


def rust_pairs(pairs: list[list[str]]) -> str:
    return "[" + ", ".join(f"({rust_str(a)}, {rust_str(b)})" for a, b in pairs) + "]"


# =============================================================================
# Helpers
# =============================================================================

HELPER_FUNCTIONS = """
/// Implemented by every generated widget.
pub trait DashboardWidget {
    fn title(&self) -> &str;
    fn render_text(&self) -> String;
    fn update(&mut self, value: &Value);
    fn tick(&mut self);
}

/// Small xorshift generator for simulated data.
pub struct Rng(u64);

impl Rng {
    pub fn seeded() -> Self {
        let nanos = SystemTime::now()
            .duration_since(UNIX_EPOCH)
            .map(|d| d.as_nanos() as u64)
            .unwrap_or(0x2545_F491_4F6C_DD1D);
        Rng(nanos | 1)
    }

    pub fn next_f64(&mut self) -> f64 {
        self.0 ^= self.0 << 13;
        self.0 ^= self.0 >> 7;
        self.0 ^= self.0 << 17;
        (self.0 >> 11) as f64 / (1u64 << 53) as f64
    }

    /// Uniform integer in [low, high].
    pub fn range(&mut self, low: i64, high: i64) -> i64 {
        low + (self.next_f64() * (high - low + 1) as f64) as i64
    }
}

fn strings(items: &[&str]) -> Vec<String> {
    items.iter().map(|s| s.to_string()).collect()
}

fn bars(items: &[(&str, f64)]) -> Vec<(String, f64)> {
    items.iter().map(|(label, value)| (label.to_string(), *value)).collect()
}

fn to_number(value: &Value, fallback: f64) -> f64 {
    match value {
        Value::Number(n) => n.as_f64().unwrap_or(fallback),
        Value::Bool(b) => {
            if *b {
                1.0
            } else {
                0.0
            }
        }
        Value::String(s) => s.trim().parse().unwrap_or(fallback),
        _ => fallback,
    }
}

fn value_text(value: &Value) -> String {
    match value {
        Value::String(s) => s.clone(),
        other => other.to_string(),
    }
}

fn display_value(value: &Value) -> String {
    match value {
        Value::Number(n) => format_number(n.as_f64().unwrap_or(0.0)),
        other => value_text(other),
    }
}

fn plain_number(v: f64) -> String {
    if v == v.trunc() {
        format!("{}", v as i64)
    } else {
        format!("{:.1}", v)
    }
}

fn format_bytes(v: f64) -> String {
    let mut size = v;
    for unit in ["B", "KB", "MB", "GB"] {
        if size < 1024.0 {
            return format!("{:.1} {}", size, unit);
        }
        size /= 1024.0;
    }
    format!("{:.1} TB", size)
}

fn format_number(v: f64) -> String {
    if v >= 1_000_000.0 {
        format!("{:.1}M", v / 1_000_000.0)
    } else if v >= 1_000.0 {
        format!("{:.1}K", v / 1_000.0)
    } else {
        format!("{:.1}", v)
    }
}

fn format_metric_value(v: f64, format: &str) -> String {
    match format {
        "percentage" => format!("{:.1}%", v),
        "bytes" => format_bytes(v),
        _ => format_number(v),
    }
}

fn min_max(values: &[f64]) -> (f64, f64) {
    values
        .iter()
        .fold((f64::INFINITY, f64::NEG_INFINITY), |(lo, hi), &v| (lo.min(v), hi.max(v)))
}

fn last_n(values: &[f64], n: usize) -> Vec<f64> {
    values[values.len().saturating_sub(n)..].to_vec()
}

fn push_capped(values: &mut Vec<f64>, v: f64, cap: usize) {
    values.push(v);
    if values.len() > cap {
        let excess = values.len() - cap;
        values.drain(..excess);
    }
}

/// Map values onto a min/max-normalized glyph ramp.
fn sparkline_glyphs(values: &[f64], style: &str) -> String {
    if values.is_empty() {
        return String::new();
    }
    let ramp: Vec<char> = if style == "bar" { BAR_RAMP } else { LINE_RAMP }.chars().collect();
    let (low, high) = min_max(values);
    if high == low {
        if style == "bar" {
            return ramp[ramp.len() / 2].to_string().repeat(values.len());
        }
        return FLAT_LINE.repeat(values.len());
    }
    let top = (ramp.len() - 1) as f64;
    values
        .iter()
        .map(|v| ramp[((v - low) / (high - low) * top) as usize])
        .collect()
}

fn normalize(v: f64, low: f64, high: f64) -> f64 {
    if high <= low {
        return 0.0;
    }
    ((v - low) / (high - low)).clamp(0.0, 1.0)
}

fn trend_text(current: f64, previous: Option<f64>) -> String {
    match previous {
        Some(prev) if current != prev => {
            let diff = current - prev;
            if diff > 0.0 {
                format!("{} +{:.1}", TREND_UP, diff)
            } else {
                format!("{} {:.1}", TREND_DOWN, diff)
            }
        }
        _ => format!("{} No change", TREND_FLAT),
    }
}

fn truncate(s: &str, n: usize) -> String {
    s.chars().take(n).collect()
}

fn pad_right(s: &str, width: usize) -> String {
    format!("{:<width$}", s, width = width)
}

fn format_row(cells: &[String]) -> String {
    cells
        .iter()
        .map(|cell| pad_right(&truncate(cell, COLUMN_WIDTH), COLUMN_WIDTH))
        .collect::<Vec<_>>()
        .join(" ")
        .trim_end()
        .to_string()
}

/// Wall clock time of day (UTC) as HH:MM:SS.
fn clock_time() -> String {
    let secs = SystemTime::now()
        .duration_since(UNIX_EPOCH)
        .map(|d| d.as_secs())
        .unwrap_or(0)
        % 86_400;
    format!("{:02}:{:02}:{:02}", secs / 3600, secs / 60 % 60, secs % 60)
}

/// Wrap or clip each line to width, then align it.
fn layout_text(text: &str, width: usize, align: &str, wrap: bool) -> String {
    let mut lines = Vec::new();
    for line in text.split('\\n') {
        let chars: Vec<char> = line.chars().collect();
        let chunks: Vec<String> = if wrap && chars.len() > width {
            chars.chunks(width).map(|c| c.iter().collect()).collect()
        } else {
            vec![truncate(line, width)]
        };
        for chunk in chunks {
            let pad = width.saturating_sub(chunk.chars().count());
            lines.push(match align {
                "center" => format!("{}{}", " ".repeat(pad / 2), chunk).trim_end().to_string(),
                "right" => format!("{}{}", " ".repeat(pad), chunk),
                _ => chunk,
            });
        }
    }
    lines.join("\\n")
}
"""


def generate_helpers() -> str:
    """Glyph constants, the widget trait and shared helper functions."""
    samples = ", ".join(f"({rust_str(a)}, {rust_str(b)})" for a, b in bh.LOG_SAMPLE)
    constants = f"""
const FILL: &str = {rust_str(bh.FILL_GLYPH)};
const EMPTY: &str = {rust_str(bh.EMPTY_GLYPH)};
const LINE_RAMP: &str = {rust_str(bh.SPARKLINE_LINE_RAMP)};
const BAR_RAMP: &str = {rust_str(bh.SPARKLINE_BAR_RAMP)};
const FLAT_LINE: &str = {rust_str(bh.SPARKLINE_FLAT_LINE)};
const GAUGE_GLYPHS: &str = {rust_str(bh.GAUGE_GLYPHS)};
const POINT: &str = {rust_str(bh.PLOT_POINT)};
const GRID: &str = {rust_str(bh.PLOT_GRID)};
const TREND_UP: &str = {rust_str(bh.TREND_UP)};
const TREND_DOWN: &str = {rust_str(bh.TREND_DOWN)};
const TREND_FLAT: &str = {rust_str(bh.TREND_FLAT)};
const BAR_BAND: i64 = {bh.BAR_BAND};
const ARC_CELLS: usize = {bh.GAUGE_ARC_CELLS};
const COLUMN_WIDTH: usize = {bh.TABLE_COLUMN_WIDTH};
const ANIMATION_TICK_MS: u64 = {bh.ANIMATION_TICK_MS};
const LOG_SAMPLES: &[(&str, &str)] = &[{samples}];
"""
    return constants.strip("\n") + "\n" + HELPER_FUNCTIONS.rstrip("\n")


# =============================================================================
# Struct skeleton
# =============================================================================


def _widget_struct(
    b: WidgetBehavior,
    options: CodeGenOptions,
    description: str,
    fields: list[tuple[str, str, str]],
    render: str,
    update: str,
    tick: str | None = None,
    init: str = "",
    extra: str = "",
    uses_rng: bool = False,
) -> str:
    """
    Assemble one widget struct and its trait impl.

    ``fields`` are (name, Rust type, initial expression). Method bodies are
    written at one level of indentation; ``extra`` holds inherent methods.
    """
    widget = b.widget
    name = widget_class_name(widget.id)
    ticks = tick is not None and b.tick_ms is not None
    all_fields = [
        ("title", "String", rust_string(widget.display_title)),
        ("width", "usize", str(b.inner_width)),
        ("height", "usize", str(b.inner_height)),
    ]
    if ticks and b.tick_ms != bh.ANIMATION_TICK_MS:
        all_fields.append(("elapsed", "u64", "0"))
    if ticks and uses_rng:
        all_fields.append(("rng", "Rng", "Rng::seeded()"))
    all_fields += fields

    lines = []
    if options.include_comments:
        lines.append(f"/// {description} widget `{comment_text(widget.id)}`.")
    lines.append(f"pub struct {name} {{")
    lines += [f"    {f}: {t}," for f, t, _ in all_fields]
    lines += ["}", "", f"impl {name} {{", "    pub fn new() -> Self {"]
    initializer = [f"            {f}: {v}," for f, _, v in all_fields]
    if init:
        lines.append("        let mut w = Self {")
        lines += initializer
        lines.append("        };")
        lines.append(indent(init.strip("\n"), 4))
        lines.append("        w")
    else:
        lines.append("        Self {")
        lines += initializer
        lines.append("        }")
    lines.append("    }")
    if extra:
        lines.append("")
        lines.append(extra.strip("\n"))
    lines += ["}", "", f"impl DashboardWidget for {name} {{"]
    lines += ["    fn title(&self) -> &str {", "        &self.title", "    }", ""]
    lines += ["    fn render_text(&self) -> String {", indent(render.strip("\n"), 4), "    }", ""]
    if update.strip():
        lines += ["    fn update(&mut self, value: &Value) {", indent(update.strip("\n"), 4), "    }"]
    else:
        lines.append("    fn update(&mut self, _value: &Value) {}")
    lines.append("")
    if ticks:
        lines.append("    fn tick(&mut self) {")
        if b.tick_ms != bh.ANIMATION_TICK_MS:
            lines += [
                "        self.elapsed += ANIMATION_TICK_MS;",
                f"        if self.elapsed < {b.tick_ms} {{",
                "            return;",
                "        }",
                "        self.elapsed = 0;",
            ]
        lines.append(indent(tick.strip("\n"), 4))
        lines.append("    }")
    else:
        lines.append("    fn tick(&mut self) {}")
    lines.append("}")
    return "\n".join(lines)


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
            ("content", "String", rust_string(b.state["content"])),
            ("align", "String", rust_string(props.align.value)),
            ("wrap", "bool", rust_bool(props.wrap)),
            ("bound", "Option<String>", "None"),
        ],
        render="""
    let text = match &self.bound {
        Some(value) => format!("{}: {}", self.title, value),
        None => self.content.clone(),
    };
    layout_text(&text, self.width, &self.align, self.wrap)
""",
        update="""
    self.bound = Some(display_value(value));
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
            ("labels", "Vec<String>", rust_strings(b.state["labels"])),
            ("values", "Vec<f64>", rust_floats(b.state["values"])),
            ("x_label", "String", rust_string(props.x_label)),
            ("y_label", "String", rust_string(props.y_label)),
            ("show_grid", "bool", rust_bool(props.show_grid)),
            ("show_legend", "bool", rust_bool(props.show_legend)),
            ("max_points", "usize", str(props.max_points)),
            ("live", "bool", "false"),
        ],
        render=f"""
    let legend_rows = if self.show_legend {{ 1 }} else {{ 0 }};
    let rows = (self.height as i64 - 1 - legend_rows).max(1);
    let values = last_n(&self.values, self.max_points);
    let mut lines: Vec<String> = Vec::new();
    if !values.is_empty() {{
        let (low, high) = min_max(&values);
        let span = if high == low {{ 1.0 }} else {{ high - low }};
        let blank = if self.show_grid {{ GRID }} else {{ " " }};
        for row in (0..rows).rev() {{
            let cells: Vec<&str> = values
                .iter()
                .map(|v| {{
                    if ((v - low) / span * (rows - 1) as f64) as i64 == row {{
                        POINT
                    }} else {{
                        blank
                    }}
                }})
                .collect();
            lines.push(cells.join(" "));
        }}
    }}
    match (self.labels.first(), self.labels.last()) {{
        (Some(first), Some(last)) => lines.push(format!("{{}}: {{}} .. {{}}", self.x_label, first, last)),
        _ => lines.push(format!("{{}}: last {{}} samples", self.x_label, values.len())),
    }}
    if self.show_legend {{
        lines.push(format!("{{}} {bh.LINE_CHART_SERIES} ({{}})", POINT, self.y_label));
    }}
    lines.join("\\n")
""",
        update="""
    if let Value::Array(items) = value {
        let values: Vec<f64> = items.iter().map(|item| to_number(item, 0.0)).collect();
        self.values = last_n(&values, self.max_points);
    } else {
        if !self.live {
            self.values.clear();
        }
        push_capped(&mut self.values, to_number(value, 0.0), self.max_points);
    }
    self.labels.clear();
    self.live = true;
""",
    )


BAR_CHART_METHODS = """
    fn render_vertical(&self, bars: &[(String, f64)]) -> String {
        let widths: Vec<usize> = bars
            .iter()
            .map(|(label, value)| {
                let mut width = label.chars().count().max(2);
                if self.show_values {
                    width = width.max(plain_number(*value).len());
                }
                width
            })
            .collect();
        let top = bars.iter().fold(0.0_f64, |acc, (_, v)| acc.max(*v));
        let rows = (self.height as i64 - 2).max(1);
        let mut band = BAR_BAND;
        while (top / band as f64).ceil() as i64 > rows {
            band += BAR_BAND;
        }
        let mut lines = Vec::new();
        let mut level = (top / band as f64).ceil() as i64 * band;
        while level > 0 {
            let cells: Vec<String> = bars
                .iter()
                .zip(&widths)
                .map(|((_, v), w)| (if *v >= level as f64 { FILL } else { " " }).repeat(*w))
                .collect();
            lines.push(cells.join(" ").trim_end().to_string());
            level -= band;
        }
        if self.show_legend {
            let labels: Vec<String> = bars.iter().zip(&widths).map(|((label, _), w)| pad_right(label, *w)).collect();
            lines.push(labels.join(" "));
        }
        if self.show_values {
            let values: Vec<String> = bars
                .iter()
                .zip(&widths)
                .map(|((_, v), w)| pad_right(&plain_number(*v), *w))
                .collect();
            lines.push(values.join(" "));
        }
        lines.join("\\n")
    }

    fn render_horizontal(&self, bars: &[(String, f64)]) -> String {
        let label_width = bars.iter().map(|(label, _)| label.chars().count()).max().unwrap_or(0);
        let top = bars.iter().fold(1.0_f64, |acc, (_, v)| acc.max(*v));
        let room = (self.width as i64 - label_width as i64 - 8).max(1) as f64;
        bars.iter()
            .map(|(label, value)| {
                let cells = (value.max(0.0) / top * room) as usize;
                let mut line = format!("{} │{}", pad_right(label, label_width), FILL.repeat(cells));
                if self.show_values {
                    line.push_str(&format!(" {}", plain_number(*value)));
                }
                line
            })
            .collect::<Vec<_>>()
            .join("\\n")
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
            ("bars", "Vec<(String, f64)>", rust_bars(b.state["bars"])),
            ("orientation", "String", rust_string(props.orientation.value)),
            ("show_values", "bool", rust_bool(props.show_values)),
            ("show_legend", "bool", rust_bool(props.show_legend)),
            ("max_bars", "usize", str(props.max_bars)),
        ],
        render="""
    let bars: Vec<(String, f64)> = self.bars.iter().take(self.max_bars).cloned().collect();
    if bars.is_empty() {
        return String::from("No data");
    }
    if self.orientation == "horizontal" {
        self.render_horizontal(&bars)
    } else {
        self.render_vertical(&bars)
    }
""",
        update="""
    let bars: Vec<(String, f64)> = match value {
        Value::Object(map) => map.iter().map(|(k, v)| (k.clone(), to_number(v, 0.0))).collect(),
        Value::Array(items) => items
            .iter()
            .enumerate()
            .map(|(i, item)| match item {
                Value::Array(pair) if pair.len() >= 2 => (value_text(&pair[0]), to_number(&pair[1], 0.0)),
                other => ((i + 1).to_string(), to_number(other, 0.0)),
            })
            .collect(),
        _ => return,
    };
    self.bars = bars.into_iter().take(self.max_bars).collect();
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
            ("headers", "Vec<String>", rust_strings(b.state["headers"])),
            ("rows", "Vec<Vec<String>>", rust_rows(b.state["rows"])),
            ("show_headers", "bool", rust_bool(props.show_headers)),
            ("sortable", "bool", rust_bool(props.sortable)),
            ("filterable", "bool", rust_bool(props.filterable)),
            ("max_rows", "usize", str(props.max_rows)),
        ],
        render="""
    let mut lines = Vec::new();
    if self.show_headers {
        lines.push(format_row(&self.headers));
        lines.push("─".repeat((self.headers.len() * (COLUMN_WIDTH + 1)).min(self.width)));
    }
    lines.extend(self.rows.iter().take(self.max_rows).map(|row| format_row(row)));
    lines.join("\\n")
""",
        update="""
    let items = match value {
        Value::Array(items) if !items.is_empty() => items,
        _ => return,
    };
    let rows: Vec<Vec<String>> = if let Value::Object(first) = &items[0] {
        self.headers = first.keys().cloned().collect();
        items
            .iter()
            .map(|item| {
                self.headers
                    .iter()
                    .map(|header| item.get(header).map(value_text).unwrap_or_default())
                    .collect()
            })
            .collect()
    } else {
        items
            .iter()
            .map(|item| match item {
                Value::Array(cells) => cells.iter().map(value_text).collect(),
                other => vec![value_text(other)],
            })
            .collect()
    };
    self.rows = rows.into_iter().take(self.max_rows).collect();
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
            ("percent", "f64", number_literal(b.state["percent"])),
            ("show_percentage", "bool", rust_bool(props.show_percentage)),
            ("animated", "bool", rust_bool(props.animated)),
            ("min_value", "f64", number_literal(props.min)),
            ("max_value", "f64", number_literal(props.max)),
        ],
        render="""
    let width = if self.show_percentage { self.width.saturating_sub(8) } else { self.width }.max(1);
    let filled = ((self.percent / 100.0 * width as f64) as usize).min(width);
    let bar = format!("{}{}", FILL.repeat(filled), EMPTY.repeat(width - filled));
    if self.show_percentage {
        format!("{} {:.1}%", bar, self.percent)
    } else {
        bar
    }
""",
        update="""
    self.percent = normalize(to_number(value, 0.0), self.min_value, self.max_value) * 100.0;
""",
        tick=f"""
    self.percent += {number_literal(bh.PROGRESS_STEP)};
    if self.percent > 100.0 {{
        self.percent = 0.0;
    }}
""",
    )


def generate_sparkline(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    history = bh.SPARKLINE_HISTORY
    return _widget_struct(
        b,
        options,
        "Sparkline",
        fields=[
            ("values", "Vec<f64>", rust_floats(b.state["values"])),
            ("style", "String", rust_string(props.style.value)),
            ("show_min_max", "bool", rust_bool(props.show_min_max)),
            ("show_current", "bool", rust_bool(props.show_current)),
        ],
        render="""
    let values = last_n(&self.values, self.width);
    let mut lines = vec![sparkline_glyphs(&values, &self.style)];
    let mut parts = Vec::new();
    if !values.is_empty() && self.show_min_max {
        let (low, high) = min_max(&values);
        parts.push(format!("Min: {}", plain_number(low)));
        parts.push(format!("Max: {}", plain_number(high)));
    }
    if let Some(last) = values.last() {
        if self.show_current {
            parts.push(format!("Current: {}", plain_number(*last)));
        }
    }
    if !parts.is_empty() {
        lines.push(parts.join("  "));
    }
    lines.join("\\n")
""",
        update=f"""
    if let Value::Array(items) = value {{
        let values: Vec<f64> = items.iter().map(|item| to_number(item, 0.0)).collect();
        self.values = last_n(&values, {history});
    }} else {{
        push_capped(&mut self.values, to_number(value, 0.0), {history});
    }}
""",
        tick=f"""
    let last = self.values.last().copied().unwrap_or(0.0);
    let step = self.rng.range(-{bh.SPARKLINE_STEP}, {bh.SPARKLINE_STEP}) as f64;
    push_capped(&mut self.values, (last + step).max(0.0), {history});
""",
        uses_rng=True,
    )


def generate_gauge(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    return _widget_struct(
        b,
        options,
        "Gauge",
        fields=[
            ("value", "f64", number_literal(b.state["value"])),
            ("min_value", "f64", number_literal(props.min)),
            ("max_value", "f64", number_literal(props.max)),
            ("show_value", "bool", rust_bool(props.show_value)),
            ("units", "String", rust_string(props.units)),
        ],
        render="""
    let ratio = normalize(self.value, self.min_value, self.max_value);
    let glyphs: Vec<char> = GAUGE_GLYPHS.chars().collect();
    let filled = (ratio * ARC_CELLS as f64) as usize;
    let mut lines = vec![
        glyphs[(ratio * (glyphs.len() - 1) as f64) as usize].to_string(),
        format!("{}{}", FILL.repeat(filled), EMPTY.repeat(ARC_CELLS - filled)),
    ];
    if self.show_value {
        lines.push(format!("{}{}", plain_number(self.value), self.units));
    }
    lines.join("\\n")
""",
        update="""
    self.value = to_number(value, self.value);
""",
    )


LOG_VIEWER_METHODS = """
    fn append_entry(&mut self, level: &str, message: &str) {
        let mut line = format!("{}: {}", level, message);
        if self.show_timestamp {
            line = format!("[{}] {}", clock_time(), line);
        }
        self.entries.push(line);
        if self.entries.len() > self.max_lines {
            let excess = self.entries.len() - self.max_lines;
            self.entries.drain(..excess);
        }
    }
"""


def generate_log_viewer(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    seed = b.state["seed"]
    init = ""
    if seed:
        init = f"""
    for (level, message) in {rust_pairs(seed)} {{
        w.append_entry(level, message);
    }}
"""
    return _widget_struct(
        b,
        options,
        "Log viewer",
        fields=[
            ("max_lines", "usize", str(props.max_lines)),
            ("auto_scroll", "bool", rust_bool(props.auto_scroll)),
            ("show_timestamp", "bool", rust_bool(props.show_timestamp)),
            ("filter", "String", rust_string(props.filter)),
            ("sample_index", "usize", "0"),
            ("entries", "Vec<String>", "Vec::new()"),
        ],
        init=init,
        render="""
    let needle = self.filter.to_lowercase();
    let lines: Vec<&str> = self
        .entries
        .iter()
        .filter(|line| needle.is_empty() || line.to_lowercase().contains(&needle))
        .map(|line| line.as_str())
        .collect();
    let visible = self.height.max(1);
    let shown = if lines.len() <= visible {
        &lines[..]
    } else if self.auto_scroll {
        &lines[lines.len() - visible..]
    } else {
        &lines[..visible]
    };
    shown.join("\\n")
""",
        update="""
    match value {
        Value::Array(items) => {
            for item in items {
                self.append_entry("INFO", &value_text(item));
            }
        }
        other => {
            let text = value_text(other);
            for line in text.lines().filter(|line| !line.trim().is_empty()) {
                self.append_entry("INFO", line);
            }
        }
    }
""",
        tick="""
    let (level, message) = LOG_SAMPLES[self.sample_index % LOG_SAMPLES.len()];
    self.sample_index += 1;
    self.append_entry(level, message);
""",
        extra=LOG_VIEWER_METHODS,
    )


def generate_metric_card(widget: Widget, options: CodeGenOptions) -> str:
    b = widget_behavior(widget, options)
    props = widget_properties(widget)
    previous = b.state["previous"]
    extra = f"""
    fn record(&mut self, v: f64) {{
        self.previous = Some(self.value);
        self.value = v;
        push_capped(&mut self.history, v, {bh.METRIC_CARD_HISTORY});
    }}
"""
    return _widget_struct(
        b,
        options,
        "Metric card",
        fields=[
            ("label", "String", rust_string(props.label)),
            ("format", "String", rust_string(props.format.value)),
            ("show_trend", "bool", rust_bool(props.trend)),
            ("show_sparkline", "bool", rust_bool(props.sparkline)),
            ("value", "f64", number_literal(b.state["value"])),
            ("previous", "Option<f64>", "None" if previous is None else f"Some({number_literal(previous)})"),
            ("history", "Vec<f64>", rust_floats(b.state["history"])),
        ],
        render=f"""
    let mut lines = vec![self.label.clone(), format_metric_value(self.value, &self.format)];
    if self.show_trend {{
        lines.push(trend_text(self.value, self.previous));
    }}
    if self.show_sparkline && self.history.len() > 1 {{
        lines.push(sparkline_glyphs(&last_n(&self.history, {bh.METRIC_CARD_SPARK_POINTS}), "bar"));
    }}
    lines.join("\\n")
""",
        update="""
    let v = to_number(value, self.value);
    self.record(v);
""",
        tick=f"""
    let drift = (self.rng.next_f64() * 2.0 - 1.0) * {bh.METRIC_CARD_DRIFT};
    let v = (self.value * (1.0 + drift) * 100.0).round() / 100.0;
    self.record(v);
""",
        extra=extra,
        uses_rng=True,
    )


def generate_placeholder(widget: Widget, options: CodeGenOptions) -> str:
    """Static label for widget types no template exists for."""
    b = WidgetBehavior(widget=widget, kind=None, simulate=False)
    return _widget_struct(
        b,
        options,
        "Placeholder",
        fields=[("widget_type", "String", rust_string(widget.type))],
        render="""
    format!("{} ({})", self.title, self.widget_type)
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
