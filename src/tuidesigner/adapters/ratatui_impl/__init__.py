"""
Ratatui (Rust) adapter.

Generates a crossterm-backed Ratatui binary crate. This package is split
into:
- widgets.py - widget structs, the DashboardWidget trait and helpers
- data_sources.py - sysinfo collector and data source updater
- __init__.py - app wiring, use declarations, Cargo.toml and the adapter

The modular layout is a library crate (src/lib.rs declaring the widgets
and data_sources modules) plus the binary in src/main.rs.
"""

from __future__ import annotations

from tuidesigner.codegen import behavior as bh
from tuidesigner.codegen.behavior import WidgetBehavior, widget_colors
from tuidesigner.codegen.generator import (
    Dependencies,
    FileRole,
    FrameworkAdapter,
    GenerationContext,
)
from tuidesigner.codegen.utils import comment_text, rust_str, widget_class_name
from tuidesigner.core.ir import BorderStyle, Framework, WidgetType

from .data_sources import generate_data_sources
from .widgets import generate_helpers, generate_widget

CRATE_NAME = "dashboard"

CARGO_DEPENDENCIES = {
    "ratatui": '"0.24"',
    "crossterm": '"0.27"',
    "serde_json": '"1.0"',
    "reqwest": '{ version = "0.11", features = ["blocking", "json"] }',
    "sysinfo": '"0.29"',
}

BORDERS = {
    BorderStyle.SINGLE: ("Borders::ALL", "BorderType::Plain"),
    BorderStyle.DOUBLE: ("Borders::ALL", "BorderType::Double"),
    BorderStyle.ROUNDED: ("Borders::ALL", "BorderType::Rounded"),
    BorderStyle.HEAVY: ("Borders::ALL", "BorderType::Thick"),
    # no ASCII border type; Plain is the closest
    BorderStyle.ASCII: ("Borders::ALL", "BorderType::Plain"),
    BorderStyle.NONE: ("Borders::NONE", "BorderType::Plain"),
}

COLORS = {
    "black": "Color::Black",
    "red": "Color::Red",
    "green": "Color::Green",
    "yellow": "Color::Yellow",
    "blue": "Color::Blue",
    "magenta": "Color::Magenta",
    "cyan": "Color::Cyan",
    "white": "Color::White",
    "gray": "Color::Gray",
    "grey": "Color::Gray",
}


def rust_color(name: str) -> str:
    """``ratatui::style::Color`` expression for a colour name or #rrggbb."""
    if name.startswith("#") and len(name) == 7:
        try:
            r, g, b = (int(name[i : i + 2], 16) for i in (1, 3, 5))
        except ValueError:
            return COLORS["white"]
        return f"Color::Rgb({r}, {g}, {b})"
    return COLORS.get(name.lower(), COLORS["white"])


# =============================================================================
# use declarations
# =============================================================================

Uses = dict[str, set[str]]


def merge_uses(*groups: Uses) -> Uses:
    merged: Uses = {}
    for group in groups:
        for path, names in group.items():
            merged.setdefault(path, set()).update(names)
    return merged


def render_uses(uses: Uses) -> str:
    """``use`` lines, std first, then external crates."""

    def line(path: str) -> str:
        names = sorted(uses[path], key=lambda n: (n != "self", n.lower()))
        if len(names) == 1:
            return f"use {path}::{names[0]};"
        return f"use {path}::{{{', '.join(names)}}};"

    std = sorted(p for p in uses if p.startswith("std"))
    external = sorted(p for p in uses if not p.startswith("std"))
    blocks = ["\n".join(line(p) for p in block) for block in (std, external) if block]
    return "\n\n".join(blocks)


def widget_uses() -> Uses:
    return {"serde_json": {"Value"}, "std::time": {"SystemTime", "UNIX_EPOCH"}}


def data_source_uses(ctx: GenerationContext) -> Uses:
    uses: Uses = {
        "std::collections": {"HashMap"},
        "std::fs": {"self", "OpenOptions"},
        "std::io": {"Read", "Write"},
        "std::process": {"Command", "Stdio"},
        "std": {"thread"},
        "std::time": {"Duration", "Instant", "SystemTime", "UNIX_EPOCH"},
        "serde_json": {"json", "Map", "Value"},
    }
    if ctx.design.uses_system_metrics():
        uses["std::path"] = {"Path"}
        uses["sysinfo"] = {
            "CpuExt",
            "DiskExt",
            "NetworkExt",
            "NetworksExt",
            "System",
            "SystemExt",
        }
    return uses


def app_uses(ctx: GenerationContext) -> Uses:
    uses: Uses = {
        "std": {"io"},
        "std::time": {"Duration", "Instant"},
        "crossterm": {"execute"},
        "crossterm::event": {"self", "Event", "KeyCode", "KeyEventKind", "KeyModifiers"},
        "crossterm::terminal": {
            "disable_raw_mode",
            "enable_raw_mode",
            "EnterAlternateScreen",
            "LeaveAlternateScreen",
        },
        "ratatui::backend": {"CrosstermBackend"},
        "ratatui::layout": {"Rect"},
        "ratatui::style": {"Color", "Modifier", "Style"},
        "ratatui::text": {"Span"},
        "ratatui::widgets": {"Block", "BorderType", "Borders", "Paragraph"},
        "ratatui": {"Frame", "Terminal"},
    }
    if ctx.has_data_sources:
        uses["std::collections"] = {"HashMap"}
        uses["std::sync::mpsc"] = {"self", "Receiver"}
        uses["std"].add("thread")
        uses["serde_json"] = {"Value"}
    return uses


def local_uses(ctx: GenerationContext) -> Uses:
    """Imports of the library modules from src/main.rs in the modular layout."""
    uses: Uses = {}
    widget_names = {"DashboardWidget"}
    widget_names.update(widget_class_name(b.widget.id) for b in ctx.behaviors)
    uses[f"{CRATE_NAME}::widgets"] = widget_names
    if ctx.has_data_sources:
        names = {"data_source_configs", "DataSourceUpdater", "MetricSource"}
        if ctx.design.uses_system_metrics():
            names.add("SystemMetricsCollector")
        uses[f"{CRATE_NAME}::data_sources"] = names
    return uses


class RatatuiAdapter(FrameworkAdapter):
    """Generate a Ratatui dashboard."""

    framework = Framework.RATATUI
    display_name = "Ratatui"
    language = "rust"
    comment_prefix = "//"

    single_file = "src/main.rs"
    app_file = "src/main.rs"
    widgets_file = "src/widgets.rs"
    data_sources_file = "src/data_sources.rs"

    supported_widget_types = frozenset(WidgetType.values())

    def get_dependencies(self) -> Dependencies:
        return Dependencies(
            packages=tuple(f"{name} = {spec}" for name, spec in CARGO_DEPENDENCIES.items()),
            system_requirements=("Rust 1.70+", "Cargo"),
        )

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------

    def generate_widget(self, behavior: WidgetBehavior, ctx: GenerationContext) -> str:
        return generate_widget(behavior.widget, ctx.options)

    def generate_data_sources(self, ctx: GenerationContext) -> str:
        return generate_data_sources(ctx.design, ctx.options.include_comments)

    def _slot(self, b: WidgetBehavior, ctx: GenerationContext) -> list[str]:
        widget = b.widget
        border, text = widget_colors(widget, ctx.design.settings.theme)
        style = widget.style.border_style if widget.style else BorderStyle.SINGLE
        borders, border_type = BORDERS[style]
        source = f"Some({rust_str(widget.data_source)})" if widget.data_source else "None"
        pos, size = widget.position, widget.size
        return [
            "Slot {",
            f"    source: {source},",
            f"    rect: Rect::new({pos.x}, {pos.y}, {size.width}, {size.height}),",
            f"    borders: {borders},",
            f"    border_type: {border_type},",
            f"    border_color: {rust_color(border)},",
            f"    text_color: {rust_color(text)},",
            f"    widget: Box::new({widget_class_name(widget.id)}::new()),",
            "},",
        ]

    def _place_fn(self, ctx: GenerationContext) -> list[str]:
        if ctx.design.settings.auto_resize:
            return [
                "/// Scale a rectangle from design coordinates to the terminal area.",
                "fn place(rect: Rect, area: Rect) -> Rect {",
                "    let scale = |v: u16, size: u16, design: u16| (v as u32 * size as u32 / design as u32) as u16;",
                "    Rect::new(",
                "        area.x + scale(rect.x, area.width, DESIGN_WIDTH),",
                "        area.y + scale(rect.y, area.height, DESIGN_HEIGHT),",
                "        scale(rect.width, area.width, DESIGN_WIDTH),",
                "        scale(rect.height, area.height, DESIGN_HEIGHT),",
                "    )",
                "    .intersection(area)",
                "}",
            ]
        return [
            "/// Place a rectangle at its design coordinates, clipped to the terminal.",
            "fn place(rect: Rect, area: Rect) -> Rect {",
            "    Rect::new(area.x + rect.x, area.y + rect.y, rect.width, rect.height).intersection(area)",
            "}",
        ]

    def generate_app(self, ctx: GenerationContext) -> str:
        design = ctx.design
        dims = design.settings.dimensions
        has_sources = ctx.has_data_sources

        lines = []
        if ctx.options.include_comments:
            lines.append("// Application")
        lines += [
            f"const DESIGN_WIDTH: u16 = {dims.width};",
            f"const DESIGN_HEIGHT: u16 = {dims.height};",
            f"const ANIMATION_TICK: Duration = Duration::from_millis({bh.ANIMATION_TICK_MS});",
        ]
        if has_sources:
            lines.append(
                f"const REFRESH_INTERVAL: Duration = Duration::from_millis({design.settings.refresh_rate});"
            )
        lines += [
            "",
            "struct Slot {",
            "    source: Option<&'static str>,",
            "    rect: Rect,",
            "    borders: Borders,",
            "    border_type: BorderType,",
            "    border_color: Color,",
            "    text_color: Color,",
            "    widget: Box<dyn DashboardWidget>,",
            "}",
            "",
            f"/// {comment_text(design.metadata.name)}",
            "struct App {",
            "    slots: Vec<Slot>,",
        ]
        if has_sources:
            lines.append("    updates: Receiver<HashMap<String, Value>>,")
        lines += ["}", "", "impl App {", "    fn new() -> Self {"]
        if has_sources:
            if design.uses_system_metrics():
                metrics = "Some(Box::new(SystemMetricsCollector::new()) as Box<dyn MetricSource>)"
            else:
                metrics = "None"
            lines.append(
                f"        let updater = DataSourceUpdater::new(data_source_configs(), {metrics});"
            )
        lines += ["        Self {", "            slots: vec!["]
        for b in ctx.behaviors:
            lines += [f"                {line}" for line in self._slot(b, ctx)]
        lines.append("            ],")
        if has_sources:
            lines.append("            updates: spawn_updater(updater),")
        lines += [
            "        }",
            "    }",
            "",
            "    fn tick(&mut self) {",
            "        for slot in self.slots.iter_mut() {",
            "            slot.widget.tick();",
            "        }",
            "    }",
        ]
        if has_sources:
            lines += [
                "",
                "    /// Push every batch of fresh values to the widgets bound to them.",
                "    fn receive(&mut self) {",
                "        while let Ok(fresh) = self.updates.try_recv() {",
                "            for (source_id, value) in &fresh {",
                "                for slot in self.slots.iter_mut() {",
                "                    if slot.source == Some(source_id.as_str()) {",
                "                        slot.widget.update(value);",
                "                    }",
                "                }",
                "            }",
                "        }",
                "    }",
            ]
        lines += ["}", ""]

        if has_sources:
            lines += [
                "/// Run the updater on its own thread so slow sources never stall drawing.",
                "fn spawn_updater(mut updater: DataSourceUpdater) -> Receiver<HashMap<String, Value>> {",
                "    let (tx, rx) = mpsc::channel();",
                "    thread::spawn(move || loop {",
                "        let fresh = updater.update_all();",
                "        if !fresh.is_empty() && tx.send(fresh).is_err() {",
                "            break;",
                "        }",
                "        thread::sleep(REFRESH_INTERVAL);",
                "    });",
                "    rx",
                "}",
                "",
            ]

        lines += self._place_fn(ctx)
        lines += [
            "",
            "fn ui(frame: &mut Frame, app: &App) {",
            "    let area = frame.size();",
            "    for slot in &app.slots {",
            "        let rect = place(slot.rect, area);",
            "        if rect.width < 2 || rect.height < 2 {",
            "            continue;",
            "        }",
            "        let title = Span::styled(slot.widget.title().to_string(), Style::default().add_modifier(Modifier::BOLD));",
            "        let block = Block::default()",
            "            .title(title)",
            "            .borders(slot.borders)",
            "            .border_type(slot.border_type)",
            "            .border_style(Style::default().fg(slot.border_color));",
            "        let paragraph = Paragraph::new(slot.widget.render_text())",
            "            .style(Style::default().fg(slot.text_color))",
            "            .block(block);",
            "        frame.render_widget(paragraph, rect);",
            "    }",
            "}",
            "",
            "fn run(terminal: &mut Terminal<CrosstermBackend<io::Stdout>>, app: &mut App) -> io::Result<()> {",
            "    let mut last_tick = Instant::now();",
            "    loop {",
            "        terminal.draw(|frame| ui(frame, app))?;",
            "        let timeout = ANIMATION_TICK.saturating_sub(last_tick.elapsed());",
            "        if event::poll(timeout)? {",
            "            if let Event::Key(key) = event::read()? {",
            "                if key.kind == KeyEventKind::Press {",
            "                    match key.code {",
            "                        KeyCode::Char('q') | KeyCode::Esc => return Ok(()),",
            "                        KeyCode::Char('c') if key.modifiers.contains(KeyModifiers::CONTROL) => return Ok(()),",
            "                        _ => {}",
            "                    }",
            "                }",
            "            }",
            "        }",
            "        if last_tick.elapsed() >= ANIMATION_TICK {",
            "            app.tick();",
            "            last_tick = Instant::now();",
            "        }",
        ]
        if has_sources:
            lines.append("        app.receive();")
        lines += ["    }", "}"]
        return "\n".join(lines)

    def generate_entry_point(self, ctx: GenerationContext) -> str:
        return "\n".join(
            [
                "fn main() -> io::Result<()> {",
                "    enable_raw_mode()?;",
                "    let mut stdout = io::stdout();",
                "    execute!(stdout, EnterAlternateScreen)?;",
                "    let mut terminal = Terminal::new(CrosstermBackend::new(stdout))?;",
                "    let mut app = App::new();",
                "    let result = run(&mut terminal, &mut app);",
                "    disable_raw_mode()?;",
                "    execute!(terminal.backend_mut(), LeaveAlternateScreen)?;",
                "    terminal.show_cursor()?;",
                "    if let Err(err) = &result {",
                '        eprintln!("Error running dashboard: {}", err);',
                "    }",
                "    result",
                "}",
            ]
        )

    # -------------------------------------------------------------------------
    # File headers
    # -------------------------------------------------------------------------

    def generate_header(self, ctx: GenerationContext, role: FileRole, body: str) -> str:
        lines = []
        if ctx.options.include_comments:
            lines.append(f"// {comment_text(ctx.design.metadata.name)}: {role.value.replace('_', ' ')} module.")
            lines.append("// Generated by tuidesigner. Edit the design and regenerate instead.")
            lines.append("")
        if role in (FileRole.SINGLE, FileRole.WIDGETS):
            lines.append("#![allow(dead_code)]")

        if role is FileRole.SINGLE:
            groups = [app_uses(ctx), widget_uses()]
            if ctx.has_data_sources:
                groups.append(data_source_uses(ctx))
            uses = merge_uses(*groups)
        elif role is FileRole.APP:
            uses = merge_uses(app_uses(ctx), local_uses(ctx))
        elif role is FileRole.WIDGETS:
            uses = widget_uses()
        else:
            uses = data_source_uses(ctx)

        helpers = generate_helpers() if role in (FileRole.SINGLE, FileRole.WIDGETS) else ""
        return self._join("\n".join(lines), render_uses(uses), helpers)

    def generate_module_index(self, ctx: GenerationContext) -> list[tuple[str, str]]:
        lines = ["pub mod widgets;"]
        if ctx.has_data_sources:
            lines.append("pub mod data_sources;")
        return [("src/lib.rs", "\n".join(lines) + "\n")]

    # -------------------------------------------------------------------------
    # Packaging
    # -------------------------------------------------------------------------

    def generate_manifests(self, ctx: GenerationContext) -> list[tuple[str, str, str]]:
        lines = [
            "[package]",
            f'name = "{CRATE_NAME}"',
            'version = "0.1.0"',
            'edition = "2021"',
            "",
            "[dependencies]",
        ]
        lines += [f"{name} = {spec}" for name, spec in CARGO_DEPENDENCIES.items()]
        return [("Cargo.toml", "\n".join(lines) + "\n", "toml")]

    def generate_instructions(self, ctx: GenerationContext) -> str:
        return "\n".join(
            [
                "1. Make sure Rust 1.70 or newer is installed (https://rustup.rs).",
                "",
                "2. Build and run the dashboard:",
                "   cargo run --release",
                "",
                "3. Or build a binary:",
                "   cargo build --release",
                f"   ./target/release/{CRATE_NAME}",
                "",
                "Press q to quit. Data source errors are written to dashboard.log.",
            ]
        )
