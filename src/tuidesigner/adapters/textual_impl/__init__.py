"""
Textual (Python) adapter.

Generates a Textual application from a Design. This package is split into:
- widgets.py - widget templates and shared helpers
- data_sources.py - psutil collector and data source updater
- __init__.py - app wiring, imports, manifests and the adapter itself
"""

from __future__ import annotations

from tuidesigner.codegen.behavior import WidgetBehavior, widget_colors
from tuidesigner.codegen.generator import (
    Dependencies,
    FileRole,
    FrameworkAdapter,
    GenerationContext,
)
from tuidesigner.codegen.utils import (
    comment_text,
    identifier,
    py_str,
    used_modules,
    widget_class_name,
)
from tuidesigner.core.ir import BorderStyle, Framework, WidgetType

from .data_sources import generate_data_sources
from .widgets import generate_helpers, generate_widget

STDLIB_MODULES = ["logging", "math", "os", "random", "subprocess", "time"]
THIRD_PARTY_MODULES = ["httpx", "psutil"]

BORDER_STYLES = {
    BorderStyle.SINGLE: "solid",
    BorderStyle.DOUBLE: "double",
    BorderStyle.ROUNDED: "round",
    BorderStyle.HEAVY: "heavy",
    BorderStyle.ASCII: "ascii",
    BorderStyle.NONE: "none",
}


def python_imports(body: str, textual_imports: list[str], local_imports: list[str]) -> str:
    """Import block for a generated module: stdlib, third party, then local."""
    stdlib = [f"import {m}" for m in used_modules(body, STDLIB_MODULES)]
    if "datetime.now" in body:
        stdlib.append("from datetime import datetime")
    third_party = [f"import {m}" for m in used_modules(body, THIRD_PARTY_MODULES)]
    third_party.extend(textual_imports)
    blocks = [block for block in (stdlib, third_party, local_imports) if block]
    return "\n\n".join("\n".join(block) for block in blocks)


class TextualAdapter(FrameworkAdapter):
    """Generate a Textual dashboard."""

    framework = Framework.TEXTUAL
    display_name = "Textual"
    language = "python"
    comment_prefix = "#"
    section_separator = "\n\n\n"

    single_file = "dashboard.py"
    app_file = "app.py"
    widgets_file = "widgets.py"
    data_sources_file = "data_sources.py"

    supported_widget_types = frozenset(WidgetType.values())

    def get_dependencies(self) -> Dependencies:
        return Dependencies(
            packages=("textual>=0.86.0", "psutil>=5.9.0", "httpx>=0.25.0"),
            system_requirements=("Python 3.9+",),
        )

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------

    def generate_widget(self, behavior: WidgetBehavior, ctx: GenerationContext) -> str:
        return generate_widget(behavior.widget, ctx.options)

    def generate_data_sources(self, ctx: GenerationContext) -> str:
        return generate_data_sources(ctx.design, ctx.options.include_comments)

    def _css(self, ctx: GenerationContext) -> list[str]:
        settings = ctx.design.settings
        dims = settings.dimensions
        css = ["#canvas {"]
        if settings.auto_resize:
            css += ["    width: 100%;", "    height: 100%;", "    overflow: auto auto;"]
        else:
            css += [f"    width: {dims.width};", f"    height: {dims.height};"]
        css.append("}")
        for b in ctx.behaviors:
            widget = b.widget
            border, text = widget_colors(widget, settings.theme)
            style = widget.style.border_style if widget.style else BorderStyle.SINGLE
            border_rule = "none" if style is BorderStyle.NONE else f"{BORDER_STYLES[style]} {border}"
            css += [
                "",
                f"#{identifier(widget.id)} {{",
                "    position: absolute;",
                f"    offset: {widget.position.x} {widget.position.y};",
                f"    width: {widget.size.width};",
                f"    height: {widget.size.height};",
                f"    border: {border_rule};",
                f"    color: {text};",
            ]
            if widget.style and widget.style.background_color:
                css.append(f"    background: {widget.style.background_color};")
            if widget.style and widget.style.padding:
                css.append(f"    padding: 0 {widget.style.padding};")
            css.append("}")
        return css

    def generate_app(self, ctx: GenerationContext) -> str:
        design = ctx.design
        lines = []
        if ctx.options.include_comments:
            lines.append("# Application")
        lines += [
            "class DashboardApp(App):",
            f'    """{comment_text(design.metadata.name)}"""',
            "",
            f"    TITLE = {py_str(design.metadata.name)}",
            '    CSS = """',
        ]
        lines += [f"    {rule}" if rule else "" for rule in self._css(ctx)]
        lines += [
            '    """',
            '    BINDINGS = [("q", "quit", "Quit")]',
        ]

        if ctx.has_data_sources:
            subscribers: dict[str, list[str]] = {}
            for b in ctx.bound_behaviors:
                subscribers.setdefault(b.widget.data_source, []).append(identifier(b.widget.id))
            collector = (
                "SystemMetricsCollector()" if design.uses_system_metrics() else "None"
            )
            lines += [
                "",
                "    def __init__(self) -> None:",
                "        super().__init__()",
                f"        self.collector = {collector}",
                "        self.updater = DataSourceUpdater(DATA_SOURCES, self.collector)",
                f"        self.subscribers = {subscribers!r}",
            ]

        lines += ["", "    def compose(self) -> ComposeResult:", "        yield Header()"]
        lines.append('        with Container(id="canvas"):')
        if ctx.behaviors:
            lines += [f"            yield {widget_class_name(b.widget.id)}()" for b in ctx.behaviors]
        else:
            lines.append('            yield Static("No widgets")')
        lines.append("        yield Footer()")

        if ctx.has_data_sources:
            refresh = design.settings.refresh_rate / 1000
            lines += [
                "",
                "    def on_mount(self) -> None:",
                "        self.refresh_data_sources()",
                f"        self.set_interval({refresh}, self.refresh_data_sources)",
                "",
                "    @work(thread=True, exclusive=True)",
                "    def refresh_data_sources(self) -> None:",
                "        fresh = self.updater.update_all()",
                "        if fresh:",
                "            self.call_from_thread(self.push_values, fresh)",
                "",
                "    def push_values(self, fresh) -> None:",
                '        """Push fresh source values to every widget bound to them."""',
                "        for source_id, value in fresh.items():",
                "            for widget_id in self.subscribers.get(source_id, []):",
                '                self.query_one(f"#{widget_id}").update_data(value)',
            ]
        return "\n".join(lines)

    def generate_entry_point(self, ctx: GenerationContext) -> str:
        return "\n".join(
            [
                "def main() -> None:",
                "    logging.basicConfig(",
                '        filename="dashboard.log",',
                "        level=logging.INFO,",
                '        format="%(asctime)s %(levelname)s %(name)s: %(message)s",',
                "    )",
                "    DashboardApp().run()",
                "",
                "",
                'if __name__ == "__main__":',
                "    main()",
            ]
        )

    # -------------------------------------------------------------------------
    # File headers
    # -------------------------------------------------------------------------

    def _banner(self, ctx: GenerationContext, role: FileRole) -> str:
        lines = []
        if role in (FileRole.SINGLE, FileRole.APP):
            lines.append("#!/usr/bin/env python3")
        name = comment_text(ctx.design.metadata.name)
        lines.append(f'"""{name}: {role.value.replace("_", " ")} module."""')
        if ctx.options.include_comments:
            lines.append("# Generated by tuidesigner. Edit the design and regenerate instead.")
        return "\n".join(lines)

    def generate_header(self, ctx: GenerationContext, role: FileRole, body: str) -> str:
        helpers = generate_helpers() if role in (FileRole.SINGLE, FileRole.WIDGETS) else ""
        scan = f"{helpers}\n{body}"
        textual: list[str] = []
        local: list[str] = []

        if role in (FileRole.SINGLE, FileRole.APP):
            if ctx.has_data_sources:
                textual.append("from textual import work")
            textual += [
                "from textual.app import App, ComposeResult",
                "from textual.containers import Container",
                "from textual.widgets import Footer, Header, Static",
            ]
        elif role is FileRole.WIDGETS:
            textual.append("from textual.widgets import Static")

        if role is FileRole.APP:
            if ctx.behaviors:
                names = ", ".join(widget_class_name(b.widget.id) for b in ctx.behaviors)
                local.append(f"from widgets import {names}")
            if ctx.has_data_sources:
                names = ["DATA_SOURCES", "DataSourceUpdater"]
                if ctx.design.uses_system_metrics():
                    names.append("SystemMetricsCollector")
                local.append(f"from data_sources import {', '.join(sorted(names))}")

        imports = python_imports(scan, textual, local)
        return self._join(self._banner(ctx, role) + "\n\n" + imports, helpers)

    # -------------------------------------------------------------------------
    # Packaging
    # -------------------------------------------------------------------------

    def generate_manifests(self, ctx: GenerationContext) -> list[tuple[str, str, str]]:
        requirements = "\n".join(self.get_dependencies().packages) + "\n"
        return [("requirements.txt", requirements, "text")]

    def generate_instructions(self, ctx: GenerationContext) -> str:
        entry = self.app_file if ctx.modular else self.single_file
        return "\n".join(
            [
                "1. Create a virtual environment:",
                "   python -m venv venv",
                "   source venv/bin/activate  # On Windows: venv\\Scripts\\activate",
                "",
                "2. Install dependencies:",
                "   pip install -r requirements.txt",
                "",
                "3. Run the dashboard:",
                f"   python {entry}",
                "",
                "Press q to quit. Data source errors are written to dashboard.log.",
            ]
        )
