"""
blessed (Node.js) adapter.

Generates a Node.js dashboard drawn with blessed boxes. This package is
split into:
- widgets.py - widget classes and shared helpers
- data_sources.py - systeminformation collector and async updater
- __init__.py - screen wiring, requires, package.json and the adapter

The modular layout uses CommonJS: widgets.js and datasources.js export
their classes and app.js requires them.
"""

from __future__ import annotations

import json
import re

from tuidesigner.codegen import behavior as bh
from tuidesigner.codegen.behavior import WidgetBehavior, widget_colors
from tuidesigner.codegen.generator import (
    Dependencies,
    FileRole,
    FrameworkAdapter,
    GenerationContext,
)
from tuidesigner.codegen.utils import code_only, comment_text, js_str, used_modules, widget_class_name
from tuidesigner.core.ir import BorderStyle, Framework, WidgetType

from .data_sources import generate_data_sources
from .widgets import generate_helpers, generate_widget

# Name as referenced in code -> require statement, builtins first
REQUIRES = {
    "fs": 'const fs = require("fs");',
    "os": 'const os = require("os");',
    "axios": 'const axios = require("axios");',
    "blessed": 'const blessed = require("blessed");',
    "si": 'const si = require("systeminformation");',
}
EXEC_REQUIRE = 'const { exec } = require("child_process");'
_EXEC_CALL = re.compile(r"(?<![\w.])exec\(")

NPM_PACKAGES = {
    "axios": "^1.6.0",
    "blessed": "^0.1.81",
    "systeminformation": "^5.21.15",
}

# blessed boxes only draw plain line borders
BORDERS = {
    BorderStyle.SINGLE: "line",
    BorderStyle.DOUBLE: "line",
    BorderStyle.ROUNDED: "line",
    BorderStyle.HEAVY: "line",
    BorderStyle.ASCII: "line",
    BorderStyle.NONE: None,
}


def node_requires(body: str) -> str:
    """require() lines for every module ``body`` references."""
    lines = []
    if _EXEC_CALL.search(code_only(body)):
        lines.append(EXEC_REQUIRE)
    lines += [REQUIRES[name] for name in used_modules(body, list(REQUIRES))]
    return "\n".join(lines)


def _percent(value: int, total: int) -> str:
    return f"{round(value * 100 / total, 2):g}%"


SLOT_FACTORY = """
function makeSlot(screen, widget, layout) {
  const box = blessed.box({
    parent: screen,
    label: ` ${widget.title} `,
    left: layout.left,
    top: layout.top,
    width: layout.width,
    height: layout.height,
    border: layout.border ? { type: layout.border } : undefined,
    style: {
      fg: layout.textColor,
      border: { fg: layout.borderColor },
      label: { fg: ACCENT_COLOR, bold: true },
    },
  });
  return { source: layout.source || null, widget, box };
}
"""

APP_CLASS = """
class DashboardApp {
  constructor() {
    this.screen = blessed.screen({ smartCSR: true, fullUnicode: true, title: DASHBOARD_TITLE });
    this.slots = createSlots(this.screen);
    this.updater = createUpdater();
    this.timers = [];
    this.refreshing = false;
    this.screen.key(["q", "escape", "C-c"], () => this.stop());
  }

  start() {
    this.draw();
    this.timers.push(setInterval(() => this.animate(), ANIMATION_INTERVAL_MS));
    if (this.updater) {
      this.refresh();
      this.timers.push(setInterval(() => this.refresh(), REFRESH_INTERVAL_MS));
    }
  }

  animate() {
    for (const slot of this.slots) slot.widget.tick();
    this.draw();
  }

  async refresh() {
    if (this.refreshing) return;
    this.refreshing = true;
    try {
      const fresh = await this.updater.updateAll();
      for (const [sourceId, value] of Object.entries(fresh)) {
        for (const slot of this.slots) {
          if (slot.source === sourceId) slot.widget.update(value);
        }
      }
      this.draw();
    } finally {
      this.refreshing = false;
    }
  }

  draw() {
    for (const slot of this.slots) slot.box.setContent(slot.widget.render());
    this.screen.render();
  }

  stop() {
    for (const timer of this.timers) clearInterval(timer);
    this.screen.destroy();
    process.exit(0);
  }
}
"""


class BlessedAdapter(FrameworkAdapter):
    """Generate a blessed dashboard."""

    framework = Framework.BLESSED
    display_name = "blessed"
    language = "javascript"
    comment_prefix = "//"

    single_file = "dashboard.js"
    app_file = "app.js"
    widgets_file = "widgets.js"
    data_sources_file = "datasources.js"

    supported_widget_types = frozenset(WidgetType.values())

    def get_dependencies(self) -> Dependencies:
        return Dependencies(
            packages=tuple(f"{name}@{version}" for name, version in NPM_PACKAGES.items()),
            system_requirements=("Node.js 18+", "npm"),
        )

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------

    def generate_widget(self, behavior: WidgetBehavior, ctx: GenerationContext) -> str:
        return generate_widget(behavior.widget, ctx.options)

    def generate_data_sources(self, ctx: GenerationContext) -> str:
        return generate_data_sources(ctx.design, ctx.options.include_comments)

    def _layout(self, b: WidgetBehavior, ctx: GenerationContext) -> str:
        widget = b.widget
        settings = ctx.design.settings
        dims = settings.dimensions
        border, text = widget_colors(widget, settings.theme)
        style = widget.style.border_style if widget.style else BorderStyle.SINGLE
        if settings.auto_resize:
            box = {
                "left": _percent(widget.position.x, dims.width),
                "top": _percent(widget.position.y, dims.height),
                "width": _percent(widget.size.width, dims.width),
                "height": _percent(widget.size.height, dims.height),
            }
        else:
            box = {
                "left": widget.position.x,
                "top": widget.position.y,
                "width": widget.size.width,
                "height": widget.size.height,
            }
        layout = {"source": widget.data_source} if widget.data_source else {}
        layout.update(box)
        layout.update(border=BORDERS[style], borderColor=border, textColor=text)
        fields = ", ".join(f"{key}: {json.dumps(value)}" for key, value in layout.items())
        return f"makeSlot(screen, new {widget_class_name(widget.id)}(), {{ {fields} }}),"

    def generate_app(self, ctx: GenerationContext) -> str:
        design = ctx.design
        palette = bh.THEME_PALETTES[design.settings.theme]
        lines = []
        if ctx.options.include_comments:
            lines.append("// Application")
        lines += [
            f"const DASHBOARD_TITLE = {js_str(design.metadata.name)};",
            f"const ACCENT_COLOR = {js_str(palette.accent)};",
            f"const ANIMATION_INTERVAL_MS = {bh.ANIMATION_TICK_MS};",
            f"const REFRESH_INTERVAL_MS = {design.settings.refresh_rate};",
            "",
            SLOT_FACTORY.strip("\n"),
            "",
            "function createSlots(screen) {",
            "  return [",
        ]
        lines += [f"    {self._layout(b, ctx)}" for b in ctx.behaviors]
        lines += ["  ];", "}", ""]

        lines.append("function createUpdater() {")
        if ctx.has_data_sources:
            collector = "new SystemMetricsCollector()" if design.uses_system_metrics() else "null"
            lines.append(f"  return new DataSourceUpdater(DATA_SOURCES, {collector});")
        else:
            lines.append("  return null;")
        lines += ["}", "", APP_CLASS.strip("\n")]
        return "\n".join(lines)

    def generate_entry_point(self, ctx: GenerationContext) -> str:
        return "\n".join(
            [
                "function main() {",
                "  new DashboardApp().start();",
                "}",
                "",
                "if (require.main === module) {",
                "  main();",
                "}",
            ]
        )

    # -------------------------------------------------------------------------
    # File headers and exports
    # -------------------------------------------------------------------------

    def _local_requires(self, ctx: GenerationContext) -> str:
        classes = ", ".join(widget_class_name(b.widget.id) for b in ctx.behaviors)
        lines = [f'const {{ {classes} }} = require("./widgets");'] if classes else []
        if ctx.has_data_sources:
            lines.append(f'const {{ {", ".join(self._source_exports(ctx))} }} = require("./datasources");')
        return "\n".join(lines)

    def _source_exports(self, ctx: GenerationContext) -> list[str]:
        names = ["DATA_SOURCES", "DataSourceUpdater", "extractValue"]
        if ctx.design.uses_system_metrics():
            names.append("SystemMetricsCollector")
        return names

    def generate_header(self, ctx: GenerationContext, role: FileRole, body: str) -> str:
        helpers = generate_helpers() if role in (FileRole.SINGLE, FileRole.WIDGETS) else ""
        lines = []
        if role in (FileRole.SINGLE, FileRole.APP):
            lines.append("#!/usr/bin/env node")
        if ctx.options.include_comments:
            lines.append(f"// {comment_text(ctx.design.metadata.name)}: {role.value.replace('_', ' ')} file.")
            lines.append("// Generated by tuidesigner. Edit the design and regenerate instead.")
        lines.append('"use strict";')
        requires = node_requires(f"{helpers}\n{body}")
        local = self._local_requires(ctx) if role is FileRole.APP else ""
        return self._join("\n".join(lines), requires, local, helpers)

    def generate_footer(self, ctx: GenerationContext, role: FileRole) -> str:
        if role is FileRole.WIDGETS:
            names = [widget_class_name(b.widget.id) for b in ctx.behaviors]
        elif role is FileRole.DATA_SOURCES:
            names = self._source_exports(ctx)
        else:
            return ""
        return f"module.exports = {{ {', '.join(names)} }};"

    # -------------------------------------------------------------------------
    # Packaging
    # -------------------------------------------------------------------------

    def _main_file(self, ctx: GenerationContext) -> str:
        return self.app_file if ctx.modular else self.single_file

    def generate_manifests(self, ctx: GenerationContext) -> list[tuple[str, str, str]]:
        main = self._main_file(ctx)
        package = {
            "name": "dashboard",
            "version": "1.0.0",
            "description": ctx.design.metadata.name,
            "main": main,
            "private": True,
            "scripts": {"start": f"node {main}"},
            "dependencies": dict(NPM_PACKAGES),
            "engines": {"node": ">=18"},
        }
        return [("package.json", json.dumps(package, indent=2) + "\n", "json")]

    def generate_instructions(self, ctx: GenerationContext) -> str:
        main = self._main_file(ctx)
        return "\n".join(
            [
                "1. Make sure Node.js 18 or newer is installed.",
                "",
                "2. Install dependencies:",
                "   npm install",
                "",
                "3. Run the dashboard:",
                f"   node {main}",
                "   (or: npm start)",
                "",
                "Press q to quit. Data source errors are written to dashboard.log.",
            ]
        )
