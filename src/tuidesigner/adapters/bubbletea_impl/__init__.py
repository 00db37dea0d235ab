"""
Bubble Tea (Go) adapter.

Generates a Bubble Tea program styled with Lip Gloss. This package is
split into:
- widgets.py - widget structs and shared helpers
- data_sources.py - gopsutil collector and data source updater
- __init__.py - model, view, imports, go.mod and the adapter itself

Every generated file belongs to ``package main``; the modular layout just
spreads it over main.go, widgets.go and datasources.go.
"""

from __future__ import annotations

from tuidesigner.codegen import behavior as bh
from tuidesigner.codegen.behavior import WidgetBehavior, ansi_color, widget_colors
from tuidesigner.codegen.generator import (
    Dependencies,
    FileRole,
    FrameworkAdapter,
    GenerationContext,
)
from tuidesigner.codegen.utils import (
    comment_text,
    go_str,
    tab_indent,
    used_modules,
    widget_class_name,
)
from tuidesigner.core.ir import BorderStyle, Framework, WidgetType

from .data_sources import generate_data_sources
from .widgets import generate_helpers, generate_widget

# Package name as referenced in code -> import spec
STDLIB_IMPORTS = {
    "bytes": '"bytes"',
    "context": '"context"',
    "json": '"encoding/json"',
    "errors": '"errors"',
    "fmt": '"fmt"',
    "io": '"io"',
    "log": '"log"',
    "math": '"math"',
    "rand": '"math/rand"',
    "http": '"net/http"',
    "os": '"os"',
    "exec": '"os/exec"',
    "sort": '"sort"',
    "strconv": '"strconv"',
    "strings": '"strings"',
    "sync": '"sync"',
    "time": '"time"',
    "utf8": '"unicode/utf8"',
}

THIRD_PARTY_IMPORTS = {
    "tea": 'tea "github.com/charmbracelet/bubbletea"',
    "lipgloss": '"github.com/charmbracelet/lipgloss"',
    "cpu": '"github.com/shirou/gopsutil/v3/cpu"',
    "disk": '"github.com/shirou/gopsutil/v3/disk"',
    "load": '"github.com/shirou/gopsutil/v3/load"',
    "mem": '"github.com/shirou/gopsutil/v3/mem"',
    "psnet": 'psnet "github.com/shirou/gopsutil/v3/net"',
    "process": '"github.com/shirou/gopsutil/v3/process"',
}

GO_MODULES = {
    "github.com/charmbracelet/bubbletea": "v0.24.2",
    "github.com/charmbracelet/lipgloss": "v0.9.1",
    "github.com/shirou/gopsutil/v3": "v3.23.10",
}

BORDERS = {
    BorderStyle.SINGLE: "lipgloss.NormalBorder()",
    BorderStyle.DOUBLE: "lipgloss.DoubleBorder()",
    BorderStyle.ROUNDED: "lipgloss.RoundedBorder()",
    BorderStyle.HEAVY: "lipgloss.ThickBorder()",
    BorderStyle.ASCII: (
        'lipgloss.Border{Top: "-", Bottom: "-", Left: "|", Right: "|", '
        'TopLeft: "+", TopRight: "+", BottomLeft: "+", BottomRight: "+"}'
    ),
    BorderStyle.NONE: "lipgloss.HiddenBorder()",
}


def go_imports(body: str) -> str:
    """Import block with the standard library group first."""
    stdlib = sorted(
        STDLIB_IMPORTS[name] for name in used_modules(body, list(STDLIB_IMPORTS))
    )
    third_party = sorted(
        (THIRD_PARTY_IMPORTS[name] for name in used_modules(body, list(THIRD_PARTY_IMPORTS))),
        key=lambda spec: spec.split('"')[1],
    )
    if not stdlib and not third_party:
        return ""
    groups = [group for group in (stdlib, third_party) if group]
    lines = ["import ("]
    lines.append("\n\n".join("\n".join(f"\t{spec}" for spec in group) for group in groups))
    lines.append(")")
    return "\n".join(lines)


VIEW = """
func (m model) View() string {
    var rows []string
    var row []string
    rowY, cursorX := -1, 0
    for _, slot := range m.slots {
        if slot.y != rowY {
            if len(row) > 0 {
                rows = append(rows, lipgloss.JoinHorizontal(lipgloss.Top, row...))
            }
            row = nil
            rowY = slot.y
            cursorX = 0
        }
        if gap := slot.x - cursorX; gap > 0 {
            row = append(row, strings.Repeat(" ", gap))
        }
        content := titleStyle.Render(slot.widget.Title()) + "\\n" + slot.widget.Render()
        row = append(row, slot.style.Render(content))
        cursorX = slot.x + slot.width
    }
    if len(row) > 0 {
        rows = append(rows, lipgloss.JoinHorizontal(lipgloss.Top, row...))
    }
    if len(rows) == 0 {
        return "No widgets\\n"
    }
    return lipgloss.JoinVertical(lipgloss.Left, rows...) + "\\n"
}
"""


class BubbleTeaAdapter(FrameworkAdapter):
    """Generate a Bubble Tea dashboard."""

    framework = Framework.BUBBLE_TEA
    display_name = "Bubble Tea"
    language = "go"
    comment_prefix = "//"

    single_file = "main.go"
    app_file = "main.go"
    widgets_file = "widgets.go"
    data_sources_file = "datasources.go"

    supported_widget_types = frozenset(WidgetType.values())

    def get_dependencies(self) -> Dependencies:
        return Dependencies(
            packages=tuple(f"{module}@{version}" for module, version in GO_MODULES.items()),
            system_requirements=("Go 1.19+",),
        )

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------

    def generate_widget(self, behavior: WidgetBehavior, ctx: GenerationContext) -> str:
        return generate_widget(behavior.widget, ctx.options)

    def generate_data_sources(self, ctx: GenerationContext) -> str:
        return generate_data_sources(ctx.design, ctx.options.include_comments)

    def _slot(self, b: WidgetBehavior, ctx: GenerationContext) -> str:
        widget = b.widget
        border, text = widget_colors(widget, ctx.design.settings.theme)
        style = widget.style.border_style if widget.style else BorderStyle.SINGLE
        fields = [
            f"x: {widget.position.x}",
            f"y: {widget.position.y}",
            f"width: {widget.size.width}",
            f"style: boxStyle({BORDERS[style]}, {go_str(ansi_color(border))}, "
            f"{go_str(ansi_color(text))}, {widget.size.width}, {widget.size.height})",
            f"widget: New{widget_class_name(widget.id)}()",
        ]
        if widget.data_source:
            fields.insert(0, f"source: {go_str(widget.data_source)}")
        return "{" + ", ".join(fields) + "}"

    def generate_app(self, ctx: GenerationContext) -> str:
        design = ctx.design
        palette = bh.THEME_PALETTES[design.settings.theme]
        has_sources = ctx.has_data_sources
        ordered = sorted(ctx.behaviors, key=lambda b: (b.widget.position.y, b.widget.position.x))

        lines = []
        if ctx.options.include_comments:
            lines.append("// Application")
        lines += [
            "var titleStyle = lipgloss.NewStyle().Bold(true).Foreground(lipgloss.Color("
            f"{go_str(ansi_color(palette.accent))}))",
            "",
            "func boxStyle(border lipgloss.Border, borderColor, textColor string, width, height int) lipgloss.Style {",
            "    return lipgloss.NewStyle().",
            "        Border(border).",
            "        BorderForeground(lipgloss.Color(borderColor)).",
            "        Foreground(lipgloss.Color(textColor)).",
            "        Width(width - 2).",
            "        MaxHeight(height)",
            "}",
            "",
            "type widgetSlot struct {",
            "    source string",
            "    x      int",
            "    y      int",
            "    width  int",
            "    style  lipgloss.Style",
            "    widget DashboardWidget",
            "}",
            "",
            "type animationMsg time.Time",
        ]
        if has_sources:
            lines += [
                "type refreshMsg time.Time",
                "type dataMsg map[string]interface{}",
            ]
        lines += [
            "",
            f"// model is the {comment_text(design.metadata.name)} dashboard.",
            "type model struct {",
            "    slots   []*widgetSlot",
        ]
        if has_sources:
            lines.append("    updater *DataSourceUpdater")
        lines += ["}", "", "func newModel() model {"]
        if has_sources:
            lines.append("    var metrics MetricSource")
            if design.uses_system_metrics():
                lines.append("    metrics = NewSystemMetricsCollector()")
        lines.append("    return model{")
        lines.append("        slots: []*widgetSlot{")
        lines += [f"            {self._slot(b, ctx)}," for b in ordered]
        lines.append("        },")
        if has_sources:
            lines.append("        updater: NewDataSourceUpdater(dataSourceConfigs(), metrics),")
        lines += ["    }", "}", ""]

        lines += [
            "func animationTick() tea.Cmd {",
            f"    return tea.Tick({bh.ANIMATION_TICK_MS}*time.Millisecond, func(t time.Time) tea.Msg {{",
            "        return animationMsg(t)",
            "    })",
            "}",
            "",
        ]
        if has_sources:
            lines += [
                "func refreshTick() tea.Cmd {",
                f"    return tea.Tick({design.settings.refresh_rate}*time.Millisecond, func(t time.Time) tea.Msg {{",
                "        return refreshMsg(t)",
                "    })",
                "}",
                "",
                "// fetchData runs the updater off the update loop.",
                "func fetchData(updater *DataSourceUpdater) tea.Cmd {",
                "    return func() tea.Msg {",
                "        return dataMsg(updater.UpdateAll())",
                "    }",
                "}",
                "",
                "func (m model) Init() tea.Cmd {",
                "    return tea.Batch(animationTick(), fetchData(m.updater), refreshTick())",
                "}",
            ]
        else:
            lines += ["func (m model) Init() tea.Cmd {", "    return animationTick()", "}"]

        lines += [
            "",
            "func (m model) Update(msg tea.Msg) (tea.Model, tea.Cmd) {",
            "    switch msg := msg.(type) {",
            "    case tea.KeyMsg:",
            "        switch msg.String() {",
            '        case "q", "esc", "ctrl+c":',
            "            return m, tea.Quit",
            "        }",
            "    case animationMsg:",
            "        for _, slot := range m.slots {",
            "            slot.widget.Tick()",
            "        }",
            "        return m, animationTick()",
        ]
        if has_sources:
            lines += [
                "    case refreshMsg:",
                "        return m, tea.Batch(fetchData(m.updater), refreshTick())",
                "    case dataMsg:",
                "        for sourceID, value := range msg {",
                "            for _, slot := range m.slots {",
                "                if slot.source == sourceID {",
                "                    slot.widget.Update(value)",
                "                }",
                "            }",
                "        }",
            ]
        lines += ["    }", "    return m, nil", "}"]
        lines.append(VIEW.rstrip("\n"))
        return tab_indent("\n".join(lines))

    def generate_entry_point(self, ctx: GenerationContext) -> str:
        return tab_indent(
            "\n".join(
                [
                    "func main() {",
                    '    logFile, err := os.OpenFile("dashboard.log", os.O_CREATE|os.O_WRONLY|os.O_APPEND, 0o644)',
                    "    if err == nil {",
                    "        log.SetOutput(logFile)",
                    "        defer logFile.Close()",
                    "    }",
                    "    program := tea.NewProgram(newModel(), tea.WithAltScreen())",
                    "    if _, err := program.Run(); err != nil {",
                    '        fmt.Println("Error running dashboard:", err)',
                    "        os.Exit(1)",
                    "    }",
                    "}",
                ]
            )
        )

    # -------------------------------------------------------------------------
    # File headers
    # -------------------------------------------------------------------------

    def generate_header(self, ctx: GenerationContext, role: FileRole, body: str) -> str:
        helpers = generate_helpers() if role in (FileRole.SINGLE, FileRole.WIDGETS) else ""
        lines = []
        if ctx.options.include_comments:
            lines.append(f"// {comment_text(ctx.design.metadata.name)}: {role.value.replace('_', ' ')} file.")
            lines.append("// Generated by tuidesigner. Edit the design and regenerate instead.")
            lines.append("")
        lines.append("package main")
        imports = go_imports(f"{helpers}\n{body}")
        return self._join("\n".join(lines), imports, helpers)

    # -------------------------------------------------------------------------
    # Packaging
    # -------------------------------------------------------------------------

    def generate_manifests(self, ctx: GenerationContext) -> list[tuple[str, str, str]]:
        lines = ["module dashboard", "", "go 1.19", "", "require ("]
        lines += [f"\t{module} {version}" for module, version in GO_MODULES.items()]
        lines.append(")")
        return [("go.mod", "\n".join(lines) + "\n", "go")]

    def generate_instructions(self, ctx: GenerationContext) -> str:
        return "\n".join(
            [
                "1. Make sure Go 1.19 or newer is installed.",
                "",
                "2. Resolve dependencies (this also writes go.sum):",
                "   go mod tidy",
                "",
                "3. Run the dashboard:",
                "   go run .",
                "",
                "4. Or build a binary:",
                "   go build -o dashboard .",
                "   ./dashboard",
                "",
                "Press q to quit. Data source errors are written to dashboard.log.",
            ]
        )
