"""Tests for the four target adapters."""

from __future__ import annotations

import ast
import json
import re
import tomllib
from typing import Any

import pytest

from tuidesigner.adapters import BlessedAdapter, BubbleTeaAdapter, RatatuiAdapter, TextualAdapter
from tuidesigner.codegen import CodeGenerator, CodeGenOptions, GeneratedCode, OutputFormat
from tuidesigner.codegen.utils import widget_class_name
from tuidesigner.core.ir import Design, Framework
from tuidesigner.core.validator import validate_design

SINGLE_FILES = {
    Framework.TEXTUAL: {"dashboard.py", "requirements.txt", "README.md"},
    Framework.BUBBLE_TEA: {"main.go", "go.mod", "README.md"},
    Framework.RATATUI: {"src/main.rs", "Cargo.toml", "README.md"},
    Framework.BLESSED: {"dashboard.js", "package.json", "README.md"},
}

MODULAR_FILES = {
    Framework.TEXTUAL: {"app.py", "widgets.py", "data_sources.py", "requirements.txt", "README.md"},
    Framework.BUBBLE_TEA: {"main.go", "widgets.go", "datasources.go", "go.mod", "README.md"},
    Framework.RATATUI: {
        "src/main.rs",
        "src/widgets.rs",
        "src/data_sources.rs",
        "src/lib.rs",
        "Cargo.toml",
        "README.md",
    },
    Framework.BLESSED: {"app.js", "widgets.js", "datasources.js", "package.json", "README.md"},
}

DATA_SOURCE_FILES = {
    Framework.TEXTUAL: "data_sources.py",
    Framework.BUBBLE_TEA: "datasources.go",
    Framework.RATATUI: "src/data_sources.rs",
    Framework.BLESSED: "datasources.js",
}

LANGUAGES = {
    Framework.TEXTUAL: "python",
    Framework.BUBBLE_TEA: "go",
    Framework.RATATUI: "rust",
    Framework.BLESSED: "javascript",
}

# Library each target samples host metrics with
METRICS_LIBRARIES = {
    Framework.TEXTUAL: "import psutil",
    Framework.BUBBLE_TEA: "github.com/shirou/gopsutil/v3/cpu",
    Framework.RATATUI: "sysinfo",
    Framework.BLESSED: 'require("systeminformation")',
}

TIMEOUT_PATTERNS = {
    Framework.TEXTUAL: (r"HTTP_TIMEOUT = 10\b", r"COMMAND_TIMEOUT = 30\b"),
    Framework.BUBBLE_TEA: (r"httpTimeout\s+= 10 \* time\.Second", r"commandTimeout\s+= 30 \* time\.Second"),
    Framework.RATATUI: (
        r"HTTP_TIMEOUT: Duration = Duration::from_secs\(10\)",
        r"COMMAND_TIMEOUT: Duration = Duration::from_secs\(30\)",
    ),
    Framework.BLESSED: (r"HTTP_TIMEOUT_MS = 10000;", r"COMMAND_TIMEOUT_MS = 30000;"),
}


def generate(
    design: Design,
    framework: Framework,
    output_format: OutputFormat = OutputFormat.SINGLE,
    **options: Any,
) -> GeneratedCode:
    return CodeGenerator.default().generate(
        design, CodeGenOptions(framework=framework, output_format=output_format, **options)
    )


def source_text(result: GeneratedCode) -> str:
    language = LANGUAGES[result.framework]
    return "\n".join(f.content for f in result.files if f.language == language)


@pytest.fixture(params=list(Framework), ids=lambda f: f.value)
def framework(request: pytest.FixtureRequest) -> Framework:
    return request.param


class TestLayout:
    """File layout shared by every adapter."""

    def test_single_files(self, framework: Framework, dashboard: Design) -> None:
        result = generate(dashboard, framework)
        assert set(result.filenames) == SINGLE_FILES[framework]

    def test_modular_files(self, framework: Framework, dashboard: Design) -> None:
        result = generate(dashboard, framework, OutputFormat.MODULAR)
        assert set(result.filenames) == MODULAR_FILES[framework]

    def test_modular_without_sources_has_no_data_source_file(
        self, framework: Framework, static_dashboard: Design
    ) -> None:
        result = generate(static_dashboard, framework, OutputFormat.MODULAR)
        assert DATA_SOURCE_FILES[framework] not in result.filenames
        assert set(result.filenames) == MODULAR_FILES[framework] - {DATA_SOURCE_FILES[framework]}

    def test_single_entry_point(self, framework: Framework, dashboard: Design) -> None:
        for output_format in OutputFormat:
            result = generate(dashboard, framework, output_format)
            entries = result.entry_points
            assert len(entries) == 1
            assert entries[0].language == LANGUAGES[framework]

    def test_language_tags(self, framework: Framework, dashboard: Design) -> None:
        result = generate(dashboard, framework, OutputFormat.MODULAR)
        sources = [f for f in result.files if f.language == LANGUAGES[framework]]
        assert len(sources) >= 3

    def test_widget_classes_in_design_order(self, framework: Framework, dashboard: Design) -> None:
        content = source_text(generate(dashboard, framework))
        positions = [content.index(widget_class_name(w.id)) for w in dashboard.widgets]
        assert positions == sorted(positions)

    def test_widgets_file_holds_every_widget(self, framework: Framework, dashboard: Design) -> None:
        result = generate(dashboard, framework, OutputFormat.MODULAR)
        adapter = CodeGenerator.default().get_adapter(framework)
        widgets = result.get_file(adapter.widgets_file)
        assert widgets is not None
        for widget in dashboard.widgets:
            assert widget_class_name(widget.id) in widgets.content

    def test_metrics_collector_only_when_needed(
        self, framework: Framework, dashboard: Design, static_dashboard: Design
    ) -> None:
        assert METRICS_LIBRARIES[framework] in source_text(generate(dashboard, framework))
        assert "SystemMetricsCollector" not in source_text(generate(static_dashboard, framework))

    def test_unbound_sources_not_emitted(
        self, framework: Framework, dashboard_dict: dict[str, Any]
    ) -> None:
        dashboard_dict["dataSources"].append(
            {"id": "log-cleanup", "config": {"type": "command", "command": "purge-old-logs"}}
        )
        content = source_text(generate(validate_design(dashboard_dict), framework))
        assert "purge-old-logs" not in content
        assert "log-cleanup" not in content
        assert "https://example.com/stats" in content

    def test_collector_skipped_when_metric_source_unbound(
        self, framework: Framework, dashboard_dict: dict[str, Any]
    ) -> None:
        del dashboard_dict["widgets"][1]["dataSource"]
        design = validate_design(dashboard_dict)
        assert design.referenced_data_sources == [
            design.get_data_source("api"),
            design.get_data_source("app-log"),
        ]
        assert "SystemMetricsCollector" not in source_text(generate(design, framework))

    def test_comments_toggle(self, framework: Framework, dashboard: Design) -> None:
        with_comments = source_text(generate(dashboard, framework))
        without = source_text(generate(dashboard, framework, include_comments=False))
        assert "Generated by tuidesigner" in with_comments
        assert "Generated by tuidesigner" not in without

    def test_timeouts_emitted(self, framework: Framework, dashboard: Design) -> None:
        content = source_text(generate(dashboard, framework))
        http, command = TIMEOUT_PATTERNS[framework]
        assert re.search(http, content)
        assert re.search(command, content)

    def test_unknown_widget_gets_placeholder(self, framework: Framework, minimal_dict: dict) -> None:
        minimal_dict["widgets"][0]["type"] = "pie_chart"
        design = Design.model_validate(minimal_dict)
        adapter = CodeGenerator.default().get_adapter(framework)
        result = adapter.generate(design, CodeGenOptions(framework=framework))
        content = source_text(result)
        assert "HelloWidget" in content
        assert "pie_chart" in content

    def test_empty_design(self, framework: Framework) -> None:
        design = Design.model_validate({"metadata": {"name": "Empty"}})
        result = generate(design, framework, OutputFormat.MODULAR)
        assert DATA_SOURCE_FILES[framework] not in result.filenames
        assert len(result.entry_points) == 1


class TestTextualAdapter:
    def test_ascii_border(self, dashboard_dict: dict) -> None:
        dashboard_dict["widgets"][6]["style"]["borderStyle"] = "ascii"
        content = generate(validate_design(dashboard_dict), Framework.TEXTUAL).get_file("dashboard.py").content
        assert "border: ascii green;" in content

    def test_single_file_parses(self, dashboard: Design) -> None:
        result = generate(dashboard, Framework.TEXTUAL)
        ast.parse(result.get_file("dashboard.py").content)

    def test_modular_files_parse(self, dashboard: Design) -> None:
        result = generate(dashboard, Framework.TEXTUAL, OutputFormat.MODULAR)
        for filename in ("app.py", "widgets.py", "data_sources.py"):
            ast.parse(result.get_file(filename).content)

    def test_parses_without_comments_or_mock_data(self, dashboard: Design) -> None:
        result = generate(
            dashboard, Framework.TEXTUAL, include_comments=False, use_mock_data=False
        )
        ast.parse(result.get_file("dashboard.py").content)

    def test_app_imports_local_modules(self, dashboard: Design) -> None:
        app = generate(dashboard, Framework.TEXTUAL, OutputFormat.MODULAR).get_file("app.py")
        assert "from widgets import " in app.content
        assert (
            "from data_sources import DATA_SOURCES, DataSourceUpdater, SystemMetricsCollector"
            in app.content
        )

    def test_requirements(self, dashboard: Design) -> None:
        result = generate(dashboard, Framework.TEXTUAL)
        requirements = result.get_file("requirements.txt").content.splitlines()
        assert requirements == list(TextualAdapter().get_dependencies().packages)

    def test_static_dashboard_needs_no_http(self, static_dashboard: Design) -> None:
        content = generate(static_dashboard, Framework.TEXTUAL).get_file("dashboard.py").content
        assert "import httpx" not in content
        assert "import subprocess" not in content


class TestBubbleTeaAdapter:
    def test_ascii_border(self, dashboard_dict: dict) -> None:
        dashboard_dict["widgets"][6]["style"]["borderStyle"] = "ascii"
        content = generate(validate_design(dashboard_dict), Framework.BUBBLE_TEA).get_file("main.go").content
        assert 'lipgloss.Border{Top: "-", Bottom: "-", Left: "|", Right: "|"' in content

    def test_every_file_is_package_main(self, dashboard: Design) -> None:
        result = generate(dashboard, Framework.BUBBLE_TEA, OutputFormat.MODULAR)
        for generated in result.files:
            if generated.language == "go" and generated.filename.endswith(".go"):
                assert "\npackage main\n" in f"\n{generated.content}"

    def test_go_mod(self, dashboard: Design) -> None:
        go_mod = generate(dashboard, Framework.BUBBLE_TEA).get_file("go.mod").content
        assert go_mod.startswith("module dashboard\n")
        assert "github.com/charmbracelet/bubbletea v0.24.2" in go_mod
        assert "github.com/charmbracelet/lipgloss" in go_mod

    def test_imports_follow_usage(self, dashboard: Design, static_dashboard: Design) -> None:
        with_sources = generate(dashboard, Framework.BUBBLE_TEA).get_file("main.go").content
        static = generate(static_dashboard, Framework.BUBBLE_TEA).get_file("main.go").content
        assert '"net/http"' in with_sources
        assert '"net/http"' not in static
        assert "gopsutil" not in static

    def test_modular_widgets_file_has_no_bubbletea_import(self, dashboard: Design) -> None:
        result = generate(dashboard, Framework.BUBBLE_TEA, OutputFormat.MODULAR)
        widgets = result.get_file("widgets.go").content
        assert "bubbletea" not in widgets
        assert "type DashboardWidget interface" in widgets

    def test_simulation_gated_by_elapsed(self, dashboard: Design) -> None:
        simulated = generate(dashboard, Framework.BUBBLE_TEA).get_file("main.go").content
        assert "w.elapsed += animationTickMs" in simulated
        quiet = generate(dashboard, Framework.BUBBLE_TEA, use_mock_data=False)
        assert "w.elapsed" not in quiet.get_file("main.go").content

    def test_tabs_for_indentation(self, dashboard: Design) -> None:
        content = generate(dashboard, Framework.BUBBLE_TEA).get_file("main.go").content
        assert "\n    return" not in content
        assert "\n\treturn" in content


class TestRatatuiAdapter:
    def test_ascii_border_falls_back_to_plain(self, dashboard_dict: dict) -> None:
        dashboard_dict["widgets"] = [dashboard_dict["widgets"][6]]
        dashboard_dict["widgets"][0]["style"]["borderStyle"] = "ascii"
        content = generate(validate_design(dashboard_dict), Framework.RATATUI).get_file("src/main.rs").content
        assert "border_type: BorderType::Plain," in content
        assert "BorderType::Rounded" not in content

    def test_cargo_toml(self, dashboard: Design) -> None:
        cargo = tomllib.loads(generate(dashboard, Framework.RATATUI).get_file("Cargo.toml").content)
        assert cargo["package"]["name"] == "dashboard"
        assert set(cargo["dependencies"]) == {"ratatui", "crossterm", "serde_json", "reqwest", "sysinfo"}
        assert "blocking" in cargo["dependencies"]["reqwest"]["features"]

    def test_lib_rs(self, dashboard: Design, static_dashboard: Design) -> None:
        lib = generate(dashboard, Framework.RATATUI, OutputFormat.MODULAR).get_file("src/lib.rs")
        assert lib.content == "pub mod widgets;\npub mod data_sources;\n"
        static = generate(static_dashboard, Framework.RATATUI, OutputFormat.MODULAR)
        assert static.get_file("src/lib.rs").content == "pub mod widgets;\n"

    def test_main_uses_library_modules(self, dashboard: Design) -> None:
        main = generate(dashboard, Framework.RATATUI, OutputFormat.MODULAR).get_file("src/main.rs")
        assert "use dashboard::widgets::" in main.content
        assert "use dashboard::data_sources::" in main.content

    def test_single_file_has_one_use_per_path(self, dashboard: Design) -> None:
        content = generate(dashboard, Framework.RATATUI).get_file("src/main.rs").content
        uses = [line for line in content.splitlines() if line.startswith("use ")]
        paths = [line.rsplit("::", 1)[0] for line in uses]
        assert uses
        assert len(paths) == len(set(paths))

    def test_simulation_gated_by_elapsed(self, dashboard: Design) -> None:
        assert "elapsed: u64" in generate(dashboard, Framework.RATATUI).get_file("src/main.rs").content
        quiet = generate(dashboard, Framework.RATATUI, use_mock_data=False)
        assert "elapsed: u64" not in quiet.get_file("src/main.rs").content


class TestBlessedAdapter:
    def test_ascii_border_is_line(self, dashboard_dict: dict) -> None:
        dashboard_dict["widgets"] = [dashboard_dict["widgets"][6]]
        dashboard_dict["widgets"][0]["style"]["borderStyle"] = "ascii"
        content = generate(validate_design(dashboard_dict), Framework.BLESSED).get_file("dashboard.js").content
        assert 'border: "line", borderColor: "green"' in content

    def test_package_json(self, dashboard: Design) -> None:
        package = json.loads(generate(dashboard, Framework.BLESSED).get_file("package.json").content)
        assert package["main"] == "dashboard.js"
        assert set(package["dependencies"]) == {"blessed", "axios", "systeminformation"}
        assert package["engines"]["node"] == ">=18"

    def test_modular_main_is_app(self, dashboard: Design) -> None:
        result = generate(dashboard, Framework.BLESSED, OutputFormat.MODULAR)
        package = json.loads(result.get_file("package.json").content)
        assert package["main"] == "app.js"
        assert package["scripts"]["start"] == "node app.js"

    def test_entry_has_shebang(self, dashboard: Design) -> None:
        content = generate(dashboard, Framework.BLESSED).get_file("dashboard.js").content
        assert content.startswith("#!/usr/bin/env node\n")
        assert 'const blessed = require("blessed");' in content

    def test_modules_export_and_require(self, dashboard: Design) -> None:
        result = generate(dashboard, Framework.BLESSED, OutputFormat.MODULAR)
        widgets = result.get_file("widgets.js").content
        sources = result.get_file("datasources.js").content
        app = result.get_file("app.js").content
        assert widgets.rstrip().endswith("};")
        assert "module.exports = { TitleWidget, CpuCardWidget" in widgets
        assert "module.exports = { DATA_SOURCES, DataSourceUpdater, extractValue, SystemMetricsCollector };" in sources
        assert 'require("./widgets")' in app
        assert 'require("./datasources")' in app
        assert "module.exports" not in app

    def test_requires_follow_usage(self, dashboard: Design, static_dashboard: Design) -> None:
        sources = generate(dashboard, Framework.BLESSED, OutputFormat.MODULAR).get_file("datasources.js")
        assert 'const axios = require("axios");' in sources.content
        assert 'const { exec } = require("child_process");' in sources.content
        assert 'const fs = require("fs");' in sources.content
        static = generate(static_dashboard, Framework.BLESSED).get_file("dashboard.js").content
        assert "axios" not in static
        assert "child_process" not in static

    def test_auto_resize_uses_percentages(self, dashboard_dict: dict) -> None:
        content = generate(validate_design(dashboard_dict), Framework.BLESSED).get_file("dashboard.js").content
        assert 'left: "50%"' in content
        dashboard_dict["settings"]["autoResize"] = False
        fixed = generate(validate_design(dashboard_dict), Framework.BLESSED).get_file("dashboard.js").content
        assert 'left: "50%"' not in fixed
        assert "left: 60" in fixed


def test_adapter_classes_expose_framework_and_language() -> None:
    for adapter_class in (TextualAdapter, BubbleTeaAdapter, RatatuiAdapter, BlessedAdapter):
        assert adapter_class.language == LANGUAGES[adapter_class.framework]
