"""Tests for the generator façade and adapter registry."""

from __future__ import annotations

import importlib
import pkgutil
from typing import Any

import pytest

import tuidesigner
from tuidesigner.adapters import ADAPTERS, TextualAdapter, create_adapters, get_adapter_class
from tuidesigner.codegen import CodeGenerator, CodeGenOptions, GeneratedCode, OutputFormat
from tuidesigner.core.errors import AdapterNotFoundError, DesignValidationError
from tuidesigner.core.ir import Design, Framework


def unchecked_design(raw: dict[str, Any]) -> Design:
    """Build a Design without running the validator's widget checks."""
    return Design.model_validate(raw)


class TestRegistry:
    def test_every_module_imports(self) -> None:
        names = [m.name for m in pkgutil.walk_packages(tuidesigner.__path__, "tuidesigner.")]
        assert "tuidesigner.adapters.bubbletea_impl.widgets" in names
        for name in names:
            importlib.import_module(name)

    def test_every_framework_has_an_adapter(self) -> None:
        assert set(ADAPTERS) == set(Framework)

    def test_adapter_framework_matches_key(self) -> None:
        for framework, adapter_class in ADAPTERS.items():
            assert adapter_class.framework is framework

    def test_create_adapters_in_framework_order(self) -> None:
        assert [a.framework for a in create_adapters()] == list(Framework)

    def test_get_adapter_class(self) -> None:
        assert get_adapter_class("textual") is TextualAdapter


class TestCodeGenerator:
    def test_default_registers_all(self) -> None:
        assert CodeGenerator.default().frameworks() == list(Framework)

    def test_get_adapter_by_string(self) -> None:
        adapter = CodeGenerator.default().get_adapter("bubble_tea")
        assert adapter.framework is Framework.BUBBLE_TEA

    def test_unknown_framework_name(self) -> None:
        with pytest.raises(AdapterNotFoundError, match="No adapter registered for framework: curses"):
            CodeGenerator.default().get_adapter("curses")

    def test_unregistered_framework(self, dashboard: Design) -> None:
        generator = CodeGenerator()
        with pytest.raises(AdapterNotFoundError) as exc_info:
            generator.generate(dashboard, CodeGenOptions(framework=Framework.RATATUI))
        assert str(exc_info.value) == "No adapter registered for framework: ratatui"
        assert exc_info.value.framework == "ratatui"

    def test_register_adapter(self, dashboard: Design) -> None:
        generator = CodeGenerator()
        generator.register_adapter(TextualAdapter())
        assert generator.frameworks() == [Framework.TEXTUAL]
        result = generator.generate(dashboard, CodeGenOptions())
        assert isinstance(result, GeneratedCode)

    @pytest.mark.parametrize("framework", list(Framework))
    def test_unsupported_widget_type(self, framework: Framework, minimal_dict: dict[str, Any]) -> None:
        minimal_dict["widgets"][0]["type"] = "pie_chart"
        design = unchecked_design(minimal_dict)
        generator = CodeGenerator.default()
        display_name = generator.get_adapter(framework).display_name
        with pytest.raises(DesignValidationError) as exc_info:
            generator.generate(design, CodeGenOptions(framework=framework))
        assert exc_info.value.errors == [
            f"Widget type 'pie_chart' is not supported in {display_name}"
        ]
        assert str(exc_info.value).startswith("Design validation failed: ")

    def test_class_name_collision(self, minimal_dict: dict[str, Any]) -> None:
        second = dict(minimal_dict["widgets"][0], id="hello_", position={"x": 30, "y": 0})
        minimal_dict["widgets"].append(second)
        design = unchecked_design(minimal_dict)
        with pytest.raises(DesignValidationError) as exc_info:
            CodeGenerator.default().generate(design, CodeGenOptions())
        assert exc_info.value.errors == [
            "Widget ids 'hello' and 'hello_' both generate class HelloWidget"
        ]

    @pytest.mark.parametrize("framework", list(Framework))
    @pytest.mark.parametrize("output_format", list(OutputFormat))
    def test_deterministic(
        self, framework: Framework, output_format: OutputFormat, dashboard: Design
    ) -> None:
        generator = CodeGenerator.default()
        options = CodeGenOptions(framework=framework, output_format=output_format)
        first = generator.generate(dashboard, options)
        second = generator.generate(dashboard, options)
        assert first.files == second.files
        assert first.instructions == second.instructions

    def test_adapters_hold_no_state(self, dashboard: Design, static_dashboard: Design) -> None:
        generator = CodeGenerator.default()
        options = CodeGenOptions(framework=Framework.BLESSED)
        before = generator.generate(static_dashboard, options)
        generator.generate(dashboard, options)
        after = generator.generate(static_dashboard, options)
        assert before.files == after.files


class TestGeneratedCode:
    def test_lookup_helpers(self, dashboard: Design) -> None:
        result = CodeGenerator.default().generate(dashboard, CodeGenOptions())
        assert result.framework is Framework.TEXTUAL
        assert result.get_file("dashboard.py") is not None
        assert result.get_file("nope.py") is None
        assert [f.filename for f in result.entry_points] == ["dashboard.py"]
        assert result.filenames[-1] == "README.md"

    def test_readme_lists_dependencies(self, dashboard: Design) -> None:
        generator = CodeGenerator.default()
        for framework in Framework:
            result = generator.generate(dashboard, CodeGenOptions(framework=framework))
            readme = result.get_file("README.md")
            assert readme is not None
            assert readme.language == "markdown"
            for package in result.dependencies.packages:
                assert f"`{package}`" in readme.content
            assert result.instructions in readme.content
