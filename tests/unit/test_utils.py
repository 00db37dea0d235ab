"""Tests for naming, literal and scanning helpers."""

from __future__ import annotations

import pytest

from tuidesigner.codegen.utils import (
    camel_case,
    code_only,
    comment_text,
    identifier,
    join_sections,
    js_str,
    number_literal,
    pascal_case,
    rust_str,
    snake_case,
    tab_indent,
    used_modules,
    widget_class_name,
)
from tuidesigner.core.ir import WidgetType
from tuidesigner.core.widget_registry import (
    default_properties,
    get_widget_definition,
    list_widget_definitions,
)


class TestNaming:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [("cpu-card", "cpu_card"), ("CpuCard", "cpu_card"), ("app log", "app_log"), ("x", "x")],
    )
    def test_snake_case(self, name: str, expected: str) -> None:
        assert snake_case(name) == expected

    def test_pascal_and_camel(self) -> None:
        assert pascal_case("cpu-card") == "CpuCard"
        assert camel_case("cpu-card") == "cpuCard"

    def test_identifier_never_starts_with_digit(self) -> None:
        assert identifier("9lives") == "w_9lives"
        assert identifier("---") == "item"

    def test_widget_class_name(self) -> None:
        assert widget_class_name("cpu-card") == "CpuCardWidget"
        assert widget_class_name("9x") == "W9xWidget"
        assert widget_class_name("!!") == "ItemWidget"


class TestLiterals:
    def test_js_str_escapes_quotes(self) -> None:
        assert js_str('say "hi"') == '"say \\"hi\\""'

    def test_rust_str_control_characters(self) -> None:
        assert rust_str('a"b\\c\n\x01') == '"a\\"b\\\\c\\n\\u{1}"'

    def test_number_literal(self) -> None:
        assert number_literal(3) == "3.0"
        assert number_literal(float("inf")) == "0.0"

    def test_comment_text(self) -> None:
        assert comment_text('a "b"\n  c */') == "a 'b' c * /"


class TestScanning:
    def test_code_only_drops_comments_and_strings(self) -> None:
        body = '# json.loads\nx = "sys.argv"\nos.getcwd()\n'
        code = code_only(body)
        assert "json" not in code
        assert "sys" not in code
        assert "os.getcwd" in code

    def test_used_modules_in_candidate_order(self) -> None:
        body = "time.sleep(1)\nos.getcwd()\n// json.parse\n"
        assert used_modules(body, ["os", "json", "time"]) == ["os", "time"]

    def test_attribute_access_is_not_a_module(self) -> None:
        assert used_modules("self.os.path", ["os"]) == []

    def test_tab_indent(self) -> None:
        assert tab_indent("a\n    b\n        c\n") == "a\n\tb\n\t\tc\n"

    def test_join_sections_skips_blank(self) -> None:
        assert join_sections("a\n", "", "  \n", "b") == "a\n\nb\n"


class TestWidgetCatalogue:
    def test_every_type_listed(self) -> None:
        assert {d.type for d in list_widget_definitions()} == set(WidgetType)

    def test_min_size_not_larger_than_default(self) -> None:
        for definition in list_widget_definitions():
            assert definition.min_size.width <= definition.default_size.width
            assert definition.min_size.height <= definition.default_size.height

    def test_lookup(self) -> None:
        definition = get_widget_definition("gauge")
        assert definition is not None
        assert definition.name == "Gauge"
        assert get_widget_definition("pie_chart") is None

    def test_default_properties_use_document_keys(self) -> None:
        assert default_properties(WidgetType.GAUGE) == {
            "min": 0,
            "max": 100,
            "showValue": True,
            "units": "%",
        }
        assert default_properties(WidgetType.LINE_CHART)["maxPoints"] == 50
