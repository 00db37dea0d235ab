"""Tests for design validation and loading."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from tuidesigner.core.errors import DesignLoadError, DesignValidationError
from tuidesigner.core.ir import (
    ApiConfig,
    Design,
    Framework,
    Position,
    Size,
    Theme,
    Widget,
    widget_properties,
)
from tuidesigner.core.validator import (
    check_bounds,
    check_collisions,
    check_data_source_references,
    lint_design,
    load_design,
    validate_design,
)


def make_widget(widget_id: str, x: int, y: int, width: int, height: int) -> Widget:
    return Widget(
        id=widget_id,
        type="text",
        position=Position(x=x, y=y),
        size=Size(width=width, height=height),
    )


def validation_errors(raw: dict[str, Any]) -> list[str]:
    with pytest.raises(DesignValidationError) as exc_info:
        validate_design(raw)
    return exc_info.value.errors


class TestValidateDesign:
    """Tests for validate_design."""

    def test_valid_document(self, dashboard_dict: dict[str, Any]) -> None:
        design = validate_design(dashboard_dict)
        assert isinstance(design, Design)
        assert len(design.widgets) == 9
        assert len(design.data_sources) == 3
        assert design.metadata.target_framework is Framework.TEXTUAL

    def test_camel_case_keys_map_to_fields(self, dashboard: Design) -> None:
        assert dashboard.settings.refresh_rate == 1000
        assert dashboard.settings.grid_size == 4
        assert dashboard.widgets[1].data_source == "cpu"
        assert dashboard.widgets[6].style is not None
        assert dashboard.widgets[6].style.border_color == "green"

    def test_defaults_applied(self, minimal_dict: dict[str, Any]) -> None:
        design = validate_design(minimal_dict)
        assert design.settings.dimensions.width == 120
        assert design.settings.dimensions.height == 40
        assert design.settings.theme is Theme.DARK
        assert design.data_sources == []

    def test_target_runtime_alias(self, minimal_dict: dict[str, Any]) -> None:
        minimal_dict["metadata"]["targetRuntime"] = "ratatui"
        assert validate_design(minimal_dict).metadata.target_framework is Framework.RATATUI

    def test_data_source_union_resolved(self, dashboard: Design) -> None:
        api = dashboard.get_data_source("api")
        assert api is not None
        assert isinstance(api.config, ApiConfig)
        assert api.config.method.value == "GET"
        assert api.interval == 5000
        assert dashboard.get_data_source("app-log").interval is None

    def test_typed_properties(self, dashboard: Design) -> None:
        props = widget_properties(dashboard.widgets[1])
        assert props.format.value == "percentage"
        assert props.trend is True

    def test_accepts_existing_design(self, dashboard: Design) -> None:
        assert validate_design(dashboard) is dashboard

    def test_message_prefix(self, minimal_dict: dict[str, Any]) -> None:
        minimal_dict["widgets"][0]["type"] = "pie_chart"
        with pytest.raises(DesignValidationError) as exc_info:
            validate_design(minimal_dict)
        assert str(exc_info.value).startswith("Design validation failed: ")

    def test_field_range_error(self, minimal_dict: dict[str, Any]) -> None:
        minimal_dict["settings"] = {"gridSize": 0}
        errors = validation_errors(minimal_dict)
        assert any(e.startswith("settings.gridSize") for e in errors)

    def test_dimensions_out_of_range(self, minimal_dict: dict[str, Any]) -> None:
        minimal_dict["settings"] = {"dimensions": {"width": 500, "height": 40}}
        errors = validation_errors(minimal_dict)
        assert any("dimensions.width" in e for e in errors)

    def test_missing_metadata_name(self, minimal_dict: dict[str, Any]) -> None:
        minimal_dict["metadata"] = {}
        errors = validation_errors(minimal_dict)
        assert any(e.startswith("metadata.name") for e in errors)

    def test_unknown_widget_type(self, minimal_dict: dict[str, Any]) -> None:
        minimal_dict["widgets"][0]["type"] = "pie_chart"
        errors = validation_errors(minimal_dict)
        assert len(errors) == 1
        assert errors[0].startswith("widgets.0.type: Widget type 'pie_chart' is not supported")

    def test_invalid_widget_properties(self, minimal_dict: dict[str, Any]) -> None:
        minimal_dict["widgets"][0]["type"] = "line_chart"
        minimal_dict["widgets"][0]["properties"] = {"maxPoints": 5}
        errors = validation_errors(minimal_dict)
        assert any(e.startswith("widgets.0.properties.maxPoints") for e in errors)

    def test_gauge_range_must_be_increasing(self, minimal_dict: dict[str, Any]) -> None:
        minimal_dict["widgets"][0]["type"] = "gauge"
        minimal_dict["widgets"][0]["properties"] = {"min": 50, "max": 10}
        errors = validation_errors(minimal_dict)
        assert any("max must be greater than min" in e for e in errors)

    def test_wrong_data_source_shape(self, minimal_dict: dict[str, Any]) -> None:
        minimal_dict["dataSources"] = [{"id": "api", "config": {"type": "api"}}]
        errors = validation_errors(minimal_dict)
        assert any(e.startswith("dataSources.0.config") and "url" in e for e in errors)

    def test_unknown_data_source_kind(self, minimal_dict: dict[str, Any]) -> None:
        minimal_dict["dataSources"] = [{"id": "x", "config": {"type": "database"}}]
        errors = validation_errors(minimal_dict)
        assert any(e.startswith("dataSources.0.config") for e in errors)

    def test_relative_api_url_rejected(self, minimal_dict: dict[str, Any]) -> None:
        minimal_dict["dataSources"] = [
            {"id": "api", "config": {"type": "api", "url": "/stats"}}
        ]
        errors = validation_errors(minimal_dict)
        assert any("absolute http(s) URL" in e for e in errors)

    def test_duplicate_widget_ids(self, dashboard_dict: dict[str, Any]) -> None:
        dashboard_dict["widgets"][2]["id"] = "title"
        errors = validation_errors(dashboard_dict)
        assert "Duplicate widget id 'title'" in errors

    def test_duplicate_data_source_ids(self, dashboard_dict: dict[str, Any]) -> None:
        dashboard_dict["dataSources"][1]["id"] = "cpu"
        dashboard_dict["widgets"][4]["dataSource"] = "cpu"
        errors = validation_errors(dashboard_dict)
        assert "Duplicate data source id 'cpu'" in errors

    def test_dangling_data_source_reference(self, minimal_dict: dict[str, Any]) -> None:
        minimal_dict["widgets"][0]["dataSource"] = "missing"
        errors = validation_errors(minimal_dict)
        assert errors == ["Widget hello references unknown data source 'missing'"]

    def test_collects_every_problem(self, dashboard_dict: dict[str, Any]) -> None:
        dashboard_dict["widgets"][0]["type"] = "pie_chart"
        dashboard_dict["widgets"][2]["dataSource"] = "nowhere"
        errors = validation_errors(dashboard_dict)
        assert len(errors) == 2


class TestAdvisoryChecks:
    """Tests for bounds, collision and reference checks."""

    def test_bounds_width(self) -> None:
        errors = check_bounds([make_widget("a", 110, 0, 20, 5)], 120, 40)
        assert errors == ["Widget a exceeds dashboard width"]

    def test_bounds_height(self) -> None:
        errors = check_bounds([make_widget("a", 0, 38, 20, 5)], 120, 40)
        assert errors == ["Widget a exceeds dashboard height"]

    def test_bounds_exact_fit(self) -> None:
        assert check_bounds([make_widget("a", 100, 35, 20, 5)], 120, 40) == []

    def test_collision_reported_once_in_order(self) -> None:
        widgets = [make_widget("a", 0, 0, 10, 10), make_widget("b", 5, 5, 10, 10)]
        assert check_collisions(widgets) == ["Widget a overlaps with b"]

    def test_shared_edge_is_not_a_collision(self) -> None:
        widgets = [make_widget("a", 0, 0, 10, 10), make_widget("b", 10, 0, 10, 10)]
        assert check_collisions(widgets) == []

    def test_every_overlapping_pair(self) -> None:
        widgets = [
            make_widget("a", 0, 0, 10, 10),
            make_widget("b", 2, 2, 10, 10),
            make_widget("c", 4, 4, 10, 10),
        ]
        assert check_collisions(widgets) == [
            "Widget a overlaps with b",
            "Widget a overlaps with c",
            "Widget b overlaps with c",
        ]

    def test_references_ok(self, dashboard: Design) -> None:
        assert check_data_source_references(dashboard) == []

    def test_lint_clean_dashboard(self, dashboard: Design) -> None:
        assert lint_design(dashboard) == []

    def test_lint_is_advisory(self, dashboard_dict: dict[str, Any]) -> None:
        dashboard_dict["widgets"][1]["position"] = {"x": 30, "y": 0}
        design = validate_design(dashboard_dict)
        assert lint_design(design) == ["Widget title overlaps with cpu-card"]


class TestLoadDesign:
    """Tests for load_design."""

    def test_loads_valid_file(self, design_file: Path) -> None:
        design = load_design(design_file)
        assert design.metadata.name == "Ops Dashboard"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DesignLoadError, match="Cannot read design file"):
            load_design(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(DesignLoadError, match="Invalid JSON"):
            load_design(path)

    def test_top_level_must_be_object(self, tmp_path: Path) -> None:
        path = tmp_path / "list.json"
        path.write_text(json.dumps([1, 2]), encoding="utf-8")
        with pytest.raises(DesignLoadError, match="must be a JSON object"):
            load_design(path)

    def test_invalid_design_raises_validation_error(
        self, tmp_path: Path, minimal_dict: dict[str, Any]
    ) -> None:
        minimal_dict["widgets"][0]["type"] = "pie_chart"
        path = tmp_path / "bad.json"
        path.write_text(json.dumps(minimal_dict), encoding="utf-8")
        with pytest.raises(DesignValidationError):
            load_design(path)
