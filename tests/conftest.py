"""Shared pytest fixtures for tuidesigner tests."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

import pytest

from tuidesigner.core.ir import Design
from tuidesigner.core.validator import validate_design

DASHBOARD: dict[str, Any] = {
    "version": "1.0.0",
    "metadata": {"name": "Ops Dashboard", "targetFramework": "textual"},
    "settings": {
        "dimensions": {"width": 120, "height": 40},
        "gridSize": 4,
        "theme": "dark",
        "refreshRate": 1000,
        "autoResize": True,
    },
    "widgets": [
        {
            "id": "title",
            "type": "text",
            "position": {"x": 0, "y": 0},
            "size": {"width": 40, "height": 5},
            "properties": {"content": "Production", "align": "center"},
        },
        {
            "id": "cpu-card",
            "type": "metric_card",
            "position": {"x": 40, "y": 0},
            "size": {"width": 20, "height": 8},
            "title": "CPU",
            "dataSource": "cpu",
            "properties": {"label": "CPU", "format": "percentage", "trend": True, "sparkline": True},
        },
        {
            "id": "mem-gauge",
            "type": "gauge",
            "position": {"x": 60, "y": 0},
            "size": {"width": 20, "height": 10},
            "properties": {"units": "%"},
        },
        {
            "id": "spark",
            "type": "sparkline",
            "position": {"x": 80, "y": 0},
            "size": {"width": 40, "height": 5},
        },
        {
            "id": "requests",
            "type": "line_chart",
            "position": {"x": 0, "y": 10},
            "size": {"width": 40, "height": 15},
            "dataSource": "api",
        },
        {
            "id": "bars",
            "type": "bar_chart",
            "position": {"x": 40, "y": 10},
            "size": {"width": 40, "height": 15},
            "properties": {"orientation": "horizontal"},
        },
        {
            "id": "jobs",
            "type": "table",
            "position": {"x": 80, "y": 10},
            "size": {"width": 40, "height": 15},
            "style": {"borderStyle": "rounded", "borderColor": "green"},
        },
        {
            "id": "build",
            "type": "progress_bar",
            "position": {"x": 0, "y": 25},
            "size": {"width": 40, "height": 3},
            "properties": {"animated": True, "color": "green"},
        },
        {
            "id": "events",
            "type": "log_viewer",
            "position": {"x": 40, "y": 25},
            "size": {"width": 80, "height": 15},
            "dataSource": "app-log",
        },
    ],
    "dataSources": [
        {
            "id": "cpu",
            "name": "CPU",
            "config": {"type": "system_metric", "metric": "cpu_percent", "interval": 1000},
        },
        {
            "id": "api",
            "config": {"type": "api", "url": "https://example.com/stats", "interval": 5000},
        },
        {
            "id": "app-log",
            "config": {"type": "file", "path": "/var/log/app.log", "watch": True},
        },
    ],
}


@pytest.fixture
def dashboard_dict() -> dict[str, Any]:
    """A raw design document using every widget type and three data sources."""
    return copy.deepcopy(DASHBOARD)


@pytest.fixture
def dashboard(dashboard_dict: dict[str, Any]) -> Design:
    return validate_design(dashboard_dict)


@pytest.fixture
def static_dashboard(dashboard_dict: dict[str, Any]) -> Design:
    """The same dashboard with no data sources and no bindings."""
    dashboard_dict["dataSources"] = []
    for widget in dashboard_dict["widgets"]:
        widget.pop("dataSource", None)
    return validate_design(dashboard_dict)


@pytest.fixture
def minimal_dict() -> dict[str, Any]:
    return {
        "metadata": {"name": "Minimal"},
        "widgets": [
            {
                "id": "hello",
                "type": "text",
                "position": {"x": 0, "y": 0},
                "size": {"width": 20, "height": 5},
            }
        ],
    }


@pytest.fixture
def design_file(tmp_path: Path, dashboard_dict: dict[str, Any]) -> Path:
    """The dashboard written to a JSON file."""
    path = tmp_path / "dashboard.json"
    path.write_text(json.dumps(dashboard_dict), encoding="utf-8")
    return path
