"""
tuidesigner Intermediate Representation (IR) types.

Types are organized into submodules and re-exported here.
"""

from .base import DesignModel
from .data_sources import (
    ApiConfig,
    CommandConfig,
    DataSource,
    DataSourceConfig,
    FileConfig,
    HttpMethod,
    StaticConfig,
    SystemMetric,
    SystemMetricConfig,
)
from .design import (
    Design,
    Dimensions,
    Framework,
    Metadata,
    Settings,
    Theme,
)
from .widgets import (
    PROPERTY_MODELS,
    BarChartProperties,
    BarOrientation,
    BorderStyle,
    GaugeProperties,
    GenericProperties,
    LineChartProperties,
    LogViewerProperties,
    MetricCardProperties,
    MetricFormat,
    Position,
    ProgressBarProperties,
    ProgressColor,
    Size,
    SparklineProperties,
    SparklineStyle,
    TableProperties,
    TextAlign,
    TextProperties,
    Widget,
    WidgetProperties,
    WidgetStyle,
    WidgetType,
    property_model_for,
    widget_properties,
)

__all__ = [
    "DesignModel",
    # Data sources
    "ApiConfig",
    "CommandConfig",
    "DataSource",
    "DataSourceConfig",
    "FileConfig",
    "HttpMethod",
    "StaticConfig",
    "SystemMetric",
    "SystemMetricConfig",
    # Design
    "Design",
    "Dimensions",
    "Framework",
    "Metadata",
    "Settings",
    "Theme",
    # Widgets
    "PROPERTY_MODELS",
    "BarChartProperties",
    "BarOrientation",
    "BorderStyle",
    "GaugeProperties",
    "GenericProperties",
    "LineChartProperties",
    "LogViewerProperties",
    "MetricCardProperties",
    "MetricFormat",
    "Position",
    "ProgressBarProperties",
    "ProgressColor",
    "Size",
    "SparklineProperties",
    "SparklineStyle",
    "TableProperties",
    "TextAlign",
    "TextProperties",
    "Widget",
    "WidgetProperties",
    "WidgetStyle",
    "WidgetType",
    "property_model_for",
    "widget_properties",
]
