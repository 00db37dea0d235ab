"""
Data source types for the design IR.

A data source is a named feed that widgets bind to by id. Its config is a
tagged union on ``type``; each kind carries only the fields that kind needs.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal
from urllib.parse import urlparse

from pydantic import Field, field_validator

from .base import DesignModel


class SystemMetric(str, Enum):
    """Host metrics a system_metric source can sample."""

    CPU_PERCENT = "cpu_percent"
    MEMORY_PERCENT = "memory_percent"
    MEMORY_USED = "memory_used"
    MEMORY_TOTAL = "memory_total"
    DISK_PERCENT = "disk_percent"
    DISK_USED = "disk_used"
    DISK_TOTAL = "disk_total"
    NETWORK_IN = "network_in"
    NETWORK_OUT = "network_out"
    PROCESS_COUNT = "process_count"
    LOAD_AVERAGE = "load_average"


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"


class StaticConfig(DesignModel):
    """A fixed value, pushed once at startup."""

    type: Literal["static"] = "static"
    value: Any = None


class SystemMetricConfig(DesignModel):
    type: Literal["system_metric"] = "system_metric"
    metric: SystemMetric
    interval: int = Field(default=1000, ge=100)


class ApiConfig(DesignModel):
    """HTTP endpoint polled every ``interval`` milliseconds."""

    type: Literal["api"] = "api"
    url: str
    method: HttpMethod = HttpMethod.GET
    headers: dict[str, str] | None = None
    interval: int = Field(default=5000, ge=1000)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Require an absolute http(s) URL."""
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"url must be an absolute http(s) URL, got: {v}")
        return v


class FileConfig(DesignModel):
    """
    Local file read on modification.

    With ``watch`` off the file is read once; with it on the file is
    re-read every time its mtime changes.
    """

    type: Literal["file"] = "file"
    path: str = Field(min_length=1)
    watch: bool = False


class CommandConfig(DesignModel):
    type: Literal["command"] = "command"
    command: str = Field(min_length=1)
    interval: int = Field(default=5000, ge=1000)


DataSourceConfig = Annotated[
    StaticConfig | SystemMetricConfig | ApiConfig | FileConfig | CommandConfig,
    Field(discriminator="type"),
]


class DataSource(DesignModel):
    """A named value feed widgets can bind to."""

    id: str = Field(min_length=1)
    name: str | None = None
    config: DataSourceConfig

    @property
    def kind(self) -> str:
        return self.config.type

    @property
    def interval(self) -> int | None:
        """Minimum re-fetch interval in ms, or None for static and file sources."""
        return getattr(self.config, "interval", None)
