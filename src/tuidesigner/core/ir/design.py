"""
Top-level design types.

A Design is the whole dashboard document: metadata, canvas settings,
widgets and the data sources they bind to. Designs are immutable once
validated; the code generators only ever read them.
"""

from __future__ import annotations

from enum import Enum

from pydantic import AliasChoices, Field

from .base import DesignModel
from .data_sources import DataSource
from .widgets import Widget


class Framework(str, Enum):
    """Supported target runtimes."""

    TEXTUAL = "textual"
    BUBBLE_TEA = "bubble_tea"
    RATATUI = "ratatui"
    BLESSED = "blessed"


class Theme(str, Enum):
    """Dashboard color themes."""

    DARK = "dark"
    LIGHT = "light"
    MONOKAI = "monokai"
    DRACULA = "dracula"
    NORD = "nord"
    CUSTOM = "custom"


class Dimensions(DesignModel):
    """Canvas size in terminal cells."""

    width: int = Field(default=120, ge=40, le=300)
    height: int = Field(default=40, ge=20, le=100)


class Settings(DesignModel):
    """
    Canvas-wide settings.

    Attributes:
        dimensions: Canvas size in cells
        grid_size: Snap grid used by the editor
        theme: Color theme applied to borders and accents
        refresh_rate: Data refresh period in milliseconds
        auto_resize: Whether the emitted app follows terminal resizes
    """

    dimensions: Dimensions = Field(default_factory=Dimensions)
    grid_size: int = Field(default=4, ge=1, le=20)
    theme: Theme = Theme.DARK
    refresh_rate: int = Field(default=1000, ge=100, le=60000)
    auto_resize: bool = True


class Metadata(DesignModel):
    """Descriptive information about a design."""

    name: str = Field(min_length=1)
    description: str | None = None
    author: str | None = None
    version: str = "1.0.0"
    created: str | None = None
    modified: str | None = None
    target_framework: Framework = Field(
        default=Framework.TEXTUAL,
        validation_alias=AliasChoices("targetFramework", "targetRuntime", "target_framework"),
    )
    tags: list[str] = Field(default_factory=list)


class Design(DesignModel):
    """
    Complete dashboard design.

    Widgets keep document order; generators emit widget code in that
    order so output is stable for a given document.
    """

    version: str = "1.0.0"
    metadata: Metadata
    settings: Settings = Field(default_factory=Settings)
    widgets: list[Widget] = Field(default_factory=list)
    data_sources: list[DataSource] = Field(default_factory=list)

    @property
    def has_data_sources(self) -> bool:
        return len(self.data_sources) > 0

    def get_data_source(self, source_id: str) -> DataSource | None:
        """Look up a declared data source by id."""
        for source in self.data_sources:
            if source.id == source_id:
                return source
        return None

    def widgets_bound_to(self, source_id: str) -> list[Widget]:
        """Widgets whose dataSource references the given source, in design order."""
        return [w for w in self.widgets if w.data_source == source_id]

    @property
    def referenced_data_sources(self) -> list[DataSource]:
        """Declared sources at least one widget binds to, in declaration order."""
        bound = {w.data_source for w in self.widgets if w.data_source}
        return [s for s in self.data_sources if s.id in bound]

    def uses_system_metrics(self) -> bool:
        """Whether a bound source samples host metrics."""
        return any(s.config.type == "system_metric" for s in self.referenced_data_sources)
