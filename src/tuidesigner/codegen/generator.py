"""
Adapter base class, generation results and the generator façade.

An adapter turns a validated Design into the files of a runnable project
for one target runtime. Generation is pure string construction: nothing is
written to disk here, and the same (design, options) pair always yields
byte-identical output.

The assembly order is fixed for every target:

1. Header (imports and shared helpers)
2. Data source collector and updater, when the design has data sources
3. One fragment per widget, in design order
4. Application wiring
5. Entry point

``single`` output concatenates all five into one executable file;
``modular`` output splits them into app, widgets and data-sources files.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar

from tuidesigner.codegen.behavior import WidgetBehavior, widget_behavior
from tuidesigner.codegen.options import CodeGenOptions
from tuidesigner.codegen.utils import join_sections, widget_class_name
from tuidesigner.core.errors import AdapterNotFoundError, DesignValidationError
from tuidesigner.core.ir import Design, Framework

logger = logging.getLogger(__name__)


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True)
class GeneratedFile:
    """
    One emitted file.

    Attributes:
        filename: Path relative to the output directory
        content: Full file content
        language: Source language tag (python, go, rust, javascript, toml, ...)
        executable: Whether the file is the program entry point
    """

    filename: str
    content: str
    language: str
    executable: bool = False


@dataclass(frozen=True)
class Dependencies:
    """Runtime packages and system requirements of a generated project."""

    packages: tuple[str, ...]
    system_requirements: tuple[str, ...] = ()
    dev_packages: tuple[str, ...] = ()


@dataclass
class GeneratedCode:
    """
    Result of a generation run.

    Attributes:
        framework: Target the files were generated for
        files: Emitted files, in emission order
        dependencies: Packages the generated project needs
        instructions: Setup and run steps for a human
    """

    framework: Framework
    dependencies: Dependencies
    files: list[GeneratedFile] = field(default_factory=list)
    instructions: str = ""

    def add_file(
        self, filename: str, content: str, language: str, executable: bool = False
    ) -> None:
        """Record an emitted file."""
        self.files.append(GeneratedFile(filename, content, language, executable))

    @property
    def filenames(self) -> list[str]:
        return [f.filename for f in self.files]

    def get_file(self, filename: str) -> GeneratedFile | None:
        for generated in self.files:
            if generated.filename == filename:
                return generated
        return None

    @property
    def entry_points(self) -> list[GeneratedFile]:
        return [f for f in self.files if f.executable]


# =============================================================================
# Adapter contract
# =============================================================================


class FileRole(str, Enum):
    """Which generated source file a header or footer belongs to."""

    SINGLE = "single"
    APP = "app"
    WIDGETS = "widgets"
    DATA_SOURCES = "data_sources"


@dataclass
class GenerationContext:
    """Everything an adapter step needs for one run."""

    design: Design
    options: CodeGenOptions
    behaviors: list[WidgetBehavior]

    @property
    def modular(self) -> bool:
        return self.options.modular

    @property
    def has_data_sources(self) -> bool:
        return self.design.has_data_sources

    @property
    def bound_behaviors(self) -> list[WidgetBehavior]:
        return [b for b in self.behaviors if b.bound]


@dataclass
class Sections:
    """Generated source sections before they are laid out into files."""

    data_sources: str
    widgets: list[str]
    app: str
    entry_point: str


class FrameworkAdapter(ABC):
    """
    Base class for target runtime adapters.

    Subclasses provide the language-specific pieces; ``generate`` lays them
    out into files according to the output format.
    """

    framework: ClassVar[Framework]
    display_name: ClassVar[str]
    language: ClassVar[str]
    comment_prefix: ClassVar[str] = "#"
    section_separator: ClassVar[str] = "\n\n"

    # Output file names
    single_file: ClassVar[str]
    app_file: ClassVar[str]
    widgets_file: ClassVar[str]
    data_sources_file: ClassVar[str]

    supported_widget_types: ClassVar[frozenset[str]]

    def generate(self, design: Design, options: CodeGenOptions) -> GeneratedCode:
        """Generate a complete project for ``design``."""
        ctx = GenerationContext(
            design=design,
            options=options,
            behaviors=[widget_behavior(w, options) for w in design.widgets],
        )
        result = GeneratedCode(framework=self.framework, dependencies=self.get_dependencies())

        sections = Sections(
            data_sources=self.generate_data_sources(ctx) if ctx.has_data_sources else "",
            widgets=[self.generate_widget(b, ctx) for b in ctx.behaviors],
            app=self.generate_app(ctx),
            entry_point=self.generate_entry_point(ctx),
        )

        if ctx.modular:
            self._layout_modular(result, ctx, sections)
        else:
            self._layout_single(result, ctx, sections)

        for filename, content, language in self.generate_manifests(ctx):
            result.add_file(filename, content, language)

        result.instructions = self.generate_instructions(ctx)
        result.add_file("README.md", self.generate_readme(result.instructions), "markdown")

        logger.info(
            "Generated %d files for %s (%s)",
            len(result.files),
            design.metadata.name,
            self.framework.value,
        )
        return result

    def _layout_single(self, result: GeneratedCode, ctx: GenerationContext, s: Sections) -> None:
        body = self._join(s.data_sources, *s.widgets, s.app, s.entry_point)
        content = self._join(
            self.generate_header(ctx, FileRole.SINGLE, body),
            body,
            self.generate_footer(ctx, FileRole.SINGLE),
        )
        result.add_file(self.single_file, content, self.language, executable=True)
        logger.debug("Assembled %s", self.single_file)

    def _layout_modular(self, result: GeneratedCode, ctx: GenerationContext, s: Sections) -> None:
        layout = [(FileRole.APP, self.app_file, self._join(s.app, s.entry_point))]
        layout.append((FileRole.WIDGETS, self.widgets_file, self._join(*s.widgets)))
        if ctx.has_data_sources:
            layout.append((FileRole.DATA_SOURCES, self.data_sources_file, s.data_sources))

        for role, filename, body in layout:
            content = self._join(
                self.generate_header(ctx, role, body),
                body,
                self.generate_footer(ctx, role),
            )
            result.add_file(filename, content, self.language, executable=role is FileRole.APP)
            logger.debug("Assembled %s", filename)

        for filename, content in self.generate_module_index(ctx):
            result.add_file(filename, content, self.language)

    def _join(self, *sections: str) -> str:
        return join_sections(*sections, sep=self.section_separator)

    def comment(self, ctx: GenerationContext, text: str) -> str:
        """A line comment, or nothing when comments are disabled."""
        if not ctx.options.include_comments:
            return ""
        return f"{self.comment_prefix} {text}"

    # -------------------------------------------------------------------------
    # Steps implemented per target
    # -------------------------------------------------------------------------

    @abstractmethod
    def generate_header(self, ctx: GenerationContext, role: FileRole, body: str) -> str:
        """Imports and shared helpers for one file, given that file's body."""

    def generate_footer(self, ctx: GenerationContext, role: FileRole) -> str:
        """Trailing exports for one file. Most targets need none."""
        return ""

    @abstractmethod
    def generate_data_sources(self, ctx: GenerationContext) -> str:
        """Metrics collector, updater and source table."""

    @abstractmethod
    def generate_widget(self, behavior: WidgetBehavior, ctx: GenerationContext) -> str:
        """One widget fragment. Must not fail for unknown widget types."""

    @abstractmethod
    def generate_app(self, ctx: GenerationContext) -> str:
        """Application wiring: widget layout, timers, data push."""

    @abstractmethod
    def generate_entry_point(self, ctx: GenerationContext) -> str:
        """Program entry point."""

    @abstractmethod
    def generate_manifests(self, ctx: GenerationContext) -> list[tuple[str, str, str]]:
        """Dependency manifests as (filename, content, language)."""

    def generate_module_index(self, ctx: GenerationContext) -> list[tuple[str, str]]:
        """Extra files a modular layout needs (e.g. a crate root). Default: none."""
        return []

    @abstractmethod
    def get_dependencies(self) -> Dependencies:
        """Fixed runtime dependency list for this target."""

    @abstractmethod
    def generate_instructions(self, ctx: GenerationContext) -> str:
        """Setup and run steps for the entry file of this output format."""

    # -------------------------------------------------------------------------
    # Shared
    # -------------------------------------------------------------------------

    def validate_design(self, design: Design) -> list[str]:
        """Check the design can be generated for this target."""
        errors = [
            f"Widget type '{widget.type}' is not supported in {self.display_name}"
            for widget in design.widgets
            if widget.type not in self.supported_widget_types
        ]
        # Distinct ids can still collide once turned into identifiers
        seen: dict[str, str] = {}
        for widget in design.widgets:
            name = widget_class_name(widget.id)
            if name in seen:
                errors.append(
                    f"Widget ids '{seen[name]}' and '{widget.id}' both generate class {name}"
                )
            else:
                seen[name] = widget.id
        return errors

    def generate_readme(self, instructions: str) -> str:
        """README built from the target name and dependency list only."""
        deps = self.get_dependencies()
        lines = [f"# {self.display_name} Dashboard", ""]
        lines.append(f"Terminal dashboard generated by tuidesigner for {self.display_name}.")
        lines.append("")
        if deps.system_requirements:
            lines.append("## Requirements")
            lines.append("")
            lines.extend(f"- {req}" for req in deps.system_requirements)
            lines.append("")
        lines.append("## Dependencies")
        lines.append("")
        lines.extend(f"- `{pkg}`" for pkg in deps.packages)
        lines.append("")
        lines.append("## Setup")
        lines.append("")
        lines.append(instructions.rstrip("\n"))
        lines.append("")
        return "\n".join(lines)


# =============================================================================
# Façade
# =============================================================================


class CodeGenerator:
    """
    Registry of adapters keyed by Framework, plus the validate-then-generate
    entry point.

    The generator keeps no per-call state, so one instance can serve any
    number of designs, including from several threads.
    """

    def __init__(self) -> None:
        self._adapters: dict[Framework, FrameworkAdapter] = {}

    @classmethod
    def default(cls) -> CodeGenerator:
        """A generator with every built-in adapter registered."""
        from tuidesigner.adapters import create_adapters

        generator = cls()
        for adapter in create_adapters():
            generator.register_adapter(adapter)
        return generator

    def register_adapter(self, adapter: FrameworkAdapter) -> None:
        self._adapters[adapter.framework] = adapter
        logger.debug("Registered adapter %s", adapter.framework.value)

    def get_adapter(self, framework: Framework | str) -> FrameworkAdapter:
        """
        Look up the adapter for a framework.

        Raises:
            AdapterNotFoundError: if nothing is registered for it
        """
        try:
            key = Framework(framework)
        except ValueError:
            raise AdapterNotFoundError(str(framework)) from None
        adapter = self._adapters.get(key)
        if adapter is None:
            raise AdapterNotFoundError(key.value)
        return adapter

    def frameworks(self) -> list[Framework]:
        """Registered frameworks, in registration order."""
        return list(self._adapters)

    def generate(self, design: Design, options: CodeGenOptions) -> GeneratedCode:
        """
        Validate ``design`` for the requested framework and generate it.

        Raises:
            AdapterNotFoundError: no adapter for ``options.framework``
            DesignValidationError: the adapter rejected the design; no files
                are produced
        """
        adapter = self.get_adapter(options.framework)
        errors = adapter.validate_design(design)
        if errors:
            raise DesignValidationError.from_errors(errors)
        return adapter.generate(design, options)
