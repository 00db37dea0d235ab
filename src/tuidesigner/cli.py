"""
tuidesigner command line interface.

Commands:
- generate: compile a design file into a runnable project
- validate: check a design file and report layout problems
- frameworks: list target runtimes
- widgets: list the widget catalogue
"""

from __future__ import annotations

import logging
import stat
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from tuidesigner._version import __version__
from tuidesigner.codegen.generator import CodeGenerator, GeneratedCode
from tuidesigner.codegen.options import OutputFormat
from tuidesigner.config import load_generator_config
from tuidesigner.core.errors import DesignerError, DesignValidationError
from tuidesigner.core.ir import Framework
from tuidesigner.core.validator import lint_design, load_design
from tuidesigner.core.widget_registry import list_widget_definitions

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    help="tuidesigner: compile terminal dashboard designs into runnable TUI projects.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"tuidesigner {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Global options."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _fail(error: DesignerError) -> typer.Exit:
    """Print an error (and any collected validation problems); return the exit to raise."""
    if isinstance(error, DesignValidationError) and error.errors:
        err_console.print("[red]Design validation failed:[/red]")
        for problem in error.errors:
            err_console.print(f"  - {escape(problem)}")
    else:
        err_console.print(f"[red]Error:[/red] {escape(error.message)}")
    return typer.Exit(code=1)


def write_generated(result: GeneratedCode, output_dir: Path) -> list[Path]:
    """Write every generated file under ``output_dir`` and mark entry points executable."""
    written = []
    for generated in result.files:
        path = output_dir / generated.filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(generated.content, encoding="utf-8")
        if generated.executable:
            path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        logger.debug("Wrote %s", path)
        written.append(path)
    return written


@app.command()
def generate(
    design: Path = typer.Argument(..., help="Design file (JSON)"),  # noqa: B008
    output_dir: Path | None = typer.Argument(  # noqa: B008
        None, help="Output directory (default: ./output or the configured output_dir)"
    ),
    framework: Framework | None = typer.Option(  # noqa: B008
        None, "--framework", "-f", help="Target framework"
    ),
    output_format: OutputFormat | None = typer.Option(  # noqa: B008
        None, "--format", help="single file or modular project"
    ),
    comments: bool | None = typer.Option(
        None, "--comments/--no-comments", help="Emit banner and per-widget comments"
    ),
    mock_data: bool | None = typer.Option(
        None, "--mock-data/--no-mock-data", help="Simulate data for unbound widgets"
    ),
    config: Path | None = typer.Option(  # noqa: B008
        None, "--config", "-c", help="Config file (default: ./tuidesigner.toml or ./pyproject.toml)"
    ),
) -> None:
    """Validate DESIGN and generate a dashboard project into OUTPUT_DIR."""
    try:
        settings = load_generator_config(config)
        options = settings.to_options(
            framework=framework,
            output_format=output_format,
            include_comments=comments,
            use_mock_data=mock_data,
        )
        loaded = load_design(design)
        result = CodeGenerator.default().generate(loaded, options)
        target = output_dir or settings.output_dir
        write_generated(result, target)
    except DesignerError as e:
        raise _fail(e) from e
    except OSError as e:
        err_console.print(f"[red]Error:[/red] cannot write output: {escape(str(e))}")
        raise typer.Exit(code=1) from e

    console.print(
        f"[green]Generated {len(result.files)} files for {options.framework.value}[/green] "
        f"in {escape(str(target))}"
    )
    for generated in result.files:
        marker = " [dim](entry point)[/dim]" if generated.executable else ""
        console.print(f"  {escape(generated.filename)}{marker}")
    console.print(Panel(escape(result.instructions), title="Next steps", expand=False))


@app.command()
def validate(
    design: Path = typer.Argument(..., help="Design file (JSON)"),  # noqa: B008
    strict: bool = typer.Option(False, "--strict", help="Treat layout warnings as errors"),
    framework: Framework | None = typer.Option(  # noqa: B008
        None, "--framework", "-f", help="Also check the design against this framework"
    ),
) -> None:
    """Check DESIGN against the schema and report bounds and overlap problems."""
    try:
        loaded = load_design(design)
        if framework is not None:
            problems = CodeGenerator.default().get_adapter(framework).validate_design(loaded)
            if problems:
                raise DesignValidationError.from_errors(problems)
    except DesignerError as e:
        raise _fail(e) from e

    console.print(
        f"[green]Design is valid:[/green] {escape(loaded.metadata.name)} "
        f"({len(loaded.widgets)} widgets, {len(loaded.data_sources)} data sources)"
    )
    warnings = lint_design(loaded)
    for warning in warnings:
        console.print(f"[yellow]warning:[/yellow] {escape(warning)}")
    if warnings and strict:
        err_console.print(f"[red]{len(warnings)} layout warning(s) in strict mode[/red]")
        raise typer.Exit(code=1)


@app.command()
def frameworks() -> None:
    """List supported target frameworks."""
    generator = CodeGenerator.default()
    table = Table(title="Frameworks")
    table.add_column("Framework", style="cyan")
    table.add_column("Name")
    table.add_column("Language")
    table.add_column("Dependencies")
    for framework in generator.frameworks():
        adapter = generator.get_adapter(framework)
        deps = adapter.get_dependencies()
        table.add_row(framework.value, adapter.display_name, adapter.language, "\n".join(deps.packages))
    console.print(table)


@app.command()
def widgets() -> None:
    """List the widget catalogue."""
    table = Table(title="Widgets")
    table.add_column("Type", style="cyan")
    table.add_column("Icon")
    table.add_column("Name")
    table.add_column("Default size")
    table.add_column("Min size")
    table.add_column("Description")
    for definition in list_widget_definitions():
        table.add_row(
            definition.type.value,
            escape(definition.icon),
            definition.name,
            f"{definition.default_size.width}x{definition.default_size.height}",
            f"{definition.min_size.width}x{definition.min_size.height}",
            definition.description,
        )
    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
