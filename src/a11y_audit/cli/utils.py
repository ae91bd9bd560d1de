"""Shared utilities for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console

from a11y_audit.renderers import OutputFormat, RenderContext, get_renderer
from a11y_audit.utils.config import A11yAuditConfig, get_config

# Shared console instance
console = Console()


def current_config() -> A11yAuditConfig:
    """Return the active configuration, exiting cleanly if it is invalid."""
    from a11y_audit.utils.errors import ConfigurationError

    try:
        return get_config()
    except ConfigurationError as e:
        fail(e.message)


def fail(message: str, code: int = 1) -> NoReturn:
    """Print an error and exit.

    Args:
        message: Message to display
        code: Process exit code
    """
    console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(code)


def parse_format(value: str) -> OutputFormat:
    """Parse an output format option, exiting on unknown values."""
    try:
        return OutputFormat(value)
    except ValueError:
        fail(f"Invalid format: {value} (choose from {', '.join(f.value for f in OutputFormat)})")


def emit(data: Any, fmt: OutputFormat, output: Path | None = None, verbose: bool = False) -> None:
    """Render data to the console or to a file.

    Args:
        data: AuditRun or RuleSet to render
        fmt: Output format
        output: Optional output file path
        verbose: Include suggestions and clean files
    """
    context = RenderContext(format=fmt, output_path=output, verbose=verbose)
    renderer = get_renderer(fmt)

    if output:
        renderer.render_to_file(data, context)
        console.print(f"Report written to {output}")
    elif fmt is OutputFormat.JSON:
        # raw JSON, no rich highlighting
        print(renderer.render(data, context))
    else:
        renderer.render(data, context)
