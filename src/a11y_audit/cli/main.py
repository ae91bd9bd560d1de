"""Main CLI entry point for a11y-audit."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from a11y_audit.cli import audit, rules

app = typer.Typer(
    name="a11y-audit",
    help="Audit React component sources for accessibility issues.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

# Register subcommands
app.command(name="audit")(audit.audit_cmd)
app.command(name="rules")(rules.rules_cmd)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output"),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a config file (default: search .a11y-audit.yaml locations)",
    ),
) -> None:
    """
    a11y-audit: find accessibility issues in React component sources.

    - [bold]audit[/bold]: Clone a repository (or use a local path) and audit it
    - [bold]rules[/bold]: List the detection rules
    """
    from a11y_audit.utils.config import load_config, set_config
    from a11y_audit.utils.errors import ConfigurationError
    from a11y_audit.utils.logging import configure_logging

    if verbose:
        configure_logging(level="DEBUG")
    elif quiet:
        configure_logging(level="WARNING")
    else:
        configure_logging(level="INFO")

    if config is not None:
        try:
            set_config(load_config(config))
        except ConfigurationError as e:
            console.print(f"[red]Error:[/red] {e.message}")
            raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show the a11y-audit version."""
    from a11y_audit import __version__

    console.print(f"a11y-audit version {__version__}")


if __name__ == "__main__":
    app()
