"""Terminal renderer for a11y-audit output."""

from __future__ import annotations

import io
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from a11y_audit.models.audit import AuditResult, AuditRun
from a11y_audit.models.rules import RuleSet
from a11y_audit.renderers.base import BaseRenderer, OutputFormat, RenderContext

SEVERITY_STYLES = {
    "error": "red",
    "warning": "yellow",
    "info": "blue",
}


class TerminalRenderer(BaseRenderer):
    """Renderer for rich terminal output.

    Example:
        renderer = TerminalRenderer()
        renderer.render(run, RenderContext())
    """

    def __init__(self, console: Console | None = None) -> None:
        """Initialize the terminal renderer.

        Args:
            console: Rich console to use. Creates a new one if None.
        """
        self._console = console or Console()

    @property
    def format(self) -> OutputFormat:
        return OutputFormat.TERMINAL

    def render(self, data: Any, context: RenderContext) -> str:
        """Print data to the console.

        Returns:
            Empty string (output is printed to console)
        """
        if isinstance(data, AuditRun):
            self._render_run(data, context)
        elif isinstance(data, RuleSet):
            self._render_ruleset(data, context)
        else:
            self._console.print(data)
        return ""

    def render_to_file(self, data: Any, context: RenderContext) -> None:
        """Capture the terminal output as plain text into a file."""
        if context.output_path is None:
            raise ValueError("output_path must be set in context for file rendering")

        file_console = Console(record=True, width=120, file=io.StringIO())
        original_console = self._console
        self._console = file_console

        try:
            self.render(data, context)
            context.output_path.write_text(file_console.export_text(styles=False), encoding="utf-8")
        finally:
            self._console = original_console

    def _render_run(self, run: AuditRun, context: RenderContext) -> None:
        self._console.print()
        status = (
            "[bold green]NO ISSUES[/bold green]"
            if run.total_issues == 0
            else f"[bold yellow]{run.total_issues} ISSUES[/bold yellow]"
        )
        self._console.print(
            Panel(
                f"[bold]Files audited:[/bold] {len(run.results)}\n"
                f"[bold]Files with issues:[/bold] {run.files_with_issues}\n"
                f"[bold]Failed files:[/bold] {len(run.failed_files)}\n"
                f"[bold]Status:[/bold] {status}",
                title="Accessibility Audit",
            )
        )

        for result in run.results:
            if result.issues or context.verbose:
                self._render_result(result, context)

        if run.errors:
            self._console.print()
            self._console.print("[bold red]Errors[/bold red]")
            for error in run.errors:
                file = escape(str(error.details.get("file", "")))
                self._console.print(f"  [red]![/red] {file}: {escape(error.message)}")

    def _render_result(self, result: AuditResult, context: RenderContext) -> None:
        self._console.print()
        if not result.issues:
            self._console.print(f"[green]OK[/green] {escape(result.file)}")
            return

        title = f"[red]{escape(result.file)}[/red]" if result.failed else escape(result.file)
        table = Table(title=title, title_justify="left")
        table.add_column("Line", justify="right")
        table.add_column("Issue", style="bold")
        table.add_column("Rule", style="dim")
        if context.verbose:
            table.add_column("Suggestion", max_width=50)

        for issue in result.issues:
            row = [str(issue.line), escape(issue.issue), escape(issue.rule or "-")]
            if context.verbose:
                row.append(escape(issue.suggestion))
            table.add_row(*row)

        self._console.print(table)

    def _render_ruleset(self, ruleset: RuleSet, context: RenderContext) -> None:
        table = Table(title=f"{ruleset.name} v{ruleset.version}")
        table.add_column("ID", style="bold")
        table.add_column("Severity")
        table.add_column("Category")
        table.add_column("Issue")
        table.add_column("WCAG")
        if context.verbose:
            table.add_column("Condition", style="dim")

        for rule in ruleset.rules:
            style = SEVERITY_STYLES.get(rule.severity.value, "white")
            row = [
                rule.id if rule.enabled else f"[dim]{rule.id} (disabled)[/dim]",
                f"[{style}]{rule.severity.value.upper()}[/{style}]",
                rule.category,
                rule.issue,
                rule.wcag or "-",
            ]
            if context.verbose:
                row.append(rule.condition)
            table.add_row(*row)

        self._console.print(table)
