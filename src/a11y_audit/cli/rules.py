"""CLI command for listing detection rules."""

from pathlib import Path
from typing import Optional

import typer

from a11y_audit.cli.utils import current_config, emit, fail, parse_format


def rules_cmd(
    rules: Optional[Path] = typer.Option(
        None,
        "--rules",
        "-r",
        help="Extra YAML rule pack to include",
    ),
    no_builtin: bool = typer.Option(
        False,
        "--no-builtin",
        help="Leave out built-in rules",
    ),
    format: str = typer.Option(
        "terminal",
        "--format",
        "-f",
        help="Output format (terminal, json)",
    ),
    details: bool = typer.Option(
        False,
        "--details",
        "-d",
        help="Show rule conditions",
    ),
) -> None:
    """
    List the detection rules an audit would apply.

    Example:
        a11y-audit rules --rules team-rules.yaml
    """
    from a11y_audit.core.rules import build_ruleset
    from a11y_audit.utils.errors import ConfigurationError

    config = current_config()
    rules_file = rules or config.engine.rules_file
    include_builtin = config.engine.include_builtin and not no_builtin

    try:
        ruleset = build_ruleset(include_builtin, rules_file)
    except ConfigurationError as e:
        fail(e.message)

    emit(ruleset, parse_format(format), verbose=details)
