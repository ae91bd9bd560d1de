"""CLI command for auditing a repository."""

from pathlib import Path
from typing import Optional

import typer

from a11y_audit.cli.utils import console, current_config, emit, fail, parse_format


def audit_cmd(
    repo_url: Optional[str] = typer.Argument(
        None,
        help="GitHub repository URL to clone and audit",
    ),
    path: Optional[Path] = typer.Option(
        None,
        "--path",
        "-p",
        help="Audit an existing local checkout instead of cloning",
    ),
    format: Optional[str] = typer.Option(
        None,
        "--format",
        "-f",
        help="Output format (terminal, json)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file path",
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        min=1,
        help="Maximum files audited at once",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Abandon the audit after this many seconds",
    ),
    rules: Optional[Path] = typer.Option(
        None,
        "--rules",
        "-r",
        help="Extra YAML rule pack",
    ),
    no_builtin: bool = typer.Option(
        False,
        "--no-builtin",
        help="Disable built-in rules",
    ),
    heuristics: Optional[bool] = typer.Option(
        None,
        "--heuristics/--no-heuristics",
        help="Add random focus/contrast heuristic findings",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Seed for the heuristic pass",
    ),
    analyzer_endpoint: Optional[str] = typer.Option(
        None,
        "--analyzer-endpoint",
        help="OpenAI-compatible endpoint for an AI review pass",
    ),
    analyzer_model: Optional[str] = typer.Option(
        None,
        "--analyzer-model",
        help="Model name for the AI review pass",
    ),
    replace: bool = typer.Option(
        False,
        "--replace",
        help="Use analyzer findings instead of rule findings when available",
    ),
    fail_on_issues: bool = typer.Option(
        False,
        "--fail-on-issues",
        help="Exit with status 1 when any issue is found",
    ),
    details: bool = typer.Option(
        False,
        "--details",
        "-d",
        help="Show suggestions and files without issues",
    ),
) -> None:
    """
    Audit React component sources for accessibility issues.

    Scans components/, pages/, src/components/ and src/pages/ for
    .js, .jsx, .ts and .tsx files and reports issues per line.

    Example:
        a11y-audit audit https://github.com/org/app
        a11y-audit audit --path ./my-app --format json
    """
    from a11y_audit.core.orchestrator import AuditOrchestrator
    from a11y_audit.core.workspace import GitWorkspace, LocalWorkspace
    from a11y_audit.utils.errors import (
        A11yAuditError,
        NoComponentFilesError,
        ValidationError,
        validate_repo_url,
    )

    if (repo_url is None) == (path is None):
        fail("Provide either a repository URL or --path")

    config = current_config()
    engine_cfg = config.engine.model_copy(
        update={
            k: v
            for k, v in {
                "include_builtin": False if no_builtin else None,
                "rules_file": str(rules) if rules else None,
                "heuristics": heuristics,
                "seed": seed,
            }.items()
            if v is not None
        }
    )
    analyzer_cfg = config.analyzer.model_copy(
        update={
            k: v
            for k, v in {
                "endpoint": analyzer_endpoint,
                "model": analyzer_model,
                "mode": "replace" if replace else None,
            }.items()
            if v is not None
        }
    )
    concurrency_cfg = config.concurrency.model_copy(
        update={k: v for k, v in {"max_workers": workers, "timeout": timeout}.items() if v is not None}
    )
    config = config.model_copy(
        update={"engine": engine_cfg, "analyzer": analyzer_cfg, "concurrency": concurrency_cfg}
    )
    fmt = parse_format(format or config.output.default_format)

    if path is not None:
        provider = LocalWorkspace(path)
    else:
        try:
            url = validate_repo_url(repo_url)
        except ValidationError as e:
            fail(e.message)
        provider = GitWorkspace(
            url,
            git_executable=config.workspace.git_executable,
            depth=config.workspace.clone_depth,
            timeout=config.workspace.clone_timeout,
        )

    try:
        with AuditOrchestrator.from_config(config) as orchestrator:
            with console.status("Auditing components..."):
                run = orchestrator.audit(provider)
    except NoComponentFilesError as e:
        fail(e.message, code=2)
    except A11yAuditError as e:
        fail(e.message)
    except ValueError as e:
        fail(f"Invalid rule: {e}")

    emit(run, fmt, output, verbose=details)

    if fail_on_issues and run.total_issues:
        raise typer.Exit(1)
