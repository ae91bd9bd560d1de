"""a11y-audit: accessibility auditing for React component repositories.

This package fetches a repository, finds its UI component sources and
reports accessibility issues per file and line:

- **File Discoverer**: Finds .js/.jsx/.ts/.tsx files under components/ and pages/
- **Rule Engine**: Applies line-based detection rules, optionally with an
  AI or heuristic analyzer for a second opinion
- **Audit Orchestrator**: Audits files concurrently and returns results in
  a stable order

Usage:
    # Library API
    from a11y_audit import AuditOrchestrator, GitWorkspace

    orchestrator = AuditOrchestrator(max_workers=8)
    run = orchestrator.audit(GitWorkspace("https://github.com/org/app"))
    for result in run.results:
        for issue in result.issues:
            print(f"{result.file}:{issue.line} {issue.issue}")

    # Single file
    from a11y_audit import RuleEngine

    result = RuleEngine().evaluate("Form.tsx", '<input type="text">')

CLI:
    a11y-audit audit <repo-url>
    a11y-audit audit --path <dir> --format json
    a11y-audit rules
"""

__version__ = "0.1.0"

# Core classes
from a11y_audit.core.discovery import FileDiscoverer
from a11y_audit.core.engine import RuleEngine
from a11y_audit.core.orchestrator import AuditOrchestrator
from a11y_audit.core.analyzers import Analyzer, AnalyzerMode, HeuristicAnalyzer, LLMAnalyzer
from a11y_audit.core.workspace import GitWorkspace, LocalWorkspace, open_workspace

# Models
from a11y_audit.models.audit import AccessibilityIssue, AuditResult, AuditRun, ComponentFile
from a11y_audit.models.rules import LineRule, RuleSet, RuleSeverity

# Errors
from a11y_audit.utils.errors import (
    A11yAuditError,
    AuditCancelledError,
    NoComponentFilesError,
    WorkspaceError,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "FileDiscoverer",
    "RuleEngine",
    "AuditOrchestrator",
    "Analyzer",
    "AnalyzerMode",
    "HeuristicAnalyzer",
    "LLMAnalyzer",
    "GitWorkspace",
    "LocalWorkspace",
    "open_workspace",
    # Models
    "AccessibilityIssue",
    "AuditResult",
    "AuditRun",
    "ComponentFile",
    "LineRule",
    "RuleSet",
    "RuleSeverity",
    # Errors
    "A11yAuditError",
    "AuditCancelledError",
    "NoComponentFilesError",
    "WorkspaceError",
]
