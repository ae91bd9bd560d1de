"""Core audit pipeline: discovery, rule evaluation and orchestration."""

from a11y_audit.core.analyzers import (
    Analyzer,
    AnalyzerMode,
    HeuristicAnalyzer,
    LLMAnalyzer,
    validate_analyzer_output,
)
from a11y_audit.core.discovery import DirEntry, EntryKind, FileDiscoverer
from a11y_audit.core.engine import RuleEngine, split_lines
from a11y_audit.core.orchestrator import AuditOrchestrator, create_analyzer
from a11y_audit.core.rules import BUILTIN_RULES, BUILTIN_RULESET, build_ruleset, load_rules, save_rules
from a11y_audit.core.workspace import GitWorkspace, LocalWorkspace, WorkspaceProvider, open_workspace

__all__ = [
    # Discovery
    "DirEntry",
    "EntryKind",
    "FileDiscoverer",
    # Rules and engine
    "BUILTIN_RULES",
    "BUILTIN_RULESET",
    "build_ruleset",
    "load_rules",
    "save_rules",
    "RuleEngine",
    "split_lines",
    # Analyzers
    "Analyzer",
    "AnalyzerMode",
    "HeuristicAnalyzer",
    "LLMAnalyzer",
    "validate_analyzer_output",
    # Orchestration
    "AuditOrchestrator",
    "create_analyzer",
    # Workspace
    "GitWorkspace",
    "LocalWorkspace",
    "WorkspaceProvider",
    "open_workspace",
]
