"""Utility functions for a11y-audit."""

from a11y_audit.utils.logging import configure_logging, get_logger, get_logger_with_context
from a11y_audit.utils.errors import (
    A11yAuditError,
    AnalyzerError,
    AuditCancelledError,
    ConfigurationError,
    NoComponentFilesError,
    ValidationError,
    WorkspaceError,
    retry,
    validate_repo_url,
)
from a11y_audit.utils.expression import SafeExpressionEvaluator, safe_eval
from a11y_audit.utils.config import (
    A11yAuditConfig,
    AnalyzerConfig,
    ConcurrencyConfig,
    DiscoveryConfig,
    EngineConfig,
    OutputConfig,
    WorkspaceConfig,
    get_config,
    load_config,
    save_config,
    set_config,
)

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    "get_logger_with_context",
    # Errors
    "A11yAuditError",
    "AnalyzerError",
    "AuditCancelledError",
    "ConfigurationError",
    "NoComponentFilesError",
    "ValidationError",
    "WorkspaceError",
    "retry",
    "validate_repo_url",
    # Expression
    "SafeExpressionEvaluator",
    "safe_eval",
    # Config
    "A11yAuditConfig",
    "AnalyzerConfig",
    "ConcurrencyConfig",
    "DiscoveryConfig",
    "EngineConfig",
    "OutputConfig",
    "WorkspaceConfig",
    "get_config",
    "load_config",
    "save_config",
    "set_config",
]
