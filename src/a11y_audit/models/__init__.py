"""Data models for a11y-audit.

All models are Pydantic BaseModel with frozen=True for immutability.
"""

from a11y_audit.models.audit import (
    AccessibilityIssue,
    AuditResult,
    AuditRun,
    ComponentFile,
)
from a11y_audit.models.common import AuditError
from a11y_audit.models.rules import LineRule, RuleSet, RuleSeverity

__all__ = [
    # Audit
    "AccessibilityIssue",
    "AuditResult",
    "AuditRun",
    "ComponentFile",
    # Rules
    "LineRule",
    "RuleSet",
    "RuleSeverity",
    # Common
    "AuditError",
]
