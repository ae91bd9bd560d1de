"""Detection rule data models."""

from enum import Enum

from pydantic import BaseModel, Field


class RuleSeverity(str, Enum):
    """Severity of a detection rule."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class LineRule(BaseModel):
    """A line-local detection rule.

    The condition is a safe expression evaluated with a single name,
    ``line``, bound to the text of the line under test. A truthy result
    produces one finding for that line.
    """

    model_config = {"frozen": True}

    id: str = Field(description="Unique rule identifier")
    name: str = Field(description="Human-readable rule name")
    issue: str = Field(description="Finding description emitted on a match")
    suggestion: str = Field(description="Remediation emitted on a match")
    condition: str = Field(description="Expression over 'line'")
    severity: RuleSeverity = Field(default=RuleSeverity.WARNING, description="Rule severity")
    category: str = Field(default="general", description="Rule category")
    enabled: bool = Field(default=True, description="Whether rule is enabled")

    # Documentation
    rationale: str | None = Field(default=None, description="Why this rule exists")
    wcag: str | None = Field(default=None, description="Related WCAG success criterion")


class RuleSet(BaseModel):
    """A named collection of line rules."""

    model_config = {"frozen": True}

    name: str = Field(description="Rule set name")
    version: str = Field(default="1.0.0", description="Rule set version")
    description: str = Field(default="", description="Rule set description")
    rules: list[LineRule] = Field(default_factory=list, description="Rules in evaluation order")

    def get_rule(self, rule_id: str) -> LineRule | None:
        """Get a rule by ID."""
        for rule in self.rules:
            if rule.id == rule_id:
                return rule
        return None

    @property
    def enabled_rules(self) -> list[LineRule]:
        """Get all enabled rules."""
        return [r for r in self.rules if r.enabled]
