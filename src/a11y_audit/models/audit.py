"""Audit data models: component files, findings and per-file results."""

from pathlib import Path

from pydantic import BaseModel, Field

from a11y_audit.models.common import AuditError

FAILURE_SUGGESTION = "Check that the file is readable text and re-run the audit"


class ComponentFile(BaseModel):
    """A UI component source file captured during discovery."""

    model_config = {"frozen": True}

    path: str = Field(description="Path relative to the search root it was found under")
    full_path: Path = Field(description="Absolute path, unique within a discovery run")
    content: str = Field(default="", description="File text as read at discovery time")
    read_error: str | None = Field(default=None, description="Read failure, set instead of content")


class AccessibilityIssue(BaseModel):
    """A single accessibility finding.

    ``line`` is 1-based. Line 0 marks a finding about the whole file, and
    non-deterministic sources may report lines outside the file.
    """

    model_config = {"frozen": True}

    line: int = Field(description="1-based line number")
    issue: str = Field(description="Short defect description")
    suggestion: str = Field(description="Remediation text")
    rule: str | None = Field(default=None, description="Rule or analyzer that produced it")


class AuditResult(BaseModel):
    """Findings for one audited file."""

    model_config = {"frozen": True}

    file: str = Field(description="Display path of the audited file")
    issues: list[AccessibilityIssue] = Field(
        default_factory=list,
        description="Findings in detection order",
    )
    failed: bool = Field(default=False, description="Whether the audit of this file failed")

    @property
    def issue_count(self) -> int:
        """Number of findings."""
        return len(self.issues)

    def issues_by_rule(self, rule_id: str) -> list[AccessibilityIssue]:
        """Get findings produced by a specific rule."""
        return [i for i in self.issues if i.rule == rule_id]

    @classmethod
    def ok(cls, file: str, issues: list[AccessibilityIssue] | None = None) -> "AuditResult":
        """Create a result for a successfully audited file."""
        return cls(file=file, issues=issues or [])

    @classmethod
    def failure(cls, file: str, error: BaseException | str) -> "AuditResult":
        """Create a result holding a single synthetic failure finding."""
        if isinstance(error, BaseException):
            error = f"{type(error).__name__}: {error}"
        return cls(
            file=file,
            failed=True,
            issues=[
                AccessibilityIssue(
                    line=0,
                    issue=f"Audit failed: {error}",
                    suggestion=FAILURE_SUGGESTION,
                    rule="audit-error",
                )
            ],
        )


class AuditRun(BaseModel):
    """Ordered results of one audit run, one entry per discovered file."""

    model_config = {"frozen": True}

    results: list[AuditResult] = Field(
        default_factory=list,
        description="Per-file results in discovery order",
    )
    errors: list[AuditError] = Field(
        default_factory=list,
        description="Per-file failures that were converted to findings",
    )

    @property
    def files(self) -> list[str]:
        """Display paths in result order."""
        return [r.file for r in self.results]

    @property
    def total_issues(self) -> int:
        """Total number of findings across all files."""
        return sum(r.issue_count for r in self.results)

    @property
    def files_with_issues(self) -> int:
        """Number of files with at least one finding."""
        return sum(1 for r in self.results if r.issues)

    @property
    def failed_files(self) -> list[AuditResult]:
        """Results whose audit failed."""
        return [r for r in self.results if r.failed]
