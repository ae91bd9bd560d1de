"""Common model types shared across modules."""

from typing import Any

from pydantic import BaseModel, Field


class AuditError(BaseModel):
    """An error recorded during an audit run instead of being raised."""

    model_config = {"frozen": True}

    code: str = Field(description="Error code for programmatic handling")
    message: str = Field(description="Human-readable error message")
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional error context",
    )

    @classmethod
    def for_file(cls, full_path: str, error: BaseException) -> "AuditError":
        """Describe a failure that was isolated to a single file."""
        return cls(
            code="FILE_AUDIT_ERROR",
            message=f"{type(error).__name__}: {error}",
            details={"file": full_path},
        )

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"
