"""Request handling for the audit endpoint.

Transport is left to the caller: any web framework can hand the decoded
JSON body to ``handle_audit_request`` and send back the status code and
``response.model_dump(mode="json", exclude_none=True)``.
"""

from __future__ import annotations

from typing import Any, Callable

from pydantic import BaseModel, Field

from a11y_audit.core.orchestrator import AuditOrchestrator
from a11y_audit.core.workspace import GitWorkspace, WorkspaceProvider
from a11y_audit.models.audit import AuditResult
from a11y_audit.utils.errors import (
    A11yAuditError,
    AuditCancelledError,
    NoComponentFilesError,
    ValidationError,
    validate_repo_url,
)
from a11y_audit.utils.logging import get_logger

logger = get_logger("service")


class AuditResponse(BaseModel):
    """JSON body returned by the audit endpoint."""

    model_config = {"frozen": True}

    success: bool = Field(description="Whether the audit completed")
    results: list[AuditResult] | None = Field(default=None, description="Per-file results")
    error: str | None = Field(default=None, description="Error message on failure")

    @classmethod
    def ok(cls, results: list[AuditResult]) -> "AuditResponse":
        return cls(success=True, results=results)

    @classmethod
    def fail(cls, error: str) -> "AuditResponse":
        return cls(success=False, error=error)


def handle_audit_request(
    payload: Any,
    orchestrator: AuditOrchestrator | None = None,
    provider_factory: Callable[[str], WorkspaceProvider] = GitWorkspace,
) -> tuple[int, AuditResponse]:
    """Handle a ``{"repoUrl": ...}`` audit request.

    Args:
        payload: Decoded JSON request body
        orchestrator: Orchestrator to run (a default one is built if None)
        provider_factory: Builds a workspace provider from the repository URL

    Returns:
        HTTP status code and response body
    """
    repo_url = payload.get("repoUrl") if isinstance(payload, dict) else None
    try:
        repo_url = validate_repo_url(repo_url)
    except ValidationError as e:
        return 400, AuditResponse.fail(e.message)

    owns_orchestrator = orchestrator is None
    if orchestrator is None:
        orchestrator = AuditOrchestrator()

    try:
        run = orchestrator.audit(provider_factory(repo_url))
    except NoComponentFilesError as e:
        return 404, AuditResponse.fail(e.message)
    except AuditCancelledError as e:
        return 504, AuditResponse.fail(e.message)
    except A11yAuditError as e:
        logger.error(f"Audit error: {e}")
        return 500, AuditResponse.fail(e.message)
    except Exception as e:
        logger.exception("Audit error")
        return 500, AuditResponse.fail(str(e) or "An unexpected error occurred")
    finally:
        if owns_orchestrator:
            orchestrator.close()

    return 200, AuditResponse.ok(run.results)
