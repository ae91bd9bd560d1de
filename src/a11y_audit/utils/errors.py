"""Error handling utilities for a11y-audit."""

from __future__ import annotations

import functools
import re
import time
from typing import Any, Callable, TypeVar
from urllib.parse import urlparse

from a11y_audit.models.common import AuditError

T = TypeVar("T")

REPO_URL_SCHEMES = ("https", "http", "ssh", "git")
# user@host:owner/repo, as accepted by git clone
SCP_LIKE_URL = re.compile(r"^[\w.-]+@(?P<host>[\w.-]+):(?P<path>[^/].*)$")


class A11yAuditError(Exception):
    """Base exception for a11y-audit."""

    def __init__(self, message: str, code: str = "UNKNOWN_ERROR", details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_audit_error(self) -> AuditError:
        """Convert to AuditError model."""
        return AuditError(code=self.code, message=self.message, details=self.details)


class WorkspaceError(A11yAuditError):
    """The workspace could not be acquired or read."""

    def __init__(self, message: str, path: str | None = None):
        details = {"path": path} if path else {}
        super().__init__(message, code="WORKSPACE_ERROR", details=details)


class NoComponentFilesError(A11yAuditError):
    """Discovery found nothing to audit."""

    def __init__(self, search_dirs: list[str] | None = None):
        dirs = search_dirs or []
        super().__init__(
            "No component files found in /components or /pages directories",
            code="NO_COMPONENT_FILES",
            details={"search_dirs": dirs},
        )


class AuditCancelledError(A11yAuditError):
    """The run was cancelled or exceeded its deadline."""

    def __init__(self, message: str = "Audit cancelled", timeout: float | None = None):
        details = {"timeout": timeout} if timeout else {}
        super().__init__(message, code="AUDIT_CANCELLED", details=details)


class AnalyzerError(A11yAuditError):
    """An external analyzer failed or returned unusable output."""

    def __init__(self, message: str, analyzer: str | None = None):
        details = {"analyzer": analyzer} if analyzer else {}
        super().__init__(message, code="ANALYZER_ERROR", details=details)


class ValidationError(A11yAuditError):
    """Validation failed."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class ConfigurationError(A11yAuditError):
    """Configuration error."""

    def __init__(self, message: str, config_key: str | None = None):
        details = {"config_key": config_key} if config_key else {}
        super().__init__(message, code="CONFIG_ERROR", details=details)


def retry(
    max_attempts: int = 3,
    delay: float = 1.0,
    backoff: float = 2.0,
    exceptions: tuple[type[Exception], ...] = (Exception,),
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator to retry a function on failure.

    Args:
        max_attempts: Maximum number of attempts
        delay: Initial delay between retries in seconds
        backoff: Multiplier for delay after each retry
        exceptions: Tuple of exceptions to catch and retry

    Returns:
        Decorated function with retry logic
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            last_exception: Exception | None = None
            current_delay = delay

            for attempt in range(max_attempts):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    last_exception = e
                    if attempt < max_attempts - 1:
                        time.sleep(current_delay)
                        current_delay *= backoff

            if last_exception:
                raise last_exception
            raise RuntimeError("Retry failed without exception")

        return wrapper

    return decorator


def validate_repo_url(url: str | None) -> str:
    """Validate a repository locator accepted by the audit service.

    Accepts ``http(s)``, ``ssh`` and ``git`` URLs, scp-like
    ``git@github.com:org/app.git`` locators, and a bare
    ``github.com/org/app``, which is returned with ``https://`` prepended.

    Args:
        url: Repository URL to validate

    Returns:
        The stripped URL, ready for ``git clone``

    Raises:
        ValidationError: If the URL is missing or not a GitHub repository
    """
    if not url or not url.strip():
        raise ValidationError("Repository URL is required", field="repoUrl")

    url = url.strip()
    if url.startswith("-"):
        raise ValidationError("Repository URL cannot start with '-'", field="repoUrl")

    scp = SCP_LIKE_URL.match(url)
    if scp:
        host, path = scp.group("host"), scp.group("path")
    else:
        if "://" not in url:
            url = f"https://{url}"
        parsed = urlparse(url)
        if parsed.scheme not in REPO_URL_SCHEMES:
            raise ValidationError("Please provide a valid GitHub repository URL", field="repoUrl")
        host, path = parsed.hostname or "", parsed.path

    host = host.lower()
    parts = [p for p in path.split("/") if p]
    if not (host == "github.com" or host.endswith(".github.com")) or len(parts) < 2:
        raise ValidationError("Please provide a valid GitHub repository URL", field="repoUrl")

    return url
