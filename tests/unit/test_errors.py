"""Unit tests for the errors module."""

from unittest.mock import MagicMock

import pytest

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


class TestA11yAuditError:
    """Tests for base A11yAuditError."""

    def test_basic_error(self):
        """Test basic error creation."""
        error = A11yAuditError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.code == "UNKNOWN_ERROR"
        assert error.details == {}

    def test_to_audit_error(self):
        """Test conversion to AuditError model."""
        error = A11yAuditError("Test error", code="TEST_ERROR", details={"key": "value"})
        audit_error = error.to_audit_error()

        assert audit_error.code == "TEST_ERROR"
        assert audit_error.message == "Test error"
        assert audit_error.details == {"key": "value"}
        assert str(audit_error) == "[TEST_ERROR] Test error"


class TestErrorTypes:
    """Tests for the specific error types."""

    def test_workspace_error(self):
        error = WorkspaceError("Not a directory", path="/tmp/x")
        assert error.code == "WORKSPACE_ERROR"
        assert error.details == {"path": "/tmp/x"}

    def test_no_component_files(self):
        error = NoComponentFilesError(["components", "pages"])
        assert error.code == "NO_COMPONENT_FILES"
        assert error.message == "No component files found in /components or /pages directories"
        assert error.details == {"search_dirs": ["components", "pages"]}

    def test_audit_cancelled(self):
        assert AuditCancelledError().message == "Audit cancelled"
        timed_out = AuditCancelledError("Too slow", timeout=5)
        assert timed_out.code == "AUDIT_CANCELLED"
        assert timed_out.details == {"timeout": 5}

    def test_analyzer_error(self):
        error = AnalyzerError("Bad reply", analyzer="llm")
        assert error.code == "ANALYZER_ERROR"
        assert error.details == {"analyzer": "llm"}

    def test_validation_and_config_errors(self):
        assert ValidationError("x", field="repoUrl").details == {"field": "repoUrl"}
        assert ConfigurationError("x", config_key="rules_file").code == "CONFIG_ERROR"

    def test_all_inherit_from_base(self):
        for error in (
            WorkspaceError("x"),
            NoComponentFilesError(),
            AuditCancelledError(),
            AnalyzerError("x"),
            ValidationError("x"),
            ConfigurationError("x"),
        ):
            assert isinstance(error, A11yAuditError)


class TestRetryDecorator:
    """Tests for retry decorator."""

    def test_success_first_attempt(self):
        """Test function succeeds on first attempt."""
        mock_func = MagicMock(return_value="success")
        decorated = retry(max_attempts=3, delay=0.01)(mock_func)

        assert decorated() == "success"
        assert mock_func.call_count == 1

    def test_success_after_retries(self):
        """Test function succeeds after retries."""
        mock_func = MagicMock(side_effect=[ValueError("fail"), ValueError("fail"), "success"])
        decorated = retry(max_attempts=3, delay=0.01)(mock_func)

        assert decorated() == "success"
        assert mock_func.call_count == 3

    def test_all_attempts_fail(self):
        """Test function fails after all attempts."""
        mock_func = MagicMock(side_effect=ValueError("always fails"))
        decorated = retry(max_attempts=3, delay=0.01)(mock_func)

        with pytest.raises(ValueError, match="always fails"):
            decorated()
        assert mock_func.call_count == 3

    def test_only_catches_specified_exceptions(self):
        """Test only specified exceptions trigger retry."""
        mock_func = MagicMock(side_effect=TypeError("wrong type"))
        decorated = retry(max_attempts=3, delay=0.01, exceptions=(ValueError,))(mock_func)

        with pytest.raises(TypeError):
            decorated()
        assert mock_func.call_count == 1


class TestValidateRepoUrl:
    """Tests for validate_repo_url."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/org/app",
            "https://github.com/org/app.git",
            "http://github.com/org/app/tree/main",
            "https://www.github.com/org/app",
            "ssh://git@github.com/org/app.git",
            "git@github.com:org/app.git",
        ],
    )
    def test_valid(self, url):
        assert validate_repo_url(url) == url

    def test_bare_host_gets_https(self):
        assert validate_repo_url("github.com/org/app") == "https://github.com/org/app"

    def test_strips_whitespace(self):
        assert validate_repo_url("  https://github.com/org/app\n") == "https://github.com/org/app"

    @pytest.mark.parametrize("url", [None, "", "  "])
    def test_missing(self, url):
        with pytest.raises(ValidationError, match="Repository URL is required"):
            validate_repo_url(url)

    @pytest.mark.parametrize(
        "url",
        [
            "github.com/org",
            "git@gitlab.com:org/app.git",
            "git@github.com:org",
            "https://gitlab.com/org/app",
            "https://github.com/",
            "https://github.com/org",
            "https://notgithub.com/org/app",
            "file:///etc/passwd",
        ],
    )
    def test_invalid(self, url):
        with pytest.raises(ValidationError, match="valid GitHub repository URL"):
            validate_repo_url(url)

    def test_option_injection(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_repo_url("-c core.sshCommand=evil")
        assert exc_info.value.details == {"field": "repoUrl"}
