"""
Unit tests for the error model and sanitization functions.

Tests error codes, domain exceptions, error structure, and message sanitization.
"""

import pytest
from models.errors import (
    ErrorCode,
    InvalidTransitionError,
    MalformedSuggestionError,
    ToolError,
    sanitize_path,
    sanitize_sql_error,
    sanitize_stack_trace,
    create_validation_error,
    create_not_found_error,
    create_db_not_found_error,
    create_db_error,
    create_internal_error,
)


class TestErrorCode:
    """Tests for ErrorCode enum."""

    def test_all_error_codes_exist(self):
        assert ErrorCode.VALIDATION_ERROR == "VALIDATION_ERROR"
        assert ErrorCode.INVALID_TRANSITION == "INVALID_TRANSITION"
        assert ErrorCode.MALFORMED_SUGGESTION == "MALFORMED_SUGGESTION"
        assert ErrorCode.NOT_FOUND == "NOT_FOUND"
        assert ErrorCode.DB_NOT_FOUND == "DB_NOT_FOUND"
        assert ErrorCode.DB_ERROR == "DB_ERROR"
        assert ErrorCode.INTERNAL_ERROR == "INTERNAL_ERROR"


class TestToolError:
    """Tests for ToolError exception class."""

    def test_tool_error_creation(self):
        error = ToolError(code=ErrorCode.VALIDATION_ERROR, message="Test error", retryable=False)

        assert error.code == ErrorCode.VALIDATION_ERROR
        assert error.message == "Test error"
        assert error.retryable is False
        assert error.original_error is None
        assert str(error) == "Test error"

    def test_tool_error_to_dict(self):
        error = ToolError(
            code=ErrorCode.DB_ERROR, message="Database connection failed", retryable=True
        )

        assert error.to_dict() == {
            "error": {
                "code": "DB_ERROR",
                "message": "Database connection failed",
                "retryable": True,
            }
        }


class TestDomainErrors:
    """Tests for the exceptions raised by the workflow and recurrence engines."""

    def test_invalid_transition_error(self):
        error = InvalidTransitionError("Saved", "Offer", allowed=["Applied", "Withdrawn"])

        assert isinstance(error, ToolError)
        assert error.code == ErrorCode.INVALID_TRANSITION
        assert error.retryable is False
        assert error.message == (
            "Invalid transition from Saved to Offer. Allowed transitions: Applied, Withdrawn"
        )
        assert error.allowed == ["Applied", "Withdrawn"]

    def test_invalid_transition_without_allowed_list(self):
        error = InvalidTransitionError("Ghosted", "Applied")
        assert error.message == "Invalid transition from Ghosted to Applied"

    def test_malformed_suggestion_error(self):
        error = MalformedSuggestionError("unknown frequency 'Hourly'", suggestion_id="s-1")

        assert error.code == ErrorCode.MALFORMED_SUGGESTION
        assert error.suggestion_id == "s-1"
        assert error.message == "Malformed suggestion s-1: unknown frequency 'Hourly'"
        assert error.to_dict()["error"]["code"] == "MALFORMED_SUGGESTION"

    def test_malformed_suggestion_without_id(self):
        error = MalformedSuggestionError("bad record")
        assert error.message == "Malformed suggestion: bad record"

    def test_not_found_error(self):
        error = create_not_found_error("Application", "app-404")
        assert error.code == ErrorCode.NOT_FOUND
        assert error.message == "Application not found: app-404"
        assert error.retryable is False


class TestSanitizers:
    def test_sanitize_absolute_path(self):
        assert sanitize_path("/home/user/data/jobpursuit.db") == "jobpursuit.db"

    def test_sanitize_relative_path(self):
        assert sanitize_path("data/jobpursuit.db") == "data/jobpursuit.db"

    def test_remove_sql_statements(self):
        result = sanitize_sql_error("near syntax: SELECT payload_json FROM records WHERE id = 1")
        assert "SELECT" not in result
        assert "[SQL query]" in result

    def test_remove_absolute_paths(self):
        result = sanitize_sql_error("unable to open /var/lib/app/records.db")
        assert "/var/lib/app/" not in result

    def test_keep_first_line_only(self):
        msg = "Error occurred\nTraceback (most recent call last):\n  File x"
        assert sanitize_stack_trace(msg) == "Error occurred"


class TestErrorFactories:
    def test_create_validation_error(self):
        error = create_validation_error("Invalid title: must not be empty")
        assert error.code == ErrorCode.VALIDATION_ERROR
        assert error.retryable is False

    def test_db_not_found_sanitizes_path(self):
        error = create_db_not_found_error("/secret/location/jobpursuit.db")
        assert error.code == ErrorCode.DB_NOT_FOUND
        assert error.message == "Database not found: jobpursuit.db"

    def test_db_error_sanitizes_sql(self):
        error = create_db_error("constraint failed: INSERT INTO records VALUES (1)")
        assert error.code == ErrorCode.DB_ERROR
        assert "INSERT" not in error.message
        assert error.message.startswith("Database error:")
        assert error.retryable is False

    def test_internal_error_is_retryable_and_single_line(self):
        original = RuntimeError("boom")
        error = create_internal_error("boom\n  at somewhere", original_error=original)
        assert error.code == ErrorCode.INTERNAL_ERROR
        assert error.message == "Internal error: boom"
        assert error.retryable is True
        assert error.original_error is original

    @pytest.mark.parametrize(
        "error",
        [
            create_validation_error("Test"),
            create_not_found_error("Suggestion", "x"),
            create_db_not_found_error("test.db"),
            create_db_error("Test"),
            create_internal_error("Test"),
            InvalidTransitionError("Saved", "Offer"),
            MalformedSuggestionError("Test"),
        ],
    )
    def test_all_errors_produce_valid_dict(self, error):
        result = error.to_dict()
        assert set(result["error"]) == {"code", "message", "retryable"}
        assert isinstance(result["error"]["code"], str)
        assert isinstance(result["error"]["message"], str)
        assert isinstance(result["error"]["retryable"], bool)
