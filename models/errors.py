"""
Error model for the JobPursuit core and its tools.

Provides structured error codes, domain exceptions raised by the workflow
and recurrence engines, and sanitized error messages for tool responses.
"""

from enum import Enum
from typing import Iterable, Optional
import re


class ErrorCode(str, Enum):
    """Structured error codes shared by the core and the MCP tools."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    MALFORMED_SUGGESTION = "MALFORMED_SUGGESTION"
    NOT_FOUND = "NOT_FOUND"
    DB_NOT_FOUND = "DB_NOT_FOUND"
    DB_ERROR = "DB_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ToolError(Exception):
    """Base exception for core and tool errors with structured error information."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        retryable: bool = False,
        original_error: Optional[Exception] = None
    ):
        """
        Initialize a tool error.

        Args:
            code: The error code
            message: Human-readable error message
            retryable: Whether the operation can be retried
            original_error: The original exception if this wraps another error
        """
        self.code = code
        self.message = message
        self.retryable = retryable
        self.original_error = original_error
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert error to dictionary format for MCP response."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "retryable": self.retryable
            }
        }


class InvalidTransitionError(ToolError):
    """Raised when a requested status is not reachable from the current one."""

    def __init__(self, current_status: str, target_status: str, allowed: Iterable[str] = ()):
        self.current_status = current_status
        self.target_status = target_status
        self.allowed = list(allowed)
        message = f"Invalid transition from {current_status} to {target_status}"
        if self.allowed:
            message += ". Allowed transitions: " + ", ".join(self.allowed)
        super().__init__(code=ErrorCode.INVALID_TRANSITION, message=message, retryable=False)


class MalformedSuggestionError(ToolError):
    """Raised when a suggestion's schedule cannot be interpreted."""

    def __init__(self, message: str, suggestion_id: Optional[str] = None):
        self.suggestion_id = suggestion_id
        if suggestion_id:
            message = f"Malformed suggestion {suggestion_id}: {message}"
        else:
            message = f"Malformed suggestion: {message}"
        super().__init__(code=ErrorCode.MALFORMED_SUGGESTION, message=message, retryable=False)


def sanitize_path(path: str) -> str:
    """
    Sanitize file paths to avoid exposing sensitive system details.

    Returns only the basename for absolute paths, keeps relative paths.

    Args:
        path: The file path to sanitize

    Returns:
        Sanitized path string
    """
    import os
    if os.path.isabs(path):
        return os.path.basename(path)
    return path


def sanitize_sql_error(error_msg: str) -> str:
    """
    Sanitize SQL error messages to remove statements and absolute paths.

    Args:
        error_msg: The original error message

    Returns:
        Sanitized error message
    """
    sanitized = re.sub(r'SQL:.*', '', error_msg, flags=re.IGNORECASE)
    sanitized = re.sub(
        r'\b(SELECT|INSERT|UPDATE|DELETE|CREATE)\b.*', '[SQL query]', sanitized, flags=re.IGNORECASE
    )
    sanitized = re.sub(r'/[^\s]+/', '[path]/', sanitized)

    return sanitized.strip()


def sanitize_stack_trace(error_msg: str) -> str:
    """Keep only the first line of an error message."""
    lines = error_msg.split('\n')
    if lines:
        return lines[0].strip()
    return error_msg


def create_validation_error(message: str) -> ToolError:
    """
    Create a validation error.

    Args:
        message: Description of the validation failure

    Returns:
        ToolError with VALIDATION_ERROR code
    """
    return ToolError(
        code=ErrorCode.VALIDATION_ERROR,
        message=message,
        retryable=False
    )


def create_not_found_error(entity: str, record_id: str) -> ToolError:
    """
    Create a not-found error for an unknown record id.

    Args:
        entity: Human-readable entity name (e.g. "Application")
        record_id: The id that was looked up

    Returns:
        ToolError with NOT_FOUND code
    """
    return ToolError(
        code=ErrorCode.NOT_FOUND,
        message=f"{entity} not found: {record_id}",
        retryable=False
    )


def create_db_not_found_error(db_path: str) -> ToolError:
    """Create a database-not-found error with a sanitized path."""
    sanitized_path = sanitize_path(db_path)
    return ToolError(
        code=ErrorCode.DB_NOT_FOUND,
        message=f"Database not found: {sanitized_path}",
        retryable=False
    )


def create_db_error(message: str, retryable: bool = False, original_error: Optional[Exception] = None) -> ToolError:
    """
    Create a database error.

    Args:
        message: Description of the database error
        retryable: Whether the operation can be retried
        original_error: The original exception

    Returns:
        ToolError with DB_ERROR code
    """
    sanitized_message = sanitize_sql_error(message)
    sanitized_message = sanitize_stack_trace(sanitized_message)

    return ToolError(
        code=ErrorCode.DB_ERROR,
        message=f"Database error: {sanitized_message}",
        retryable=retryable,
        original_error=original_error
    )


def create_internal_error(message: str, original_error: Optional[Exception] = None) -> ToolError:
    """
    Create an internal error for unexpected exceptions.

    Args:
        message: Description of the internal error
        original_error: The original exception

    Returns:
        ToolError with INTERNAL_ERROR code
    """
    sanitized_message = sanitize_stack_trace(message)

    return ToolError(
        code=ErrorCode.INTERNAL_ERROR,
        message=f"Internal error: {sanitized_message}",
        retryable=True,
        original_error=original_error
    )
