"""Error handling for the library bundle exporter.

This module provides:
- Custom exception classes for the failure modes of an export run
- User-friendly error message generation with suggested actions
- A centralized error handling service with a bounded error history
"""

import json
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any

import structlog

log = structlog.stdlib.get_logger()


class ErrorCategory(Enum):
    """Categories of errors for classification and handling."""
    SOURCE = "source"
    FILE_SYSTEM = "file_system"
    SERIALIZATION = "serialization"
    PACKAGING = "packaging"
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    CONCURRENCY = "concurrency"
    UNEXPECTED = "unexpected"


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass(frozen=True)
class ErrorContext:
    """Context information for an error."""
    operation: str
    component: str
    details: dict[str, Any]


@dataclass(frozen=True)
class UserFriendlyError:
    """User-friendly error representation with suggested actions."""
    message: str
    category: ErrorCategory
    severity: ErrorSeverity
    suggested_actions: list[str]
    technical_details: str | None = None
    recoverable: bool = True


class AppError(Exception):
    """Base exception class for application errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNEXPECTED,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        suggested_actions: list[str] | None = None,
        technical_details: str | None = None,
        recoverable: bool = True,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.suggested_actions = suggested_actions or []
        self.technical_details = technical_details
        self.recoverable = recoverable
        self.context = context

    def to_user_friendly(self) -> UserFriendlyError:
        """Convert to user-friendly error representation."""
        return UserFriendlyError(
            message=self.message,
            category=self.category,
            severity=self.severity,
            suggested_actions=self.suggested_actions,
            technical_details=self.technical_details,
            recoverable=self.recoverable,
        )


def _describe(original_error: Exception | None) -> str | None:
    if original_error is None:
        return None
    return f"{type(original_error).__name__}: {original_error}"


class SourceReadError(AppError):
    """Raised when the library database cannot be enumerated."""

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
        path: str | None = None,
    ) -> None:
        technical_details = _describe(original_error)
        if path:
            technical_details = f"Path: {path}" + (f"\n{technical_details}" if technical_details else "")

        super().__init__(
            message=message,
            category=ErrorCategory.SOURCE,
            severity=ErrorSeverity.ERROR,
            suggested_actions=[
                "Check that the library snapshot exists and is readable",
                "Re-create the library snapshot",
            ],
            technical_details=technical_details,
            recoverable=False,
        )
        self.original_error = original_error
        self.path = path


class FileSystemError(AppError):
    """Exception for file system-related errors."""

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
        path: str | None = None,
        operation: str | None = None,
    ) -> None:
        technical_details = _describe(original_error)
        if path:
            technical_details = f"Path: {path}" + (f"\n{technical_details}" if technical_details else "")

        super().__init__(
            message=message,
            category=ErrorCategory.FILE_SYSTEM,
            severity=ErrorSeverity.ERROR,
            suggested_actions=self._get_suggested_actions(original_error),
            technical_details=technical_details,
            recoverable=True,
        )
        self.original_error = original_error
        self.path = path
        self.operation = operation

    @staticmethod
    def _get_suggested_actions(original_error: Exception | None) -> list[str]:
        """Get suggested actions based on error type."""
        if isinstance(original_error, PermissionError):
            return [
                "Check file/directory permissions",
                "Choose a different export location",
            ]
        elif isinstance(original_error, FileNotFoundError):
            return [
                "Verify the file path is correct",
                "Check if the file was moved or deleted",
            ]
        elif isinstance(original_error, OSError):
            error_str = str(original_error).lower()
            if "no space" in error_str or "disk full" in error_str:
                return [
                    "Free up disk space",
                    "Choose a different export location",
                ]

        return [
            "Check the file path and permissions",
            "Ensure sufficient disk space",
        ]


class SerializationError(AppError):
    """Raised when the manifest cannot be serialized or written."""

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
        path: str | None = None,
    ) -> None:
        technical_details = _describe(original_error)
        if path:
            technical_details = f"Path: {path}" + (f"\n{technical_details}" if technical_details else "")

        super().__init__(
            message=message,
            category=ErrorCategory.SERIALIZATION,
            severity=ErrorSeverity.ERROR,
            suggested_actions=[
                "Check the library for records with unsupported values",
                "Ensure the export location is writable",
            ],
            technical_details=technical_details,
            recoverable=False,
        )
        self.original_error = original_error
        self.path = path


class PackagingError(AppError):
    """Raised when the bundle archive cannot be created."""

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
        archive_path: str | None = None,
        staging_root: str | None = None,
    ) -> None:
        technical_details = _describe(original_error)
        if archive_path:
            technical_details = f"Archive: {archive_path}" + (f"\n{technical_details}" if technical_details else "")
        if staging_root:
            technical_details = (technical_details or "") + f"\nStaging: {staging_root}"

        super().__init__(
            message=message,
            category=ErrorCategory.PACKAGING,
            severity=ErrorSeverity.ERROR,
            suggested_actions=[
                "Ensure sufficient disk space",
                "Inspect the staging directory left behind",
                "Run the export again",
            ],
            technical_details=technical_details,
            recoverable=False,
        )
        self.original_error = original_error
        self.archive_path = archive_path
        self.staging_root = staging_root


class ExportInProgressError(AppError):
    """Raised when an export is requested while another one is running."""

    def __init__(self, message: str = "An export is already in progress.") -> None:
        super().__init__(
            message=message,
            category=ErrorCategory.CONCURRENCY,
            severity=ErrorSeverity.WARNING,
            suggested_actions=["Wait for the running export to finish"],
            recoverable=True,
        )


class ValidationError(AppError):
    """Exception for validation-related errors."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        constraints: list[str] | None = None,
    ) -> None:
        suggested_actions = ["Review the input requirements"]
        if constraints:
            suggested_actions.extend([f"Ensure: {c}" for c in constraints])

        technical_details = None
        if field:
            technical_details = f"Field: {field}"
        if value is not None:
            value_str = str(value)[:100]  # Truncate long values
            technical_details = (technical_details or "") + f"\nValue: {value_str}"

        super().__init__(
            message=message,
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.WARNING,
            suggested_actions=suggested_actions,
            technical_details=technical_details,
            recoverable=True,
        )
        self.field = field
        self.value = value
        self.constraints = constraints or []


class ConfigurationError(AppError):
    """Exception for configuration-related errors."""

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        current_value: Any = None,
        expected: str | None = None,
    ) -> None:
        suggested_actions = [
            "Check the configuration settings",
            "Reset to default values if needed",
        ]
        if expected:
            suggested_actions.append(f"Expected: {expected}")

        technical_details = None
        if setting:
            technical_details = f"Setting: {setting}"
        if current_value is not None:
            technical_details = (technical_details or "") + f"\nCurrent: {current_value}"

        super().__init__(
            message=message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.ERROR,
            suggested_actions=suggested_actions,
            technical_details=technical_details,
            recoverable=True,
        )
        self.setting = setting
        self.current_value = current_value
        self.expected = expected


class ErrorHandlingService:
    """Centralized error handling service.

    Converts arbitrary exceptions into user-friendly errors, logs the
    technical details once, and keeps a bounded history of what failed.
    """

    def __init__(self, max_history_size: int = 100) -> None:
        self._error_history: list[tuple[float, AppError]] = []
        self._max_history_size = max_history_size
        log.info("Error handling service initialized")

    def handle_error(
        self,
        error: Exception,
        operation: str,
        component: str,
        context: dict[str, Any] | None = None,
    ) -> UserFriendlyError:
        """Handle an error and return a user-friendly representation.

        Args:
            error: The exception that occurred
            operation: The operation being performed
            component: The component where the error occurred
            context: Additional context information

        Returns:
            User-friendly error representation
        """
        app_error = self._convert_to_app_error(error, operation, component, context)

        self._log_error(app_error, operation, component, context)

        self._error_history.append((time.time(), app_error))
        if len(self._error_history) > self._max_history_size:
            self._error_history.pop(0)

        return app_error.to_user_friendly()

    def _convert_to_app_error(
        self,
        error: Exception,
        operation: str,
        component: str,
        context: dict[str, Any] | None,
    ) -> AppError:
        """Convert a standard exception to an AppError."""
        if isinstance(error, AppError):
            return error

        path = context.get("path") if context else None

        if isinstance(error, PermissionError):
            return FileSystemError(
                message="Permission denied. You don't have access to this file or directory.",
                original_error=error,
                path=path,
                operation=operation,
            )
        elif isinstance(error, FileNotFoundError):
            return FileSystemError(
                message="The file or directory was not found.",
                original_error=error,
                path=path,
                operation=operation,
            )
        elif isinstance(error, OSError):
            return FileSystemError(
                message=f"A file system error occurred: {error}",
                original_error=error,
                path=path,
                operation=operation,
            )
        elif isinstance(error, json.JSONDecodeError):
            # JSONDecodeError is a ValueError, so it must be checked first
            return ValidationError(
                message="Invalid JSON format. The data could not be parsed.",
                field="json_content",
            )
        elif isinstance(error, ValueError):
            return ValidationError(
                message=str(error),
                field=context.get("field") if context else None,
                value=context.get("value") if context else None,
            )
        elif isinstance(error, TypeError):
            return ValidationError(
                message=f"Invalid data type: {error}",
                field=context.get("field") if context else None,
            )

        return AppError(
            message="An unexpected error occurred. Please try again.",
            category=ErrorCategory.UNEXPECTED,
            severity=ErrorSeverity.ERROR,
            technical_details=_describe(error),
            recoverable=True,
            context=ErrorContext(
                operation=operation,
                component=component,
                details=context or {},
            ),
        )

    def _log_error(
        self,
        error: AppError,
        operation: str,
        component: str,
        context: dict[str, Any] | None,
    ) -> None:
        """Log error with full technical details."""
        log_method = log.warning if error.severity == ErrorSeverity.WARNING else log.error

        log_method(
            "Error occurred",
            error_message=error.message,
            category=error.category.value,
            severity=error.severity.value,
            operation=operation,
            component=component,
            technical_details=error.technical_details,
            recoverable=error.recoverable,
            context=context,
        )

    def get_error_count_by_category(self) -> dict[ErrorCategory, int]:
        """Count the errors kept in history, per category."""
        counts: dict[ErrorCategory, int] = {}
        for _, error in self._error_history:
            counts[error.category] = counts.get(error.category, 0) + 1
        return counts

    def create_user_message(
        self,
        error: UserFriendlyError,
        include_suggestions: bool = True,
    ) -> str:
        """Create a formatted user message from an error.

        Args:
            error: The user-friendly error
            include_suggestions: Whether to include suggested actions

        Returns:
            Formatted message string
        """
        parts = [error.message]

        if include_suggestions and error.suggested_actions:
            parts.append("\nSuggested actions:")
            for action in error.suggested_actions[:3]:  # Limit to 3 suggestions
                parts.append(f"  • {action}")

        return "\n".join(parts)


# Global error handling service instance
_error_service: ErrorHandlingService | None = None


def get_error_service() -> ErrorHandlingService:
    """Get the global error handling service instance."""
    global _error_service
    if _error_service is None:
        _error_service = ErrorHandlingService()
    return _error_service


def handle_error(
    error: Exception,
    operation: str,
    component: str,
    context: dict[str, Any] | None = None,
) -> UserFriendlyError:
    """Convenience function to handle errors using the global service.

    Args:
        error: The exception that occurred
        operation: The operation being performed
        component: The component where the error occurred
        context: Additional context information

    Returns:
        User-friendly error representation
    """
    return get_error_service().handle_error(error, operation, component, context)
