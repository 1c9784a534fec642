"""
Centralized error classification for gantz application.

Every failure surfaced to a page is a ``GantzError`` subclass carrying a
category, a stable code and a user-facing message. Errors log themselves on
construction so call sites only need to render them.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from .logging_config import get_logger, log_error, log_security_event

logger = get_logger(__name__)


class ErrorCategory(Enum):
    """Error categories for classification and handling."""

    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    UPLOAD = "upload"
    DATABASE = "database"
    STORAGE = "storage"
    VALIDATION = "validation"
    NETWORK = "network"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class ErrorInfo:
    """Structured error information."""

    category: ErrorCategory
    severity: ErrorSeverity
    code: str
    message: str
    user_message: str
    details: dict[str, Any]
    timestamp: datetime
    recoverable: bool = True
    retry_suggested: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert error info to dictionary."""
        return {
            "category": self.category.value,
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
            "user_message": self.user_message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "recoverable": self.recoverable,
            "retry_suggested": self.retry_suggested,
        }


USER_MESSAGES = {
    ErrorCategory.AUTHENTICATION: "로그인에 실패했습니다.",
    ErrorCategory.AUTHORIZATION: "간츠만 가능",
    ErrorCategory.UPLOAD: "업로드에 실패했습니다.",
    ErrorCategory.DATABASE: "데이터를 처리하지 못했습니다.",
    ErrorCategory.STORAGE: "저장소 오류가 발생했습니다.",
    ErrorCategory.VALIDATION: "입력 내용을 확인해 주세요.",
    ErrorCategory.NETWORK: "네트워크 오류가 발생했습니다.",
    ErrorCategory.UNKNOWN: "알 수 없는 오류가 발생했습니다.",
}


class GantzError(Exception):
    """Base exception class for gantz application."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        recoverable: bool = True,
        retry_suggested: bool = False,
        original_exception: Exception | None = None,
    ):
        super().__init__(message)
        self.category = category
        self.severity = severity
        self.code = code or f"{category.value}_error"
        self.user_message = user_message or USER_MESSAGES.get(category, "오류가 발생했습니다.")
        self.details = details or {}
        self.recoverable = recoverable
        self.retry_suggested = retry_suggested
        self.original_exception = original_exception
        self.timestamp = datetime.now()

        self._log_error()

    def _log_error(self) -> None:
        """Log the error with appropriate level."""
        error_context = {
            "category": self.category.value,
            "severity": self.severity.value,
            "code": self.code,
            "recoverable": self.recoverable,
            **self.details,
        }

        if self.original_exception:
            error_context["original_exception"] = str(self.original_exception)

        log_error(self, error_context)

        if self.category in [ErrorCategory.AUTHENTICATION, ErrorCategory.AUTHORIZATION]:
            log_security_event(self.category.value, context=error_context)

    def get_error_info(self) -> ErrorInfo:
        """Get structured error information."""
        return ErrorInfo(
            category=self.category,
            severity=self.severity,
            code=self.code,
            message=str(self),
            user_message=self.user_message,
            details=self.details,
            timestamp=self.timestamp,
            recoverable=self.recoverable,
            retry_suggested=self.retry_suggested,
        )


class AuthenticationError(GantzError):
    """Bad credentials, missing or expired session."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.AUTHENTICATION,
            severity=ErrorSeverity.HIGH,
            code=code or "auth_failed",
            user_message=user_message,
            details=details,
            recoverable=True,
            original_exception=original_exception,
        )


class AuthorizationError(GantzError):
    """A non-admin actor attempted an admin-only write."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.AUTHORIZATION,
            severity=ErrorSeverity.HIGH,
            code=code or "access_denied",
            user_message=user_message,
            details=details,
            recoverable=False,
            original_exception=original_exception,
        )


class ValidationError(GantzError):
    """Rejected input (blank required field, duplicate extras key, bad file)."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.LOW,
            code=code or "validation_failed",
            user_message=user_message or message,
            details=details,
            recoverable=True,
            original_exception=original_exception,
        )


class DatabaseError(GantzError):
    """Query or mutation rejected by the record store."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.DATABASE,
            severity=ErrorSeverity.HIGH,
            code=code or "database_error",
            user_message=user_message,
            details=details,
            recoverable=True,
            original_exception=original_exception,
        )


class StorageError(GantzError):
    """Object store misconfiguration or client failure."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.STORAGE,
            severity=ErrorSeverity.HIGH,
            code=code or "storage_error",
            user_message=user_message,
            details=details,
            recoverable=True,
            original_exception=original_exception,
        )


class UploadError(GantzError):
    """The object store rejected an upload."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.UPLOAD,
            severity=ErrorSeverity.MEDIUM,
            code=code or "upload_failed",
            user_message=user_message,
            details=details,
            recoverable=True,
            original_exception=original_exception,
        )


class NetworkError(GantzError):
    """The identity provider could not be reached."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.NETWORK,
            severity=ErrorSeverity.MEDIUM,
            code=code or "network_error",
            user_message=user_message,
            details=details,
            recoverable=True,
            retry_suggested=True,
            original_exception=original_exception,
        )
