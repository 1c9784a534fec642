"""
Unit tests for the error hierarchy.
"""

from unittest.mock import patch

from gantz.error_handling import (
    AuthorizationError,
    DatabaseError,
    ErrorCategory,
    GantzError,
    UploadError,
    ValidationError,
)


class TestGantzError:
    def test_defaults_from_category(self):
        error = AuthorizationError("admin only")

        assert error.category == ErrorCategory.AUTHORIZATION
        assert error.code == "access_denied"
        assert error.user_message == "간츠만 가능"
        assert error.recoverable is False

    def test_validation_message_shown_to_user(self):
        assert ValidationError("제목을 입력해 주세요.").user_message == "제목을 입력해 주세요."

    def test_error_info(self):
        original = RuntimeError("disk full")
        error = DatabaseError("insert failed", code="insert_memo_failed", original_exception=original)

        info = error.get_error_info()

        assert info.code == "insert_memo_failed"
        assert info.message == "insert failed"
        assert info.to_dict()["category"] == "database"
        assert error.original_exception is original

    def test_logs_on_construction(self):
        with patch("gantz.error_handling.log_error") as mock_log_error:
            error = UploadError("bucket rejected", details={"key": "images/1-ff.jpg"})

        mock_log_error.assert_called_once()
        logged_error, context = mock_log_error.call_args[0]
        assert logged_error is error
        assert context["key"] == "images/1-ff.jpg"
        assert isinstance(error, GantzError)

    def test_security_events_for_auth_errors(self):
        with patch("gantz.error_handling.log_security_event") as mock_security:
            AuthorizationError("admin only")

        mock_security.assert_called_once()
