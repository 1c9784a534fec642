"""Error display helpers for Streamlit pages."""

from typing import Any

import streamlit as st
from streamlit.runtime.scriptrunner_utils.exceptions import RerunException, StopException

from ...error_handling import GantzError
from ...logging_config import log_error


def user_message_for(error: Exception) -> str:
    """Text to show the viewer for ``error``."""
    if isinstance(error, GantzError):
        return error.user_message
    return f"오류가 발생했습니다: {error}"


def display_error(error: Exception, container: Any = None) -> None:
    """Show an inline error without the stack trace."""
    target = container if container is not None else st
    target.error(user_message_for(error))


class StreamlitErrorContext:
    """Render exceptions of a page block as inline errors."""

    def __init__(self, operation: str, container: Any = None):
        self.operation = operation
        self.container = container

    def __enter__(self) -> "StreamlitErrorContext":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> bool:
        if exc_type is None:
            return False
        # st.rerun() and st.stop() are control flow
        if isinstance(exc_val, RerunException | StopException):
            return False
        if not isinstance(exc_val, GantzError):
            log_error(exc_val, {"operation": self.operation})
        display_error(exc_val, self.container)
        return True


def error_context(operation: str, container: Any = None) -> StreamlitErrorContext:
    return StreamlitErrorContext(operation, container)
