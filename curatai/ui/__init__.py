"""Streamlit front end.

Renders ``curatai.core`` controller state; all backend traffic goes through
``curatai.api``.
"""

from .session import get_session, SessionState

__all__ = [
    "get_session",
    "SessionState",
]
