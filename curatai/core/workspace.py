"""Top-level application state shared by sibling controllers.

Holds what the sidebar, gallery and albums views all need to agree on: the
signed-in user, the selected project and whether an upload is running.
Project-scoped fetches take a ``ProjectTicket``; changing the selection
cancels the old ticket so late responses for the previous project are
dropped instead of overwriting the new project's state.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

from curatai.api.client import CancelToken
from curatai.models import User
from .exceptions import UploadInProgressError

logger = logging.getLogger(__name__)

UPLOAD_BUSY_MESSAGE = "Please wait until the upload is complete"

ProjectListener = Callable[[Optional[str]], None]


@dataclass(frozen=True)
class ProjectTicket:
    """Identity of one project-scoped request."""
    project_id: Optional[str]
    generation: int
    cancel_token: CancelToken


class Workspace:
    """Explicit application state passed to every controller."""

    def __init__(self, user: Optional[User] = None):
        self.user = user
        self.selected_project_id: Optional[str] = None
        self.is_uploading = False
        self.upload_progress = 0
        self._generation = 0
        self._cancel_token = CancelToken()
        self._listeners: List[ProjectListener] = []

    @property
    def user_id(self) -> Optional[str]:
        return self.user.id if self.user and self.user.id else None

    # Project selection
    def on_project_change(self, listener: ProjectListener) -> None:
        """Register a callback run synchronously on every selection change."""
        self._listeners.append(listener)

    def select_project(self, project_id: Optional[str]) -> bool:
        """Change the selected project. Returns False when nothing changed."""
        project_id = project_id or None
        if project_id == self.selected_project_id:
            return False

        self._cancel_token.cancel()
        self._cancel_token = CancelToken()
        self._generation += 1
        previous, self.selected_project_id = self.selected_project_id, project_id
        logger.info(f"Selected project changed: {previous} -> {project_id}")

        for listener in list(self._listeners):
            listener(project_id)
        return True

    def clear_selection(self) -> None:
        self.select_project(None)

    def ticket(self) -> ProjectTicket:
        """Ticket for a request about the currently selected project."""
        return ProjectTicket(self.selected_project_id, self._generation, self._cancel_token)

    def is_current(self, ticket: ProjectTicket) -> bool:
        """True while the ticket's project is still the selected one."""
        return ticket.generation == self._generation and not ticket.cancel_token.cancelled

    # Upload mutual exclusion
    def ensure_not_uploading(self) -> None:
        if self.is_uploading:
            raise UploadInProgressError(UPLOAD_BUSY_MESSAGE)

    def set_upload_progress(self, percent: int) -> None:
        self.upload_progress = max(0, min(100, int(percent)))

    @contextmanager
    def upload_session(self) -> Iterator[Callable[[int], None]]:
        """Hold the global upload flag; yields the progress setter."""
        self.ensure_not_uploading()
        self.is_uploading = True
        self.upload_progress = 0
        try:
            yield self.set_upload_progress
        finally:
            self.is_uploading = False
            self.upload_progress = 0

    def reset(self) -> None:
        """Forget the user and selection (logout)."""
        self.clear_selection()
        self.user = None
