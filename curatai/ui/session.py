"""Session state management for the Streamlit app."""

from dataclasses import dataclass, field
from typing import Optional

import streamlit as st

from curatai.api import AlbumsApi, ApiClient, AuthService, ImagesApi, ProjectsApi
from curatai.core.albums import AlbumsController
from curatai.core.gallery import GalleryController
from curatai.core.notifications import Notifier
from curatai.core.projects import ProjectsController
from curatai.core.voice import VoiceInput
from curatai.core.workspace import Workspace
from curatai.storage import MemoryStorage


@dataclass
class SessionState:
    """Centralized per-browser-session container.

    Controllers share one ``Workspace``; everything here lives in
    ``st.session_state`` and dies with the browser tab. Each session owns its
    ``ApiClient`` and token storage, so visitors never share a login.
    """

    client: Optional[ApiClient] = None
    workspace: Workspace = field(default_factory=Workspace)
    notifier: Notifier = field(default_factory=Notifier)
    auth: Optional[AuthService] = None
    projects: Optional[ProjectsController] = None
    gallery: Optional[GalleryController] = None
    albums: Optional[AlbumsController] = None
    voice: Optional[VoiceInput] = None

    def __post_init__(self):
        if self.client is None:
            self.client = ApiClient(storage=MemoryStorage())
        client = self.client
        self.auth = self.auth or AuthService(client)
        images_api = ImagesApi(client)
        albums_api = AlbumsApi(client)
        self.projects = self.projects or ProjectsController(
            self.workspace, ProjectsApi(client), self.notifier, auth=self.auth
        )
        self.gallery = self.gallery or GalleryController(self.workspace, images_api, albums_api, self.notifier)
        self.albums = self.albums or AlbumsController(
            self.workspace, albums_api, images_api, self.notifier, client=client
        )
        self.voice = self.voice or VoiceInput(self.notifier)
        if self.workspace.user is None:
            self.workspace.user = self.auth.current_user()


def get_session() -> SessionState:
    """Get or create session state."""
    if "app_state" not in st.session_state:
        st.session_state.app_state = SessionState()
    return st.session_state.app_state


def reset_session() -> None:
    """Start over with fresh controllers and storage, keeping pending toasts."""
    previous = st.session_state.get("app_state")
    notifier = previous.notifier if previous is not None else Notifier()
    st.session_state.app_state = SessionState(notifier=notifier)


def navigate(page: str) -> None:
    """Switch page and rerun."""
    st.session_state.current_page = page
    st.rerun()


def show_notifications() -> None:
    """Display any pending notifications as toasts."""
    icons = {"success": "✅", "error": "❌", "warning": "⚠️", "info": "ℹ️"}
    for notification in get_session().notifier.pop():
        st.toast(notification.message, icon=icons.get(notification.level))
