"""Projects sidebar logic: list, create, delete, select, logout."""

import logging
from enum import Enum
from typing import List, Optional, Set

from curatai.api.auth import AuthService
from curatai.api.projects import ProjectsApi
from curatai.models import Project
from .exceptions import ApiError, ValidationError
from .notifications import Notifier
from .validation import validate_project_name
from .workspace import Workspace, UPLOAD_BUSY_MESSAGE

logger = logging.getLogger(__name__)

MISSING_USER_MESSAGE = "User ID not found. Please log in."


class SortKey(str, Enum):
    """Project list ordering."""
    RECENT = "recent"
    NAME = "name"
    IMAGES = "images"


class ProjectsController:
    """State and actions behind the project sidebar and the projects page.

    Creating, deleting, switching projects and logging out are all refused
    while an upload is running anywhere in the app.
    """

    def __init__(
        self,
        workspace: Workspace,
        projects_api: ProjectsApi,
        notifier: Notifier,
        auth: Optional[AuthService] = None,
    ):
        self.workspace = workspace
        self.api = projects_api
        self.notifier = notifier
        self.auth = auth

        self.projects: List[Project] = []
        self.loaded = False
        self.load_failed = False
        self.is_loading = False
        self.is_creating = False
        self.deleting_ids: Set[str] = set()
        self.create_dialog_open = False

    @property
    def selected_project(self) -> Optional[Project]:
        selected = self.workspace.selected_project_id
        return next((p for p in self.projects if p.id == selected), None)

    @property
    def can_create(self) -> bool:
        return not self.workspace.is_uploading and not self.is_creating

    @property
    def total_images(self) -> int:
        return sum(p.image_count or 0 for p in self.projects)

    def _blocked_by_upload(self) -> bool:
        if self.workspace.is_uploading:
            self.notifier.error(UPLOAD_BUSY_MESSAGE)
            return True
        return False

    def load(self) -> List[Project]:
        """Fetch the user's projects."""
        user_id = self.workspace.user_id
        if not user_id:
            self.load_failed = True
            self.notifier.error(MISSING_USER_MESSAGE)
            return self.projects

        self.is_loading = True
        try:
            self.projects = self.api.get_all(user_id)
            self.loaded = True
            self.load_failed = False
            logger.info(f"Loaded {len(self.projects)} projects")
        except ApiError:
            self.load_failed = True
            self.notifier.error("Failed to load projects")
        finally:
            self.is_loading = False
        return self.projects

    def ensure_loaded(self) -> None:
        """Load once. After a failure only an explicit ``load()`` fetches again."""
        if not self.loaded and not self.load_failed and not self.is_loading:
            self.load()

    # Create dialog
    def open_create_dialog(self) -> None:
        if self._blocked_by_upload():
            return
        self.create_dialog_open = True

    def close_create_dialog(self) -> None:
        self.create_dialog_open = False

    def create(self, name: str) -> Optional[str]:
        """Create a project and select it. Returns the new id, or None on failure."""
        if self._blocked_by_upload():
            return None
        try:
            name = validate_project_name(name)
        except ValidationError as e:
            self.notifier.error(e.message)
            return None

        user_id = self.workspace.user_id
        if not user_id:
            self.notifier.error(MISSING_USER_MESSAGE)
            return None

        self.is_creating = True
        try:
            project_id = self.api.create(name, user_id)
        except ApiError:
            self.notifier.error("Failed to create project")
            return None
        finally:
            self.is_creating = False

        self.load()
        self.create_dialog_open = False
        if project_id:
            self.workspace.select_project(project_id)
        self.notifier.success("Project created successfully")
        return project_id

    def delete(self, project_id: str) -> bool:
        """Delete one project; a second call for the same id while deleting is ignored."""
        if self._blocked_by_upload():
            return False
        if project_id in self.deleting_ids:
            return False

        self.deleting_ids.add(project_id)
        try:
            self.api.delete(project_id)
        except ApiError:
            self.notifier.error("Failed to delete project")
            return False
        finally:
            self.deleting_ids.discard(project_id)

        self.projects = [p for p in self.projects if p.id != project_id]
        if self.workspace.selected_project_id == project_id:
            self.workspace.clear_selection()
        self.notifier.success("Project deleted successfully")
        return True

    def select(self, project_id: Optional[str]) -> bool:
        """Switch the selected project (emitted to every listening view)."""
        if self._blocked_by_upload():
            return False
        if project_id and project_id in self.deleting_ids:
            return False
        return self.workspace.select_project(project_id)

    def logout(self) -> bool:
        """Clear the local session. The UI routes to the landing page on True."""
        if self._blocked_by_upload():
            return False
        if self.auth is not None:
            self.auth.logout()
        self.workspace.reset()
        self.projects = []
        self.loaded = False
        self.load_failed = False
        self.notifier.success("Logged out successfully")
        return True

    def filtered(self, query: str = "", sort_by: SortKey = SortKey.RECENT) -> List[Project]:
        """Projects whose name contains ``query`` (case-insensitive), ordered by ``sort_by``."""
        needle = (query or "").strip().lower()
        projects = [p for p in self.projects if needle in p.project_name.lower()]

        sort_by = SortKey(sort_by)
        if sort_by == SortKey.NAME:
            return sorted(projects, key=lambda p: p.project_name.lower())
        if sort_by == SortKey.IMAGES:
            return sorted(projects, key=lambda p: p.image_count or 0, reverse=True)

        def created(p: Project) -> float:
            dt = p.created_datetime
            return dt.timestamp() if dt else 0.0

        return sorted(projects, key=created, reverse=True)
