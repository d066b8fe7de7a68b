"""Projects API."""

import logging
from typing import List, Optional

from curatai.api.client import ApiClient, CancelToken, get_client
from curatai.core.exceptions import ApiError
from curatai.models import Project

logger = logging.getLogger(__name__)


class ProjectsApi:
    """Typed wrappers for the ``/projects`` resource."""

    def __init__(self, client: Optional[ApiClient] = None):
        self.client = client or get_client()

    def get_all(self, user_id: str, cancel_token: Optional[CancelToken] = None) -> List[Project]:
        """List projects for a user."""
        try:
            data = self.client.get("/projects", params={"user_id": user_id}, cancel_token=cancel_token)
        except ApiError as e:
            logger.error(f"Error fetching projects: {e.message}")
            raise

        items = data.get("projects", []) if isinstance(data, dict) else data
        projects = [Project.from_dict(item) for item in (items or [])]
        # A project without an id cannot be selected or deleted
        projects = [p for p in projects if p.id]
        logger.debug(f"Fetched {len(projects)} projects for user {user_id}")
        return projects

    def create(self, project_name: str, user_id: str) -> str:
        """Create a project. Returns the new project id."""
        try:
            data = self.client.post("/projects", json={"project_name": project_name, "user_id": user_id})
        except ApiError as e:
            logger.error(f"Error creating project: {e.message}")
            raise
        project_id = str(data.get("project_id") or data.get("id") or "")
        logger.info(f"Created project '{project_name}' ({project_id or 'no id returned'})")
        return project_id

    def delete(self, project_id: str) -> dict:
        """Delete a project."""
        try:
            data = self.client.delete(f"/projects/{project_id}")
        except ApiError as e:
            logger.error(f"Error deleting project: {e.message}")
            raise
        logger.info(f"Deleted project {project_id}")
        return data

    def validate(self, project_id: str, cancel_token: Optional[CancelToken] = None) -> Project:
        """Fetch a single project; raises ApiError when it does not exist."""
        try:
            data = self.client.get(f"/projects/{project_id}/validate", cancel_token=cancel_token)
        except ApiError as e:
            logger.error(f"Error validating project: {e.message}")
            raise
        project_data = data.get("project", data) if isinstance(data, dict) else {}
        project = Project.from_dict(project_data)
        if not project.id:
            project.id = project_id
        return project
