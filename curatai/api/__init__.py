"""HTTP layer: client, auth and resource APIs.

This package talks to the backend only; it holds no UI state.
"""

from .client import ApiClient, CancelToken, get_client, set_client
from .auth import AuthService
from .projects import ProjectsApi
from .images import ImagesApi
from .albums import AlbumsApi

__all__ = [
    "ApiClient",
    "CancelToken",
    "get_client",
    "set_client",
    "AuthService",
    "ProjectsApi",
    "ImagesApi",
    "AlbumsApi",
]
