"""Shared fixtures: isolated storage/config, fake HTTP responses, controller wiring."""

import io
import json
from unittest.mock import Mock

import pytest
import requests
from PIL import Image as PILImage

from curatai.api.client import ApiClient, set_client
from curatai.config import AppConfig, set_config
from curatai.core.notifications import Notifier
from curatai.core.workspace import Workspace
from curatai.models import Album, AlbumImages, Image, Project, User
from curatai.storage import PersistentStorage, set_storage


@pytest.fixture(autouse=True)
def isolated_globals(tmp_path):
    """Never touch the real ~/.curatai or the process-wide singletons."""
    config = AppConfig(backend_url="http://backend.test", storage_path=tmp_path / "storage.json")
    set_config(config)
    set_storage(PersistentStorage(tmp_path / "storage.json"))
    yield
    set_config(None)
    set_storage(None)
    set_client(None)


@pytest.fixture
def config(tmp_path):
    return AppConfig(backend_url="http://backend.test/", storage_path=tmp_path / "storage.json")


@pytest.fixture
def storage(tmp_path):
    return PersistentStorage(tmp_path / "session.json")


@pytest.fixture
def make_response():
    """Build a real requests.Response with the given status and JSON body."""
    def _make(status_code=200, body=None, raw=None, url="http://backend.test/"):
        response = requests.Response()
        response.status_code = status_code
        response.url = url
        if raw is not None:
            response._content = raw
        elif body is None:
            response._content = b""
        else:
            response._content = json.dumps(body).encode("utf-8")
        return response
    return _make


@pytest.fixture
def session():
    """Stand-in for requests.Session."""
    fake = Mock(spec=requests.Session)
    fake.headers = {}
    return fake


@pytest.fixture
def client(config, storage, session):
    storage.set_item("access_token", "tok-123")
    return ApiClient(config=config, storage=storage, session=session)


@pytest.fixture
def user():
    return User(id="u1", email="ann@example.com", username="ann")


@pytest.fixture
def workspace(user):
    return Workspace(user)


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def projects_api():
    api = Mock()
    api.get_all.return_value = [
        Project(id="p1", project_name="Beach", image_count=3, created_at="2024-05-01T10:00:00Z"),
        Project(id="p2", project_name="alps", image_count=10, created_at="2024-06-01T10:00:00Z"),
        Project(id="p3", project_name="Birthday", image_count=0, created_at="2023-01-01T10:00:00Z"),
    ]
    api.create.return_value = "p9"
    return api


@pytest.fixture
def images_api():
    api = Mock()
    api.get_project_images.return_value = [
        Image(id="i1", image_url="http://cdn.test/p1/a.jpg", project_id="p1"),
        Image(id="i2", image_url="http://cdn.test/p1/b.jpg", project_id="p1"),
    ]
    return api


@pytest.fixture
def albums_api():
    api = Mock()
    api.get_all.return_value = [
        Album(id="a1", person_name="Alice", project_id="p1", image_group=["http://cdn.test/p1/a.jpg"]),
        Album(id="a2", person_name="Bob", project_id="p1"),
    ]
    api.get_album_images.return_value = AlbumImages(
        image_links=["http://cdn.test/p1/a.jpg", "http://cdn.test/p1/c.jpg"],
    )
    api.generate.return_value = ["a3"]
    return api


@pytest.fixture
def jpeg_bytes():
    """Factory for in-memory JPEG images."""
    def _make(size=(200, 100), color=(200, 30, 30)):
        buf = io.BytesIO()
        PILImage.new("RGB", size, color).save(buf, format="JPEG")
        return buf.getvalue()
    return _make
