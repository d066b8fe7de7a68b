"""Tests for the albums view controller and the create-album dialog."""

import io
from unittest.mock import Mock

import pytest
from PIL import Image as PILImage

from curatai.core.albums import AlbumsController, CreateAlbumDialog, ViewMode
from curatai.core.exceptions import ApiError
from curatai.models import Album, AlbumImages, Image


@pytest.fixture
def fetch_client(jpeg_bytes):
    client = Mock()
    client.fetch_bytes.return_value = jpeg_bytes((400, 200))
    return client


@pytest.fixture
def albums(workspace, albums_api, images_api, notifier, fetch_client):
    ctrl = AlbumsController(workspace, albums_api, images_api, notifier, client=fetch_client)
    workspace.select_project("p1")
    ctrl.ensure_loaded()
    return ctrl


@pytest.fixture
def source_image():
    return Image(id="i1", image_url="http://cdn.test/p1/a.jpg", project_id="p1")


class TestCreateAlbumDialog:
    """Tests for the creation gate."""

    def test_gate_needs_name_image_and_crop(self, source_image):
        dialog = CreateAlbumDialog()
        assert not dialog.can_create

        dialog.person_name = "  "
        dialog.select_image(source_image, b"bytes", (400, 200))
        assert not dialog.can_create

        dialog.person_name = "Alice"
        assert dialog.can_create

    def test_no_crop_until_size_known(self, source_image):
        dialog = CreateAlbumDialog()
        dialog.person_name = "Alice"

        dialog.select_image(source_image)

        assert dialog.crop_area is None
        assert not dialog.can_create

    def test_selecting_image_resets_center_and_zoom(self, source_image):
        dialog = CreateAlbumDialog()
        dialog.select_image(source_image, b"x", (400, 200))
        dialog.set_crop(center=(0.1, 0.9), zoom=2.5)

        dialog.select_image(Image(id="i2", image_url="u2", project_id="p1"), b"y", (300, 300))

        assert dialog.center == (0.5, 0.5)
        assert dialog.zoom == 1.0
        assert (dialog.crop_area.width, dialog.crop_area.height) == (300, 300)

    def test_set_crop_recomputes(self, source_image):
        dialog = CreateAlbumDialog()
        dialog.select_image(source_image, b"x", (400, 200))

        dialog.set_crop(zoom=2)

        assert dialog.crop_area.width == 100

    def test_busy_while_creating(self, source_image):
        dialog = CreateAlbumDialog()
        dialog.person_name = "Alice"
        dialog.select_image(source_image, b"x", (400, 200))
        dialog.is_creating = True

        assert not dialog.can_create


class TestGridDetail:
    """Tests for the grid/detail state machine."""

    def test_initial_load(self, albums, albums_api, images_api):
        assert [a.id for a in albums.albums] == ["a1", "a2"]
        assert len(albums.project_images) == 2
        assert albums.view_mode == ViewMode.GRID
        assert albums_api.get_all.call_args.args == ("p1",)

    def test_failed_load_is_not_repeated_on_rerun(self, workspace, albums_api, images_api, notifier, fetch_client):
        albums_api.get_all.side_effect = ApiError(500, "boom")
        ctrl = AlbumsController(workspace, albums_api, images_api, notifier, client=fetch_client)
        workspace.select_project("p1")

        for _ in range(3):
            ctrl.ensure_loaded()

        assert albums_api.get_all.call_count == 1
        assert notifier.messages == ["Failed to load albums"]
        assert ctrl.load_failed

        workspace.select_project("p2")
        assert not ctrl.load_failed

    def test_select_album_enters_detail_with_links(self, albums):
        assert albums.select_album(albums.albums[0])

        assert albums.view_mode == ViewMode.DETAIL
        assert albums.selected_album.id == "a1"
        assert albums.album_images == ["http://cdn.test/p1/a.jpg", "http://cdn.test/p1/c.jpg"]
        assert not albums.loading_album_images

    def test_failed_fetch_stays_in_grid(self, albums, albums_api, notifier):
        albums_api.get_album_images.side_effect = ApiError(500, "boom")

        assert not albums.select_album(albums.albums[0])

        assert albums.view_mode == ViewMode.GRID
        assert albums.selected_album is None
        assert notifier.messages == ["Failed to load album images"]

    def test_back_to_grid_clears_album(self, albums):
        albums.select_album(albums.albums[0])

        albums.back_to_grid()

        assert albums.view_mode == ViewMode.GRID
        assert albums.selected_album is None
        assert albums.album_images == []

    def test_delete_open_album_returns_to_grid(self, albums, albums_api, notifier):
        albums.select_album(albums.albums[0])

        assert albums.delete_album("a1")

        albums_api.delete.assert_called_once_with("a1")
        assert [a.id for a in albums.albums] == ["a2"]
        assert albums.view_mode == ViewMode.GRID
        assert albums.selected_album is None
        assert notifier.messages == ["Album deleted successfully"]

    def test_delete_failure_keeps_album(self, albums, albums_api, notifier):
        albums_api.delete.side_effect = ApiError(500, "boom")

        assert not albums.delete_album("a1")

        assert len(albums.albums) == 2
        assert notifier.messages == ["Failed to delete album"]


class TestProjectSwitch:
    """Tests for clearing and staleness across project changes."""

    def test_switch_clears_before_fetch(self, albums, workspace):
        albums.select_album(albums.albums[0])
        albums.open_create_dialog()

        workspace.select_project("p2")

        assert albums.albums == []
        assert albums.project_images == []
        assert albums.selected_album is None
        assert albums.album_images == []
        assert albums.view_mode == ViewMode.GRID
        assert not albums.dialog.is_open

    def test_late_album_list_is_dropped(self, workspace, albums_api, images_api, notifier, fetch_client):
        ctrl = AlbumsController(workspace, albums_api, images_api, notifier, client=fetch_client)
        workspace.select_project("p1")

        def slow_get_all(project_id, cancel_token=None):
            workspace.select_project("p2")
            return [Album(id="stale", person_name="Old", project_id=project_id)]

        albums_api.get_all.side_effect = slow_get_all

        ctrl.load_albums()

        assert ctrl.albums == []
        assert ctrl.loaded_for is None

    def test_late_album_detail_is_dropped(self, albums, workspace, albums_api):
        def slow_detail(album_id, cancel_token=None):
            workspace.select_project("p2")
            return AlbumImages(image_links=["http://cdn.test/p1/a.jpg"])

        albums_api.get_album_images.side_effect = slow_detail

        assert not albums.select_album(Album(id="a1", person_name="Alice", project_id="p1"))

        assert albums.view_mode == ViewMode.GRID
        assert albums.album_images == []


class TestCreateAlbum:
    """Tests for album creation from a cropped face."""

    def test_select_dialog_image_downloads_and_sizes(self, albums, fetch_client, source_image):
        albums.open_create_dialog()

        assert albums.select_dialog_image(source_image)

        fetch_client.fetch_bytes.assert_called_once()
        assert albums.dialog.image_size == (400, 200)
        assert (albums.dialog.crop_area.width, albums.dialog.crop_area.height) == (200, 200)

    def test_undecodable_image(self, albums, fetch_client, notifier, source_image):
        fetch_client.fetch_bytes.return_value = b"not an image"
        albums.open_create_dialog()

        assert not albums.select_dialog_image(source_image)

        assert albums.dialog.crop_area is None
        assert notifier.messages == ["Failed to load image"]

    def test_create_uploads_jpeg_crop(self, albums, albums_api, notifier, source_image):
        albums.open_create_dialog()
        albums.dialog.person_name = " Alice "
        albums.select_dialog_image(source_image)
        albums.dialog.set_crop(center=(0.25, 0.5), zoom=2)

        assert albums.create_album() == ["a3"]

        project_id, person_name, image = albums_api.generate.call_args.args
        assert (project_id, person_name) == ("p1", "Alice")
        with PILImage.open(io.BytesIO(image)) as img:
            assert img.format == "JPEG"
            assert img.size == (100, 100)
        assert albums_api.get_all.call_count == 2
        assert not albums.dialog.is_open
        assert notifier.messages == ["Album created successfully"]

    def test_create_blocked_by_gate(self, albums, albums_api, source_image):
        albums.open_create_dialog()
        albums.select_dialog_image(source_image)

        assert albums.create_album() is None

        albums_api.generate.assert_not_called()

    def test_create_failure_keeps_dialog(self, albums, albums_api, notifier, source_image):
        albums_api.generate.side_effect = ApiError(500, "boom")
        albums.open_create_dialog()
        albums.dialog.person_name = "Alice"
        albums.select_dialog_image(source_image)

        assert albums.create_album() is None

        assert albums.dialog.is_open
        assert not albums.dialog.is_creating
        assert notifier.messages == ["Failed to create album"]
