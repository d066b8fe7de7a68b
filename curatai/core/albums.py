"""Albums view: grid/detail state machine and face-crop album creation."""

import logging
from enum import Enum
from typing import List, Optional, Tuple

from curatai.api.albums import AlbumsApi
from curatai.api.client import ApiClient
from curatai.api.images import ImagesApi
from curatai.models import Album, CropArea, Image
from .cropping import clamp_zoom, compute_crop_area, crop_to_jpeg, fetch_image, image_size
from .exceptions import ApiError, ImageProcessingError, RequestCancelled
from .notifications import Notifier
from .workspace import Workspace, UPLOAD_BUSY_MESSAGE

logger = logging.getLogger(__name__)

DEFAULT_CENTER = (0.5, 0.5)


class ViewMode(str, Enum):
    GRID = "grid"
    DETAIL = "detail"


class CreateAlbumDialog:
    """Form state for creating an album from a cropped face."""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.is_open = False
        self.is_creating = False
        self.person_name = ""
        self.selected_image: Optional[Image] = None
        self.source_bytes: Optional[bytes] = None
        self.image_size: Optional[Tuple[int, int]] = None
        self.center: Tuple[float, float] = DEFAULT_CENTER
        self.zoom = 1.0
        self.crop_area: Optional[CropArea] = None

    def select_image(self, image: Image, source_bytes: Optional[bytes] = None,
                     size: Optional[Tuple[int, int]] = None) -> None:
        """Pick the source image. Center and zoom go back to their defaults."""
        self.selected_image = image
        self.source_bytes = source_bytes
        self.image_size = size
        self.center = DEFAULT_CENTER
        self.zoom = 1.0
        self._recompute()

    def set_crop(self, center: Optional[Tuple[float, float]] = None, zoom: Optional[float] = None) -> None:
        if center is not None:
            self.center = (float(center[0]), float(center[1]))
        if zoom is not None:
            self.zoom = clamp_zoom(zoom)
        self._recompute()

    def _recompute(self) -> None:
        if self.image_size is None:
            self.crop_area = None
            return
        self.crop_area = compute_crop_area(self.image_size, self.center, self.zoom)

    @property
    def can_create(self) -> bool:
        return (
            bool(self.person_name.strip())
            and self.selected_image is not None
            and self.crop_area is not None
            and not self.is_creating
        )


class AlbumsController:
    """Albums of the selected project.

    ``view_mode`` only enters DETAIL with a concrete album and a freshly
    fetched link list; leaving it switches the mode before the album is
    dropped so a stale album is never rendered.
    """

    def __init__(
        self,
        workspace: Workspace,
        albums_api: AlbumsApi,
        images_api: ImagesApi,
        notifier: Notifier,
        client: Optional[ApiClient] = None,
    ):
        self.workspace = workspace
        self.albums_api = albums_api
        self.images_api = images_api
        self.notifier = notifier
        self.client = client or albums_api.client
        self.dialog = CreateAlbumDialog()
        self._clear()
        workspace.on_project_change(self._on_project_change)

    def _clear(self) -> None:
        self.albums: List[Album] = []
        self.project_images: List[Image] = []
        self.selected_album: Optional[Album] = None
        self.album_images: List[str] = []
        self.view_mode = ViewMode.GRID
        self.loading_albums = False
        self.loading_album_images = False
        self.deleting_ids = set()
        self.loaded_for: Optional[str] = None
        self.load_failed = False

    def _on_project_change(self, project_id: Optional[str]) -> None:
        self._clear()
        self.dialog.reset()

    def ensure_loaded(self) -> None:
        project_id = self.workspace.selected_project_id
        if project_id and self.loaded_for != project_id and not self.loading_albums:
            self.load_albums()
            self.load_project_images()

    def load_albums(self) -> List[Album]:
        ticket = self.workspace.ticket()
        if not ticket.project_id:
            return self.albums

        self.loading_albums = True
        try:
            albums = self.albums_api.get_all(ticket.project_id, cancel_token=ticket.cancel_token)
        except RequestCancelled:
            return self.albums
        except ApiError:
            if self.workspace.is_current(ticket):
                self.loading_albums = False
                self.loaded_for = ticket.project_id
                self.load_failed = True
                self.notifier.error("Failed to load albums")
            return self.albums

        if not self.workspace.is_current(ticket):
            logger.debug(f"Dropping stale album list for project {ticket.project_id}")
            return self.albums
        self.loading_albums = False
        self.albums = albums
        self.loaded_for = ticket.project_id
        self.load_failed = False
        return self.albums

    def load_project_images(self) -> List[Image]:
        """Images offered as crop sources in the create dialog."""
        ticket = self.workspace.ticket()
        if not ticket.project_id:
            return self.project_images
        try:
            images = self.images_api.get_project_images(ticket.project_id, cancel_token=ticket.cancel_token)
        except RequestCancelled:
            return self.project_images
        except ApiError:
            if self.workspace.is_current(ticket):
                self.notifier.error("Failed to load project images")
            return self.project_images
        if self.workspace.is_current(ticket):
            self.project_images = images
        return self.project_images

    # Grid <-> detail
    def select_album(self, album: Album) -> bool:
        ticket = self.workspace.ticket()
        self.loading_album_images = True
        try:
            detail = self.albums_api.get_album_images(album.id, cancel_token=ticket.cancel_token)
        except RequestCancelled:
            return False
        except ApiError:
            if self.workspace.is_current(ticket):
                self.loading_album_images = False
                self.notifier.error("Failed to load album images")
            return False

        if not self.workspace.is_current(ticket):
            return False
        self.loading_album_images = False
        self.selected_album = detail.album or album
        self.album_images = detail.image_links
        self.view_mode = ViewMode.DETAIL
        return True

    def back_to_grid(self) -> None:
        self.view_mode = ViewMode.GRID
        self.selected_album = None
        self.album_images = []

    def delete_album(self, album_id: str) -> bool:
        if album_id in self.deleting_ids:
            return False
        if self.workspace.is_uploading:
            self.notifier.error(UPLOAD_BUSY_MESSAGE)
            return False

        self.deleting_ids.add(album_id)
        try:
            self.albums_api.delete(album_id)
        except ApiError:
            self.notifier.error("Failed to delete album")
            return False
        finally:
            self.deleting_ids.discard(album_id)

        self.albums = [album for album in self.albums if album.id != album_id]
        if self.selected_album is not None and self.selected_album.id == album_id:
            self.back_to_grid()
        self.notifier.success("Album deleted successfully")
        return True

    # Create dialog
    def open_create_dialog(self) -> None:
        if self.workspace.is_uploading:
            self.notifier.error(UPLOAD_BUSY_MESSAGE)
            return
        self.dialog.reset()
        self.dialog.is_open = True
        if not self.project_images:
            self.load_project_images()

    def close_create_dialog(self) -> None:
        self.dialog.reset()

    def select_dialog_image(self, image: Image) -> bool:
        """Download the chosen image and size the crop to it."""
        ticket = self.workspace.ticket()
        try:
            content = fetch_image(self.client, image.image_url, cancel_token=ticket.cancel_token)
            size = image_size(content)
        except RequestCancelled:
            return False
        except (ApiError, ImageProcessingError) as e:
            logger.error(f"Could not load image for cropping: {e}")
            self.notifier.error("Failed to load image")
            self.dialog.select_image(image)
            return False
        self.dialog.select_image(image, content, size)
        return True

    def create_album(self) -> Optional[List[str]]:
        """Crop, upload, reload the albums and close the dialog."""
        dialog = self.dialog
        project_id = self.workspace.selected_project_id
        if not dialog.can_create or not project_id or dialog.source_bytes is None:
            return None
        if self.workspace.is_uploading:
            self.notifier.error(UPLOAD_BUSY_MESSAGE)
            return None

        dialog.is_creating = True
        try:
            cropped = crop_to_jpeg(dialog.source_bytes, dialog.crop_area)
            album_ids = self.albums_api.generate(project_id, dialog.person_name.strip(), cropped)
        except (ApiError, ImageProcessingError):
            self.notifier.error("Failed to create album")
            return None
        finally:
            dialog.is_creating = False

        self.load_albums()
        self.dialog.reset()
        self.notifier.success("Album created successfully")
        return album_ids
