"""Gallery and chat transcript for the selected project.

The transcript is a client-side list of messages: one entry per ZIP upload
and a query/result pair per search. It is rebuilt from the image listing
whenever a project is opened and never persisted.
"""

import logging
import uuid
from pathlib import Path
from typing import BinaryIO, Callable, Dict, List, Optional, Set, Tuple

from curatai.api.albums import AlbumsApi
from curatai.api.client import ProgressCallback
from curatai.api.images import ImagesApi
from curatai.models import Image, Message, MessageType, UploadResult
from .exceptions import ApiError, RequestCancelled
from .notifications import Notifier
from .search import find_album, parse_album_query
from .workspace import Workspace, UPLOAD_BUSY_MESSAGE

logger = logging.getLogger(__name__)

NO_PROJECT_MESSAGE = "Please select a project first"
NOT_ZIP_MESSAGE = "Please upload a ZIP file"
UPLOAD_FAILED_MESSAGE = "Upload failed. Please try again."
SEARCH_FAILED_MESSAGE = "Search failed. Please try again."
PREVIEW_COUNT = 4


def _new_id() -> str:
    return uuid.uuid4().hex


def merge_by_url(existing: List[Image], new: List[Image]) -> List[Image]:
    """Append images whose URL is not already present."""
    seen = {image.image_url for image in existing}
    merged = list(existing)
    for image in new:
        if image.image_url not in seen:
            merged.append(image)
            seen.add(image.image_url)
    return merged


def reconcile_synthetic(images: List[Image], listing: List[Image]) -> int:
    """Replace synthetic ids with backend ids for matching URLs. Returns the count replaced."""
    by_url: Dict[str, Image] = {image.image_url: image for image in listing if image.id}
    replaced = 0
    for image in images:
        if not image.synthetic:
            continue
        backend = by_url.get(image.image_url)
        if backend is None:
            continue
        image.id = backend.id
        image.created_at = backend.created_at or image.created_at
        image.synthetic = False
        replaced += 1
    return replaced


class GalleryController:
    """Images, transcript, upload and search of the selected project."""

    def __init__(
        self,
        workspace: Workspace,
        images_api: ImagesApi,
        albums_api: AlbumsApi,
        notifier: Notifier,
    ):
        self.workspace = workspace
        self.images_api = images_api
        self.albums_api = albums_api
        self.notifier = notifier

        self.images: List[Image] = []
        self.messages: List[Message] = []
        self.is_loading = False
        self.is_searching = False
        self.deleting_ids: Set[str] = set()
        self.selected_image: Optional[Image] = None
        self.loaded_for: Optional[str] = None
        self.load_failed = False

        workspace.on_project_change(self._on_project_change)

    def _on_project_change(self, project_id: Optional[str]) -> None:
        self.images = []
        self.messages = []
        self.is_loading = False
        self.is_searching = False
        self.deleting_ids = set()
        self.selected_image = None
        self.loaded_for = None
        self.load_failed = False

    def ensure_loaded(self) -> None:
        """Load once per selected project. A failed load stays failed until ``load()`` is called again."""
        project_id = self.workspace.selected_project_id
        if project_id and self.loaded_for != project_id and not self.is_loading:
            self.load()

    def load(self) -> List[Image]:
        """Fetch the project's images and rebuild the transcript."""
        ticket = self.workspace.ticket()
        if not ticket.project_id:
            return self.images

        self.is_loading = True
        try:
            images = self.images_api.get_project_images(ticket.project_id, cancel_token=ticket.cancel_token)
        except RequestCancelled:
            return self.images
        except ApiError:
            if self.workspace.is_current(ticket):
                self.is_loading = False
                self.loaded_for = ticket.project_id
                self.load_failed = True
                self.notifier.error("Failed to load project images")
            return self.images

        if not self.workspace.is_current(ticket):
            logger.debug(f"Dropping stale image listing for project {ticket.project_id}")
            return self.images

        self.is_loading = False
        self.images = images
        self.messages = []
        if images:
            self.messages.append(Message(id=_new_id(), type=MessageType.UPLOAD, images=list(images)))
        self.loaded_for = ticket.project_id
        self.load_failed = False
        return self.images

    # Upload
    def upload(
        self,
        filename: str,
        fileobj: BinaryIO,
        on_progress: Optional[ProgressCallback] = None,
    ) -> Optional[UploadResult]:
        """Upload a ZIP archive into the selected project.

        Holds the workspace upload flag until the request and face recognition
        are done; every other mutating action is refused meanwhile.
        """
        if not (filename or "").lower().endswith(".zip"):
            self.notifier.error(NOT_ZIP_MESSAGE)
            return None
        if self.workspace.is_uploading:
            self.notifier.error(UPLOAD_BUSY_MESSAGE)
            return None

        ticket = self.workspace.ticket()
        if not ticket.project_id:
            self.notifier.error(NO_PROJECT_MESSAGE)
            return None

        with self.workspace.upload_session() as set_progress:
            def progress(percent: int) -> None:
                set_progress(percent)
                if on_progress is not None:
                    on_progress(percent)

            try:
                result = self.images_api.upload_zip(
                    ticket.project_id,
                    fileobj,
                    on_progress=progress,
                    filename=filename,
                    cancel_token=ticket.cancel_token,
                )
            except RequestCancelled:
                logger.info(f"Upload of {filename} cancelled")
                return None
            except ApiError:
                self.notifier.error(UPLOAD_FAILED_MESSAGE)
                return None

        if not self.workspace.is_current(ticket):
            return result

        self.messages.append(Message(id=_new_id(), type=MessageType.UPLOAD, images=result.images))
        self.images = merge_by_url(self.images, result.images)
        self._reconcile(ticket)
        self.notifier.success(f"Successfully uploaded {len(result.images)} images")
        return result

    def _reconcile(self, ticket) -> None:
        """Swap synthetic ids for backend ids using a fresh listing."""
        if not any(image.synthetic for image in self.images):
            return
        try:
            listing = self.images_api.get_project_images(ticket.project_id, cancel_token=ticket.cancel_token)
        except (ApiError, RequestCancelled) as e:
            logger.warning(f"Could not reconcile uploaded image ids: {e}")
            return
        if self.workspace.is_current(ticket):
            replaced = reconcile_synthetic(self.images, listing)
            logger.debug(f"Reconciled {replaced} synthetic image ids")

    # Images
    def find_image(self, image_id: str) -> Optional[Image]:
        return next((image for image in self.images if image.id == image_id), None)

    def select_image(self, image: Optional[Image]) -> None:
        self.selected_image = image

    def close_image(self) -> None:
        self.selected_image = None

    def delete_image(self, image_id: str) -> bool:
        """Delete one image from the selected project."""
        project_id = self.workspace.selected_project_id
        if not project_id or image_id in self.deleting_ids:
            return False
        if self.workspace.is_uploading:
            self.notifier.error(UPLOAD_BUSY_MESSAGE)
            return False

        self.deleting_ids.add(image_id)
        try:
            self.images_api.delete_image(project_id, image_id)
        except ApiError:
            self.notifier.error("Failed to delete image")
            return False
        finally:
            self.deleting_ids.discard(image_id)

        self.images = [image for image in self.images if image.id != image_id]
        for message in self.messages:
            message.images = [image for image in message.images if image.id != image_id]
        if self.selected_image is not None and self.selected_image.id == image_id:
            self.selected_image = None
        self.notifier.success("Image deleted successfully")
        return True

    # Search
    def search(self, query: str) -> Optional[Message]:
        """Run a search and append the query/result pair to the transcript.

        ``in album: <name>`` queries resolve through the album endpoints and
        never reach the general search endpoint.
        """
        query = (query or "").strip()
        if not query:
            return None
        ticket = self.workspace.ticket()
        if not ticket.project_id:
            self.notifier.error(NO_PROJECT_MESSAGE)
            return None

        self.messages.append(Message(id=_new_id(), type=MessageType.USER, content=query))
        pending = Message(id=_new_id(), type=MessageType.AI, is_loading=True)
        self.messages.append(pending)
        self.is_searching = True

        try:
            album_name = parse_album_query(query)
            if album_name is not None:
                links, content = self._album_links(ticket, album_name)
            else:
                result = self.images_api.search_images(ticket.project_id, query, cancel_token=ticket.cancel_token)
                links = result.image_links
                content = f"Found {result.count} images"
        except RequestCancelled:
            return None
        except ApiError:
            if not self.workspace.is_current(ticket):
                return None
            links, content = [], SEARCH_FAILED_MESSAGE
            self.notifier.error(SEARCH_FAILED_MESSAGE)
        finally:
            if self.workspace.is_current(ticket):
                self.is_searching = False

        if not self.workspace.is_current(ticket):
            return None

        pending.is_loading = False
        pending.content = content
        pending.image_links = links
        return pending

    def _album_links(self, ticket, album_name: str) -> Tuple[List[str], str]:
        albums = self.albums_api.get_all(ticket.project_id, cancel_token=ticket.cancel_token)
        album = find_album(albums, album_name)
        if album is None:
            message = f'Album "{album_name}" not found'
            self.notifier.error(message)
            return [], message
        detail = self.albums_api.get_album_images(album.id, cancel_token=ticket.cancel_token)
        return detail.image_links, f'{len(detail.image_links)} images in album "{album.person_name}"'

    # Presentation helpers
    @staticmethod
    def preview(message: Message, count: int = PREVIEW_COUNT) -> Tuple[List[Image], int]:
        """First ``count`` images of an upload message plus how many are hidden."""
        shown = message.images[:count]
        return shown, max(0, len(message.images) - len(shown))

    def download_image(
        self,
        image: Image,
        dest_dir: Path,
        fetch: Optional[Callable[[str], bytes]] = None,
    ) -> Optional[Path]:
        """Save an image to ``dest_dir`` under its URL file name."""
        fetch = fetch or self.images_api.client.fetch_bytes
        try:
            content = fetch(image.image_url)
        except ApiError:
            self.notifier.error("Failed to download image")
            return None

        dest_dir = Path(dest_dir)
        dest_dir.mkdir(parents=True, exist_ok=True)
        path = dest_dir / image.filename
        path.write_bytes(content)
        logger.info(f"Downloaded {image.image_url} -> {path}")
        return path
