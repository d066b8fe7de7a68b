"""Albums API."""

import logging
from typing import List, Optional

from curatai.api.client import ApiClient, CancelToken, get_client
from curatai.core.exceptions import ApiError
from curatai.models import Album, AlbumImages

logger = logging.getLogger(__name__)


class AlbumsApi:
    """Typed wrappers for the ``/albums`` endpoints."""

    def __init__(self, client: Optional[ApiClient] = None):
        self.client = client or get_client()

    def get_all(self, project_id: str, cancel_token: Optional[CancelToken] = None) -> List[Album]:
        """List albums of a project."""
        try:
            data = self.client.get(
                "/albums/get-albums-list",
                params={"project_id": project_id},
                cancel_token=cancel_token,
            )
        except ApiError as e:
            logger.error(f"Error fetching albums: {e.message}")
            raise
        items = data.get("albums", []) if isinstance(data, dict) else data
        return [Album.from_dict(item) for item in (items or [])]

    def get_album_images(self, album_id: str, cancel_token: Optional[CancelToken] = None) -> AlbumImages:
        """Album detail plus its image links."""
        try:
            data = self.client.get(
                "/albums/get-album-images",
                params={"album_id": album_id},
                cancel_token=cancel_token,
            )
        except ApiError as e:
            logger.error(f"Error fetching album images: {e.message}")
            raise
        if not isinstance(data, dict):
            return AlbumImages(image_links=[str(link) for link in (data or [])])
        album_data = data.get("album")
        return AlbumImages(
            image_links=[str(link) for link in data.get("image_links", [])],
            album=Album.from_dict(album_data) if isinstance(album_data, dict) else None,
        )

    def delete(self, album_id: str) -> dict:
        """Delete an album."""
        try:
            data = self.client.delete("/albums/delete-album", json={"album_id": album_id})
        except ApiError as e:
            logger.error(f"Error deleting album: {e.message}")
            raise
        logger.info(f"Deleted album {album_id}")
        return data

    def generate(
        self,
        project_id: str,
        person_name: str,
        image: bytes,
        filename: str = "cropped-face.jpg",
    ) -> List[str]:
        """Create an album from a cropped face image. Returns the created album ids."""
        try:
            data = self.client.post(
                "/albums/generate-albums",
                data={"project_id": project_id, "person_name": person_name},
                files={"image": (filename, image, "image/jpeg")},
                timeout=self.client.config.upload_timeout_sec,
            )
        except ApiError as e:
            logger.error(f"Error generating album: {e.message}")
            raise

        if isinstance(data, list):
            album_ids = data
        else:
            album_ids = data.get("album_ids") or ([data["album_id"]] if data.get("album_id") else [])
        logger.info(f"Generated album for '{person_name}' in project {project_id}: {album_ids}")
        return [str(a) for a in album_ids]
