"""Images API: ZIP ingest, listing, deletion, face recognition and search."""

import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional, Union

from urllib3 import encode_multipart_formdata

from curatai.api.client import ApiClient, CancelToken, ProgressCallback, ProgressReader, get_client
from curatai.core.exceptions import ApiError
from curatai.models import Image, SearchResult, UploadResult

logger = logging.getLogger(__name__)

UploadSource = Union[str, Path, bytes, BinaryIO]


def _read_upload(source: UploadSource, filename: Optional[str]) -> tuple:
    """Return (filename, bytes) for a path, raw bytes or binary file object."""
    if isinstance(source, (str, Path)):
        path = Path(source)
        return filename or path.name, path.read_bytes()
    if isinstance(source, bytes):
        return filename or "upload.zip", source
    content = source.read()
    name = filename or Path(getattr(source, "name", "upload.zip")).name
    return name, content


def synthesize_images(project_id: str, images_data: Dict[str, Any]) -> List[Image]:
    """Build Image records from the upload response's URL map.

    When the backend only returns ``{url: filename}``, ids are invented as
    ``<project_id>-<index>-<timestamp_ms>``. Such ids are unique within one
    upload, flagged ``synthetic`` and valid only for the current session.
    """
    stamp = int(time.time() * 1000)
    created_at = datetime.now(timezone.utc).isoformat()
    images = []
    for index, (url, value) in enumerate(images_data.items()):
        backend_id = value.get("id") if isinstance(value, dict) else None
        images.append(Image(
            id=str(backend_id) if backend_id else f"{project_id}-{index}-{stamp}",
            image_url=url,
            project_id=project_id,
            created_at=created_at,
            synthetic=not backend_id,
        ))
    return images


def _annotation_map(response: Any) -> Dict[str, Dict[str, Any]]:
    """Normalize a face-recognition response into ``{url: annotation}``."""
    if isinstance(response, dict):
        for key in ("images", "results", "images_data"):
            if key in response:
                return _annotation_map(response[key])
        return {url: ann for url, ann in response.items() if isinstance(ann, dict)}

    annotations = {}
    if isinstance(response, list):
        for item in response:
            if not isinstance(item, dict):
                continue
            url = item.get("image_url") or item.get("url")
            if url:
                annotations[url] = item
    return annotations


def merge_face_annotations(images: List[Image], response: Any) -> int:
    """Copy ``person_name``/``album_id`` onto images with the same URL. Returns match count."""
    annotations = _annotation_map(response)
    matched = 0
    for image in images:
        annotation = annotations.get(image.image_url)
        if not annotation:
            continue
        image.person_name = annotation.get("person_name", image.person_name)
        image.album_id = annotation.get("album_id", image.album_id)
        matched += 1
    return matched


class ImagesApi:
    """Typed wrappers for the image endpoints."""

    def __init__(self, client: Optional[ApiClient] = None):
        self.client = client or get_client()

    def upload_zip(
        self,
        project_id: str,
        source: UploadSource,
        on_progress: Optional[ProgressCallback] = None,
        filename: Optional[str] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> UploadResult:
        """Upload one ZIP archive and return the images it produced.

        Face recognition runs on the new images right after the upload. Its
        failure never fails the upload; the images are returned unannotated.
        """
        filename, content = _read_upload(source, filename)
        body, content_type = encode_multipart_formdata({
            "file": (filename, content, "application/zip"),
            "project_id": project_id,
        })
        reader = ProgressReader(body, on_progress=on_progress, cancel_token=cancel_token)

        logger.info(f"Uploading {filename} ({len(content)} bytes) to project {project_id}")
        try:
            data = self.client.post(
                "/images/upload/zip",
                data=reader,
                headers={"Content-Type": content_type},
                cancel_token=cancel_token,
                timeout=self.client.config.upload_timeout_sec,
            )
        except ApiError as e:
            logger.error(f"Error uploading zip: {e.message}")
            raise

        result_project_id = str(data.get("project_id") or project_id)
        images_data = data.get("images_data") or {}
        images = synthesize_images(result_project_id, images_data)
        result = UploadResult(project_id=result_project_id, images=images, images_data=images_data)

        if images_data:
            try:
                response = self.face_recognition(result_project_id, images_data, cancel_token=cancel_token)
            except ApiError as e:
                logger.warning(f"Face recognition failed, returning unannotated images: {e.message}")
            else:
                matched = merge_face_annotations(images, response)
                result.face_recognition_applied = True
                logger.info(f"Face recognition annotated {matched}/{len(images)} images")

        return result

    def get_project_images(self, project_id: str, cancel_token: Optional[CancelToken] = None) -> List[Image]:
        """List the images of a project."""
        try:
            data = self.client.get(f"/images/{project_id}", cancel_token=cancel_token)
        except ApiError as e:
            logger.error(f"Error fetching project images: {e.message}")
            raise
        items = data.get("images", []) if isinstance(data, dict) else data
        return [Image.from_dict(item, project_id=project_id) for item in (items or [])]

    def delete_image(self, project_id: str, image_id: str) -> dict:
        """Delete one image."""
        try:
            data = self.client.delete(f"/images/{project_id}/{image_id}")
        except ApiError as e:
            logger.error(f"Error deleting image: {e.message}")
            raise
        logger.info(f"Deleted image {image_id} from project {project_id}")
        return data

    def face_recognition(
        self,
        project_id: str,
        images_data: Dict[str, Any],
        cancel_token: Optional[CancelToken] = None,
    ) -> Any:
        """Ask the backend to annotate uploaded images with person/album."""
        try:
            return self.client.post(
                "/face_recognition",
                json={"project_id": project_id, "images_data": images_data},
                cancel_token=cancel_token,
            )
        except ApiError as e:
            logger.error(f"Error in face recognition: {e.message}")
            raise

    def search_images(
        self,
        project_id: str,
        query: str,
        cancel_token: Optional[CancelToken] = None,
    ) -> SearchResult:
        """Natural-language image search (form-encoded)."""
        try:
            data = self.client.post(
                "/image_searching/",
                data={"project_id": project_id, "search_query": query},
                cancel_token=cancel_token,
            )
        except ApiError as e:
            logger.error(f"Error searching images: {e.message}")
            raise

        if not isinstance(data, dict):
            data = {"image_links": data}
        raw_links = data.get("image_links") or data.get("images") or []
        links = [
            item.get("image_url", item.get("url", "")) if isinstance(item, dict) else str(item)
            for item in raw_links
        ]
        ids = data.get("image_ids") or data.get("ids") or []
        logger.info(f"Search '{query}' in project {project_id} returned {len(links)} images")
        return SearchResult(image_links=[link for link in links if link], image_ids=[str(i) for i in ids])
