"""Data models for the CuratAI client."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


def _id(data: Dict[str, Any], *keys: str) -> str:
    """First non-null id among ``keys`` as a string; empty when all are null."""
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return str(value)
    return ""


@dataclass
class User:
    """Authenticated user record as cached in storage."""
    id: str
    email: str
    username: str = ""
    is_active: bool = True
    created_at: Optional[str] = None
    last_login: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=_id(data, "id"),
            email=data.get("email", ""),
            username=data.get("username", ""),
            is_active=bool(data.get("is_active", True)),
            created_at=data.get("created_at"),
            last_login=data.get("last_login"),
        )


@dataclass
class Project:
    """A user-owned collection of images."""
    id: str
    project_name: str
    image_count: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Project":
        return cls(
            id=_id(data, "id", "project_id"),
            project_name=data.get("project_name", data.get("name", "")),
            image_count=int(data.get("image_count") or 0),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    @property
    def created_datetime(self) -> Optional[datetime]:
        """Parsed ``created_at`` (None when missing or malformed)."""
        return _parse_datetime(self.created_at)


@dataclass
class Image:
    """A single image in a project.

    ``synthetic`` marks ids invented by the client after a ZIP upload when the
    backend returned only a URL map. Those ids are session-local.
    """
    id: str
    image_url: str
    project_id: str
    created_at: Optional[str] = None
    person_name: Optional[str] = None
    album_id: Optional[str] = None
    synthetic: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any], project_id: Optional[str] = None) -> "Image":
        return cls(
            id=_id(data, "id", "image_id"),
            image_url=data.get("image_url", data.get("url", "")),
            project_id=_id(data, "project_id") or (project_id or ""),
            created_at=data.get("created_at"),
            person_name=data.get("person_name"),
            album_id=data.get("album_id"),
        )

    @property
    def filename(self) -> str:
        """Last path segment of the image URL."""
        name = self.image_url.split("?", 1)[0].rstrip("/").split("/")[-1]
        return name or f"image-{self.id}.jpg"


@dataclass
class Album:
    """A named grouping of images associated with one person."""
    id: str
    person_name: str
    project_id: str = ""
    created_at: Optional[str] = None
    image_group: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Album":
        group = data.get("image_group") or []
        return cls(
            id=_id(data, "id", "album_id"),
            person_name=data.get("person_name", ""),
            project_id=_id(data, "project_id"),
            created_at=data.get("created_at"),
            image_group=[str(g) for g in group] if isinstance(group, list) else [],
        )

    @property
    def cover_url(self) -> Optional[str]:
        return self.image_group[0] if self.image_group else None


@dataclass
class AlbumImages:
    """Album detail plus its image links."""
    image_links: List[str] = field(default_factory=list)
    album: Optional[Album] = None


@dataclass
class SearchResult:
    """Natural-language search result."""
    image_links: List[str] = field(default_factory=list)
    image_ids: List[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.image_links)


@dataclass
class UploadResult:
    """Images created by a ZIP upload."""
    project_id: str
    images: List[Image] = field(default_factory=list)
    images_data: Dict[str, Any] = field(default_factory=dict)
    face_recognition_applied: bool = False


class MessageType(str, Enum):
    """Chat transcript entry type."""
    UPLOAD = "upload"
    USER = "user"
    AI = "ai"


@dataclass
class Message:
    """One entry of the gallery transcript. Never persisted."""
    id: str
    type: MessageType
    content: Optional[str] = None
    images: List[Image] = field(default_factory=list)
    image_links: List[str] = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.now)
    is_loading: bool = False

    def __post_init__(self):
        """Convert string type to enum if needed."""
        if isinstance(self.type, str):
            self.type = MessageType(self.type)


@dataclass
class CropArea:
    """Pixel rectangle on the source image."""
    x: int
    y: int
    width: int
    height: int

    @property
    def box(self) -> tuple:
        """(left, upper, right, lower) box as used by Pillow."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)


@dataclass
class AuthResult:
    """Outcome of an auth call. Auth never raises past this boundary."""
    success: bool
    data: Optional[Dict[str, Any]] = None
    message: Optional[str] = None
    errors: Dict[str, str] = field(default_factory=dict)
    notice: Optional[str] = None


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
