"""Key-value storage for the client session.

Mirrors the browser ``localStorage`` contract: string keys mapped to string
values. Only two keys are used by the client: ``access_token`` and ``user``.

``MemoryStorage`` lives as long as its owner; the Streamlit app keeps one per
browser session. ``PersistentStorage`` writes through to a JSON file so the
CLI session survives restarts.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional

from .config import get_config

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "access_token"
USER_KEY = "user"


class MemoryStorage:
    """In-process string store."""

    def __init__(self):
        self._data: Dict[str, str] = {}

    def _save(self) -> None:
        pass

    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value or None."""
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        """Store a string value."""
        self._data[key] = str(value)
        self._save()

    def remove_item(self, key: str) -> None:
        """Remove one key if present."""
        if self._data.pop(key, None) is not None:
            self._save()

    def clear(self) -> None:
        """Remove every key."""
        self._data = {}

    def __contains__(self, key: str) -> bool:
        return key in self._data


class PersistentStorage(MemoryStorage):
    """JSON-file backed string store."""

    def __init__(self, path: Optional[Path] = None):
        super().__init__()
        self.path = Path(path) if path else get_config().storage_path
        self._data = self._load()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Could not read storage file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.error(f"Storage file {self.path} is not a JSON object, ignoring")
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, indent=2)
        tmp_path.replace(self.path)

    def clear(self) -> None:
        super().clear()
        if self.path.exists():
            self.path.unlink()


# Global storage instance, used by the CLI
_storage: Optional[PersistentStorage] = None


def get_storage() -> PersistentStorage:
    """Get the global storage instance."""
    global _storage
    if _storage is None:
        _storage = PersistentStorage()
    return _storage


def set_storage(storage: Optional[PersistentStorage]) -> None:
    """Set the global storage instance."""
    global _storage
    _storage = storage
