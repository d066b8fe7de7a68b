"""Search query parsing."""

import re
from typing import Iterable, Optional

from curatai.models import Album

# "in album: <name>", keyword case-insensitive
ALBUM_QUERY_RE = re.compile(r"^\s*in\s+album\s*:\s*(?P<name>.*?)\s*$", re.IGNORECASE)


def parse_album_query(query: str) -> Optional[str]:
    """Album name for ``in album: <name>`` queries, else None."""
    match = ALBUM_QUERY_RE.match(query or "")
    if not match or not match.group("name"):
        return None
    return match.group("name")


def find_album(albums: Iterable[Album], person_name: str) -> Optional[Album]:
    """First album whose person name matches, ignoring case and outer whitespace."""
    wanted = person_name.strip().casefold()
    for album in albums:
        if (album.person_name or "").strip().casefold() == wanted:
            return album
    return None
