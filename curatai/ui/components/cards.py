"""Presentational cards: project, album, image tile and upload preview."""

from typing import Callable, List, Optional

import streamlit as st

from curatai.config import get_config
from curatai.models import Album, Image, Message, Project
from curatai.core.gallery import GalleryController


def render_project_card(project: Project, on_open: Optional[Callable[[Project], None]] = None) -> None:
    """Render a single project card."""
    with st.container(border=True):
        st.markdown(f"**{project.project_name}**")
        created = project.created_datetime
        st.caption(f"{project.image_count} images" + (f" · created {created:%Y-%m-%d}" if created else ""))
        if on_open and st.button("Open", key=f"open_project_card_{project.id}", use_container_width=True):
            on_open(project)


def render_album_card(
    album: Album,
    on_open: Optional[Callable[[Album], None]] = None,
    on_delete: Optional[Callable[[Album], None]] = None,
    deleting: bool = False,
) -> None:
    """Render an album cover with open/delete actions."""
    with st.container(border=True):
        if album.cover_url:
            st.image(album.cover_url, use_container_width=True)
        else:
            st.caption("No cover image")
        st.markdown(f"<div class='album-name'>{album.person_name}</div>", unsafe_allow_html=True)

        col1, col2 = st.columns(2)
        with col1:
            if on_open and st.button("View", key=f"open_album_{album.id}", use_container_width=True):
                on_open(album)
        with col2:
            if on_delete and st.button("🗑", key=f"delete_album_{album.id}", help="Delete album",
                                       use_container_width=True, disabled=deleting):
                on_delete(album)


def render_image_tile(
    image_url: str,
    key: str,
    caption: Optional[str] = None,
    on_click: Optional[Callable[[], None]] = None,
) -> None:
    """Render a single image thumbnail."""
    st.image(image_url, use_container_width=True, caption=caption)
    if on_click and st.button("View", key=f"view_{key}", use_container_width=True):
        on_click()


def render_upload_preview(message: Message, on_open: Callable[[Image], None], count: Optional[int] = None) -> None:
    """First images of an upload plus a '+N' tile for the rest."""
    count = count or get_config().preview_count
    shown, remaining = GalleryController.preview(message, count)
    if not shown:
        st.caption("No images in this upload")
        return

    tiles: List = list(shown) + ([remaining] if remaining else [])
    cols = st.columns(count + (1 if remaining else 0))
    for i, tile in enumerate(tiles):
        with cols[i]:
            if isinstance(tile, Image):
                render_image_tile(tile.image_url, key=f"{message.id}_{tile.id}",
                                  caption=tile.person_name, on_click=lambda img=tile: on_open(img))
            else:
                st.markdown(f"<div class='more-tile'>+{tile}</div>", unsafe_allow_html=True)

    st.caption(f"Uploaded {len(message.images)} images · {message.timestamp:%H:%M}")
