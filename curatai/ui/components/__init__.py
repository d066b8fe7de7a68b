"""Reusable Streamlit UI components."""

from .sidebar import render_sidebar
from .cards import (
    render_project_card,
    render_album_card,
    render_image_tile,
    render_upload_preview,
)
from .gallery import (
    render_all_images,
    render_image_grid,
    render_link_grid,
    render_selected_image,
)
from .chat import render_chat_area
from .upload import render_upload_widget
from .search_bar import render_search_bar
from .albums import render_albums_view

__all__ = [
    # Sidebar
    "render_sidebar",
    # Cards
    "render_project_card",
    "render_album_card",
    "render_image_tile",
    "render_upload_preview",
    # Gallery
    "render_all_images",
    "render_image_grid",
    "render_link_grid",
    "render_selected_image",
    # Chat
    "render_chat_area",
    "render_upload_widget",
    "render_search_bar",
    # Albums
    "render_albums_view",
]
