"""Image gallery component and enlarged-image view."""

from typing import List, Optional

import streamlit as st

from curatai.config import get_config
from curatai.models import Image
from curatai.ui.components.cards import render_image_tile
from curatai.ui.session import get_session


def render_image_grid(images: List[Image], key_prefix: str, columns: Optional[int] = None) -> None:
    """Grid of image tiles; clicking one opens it enlarged."""
    if not images:
        st.info("No images to display")
        return

    num_cols = columns or get_config().images_per_row
    cols = st.columns(num_cols)
    for i, image in enumerate(images):
        with cols[i % num_cols]:
            render_image_tile(
                image.image_url,
                key=f"{key_prefix}_{image.id}",
                caption=image.person_name,
                on_click=lambda img=image: _open(img),
            )


def render_link_grid(links: List[str], key_prefix: str, columns: Optional[int] = None) -> None:
    """Grid of bare image links (search and album results)."""
    if not links:
        st.info("No images found")
        return

    num_cols = columns or get_config().images_per_row
    cols = st.columns(num_cols)
    for i, link in enumerate(links):
        with cols[i % num_cols]:
            render_image_tile(link, key=f"{key_prefix}_{i}")


def _open(image: Image) -> None:
    get_session().gallery.select_image(image)
    st.rerun()


def render_selected_image() -> None:
    """Enlarged view of the selected image with download and delete."""
    gallery = get_session().gallery
    image = gallery.selected_image
    if image is None:
        return

    with st.container(border=True):
        col1, col2, col3 = st.columns([6, 1, 1])
        with col1:
            st.subheader(image.filename)
            if image.person_name:
                st.caption(f"Person: {image.person_name}")
        with col2:
            if st.button("🗑 Delete", key=f"delete_image_{image.id}",
                         disabled=image.id in gallery.deleting_ids):
                gallery.delete_image(image.id)
                st.rerun()
        with col3:
            if st.button("✕ Close", key="close_image"):
                gallery.close_image()
                st.rerun()
        st.image(image.image_url, use_container_width=True)
        st.link_button("Open original", image.image_url)


def render_all_images() -> None:
    """Every image of the project, each tile with its own delete button."""
    gallery = get_session().gallery
    if gallery.is_loading:
        st.caption("Loading images...")
        return
    if not gallery.images:
        st.info("No images in this project yet. Upload a ZIP file from the Photos tab.")
        return

    num_cols = get_config().images_per_row
    cols = st.columns(num_cols)
    for i, image in enumerate(gallery.images):
        with cols[i % num_cols]:
            render_image_tile(
                image.image_url,
                key=f"all_{image.id}",
                caption=image.person_name,
                on_click=lambda img=image: _open(img),
            )
            if st.button("🗑 Delete", key=f"all_delete_{image.id}", use_container_width=True,
                         disabled=image.id in gallery.deleting_ids):
                gallery.delete_image(image.id)
                st.rerun()
