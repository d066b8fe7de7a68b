"""Albums view: album grid, album detail and the face-crop create dialog."""

import streamlit as st

from curatai.config import get_config
from curatai.core.albums import ViewMode
from curatai.core.cropping import MAX_ZOOM, MIN_ZOOM, draw_crop_outline
from curatai.core.exceptions import ImageProcessingError
from curatai.models import Album
from curatai.ui.components.cards import render_album_card
from curatai.ui.components.gallery import render_link_grid
from curatai.ui.session import get_session


def render_albums_view() -> None:
    """Grid of albums, or the images of one album."""
    albums = get_session().albums
    albums.ensure_loaded()

    if albums.view_mode == ViewMode.DETAIL and albums.selected_album is not None:
        _render_album_detail()
    else:
        _render_album_grid()


def _render_album_grid() -> None:
    albums = get_session().albums

    col1, col2 = st.columns([4, 1])
    with col1:
        st.subheader("Albums")
    with col2:
        if st.button("➕ Create album", key="open_create_album", use_container_width=True,
                     disabled=albums.dialog.is_open):
            albums.open_create_dialog()
            st.rerun()

    if albums.dialog.is_open:
        _render_create_dialog()

    if albums.loading_albums:
        st.caption("Loading albums...")
        return
    if albums.load_failed:
        if st.button("Retry loading albums", key="retry_albums"):
            albums.load_albums()
            albums.load_project_images()
            st.rerun()
        return
    if not albums.albums:
        st.info("No albums yet. Create one from a photo of a person's face.")
        return

    num_cols = get_config().images_per_row
    cols = st.columns(num_cols)
    for i, album in enumerate(albums.albums):
        with cols[i % num_cols]:
            render_album_card(
                album,
                on_open=_open_album,
                on_delete=_delete_album,
                deleting=album.id in albums.deleting_ids,
            )


def _open_album(album: Album) -> None:
    get_session().albums.select_album(album)
    st.rerun()


def _delete_album(album: Album) -> None:
    get_session().albums.delete_album(album.id)
    st.rerun()


def _render_album_detail() -> None:
    albums = get_session().albums
    album = albums.selected_album

    col1, col2, col3 = st.columns([1, 4, 1])
    with col1:
        if st.button("← Back", key="album_back"):
            albums.back_to_grid()
            st.rerun()
    with col2:
        st.subheader(album.person_name)
        st.caption(f"{len(albums.album_images)} images")
    with col3:
        if st.button("🗑 Delete", key=f"delete_album_detail_{album.id}",
                     disabled=album.id in albums.deleting_ids):
            albums.delete_album(album.id)
            st.rerun()

    render_link_grid(albums.album_images, key_prefix=f"album_{album.id}")


def _render_create_dialog() -> None:
    albums = get_session().albums
    dialog = albums.dialog

    with st.container(border=True):
        st.markdown("**Create album from a face**")
        dialog.person_name = st.text_input("Person name", value=dialog.person_name, key="album_person_name")

        if not albums.project_images:
            st.info("This project has no images yet.")
        elif dialog.selected_image is None:
            _render_image_picker()
        else:
            _render_crop_editor()

        col1, col2 = st.columns(2)
        with col1:
            if st.button("Create", type="primary", key="create_album_btn", disabled=not dialog.can_create):
                albums.create_album()
                st.rerun()
        with col2:
            if st.button("Cancel", key="cancel_album_btn"):
                albums.close_create_dialog()
                st.rerun()


def _render_image_picker() -> None:
    albums = get_session().albums
    st.caption("Pick the photo that shows the person's face")

    num_cols = get_config().images_per_row
    cols = st.columns(num_cols)
    for i, image in enumerate(albums.project_images):
        with cols[i % num_cols]:
            st.image(image.image_url, use_container_width=True)
            if st.button("Use", key=f"pick_{image.id}", use_container_width=True):
                albums.select_dialog_image(image)
                st.rerun()


def _render_crop_editor() -> None:
    dialog = get_session().albums.dialog

    if dialog.source_bytes is None or dialog.crop_area is None:
        st.warning("Could not load this image for cropping.")
    else:
        col1, col2 = st.columns([2, 1])
        with col2:
            cx = st.slider("Horizontal", 0.0, 1.0, dialog.center[0], 0.01, key=f"crop_cx_{dialog.selected_image.id}")
            cy = st.slider("Vertical", 0.0, 1.0, dialog.center[1], 0.01, key=f"crop_cy_{dialog.selected_image.id}")
            zoom = st.slider("Zoom", MIN_ZOOM, MAX_ZOOM, dialog.zoom, 0.1, key=f"crop_zoom_{dialog.selected_image.id}")
            if (cx, cy) != dialog.center or zoom != dialog.zoom:
                dialog.set_crop(center=(cx, cy), zoom=zoom)
        with col1:
            try:
                st.image(draw_crop_outline(dialog.source_bytes, dialog.crop_area), use_container_width=True)
            except ImageProcessingError as e:
                st.error(str(e))

    if st.button("Choose another photo", key="album_repick"):
        dialog.selected_image = None
        dialog.crop_area = None
        st.rerun()
