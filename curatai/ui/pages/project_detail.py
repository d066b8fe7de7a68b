"""Project page - upload, chat/search transcript, all images and albums."""

import streamlit as st

from curatai.ui.components.albums import render_albums_view
from curatai.ui.components.chat import render_chat_area
from curatai.ui.components.gallery import render_all_images, render_selected_image
from curatai.ui.components.search_bar import render_search_bar
from curatai.ui.components.upload import render_upload_widget
from curatai.ui.session import get_session


def render_project_detail_page() -> None:
    """Render the selected project."""
    state = get_session()
    project = state.projects.selected_project

    if project is None:
        st.info("Select a project in the sidebar to get started.")
        return

    gallery = state.gallery
    gallery.ensure_loaded()

    st.header(project.project_name)
    st.caption(f"{len(gallery.images)} images")
    if gallery.load_failed and st.button("Retry loading images", key="retry_images"):
        gallery.load()
        st.rerun()

    render_selected_image()
    tab_photos, tab_all, tab_albums = st.tabs(["💬 Photos", "🖼 All Images", "👥 Albums"])

    with tab_photos:
        render_upload_widget()
        render_chat_area()
        render_search_bar()

    with tab_all:
        render_all_images()

    with tab_albums:
        render_albums_view()
