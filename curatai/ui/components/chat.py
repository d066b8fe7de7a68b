"""Chat area: the upload/search transcript of the selected project."""

import streamlit as st

from curatai.core.gallery import GalleryController
from curatai.models import Message, MessageType
from curatai.ui.components.cards import render_upload_preview
from curatai.ui.components.gallery import render_image_grid, render_link_grid
from curatai.ui.session import get_session


def render_chat_area() -> None:
    """Render every transcript message in order."""
    gallery = get_session().gallery

    if gallery.is_loading:
        st.caption("Loading images...")
        return
    if not gallery.messages:
        st.info("Upload a ZIP archive of photos to get started, then search them in plain language.")
        return

    for message in gallery.messages:
        _render_message(message)


def _render_message(message: Message) -> None:
    if message.type == MessageType.UPLOAD:
        _render_upload_message(message)
    elif message.type == MessageType.USER:
        with st.chat_message("user"):
            st.markdown(message.content or "")
    else:
        with st.chat_message("assistant"):
            if message.is_loading:
                st.caption("Searching...")
                return
            st.markdown(message.content or "")
            render_link_grid(message.image_links, key_prefix=f"result_{message.id}")


def _render_upload_message(message: Message) -> None:
    _, hidden = GalleryController.preview(message)

    with st.container(border=True):
        render_upload_preview(message, on_open=_open_image)
        if hidden > 0:
            with st.expander(f"Show all {len(message.images)} images"):
                render_image_grid(message.images, key_prefix=f"upload_{message.id}")


def _open_image(image) -> None:
    get_session().gallery.select_image(image)
    st.rerun()
