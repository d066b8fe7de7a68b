"""ZIP upload widget."""

import streamlit as st

from curatai.ui.session import get_session


def render_upload_widget() -> None:
    """Pick a ZIP archive and upload it into the selected project.

    Any file type can be picked; non-ZIP files are rejected before upload so
    the user gets an explicit message instead of a silently filtered dialog.
    """
    state = get_session()
    gallery = state.gallery
    workspace = state.workspace

    with st.expander("📤 Upload photos (ZIP)", expanded=not gallery.images):
        uploaded = st.file_uploader(
            "ZIP archive",
            key=f"zip_uploader_{workspace.selected_project_id}",
            disabled=workspace.is_uploading,
            help="A .zip file containing your photos",
        )
        if st.button("Upload", type="primary", key="upload_zip_btn",
                     disabled=uploaded is None or workspace.is_uploading):
            progress_bar = st.progress(0, text="Uploading... 0%")

            def on_progress(percent: int) -> None:
                progress_bar.progress(percent, text=f"Uploading... {percent}%")

            result = gallery.upload(uploaded.name, uploaded, on_progress=on_progress)
            progress_bar.empty()
            if result is not None:
                state.projects.load()
            st.rerun()
