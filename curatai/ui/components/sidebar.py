"""Sidebar component: project list, creation, deletion and logout."""

import streamlit as st

from curatai.config import get_config
from curatai.models import Project
from curatai.ui.session import get_session, navigate, reset_session


def render_sidebar() -> None:
    """Render the project sidebar."""
    state = get_session()
    projects = state.projects
    projects.ensure_loaded()

    with st.sidebar:
        st.title("CuratAI")
        if state.workspace.user:
            st.caption(f"Signed in as **{state.workspace.user.username or state.workspace.user.email}**")

        _render_navigation()
        st.divider()

        _render_upload_status()
        _render_create_project()
        st.divider()

        st.subheader("Projects")
        if projects.is_loading:
            st.caption("Loading projects...")
        elif projects.load_failed:
            if st.button("Retry loading projects", key="retry_projects", use_container_width=True):
                projects.load()
                st.rerun()
        elif not projects.projects:
            st.info("No projects yet. Create one above!")
        for project in projects.projects:
            _render_project_row(project)

        st.divider()
        _render_settings()
        if st.button("Log out", key="logout_btn", use_container_width=True,
                     disabled=state.workspace.is_uploading):
            if projects.logout():
                reset_session()
                navigate("landing")


def _render_navigation() -> None:
    pages = [("Dashboard", "dashboard", "🏠"), ("Projects", "projects", "📁")]
    current_page = st.session_state.get("current_page", "dashboard")

    for label, page_id, icon in pages:
        button_type = "primary" if current_page == page_id else "secondary"
        if st.button(f"{icon} {label}", key=f"nav_{page_id}", use_container_width=True, type=button_type):
            navigate(page_id)


def _render_upload_status() -> None:
    workspace = get_session().workspace
    if workspace.is_uploading:
        st.progress(workspace.upload_progress, text=f"Uploading... {workspace.upload_progress}%")


def _render_create_project() -> None:
    projects = get_session().projects

    if not projects.create_dialog_open:
        if st.button("➕ New Project", key="open_create_project", use_container_width=True,
                     disabled=not projects.can_create):
            projects.open_create_dialog()
            st.rerun()
        return

    with st.form("create_project_form", clear_on_submit=False):
        name = st.text_input("Project name", key="new_project_name", placeholder="Summer 2024")
        col1, col2 = st.columns(2)
        with col1:
            submitted = st.form_submit_button("Create", type="primary", disabled=not projects.can_create)
        with col2:
            cancelled = st.form_submit_button("Cancel")

    if cancelled:
        projects.close_create_dialog()
        st.rerun()
    if submitted:
        if projects.create(name):
            navigate("project")
        st.rerun()


def _render_project_row(project: Project) -> None:
    state = get_session()
    projects = state.projects
    is_selected = state.workspace.selected_project_id == project.id
    is_deleting = project.id in projects.deleting_ids
    busy = state.workspace.is_uploading

    col1, col2 = st.columns([4, 1])
    with col1:
        label = f"{'📂' if is_selected else '📁'} {project.project_name} ({project.image_count})"
        if st.button(label, key=f"project_{project.id}", use_container_width=True,
                     type="primary" if is_selected else "secondary", disabled=busy or is_deleting):
            if projects.select(project.id) or is_selected:
                navigate("project")
    with col2:
        if st.button("🗑", key=f"delete_project_{project.id}", help="Delete project",
                     disabled=busy or is_deleting):
            projects.delete(project.id)
            st.rerun()


def _render_settings() -> None:
    config = get_config()
    with st.expander("Settings", expanded=False):
        st.caption(f"**API URL:** {config.api_base_url}")
        new_per_row = st.slider(
            "Images per row",
            min_value=2,
            max_value=8,
            value=config.images_per_row,
            key="settings_images_per_row",
        )
        if new_per_row != config.images_per_row:
            config.images_per_row = new_per_row
