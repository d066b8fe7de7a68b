"""Dashboard page - summary and recent projects."""

import streamlit as st

from curatai.core.projects import SortKey
from curatai.ui.components.cards import render_project_card
from curatai.ui.session import get_session, navigate

RECENT_COUNT = 6


def render_dashboard_page() -> None:
    """Render the dashboard."""
    state = get_session()
    projects = state.projects
    user = state.workspace.user

    st.header(f"Welcome back{', ' + user.username if user and user.username else ''}")

    col1, col2 = st.columns(2)
    with col1:
        st.metric("Projects", len(projects.projects))
    with col2:
        st.metric("Images", projects.total_images)

    st.divider()
    st.subheader("Recent projects")

    recent = projects.filtered(sort_by=SortKey.RECENT)[:RECENT_COUNT]
    if not recent:
        st.info("No projects yet. Use **New Project** in the sidebar to create one.")
        return

    cols = st.columns(3)
    for i, project in enumerate(recent):
        with cols[i % 3]:
            render_project_card(project, on_open=_open_project)


def _open_project(project) -> None:
    projects = get_session().projects
    if projects.select(project.id) or get_session().workspace.selected_project_id == project.id:
        navigate("project")
    st.rerun()
