"""Projects page - searchable, sortable project list."""

import pandas as pd
import streamlit as st

from curatai.core.projects import SortKey
from curatai.ui.session import get_session, navigate

SORT_LABELS = {
    SortKey.RECENT: "Most recent",
    SortKey.NAME: "Name",
    SortKey.IMAGES: "Most images",
}


def render_projects_page() -> None:
    """Render the projects overview."""
    st.header("Projects")

    projects = get_session().projects

    col1, col2, col3 = st.columns([3, 2, 1])
    with col1:
        query = st.text_input("Filter", key="projects_filter", placeholder="Search projects by name")
    with col2:
        sort_by = st.selectbox("Sort by", list(SORT_LABELS), format_func=SORT_LABELS.get, key="projects_sort")
    with col3:
        st.write("")
        if st.button("↻ Refresh", key="projects_refresh", use_container_width=True):
            projects.load()
            st.rerun()

    visible = projects.filtered(query, sort_by)
    if not visible:
        st.info("No projects match." if query else "No projects yet.")
        return

    df = pd.DataFrame([
        {
            "Name": p.project_name,
            "Images": p.image_count,
            "Created": p.created_datetime,
        }
        for p in visible
    ])
    st.dataframe(df, use_container_width=True, hide_index=True)
    st.caption(f"{len(visible)} of {len(projects.projects)} projects · {projects.total_images} images in total")

    options = {f"{p.project_name} ({p.image_count} images)": p.id for p in visible}
    col1, col2 = st.columns([3, 1])
    with col1:
        label = st.selectbox("Open project", list(options), key="projects_open_select")
    with col2:
        st.write("")
        if st.button("Open", type="primary", key="projects_open_btn", use_container_width=True):
            project_id = options[label]
            if projects.select(project_id) or get_session().workspace.selected_project_id == project_id:
                navigate("project")
            st.rerun()
