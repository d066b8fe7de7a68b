"""
Main entry point for the CuratAI Streamlit app.

This is a pure frontend that communicates with the CuratAI backend via HTTP.
Run with: streamlit run curatai/ui/main.py
"""

import logging

import streamlit as st

from curatai.config import get_config
from curatai.logging_config import setup_logging
from curatai.ui.session import get_session, show_notifications
from curatai.ui.components.sidebar import render_sidebar
from curatai.ui.pages.landing import render_landing_page
from curatai.ui.pages.login import render_login_page
from curatai.ui.pages.signup import render_signup_page
from curatai.ui.pages.dashboard import render_dashboard_page
from curatai.ui.pages.projects import render_projects_page
from curatai.ui.pages.project_detail import render_project_detail_page

logger = logging.getLogger(__name__)

PUBLIC_PAGES = {
    "landing": render_landing_page,
    "login": render_login_page,
    "signup": render_signup_page,
}

PRIVATE_PAGES = {
    "dashboard": render_dashboard_page,
    "projects": render_projects_page,
    "project": render_project_detail_page,
}

CUSTOM_CSS = """
<style>
    .main { padding: 1rem; }
    .upload-card { padding: 0.75rem; border-radius: 0.5rem; background-color: #f5f5f5; margin: 0.5rem 0; }
    .user-bubble { padding: 0.5rem 0.75rem; border-radius: 0.75rem; background-color: #e3f2fd; margin: 0.25rem 0; }
    .ai-bubble { padding: 0.5rem 0.75rem; border-radius: 0.75rem; background-color: #f1f8e9; margin: 0.25rem 0; }
    .more-tile { display: flex; align-items: center; justify-content: center; height: 100%; font-size: 1.5rem; color: #757575; }
    .album-name { font-weight: 600; text-align: center; }
    .stProgress > div > div { background-color: #4caf50; }
</style>
"""


def resolve_page(page: str, authenticated: bool) -> str:
    """Route guard: private pages need a session, auth pages bounce signed-in users."""
    if page in PRIVATE_PAGES:
        return page if authenticated else "login"
    if page in ("login", "signup") and authenticated:
        return "dashboard"
    return page if page in PUBLIC_PAGES else "landing"


def render_app() -> None:
    """Main app rendering orchestration."""
    config = get_config()

    st.set_page_config(page_title=config.page_title, page_icon=config.page_icon, layout=config.layout)
    st.markdown(CUSTOM_CSS, unsafe_allow_html=True)

    if "initialized" not in st.session_state:
        setup_logging(config.log_level, config.log_file)
        st.session_state.initialized = True

    state = get_session()
    authenticated = state.auth.is_authenticated()

    if "current_page" not in st.session_state:
        st.session_state.current_page = "dashboard" if authenticated else "landing"

    page = resolve_page(st.session_state.current_page, authenticated)
    st.session_state.current_page = page

    if page in PRIVATE_PAGES:
        render_sidebar()
        PRIVATE_PAGES[page]()
    else:
        PUBLIC_PAGES[page]()

    show_notifications()


def main() -> None:
    """Application entry point."""
    render_app()


if __name__ == "__main__":
    main()
