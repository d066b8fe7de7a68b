"""Streamlit pages package."""

from .landing import render_landing_page
from .login import render_login_page
from .signup import render_signup_page
from .dashboard import render_dashboard_page
from .projects import render_projects_page
from .project_detail import render_project_detail_page

__all__ = [
    "render_landing_page",
    "render_login_page",
    "render_signup_page",
    "render_dashboard_page",
    "render_projects_page",
    "render_project_detail_page",
]
