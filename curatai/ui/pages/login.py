"""Login page - email/password and Google sign-in."""

import streamlit as st

from curatai.config import get_config
from curatai.core.validation import validate_login
from curatai.models import AuthResult
from curatai.ui.session import get_session, navigate


def render_login_page() -> None:
    """Render the login form."""
    st.header("Log in")

    errors = st.session_state.get("login_errors", {})
    notice = st.session_state.pop("login_notice", None)
    if notice:
        st.info(notice)
    if errors.get("general"):
        st.error(errors["general"])

    with st.form("login_form"):
        email = st.text_input("Email", key="login_email")
        if errors.get("email"):
            st.caption(f":red[{errors['email']}]")
        password = st.text_input("Password", type="password", key="login_password")
        if errors.get("password"):
            st.caption(f":red[{errors['password']}]")
        submitted = st.form_submit_button("Log in", type="primary")

    if submitted:
        field_errors = validate_login(email, password)
        if field_errors:
            st.session_state.login_errors = field_errors
            st.rerun()
        _finish(get_session().auth.login(email.strip(), password))

    if get_config().google_client_id:
        _render_google_login()

    st.divider()
    if st.button("Don't have an account? Sign up", key="goto_signup"):
        st.session_state.pop("login_errors", None)
        navigate("signup")


def _render_google_login() -> None:
    with st.expander("Sign in with Google"):
        credential = st.text_input("Google ID token", type="password", key="google_login_token",
                                   help="The credential returned by Google Sign-In")
        if st.button("Continue with Google", key="google_login_btn", disabled=not credential):
            _finish(get_session().auth.google_login(credential))


def _finish(result: AuthResult) -> None:
    """Route to the dashboard on success, else stash the errors for the next run."""
    state = get_session()
    if result.success:
        st.session_state.pop("login_errors", None)
        state.workspace.user = state.auth.current_user()
        state.projects.load()
        state.notifier.success("Logged in successfully")
        navigate("dashboard")

    if result.notice:
        st.session_state.login_notice = result.notice
        st.session_state.login_errors = result.errors
    else:
        st.session_state.login_errors = result.errors or {"general": result.message or "Login failed"}
    st.rerun()
