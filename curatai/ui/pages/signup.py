"""Signup page."""

import streamlit as st

from curatai.config import get_config
from curatai.core.validation import validate_signup
from curatai.models import AuthResult
from curatai.ui.session import get_session, navigate


def render_signup_page() -> None:
    """Render the signup form."""
    st.header("Create your account")

    errors = st.session_state.get("signup_errors", {})
    message = st.session_state.pop("signup_message", None)
    if message:
        st.success(message)
    if errors.get("general"):
        st.error(errors["general"])

    with st.form("signup_form"):
        username = st.text_input("Username", key="signup_username")
        _field_error(errors, "username")
        email = st.text_input("Email", key="signup_email")
        _field_error(errors, "email")
        password = st.text_input("Password", type="password", key="signup_password")
        _field_error(errors, "password")
        confirm = st.text_input("Confirm password", type="password", key="signup_confirm")
        _field_error(errors, "confirm_password")
        submitted = st.form_submit_button("Sign up", type="primary")

    if submitted:
        field_errors = validate_signup(username, email, password, confirm)
        if field_errors:
            st.session_state.signup_errors = field_errors
            st.rerun()
        _finish(get_session().auth.signup(username.strip(), email.strip(), password=password))

    if get_config().google_client_id:
        with st.expander("Sign up with Google"):
            credential = st.text_input("Google ID token", type="password", key="google_signup_token",
                                       help="The credential returned by Google Sign-In")
            if st.button("Continue with Google", key="google_signup_btn", disabled=not credential):
                _finish(get_session().auth.google_signup(credential))

    st.divider()
    if st.button("Already have an account? Log in", key="goto_login"):
        st.session_state.pop("signup_errors", None)
        navigate("login")


def _field_error(errors: dict, field: str) -> None:
    if errors.get(field):
        st.caption(f":red[{errors[field]}]")


def _finish(result: AuthResult) -> None:
    if result.success:
        st.session_state.pop("signup_errors", None)
        st.session_state.signup_message = result.message
    elif result.notice:
        st.session_state.signup_message = result.notice
        st.session_state.signup_errors = result.errors
    else:
        st.session_state.signup_errors = result.errors or {"general": result.message or "Signup failed"}
    st.rerun()
