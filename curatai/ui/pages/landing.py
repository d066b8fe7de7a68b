"""Landing page - Welcome screen for signed-out users."""

import streamlit as st

from curatai.ui.session import navigate


def render_landing_page() -> None:
    """Render the landing page."""
    st.title("CuratAI")
    st.subheader("Organize your photos by the people in them")

    st.markdown("""
    1. **Create a project** for an event, a trip or a year.
    2. **Upload a ZIP** of your photos; faces are recognized automatically.
    3. **Search in plain language**, or type `in album: <name>` to see one person's photos.
    4. **Build albums** from a cropped photo of someone's face.
    """)

    col1, col2, _ = st.columns([1, 1, 3])
    with col1:
        if st.button("Log in", type="primary", use_container_width=True, key="landing_login"):
            navigate("login")
    with col2:
        if st.button("Sign up", use_container_width=True, key="landing_signup"):
            navigate("signup")
