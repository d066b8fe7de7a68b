"""Search bar with optional voice input."""

import streamlit as st

from curatai.ui.session import get_session


def render_search_bar() -> None:
    """Query field, submit button and (when available) a microphone."""
    state = get_session()
    gallery = state.gallery
    project_id = state.workspace.selected_project_id
    query_key = f"search_query_{project_id}"

    pending = st.session_state.pop("voice_transcript", None)
    if pending is not None:
        st.session_state[query_key] = pending

    with st.form("search_form", clear_on_submit=True):
        col1, col2 = st.columns([5, 1])
        with col1:
            query = st.text_input(
                "Search",
                key=query_key,
                placeholder='Describe a photo, or "in album: <name>"',
                label_visibility="collapsed",
            )
        with col2:
            submitted = st.form_submit_button("Search", type="primary", use_container_width=True,
                                              disabled=gallery.is_searching)
    if submitted and query.strip():
        gallery.search(query)
        st.rerun()

    _render_voice_input(query_key)


def _render_voice_input(query_key: str) -> None:
    state = get_session()
    voice = state.voice

    if not hasattr(st, "audio_input") or not voice.is_supported:
        if st.button("🎤", key="voice_unsupported", help="Voice search"):
            voice.check_supported()
            st.rerun()
        return

    audio = st.audio_input("Voice search", key=f"voice_{query_key}", label_visibility="collapsed")
    if audio is None:
        return

    marker = f"voice_handled_{query_key}"
    audio_id = getattr(audio, "file_id", None) or audio.name
    if st.session_state.get(marker) == audio_id:
        return
    st.session_state[marker] = audio_id

    text = voice.transcribe(audio.getvalue())
    if text and voice.auto_submit:
        state.gallery.search(text)
    elif text:
        st.session_state["voice_transcript"] = text
    st.rerun()
