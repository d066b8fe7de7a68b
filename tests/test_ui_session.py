"""Tests for per-browser-session wiring of the Streamlit app."""

import json
from unittest.mock import Mock, patch

from curatai.storage import MemoryStorage, get_storage
from curatai.ui.session import SessionState, reset_session


class TestSessionState:
    """Tests for SessionState isolation."""

    def test_sessions_do_not_share_login(self):
        alice_tab = SessionState()
        bob_tab = SessionState()

        alice_tab.auth.storage.set_item("access_token", "alice-token")
        alice_tab.auth.storage.set_item("user", json.dumps({"id": "u1", "email": "alice@example.com"}))

        assert alice_tab.auth.is_authenticated()
        assert alice_tab.client.auth_headers() == {"Authorization": "Bearer alice-token"}
        assert not bob_tab.auth.is_authenticated()
        assert bob_tab.client.auth_headers() == {}
        assert bob_tab.auth.current_user() is None

    def test_logout_in_one_session_keeps_the_other(self):
        alice_tab = SessionState()
        bob_tab = SessionState()
        alice_tab.auth.storage.set_item("access_token", "alice-token")
        bob_tab.auth.storage.set_item("access_token", "bob-token")

        alice_tab.auth.logout()

        assert not alice_tab.auth.is_authenticated()
        assert bob_tab.client.auth_headers() == {"Authorization": "Bearer bob-token"}

    def test_ignores_the_cli_storage_file(self):
        get_storage().set_item("access_token", "cli-token")

        state = SessionState()

        assert isinstance(state.client.storage, MemoryStorage)
        assert not state.auth.is_authenticated()

    def test_controllers_share_the_session_client(self):
        state = SessionState()

        assert state.projects.api.client is state.client
        assert state.gallery.images_api.client is state.client
        assert state.albums.albums_api.client is state.client
        assert state.auth.storage is state.client.storage


class TestResetSession:
    """Tests for reset_session after logout."""

    def test_fresh_state_keeps_pending_toasts(self):
        previous = SessionState()
        previous.auth.storage.set_item("access_token", "tok")
        previous.notifier.success("Logged out successfully")
        fake_st = Mock()
        fake_st.session_state.get.return_value = previous

        with patch("curatai.ui.session.st", fake_st):
            reset_session()

        state = fake_st.session_state.app_state
        assert state is not previous
        assert state.client is not previous.client
        assert not state.auth.is_authenticated()
        assert state.notifier is previous.notifier
        assert state.notifier.messages == ["Logged out successfully"]
