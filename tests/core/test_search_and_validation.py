"""Tests for query parsing and form validation."""

import pytest

from curatai.core.exceptions import ValidationError
from curatai.core.search import find_album, parse_album_query
from curatai.core.validation import (
    validate_email,
    validate_login,
    validate_password,
    validate_project_name,
    validate_signup,
    validate_username,
)
from curatai.models import Album


class TestParseAlbumQuery:
    """Tests for the ``in album: <name>`` syntax."""

    @pytest.mark.parametrize("query, expected", [
        ("in album: Alice", "Alice"),
        ("IN ALBUM:Alice", "Alice"),
        ("  In Album :   Mary Jane  ", "Mary Jane"),
        ("in  album: bob", "bob"),
    ])
    def test_album_queries(self, query, expected):
        assert parse_album_query(query) == expected

    @pytest.mark.parametrize("query", ["sunset at the beach", "in album:", "in album:   ", "album: Alice", ""])
    def test_other_queries(self, query):
        assert parse_album_query(query) is None

    def test_find_album_ignores_case(self):
        albums = [Album(id="a1", person_name="Alice"), Album(id="a2", person_name="Bob ")]

        assert find_album(albums, "alice").id == "a1"
        assert find_album(albums, "BOB").id == "a2"
        assert find_album(albums, "Carol") is None


class TestValidation:
    """Tests for field validators."""

    def test_project_name_blank(self):
        with pytest.raises(ValidationError, match="Project name is required"):
            validate_project_name("   ")

    def test_project_name_trimmed(self):
        assert validate_project_name("  Beach  ") == "Beach"

    @pytest.mark.parametrize("email", ["", "ann", "ann@", "ann@example", "a b@example.com"])
    def test_bad_emails(self, email):
        with pytest.raises(ValidationError) as exc_info:
            validate_email(email)
        assert exc_info.value.field == "email"

    def test_good_email(self):
        assert validate_email(" ann@example.com ") == "ann@example.com"

    def test_password_length_only_at_signup(self):
        with pytest.raises(ValidationError):
            validate_password("short")
        assert validate_password("short", for_signup=False) == "short"
        with pytest.raises(ValidationError):
            validate_password("", for_signup=False)

    @pytest.mark.parametrize("username, ok", [
        ("ann", True), ("ann.lee-1_x", True), ("an", False), ("a" * 31, False), ("ann lee", False),
    ])
    def test_username(self, username, ok):
        if ok:
            assert validate_username(username) == username
        else:
            with pytest.raises(ValidationError):
                validate_username(username)

    def test_signup_collects_per_field(self):
        errors = validate_signup("a", "bad", "short", "other")

        assert set(errors) == {"username", "email", "password"}

    def test_signup_confirm_mismatch(self):
        errors = validate_signup("ann", "ann@example.com", "secret123", "secret124")

        assert errors == {"confirm_password": "Passwords do not match"}

    def test_login_valid(self):
        assert validate_login("ann@example.com", "x") == {}
