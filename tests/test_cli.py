"""Tests for the command-line interface."""

import json
import logging

import pytest

from curatai.api.client import ApiClient
from curatai.cli import CliContext, cmd_projects_create, cmd_search, create_argument_parser, main


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def logged_in(config, storage, session):
    storage.set_item("access_token", "tok")
    storage.set_item("user", json.dumps({"id": "u1", "email": "ann@example.com", "username": "ann"}))
    return CliContext(ApiClient(config=config, storage=storage, session=session))


class TestParser:
    """Tests for argument parsing."""

    def test_albums_create(self):
        args = create_argument_parser().parse_args(
            ["albums", "create", "p1", "--name", "Ann", "--image-id", "i1", "--crop", "0.3", "0.4", "--zoom", "2"]
        )

        assert args.func.__name__ == "cmd_albums_create"
        assert args.crop == [0.3, 0.4]
        assert args.zoom == 2.0

    def test_projects_sort_choices(self):
        with pytest.raises(SystemExit):
            create_argument_parser().parse_args(["projects", "list", "--sort", "size"])

    def test_search_query_words(self):
        args = create_argument_parser().parse_args(["search", "p1", "in", "album:", "Ann"])

        assert " ".join(args.query) == "in album: Ann"


class TestCommands:
    """Tests for command handlers."""

    def test_whoami_logged_out(self, tmp_path, capsys, restore_logging):
        code = main(["--storage", str(tmp_path / "s.json"), "--backend-url", "http://backend.test", "whoami"])

        assert code == 1
        assert "Not logged in" in capsys.readouterr().out

    def test_projects_create(self, logged_in, session, make_response, capsys):
        session.request.side_effect = [
            make_response(body={"project_id": "p9"}),
            make_response(body=[{"id": "p9", "project_name": "Trip"}]),
        ]
        args = create_argument_parser().parse_args(["projects", "create", "Trip"])

        assert cmd_projects_create(logged_in, args) == 0

        captured = capsys.readouterr()
        assert captured.out.strip() == "p9"
        assert "Project created successfully" in captured.err

    def test_projects_create_blank_name(self, logged_in, session, capsys):
        args = create_argument_parser().parse_args(["projects", "create", "  "])

        assert cmd_projects_create(logged_in, args) == 1

        session.request.assert_not_called()
        assert "Project name is required" in capsys.readouterr().err

    def test_search_prints_links(self, logged_in, session, make_response, capsys):
        session.request.return_value = make_response(body={"image_links": ["http://cdn/a.jpg"]})
        args = create_argument_parser().parse_args(["search", "p1", "red", "car"])

        assert cmd_search(logged_in, args) == 0

        assert capsys.readouterr().out.strip() == "http://cdn/a.jpg"
        assert session.request.call_args.kwargs["data"] == {"project_id": "p1", "search_query": "red car"}
