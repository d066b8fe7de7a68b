"""Tests for the project sidebar controller."""

from unittest.mock import Mock

import pytest

from curatai.core.exceptions import ApiError
from curatai.core.projects import ProjectsController, SortKey
from curatai.core.workspace import UPLOAD_BUSY_MESSAGE, Workspace


@pytest.fixture
def controller(workspace, projects_api, notifier):
    ctrl = ProjectsController(workspace, projects_api, notifier, auth=Mock())
    ctrl.load()
    notifier.pop()
    return ctrl


class TestLoad:
    """Tests for loading the project list."""

    def test_load(self, controller, projects_api):
        assert [p.id for p in controller.projects] == ["p1", "p2", "p3"]
        assert controller.loaded
        assert not controller.is_loading
        projects_api.get_all.assert_called_with("u1")

    def test_requires_user(self, projects_api, notifier):
        ctrl = ProjectsController(Workspace(), projects_api, notifier)

        ctrl.load()

        projects_api.get_all.assert_not_called()
        assert notifier.messages == ["User ID not found. Please log in."]

    def test_failure_keeps_previous_list(self, controller, projects_api, notifier):
        projects_api.get_all.side_effect = ApiError(500, "boom")

        controller.load()

        assert len(controller.projects) == 3
        assert notifier.messages == ["Failed to load projects"]
        assert not controller.is_loading

    def test_failed_load_is_not_repeated_on_rerun(self, workspace, projects_api, notifier):
        projects_api.get_all.side_effect = ApiError(500, "boom")
        ctrl = ProjectsController(workspace, projects_api, notifier)

        for _ in range(3):
            ctrl.ensure_loaded()

        assert projects_api.get_all.call_count == 1
        assert notifier.messages == ["Failed to load projects"]
        assert ctrl.load_failed

    def test_explicit_reload_after_failure(self, workspace, projects_api, notifier):
        projects_api.get_all.side_effect = [ApiError(500, "boom"), projects_api.get_all.return_value]
        ctrl = ProjectsController(workspace, projects_api, notifier)
        ctrl.ensure_loaded()

        ctrl.load()

        assert len(ctrl.projects) == 3
        assert ctrl.loaded
        assert not ctrl.load_failed


class TestCreate:
    """Tests for project creation."""

    @pytest.mark.parametrize("name", ["", "   ", "\t\n"])
    def test_blank_name_makes_no_call_and_keeps_dialog(self, controller, projects_api, notifier, name):
        controller.open_create_dialog()

        assert controller.create(name) is None

        projects_api.create.assert_not_called()
        assert controller.create_dialog_open
        assert notifier.messages == ["Project name is required"]

    def test_success_selects_and_closes(self, controller, projects_api, workspace, notifier):
        controller.open_create_dialog()

        assert controller.create("  Holiday ") == "p9"

        projects_api.create.assert_called_once_with("Holiday", "u1")
        assert projects_api.get_all.call_count == 2
        assert not controller.create_dialog_open
        assert workspace.selected_project_id == "p9"
        assert notifier.messages == ["Project created successfully"]

    def test_failure_keeps_dialog(self, controller, projects_api, notifier):
        projects_api.create.side_effect = ApiError(500, "boom")
        controller.open_create_dialog()

        assert controller.create("Holiday") is None

        assert controller.create_dialog_open
        assert not controller.is_creating
        assert notifier.messages == ["Failed to create project"]

    def test_blocked_during_upload(self, controller, projects_api, workspace, notifier):
        with workspace.upload_session():
            assert controller.create("Holiday") is None
            assert not controller.can_create

        projects_api.create.assert_not_called()
        assert notifier.messages == [UPLOAD_BUSY_MESSAGE]


class TestDeleteAndSelect:
    """Tests for deletion, selection and logout."""

    def test_deleting_selected_project_clears_views(self, controller, workspace, notifier):
        cleared = []
        workspace.on_project_change(cleared.append)
        controller.select("p1")

        assert controller.delete("p1")

        assert workspace.selected_project_id is None
        assert cleared == ["p1", None]
        assert [p.id for p in controller.projects] == ["p2", "p3"]
        assert notifier.messages == ["Project deleted successfully"]

    def test_deleting_other_project_keeps_selection(self, controller, workspace):
        controller.select("p2")

        controller.delete("p1")

        assert workspace.selected_project_id == "p2"

    def test_repeat_delete_while_in_flight_is_ignored(self, controller, projects_api):
        def reenter(project_id):
            assert not controller.delete(project_id)
            assert not controller.select(project_id)
            return {}

        projects_api.delete.side_effect = reenter

        assert controller.delete("p1")
        assert projects_api.delete.call_count == 1
        assert controller.deleting_ids == set()

    def test_delete_failure(self, controller, projects_api, notifier):
        projects_api.delete.side_effect = ApiError(500, "boom")

        assert not controller.delete("p1")

        assert len(controller.projects) == 3
        assert notifier.messages == ["Failed to delete project"]

    def test_select_ignored_during_upload(self, controller, workspace):
        with workspace.upload_session():
            assert not controller.select("p1")
        assert workspace.selected_project_id is None

    def test_logout(self, controller, workspace):
        controller.select("p1")

        assert controller.logout()

        controller.auth.logout.assert_called_once()
        assert workspace.user is None
        assert workspace.selected_project_id is None
        assert controller.projects == []

    def test_logout_blocked_during_upload(self, controller, workspace, notifier):
        with workspace.upload_session():
            assert not controller.logout()

        controller.auth.logout.assert_not_called()
        assert notifier.messages == [UPLOAD_BUSY_MESSAGE]


class TestFiltered:
    """Tests for filtering and sorting."""

    def test_filter_is_case_insensitive(self, controller):
        assert [p.id for p in controller.filtered("B")] == ["p1", "p3"]

    def test_sort_orders(self, controller):
        assert [p.id for p in controller.filtered(sort_by=SortKey.RECENT)] == ["p2", "p1", "p3"]
        assert [p.id for p in controller.filtered(sort_by="name")] == ["p2", "p1", "p3"]
        assert [p.id for p in controller.filtered(sort_by=SortKey.IMAGES)] == ["p2", "p1", "p3"]

    def test_name_sort(self, controller):
        names = [p.project_name for p in controller.filtered(sort_by=SortKey.NAME)]
        assert names == ["alps", "Beach", "Birthday"]

    def test_total_images(self, controller):
        assert controller.total_images == 13
