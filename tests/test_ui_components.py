"""Tests for Streamlit components with streamlit patched out."""

from unittest.mock import MagicMock, Mock, patch

import pytest

from curatai.models import Image
from curatai.ui.components.gallery import render_all_images


@pytest.fixture
def gallery():
    gallery = Mock()
    gallery.is_loading = False
    gallery.deleting_ids = {"i3"}
    gallery.images = [
        Image(id="i1", image_url="http://cdn.test/p1/a.jpg", project_id="p1"),
        Image(id="i2", image_url="http://cdn.test/p1/b.jpg", project_id="p1", person_name="Alice"),
        Image(id="i3", image_url="http://cdn.test/p1/c.jpg", project_id="p1"),
    ]
    return gallery


@pytest.fixture
def fake_st():
    fake = Mock()
    fake.columns.side_effect = lambda n: [MagicMock() for _ in range(n)]
    fake.button.return_value = False
    return fake


def _render(gallery, fake_st, tile_st=None):
    tile_st = tile_st or Mock(**{"button.return_value": False})
    with patch("curatai.ui.components.gallery.st", fake_st), \
            patch("curatai.ui.components.cards.st", tile_st), \
            patch("curatai.ui.components.gallery.get_session", return_value=Mock(gallery=gallery)):
        render_all_images()
    return tile_st


class TestRenderAllImages:
    """Tests for the project-wide image grid."""

    def test_every_image_gets_a_tile_and_delete_button(self, gallery, fake_st):
        tile_st = _render(gallery, fake_st)

        assert [c.args[0] for c in tile_st.image.call_args_list] == [i.image_url for i in gallery.images]
        delete_calls = {c.kwargs["key"]: c.kwargs["disabled"] for c in fake_st.button.call_args_list}
        assert delete_calls == {"all_delete_i1": False, "all_delete_i2": False, "all_delete_i3": True}

    def test_delete_button_deletes_that_image(self, gallery, fake_st):
        fake_st.button.side_effect = lambda label, key, **kwargs: key == "all_delete_i2"

        _render(gallery, fake_st)

        gallery.delete_image.assert_called_once_with("i2")
        fake_st.rerun.assert_called_once()

    def test_empty_project(self, gallery, fake_st):
        gallery.images = []

        _render(gallery, fake_st)

        fake_st.info.assert_called_once()
        fake_st.columns.assert_not_called()
