"""Tests for the Streamlit host page, with the folium component replaced."""

from pathlib import Path
from unittest.mock import patch

import pytest
from streamlit.testing.v1 import AppTest

from proximity_map.models import SEED_OTHERS, SEED_PRIMARY

APP_PATH = str(Path(__file__).resolve().parent.parent / "streamlit_app.py")


class FakeFolium:
    """Stands in for ``st_folium``.

    Like the real component, it keeps returning the last click for a given
    widget key on every rerun, and returns nothing for a key it has not seen.
    """

    def __init__(self):
        self.clicks = {}
        self.current_key = None

    def __call__(self, fig, key=None, **kwargs):
        self.current_key = key
        return {"last_object_clicked": self.clicks.get(key)}

    def click(self, lat, lng):
        self.clicks[self.current_key] = {"lat": lat, "lng": lng}


@pytest.fixture
def app():
    fake = FakeFolium()
    with patch("streamlit_folium.st_folium", fake):
        at = AppTest.from_file(APP_PATH, default_timeout=30)
        at.run()
        assert not at.exception
        yield at, fake


def _roster(at):
    return at.session_state["roster"]


def _click_entity(at, fake, entity_id):
    e = _roster(at).get(entity_id)
    fake.click(e.latitude, e.longitude)
    at.run()
    assert not at.exception


def test_initial_page_shows_seed_alerts(app):
    at, _ = app
    assert len(at.warning) == 3
    assert at.warning[0].value == "Current User and User 2 are within range!"


def test_click_jitters_clicked_entity(app):
    at, fake = app
    _click_entity(at, fake, "3")

    roster = _roster(at)
    assert roster.get("3").position != SEED_OTHERS[1].position
    assert roster.get("2").position == SEED_OTHERS[0].position
    assert roster.primary.position == SEED_PRIMARY.position


def test_click_is_handled_once(app):
    at, fake = app
    _click_entity(at, fake, "3")
    moved_to = _roster(at).get("3").position

    at.run()
    at.run()
    assert _roster(at).get("3").position == moved_to


def test_fixed_entity_ignores_clicks(app):
    at, fake = app
    at.button(key="toggle-3").click().run()
    assert _roster(at).get("3").is_fixed is True

    _click_entity(at, fake, "3")
    assert _roster(at).get("3").position == SEED_OTHERS[1].position


def test_click_after_unfix_moves_entity(app):
    at, fake = app
    at.button(key="toggle-3").click().run()
    _click_entity(at, fake, "3")
    at.button(key="toggle-3").click().run()
    assert _roster(at).get("3").is_fixed is False

    # Same coordinates as the ignored click
    _click_entity(at, fake, "3")
    assert _roster(at).get("3").position != SEED_OTHERS[1].position


def test_reset_does_not_replay_previous_click(app):
    at, fake = app
    _click_entity(at, fake, "3")
    assert _roster(at).get("3").position != SEED_OTHERS[1].position

    at.button(key="reset").click().run()
    assert not at.exception
    assert _roster(at).get("3").position == SEED_OTHERS[1].position


def test_move_current_user_button_moves_primary(app):
    at, _ = app
    at.button(key="move-primary").click().run()
    assert not at.exception

    roster = _roster(at)
    assert roster.primary.position != SEED_PRIMARY.position
    assert roster.get("2").position == SEED_OTHERS[0].position


def test_threshold_input_updates_roster(app):
    at, _ = app
    at.number_input(key="threshold_m").set_value(10.0).run()
    assert not at.exception

    assert _roster(at).threshold_m == 10.0
    assert len(at.warning) == 0
