"""
Shared test fixtures for the editor time tracker.
"""

from datetime import datetime

import pytest

from editor_time_tracker.config import PreferencesStore, TrackerPreferences
from editor_time_tracker.providers import build_default_registry

FIXED_NOW = datetime(2024, 5, 1, 12, 30, 45)


class FakeHost:
    """Editor host whose signals are set directly by the test."""

    def __init__(self, focused=True, elapsed=0.0, product="Demo", playing=False):
        self.focused = focused
        self.elapsed = elapsed
        self.product = product
        self.playing = playing

    def get_focus_state(self):
        return self.focused

    def get_session_elapsed_seconds(self):
        return self.elapsed

    def get_product_name(self):
        return self.product

    def is_playing(self):
        return self.playing


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def preferences(tmp_path):
    prefs = TrackerPreferences(PreferencesStore())
    prefs.log_file_path = tmp_path / "time-tracker.log"
    return prefs


@pytest.fixture
def registry(host):
    return build_default_registry(host, clock=lambda: FIXED_NOW).freeze()


@pytest.fixture
def recorded():
    """Collects emitted events in order."""
    return []
