"""Pytest configuration and shared fixtures."""

import pytest

from confsync.config import ConferenceSettings
from confsync.models import Room, SessionType, Track
from confsync.reference_maps import ReferenceMaps

EVENT_URI = "https://event.test/api/"
STATS_URI = "https://stats.test/stats/"


class FakeRest:
    """In-memory stand-in for ``RestClient``.

    ``routes`` maps a URL to a payload, or to a callable receiving the
    request params (and JSON body for POST) and returning the payload.
    """

    def __init__(self, routes=None, contents=None):
        self.routes = dict(routes or {})
        self.contents = dict(contents or {})
        self.calls = []
        self.downloads = []

    def _payload(self, url, *args):
        route = self.routes.get(url)
        return route(*args) if callable(route) else route

    def read_optional(self, url, params=None):
        self.calls.append(("GET", url, params))
        return self._payload(url, params)

    def post_optional(self, url, json, params=None):
        self.calls.append(("POST", url, json))
        return self._payload(url, json)

    def read_bytes(self, url):
        self.downloads.append(url)
        return self.contents.get(url, f"image:{url}".encode())

    def close(self):
        pass

    def called(self, url):
        return [c for c in self.calls if c[1] == url]


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def reference_maps() -> ReferenceMaps:
    return ReferenceMaps(
        session_types={"1": SessionType(id="1", name="Conference"), "2": SessionType(id="2", name="Lunch", pause=True)},
        rooms={"10": Room(id="10", name="Room 8", capacity=300), "11": Room(id="11", name="BOF 1", capacity=60)},
        tracks={"5": Track(id="5", name="Java"), "6": Track(id="6", name="Security")},
    )


@pytest.fixture
def stats_settings() -> ConferenceSettings:
    return ConferenceSettings(
        event_base_uri=EVENT_URI,
        event_stats_base_uri=STATS_URI,
        event_stats_token="secret",
        event_slug="conf25",
    )
