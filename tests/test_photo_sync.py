from datetime import datetime, timedelta, timezone

import pytest

from conftest import FakeRest

from confsync.config import PhotoSharingSettings
from confsync.errors import ConfigurationError
from confsync.photo_cache import PhotoStorage, URLContentCache
from confsync.photo_sync import SHARED_PHOTO_ID, PhotoSharingSync

QUERY_URL = "https://photos.test/query"
BASE_TIME = datetime(2025, 10, 6, 12, 0, tzinfo=timezone.utc)


def photo(photo_id, minutes_ago=0):
    return {
        "id": photo_id,
        "url": f"https://photos.test/{photo_id}.jpg",
        "createdAt": (BASE_TIME - timedelta(minutes=minutes_ago)).isoformat(),
    }


def page(photos, last_visible=None, has_more=True):
    return {"photos": photos, "pageInfo": {"pageSize": len(photos), "lastVisible": last_visible, "hasMore": has_more}}


def endless_feed(params):
    """Unlimited unique pages of two photos each."""
    index = int(params.get("lastVisible") or 0)
    return page([photo(f"p{index}", index), photo(f"p{index + 1}", index + 1)], last_visible=str(index + 2))


def test_known_photo_stops_sync_after_first_page():
    settings = PhotoSharingSettings(query_url=QUERY_URL, cache_size=100)
    storage = PhotoStorage(settings.cache_size)
    for photo_id in ("A", "B", "C"):
        storage.add(b"known", BASE_TIME - timedelta(days=1), {SHARED_PHOTO_ID: photo_id})
    rest = FakeRest({QUERY_URL: page([photo("X"), photo("Y", 1), photo("A", 2)], last_visible="A")})

    pages = PhotoSharingSync(settings, rest, storage=storage).run()

    assert pages == 1
    assert len(rest.called(QUERY_URL)) == 1
    assert rest.downloads == [f"https://photos.test/{p}.jpg" for p in ("X", "Y", "A")]


def test_cold_cache_fills_up_to_capacity():
    settings = PhotoSharingSettings(query_url=QUERY_URL, cache_size=5)
    rest = FakeRest({QUERY_URL: endless_feed})
    photo_sync = PhotoSharingSync(settings, rest)

    pages = photo_sync.run()

    assert pages == 3
    assert len(rest.downloads) == 6
    assert photo_sync.storage.count() == 5
    assert photo_sync.initialized


def test_pages_follow_the_cursor():
    settings = PhotoSharingSettings(query_url=QUERY_URL, page_size=2, cache_size=5)
    rest = FakeRest({QUERY_URL: endless_feed})
    PhotoSharingSync(settings, rest).run()

    params = [c[2] for c in rest.called(QUERY_URL)]
    assert params[0] == {"pageSize": 2}
    assert params[1] == {"pageSize": 2, "lastVisible": "2"}
    assert params[2] == {"pageSize": 2, "lastVisible": "4"}


def test_last_page_stops_sync():
    settings = PhotoSharingSettings(query_url=QUERY_URL)
    rest = FakeRest({QUERY_URL: page([photo("X")], has_more=False)})
    photo_sync = PhotoSharingSync(settings, rest)

    assert photo_sync.run() == 1
    assert photo_sync.storage.known_tags(SHARED_PHOTO_ID) == {"X"}


def test_failed_page_fetch_stops_sync():
    settings = PhotoSharingSettings(query_url=QUERY_URL)
    rest = FakeRest()
    photo_sync = PhotoSharingSync(settings, rest)

    assert photo_sync.run() == 1
    assert photo_sync.storage.count() == 0
    assert rest.downloads == []


def test_cached_urls_are_not_stored_twice():
    settings = PhotoSharingSettings(query_url=QUERY_URL)
    rest = FakeRest({QUERY_URL: page([photo("X"), photo("Y")], has_more=False)})
    photo_sync = PhotoSharingSync(settings, rest)

    photo_sync.run()
    photo_sync.run()

    assert photo_sync.storage.count() == 2
    assert len(rest.downloads) == 2


def test_failed_download_is_skipped():
    settings = PhotoSharingSettings(query_url=QUERY_URL)
    rest = FakeRest({QUERY_URL: page([photo("X"), photo("Y")], has_more=False)})
    rest.read_bytes = lambda url: None if url.endswith("X.jpg") else b"ok"
    photo_sync = PhotoSharingSync(settings, rest)

    photo_sync.run()

    assert photo_sync.storage.known_tags(SHARED_PHOTO_ID) == {"Y"}


def test_storage_evicts_oldest_photo():
    storage = PhotoStorage(2)
    storage.add(b"old", BASE_TIME - timedelta(hours=2), {SHARED_PHOTO_ID: "old"})
    storage.add(b"new", BASE_TIME, {SHARED_PHOTO_ID: "new"})
    storage.add(b"mid", BASE_TIME - timedelta(hours=1), {SHARED_PHOTO_ID: "mid"})

    assert storage.count() == 2
    assert [i.content for i in storage.images()] == [b"new", b"mid"]


def test_content_cache_only_notifies_fresh_loads():
    rest = FakeRest()
    cache = URLContentCache(rest)
    loaded = []

    assert cache.get_cached_or_load("https://photos.test/a.jpg", loaded.append) == b"image:https://photos.test/a.jpg"
    cache.get_cached_or_load("https://photos.test/a.jpg", loaded.append)

    assert len(loaded) == 1
    assert "https://photos.test/a.jpg" in cache


def test_missing_cursor_stops_sync():
    settings = PhotoSharingSettings(query_url=QUERY_URL)
    rest = FakeRest({QUERY_URL: lambda params: page([photo("X")], last_visible=None, has_more=True)})

    assert PhotoSharingSync(settings, rest).run() == 1
    assert len(rest.called(QUERY_URL)) == 1


def test_repeated_cursor_stops_sync():
    settings = PhotoSharingSettings(query_url=QUERY_URL)
    rest = FakeRest({QUERY_URL: lambda params: page([photo("X")], last_visible="c1", has_more=True)})

    assert PhotoSharingSync(settings, rest).run() == 2
    params = [c[2] for c in rest.called(QUERY_URL)]
    assert params == [{"pageSize": 10}, {"pageSize": 10, "lastVisible": "c1"}]


def test_content_cache_follows_storage_evictions():
    settings = PhotoSharingSettings(query_url=QUERY_URL, cache_size=2)
    current = {}

    def feed(params):
        return page([photo(current["id"], -current["n"])], has_more=False)

    rest = FakeRest({QUERY_URL: feed})
    photo_sync = PhotoSharingSync(settings, rest)
    for n in range(20):
        current.update(id=f"n{n}", n=n)
        photo_sync.run()

    assert photo_sync.storage.count() == 2
    assert photo_sync.storage.known_tags(SHARED_PHOTO_ID) == {"n18", "n19"}
    assert len(photo_sync.content_cache) == 2
    assert "https://photos.test/n0.jpg" not in photo_sync.content_cache


def test_storage_reports_evicted_photos():
    storage = PhotoStorage(1)
    evicted = []
    storage.add_eviction_listener(evicted.append)
    storage.add(b"old", BASE_TIME - timedelta(hours=1), url="https://photos.test/old.jpg")
    storage.add(b"new", BASE_TIME, url="https://photos.test/new.jpg")

    assert [i.url for i in evicted] == ["https://photos.test/old.jpg"]


@pytest.mark.parametrize("field", ["page_size", "cache_size"])
@pytest.mark.parametrize("value", [0, -1])
def test_non_positive_sizes_are_rejected(field, value):
    with pytest.raises(ConfigurationError, match=field):
        PhotoSharingSettings(query_url=QUERY_URL, **{field: value})
