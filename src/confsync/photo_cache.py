"""In-memory photo caches.

``URLContentCache`` holds downloaded bytes keyed by URL. ``PhotoStorage``
holds the photos selected for display, up to a fixed capacity, each tagged
with additional info such as the id of the shared photo it came from.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class StoredImage:
    """A photo held in ``PhotoStorage``."""

    content: bytes
    created_at: datetime | None = None
    additional_info: dict[str, str] = field(default_factory=dict)
    url: str | None = None


def _sort_key(image: StoredImage) -> datetime:
    created = image.created_at or _EPOCH
    return created if created.tzinfo else created.replace(tzinfo=timezone.utc)


class PhotoStorage:
    """Capacity-bounded photo store, newest first. The oldest photo is evicted when full."""

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ValueError("capacity must be larger than zero")
        self.capacity = capacity
        self._images: list[StoredImage] = []
        self._eviction_listeners: list[Callable[[StoredImage], None]] = []
        self._lock = threading.Lock()

    def add_eviction_listener(self, listener: Callable[[StoredImage], None]):
        """Call ``listener`` with every photo dropped to stay within capacity."""
        self._eviction_listeners.append(listener)

    def add(
        self,
        content: bytes,
        created_at: datetime | None = None,
        additional_info: dict[str, str] | None = None,
        url: str | None = None,
    ):
        image = StoredImage(content, created_at, dict(additional_info or {}), url)
        evicted = []
        with self._lock:
            self._images.append(image)
            self._images.sort(key=_sort_key, reverse=True)
            while len(self._images) > self.capacity:
                evicted.append(self._images.pop())
        for image in evicted:
            logger.debug("Evicted photo %s", image.additional_info)
            for listener in self._eviction_listeners:
                listener(image)

    def count(self) -> int:
        with self._lock:
            return len(self._images)

    def images(self, limit: int | None = None) -> list[StoredImage]:
        with self._lock:
            return list(self._images[:limit])

    def known_tags(self, key: str) -> set[str]:
        """Values of ``additional_info[key]`` across all stored photos."""
        with self._lock:
            return {i.additional_info[key] for i in self._images if key in i.additional_info}


class URLContentCache:
    """Downloaded content keyed by URL."""

    def __init__(self, rest):
        self.rest = rest
        self._contents: dict[str, bytes] = {}
        self._lock = threading.Lock()

    def __contains__(self, url: str) -> bool:
        with self._lock:
            return url in self._contents

    def get_cached_or_load(self, url: str, on_load: Callable[[bytes], None] | None = None) -> bytes | None:
        """Return cached content for ``url``, downloading it if needed.

        ``on_load`` is only called for a fresh download.
        """
        with self._lock:
            cached = self._contents.get(url)
        if cached is not None:
            return cached

        content = self.rest.read_bytes(url)
        if content is None:
            logger.warning("Could not load content from %s", url)
            return None
        with self._lock:
            self._contents[url] = content
        if on_load:
            on_load(content)
        return content

    def __len__(self) -> int:
        with self._lock:
            return len(self._contents)

    def evict(self, url: str):
        with self._lock:
            self._contents.pop(url, None)
