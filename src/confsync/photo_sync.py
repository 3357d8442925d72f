"""Incremental sync of the shared photo feed.

The feed is ordered newest first. Each run walks pages from the start until
it reaches a page containing a photo that is already stored, the storage is
full, or the feed has no more pages.
"""

import logging

from confsync.config import PhotoSharingSettings
from confsync.converters import convert_shared_photos
from confsync.models import SharedPhoto, SharedPhotos
from confsync.photo_cache import PhotoStorage, URLContentCache
from confsync.records import as_record

logger = logging.getLogger(__name__)

SHARED_PHOTO_ID = "sharedPhotoId"


class PhotoSharingSync:
    """Loads newly shared photos into a ``PhotoStorage``."""

    def __init__(
        self,
        settings: PhotoSharingSettings,
        rest,
        storage: PhotoStorage | None = None,
        content_cache: URLContentCache | None = None,
    ):
        self.settings = settings
        self.rest = rest
        self.storage = storage or PhotoStorage(settings.cache_size)
        self.content_cache = content_cache or URLContentCache(rest)
        self.storage.add_eviction_listener(self._drop_content)
        self.initialized = False

    def run(self) -> int:
        """Run one sync pass. Returns the number of pages fetched."""
        pages = self.load_photos()
        self.initialized = True
        return pages

    def load_photos(self) -> int:
        known_ids = self.storage.known_tags(SHARED_PHOTO_ID)
        logger.info("Starting photo sync with %d known photos", len(known_ids))

        last_visible = None
        pages = 0
        while True:
            page = self._load_page(last_visible)
            pages += 1
            photos = page.photos if page else ()
            page_info = page.page_info if page else None

            self._trigger_photo_load(photos)

            found_known_id = any(p.id in known_ids for p in photos)
            has_more = page_info.has_more if page_info else False
            if not has_more or self.storage.count() >= self.settings.cache_size or found_known_id:
                break
            next_cursor = page_info.last_visible
            if next_cursor is None or next_cursor == last_visible:
                logger.warning("Photo feed reports more pages without a new cursor (%r), stopping", next_cursor)
                break
            last_visible = next_cursor

        logger.info("Photo sync finished after %d page(s), %d photos stored", pages, self.storage.count())
        return pages

    def _trigger_photo_load(self, photos: tuple[SharedPhoto, ...]):
        for photo in photos:
            if not photo.url:
                logger.warning("Shared photo %s has no url", photo.id)
                continue
            self.content_cache.get_cached_or_load(
                photo.url,
                lambda content, photo=photo: self.storage.add(
                    content, photo.created_at, {SHARED_PHOTO_ID: photo.id}, photo.url
                ),
            )

    def _drop_content(self, image):
        if image.url:
            self.content_cache.evict(image.url)

    def _load_page(self, last_visible: str | None) -> SharedPhotos | None:
        params = {"pageSize": self.settings.page_size}
        if last_visible is not None:
            params["lastVisible"] = last_visible
        record = as_record(self.rest.read_optional(self.settings.query_url, params=params))
        return convert_shared_photos(record) if record is not None else None
