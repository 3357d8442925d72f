"""Conversion of feed records into domain entities."""

import logging
from datetime import datetime, timedelta
from functools import partial
from numbers import Number
from types import MappingProxyType
from typing import Callable, Mapping

from confsync.errors import RecordFieldError
from confsync.models import (
    DateTimeRange, PageInfo, RatedTalk, Room, ScheduleSlot, SessionType,
    SharedPhoto, SharedPhotos, Speaker, Talk, Track,
)
from confsync.records import (
    Record, alternatives, process_value, reference_id, retrieve_identifier,
    retrieve_records, retrieve_value,
)

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"

# feed field name -> social media platform
SOCIAL_MEDIA_FIELDS = {
    "twitterHandle": "twitter",
    "linkedInUsername": "linkedin",
    "blueskyUsername": "bluesky",
    "mastodonUsername": "mastodon",
}


def _trimmed(record: Record, key: str) -> str | None:
    return retrieve_value(record, key, str, str.strip)


def _instant(record: Record, key: str) -> datetime | None:
    """Parse an ISO-8601 instant field."""
    text = retrieve_value(record, key, str)
    if text is None:
        return None
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise RecordFieldError(key, "ISO-8601 instant", text, record) from None


def convert_session_type(record: Record) -> SessionType:
    logger.debug("Converting to SessionType: %s", record)
    return SessionType(
        id=retrieve_identifier(record, "id"),
        name=retrieve_value(record, "name", str),
        description=retrieve_value(record, "description", str),
        color=retrieve_value(record, "cssColor", str),
        duration=retrieve_value(record, "duration", Number, lambda n: timedelta(minutes=n)),
        pause=retrieve_value(record, "pause", bool),
    )


def convert_room(record: Record) -> Room:
    logger.debug("Converting to Room: %s", record)
    return Room(
        id=retrieve_identifier(record, "id"),
        name=retrieve_value(record, "name", str),
        capacity=retrieve_value(record, "capacity", Number, int),
        weight=retrieve_value(record, "weight", Number, float),
    )


def convert_track(record: Record) -> Track:
    logger.debug("Converting to Track: %s", record)
    return Track(
        id=retrieve_identifier(record, "id"),
        name=retrieve_value(record, "name", str),
        description=retrieve_value(record, "description", str),
        avatar_url=retrieve_value(record, "imageURL", str),
    )


def convert_shared_photo(record: Record) -> SharedPhoto:
    return SharedPhoto(
        id=retrieve_identifier(record, "id"),
        url=retrieve_value(record, "url", str),
        created_at=_instant(record, "createdAt"),
        likes=retrieve_value(record, "likes", Number, int) or 0,
        flagged_as_spam=bool(retrieve_value(record, "flaggedAsSpam", bool)),
    )


def convert_shared_photos(record: Record) -> SharedPhotos:
    """Convert one page of the photo feed."""
    page_info = retrieve_value(record, "pageInfo", Mapping, lambda m: PageInfo(
        page_size=retrieve_value(m, "pageSize", Number, int) or 0,
        last_visible=retrieve_identifier(m, "lastVisible"),
        has_more=bool(retrieve_value(m, "hasMore", bool)),
    ))
    photos = tuple(convert_shared_photo(p) for p in retrieve_records(record, "photos"))
    return SharedPhotos(photos=photos, page_info=page_info)


class EntityResolver:
    """Converts talk, speaker and schedule records, resolving cross references.

    ``favorite_counts`` is called on every talk conversion and returns the
    statistics-derived favorite count per talk id. Those counts take
    precedence over the ``totalFavourites`` field of the feed.

    Nested talks and speakers are converted recursively. The ids on the
    current conversion path are tracked so a feed that embeds a talk inside
    itself terminates instead of recursing forever.
    """

    def __init__(self, reference_maps, favorite_counts: Callable[[], Mapping[str, int]] = dict):
        self.reference_maps = reference_maps
        self._favorite_counts = favorite_counts

    def convert_schedule_slot(self, record: Record, _path: frozenset = frozenset()) -> ScheduleSlot:
        logger.debug("Converting to ScheduleSlot: %s", record)
        start = _instant(record, "fromDate")
        end = _instant(record, "toDate")
        if start and end and end < start:
            raise RecordFieldError("toDate", "instant not before fromDate", record.get("toDate"), record)

        talk = None
        proposal = retrieve_value(record, "proposal", Mapping)
        if proposal is not None:
            if ("talk", retrieve_identifier(proposal, "id")) in _path:
                logger.debug("Skipping talk already being converted: %s", proposal.get("id"))
            else:
                talk = self.convert_talk(proposal, _path)

        return ScheduleSlot(
            id=retrieve_identifier(record, "id"),
            overflow=retrieve_value(record, "overflow", bool),
            date_time_range=DateTimeRange(start=start, end=end) if start or end else None,
            favorite_count=retrieve_value(record, "totalFavourites", Number, int),
            room=self.reference_maps.room(reference_id(record, "roomId", "room")),
            talk=talk,
        )

    def convert_speaker(self, record: Record, _path: frozenset = frozenset()) -> Speaker:
        logger.debug("Converting to Speaker: %s", record)
        speaker_id = retrieve_identifier(record, "id")
        path = _path | {("speaker", speaker_id)}
        first_name = _trimmed(record, "firstName")
        last_name = _trimmed(record, "lastName")
        names = [n for n in (first_name, last_name) if n is not None]

        social_media: dict[str, str] = {}
        # collect optionally configured social user names
        for json_key, platform in SOCIAL_MEDIA_FIELDS.items():
            process_value(_trimmed(record, json_key), bool, partial(social_media.__setitem__, platform))

        talks = tuple(
            self.convert_talk(t, path)
            for t in retrieve_records(record, "talks")
            if ("talk", retrieve_identifier(t, "id")) not in path
        )

        return Speaker(
            id=speaker_id,
            first_name=first_name,
            last_name=last_name,
            full_name=" ".join(names) if names else None,
            company=_trimmed(record, "company"),
            avatar_url=retrieve_value(record, "imageUrl", str),
            social_media=MappingProxyType(social_media),
            talks=talks,
        )

    def convert_talk(self, record: Record, _path: frozenset = frozenset()) -> Talk:
        logger.debug("Converting to Talk: %s", record)
        talk_id = retrieve_identifier(record, "id")
        path = _path | {("talk", talk_id)}
        maps = self.reference_maps

        return Talk(
            id=talk_id,
            name=retrieve_value(record, "title", str),
            audience_level=retrieve_value(record, "audienceLevel", str),
            language=alternatives(retrieve_value(record, "language", str), DEFAULT_LANGUAGE),
            favorite_count=alternatives(
                # if value is available from public event stats
                self._favorite_counts().get(talk_id),
                # otherwise fall back to value from talk
                retrieve_value(record, "totalFavourites", Number, int),
            ),
            session_type=maps.session_type(reference_id(record, "sessionTypeId", "sessionType")),
            track=maps.track(reference_id(record, "trackId", "track")),
            schedule_slots=tuple(
                self.convert_schedule_slot(s, path) for s in retrieve_records(record, "timeSlots")
            ),
            speakers=tuple(
                self.convert_speaker(s, path)
                for s in retrieve_records(record, "speakers")
                if ("speaker", retrieve_identifier(s, "id")) not in path
            ),
            tags=tuple(
                name for name in (retrieve_value(t, "name", str) for t in retrieve_records(record, "tags"))
                if name is not None
            ),
        )

    def convert_rated_talk(self, record: Record, talk_lookup: Callable[[str], Talk | None]) -> RatedTalk | None:
        """Convert a voting result, fetching its talk with ``talk_lookup``.

        Returns ``None`` when the referenced talk cannot be found.
        """
        logger.debug("Converting to RatedTalk: %s", record)
        talk_id = retrieve_identifier(record, "talkId")
        talk = talk_lookup(talk_id) if talk_id is not None else None
        if talk is None:
            logger.warning("Skipping rating for unknown talk %r", talk_id)
            return None
        return RatedTalk(
            average_rating=retrieve_value(record, "averageRating", Number, float),
            total_rating=retrieve_value(record, "totalRatings", Number, int),
            talk=talk,
        )
