import logging
from types import MappingProxyType
from typing import Callable, Mapping, TypeVar

from confsync.converters import convert_room, convert_session_type, convert_track
from confsync.models import Room, SessionType, Track
from confsync.records import Record, as_records

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _index(payload, converter: Callable[[Record], T]) -> Mapping[str, T]:
    """Convert records and index them by id. Last write wins on duplicates."""
    entities = {}
    for record in as_records(payload):
        entity = converter(record)
        entities[entity.id] = entity
    return MappingProxyType(entities)


class ReferenceMaps:
    """Session types, rooms and tracks, keyed by id.

    Built once when the client starts and never refreshed afterwards.
    """

    def __init__(
        self,
        session_types: Mapping[str, SessionType],
        rooms: Mapping[str, Room],
        tracks: Mapping[str, Track],
    ):
        self.session_types = MappingProxyType(dict(session_types))
        self.rooms = MappingProxyType(dict(rooms))
        self.tracks = MappingProxyType(dict(tracks))

    @classmethod
    def load(cls, rest, base_uri: str) -> "ReferenceMaps":
        """Fetch and index the reference feeds below ``base_uri``."""
        session_types = _index(rest.read_optional(base_uri + "session-types"), convert_session_type)
        logger.info("SessionType IDs: %s", sorted(session_types))
        rooms = _index(rest.read_optional(base_uri + "rooms"), convert_room)
        logger.info("Room IDs: %s", sorted(rooms))
        tracks = _index(rest.read_optional(base_uri + "tracks"), convert_track)
        logger.info("Track IDs: %s", sorted(tracks))
        return cls(session_types, rooms, tracks)

    def session_type(self, session_type_id: str | None) -> SessionType | None:
        return self.session_types.get(session_type_id) if session_type_id is not None else None

    def room(self, room_id: str | None) -> Room | None:
        return self.rooms.get(room_id) if room_id is not None else None

    def track(self, track_id: str | None) -> Track | None:
        return self.tracks.get(track_id) if track_id is not None else None
