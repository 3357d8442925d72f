import logging
import random

from confsync.config import ConferenceSettings
from confsync.converters import EntityResolver
from confsync.models import RatedTalk, Room, ScheduleSlot, SessionType, Speaker, Talk, Track
from confsync.ratings import RatingAggregates
from confsync.records import as_record, as_records
from confsync.reference_maps import ReferenceMaps
from confsync.rest import RestClient

logger = logging.getLogger(__name__)


class ConferenceClient:
    """Read access to the event feed, enriched with audience statistics.

    Session types, rooms and tracks are loaded once on construction. Every
    other query goes to the feed again; only the statistics aggregates are
    cached.
    """

    def __init__(self, settings: ConferenceSettings, rest: RestClient | None = None, rng: random.Random | None = None):
        self.settings = settings
        self.rest = rest or RestClient(timeout=settings.timeout)
        self.reference_maps = ReferenceMaps.load(self.rest, self._base_uri)
        self.resolver = EntityResolver(self.reference_maps, self._favorite_counts)
        self.ratings = RatingAggregates(settings, self.rest, self.resolver, self.get_talk, rng=rng)
        self.ratings.warm_up()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        self.rest.close()

    @property
    def _base_uri(self) -> str:
        return self.settings.event_base_uri

    @property
    def name(self) -> str:
        return self.settings.name

    def _favorite_counts(self):
        return self.ratings.favorite_counts.value

    def _read_list(self, path: str) -> list:
        return as_records(self.rest.read_optional(self._base_uri + path))

    def _read_one(self, path: str):
        return as_record(self.rest.read_optional(self._base_uri + path))

    def get_session_types(self) -> list[SessionType]:
        return list(self.reference_maps.session_types.values())

    def get_rooms(self) -> list[Room]:
        return list(self.reference_maps.rooms.values())

    def get_tracks(self) -> list[Track]:
        return list(self.reference_maps.tracks.values())

    def get_schedule(self, conference_day: str, room_name: str | None = None) -> list[ScheduleSlot]:
        """Schedule of one day, optionally restricted to one room."""
        path = f"schedules/{conference_day}"
        if room_name is not None:
            path += f"/{room_name}"
        return [self.resolver.convert_schedule_slot(r) for r in self._read_list(path)]

    def get_speakers(self) -> list[Speaker]:
        return [self.resolver.convert_speaker(r) for r in self._read_list("speakers")]

    def get_speaker(self, speaker_id: str) -> Speaker | None:
        record = self._read_one(f"speakers/{speaker_id}")
        return self.resolver.convert_speaker(record) if record is not None else None

    def get_talks(self) -> list[Talk]:
        return [self.resolver.convert_talk(r) for r in self._read_list("talks")]

    def get_talk(self, talk_id: str) -> Talk | None:
        record = self._read_one(f"talks/{talk_id}")
        return self.resolver.convert_talk(record) if record is not None else None

    @property
    def rating_client(self) -> "ConferenceClient | None":
        """This client when the statistics API is configured, otherwise ``None``."""
        return self if self.ratings.enabled else None

    def get_rated_talks(self, conference_day: str) -> list[RatedTalk]:
        return self.ratings.rated_talks(conference_day)

    def get_rated_talks_overall(self) -> list[RatedTalk]:
        return self.ratings.rated_talks_overall()
