"""Audience statistics: voting results and favorite counts.

Both aggregates come from the statistics API and are held in their own
``ExpiringValue``. When the statistics API is not configured they resolve
to empty mappings.
"""

import logging
import random
from datetime import timedelta
from numbers import Number
from typing import Callable

from confsync.config import ConferenceSettings
from confsync.day_utils import WEEKDAYS, is_conference_day
from confsync.expiring import ExpiringValue
from confsync.models import RatedTalk, Talk
from confsync.records import as_record, as_records, retrieve_identifier, retrieve_records, retrieve_value

logger = logging.getLogger(__name__)

VOTING_RESULTS_TTL = timedelta(seconds=60)
FAVORITE_COUNTS_TTL = timedelta(minutes=5)


class RatingAggregates:
    """Time-bounded voting results and favorite counts."""

    def __init__(
        self,
        settings: ConferenceSettings,
        rest,
        resolver,
        talk_lookup: Callable[[str], Talk | None],
        rng: random.Random | None = None,
        clock: Callable[[], float] | None = None,
    ):
        self.settings = settings
        self.rest = rest
        self.resolver = resolver
        self.talk_lookup = talk_lookup
        self.rng = rng or random.Random()
        clock_args = {"clock": clock} if clock else {}
        self.voting_results = ExpiringValue(self._load_voting_results, VOTING_RESULTS_TTL, **clock_args)
        self.favorite_counts = ExpiringValue(self._load_favorite_counts, FAVORITE_COUNTS_TTL, **clock_args)

    @property
    def enabled(self) -> bool:
        return self.settings.rating_enabled

    def warm_up(self):
        """Populate both aggregates."""
        logger.debug("Initialized voting results: %s", self.voting_results.value)
        logger.debug("Initialized favorite counts: %s", self.favorite_counts.value)

    def favorite_count(self, talk_id: str) -> int | None:
        return self.favorite_counts.value.get(talk_id)

    def rated_talks(self, conference_day: str) -> list[RatedTalk]:
        """Rated talks for one weekday, e.g. ``"monday"``."""
        if self.settings.random_rated_talks:
            logger.debug("Randomized rated talks for %s", conference_day)
            return self._randomized_rated_talks()

        voting_results = self.voting_results.value
        if not is_conference_day(conference_day) or conference_day not in voting_results:
            logger.warning(
                "Lookup of voting results for conference_day=%r failed among the following days: %s",
                conference_day, sorted(voting_results),
            )
            return []
        return list(voting_results[conference_day])

    def rated_talks_overall(self) -> list[RatedTalk]:
        """Rated talks of all weekdays."""
        if self.settings.random_rated_talks:
            logger.debug("Randomized rated talks for the week")
            return self._randomized_rated_talks()
        return [rated for day in WEEKDAYS for rated in self.voting_results.value.get(day, ())]

    def _randomized_rated_talks(self) -> list[RatedTalk]:
        records = as_records(self.rest.read_optional(self.settings.event_base_uri + "talks"))
        return [
            RatedTalk(
                average_rating=self.rng.random() * 5,
                total_rating=self.rng.randrange(200),
                talk=self.resolver.convert_talk(record),
            )
            for record in records
            if self.rng.random() < 0.5
        ]

    def _load_voting_results(self) -> dict[str, tuple[RatedTalk, ...]]:
        if not self.enabled:
            return {}
        logger.info("Loading public event rating stats")
        return {day: self._load_day_ratings(day) for day in WEEKDAYS}

    def _load_day_ratings(self, day: str) -> tuple[RatedTalk, ...]:
        response = as_record(self.rest.read_optional(
            self.settings.event_stats_base_uri + "getAllRatingStats",
            params={
                "eventSlug": self.settings.event_slug,
                "day": day,
                "token": self.settings.event_stats_token,
            },
        ))
        if response is None:
            return ()
        logger.info("Converting voting results for %s", day)
        rated_talks = (
            self.resolver.convert_rated_talk(r, self.talk_lookup)
            for r in retrieve_records(response, "talkRatings")
        )
        return tuple(rated for rated in rated_talks if rated is not None)

    def _load_favorite_counts(self) -> dict[str, int]:
        if not self.enabled:
            return {}
        logger.info("Loading talk favorite counts")
        response = as_record(self.rest.post_optional(
            self.settings.event_stats_base_uri + "getAllFavoriteCounts",
            json={"data": {"eventSlug": self.settings.event_slug}},
        ))
        if response is None:
            return {}
        result = retrieve_value(response, "result", dict) or {}
        counts = {}
        for per_talk in retrieve_records(result, "talkFavorites"):
            talk_id = retrieve_identifier(per_talk, "talkId")
            count = retrieve_value(per_talk, "favoriteCount", Number, int)
            if talk_id is not None and count is not None:
                counts[talk_id] = count
        logger.info("Updated talk favorite counts to: %s", counts)
        return counts
