import random
from dataclasses import replace

from conftest import EVENT_URI, STATS_URI, FakeRest

from confsync.config import ConferenceSettings
from confsync.converters import EntityResolver
from confsync.models import Talk
from confsync.ratings import RatingAggregates

TALKS = {"100": Talk(id="100", name="Loom in practice"), "101": Talk(id="101", name="Records")}


def rating_stats(params):
    if params["day"] == "monday":
        return {"talkRatings": [
            {"talkId": "100", "averageRating": 4.5, "totalRatings": 12},
            {"talkId": "999", "averageRating": 1.0, "totalRatings": 1},
        ]}
    if params["day"] == "tuesday":
        return {"talkRatings": [{"talkId": 101, "averageRating": 3, "totalRatings": 4}]}
    return None


def favorite_counts(body):
    return {"result": {"talkFavorites": [
        {"talkId": "100", "favoriteCount": 42},
        {"talkId": "101", "favoriteCount": 7},
    ]}}


def make_aggregates(settings, reference_maps, rest=None, **kwargs):
    rest = rest or FakeRest({
        STATS_URI + "getAllRatingStats": rating_stats,
        STATS_URI + "getAllFavoriteCounts": favorite_counts,
    })
    aggregates = RatingAggregates(settings, rest, EntityResolver(reference_maps), TALKS.get, **kwargs)
    return aggregates, rest


def test_voting_results_bucketed_by_weekday(stats_settings, reference_maps):
    aggregates, rest = make_aggregates(stats_settings, reference_maps)

    monday = aggregates.rated_talks("monday")
    assert [(r.talk.id, r.average_rating, r.total_rating) for r in monday] == [("100", 4.5, 12)]
    assert aggregates.rated_talks("tuesday")[0].average_rating == 3.0
    assert aggregates.rated_talks("wednesday") == []

    calls = rest.called(STATS_URI + "getAllRatingStats")
    assert [c[2]["day"] for c in calls] == ["monday", "tuesday", "wednesday", "thursday", "friday"]
    assert calls[0][2] == {"eventSlug": "conf25", "day": "monday", "token": "secret"}


def test_unknown_day_yields_empty_list(stats_settings, reference_maps):
    aggregates, _ = make_aggregates(stats_settings, reference_maps)
    assert aggregates.rated_talks("saturday") == []
    assert aggregates.rated_talks("2025-10-06") == []


def test_rated_talks_overall_flattens_days(stats_settings, reference_maps):
    aggregates, _ = make_aggregates(stats_settings, reference_maps)
    assert [r.talk.id for r in aggregates.rated_talks_overall()] == ["100", "101"]


def test_favorite_counts(stats_settings, reference_maps):
    aggregates, rest = make_aggregates(stats_settings, reference_maps)
    assert aggregates.favorite_counts.value == {"100": 42, "101": 7}
    assert aggregates.favorite_count("101") == 7
    assert aggregates.favorite_count("555") is None
    assert rest.called(STATS_URI + "getAllFavoriteCounts")[0][2] == {"data": {"eventSlug": "conf25"}}


def test_statistics_disabled_without_token(stats_settings, reference_maps):
    settings = replace(stats_settings, event_stats_token=None)
    aggregates, rest = make_aggregates(settings, reference_maps)

    assert not aggregates.enabled
    assert aggregates.voting_results.value == {}
    assert aggregates.favorite_counts.value == {}
    assert aggregates.rated_talks("monday") == []
    assert rest.calls == []


def test_failed_statistics_calls_degrade(stats_settings, reference_maps):
    aggregates, _ = make_aggregates(stats_settings, reference_maps, rest=FakeRest())
    assert aggregates.favorite_counts.value == {}
    assert aggregates.voting_results.value == {day: () for day in
                                               ("monday", "tuesday", "wednesday", "thursday", "friday")}


def test_aggregates_refresh_on_their_own_schedule(stats_settings, reference_maps, fake_clock):
    aggregates, rest = make_aggregates(stats_settings, reference_maps, clock=fake_clock)
    aggregates.warm_up()
    fake_clock.advance(61)
    aggregates.rated_talks("monday")
    aggregates.favorite_counts.value

    assert len(rest.called(STATS_URI + "getAllRatingStats")) == 10
    assert len(rest.called(STATS_URI + "getAllFavoriteCounts")) == 1


def test_random_simulation_bypasses_statistics(reference_maps):
    settings = ConferenceSettings(event_base_uri=EVENT_URI, random_rated_talks=True)
    talks = [{"id": n, "title": f"Talk {n}"} for n in range(40)]
    rest = FakeRest({EVENT_URI + "talks": talks})
    aggregates, _ = make_aggregates(settings, reference_maps, rest=rest, rng=random.Random(7))

    rated = aggregates.rated_talks("monday")

    assert 0 < len(rated) < 40
    assert all(0 <= r.average_rating < 5 for r in rated)
    assert all(0 <= r.total_rating < 200 for r in rated)
    assert {r.talk.id for r in rated} <= {str(n) for n in range(40)}
    assert not [c for c in rest.calls if c[1].startswith(STATS_URI)]
