import pytest

from config import settings
from schemas import Event, GeoPoint, User
from services.signals import (
    ScoringContext,
    build_category_prior,
    build_similarity_counts,
    content_similarity,
    extract_signals,
    jaccard,
)

NYC = GeoPoint(lat=40.7128, lng=-74.0060)
LA = GeoPoint(lat=34.0522, lng=-118.2437)


def test_jaccard():
    assert jaccard({"music", "art"}, ["music"]) == pytest.approx(0.5)
    assert jaccard({"music"}, ("music",)) == 1.0
    assert jaccard(set(), ["music"]) == 0.0
    assert jaccard({"music"}, []) == 0.0
    assert jaccard({"a", "b"}, {"c"}) == 0.0


def test_similarity_counts_from_attended_only():
    index = {"e1": ["x", "y"], "e2": ["x"], "e3": ["z"], "e4": "not-a-list"}
    counts = build_similarity_counts(["e1", "e2", "e4", "missing"], index)
    assert counts["x"] == 2
    assert counts["y"] == 1
    assert "z" not in counts
    assert build_similarity_counts([], index) == {}
    assert build_similarity_counts(["e1"], None) == {}


def test_content_similarity_caps_at_one():
    assert content_similarity(3, 3) == 1.0
    assert content_similarity(5, 3) == 1.0
    assert content_similarity(1, 4) == pytest.approx(0.25)
    assert content_similarity(0, 0) == 0.0


def test_category_prior_normalizes_by_best_event():
    events = [
        Event(id="a", categories=["music"], popularity=0.5),
        Event(id="b", categories=["music"], popularity=0.5),
        Event(id="c", categories=["art"], popularity=0.5),
    ]
    prior = build_category_prior(events)
    assert prior.totals == {"music": 1.0, "art": 0.5}
    assert prior.max_sum == 1.0
    assert prior.score(["music"]) == 1.0
    assert prior.score(["art"]) == pytest.approx(0.5)
    assert prior.score([]) == 0.0


def test_category_prior_all_zero_popularity():
    prior = build_category_prior([Event(id="a", categories=["x"], popularity=0)])
    assert prior.max_sum == 0
    assert prior.score(["x"]) == 0.0


def _ctx(user, events, index=None):
    return ScoringContext.build(user, events, index, cold_start=not user.preferences and not user.attended_events)


def test_extract_signals_values():
    user = User(id="u", location=NYC, preferences=["music", "art"], attended_events=["old"])
    ev = Event(id="e", categories=["music"], location=NYC, popularity=0.7)
    sig = extract_signals(_ctx(user, [ev], {"old": ["e"]}), ev, settings)
    assert sig.pref == pytest.approx(0.5)
    assert sig.sim == 1.0
    assert sig.geo == 1.0
    assert sig.distance == 0.0
    assert sig.pop == pytest.approx(0.7)
    assert sig.cold == 0.0


def test_missing_location_leaves_distance_unknown():
    user = User(id="u", preferences=["music"])
    ev = Event(id="e", categories=["music"], location=NYC)
    sig = extract_signals(_ctx(user, [ev]), ev, settings)
    assert sig.distance is None
    assert sig.geo == 0.0


def test_hard_cutoff_excludes_far_events():
    cfg = settings.model_copy(update={"hard_geo_cutoff_km": 1000.0})
    user = User(id="u", location=NYC, preferences=["music"])
    far = Event(id="far", categories=["music"], location=LA)
    unknown = Event(id="unknown", categories=["music"])
    ctx = _ctx(user, [far, unknown])
    assert extract_signals(ctx, far, cfg) is None
    assert extract_signals(ctx, unknown, cfg) is not None
