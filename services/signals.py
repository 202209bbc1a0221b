"""
Raw per-candidate signals.

All values land in [0, 1]:
  - pref: Jaccard overlap of user preferences and event categories
  - sim:  share of the user's attended events that list the candidate as similar
  - geo:  exp(-distance / decay) proximity
  - pop:  clamped popularity
  - cold: category-popularity prior, only built for cold-start users
"""
from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Dict, Optional

from config import Settings
from schemas import Event, User
from services.geo import distance, proximity


@dataclass(frozen=True)
class SignalValues:
    pref: float
    sim: float
    geo: float
    pop: float
    cold: float
    distance: Optional[float] = None  # None = unknown


def jaccard(a: Iterable[str], b: Iterable[str]) -> float:
    set_a, set_b = set(a), set(b)
    if not set_a or not set_b:
        return 0.0
    inter = len(set_a & set_b)
    return inter / (len(set_a) + len(set_b) - inter)


def build_similarity_counts(
    attended: Sequence[str], similarity_index: Optional[Mapping[str, Sequence[str]]]
) -> Dict[str, int]:
    """candidate id -> how many attended events list it as similar"""
    counts: Dict[str, int] = defaultdict(int)
    if not attended or not isinstance(similarity_index, Mapping):
        return counts
    for eid in attended:
        sims = similarity_index.get(eid)
        if not isinstance(sims, (list, tuple)):
            continue
        for sid in sims:
            counts[sid] += 1
    return counts


def content_similarity(count: int, attended_total: int) -> float:
    if attended_total <= 0:
        return 0.0
    return min(1.0, count / attended_total)


@dataclass(frozen=True)
class CategoryPrior:
    totals: Mapping[str, float]
    max_sum: float

    def score(self, categories: Iterable[str]) -> float:
        if self.max_sum <= 0:
            return 0.0
        return sum(self.totals.get(c, 0.0) for c in categories) / self.max_sum


def build_category_prior(events: Iterable[Event]) -> CategoryPrior:
    # two passes over the corpus: tally per category, then find the largest
    # per-event sum so scores normalize to [0, 1]
    events = [e for e in events if e is not None]
    totals: Dict[str, float] = defaultdict(float)
    for e in events:
        for c in e.categories:
            totals[c] += e.popularity
    max_sum = 0.0
    for e in events:
        s = sum(totals.get(c, 0.0) for c in e.categories)
        if s > max_sum:
            max_sum = s
    return CategoryPrior(totals=dict(totals), max_sum=max_sum)


@dataclass(frozen=True)
class ScoringContext:
    """Per-call state derived from the user; never shared between calls."""

    user: User
    attended: frozenset
    similar_counts: Mapping[str, int]
    prior: Optional[CategoryPrior] = None

    @classmethod
    def build(
        cls,
        user: User,
        events: Sequence[Event],
        similarity_index: Optional[Mapping[str, Sequence[str]]],
        *,
        cold_start: bool,
    ) -> ScoringContext:
        return cls(
            user=user,
            attended=frozenset(user.attended_events),
            similar_counts=build_similarity_counts(user.attended_events, similarity_index),
            prior=build_category_prior(events) if cold_start else None,
        )


def extract_signals(
    ctx: ScoringContext, event: Event, config: Settings
) -> Optional[SignalValues]:
    """
    Compute raw signals for one candidate.
    Returns None when the event falls outside the hard geo cutoff.
    """
    user = ctx.user

    dist_km: Optional[float] = None
    if user.location is not None and event.location is not None:
        dist_km = distance(user.location, event.location)
        cutoff = config.hard_geo_cutoff_km
        if cutoff is not None and dist_km is not None and dist_km > cutoff:
            return None

    return SignalValues(
        pref=jaccard(user.preferences, event.categories),
        sim=content_similarity(ctx.similar_counts.get(event.id, 0), len(user.attended_events)),
        geo=proximity(dist_km, config.distance_decay_km),
        pop=event.popularity,
        cold=ctx.prior.score(event.categories) if ctx.prior is not None else 0.0,
        distance=dist_km,
    )
