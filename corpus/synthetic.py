"""
Seeded synthetic corpus for benchmarks and scenario checks.

Shape mirrors the reference dataset: events carry 1-3 categories and a point
inside the continental US, similarity lists hold 1-8 events that share a
category, users have 1-5 preferences and 0-15 attended events.
"""
from __future__ import annotations

import logging
import random
from collections import defaultdict
from typing import Dict, List, Optional, Set

from corpus.base import Corpus
from schemas import Event, GeoPoint, User

logger = logging.getLogger(__name__)

BASE_CATEGORIES = [
    "music", "technology", "food", "sports", "art", "business",
    "education", "health", "travel", "fashion", "gaming", "literature",
    "movies", "politics", "science", "photography", "dance", "charity",
    "family", "finance", "history", "pets", "religion", "beauty",
    "automotive", "environment", "crafts", "comedy",
]

# roughly continental US
LAT_RANGE = (25.0, 49.0)
LNG_RANGE = (-124.0, -66.0)

MAX_PREFERENCES_PER_USER = 5
MAX_ATTENDED_EVENTS_PER_USER = 15
MAX_SIMILAR_EVENTS = 8


def make_categories(count: int, rng: random.Random) -> List[str]:
    if count <= len(BASE_CATEGORIES):
        return BASE_CATEGORIES[:count]
    cats = list(BASE_CATEGORIES)
    seen = set(cats)
    while len(cats) < count:
        a, b = rng.sample(BASE_CATEGORIES, 2)
        combo = f"{a}-{b}"
        if combo not in seen:
            seen.add(combo)
            cats.append(combo)
    return cats


def _location(rng: random.Random) -> GeoPoint:
    return GeoPoint(lat=rng.uniform(*LAT_RANGE), lng=rng.uniform(*LNG_RANGE))


def generate_corpus(
    *,
    num_users: int = 10_000,
    num_events: int = 2_000,
    num_categories: int = 20,
    seed: Optional[int] = 42,
) -> Corpus:
    rng = random.Random(seed)
    categories = make_categories(num_categories, rng)

    events: List[Event] = []
    for i in range(num_events):
        events.append(
            Event(
                id=f"event_{i}",
                title=f"Event {i}",
                categories=rng.sample(categories, min(len(categories), rng.randint(1, 3))),
                location=_location(rng),
                popularity=rng.random(),
            )
        )

    by_cat: Dict[str, List[str]] = defaultdict(list)
    for e in events:
        for c in e.categories:
            by_cat[c].append(e.id)

    similarity: Dict[str, tuple] = {}
    for e in events:
        related: Set[str] = set()
        for c in e.categories:
            related.update(by_cat[c])
        related.discard(e.id)
        pool = sorted(related)
        n = min(len(pool), rng.randint(1, MAX_SIMILAR_EVENTS))
        similarity[e.id] = tuple(rng.sample(pool, n))

    event_ids = [e.id for e in events]
    users: List[User] = []
    for i in range(num_users):
        n_prefs = rng.randint(1, MAX_PREFERENCES_PER_USER)
        n_attended = rng.randint(0, MAX_ATTENDED_EVENTS_PER_USER)
        users.append(
            User(
                id=f"user_{i}",
                location=_location(rng),
                preferences=rng.sample(categories, min(len(categories), n_prefs)),
                attended_events=rng.sample(event_ids, min(len(event_ids), n_attended)),
            )
        )

    logger.info(
        "generated users=%s events=%s categories=%s seed=%s",
        len(users), len(events), len(categories), seed,
    )
    return Corpus(users=users, events=events, similarity=similarity, categories=categories)
