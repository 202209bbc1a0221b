from __future__ import annotations

import logging
import time as _t
from collections.abc import Mapping, Sequence
from typing import Any, Iterator, List, Optional

from config import Settings, settings
from schemas import Event, User
from services.diversity import rerank_with_category_diversity
from services.signals import ScoringContext, extract_signals
from services.topk import ScoredCandidate, select_top_k, sort_candidates
from services.weights import ActiveSignals, WeightNormalizer

logger = logging.getLogger(__name__)

SimilarityIndex = Mapping[str, Sequence[str]]


def _as_event_list(events: Any) -> Optional[List[Event]]:
    if isinstance(events, (str, bytes)) or not isinstance(events, Sequence):
        return None
    return [e for e in events if isinstance(e, Event)]


def _scored_candidates(
    user: User,
    events: List[Event],
    similarity_index: Optional[SimilarityIndex],
    cfg: Settings,
) -> Iterator[ScoredCandidate]:
    active = ActiveSignals.for_user(user)
    normalizer = WeightNormalizer(cfg.weights, active)
    ctx = ScoringContext.build(user, events, similarity_index, cold_start=active.cold)

    for ev in events:
        if not ev.id or ev.id in ctx.attended:
            continue
        sig = extract_signals(ctx, ev, cfg)
        if sig is None:  # beyond hard geo cutoff
            continue
        yield ScoredCandidate(
            event=ev,
            score=normalizer.combine(sig),
            distance=sig.distance,
            popularity=sig.pop,
        )


def recommend(
    user: Optional[User],
    events: Sequence[Event],
    similarity_index: Optional[SimilarityIndex] = None,
    limit: int = 5,
    config: Optional[Settings] = None,
) -> List[Event]:
    """
    Top `limit` events for `user`, most relevant first.

    Never raises for missing data: a missing user, empty corpus or
    non-positive limit gives []. The returned items are the very Event
    objects passed in, already-attended events are never included.
    """
    cfg = config if config is not None else settings

    pool = _as_event_list(events)
    if pool is None:
        logger.warning("recommend: events is not a sequence (type=%s)", type(events).__name__)
        return []
    if user is None or not pool:
        return []
    try:
        limit = int(limit)
    except (TypeError, ValueError):
        logger.warning("recommend: invalid limit=%r", limit)
        return []
    k = min(limit, len(pool))
    if k <= 0:
        return []

    start = _t.perf_counter()
    top = select_top_k(_scored_candidates(user, pool, similarity_index, cfg), k)
    if cfg.diversity_enabled and len(top) > 1:
        top = rerank_with_category_diversity(
            top, cfg.diversity_alpha, cfg.diversity_per_category_cap
        )

    logger.debug(
        "user=%s events=%s k=%s returned=%s dur_ms=%.2f",
        user.id,
        len(pool),
        k,
        len(top),
        (_t.perf_counter() - start) * 1000,
    )
    return [c.event for c in top]


def score_event(
    user: User,
    event: Event,
    similarity_index: Optional[SimilarityIndex] = None,
    config: Optional[Settings] = None,
    corpus: Optional[Sequence[Event]] = None,
) -> Optional[float]:
    """
    Combined score of a single event. The cold-start prior is computed over
    `corpus` (defaults to just this event). None if the event is excluded.
    """
    cfg = config if config is not None else settings
    active = ActiveSignals.for_user(user)
    ctx = ScoringContext.build(
        user, list(corpus or [event]), similarity_index, cold_start=active.cold
    )
    sig = extract_signals(ctx, event, cfg)
    if sig is None:
        return None
    return WeightNormalizer(cfg.weights, active).combine(sig)


def rank_events(
    user: Optional[User],
    events: Sequence[Event],
    similarity_index: Optional[SimilarityIndex] = None,
    limit: Optional[int] = None,
    config: Optional[Settings] = None,
) -> List[Event]:
    """Full sort of every eligible event (no heap, no diversity pass)."""
    cfg = config if config is not None else settings
    pool = _as_event_list(events) or []
    if user is None:
        return []
    ranked = sort_candidates(_scored_candidates(user, pool, similarity_index, cfg))
    if limit is not None:
        ranked = ranked[: max(0, limit)]
    return [c.event for c in ranked]
