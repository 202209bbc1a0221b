"""
Bounded top-K selection.

Candidates are kept in a size-k min-heap whose root is the *worst* survivor,
so each new candidate costs one comparison against the root and at most one
O(log k) sift. Total cost O(n log k), memory O(k).

Ranking order (best first):
  1. score       descending
  2. distance    ascending, unknown distance ranks last
  3. popularity  descending
  4. event id    ascending
"""
from __future__ import annotations

import heapq
import math
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from schemas import Event


@dataclass
class ScoredCandidate:
    event: Event
    score: float
    distance: Optional[float] = None
    popularity: float = 0.0
    sort_key: tuple = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        dist = self.distance if self.distance is not None else math.inf
        self.sort_key = (-self.score, dist, -self.popularity, self.event.id or "")

    @property
    def id(self) -> str:
        return self.event.id or ""

    def better_than(self, other: ScoredCandidate) -> bool:
        return self.sort_key < other.sort_key


class _WorstFirst:
    # heapq is a min-heap; "less" here means "ranks worse"
    __slots__ = ("cand",)

    def __init__(self, cand: ScoredCandidate) -> None:
        self.cand = cand

    def __lt__(self, other: _WorstFirst) -> bool:
        return other.cand.better_than(self.cand)


def sort_candidates(cands: Iterable[ScoredCandidate]) -> List[ScoredCandidate]:
    return sorted(cands, key=lambda c: c.sort_key)


class TopKSelector:
    def __init__(self, k: int) -> None:
        self.k = max(0, int(k))
        self._heap: List[_WorstFirst] = []

    def __len__(self) -> int:
        return len(self._heap)

    def worst(self) -> Optional[ScoredCandidate]:
        return self._heap[0].cand if self._heap else None

    def offer(self, cand: ScoredCandidate) -> bool:
        """Returns True if the candidate was kept."""
        if self.k == 0:
            return False
        if len(self._heap) < self.k:
            heapq.heappush(self._heap, _WorstFirst(cand))
            return True
        if cand.better_than(self._heap[0].cand):
            heapq.heapreplace(self._heap, _WorstFirst(cand))
            return True
        return False

    def ranked(self) -> List[ScoredCandidate]:
        return sort_candidates(e.cand for e in self._heap)


def select_top_k(cands: Iterable[ScoredCandidate], k: int) -> List[ScoredCandidate]:
    sel = TopKSelector(k)
    for c in cands:
        sel.offer(c)
    return sel.ranked()
