from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from services.topk import ScoredCandidate

CAP_PENALTY = 0.5


def _penalty(
    categories: Sequence[str],
    counts: Dict[str, int],
    alpha: float,
    per_category_cap: Optional[int],
) -> float:
    if not categories:
        return 0.0
    max_count = max(counts.get(c, 0) for c in categories)
    cap_hit = per_category_cap is not None and max_count >= per_category_cap
    return alpha * max_count + (CAP_PENALTY if cap_hit else 0.0)


def rerank_with_category_diversity(
    cands: Sequence[ScoredCandidate],
    alpha: float = 0.08,
    per_category_cap: Optional[int] = 3,
) -> List[ScoredCandidate]:
    """
    Greedy MMR-style re-rank of a small, already ranked list.

    Each step picks the remaining item with the best
    score - alpha * (times its most repeated category was already picked),
    with an extra 0.5 nudge once a category reaches per_category_cap.
    Ties keep the incoming order. The result is a permutation of the input.

    O(k^2); only meant for the final top-k.
    """
    n = len(cands)
    if n <= 1:
        return list(cands)

    used = [False] * n
    counts: Dict[str, int] = defaultdict(int)
    out: List[ScoredCandidate] = []

    for _ in range(n):
        best_idx = -1
        best_val = float("-inf")
        for i, c in enumerate(cands):
            if used[i]:
                continue
            val = c.score - _penalty(c.event.categories, counts, alpha, per_category_cap)
            if val > best_val:
                best_val = val
                best_idx = i

        used[best_idx] = True
        chosen = cands[best_idx]
        out.append(chosen)
        for cat in chosen.event.categories:
            counts[cat] += 1

    return out
