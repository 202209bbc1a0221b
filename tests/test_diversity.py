import random

from schemas import Event
from services.diversity import rerank_with_category_diversity
from services.topk import ScoredCandidate, sort_candidates


def _cand(eid, score, *cats):
    return ScoredCandidate(event=Event(id=eid, categories=list(cats)), score=score)


def test_repeated_category_is_pushed_down():
    cands = [_cand("a", 0.90, "music"), _cand("b", 0.89, "music"), _cand("c", 0.85, "art")]
    out = rerank_with_category_diversity(cands, alpha=0.08, per_category_cap=3)
    assert [c.id for c in out] == ["a", "c", "b"]


def test_small_alpha_keeps_score_order():
    cands = [_cand("a", 0.90, "music"), _cand("b", 0.80, "music"), _cand("c", 0.50, "art")]
    out = rerank_with_category_diversity(cands, alpha=0.01, per_category_cap=None)
    assert [c.id for c in out] == ["a", "b", "c"]


def test_cap_adds_extra_penalty():
    cands = [_cand("a", 0.9, "music"), _cand("b", 0.8, "music"), _cand("c", 0.5, "art")]
    out = rerank_with_category_diversity(cands, alpha=0.0, per_category_cap=1)
    assert [c.id for c in out] == ["a", "c", "b"]


def test_ties_keep_incoming_order():
    cands = [_cand("x", 0.5), _cand("y", 0.5), _cand("z", 0.5)]
    out = rerank_with_category_diversity(cands)
    assert [c.id for c in out] == ["x", "y", "z"]


def test_rerank_is_a_permutation():
    rng = random.Random(3)
    cats = ["music", "art", "food", "tech"]
    for _ in range(30):
        cands = sort_candidates(
            _cand(f"e{i}", rng.random(), *rng.sample(cats, rng.randint(0, 3)))
            for i in range(rng.randint(0, 25))
        )
        out = rerank_with_category_diversity(cands, alpha=0.2, per_category_cap=2)
        assert len(out) == len(cands)
        assert sorted(c.id for c in out) == sorted(c.id for c in cands)
