"""
Command-line harness around the recommender.

    python harness.py --generate --users 2000 --events 2000
    python harness.py --data event_recommendation_data.json --perf-users 100

Runs the reference distance checks, a few scenario users and a latency pass.
"""
from __future__ import annotations

import argparse
import logging
import random
import sys
import time as _t
from typing import Any, Dict, List, Optional, Sequence

from config import Settings, settings
from corpus.base import Corpus, CorpusError
from corpus.json_file import dump_corpus, load_corpus
from corpus.synthetic import generate_corpus
from schemas import Event, GeoPoint, User
from services.geo import distance
from services.recommend import recommend

_log = logging.getLogger("harness")

NYC = GeoPoint(lat=40.7128, lng=-74.0060)

REFERENCE_DISTANCES = [
    ("NYC-LA", NYC, GeoPoint(lat=34.0522, lng=-118.2437), 3936.0),
    ("London-Paris", GeoPoint(lat=51.5074, lng=-0.1278), GeoPoint(lat=48.8566, lng=2.3522), 344.0),
    ("SF-SF", GeoPoint(lat=37.7749, lng=-122.4194), GeoPoint(lat=37.7749, lng=-122.4194), 0.0),
]
TOLERANCE = 0.05


def check_distances() -> List[Dict[str, Any]]:
    results = []
    for label, p1, p2, expected in REFERENCE_DISTANCES:
        got = distance(p1, p2)
        ok = got is not None and abs(got - expected) <= expected * TOLERANCE
        results.append({"label": label, "km": got, "expected": expected, "ok": ok})
        _log.info(
            "distance %s km=%.2f expected=%s result=%s",
            label, got if got is not None else float("nan"), expected, "PASS" if ok else "FAIL",
        )
    return results


def _describe(events: Sequence[Event]) -> str:
    return "; ".join(f"{e.id}[{','.join(e.categories)}]" for e in events)


def scenario_users(corpus: Corpus) -> Dict[str, User]:
    out: Dict[str, User] = {}
    if len(corpus.users) >= 3:
        out["normal"] = corpus.users[0]
        out["no_history"] = corpus.users[1].model_copy(update={"attended_events": ()})
        out["no_preferences"] = corpus.users[2].model_copy(update={"preferences": frozenset()})
    out["new_user"] = User(id="new_user_1", location=NYC)
    return out


def run_scenarios(
    corpus: Corpus, *, limit: int = 5, config: Optional[Settings] = None
) -> Dict[str, List[Event]]:
    results: Dict[str, List[Event]] = {}
    for name, user in scenario_users(corpus).items():
        start = _t.perf_counter()
        recs = recommend(user, corpus.events, corpus.similarity, limit, config)
        dur_ms = (_t.perf_counter() - start) * 1000
        _log.info(
            "scenario=%s user=%s prefs=%s attended=%s dur_ms=%.2f recs=%s",
            name, user.id, len(user.preferences), len(user.attended_events), dur_ms, _describe(recs),
        )
        results[name] = recs
    return results


def run_performance(
    corpus: Corpus,
    *,
    n_users: int = 100,
    limit: int = 5,
    seed: Optional[int] = None,
    config: Optional[Settings] = None,
) -> Dict[str, float]:
    if not corpus.users or n_users <= 0:
        return {"users": 0, "total_ms": 0.0, "avg_ms": 0.0, "avg_returned": 0.0}
    rng = random.Random(seed)
    sample = [rng.choice(corpus.users) for _ in range(n_users)]

    total_returned = 0
    start = _t.perf_counter()
    for user in sample:
        total_returned += len(recommend(user, corpus.events, corpus.similarity, limit, config))
    total_ms = (_t.perf_counter() - start) * 1000

    stats = {
        "users": float(len(sample)),
        "total_ms": total_ms,
        "avg_ms": total_ms / len(sample),
        "avg_returned": total_returned / len(sample),
    }
    _log.info(
        "perf users=%d total_ms=%.1f avg_ms=%.3f avg_returned=%.2f",
        len(sample), stats["total_ms"], stats["avg_ms"], stats["avg_returned"],
    )
    return stats


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Event recommender checks and timings")
    parser.add_argument("--data", default=str(settings.data_path), help="Corpus JSON path")
    parser.add_argument("--generate", action="store_true", help="Generate a synthetic corpus")
    parser.add_argument("--save", default=None, help="Write the generated corpus to this path")
    parser.add_argument("--users", type=int, default=10_000)
    parser.add_argument("--events", type=int, default=2_000)
    parser.add_argument("--categories", type=int, default=20)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--limit", type=int, default=settings.default_limit)
    parser.add_argument("--perf-users", type=int, default=100)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.generate:
        corpus = generate_corpus(
            num_users=args.users,
            num_events=args.events,
            num_categories=args.categories,
            seed=args.seed,
        )
        if args.save:
            _log.info("saved corpus path=%s", dump_corpus(corpus, args.save))
    else:
        try:
            corpus = load_corpus(args.data)
        except CorpusError as e:
            _log.error("%s (use --generate for a synthetic corpus)", e)
            return 2

    dist_ok = all(r["ok"] for r in check_distances())
    run_scenarios(corpus, limit=args.limit)
    run_performance(corpus, n_users=args.perf_users, limit=args.limit, seed=args.seed)
    return 0 if dist_ok else 1


if __name__ == "__main__":
    sys.exit(main())
