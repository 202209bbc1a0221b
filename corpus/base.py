"""
Normalizes raw corpus records into the validated models the scorer expects.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from schemas import Event, User

logger = logging.getLogger(__name__)


class CorpusError(Exception):
    """Corpus file is unreadable or not shaped like a corpus at all."""


@dataclass
class Corpus:
    users: List[User] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)
    similarity: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    categories: List[str] = field(default_factory=list)
    skipped: Dict[str, int] = field(default_factory=lambda: {"users": 0, "events": 0})

    def event_map(self) -> Dict[str, Event]:
        return {e.id: e for e in self.events if e.id}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "users": [u.model_dump(mode="json", by_alias=True) for u in self.users],
            "events": [e.model_dump(mode="json") for e in self.events],
            "eventSimilarity": {k: list(v) for k, v in self.similarity.items()},
            "categories": list(self.categories),
        }


def build_event(raw: Any) -> Optional[Event]:
    if isinstance(raw, Event):
        return raw if raw.id else None
    if not isinstance(raw, Mapping):
        return None
    try:
        ev = Event.model_validate(dict(raw))
    except ValidationError as e:
        logger.debug("skip event id=%s err=%s", raw.get("id"), e.error_count())
        return None
    return ev if ev.id else None


def build_user(raw: Any) -> Optional[User]:
    if isinstance(raw, User):
        return raw if raw.id else None
    if not isinstance(raw, Mapping):
        return None
    try:
        user = User.model_validate(dict(raw))
    except ValidationError as e:
        logger.debug("skip user id=%s err=%s", raw.get("id"), e.error_count())
        return None
    return user if user.id else None


def build_similarity(raw: Any) -> Dict[str, Tuple[str, ...]]:
    if not isinstance(raw, Mapping):
        return {}
    out: Dict[str, Tuple[str, ...]] = {}
    for key, sims in raw.items():
        if not isinstance(sims, (list, tuple)):
            continue
        out[str(key)] = tuple(str(s) for s in sims if isinstance(s, (str, int)))
    return out


def build_corpus(payload: Any) -> Corpus:
    if not isinstance(payload, Mapping):
        raise CorpusError(f"corpus must be a JSON object, got {type(payload).__name__}")

    corpus = Corpus()
    for raw in payload.get("users") or []:
        user = build_user(raw)
        if user is None:
            corpus.skipped["users"] += 1
            continue
        corpus.users.append(user)

    for raw in payload.get("events") or []:
        ev = build_event(raw)
        if ev is None:
            corpus.skipped["events"] += 1
            continue
        corpus.events.append(ev)

    corpus.similarity = build_similarity(payload.get("eventSimilarity"))
    cats = payload.get("categories")
    if isinstance(cats, list):
        corpus.categories = [c for c in cats if isinstance(c, str)]
    else:
        corpus.categories = sorted({c for e in corpus.events for c in e.categories})
    return corpus
