from __future__ import annotations

import json
import logging
from pathlib import Path

from corpus.base import Corpus, CorpusError, build_corpus

logger = logging.getLogger(__name__)


def load_corpus(path: Path | str) -> Corpus:
    path = Path(path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise CorpusError(f"cannot read corpus {path}: {e}") from e

    corpus = build_corpus(payload)
    logger.info(
        "corpus=%s users=%s events=%s similarity=%s skipped_users=%s skipped_events=%s",
        path.name,
        len(corpus.users),
        len(corpus.events),
        len(corpus.similarity),
        corpus.skipped["users"],
        corpus.skipped["events"],
    )
    return corpus


def dump_corpus(corpus: Corpus, path: Path | str) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(corpus.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
    return path
