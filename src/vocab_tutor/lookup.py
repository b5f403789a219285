"""Word lookup results and the local lookup cache.

The lookup service itself is supplied by the caller as a ``fetch(term)``
callable returning a dict (or None when the word is unknown). Results are
validated into ``WordRecord`` and cached in the database for 24 hours.
"""
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Optional

from vocab_tutor.db import get_connection
from vocab_tutor.errors import InvalidWordRecordError, WordNotFoundError

logger = logging.getLogger(__name__)

CACHE_TTL = timedelta(hours=24)


@dataclass
class Definition:
    part_of_speech: str
    definition: str
    examples: list[str] = field(default_factory=list)


@dataclass
class WordRecord:
    term: str
    definitions: list[Definition]
    phonetics: Optional[str] = None
    formality_level: Optional[str] = None
    regional_context: Optional[str] = None
    contextual_usage: Optional[str] = None
    synonyms: list[str] = field(default_factory=list)
    antonyms: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "WordRecord":
        """Build a record from the lookup service's camelCase payload."""
        try:
            term = data["term"]
            raw_definitions = data["definitions"]
            definitions = [
                Definition(
                    part_of_speech=d["partOfSpeech"],
                    definition=d["definition"],
                    examples=list(d.get("examples") or []),
                )
                for d in raw_definitions
            ]
        except (KeyError, TypeError) as e:
            raise InvalidWordRecordError(f"Malformed lookup result: missing {e}") from e
        if not isinstance(term, str) or not term.strip():
            raise InvalidWordRecordError("Malformed lookup result: empty term")
        usage = data.get("usage") or {}
        related = data.get("related") or {}
        return cls(
            term=term,
            definitions=definitions,
            phonetics=data.get("phonetics"),
            formality_level=usage.get("formalityLevel"),
            regional_context=usage.get("regionalContext"),
            contextual_usage=usage.get("contextualUsage"),
            synonyms=list(related.get("synonyms") or []),
            antonyms=list(related.get("antonyms") or []),
        )

    def to_dict(self) -> dict:
        return {
            "term": self.term,
            "phonetics": self.phonetics,
            "definitions": [
                {"partOfSpeech": d.part_of_speech, "definition": d.definition, "examples": d.examples}
                for d in self.definitions
            ],
            "usage": {
                "formalityLevel": self.formality_level,
                "regionalContext": self.regional_context,
                "contextualUsage": self.contextual_usage,
            },
            "related": {"synonyms": self.synonyms, "antonyms": self.antonyms},
        }

    @property
    def primary_definition(self) -> Optional[Definition]:
        return self.definitions[0] if self.definitions else None

    @property
    def all_examples(self) -> list[str]:
        return [ex for d in self.definitions for ex in d.examples]


def normalize_term(term: str) -> str:
    return term.strip().lower()


def get_cached_lookup(db_path: str, term: str, now: datetime) -> WordRecord | None:
    key = normalize_term(term)
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM word_cache WHERE term = ?", (key,)).fetchone()
    if row is None:
        conn.close()
        return None
    if now - datetime.fromisoformat(row["cached_at"]) > CACHE_TTL:
        conn.execute("DELETE FROM word_cache WHERE term = ?", (key,))
        conn.commit()
        conn.close()
        logger.debug("Cache entry for %r expired", key)
        return None
    conn.close()
    return WordRecord.from_dict(json.loads(row["payload"]))


def cache_word_lookup(db_path: str, term: str, record: WordRecord, now: datetime) -> None:
    conn = get_connection(db_path)
    conn.execute(
        """INSERT INTO word_cache (term, payload, cached_at) VALUES (?, ?, ?)
        ON CONFLICT(term) DO UPDATE SET payload=excluded.payload, cached_at=excluded.cached_at""",
        (normalize_term(term), json.dumps(record.to_dict()), now.isoformat()),
    )
    conn.commit()
    conn.close()


def cached_lookup(
    db_path: str,
    term: str,
    fetch: Callable[[str], Optional[dict]],
    now: datetime | None = None,
) -> WordRecord:
    """Look a term up, serving from the cache when a fresh entry exists."""
    now = now or datetime.now()
    cached = get_cached_lookup(db_path, term, now)
    if cached is not None:
        return cached
    payload = fetch(term)
    if not payload:
        raise WordNotFoundError(term)
    record = WordRecord.from_dict(payload)
    cache_word_lookup(db_path, term, record, now)
    logger.info("Looked up %r", term)
    return record
