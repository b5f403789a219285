"""Saved vocabulary items."""
import json
import logging
from datetime import datetime

from vocab_tutor.activity import log_activity
from vocab_tutor.db import get_connection
from vocab_tutor.errors import VocabularyNotFoundError
from vocab_tutor.lookup import WordRecord
from vocab_tutor.models import VocabularyItem

logger = logging.getLogger(__name__)

# List fields are stored as JSON arrays
LIST_FIELDS = ("example_sentences", "synonyms", "antonyms")
UPDATABLE_FIELDS = (
    "term", "phonetics", "definition_text", "part_of_speech", "context",
    "example_sentences", "synonyms", "antonyms", "favorite",
)


def _load_list(value: str | None) -> list[str]:
    return json.loads(value) if value else []


def _dump_list(values) -> str:
    return json.dumps(list(values or []))


def row_to_vocabulary_item(row) -> VocabularyItem:
    return VocabularyItem(
        id=row["id"],
        term=row["term"],
        definition_text=row["definition_text"],
        user_id=row["user_id"],
        phonetics=row["phonetics"],
        part_of_speech=row["part_of_speech"],
        context=row["context"],
        example_sentences=_load_list(row["example_sentences"]),
        synonyms=_load_list(row["synonyms"]),
        antonyms=_load_list(row["antonyms"]),
        favorite=bool(row["favorite"]),
        date_added=datetime.fromisoformat(row["date_added"]) if row["date_added"] else None,
    )


def create_vocabulary_item(
    db_path: str,
    term: str,
    definition_text: str,
    user_id: int | None = None,
    phonetics: str | None = None,
    part_of_speech: str | None = None,
    context: str | None = None,
    example_sentences: list[str] | None = None,
    synonyms: list[str] | None = None,
    antonyms: list[str] | None = None,
    favorite: bool = False,
    now: datetime | None = None,
) -> VocabularyItem:
    now = now or datetime.now()
    conn = get_connection(db_path)
    cur = conn.execute(
        """INSERT INTO vocabulary
        (term, phonetics, definition_text, part_of_speech, context,
         example_sentences, synonyms, antonyms, favorite, date_added, user_id)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        (term, phonetics, definition_text, part_of_speech, context,
         _dump_list(example_sentences), _dump_list(synonyms), _dump_list(antonyms),
         int(favorite), now.isoformat(), user_id),
    )
    conn.commit()
    item_id = cur.lastrowid
    conn.close()
    if user_id is not None:
        log_activity(db_path, user_id, "saved_vocabulary", {"vocabularyId": item_id, "term": term}, now=now)
        if favorite:
            log_activity(db_path, user_id, "added_favorite", {"vocabularyId": item_id, "term": term}, now=now)
    return get_vocabulary_item(db_path, item_id)


def save_word(
    db_path: str,
    user_id: int,
    record: WordRecord,
    favorite: bool = False,
    now: datetime | None = None,
) -> VocabularyItem:
    """Save a looked-up word, or return the user's existing item for the same term."""
    existing = get_vocabulary_by_term(db_path, record.term, user_id=user_id)
    if existing:
        return existing
    primary = record.primary_definition
    return create_vocabulary_item(
        db_path,
        term=record.term,
        definition_text=primary.definition if primary else "",
        user_id=user_id,
        phonetics=record.phonetics,
        part_of_speech=primary.part_of_speech if primary else None,
        context=record.contextual_usage,
        example_sentences=record.all_examples,
        synonyms=record.synonyms,
        antonyms=record.antonyms,
        favorite=favorite,
        now=now,
    )


def get_vocabulary_item(db_path: str, item_id: int) -> VocabularyItem | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM vocabulary WHERE id = ?", (item_id,)).fetchone()
    conn.close()
    return row_to_vocabulary_item(row) if row else None


def get_vocabulary_by_term(db_path: str, term: str, user_id: int | None = None) -> VocabularyItem | None:
    """Case-insensitive match on term, optionally restricted to one user."""
    conn = get_connection(db_path)
    if user_id is None:
        row = conn.execute(
            "SELECT * FROM vocabulary WHERE lower(term) = lower(?) ORDER BY id LIMIT 1", (term,)
        ).fetchone()
    else:
        row = conn.execute(
            "SELECT * FROM vocabulary WHERE lower(term) = lower(?) AND user_id = ? ORDER BY id LIMIT 1",
            (term, user_id),
        ).fetchone()
    conn.close()
    return row_to_vocabulary_item(row) if row else None


def get_vocabulary_by_user(db_path: str, user_id: int) -> list[VocabularyItem]:
    conn = get_connection(db_path)
    rows = conn.execute("SELECT * FROM vocabulary WHERE user_id = ? ORDER BY id", (user_id,)).fetchall()
    conn.close()
    return [row_to_vocabulary_item(r) for r in rows]


def get_favorite_vocabulary(db_path: str, user_id: int) -> list[VocabularyItem]:
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT * FROM vocabulary WHERE user_id = ? AND favorite = 1 ORDER BY id", (user_id,)
    ).fetchall()
    conn.close()
    return [row_to_vocabulary_item(r) for r in rows]


def update_vocabulary_item(db_path: str, item_id: int, **changes) -> VocabularyItem:
    unknown = set(changes) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValueError(f"Cannot update vocabulary fields: {', '.join(sorted(unknown))}")
    if get_vocabulary_item(db_path, item_id) is None:
        raise VocabularyNotFoundError(item_id)
    if changes:
        values = []
        for name, value in changes.items():
            if name in LIST_FIELDS:
                value = _dump_list(value)
            elif name == "favorite":
                value = int(bool(value))
            values.append(value)
        assignments = ", ".join(f"{name}=?" for name in changes)
        conn = get_connection(db_path)
        conn.execute(f"UPDATE vocabulary SET {assignments} WHERE id=?", (*values, item_id))
        conn.commit()
        conn.close()
    return get_vocabulary_item(db_path, item_id)


def toggle_favorite(db_path: str, item_id: int) -> VocabularyItem:
    item = get_vocabulary_item(db_path, item_id)
    if item is None:
        raise VocabularyNotFoundError(item_id)
    updated = update_vocabulary_item(db_path, item_id, favorite=not item.favorite)
    if updated.user_id is not None:
        log_activity(
            db_path, updated.user_id,
            "added_favorite" if updated.favorite else "removed_favorite",
            {"vocabularyId": updated.id, "term": updated.term},
        )
    return updated


def delete_vocabulary_item(db_path: str, item_id: int) -> bool:
    """Delete an item; its review state and collection memberships go with it."""
    conn = get_connection(db_path)
    cur = conn.execute("DELETE FROM vocabulary WHERE id = ?", (item_id,))
    conn.commit()
    conn.close()
    if cur.rowcount:
        logger.info("Deleted vocabulary item %s", item_id)
    return cur.rowcount > 0
