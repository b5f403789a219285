"""Named collections grouping vocabulary items."""
from datetime import datetime

from vocab_tutor.activity import log_activity
from vocab_tutor.db import get_connection
from vocab_tutor.errors import CollectionNotFoundError, VocabularyNotFoundError
from vocab_tutor.models import Collection, VocabularyItem
from vocab_tutor.vocabulary import get_vocabulary_item, row_to_vocabulary_item

DEFAULT_COLOR = "#4F46E5"


def _row_to_collection(row) -> Collection:
    return Collection(
        id=row["id"],
        name=row["name"],
        user_id=row["user_id"],
        description=row["description"] or "",
        color=row["color"] or DEFAULT_COLOR,
        date_created=datetime.fromisoformat(row["date_created"]) if row["date_created"] else None,
    )


def create_collection(
    db_path: str,
    name: str,
    user_id: int | None = None,
    description: str = "",
    color: str = DEFAULT_COLOR,
    now: datetime | None = None,
) -> Collection:
    now = now or datetime.now()
    conn = get_connection(db_path)
    cur = conn.execute(
        "INSERT INTO collections (name, description, color, date_created, user_id) VALUES (?, ?, ?, ?, ?)",
        (name, description, color, now.isoformat(), user_id),
    )
    conn.commit()
    collection_id = cur.lastrowid
    conn.close()
    if user_id is not None:
        log_activity(db_path, user_id, "created_collection", {"collectionId": collection_id, "name": name}, now=now)
    return Collection(
        id=collection_id, name=name, user_id=user_id,
        description=description, color=color, date_created=now,
    )


def get_collection(db_path: str, collection_id: int) -> Collection | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM collections WHERE id = ?", (collection_id,)).fetchone()
    conn.close()
    return _row_to_collection(row) if row else None


def get_collections_by_user(db_path: str, user_id: int) -> list[Collection]:
    conn = get_connection(db_path)
    rows = conn.execute("SELECT * FROM collections WHERE user_id = ? ORDER BY id", (user_id,)).fetchall()
    conn.close()
    return [_row_to_collection(r) for r in rows]


def update_collection(
    db_path: str,
    collection_id: int,
    name: str | None = None,
    description: str | None = None,
    color: str | None = None,
) -> Collection:
    current = get_collection(db_path, collection_id)
    if current is None:
        raise CollectionNotFoundError(collection_id)
    conn = get_connection(db_path)
    conn.execute(
        "UPDATE collections SET name=?, description=?, color=? WHERE id=?",
        (
            name if name is not None else current.name,
            description if description is not None else current.description,
            color if color is not None else current.color,
            collection_id,
        ),
    )
    conn.commit()
    conn.close()
    return get_collection(db_path, collection_id)


def delete_collection(db_path: str, collection_id: int) -> bool:
    """Delete a collection and its membership rows. The vocabulary items stay."""
    conn = get_connection(db_path)
    conn.execute("DELETE FROM collection_items WHERE collection_id = ?", (collection_id,))
    cur = conn.execute("DELETE FROM collections WHERE id = ?", (collection_id,))
    conn.commit()
    conn.close()
    return cur.rowcount > 0


def add_item_to_collection(db_path: str, collection_id: int, vocabulary_id: int) -> int:
    """Add a vocabulary item to a collection. Adding it twice is a no-op.

    Returns the id of the membership row.
    """
    collection = get_collection(db_path, collection_id)
    if collection is None:
        raise CollectionNotFoundError(collection_id)
    item = get_vocabulary_item(db_path, vocabulary_id)
    if item is None:
        raise VocabularyNotFoundError(vocabulary_id)
    conn = get_connection(db_path)
    existing = conn.execute(
        "SELECT id FROM collection_items WHERE collection_id = ? AND vocabulary_id = ?",
        (collection_id, vocabulary_id),
    ).fetchone()
    if existing:
        conn.close()
        return existing["id"]
    cur = conn.execute(
        "INSERT INTO collection_items (collection_id, vocabulary_id) VALUES (?, ?)",
        (collection_id, vocabulary_id),
    )
    conn.commit()
    membership_id = cur.lastrowid
    conn.close()
    if item.user_id is not None:
        log_activity(
            db_path, item.user_id, "added_to_collection",
            {
                "collectionId": collection.id,
                "collectionName": collection.name,
                "vocabularyId": item.id,
                "term": item.term,
            },
        )
    return membership_id


def remove_item_from_collection(db_path: str, collection_id: int, vocabulary_id: int) -> bool:
    conn = get_connection(db_path)
    cur = conn.execute(
        "DELETE FROM collection_items WHERE collection_id = ? AND vocabulary_id = ?",
        (collection_id, vocabulary_id),
    )
    conn.commit()
    conn.close()
    return cur.rowcount > 0


def get_collection_items(db_path: str, collection_id: int) -> list[VocabularyItem]:
    conn = get_connection(db_path)
    rows = conn.execute(
        """SELECT v.* FROM collection_items ci
        JOIN vocabulary v ON ci.vocabulary_id = v.id
        WHERE ci.collection_id = ?
        ORDER BY ci.id""",
        (collection_id,),
    ).fetchall()
    conn.close()
    return [row_to_vocabulary_item(r) for r in rows]
