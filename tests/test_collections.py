# tests/test_collections.py
import pytest

from vocab_tutor.collections_ import (
    add_item_to_collection, create_collection, delete_collection, get_collection,
    get_collection_items, get_collections_by_user, remove_item_from_collection,
    update_collection,
)
from vocab_tutor.errors import CollectionNotFoundError, VocabularyNotFoundError
from vocab_tutor.vocabulary import create_vocabulary_item, get_vocabulary_item


def test_create_collection_defaults(db_user, now):
    db_path, user = db_user
    c = create_collection(db_path, "Travel", user_id=user.id, now=now)
    fetched = get_collection(db_path, c.id)
    assert fetched.name == "Travel"
    assert fetched.color == "#4F46E5"
    assert fetched.description == ""
    assert fetched.date_created == now


def test_get_collections_by_user(db_user):
    db_path, user = db_user
    create_collection(db_path, "A", user_id=user.id)
    create_collection(db_path, "B", user_id=user.id)
    assert [c.name for c in get_collections_by_user(db_path, user.id)] == ["A", "B"]
    assert get_collections_by_user(db_path, user.id + 1) == []


def test_update_collection(db_user):
    db_path, user = db_user
    c = create_collection(db_path, "A", user_id=user.id, description="old")
    updated = update_collection(db_path, c.id, name="B")
    assert updated.name == "B"
    assert updated.description == "old"


def test_update_missing_collection(db_user):
    db_path, _ = db_user
    with pytest.raises(CollectionNotFoundError):
        update_collection(db_path, 3, name="x")


def test_add_item_is_idempotent(db_user):
    db_path, user = db_user
    c = create_collection(db_path, "A", user_id=user.id)
    item = create_vocabulary_item(db_path, "word", "def", user_id=user.id)
    first = add_item_to_collection(db_path, c.id, item.id)
    second = add_item_to_collection(db_path, c.id, item.id)
    assert first == second
    assert [i.term for i in get_collection_items(db_path, c.id)] == ["word"]


def test_add_item_requires_existing_rows(db_user):
    db_path, user = db_user
    c = create_collection(db_path, "A", user_id=user.id)
    item = create_vocabulary_item(db_path, "word", "def", user_id=user.id)
    with pytest.raises(CollectionNotFoundError):
        add_item_to_collection(db_path, 99, item.id)
    with pytest.raises(VocabularyNotFoundError):
        add_item_to_collection(db_path, c.id, 99)


def test_remove_item(db_user):
    db_path, user = db_user
    c = create_collection(db_path, "A", user_id=user.id)
    item = create_vocabulary_item(db_path, "word", "def", user_id=user.id)
    add_item_to_collection(db_path, c.id, item.id)
    assert remove_item_from_collection(db_path, c.id, item.id) is True
    assert remove_item_from_collection(db_path, c.id, item.id) is False
    assert get_collection_items(db_path, c.id) == []


def test_delete_collection_keeps_vocabulary(db_user):
    db_path, user = db_user
    c = create_collection(db_path, "A", user_id=user.id)
    item = create_vocabulary_item(db_path, "word", "def", user_id=user.id)
    add_item_to_collection(db_path, c.id, item.id)
    assert delete_collection(db_path, c.id) is True
    assert get_collection(db_path, c.id) is None
    assert get_vocabulary_item(db_path, item.id) is not None
    assert delete_collection(db_path, c.id) is False
