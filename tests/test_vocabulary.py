# tests/test_vocabulary.py
import pytest

from vocab_tutor.activity import get_recent_activity
from vocab_tutor.collections_ import add_item_to_collection, create_collection, get_collection_items
from vocab_tutor.errors import VocabularyNotFoundError
from vocab_tutor.lookup import WordRecord
from vocab_tutor.vocabulary import (
    create_vocabulary_item, delete_vocabulary_item, get_favorite_vocabulary,
    get_vocabulary_by_term, get_vocabulary_by_user, get_vocabulary_item,
    save_word, toggle_favorite, update_vocabulary_item,
)

LOOKUP = {
    "term": "Serendipity",
    "phonetics": "/ˌsɛr.ənˈdɪp.ɪ.ti/",
    "definitions": [
        {"partOfSpeech": "noun", "definition": "Finding something good without looking for it.",
         "examples": ["It was pure serendipity."]},
        {"partOfSpeech": "noun", "definition": "Luck.", "examples": ["By serendipity, we met."]},
    ],
    "usage": {"contextualUsage": "Often used of happy discoveries."},
    "related": {"synonyms": ["chance", "fluke"], "antonyms": ["misfortune"]},
}


def test_create_and_get_item(db_user, now):
    db_path, user = db_user
    item = create_vocabulary_item(
        db_path, "lucid", "expressed clearly", user_id=user.id,
        example_sentences=["a lucid account"], synonyms=["clear", "plain"], now=now,
    )
    fetched = get_vocabulary_item(db_path, item.id)
    assert fetched.term == "lucid"
    assert fetched.example_sentences == ["a lucid account"]
    assert fetched.synonyms == ["clear", "plain"]
    assert fetched.antonyms == []
    assert fetched.favorite is False
    assert fetched.date_added == now


def test_get_missing_item(db_user):
    db_path, _ = db_user
    assert get_vocabulary_item(db_path, 123) is None


def test_save_word_maps_lookup_fields(db_user):
    db_path, user = db_user
    item = save_word(db_path, user.id, WordRecord.from_dict(LOOKUP))
    assert item.term == "Serendipity"
    assert item.definition_text == "Finding something good without looking for it."
    assert item.part_of_speech == "noun"
    assert item.context == "Often used of happy discoveries."
    assert item.example_sentences == ["It was pure serendipity.", "By serendipity, we met."]
    assert item.synonyms == ["chance", "fluke"]
    assert item.antonyms == ["misfortune"]


def test_save_word_twice_returns_existing(db_user):
    db_path, user = db_user
    first = save_word(db_path, user.id, WordRecord.from_dict(LOOKUP))
    second = save_word(db_path, user.id, WordRecord.from_dict({**LOOKUP, "term": "serendipity"}))
    assert first.id == second.id
    assert len(get_vocabulary_by_user(db_path, user.id)) == 1


def test_get_vocabulary_by_term_case_insensitive(db_user):
    db_path, user = db_user
    create_vocabulary_item(db_path, "Lucid", "clear", user_id=user.id)
    assert get_vocabulary_by_term(db_path, "LUCID").term == "Lucid"
    assert get_vocabulary_by_term(db_path, "lucid", user_id=user.id) is not None
    assert get_vocabulary_by_term(db_path, "lucid", user_id=user.id + 1) is None


def test_favorites(db_user):
    db_path, user = db_user
    a = create_vocabulary_item(db_path, "a", "x", user_id=user.id)
    create_vocabulary_item(db_path, "b", "y", user_id=user.id)
    toggled = toggle_favorite(db_path, a.id)
    assert toggled.favorite is True
    assert [i.term for i in get_favorite_vocabulary(db_path, user.id)] == ["a"]
    assert toggle_favorite(db_path, a.id).favorite is False
    assert get_favorite_vocabulary(db_path, user.id) == []
    actions = [e.action for e in get_recent_activity(db_path, user.id)]
    assert "added_favorite" in actions
    assert "removed_favorite" in actions


def test_toggle_favorite_missing(db_user):
    db_path, _ = db_user
    with pytest.raises(VocabularyNotFoundError):
        toggle_favorite(db_path, 77)


def test_update_vocabulary_item(db_user):
    db_path, user = db_user
    item = create_vocabulary_item(db_path, "a", "x", user_id=user.id)
    updated = update_vocabulary_item(db_path, item.id, definition_text="new", synonyms=["b"])
    assert updated.definition_text == "new"
    assert updated.synonyms == ["b"]


def test_update_vocabulary_item_rejects_unknown_fields(db_user):
    db_path, user = db_user
    item = create_vocabulary_item(db_path, "a", "x", user_id=user.id)
    with pytest.raises(ValueError):
        update_vocabulary_item(db_path, item.id, ease_factor=300)


def test_update_missing_item(db_user):
    db_path, _ = db_user
    with pytest.raises(VocabularyNotFoundError):
        update_vocabulary_item(db_path, 9, term="b")


def test_delete_removes_collection_membership(db_user):
    db_path, user = db_user
    item = create_vocabulary_item(db_path, "a", "x", user_id=user.id)
    collection = create_collection(db_path, "Verbs", user_id=user.id)
    add_item_to_collection(db_path, collection.id, item.id)
    assert delete_vocabulary_item(db_path, item.id) is True
    assert get_collection_items(db_path, collection.id) == []
    assert delete_vocabulary_item(db_path, item.id) is False


def test_save_logs_activity(db_user):
    db_path, user = db_user
    item = create_vocabulary_item(db_path, "a", "x", user_id=user.id)
    entry = get_recent_activity(db_path, user.id)[0]
    assert entry.action == "saved_vocabulary"
    assert entry.details == {"vocabularyId": item.id, "term": "a"}


def test_list_fields_keep_pipe_characters(db_user):
    db_path, user = db_user
    examples = ["Use a | to pipe output", "second"]
    item = create_vocabulary_item(
        db_path, "pipe", "a shell operator", user_id=user.id,
        example_sentences=examples, synonyms=["a|b"],
    )
    fetched = get_vocabulary_item(db_path, item.id)
    assert fetched.example_sentences == examples
    assert fetched.synonyms == ["a|b"]
    updated = update_vocabulary_item(db_path, item.id, antonyms=["x | y", ""])
    assert updated.antonyms == ["x | y", ""]


def test_save_word_as_favorite_logs_added_favorite(db_user, now):
    db_path, user = db_user
    item = save_word(db_path, user.id, WordRecord.from_dict(LOOKUP), favorite=True, now=now)
    assert item.favorite is True
    actions = [e.action for e in get_recent_activity(db_path, user.id)]
    assert actions == ["added_favorite", "saved_vocabulary"]
