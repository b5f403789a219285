# tests/test_lookup.py
from datetime import timedelta

import pytest

from vocab_tutor.db import init_db
from vocab_tutor.errors import InvalidWordRecordError, WordNotFoundError
from vocab_tutor.lookup import WordRecord, cached_lookup, get_cached_lookup

PAYLOAD = {
    "term": "lucid",
    "phonetics": "/ˈluːsɪd/",
    "definitions": [{"partOfSpeech": "adjective", "definition": "Expressed clearly.", "examples": ["a lucid style"]}],
    "usage": {"formalityLevel": "neutral"},
    "related": {"synonyms": ["clear"]},
}


class CountingFetch:
    def __init__(self, payload):
        self.payload = payload
        self.calls = []

    def __call__(self, term):
        self.calls.append(term)
        return self.payload


def test_word_record_from_dict():
    record = WordRecord.from_dict(PAYLOAD)
    assert record.term == "lucid"
    assert record.primary_definition.part_of_speech == "adjective"
    assert record.all_examples == ["a lucid style"]
    assert record.formality_level == "neutral"
    assert record.synonyms == ["clear"]
    assert record.antonyms == []


def test_word_record_round_trips_through_dict():
    record = WordRecord.from_dict(PAYLOAD)
    assert WordRecord.from_dict(record.to_dict()) == record


@pytest.mark.parametrize("payload", [
    {"definitions": []},
    {"term": "x"},
    {"term": "x", "definitions": [{"definition": "no part of speech"}]},
    {"term": "  ", "definitions": []},
])
def test_word_record_rejects_malformed(payload):
    with pytest.raises(InvalidWordRecordError):
        WordRecord.from_dict(payload)


def test_cached_lookup_fetches_once(tmp_db, now):
    init_db(tmp_db)
    fetch = CountingFetch(PAYLOAD)
    first = cached_lookup(tmp_db, "lucid", fetch, now=now)
    second = cached_lookup(tmp_db, "  LUCID ", fetch, now=now + timedelta(hours=1))
    assert first == second
    assert fetch.calls == ["lucid"]


def test_cached_lookup_expires_after_a_day(tmp_db, now):
    init_db(tmp_db)
    fetch = CountingFetch(PAYLOAD)
    cached_lookup(tmp_db, "lucid", fetch, now=now)
    assert get_cached_lookup(tmp_db, "lucid", now + timedelta(hours=25)) is None
    cached_lookup(tmp_db, "lucid", fetch, now=now + timedelta(hours=25))
    assert len(fetch.calls) == 2


def test_cached_lookup_word_not_found(tmp_db, now):
    init_db(tmp_db)
    with pytest.raises(WordNotFoundError):
        cached_lookup(tmp_db, "qwzx", CountingFetch(None), now=now)
    assert get_cached_lookup(tmp_db, "qwzx", now) is None
