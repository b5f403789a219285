"""Word definitions from the Free Dictionary API (dictionaryapi.dev)."""
import logging

import requests

logger = logging.getLogger(__name__)

API_URL = "https://api.dictionaryapi.dev/api/v2/entries/en/{term}"


def to_lookup_payload(term: str, entries: list) -> dict | None:
    """Convert the API's entry list into the lookup payload shape."""
    if not entries:
        return None
    first = entries[0]
    phonetics = first.get("phonetic") or next(
        (p["text"] for p in first.get("phonetics", []) if p.get("text")), None
    )
    definitions, synonyms, antonyms = [], [], []
    for entry in entries:
        for meaning in entry.get("meanings", []):
            pos = meaning.get("partOfSpeech", "")
            synonyms.extend(meaning.get("synonyms", []))
            antonyms.extend(meaning.get("antonyms", []))
            for d in meaning.get("definitions", []):
                definitions.append({
                    "partOfSpeech": pos,
                    "definition": d.get("definition", ""),
                    "examples": [d["example"]] if d.get("example") else [],
                })
    if not definitions:
        return None
    return {
        "term": first.get("word") or term,
        "phonetics": phonetics,
        "definitions": definitions,
        "usage": {},
        # dict.fromkeys keeps first-seen order while dropping repeats
        "related": {
            "synonyms": list(dict.fromkeys(synonyms)),
            "antonyms": list(dict.fromkeys(antonyms)),
        },
    }


def fetch_word(term: str, timeout: float = 10) -> dict | None:
    """Fetch a word; returns None when the dictionary has no entry for it."""
    response = requests.get(API_URL.format(term=requests.utils.quote(term.strip())), timeout=timeout)
    if response.status_code == 404:
        logger.info("No dictionary entry for %r", term)
        return None
    response.raise_for_status()
    return to_lookup_payload(term, response.json())
