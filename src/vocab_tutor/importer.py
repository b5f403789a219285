"""Import word lists from text, data and document files."""
import csv
import io
import json
import logging
import re
from datetime import datetime
from pathlib import Path

from vocab_tutor.flashcards import add_flashcard
from vocab_tutor.storage import SqliteReviewStore
from vocab_tutor.vocabulary import create_vocabulary_item, get_vocabulary_by_term

logger = logging.getLogger(__name__)

# Tried in order: a colon only splits lines with no tab or spaced dash/equals
LINE_PATTERNS = (
    re.compile(r"^\s*(?P<term>.+?)(?:\s*\t+\s*|\s+[-=\u2013\u2014]\s+)(?P<definition>.+?)\s*$"),
    re.compile(r"^\s*(?P<term>[^:]+?)\s*:\s*(?P<definition>.+?)\s*$"),
)


def read_file_content(file_path: str) -> str:
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix == ".pdf":
        from PyPDF2 import PdfReader
        reader = PdfReader(file_path)
        return "\n".join(page.extract_text() or "" for page in reader.pages)
    elif suffix == ".docx":
        from docx import Document
        doc = Document(file_path)
        return "\n".join(p.text for p in doc.paragraphs)
    elif suffix in (".html", ".htm"):
        from bs4 import BeautifulSoup
        return BeautifulSoup(path.read_text(), "html.parser").get_text("\n")
    return path.read_text()


def _entries_from_data(data) -> list[tuple[str, str]]:
    """Accept a list of {term, definition} objects or a {term: definition} mapping."""
    if isinstance(data, dict):
        if "words" in data:
            return _entries_from_data(data["words"])
        return [(str(k).strip(), str(v).strip()) for k, v in data.items() if str(k).strip()]
    entries = []
    for item in data or []:
        if isinstance(item, dict) and item.get("term"):
            entries.append((str(item["term"]).strip(), str(item.get("definition", "")).strip()))
        elif isinstance(item, str) and item.strip():
            entries.append((item.strip(), ""))
    return entries


def _split_line(line: str) -> tuple[str, str]:
    for pattern in LINE_PATTERNS:
        match = pattern.match(line)
        if match:
            return match["term"], match["definition"]
    return line, ""


def parse_word_list(text: str) -> list[tuple[str, str]]:
    """Split plain text into (term, definition) pairs, one entry per line."""
    entries = []
    for line in text.splitlines():
        line = line.strip().lstrip("-*\u2022 ").strip()
        if not line or line.startswith("#"):
            continue
        entries.append(_split_line(line))
    return entries


def read_word_list(file_path: str) -> list[tuple[str, str]]:
    path = Path(file_path)
    suffix = path.suffix.lower()
    if suffix == ".json":
        return _entries_from_data(json.loads(path.read_text()))
    elif suffix in (".yaml", ".yml"):
        import yaml
        return _entries_from_data(yaml.safe_load(path.read_text()))
    elif suffix == ".csv":
        rows = csv.reader(io.StringIO(path.read_text()))
        return [
            (row[0].strip(), row[1].strip() if len(row) > 1 else "")
            for row in rows
            if row and row[0].strip() and row[0].strip().lower() != "term"
        ]
    return parse_word_list(read_file_content(file_path))


def import_word_list(
    db_path: str,
    user_id: int,
    file_path: str,
    make_flashcards: bool = True,
    now: datetime | None = None,
) -> dict:
    """Save every new term in the file; terms the user already has are skipped."""
    now = now or datetime.now()
    entries = read_word_list(file_path)
    store = SqliteReviewStore(db_path)
    added, skipped = 0, 0
    for term, definition in entries:
        if get_vocabulary_by_term(db_path, term, user_id=user_id):
            skipped += 1
            continue
        item = create_vocabulary_item(db_path, term=term, definition_text=definition, user_id=user_id, now=now)
        if make_flashcards:
            add_flashcard(store, user_id, item.id, now)
        added += 1
    logger.info("Imported %s: %d added, %d skipped", Path(file_path).name, added, skipped)
    return {"filename": Path(file_path).name, "added": added, "skipped": skipped}
