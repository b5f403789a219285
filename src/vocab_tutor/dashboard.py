"""Learning progress statistics."""
from datetime import datetime

from vocab_tutor.db import get_connection

MASTERED_REPETITIONS = 3


def get_mastery_label(repetitions: int) -> str:
    if repetitions >= MASTERED_REPETITIONS:
        return "MASTERED"
    elif repetitions > 0:
        return "LEARNING"
    return "NEW"


def get_mastery_color(repetitions: int) -> str:
    if repetitions >= MASTERED_REPETITIONS:
        return "green"
    elif repetitions > 0:
        return "yellow"
    return "cyan"


def get_mastery_breakdown(db_path: str, user_id: int) -> dict:
    conn = get_connection(db_path)
    row = conn.execute(
        """SELECT
            SUM(CASE WHEN repetitions >= ? THEN 1 ELSE 0 END) as mastered,
            SUM(CASE WHEN repetitions > 0 AND repetitions < ? THEN 1 ELSE 0 END) as learning,
            SUM(CASE WHEN repetitions = 0 THEN 1 ELSE 0 END) as new_cards
        FROM flashcard_reviews r JOIN vocabulary v ON r.vocabulary_id = v.id
        WHERE r.user_id = ?""",
        (MASTERED_REPETITIONS, MASTERED_REPETITIONS, user_id),
    ).fetchone()
    conn.close()
    return {
        "mastered": row["mastered"] or 0,
        "learning": row["learning"] or 0,
        "new": row["new_cards"] or 0,
    }


def _retention(db_path: str, user_id: int) -> float:
    """Percentage of ratings that were not 'hard'."""
    conn = get_connection(db_path)
    row = conn.execute(
        """SELECT COUNT(*) as t, SUM(CASE WHEN h.rating != 'hard' THEN 1 ELSE 0 END) as c
        FROM review_history h JOIN flashcard_reviews r ON h.review_id = r.id
        WHERE r.user_id = ?""",
        (user_id,),
    ).fetchone()
    conn.close()
    if not row["t"]:
        return 0.0
    return round((row["c"] / row["t"]) * 100, 1)


def get_progress_stats(db_path: str, user_id: int, now: datetime) -> dict:
    conn = get_connection(db_path)
    words = conn.execute("SELECT COUNT(*) FROM vocabulary WHERE user_id = ?", (user_id,)).fetchone()[0]
    favorites = conn.execute(
        "SELECT COUNT(*) FROM vocabulary WHERE user_id = ? AND favorite = 1", (user_id,)
    ).fetchone()[0]
    collections = conn.execute("SELECT COUNT(*) FROM collections WHERE user_id = ?", (user_id,)).fetchone()[0]
    rows = conn.execute(
        """SELECT r.due_date FROM flashcard_reviews r JOIN vocabulary v ON r.vocabulary_id = v.id
        WHERE r.user_id = ?""",
        (user_id,),
    ).fetchall()
    reviews_today = conn.execute(
        """SELECT COUNT(*) FROM review_history h JOIN flashcard_reviews r ON h.review_id = r.id
        WHERE r.user_id = ? AND substr(h.reviewed_at, 1, 10) = ?""",
        (user_id, now.date().isoformat()),
    ).fetchone()[0]
    conn.close()
    due_now = sum(1 for r in rows if datetime.fromisoformat(r["due_date"]) <= now)
    return {
        "words_saved": words,
        "favorites": favorites,
        "collections": collections,
        "flashcards": len(rows),
        "due_now": due_now,
        "reviews_today": reviews_today,
        "retention": _retention(db_path, user_id),
        **get_mastery_breakdown(db_path, user_id),
    }
