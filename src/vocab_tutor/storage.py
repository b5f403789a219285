"""Review record stores used by the scheduler's callers.

A store is always passed in explicitly. ``MemoryReviewStore`` keeps everything
in dicts and is what the tests use; ``SqliteReviewStore`` reads and writes the
application database.
"""
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from vocab_tutor.activity import log_activity
from vocab_tutor.db import get_connection
from vocab_tutor.errors import ReviewNotFoundError
from vocab_tutor.models import FlashcardReview, ReviewState, VocabularyItem
from vocab_tutor.sm2 import Rating
from vocab_tutor.vocabulary import row_to_vocabulary_item

logger = logging.getLogger(__name__)


class ReviewStore(ABC):
    """Persistence operations the review engine depends on."""

    @abstractmethod
    def fetch_vocabulary_content(self, vocabulary_id: int) -> Optional[VocabularyItem]:
        """Return the vocabulary item, or None if it no longer exists."""

    @abstractmethod
    def get_review(self, review_id: int) -> FlashcardReview:
        """Return the review record or raise ReviewNotFoundError."""

    @abstractmethod
    def find_review(self, user_id: int, vocabulary_id: int) -> Optional[FlashcardReview]:
        ...

    @abstractmethod
    def create_review(self, user_id: int, vocabulary_id: int, now: datetime) -> FlashcardReview:
        ...

    @abstractmethod
    def put_review_state(self, review_id: int, state: ReviewState, now: datetime) -> FlashcardReview:
        """Overwrite the scheduling state of one review (last write wins)."""

    @abstractmethod
    def query_review_records_by_user(self, user_id: int) -> list[FlashcardReview]:
        ...

    @abstractmethod
    def log_review(self, review: FlashcardReview, rating: Rating, now: datetime) -> None:
        ...

    def get_review_state(self, review_id: int) -> ReviewState:
        return self.get_review(review_id).state


class MemoryReviewStore(ReviewStore):
    def __init__(self):
        self.vocabulary: dict[int, VocabularyItem] = {}
        self.reviews: dict[int, FlashcardReview] = {}
        self.history: list[tuple[int, Rating, datetime]] = []
        self._next_review_id = 1

    def add_vocabulary(self, item: VocabularyItem) -> VocabularyItem:
        self.vocabulary[item.id] = item
        return item

    def delete_vocabulary(self, vocabulary_id: int) -> bool:
        if self.vocabulary.pop(vocabulary_id, None) is None:
            return False
        for review_id in [r.id for r in self.reviews.values() if r.vocabulary_id == vocabulary_id]:
            del self.reviews[review_id]
        return True

    def fetch_vocabulary_content(self, vocabulary_id: int) -> Optional[VocabularyItem]:
        return self.vocabulary.get(vocabulary_id)

    def get_review(self, review_id: int) -> FlashcardReview:
        try:
            return self.reviews[review_id]
        except KeyError:
            raise ReviewNotFoundError(review_id) from None

    def find_review(self, user_id: int, vocabulary_id: int) -> Optional[FlashcardReview]:
        for review in self.reviews.values():
            if review.user_id == user_id and review.vocabulary_id == vocabulary_id:
                return review
        return None

    def create_review(self, user_id: int, vocabulary_id: int, now: datetime) -> FlashcardReview:
        review = FlashcardReview(
            id=self._next_review_id,
            user_id=user_id,
            vocabulary_id=vocabulary_id,
            state=ReviewState.initial(now),
            last_review_date=now,
        )
        self._next_review_id += 1
        self.reviews[review.id] = review
        return review

    def put_review_state(self, review_id: int, state: ReviewState, now: datetime) -> FlashcardReview:
        review = self.get_review(review_id)
        review.state = state
        review.last_review_date = now
        return review

    def query_review_records_by_user(self, user_id: int) -> list[FlashcardReview]:
        return [r for r in self.reviews.values() if r.user_id == user_id]

    def log_review(self, review: FlashcardReview, rating: Rating, now: datetime) -> None:
        self.history.append((review.id, rating, now))


def _row_to_review(row) -> FlashcardReview:
    return FlashcardReview(
        id=row["id"],
        user_id=row["user_id"],
        vocabulary_id=row["vocabulary_id"],
        state=ReviewState(
            ease_factor=row["ease_factor"],
            interval=row["interval"],
            repetitions=row["repetitions"],
            due_date=datetime.fromisoformat(row["due_date"]),
        ),
        last_review_date=datetime.fromisoformat(row["last_review_date"]) if row["last_review_date"] else None,
    )


class SqliteReviewStore(ReviewStore):
    def __init__(self, db_path: str):
        self.db_path = db_path

    def fetch_vocabulary_content(self, vocabulary_id: int) -> Optional[VocabularyItem]:
        conn = get_connection(self.db_path)
        row = conn.execute("SELECT * FROM vocabulary WHERE id = ?", (vocabulary_id,)).fetchone()
        conn.close()
        return row_to_vocabulary_item(row) if row else None

    def get_review(self, review_id: int) -> FlashcardReview:
        conn = get_connection(self.db_path)
        row = conn.execute("SELECT * FROM flashcard_reviews WHERE id = ?", (review_id,)).fetchone()
        conn.close()
        if row is None:
            raise ReviewNotFoundError(review_id)
        return _row_to_review(row)

    def find_review(self, user_id: int, vocabulary_id: int) -> Optional[FlashcardReview]:
        conn = get_connection(self.db_path)
        row = conn.execute(
            "SELECT * FROM flashcard_reviews WHERE user_id = ? AND vocabulary_id = ?",
            (user_id, vocabulary_id),
        ).fetchone()
        conn.close()
        return _row_to_review(row) if row else None

    def create_review(self, user_id: int, vocabulary_id: int, now: datetime) -> FlashcardReview:
        state = ReviewState.initial(now)
        conn = get_connection(self.db_path)
        cur = conn.execute(
            """INSERT INTO flashcard_reviews
            (vocabulary_id, user_id, ease_factor, interval, repetitions, due_date, last_review_date)
            VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (vocabulary_id, user_id, state.ease_factor, state.interval, state.repetitions,
             state.due_date.isoformat(), now.isoformat()),
        )
        conn.commit()
        review_id = cur.lastrowid
        conn.close()
        logger.debug("Created review %s for vocabulary %s", review_id, vocabulary_id)
        return FlashcardReview(
            id=review_id, user_id=user_id, vocabulary_id=vocabulary_id,
            state=state, last_review_date=now,
        )

    def put_review_state(self, review_id: int, state: ReviewState, now: datetime) -> FlashcardReview:
        conn = get_connection(self.db_path)
        cur = conn.execute(
            """UPDATE flashcard_reviews
            SET ease_factor=?, interval=?, repetitions=?, due_date=?, last_review_date=?
            WHERE id=?""",
            (state.ease_factor, state.interval, state.repetitions,
             state.due_date.isoformat(), now.isoformat(), review_id),
        )
        conn.commit()
        conn.close()
        if cur.rowcount == 0:
            raise ReviewNotFoundError(review_id)
        return self.get_review(review_id)

    def query_review_records_by_user(self, user_id: int) -> list[FlashcardReview]:
        conn = get_connection(self.db_path)
        rows = conn.execute(
            "SELECT * FROM flashcard_reviews WHERE user_id = ?", (user_id,)
        ).fetchall()
        conn.close()
        return [_row_to_review(r) for r in rows]

    def log_review(self, review: FlashcardReview, rating: Rating, now: datetime) -> None:
        conn = get_connection(self.db_path)
        conn.execute(
            "INSERT INTO review_history (review_id, rating, reviewed_at) VALUES (?, ?, ?)",
            (review.id, rating.value, now.isoformat()),
        )
        conn.commit()
        conn.close()
        log_activity(
            self.db_path, review.user_id, "reviewed_flashcard",
            {
                "reviewId": review.id,
                "vocabularyId": review.vocabulary_id,
                "newInterval": review.state.interval,
            },
            now=now,
        )
