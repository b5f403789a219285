"""Flashcard review sessions: due-card selection and recording ratings."""
import logging
from datetime import datetime

from vocab_tutor.errors import VocabularyNotFoundError
from vocab_tutor.models import DueCard, FlashcardReview
from vocab_tutor.sm2 import Rating, compute_next_state
from vocab_tutor.storage import ReviewStore

logger = logging.getLogger(__name__)

DEFAULT_DUE_LIMIT = 20


def get_due_cards(
    store: ReviewStore,
    user_id: int,
    now: datetime,
    limit: int = DEFAULT_DUE_LIMIT,
) -> list[DueCard]:
    """Return the user's cards due at ``now``, most overdue first.

    The first ``limit`` due records are joined to their vocabulary items;
    records whose item has been deleted are skipped.
    """
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")
    due = sorted(
        (r for r in store.query_review_records_by_user(user_id) if r.state.due_date <= now),
        key=lambda r: (r.state.due_date, r.id),
    )[:limit]
    cards = []
    for review in due:
        vocabulary = store.fetch_vocabulary_content(review.vocabulary_id)
        if vocabulary is None:
            logger.debug("Skipping review %s: vocabulary %s is gone", review.id, review.vocabulary_id)
            continue
        cards.append(DueCard(vocabulary=vocabulary, state=review.state, review_id=review.id))
    return cards


def add_flashcard(store: ReviewStore, user_id: int, vocabulary_id: int, now: datetime) -> FlashcardReview:
    """Turn a vocabulary item into a flashcard, due immediately.

    Returns the existing review if the user already has one for the item.
    """
    if store.fetch_vocabulary_content(vocabulary_id) is None:
        raise VocabularyNotFoundError(vocabulary_id)
    existing = store.find_review(user_id, vocabulary_id)
    if existing:
        return existing
    return store.create_review(user_id, vocabulary_id, now)


def record_review(store: ReviewStore, review_id: int, rating: Rating, now: datetime) -> FlashcardReview:
    """Apply one rating to a review record and persist the next state."""
    review = store.get_review(review_id)
    new_state = compute_next_state(rating, review.state, now)
    updated = store.put_review_state(review_id, new_state, now)
    store.log_review(updated, rating, now)
    logger.info(
        "Review %s rated %s: interval %s -> %s days",
        review_id, rating.value, review.state.interval, new_state.interval,
    )
    return updated
