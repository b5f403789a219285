"""SM-2 spaced repetition algorithm, three-button variant."""
from datetime import datetime, timedelta
from enum import Enum

from vocab_tutor.errors import InvalidRatingError
from vocab_tutor.models import MIN_EASE_FACTOR, ReviewState


class Rating(Enum):
    HARD = "hard"
    MEDIUM = "medium"
    EASY = "easy"


QUALITY = {
    Rating.EASY: 5,
    Rating.MEDIUM: 3,
    Rating.HARD: 1,
}


def parse_rating(value) -> Rating:
    """Turn user input into a Rating, rejecting anything but hard/medium/easy."""
    if isinstance(value, Rating):
        return value
    if isinstance(value, str):
        try:
            return Rating(value.strip().lower())
        except ValueError:
            pass
    raise InvalidRatingError(f"Invalid rating {value!r}: expected hard, medium or easy")


def _round_half_up(numerator: int, denominator: int) -> int:
    return (2 * numerator + denominator) // (2 * denominator)


def sm2_update(
    quality: int,
    repetitions: int,
    ease_factor: int,
    interval: int,
) -> dict:
    """Calculate next review parameters using SM-2.

    Args:
        quality: Rating 0-5 (1=hard, 3=medium, 5=easy)
        repetitions: Number of consecutive correct reviews
        ease_factor: Current ease factor scaled by 100 (minimum 130)
        interval: Current interval in days

    Returns:
        Dict with updated interval, repetitions, ease_factor.
    """
    # EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)), the adjustment
    # added in ease units to the x100 factor and rounded back to an integer.
    # Worked in hundredths so the arithmetic stays exact.
    miss = 5 - quality
    new_ef = _round_half_up(100 * ease_factor + 10 - miss * (8 + miss * 2), 100)
    new_ef = max(MIN_EASE_FACTOR, new_ef)

    if quality >= 3:
        if repetitions == 0:
            new_interval = 1
        elif repetitions == 1:
            new_interval = 6
        else:
            # Grows with the ease factor from before this review
            new_interval = max(1, _round_half_up(interval * ease_factor, 100))
        new_repetitions = repetitions + 1
    else:
        new_repetitions = 0
        new_interval = 1

    return {
        "interval": new_interval,
        "repetitions": new_repetitions,
        "ease_factor": new_ef,
    }


def compute_next_state(rating: Rating, state: ReviewState, now: datetime) -> ReviewState:
    """Return the scheduling state that follows rating a card at ``now``."""
    updated = sm2_update(
        quality=QUALITY[rating],
        repetitions=state.repetitions,
        ease_factor=state.ease_factor,
        interval=state.interval,
    )
    return ReviewState(
        ease_factor=updated["ease_factor"],
        interval=updated["interval"],
        repetitions=updated["repetitions"],
        due_date=now + timedelta(days=updated["interval"]),
    )
