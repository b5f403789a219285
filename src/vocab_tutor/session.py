"""Daily review limit bookkeeping.

The counter is advisory: it tells a review session when to stop asking for
more ratings. The scheduler never consults it.
"""
from dataclasses import dataclass
from datetime import date
from typing import Optional

from vocab_tutor.settings import (
    DEFAULT_DAILY_LIMIT, get_daily_limit, get_setting, set_setting, validate_daily_limit,
)

REVIEW_COUNT_KEY = "dailyReviewCount"
LAST_REVIEW_DATE_KEY = "lastReviewDate"


@dataclass
class DailySessionCounter:
    limit: int = DEFAULT_DAILY_LIMIT
    reviewed_today: int = 0
    last_active_day: Optional[str] = None

    def __post_init__(self):
        self.limit = validate_daily_limit(self.limit)

    def roll_over(self, today: date) -> None:
        """Reset the count when the local calendar day has changed."""
        day = today.isoformat()
        if self.last_active_day != day:
            self.last_active_day = day
            self.reviewed_today = 0

    def record_review(self, today: date) -> int:
        self.roll_over(today)
        self.reviewed_today += 1
        return self.reviewed_today

    def remaining(self, today: date) -> int:
        self.roll_over(today)
        return max(0, self.limit - self.reviewed_today)

    def limit_reached(self, today: date) -> bool:
        return self.remaining(today) == 0


def load_counter(db_path: str, today: date) -> DailySessionCounter:
    counter = DailySessionCounter(
        limit=get_daily_limit(db_path),
        reviewed_today=int(get_setting(db_path, REVIEW_COUNT_KEY, "0")),
        last_active_day=get_setting(db_path, LAST_REVIEW_DATE_KEY),
    )
    counter.roll_over(today)
    return counter


def save_counter(db_path: str, counter: DailySessionCounter) -> None:
    set_setting(db_path, REVIEW_COUNT_KEY, str(counter.reviewed_today))
    set_setting(db_path, LAST_REVIEW_DATE_KEY, counter.last_active_day or "")
