"""Data classes for the vocabulary domain model."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

DEFAULT_EASE_FACTOR = 250
MIN_EASE_FACTOR = 130


@dataclass
class User:
    id: int
    username: str


@dataclass
class VocabularyItem:
    id: int
    term: str
    definition_text: str
    user_id: Optional[int] = None
    phonetics: Optional[str] = None
    part_of_speech: Optional[str] = None
    context: Optional[str] = None
    example_sentences: list[str] = field(default_factory=list)
    synonyms: list[str] = field(default_factory=list)
    antonyms: list[str] = field(default_factory=list)
    favorite: bool = False
    date_added: Optional[datetime] = None


@dataclass
class Collection:
    id: int
    name: str
    user_id: Optional[int] = None
    description: str = ""
    color: str = "#4F46E5"
    date_created: Optional[datetime] = None


@dataclass(frozen=True)
class ReviewState:
    """Scheduling state of one flashcard. ease_factor is scaled by 100."""
    ease_factor: int
    interval: int
    repetitions: int
    due_date: datetime

    @classmethod
    def initial(cls, now: datetime) -> "ReviewState":
        return cls(ease_factor=DEFAULT_EASE_FACTOR, interval=1, repetitions=0, due_date=now)


@dataclass
class FlashcardReview:
    id: int
    user_id: int
    vocabulary_id: int
    state: ReviewState
    last_review_date: Optional[datetime] = None


@dataclass
class DueCard:
    vocabulary: VocabularyItem
    state: ReviewState
    review_id: int


@dataclass
class ActivityEntry:
    id: int
    user_id: int
    action: str
    details: dict = field(default_factory=dict)
    timestamp: Optional[datetime] = None
