"""Exceptions raised by the vocabulary tutor."""


class VocabTutorError(Exception):
    """Base exception for the vocabulary tutor."""
    pass


class InvalidRatingError(VocabTutorError):
    """Raised when a rating is not one of hard, medium or easy."""
    pass


class ReviewNotFoundError(VocabTutorError):
    """Raised when a flashcard review record does not exist."""

    def __init__(self, review_id: int):
        self.review_id = review_id
        super().__init__(f"Flashcard review {review_id} not found")


class VocabularyNotFoundError(VocabTutorError):
    def __init__(self, vocabulary_id: int):
        self.vocabulary_id = vocabulary_id
        super().__init__(f"Vocabulary item {vocabulary_id} not found")


class CollectionNotFoundError(VocabTutorError):
    def __init__(self, collection_id: int):
        self.collection_id = collection_id
        super().__init__(f"Collection {collection_id} not found")


class InvalidSettingError(VocabTutorError):
    """Raised when a setting value fails validation."""
    pass


class WordNotFoundError(VocabTutorError):
    """Raised when the lookup service has no entry for a term."""

    def __init__(self, term: str):
        self.term = term
        super().__init__(f"Word not found: {term}")


class InvalidWordRecordError(VocabTutorError):
    """Raised when a lookup payload is missing required fields."""
    pass
