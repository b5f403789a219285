from datetime import datetime

import pytest

from vocab_tutor.db import init_db
from vocab_tutor.storage import MemoryReviewStore
from vocab_tutor.users import create_user


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_vocab.db")
    return db_path


@pytest.fixture
def db_user(tmp_db):
    """Initialized database with one learner; yields (db_path, user)."""
    init_db(tmp_db)
    return tmp_db, create_user(tmp_db, "learner")


@pytest.fixture
def memory_store():
    return MemoryReviewStore()


@pytest.fixture
def now():
    return datetime(2024, 3, 15, 9, 30)
