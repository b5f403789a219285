"""User settings stored in the database."""
from vocab_tutor.db import get_connection
from vocab_tutor.errors import InvalidSettingError

DAILY_LIMIT_KEY = "dailyFlashcardLimit"
DEFAULT_DAILY_LIMIT = 10


def get_setting(db_path: str, key: str, default: str = None) -> str | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT value FROM user_settings WHERE key = ?", (key,)).fetchone()
    conn.close()
    return row["value"] if row else default


def set_setting(db_path: str, key: str, value: str) -> None:
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO user_settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=?",
        (key, value, value),
    )
    conn.commit()
    conn.close()


def validate_daily_limit(value) -> int:
    """Parse a daily flashcard limit, which must be an integer of at least 1."""
    try:
        limit = int(value)
    except (TypeError, ValueError):
        raise InvalidSettingError(f"{DAILY_LIMIT_KEY} must be an integer, got {value!r}") from None
    if limit < 1:
        raise InvalidSettingError(f"{DAILY_LIMIT_KEY} must be at least 1, got {limit}")
    return limit


def get_daily_limit(db_path: str) -> int:
    return validate_daily_limit(get_setting(db_path, DAILY_LIMIT_KEY, str(DEFAULT_DAILY_LIMIT)))


def set_daily_limit(db_path: str, value) -> int:
    limit = validate_daily_limit(value)
    set_setting(db_path, DAILY_LIMIT_KEY, str(limit))
    return limit
