"""Learner accounts."""
from vocab_tutor.db import get_connection
from vocab_tutor.models import User


def create_user(db_path: str, username: str) -> User:
    conn = get_connection(db_path)
    cur = conn.execute("INSERT INTO users (username) VALUES (?)", (username,))
    conn.commit()
    user_id = cur.lastrowid
    conn.close()
    return User(id=user_id, username=username)


def get_user(db_path: str, user_id: int) -> User | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
    conn.close()
    return User(id=row["id"], username=row["username"]) if row else None


def get_user_by_username(db_path: str, username: str) -> User | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM users WHERE username = ?", (username,)).fetchone()
    conn.close()
    return User(id=row["id"], username=row["username"]) if row else None


def get_or_create_user(db_path: str, username: str) -> User:
    return get_user_by_username(db_path, username) or create_user(db_path, username)
