"""Activity log for tracking what a learner has done."""
import json
from datetime import datetime

from vocab_tutor.db import get_connection
from vocab_tutor.models import ActivityEntry


def log_activity(
    db_path: str,
    user_id: int,
    action: str,
    details: dict | None = None,
    now: datetime | None = None,
) -> ActivityEntry:
    timestamp = now or datetime.now()
    details = details or {}
    conn = get_connection(db_path)
    cur = conn.execute(
        "INSERT INTO activity_log (user_id, action, details, timestamp) VALUES (?, ?, ?, ?)",
        (user_id, action, json.dumps(details), timestamp.isoformat()),
    )
    conn.commit()
    entry_id = cur.lastrowid
    conn.close()
    return ActivityEntry(id=entry_id, user_id=user_id, action=action, details=details, timestamp=timestamp)


def get_recent_activity(db_path: str, user_id: int, limit: int = 10) -> list[ActivityEntry]:
    """Most recent activity first."""
    conn = get_connection(db_path)
    rows = conn.execute(
        """SELECT * FROM activity_log WHERE user_id = ?
        ORDER BY timestamp DESC, id DESC LIMIT ?""",
        (user_id, limit),
    ).fetchall()
    conn.close()
    return [
        ActivityEntry(
            id=r["id"],
            user_id=r["user_id"],
            action=r["action"],
            details=json.loads(r["details"]) if r["details"] else {},
            timestamp=datetime.fromisoformat(r["timestamp"]),
        )
        for r in rows
    ]
