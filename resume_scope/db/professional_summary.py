"""
resume_scope/db/professional_summary.py

The base professional summary. At most one row exists; the service layer
refuses a second insert.
"""

import sqlite3
from typing import Any, Dict, Optional


def get_professional_summary(conn: sqlite3.Connection) -> Optional[Dict[str, Any]]:
    row = conn.execute(
        """
        SELECT id, summary_text, created_at, updated_at
        FROM professional_summaries
        ORDER BY id ASC
        LIMIT 1
        """
    ).fetchone()
    if not row:
        return None
    return {
        "id": row[0],
        "text": row[1],
        "created_at": row[2],
        "updated_at": row[3],
    }


def insert_professional_summary(conn: sqlite3.Connection, text: str) -> int:
    cur = conn.execute(
        "INSERT INTO professional_summaries (summary_text) VALUES (?)",
        (text,),
    )
    return cur.lastrowid


def update_professional_summary(conn: sqlite3.Connection, summary_id: int, text: str) -> int:
    cur = conn.execute(
        """
        UPDATE professional_summaries
        SET summary_text = ?, updated_at = datetime('now')
        WHERE id = ?
        """,
        (text, summary_id),
    )
    return cur.rowcount


def delete_professional_summary(conn: sqlite3.Connection, summary_id: int) -> int:
    cur = conn.execute("DELETE FROM professional_summaries WHERE id = ?", (summary_id,))
    return cur.rowcount
