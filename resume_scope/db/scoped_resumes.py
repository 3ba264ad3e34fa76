"""
resume_scope/db/scoped_resumes.py

Root rows of the scoped resume overlay. Child tables live in
scoped_resume_content.py. Nothing here commits.
"""
from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional


def _row_to_dict(row) -> Dict[str, Any]:
    return {
        "id": row[0],
        "name": row[1],
        "created_at": row[2],
        "updated_at": row[3],
    }


def insert_scoped_resume(conn: sqlite3.Connection, name: str) -> int:
    cur = conn.execute("INSERT INTO scoped_resumes (name) VALUES (?)", (name,))
    return cur.lastrowid


def get_scoped_resume(conn: sqlite3.Connection, scoped_resume_id: int) -> Optional[Dict[str, Any]]:
    row = conn.execute(
        """
        SELECT id, name, created_at, updated_at
        FROM scoped_resumes
        WHERE id = ?
        """,
        (scoped_resume_id,),
    ).fetchone()
    return _row_to_dict(row) if row else None


def get_scoped_resume_by_name(conn: sqlite3.Connection, name: str) -> Optional[Dict[str, Any]]:
    """Exact, case-sensitive match."""
    row = conn.execute(
        """
        SELECT id, name, created_at, updated_at
        FROM scoped_resumes
        WHERE name = ?
        """,
        (name,),
    ).fetchone()
    return _row_to_dict(row) if row else None


def list_scoped_resumes(conn: sqlite3.Connection) -> List[Dict[str, Any]]:
    rows = conn.execute(
        """
        SELECT id, name, created_at, updated_at
        FROM scoped_resumes
        ORDER BY created_at DESC, id DESC
        """
    ).fetchall()
    return [_row_to_dict(r) for r in rows]


def rename_scoped_resume(conn: sqlite3.Connection, scoped_resume_id: int, name: str) -> int:
    cur = conn.execute(
        """
        UPDATE scoped_resumes
        SET name = ?, updated_at = datetime('now')
        WHERE id = ?
        """,
        (name, scoped_resume_id),
    )
    return cur.rowcount


def touch_scoped_resume(conn: sqlite3.Connection, scoped_resume_id: int) -> None:
    conn.execute(
        "UPDATE scoped_resumes SET updated_at = datetime('now') WHERE id = ?",
        (scoped_resume_id,),
    )


def delete_scoped_resume_row(conn: sqlite3.Connection, scoped_resume_id: int) -> int:
    """
    Delete the root row only. Callers must clear the child tables first
    (see scoped_resume_content.delete_all_content).
    """
    cur = conn.execute("DELETE FROM scoped_resumes WHERE id = ?", (scoped_resume_id,))
    return cur.rowcount
