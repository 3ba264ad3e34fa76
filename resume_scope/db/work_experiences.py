"""
resume_scope/db/work_experiences.py

Base work experience storage and its ordered bullet lines.
Helpers do not commit.
"""

import sqlite3
from typing import Any, Dict, Iterable, List, Optional


_WE_COLUMNS = """
    id, company_name, company_tagline, city, state, job_title, date_started, date_ended
"""


def _we_row_to_dict(row) -> Dict[str, Any]:
    return {
        "id": row[0],
        "company_name": row[1],
        "company_tagline": row[2],
        "city": row[3],
        "state": row[4],
        "job_title": row[5],
        "date_started": row[6],
        "date_ended": row[7],
    }


def _line_row_to_dict(row) -> Dict[str, Any]:
    return {
        "id": row[0],
        "work_experience_id": row[1],
        "text": row[2],
        "sort_order": row[3],
    }


def insert_work_experience(
    conn: sqlite3.Connection,
    company_name: str,
    city: str,
    state: str,
    job_title: str,
    date_started: str,
    date_ended: Optional[str] = None,
    company_tagline: Optional[str] = None,
) -> int:
    cur = conn.execute(
        """
        INSERT INTO work_experiences
            (company_name, company_tagline, city, state, job_title, date_started, date_ended)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        (company_name, company_tagline, city, state, job_title, date_started, date_ended),
    )
    return cur.lastrowid


def get_work_experience(conn: sqlite3.Connection, work_experience_id: int) -> Optional[Dict[str, Any]]:
    row = conn.execute(
        f"SELECT {_WE_COLUMNS} FROM work_experiences WHERE id = ?",
        (work_experience_id,),
    ).fetchone()
    return _we_row_to_dict(row) if row else None


def list_work_experiences(conn: sqlite3.Connection) -> List[Dict[str, Any]]:
    """Newest first; ties broken by id so the order is stable."""
    rows = conn.execute(
        f"SELECT {_WE_COLUMNS} FROM work_experiences ORDER BY date_started DESC, id ASC"
    ).fetchall()
    return [_we_row_to_dict(r) for r in rows]


def list_work_experiences_by_ids(conn: sqlite3.Connection, work_experience_ids: Iterable[int]) -> List[Dict[str, Any]]:
    ids = list(dict.fromkeys(int(i) for i in work_experience_ids))
    if not ids:
        return []
    placeholders = ",".join("?" for _ in ids)
    rows = conn.execute(
        f"""
        SELECT {_WE_COLUMNS} FROM work_experiences
        WHERE id IN ({placeholders})
        ORDER BY date_started DESC, id ASC
        """,
        ids,
    ).fetchall()
    return [_we_row_to_dict(r) for r in rows]


def update_work_experience(conn: sqlite3.Connection, work_experience_id: int, fields: Dict[str, Any]) -> int:
    """
    Update the given columns only. `fields` keys must be work_experiences
    column names; unknown keys raise KeyError.
    """
    allowed = {"company_name", "company_tagline", "city", "state", "job_title", "date_started", "date_ended"}
    if not fields:
        return 0
    unknown = set(fields) - allowed
    if unknown:
        raise KeyError(f"Unknown work experience fields: {sorted(unknown)}")

    columns = sorted(fields)
    assignments = ", ".join(f"{c} = ?" for c in columns)
    cur = conn.execute(
        f"UPDATE work_experiences SET {assignments}, updated_at = datetime('now') WHERE id = ?",
        [fields[c] for c in columns] + [work_experience_id],
    )
    return cur.rowcount


def delete_work_experience(conn: sqlite3.Connection, work_experience_id: int) -> int:
    """Delete the experience and its lines."""
    conn.execute(
        "DELETE FROM work_experience_lines WHERE work_experience_id = ?",
        (work_experience_id,),
    )
    cur = conn.execute("DELETE FROM work_experiences WHERE id = ?", (work_experience_id,))
    return cur.rowcount


# ---------------------------------------------------------------------------
# Lines
# ---------------------------------------------------------------------------

def insert_work_experience_line(
    conn: sqlite3.Connection,
    work_experience_id: int,
    text: str,
    sort_order: int,
) -> int:
    cur = conn.execute(
        """
        INSERT INTO work_experience_lines (work_experience_id, line_text, sort_order)
        VALUES (?, ?, ?)
        """,
        (work_experience_id, text, sort_order),
    )
    return cur.lastrowid


def get_work_experience_line(conn: sqlite3.Connection, line_id: int) -> Optional[Dict[str, Any]]:
    row = conn.execute(
        """
        SELECT id, work_experience_id, line_text, sort_order
        FROM work_experience_lines
        WHERE id = ?
        """,
        (line_id,),
    ).fetchone()
    return _line_row_to_dict(row) if row else None


def list_work_experience_lines(conn: sqlite3.Connection, work_experience_id: int) -> List[Dict[str, Any]]:
    rows = conn.execute(
        """
        SELECT id, work_experience_id, line_text, sort_order
        FROM work_experience_lines
        WHERE work_experience_id = ?
        ORDER BY sort_order ASC, id ASC
        """,
        (work_experience_id,),
    ).fetchall()
    return [_line_row_to_dict(r) for r in rows]


def sort_order_taken(
    conn: sqlite3.Connection,
    work_experience_id: int,
    sort_order: int,
    exclude_line_id: Optional[int] = None,
) -> bool:
    row = conn.execute(
        """
        SELECT id FROM work_experience_lines
        WHERE work_experience_id = ? AND sort_order = ?
        """,
        (work_experience_id, sort_order),
    ).fetchone()
    if row is None:
        return False
    return exclude_line_id is None or row[0] != exclude_line_id


def update_work_experience_line(
    conn: sqlite3.Connection,
    line_id: int,
    text: str,
    sort_order: int,
) -> int:
    cur = conn.execute(
        "UPDATE work_experience_lines SET line_text = ?, sort_order = ? WHERE id = ?",
        (text, sort_order, line_id),
    )
    return cur.rowcount


def delete_work_experience_line(conn: sqlite3.Connection, line_id: int) -> int:
    cur = conn.execute("DELETE FROM work_experience_lines WHERE id = ?", (line_id,))
    return cur.rowcount
