"""
resume_scope/db/scoped_resume_content.py

Child tables of a scoped resume:
 - scoped_summary_overrides           (0/1 per scoped resume)
 - scoped_skill_inclusions            (scoped_resume_id, skill_id)
 - scoped_work_experience_inclusions  (scoped_resume_id, work_experience_id)
 - scoped_line_overrides              (scoped_resume_id, work_experience_line_id)

Plus the reference checks used before deleting base entities.
Helpers never commit; the service layer wraps them in a transaction.
"""
from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional


CONTENT_TABLES = (
    "scoped_summary_overrides",
    "scoped_skill_inclusions",
    "scoped_work_experience_inclusions",
    "scoped_line_overrides",
)


# ---------------------------------------------------------------------------
# Summary override
# ---------------------------------------------------------------------------

def get_summary_override(conn: sqlite3.Connection, scoped_resume_id: int) -> Optional[Dict[str, Any]]:
    row = conn.execute(
        """
        SELECT id, scoped_resume_id, summary_text
        FROM scoped_summary_overrides
        WHERE scoped_resume_id = ?
        """,
        (scoped_resume_id,),
    ).fetchone()
    if not row:
        return None
    return {"id": row[0], "scoped_resume_id": row[1], "text": row[2]}


def upsert_summary_override(conn: sqlite3.Connection, scoped_resume_id: int, text: str) -> None:
    conn.execute(
        """
        INSERT INTO scoped_summary_overrides (scoped_resume_id, summary_text)
        VALUES (?, ?)
        ON CONFLICT(scoped_resume_id)
        DO UPDATE SET summary_text = excluded.summary_text
        """,
        (scoped_resume_id, text),
    )


def delete_summary_override(conn: sqlite3.Connection, scoped_resume_id: int) -> int:
    cur = conn.execute(
        "DELETE FROM scoped_summary_overrides WHERE scoped_resume_id = ?",
        (scoped_resume_id,),
    )
    return cur.rowcount


# ---------------------------------------------------------------------------
# Skill inclusions
# ---------------------------------------------------------------------------

def list_skill_inclusions(conn: sqlite3.Connection, scoped_resume_id: int) -> List[Dict[str, Any]]:
    """
    Inclusion rows joined against the base skill. Skill columns are None when
    the referenced skill no longer exists.
    """
    rows = conn.execute(
        """
        SELECT i.id, i.skill_id, s.id, s.name, s.category_id, c.name, s.subcategory_id, sc.name
        FROM scoped_skill_inclusions i
        LEFT JOIN technical_skills s ON s.id = i.skill_id
        LEFT JOIN skill_categories c ON c.id = s.category_id
        LEFT JOIN skill_subcategories sc ON sc.id = s.subcategory_id
        WHERE i.scoped_resume_id = ?
        ORDER BY c.name ASC, s.name ASC, i.skill_id ASC
        """,
        (scoped_resume_id,),
    ).fetchall()
    return [
        {
            "inclusion_id": r[0],
            "skill_id": r[1],
            "exists": r[2] is not None,
            "name": r[3],
            "category_id": r[4],
            "category": r[5],
            "subcategory_id": r[6],
            "subcategory": r[7],
        }
        for r in rows
    ]


def skill_inclusion_exists(conn: sqlite3.Connection, scoped_resume_id: int, skill_id: int) -> bool:
    row = conn.execute(
        """
        SELECT 1 FROM scoped_skill_inclusions
        WHERE scoped_resume_id = ? AND skill_id = ?
        """,
        (scoped_resume_id, skill_id),
    ).fetchone()
    return row is not None


def insert_skill_inclusion(conn: sqlite3.Connection, scoped_resume_id: int, skill_id: int) -> int:
    cur = conn.execute(
        "INSERT INTO scoped_skill_inclusions (scoped_resume_id, skill_id) VALUES (?, ?)",
        (scoped_resume_id, skill_id),
    )
    return cur.lastrowid


def delete_skill_inclusion(conn: sqlite3.Connection, scoped_resume_id: int, skill_id: int) -> int:
    cur = conn.execute(
        "DELETE FROM scoped_skill_inclusions WHERE scoped_resume_id = ? AND skill_id = ?",
        (scoped_resume_id, skill_id),
    )
    return cur.rowcount


# ---------------------------------------------------------------------------
# Work experience inclusions
# ---------------------------------------------------------------------------

def list_work_experience_inclusions(conn: sqlite3.Connection, scoped_resume_id: int) -> List[Dict[str, Any]]:
    """Same shape rules as list_skill_inclusions: base columns are None when dangling."""
    rows = conn.execute(
        """
        SELECT i.id, i.work_experience_id, w.id, w.company_name, w.company_tagline,
               w.city, w.state, w.job_title, w.date_started, w.date_ended
        FROM scoped_work_experience_inclusions i
        LEFT JOIN work_experiences w ON w.id = i.work_experience_id
        WHERE i.scoped_resume_id = ?
        ORDER BY w.date_started DESC, i.work_experience_id ASC
        """,
        (scoped_resume_id,),
    ).fetchall()
    return [
        {
            "inclusion_id": r[0],
            "work_experience_id": r[1],
            "exists": r[2] is not None,
            "company_name": r[3],
            "company_tagline": r[4],
            "city": r[5],
            "state": r[6],
            "job_title": r[7],
            "date_started": r[8],
            "date_ended": r[9],
        }
        for r in rows
    ]


def work_experience_inclusion_exists(conn: sqlite3.Connection, scoped_resume_id: int, work_experience_id: int) -> bool:
    row = conn.execute(
        """
        SELECT 1 FROM scoped_work_experience_inclusions
        WHERE scoped_resume_id = ? AND work_experience_id = ?
        """,
        (scoped_resume_id, work_experience_id),
    ).fetchone()
    return row is not None


def insert_work_experience_inclusion(conn: sqlite3.Connection, scoped_resume_id: int, work_experience_id: int) -> int:
    cur = conn.execute(
        """
        INSERT INTO scoped_work_experience_inclusions (scoped_resume_id, work_experience_id)
        VALUES (?, ?)
        """,
        (scoped_resume_id, work_experience_id),
    )
    return cur.lastrowid


def delete_work_experience_inclusion(conn: sqlite3.Connection, scoped_resume_id: int, work_experience_id: int) -> int:
    cur = conn.execute(
        """
        DELETE FROM scoped_work_experience_inclusions
        WHERE scoped_resume_id = ? AND work_experience_id = ?
        """,
        (scoped_resume_id, work_experience_id),
    )
    return cur.rowcount


# ---------------------------------------------------------------------------
# Line overrides
# ---------------------------------------------------------------------------

def list_line_overrides(conn: sqlite3.Connection, scoped_resume_id: int) -> List[Dict[str, Any]]:
    """
    All line overrides for a scoped resume. `work_experience_id` is None when
    the overridden base line no longer exists.
    """
    rows = conn.execute(
        """
        SELECT o.id, o.work_experience_line_id, o.line_text, l.work_experience_id
        FROM scoped_line_overrides o
        LEFT JOIN work_experience_lines l ON l.id = o.work_experience_line_id
        WHERE o.scoped_resume_id = ?
        ORDER BY o.work_experience_line_id ASC
        """,
        (scoped_resume_id,),
    ).fetchall()
    return [
        {
            "id": r[0],
            "work_experience_line_id": r[1],
            "text": r[2],
            "work_experience_id": r[3],
        }
        for r in rows
    ]


def get_line_override(conn: sqlite3.Connection, scoped_resume_id: int, line_id: int) -> Optional[Dict[str, Any]]:
    row = conn.execute(
        """
        SELECT id, scoped_resume_id, work_experience_line_id, line_text
        FROM scoped_line_overrides
        WHERE scoped_resume_id = ? AND work_experience_line_id = ?
        """,
        (scoped_resume_id, line_id),
    ).fetchone()
    if not row:
        return None
    return {
        "id": row[0],
        "scoped_resume_id": row[1],
        "work_experience_line_id": row[2],
        "text": row[3],
    }


def upsert_line_override(conn: sqlite3.Connection, scoped_resume_id: int, line_id: int, text: str) -> None:
    conn.execute(
        """
        INSERT INTO scoped_line_overrides (scoped_resume_id, work_experience_line_id, line_text)
        VALUES (?, ?, ?)
        ON CONFLICT(scoped_resume_id, work_experience_line_id)
        DO UPDATE SET line_text = excluded.line_text
        """,
        (scoped_resume_id, line_id, text),
    )


def delete_line_override(conn: sqlite3.Connection, scoped_resume_id: int, line_id: int) -> int:
    cur = conn.execute(
        """
        DELETE FROM scoped_line_overrides
        WHERE scoped_resume_id = ? AND work_experience_line_id = ?
        """,
        (scoped_resume_id, line_id),
    )
    return cur.rowcount


def delete_line_overrides_for_work_experience(
    conn: sqlite3.Connection,
    scoped_resume_id: int,
    work_experience_id: int,
) -> int:
    """
    Remove this scoped resume's overrides for every line owned by the given
    work experience. Other scoped resumes are not touched.
    """
    cur = conn.execute(
        """
        DELETE FROM scoped_line_overrides
        WHERE scoped_resume_id = ?
          AND work_experience_line_id IN (
              SELECT id FROM work_experience_lines WHERE work_experience_id = ?
          )
        """,
        (scoped_resume_id, work_experience_id),
    )
    return cur.rowcount


# ---------------------------------------------------------------------------
# Whole-overlay helpers (duplicate / delete)
# ---------------------------------------------------------------------------

def load_raw_content(conn: sqlite3.Connection, scoped_resume_id: int) -> Dict[str, List[Dict[str, Any]]]:
    """
    Raw child rows for a scoped resume, without joining base data.
    Used for deep-copying an overlay.
    """
    summaries = conn.execute(
        "SELECT summary_text FROM scoped_summary_overrides WHERE scoped_resume_id = ?",
        (scoped_resume_id,),
    ).fetchall()
    skills = conn.execute(
        "SELECT skill_id FROM scoped_skill_inclusions WHERE scoped_resume_id = ? ORDER BY id",
        (scoped_resume_id,),
    ).fetchall()
    work_experiences = conn.execute(
        """
        SELECT work_experience_id FROM scoped_work_experience_inclusions
        WHERE scoped_resume_id = ? ORDER BY id
        """,
        (scoped_resume_id,),
    ).fetchall()
    lines = conn.execute(
        """
        SELECT work_experience_line_id, line_text FROM scoped_line_overrides
        WHERE scoped_resume_id = ? ORDER BY id
        """,
        (scoped_resume_id,),
    ).fetchall()
    return {
        "summary_overrides": [{"text": r[0]} for r in summaries],
        "skill_inclusions": [{"skill_id": r[0]} for r in skills],
        "work_experience_inclusions": [{"work_experience_id": r[0]} for r in work_experiences],
        "line_overrides": [{"work_experience_line_id": r[0], "text": r[1]} for r in lines],
    }


def count_content_rows(conn: sqlite3.Connection, scoped_resume_id: int) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for table in CONTENT_TABLES:
        row = conn.execute(
            f"SELECT COUNT(*) FROM {table} WHERE scoped_resume_id = ?",
            (scoped_resume_id,),
        ).fetchone()
        counts[table] = int(row[0])
    return counts


def delete_all_content(conn: sqlite3.Connection, scoped_resume_id: int) -> Dict[str, int]:
    """Delete every child row of a scoped resume. Returns rows removed per table."""
    removed: Dict[str, int] = {}
    for table in CONTENT_TABLES:
        cur = conn.execute(
            f"DELETE FROM {table} WHERE scoped_resume_id = ?",
            (scoped_resume_id,),
        )
        removed[table] = cur.rowcount
    return removed


# ---------------------------------------------------------------------------
# Reference checks (base entity deletion guard)
# ---------------------------------------------------------------------------

def skill_referenced(conn: sqlite3.Connection, skill_id: int) -> bool:
    row = conn.execute(
        "SELECT 1 FROM scoped_skill_inclusions WHERE skill_id = ? LIMIT 1",
        (skill_id,),
    ).fetchone()
    return row is not None


def work_experience_referenced(conn: sqlite3.Connection, work_experience_id: int) -> bool:
    """True if any scoped resume includes the experience or overrides one of its lines."""
    row = conn.execute(
        """
        SELECT 1 FROM scoped_work_experience_inclusions WHERE work_experience_id = ?
        UNION ALL
        SELECT 1 FROM scoped_line_overrides o
        JOIN work_experience_lines l ON l.id = o.work_experience_line_id
        WHERE l.work_experience_id = ?
        LIMIT 1
        """,
        (work_experience_id, work_experience_id),
    ).fetchone()
    return row is not None


def work_experience_line_referenced(conn: sqlite3.Connection, line_id: int) -> bool:
    row = conn.execute(
        "SELECT 1 FROM scoped_line_overrides WHERE work_experience_line_id = ? LIMIT 1",
        (line_id,),
    ).fetchone()
    return row is not None
