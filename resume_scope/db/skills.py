"""
resume_scope/db/skills.py

Manages base technical skill storage:
 - Skill categories and subcategories (flat taxonomy tables)
 - Technical skills keyed into that taxonomy

None of these helpers commit; callers own the transaction.
"""

import sqlite3
from typing import Any, Dict, Iterable, List, Optional


_SKILL_SELECT = """
    SELECT s.id, s.name, s.category_id, c.name, s.subcategory_id, sc.name
    FROM technical_skills s
    JOIN skill_categories c ON c.id = s.category_id
    JOIN skill_subcategories sc ON sc.id = s.subcategory_id
"""


def _skill_row_to_dict(row) -> Dict[str, Any]:
    return {
        "id": row[0],
        "name": row[1],
        "category_id": row[2],
        "category": row[3],
        "subcategory_id": row[4],
        "subcategory": row[5],
    }


# ---------------------------------------------------------------------------
# Taxonomy
# ---------------------------------------------------------------------------

def insert_skill_category(conn: sqlite3.Connection, name: str) -> int:
    cur = conn.execute("INSERT INTO skill_categories (name) VALUES (?)", (name,))
    return cur.lastrowid


def insert_skill_subcategory(conn: sqlite3.Connection, name: str) -> int:
    cur = conn.execute("INSERT INTO skill_subcategories (name) VALUES (?)", (name,))
    return cur.lastrowid


def get_skill_category(conn: sqlite3.Connection, category_id: int) -> Optional[Dict[str, Any]]:
    row = conn.execute(
        "SELECT id, name FROM skill_categories WHERE id = ?",
        (category_id,),
    ).fetchone()
    return {"id": row[0], "name": row[1]} if row else None


def get_skill_subcategory(conn: sqlite3.Connection, subcategory_id: int) -> Optional[Dict[str, Any]]:
    row = conn.execute(
        "SELECT id, name FROM skill_subcategories WHERE id = ?",
        (subcategory_id,),
    ).fetchone()
    return {"id": row[0], "name": row[1]} if row else None


def get_skill_category_by_name(conn: sqlite3.Connection, name: str) -> Optional[Dict[str, Any]]:
    row = conn.execute(
        "SELECT id, name FROM skill_categories WHERE name = ?",
        (name,),
    ).fetchone()
    return {"id": row[0], "name": row[1]} if row else None


def get_skill_subcategory_by_name(conn: sqlite3.Connection, name: str) -> Optional[Dict[str, Any]]:
    row = conn.execute(
        "SELECT id, name FROM skill_subcategories WHERE name = ?",
        (name,),
    ).fetchone()
    return {"id": row[0], "name": row[1]} if row else None


def list_skill_categories(conn: sqlite3.Connection) -> List[Dict[str, Any]]:
    rows = conn.execute("SELECT id, name FROM skill_categories ORDER BY name ASC").fetchall()
    return [{"id": r[0], "name": r[1]} for r in rows]


def list_skill_subcategories(conn: sqlite3.Connection) -> List[Dict[str, Any]]:
    rows = conn.execute("SELECT id, name FROM skill_subcategories ORDER BY name ASC").fetchall()
    return [{"id": r[0], "name": r[1]} for r in rows]


def delete_skill_category(conn: sqlite3.Connection, category_id: int) -> int:
    cur = conn.execute("DELETE FROM skill_categories WHERE id = ?", (category_id,))
    return cur.rowcount


def delete_skill_subcategory(conn: sqlite3.Connection, subcategory_id: int) -> int:
    cur = conn.execute("DELETE FROM skill_subcategories WHERE id = ?", (subcategory_id,))
    return cur.rowcount


def category_in_use(conn: sqlite3.Connection, category_id: int) -> bool:
    row = conn.execute(
        "SELECT 1 FROM technical_skills WHERE category_id = ? LIMIT 1",
        (category_id,),
    ).fetchone()
    return row is not None


def subcategory_in_use(conn: sqlite3.Connection, subcategory_id: int) -> bool:
    row = conn.execute(
        "SELECT 1 FROM technical_skills WHERE subcategory_id = ? LIMIT 1",
        (subcategory_id,),
    ).fetchone()
    return row is not None


# ---------------------------------------------------------------------------
# Technical skills
# ---------------------------------------------------------------------------

def insert_skill(conn: sqlite3.Connection, name: str, category_id: int, subcategory_id: int) -> int:
    cur = conn.execute(
        """
        INSERT INTO technical_skills (name, category_id, subcategory_id)
        VALUES (?, ?, ?)
        """,
        (name, category_id, subcategory_id),
    )
    return cur.lastrowid


def get_skill(conn: sqlite3.Connection, skill_id: int) -> Optional[Dict[str, Any]]:
    row = conn.execute(_SKILL_SELECT + " WHERE s.id = ?", (skill_id,)).fetchone()
    return _skill_row_to_dict(row) if row else None


def list_skills(conn: sqlite3.Connection) -> List[Dict[str, Any]]:
    rows = conn.execute(_SKILL_SELECT + " ORDER BY c.name ASC, s.name ASC, s.id ASC").fetchall()
    return [_skill_row_to_dict(r) for r in rows]


def list_skills_by_ids(conn: sqlite3.Connection, skill_ids: Iterable[int]) -> List[Dict[str, Any]]:
    """
    Batch lookup. Returns only the skills that exist; callers compare lengths
    to detect missing ids.
    """
    ids = list(dict.fromkeys(int(i) for i in skill_ids))
    if not ids:
        return []
    placeholders = ",".join("?" for _ in ids)
    rows = conn.execute(
        _SKILL_SELECT + f" WHERE s.id IN ({placeholders}) ORDER BY c.name ASC, s.name ASC, s.id ASC",
        ids,
    ).fetchall()
    return [_skill_row_to_dict(r) for r in rows]


def update_skill(
    conn: sqlite3.Connection,
    skill_id: int,
    name: str,
    category_id: int,
    subcategory_id: int,
) -> int:
    cur = conn.execute(
        """
        UPDATE technical_skills
        SET name = ?, category_id = ?, subcategory_id = ?, updated_at = datetime('now')
        WHERE id = ?
        """,
        (name, category_id, subcategory_id, skill_id),
    )
    return cur.rowcount


def delete_skill(conn: sqlite3.Connection, skill_id: int) -> int:
    cur = conn.execute("DELETE FROM technical_skills WHERE id = ?", (skill_id,))
    return cur.rowcount
