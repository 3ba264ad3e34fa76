"""
Base technical skills and their category/subcategory taxonomy.

Deletes go through the integrity guard so a skill still included in a
scoped resume (or a category still used by a skill) cannot disappear.
"""
from __future__ import annotations

import logging
from sqlite3 import Connection
from typing import Any, Dict, List, Optional

from resume_scope.db import skills as skills_db
from resume_scope.services.errors import ConflictError, InvalidRequestError, NotFoundError
from resume_scope.services.integrity_guard import ensure_can_delete
from resume_scope.services.transaction import atomic

logger = logging.getLogger(__name__)

MAX_SKILL_NAME_LENGTH = 255
MAX_CATEGORY_NAME_LENGTH = 100


def _clean_name(name: Any, label: str, max_length: int) -> str:
    if not isinstance(name, str) or not name.strip():
        raise InvalidRequestError(f"{label} is required")
    name = name.strip()
    if len(name) > max_length:
        raise InvalidRequestError(f"{label} must be at most {max_length} characters")
    return name


# ---------------------------------------------------------------------------
# Taxonomy
# ---------------------------------------------------------------------------

def create_skill_category(conn: Connection, name: Any) -> Dict[str, Any]:
    name = _clean_name(name, "Category name", MAX_CATEGORY_NAME_LENGTH)
    with atomic(conn, "Skill category"):
        if skills_db.get_skill_category_by_name(conn, name):
            raise ConflictError("Skill category with this name already exists")
        category_id = skills_db.insert_skill_category(conn, name)
    return {"id": category_id, "name": name}


def create_skill_subcategory(conn: Connection, name: Any) -> Dict[str, Any]:
    name = _clean_name(name, "Subcategory name", MAX_CATEGORY_NAME_LENGTH)
    with atomic(conn, "Skill subcategory"):
        if skills_db.get_skill_subcategory_by_name(conn, name):
            raise ConflictError("Skill subcategory with this name already exists")
        subcategory_id = skills_db.insert_skill_subcategory(conn, name)
    return {"id": subcategory_id, "name": name}


def list_skill_categories(conn: Connection) -> List[Dict[str, Any]]:
    return skills_db.list_skill_categories(conn)


def list_skill_subcategories(conn: Connection) -> List[Dict[str, Any]]:
    return skills_db.list_skill_subcategories(conn)


def delete_skill_category(conn: Connection, category_id: int) -> None:
    with atomic(conn, "Skill category"):
        if skills_db.get_skill_category(conn, category_id) is None:
            raise NotFoundError("Skill category", category_id)
        ensure_can_delete(conn, "skill_category", category_id)
        skills_db.delete_skill_category(conn, category_id)


def delete_skill_subcategory(conn: Connection, subcategory_id: int) -> None:
    with atomic(conn, "Skill subcategory"):
        if skills_db.get_skill_subcategory(conn, subcategory_id) is None:
            raise NotFoundError("Skill subcategory", subcategory_id)
        ensure_can_delete(conn, "skill_subcategory", subcategory_id)
        skills_db.delete_skill_subcategory(conn, subcategory_id)


# ---------------------------------------------------------------------------
# Technical skills
# ---------------------------------------------------------------------------

def _require_taxonomy(conn: Connection, category_id: int, subcategory_id: int) -> None:
    if skills_db.get_skill_category(conn, category_id) is None:
        raise NotFoundError("Skill category", category_id)
    if skills_db.get_skill_subcategory(conn, subcategory_id) is None:
        raise NotFoundError("Skill subcategory", subcategory_id)


def create_skill(conn: Connection, name: Any, category_id: int, subcategory_id: int) -> Dict[str, Any]:
    name = _clean_name(name, "Skill name", MAX_SKILL_NAME_LENGTH)
    with atomic(conn, "Skill category or subcategory"):
        _require_taxonomy(conn, category_id, subcategory_id)
        skill_id = skills_db.insert_skill(conn, name, category_id, subcategory_id)
    return skills_db.get_skill(conn, skill_id)


def get_skill(conn: Connection, skill_id: int) -> Dict[str, Any]:
    skill = skills_db.get_skill(conn, skill_id)
    if skill is None:
        raise NotFoundError("Technical skill", skill_id)
    return skill


def list_skills(conn: Connection) -> List[Dict[str, Any]]:
    return skills_db.list_skills(conn)


def update_skill(
    conn: Connection,
    skill_id: int,
    name: Optional[str] = None,
    category_id: Optional[int] = None,
    subcategory_id: Optional[int] = None,
) -> Dict[str, Any]:
    """Partial update; omitted fields keep their current value."""
    with atomic(conn, "Skill category or subcategory"):
        current = skills_db.get_skill(conn, skill_id)
        if current is None:
            raise NotFoundError("Technical skill", skill_id)

        new_name = current["name"] if name is None else _clean_name(name, "Skill name", MAX_SKILL_NAME_LENGTH)
        new_category = current["category_id"] if category_id is None else category_id
        new_subcategory = current["subcategory_id"] if subcategory_id is None else subcategory_id
        _require_taxonomy(conn, new_category, new_subcategory)

        skills_db.update_skill(conn, skill_id, new_name, new_category, new_subcategory)
    return skills_db.get_skill(conn, skill_id)


def delete_skill(conn: Connection, skill_id: int) -> None:
    with atomic(conn, "Technical skill"):
        if skills_db.get_skill(conn, skill_id) is None:
            raise NotFoundError("Technical skill", skill_id)
        ensure_can_delete(conn, "skill", skill_id)
        skills_db.delete_skill(conn, skill_id)
    logger.info("Deleted technical skill %s", skill_id)
