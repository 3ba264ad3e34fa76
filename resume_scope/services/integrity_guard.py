"""
Refuses destructive base-entity operations while a scoped resume still
references the entity.

The check is a single existence query per entity; it reports *that* some
scoped resume uses the entity, not which one.
"""
from __future__ import annotations

import logging
from sqlite3 import Connection
from typing import Callable, Dict, Literal

from resume_scope.db import scoped_resume_content as content
from resume_scope.db.skills import category_in_use, subcategory_in_use
from resume_scope.services.errors import ConflictError

logger = logging.getLogger(__name__)

EntityType = Literal[
    "skill",
    "work_experience",
    "work_experience_line",
    "skill_category",
    "skill_subcategory",
]

_REFERENCE_CHECKS: Dict[str, Callable[[Connection, int], bool]] = {
    "skill": content.skill_referenced,
    "work_experience": content.work_experience_referenced,
    "work_experience_line": content.work_experience_line_referenced,
    "skill_category": category_in_use,
    "skill_subcategory": subcategory_in_use,
}

_REFUSAL_MESSAGES: Dict[str, str] = {
    "skill": "Cannot delete technical skill that is being used in scoped resumes",
    "work_experience": "Cannot delete work experience that is being used in scoped resumes",
    "work_experience_line": "Cannot delete work experience line that is being used in scoped resumes",
    "skill_category": "Cannot delete skill category that is being used by technical skills",
    "skill_subcategory": "Cannot delete skill subcategory that is being used by technical skills",
}


def can_delete(conn: Connection, entity_type: EntityType, entity_id: int) -> bool:
    try:
        check = _REFERENCE_CHECKS[entity_type]
    except KeyError:
        raise ValueError(f"Unknown entity type: {entity_type}")
    return not check(conn, int(entity_id))


def ensure_can_delete(conn: Connection, entity_type: EntityType, entity_id: int) -> None:
    """Raise ConflictError if the entity is still referenced."""
    if not can_delete(conn, entity_type, entity_id):
        logger.warning("Refused delete of %s %s: still referenced", entity_type, entity_id)
        raise ConflictError(_REFUSAL_MESSAGES[entity_type])
