"""
State-changing operations on scoped resumes and their overlays.

Every public function runs as one transaction: either all of its writes are
committed or none are. Uniqueness races that slip past the explicit checks
surface from SQLite as IntegrityError and are reported as ConflictError.
"""
from __future__ import annotations

import logging
from sqlite3 import Connection
from typing import Any, Dict, Iterable, List, Optional

from resume_scope.db import scoped_resume_content as content
from resume_scope.db.scoped_resumes import (
    delete_scoped_resume_row,
    get_scoped_resume,
    get_scoped_resume_by_name,
    insert_scoped_resume,
    list_scoped_resumes,
    rename_scoped_resume,
    touch_scoped_resume,
)
from resume_scope.db.skills import get_skill, list_skills_by_ids
from resume_scope.db.work_experiences import (
    get_work_experience,
    get_work_experience_line,
    list_work_experiences_by_ids,
)
from resume_scope.services.errors import (
    ConflictError,
    InvalidRequestError,
    NotFoundError,
)
from resume_scope.services.scoped_resume_resolver import resolve_scoped_resume
from resume_scope.services.transaction import atomic

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 255
DUPLICATE_NAME_MESSAGE = "Scoped resume with this name already exists"


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def validate_name(name: Any) -> str:
    if not isinstance(name, str) or not name.strip():
        raise InvalidRequestError("Scoped resume name is required")
    name = name.strip()
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidRequestError(f"Scoped resume name must be at most {MAX_NAME_LENGTH} characters")
    return name


def validate_text(text: Any, label: str) -> str:
    if not isinstance(text, str) or not text.strip():
        raise InvalidRequestError(f"{label} is required")
    return text


def validate_id(value: Any, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidRequestError(f"{label} must be a positive integer")
    return value


def _validate_ids(values: Optional[Iterable[Any]], label: str) -> List[int]:
    if values is None:
        return []
    # Keep first occurrence, drop repeats.
    return list(dict.fromkeys(validate_id(v, label) for v in values))


def _require_scoped_resume(conn: Connection, scoped_resume_id: int) -> Dict[str, Any]:
    record = get_scoped_resume(conn, scoped_resume_id)
    if record is None:
        raise NotFoundError("Scoped resume", scoped_resume_id)
    return record


def _ensure_name_available(conn: Connection, name: str, current_id: Optional[int] = None) -> None:
    existing = get_scoped_resume_by_name(conn, name)
    if existing is not None and existing["id"] != current_id:
        raise ConflictError(DUPLICATE_NAME_MESSAGE)


# ---------------------------------------------------------------------------
# Scoped resumes
# ---------------------------------------------------------------------------

def list_user_scoped_resumes(conn: Connection) -> List[Dict[str, Any]]:
    return list_scoped_resumes(conn)


def get_scoped_resume_by_id(conn: Connection, scoped_resume_id: int, strict: bool = False) -> Dict[str, Any]:
    return resolve_scoped_resume(conn, scoped_resume_id, strict=strict)


def create_scoped_resume(conn: Connection, name: Any) -> Dict[str, Any]:
    """Create a bare scoped resume with no inclusions or overrides."""
    name = validate_name(name)

    with atomic(conn, "Scoped resume"):
        _ensure_name_available(conn, name)
        new_id = insert_scoped_resume(conn, name)

    logger.info("Created scoped resume %s (%r)", new_id, name)
    return get_scoped_resume(conn, new_id)


def create_scoped_resume_with_setup(
    conn: Connection,
    name: Any,
    summary_text: Optional[str] = None,
    skill_ids: Optional[Iterable[Any]] = None,
    work_experience_ids: Optional[Iterable[Any]] = None,
) -> Dict[str, Any]:
    """
    Create a scoped resume and populate it in one transaction.

    Every skill / work experience id must exist; a single missing id aborts
    the whole call with NotFoundError. Returns the resolved view.
    """
    name = validate_name(name)
    skill_ids = _validate_ids(skill_ids, "Skill ID")
    work_experience_ids = _validate_ids(work_experience_ids, "Work experience ID")
    if summary_text is not None and not isinstance(summary_text, str):
        raise InvalidRequestError("Summary text must be a string")
    has_summary = bool(summary_text and summary_text.strip())

    with atomic(conn, "Technical skill or work experience"):
        _ensure_name_available(conn, name)

        if skill_ids:
            found = list_skills_by_ids(conn, skill_ids)
            if len(found) != len(skill_ids):
                raise NotFoundError("One or more technical skills")

        if work_experience_ids:
            found = list_work_experiences_by_ids(conn, work_experience_ids)
            if len(found) != len(work_experience_ids):
                raise NotFoundError("One or more work experiences")

        new_id = insert_scoped_resume(conn, name)
        if has_summary:
            content.upsert_summary_override(conn, new_id, summary_text)
        for skill_id in skill_ids:
            content.insert_skill_inclusion(conn, new_id, skill_id)
        for we_id in work_experience_ids:
            content.insert_work_experience_inclusion(conn, new_id, we_id)

    logger.info(
        "Created scoped resume %s (%r) with %d skill(s), %d work experience(s), summary override: %s",
        new_id, name, len(skill_ids), len(work_experience_ids), has_summary,
    )
    return resolve_scoped_resume(conn, new_id)


def rename_user_scoped_resume(conn: Connection, scoped_resume_id: int, new_name: Any) -> Dict[str, Any]:
    new_name = validate_name(new_name)

    with atomic(conn, "Scoped resume"):
        _require_scoped_resume(conn, scoped_resume_id)
        _ensure_name_available(conn, new_name, current_id=scoped_resume_id)
        rename_scoped_resume(conn, scoped_resume_id, new_name)

    return get_scoped_resume(conn, scoped_resume_id)


def duplicate_scoped_resume(conn: Connection, scoped_resume_id: int, new_name: Any) -> Dict[str, Any]:
    """
    Deep-copy the overlay (not the base data) of a scoped resume under a new
    name. The copy is independent: later edits or deletion of either side
    leave the other untouched. Returns the resolved copy.
    """
    if not isinstance(new_name, str) or not new_name.strip():
        raise InvalidRequestError("New name is required for duplication")
    new_name = validate_name(new_name)

    with atomic(conn, "Scoped resume"):
        _require_scoped_resume(conn, scoped_resume_id)
        _ensure_name_available(conn, new_name)

        source = content.load_raw_content(conn, scoped_resume_id)
        new_id = insert_scoped_resume(conn, new_name)

        for summary in source["summary_overrides"]:
            content.upsert_summary_override(conn, new_id, summary["text"])
        for skill in source["skill_inclusions"]:
            content.insert_skill_inclusion(conn, new_id, skill["skill_id"])
        for we in source["work_experience_inclusions"]:
            content.insert_work_experience_inclusion(conn, new_id, we["work_experience_id"])
        for line in source["line_overrides"]:
            content.upsert_line_override(conn, new_id, line["work_experience_line_id"], line["text"])

    logger.info("Duplicated scoped resume %s into %s (%r)", scoped_resume_id, new_id, new_name)
    return resolve_scoped_resume(conn, new_id)


def delete_user_scoped_resume(conn: Connection, scoped_resume_id: int) -> Dict[str, int]:
    """
    Delete a scoped resume and every overlay row it owns.
    Returns the number of child rows removed per table.
    """
    with atomic(conn, "Scoped resume"):
        _require_scoped_resume(conn, scoped_resume_id)
        removed = content.delete_all_content(conn, scoped_resume_id)
        delete_scoped_resume_row(conn, scoped_resume_id)

    logger.info("Deleted scoped resume %s (child rows removed: %s)", scoped_resume_id, removed)
    return removed


# ---------------------------------------------------------------------------
# Summary override
# ---------------------------------------------------------------------------

def set_summary_override(conn: Connection, scoped_resume_id: int, text: Any) -> Dict[str, Any]:
    """Insert or replace the summary override. Identical-to-base text still counts as customized."""
    text = validate_text(text, "Summary text")

    with atomic(conn, "Scoped resume"):
        _require_scoped_resume(conn, scoped_resume_id)
        content.upsert_summary_override(conn, scoped_resume_id, text)
        touch_scoped_resume(conn, scoped_resume_id)

    return content.get_summary_override(conn, scoped_resume_id)


def clear_summary_override(conn: Connection, scoped_resume_id: int) -> bool:
    """Remove the override if present. Returns whether a row was removed."""
    with atomic(conn, "Scoped resume"):
        _require_scoped_resume(conn, scoped_resume_id)
        removed = content.delete_summary_override(conn, scoped_resume_id)
        if removed:
            touch_scoped_resume(conn, scoped_resume_id)
    return bool(removed)


# ---------------------------------------------------------------------------
# Skill inclusions
# ---------------------------------------------------------------------------

def add_skill_inclusion(conn: Connection, scoped_resume_id: int, skill_id: int) -> Dict[str, Any]:
    with atomic(conn, "Technical skill"):
        _require_scoped_resume(conn, scoped_resume_id)
        skill = get_skill(conn, skill_id)
        if skill is None:
            raise NotFoundError("Technical skill", skill_id)
        if content.skill_inclusion_exists(conn, scoped_resume_id, skill_id):
            raise ConflictError("Skill already exists in this scoped resume")
        inclusion_id = content.insert_skill_inclusion(conn, scoped_resume_id, skill_id)
        touch_scoped_resume(conn, scoped_resume_id)

    return {"id": inclusion_id, "scoped_resume_id": scoped_resume_id, "skill_id": skill_id}


def remove_skill_inclusion(conn: Connection, scoped_resume_id: int, skill_id: int) -> None:
    with atomic(conn, "Scoped resume"):
        _require_scoped_resume(conn, scoped_resume_id)
        if not content.delete_skill_inclusion(conn, scoped_resume_id, skill_id):
            raise NotFoundError("Scoped skill")
        touch_scoped_resume(conn, scoped_resume_id)


# ---------------------------------------------------------------------------
# Work experience inclusions
# ---------------------------------------------------------------------------

def add_work_experience_inclusion(conn: Connection, scoped_resume_id: int, work_experience_id: int) -> Dict[str, Any]:
    with atomic(conn, "Work experience"):
        _require_scoped_resume(conn, scoped_resume_id)
        if get_work_experience(conn, work_experience_id) is None:
            raise NotFoundError("Work experience", work_experience_id)
        if content.work_experience_inclusion_exists(conn, scoped_resume_id, work_experience_id):
            raise ConflictError("Work experience already exists in this scoped resume")
        inclusion_id = content.insert_work_experience_inclusion(conn, scoped_resume_id, work_experience_id)
        touch_scoped_resume(conn, scoped_resume_id)

    return {
        "id": inclusion_id,
        "scoped_resume_id": scoped_resume_id,
        "work_experience_id": work_experience_id,
    }


def remove_work_experience_inclusion(conn: Connection, scoped_resume_id: int, work_experience_id: int) -> int:
    """
    Exclude a work experience and, in the same transaction, drop this scoped
    resume's line overrides for that experience's lines.
    Returns the number of line overrides removed.
    """
    with atomic(conn, "Scoped resume"):
        _require_scoped_resume(conn, scoped_resume_id)
        if not content.work_experience_inclusion_exists(conn, scoped_resume_id, work_experience_id):
            raise NotFoundError("Scoped work experience")
        removed_overrides = content.delete_line_overrides_for_work_experience(
            conn, scoped_resume_id, work_experience_id
        )
        content.delete_work_experience_inclusion(conn, scoped_resume_id, work_experience_id)
        touch_scoped_resume(conn, scoped_resume_id)

    if removed_overrides:
        logger.info(
            "Removed %d line override(s) with work experience %s from scoped resume %s",
            removed_overrides, work_experience_id, scoped_resume_id,
        )
    return removed_overrides


# ---------------------------------------------------------------------------
# Line overrides
# ---------------------------------------------------------------------------

def set_line_override(conn: Connection, scoped_resume_id: int, line_id: int, text: Any) -> Dict[str, Any]:
    text = validate_text(text, "Line text")

    with atomic(conn, "Work experience line"):
        _require_scoped_resume(conn, scoped_resume_id)
        if get_work_experience_line(conn, line_id) is None:
            raise NotFoundError("Work experience line", line_id)
        content.upsert_line_override(conn, scoped_resume_id, line_id, text)
        touch_scoped_resume(conn, scoped_resume_id)

    return content.get_line_override(conn, scoped_resume_id, line_id)


def clear_line_override(conn: Connection, scoped_resume_id: int, line_id: int) -> bool:
    """Reset a line to its base text. No-op when there is no override."""
    with atomic(conn, "Scoped resume"):
        _require_scoped_resume(conn, scoped_resume_id)
        removed = content.delete_line_override(conn, scoped_resume_id, line_id)
        if removed:
            touch_scoped_resume(conn, scoped_resume_id)
    return bool(removed)
