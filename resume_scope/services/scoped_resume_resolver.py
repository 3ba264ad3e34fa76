"""
Builds the effective view of a scoped resume.

The view is always recomputed from the current base rows plus the current
overlay rows, so edits to a base field show up in every scoped resume that
has not overridden that field. Nothing here writes.
"""
from __future__ import annotations

import logging
from sqlite3 import Connection
from typing import Any, Dict, List

from resume_scope.db.professional_summary import get_professional_summary
from resume_scope.db.scoped_resumes import get_scoped_resume
from resume_scope.db.scoped_resume_content import (
    get_summary_override,
    list_line_overrides,
    list_skill_inclusions,
    list_work_experience_inclusions,
)
from resume_scope.db.work_experiences import list_work_experience_lines
from resume_scope.services.errors import IntegrityViolationError, NotFoundError

logger = logging.getLogger(__name__)

MISSING_BASE_ENTITY = "missing_base_entity"


def _warning(entity_type: str, entity_id: int, message: str) -> Dict[str, Any]:
    return {"entity_type": entity_type, "entity_id": entity_id, "message": message}


def resolve_effective_summary(conn: Connection, scoped_resume_id: int) -> Dict[str, Any]:
    override = get_summary_override(conn, scoped_resume_id)
    if override is not None:
        return {"text": override["text"], "is_customized": True}

    base = get_professional_summary(conn)
    return {"text": base["text"] if base else None, "is_customized": False}


def resolve_skills(conn: Connection, scoped_resume_id: int, warnings: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    skills: List[Dict[str, Any]] = []
    for row in list_skill_inclusions(conn, scoped_resume_id):
        warning = None
        if not row["exists"]:
            warning = MISSING_BASE_ENTITY
            warnings.append(_warning("skill", row["skill_id"], f"Included skill {row['skill_id']} no longer exists"))
        skills.append(
            {
                "id": row["skill_id"],
                "name": row["name"],
                "category_id": row["category_id"],
                "category": row["category"],
                "subcategory_id": row["subcategory_id"],
                "subcategory": row["subcategory"],
                "warning": warning,
            }
        )
    return skills


def resolve_work_experiences(
    conn: Connection,
    scoped_resume_id: int,
    warnings: List[Dict[str, Any]],
) -> List[Dict[str, Any]]:
    overrides = list_line_overrides(conn, scoped_resume_id)
    override_text = {o["work_experience_line_id"]: o["text"] for o in overrides}

    for o in overrides:
        if o["work_experience_id"] is None:
            warnings.append(
                _warning(
                    "work_experience_line",
                    o["work_experience_line_id"],
                    f"Line override references line {o['work_experience_line_id']} which no longer exists",
                )
            )

    results: List[Dict[str, Any]] = []
    for row in list_work_experience_inclusions(conn, scoped_resume_id):
        we_id = row["work_experience_id"]
        if not row["exists"]:
            warnings.append(_warning("work_experience", we_id, f"Included work experience {we_id} no longer exists"))
            results.append(
                {
                    "id": we_id,
                    "company_name": None,
                    "company_tagline": None,
                    "job_title": None,
                    "city": None,
                    "state": None,
                    "date_started": None,
                    "date_ended": None,
                    "warning": MISSING_BASE_ENTITY,
                    "lines": [],
                }
            )
            continue

        lines = []
        for line in list_work_experience_lines(conn, we_id):
            customized = line["id"] in override_text
            lines.append(
                {
                    "id": line["id"],
                    "sort_order": line["sort_order"],
                    "text": override_text[line["id"]] if customized else line["text"],
                    "is_customized": customized,
                }
            )

        results.append(
            {
                "id": we_id,
                "company_name": row["company_name"],
                "company_tagline": row["company_tagline"],
                "job_title": row["job_title"],
                "city": row["city"],
                "state": row["state"],
                "date_started": row["date_started"],
                "date_ended": row["date_ended"],
                "warning": None,
                "lines": lines,
            }
        )
    return results


def resolve_scoped_resume(conn: Connection, scoped_resume_id: int, strict: bool = False) -> Dict[str, Any]:
    """
    Merge base data with the overlay of one scoped resume.

    Dangling references (an inclusion or override whose base row is gone) are
    kept in the result, tagged with `warning`, and listed in `warnings`.
    With strict=True they raise IntegrityViolationError instead.

    Raises NotFoundError if the scoped resume does not exist.
    """
    record = get_scoped_resume(conn, scoped_resume_id)
    if record is None:
        raise NotFoundError("Scoped resume", scoped_resume_id)

    warnings: List[Dict[str, Any]] = []
    summary = resolve_effective_summary(conn, scoped_resume_id)
    skills = resolve_skills(conn, scoped_resume_id, warnings)
    work_experiences = resolve_work_experiences(conn, scoped_resume_id, warnings)

    if warnings:
        logger.warning(
            "Scoped resume %s has %d dangling reference(s): %s",
            scoped_resume_id,
            len(warnings),
            "; ".join(w["message"] for w in warnings),
        )
        if strict:
            raise IntegrityViolationError(
                f"Scoped resume {scoped_resume_id} references base entities that no longer exist",
                warnings,
            )

    return {
        "id": record["id"],
        "name": record["name"],
        "created_at": record["created_at"],
        "updated_at": record["updated_at"],
        "summary": summary,
        "skills": skills,
        "work_experiences": work_experiences,
        "warnings": warnings,
    }
