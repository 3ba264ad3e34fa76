"""
Base work experiences and their ordered lines.

Deleting an experience or a line is refused while any scoped resume still
includes the experience or overrides one of its lines.
"""
from __future__ import annotations

import logging
from datetime import datetime
from sqlite3 import Connection
from typing import Any, Dict, List, Optional

from resume_scope.db import work_experiences as we_db
from resume_scope.services.errors import ConflictError, InvalidRequestError, NotFoundError
from resume_scope.services.integrity_guard import ensure_can_delete
from resume_scope.services.transaction import atomic

logger = logging.getLogger(__name__)

UNSET = object()

_REQUIRED_FIELDS = ("company_name", "city", "state", "job_title", "date_started")


def _parse_date(value: str, label: str) -> datetime:
    if not isinstance(value, str) or not value.strip():
        raise InvalidRequestError(f"{label} is required")
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d")
    except ValueError:
        raise InvalidRequestError(f"Invalid {label.lower()}. Use YYYY-MM-DD.")


def validate_date_range(date_started: str, date_ended: Optional[str]) -> None:
    start = _parse_date(date_started, "Start date")
    if not date_ended:
        return
    end = _parse_date(date_ended, "End date")
    if end < start:
        raise InvalidRequestError("End date cannot be before start date.")


def _validate_line(text: Any, sort_order: Any) -> None:
    if not isinstance(text, str) or not text.strip():
        raise InvalidRequestError("Line text is required")
    if isinstance(sort_order, bool) or not isinstance(sort_order, int) or sort_order < 0:
        raise InvalidRequestError("Sort order must be a non-negative integer")


def _require_work_experience(conn: Connection, work_experience_id: int) -> Dict[str, Any]:
    record = we_db.get_work_experience(conn, work_experience_id)
    if record is None:
        raise NotFoundError("Work experience", work_experience_id)
    return record


def _with_lines(conn: Connection, record: Dict[str, Any]) -> Dict[str, Any]:
    return {**record, "lines": we_db.list_work_experience_lines(conn, record["id"])}


# ---------------------------------------------------------------------------
# Work experiences
# ---------------------------------------------------------------------------

def create_work_experience(
    conn: Connection,
    fields: Dict[str, Any],
    lines: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """
    Create a work experience and its lines together.

    `lines` items are {"text": str, "sort_order": int}; sort orders must be
    unique within the experience.
    """
    for key in _REQUIRED_FIELDS:
        value = fields.get(key)
        if not isinstance(value, str) or not value.strip():
            raise InvalidRequestError(f"{key} is required")
    validate_date_range(fields["date_started"], fields.get("date_ended"))

    lines = lines or []
    seen_orders = set()
    for line in lines:
        _validate_line(line.get("text"), line.get("sort_order"))
        if line["sort_order"] in seen_orders:
            raise ConflictError("Line sort order already exists for this work experience")
        seen_orders.add(line["sort_order"])

    with atomic(conn, "Work experience"):
        we_id = we_db.insert_work_experience(
            conn,
            company_name=fields["company_name"].strip(),
            city=fields["city"].strip(),
            state=fields["state"].strip(),
            job_title=fields["job_title"].strip(),
            date_started=fields["date_started"].strip(),
            date_ended=fields.get("date_ended") or None,
            company_tagline=fields.get("company_tagline"),
        )
        for line in lines:
            we_db.insert_work_experience_line(conn, we_id, line["text"], line["sort_order"])

    logger.info("Created work experience %s with %d line(s)", we_id, len(lines))
    return get_work_experience(conn, we_id)


def get_work_experience(conn: Connection, work_experience_id: int) -> Dict[str, Any]:
    return _with_lines(conn, _require_work_experience(conn, work_experience_id))


def list_work_experiences(conn: Connection) -> List[Dict[str, Any]]:
    return [_with_lines(conn, r) for r in we_db.list_work_experiences(conn)]


def update_work_experience(conn: Connection, work_experience_id: int, fields: Dict[str, Any]) -> Dict[str, Any]:
    """Partial update of the experience's own columns. Lines are edited separately."""
    with atomic(conn, "Work experience"):
        current = _require_work_experience(conn, work_experience_id)
        for key in _REQUIRED_FIELDS:
            if key in fields and (not isinstance(fields[key], str) or not fields[key].strip()):
                raise InvalidRequestError(f"{key} cannot be empty")

        if "date_ended" in fields and not fields["date_ended"]:
            fields = {**fields, "date_ended": None}
        merged = {**current, **fields}
        validate_date_range(merged["date_started"], merged.get("date_ended"))
        try:
            we_db.update_work_experience(conn, work_experience_id, fields)
        except KeyError as e:
            raise InvalidRequestError(e.args[0])

    return get_work_experience(conn, work_experience_id)


def delete_work_experience(conn: Connection, work_experience_id: int) -> None:
    with atomic(conn, "Work experience"):
        _require_work_experience(conn, work_experience_id)
        ensure_can_delete(conn, "work_experience", work_experience_id)
        we_db.delete_work_experience(conn, work_experience_id)
    logger.info("Deleted work experience %s", work_experience_id)


# ---------------------------------------------------------------------------
# Lines
# ---------------------------------------------------------------------------

def list_work_experience_lines(conn: Connection, work_experience_id: int) -> List[Dict[str, Any]]:
    _require_work_experience(conn, work_experience_id)
    return we_db.list_work_experience_lines(conn, work_experience_id)


def create_work_experience_line(conn: Connection, work_experience_id: int, text: Any, sort_order: Any) -> Dict[str, Any]:
    _validate_line(text, sort_order)
    with atomic(conn, "Work experience"):
        _require_work_experience(conn, work_experience_id)
        if we_db.sort_order_taken(conn, work_experience_id, sort_order):
            raise ConflictError("Line sort order already exists for this work experience")
        line_id = we_db.insert_work_experience_line(conn, work_experience_id, text, sort_order)
    return we_db.get_work_experience_line(conn, line_id)


def update_work_experience_line(
    conn: Connection,
    line_id: int,
    text: Any = UNSET,
    sort_order: Any = UNSET,
) -> Dict[str, Any]:
    with atomic(conn, "Work experience line"):
        current = we_db.get_work_experience_line(conn, line_id)
        if current is None:
            raise NotFoundError("Work experience line", line_id)

        new_text = current["text"] if text is UNSET else text
        new_order = current["sort_order"] if sort_order is UNSET else sort_order
        _validate_line(new_text, new_order)
        if we_db.sort_order_taken(conn, current["work_experience_id"], new_order, exclude_line_id=line_id):
            raise ConflictError("Line sort order already exists for this work experience")
        we_db.update_work_experience_line(conn, line_id, new_text, new_order)

    return we_db.get_work_experience_line(conn, line_id)


def delete_work_experience_line(conn: Connection, line_id: int) -> None:
    with atomic(conn, "Work experience line"):
        if we_db.get_work_experience_line(conn, line_id) is None:
            raise NotFoundError("Work experience line", line_id)
        ensure_can_delete(conn, "work_experience_line", line_id)
        we_db.delete_work_experience_line(conn, line_id)
