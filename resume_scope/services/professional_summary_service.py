from __future__ import annotations

from sqlite3 import Connection
from typing import Any, Dict, Optional

from resume_scope.db import professional_summary as summary_db
from resume_scope.services.errors import ConflictError, InvalidRequestError, NotFoundError
from resume_scope.services.transaction import atomic


def _validate_text(text: Any) -> str:
    if not isinstance(text, str) or not text.strip():
        raise InvalidRequestError("Summary text is required")
    return text


def get_summary(conn: Connection) -> Optional[Dict[str, Any]]:
    return summary_db.get_professional_summary(conn)


def create_summary(conn: Connection, text: Any) -> Dict[str, Any]:
    """Only one base summary may exist."""
    text = _validate_text(text)
    with atomic(conn, "Professional summary"):
        if summary_db.get_professional_summary(conn) is not None:
            raise ConflictError("Professional summary already exists. Use update instead.")
        summary_db.insert_professional_summary(conn, text)
    return summary_db.get_professional_summary(conn)


def update_summary(conn: Connection, text: Any) -> Dict[str, Any]:
    text = _validate_text(text)
    with atomic(conn, "Professional summary"):
        current = summary_db.get_professional_summary(conn)
        if current is None:
            raise NotFoundError("Professional summary")
        summary_db.update_professional_summary(conn, current["id"], text)
    return summary_db.get_professional_summary(conn)


def delete_summary(conn: Connection) -> None:
    """
    Scoped summary overrides do not reference the base row, so no guard is
    needed; scoped resumes without an override resolve to a null summary.
    """
    with atomic(conn, "Professional summary"):
        current = summary_db.get_professional_summary(conn)
        if current is None:
            raise NotFoundError("Professional summary")
        summary_db.delete_professional_summary(conn, current["id"])
