"""
Domain errors raised by the service layer.

Routes translate these into HTTP responses (see resume_scope.api.helpers).
"""
from __future__ import annotations

import sqlite3


class ResumeScopeError(Exception):
    """Base class for expected, request-scoped failures."""


class NotFoundError(ResumeScopeError):
    def __init__(self, resource: str, resource_id: object = None):
        message = f"{resource} not found" if resource_id is None else f"{resource} with id {resource_id} not found"
        super().__init__(message)
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(ResumeScopeError):
    pass


class InvalidRequestError(ResumeScopeError):
    pass


class IntegrityViolationError(ResumeScopeError):
    """An overlay row points at a base entity that no longer exists."""

    def __init__(self, message: str, warnings: list | None = None):
        super().__init__(message)
        self.warnings = list(warnings or [])


def translate_integrity_error(exc: sqlite3.IntegrityError, resource: str = "Referenced record") -> ResumeScopeError:
    """
    Map a constraint failure from a racing writer onto the domain error the
    explicit pre-checks would have produced.
    """
    text = str(exc)
    if "FOREIGN KEY" in text:
        return NotFoundError(resource)
    if "NOT NULL" in text or "CHECK" in text:
        return InvalidRequestError(text)
    return ConflictError(f"Duplicate entry: {text}")
