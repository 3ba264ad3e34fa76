"""
Shared helpers for API routes.
"""

from fastapi import HTTPException

from resume_scope.services.errors import (
    ConflictError,
    IntegrityViolationError,
    InvalidRequestError,
    NotFoundError,
    ResumeScopeError,
)


def to_http_exception(exc: ResumeScopeError) -> HTTPException:
    """Map a service-layer error onto the HTTP status callers expect."""
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, InvalidRequestError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, IntegrityViolationError):
        return HTTPException(
            status_code=409,
            detail={"message": str(exc), "warnings": exc.warnings},
        )
    if isinstance(exc, ConflictError):
        return HTTPException(status_code=409, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))
