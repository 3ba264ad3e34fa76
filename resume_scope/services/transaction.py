"""
Transaction scope shared by the service layer.
"""
from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from sqlite3 import Connection
from typing import Iterator

from resume_scope.services.errors import translate_integrity_error


@contextmanager
def atomic(conn: Connection, resource: str = "Referenced record") -> Iterator[None]:
    """
    Commit everything written inside the block, or roll all of it back.

    Constraint failures are re-raised as domain errors so a racing writer
    sees the same Conflict/NotFound an explicit check would have given.
    """
    try:
        with conn:
            yield
    except sqlite3.IntegrityError as e:
        raise translate_integrity_error(e, resource) from e
