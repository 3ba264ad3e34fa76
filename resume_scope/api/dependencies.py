from typing import Generator
from sqlite3 import Connection

from resume_scope.db import connect, init_schema


def get_db() -> Generator[Connection, None, None]:
    conn = connect()
    init_schema(conn)  # ensure tables exist for API requests
    try:
        yield conn
    finally:
        conn.close()
