import sqlite3
import pytest

import resume_scope.db as db
from resume_scope.services import professional_summary_service as summary_service
from resume_scope.services import skills_service
from resume_scope.services import work_experiences_service


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    # Use a temporary on-disk DB so a second connection can see the same data
    path = tmp_path / "test.db"
    monkeypatch.setenv("APP_DB_PATH", str(path))
    yield path
    monkeypatch.delenv("APP_DB_PATH", raising=False)


@pytest.fixture
def conn(db_path):
    """Foreign-key enforcing connection with the schema applied."""
    conn = db.connect(db_path)
    db.init_schema(conn)
    yield conn
    conn.close()


@pytest.fixture
def raw_delete(db_path):
    """
    Delete a base row behind the integrity guard's back.

    Plain sqlite3 connections leave foreign keys off, which is how an
    out-of-band edit can leave overlay rows pointing at nothing.
    """
    def _delete(table: str, row_id: int) -> None:
        raw = sqlite3.connect(db_path)
        try:
            raw.execute(f"DELETE FROM {table} WHERE id = ?", (row_id,))
            raw.commit()
        finally:
            raw.close()

    return _delete


@pytest.fixture
def base(conn):
    """
    A small base resume:
      - skills: Python (Languages/Backend), React (Frameworks/Frontend)
      - work experiences: Acme (two lines), Globex (one line, newer)
      - a professional summary
    """
    languages = skills_service.create_skill_category(conn, "Languages")
    frameworks = skills_service.create_skill_category(conn, "Frameworks")
    backend = skills_service.create_skill_subcategory(conn, "Backend")
    frontend = skills_service.create_skill_subcategory(conn, "Frontend")

    python = skills_service.create_skill(conn, "Python", languages["id"], backend["id"])
    react = skills_service.create_skill(conn, "React", frameworks["id"], frontend["id"])

    acme = work_experiences_service.create_work_experience(
        conn,
        {
            "company_name": "Acme",
            "company_tagline": "Widgets at scale",
            "city": "Kelowna",
            "state": "BC",
            "job_title": "Backend Developer",
            "date_started": "2022-01-01",
            "date_ended": "2023-06-30",
        },
        lines=[
            {"text": "Built REST APIs", "sort_order": 0},
            {"text": "Led schema migrations", "sort_order": 1},
        ],
    )
    globex = work_experiences_service.create_work_experience(
        conn,
        {
            "company_name": "Globex",
            "city": "Vancouver",
            "state": "BC",
            "job_title": "Full Stack Developer",
            "date_started": "2023-07-01",
        },
        lines=[{"text": "Shipped analytics dashboards", "sort_order": 0}],
    )

    summary = summary_service.create_summary(conn, "Backend engineer who ships.")

    return {
        "categories": {"languages": languages, "frameworks": frameworks},
        "subcategories": {"backend": backend, "frontend": frontend},
        "python": python,
        "react": react,
        "acme": acme,
        "globex": globex,
        "acme_lines": [line["id"] for line in acme["lines"]],
        "globex_lines": [line["id"] for line in globex["lines"]],
        "summary": summary,
    }
