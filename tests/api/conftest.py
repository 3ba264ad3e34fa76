# tests/api/conftest.py
import os
import sqlite3
import pytest
from fastapi.testclient import TestClient
from pathlib import Path

import resume_scope.db as db
from resume_scope.api.main import app
from resume_scope.api.dependencies import get_db
from resume_scope.services import professional_summary_service as summary_service
from resume_scope.services import skills_service
from resume_scope.services import work_experiences_service


@pytest.fixture(autouse=True)
def shared_db(tmp_path, monkeypatch):
    """
    API-safe DB setup:
    - uses an on-disk temp DB (shared by path)
    - DOES NOT share a single sqlite Connection across threads
    """
    db_path = tmp_path / "test.db"
    monkeypatch.setenv("APP_DB_PATH", str(db_path))

    # initialize schema once
    conn = db.connect(db_path)
    db.init_schema(conn)
    conn.close()

    yield  # test runs

    monkeypatch.delenv("APP_DB_PATH", raising=False)


@pytest.fixture
def client():
    """
    TestClient that overrides get_db so each request gets its own connection.
    """
    db_path = Path(os.environ["APP_DB_PATH"])

    def override_get_db():
        conn = db.connect(db_path)
        try:
            yield conn
        finally:
            conn.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def seed_conn():
    """
    Convenience: a connection you can use to seed test data.
    Foreign keys are left off, so tests can also break references on purpose.
    """
    db_path = os.environ["APP_DB_PATH"]
    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    yield conn
    conn.close()


@pytest.fixture
def seeded_base(seed_conn):
    languages = skills_service.create_skill_category(seed_conn, "Languages")
    backend = skills_service.create_skill_subcategory(seed_conn, "Backend")
    python = skills_service.create_skill(seed_conn, "Python", languages["id"], backend["id"])
    sql = skills_service.create_skill(seed_conn, "SQL", languages["id"], backend["id"])

    acme = work_experiences_service.create_work_experience(
        seed_conn,
        {
            "company_name": "Acme",
            "city": "Kelowna",
            "state": "BC",
            "job_title": "Backend Developer",
            "date_started": "2022-01-01",
        },
        lines=[
            {"text": "Built REST APIs", "sort_order": 0},
            {"text": "Led schema migrations", "sort_order": 1},
        ],
    )
    summary_service.create_summary(seed_conn, "Backend engineer who ships.")

    return {
        "python_id": python["id"],
        "sql_id": sql["id"],
        "acme_id": acme["id"],
        "line_ids": [line["id"] for line in acme["lines"]],
    }
