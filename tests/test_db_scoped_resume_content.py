import pytest

import resume_scope.db as db
from resume_scope.db import scoped_resume_content as content
from resume_scope.services.errors import ConflictError, NotFoundError
from resume_scope.services.transaction import atomic


def _make_conn():
    conn = db.connect(":memory:")
    db.init_schema(conn)
    return conn


@pytest.fixture
def mem():
    conn = _make_conn()
    yield conn
    conn.close()


@pytest.fixture
def seeded(mem):
    category_id = db.insert_skill_category(mem, "Languages")
    subcategory_id = db.insert_skill_subcategory(mem, "Backend")
    skill_id = db.insert_skill(mem, "Python", category_id, subcategory_id)
    we_id = db.insert_work_experience(mem, "Acme", "Kelowna", "BC", "Developer", "2022-01-01")
    line_ids = [
        db.insert_work_experience_line(mem, we_id, "Line one", 0),
        db.insert_work_experience_line(mem, we_id, "Line two", 1),
    ]
    sr_id = db.insert_scoped_resume(mem, "A")
    mem.commit()
    return {"skill_id": skill_id, "we_id": we_id, "line_ids": line_ids, "sr_id": sr_id}


def test_init_schema_is_idempotent(mem):
    db.init_schema(mem)
    tables = {
        r[0] for r in mem.execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()
    }
    for table in db.CONTENT_TABLES + ("scoped_resumes", "technical_skills", "work_experience_lines"):
        assert table in tables


def test_foreign_keys_are_enforced(mem):
    assert mem.execute("PRAGMA foreign_keys").fetchone()[0] == 1


def test_upsert_summary_override_keeps_one_row(mem, seeded):
    sr_id = seeded["sr_id"]
    content.upsert_summary_override(mem, sr_id, "One")
    content.upsert_summary_override(mem, sr_id, "Two")

    assert content.get_summary_override(mem, sr_id)["text"] == "Two"
    assert content.count_content_rows(mem, sr_id)["scoped_summary_overrides"] == 1


def test_list_skill_inclusions_marks_existing_rows(mem, seeded):
    content.insert_skill_inclusion(mem, seeded["sr_id"], seeded["skill_id"])

    rows = content.list_skill_inclusions(mem, seeded["sr_id"])
    assert len(rows) == 1
    assert rows[0]["exists"] is True
    assert rows[0]["name"] == "Python"
    assert rows[0]["category"] == "Languages"


def test_delete_line_overrides_for_work_experience_scoped_to_resume(mem, seeded):
    other = db.insert_scoped_resume(mem, "B")
    for line_id in seeded["line_ids"]:
        content.upsert_line_override(mem, seeded["sr_id"], line_id, "Custom")
    content.upsert_line_override(mem, other, seeded["line_ids"][0], "Other")

    removed = content.delete_line_overrides_for_work_experience(mem, seeded["sr_id"], seeded["we_id"])

    assert removed == 2
    assert content.list_line_overrides(mem, seeded["sr_id"]) == []
    assert len(content.list_line_overrides(mem, other)) == 1


def test_load_raw_content_and_delete_all(mem, seeded):
    sr_id = seeded["sr_id"]
    content.upsert_summary_override(mem, sr_id, "Summary")
    content.insert_skill_inclusion(mem, sr_id, seeded["skill_id"])
    content.insert_work_experience_inclusion(mem, sr_id, seeded["we_id"])
    content.upsert_line_override(mem, sr_id, seeded["line_ids"][1], "Custom two")

    raw = content.load_raw_content(mem, sr_id)
    assert raw == {
        "summary_overrides": [{"text": "Summary"}],
        "skill_inclusions": [{"skill_id": seeded["skill_id"]}],
        "work_experience_inclusions": [{"work_experience_id": seeded["we_id"]}],
        "line_overrides": [{"work_experience_line_id": seeded["line_ids"][1], "text": "Custom two"}],
    }

    removed = content.delete_all_content(mem, sr_id)
    assert removed == {table: 1 for table in db.CONTENT_TABLES}
    assert content.count_content_rows(mem, sr_id) == {table: 0 for table in db.CONTENT_TABLES}


def test_reference_checks(mem, seeded):
    sr_id = seeded["sr_id"]
    assert content.skill_referenced(mem, seeded["skill_id"]) is False
    assert content.work_experience_referenced(mem, seeded["we_id"]) is False

    content.insert_skill_inclusion(mem, sr_id, seeded["skill_id"])
    content.upsert_line_override(mem, sr_id, seeded["line_ids"][0], "Custom")

    assert content.skill_referenced(mem, seeded["skill_id"]) is True
    assert content.work_experience_line_referenced(mem, seeded["line_ids"][0]) is True
    assert content.work_experience_line_referenced(mem, seeded["line_ids"][1]) is False
    # referenced through a line override even without an inclusion
    assert content.work_experience_referenced(mem, seeded["we_id"]) is True


# ============================================================================
# Transaction scope
# ============================================================================

def test_atomic_maps_unique_violation_to_conflict_and_rolls_back(mem, seeded):
    sr_id = seeded["sr_id"]
    with pytest.raises(ConflictError):
        with atomic(mem, "Technical skill"):
            content.insert_skill_inclusion(mem, sr_id, seeded["skill_id"])
            content.insert_skill_inclusion(mem, sr_id, seeded["skill_id"])

    assert content.count_content_rows(mem, sr_id)["scoped_skill_inclusions"] == 0


def test_atomic_maps_foreign_key_violation_to_not_found(mem, seeded):
    with pytest.raises(NotFoundError, match="Technical skill not found"):
        with atomic(mem, "Technical skill"):
            content.insert_skill_inclusion(mem, seeded["sr_id"], 9999)


def test_atomic_rolls_back_on_domain_error(mem, seeded):
    sr_id = seeded["sr_id"]
    with pytest.raises(NotFoundError):
        with atomic(mem):
            content.upsert_summary_override(mem, sr_id, "Partial write")
            raise NotFoundError("Something")

    assert content.get_summary_override(mem, sr_id) is None
