import logging

import pytest

from resume_scope.services import professional_summary_service as summary_service
from resume_scope.services import scoped_resumes_service as svc
from resume_scope.services import skills_service
from resume_scope.services import work_experiences_service
from resume_scope.services.errors import IntegrityViolationError, NotFoundError
from resume_scope.services.scoped_resume_resolver import (
    MISSING_BASE_ENTITY,
    resolve_effective_summary,
    resolve_scoped_resume,
)


@pytest.fixture
def full(conn, base):
    return svc.create_scoped_resume_with_setup(
        conn,
        "Full",
        skill_ids=[base["python"]["id"], base["react"]["id"]],
        work_experience_ids=[base["acme"]["id"], base["globex"]["id"]],
    )


def test_resolve_missing_resume_raises_not_found(conn):
    with pytest.raises(NotFoundError):
        resolve_scoped_resume(conn, 12345)


def test_bare_resume_resolves_to_base_summary_only(conn, base):
    sr = svc.create_scoped_resume(conn, "Bare")
    resolved = resolve_scoped_resume(conn, sr["id"])

    assert resolved["id"] == sr["id"]
    assert resolved["name"] == "Bare"
    assert resolved["summary"] == {"text": "Backend engineer who ships.", "is_customized": False}
    assert resolved["skills"] == []
    assert resolved["work_experiences"] == []
    assert resolved["warnings"] == []


def test_summary_is_null_without_base_summary(conn):
    sr = svc.create_scoped_resume(conn, "No base")
    assert resolve_effective_summary(conn, sr["id"]) == {"text": None, "is_customized": False}


def test_skills_carry_base_fields_in_category_order(conn, base, full):
    skills = resolve_scoped_resume(conn, full["id"])["skills"]

    assert skills == [
        {
            "id": base["react"]["id"],
            "name": "React",
            "category_id": base["categories"]["frameworks"]["id"],
            "category": "Frameworks",
            "subcategory_id": base["subcategories"]["frontend"]["id"],
            "subcategory": "Frontend",
            "warning": None,
        },
        {
            "id": base["python"]["id"],
            "name": "Python",
            "category_id": base["categories"]["languages"]["id"],
            "category": "Languages",
            "subcategory_id": base["subcategories"]["backend"]["id"],
            "subcategory": "Backend",
            "warning": None,
        },
    ]


def test_work_experiences_newest_first_with_ordered_lines(conn, base, full):
    wes = resolve_scoped_resume(conn, full["id"])["work_experiences"]

    assert [w["company_name"] for w in wes] == ["Globex", "Acme"]
    acme = wes[1]
    assert acme["job_title"] == "Backend Developer"
    assert acme["date_ended"] == "2023-06-30"
    assert [line["text"] for line in acme["lines"]] == ["Built REST APIs", "Led schema migrations"]
    assert all(line["is_customized"] is False for line in acme["lines"])


def test_base_edits_show_up_live(conn, base, full):
    skills_service.update_skill(conn, base["python"]["id"], name="Python 3")
    work_experiences_service.update_work_experience(conn, base["acme"]["id"], {"job_title": "Senior Backend Developer"})
    work_experiences_service.update_work_experience_line(conn, base["acme_lines"][0], text="Built and ran REST APIs")
    summary_service.update_summary(conn, "Updated base summary.")

    resolved = resolve_scoped_resume(conn, full["id"])

    assert "Python 3" in [s["name"] for s in resolved["skills"]]
    acme = next(w for w in resolved["work_experiences"] if w["id"] == base["acme"]["id"])
    assert acme["job_title"] == "Senior Backend Developer"
    assert acme["lines"][0]["text"] == "Built and ran REST APIs"
    assert resolved["summary"]["text"] == "Updated base summary."


def test_new_base_line_appears_in_included_experience(conn, base, full):
    work_experiences_service.create_work_experience_line(conn, base["acme"]["id"], "Mentored interns", 2)

    acme = next(
        w for w in resolve_scoped_resume(conn, full["id"])["work_experiences"] if w["id"] == base["acme"]["id"]
    )
    assert [line["sort_order"] for line in acme["lines"]] == [0, 1, 2]


def test_line_override_shadows_base_text_only_for_that_line(conn, base, full):
    line_a, line_b = base["acme_lines"]
    svc.set_line_override(conn, full["id"], line_b, "Owned migrations end to end")
    work_experiences_service.update_work_experience_line(conn, line_b, text="Base edit hidden by override")

    acme = next(
        w for w in resolve_scoped_resume(conn, full["id"])["work_experiences"] if w["id"] == base["acme"]["id"]
    )
    assert acme["lines"][0] == {"id": line_a, "sort_order": 0, "text": "Built REST APIs", "is_customized": False}
    assert acme["lines"][1] == {
        "id": line_b,
        "sort_order": 1,
        "text": "Owned migrations end to end",
        "is_customized": True,
    }


def test_override_for_excluded_experience_is_not_rendered(conn, base):
    sr = svc.create_scoped_resume_with_setup(conn, "Only Globex", work_experience_ids=[base["globex"]["id"]])
    svc.set_line_override(conn, sr["id"], base["acme_lines"][0], "Hidden")

    resolved = resolve_scoped_resume(conn, sr["id"])
    assert [w["id"] for w in resolved["work_experiences"]] == [base["globex"]["id"]]
    assert resolved["warnings"] == []


# ============================================================================
# Dangling references
# ============================================================================

class TestDanglingReferences:

    def test_missing_skill_is_flagged_not_dropped(self, conn, base, full, raw_delete, caplog):
        react_id = base["react"]["id"]
        raw_delete("technical_skills", react_id)

        with caplog.at_level(logging.WARNING):
            resolved = resolve_scoped_resume(conn, full["id"])

        flagged = [s for s in resolved["skills"] if s["id"] == react_id]
        assert flagged == [
            {
                "id": react_id,
                "name": None,
                "category_id": None,
                "category": None,
                "subcategory_id": None,
                "subcategory": None,
                "warning": MISSING_BASE_ENTITY,
            }
        ]
        assert resolved["warnings"] == [
            {"entity_type": "skill", "entity_id": react_id, "message": f"Included skill {react_id} no longer exists"}
        ]
        assert "dangling reference" in caplog.text

    def test_missing_work_experience_is_flagged(self, conn, base, full, raw_delete):
        acme_id = base["acme"]["id"]
        raw_delete("work_experiences", acme_id)

        resolved = resolve_scoped_resume(conn, full["id"])

        flagged = next(w for w in resolved["work_experiences"] if w["id"] == acme_id)
        assert flagged["warning"] == MISSING_BASE_ENTITY
        assert flagged["company_name"] is None
        assert flagged["lines"] == []
        assert [w["entity_type"] for w in resolved["warnings"]] == ["work_experience"]

    def test_orphan_line_override_is_reported(self, conn, base, full, raw_delete):
        line_a, line_b = base["acme_lines"]
        svc.set_line_override(conn, full["id"], line_b, "Custom")
        raw_delete("work_experience_lines", line_b)

        resolved = resolve_scoped_resume(conn, full["id"])

        acme = next(w for w in resolved["work_experiences"] if w["id"] == base["acme"]["id"])
        assert [line["id"] for line in acme["lines"]] == [line_a]
        assert resolved["warnings"][0]["entity_type"] == "work_experience_line"
        assert resolved["warnings"][0]["entity_id"] == line_b

    def test_strict_mode_raises_with_warnings(self, conn, base, full, raw_delete):
        raw_delete("technical_skills", base["python"]["id"])

        with pytest.raises(IntegrityViolationError) as exc_info:
            resolve_scoped_resume(conn, full["id"], strict=True)

        assert exc_info.value.warnings[0]["entity_id"] == base["python"]["id"]

    def test_strict_mode_passes_when_clean(self, conn, base, full):
        resolved = resolve_scoped_resume(conn, full["id"], strict=True)
        assert resolved["warnings"] == []

    def test_dangling_resume_can_still_be_deleted(self, conn, base, full, raw_delete):
        raw_delete("technical_skills", base["react"]["id"])

        removed = svc.delete_user_scoped_resume(conn, full["id"])
        assert removed["scoped_skill_inclusions"] == 2
