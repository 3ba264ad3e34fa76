from fastapi import APIRouter, Depends
from typing import List
from sqlite3 import Connection

from resume_scope.api.dependencies import get_db
from resume_scope.api.helpers import to_http_exception
from resume_scope.api.schemas.common import ApiResponse, DeleteResultDTO
from resume_scope.api.schemas.scoped_resumes import (
    EffectiveSkillDTO,
    EffectiveSummaryDTO,
    EffectiveWorkExperienceDTO,
    LineOverrideDTO,
    LineOverrideRequestDTO,
    OverrideClearedDTO,
    ScopedResumeCreateRequestDTO,
    ScopedResumeDetailDTO,
    ScopedResumeDuplicateRequestDTO,
    ScopedResumeListDTO,
    ScopedResumeListItemDTO,
    ScopedResumeRenameRequestDTO,
    ScopedResumeSetupRequestDTO,
    SkillInclusionDTO,
    SummaryOverrideDTO,
    SummaryOverrideRequestDTO,
    WorkExperienceInclusionDTO,
    WorkExperienceRemovalDTO,
)
from resume_scope.services.errors import ResumeScopeError
from resume_scope.services.scoped_resumes_service import (
    add_skill_inclusion,
    add_work_experience_inclusion,
    clear_line_override,
    clear_summary_override,
    create_scoped_resume,
    create_scoped_resume_with_setup,
    delete_user_scoped_resume,
    duplicate_scoped_resume,
    get_scoped_resume_by_id,
    list_user_scoped_resumes,
    remove_skill_inclusion,
    remove_work_experience_inclusion,
    rename_user_scoped_resume,
    set_line_override,
    set_summary_override,
)

router = APIRouter(prefix="/scoped-resumes", tags=["scoped-resumes"])


@router.get("", response_model=ApiResponse[ScopedResumeListDTO])
def get_scoped_resumes(conn: Connection = Depends(get_db)):
    rows = list_user_scoped_resumes(conn)
    dto = ScopedResumeListDTO(scoped_resumes=[ScopedResumeListItemDTO(**row) for row in rows])
    return ApiResponse(success=True, data=dto, error=None)


@router.post("", response_model=ApiResponse[ScopedResumeListItemDTO], status_code=201)
def post_scoped_resume(request: ScopedResumeCreateRequestDTO, conn: Connection = Depends(get_db)):
    """Create an empty scoped resume."""
    try:
        record = create_scoped_resume(conn, request.name)
    except ResumeScopeError as e:
        raise to_http_exception(e)
    return ApiResponse(success=True, data=ScopedResumeListItemDTO(**record), error=None)


@router.post("/with-setup", response_model=ApiResponse[ScopedResumeDetailDTO], status_code=201)
def post_scoped_resume_with_setup(request: ScopedResumeSetupRequestDTO, conn: Connection = Depends(get_db)):
    """Create a scoped resume with its summary override and inclusions in one call."""
    try:
        resume = create_scoped_resume_with_setup(
            conn,
            request.name,
            summary_text=request.professional_summary,
            skill_ids=request.skill_ids,
            work_experience_ids=request.work_experience_ids,
        )
    except ResumeScopeError as e:
        raise to_http_exception(e)
    return ApiResponse(success=True, data=ScopedResumeDetailDTO(**resume), error=None)


@router.get("/{scoped_resume_id}", response_model=ApiResponse[ScopedResumeDetailDTO])
def get_scoped_resume(scoped_resume_id: int, strict: bool = False, conn: Connection = Depends(get_db)):
    try:
        resume = get_scoped_resume_by_id(conn, scoped_resume_id, strict=strict)
    except ResumeScopeError as e:
        raise to_http_exception(e)
    return ApiResponse(success=True, data=ScopedResumeDetailDTO(**resume), error=None)


@router.put("/{scoped_resume_id}", response_model=ApiResponse[ScopedResumeListItemDTO])
def put_scoped_resume(
    scoped_resume_id: int,
    request: ScopedResumeRenameRequestDTO,
    conn: Connection = Depends(get_db),
):
    try:
        record = rename_user_scoped_resume(conn, scoped_resume_id, request.name)
    except ResumeScopeError as e:
        raise to_http_exception(e)
    return ApiResponse(success=True, data=ScopedResumeListItemDTO(**record), error=None)


@router.delete("/{scoped_resume_id}", response_model=ApiResponse[DeleteResultDTO])
def delete_scoped_resume(scoped_resume_id: int, conn: Connection = Depends(get_db)):
    """Delete a scoped resume together with all of its inclusions and overrides."""
    try:
        removed = delete_user_scoped_resume(conn, scoped_resume_id)
    except ResumeScopeError as e:
        raise to_http_exception(e)
    dto = DeleteResultDTO(deleted_count=1, deleted_by_table=removed)
    return ApiResponse(success=True, data=dto, error=None)


@router.post("/{scoped_resume_id}/duplicate", response_model=ApiResponse[ScopedResumeDetailDTO], status_code=201)
def post_duplicate_scoped_resume(
    scoped_resume_id: int,
    request: ScopedResumeDuplicateRequestDTO,
    conn: Connection = Depends(get_db),
):
    try:
        resume = duplicate_scoped_resume(conn, scoped_resume_id, request.name)
    except ResumeScopeError as e:
        raise to_http_exception(e)
    return ApiResponse(success=True, data=ScopedResumeDetailDTO(**resume), error=None)


# ---------------------------------------------------------------------------
# Summary override
# ---------------------------------------------------------------------------

@router.get("/{scoped_resume_id}/summary", response_model=ApiResponse[EffectiveSummaryDTO])
def get_scoped_summary(scoped_resume_id: int, conn: Connection = Depends(get_db)):
    try:
        resume = get_scoped_resume_by_id(conn, scoped_resume_id)
    except ResumeScopeError as e:
        raise to_http_exception(e)
    return ApiResponse(success=True, data=EffectiveSummaryDTO(**resume["summary"]), error=None)


@router.put("/{scoped_resume_id}/summary", response_model=ApiResponse[SummaryOverrideDTO])
def put_scoped_summary(
    scoped_resume_id: int,
    request: SummaryOverrideRequestDTO,
    conn: Connection = Depends(get_db),
):
    try:
        override = set_summary_override(conn, scoped_resume_id, request.summary_text)
    except ResumeScopeError as e:
        raise to_http_exception(e)
    return ApiResponse(success=True, data=SummaryOverrideDTO(**override), error=None)


@router.delete("/{scoped_resume_id}/summary", response_model=ApiResponse[OverrideClearedDTO])
def delete_scoped_summary(scoped_resume_id: int, conn: Connection = Depends(get_db)):
    """Reset the summary to the base summary. Not an error if it was not customized."""
    try:
        cleared = clear_summary_override(conn, scoped_resume_id)
    except ResumeScopeError as e:
        raise to_http_exception(e)
    return ApiResponse(success=True, data=OverrideClearedDTO(cleared=cleared), error=None)


# ---------------------------------------------------------------------------
# Skills
# ---------------------------------------------------------------------------

@router.get("/{scoped_resume_id}/skills", response_model=ApiResponse[List[EffectiveSkillDTO]])
def get_scoped_skills(scoped_resume_id: int, conn: Connection = Depends(get_db)):
    try:
        resume = get_scoped_resume_by_id(conn, scoped_resume_id)
    except ResumeScopeError as e:
        raise to_http_exception(e)
    return ApiResponse(success=True, data=[EffectiveSkillDTO(**s) for s in resume["skills"]], error=None)


@router.post("/{scoped_resume_id}/skills/{skill_id}", response_model=ApiResponse[SkillInclusionDTO], status_code=201)
def post_scoped_skill(scoped_resume_id: int, skill_id: int, conn: Connection = Depends(get_db)):
    try:
        inclusion = add_skill_inclusion(conn, scoped_resume_id, skill_id)
    except ResumeScopeError as e:
        raise to_http_exception(e)
    return ApiResponse(success=True, data=SkillInclusionDTO(**inclusion), error=None)


@router.delete("/{scoped_resume_id}/skills/{skill_id}", response_model=ApiResponse[None])
def delete_scoped_skill(scoped_resume_id: int, skill_id: int, conn: Connection = Depends(get_db)):
    try:
        remove_skill_inclusion(conn, scoped_resume_id, skill_id)
    except ResumeScopeError as e:
        raise to_http_exception(e)
    return ApiResponse(success=True, data=None, error=None)


# ---------------------------------------------------------------------------
# Work experiences
# ---------------------------------------------------------------------------

@router.get("/{scoped_resume_id}/work-experiences", response_model=ApiResponse[List[EffectiveWorkExperienceDTO]])
def get_scoped_work_experiences(scoped_resume_id: int, conn: Connection = Depends(get_db)):
    try:
        resume = get_scoped_resume_by_id(conn, scoped_resume_id)
    except ResumeScopeError as e:
        raise to_http_exception(e)
    data = [EffectiveWorkExperienceDTO(**we) for we in resume["work_experiences"]]
    return ApiResponse(success=True, data=data, error=None)


@router.post(
    "/{scoped_resume_id}/work-experiences/{work_experience_id}",
    response_model=ApiResponse[WorkExperienceInclusionDTO],
    status_code=201,
)
def post_scoped_work_experience(scoped_resume_id: int, work_experience_id: int, conn: Connection = Depends(get_db)):
    try:
        inclusion = add_work_experience_inclusion(conn, scoped_resume_id, work_experience_id)
    except ResumeScopeError as e:
        raise to_http_exception(e)
    return ApiResponse(success=True, data=WorkExperienceInclusionDTO(**inclusion), error=None)


@router.delete(
    "/{scoped_resume_id}/work-experiences/{work_experience_id}",
    response_model=ApiResponse[WorkExperienceRemovalDTO],
)
def delete_scoped_work_experience(scoped_resume_id: int, work_experience_id: int, conn: Connection = Depends(get_db)):
    """Exclude a work experience; its line overrides in this scoped resume go with it."""
    try:
        removed = remove_work_experience_inclusion(conn, scoped_resume_id, work_experience_id)
    except ResumeScopeError as e:
        raise to_http_exception(e)
    return ApiResponse(success=True, data=WorkExperienceRemovalDTO(removed_line_overrides=removed), error=None)


# ---------------------------------------------------------------------------
# Line overrides
# ---------------------------------------------------------------------------

@router.put("/{scoped_resume_id}/lines/{line_id}", response_model=ApiResponse[LineOverrideDTO])
def put_scoped_line(
    scoped_resume_id: int,
    line_id: int,
    request: LineOverrideRequestDTO,
    conn: Connection = Depends(get_db),
):
    try:
        override = set_line_override(conn, scoped_resume_id, line_id, request.line_text)
    except ResumeScopeError as e:
        raise to_http_exception(e)
    return ApiResponse(success=True, data=LineOverrideDTO(**override), error=None)


@router.delete("/{scoped_resume_id}/lines/{line_id}", response_model=ApiResponse[OverrideClearedDTO])
def delete_scoped_line(scoped_resume_id: int, line_id: int, conn: Connection = Depends(get_db)):
    try:
        cleared = clear_line_override(conn, scoped_resume_id, line_id)
    except ResumeScopeError as e:
        raise to_http_exception(e)
    return ApiResponse(success=True, data=OverrideClearedDTO(cleared=cleared), error=None)
