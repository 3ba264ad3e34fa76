from pydantic import BaseModel, Field
from typing import List, Optional

class ScopedResumeListItemDTO(BaseModel):
    id: int
    name: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

class ScopedResumeListDTO(BaseModel):
    scoped_resumes: List[ScopedResumeListItemDTO]

class EffectiveSummaryDTO(BaseModel):
    text: Optional[str] = None
    is_customized: bool = False

class EffectiveSkillDTO(BaseModel):
    id: int
    name: Optional[str] = None
    category_id: Optional[int] = None
    category: Optional[str] = None
    subcategory_id: Optional[int] = None
    subcategory: Optional[str] = None
    warning: Optional[str] = None  # set when the base skill no longer exists

class EffectiveLineDTO(BaseModel):
    id: int
    sort_order: int
    text: str
    is_customized: bool = False

class EffectiveWorkExperienceDTO(BaseModel):
    id: int
    company_name: Optional[str] = None
    company_tagline: Optional[str] = None
    job_title: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    date_started: Optional[str] = None
    date_ended: Optional[str] = None
    warning: Optional[str] = None
    lines: List[EffectiveLineDTO] = []

class IntegrityWarningDTO(BaseModel):
    entity_type: str
    entity_id: int
    message: str

class ScopedResumeDetailDTO(BaseModel):
    id: int
    name: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    summary: EffectiveSummaryDTO = EffectiveSummaryDTO()
    skills: List[EffectiveSkillDTO] = []
    work_experiences: List[EffectiveWorkExperienceDTO] = []
    warnings: List[IntegrityWarningDTO] = []

class ScopedResumeCreateRequestDTO(BaseModel):
    name: str

class ScopedResumeSetupRequestDTO(BaseModel):
    name: str
    professional_summary: Optional[str] = None
    skill_ids: List[int] = Field(default_factory=list)
    work_experience_ids: List[int] = Field(default_factory=list)

class ScopedResumeRenameRequestDTO(BaseModel):
    name: str

class ScopedResumeDuplicateRequestDTO(BaseModel):
    name: str

class SummaryOverrideRequestDTO(BaseModel):
    summary_text: str

class SummaryOverrideDTO(BaseModel):
    id: int
    scoped_resume_id: int
    text: str

class LineOverrideRequestDTO(BaseModel):
    line_text: str

class LineOverrideDTO(BaseModel):
    id: int
    scoped_resume_id: int
    work_experience_line_id: int
    text: str

class SkillInclusionDTO(BaseModel):
    id: int
    scoped_resume_id: int
    skill_id: int

class WorkExperienceInclusionDTO(BaseModel):
    id: int
    scoped_resume_id: int
    work_experience_id: int

class WorkExperienceRemovalDTO(BaseModel):
    removed_line_overrides: int

class OverrideClearedDTO(BaseModel):
    cleared: bool
