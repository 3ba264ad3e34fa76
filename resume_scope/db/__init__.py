"""
resume_scope/db/__init__.py

Database module exports.

All database operations are organized by domain:
- connection.py: Connection and schema management
- skills.py: Base technical skills and the category/subcategory taxonomy
- work_experiences.py: Base work experiences and their ordered lines
- professional_summary.py: The single base professional summary
- scoped_resumes.py: Scoped resume root rows
- scoped_resume_content.py: Overlay child rows (inclusions, overrides) and reference checks
"""

# Connection and schema
from .connection import connect, init_schema

# Base skills
from .skills import (
    insert_skill_category,
    insert_skill_subcategory,
    get_skill_category,
    get_skill_subcategory,
    list_skill_categories,
    list_skill_subcategories,
    insert_skill,
    get_skill,
    list_skills,
    list_skills_by_ids,
)

# Base work experiences
from .work_experiences import (
    insert_work_experience,
    get_work_experience,
    list_work_experiences,
    list_work_experiences_by_ids,
    insert_work_experience_line,
    get_work_experience_line,
    list_work_experience_lines,
)

# Base summary
from .professional_summary import get_professional_summary

# Scoped resumes
from .scoped_resumes import (
    insert_scoped_resume,
    get_scoped_resume,
    get_scoped_resume_by_name,
    list_scoped_resumes,
)

from .scoped_resume_content import (
    CONTENT_TABLES,
    count_content_rows,
)
