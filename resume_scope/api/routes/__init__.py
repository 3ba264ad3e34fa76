"""
resume_scope/api/routes/__init__.py

Convenience exports for FastAPI routers.
This keeps `resume_scope/api/main.py` imports clean and centralized.
"""

from resume_scope.api.routes.scoped_resumes import router as scoped_resumes_router

__all__ = [
    "scoped_resumes_router",
]
