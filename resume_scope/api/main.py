import logging
import os
import sys
from dotenv import load_dotenv
from fastapi import FastAPI
from resume_scope.api.routes import scoped_resumes_router

# Load environment variables from a local .env (if present).
# Skip under pytest to avoid cross-test side effects from a developer's local .env.
if "pytest" not in sys.modules:
    # Only fill in variables that are missing/empty in the current process environment.
    override = os.getenv("APP_DB_PATH") in (None, "")
    load_dotenv(override=override)

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Resume Scope API")

@app.get("/health")
def health():
    return {"status": "ok"}

app.include_router(scoped_resumes_router)
