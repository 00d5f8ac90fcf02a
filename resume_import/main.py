from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi

from resume_import.api.routes.parse import router as parse_router
from resume_import.core.config import get_settings
from resume_import.core.logging_config import setup_logging

setup_logging(get_settings().log_level)

app = FastAPI(
    title="Resume Import (Resume Parsing Service)",
    description="Heuristic resume parsing service that turns PDF/DOCX/TXT resumes into structured, confidence-scored data",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

app.include_router(parse_router)

@app.get("/", tags=["health"])
def root():
    return {"service": "resume-import", "status": "running"}

@app.get("/health", tags=["health"])
def health():
    return {"status": "ok"}

def custom_openapi():
    """Generate OpenAPI schema with custom settings."""
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title="Resume Import API",
        version="0.1.0",
        description="Resume parsing API: contact details, sections and a completeness score",
        routes=app.routes,
    )
    app.openapi_schema = openapi_schema
    return app.openapi_schema

app.openapi = custom_openapi


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("resume_import.main:app", host="127.0.0.1", port=8000, reload=True)
