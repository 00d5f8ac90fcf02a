import logging

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.responses import JSONResponse

from resume_import.core.config import Settings, get_settings
from resume_import.core.diagnostics import LoggingSink
from resume_import.core.resume_parser import get_supported_file_types, parse_resume_file, preview_file_content
from resume_import.core.schemas import FilePreview, ParseOptions, ParseResult, SupportedFileTypes

logger = logging.getLogger(__name__)

router = APIRouter(tags=["parse"])


@router.post(
    "/parse",
    response_model=ParseResult,
    summary="Parse Resume",
    description="Extract structured resume data (contact details, experience, education, skills, projects, certifications) from a PDF, DOCX or TXT file.",
    responses={
        200: {
            "description": "Successfully parsed resume",
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "data": {
                            "personalInfo": {
                                "fullName": "Jane Smith",
                                "email": "jane.smith@email.com",
                                "phone": "(555) 123-4567",
                                "location": "San Francisco, CA",
                            },
                            "sections": {
                                "experience": [
                                    {
                                        "title": "SOFTWARE ENGINEER",
                                        "company": "ACME CORP",
                                        "location": "San Francisco, CA",
                                        "startDate": "01/2020",
                                        "endDate": "Present",
                                        "current": True,
                                    }
                                ],
                                "skills": ["Python", "FastAPI", "PostgreSQL"],
                            },
                            "confidence": 0.83,
                        },
                        "warnings": None,
                    }
                }
            },
        },
        400: {"description": "Empty file uploaded"},
        422: {"description": "File failed validation, could not be read, or had no structured resume data"},
    },
)
async def parse_resume(
    file: UploadFile = File(..., description="Resume file (PDF, DOCX, or TXT format)"),
    extract_personal_info: bool = Query(True, description="Extract name, email, phone, location, links"),
    extract_experience: bool = Query(True),
    extract_education: bool = Query(True),
    extract_skills: bool = Query(True),
    extract_projects: bool = Query(True),
    extract_certifications: bool = Query(True),
    settings: Settings = Depends(get_settings),
):
    """
    Parse a resume file into structured data.

    **Supported formats:**
    - PDF (.pdf) - text-layer extraction only, OCR not supported
    - DOCX (.docx)
    - TXT (.txt, UTF-8)

    **Returns** a ParseResult: `success` with `data` (and optional advisory
    `warnings` when confidence is low), or `success: false` with `error` and
    actionable `warnings` (HTTP 422).
    """
    raw = await file.read()
    if not raw:
        raise HTTPException(status_code=400, detail="Empty file uploaded.")

    options = ParseOptions(
        extract_personal_info=extract_personal_info,
        extract_experience=extract_experience,
        extract_education=extract_education,
        extract_skills=extract_skills,
        extract_projects=extract_projects,
        extract_certifications=extract_certifications,
    )
    result = parse_resume_file(
        raw,
        file.filename or "",
        file.content_type,
        options=options,
        settings=settings,
        sink=LoggingSink(logger),
    )

    if not result.success:
        logger.info("Parse failed for %r: %s", file.filename, result.error)
        return JSONResponse(status_code=422, content=result.model_dump(mode="json", by_alias=True))
    return result


@router.get(
    "/formats",
    response_model=SupportedFileTypes,
    summary="Supported Formats",
    description="File extensions, MIME types and maximum sizes (MB) accepted by /parse.",
)
def supported_formats(settings: Settings = Depends(get_settings)):
    return get_supported_file_types(settings)


@router.post(
    "/preview",
    response_model=FilePreview,
    summary="Preview File",
    description="Show file details and, for text files, the first characters of content. Nothing is parsed.",
    responses={400: {"description": "Empty file uploaded"}},
)
async def preview_file(
    file: UploadFile = File(..., description="Resume file to preview"),
    settings: Settings = Depends(get_settings),
):
    raw = await file.read()
    if not raw:
        raise HTTPException(status_code=400, detail="Empty file uploaded.")
    return preview_file_content(raw, file.filename or "", file.content_type, settings=settings)
