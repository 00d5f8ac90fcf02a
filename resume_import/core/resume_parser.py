"""
File-level entry points: format detection, validation gates and the per-format
wrappers that turn extractor failures into ParseResult failures.

    parse_resume_file(bytes, "resume.pdf", "application/pdf") -> ParseResult

Nothing in here raises for a bad upload. Every outcome (unsupported type,
failed gate, unreadable file, nothing structured) comes back as a failed
ParseResult with a user-facing error and actionable warnings.
"""

import logging
from datetime import datetime
from typing import List, Optional

from resume_import.core import docx_extractor, pdf_extractor
from resume_import.core.confidence_calculator import ConfidenceCalculator
from resume_import.core.config import MB, Settings, get_settings
from resume_import.core.diagnostics import DiagnosticSink
from resume_import.core.errors import ExtractionError, ExtractionFailure
from resume_import.core.heuristics import DEFAULT_TABLES, HeuristicTables
from resume_import.core.schemas import (
    FileInfo,
    FileKind,
    FilePreview,
    ParsedResumeData,
    ParseOptions,
    ParseResult,
    SourceFormat,
    SupportedFileTypes,
)
from resume_import.core.text_normalization import normalize_text
from resume_import.core.text_parser import has_meaningful_content, parse_resume_text
from resume_import.core.validation import (
    DOCX_EXTENSIONS,
    DOCX_MIME_TYPES,
    PDF_MIME_TYPES,
    PDF_SIGNATURE,
    TXT_MIME_TYPES,
    ZIP_SIGNATURE,
    validate_docx_file,
    validate_pdf_file,
    validate_txt_file,
)

logger = logging.getLogger(__name__)


# ============================================================================
# User-facing messages
# ============================================================================

UNSUPPORTED_FORMAT_ERROR = "Unsupported file format. Please use PDF, DOCX, or TXT files."
UNSUPPORTED_FORMAT_WARNINGS = ["Supported formats: PDF, DOCX, TXT"]

UNEXPECTED_ERROR = (
    "An unexpected error occurred while parsing your resume. Please try again or use manual entry."
)
UNEXPECTED_WARNINGS = [
    "Check if the file is corrupted",
    "Try a different file format",
    "Use manual entry as an alternative",
]

PDF_FAILED_ERROR = "Failed to parse PDF file."
PDF_FAILURE_WARNINGS = [
    "Try converting the PDF to a different format",
    "Ensure the file is not corrupted",
    "Use manual entry as an alternative",
]
PDF_NO_TEXT_WARNINGS = ["Consider using a text-based PDF or OCR tools for image-based PDFs"]
PDF_NOT_MEANINGFUL_ERROR = (
    "Unable to extract meaningful resume data from PDF. Text may be too complex or poorly formatted."
)
PDF_NOT_MEANINGFUL_WARNINGS = [
    "Try a different file format",
    "Ensure the PDF contains selectable text",
    "Check if the resume follows a standard format",
]

DOCX_FAILED_ERROR = "Failed to parse DOCX file."
DOCX_FAILURE_WARNINGS = [
    "Try saving the document in a different format (PDF, TXT)",
    "Ensure the file is not corrupted",
    "Remove password protection if applicable",
    "Use manual entry as an alternative",
]
DOCX_NO_TEXT_WARNINGS = ["Ensure the document contains readable text", "Try saving as a different format"]
DOCX_NOT_MEANINGFUL_ERROR = (
    "Unable to extract meaningful resume data from DOCX. "
    "Document may be poorly formatted or contain mostly non-text elements."
)
DOCX_NOT_MEANINGFUL_WARNINGS = [
    "Try a different file format",
    "Ensure the document contains standard resume sections",
    "Check if the document uses tables or complex formatting",
]
DOCX_CONVERSION_ERROR_WARNING = "Some document elements could not be processed correctly"
DOCX_CONVERSION_WARNING = "Document formatting may affect text extraction accuracy"

TXT_EMPTY_ERROR = "Text file appears to be empty."
TXT_EMPTY_WARNINGS = ["Ensure the file contains resume content"]
TXT_READ_ERROR = "Failed to read text file. The file may be corrupted or in an unsupported encoding."
TXT_READ_WARNINGS = [
    "Ensure the file is saved as plain text (UTF-8)",
    "Check if the file is corrupted",
    "Try copying and pasting the content manually",
]
TXT_NOT_MEANINGFUL_ERROR = (
    "Unable to extract meaningful resume data from text file. Content may be poorly formatted."
)
TXT_NOT_MEANINGFUL_WARNINGS = [
    "Ensure the text follows a standard resume format",
    "Include clear section headers (EXPERIENCE, EDUCATION, etc.)",
    "Use manual entry for better control",
]

# Declared types that say nothing about the content
GENERIC_MIME_TYPES = {"", "application/octet-stream", "binary/octet-stream"}


# ============================================================================
# Format detection
# ============================================================================

def _declared_kind(content_type: Optional[str]) -> Optional[FileKind]:
    mime = (content_type or "").split(";")[0].strip().lower()
    if mime in GENERIC_MIME_TYPES:
        return None
    if mime in PDF_MIME_TYPES:
        return "pdf"
    if mime in {m.lower() for m in DOCX_MIME_TYPES} or "wordprocessingml" in mime:
        return "docx"
    if mime in TXT_MIME_TYPES:
        return "txt"
    return None


def detect_file_type(filename: str, content_type: Optional[str] = None, file_bytes: bytes = b"") -> FileKind:
    """
    Declared MIME type first, then magic bytes, then the file extension.

    Examples:
        ("resume.pdf", "application/pdf") -> "pdf"
        ("upload", "application/octet-stream", b"%PDF-1.7...") -> "pdf"
        ("resume.docx", None) -> "docx"
        ("resume.rtf", "application/rtf") -> "unknown"
    """
    declared = _declared_kind(content_type)
    if declared:
        return declared

    if file_bytes.startswith(PDF_SIGNATURE):
        return "pdf"
    if file_bytes.startswith(ZIP_SIGNATURE):
        return "docx"

    name = (filename or "").lower()
    if name.endswith(".pdf"):
        return "pdf"
    if name.endswith(DOCX_EXTENSIONS):
        return "docx"
    if name.endswith(".txt"):
        return "txt"
    return "unknown"


# ============================================================================
# Result assembly
# ============================================================================

def _finish(
    data: ParsedResumeData,
    source: SourceFormat,
    not_meaningful_error: str,
    not_meaningful_warnings: List[str],
    settings: Settings,
    warnings: Optional[List[str]] = None,
) -> ParseResult:
    if not has_meaningful_content(data):
        logger.info("%s parse produced no structured data", source.upper())
        return ParseResult.fail(not_meaningful_error, list(not_meaningful_warnings))

    warnings = list(warnings or [])
    warnings.extend(
        ConfidenceCalculator.low_confidence_warnings(source, data.confidence, settings.low_confidence_threshold)
    )
    logger.info(
        "%s parse ok: confidence=%.2f entries=%d",
        source.upper(), data.confidence, data.sections.entry_count(),
    )
    return ParseResult.ok(data, warnings)


def _parse_extracted(
    raw_text: str,
    source: SourceFormat,
    options: Optional[ParseOptions],
    settings: Settings,
    sink: Optional[DiagnosticSink],
    tables: HeuristicTables,
) -> ParsedResumeData:
    text = normalize_text(raw_text, source, tables)
    return parse_resume_text(text, options, tables, sink, settings)


# ============================================================================
# Format wrappers
# ============================================================================

def parse_pdf_file(
    file_bytes: bytes,
    options: Optional[ParseOptions] = None,
    settings: Optional[Settings] = None,
    sink: Optional[DiagnosticSink] = None,
    tables: HeuristicTables = DEFAULT_TABLES,
) -> ParseResult:
    settings = settings or get_settings()
    try:
        raw_text = pdf_extractor.extract_pdf_text(file_bytes, settings)
        data = _parse_extracted(raw_text, "pdf", options, settings, sink, tables)
    except ExtractionError as exc:
        if exc.kind == ExtractionFailure.EMPTY:
            return ParseResult.fail(exc.message, list(PDF_NO_TEXT_WARNINGS))
        return ParseResult.fail(exc.message, list(PDF_FAILURE_WARNINGS))
    except Exception:
        logger.exception("PDF parsing error")
        return ParseResult.fail(PDF_FAILED_ERROR, list(PDF_FAILURE_WARNINGS))

    return _finish(data, "pdf", PDF_NOT_MEANINGFUL_ERROR, PDF_NOT_MEANINGFUL_WARNINGS, settings)


def parse_docx_file(
    file_bytes: bytes,
    options: Optional[ParseOptions] = None,
    settings: Optional[Settings] = None,
    sink: Optional[DiagnosticSink] = None,
    tables: HeuristicTables = DEFAULT_TABLES,
) -> ParseResult:
    """Plain paragraph + table text via python-docx."""
    settings = settings or get_settings()
    try:
        raw_text = docx_extractor.extract_docx_text(file_bytes)
        data = _parse_extracted(raw_text, "docx", options, settings, sink, tables)
    except ExtractionError as exc:
        if exc.kind == ExtractionFailure.EMPTY:
            return ParseResult.fail(exc.message, list(DOCX_NO_TEXT_WARNINGS))
        return ParseResult.fail(exc.message, list(DOCX_FAILURE_WARNINGS))
    except Exception:
        logger.exception("DOCX parsing error")
        return ParseResult.fail(DOCX_FAILED_ERROR, list(DOCX_FAILURE_WARNINGS))

    return _finish(data, "docx", DOCX_NOT_MEANINGFUL_ERROR, DOCX_NOT_MEANINGFUL_WARNINGS, settings)


def parse_docx_with_formatting(
    file_bytes: bytes,
    options: Optional[ParseOptions] = None,
    settings: Optional[Settings] = None,
    sink: Optional[DiagnosticSink] = None,
    tables: HeuristicTables = DEFAULT_TABLES,
) -> ParseResult:
    """
    mammoth HTML conversion, which keeps list structure as bullets.

    Falls back to parse_docx_file() once when the conversion fails or yields
    no text.
    """
    settings = settings or get_settings()
    try:
        extraction = docx_extractor.extract_docx_html_text(file_bytes)
    except ExtractionError as exc:
        logger.info("mammoth conversion failed (%s), falling back to plain extraction", exc.kind)
        return parse_docx_file(file_bytes, options, settings, sink, tables)

    if not extraction.text.strip():
        logger.info("mammoth conversion produced no text, falling back to plain extraction")
        return parse_docx_file(file_bytes, options, settings, sink, tables)

    warnings: List[str] = []
    if extraction.errors:
        warnings.append(DOCX_CONVERSION_ERROR_WARNING)
    if extraction.warnings:
        warnings.append(DOCX_CONVERSION_WARNING)

    try:
        data = _parse_extracted(extraction.text, "docx", options, settings, sink, tables)
    except Exception:
        logger.exception("DOCX parsing error")
        return ParseResult.fail(DOCX_FAILED_ERROR, list(DOCX_FAILURE_WARNINGS))

    return _finish(data, "docx", DOCX_NOT_MEANINGFUL_ERROR, DOCX_NOT_MEANINGFUL_WARNINGS, settings, warnings)


def parse_txt_file(
    file_bytes: bytes,
    filename: str = "resume.txt",
    content_type: Optional[str] = None,
    options: Optional[ParseOptions] = None,
    settings: Optional[Settings] = None,
    sink: Optional[DiagnosticSink] = None,
    tables: HeuristicTables = DEFAULT_TABLES,
) -> ParseResult:
    settings = settings or get_settings()

    validation = validate_txt_file(len(file_bytes), filename, content_type, settings)
    if not validation.is_valid:
        return ParseResult.fail(validation.error or "Text file validation failed")

    try:
        raw_text = file_bytes.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        logger.warning("TXT decode failed: %s", exc)
        return ParseResult.fail(TXT_READ_ERROR, list(TXT_READ_WARNINGS))

    if not raw_text.strip():
        return ParseResult.fail(TXT_EMPTY_ERROR, list(TXT_EMPTY_WARNINGS))

    try:
        data = _parse_extracted(raw_text, "txt", options, settings, sink, tables)
    except Exception:
        logger.exception("TXT parsing error")
        return ParseResult.fail(TXT_READ_ERROR, list(TXT_READ_WARNINGS))

    return _finish(data, "txt", TXT_NOT_MEANINGFUL_ERROR, TXT_NOT_MEANINGFUL_WARNINGS, settings)


# ============================================================================
# Dispatcher
# ============================================================================

def parse_resume_file(
    file_bytes: bytes,
    filename: str,
    content_type: Optional[str] = None,
    options: Optional[ParseOptions] = None,
    settings: Optional[Settings] = None,
    sink: Optional[DiagnosticSink] = None,
    tables: HeuristicTables = DEFAULT_TABLES,
) -> ParseResult:
    """
    Detect the format, run its validation gate, then its wrapper.

    Gates run before any extractor, so an oversized or mistyped file never
    reaches pdfplumber / python-docx.
    """
    settings = settings or get_settings()
    try:
        kind = detect_file_type(filename, content_type, file_bytes)
        logger.info("Parsing %r as %s (%d bytes)", filename, kind, len(file_bytes))
        header = file_bytes[:8]

        if kind == "pdf":
            validation = validate_pdf_file(len(file_bytes), filename, content_type, settings, header)
            if not validation.is_valid:
                return ParseResult.fail(validation.error or "PDF validation failed")
            return parse_pdf_file(file_bytes, options, settings, sink, tables)

        if kind == "docx":
            validation = validate_docx_file(len(file_bytes), filename, content_type, settings, header)
            if not validation.is_valid:
                return ParseResult.fail(validation.error or "DOCX validation failed")
            if settings.docx_preserve_formatting:
                return parse_docx_with_formatting(file_bytes, options, settings, sink, tables)
            return parse_docx_file(file_bytes, options, settings, sink, tables)

        if kind == "txt":
            return parse_txt_file(file_bytes, filename, content_type, options, settings, sink, tables)

        return ParseResult.fail(UNSUPPORTED_FORMAT_ERROR, list(UNSUPPORTED_FORMAT_WARNINGS))
    except Exception:
        logger.exception("Resume parsing error")
        return ParseResult.fail(UNEXPECTED_ERROR, list(UNEXPECTED_WARNINGS))


# ============================================================================
# Supported types & preview
# ============================================================================

def get_supported_file_types(settings: Optional[Settings] = None) -> SupportedFileTypes:
    settings = settings or get_settings()
    return SupportedFileTypes(
        extensions=["pdf", "docx", "txt"],
        mime_types=[*PDF_MIME_TYPES, *DOCX_MIME_TYPES, "text/plain"],
        max_sizes={
            "pdf": round(settings.pdf_max_bytes / MB, 2),
            "docx": round(settings.docx_max_bytes / MB, 2),
            "txt": round(settings.txt_max_bytes / MB, 2),
        },
    )


def format_file_size(size: int) -> str:
    """
    Examples:
        0 -> "0 Bytes"
        1536 -> "1.5 KB"
        2097152 -> "2 MB"
    """
    if size <= 0:
        return "0 Bytes"

    units = ["Bytes", "KB", "MB", "GB"]
    i = 0
    while i < len(units) - 1 and size >= 1024 ** (i + 1):
        i += 1
    value = round(size / 1024 ** i, 2)
    return f"{value:g} {units[i]}"


def preview_file_content(
    file_bytes: bytes,
    filename: str,
    content_type: Optional[str] = None,
    last_modified: Optional[datetime] = None,
    settings: Optional[Settings] = None,
) -> FilePreview:
    settings = settings or get_settings()
    info = FileInfo(
        name=filename,
        type=content_type or "unknown",
        size=format_file_size(len(file_bytes)),
        last_modified=last_modified.strftime("%Y-%m-%d") if last_modified else None,
    )

    kind = detect_file_type(filename, content_type, file_bytes)
    if kind == "txt":
        try:
            text = file_bytes.decode("utf-8-sig")
        except UnicodeDecodeError:
            logger.warning("Preview failed for %r: not UTF-8", filename)
            return FilePreview(success=False, file_info=info, error="Failed to preview file content")
        limit = settings.preview_chars
        preview = text[:limit] + ("..." if len(text) > limit else "")
    elif kind in ("pdf", "docx"):
        preview = f"{kind.upper()} file - Content will be extracted during parsing"
    else:
        preview = "Unsupported file format"

    return FilePreview(success=True, preview=preview, file_info=info)
