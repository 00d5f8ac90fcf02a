"""
Pre-extraction gates: type and size checks per format.

These only look at metadata (size, name, declared type, leading bytes); no
extractor is invoked until a gate has passed.
"""

from typing import Iterable, Optional, Tuple, Union

from resume_import.core.config import MB, Settings, get_settings
from resume_import.core.schemas import ValidationResult


PDF_MIME_TYPES = ("application/pdf",)
DOCX_MIME_TYPES = (
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-word.document.macroEnabled.12",
)
TXT_MIME_TYPES = ("text/plain", "text/txt")

# Macro-enabled documents share the OOXML package layout
DOCX_EXTENSIONS = (".docx", ".docm")

PDF_SIGNATURE = b"%PDF-"
ZIP_SIGNATURE = b"PK\x03\x04"


def _matches_type(
    filename: str,
    content_type: Optional[str],
    mime_types: Iterable[str],
    extensions: Union[str, Tuple[str, ...]],
) -> bool:
    declared = (content_type or "").split(";")[0].strip().lower()
    if declared and declared in {m.lower() for m in mime_types}:
        return True
    return (filename or "").lower().endswith(extensions)


def _size_error(label: str, size: int, max_bytes: int) -> Optional[str]:
    if size > max_bytes:
        return (
            f"{label} file size exceeds {max_bytes / MB:g}MB limit. "
            f"Current size: {size / MB:.1f}MB."
        )
    return None


def validate_pdf_file(
    size: int,
    filename: str,
    content_type: Optional[str] = None,
    settings: Optional[Settings] = None,
    header: bytes = b"",
) -> ValidationResult:
    settings = settings or get_settings()

    if not (_matches_type(filename, content_type, PDF_MIME_TYPES, ".pdf") or header.startswith(PDF_SIGNATURE)):
        return ValidationResult(is_valid=False, error="File must be a PDF document.")

    error = _size_error("PDF", size, settings.pdf_max_bytes)
    if error:
        return ValidationResult(is_valid=False, error=error)

    if size < settings.pdf_min_bytes:
        return ValidationResult(is_valid=False, error="PDF file appears to be empty or too small.")

    return ValidationResult(is_valid=True)


def validate_docx_file(
    size: int,
    filename: str,
    content_type: Optional[str] = None,
    settings: Optional[Settings] = None,
    header: bytes = b"",
) -> ValidationResult:
    settings = settings or get_settings()

    if not (_matches_type(filename, content_type, DOCX_MIME_TYPES, DOCX_EXTENSIONS) or header.startswith(ZIP_SIGNATURE)):
        return ValidationResult(is_valid=False, error="File must be a DOCX document (Microsoft Word format).")

    error = _size_error("DOCX", size, settings.docx_max_bytes)
    if error:
        return ValidationResult(is_valid=False, error=error)

    # Even an empty OOXML package is a couple of KB
    if size < settings.docx_min_bytes:
        return ValidationResult(is_valid=False, error="DOCX file appears to be empty or corrupted.")

    return ValidationResult(is_valid=True)


def validate_txt_file(
    size: int,
    filename: str,
    content_type: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> ValidationResult:
    settings = settings or get_settings()

    if not _matches_type(filename, content_type, TXT_MIME_TYPES, ".txt"):
        return ValidationResult(is_valid=False, error="File must be a plain text (.txt) file.")

    error = _size_error("Text", size, settings.txt_max_bytes)
    if error:
        return ValidationResult(is_valid=False, error=error)

    if size < settings.txt_min_bytes:
        return ValidationResult(is_valid=False, error="Text file appears to be empty.")

    return ValidationResult(is_valid=True)
