import logging
from io import BytesIO
from typing import List, Optional

import pdfplumber

from resume_import.core.config import Settings, get_settings
from resume_import.core.errors import ExtractionError, ExtractionFailure, classify_pdf_error
from resume_import.core.pdf_character_extractor import (
    reconstruct_document_text,
    reconstruct_page_text,
    runs_from_words,
)

logger = logging.getLogger(__name__)


PDF_ERROR_MESSAGES = {
    ExtractionFailure.INVALID_FORMAT: "Invalid PDF file format. Please ensure the file is a valid PDF document.",
    ExtractionFailure.ENCRYPTED: "PDF file is encrypted or password-protected. Please use an unprotected PDF.",
    ExtractionFailure.CORRUPTED: "PDF file appears to be corrupted. Please try a different file.",
    ExtractionFailure.EMPTY: "No text content found in PDF file. The file might be image-based or corrupted.",
}


def _page_texts(pdf_bytes: bytes, settings: Settings) -> List[str]:
    texts: List[str] = []
    with pdfplumber.open(BytesIO(pdf_bytes)) as pdf:
        # Strictly in page order; page N+1 is never read before page N
        for page_i, page in enumerate(pdf.pages, start=1):
            words = page.extract_words(keep_blank_chars=True, extra_attrs=["size"])
            runs = runs_from_words(words, page.height)
            texts.append(
                reconstruct_page_text(
                    runs,
                    page.height,
                    line_tolerance=settings.pdf_line_tolerance,
                    space_gap_ratio=settings.pdf_space_gap_ratio,
                )
            )
            logger.debug("pdf page %d: %d runs", page_i, len(runs))
    return texts


def extract_pdf_text(pdf_bytes: bytes, settings: Optional[Settings] = None) -> str:
    """
    Extract reading-order text from a PDF.

    Raises ExtractionError (invalid_format / encrypted / corrupted / empty)
    instead of leaking pdfminer exceptions.
    """
    settings = settings or get_settings()

    try:
        texts = _page_texts(pdf_bytes, settings)
    except Exception as exc:
        kind = classify_pdf_error(exc)
        logger.warning("PDF extraction failed (%s): %s", kind, exc)
        raise ExtractionError(kind, PDF_ERROR_MESSAGES[kind]) from exc

    text = reconstruct_document_text(texts)
    if not text.strip():
        raise ExtractionError(ExtractionFailure.EMPTY, PDF_ERROR_MESSAGES[ExtractionFailure.EMPTY])

    logger.info("Extracted %d chars from %d PDF page(s)", len(text), len(texts))
    return text
