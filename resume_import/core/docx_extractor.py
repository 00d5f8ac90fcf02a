"""
DOCX text extraction.

Two strategies, used by the DOCX format wrappers:
- extract_docx_text(): python-docx paragraphs plus table rows (cells joined by " | ")
- extract_docx_html_text(): mammoth HTML conversion flattened back to text, which
  keeps list items as "•" bullets and reports mammoth's conversion messages
"""

import html
import logging
import re
from dataclasses import dataclass, field
from io import BytesIO
from typing import List, Tuple

import mammoth
from docx import Document

from resume_import.core.errors import ExtractionError, ExtractionFailure, classify_docx_error

logger = logging.getLogger(__name__)


DOCX_ERROR_MESSAGES = {
    ExtractionFailure.INVALID_FORMAT: "Invalid DOCX file format. The file may be corrupted or not a valid Word document.",
    ExtractionFailure.ENCRYPTED: "DOCX file is password-protected. Please use an unprotected document.",
    ExtractionFailure.CORRUPTED: "DOCX file appears to be corrupted. Please try a different file.",
    ExtractionFailure.EMPTY: "No text content found in DOCX file. The document might be empty or corrupted.",
}

P_CLOSE_RE = re.compile(r"</p>", re.IGNORECASE)
HEADING_CLOSE_RE = re.compile(r"</h[1-6]>", re.IGNORECASE)
BR_RE = re.compile(r"<br[^>]*>", re.IGNORECASE)
LI_OPEN_RE = re.compile(r"<li[^>]*>", re.IGNORECASE)
LI_CLOSE_RE = re.compile(r"</li>", re.IGNORECASE)
TR_CLOSE_RE = re.compile(r"</tr>", re.IGNORECASE)
TAG_RE = re.compile(r"<[^>]+>")


@dataclass
class HtmlExtraction:
    text: str
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def _raise_for(exc: Exception, docx_bytes: bytes) -> None:
    kind = classify_docx_error(exc, docx_bytes)
    logger.warning("DOCX extraction failed (%s): %s", kind, exc)
    raise ExtractionError(kind, DOCX_ERROR_MESSAGES[kind]) from exc


def extract_docx_lines(docx_bytes: bytes) -> List[Tuple[int, str]]:
    """
    Deterministically extract non-empty paragraph text from a DOCX, followed
    by table rows. Returns list of (index, text).
    """
    try:
        doc = Document(BytesIO(docx_bytes))
    except Exception as exc:
        _raise_for(exc, docx_bytes)

    out: List[Tuple[int, str]] = []
    for i, p in enumerate(doc.paragraphs):
        t = (p.text or "").strip()
        if t:
            out.append((i, t))

    offset = len(doc.paragraphs)
    for table in doc.tables:
        for row in table.rows:
            row_text = " | ".join(cell.text.strip() for cell in row.cells if cell.text.strip())
            if row_text:
                out.append((offset, row_text))
            offset += 1
    return out


def extract_docx_text(docx_bytes: bytes) -> str:
    text = "\n".join(t for _, t in extract_docx_lines(docx_bytes))
    if not text.strip():
        raise ExtractionError(ExtractionFailure.EMPTY, DOCX_ERROR_MESSAGES[ExtractionFailure.EMPTY])
    return text


def html_to_clean_text(markup: str) -> str:
    """
    Flatten mammoth HTML into line-oriented text.

    Paragraph/heading ends and <br> become line breaks, <li> becomes "• ",
    remaining tags are dropped and entities decoded.
    """
    text = P_CLOSE_RE.sub("\n", markup)
    text = HEADING_CLOSE_RE.sub("\n", text)
    text = BR_RE.sub("\n", text)
    text = LI_OPEN_RE.sub("• ", text)
    text = LI_CLOSE_RE.sub("\n", text)
    text = TR_CLOSE_RE.sub("\n", text)
    text = TAG_RE.sub("", text)
    text = html.unescape(text).replace("\xa0", " ")
    lines = [re.sub(r"[ \t]+", " ", line).strip() for line in text.split("\n")]
    return "\n".join(line for line in lines if line)


def extract_docx_html_text(docx_bytes: bytes) -> HtmlExtraction:
    """Convert with mammoth and flatten. Empty documents yield empty text, not an error."""
    try:
        result = mammoth.convert_to_html(BytesIO(docx_bytes))
    except Exception as exc:
        _raise_for(exc, docx_bytes)

    extraction = HtmlExtraction(text=html_to_clean_text(result.value or ""))
    for message in result.messages:
        if message.type == "error":
            extraction.errors.append(message.message)
        else:
            extraction.warnings.append(message.message)

    logger.debug(
        "mammoth conversion: %d chars, %d errors, %d warnings",
        len(extraction.text), len(extraction.errors), len(extraction.warnings),
    )
    return extraction
