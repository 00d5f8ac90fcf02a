"""
Tests for the file-level entry points: detection, validation gates, format
wrappers and the preview helpers.
"""

from datetime import datetime
from unittest import mock

import pytest

from resume_import.core.config import MB, Settings
from resume_import.core.confidence_calculator import FORMAT_HINTS, LOW_CONFIDENCE_WARNINGS
from resume_import.core.resume_parser import (
    TXT_EMPTY_ERROR,
    TXT_EMPTY_WARNINGS,
    TXT_NOT_MEANINGFUL_ERROR,
    TXT_READ_ERROR,
    TXT_READ_WARNINGS,
    UNEXPECTED_ERROR,
    UNEXPECTED_WARNINGS,
    UNSUPPORTED_FORMAT_ERROR,
    UNSUPPORTED_FORMAT_WARNINGS,
    detect_file_type,
    format_file_size,
    get_supported_file_types,
    parse_resume_file,
    preview_file_content,
)
from resume_import.core.validation import validate_docx_file, validate_pdf_file, validate_txt_file


# ===== FORMAT DETECTION =====

@pytest.mark.parametrize(
    "filename,content_type,file_bytes,expected",
    [
        ("resume.pdf", "application/pdf", b"", "pdf"),
        ("upload", "application/octet-stream", b"%PDF-1.7\n", "pdf"),
        ("resume.docx", None, b"", "docx"),
        ("resume.docm", None, b"", "docx"),
        ("upload", None, b"PK\x03\x04rest", "docx"),
        ("notes.txt", "text/plain", b"", "txt"),
        ("resume.pdf", "text/plain", b"", "txt"),
        ("resume.rtf", "application/rtf", b"{\\rtf1", "unknown"),
    ],
)
def test_detect_file_type(filename, content_type, file_bytes, expected):
    assert detect_file_type(filename, content_type, file_bytes) == expected


# ===== VALIDATION GATES =====

class TestValidation:

    def test_oversized_pdf_never_reaches_extractor(self):
        data = b"%PDF-1.4\n" + b"0" * (15 * MB - 9)
        with mock.patch("resume_import.core.pdf_extractor.extract_pdf_text") as extractor:
            result = parse_resume_file(data, "resume.pdf", "application/pdf")
        extractor.assert_not_called()
        assert not result.success
        assert result.error == "PDF file size exceeds 10MB limit. Current size: 15.0MB."

    def test_tiny_pdf(self):
        result = parse_resume_file(b"%PDF-1.4\n", "resume.pdf", "application/pdf")
        assert result.error == "PDF file appears to be empty or too small."

    def test_pdf_type_check(self):
        result = validate_pdf_file(5000, "resume.doc", "application/msword")
        assert not result.is_valid
        assert result.error == "File must be a PDF document."

    def test_pdf_signature_is_enough(self):
        assert validate_pdf_file(5000, "upload", None, header=b"%PDF-1.7").is_valid

    def test_small_docx(self):
        result = validate_docx_file(100, "resume.docx")
        assert result.error == "DOCX file appears to be empty or corrupted."

    def test_macro_enabled_extension_passes_docx_gate(self):
        assert validate_docx_file(5000, "resume.docm").is_valid

    def test_txt_size_limit_from_settings(self):
        settings = Settings(txt_max_bytes=MB)
        result = validate_txt_file(2 * MB, "resume.txt", "text/plain", settings)
        assert result.error == "Text file size exceeds 1MB limit. Current size: 2.0MB."

    def test_txt_type_check(self):
        assert validate_txt_file(100, "resume.md", "text/markdown").error == "File must be a plain text (.txt) file."


# ===== FORMAT WRAPPERS =====

def test_unknown_format():
    result = parse_resume_file(b"{\\rtf1 Jane Smith}", "resume.rtf", "application/rtf")
    assert not result.success
    assert result.error == UNSUPPORTED_FORMAT_ERROR
    assert result.warnings == UNSUPPORTED_FORMAT_WARNINGS


def test_whitespace_only_txt():
    result = parse_resume_file(b" \n\t " * 10, "resume.txt", "text/plain")
    assert not result.success
    assert result.error == TXT_EMPTY_ERROR
    assert result.warnings == TXT_EMPTY_WARNINGS


def test_txt_that_is_not_utf8():
    result = parse_resume_file(b"Jane Smith \xff\xfe resume text", "resume.txt", "text/plain")
    assert result.error == TXT_READ_ERROR
    assert result.warnings == TXT_READ_WARNINGS


def test_jane_smith_txt_end_to_end(jane_smith_text):
    result = parse_resume_file(jane_smith_text.encode(), "resume.txt", "text/plain")
    assert result.success, result.error
    entry = result.data.sections.experience[0]
    assert (entry.title, entry.company, entry.location) == ("SOFTWARE ENGINEER", "ACME CORP", "San Francisco, CA")
    assert (entry.start_date, entry.end_date, entry.current) == ("01/2020", "Present", True)
    assert entry.description == "Built things"


def test_txt_with_byte_order_mark(jane_smith_text):
    result = parse_resume_file(b"\xef\xbb\xbf" + jane_smith_text.encode(), "resume.txt", "text/plain")
    assert result.success
    assert result.data.personal_info.full_name == "Jane Smith"


def test_txt_without_structure():
    result = parse_resume_file(b"lorem ipsum dolor sit amet", "resume.txt", "text/plain")
    assert not result.success
    assert result.error == TXT_NOT_MEANINGFUL_ERROR


def test_low_confidence_txt_still_succeeds():
    result = parse_resume_file(b"jane@x.com\nSome text here", "resume.txt", "text/plain")
    assert result.success
    assert result.data.personal_info.email == "jane@x.com"
    assert result.data.confidence < 0.6
    assert result.warnings == LOW_CONFIDENCE_WARNINGS + [FORMAT_HINTS["txt"]]


def test_good_txt_has_no_warnings(jane_smith_text):
    result = parse_resume_file(jane_smith_text.encode(), "resume.txt", "text/plain")
    assert result.success
    assert result.warnings is None


def test_pdf_end_to_end(jane_smith_pdf):
    result = parse_resume_file(jane_smith_pdf, "resume.pdf", "application/pdf")
    assert result.success, result.error
    data = result.data
    assert data.personal_info.full_name == "Jane Smith"
    assert data.personal_info.email == "jane@x.com"
    assert data.sections.experience[0].title == "SOFTWARE ENGINEER"
    assert data.sections.experience[0].company == "ACME CORP"


def test_pdf_detected_from_bytes_alone(jane_smith_pdf):
    result = parse_resume_file(jane_smith_pdf, "upload", "application/octet-stream")
    assert result.success


def test_unexpected_error_is_contained():
    with mock.patch("resume_import.core.resume_parser.detect_file_type", side_effect=RuntimeError("boom")):
        result = parse_resume_file(b"Jane Smith\njane@x.com", "resume.txt", "text/plain")
    assert not result.success
    assert result.error == UNEXPECTED_ERROR
    assert result.warnings == UNEXPECTED_WARNINGS


# ===== SUPPORTED TYPES & PREVIEW =====

@pytest.mark.parametrize(
    "size,expected",
    [(0, "0 Bytes"), (512, "512 Bytes"), (1536, "1.5 KB"), (2 * MB, "2 MB")],
)
def test_format_file_size(size, expected):
    assert format_file_size(size) == expected


def test_supported_file_types():
    supported = get_supported_file_types(Settings())
    assert supported.extensions == ["pdf", "docx", "txt"]
    assert "application/pdf" in supported.mime_types
    assert supported.max_sizes == {"pdf": 10, "docx": 10, "txt": 5}


def test_preview_truncates_text():
    preview = preview_file_content(b"x" * 600, "resume.txt", "text/plain", last_modified=datetime(2024, 3, 1))
    assert preview.success
    assert preview.preview == "x" * 500 + "..."
    assert preview.file_info.size == "600 Bytes"
    assert preview.file_info.last_modified == "2024-03-01"


def test_preview_binary_formats(jane_smith_pdf):
    preview = preview_file_content(jane_smith_pdf, "resume.pdf", "application/pdf")
    assert preview.preview == "PDF file - Content will be extracted during parsing"


def test_preview_unsupported():
    preview = preview_file_content(b"{\\rtf1}", "resume.rtf", "application/rtf")
    assert preview.preview == "Unsupported file format"
