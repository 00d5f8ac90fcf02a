"""Tests for PDF extraction failures and their classification."""

import zipfile

import pytest
from docx.opc.exceptions import PackageNotFoundError
from pdfminer.pdfdocument import PDFPasswordIncorrect
from pdfminer.pdfparser import PDFSyntaxError

from resume_import.core.errors import (
    OLE_SIGNATURE,
    ExtractionError,
    ExtractionFailure,
    classify_docx_error,
    classify_pdf_error,
)
from resume_import.core.pdf_extractor import PDF_ERROR_MESSAGES, extract_pdf_text


def test_page_without_text_is_empty(make_pdf):
    with pytest.raises(ExtractionError) as excinfo:
        extract_pdf_text(make_pdf([]))
    assert excinfo.value.kind == ExtractionFailure.EMPTY
    assert excinfo.value.message == PDF_ERROR_MESSAGES[ExtractionFailure.EMPTY]


def test_garbage_bytes_are_not_a_pdf():
    garbage = b"%PDF-1.4\n" + b"this is not really a pdf " * 100
    with pytest.raises(ExtractionError) as excinfo:
        extract_pdf_text(garbage)
    assert excinfo.value.kind in (ExtractionFailure.INVALID_FORMAT, ExtractionFailure.CORRUPTED)
    assert excinfo.value.__cause__ is not None


class TestClassifyPdfError:

    def test_password_error_is_encrypted(self):
        assert classify_pdf_error(PDFPasswordIncorrect()) == ExtractionFailure.ENCRYPTED

    def test_wrapped_password_error_is_encrypted(self):
        outer = RuntimeError("pdfplumber failed")
        outer.__cause__ = PDFPasswordIncorrect()
        assert classify_pdf_error(outer) == ExtractionFailure.ENCRYPTED

    def test_password_in_message_is_encrypted(self):
        assert classify_pdf_error(ValueError("File has not been decrypted: password required")) == (
            ExtractionFailure.ENCRYPTED
        )

    def test_syntax_error_is_invalid_format(self):
        assert classify_pdf_error(PDFSyntaxError("No /Root object!")) == ExtractionFailure.INVALID_FORMAT

    def test_anything_else_is_corrupted(self):
        assert classify_pdf_error(KeyError("Length")) == ExtractionFailure.CORRUPTED


class TestClassifyDocxError:

    def test_ole_container_is_encrypted(self):
        data = OLE_SIGNATURE + b"\x00" * 100
        assert classify_docx_error(zipfile.BadZipFile("bad"), data) == ExtractionFailure.ENCRYPTED

    def test_bad_zip_is_invalid_format(self):
        assert classify_docx_error(zipfile.BadZipFile("bad"), b"PK\x03\x04") == ExtractionFailure.INVALID_FORMAT

    def test_missing_package_is_invalid_format(self):
        assert classify_docx_error(PackageNotFoundError("nope"), b"") == ExtractionFailure.INVALID_FORMAT

    def test_anything_else_is_corrupted(self):
        assert classify_docx_error(KeyError("word/document.xml"), b"PK\x03\x04") == ExtractionFailure.CORRUPTED
