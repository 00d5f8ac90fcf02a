"""
Exception types raised by the extraction stages.

Library-specific failures (pdfminer, python-docx, zipfile) are mapped onto a
small set of kinds so the format wrappers can produce a precise message
without pattern-matching on third-party error text.
"""

import zipfile
from typing import Iterator

from docx.opc.exceptions import PackageNotFoundError
from pdfminer.pdfdocument import PDFEncryptionError, PDFPasswordIncorrect
from pdfminer.pdfparser import PDFSyntaxError


# OLE compound file signature; password-protected OOXML files are wrapped in one
OLE_SIGNATURE = b"\xD0\xCF\x11\xE0"


class ExtractionFailure:
    INVALID_FORMAT = "invalid_format"
    ENCRYPTED = "encrypted"
    CORRUPTED = "corrupted"
    EMPTY = "empty"


class ResumeImportError(Exception):
    """Base class for pipeline errors."""


class ExtractionError(ResumeImportError):
    """The format reader could not produce any text."""

    def __init__(self, kind: str, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


def _exception_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield exc, its wrapped args and its cause/context chain (once each)."""
    seen = set()
    stack = [exc]
    while stack:
        current = stack.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        for arg in getattr(current, "args", ()):
            if isinstance(arg, BaseException):
                stack.append(arg)
        if current.__cause__ is not None:
            stack.append(current.__cause__)
        if current.__context__ is not None:
            stack.append(current.__context__)


def classify_pdf_error(exc: BaseException) -> str:
    """Map a pdfplumber/pdfminer exception onto an ExtractionFailure kind."""
    chain = list(_exception_chain(exc))
    for e in chain:
        if isinstance(e, (PDFPasswordIncorrect, PDFEncryptionError)):
            return ExtractionFailure.ENCRYPTED
    for e in chain:
        text = str(e).lower()
        if "password" in text or "encrypt" in text:
            return ExtractionFailure.ENCRYPTED
    for e in chain:
        if isinstance(e, PDFSyntaxError):
            return ExtractionFailure.INVALID_FORMAT
        if "no /root object" in str(e).lower():
            return ExtractionFailure.INVALID_FORMAT
    return ExtractionFailure.CORRUPTED


def classify_docx_error(exc: BaseException, data: bytes) -> str:
    """Map a python-docx/zipfile exception onto an ExtractionFailure kind."""
    if data.startswith(OLE_SIGNATURE):
        return ExtractionFailure.ENCRYPTED
    for e in _exception_chain(exc):
        if isinstance(e, (zipfile.BadZipFile, PackageNotFoundError)):
            return ExtractionFailure.INVALID_FORMAT
        if "password" in str(e).lower():
            return ExtractionFailure.ENCRYPTED
    return ExtractionFailure.CORRUPTED
