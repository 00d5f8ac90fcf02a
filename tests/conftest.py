"""Shared fixtures: in-memory DOCX and PDF builders plus a reference resume."""

from io import BytesIO
from typing import List, Optional

import pytest
from docx import Document


JANE_SMITH_LINES = [
    "Jane Smith",
    "jane@x.com",
    "(415) 555-0100",
    "EXPERIENCE",
    "SOFTWARE ENGINEER",
    "ACME CORP",
    "San Francisco, CA",
    "01/2020 - Present",
    "• Built things",
]


def build_docx(paragraphs: List[str], table_rows: Optional[List[List[str]]] = None) -> bytes:
    doc = Document()
    for text in paragraphs:
        doc.add_paragraph(text)
    if table_rows:
        table = doc.add_table(rows=len(table_rows), cols=len(table_rows[0]))
        for r, row in enumerate(table_rows):
            for c, value in enumerate(row):
                table.cell(r, c).text = value
    buf = BytesIO()
    doc.save(buf)
    return buf.getvalue()


def _pdf_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def build_pdf(lines: List[str], font_size: int = 11, leading: int = 16) -> bytes:
    """
    Single-page PDF with one Helvetica text line per entry, top to bottom.

    Offsets in the xref table are computed from the actual bytes; a comment
    pads the file past the 1 KB validation minimum.
    """
    ops = ["BT", f"/F1 {font_size} Tf", f"{leading} TL", "72 720 Td"]
    for line in lines:
        ops.append(f"({_pdf_escape(line)}) Tj")
        ops.append("T*")
    ops.append("ET")
    stream = "\n".join(ops).encode("cp1252")

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length " + str(len(stream)).encode() + b" >>\nstream\n" + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica /Encoding /WinAnsiEncoding >>",
    ]

    out = bytearray(b"%PDF-1.4\n%" + b"0" * 1100 + b"\n")
    offsets = []
    for i, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{i} 0 obj\n".encode() + body + b"\nendobj\n"

    xref_at = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\nstartxref\n{xref_at}\n%%EOF\n".encode()
    return bytes(out)


@pytest.fixture
def jane_smith_text() -> str:
    return "\n".join(JANE_SMITH_LINES)


@pytest.fixture
def jane_smith_docx() -> bytes:
    return build_docx(JANE_SMITH_LINES)


@pytest.fixture
def jane_smith_pdf() -> bytes:
    # Helvetica/WinAnsi has a bullet glyph, but a dash bullet keeps the fixture ASCII
    lines = [line.replace("• ", "- ") for line in JANE_SMITH_LINES]
    return build_pdf(lines)


@pytest.fixture
def make_docx():
    return build_docx


@pytest.fixture
def make_pdf():
    return build_pdf
