"""
Text normalization for raw PDF/DOCX/TXT extraction output.

Two levels:
- normalize_whitespace(): line breaks, tabs, bullet glyphs, spacing around
  punctuation. Idempotent, safe for every source.
- normalize_text(): normalize_whitespace() plus, for PDFs only, structural
  line-break recovery (section headers, job titles, company names and MM/YYYY
  dates glued onto the previous line by the extractor). The PDF pass is not
  idempotent.
"""

import re
from typing import List, Pattern, Tuple

from resume_import.core.heuristics import DEFAULT_TABLES, HeuristicTables, header_keywords


# ============================================================================
# Whitespace rules
# ============================================================================

LINE_BREAK_RE = re.compile(r"\r\n|\r|\f")
BULLET_RE = re.compile(r"[•·▪▫‣⁃]")
SPACE_RUN_RE = re.compile(r"[ \u00a0]+")
SPACE_BEFORE_PUNCT_RE = re.compile(r" +([.,;:])")
COMMA_LETTER_RE = re.compile(r",(?=[A-Za-z])")
BLANK_RUN_RE = re.compile(r"\n{3,}")

# ============================================================================
# PDF-only rules
# ============================================================================

PAGE_NUMBER_LINE_RE = re.compile(r"^(?:page\s+\d+(?:\s+of\s+\d+)?|\d{1,3})$", re.IGNORECASE | re.MULTILINE)

# A break is only inserted after lowercase text, a digit, a period or a
# closing paren, i.e. where the previous visual line plausibly ended.
_BREAK_AFTER = r"(?<=[a-z0-9.)])"
DATE_BREAK_RE = re.compile(r"(?<=[A-Za-z.)]) +(?=(?:0?[1-9]|1[0-2])/\d{4}\b)")
# "San Francisco, CA" starting right after the text being split
LOCATION_AHEAD = r"[A-Z][A-Za-z.'-]*(?: [A-Z][A-Za-z.'-]*){0,2}, ?[A-Z]{2}(?![A-Za-z])"


def _normalize_line(line: str) -> str:
    line = SPACE_RUN_RE.sub(" ", line)
    line = SPACE_BEFORE_PUNCT_RE.sub(r"\1", line)
    line = COMMA_LETTER_RE.sub(", ", line)
    return line.strip()


def normalize_whitespace(text: str) -> str:
    """
    Canonical line-oriented text.

    - "\\r\\n", "\\r" and form feeds become "\\n"; tabs become spaces
    - bullet variants (• · ▪ ▫ ‣ ⁃) become "•"
    - per line: collapse spaces, drop spaces before . , ; : and add one after
      a comma glued to a letter, then strip
    - 3+ consecutive line breaks collapse to a single blank line
    """
    if not text:
        return ""

    text = LINE_BREAK_RE.sub("\n", text)
    text = text.replace("\t", " ")
    text = BULLET_RE.sub("•", text)
    text = "\n".join(_normalize_line(line) for line in text.split("\n"))
    text = BLANK_RUN_RE.sub("\n\n", text)
    return text.strip()


def _alternation(phrases: List[str]) -> str:
    ordered = sorted({p.upper() for p in phrases}, key=len, reverse=True)
    return "|".join(re.escape(p) for p in ordered)


def _pdf_break_patterns(tables: HeuristicTables) -> List[Tuple[Pattern[str], str]]:
    """(pattern, replacement) pairs, applied in order."""
    headers = _alternation(header_keywords())
    titles = _alternation(list(tables.job_titles.entries))
    companies = _alternation(list(tables.companies.entries))
    return [
        (re.compile(rf"{_BREAK_AFTER} +(?=(?:{headers})(?![A-Za-z]))"), "\n"),
        # "EXPERIENCE SOFTWARE ENGINEER" -> header, then its content
        (re.compile(rf"^((?:{headers}):?) +(?=\S)", re.MULTILINE), r"\1\n"),
        (re.compile(rf"{_BREAK_AFTER} +(?=(?:[A-Z][A-Z&/-]+ ){{0,3}}(?:{titles})S?(?![A-Za-z]))"), "\n"),
        (re.compile(rf"{_BREAK_AFTER} +(?=(?:[A-Z][A-Za-z0-9&'-]* ){{1,3}}(?:{companies})(?![A-Za-z]))"), "\n"),
        # "SOFTWARE ENGINEER ACME CORP" -> title, then company
        (
            re.compile(rf"(?<![A-Za-z])((?:{titles})S?) +(?=(?:[A-Z][A-Za-z0-9&'-]* ){{1,3}}(?:{companies})(?![A-Za-z]))"),
            r"\1\n",
        ),
        # "ACME CORP San Francisco, CA" -> company, then location
        (re.compile(rf"(?<![A-Za-z])((?:{companies})) +(?={LOCATION_AHEAD})"), r"\1\n"),
        (DATE_BREAK_RE, "\n"),
    ]


def _recover_pdf_structure(text: str, tables: HeuristicTables) -> str:
    text = PAGE_NUMBER_LINE_RE.sub("", text)
    for pattern, replacement in _pdf_break_patterns(tables):
        text = pattern.sub(replacement, text)
    return text


def normalize_text(raw: str, source: str = "txt", tables: HeuristicTables = DEFAULT_TABLES) -> str:
    """
    Normalize raw extracted text for the given source format (pdf, docx, txt).

    Examples (pdf):
    - "Built APIs SENIOR SOFTWARE ENGINEER" → "Built APIs\\nSENIOR SOFTWARE ENGINEER"
    - "Austin, TX 01/2020 - Present" → "Austin, TX\\n01/2020 - Present"
    """
    if not raw:
        return ""

    text = normalize_whitespace(raw)
    if source == "pdf":
        text = normalize_whitespace(_recover_pdf_structure(text, tables))
    return text
