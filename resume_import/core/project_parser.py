"""
Projects and certifications parsers.

Projects follow a name line + detail lines layout:

    Resume Parser - Python, FastAPI          <- name (+ technologies)
    https://github.com/jane/resume-parser    <- url
    01/2023 - 03/2023                        <- dates
    • Parsed resumes into structured data    <- description
    Tech Stack: pdfplumber, pydantic         <- technologies

Certifications are one per line: name, issuer, date, url.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Set

from resume_import.core.diagnostics import DiagnosticSink, resolve_sink
from resume_import.core.heuristics import header_family, strip_header
from resume_import.core.pattern_extractors import find_date_range, strip_bullet
from resume_import.core.schemas import CertificationEntry, ProjectEntry


URL_RE = re.compile(r"(?:https?://|www\.)\S+|\b(?:github|gitlab|bitbucket)\.(?:com|org|io)/\S+", re.IGNORECASE)
TECH_LABEL_RE = re.compile(r"^(?:technologies|tech stack|stack|built with|tools|tech)\s*:\s*", re.IGNORECASE)
NAME_SUFFIX_RE = re.compile(r"\s+(?:-|–|—|\|)\s+")
ISSUER_SPLIT_RE = re.compile(r"\s+(?:-|–|—|\|)\s+|\s+by\s+|,\s+", re.IGNORECASE)
ISSUED_PREFIX_RE = re.compile(r"^(?:issued|earned|obtained|completed)\b\s*", re.IGNORECASE)

MAX_NAME_LEN = 60
MAX_NAME_WORDS = 8
_TRIM = " \t,;:|-–—"


def _split_list(text: str) -> List[str]:
    return [t.strip(_TRIM) for t in re.split(r"\s*[,;/|]\s*", text) if t.strip(_TRIM)]


def _pop_url(text: str):
    m = URL_RE.search(text)
    if not m:
        return text, None
    url = m.group(0).rstrip(".,;)")
    rest = (text[:m.start()] + " " + text[m.end():]).strip(_TRIM)
    return " ".join(rest.split()), url


# ============================================================================
# Projects
# ============================================================================

@dataclass
class _ProjectDraft:
    name: str
    description: List[str] = field(default_factory=list)
    technologies: List[str] = field(default_factory=list)
    url: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    @property
    def has_details(self) -> bool:
        return bool(self.description or self.technologies or self.url or self.start_date or self.end_date)

    def add_technologies(self, items: List[str]) -> None:
        known = {t.lower() for t in self.technologies}
        for item in items:
            if item.lower() not in known:
                known.add(item.lower())
                self.technologies.append(item)

    def to_entry(self) -> ProjectEntry:
        return ProjectEntry(
            name=self.name,
            description=" ".join(self.description) or None,
            technologies=self.technologies,
            url=self.url,
            start_date=self.start_date,
            end_date=self.end_date,
        )


def _is_name_line(text: str) -> bool:
    return (
        len(text) <= MAX_NAME_LEN
        and len(text.split()) <= MAX_NAME_WORDS
        and text[:1].isupper()
        and not text.endswith(".")
    )


def _start_project(line: str) -> _ProjectDraft:
    parts = NAME_SUFFIX_RE.split(line, maxsplit=1)
    draft = _ProjectDraft(name=parts[0].strip(_TRIM))
    if len(parts) == 2:
        suffix = parts[1].strip()
        if "," in suffix:
            draft.add_technologies(_split_list(suffix))
        elif suffix:
            draft.description.append(suffix)
    return draft


def parse_projects_block(text: str, sink: Optional[DiagnosticSink] = None) -> List[ProjectEntry]:
    sink = resolve_sink(sink)
    entries: List[ProjectEntry] = []
    seen: Set[tuple] = set()
    draft: Optional[_ProjectDraft] = None

    def flush() -> None:
        nonlocal draft
        if draft is not None and draft.name:
            entry = draft.to_entry()
            if entry.dedupe_key() in seen:
                sink("projects.duplicate", {"name": entry.name})
            else:
                seen.add(entry.dedupe_key())
                entries.append(entry)
        draft = None

    for raw in text.split("\n"):
        line = raw.strip()
        if not line:
            continue
        family = header_family(line)
        if family == "projects":
            line = strip_header(line)
            if not line:
                continue
        elif family:
            break

        bullet = strip_bullet(line)
        if bullet is not None:
            if draft is not None and bullet:
                draft.description.append(bullet)
            continue

        tech = TECH_LABEL_RE.match(line)
        if tech:
            if draft is not None:
                draft.add_technologies(_split_list(line[tech.end():]))
            continue

        line, url = _pop_url(line)
        dates = find_date_range(line)
        if dates is not None:
            line = dates.remainder

        if line and _is_name_line(line) and (draft is None or draft.has_details):
            flush()
            draft = _start_project(line)
        elif line and draft is not None:
            draft.description.append(line)

        if draft is not None:
            if url and not draft.url:
                draft.url = url
            if dates is not None and not (draft.start_date or draft.end_date):
                draft.start_date, draft.end_date = dates.start, dates.end

    flush()
    sink("projects.parsed", {"count": len(entries)})
    return entries


# ============================================================================
# Certifications
# ============================================================================

def parse_certification_line(line: str) -> Optional[CertificationEntry]:
    """
    Examples:
        "AWS Certified Solutions Architect - Amazon Web Services, 2021"
            -> name="AWS Certified Solutions Architect", issuer="Amazon Web Services", date="2021"
        "CKA by The Linux Foundation" -> name="CKA", issuer="The Linux Foundation"
    """
    bullet = strip_bullet(line)
    text = (bullet if bullet is not None else line).strip()
    text, url = _pop_url(text)

    date = None
    dates = find_date_range(text)
    if dates is not None:
        date = dates.end or dates.start
        text = dates.remainder
    text = ISSUED_PREFIX_RE.sub("", text).strip(_TRIM)
    if len(text) < 3:
        return None

    parts = ISSUER_SPLIT_RE.split(text, maxsplit=1)
    name = parts[0].strip(_TRIM)
    issuer = parts[1].strip(_TRIM) if len(parts) == 2 else None
    if issuer:
        issuer = ISSUED_PREFIX_RE.sub("", issuer).strip(_TRIM) or None
    return CertificationEntry(name=name, issuer=issuer, date=date, url=url)


def parse_certifications_block(text: str, sink: Optional[DiagnosticSink] = None) -> List[CertificationEntry]:
    sink = resolve_sink(sink)
    entries: List[CertificationEntry] = []
    seen: Set[tuple] = set()

    for raw in text.split("\n"):
        line = raw.strip()
        if not line:
            continue
        family = header_family(line)
        if family == "certifications":
            line = strip_header(line)
            if not line:
                continue
        elif family:
            break

        entry = parse_certification_line(line)
        if entry is None:
            continue
        if entry.dedupe_key() in seen:
            sink("certifications.duplicate", {"name": entry.name})
            continue
        seen.add(entry.dedupe_key())
        entries.append(entry)

    return entries
