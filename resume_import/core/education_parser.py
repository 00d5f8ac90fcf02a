"""
Education parsing module for extracting education entries from a section block.

Same machine shape as the experience parser:

    SEEKING_ENTRY -> EXPECTING_DETAILS -> EXPECTING_LOCATION -> EXPECTING_DATES

An entry starts on an institution line or a degree line; the other half of the
pair is the "detail". A GPA is captured wherever it appears inside the entry,
and a lone date is read as the graduation (end) date.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple

from resume_import.core.diagnostics import DiagnosticSink, resolve_sink
from resume_import.core.heuristics import DEFAULT_TABLES, HeuristicTables, header_family, strip_header
from resume_import.core.pattern_extractors import DateRange, find_date_range, is_location_line, strip_bullet
from resume_import.core.schemas import EducationEntry


class EducationState(Enum):
    SEEKING_ENTRY = "seeking_entry"
    EXPECTING_DETAILS = "expecting_details"
    EXPECTING_LOCATION = "expecting_location"
    EXPECTING_DATES = "expecting_dates"
    DONE = "done"


class EducationLineKind(Enum):
    HEADER = "header"
    ENTRY_START = "entry_start"  # institution or degree that opens a new entry
    FULL_ENTRY = "full_entry"  # institution and degree on one line
    DETAIL = "detail"  # the missing half of the current entry
    LOCATION = "location"
    DATE_RANGE = "date_range"
    GPA = "gpa"
    OTHER = "other"


_ACTIVE = (
    EducationState.SEEKING_ENTRY,
    EducationState.EXPECTING_DETAILS,
    EducationState.EXPECTING_LOCATION,
    EducationState.EXPECTING_DATES,
)

EDUCATION_TRANSITIONS: Dict[Tuple[EducationState, EducationLineKind], EducationState] = {
    **{(s, EducationLineKind.HEADER): EducationState.DONE for s in _ACTIVE},
    **{(s, EducationLineKind.ENTRY_START): EducationState.EXPECTING_DETAILS for s in _ACTIVE},
    **{(s, EducationLineKind.FULL_ENTRY): EducationState.EXPECTING_LOCATION for s in _ACTIVE},
    (EducationState.EXPECTING_DETAILS, EducationLineKind.DETAIL): EducationState.EXPECTING_LOCATION,
    (EducationState.EXPECTING_DETAILS, EducationLineKind.LOCATION): EducationState.EXPECTING_DATES,
    (EducationState.EXPECTING_LOCATION, EducationLineKind.LOCATION): EducationState.EXPECTING_DATES,
    (EducationState.EXPECTING_DETAILS, EducationLineKind.DATE_RANGE): EducationState.SEEKING_ENTRY,
    (EducationState.EXPECTING_LOCATION, EducationLineKind.DATE_RANGE): EducationState.SEEKING_ENTRY,
    (EducationState.EXPECTING_DATES, EducationLineKind.DATE_RANGE): EducationState.SEEKING_ENTRY,
}


def next_state(state: EducationState, kind: EducationLineKind) -> EducationState:
    return EDUCATION_TRANSITIONS.get((state, kind), state)


# ===== FIELD EXTRACTION =====

GPA_RE = re.compile(
    r"\bGPA\s*:?\s*(?P<gpa>\d\.\d{1,2})(?:\s*/\s*\d(?:\.\d{1,2})?)?"
    r"|(?P<gpa_after>\d\.\d{1,2})(?:\s*/\s*\d(?:\.\d{1,2})?)?\s+GPA\b",
    re.IGNORECASE,
)
LOCATION_TAIL_RE = re.compile(r"[,|–-]\s*(?P<loc>[A-Z][A-Za-z.' -]*,\s*[A-Z]{2})\s*$")
_TRIM = " \t,;:|-–—()"


def extract_gpa(text: str) -> Optional[str]:
    """
    Examples:
        "GPA: 3.8/4.0" -> "3.8"
        "3.9 GPA" -> "3.9"
    """
    m = GPA_RE.search(text)
    if not m:
        return None
    return m.group("gpa") or m.group("gpa_after")


def split_degree(text: str, tables: HeuristicTables = DEFAULT_TABLES) -> Tuple[Optional[str], Optional[str]]:
    """
    Split a degree line into (degree, field).

    Examples:
        "Bachelor of Science in Computer Science" -> ("Bachelor of Science", "Computer Science")
        "B.S. Computer Science" -> ("B.S.", "Computer Science")
        "MBA" -> ("MBA", None)
    """
    m = tables.degree_pattern.search(text)
    if not m:
        return None, None

    degree = m.group(0).strip()
    rest = text[m.end():].strip(_TRIM)
    if rest.lower().startswith("in "):
        rest = rest[3:].strip(_TRIM)
    # Anything after a comma or pipe is institution/location, not the field
    rest = re.split(r"\s*[,|]\s*", rest, maxsplit=1)[0].strip(_TRIM)
    return degree, (rest or None)


def _split_location_tail(text: str) -> Tuple[str, Optional[str]]:
    m = LOCATION_TAIL_RE.search(text)
    if not m:
        return text, None
    return text[:m.start()].strip(_TRIM), m.group("loc")


# ===== LINE CLASSIFICATION =====

@dataclass
class ClassifiedEducationLine:
    kind: EducationLineKind
    text: str
    institution: Optional[str] = None
    degree: Optional[str] = None
    field: Optional[str] = None
    location: Optional[str] = None
    gpa: Optional[str] = None
    dates: Optional[DateRange] = None


@dataclass
class _EducationDraft:
    institution: Optional[str] = None
    degree: Optional[str] = None
    field: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    gpa: Optional[str] = None

    def apply_dates(self, dates: DateRange) -> None:
        if self.start_date or self.end_date:
            return
        # A lone date is the graduation date
        self.start_date = dates.start
        self.end_date = dates.end

    def to_entry(self) -> EducationEntry:
        return EducationEntry(
            institution=self.institution,
            degree=self.degree,
            field=self.field,
            location=self.location,
            start_date=self.start_date,
            end_date=self.end_date,
            gpa=self.gpa,
        )


def classify_education_line(
    line: str,
    state: EducationState,
    draft: Optional[_EducationDraft] = None,
    tables: HeuristicTables = DEFAULT_TABLES,
) -> ClassifiedEducationLine:
    if header_family(line):
        return ClassifiedEducationLine(EducationLineKind.HEADER, line)

    bullet = strip_bullet(line)
    text = bullet if bullet is not None else line

    gpa = extract_gpa(text)
    if gpa:
        text = GPA_RE.sub(" ", text).strip(_TRIM)

    dates = find_date_range(text)
    if dates is not None:
        text = dates.remainder

    if not text:
        if dates is not None:
            return ClassifiedEducationLine(EducationLineKind.DATE_RANGE, "", gpa=gpa, dates=dates)
        return ClassifiedEducationLine(EducationLineKind.GPA if gpa else EducationLineKind.OTHER, "", gpa=gpa)

    if is_location_line(text):
        kind = EducationLineKind.DATE_RANGE if dates is not None else EducationLineKind.LOCATION
        return ClassifiedEducationLine(kind, text, location=text, gpa=gpa, dates=dates)

    body, location = _split_location_tail(text)
    degree, field_of_study = split_degree(body, tables)
    institution = None
    if tables.institutions.match(body):
        if degree:
            # "B.S. Computer Science, Stanford University"
            parts = [p.strip(_TRIM) for p in re.split(r"\s*[,|]\s*", body)]
            institution = next((p for p in parts if tables.institutions.match(p)), None)
            if field_of_study and institution and institution in field_of_study:
                field_of_study = None
        else:
            institution = body

    common = dict(location=location, gpa=gpa, dates=dates)
    if institution and degree:
        return ClassifiedEducationLine(
            EducationLineKind.FULL_ENTRY, body, institution=institution, degree=degree, field=field_of_study, **common
        )

    if institution or degree:
        opens_entry = (
            state == EducationState.SEEKING_ENTRY
            or draft is None
            or (institution and draft.institution)
            or (degree and draft.degree)
        )
        kind = EducationLineKind.ENTRY_START if opens_entry else EducationLineKind.DETAIL
        return ClassifiedEducationLine(
            kind, body, institution=institution, degree=degree, field=field_of_study, **common
        )

    if gpa:
        return ClassifiedEducationLine(EducationLineKind.GPA, text, gpa=gpa, dates=dates)
    return ClassifiedEducationLine(EducationLineKind.OTHER, text, gpa=gpa, dates=dates)


# ===== PARSER =====

class EducationParser:
    """Runs the state machine over one block; entries accumulate across blocks."""

    def __init__(self, tables: HeuristicTables = DEFAULT_TABLES, sink: Optional[DiagnosticSink] = None):
        self.tables = tables
        self.sink = resolve_sink(sink)
        self.entries: List[EducationEntry] = []
        self._seen: Set[tuple] = set()
        self._draft: Optional[_EducationDraft] = None
        self.state = EducationState.SEEKING_ENTRY

    def _flush(self) -> None:
        draft, self._draft = self._draft, None
        if draft is None or not (draft.institution or draft.degree):
            return
        entry = draft.to_entry()
        key = entry.dedupe_key()
        if key in self._seen:
            self.sink("education.duplicate", {"institution": entry.institution, "degree": entry.degree})
            return
        self._seen.add(key)
        self.entries.append(entry)
        self.sink("education.flush", {"institution": entry.institution, "degree": entry.degree})

    def _handle(self, line: ClassifiedEducationLine) -> None:
        kind = line.kind
        if kind == EducationLineKind.HEADER:
            self._flush()
            return

        if kind in (EducationLineKind.ENTRY_START, EducationLineKind.FULL_ENTRY):
            self._flush()
            self._draft = _EducationDraft()

        draft = self._draft
        if draft is None:
            self.sink("education.orphan_line", {"kind": kind.value, "text": line.text})
            return

        draft.institution = draft.institution or line.institution
        if line.degree and not draft.degree:
            draft.degree = line.degree
            draft.field = line.field
        draft.location = draft.location or line.location
        draft.gpa = draft.gpa or line.gpa
        if line.dates is not None:
            draft.apply_dates(line.dates)

    def feed(self, block: str) -> List[EducationEntry]:
        before = len(self.entries)
        self.state = EducationState.SEEKING_ENTRY

        for raw in block.split("\n"):
            line = raw.strip()
            if not line:
                continue
            if header_family(line) == "education":
                line = strip_header(line)
                if not line:
                    continue

            classified = classify_education_line(line, self.state, self._draft, self.tables)
            new_state = next_state(self.state, classified.kind)
            self.sink(
                "education.line",
                {"state": self.state.value, "kind": classified.kind.value, "next": new_state.value},
            )
            self._handle(classified)
            self.state = new_state
            if self.state == EducationState.DONE:
                break

        self._flush()
        return self.entries[before:]


def parse_education_block(
    text: str,
    tables: HeuristicTables = DEFAULT_TABLES,
    sink: Optional[DiagnosticSink] = None,
) -> List[EducationEntry]:
    return EducationParser(tables, sink).feed(text)
