"""
Experience section parser.

A small finite-state machine walks the lines of one experience block. The
layout it is tuned for is the common one:

    SOFTWARE ENGINEER          <- title        SEEKING_TITLE -> EXPECTING_COMPANY
    ACME CORP                  <- company      -> EXPECTING_LOCATION
    San Francisco, CA          <- location     -> EXPECTING_DATES
    01/2020 - Present          <- dates        -> SEEKING_TITLE
    • Built things             <- description  (any state)

Each line is first classified (classify_experience_line, state-aware), then the
(state, kind) pair is looked up in EXPERIENCE_TRANSITIONS. Pairs missing from
the table keep the current state. Resumes that deviate from this ordering are
expected to misparse; that is an accepted limitation of the heuristic.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple

from resume_import.core.diagnostics import DiagnosticSink, resolve_sink
from resume_import.core.heuristics import DEFAULT_TABLES, HeuristicTables, header_family, strip_header
from resume_import.core.pattern_extractors import DateRange, find_date_range, is_location_line, strip_bullet
from resume_import.core.schemas import ExperienceEntry


class ExperienceState(Enum):
    SEEKING_TITLE = "seeking_title"
    EXPECTING_COMPANY = "expecting_company"
    EXPECTING_LOCATION = "expecting_location"
    EXPECTING_DATES = "expecting_dates"
    DONE = "done"


class LineKind(Enum):
    HEADER = "header"  # another top-level section starts
    TITLE = "title"
    TITLE_WITH_COMPANY = "title_with_company"  # "Engineer at Acme"
    COMPANY = "company"
    LOCATION = "location"
    DATE_RANGE = "date_range"
    BULLET = "bullet"
    DESCRIPTION = "description"
    OTHER = "other"


_ACTIVE = (
    ExperienceState.SEEKING_TITLE,
    ExperienceState.EXPECTING_COMPANY,
    ExperienceState.EXPECTING_LOCATION,
    ExperienceState.EXPECTING_DATES,
)

EXPERIENCE_TRANSITIONS: Dict[Tuple[ExperienceState, LineKind], ExperienceState] = {
    **{(s, LineKind.HEADER): ExperienceState.DONE for s in _ACTIVE},
    **{(s, LineKind.TITLE): ExperienceState.EXPECTING_COMPANY for s in _ACTIVE},
    **{(s, LineKind.TITLE_WITH_COMPANY): ExperienceState.EXPECTING_LOCATION for s in _ACTIVE},
    (ExperienceState.EXPECTING_COMPANY, LineKind.COMPANY): ExperienceState.EXPECTING_LOCATION,
    (ExperienceState.EXPECTING_LOCATION, LineKind.LOCATION): ExperienceState.EXPECTING_DATES,
    (ExperienceState.EXPECTING_LOCATION, LineKind.DATE_RANGE): ExperienceState.SEEKING_TITLE,
    (ExperienceState.EXPECTING_DATES, LineKind.DATE_RANGE): ExperienceState.SEEKING_TITLE,
}


def next_state(state: ExperienceState, kind: LineKind) -> ExperienceState:
    return EXPERIENCE_TRANSITIONS.get((state, kind), state)


# ============================================================================
# Line classification
# ============================================================================

TITLE_AT_RE = re.compile(r"^(?P<title>.+?)\s+(?:at|@)\s+(?P<company>[A-Z].+)$")
SMALL_WORDS = {"of", "and", "the", "for", "in", "to", "at", "on", "with"}

MAX_KNOWN_TITLE_LEN = 60
GENERIC_TITLE_LEN = (10, 50)
MAX_COMPANY_LEN = 60
MIN_DESCRIPTION_LEN = 20


@dataclass
class ClassifiedLine:
    kind: LineKind
    text: str
    company: Optional[str] = None
    dates: Optional[DateRange] = None


def _title_like(text: str) -> bool:
    """All caps, or every significant word capitalized."""
    if text.isupper():
        return True
    words = [w for w in text.split() if w[0].isalpha() and w.lower() not in SMALL_WORDS]
    return bool(words) and all(w[0].isupper() for w in words)


def _is_known_title(text: str, tables: HeuristicTables) -> bool:
    return (
        len(text) <= MAX_KNOWN_TITLE_LEN
        and text[:1].isupper()
        and not text.endswith(".")
        and _title_like(text)
        and tables.job_titles.match(text) is not None
    )


def _is_generic_title(text: str, tables: HeuristicTables) -> bool:
    lo, hi = GENERIC_TITLE_LEN
    return (
        lo <= len(text) <= hi
        and not any(ch.isdigit() for ch in text)
        and "," not in text
        and _title_like(text)
        and tables.companies.match(text) is None
    )


def _is_generic_company(text: str) -> bool:
    return (
        len(text) <= MAX_COMPANY_LEN
        and text[:1].isupper()
        and not text.endswith(".")
        and not is_location_line(text)
        and _title_like(text)
    )


def classify_experience_line(
    line: str,
    state: ExperienceState,
    has_title_and_company: bool = False,
    tables: HeuristicTables = DEFAULT_TABLES,
) -> ClassifiedLine:
    """
    Order: header, bullet, date range, state-specific checks, title, description.
    """
    if header_family(line):
        return ClassifiedLine(LineKind.HEADER, line)

    bullet = strip_bullet(line)
    if bullet is not None:
        return ClassifiedLine(LineKind.BULLET, bullet)

    dates = find_date_range(line)
    text = line
    if dates is not None:
        if not dates.remainder or is_location_line(dates.remainder):
            return ClassifiedLine(LineKind.DATE_RANGE, dates.remainder, dates=dates)
        # Dates glued to a title/company line ("Engineer | 2019 - 2021")
        text = dates.remainder

    if state == ExperienceState.EXPECTING_COMPANY:
        if tables.companies.match(text) and not is_location_line(text):
            return ClassifiedLine(LineKind.COMPANY, text, dates=dates)
        if _is_known_title(text, tables):
            return ClassifiedLine(LineKind.TITLE, text, dates=dates)
        if _is_generic_company(text):
            return ClassifiedLine(LineKind.COMPANY, text, dates=dates)

    if is_location_line(text):
        return ClassifiedLine(LineKind.LOCATION, text, dates=dates)

    m = TITLE_AT_RE.match(text)
    if m and _is_known_title(m.group("title"), tables):
        return ClassifiedLine(LineKind.TITLE_WITH_COMPANY, m.group("title").strip(), company=m.group("company").strip(), dates=dates)

    if _is_known_title(text, tables) or (
        state != ExperienceState.EXPECTING_COMPANY and _is_generic_title(text, tables)
    ):
        return ClassifiedLine(LineKind.TITLE, text, dates=dates)

    if has_title_and_company and len(text) > MIN_DESCRIPTION_LEN:
        return ClassifiedLine(LineKind.DESCRIPTION, text, dates=dates)

    return ClassifiedLine(LineKind.OTHER, text, dates=dates)


# ============================================================================
# Accumulator
# ============================================================================

@dataclass
class _ExperienceDraft:
    title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    current: bool = False
    description: List[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return bool(self.title and self.company)

    def apply_dates(self, dates: DateRange) -> None:
        if self.start_date or self.end_date:
            return
        if dates.start is None:
            # A lone date on an experience line is the start date
            self.start_date = dates.end
            return
        self.start_date = dates.start
        self.end_date = dates.end
        self.current = dates.current

    def to_entry(self) -> ExperienceEntry:
        return ExperienceEntry(
            title=self.title,
            company=self.company,
            location=self.location,
            start_date=self.start_date,
            end_date=self.end_date,
            description=" ".join(self.description) or None,
            current=self.current,
        )


class ExperienceParser:
    """Runs the state machine over one block; entries accumulate across blocks."""

    def __init__(self, tables: HeuristicTables = DEFAULT_TABLES, sink: Optional[DiagnosticSink] = None):
        self.tables = tables
        self.sink = resolve_sink(sink)
        self.entries: List[ExperienceEntry] = []
        self._seen: Set[tuple] = set()
        self._draft: Optional[_ExperienceDraft] = None
        self.state = ExperienceState.SEEKING_TITLE

    def _flush(self) -> None:
        draft, self._draft = self._draft, None
        if draft is None:
            return
        if not draft.complete:
            self.sink("experience.discard", {"title": draft.title, "company": draft.company})
            return
        entry = draft.to_entry()
        key = entry.dedupe_key()
        if key in self._seen:
            self.sink("experience.duplicate", {"title": entry.title, "company": entry.company})
            return
        self._seen.add(key)
        self.entries.append(entry)
        self.sink("experience.flush", {"title": entry.title, "company": entry.company})

    def _handle(self, line: ClassifiedLine) -> None:
        kind = line.kind
        if kind == LineKind.HEADER:
            self._flush()
            return

        if kind in (LineKind.TITLE, LineKind.TITLE_WITH_COMPANY):
            self._flush()
            self._draft = _ExperienceDraft(title=line.text, company=line.company)
        elif self._draft is None:
            self.sink("experience.orphan_line", {"kind": kind.value, "text": line.text})
            return
        elif kind == LineKind.COMPANY:
            self._draft.company = line.text
        elif kind == LineKind.LOCATION:
            self._draft.location = self._draft.location or line.text
        elif kind == LineKind.DATE_RANGE and line.text:
            self._draft.location = self._draft.location or line.text
        elif kind in (LineKind.BULLET, LineKind.DESCRIPTION):
            if line.text:
                self._draft.description.append(line.text)

        if line.dates is not None:
            self._draft.apply_dates(line.dates)

    def feed(self, block: str) -> List[ExperienceEntry]:
        """Parse one block and return the entries it contributed."""
        before = len(self.entries)
        self.state = ExperienceState.SEEKING_TITLE

        for raw in block.split("\n"):
            line = raw.strip()
            if not line:
                continue
            if header_family(line) == "experience":
                # Our own header; keep whatever content was merged onto it
                line = strip_header(line)
                if not line:
                    continue

            has_both = self._draft is not None and self._draft.complete
            classified = classify_experience_line(line, self.state, has_both, self.tables)
            new_state = next_state(self.state, classified.kind)
            self.sink(
                "experience.line",
                {"state": self.state.value, "kind": classified.kind.value, "next": new_state.value},
            )
            self._handle(classified)
            self.state = new_state
            if self.state == ExperienceState.DONE:
                break

        self._flush()
        return self.entries[before:]


def parse_experience_block(
    text: str,
    tables: HeuristicTables = DEFAULT_TABLES,
    sink: Optional[DiagnosticSink] = None,
) -> List[ExperienceEntry]:
    return ExperienceParser(tables, sink).feed(text)
