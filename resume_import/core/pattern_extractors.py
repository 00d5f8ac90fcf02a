"""
Context-free extraction of atomic fields: emails, phones, dates, links, plus
the personal-info heuristics (name, location) that only look at the top of the
document.
"""

import re
from dataclasses import dataclass
from typing import List, Optional

from resume_import.core.diagnostics import DiagnosticSink, resolve_sink
from resume_import.core.heuristics import (
    DEFAULT_TABLES,
    SUMMARY_VOCABULARY,
    HeuristicTables,
    header_family,
)
from resume_import.core.schemas import PersonalInfo


# ============================================================================
# Patterns
# ============================================================================

EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")

# Optional country code ("+44", "+1" or a bare leading "1"), area code with or
# without parens, then 3 + 4 digits separated by dash, dot or space.
PHONE_RE = re.compile(
    r"(?<![\w+])(?:(?:\+(?P<cc>\d{1,3})|(?P<one>1))[-.\s]?)?"
    r"\(?(?P<area>\d{3})\)?[-.\s]?(?P<prefix>\d{3})[-.\s]?(?P<line>\d{4})(?!\d)"
)

DATE_MM_YYYY_RE = re.compile(r"\b(?:0?[1-9]|1[0-2])/(?:19|20)\d{2}\b")
DATE_MONTH_YYYY_RE = re.compile(
    r"\b(?:January|February|March|April|May|June|July|August|September|October|November|December"
    r"|Jan|Feb|Mar|Apr|Jun|Jul|Aug|Sept|Sep|Oct|Nov|Dec)\.?[\s,]*(?:19|20)\d{2}\b",
    re.IGNORECASE,
)
DATE_YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")

LINKEDIN_RE = re.compile(r"(?:https?://)?(?:www\.)?linkedin\.com/in/[A-Za-z0-9_-]+/?", re.IGNORECASE)

WEBSITE_CANDIDATE_RE = re.compile(
    r"(?<![\w@.])(?P<url>(?P<scheme>https?://|www\.)?"
    r"(?P<host>[A-Za-z0-9-]+(?:\.[A-Za-z0-9-]+)*\.[A-Za-z]{2,})(?P<path>/[^\s,;)]*)?)"
)

WEBMAIL_DOMAINS = {
    "gmail.com", "googlemail.com", "yahoo.com", "hotmail.com", "outlook.com", "live.com",
    "msn.com", "aol.com", "icloud.com", "me.com", "protonmail.com", "proton.me", "mail.com",
}

# Dotted technical jargon ("system.out", "server.js") that is not a website
JARGON_PREFIXES = ("system.", "server.", "config.", "console.", "process.", "window.", "document.", "self.", "this.")

VALID_TLDS = {
    "com", "org", "net", "io", "dev", "co", "ai", "app", "me", "info", "biz", "edu", "gov",
    "us", "uk", "ca", "de", "fr", "in", "au", "tech", "site", "online", "xyz", "page", "design",
}

NAME_WORD_RE = re.compile(r"^(?:(?:[A-Z]')?[A-Z][a-z]+(?:[A-Z][a-z]+)?(?:-[A-Z][a-z]+)*|(?:[A-Z]')?[A-Z]{2,}(?:-[A-Z]+)*|[A-Z]\.?)$")
NAME_PREFIX_RE = re.compile(r"^([A-Z][a-z]+(?:\s+[A-Z][a-z]+){1,3})")

LOCATION_RE = re.compile(r"\b([A-Z][A-Za-z.'-]*(?:[ ][A-Z][A-Za-z.'-]*){0,3}),[ ]*([A-Z]{2})\b")

US_STATES = {
    "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "FL", "GA", "HI", "ID", "IL", "IN", "IA",
    "KS", "KY", "LA", "ME", "MD", "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV", "NH", "NJ",
    "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI", "SC", "SD", "TN", "TX", "UT", "VT",
    "VA", "WA", "WV", "WI", "WY", "DC",
}


def _unique(items: List[str]) -> List[str]:
    seen = set()
    out = []
    for item in items:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


# ============================================================================
# Atomic extractors
# ============================================================================

def extract_emails(text: str) -> List[str]:
    return _unique(EMAIL_RE.findall(text or ""))


def _canonical_phone(m: "re.Match[str]") -> str:
    number = f"({m.group('area')}) {m.group('prefix')}-{m.group('line')}"
    country = m.group("cc") or m.group("one")
    return f"+{country} {number}" if country else number


def extract_phone_numbers(text: str) -> List[str]:
    """
    Phones in canonical display form.

    - "415.555.0100" → "(415) 555-0100"
    - "+1 415-555-0100" → "+1 (415) 555-0100"
    """
    return _unique([_canonical_phone(m) for m in PHONE_RE.finditer(text or "")])


def extract_dates(text: str) -> List[str]:
    """MM/YYYY, then "Month YYYY", then bare years. Not deduplicated."""
    text = text or ""
    dates = DATE_MM_YYYY_RE.findall(text)
    dates += DATE_MONTH_YYYY_RE.findall(text)
    dates += DATE_YEAR_RE.findall(text)
    return dates


def extract_linkedin(text: str) -> Optional[str]:
    m = LINKEDIN_RE.search(text or "")
    return m.group(0) if m else None


def _is_website(m: "re.Match[str]") -> bool:
    url = m.group("url")
    host = m.group("host")
    low = url.lower()
    bare_host = host.lower()
    if bare_host.startswith("www."):
        bare_host = bare_host[4:]

    if "linkedin.com" in low or bare_host in WEBMAIL_DOMAINS:
        return False
    if bare_host.startswith(JARGON_PREFIXES):
        return False
    if m.group("scheme"):
        return True
    # Bare domains: lowercase host with a known TLD ("janesmith.dev", not "Node.js")
    return host == host.lower() and host.rsplit(".", 1)[-1] in VALID_TLDS


def extract_websites(text: str) -> List[str]:
    without_emails = EMAIL_RE.sub(" ", text or "")
    return _unique([m.group("url") for m in WEBSITE_CANDIDATE_RE.finditer(without_emails) if _is_website(m)])


# ============================================================================
# Line shapes shared by the section parsers
# ============================================================================

BULLET_LINE_RE = re.compile(r"^(?:•|[-*–]\s)\s*")

_MONTHS = r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?|Aug(?:ust)?|Sept?(?:ember)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
DATE_TOKEN = rf"(?:(?:0?[1-9]|1[0-2])/(?:19|20)\d{{2}}|{_MONTHS}\.?,?\s+(?:19|20)\d{{2}}|(?:19|20)\d{{2}})"
OPEN_ENDED = r"(?:present|current|now|today)"

DATE_RANGE_RE = re.compile(
    rf"\b(?P<start>{DATE_TOKEN})\s*(?:-|–|—|to|until)\s*(?P<end>{DATE_TOKEN}|{OPEN_ENDED})\b",
    re.IGNORECASE,
)
SINGLE_DATE_RE = re.compile(rf"\b(?:expected\s+|graduated\s+)?(?P<date>{DATE_TOKEN})\b", re.IGNORECASE)

# "San Francisco, CA", "Austin, TX, USA", "Remote"
LOCATION_LINE_RE = re.compile(
    r"^(?:[A-Z][A-Za-z.'-]*(?: [A-Z][A-Za-z.'-]*){0,3},\s*[A-Z]{2}(?:,\s*(?:USA|US|United States))?"
    r"|Remote|Hybrid|On-?site)$"
)

_SEPARATOR_CHARS = " \t|,;:-–—•·()"


@dataclass
class DateRange:
    """Dates found on one line: start/end (end may be "Present") plus the leftover text."""
    start: Optional[str]
    end: Optional[str]
    remainder: str = ""

    @property
    def current(self) -> bool:
        return self.end == "Present"


def find_date_range(line: str) -> Optional[DateRange]:
    """
    Locate a date range ("01/2020 - Present", "Jan 2019 to Mar 2021") or, failing
    that, a single date on the line.

    A single date is returned as end-only; callers decide what it means.
    """
    m = DATE_RANGE_RE.search(line)
    if m:
        end = m.group("end")
        if re.fullmatch(OPEN_ENDED, end, re.IGNORECASE):
            end = "Present"
        remainder = (line[:m.start()] + " " + line[m.end():]).strip(_SEPARATOR_CHARS)
        return DateRange(m.group("start"), end, " ".join(remainder.split()))

    m = SINGLE_DATE_RE.search(line)
    if m:
        remainder = (line[:m.start()] + " " + line[m.end():]).strip(_SEPARATOR_CHARS)
        return DateRange(None, m.group("date"), " ".join(remainder.split()))
    return None


def is_location_line(line: str) -> bool:
    return bool(LOCATION_LINE_RE.match(line.strip()))


def strip_bullet(line: str) -> Optional[str]:
    """Text after a leading bullet marker, or None when the line is not a bullet."""
    m = BULLET_LINE_RE.match(line)
    if not m:
        return None
    return line[m.end():].strip()


# ============================================================================
# Personal info heuristics
# ============================================================================

def _top_lines(text: str, limit: int) -> List[str]:
    lines = [ln.strip() for ln in (text or "").split("\n") if ln.strip()]
    return lines[:limit]


def _looks_like_name(line: str, tables: HeuristicTables) -> bool:
    if "@" in line or "http" in line.lower() or len(line) >= 50:
        return False
    if any(ch.isdigit() for ch in line):
        return False

    words = line.split()
    if not 2 <= len(words) <= 4:
        return False
    if not all(NAME_WORD_RE.match(w) for w in words):
        return False
    if any(w.lower().rstrip(".") in tables.name_stopwords for w in words):
        return False
    # "SOFTWARE ENGINEER" / "ACME CORP" are shaped like names too
    if tables.job_titles.match(line) or tables.companies.match(line):
        return False
    return True


def extract_full_name(
    text: str,
    tables: HeuristicTables = DEFAULT_TABLES,
    scan_lines: int = 10,
) -> Optional[str]:
    """
    First line in the top of the document shaped like a 2-4 word name.

    When the very first line mixes the name with contact details
    ("Jane Smith jane@x.com (415) 555-0100"), the leading capitalized words are
    taken as the name.
    """
    lines = _top_lines(text, scan_lines)
    if not lines:
        return None

    first = lines[0]
    if "@" in first or PHONE_RE.search(first):
        m = NAME_PREFIX_RE.match(first)
        if m and not any(w.lower() in tables.name_stopwords for w in m.group(1).split()):
            return m.group(1)

    for line in lines:
        if header_family(line):
            break
        if _looks_like_name(line, tables):
            return line
    return None


def extract_location(text: str, scan_lines: int = 10) -> Optional[str]:
    """First "City, ST" (US state code) on a short line near the top, before any section."""
    for line in _top_lines(text, scan_lines):
        if header_family(line):
            break
        if len(line) >= 100:
            continue
        if any(word in line.lower() for word in SUMMARY_VOCABULARY):
            continue
        for m in LOCATION_RE.finditer(line):
            if m.group(2) in US_STATES:
                return f"{m.group(1)}, {m.group(2)}"
    return None


def extract_personal_info(
    text: str,
    tables: HeuristicTables = DEFAULT_TABLES,
    scan_lines: int = 10,
    sink: Optional[DiagnosticSink] = None,
) -> PersonalInfo:
    sink = resolve_sink(sink)

    emails = extract_emails(text)
    phones = extract_phone_numbers(text)
    websites = extract_websites(text)

    info = PersonalInfo(
        full_name=extract_full_name(text, tables, scan_lines),
        email=emails[0] if emails else None,
        phone=phones[0] if phones else None,
        location=extract_location(text, scan_lines),
        linkedin=extract_linkedin(text),
        website=websites[0] if websites else None,
    )
    sink("personal_info.extracted", {"fields": info.populated_fields()})
    return info
