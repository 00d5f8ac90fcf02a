"""
Keyword tables driving the heuristic classifiers.

Every classifier in the pipeline (job-title lines, company lines, section
content fingerprints, skills fallback) matches against a KeywordTable instead
of inline literals. The defaults below are illustrative: they cover common
layouts and are expected to be extended for new resume styles. Pass a custom
HeuristicTables to parse_resume_text() / parse_resume_file() to swap them.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Pattern


class KeywordTable:
    """
    Mapping of keyword fragment -> canonical label.

    Fragments match case-insensitively on word boundaries, so "engineer"
    matches "Software Engineer" and "ENGINEERS" but not "reengineered".
    Trailing "s" is tolerated for plurals.
    """

    def __init__(self, entries: Mapping[str, str]):
        self.entries: Dict[str, str] = dict(entries)
        self._ordered: List[tuple] = [
            (fragment, label, self._compile(fragment))
            for fragment, label in self.entries.items()
        ]
        # Longest fragment wins in match()
        self._patterns = sorted(self._ordered, key=lambda item: -len(item[0]))

    @staticmethod
    def _compile(fragment: str) -> Pattern[str]:
        escaped = re.escape(fragment)
        return re.compile(rf"(?<![A-Za-z0-9]){escaped}s?(?![A-Za-z0-9])", re.IGNORECASE)

    @classmethod
    def from_terms(cls, terms: Iterable[str], label: Optional[str] = None) -> "KeywordTable":
        """Build a table where each term is its own label (or shares one label)."""
        return cls({t.lower(): (label or t) for t in terms})

    def match(self, text: str) -> Optional[str]:
        """Return the label of the longest fragment found in text, or None."""
        for _, label, rx in self._patterns:
            if rx.search(text):
                return label
        return None

    def count(self, text: str) -> int:
        """Number of distinct fragments present in text."""
        return sum(1 for _, _, rx in self._ordered if rx.search(text))

    def find_all(self, text: str) -> List[str]:
        """Labels of every fragment present in text, in table order."""
        return [label for _, label, rx in self._ordered if rx.search(text)]

    def extended(self, entries: Mapping[str, str]) -> "KeywordTable":
        merged = dict(self.entries)
        merged.update(entries)
        return KeywordTable(merged)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, fragment: str) -> bool:
        return fragment.lower() in self.entries


# ===== JOB TITLES =====

JOB_TITLE_FRAGMENTS = {
    "engineer": "engineering",
    "developer": "engineering",
    "programmer": "engineering",
    "architect": "engineering",
    "software engineer": "engineering",
    "data scientist": "data",
    "data analyst": "data",
    "analyst": "analysis",
    "scientist": "research",
    "researcher": "research",
    "manager": "management",
    "director": "management",
    "head of": "management",
    "vice president": "executive",
    "president": "executive",
    "chief": "executive",
    "officer": "executive",
    "founder": "executive",
    "co-founder": "executive",
    "lead": "management",
    "supervisor": "management",
    "coordinator": "operations",
    "administrator": "operations",
    "specialist": "operations",
    "consultant": "consulting",
    "advisor": "consulting",
    "designer": "design",
    "intern": "internship",
    "associate": "general",
    "assistant": "general",
    "representative": "sales",
    "account executive": "sales",
    "sales": "sales",
    "recruiter": "people",
    "teacher": "education",
    "instructor": "education",
    "professor": "education",
    "nurse": "healthcare",
    "technician": "operations",
    "accountant": "finance",
    "controller": "finance",
}

# ===== COMPANIES =====

COMPANY_FRAGMENTS = {
    "inc": "corporation",
    "inc.": "corporation",
    "corp": "corporation",
    "corp.": "corporation",
    "corporation": "corporation",
    "company": "corporation",
    "co.": "corporation",
    "llc": "corporation",
    "llp": "partnership",
    "ltd": "corporation",
    "ltd.": "corporation",
    "gmbh": "corporation",
    "group": "corporation",
    "holdings": "corporation",
    "technologies": "technology",
    "technology": "technology",
    "solutions": "services",
    "systems": "technology",
    "labs": "technology",
    "consulting": "services",
    "partners": "partnership",
    "associates": "partnership",
    "agency": "services",
    "bank": "finance",
    "capital": "finance",
    "hospital": "healthcare",
    "health": "healthcare",
    "foundation": "nonprofit",
}

# ===== EDUCATION =====

INSTITUTION_FRAGMENTS = {
    "university": "university",
    "college": "college",
    "institute": "institute",
    "institute of technology": "institute",
    "school": "school",
    "academy": "academy",
    "polytechnic": "institute",
    "conservatory": "school",
    "community college": "college",
}

# Bare two-letter abbreviations (BA, MS, MA...) only count at line start so a
# "Boston, MA" location line is never read as a degree.
DEGREE_PATTERN = re.compile(
    r"\b(?:Bachelor|Master|Doctor|Associate)(?:'s)?(?:\s+of\s+[A-Z][A-Za-z]+(?:\s+[A-Z][A-Za-z]+)*)?"
    r"|\bPh\.\s?D\.?|\bPhD\b|\bM\.B\.A\.?|\bMBA\b"
    r"|\b[BM]\.(?:Sc|Eng|Tech|A|S)\.?"
    r"|^(?:BSc|MSc|BEng|MEng|BTech|MTech|BA|BS|MA|MS)\b"
    r"|\bHigh School Diploma\b|\bDiploma\b|\bGED\b",
    re.MULTILINE,
)

# ===== SKILLS =====

# Technology fragments used to fingerprint a skills block without a header
SKILL_FINGERPRINT_TERMS = [
    "Python", "Java", "JavaScript", "TypeScript", "C++", "C#", "Go", "Rust", "Ruby", "PHP",
    "Swift", "Kotlin", "SQL", "HTML", "CSS", "React", "Angular", "Vue", "Node.js", "Django",
    "Flask", "FastAPI", "Spring", "AWS", "Azure", "GCP", "Docker", "Kubernetes", "Git",
    "Linux", "PostgreSQL", "MySQL", "MongoDB", "Redis", "Terraform", "Jenkins", "Excel",
]

# Scanned across the whole skills block when the line pass finds too few skills
FALLBACK_SKILL_TERMS = SKILL_FINGERPRINT_TERMS + [
    "Express", "Laravel", "Elasticsearch", "GraphQL", "REST", "CI/CD", "Ansible",
    "Pandas", "NumPy", "TensorFlow", "PyTorch", "scikit-learn", "Spark", "Hadoop",
    "Tableau", "Power BI", "Jira", "Figma", "Salesforce", "Agile", "Scrum",
    "Machine Learning", "Data Analysis", "Project Management", "Leadership",
    "Communication", "Microsoft Office",
]

# ===== SECTION HEADERS =====

# Longest phrase first within each family
SECTION_HEADERS: Dict[str, List[str]] = {
    "experience": [
        "PROFESSIONAL EXPERIENCE", "WORK EXPERIENCE", "EMPLOYMENT HISTORY",
        "WORK HISTORY", "CAREER HISTORY", "EMPLOYMENT", "EXPERIENCE",
    ],
    "education": ["ACADEMIC BACKGROUND", "EDUCATION"],
    "skills": ["TECHNICAL SKILLS", "CORE COMPETENCIES", "COMPETENCIES", "SKILLS"],
    "projects": ["PERSONAL PROJECTS", "PROJECTS"],
    "certifications": ["CERTIFICATIONS", "CERTIFICATES", "LICENSES"],
    "summary": ["PROFESSIONAL SUMMARY", "SUMMARY", "PROFILE", "OBJECTIVE"],
}

# Only headers when alone on their line; these words also show up inside
# ordinary content ("Technologies: Python, Go", "ACME TECHNOLOGIES")
STANDALONE_HEADERS: Dict[str, List[str]] = {
    "education": ["QUALIFICATIONS"],
    "skills": ["TECHNOLOGIES"],
    "projects": ["PORTFOLIO"],
}


def _longest_first(headers: Mapping[str, List[str]]) -> List[str]:
    phrases = [p for family in headers.values() for p in family]
    return sorted(phrases, key=len, reverse=True)


def header_keywords() -> List[str]:
    """Header phrases that may open a line with content after them, longest first."""
    return _longest_first(SECTION_HEADERS)


def _phrase_alternation(phrases: List[str]) -> str:
    return "|".join(r"[ \t]+".join(re.escape(w) for w in p.split()) for p in phrases)


_HEADER_FAMILY = {
    p: family
    for headers in (SECTION_HEADERS, STANDALONE_HEADERS)
    for family, phrases in headers.items()
    for p in phrases
}
_HEADER_ALT = _phrase_alternation(header_keywords())
_STANDALONE_ALT = _phrase_alternation(_longest_first(STANDALONE_HEADERS))

# A header line is a header phrase in any case followed by a colon or the end
# of the line ("Skills:", "Education"), or an uppercase phrase followed by
# anything ("EXPERIENCE SOFTWARE ENGINEER" after PDF line merging). Standalone
# phrases need the rest of the line to be empty.
HEADER_PATTERN = (
    rf"[ \t]*(?:(?i:(?P<any>{_HEADER_ALT}))[ \t]*(?::|$)"
    rf"|(?P<upper>{_HEADER_ALT})\b"
    rf"|(?i:(?P<alone>{_STANDALONE_ALT}))[ \t]*:?[ \t]*$)"
)
HEADER_LINE_RE = re.compile(rf"^{HEADER_PATTERN}", re.MULTILINE)


def header_family(line: str) -> Optional[str]:
    """Section family of a header line ("experience", "skills"...), else None."""
    m = HEADER_LINE_RE.match(line)
    if not m:
        return None
    phrase = m.group("any") or m.group("upper") or m.group("alone")
    return _HEADER_FAMILY.get(" ".join(phrase.split()).upper())


def header_line_starts(text: str) -> List[int]:
    """Offsets of every line in text that opens with a header."""
    return [m.start() for m in HEADER_LINE_RE.finditer(text)]


def strip_header(line: str) -> str:
    """Remove a leading header phrase (and its colon) from a line."""
    m = HEADER_LINE_RE.match(line)
    if not m:
        return line
    return line[m.end():].lstrip(" \t:").strip()


# ===== VOCABULARY =====

# Words that never belong to a person's name
NAME_STOPWORDS = {
    "profile", "experience", "summary", "education", "skills", "projects",
    "certifications", "objective", "resume", "curriculum", "vitae", "contact",
    "employment", "references",
}

SUMMARY_VOCABULARY = ("summary", "profile", "objective", "about me")


@dataclass
class HeuristicTables:
    job_titles: KeywordTable = field(default_factory=lambda: KeywordTable(JOB_TITLE_FRAGMENTS))
    companies: KeywordTable = field(default_factory=lambda: KeywordTable(COMPANY_FRAGMENTS))
    institutions: KeywordTable = field(default_factory=lambda: KeywordTable(INSTITUTION_FRAGMENTS))
    skill_fingerprints: KeywordTable = field(
        default_factory=lambda: KeywordTable.from_terms(SKILL_FINGERPRINT_TERMS)
    )
    fallback_skills: KeywordTable = field(
        default_factory=lambda: KeywordTable.from_terms(FALLBACK_SKILL_TERMS)
    )
    degree_pattern: Pattern[str] = DEGREE_PATTERN
    name_stopwords: frozenset = frozenset(NAME_STOPWORDS)


DEFAULT_TABLES = HeuristicTables()
