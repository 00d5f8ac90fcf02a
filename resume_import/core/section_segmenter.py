"""
Split normalized resume text into labeled section blocks.

Blocks are cut immediately before every header line (see
heuristics.HEADER_LINE_RE) and classified by their own header first. Blocks
without a recognizable header fall back to content fingerprints, since PDF
extraction regularly merges or drops header lines:

- experience: a job-title fragment and a date token
- education: an institution fragment or a degree
- skills: at least 3 technology fragments
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from resume_import.core.diagnostics import DiagnosticSink, resolve_sink
from resume_import.core.heuristics import (
    DEFAULT_TABLES,
    HeuristicTables,
    header_family,
    header_line_starts,
    strip_header,
)
from resume_import.core.pattern_extractors import DATE_MM_YYYY_RE, DATE_MONTH_YYYY_RE, DATE_YEAR_RE


class SectionType(str, Enum):
    EXPERIENCE = "experience"
    EDUCATION = "education"
    SKILLS = "skills"
    PROJECTS = "projects"
    CERTIFICATIONS = "certifications"
    SUMMARY = "summary"


SKILL_FINGERPRINT_MIN = 3


@dataclass
class SectionBlock:
    type: Optional[SectionType]
    text: str
    header: Optional[str] = None
    by_fingerprint: bool = False

    @property
    def body(self) -> str:
        """Block text without its header phrase; content glued onto the header line is kept."""
        lines = self.text.split("\n")
        if self.header is not None and lines:
            first = strip_header(lines[0])
            lines = ([first] if first else []) + lines[1:]
        return "\n".join(lines).strip()


def split_sections(text: str) -> List[str]:
    """Cut text before every header line. The preamble (contact block) is the first chunk."""
    text = text or ""
    cuts = sorted({0, *header_line_starts(text)})
    parts = [text[start:end] for start, end in zip(cuts, cuts[1:] + [len(text)])]
    return [p.strip() for p in parts if p.strip()]


def _has_date(text: str) -> bool:
    return bool(
        DATE_MM_YYYY_RE.search(text) or DATE_MONTH_YYYY_RE.search(text) or DATE_YEAR_RE.search(text)
    )


def fingerprint_block(block: str, tables: HeuristicTables = DEFAULT_TABLES) -> Optional[SectionType]:
    if tables.job_titles.match(block) and _has_date(block):
        return SectionType.EXPERIENCE
    if tables.institutions.match(block) or tables.degree_pattern.search(block):
        return SectionType.EDUCATION
    if tables.skill_fingerprints.count(block) >= SKILL_FINGERPRINT_MIN:
        return SectionType.SKILLS
    return None


def classify_block(block: str, tables: HeuristicTables = DEFAULT_TABLES) -> Optional[SectionType]:
    """Header line first, then content fingerprint."""
    first_line = block.split("\n", 1)[0]
    family = header_family(first_line)
    if family:
        return SectionType(family)
    return fingerprint_block(block, tables)


def segment_sections(
    text: str,
    tables: HeuristicTables = DEFAULT_TABLES,
    sink: Optional[DiagnosticSink] = None,
) -> List[SectionBlock]:
    sink = resolve_sink(sink)
    blocks: List[SectionBlock] = []

    for chunk in split_sections(text):
        first_line = chunk.split("\n", 1)[0]
        family = header_family(first_line)
        if family:
            block = SectionBlock(type=SectionType(family), text=chunk, header=first_line)
        else:
            block = SectionBlock(type=fingerprint_block(chunk, tables), text=chunk, by_fingerprint=True)

        sink(
            "segment.block",
            {
                "type": block.type.value if block.type else None,
                "header": block.header,
                "fingerprint": block.by_fingerprint,
                "lines": chunk.count("\n") + 1,
            },
        )
        blocks.append(block)

    return blocks
