"""
Normalized text -> ParsedResumeData.

Every format (PDF, DOCX, TXT) ends up here once its text is extracted, so all
three share the same segmentation, section parsers and scoring.
"""

from typing import Dict, List, Optional

from resume_import.core.confidence_calculator import ConfidenceCalculator
from resume_import.core.config import Settings, get_settings
from resume_import.core.diagnostics import DiagnosticSink, resolve_sink
from resume_import.core.education_parser import EducationParser
from resume_import.core.experience_parser import ExperienceParser
from resume_import.core.heuristics import DEFAULT_TABLES, HeuristicTables
from resume_import.core.pattern_extractors import (
    extract_dates,
    extract_emails,
    extract_personal_info,
    extract_phone_numbers,
)
from resume_import.core.project_parser import parse_certifications_block, parse_projects_block
from resume_import.core.schemas import (
    CertificationEntry,
    ParsedResumeData,
    ParseOptions,
    PersonalInfo,
    ProjectEntry,
    ResumeSections,
)
from resume_import.core.section_segmenter import SectionBlock, SectionType, segment_sections
from resume_import.core.skills_parser import dedupe_skills, parse_skills_block


def _summary_text(blocks: List[SectionBlock]) -> Optional[str]:
    parts = [" ".join(b.body.split()) for b in blocks if b.type == SectionType.SUMMARY]
    summary = " ".join(p for p in parts if p)
    return summary or None


def _merge_unique(target: list, items: list) -> None:
    seen = {item.dedupe_key() for item in target}
    for item in items:
        if item.dedupe_key() not in seen:
            seen.add(item.dedupe_key())
            target.append(item)


def extract_sections(
    blocks: List[SectionBlock],
    options: ParseOptions,
    tables: HeuristicTables = DEFAULT_TABLES,
    settings: Optional[Settings] = None,
    sink: Optional[DiagnosticSink] = None,
) -> ResumeSections:
    """
    Route each block to its parser. One parser instance per section type, so
    entries repeated across blocks (a section split by a page break, a
    fingerprinted fragment) are merged without duplicates.
    """
    settings = settings or get_settings()
    sink = resolve_sink(sink)

    experience = ExperienceParser(tables, sink)
    education = EducationParser(tables, sink)
    skills: List[str] = []
    projects: List[ProjectEntry] = []
    certifications: List[CertificationEntry] = []

    enabled: Dict[SectionType, bool] = {
        SectionType.EXPERIENCE: options.extract_experience,
        SectionType.EDUCATION: options.extract_education,
        SectionType.SKILLS: options.extract_skills,
        SectionType.PROJECTS: options.extract_projects,
        SectionType.CERTIFICATIONS: options.extract_certifications,
    }

    for block in blocks:
        if block.type is None or not enabled.get(block.type, False):
            continue

        if block.type == SectionType.EXPERIENCE:
            experience.feed(block.text)
        elif block.type == SectionType.EDUCATION:
            education.feed(block.text)
        elif block.type == SectionType.SKILLS:
            found = parse_skills_block(block.text, tables, settings.skills_fallback_threshold, sink)
            skills = dedupe_skills(skills + found)
        elif block.type == SectionType.PROJECTS:
            _merge_unique(projects, parse_projects_block(block.text, sink))
        elif block.type == SectionType.CERTIFICATIONS:
            _merge_unique(certifications, parse_certifications_block(block.text, sink))

    # Empty lists stay None so "not found" and "found nothing" look the same on the wire
    return ResumeSections(
        experience=experience.entries or None,
        education=education.entries or None,
        skills=skills or None,
        projects=projects or None,
        certifications=certifications or None,
    )


def parse_resume_text(
    text: str,
    options: Optional[ParseOptions] = None,
    tables: HeuristicTables = DEFAULT_TABLES,
    sink: Optional[DiagnosticSink] = None,
    settings: Optional[Settings] = None,
) -> ParsedResumeData:
    """
    Parse normalized resume text.

    The atomic extractors (dates, emails, phones) always run over the full
    text; personal info and each section type can be switched off via options.
    """
    options = options or ParseOptions()
    settings = settings or get_settings()
    sink = resolve_sink(sink)

    blocks = segment_sections(text, tables, sink)

    personal_info = PersonalInfo()
    if options.extract_personal_info:
        personal_info = extract_personal_info(text, tables, settings.personal_scan_lines, sink)
        personal_info.summary = _summary_text(blocks)

    sections = extract_sections(blocks, options, tables, settings, sink)
    confidence = ConfidenceCalculator.overall(personal_info, sections)
    sink("parse.complete", {"confidence": round(confidence, 3), "entries": sections.entry_count()})

    return ParsedResumeData(
        personal_info=personal_info,
        sections=sections,
        raw_text=text,
        extracted_dates=extract_dates(text),
        extracted_emails=extract_emails(text),
        extracted_phones=extract_phone_numbers(text),
        confidence=confidence,
    )


def has_meaningful_content(data: ParsedResumeData) -> bool:
    """False when neither a personal-info field nor a single section entry was extracted."""
    return bool(data.personal_info.populated_fields()) or data.sections.entry_count() > 0
