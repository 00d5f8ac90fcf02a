from resume_import.core.confidence_calculator import ConfidenceCalculator
from resume_import.core.diagnostics import CollectingSink
from resume_import.core.schemas import ParseOptions
from resume_import.core.text_parser import has_meaningful_content, parse_resume_text


RESUME = """Jane Smith
jane@x.com
SUMMARY
Backend engineer with 8 years
building APIs.
SKILLS
Python, Go, Docker
PROJECTS
Resume Parser - Python, FastAPI
• Parsed resumes
CERTIFICATIONS
PMP | PMI"""


def test_summary_comes_from_summary_section():
    data = parse_resume_text(RESUME)
    assert data.personal_info.summary == "Backend engineer with 8 years building APIs."


def test_sections_are_populated():
    data = parse_resume_text(RESUME)
    assert data.sections.skills == ["Python", "Go", "Docker"]
    assert data.sections.projects[0].name == "Resume Parser"
    assert data.sections.projects[0].technologies == ["Python", "FastAPI"]
    assert (data.sections.certifications[0].name, data.sections.certifications[0].issuer) == ("PMP", "PMI")
    assert data.sections.experience is None
    assert data.sections.education is None


def test_standalone_portfolio_header_opens_projects():
    data = parse_resume_text("Jane Smith\njane@x.com\nPORTFOLIO\nResume Parser - Python, FastAPI\n• Parsed resumes")
    assert data.sections.projects[0].name == "Resume Parser"
    assert data.sections.projects[0].technologies == ["Python", "FastAPI"]


def test_raw_text_and_atomic_extractors():
    data = parse_resume_text(RESUME)
    assert data.raw_text == RESUME
    assert data.extracted_emails == ["jane@x.com"]
    assert data.extracted_phones == []


def test_disabled_section_stays_none():
    data = parse_resume_text(RESUME, ParseOptions(extract_skills=False))
    assert data.sections.skills is None
    assert data.sections.projects is not None


def test_personal_info_switched_off_keeps_atomic_lists():
    data = parse_resume_text(RESUME, ParseOptions(extract_personal_info=False))
    assert data.personal_info.full_name is None
    assert data.personal_info.email is None
    assert data.personal_info.summary is None
    assert data.extracted_emails == ["jane@x.com"]


def test_confidence_matches_calculator(jane_smith_text):
    data = parse_resume_text(jane_smith_text)
    assert data.confidence == ConfidenceCalculator.overall(data.personal_info, data.sections)
    assert 0.0 < data.confidence <= 1.0


def test_completion_event_reaches_sink():
    sink = CollectingSink()
    parse_resume_text(RESUME, sink=sink)
    assert sink.names()[-1] == "parse.complete"


def test_meaningful_content():
    assert has_meaningful_content(parse_resume_text(RESUME))
    assert not has_meaningful_content(parse_resume_text("lorem ipsum dolor sit amet"))
