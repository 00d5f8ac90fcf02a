"""
Unit tests for text_normalization module.

Tests the whitespace canonicalization and the PDF structure recovery with
realistic line-merge patterns.
"""

import pytest
from resume_import.core.text_normalization import normalize_text, normalize_whitespace


SAMPLES = [
    "Jane Smith\r\njane@x.com\r\n\r\n\r\n\r\nEXPERIENCE",
    "Skills:\tPython ,Go ;Rust",
    "▪ Built things\n· Led team\n\f\nPage two",
    "   leading and trailing   \n\n\n\n",
    "",
]


class TestNormalizeWhitespace:

    def test_line_breaks_are_unified(self):
        assert normalize_whitespace("a\r\nb\rc\fd") == "a\nb\nc\nd"

    def test_bullet_variants_become_one_glyph(self):
        text = normalize_whitespace("▪ one\n· two\n‣ three\n⁃ four")
        assert text == "• one\n• two\n• three\n• four"

    def test_spaces_collapse_and_punctuation_tightens(self):
        assert normalize_whitespace("Python ,  Go ;  Rust .") == "Python, Go; Rust."

    def test_comma_glued_to_letter_gets_a_space(self):
        assert normalize_whitespace("Austin,TX") == "Austin, TX"

    def test_blank_line_runs_collapse(self):
        assert normalize_whitespace("a\n\n\n\n\nb") == "a\n\nb"

    def test_tabs_and_nbsp_become_single_spaces(self):
        assert normalize_whitespace("Jane\t\u00a0 Smith") == "Jane Smith"

    @pytest.mark.parametrize("sample", SAMPLES)
    def test_idempotent(self, sample):
        once = normalize_whitespace(sample)
        assert normalize_whitespace(once) == once


class TestPdfStructureRecovery:

    def test_title_merged_onto_previous_line_is_split(self):
        text = normalize_text("Built APIs SENIOR SOFTWARE ENGINEER", source="pdf")
        assert text == "Built APIs\nSENIOR SOFTWARE ENGINEER"

    def test_date_merged_onto_location_is_split(self):
        text = normalize_text("Austin, TX 01/2020 - Present", source="pdf")
        assert text == "Austin, TX\n01/2020 - Present"

    def test_header_merged_onto_previous_line_is_split(self):
        text = normalize_text("jane@x.com EXPERIENCE", source="pdf")
        assert text == "jane@x.com\nEXPERIENCE"

    def test_header_title_company_and_location_merged_on_one_line(self):
        text = normalize_text("EXPERIENCE SOFTWARE ENGINEER ACME CORP San Francisco, CA", source="pdf")
        assert text.split("\n") == ["EXPERIENCE", "SOFTWARE ENGINEER", "ACME CORP", "San Francisco, CA"]

    def test_content_after_header_is_moved_to_its_own_line(self):
        assert normalize_text("SKILLS Python, Go", source="pdf") == "SKILLS\nPython, Go"

    def test_company_name_line_is_left_alone(self):
        assert normalize_text("ACME TECHNOLOGIES", source="pdf") == "ACME TECHNOLOGIES"

    def test_page_numbers_are_dropped(self):
        text = normalize_text("Jane Smith\n2\nPage 1 of 2\nACME CORP", source="pdf")
        assert "Page 1" not in text
        assert text.split("\n") == ["Jane Smith", "", "ACME CORP"]

    def test_txt_source_keeps_lines_as_written(self):
        raw = "Built APIs SENIOR SOFTWARE ENGINEER"
        assert normalize_text(raw, source="txt") == raw

    def test_empty_input(self):
        assert normalize_text("", source="pdf") == ""
