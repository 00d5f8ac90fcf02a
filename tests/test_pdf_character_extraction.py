"""
Test suite for coordinate-based PDF line reconstruction.

Runs are built by hand so the geometry is exact; one end-to-end test goes
through pdfplumber with a generated PDF.
"""

from resume_import.core.pdf_character_extractor import (
    TextRun,
    group_runs_into_lines,
    join_line,
    reconstruct_document_text,
    reconstruct_page_text,
    runs_from_words,
)
from resume_import.core.pdf_extractor import extract_pdf_text


PAGE_HEIGHT = 792.0


def run(text, x, y, width, height=10.0):
    return TextRun(text=text, x=x, y=y, width=width, height=height)


class TestJoinLine:
    """Spaces are inserted only across real horizontal gaps."""

    def test_tight_runs_are_concatenated(self):
        line = [run("Hel", 0, 700, 15), run("lo", 15.5, 700, 10)]
        assert join_line(line) == "Hello"

    def test_gap_above_ratio_gets_a_space(self):
        line = [run("Hello", 0, 700, 25), run("World", 40, 700, 25)]
        assert join_line(line) == "Hello World"

    def test_ratio_is_relative_to_glyph_height(self):
        # 2pt gap: below 0.3 * 10, above 0.3 * 5
        assert join_line([run("a", 0, 700, 5), run("b", 7, 700, 5)]) == "ab"
        assert join_line([run("a", 0, 700, 5, 5.0), run("b", 7, 700, 5, 5.0)]) == "a b"

    def test_font_size_used_when_height_missing(self):
        runs = [
            TextRun("a", 0, 700, 5, 0.0, font_size=20.0),
            TextRun("b", 10, 700, 5, 0.0, font_size=20.0),
        ]
        # 5pt gap < 0.3 * 20
        assert join_line(runs) == "ab"

    def test_empty_line(self):
        assert join_line([]) == ""


class TestGroupRuns:

    def test_runs_sorted_by_x_within_line(self):
        runs = [run("World", 40, 700, 25), run("Hello", 0, 700, 25)]
        lines = group_runs_into_lines(runs, PAGE_HEIGHT)
        assert [[r.text for r in line] for line in lines] == [["Hello", "World"]]

    def test_baseline_jitter_stays_on_one_line(self):
        runs = [run("Jane", 0, 700.0, 20), run("Smith", 30, 699.5, 25)]
        assert len(group_runs_into_lines(runs, PAGE_HEIGHT)) == 1

    def test_lines_ordered_top_to_bottom(self):
        runs = [run("second", 0, 650, 30), run("first", 0, 700, 30)]
        text = reconstruct_page_text(runs, PAGE_HEIGHT)
        assert text == "first\nsecond"

    def test_whitespace_runs_are_dropped(self):
        runs = [run("   ", 0, 700, 10), run("", 0, 680, 0), run("kept", 0, 660, 20)]
        assert reconstruct_page_text(runs, PAGE_HEIGHT) == "kept"


def test_runs_from_words_flips_y_axis():
    words = [{"text": "Jane", "x0": 72, "x1": 100, "top": 100, "bottom": 111, "size": 11}]
    (r,) = runs_from_words(words, PAGE_HEIGHT)
    assert r.text == "Jane"
    assert r.x == 72.0
    assert r.width == 28.0
    assert r.y == PAGE_HEIGHT - 111
    assert r.height == 11.0
    assert r.font_size == 11.0


def test_document_pages_joined_in_order():
    assert reconstruct_document_text(["page one", "", "page two"]) == "page one\n\npage two"


def test_generated_pdf_lines_come_back_in_order(make_pdf):
    pdf = make_pdf(["Jane Smith", "jane@x.com", "SOFTWARE ENGINEER"])
    lines = extract_pdf_text(pdf).split("\n")
    assert lines == ["Jane Smith", "jane@x.com", "SOFTWARE ENGINEER"]
