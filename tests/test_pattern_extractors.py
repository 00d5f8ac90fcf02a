"""Tests for the atomic extractors and the personal-info heuristics."""

import pytest
from resume_import.core.pattern_extractors import (
    extract_dates,
    extract_emails,
    extract_full_name,
    extract_linkedin,
    extract_location,
    extract_personal_info,
    extract_phone_numbers,
    extract_websites,
    find_date_range,
    is_location_line,
    strip_bullet,
)


# ===== EMAILS / PHONES =====

def test_single_email_round_trip():
    assert extract_emails("Contact: jane.smith@example.com for details") == ["jane.smith@example.com"]


def test_emails_deduplicated_in_order():
    text = "a@x.com b@y.org a@x.com"
    assert extract_emails(text) == ["a@x.com", "b@y.org"]


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("(415) 555-0100", "(415) 555-0100"),
        ("415.555.0100", "(415) 555-0100"),
        ("415-555-0100", "(415) 555-0100"),
        ("4155550100", "(415) 555-0100"),
        ("+1 415-555-0100", "+1 (415) 555-0100"),
        ("+44 (020) 555-0100", "+44 (020) 555-0100"),
    ],
)
def test_phone_canonical_form(raw, expected):
    assert extract_phone_numbers(f"Phone: {raw}") == [expected]


def test_phone_not_found_in_long_digit_runs():
    assert extract_phone_numbers("Order 123456789012345") == []


# ===== DATES =====

def test_dates_grouped_by_pattern_and_not_deduplicated():
    dates = extract_dates("01/2020 - Present\nMay 2018 - 12/2019")
    assert dates == ["01/2020", "12/2019", "May 2018", "2020", "2018", "2019"]


# ===== LINKS =====

def test_linkedin():
    text = "linkedin.com/in/janesmith | github.com/jane"
    assert extract_linkedin(text) == "linkedin.com/in/janesmith"


def test_websites_skip_email_domains_and_jargon():
    text = "jane@gmail.com | janesmith.dev | Node.js | https://github.com/jane | linkedin.com/in/jane"
    assert extract_websites(text) == ["janesmith.dev", "https://github.com/jane"]


# ===== NAME / LOCATION =====

def test_full_name_from_first_line():
    assert extract_full_name("Jane Smith\njane@x.com") == "Jane Smith"


def test_full_name_when_contact_details_share_the_line():
    assert extract_full_name("Jane Smith jane@x.com (415) 555-0100\nEXPERIENCE") == "Jane Smith"


def test_full_name_skips_document_titles():
    assert extract_full_name("Curriculum Vitae\nJane Smith\njane@x.com") == "Jane Smith"


def test_full_name_skips_job_titles():
    assert extract_full_name("SOFTWARE ENGINEER\nJane Q. Smith") == "Jane Q. Smith"


def test_full_name_handles_caps_and_particles():
    assert extract_full_name("JANE O'BRIEN\njane@x.com") == "JANE O'BRIEN"
    assert extract_full_name("Mary-Jane McDonald\njane@x.com") == "Mary-Jane McDonald"


def test_location_from_contact_block():
    assert extract_location("Jane Smith\nAustin, TX | jane@x.com") == "Austin, TX"


def test_location_requires_us_state_code():
    assert extract_location("Jane Smith\nLondon, UK") is None


def test_location_stops_at_first_section():
    text = "Jane Smith\njane@x.com\nEXPERIENCE\nACME CORP\nAustin, TX"
    assert extract_location(text) is None


def test_personal_info_summary_left_for_the_assembler():
    info = extract_personal_info("Jane Smith\njane@x.com\n(415) 555-0100\nSeattle, WA\njanesmith.dev")
    assert info.full_name == "Jane Smith"
    assert info.email == "jane@x.com"
    assert info.phone == "(415) 555-0100"
    assert info.location == "Seattle, WA"
    assert info.website == "janesmith.dev"
    assert info.summary is None


# ===== LINE SHAPES =====

class TestFindDateRange:

    def test_numeric_range_to_present(self):
        dr = find_date_range("01/2020 - Present")
        assert (dr.start, dr.end, dr.remainder) == ("01/2020", "Present", "")
        assert dr.current

    def test_month_names_with_to(self):
        dr = find_date_range("Jan 2019 to Mar 2021")
        assert (dr.start, dr.end) == ("Jan 2019", "Mar 2021")
        assert not dr.current

    def test_open_ended_words_become_present(self):
        assert find_date_range("2018 – current").end == "Present"

    def test_remainder_keeps_surrounding_text(self):
        dr = find_date_range("Engineer | 2019 - 2021")
        assert dr.remainder == "Engineer"

    def test_single_date_is_end_only(self):
        dr = find_date_range("Expected May 2024")
        assert dr.start is None
        assert dr.end == "May 2024"

    def test_no_date(self):
        assert find_date_range("Built things") is None


def test_location_lines():
    assert is_location_line("San Francisco, CA")
    assert is_location_line("Austin, TX, USA")
    assert is_location_line("Remote")
    assert not is_location_line("Engineer, Platform")
    assert not is_location_line("Built a service in Austin, TX for clients")


def test_strip_bullet():
    assert strip_bullet("• Built things") == "Built things"
    assert strip_bullet("- Built things") == "Built things"
    assert strip_bullet("-5% churn") is None
    assert strip_bullet("Built things") is None
