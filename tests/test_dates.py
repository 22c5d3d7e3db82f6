"""Date normalization and range parsing."""

import pytest
from resume_structurer.core.dates import (
    is_canonical_date,
    is_date_line,
    is_date_shaped,
    normalize_date,
    parse_date_range,
    strip_dates,
    year_of,
)


@pytest.mark.parametrize("raw,expected", [
    ("01/2019", "Jan 2019"),
    ("12-2021", "Dec 2021"),
    ("January 2020", "Jan 2020"),
    ("sept 2018", "Sep 2018"),
    ("Jan. 2020", "Jan 2020"),
    ("2019", "2019"),
    ("current", "Present"),
    ("Ongoing", "Present"),
    ("2019 - Present", "2019 - Present"),
    ("2019 – present", "2019 - Present"),
    ("03/2017 — 06/2019", "Mar 2017 - Jun 2019"),
    ("Spring term", "Spring term"),
    ("13/2019", "13/2019"),
])
def test_normalize_date(raw, expected):
    assert normalize_date(raw) == expected


@pytest.mark.parametrize("value", ["Jan 2019", "2019", "Present", "Jan 2020 - Present", "Spring term"])
def test_normalize_date_is_idempotent(value):
    once = normalize_date(value)
    assert normalize_date(once) == once


def test_normalize_date_empty():
    assert normalize_date("") == ""
    assert normalize_date(None) == ""


class TestParseDateRange:
    def test_month_year_to_present(self):
        assert parse_date_range("Jan 2020 - Present") == ("Jan 2020", "Present")

    def test_embedded_in_header(self):
        assert parse_date_range("Engineer | Acme | 06/2018 to 12/2019") == ("Jun 2018", "Dec 2019")

    def test_year_range(self):
        assert parse_date_range("2015-2019") == ("2015", "2019")

    def test_since(self):
        assert parse_date_range("since 2021") == ("2021", "Present")

    def test_lone_date_is_end_date(self):
        assert parse_date_range("Graduated May 2020") == ("", "May 2020")

    def test_nothing(self):
        assert parse_date_range("Built internal tools.") == ("", "")


def test_is_date_line():
    assert is_date_line("Jan 2020 - Present")
    assert is_date_line("2019")
    assert is_date_line("Expected 2025")
    assert not is_date_line("Software Engineer")


def test_strip_dates_leaves_the_rest():
    assert strip_dates("Acme Corp | Jan 2020 - Present") == "Acme Corp"
    assert strip_dates("Graduated 2020") == ""


def test_is_date_shaped():
    assert is_date_shaped("2019 - 2021")
    assert is_date_shaped("12/05/2020")
    assert not is_date_shaped("Python 3")


def test_canonical_and_year():
    assert is_canonical_date("Jan 2019")
    assert not is_canonical_date("01/2019")
    assert year_of("Present") == 9999
    assert year_of("Mar 2017") == 2017
    assert year_of("") is None
