"""Tests for contact extraction: email, phone, name strategies, headline, location."""

from resume_structurer.core.config import ParserConfig, resolve_section_aliases
from resume_structurer.core.strategies import build_extractors

config = ParserConfig()
extractors = build_extractors(config, resolve_section_aliases(config))
parser = extractors.contact


def parse(text: str):
    return parser.parse(text, text)


def test_basic_contact_block():
    c = parse("John Smith\njohn@example.com\n555-123-4567")
    assert c.firstName == "John"
    assert c.lastName == "Smith"
    assert c.email == "john@example.com"
    assert c.phone == "555-123-4567"


def test_name_with_middle_initial():
    c = parse("Mary J. Watson\nmary@example.com")
    assert (c.firstName, c.lastName) == ("Mary", "J. Watson")


def test_name_with_label_prefix():
    c = parse("Name: Carlos Mendez\ncarlos@example.com")
    assert (c.firstName, c.lastName) == ("Carlos", "Mendez")


def test_name_on_pipe_separated_header_line():
    c = parse("Jane Doe | jane@example.com | (555) 987-6543")
    assert (c.firstName, c.lastName) == ("Jane", "Doe")
    assert c.email == "jane@example.com"
    assert c.phone == "(555) 987-6543"


def test_all_caps_name():
    c = parse("JANE DOE\njane@example.com")
    assert (c.firstName, c.lastName) == ("JANE", "DOE")


def test_job_title_is_not_taken_as_name():
    c = parse("Senior Software Engineer\nLisa Wong\nlisa@example.com")
    assert (c.firstName, c.lastName) == ("Lisa", "Wong")
    assert c.desiredJobTitle == "Senior Software Engineer"


def test_headline_below_name():
    c = parse("Jane Doe\nData Analyst\njane@example.com")
    assert c.desiredJobTitle == "Data Analyst"


def test_experience_header_is_not_a_headline():
    c = parse("Jane Doe\njane@example.com\n555-123-4567\nMarketing Manager at Brandify Agency\n2019 - Present")
    assert c.desiredJobTitle == ""


def test_title_followed_by_dates_is_not_a_headline():
    c = parse("Jane Doe\njane@example.com\nSoftware Engineer\nJan 2020 - Present")
    assert c.desiredJobTitle == ""


def test_headline_stops_at_first_section():
    text = "Jane Doe\njane@example.com\n\nEXPERIENCE\nSoftware Engineer\nAcme Corp"
    assert parser.parse("Jane Doe\njane@example.com", text).desiredJobTitle == ""


def test_international_phone():
    c = parse("Jane Doe\n+44 20 7946 0958")
    assert c.phone == "+44 20 7946 0958"


def test_year_range_is_not_a_phone():
    c = parse("Jane Doe\n2019-2022")
    assert c.phone == ""


def test_city_state_location():
    c = parse("Jane Doe\nAustin, TX 78701\njane@example.com")
    assert c.city == "Austin"
    assert c.postCode == "78701"


def test_city_before_country():
    c = parse("Jane Doe\nLagos, Nigeria\njane@example.com")
    assert c.city == "Lagos"
    assert c.country == "Nigeria"


def test_street_address():
    c = parse("Jane Doe\n42 Baker Street, London\njane@example.com")
    assert c.address == "42 Baker Street"


def test_empty_block_falls_back_to_document_top():
    c = parser.parse("", "Jane Doe\njane@example.com\n\nSKILLS\nPython")
    assert c.email == "jane@example.com"
    assert c.firstName == "Jane"
