"""Mapping of free-form AI JSON onto ParsedResume."""

from resume_structurer.core.config import ParserConfig
from resume_structurer.core.schema_normalizer import SchemaNormalizer, norm_key

normalizer = SchemaNormalizer(ParserConfig())


def test_norm_key():
    assert norm_key("Work Experience") == norm_key("work_experience") == norm_key("workExperience")


def test_non_dict_gives_empty_record():
    assert normalizer.normalize(None).model_dump() == normalizer.normalize({}).model_dump()
    assert normalizer.normalize(["not", "a", "dict"]).experiences == []


def test_alternate_keys_and_full_name():
    data = {
        "work_experience": [{"title": "Engineer", "employer": "Acme", "dates": "Jan 2020 - Present"}],
        "certs": ["AWS Solutions Architect"],
        "full_name": "Jane Q Doe",
        "email": "jane@example.com",
        "favourite_colour": "blue",
    }
    resume = normalizer.normalize(data)

    assert (resume.contact.firstName, resume.contact.lastName) == ("Jane", "Q Doe")
    assert resume.contact.email == "jane@example.com"
    exp = resume.experiences[0]
    assert (exp.id, exp.jobTitle, exp.company) == (1, "Engineer", "Acme")
    assert (exp.startDate, exp.endDate) == ("Jan 2020", "Present")
    assert resume.certifications[0].title == "AWS Solutions Architect"


def test_current_flag_sets_present():
    data = {"experience": {"position": "Developer", "company": "Globex", "start_date": "2019", "current": True}}
    exp = normalizer.normalize(data).experiences[0]
    assert exp.jobTitle == "Developer"
    assert (exp.startDate, exp.endDate) == ("2019", "Present")


def test_skills_grouped_by_category():
    data = {"skills": {"Programming": ["Python", "Go"], "Tools": "Git, Docker"}}
    skills = normalizer.normalize(data).skills
    assert [s.name for s in skills] == ["Python", "Go", "Git", "Docker"]
    assert [s.id for s in skills] == [1, 2, 3, 4]


def test_skills_nested_items_and_records():
    data = {"skills": [{"category": "Languages", "items": ["Python"]}, {"name": "SQL", "level": "Expert"}]}
    skills = normalizer.normalize(data).skills
    assert [(s.name, s.level) for s in skills] == [("Python", ""), ("SQL", "Expert")]


def test_bare_strings_and_scalars():
    data = {
        "education": ["BSc Physics"],
        "hobbies": "Chess, Hiking",
        "summary": ["Line a", "Line b"],
    }
    resume = normalizer.normalize(data)
    assert resume.education[0].degree == "BSc Physics"
    assert resume.hobbies == ["Chess", "Hiking"]
    assert resume.summary == "Line a Line b"


def test_contact_links_and_location():
    data = {"contact": {"name": "Jane Doe", "linkedin": "https://linkedin.com/in/jane", "location": "Austin, TX"}}
    resume = normalizer.normalize(data)
    assert (resume.contact.firstName, resume.contact.lastName) == ("Jane", "Doe")
    assert resume.contact.city == "Austin"
    assert [(w.label, w.url) for w in resume.websites] == [("LinkedIn", "https://linkedin.com/in/jane")]


def test_empty_records_dropped():
    resume = normalizer.normalize({"experiences": [{}, {"title": ""}, {"title": "Engineer"}]})
    assert [e.jobTitle for e in resume.experiences] == ["Engineer"]
    assert resume.experiences[0].id == 1
