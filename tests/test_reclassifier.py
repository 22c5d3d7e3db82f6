"""Moving misplaced lines and records to the section they belong to."""

from resume_structurer.core.config import SectionKind
from resume_structurer.core.pipeline import ResumeParser
from resume_structurer.core.schemas import Education, Experience, Language, ParsedResume, Skill
from resume_structurer.core.sections import DetectedSections

K = SectionKind

parser = ResumeParser()
reclassifier = parser.reclassifier


def reclassify(blocks, headed=()):
    return reclassifier.reclassify_lines(DetectedSections(blocks=blocks, headed=set(headed)))


# ===== LINE LEVEL =====

def test_job_entry_inside_education_moves_to_experience():
    sections = reclassify({K.EDUCATION: [
        "Bachelor of Science in Biology", "State University", "2010 - 2014",
        "Research Assistant", "Acme Labs", "2014 - 2015",
    ]}, headed=[K.EDUCATION])

    assert sections.lines(K.EDUCATION) == ["Bachelor of Science in Biology", "State University", "2010 - 2014"]
    assert sections.lines(K.EXPERIENCE) == ["Research Assistant", "Acme Labs", "2014 - 2015"]


def test_degree_entry_inside_experience_moves_to_education():
    sections = reclassify({K.EXPERIENCE: [
        "Software Engineer", "Acme Corp", "2018 - 2020",
        "Master of Science in Physics", "State University", "2016 - 2018",
    ]}, headed=[K.EXPERIENCE])

    assert sections.lines(K.EXPERIENCE) == ["Software Engineer", "Acme Corp", "2018 - 2020"]
    assert sections.lines(K.EDUCATION) == ["Master of Science in Physics", "State University", "2016 - 2018"]


def test_narrative_and_email_leave_the_skills_block():
    narrative = "Experienced data engineer with a proven track record of building reliable pipelines"
    sections = reclassify({K.SKILLS: ["Python, SQL, Docker", narrative, "jane@example.com"]}, headed=[K.SKILLS])

    assert sections.lines(K.SKILLS) == ["Python, SQL, Docker"]
    assert sections.lines(K.SUMMARY) == [narrative]
    assert sections.lines(K.CONTACT) == ["jane@example.com"]


def test_narrative_stays_put_when_summary_has_a_heading():
    narrative = "Experienced data engineer with a proven track record of building reliable pipelines"
    sections = reclassify(
        {K.SUMMARY: ["Data engineer."], K.SKILLS: ["Python, SQL, Docker", narrative]},
        headed=[K.SUMMARY, K.SKILLS],
    )
    assert sections.lines(K.SKILLS) == ["Python, SQL, Docker", narrative]
    assert sections.lines(K.SUMMARY) == ["Data engineer."]


def test_skill_list_leaves_the_contact_block():
    sections = reclassify({K.CONTACT: ["Jane Doe", "jane@example.com", "Python, SQL, Docker"]})

    assert sections.lines(K.CONTACT) == ["Jane Doe", "jane@example.com"]
    assert sections.lines(K.SKILLS) == ["Python, SQL, Docker"]


# ===== RECORD LEVEL =====

def test_education_record_that_is_a_job():
    resume = ParsedResume(education=[
        Education(id=1, degree="Bachelor of Science in Biology", school="State University", endDate="2014"),
        Education(id=2, degree="Research Assistant", school="Acme Labs", startDate="2014", endDate="2015"),
    ])
    r = reclassifier.reclassify_records(resume)

    assert [(e.id, e.degree) for e in r.education] == [(1, "Bachelor of Science in Biology")]
    assert [(e.id, e.jobTitle, e.company, e.startDate, e.endDate) for e in r.experiences] == [
        (1, "Research Assistant", "Acme Labs", "2014", "2015"),
    ]


def test_experience_record_that_is_a_degree():
    resume = ParsedResume(experiences=[
        Experience(id=1, jobTitle="Teacher", company="Lincoln High School"),
        Experience(id=2, jobTitle="Master of Science in Physics", company="State University", endDate="2018"),
    ])
    r = reclassifier.reclassify_records(resume)

    assert [(e.id, e.jobTitle) for e in r.experiences] == [(1, "Teacher")]
    assert [(e.id, e.degree, e.school, e.endDate) for e in r.education] == [
        (1, "Master of Science in Physics", "State University", "2018"),
    ]


def test_language_names_listed_as_skills_become_languages():
    resume = ParsedResume(skills=[Skill(id=1, name="Python"), Skill(id=2, name="Spanish"), Skill(id=3, name="SQL")])
    r = reclassifier.reclassify_records(resume)

    assert [(s.id, s.name) for s in r.skills] == [(1, "Python"), (2, "SQL")]
    assert [(x.id, x.name) for x in r.languages] == [(1, "Spanish")]


def test_language_skills_stay_when_resume_has_a_language_section():
    skills = [Skill(id=1, name="Python"), Skill(id=2, name="Spanish")]

    r = reclassifier.reclassify_records(ParsedResume(skills=skills), headed=(K.LANGUAGES,))
    assert [s.name for s in r.skills] == ["Python", "Spanish"]

    r = reclassifier.reclassify_records(ParsedResume(skills=skills, languages=[Language(id=1, name="French")]))
    assert [s.name for s in r.skills] == ["Python", "Spanish"]
    assert [x.name for x in r.languages] == ["French"]


# ===== THROUGH THE PIPELINE =====

def test_misplaced_job_and_language_end_up_in_the_right_lists():
    text = (
        "Jane Doe\njane@example.com\n\n"
        "EDUCATION\nBachelor of Science in Biology\nState University\n2010 - 2014\n"
        "Research Assistant\nAcme Labs\n2014 - 2015\n\n"
        "SKILLS\nPython, Spanish, SQL"
    )
    data = parser.parse_text(text).data

    assert [(e.jobTitle, e.company, e.startDate, e.endDate) for e in data.experiences] == [
        ("Research Assistant", "Acme Labs", "2014", "2015"),
    ]
    assert [s.name for s in data.skills] == ["Python", "SQL"]
    assert [x.name for x in data.languages] == ["Spanish"]
