"""
Parser configuration.

Everything the heuristics need to know about resumes in general (section
aliases, keyword lists, regex sets, scoring weights) lives in one
`ParserConfig` object that is built once and passed by reference to every
stage. Stages read it; none of them ever writes to it.

AI transport settings come from the environment (optionally a .env file),
the same way the rest of the deployment is configured.
"""

import os
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, Field


class SectionKind(str, Enum):
    CONTACT = "contact"
    SUMMARY = "summary"
    EXPERIENCE = "experience"
    EDUCATION = "education"
    SKILLS = "skills"
    LANGUAGES = "languages"
    CERTIFICATIONS = "certifications"
    AWARDS = "awards"
    WEBSITES = "websites"
    REFERENCES = "references"
    HOBBIES = "hobbies"

    @property
    def record_key(self) -> str:
        """Top-level key of this section in ParsedResume."""
        return "experiences" if self is SectionKind.EXPERIENCE else self.value


# Heading lookup order. "profile" style aliases are ambiguous between contact
# and summary, so summary is registered first and wins.
SECTION_ORDER: Tuple[SectionKind, ...] = (
    SectionKind.SUMMARY,
    SectionKind.EXPERIENCE,
    SectionKind.EDUCATION,
    SectionKind.SKILLS,
    SectionKind.LANGUAGES,
    SectionKind.CERTIFICATIONS,
    SectionKind.AWARDS,
    SectionKind.WEBSITES,
    SectionKind.REFERENCES,
    SectionKind.HOBBIES,
    SectionKind.CONTACT,
)

# Minimal heading knowledge used when the configured aliases are empty
FALLBACK_SECTION_ALIASES: Dict[SectionKind, Tuple[str, ...]] = {
    SectionKind.CONTACT: ("contact", "personal information"),
    SectionKind.SUMMARY: ("summary", "profile", "objective"),
    SectionKind.EXPERIENCE: ("experience", "work experience", "employment"),
    SectionKind.EDUCATION: ("education",),
    SectionKind.SKILLS: ("skills",),
    SectionKind.LANGUAGES: ("languages",),
    SectionKind.CERTIFICATIONS: ("certifications",),
    SectionKind.AWARDS: ("awards",),
    SectionKind.WEBSITES: ("websites", "links"),
    SectionKind.REFERENCES: ("references",),
    SectionKind.HOBBIES: ("hobbies", "interests"),
}


class SectionSpec(BaseModel):
    aliases: List[str] = Field(default_factory=list)
    weight: float = Field(default=1.0, ge=0.0, description="Priority weight in the overall score")
    required_fields: List[str] = Field(default_factory=list)
    optional_fields: List[str] = Field(default_factory=list)
    missing_suggestion: Optional[str] = None


def _default_sections() -> Dict[SectionKind, SectionSpec]:
    return {
        SectionKind.CONTACT: SectionSpec(
            aliases=["contact", "contact information", "contact info", "contact details",
                     "personal", "personal information", "personal details", "details", "info", "header"],
            weight=20,
            required_fields=["firstName", "lastName", "email"],
            optional_fields=["phone", "address", "city", "country", "postCode", "desiredJobTitle"],
            missing_suggestion="Contact information could not be extracted. Please verify your name and email.",
        ),
        SectionKind.SUMMARY: SectionSpec(
            aliases=["summary", "professional summary", "profile", "professional profile", "objective",
                     "career objective", "overview", "about", "about me", "introduction", "executive summary"],
            weight=10,
            optional_fields=["content"],
            missing_suggestion="No professional summary was found. Consider adding a short summary.",
        ),
        SectionKind.EXPERIENCE: SectionSpec(
            aliases=["experience", "work experience", "employment", "employment history",
                     "professional experience", "career", "career history", "work history", "positions"],
            weight=25,
            required_fields=["jobTitle", "company"],
            optional_fields=["location", "startDate", "endDate", "description"],
            missing_suggestion="Work experience section not found. You may need to add this manually.",
        ),
        SectionKind.EDUCATION: SectionSpec(
            aliases=["education", "academic", "academics", "qualifications", "degrees", "schooling",
                     "academic background", "education and training"],
            weight=20,
            required_fields=["school", "degree"],
            optional_fields=["location", "startDate", "endDate", "description"],
            missing_suggestion="Education section not found. Please add your educational background.",
        ),
        SectionKind.SKILLS: SectionSpec(
            aliases=["skills", "technical skills", "key skills", "core skills", "competencies",
                     "core competencies", "expertise", "areas of expertise", "capabilities",
                     "proficiencies", "technologies"],
            weight=15,
            required_fields=["name"],
            optional_fields=["level"],
            missing_suggestion="No skills were detected. Add your key skills so they can be matched.",
        ),
        SectionKind.LANGUAGES: SectionSpec(
            aliases=["languages", "language skills", "language proficiency", "bilingual", "multilingual"],
            weight=2,
            required_fields=["name"],
            optional_fields=["proficiency"],
        ),
        SectionKind.CERTIFICATIONS: SectionSpec(
            aliases=["certifications", "certificates", "professional certifications", "credentials",
                     "accreditations", "licenses", "licenses and certifications"],
            weight=2,
            required_fields=["title"],
        ),
        SectionKind.AWARDS: SectionSpec(
            aliases=["awards", "honors", "honours", "achievements", "recognition", "accolades",
                     "awards and honors"],
            weight=2,
            required_fields=["title"],
        ),
        SectionKind.WEBSITES: SectionSpec(
            aliases=["websites", "links", "portfolio", "social media", "online profiles"],
            weight=2,
            required_fields=["url"],
            optional_fields=["label"],
        ),
        SectionKind.REFERENCES: SectionSpec(
            aliases=["references", "referees", "testimonials"],
            weight=1,
            required_fields=["name"],
            optional_fields=["relationship", "contactInfo"],
        ),
        SectionKind.HOBBIES: SectionSpec(
            aliases=["interests", "hobbies", "personal interests", "hobbies and interests"],
            weight=1,
            optional_fields=["name"],
        ),
    }


def _default_field_mappings() -> Dict[str, Dict[str, List[str]]]:
    return {
        "contact": {
            "firstName": ["firstName", "first_name", "firstname", "given_name", "first"],
            "lastName": ["lastName", "last_name", "lastname", "family_name", "surname", "last"],
            "email": ["email", "e-mail", "mail", "email_address"],
            "phone": ["phone", "telephone", "mobile", "cell", "phone_number", "tel"],
            "address": ["address", "street", "street_address", "residence"],
            "city": ["city", "town", "municipality"],
            "country": ["country", "nation"],
            "postCode": ["postCode", "post_code", "zip", "zip_code", "postal_code", "zipcode", "postcode"],
            "desiredJobTitle": ["desiredJobTitle", "desired_job_title", "job_title", "title", "headline",
                                "target_position", "job_objective"],
        },
        "experiences": {
            "jobTitle": ["jobTitle", "job_title", "title", "position", "role", "designation"],
            "company": ["company", "employer", "organization", "organisation", "firm", "company_name"],
            "location": ["location", "city", "place", "area", "region"],
            "startDate": ["startDate", "start_date", "from", "begin", "start", "date_from"],
            "endDate": ["endDate", "end_date", "to", "until", "end", "date_to"],
            "description": ["description", "summary", "details", "responsibilities", "achievements",
                            "highlights", "bullets", "duties"],
        },
        "education": {
            "school": ["school", "university", "college", "institution", "academy", "school_name"],
            "degree": ["degree", "qualification", "diploma", "major", "field_of_study", "program"],
            "location": ["location", "city", "place", "area", "region"],
            "startDate": ["startDate", "start_date", "from", "begin", "start"],
            "endDate": ["endDate", "end_date", "to", "until", "end", "graduation_date", "graduation"],
            "description": ["description", "summary", "details", "achievements", "honors", "coursework"],
        },
        "skills": {
            "name": ["name", "skill", "technology", "tool", "title"],
            "level": ["level", "proficiency", "expertise", "rating", "skill_level"],
        },
        "languages": {
            "name": ["name", "language", "title"],
            "proficiency": ["proficiency", "level", "fluency"],
        },
        "certifications": {
            "title": ["title", "name", "certification", "certificate", "credential"],
        },
        "awards": {
            "title": ["title", "name", "award", "honor", "achievement"],
        },
        "websites": {
            "label": ["label", "name", "title", "type", "platform"],
            "url": ["url", "link", "href", "website", "address"],
        },
        "references": {
            "name": ["name", "full_name", "referee"],
            "relationship": ["relationship", "relation", "title", "position", "role", "company"],
            "contactInfo": ["contactInfo", "contact_info", "contact", "email", "phone"],
        },
    }


class ParserConfig(BaseModel):
    sections: Dict[SectionKind, SectionSpec] = Field(default_factory=_default_sections)
    field_mappings: Dict[str, Dict[str, List[str]]] = Field(default_factory=_default_field_mappings)

    common_first_names: List[str] = Field(default_factory=lambda: [
        "john", "jane", "michael", "sarah", "david", "emily", "james", "jennifer",
        "robert", "lisa", "william", "amanda", "richard", "jessica", "thomas",
        "ashley", "christopher", "kimberly", "daniel", "nicole", "matthew",
        "elizabeth", "anthony", "helen", "mark", "samantha", "donald", "stephanie",
        "maria", "anna", "peter", "paul", "laura", "kevin", "susan", "brian", "karen",
        "george", "emma", "olivia", "noah", "liam", "sophia", "mohammed", "ahmed",
        "ali", "fatima", "priya", "raj", "wei", "li", "carlos", "juan", "ana",
    ])
    common_languages: List[str] = Field(default_factory=lambda: [
        "english", "spanish", "french", "german", "italian", "portuguese", "dutch",
        "russian", "chinese", "mandarin", "cantonese", "japanese", "korean", "arabic",
        "hindi", "urdu", "bengali", "punjabi", "tamil", "turkish", "polish", "swedish",
        "norwegian", "danish", "finnish", "greek", "hebrew", "vietnamese", "thai",
        "indonesian", "malay", "filipino", "tagalog", "swahili", "persian", "farsi",
        "ukrainian", "czech", "romanian", "hungarian",
    ])
    job_title_keywords: List[str] = Field(default_factory=lambda: [
        "developer", "engineer", "manager", "director", "specialist", "analyst",
        "designer", "consultant", "coordinator", "supervisor", "assistant",
        "associate", "lead", "senior", "junior", "principal", "architect",
        "administrator", "officer", "executive", "intern", "representative",
        "technician", "programmer", "scientist", "accountant", "teacher", "nurse",
        "president", "founder", "owner", "advisor", "strategist", "editor",
        "writer", "recruiter", "instructor", "head", "chief", "cto", "ceo", "cfo",
    ])
    degree_keywords: List[str] = Field(default_factory=lambda: [
        "bachelor", "bachelors", "bachelor's", "master", "masters", "master's",
        "phd", "ph.d", "doctorate", "doctoral", "mba", "associate degree", "associate of",
        "diploma", "degree", "b.sc", "m.sc", "bsc", "msc", "b.s.", "b.a.", "m.s.",
        "m.a.", "b.tech", "m.tech", "b.eng", "m.eng", "high school diploma", "ged",
    ])
    institution_keywords: List[str] = Field(default_factory=lambda: [
        "university", "college", "institute", "school", "academy", "polytechnic",
        "conservatory", "seminary",
    ])
    company_suffixes: List[str] = Field(default_factory=lambda: [
        "inc", "inc.", "llc", "ltd", "ltd.", "corp", "corp.", "corporation", "company",
        "co.", "gmbh", "plc", "group", "technologies", "solutions", "systems", "labs",
        "partners", "consulting", "agency", "bank", "holdings", "enterprises",
    ])
    skill_keywords: List[str] = Field(default_factory=lambda: [
        "php", "laravel", "react", "javascript", "typescript", "python", "java", "html",
        "css", "sql", "mysql", "postgresql", "mongodb", "git", "docker", "kubernetes",
        "aws", "azure", "gcp", "linux", "node.js", "django", "flask", "fastapi",
        "excel", "design", "canva", "photoshop", "illustrator", "figma", "sketch",
        "agile", "scrum", "jira", "tableau", "power bi", "salesforce",
    ])
    summary_keywords: List[str] = Field(default_factory=lambda: [
        "experienced", "experience", "professional", "passionate", "dedicated",
        "motivated", "results-driven", "proven", "skilled", "expertise", "years",
        "seeking", "background", "track record", "specializing", "committed",
        "detail-oriented", "focused", "driven",
    ])
    placeholder_patterns: List[str] = Field(default_factory=lambda: [
        r"\bsample text\b",
        r"^use this section\b",
        r"\blorem ipsum\b",
        r"^\[?(your|insert|enter|add)\s+(name|text|details|content|here)\b",
        r"\bclick here\b",
        r"\btype here\b",
        r"^references (are )?available (up)?on request\.?$",
    ])
    countries: List[str] = Field(default_factory=lambda: [
        "United States", "USA", "United Kingdom", "UK", "Canada", "Australia",
        "New Zealand", "Ireland", "India", "Pakistan", "Bangladesh", "Philippines",
        "Singapore", "Malaysia", "Germany", "France", "Spain", "Italy", "Netherlands",
        "Sweden", "Poland", "Portugal", "Brazil", "Mexico", "Japan", "China",
        "South Africa", "Nigeria", "Kenya", "United Arab Emirates", "UAE",
    ])

    email_pattern: str = r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}"
    name_patterns: List[str] = Field(default_factory=lambda: [
        r"^([A-Z][a-z]+)\s+([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)$",
        r"^([A-Z][a-z]+)\s+([A-Z]\.)\s+([A-Z][a-z]+)$",
        r"^([A-Z][a-z]+)\s+([A-Z][a-z]+)\s+([A-Z][a-z]+)$",
        r"^([A-Z]+)\s+([A-Z]+)$",
        r"^(?i:mr|mrs|ms|dr|prof)\.?\s+([A-Z][a-z]+)\s+([A-Z][a-z]+)$",
        r"^([A-Z][a-z]+(?:-[A-Z][a-z]+)?)\s+([A-Z][a-z]*['-][A-Z][a-z]+)$",
    ])
    skill_patterns: List[str] = Field(default_factory=lambda: [
        r"^[A-Za-z]+(?:\s*[+\-]\s*[A-Za-z]+)*$",
        r"^[A-Za-z]+\s+\d+\.?\d*$",
        r"^[A-Za-z]+\s*\([A-Za-z\s]+\)$",
        r"^[A-Za-z]+\s+(?:Framework|Library|Tool|Technology|Language|Platform)",
    ])

    summary_similarity_threshold: float = Field(default=0.6, ge=0.0, le=1.0)
    narrative_min_chars: int = 80
    narrative_max_chars: int = 900
    skill_min_length: int = 3
    skill_max_length: int = 50
    name_scan_lines: int = 5
    job_title_scan_lines: int = 6


def resolve_section_aliases(config: ParserConfig) -> Dict[SectionKind, Tuple[str, ...]]:
    """
    Compute the heading alias table once.

    Aliases are lower-cased and whitespace-collapsed. A kind with no configured
    aliases (or an entirely empty table) falls back to the built-in minimum, so
    the detector always has some heading knowledge.
    """
    resolved: Dict[SectionKind, Tuple[str, ...]] = {}
    for kind in SectionKind:
        spec = config.sections.get(kind)
        aliases = [" ".join(a.lower().split()) for a in (spec.aliases if spec else [])]
        aliases = [a for a in aliases if a]
        resolved[kind] = tuple(aliases) if aliases else FALLBACK_SECTION_ALIASES[kind]
    return resolved


def load_parser_config(path: Optional[str] = None) -> ParserConfig:
    """Load parser configuration from a JSON file, or return the defaults."""
    path = path or os.getenv("RESUME_PARSER_CONFIG")
    if not path:
        return ParserConfig()
    return ParserConfig.model_validate_json(Path(path).read_text(encoding="utf-8"))


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class AISettings(BaseModel):
    enabled: bool = True
    api_key: Optional[str] = None
    api_url: str = "https://generativelanguage.googleapis.com/v1beta/models"
    model: str = "gemini-1.5-flash"
    timeout: float = 20.0
    file_timeout: float = 30.0
    verify_ssl: bool = True
    temperature: float = 0.1
    max_output_tokens: int = 8192

    @property
    def is_configured(self) -> bool:
        return self.enabled and bool(self.api_key)

    @classmethod
    def from_env(cls) -> "AISettings":
        load_dotenv()
        return cls(
            enabled=_env_bool("AI_PARSING_ENABLED", True),
            api_key=os.getenv("AI_API_KEY") or None,
            api_url=os.getenv("AI_API_URL", cls.model_fields["api_url"].default),
            model=os.getenv("AI_MODEL", cls.model_fields["model"].default),
            timeout=float(os.getenv("AI_TIMEOUT", "20")),
            file_timeout=float(os.getenv("AI_FILE_TIMEOUT", "30")),
            verify_ssl=_env_bool("AI_VERIFY_SSL", True),
            temperature=float(os.getenv("AI_TEMPERATURE", "0.1")),
            max_output_tokens=int(os.getenv("AI_MAX_OUTPUT_TOKENS", "8192")),
        )
