from pydantic import BaseModel, Field
from typing import Dict, List, Literal, Optional, Sequence, TypeVar


ConfidenceLevel = Literal["high", "medium", "low"]

# Canonical top-level keys holding lists of records with an `id` field
LIST_SECTIONS = (
    "experiences",
    "education",
    "skills",
    "languages",
    "certifications",
    "awards",
    "websites",
    "references",
)


class Contact(BaseModel):
    firstName: str = ""
    lastName: str = ""
    desiredJobTitle: str = ""
    phone: str = ""
    email: str = ""
    country: str = ""
    city: str = ""
    address: str = ""
    postCode: str = ""

    def has_name(self) -> bool:
        return bool(self.firstName.strip() or self.lastName.strip())


class Experience(BaseModel):
    id: int = 0
    jobTitle: str = ""
    company: str = ""
    location: str = ""
    startDate: str = ""  # "Mon YYYY", "YYYY" or "Present"
    endDate: str = ""
    description: str = ""


class Education(BaseModel):
    id: int = 0
    school: str = ""
    location: str = ""
    degree: str = ""
    startDate: str = ""
    endDate: str = ""
    description: str = ""


class Skill(BaseModel):
    id: int = 0
    name: str = ""
    level: str = ""  # Beginner, Basic, Intermediate, Advanced, Expert, Proficient, Skilled, Master or ""


class Language(BaseModel):
    id: int = 0
    name: str = ""
    proficiency: str = ""


class TitleEntry(BaseModel):
    """Certification or award: only the title is structured."""
    id: int = 0
    title: str = ""


class Website(BaseModel):
    id: int = 0
    label: str = ""
    url: str = ""


class Reference(BaseModel):
    id: int = 0
    name: str = ""
    relationship: str = ""
    contactInfo: str = ""


class ParsedResume(BaseModel):
    contact: Contact = Field(default_factory=Contact)
    experiences: List[Experience] = Field(default_factory=list)
    education: List[Education] = Field(default_factory=list)
    skills: List[Skill] = Field(default_factory=list)
    languages: List[Language] = Field(default_factory=list)
    certifications: List[TitleEntry] = Field(default_factory=list)
    awards: List[TitleEntry] = Field(default_factory=list)
    websites: List[Website] = Field(default_factory=list)
    references: List[Reference] = Field(default_factory=list)
    hobbies: List[str] = Field(default_factory=list)
    summary: str = ""


class SectionScore(BaseModel):
    """Per-section breakdown behind the overall score."""
    section: str
    found: bool
    found_required: int = 0
    required_total: int = 0
    found_fields: int = 0
    total_fields: int = 0
    quality_score: float = Field(default=0.0, ge=0.0, le=1.0)
    score: float = Field(default=0.0, ge=0.0, le=100.0)


class QualityMetrics(BaseModel):
    completeness: float = Field(default=0.0, ge=0.0, le=1.0, description="Sections found / total sections")
    field_coverage: float = Field(default=0.0, ge=0.0, le=1.0, description="Fields found / total fields")
    structure: float = Field(default=0.0, ge=0.0, le=1.0, description="Core sections present + consistency checks")
    accuracy: float = Field(default=0.0, ge=0.0, le=1.0, description="Email/phone/date format validity")
    data_quality: float = Field(default=0.0, ge=0.0, le=1.0, description="Non-empty descriptive subfields")


class ConfidenceReport(BaseModel):
    overall_score: int = Field(default=0, ge=0, le=100)
    confidence: ConfidenceLevel = "low"
    sections_found: List[str] = Field(default_factory=list)
    missing_sections: List[str] = Field(default_factory=list)
    quality_metrics: QualityMetrics = Field(default_factory=QualityMetrics)
    suggestions: List[str] = Field(default_factory=list)
    section_scores: Dict[str, SectionScore] = Field(default_factory=dict)

    @classmethod
    def failed(cls, suggestion: str) -> "ConfidenceReport":
        return cls(overall_score=0, confidence="low", suggestions=[suggestion])


class ParseResult(BaseModel):
    success: bool
    data: ParsedResume = Field(default_factory=ParsedResume)
    confidence: ConfidenceReport = Field(default_factory=ConfidenceReport)
    ai_used: bool = Field(default=False, description="True when AI output was merged into the record")
    error: Optional[str] = None
    raw_text: str = Field(default="", description="Cleaned text the record was grounded against")


class TextParseRequest(BaseModel):
    text: str = Field(..., description="Already-extracted resume text")
    use_ai: bool = Field(default=True, description="Allow the AI structuring pass when configured")


class PreviewResponse(ParseResult):
    raw_text_preview: str = ""


T = TypeVar("T", bound=BaseModel)


def with_sequential_ids(items: Sequence[T]) -> List[T]:
    """Return copies of `items` with ids rewritten to 1..n."""
    return [item.model_copy(update={"id": i}) for i, item in enumerate(items, start=1)]
