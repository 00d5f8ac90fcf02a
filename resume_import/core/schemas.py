from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import List, Literal, Optional


FileKind = Literal["pdf", "docx", "txt", "unknown"]
SourceFormat = Literal["pdf", "docx", "txt"]


class _Model(BaseModel):
    # snake_case in Python, camelCase on the wire
    model_config = ConfigDict(populate_by_name=True)


class PersonalInfo(_Model):
    """Contact record. A missing field means "not found", never an error."""
    full_name: Optional[str] = Field(default=None, alias="fullName")
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    linkedin: Optional[str] = None
    website: Optional[str] = None
    summary: Optional[str] = None

    def populated_fields(self) -> List[str]:
        return [name for name, value in self if value]


class ExperienceEntry(_Model):
    title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[str] = Field(default=None, alias="startDate")
    end_date: Optional[str] = Field(default=None, alias="endDate")
    description: Optional[str] = None
    current: bool = False

    def dedupe_key(self) -> tuple:
        return (self.title, self.company)


class EducationEntry(_Model):
    institution: Optional[str] = None  # University, College, Institute name
    degree: Optional[str] = None  # Bachelor of Science, M.S., etc.
    field: Optional[str] = None  # Computer Science, Engineering, etc.
    location: Optional[str] = None  # City, ST
    start_date: Optional[str] = Field(default=None, alias="startDate")
    end_date: Optional[str] = Field(default=None, alias="endDate")
    gpa: Optional[str] = None

    def dedupe_key(self) -> tuple:
        return (self.institution, self.degree)


class ProjectEntry(_Model):
    name: Optional[str] = None
    description: Optional[str] = None
    technologies: List[str] = Field(default_factory=list)
    url: Optional[str] = None
    start_date: Optional[str] = Field(default=None, alias="startDate")
    end_date: Optional[str] = Field(default=None, alias="endDate")

    def dedupe_key(self) -> tuple:
        return ((self.name or "").lower(),)


class CertificationEntry(_Model):
    name: Optional[str] = None
    issuer: Optional[str] = None
    date: Optional[str] = None
    url: Optional[str] = None

    def dedupe_key(self) -> tuple:
        return (self.name, self.issuer)


class ResumeSections(_Model):
    """Optional arrays; a key stays None unless something was extracted."""
    experience: Optional[List[ExperienceEntry]] = None
    education: Optional[List[EducationEntry]] = None
    skills: Optional[List[str]] = None
    projects: Optional[List[ProjectEntry]] = None
    certifications: Optional[List[CertificationEntry]] = None

    def entry_count(self) -> int:
        return sum(len(value) for _, value in self if value)


class ParsedResumeData(_Model):
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo, alias="personalInfo")
    sections: ResumeSections = Field(default_factory=ResumeSections)
    raw_text: str = Field(default="", alias="rawText", description="Normalized full text, kept for audit/debug")
    extracted_dates: List[str] = Field(default_factory=list, alias="extractedDates")
    extracted_emails: List[str] = Field(default_factory=list, alias="extractedEmails")
    extracted_phones: List[str] = Field(default_factory=list, alias="extractedPhones")
    confidence: float = Field(default=0.0, ge=0.0, le=1.0, description="Extraction completeness estimate (0.0-1.0)")


class ParseOptions(_Model):
    """Stage gates. Every extraction stage runs unless switched off here."""
    extract_personal_info: bool = Field(default=True, alias="extractPersonalInfo")
    extract_experience: bool = Field(default=True, alias="extractExperience")
    extract_education: bool = Field(default=True, alias="extractEducation")
    extract_skills: bool = Field(default=True, alias="extractSkills")
    extract_projects: bool = Field(default=True, alias="extractProjects")
    extract_certifications: bool = Field(default=True, alias="extractCertifications")


class ParseResult(_Model):
    """Either {success: true, data} or {success: false, error}; warnings are optional on both."""
    success: bool
    data: Optional[ParsedResumeData] = None
    error: Optional[str] = None
    warnings: Optional[List[str]] = None

    @model_validator(mode="after")
    def _check_shape(self) -> "ParseResult":
        if self.success and (self.data is None or self.error is not None):
            raise ValueError("successful result must carry data and no error")
        if not self.success and (self.error is None or self.data is not None):
            raise ValueError("failed result must carry an error and no data")
        return self

    @classmethod
    def ok(cls, data: ParsedResumeData, warnings: Optional[List[str]] = None) -> "ParseResult":
        return cls(success=True, data=data, warnings=warnings or None)

    @classmethod
    def fail(cls, error: str, warnings: Optional[List[str]] = None) -> "ParseResult":
        return cls(success=False, error=error, warnings=warnings or None)


class ValidationResult(_Model):
    is_valid: bool = Field(..., alias="isValid")
    error: Optional[str] = None


class FileInfo(_Model):
    name: str
    type: str
    size: str
    last_modified: Optional[str] = Field(default=None, alias="lastModified")


class FilePreview(_Model):
    success: bool
    preview: Optional[str] = None
    file_info: FileInfo = Field(..., alias="fileInfo")
    error: Optional[str] = None


class SupportedFileTypes(_Model):
    extensions: List[str]
    mime_types: List[str] = Field(..., alias="mimeTypes")
    max_sizes: dict = Field(..., alias="maxSizes", description="Maximum size per format, in MB")
