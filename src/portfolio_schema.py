"""
Portfolio Pydantic Schema

This module defines the Pydantic models for the portfolio dataset.
Used for:
1. Validation of the bundled Base Dataset and exported artifacts
2. Validation of override records coming from the console or storage
3. Type hints throughout the codebase

Field names follow the JSON shape of the dataset (e.g. `profileImage`),
so `model_dump()` output can be written back verbatim.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


IMAGE_PREFIXES = ("data:", "http://", "https://", "/", ".")


def _normalize_image(v: Optional[str]) -> Optional[str]:
    """Treat empty images as absent and reject unknown sources."""
    if v is None:
        return None
    v = v.strip()
    if not v:
        return None
    if not v.startswith(IMAGE_PREFIXES):
        raise ValueError(f"Invalid image source: {v[:40]}")
    return v


class ContactInfo(BaseModel):
    """Contact details shown in the hero section."""
    email: str = ""
    phone: str = ""
    linkedin: str = ""
    location: str = ""


class Education(BaseModel):
    """An education entry."""
    institution: str
    major: str
    period: str
    details: list[str] = Field(default_factory=list)


class Certification(BaseModel):
    """A certification entry."""
    title: str
    issuer: str
    date: str
    details: str = ""


class Experience(BaseModel):
    """A work experience entry."""
    role: str = Field(..., description="Job role, e.g. 'Lead Engineer'")
    company: str = Field(..., description="Company name")
    period: str = ""
    location: str = ""
    type: str = Field("Professional", description="Professional, Internship, Freelance, ...")
    achievements: list[str] = Field(default_factory=list)
    image: Optional[str] = Field(None, description="Company logo as data URI")

    @field_validator("image")
    @classmethod
    def validate_image(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_image(v)


class Project(BaseModel):
    """A project entry."""
    title: str = Field(..., description="Project title")
    description: str = ""
    year: str = "2025"
    stack: list[str] = Field(default_factory=list, description="Technology tags")
    impact: Optional[str] = None
    image: Optional[str] = Field(None, description="Project visual as data URI")

    @field_validator("image")
    @classmethod
    def validate_image(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_image(v)


class SkillGroup(BaseModel):
    """A group of related skills."""
    category: str = Field(..., description="Category name, e.g. 'Cloud'")
    items: list[str] = Field(default_factory=list)
    image: Optional[str] = Field(None, description="Category icon as data URI")

    @field_validator("image")
    @classmethod
    def validate_image(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_image(v)


class PortfolioData(BaseModel):
    """
    Complete portfolio dataset.

    This is the shape of the bundled Base Dataset and of the exported
    artifact that replaces it.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    headline: str = ""
    summary: str = ""
    profileImage: str = ""
    contact: ContactInfo = Field(default_factory=ContactInfo)
    education: list[Education] = Field(default_factory=list)
    experience: list[Experience] = Field(default_factory=list)
    skills: list[SkillGroup] = Field(default_factory=list)
    certifications: list[Certification] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)


class OverrideState(BaseModel):
    """
    User-authored additions layered over the Base Dataset.

    This is the only mutable, persisted entity. `heroImage=None` means
    "use the base profile image".
    """
    heroImage: Optional[str] = None
    experience: list[Experience] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)
    skills: list[SkillGroup] = Field(default_factory=list)

    @field_validator("heroImage")
    @classmethod
    def validate_hero_image(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_image(v)


class MergedView(BaseModel):
    """Display-ready dataset produced by the merge engine. Never persisted."""
    name: str
    headline: str = ""
    summary: str = ""
    heroImage: str = ""
    contact: ContactInfo = Field(default_factory=ContactInfo)
    education: list[Education] = Field(default_factory=list)
    experience: list[Experience] = Field(default_factory=list)
    skills: list[SkillGroup] = Field(default_factory=list)
    certifications: list[Certification] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)


# Override categories and the record model each one holds
CATEGORY_MODELS: dict[str, type[BaseModel]] = {
    "experience": Experience,
    "projects": Project,
    "skills": SkillGroup,
}


def dump_record(record: BaseModel) -> dict:
    """Serialize a record the way it is stored: absent optionals dropped."""
    return record.model_dump(mode="json", exclude_none=True)
