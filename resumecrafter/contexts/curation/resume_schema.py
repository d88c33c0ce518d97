"""
Master Resume Data Structures

Defines the canonical resume record and its entities for ResumeCrafter.
The record is the interface between the Intake context (which produces
fragments) and the Targeting context (which reduces it per job).

Attribute names are snake_case; each field that differs from its exported JSON
key declares the key in field metadata so the JSON layout stays camelCase:

    {"version": "1.0", "meta": {"createdAt": ..., "updatedAt": ..., "name": ...},
     "contact": {...}, "summary": {"text": ..., "variants": [...]},
     "experience": [...], "education": [...],
     "skills": {"technical": [...], "soft": [...], "languages": [...]},
     "certifications": [...], "projects": [...], "awards": [...], "publications": [...]}

Factories only guarantee identifier uniqueness and default shape. Validation
lives in record_normalizer.py.
"""

import uuid
from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, Dict, List, Optional

from resumecrafter.utils.timestamp import now_exact

SCHEMA_VERSION = "1.0"
DEFAULT_RESUME_NAME = "My Master Resume"
DEFAULT_PROFICIENCY = "intermediate"
DEFAULT_SKILL_CATEGORY = "general"

SKILL_GROUPS = ("technical", "soft", "languages")


def new_id() -> str:
    """Generate a fresh unique entry identifier."""
    return str(uuid.uuid4())


def json_field(key: str, **kwargs):
    """Dataclass field whose exported JSON key differs from the attribute name."""
    return field(metadata={"json": key}, **kwargs)


def json_key(f) -> str:
    """Exported JSON key of a dataclass field."""
    return f.metadata.get("json", f.name)


def skill_key(name: str) -> str:
    """Case-insensitive identity of a skill name within one skill group."""
    return (name or "").strip().casefold()


# =============================================================================
# ENTRIES
# =============================================================================


@dataclass
class BulletPoint:
    """
    One achievement line owned by an experience or project entry.

    May arrive as a bare string; always stored in this structured form.
    """

    id: str = field(default_factory=new_id)
    text: str = ""
    tags: List[str] = field(default_factory=list)
    metrics: List[str] = field(default_factory=list)


@dataclass
class ExperienceEntry:
    """
    Work history entry.

    Dates are YYYY-MM (or bare YYYY when the month is unknown). When current is
    True the end date is empty.
    """

    id: str = field(default_factory=new_id)
    company: str = ""
    title: str = ""
    location: str = ""
    start_date: str = json_field("startDate", default="")
    end_date: str = json_field("endDate", default="")
    current: bool = False
    bullets: List[BulletPoint] = field(default_factory=list)
    skills: List[str] = field(default_factory=list)


@dataclass
class EducationEntry:
    id: str = field(default_factory=new_id)
    institution: str = ""
    degree: str = ""
    field_of_study: str = json_field("field", default="")
    start_date: str = json_field("startDate", default="")
    end_date: str = json_field("endDate", default="")
    gpa: str = ""
    honors: str = ""


@dataclass
class SkillEntry:
    id: str = field(default_factory=new_id)
    name: str = ""
    proficiency: str = DEFAULT_PROFICIENCY
    category: str = DEFAULT_SKILL_CATEGORY
    related_skills: List[str] = json_field("relatedSkills", default_factory=list)


@dataclass
class CertificationEntry:
    id: str = field(default_factory=new_id)
    name: str = ""
    issuer: str = ""
    date: str = ""
    url: str = ""


@dataclass
class ProjectEntry:
    id: str = field(default_factory=new_id)
    name: str = ""
    description: str = ""
    url: str = ""
    technologies: List[str] = field(default_factory=list)
    bullets: List[BulletPoint] = field(default_factory=list)


@dataclass
class AwardEntry:
    id: str = field(default_factory=new_id)
    name: str = ""
    issuer: str = ""
    date: str = ""
    description: str = ""


@dataclass
class PublicationEntry:
    id: str = field(default_factory=new_id)
    title: str = ""
    venue: str = ""
    date: str = ""
    url: str = ""


# Collection name -> entry type, for collections merged by plain append
ENTRY_COLLECTIONS = {
    "experience": ExperienceEntry,
    "education": EducationEntry,
    "certifications": CertificationEntry,
    "projects": ProjectEntry,
    "awards": AwardEntry,
    "publications": PublicationEntry,
}


# =============================================================================
# SINGLE-VALUED GROUPS
# =============================================================================


@dataclass
class Contact:
    full_name: str = json_field("fullName", default="")
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    portfolio: str = ""
    github: str = ""


@dataclass
class Summary:
    """
    Professional summary.

    variants accumulates alternate generated drafts in insertion order and is
    never de-duplicated.
    """

    text: str = ""
    variants: List[str] = field(default_factory=list)


@dataclass
class SkillGroups:
    """Skill entries per group. Names are unique (case-insensitive) within a group."""

    technical: List[SkillEntry] = field(default_factory=list)
    soft: List[SkillEntry] = field(default_factory=list)
    languages: List[SkillEntry] = field(default_factory=list)

    def group(self, name: str) -> List[SkillEntry]:
        if name not in SKILL_GROUPS:
            raise ValueError(f"Unknown skill group: {name}. Use one of {SKILL_GROUPS}")
        return getattr(self, name)


@dataclass
class ResumeMeta:
    created_at: str = json_field("createdAt", default="")
    updated_at: str = json_field("updatedAt", default="")
    name: str = DEFAULT_RESUME_NAME


# =============================================================================
# AGGREGATES
# =============================================================================


@dataclass
class ResumeRecord:
    """
    Canonical master resume.

    Root aggregate owned by the session's ResumeStore. Every entry in every
    collection carries a unique identifier.
    """

    version: str = SCHEMA_VERSION
    meta: ResumeMeta = field(default_factory=ResumeMeta)
    contact: Contact = field(default_factory=Contact)
    summary: Summary = field(default_factory=Summary)
    experience: List[ExperienceEntry] = field(default_factory=list)
    education: List[EducationEntry] = field(default_factory=list)
    skills: SkillGroups = field(default_factory=SkillGroups)
    certifications: List[CertificationEntry] = field(default_factory=list)
    projects: List[ProjectEntry] = field(default_factory=list)
    awards: List[AwardEntry] = field(default_factory=list)
    publications: List[PublicationEntry] = field(default_factory=list)

    def collection(self, name: str) -> list:
        if name not in ENTRY_COLLECTIONS:
            raise ValueError(f"Unknown collection: {name}. Use one of {tuple(ENTRY_COLLECTIONS)}")
        return getattr(self, name)


@dataclass
class ResumeFragment:
    """
    Partial resume produced by a parser or the extraction adapter.

    None for a single-valued group means "source had nothing to say"; the merge
    engine skips it.
    """

    contact: Optional[Contact] = None
    summary: Optional[Summary] = None
    experience: List[ExperienceEntry] = field(default_factory=list)
    education: List[EducationEntry] = field(default_factory=list)
    skills: Optional[SkillGroups] = None
    certifications: List[CertificationEntry] = field(default_factory=list)
    projects: List[ProjectEntry] = field(default_factory=list)
    awards: List[AwardEntry] = field(default_factory=list)
    publications: List[PublicationEntry] = field(default_factory=list)


# =============================================================================
# FACTORIES
# =============================================================================


def create_empty_resume(name: str = DEFAULT_RESUME_NAME) -> ResumeRecord:
    """Empty record with both timestamps set to creation time."""
    timestamp = now_exact()
    return ResumeRecord(meta=ResumeMeta(created_at=timestamp, updated_at=timestamp, name=name))


def create_experience_entry(**values) -> ExperienceEntry:
    return ExperienceEntry(**values)


def create_bullet_point(text: str = "") -> BulletPoint:
    return BulletPoint(text=text)


def create_education_entry(**values) -> EducationEntry:
    return EducationEntry(**values)


def create_skill_entry(
    name: str = "",
    proficiency: str = DEFAULT_PROFICIENCY,
    category: str = DEFAULT_SKILL_CATEGORY,
) -> SkillEntry:
    return SkillEntry(name=name, proficiency=proficiency, category=category)


def create_certification_entry(**values) -> CertificationEntry:
    return CertificationEntry(**values)


def create_project_entry(**values) -> ProjectEntry:
    return ProjectEntry(**values)


def create_award_entry(**values) -> AwardEntry:
    return AwardEntry(**values)


def create_publication_entry(**values) -> PublicationEntry:
    return PublicationEntry(**values)


# =============================================================================
# SERIALIZATION
# =============================================================================


def as_json_dict(obj: Any) -> Dict[str, Any]:
    """Convert a schema dataclass (recursively) to a dict keyed by JSON field names."""
    return {json_key(f): _dump(getattr(obj, f.name)) for f in fields(obj)}


def _dump(value: Any) -> Any:
    if is_dataclass(value):
        return as_json_dict(value)
    if isinstance(value, list):
        return [_dump(item) for item in value]
    return value
