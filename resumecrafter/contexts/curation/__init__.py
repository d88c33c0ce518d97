"""
Curation Context

Responsibilities:
- Defines the canonical master resume record and its entities
- Normalizes untrusted resume data into the schema (identifiers, bullets, skills)
- Merges partial resumes into the canonical record without duplicates
- Persists the record after every mutation

Owns: Master resume schema, merge policy, record persistence
Never: Talks to the text-completion capability or parses raw text
"""

from resumecrafter.contexts.curation.exceptions import ImportFormatError, RecordShapeError
from resumecrafter.contexts.curation.merger import MergeReport, merge_fragment
from resumecrafter.contexts.curation.record_normalizer import (
    fragment_from_dict,
    record_from_dict,
    record_to_dict,
)
from resumecrafter.contexts.curation.resume_schema import (
    ResumeFragment,
    ResumeRecord,
    create_empty_resume,
)
from resumecrafter.contexts.curation.storage import JsonFileStorage
from resumecrafter.contexts.curation.store import ResumeStore

__all__ = [
    # Schema
    "ResumeRecord",
    "ResumeFragment",
    "create_empty_resume",
    # Normalization
    "fragment_from_dict",
    "record_from_dict",
    "record_to_dict",
    # Merge
    "merge_fragment",
    "MergeReport",
    # State & persistence
    "ResumeStore",
    "JsonFileStorage",
    # Errors
    "ImportFormatError",
    "RecordShapeError",
]
