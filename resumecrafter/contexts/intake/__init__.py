"""
Intake Context

Responsibilities:
- Extracts plain text from uploaded profile and resume files (PDF, DOCX, TXT)
- Parses LinkedIn profile text deterministically into a partial resume
- Requests structured extraction and content enhancement from the configured LLM

Owns: Text segmentation heuristics, extraction prompts
Never: Mutates or persists the master resume (hands ResumeFragments to curation)
"""

from resumecrafter.contexts.intake.exceptions import (
    ExtractionParseError,
    UnsupportedFileFormatError,
)
from resumecrafter.contexts.intake.extraction import (
    BulletBatchResult,
    enhance_all_bullets,
    enhance_bullet_point,
    generate_summary,
    parse_text_to_resume,
    suggest_skills,
)
from resumecrafter.contexts.intake.file_text import extract_text_from_file
from resumecrafter.contexts.intake.linkedin_parser import (
    extract_section,
    parse_date_range,
    parse_linkedin_export,
    parse_linkedin_text,
)

__all__ = [
    # Files
    "extract_text_from_file",
    # Deterministic parsing
    "parse_linkedin_text",
    "parse_linkedin_export",
    "extract_section",
    "parse_date_range",
    # LLM extraction
    "parse_text_to_resume",
    "suggest_skills",
    "enhance_bullet_point",
    "enhance_all_bullets",
    "BulletBatchResult",
    "generate_summary",
    # Errors
    "ExtractionParseError",
    "UnsupportedFileFormatError",
]
