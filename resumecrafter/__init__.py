"""
ResumeCrafter - master resume curation and job-tailored resume derivation

Builds one canonical "master resume" from heterogeneous sources (LinkedIn profile
exports, uploaded resumes, pasted text, JSON exports) and derives job-tailored
resumes from it.

Architecture:
- Intake Context: Text extraction, deterministic profile parsing, LLM extraction
- Curation Context: Canonical record schema, normalization, merging, persistence
- Targeting Context: Job-tailored selection and reduction of the master record
"""

__version__ = "0.1.0"
