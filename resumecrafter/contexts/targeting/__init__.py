"""
Targeting Context

Responsibilities:
- Selects and rewrites master resume content for one job description
- Produces a reduced, single-page resume in the master JSON layout
- Repairs the tailored contact block from the master record
- Fetches a job posting URL as plain text

Owns: Tailoring prompt and its post-conditions
Never: Mutates the master resume
"""

from resumecrafter.contexts.targeting.exceptions import JobFetchError, TailoringError
from resumecrafter.contexts.targeting.job_fetch import fetch_job_description, html_to_job_text
from resumecrafter.contexts.targeting.tailor import (
    build_tailoring_messages,
    craft_tailored_resume,
    restore_contact,
    tailor_resume,
)

__all__ = [
    "build_tailoring_messages",
    "tailor_resume",
    "restore_contact",
    "craft_tailored_resume",
    "fetch_job_description",
    "html_to_job_text",
    "TailoringError",
    "JobFetchError",
]
