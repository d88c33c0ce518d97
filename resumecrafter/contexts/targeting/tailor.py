"""
Resume tailoring for a specific job description.

Sends the full master resume and a job description to the configured LLM and
gets back a reduced, single-page resume as a JSON object. The reduced
resume uses the same JSON field names as the master record.

Usage:
    tailored = craft_tailored_resume(client, store.get_resume(), job_text)
"""

import json
from typing import Any, Dict, List

from resumecrafter.contexts.curation.record_normalizer import record_to_dict
from resumecrafter.contexts.curation.resume_schema import ResumeRecord, as_json_dict
from resumecrafter.contexts.targeting.exceptions import TailoringError
from resumecrafter.contexts.targeting.logger import _log_info, _log_success, _log_warning
from resumecrafter.utils.llm import (
    CompletionClient,
    ResponseParseError,
    load_operation_options,
    parse_json_response,
)

# =============================================================================
# PROMPT TEMPLATES
# =============================================================================

TAILORED_SCHEMA = """\
{
  "contact": { "fullName": "", "email": "", "phone": "", "location": "", "linkedin": "", "portfolio": "", "github": "" },
  "summary": { "text": "" },
  "experience": [{ "company": "", "title": "", "location": "", "startDate": "", "endDate": "", "current": false, "bullets": [{ "text": "" }] }],
  "education": [{ "institution": "", "degree": "", "field": "", "startDate": "", "endDate": "", "gpa": "", "honors": "" }],
  "skills": { "technical": [{ "name": "" }], "soft": [{ "name": "" }] },
  "certifications": [{ "name": "", "issuer": "", "date": "" }],
  "projects": [{ "name": "", "description": "", "technologies": [], "bullets": [{ "text": "" }] }]
}"""

_TAILORING_SYSTEM_PROMPT = f"""\
You are an expert ATS resume optimizer. Given a master resume (with all career data) and a job \
description, create the most effective single-page resume by:

1. Cherry-picking the most relevant experience, skills, projects, and achievements
2. Rewriting bullet points to match the job's keywords and requirements
3. Crafting a targeted professional summary
4. Prioritizing items that demonstrate direct relevance to the role
5. Ensuring ATS-friendliness: standard section names, keyword optimization, quantified achievements

Return the tailored resume as valid JSON matching this schema:
{TAILORED_SCHEMA}

Rules:
- Select at most 3-4 experience entries with 3-4 bullets each
- Include 8-12 most relevant technical skills
- Include only relevant certifications and projects
- Keep content concise enough for a single page
- Return ONLY valid JSON, no markdown or explanation."""

_TAILORING_USER_TEMPLATE = """\
MASTER RESUME:
{master_json}

JOB DESCRIPTION:
{job_description}"""


# =============================================================================
# TAILORING
# =============================================================================


def build_tailoring_messages(master: ResumeRecord, job_description: str) -> List[Dict[str, str]]:
    """
    Build the system + user messages for a tailoring request.

    Args:
        master: Canonical master resume
        job_description: Job description text

    Returns:
        Chat messages
    """
    master_json = json.dumps(record_to_dict(master), indent=2, ensure_ascii=False)
    return [
        {"role": "system", "content": _TAILORING_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": _TAILORING_USER_TEMPLATE.format(
                master_json=master_json, job_description=job_description
            ),
        },
    ]


def tailor_resume(
    client: CompletionClient, master: ResumeRecord, job_description: str
) -> Dict[str, Any]:
    """
    Ask the LLM for a single-page resume tailored to a job description.

    The result is returned as received; see restore_contact() for the repair
    step that must follow.

    Args:
        client: Session completion client
        master: Canonical master resume
        job_description: Job description text

    Returns:
        Tailored resume as a JSON object (dict)

    Raises:
        ConfigurationError: If the client is not configured
        ValueError: If the job description is empty
        TailoringError: If the response is not a JSON object
    """
    client.ensure_configured()
    if not job_description or not job_description.strip():
        raise ValueError("Job description is empty")

    _log_info(f"Tailoring master resume to a {len(job_description)}-character job description")
    response = client.complete(
        build_tailoring_messages(master, job_description),
        load_operation_options("tailor_resume"),
    )

    try:
        tailored = parse_json_response(response)
    except ResponseParseError as e:
        _log_warning(f"Discarding tailoring response: {e}")
        raise TailoringError() from e

    if not isinstance(tailored, dict):
        _log_warning(f"Tailoring response was a JSON {type(tailored).__name__}, not an object")
        raise TailoringError()

    return tailored


def restore_contact(tailored: Dict[str, Any], master: ResumeRecord) -> Dict[str, Any]:
    """
    Put the master contact block back when the tailored one lost the name.

    Substitutes the whole contact block (not individual fields) when the
    tailored resume has no full name but the master does.

    Args:
        tailored: Tailored resume dict (modified in place)
        master: Canonical master resume

    Returns:
        The same tailored dict
    """
    contact = tailored.get("contact")
    name = contact.get("fullName") if isinstance(contact, dict) else None
    has_name = isinstance(name, str) and bool(name.strip())

    if not has_name and master.contact.full_name.strip():
        _log_warning("Tailored resume lost the contact name; restoring master contact block")
        tailored["contact"] = as_json_dict(master.contact)

    return tailored


def craft_tailored_resume(
    client: CompletionClient, master: ResumeRecord, job_description: str
) -> Dict[str, Any]:
    """
    Tailor the master resume to a job description and repair the contact block.

    Raises:
        ConfigurationError: If the client is not configured
        ValueError: If the job description is empty
        TailoringError: If the response is not a JSON object
    """
    tailored = restore_contact(tailor_resume(client, master, job_description), master)

    experience = tailored.get("experience")
    count = len(experience) if isinstance(experience, list) else 0
    _log_success(f"Tailored resume ready ({count} experience entries)")
    return tailored
