"""
LLM-based resume extraction and enhancement for the Intake context.

Operations:
- parse_text_to_resume: free text -> ResumeFragment
- suggest_skills: existing skill names -> additional skill names
- enhance_bullet_point / enhance_all_bullets: rewrite achievement bullets
- generate_summary: experience + skills -> professional summary paragraph

Every operation takes the session's CompletionClient and checks its
configuration before any request is sent.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Union

from resumecrafter.contexts.curation.exceptions import RecordShapeError
from resumecrafter.contexts.curation.record_normalizer import fragment_from_dict
from resumecrafter.contexts.curation.resume_schema import (
    BulletPoint,
    ExperienceEntry,
    ResumeFragment,
    SkillEntry,
    SkillGroups,
    skill_key,
)
from resumecrafter.contexts.intake.exceptions import ExtractionParseError
from resumecrafter.contexts.intake.logger import (
    _log_debug,
    _log_info,
    _log_success,
    _log_warning,
    log_fragment_summary,
)
from resumecrafter.utils.llm import (
    CompletionClient,
    ResponseParseError,
    load_operation_options,
    parse_json_response,
)

# =============================================================================
# PROMPT TEMPLATES
# =============================================================================

EXTRACTION_SCHEMA = """\
{
  "contact": { "fullName": "", "email": "", "phone": "", "location": "", "linkedin": "", "portfolio": "", "github": "" },
  "summary": { "text": "" },
  "experience": [{ "company": "", "title": "", "location": "", "startDate": "YYYY-MM", "endDate": "YYYY-MM", "current": false, "bullets": [{ "text": "" }], "skills": [] }],
  "education": [{ "institution": "", "degree": "", "field": "", "startDate": "YYYY-MM", "endDate": "YYYY-MM", "gpa": "", "honors": "" }],
  "skills": { "technical": [{ "name": "", "proficiency": "intermediate", "category": "general" }], "soft": [{ "name": "" }], "languages": [{ "name": "", "proficiency": "" }] },
  "certifications": [{ "name": "", "issuer": "", "date": "YYYY-MM", "url": "" }],
  "projects": [{ "name": "", "description": "", "url": "", "technologies": [], "bullets": [{ "text": "" }] }],
  "awards": [{ "name": "", "issuer": "", "date": "", "description": "" }],
  "publications": [{ "title": "", "venue": "", "date": "", "url": "" }]
}"""

_EXTRACTION_SYSTEM_PROMPT = f"""\
You are a resume data extraction expert. Extract structured resume data from the provided text \
and return it as valid JSON matching EXACTLY this schema (use empty arrays/strings for missing data):
{EXTRACTION_SCHEMA}
Return ONLY valid JSON, no markdown or explanation."""

_SUGGEST_SKILLS_SYSTEM_PROMPT = """\
You are a career skills expert. Given existing skills, suggest related skills the person likely \
also has. Return a JSON array of strings with 5-10 skill names. Return ONLY the JSON array, no explanation."""

_SUGGEST_SKILLS_USER_TEMPLATE = """\
My existing skills: {skills}

Suggest related skills I might also have."""

_ENHANCE_BULLET_SYSTEM_PROMPT = """\
You are a professional resume writer. Rewrite the given bullet point to be more impactful. \
Use strong action verbs, quantify achievements where possible, and follow the format: \
"[Action verb] [task/project] [result/impact]". Keep it concise (1-2 lines). \
Return ONLY the rewritten bullet point, no quotes or explanation."""

_SUMMARY_SYSTEM_PROMPT = """\
You are a professional resume writer. Write a compelling 2-3 sentence professional summary for \
this person. Be specific about their expertise and impact. Return ONLY the summary text, no quotes or explanation."""

_SUMMARY_USER_TEMPLATE = """\
Experience: {experience}
Skills: {skills}"""


# =============================================================================
# FREE TEXT -> RESUME
# =============================================================================


def parse_text_to_resume(client: CompletionClient, text: str) -> ResumeFragment:
    """
    Extract a partial resume from unstructured text.

    Every entry (and nested bullet) in the result has an identifier; the
    payload is normalized against the schema before anything is returned.

    Args:
        client: Session completion client
        text: Resume or profile text

    Returns:
        ResumeFragment ready for merge_fragment()

    Raises:
        ConfigurationError: If the client is not configured
        ValueError: If text is empty
        ExtractionParseError: If the response is not valid resume JSON
    """
    client.ensure_configured()
    if not text or not text.strip():
        raise ValueError("No text to extract resume data from")

    operation = "parse_text_to_resume"
    _log_info(f"Extracting resume data from {len(text)} characters of text")

    response = client.complete(
        [
            {"role": "system", "content": _EXTRACTION_SYSTEM_PROMPT},
            {"role": "user", "content": text},
        ],
        load_operation_options("extract_resume"),
    )

    try:
        payload = parse_json_response(response)
        if not isinstance(payload, dict):
            raise ResponseParseError(f"Expected a JSON object, got {type(payload).__name__}")
        fragment = fragment_from_dict(payload)
    except (ResponseParseError, RecordShapeError) as e:
        _log_warning(f"Discarding extraction response: {e}")
        raise ExtractionParseError(operation) from e

    log_fragment_summary("llm", fragment)
    return fragment


# =============================================================================
# SKILL SUGGESTIONS
# =============================================================================


def suggest_skills(
    client: CompletionClient, existing_skills: Sequence[Union[SkillEntry, str]]
) -> List[str]:
    """
    Suggest additional skills related to the ones already listed.

    Suggestions are best-effort: any failure after the configuration check
    yields an empty list.

    Args:
        client: Session completion client
        existing_skills: SkillEntry objects or bare names

    Returns:
        New skill names (none already present, no duplicates)

    Raises:
        ConfigurationError: If the client is not configured
    """
    client.ensure_configured()

    names = [s if isinstance(s, str) else s.name for s in existing_skills]
    names = [name.strip() for name in names if name and name.strip()]
    if not names:
        return []

    try:
        response = client.complete(
            [
                {"role": "system", "content": _SUGGEST_SKILLS_SYSTEM_PROMPT},
                {"role": "user", "content": _SUGGEST_SKILLS_USER_TEMPLATE.format(skills=", ".join(names))},
            ],
            load_operation_options("suggest_skills"),
        )
        payload = parse_json_response(response)
    except Exception as e:
        _log_warning(f"Skill suggestions unavailable: {e}")
        return []

    if not isinstance(payload, list):
        _log_warning("Skill suggestions response was not a JSON array")
        return []

    seen = {skill_key(name) for name in names}
    suggestions = []
    for item in payload:
        if not isinstance(item, str):
            continue
        key = skill_key(item)
        if key and key not in seen:
            seen.add(key)
            suggestions.append(item.strip())

    _log_debug(f"Received {len(suggestions)} skill suggestions")
    return suggestions


# =============================================================================
# BULLET ENHANCEMENT
# =============================================================================


def enhance_bullet_point(client: CompletionClient, text: str) -> str:
    """
    Rewrite one bullet with action verbs and quantified impact.

    Raises:
        ConfigurationError: If the client is not configured
    """
    client.ensure_configured()
    response = client.complete(
        [
            {"role": "system", "content": _ENHANCE_BULLET_SYSTEM_PROMPT},
            {"role": "user", "content": text},
        ],
        load_operation_options("enhance_bullet"),
    )
    return response.strip()


@dataclass
class BulletBatchResult:
    """Indices of bullets updated, skipped (empty) and failed during a batch."""

    updated: List[int] = field(default_factory=list)
    skipped: List[int] = field(default_factory=list)
    failed: List[int] = field(default_factory=list)


def enhance_all_bullets(
    client: CompletionClient,
    bullets: List[BulletPoint],
    on_update: Optional[Callable[[int, BulletPoint], None]] = None,
) -> BulletBatchResult:
    """
    Enhance bullets one at a time, in list order.

    Each bullet's text is replaced as soon as its rewrite arrives. A failed
    rewrite leaves that bullet unchanged and the batch moves on.

    Args:
        client: Session completion client
        bullets: Bullets to rewrite in place
        on_update: Called with (index, bullet) after each applied rewrite

    Returns:
        BulletBatchResult

    Raises:
        ConfigurationError: If the client is not configured (before any request)
    """
    client.ensure_configured()
    result = BulletBatchResult()

    for index, bullet in enumerate(bullets):
        if not bullet.text.strip():
            result.skipped.append(index)
            continue

        try:
            enhanced = enhance_bullet_point(client, bullet.text)
        except Exception as e:
            _log_warning(f"Bullet {index + 1}/{len(bullets)} not enhanced: {e}")
            result.failed.append(index)
            continue

        bullet.text = enhanced
        result.updated.append(index)
        if on_update is not None:
            on_update(index, bullet)

    _log_success(
        f"Enhanced {len(result.updated)}/{len(bullets)} bullets"
        + (f" ({len(result.failed)} failed)" if result.failed else "")
    )
    return result


# =============================================================================
# SUMMARY GENERATION
# =============================================================================


def _describe_experience(entry: ExperienceEntry) -> str:
    end = "Present" if entry.current else entry.end_date
    return f"{entry.title} at {entry.company} ({entry.start_date}–{end})"


def generate_summary(
    client: CompletionClient, experience: Sequence[ExperienceEntry], skills: SkillGroups
) -> str:
    """
    Write a 2-3 sentence professional summary from experience and skills.

    Args:
        client: Session completion client
        experience: Experience entries to summarize
        skills: Skill groups (technical and soft names are used)

    Returns:
        Summary paragraph, trimmed

    Raises:
        ConfigurationError: If the client is not configured
    """
    client.ensure_configured()

    experience_text = "; ".join(_describe_experience(entry) for entry in experience)
    skill_names = ", ".join(s.name for s in list(skills.technical) + list(skills.soft) if s.name)

    response = client.complete(
        [
            {"role": "system", "content": _SUMMARY_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": _SUMMARY_USER_TEMPLATE.format(experience=experience_text, skills=skill_names),
            },
        ],
        load_operation_options("generate_summary"),
    )
    return response.strip()
