"""
Deterministic parser for LinkedIn "Save to PDF" profile text.

Converts extracted profile text into a ResumeFragment without any LLM call.
Each section has its own heuristic function. A section or entry that cannot
be segmented confidently is left out of the result: the parser never raises
on odd input and never invents entries.

Usage:
    fragment = parse_linkedin_text(text)
    fragment = parse_linkedin_export(Path("Profile.pdf"))
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from resumecrafter.contexts.curation.resume_schema import (
    AwardEntry,
    CertificationEntry,
    Contact,
    EducationEntry,
    ExperienceEntry,
    PublicationEntry,
    ResumeFragment,
    SkillEntry,
    SkillGroups,
    Summary,
    create_award_entry,
    create_bullet_point,
    create_certification_entry,
    create_education_entry,
    create_experience_entry,
    create_publication_entry,
    create_skill_entry,
)
from resumecrafter.contexts.intake.file_text import extract_text_from_file
from resumecrafter.contexts.intake.logger import _log_debug, log_fragment_summary
from resumecrafter.contexts.intake.normalizer import preprocess_profile_text, split_lines
from resumecrafter.contexts.intake.section_patterns import (
    LANGUAGE_WITH_PROFICIENCY,
    LOCATION_KEYWORDS,
    LOCATION_MAX_LENGTH,
    MONTHS,
    PAGE_FOOTER,
    SECTION_HEADERS,
    ContactPatterns,
    DatePatterns,
    header_pattern,
    is_page_footer,
)

# =============================================================================
# SECTION EXTRACTION
# =============================================================================


def extract_section(text: str, section_name: str) -> str:
    """
    Extract a section's body: the text between its header line and the next
    known header line or "Page N of M" footer, whichever comes first.

    Args:
        text: Newline-joined profile text
        section_name: One of SECTION_HEADERS

    Returns:
        Trimmed section body, or "" if the header is missing
    """
    match = header_pattern(section_name).search(text)
    if not match:
        return ""

    start = match.end()
    rest = text[start:]
    end = len(rest)

    for header in SECTION_HEADERS:
        if header.lower() == section_name.lower():
            continue
        next_match = header_pattern(header).search(rest)
        if next_match and next_match.start() < end:
            end = next_match.start()

    footer_match = PAGE_FOOTER.search(rest)
    if footer_match and footer_match.start() < end:
        end = footer_match.start()

    return rest[:end].strip()


def _section_lines(text: str, section_name: str) -> List[str]:
    """Non-empty, non-footer lines of a section body."""
    return [line for line in split_lines(extract_section(text, section_name)) if not is_page_footer(line)]


def _first_header_start(text: str) -> int:
    """Offset of the earliest known header line, or len(text) if none."""
    starts = [m.start() for m in (header_pattern(h).search(text) for h in SECTION_HEADERS) if m]
    return min(starts, default=len(text))


# =============================================================================
# DATES
# =============================================================================


@dataclass
class DateRange:
    start_date: str = ""
    end_date: str = ""
    current: bool = False


def _month_year(month_word: str, year: str) -> str:
    """YYYY-MM when the month is recognized, else the bare year."""
    month = MONTHS.get(month_word.lower(), "")
    return f"{year}-{month}" if month else year


def parse_date_range(line: str) -> DateRange:
    """
    Parse a LinkedIn date-range line.

    Examples:
        "June 2021 - Present (4 years 9 months)" -> 2021-06, "", current
        "September 2016 - August 2019 (3 years)" -> 2016-09, 2019-08

    Args:
        line: Line containing a date range

    Returns:
        DateRange (all empty if the line has no recognizable range)
    """
    match = DatePatterns.DATE_RANGE.search(line)
    if not match:
        return DateRange()

    start_date = _month_year(match.group(1), match.group(2))
    end_raw = match.group(3).strip()

    if end_raw.lower() == "present":
        return DateRange(start_date=start_date, end_date="", current=True)

    end_date = ""
    end_match = DatePatterns.MONTH_YEAR.search(end_raw)
    if end_match:
        end_date = _month_year(end_match.group(1), end_match.group(2))

    return DateRange(start_date=start_date, end_date=end_date, current=False)


# =============================================================================
# CONTACT
# =============================================================================


def parse_contact(text: str) -> Contact:
    """
    Parse contact details and the name block.

    E-mail and URLs come from the Contact section. The name is the first line
    before the first known section header; with three or more such lines the
    last one is the location.
    """
    contact = Contact()
    body = extract_section(text, "Contact")

    email_match = ContactPatterns.EMAIL.search(body)
    if email_match:
        contact.email = email_match.group(0)

    linkedin_match = ContactPatterns.LINKEDIN_URL.search(body)
    if linkedin_match:
        contact.linkedin = linkedin_match.group(0)

    # E-mail domains would otherwise read as web addresses
    url_body = ContactPatterns.EMAIL.sub(" ", body)
    urls = [u for u in ContactPatterns.WEB_URL.findall(url_body) if "linkedin.com" not in u.lower()]
    contact.github = next((u for u in urls if "github" in u.lower()), "")
    contact.portfolio = next((u for u in urls if "github" not in u.lower()), "")

    name_block = split_lines(text[: _first_header_start(text)])
    if name_block:
        contact.full_name = name_block[0]
    if len(name_block) >= 3:
        contact.location = name_block[-1]

    return contact


# =============================================================================
# SKILLS, LANGUAGES, SUMMARY
# =============================================================================


def parse_top_skills(text: str) -> List[SkillEntry]:
    """One default-proficiency skill per line of Top Skills."""
    return [create_skill_entry(name=line) for line in _section_lines(text, "Top Skills")]


def parse_languages(text: str) -> List[SkillEntry]:
    """
    One language skill per line of Languages.

    "English (Full Professional)" splits into name and proficiency; a bare
    "English" keeps an empty proficiency.
    """
    languages = []
    for line in _section_lines(text, "Languages"):
        match = LANGUAGE_WITH_PROFICIENCY.match(line)
        if match:
            name, proficiency = match.group(1).strip(), match.group(2).strip()
        else:
            name, proficiency = line, ""
        languages.append(create_skill_entry(name=name, proficiency=proficiency, category="language"))
    return languages


def parse_summary(text: str) -> Optional[Summary]:
    """Summary section body verbatim, or None when the profile has none."""
    body = extract_section(text, "Summary")
    return Summary(text=body) if body else None


# =============================================================================
# EXPERIENCE
# =============================================================================


def _looks_like_location(line: str) -> bool:
    """Short, no period, has a capital, and has a comma or a location word."""
    if len(line) >= LOCATION_MAX_LENGTH or "." in line:
        return False
    if not any(char.isupper() for char in line):
        return False
    return "," in line or bool(LOCATION_KEYWORDS.search(line))


def _next_entry_ahead(lines: List[str], j: int) -> bool:
    """True when a date-range line sits one or two lines after j."""
    for k in (j + 1, j + 2):
        if k < len(lines) and DatePatterns.EXPERIENCE_DATE_START.match(lines[k]):
            return True
    return False


def _experience_from_date_line(lines: List[str], date_idx: int) -> Tuple[ExperienceEntry, int]:
    """
    Build one experience entry around the date line at date_idx.

    Layout: company (date_idx-2), title (date_idx-1), date range, optional
    location, description lines.

    Returns:
        (entry, index of the last line consumed)
    """
    title = lines[date_idx - 1] if date_idx >= 1 else ""
    company = lines[date_idx - 2] if date_idx >= 2 else ""
    dates = parse_date_range(lines[date_idx])

    location = ""
    desc_start = date_idx + 1
    if desc_start < len(lines) and _looks_like_location(lines[desc_start]):
        location = lines[desc_start]
        desc_start += 1

    description = []
    end_idx = desc_start - 1
    for j in range(desc_start, len(lines)):
        if is_page_footer(lines[j]):
            continue
        if _next_entry_ahead(lines, j):
            break
        end_idx = j
        description.append(lines[j])

    text = " ".join(description).strip()
    entry = create_experience_entry(
        company=company,
        title=title,
        location=location,
        start_date=dates.start_date,
        end_date=dates.end_date,
        current=dates.current,
        bullets=[create_bullet_point(text)] if text else [],
    )
    return entry, end_idx


def parse_experience(text: str) -> List[ExperienceEntry]:
    """
    Parse Experience entries anchored on month-name date-range lines.

    Description lines of an entry are joined into a single bullet. Without any
    date-range line the result is empty.
    """
    lines = split_lines(extract_section(text, "Experience"))
    entries = []

    i = 0
    while i < len(lines):
        line = lines[i]
        if is_page_footer(line):
            i += 1
            continue

        if DatePatterns.EXPERIENCE_DATE_LINE.match(line):
            entry, end_idx = _experience_from_date_line(lines, i)
            entries.append(entry)
            i = end_idx + 1
            continue

        i += 1

    return entries


# =============================================================================
# EDUCATION
# =============================================================================


def _split_degree_field(text: str) -> Tuple[str, str]:
    """Split "Degree, Field[, Field...]" on commas into (degree, field)."""
    parts = [part.strip() for part in text.split(",")]
    return parts[0], ", ".join(parts[1:])


def parse_education(text: str) -> List[EducationEntry]:
    """
    Parse Education entries sequentially.

    Each entry starts with an institution line, followed by one of:
    - "Degree, Field · (2015 - 2019)"
    - "· (2015 - 2019)" alone
    - "Degree, Field" then, optionally, "· (2015 - 2019)" on the next line
    """
    lines = _section_lines(text, "Education")
    entries = []

    i = 0
    while i < len(lines):
        institution = lines[i]
        i += 1

        degree = field_of_study = start_date = end_date = ""

        if i < len(lines):
            info = lines[i]
            inline = DatePatterns.EDUCATION_INLINE_DATE.match(info)
            standalone = DatePatterns.EDUCATION_STANDALONE_DATE.match(info)

            if inline:
                degree, field_of_study = _split_degree_field(inline.group(1).strip())
                start_date, end_date = inline.group(2), inline.group(3)
                i += 1
            elif standalone:
                start_date, end_date = standalone.group(1), standalone.group(2)
                i += 1
            else:
                degree, field_of_study = _split_degree_field(info)
                i += 1
                if i < len(lines):
                    next_date = DatePatterns.EDUCATION_STANDALONE_DATE.match(lines[i])
                    if next_date:
                        start_date, end_date = next_date.group(1), next_date.group(2)
                        i += 1

        entries.append(
            create_education_entry(
                institution=institution,
                degree=degree,
                field_of_study=field_of_study,
                start_date=start_date,
                end_date=end_date,
            )
        )

    return entries


# =============================================================================
# ONE-LINE ENTRIES
# =============================================================================


def parse_certifications(text: str) -> List[CertificationEntry]:
    return [create_certification_entry(name=line) for line in _section_lines(text, "Certifications")]


def parse_awards(text: str) -> List[AwardEntry]:
    return [create_award_entry(name=line) for line in _section_lines(text, "Honors-Awards")]


def parse_publications(text: str) -> List[PublicationEntry]:
    return [create_publication_entry(title=line) for line in _section_lines(text, "Publications")]


# =============================================================================
# ENTRY POINTS
# =============================================================================


def parse_linkedin_text(text: str) -> ResumeFragment:
    """
    Parse LinkedIn profile text into a partial resume.

    Args:
        text: Raw text from the profile PDF (or pasted)

    Returns:
        ResumeFragment; sections missing from the text stay empty
    """
    _, full = preprocess_profile_text(text)

    technical = parse_top_skills(full)
    languages = parse_languages(full)

    fragment = ResumeFragment(
        contact=parse_contact(full),
        summary=parse_summary(full),
        experience=parse_experience(full),
        education=parse_education(full),
        skills=SkillGroups(technical=technical, languages=languages),
        certifications=parse_certifications(full),
        awards=parse_awards(full),
        publications=parse_publications(full),
    )

    log_fragment_summary("linkedin", fragment)
    return fragment


def parse_linkedin_export(path: Path) -> ResumeFragment:
    """
    Extract text from a LinkedIn profile export file and parse it.

    Raises:
        FileNotFoundError: If the file doesn't exist
        UnsupportedFileFormatError: If the file type is not supported
    """
    text = extract_text_from_file(path)
    _log_debug(f"Parsing LinkedIn export {Path(path).name}")
    return parse_linkedin_text(text)
