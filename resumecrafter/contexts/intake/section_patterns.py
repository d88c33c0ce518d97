"""
Section headers and regex patterns for LinkedIn profile text.

LinkedIn's "Save to PDF" profile export has a predictable layout:

    Contact | Top Skills | Languages | Certifications | Name + Headline + Location
    Summary | Experience (entries) | Education (entries)

Pattern classes follow the convention from patterns.py in the job intake code:
- Dataclasses with frozen=True for immutability
- Class-level constants for patterns
- Helper functions that use these patterns
"""

import re
from dataclasses import dataclass

# =============================================================================
# SECTION HEADERS
# =============================================================================

# Known section headers, each appearing alone on its own line
SECTION_HEADERS = (
    "Contact",
    "Top Skills",
    "Languages",
    "Certifications",
    "Honors-Awards",
    "Summary",
    "Experience",
    "Education",
    "Publications",
    "Patents",
    "Volunteer Experience",
    "Organizations",
)


def header_pattern(section_name: str) -> re.Pattern:
    """Whole-line, case-insensitive match of one section header."""
    return re.compile(rf"^{re.escape(section_name)}\s*$", re.IGNORECASE | re.MULTILINE)


# =============================================================================
# DATES
# =============================================================================

MONTHS = {
    "january": "01",
    "february": "02",
    "march": "03",
    "april": "04",
    "may": "05",
    "june": "06",
    "july": "07",
    "august": "08",
    "september": "09",
    "october": "10",
    "november": "11",
    "december": "12",
    "jan": "01",
    "feb": "02",
    "mar": "03",
    "apr": "04",
    "jun": "06",
    "jul": "07",
    "aug": "08",
    "sep": "09",
    "sept": "09",
    "oct": "10",
    "nov": "11",
    "dec": "12",
}

_MONTH_NAME = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?|Aug(?:ust)?"
    r"|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
)


@dataclass(frozen=True)
class DatePatterns:
    """
    Date-range patterns used by experience and education parsing.

    Supports:
    - "June 2021 - Present (4 years 9 months)"
    - "September 2016 - August 2019 (3 years)"
    - "· (2015 - 2019)" / "(2015 - 2019)" education year ranges
    """

    # A whole line that starts an experience date range
    EXPERIENCE_DATE_LINE: re.Pattern = re.compile(
        rf"^{_MONTH_NAME}\s+\d{{4}}\s*-\s*.+$", re.IGNORECASE
    )

    # Start of a date range, used to look ahead for the next entry
    EXPERIENCE_DATE_START: re.Pattern = re.compile(
        rf"^{_MONTH_NAME}\s+\d{{4}}\s*-", re.IGNORECASE
    )

    # Components of a date range: start word, start year, "Present" or end word + year
    DATE_RANGE: re.Pattern = re.compile(
        r"(\w+)\s+(\d{4})\s*-\s*(Present|\w+\s+\d{4})", re.IGNORECASE
    )

    MONTH_YEAR: re.Pattern = re.compile(r"(\w+)\s+(\d{4})")

    # "Degree, Field · (2015 - 2019)"
    EDUCATION_INLINE_DATE: re.Pattern = re.compile(r"^(.+?)\s*·\s*\((\d{4})\s*-\s*(\d{4})\)")

    # "· (2015 - 2019)" or "(2015 - 2019)" alone on a line
    EDUCATION_STANDALONE_DATE: re.Pattern = re.compile(r"^\s*·?\s*\(?(\d{4})\s*-\s*(\d{4})\)?")


# =============================================================================
# CONTACT
# =============================================================================


@dataclass(frozen=True)
class ContactPatterns:
    """Patterns for the Contact section body."""

    EMAIL: re.Pattern = re.compile(r"[\w.+-]+@[\w.-]+\.\w+")

    LINKEDIN_URL: re.Pattern = re.compile(r"(?:www\.)?linkedin\.com/in/[\w-]+")

    # Bare web addresses such as "janedoe.dev" or "github.com/janedoe"
    WEB_URL: re.Pattern = re.compile(
        r"[\w.-]+\.(?:github\.io|com|org|net|dev|io)/?\S*", re.IGNORECASE
    )


# =============================================================================
# MISC
# =============================================================================

PAGE_FOOTER = re.compile(r"^Page \d+ of \d+", re.IGNORECASE | re.MULTILINE)

# "English (Full Professional)"
LANGUAGE_WITH_PROFICIENCY = re.compile(r"^(.+?)\s*\((.+?)\)\s*$")

# Words that mark a short line after a date range as a location
LOCATION_KEYWORDS = re.compile(r"(?:United States|Area|City|State|Remote)", re.IGNORECASE)

LOCATION_MAX_LENGTH = 80


def is_page_footer(line: str) -> bool:
    """Check for a "Page N of M" footer line."""
    return bool(PAGE_FOOTER.match(line))
