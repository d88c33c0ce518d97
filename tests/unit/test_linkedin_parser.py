"""
Unit tests for the deterministic LinkedIn profile parser.

Each heuristic branch has its own literal-text fixture.
"""

import pytest

from resumecrafter.contexts.intake.linkedin_parser import (
    _experience_from_date_line,
    parse_awards,
    parse_certifications,
    parse_contact,
    parse_education,
    parse_experience,
    parse_languages,
    parse_linkedin_text,
    parse_publications,
    parse_summary,
    parse_top_skills,
)

# =============================================================================
# CONTACT
# =============================================================================


@pytest.mark.unit
def test_contact_fields():
    text = (
        "Jane Doe\nData Engineer\nAustin, Texas\n"
        "Contact\njane@example.com\nwww.linkedin.com/in/jane-doe (LinkedIn)\n"
        "janedoe.dev (Portfolio)\njanedoe.github.io (Blog)\n"
        "Summary\nHello."
    )

    contact = parse_contact(text)

    assert contact.full_name == "Jane Doe"
    assert contact.location == "Austin, Texas"
    assert contact.email == "jane@example.com"
    assert contact.linkedin == "www.linkedin.com/in/jane-doe"
    assert contact.portfolio == "janedoe.dev"
    assert contact.github == "janedoe.github.io"


@pytest.mark.unit
def test_email_domain_not_taken_as_portfolio():
    """Test that an e-mail address alone yields no portfolio URL."""
    contact = parse_contact("Jane Doe\nContact\njane@example.com\nTop Skills\nPython")

    assert contact.email == "jane@example.com"
    assert contact.portfolio == ""


@pytest.mark.unit
def test_location_needs_three_name_block_lines():
    contact = parse_contact("Jane Doe\nData Engineer\nSummary\nHello.")

    assert contact.full_name == "Jane Doe"
    assert contact.location == ""


@pytest.mark.unit
def test_no_contact_section():
    contact = parse_contact("Experience\nAcme")

    assert contact.full_name == ""
    assert contact.email == ""


# =============================================================================
# SKILLS, LANGUAGES, SUMMARY
# =============================================================================


@pytest.mark.unit
def test_top_skills_one_per_line():
    skills = parse_top_skills("Top Skills\nPython\nApache Spark\nLanguages\nEnglish")

    assert [s.name for s in skills] == ["Python", "Apache Spark"]
    assert all(s.proficiency == "intermediate" for s in skills)


@pytest.mark.unit
def test_languages_with_and_without_proficiency():
    """Test "Name (Proficiency)" splitting and the bare-name fallback."""
    languages = parse_languages("Languages\nEnglish (Native or Bilingual)\nFrench\nSummary\nHi")

    assert [(s.name, s.proficiency) for s in languages] == [
        ("English", "Native or Bilingual"),
        ("French", ""),
    ]
    assert all(s.category == "language" for s in languages)


@pytest.mark.unit
def test_summary_verbatim():
    text = "Summary\nBuilds data platforms.\nLoves Python.\nExperience\nAcme"

    assert parse_summary(text).text == "Builds data platforms.\nLoves Python."
    assert parse_summary("Experience\nAcme") is None


# =============================================================================
# EXPERIENCE
# =============================================================================


@pytest.mark.unit
def test_experience_with_location_line():
    """Test that a short line with a location word is taken as location."""
    text = (
        "Experience\nAcme Analytics\nSenior Data Engineer\n"
        "June 2021 - Present (4 years 9 months)\nGreater Boston Area\n"
        "Built pipelines.\nEducation\nMIT"
    )

    [entry] = parse_experience(text)

    assert entry.company == "Acme Analytics"
    assert entry.title == "Senior Data Engineer"
    assert entry.location == "Greater Boston Area"
    assert (entry.start_date, entry.end_date, entry.current) == ("2021-06", "", True)
    assert [b.text for b in entry.bullets] == ["Built pipelines."]


@pytest.mark.unit
def test_experience_comma_location():
    text = "Experience\nAcme\nEngineer\nMarch 2019 - May 2020 (1 year 3 months)\nPortland, Oregon\nDid work."

    [entry] = parse_experience(text)

    assert entry.location == "Portland, Oregon"
    assert entry.bullets[0].text == "Did work."


@pytest.mark.unit
def test_experience_description_line_not_location():
    """Test that a sentence with a period after the date is description, not location."""
    text = "Experience\nAcme\nEngineer\nMarch 2019 - May 2020 (1 year 3 months)\nLed the team, shipped v2."

    [entry] = parse_experience(text)

    assert entry.location == ""
    assert entry.bullets[0].text == "Led the team, shipped v2."


@pytest.mark.unit
def test_experience_lowercase_line_not_location():
    text = "Experience\nAcme\nEngineer\nMarch 2019 - May 2020\nremote, mostly\nWrote code"

    [entry] = parse_experience(text)

    assert entry.location == ""
    assert entry.bullets[0].text == "remote, mostly Wrote code"


@pytest.mark.unit
def test_experience_description_joined_into_one_bullet():
    """Test that description lines stop before the next entry and join with spaces."""
    text = (
        "Experience\nAcme\nEngineer\nJanuary 2020 - Present (1 year)\n"
        "Designed the API.\nCut latency by 40%.\n"
        "Globex\nIntern\nJune 2019 - August 2019 (3 months)\nWrote tests."
    )

    first, second = parse_experience(text)

    assert [b.text for b in first.bullets] == ["Designed the API. Cut latency by 40%."]
    assert (second.company, second.title) == ("Globex", "Intern")
    assert (second.start_date, second.end_date) == ("2019-06", "2019-08")
    assert [b.text for b in second.bullets] == ["Wrote tests."]


@pytest.mark.unit
def test_experience_description_skips_page_footers():
    """Test that a page break inside or right after a description is never part of a bullet."""
    lines = [
        "Acme",
        "Engineer",
        "January 2020 - Present",
        "Designed the API.",
        "Page 1 of 2",
        "Cut latency by 40%.",
        "Page 2 of 2",
        "Intern",
        "June 2019 - August 2019",
    ]

    entry, end_idx = _experience_from_date_line(lines, 2)

    assert [b.text for b in entry.bullets] == ["Designed the API. Cut latency by 40%."]
    assert end_idx == 5


@pytest.mark.unit
def test_experience_without_description_has_no_bullets():
    text = "Experience\nAcme\nEngineer\nJanuary 2020 - Present"

    [entry] = parse_experience(text)

    assert entry.bullets == []


@pytest.mark.unit
def test_experience_without_date_lines_is_empty():
    """Test that no entries are invented when no date range is found."""
    assert parse_experience("Experience\nAcme\nEngineer\nDid stuff.") == []


@pytest.mark.unit
def test_experience_entries_have_unique_ids():
    text = "Experience\nA\nX\nJanuary 2020 - Present\nB\nY\nJanuary 2019 - December 2019"

    entries = parse_experience(text)

    assert len(entries) == 2
    assert entries[0].id != entries[1].id


# =============================================================================
# EDUCATION
# =============================================================================


@pytest.mark.unit
def test_education_inline_date():
    text = "Education\nMIT\nBachelor of Science, Physics, Mathematics · (2012 - 2016)"

    [entry] = parse_education(text)

    assert entry.institution == "MIT"
    assert entry.degree == "Bachelor of Science"
    assert entry.field_of_study == "Physics, Mathematics"
    assert (entry.start_date, entry.end_date) == ("2012", "2016")
    assert entry.gpa == ""


@pytest.mark.unit
def test_education_standalone_date():
    text = "Education\nMIT\n· (2012 - 2016)"

    [entry] = parse_education(text)

    assert entry.degree == ""
    assert (entry.start_date, entry.end_date) == ("2012", "2016")


@pytest.mark.unit
def test_education_degree_then_date_line():
    text = "Education\nMIT\nMaster of Science, Physics\n(2016 - 2018)\nHarvard\nPhD, Physics"

    first, second = parse_education(text)

    assert (first.degree, first.field_of_study) == ("Master of Science", "Physics")
    assert (first.start_date, first.end_date) == ("2016", "2018")
    assert (second.institution, second.degree, second.start_date) == ("Harvard", "PhD", "")


@pytest.mark.unit
def test_education_no_date():
    [entry] = parse_education("Education\nMIT\nBachelor of Arts")

    assert entry.degree == "Bachelor of Arts"
    assert entry.field_of_study == ""
    assert entry.start_date == ""


@pytest.mark.unit
def test_education_institution_only():
    [entry] = parse_education("Education\nMIT")

    assert entry.institution == "MIT"
    assert entry.degree == ""


# =============================================================================
# ONE-LINE SECTIONS
# =============================================================================


@pytest.mark.unit
def test_certifications_name_only():
    certifications = parse_certifications("Certifications\nAWS Solutions Architect\nCKA\nSummary\nHi")

    assert [c.name for c in certifications] == ["AWS Solutions Architect", "CKA"]
    assert all(c.issuer == "" and c.date == "" for c in certifications)


@pytest.mark.unit
def test_awards_and_publications():
    text = "Honors-Awards\nDean's List\nPublications\nStreaming at Scale\nExperience\nAcme"

    assert [a.name for a in parse_awards(text)] == ["Dean's List"]
    assert [p.title for p in parse_publications(text)] == ["Streaming at Scale"]


# =============================================================================
# WHOLE PROFILE
# =============================================================================


@pytest.mark.unit
def test_empty_text_yields_empty_fragment():
    """Test that unrecognizable text is not an error."""
    fragment = parse_linkedin_text("just some words")

    assert fragment.experience == []
    assert fragment.education == []
    assert fragment.summary is None
    assert fragment.skills.technical == []


@pytest.mark.unit
def test_unicode_dashes_in_date_lines():
    """Test that en-dash date ranges from PDF text are recognized."""
    fragment = parse_linkedin_text("Experience\nAcme\nEngineer\nMay 2018 – June 2020 (2 years)\nDid work.")

    [entry] = fragment.experience
    assert (entry.start_date, entry.end_date) == ("2018-05", "2020-06")
