"""Unit tests for typed normalization of untrusted resume data."""

import pytest

from resumecrafter.contexts.curation.exceptions import RecordShapeError
from resumecrafter.contexts.curation.record_normalizer import (
    ensure_unique_ids,
    fragment_from_dict,
    normalize_bullets,
    record_from_dict,
    record_to_dict,
)
from resumecrafter.contexts.curation.resume_schema import (
    BulletPoint,
    create_bullet_point,
    create_empty_resume,
    create_experience_entry,
    create_skill_entry,
)


@pytest.mark.unit
def test_bare_string_bullets_upgraded():
    """Test that string bullets become structured bullets with ids."""
    bullets = normalize_bullets(["Shipped v2", {"text": "Cut costs", "tags": ["finops"]}])

    assert all(isinstance(b, BulletPoint) for b in bullets)
    assert [b.text for b in bullets] == ["Shipped v2", "Cut costs"]
    assert bullets[1].tags == ["finops"]
    assert all(b.id for b in bullets)
    assert bullets[0].id != bullets[1].id


@pytest.mark.unit
def test_description_string_is_one_bullet():
    """Test that a single description string becomes exactly one bullet."""
    bullets = normalize_bullets("Built the data platform.")

    assert len(bullets) == 1
    assert bullets[0].text == "Built the data platform."
    assert normalize_bullets("") == []


@pytest.mark.unit
def test_missing_ids_assigned_recursively():
    """Test that entries and nested bullets without ids receive fresh ones."""
    fragment = fragment_from_dict(
        {
            "experience": [
                {"company": "Acme", "bullets": [{"text": "a"}, {"text": "b"}]},
                {"company": "Globex", "bullets": ["c"]},
            ],
            "projects": [{"name": "Tool", "bullets": [{"text": "d"}]}],
        }
    )

    experience_ids = [e.id for e in fragment.experience]
    assert all(experience_ids) and len(set(experience_ids)) == 2
    assert all(b.id for e in fragment.experience for b in e.bullets)
    assert fragment.projects[0].bullets[0].id


@pytest.mark.unit
def test_duplicate_ids_reassigned():
    """Test that colliding ids within one collection are replaced."""
    fragment = fragment_from_dict({"education": [{"id": "x", "institution": "A"}, {"id": "x", "institution": "B"}]})

    ids = [e.id for e in fragment.education]
    assert ids[0] == "x"
    assert ids[1] != "x"


@pytest.mark.unit
def test_ensure_unique_ids_respects_taken():
    """Test that ids already in use elsewhere are not reused."""
    entries = [create_experience_entry(), create_experience_entry()]
    entries[0].id = "taken"

    taken = ensure_unique_ids(entries, {"taken"})

    assert entries[0].id != "taken"
    assert "taken" in taken
    assert len(taken) == 3


@pytest.mark.unit
def test_skill_groups_accept_bare_strings():
    """Test that skill names are upgraded to default-proficiency entries."""
    fragment = fragment_from_dict({"skills": {"technical": ["Python", {"name": "SQL", "proficiency": "expert"}]}})

    technical = fragment.skills.technical
    assert [s.name for s in technical] == ["Python", "SQL"]
    assert technical[0].proficiency == "intermediate"
    assert technical[1].proficiency == "expert"
    assert fragment.skills.soft == []


@pytest.mark.unit
def test_current_experience_clears_end_date():
    fragment = fragment_from_dict({"experience": [{"current": True, "endDate": "2024-01"}]})

    assert fragment.experience[0].current is True
    assert fragment.experience[0].end_date == ""


@pytest.mark.unit
def test_scalar_coercion():
    """Test that numbers become text and a summary may be a plain string."""
    fragment = fragment_from_dict({"education": [{"gpa": 3.9}], "summary": "Engineer."})

    assert fragment.education[0].gpa == "3.9"
    assert fragment.summary.text == "Engineer."


@pytest.mark.unit
def test_absent_groups_stay_none():
    """Test that missing single-valued groups are None in a fragment."""
    fragment = fragment_from_dict({"experience": []})

    assert fragment.contact is None
    assert fragment.summary is None
    assert fragment.skills is None


@pytest.mark.unit
def test_wrong_shape_reports_path():
    """Test that shape errors carry the JSON-style location."""
    with pytest.raises(RecordShapeError) as exc_info:
        fragment_from_dict({"experience": [{"company": "Acme"}, {"bullets": 42}]})

    assert exc_info.value.path == "$.experience[1].bullets"
    assert "$.experience[1].bullets" in str(exc_info.value)


@pytest.mark.unit
def test_non_object_payload_rejected():
    with pytest.raises(RecordShapeError):
        fragment_from_dict(["not", "an", "object"])


@pytest.mark.unit
def test_record_round_trip_preserves_ids():
    """Test that record_from_dict(record_to_dict(r)) == r, ids included."""
    record = create_empty_resume()
    record.contact.email = "a@x.com"
    entry = create_experience_entry(company="Acme", title="Engineer", start_date="2020-01")
    entry.bullets.append(create_bullet_point("Did things"))
    record.experience.append(entry)
    record.skills.languages.append(create_skill_entry("German", proficiency="B2", category="language"))
    record.summary.variants.append("Draft")

    assert record_from_dict(record_to_dict(record)) == record


@pytest.mark.unit
def test_record_defaults_for_missing_groups():
    record = record_from_dict({"contact": {"fullName": "Jane"}})

    assert record.contact.full_name == "Jane"
    assert record.experience == []
    assert record.version == "1.0"
