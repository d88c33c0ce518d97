"""Unit tests for the master resume store and its file storage."""

import json

import pytest

from resumecrafter.contexts.curation import (
    ImportFormatError,
    JsonFileStorage,
    RecordShapeError,
    ResumeStore,
)
from resumecrafter.contexts.curation.resume_schema import (
    ResumeFragment,
    create_bullet_point,
    create_experience_entry,
    create_skill_entry,
)
from resumecrafter.contexts.curation.store import STORAGE_KEY


@pytest.mark.unit
def test_starts_empty_without_stored_record(store):
    """Test that a fresh store holds an empty record and writes nothing yet."""
    resume = store.get_resume()

    assert resume.experience == []
    assert STORAGE_KEY not in store.storage


@pytest.mark.unit
def test_every_mutation_persists(tmp_path):
    """Test that a second store on the same directory sees each change."""
    storage = JsonFileStorage(tmp_path)
    store = ResumeStore(storage)

    store.update_contact(full_name="Jane Doe", email="jane@example.com")
    entry = store.add_experience(create_experience_entry(company="Acme"))

    reloaded = ResumeStore(storage).get_resume()
    assert reloaded.contact.full_name == "Jane Doe"
    assert reloaded.experience[0].id == entry.id


@pytest.mark.unit
def test_mutation_refreshes_updated_at(store):
    before = store.get_resume().meta.updated_at

    store.update_summary(text="Engineer.")

    assert store.get_resume().meta.updated_at >= before
    assert store.get_resume().meta.created_at == before


@pytest.mark.unit
def test_subscribers_notified(store):
    seen = []
    unsubscribe = store.subscribe(lambda resume: seen.append(resume.summary.text))

    store.update_summary(text="One")
    unsubscribe()
    store.update_summary(text="Two")

    assert seen == ["One"]


@pytest.mark.unit
def test_update_and_remove_entry(store):
    entry = store.add_experience()

    assert store.update_experience(entry.id, title="Lead", current=True, end_date="2024-01")
    assert store.find_entry("experience", entry.id).title == "Lead"
    assert store.find_entry("experience", entry.id).end_date == ""

    assert store.remove_experience(entry.id)
    assert not store.remove_experience(entry.id)
    assert not store.update_experience("missing", title="x")


@pytest.mark.unit
def test_update_entry_rejects_unknown_field(store):
    entry = store.add_education()

    with pytest.raises(ValueError, match="Unknown EducationEntry field"):
        store.update_education(entry.id, major="Physics")


@pytest.mark.unit
def test_update_upgrades_bare_string_bullets(tmp_path):
    """Test that bare-string bullets written through an update are stored as structured bullets."""
    storage = JsonFileStorage(tmp_path)
    store = ResumeStore(storage)
    entry = store.add_experience()

    assert store.update_experience(entry.id, bullets=["Shipped it", create_bullet_point("Led it")])

    bullets = store.find_entry("experience", entry.id).bullets
    assert [b.text for b in bullets] == ["Shipped it", "Led it"]
    assert all(b.id for b in bullets)
    assert len({b.id for b in bullets}) == 2

    stored = json.loads(storage.get(STORAGE_KEY))["experience"][0]["bullets"]
    assert [b["text"] for b in stored] == ["Shipped it", "Led it"]


@pytest.mark.unit
def test_update_with_bad_shape_leaves_entry_untouched(store):
    entry = store.add_project()

    with pytest.raises(RecordShapeError):
        store.update_project(entry.id, name="CLI", bullets=[42])

    assert store.find_entry("projects", entry.id).name == ""
    assert store.find_entry("projects", entry.id).bullets == []


@pytest.mark.unit
def test_add_entry_settles_bullets_and_current_role(store):
    """Test that adding an entry applies the same clean-up as updating one."""
    first = create_bullet_point("Built the pipeline")
    copied = create_bullet_point("Ran the pipeline")
    copied.id = first.id
    entry = create_experience_entry(
        company="Acme", current=True, end_date="2024-01", bullets=["Mentored", first, copied]
    )

    added = store.add_experience(entry)

    assert added.end_date == ""
    assert [type(b).__name__ for b in added.bullets] == ["BulletPoint"] * 3
    assert len({b.id for b in added.bullets}) == 3


@pytest.mark.unit
def test_add_skill_case_insensitive(store):
    assert store.add_skill("technical", "Python")
    assert not store.add_skill("technical", "python")
    assert not store.add_skill("technical", "  ")
    assert store.add_skill("soft", create_skill_entry("Python"))

    assert [s.name for s in store.get_resume().skills.technical] == ["Python"]


@pytest.mark.unit
def test_update_skills_keeps_first_duplicate(store):
    store.update_skills("technical", [create_skill_entry("SQL"), create_skill_entry("sql"), create_skill_entry("Go")])

    assert [s.name for s in store.get_resume().skills.technical] == ["SQL", "Go"]


@pytest.mark.unit
def test_adopt_summary_variant(store):
    store.adopt_summary_variant("Generated A")
    store.adopt_summary_variant("Generated A")

    summary = store.get_resume().summary
    assert summary.text == "Generated A"
    assert summary.variants == ["Generated A", "Generated A"]


@pytest.mark.unit
def test_merge_persists(store):
    report = store.merge(ResumeFragment(experience=[create_experience_entry(company="Acme")]), source="test")

    stored = json.loads(store.storage.get(STORAGE_KEY))
    assert stored["experience"][0]["company"] == "Acme"
    assert report.appended["experience"] == 1


@pytest.mark.unit
def test_export_import_round_trip(store, tmp_path):
    """Test that export then import yields a deep-equal record, ids included."""
    entry = create_experience_entry(company="Acme", title="Engineer", start_date="2020-01", current=True)
    entry.bullets.append(create_bullet_point("Shipped the thing"))
    store.add_experience(entry)
    store.add_skill("technical", "Python")
    store.update_contact(full_name="Jane Doe")
    original = store.get_resume()

    exported = store.export_json()
    other = ResumeStore(JsonFileStorage(tmp_path / "other"))
    other.import_json(exported)

    assert other.get_resume() == original


@pytest.mark.unit
def test_import_invalid_json_leaves_record_untouched(store):
    store.update_contact(full_name="Jane Doe")
    before = store.export_json()

    with pytest.raises(ImportFormatError):
        store.import_json("{not json")
    with pytest.raises(ImportFormatError):
        store.import_json("[1, 2, 3]")
    with pytest.raises(ImportFormatError):
        store.import_json('{"experience": "oops"}')

    assert store.export_json() == before


@pytest.mark.unit
def test_corrupt_storage_starts_empty(tmp_path):
    storage = JsonFileStorage(tmp_path)
    storage.set(STORAGE_KEY, "{broken")

    assert ResumeStore(storage).get_resume().experience == []


@pytest.mark.unit
def test_reset(store):
    store.update_contact(full_name="Jane Doe")

    store.reset()

    assert store.get_resume().contact.full_name == ""


@pytest.mark.unit
def test_storage_rejects_path_like_keys(tmp_path):
    with pytest.raises(ValueError):
        JsonFileStorage(tmp_path).get("../escape")


@pytest.mark.unit
def test_award_and_publication_entries(store):
    award = store.add_award()
    publication = store.add_publication()

    assert store.update_award(award.id, name="Best Paper", issuer="KDD")
    assert store.update_publication(publication.id, title="Streaming at Scale")
    assert store.remove_award(award.id)

    resume = store.get_resume()
    assert resume.awards == []
    assert resume.publications[0].title == "Streaming at Scale"
