"""
Integration tests for the LLM import and tailoring pipeline (fake provider).

Tests: pasted text -> extraction -> merge -> tailoring with contact repair.
"""

import json

import pytest

from resumecrafter.contexts.intake import ExtractionParseError, enhance_all_bullets, parse_text_to_resume
from resumecrafter.contexts.targeting import craft_tailored_resume

EXTRACTED = {
    "contact": {"fullName": "Sam Lee", "email": "sam@example.com", "phone": "555-0100"},
    "summary": {"text": "Backend engineer."},
    "experience": [
        {
            "company": "Initech",
            "title": "Backend Engineer",
            "startDate": "2019-03",
            "endDate": "2023-02",
            "current": False,
            "bullets": [{"text": "maintained billing service"}, {"text": "wrote docs"}],
            "skills": ["Go"],
        }
    ],
    "education": [{"institution": "State University", "degree": "BS", "field": "CS"}],
    "skills": {"technical": [{"name": "Go"}, {"name": "PostgreSQL"}], "soft": [{"name": "Mentoring"}], "languages": []},
}


@pytest.mark.integration
def test_text_import_then_tailor(store, fake_llm):
    client, provider = fake_llm(
        f"```json\n{json.dumps(EXTRACTED)}\n```",
        '```json\n{"contact": {"fullName": ""}, "summary": {"text": "Go engineer."}}\n```',
    )

    store.merge(parse_text_to_resume(client, "Sam Lee ... Initech ..."), source="llm")
    tailored = craft_tailored_resume(client, store.get_resume(), "Senior Go engineer, payments team.")

    resume = store.get_resume()
    assert resume.contact.phone == "555-0100"
    assert resume.experience[0].bullets[0].id
    assert tailored["contact"]["fullName"] == "Sam Lee"
    assert tailored["contact"]["phone"] == "555-0100"
    assert tailored["summary"]["text"] == "Go engineer."

    master_in_request = provider.calls[1][0][1]["content"]
    assert resume.experience[0].id in master_in_request


@pytest.mark.integration
def test_failed_extraction_leaves_master_untouched(store, fake_llm):
    client, _ = fake_llm("not json at all")
    store.update_contact(full_name="Sam Lee")
    before = store.export_json()

    with pytest.raises(ExtractionParseError):
        store.merge(parse_text_to_resume(client, "text"), source="llm")

    assert store.export_json() == before


@pytest.mark.integration
def test_enhance_bullets_persisted_per_update(store, fake_llm):
    client, _ = fake_llm(
        f"```json\n{json.dumps(EXTRACTED)}\n```",
        "Maintained billing service handling $2M/month",
        RuntimeError("overloaded"),
    )
    store.merge(parse_text_to_resume(client, "text"), source="llm")
    entry = store.get_resume().experience[0]

    enhance_all_bullets(
        client,
        entry.bullets,
        on_update=lambda index, bullet: store.update_experience(entry.id, bullets=entry.bullets),
    )

    stored = json.loads(store.export_json())["experience"][0]["bullets"]
    assert [b["text"] for b in stored] == ["Maintained billing service handling $2M/month", "wrote docs"]
