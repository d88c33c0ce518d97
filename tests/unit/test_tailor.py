"""Unit tests for tailoring requests and the contact repair step."""

import json

import pytest

from resumecrafter.contexts.curation.resume_schema import create_empty_resume, create_experience_entry
from resumecrafter.contexts.targeting import (
    TailoringError,
    build_tailoring_messages,
    craft_tailored_resume,
    restore_contact,
    tailor_resume,
)
from resumecrafter.utils.llm import ConfigurationError

JOB_DESCRIPTION = "We are hiring a Data Engineer with Spark and Airflow experience."


@pytest.fixture
def master():
    resume = create_empty_resume()
    resume.contact.full_name = "Jane Doe"
    resume.contact.email = "jane@example.com"
    resume.experience.append(create_experience_entry(company="Acme", title="Data Engineer"))
    return resume


@pytest.mark.unit
def test_tailoring_messages(master):
    """Test that the request restates the reduced schema and the selection rules."""
    system, user = build_tailoring_messages(master, JOB_DESCRIPTION)

    assert system["role"] == "system"
    assert "at most 3-4 experience entries with 3-4 bullets each" in system["content"]
    assert "8-12 most relevant technical skills" in system["content"]
    assert "single page" in system["content"]
    assert '"skills": { "technical": [{ "name": "" }], "soft": [{ "name": "" }] }' in system["content"]

    assert user["role"] == "user"
    assert user["content"].startswith("MASTER RESUME:\n{")
    assert '"fullName": "Jane Doe"' in user["content"]
    assert user["content"].endswith(f"JOB DESCRIPTION:\n{JOB_DESCRIPTION}")


@pytest.mark.unit
def test_tailor_resume_parses_fenced_json(fake_llm, master):
    tailored = {"contact": {"fullName": "Jane Doe"}, "experience": [{"company": "Acme"}]}
    client, provider = fake_llm(f"```json\n{json.dumps(tailored)}\n```")

    assert tailor_resume(client, master, JOB_DESCRIPTION) == tailored
    assert provider.calls[0][1].temperature == pytest.approx(0.2)


@pytest.mark.unit
def test_tailor_resume_invalid_response(fake_llm, master):
    client, _ = fake_llm("Here is your tailored resume!")

    with pytest.raises(TailoringError) as exc_info:
        tailor_resume(client, master, JOB_DESCRIPTION)

    assert exc_info.value.message == "Failed to parse tailored resume. Please try again."


@pytest.mark.unit
def test_tailor_resume_non_object(fake_llm, master):
    client, _ = fake_llm("[1, 2]")

    with pytest.raises(TailoringError):
        tailor_resume(client, master, JOB_DESCRIPTION)


@pytest.mark.unit
def test_tailor_resume_checks_config_and_input(unconfigured_client, fake_llm, master):
    with pytest.raises(ConfigurationError):
        tailor_resume(unconfigured_client, master, JOB_DESCRIPTION)

    client, provider = fake_llm()
    with pytest.raises(ValueError):
        tailor_resume(client, master, "  ")
    assert provider.calls == []


@pytest.mark.unit
def test_restore_contact_when_name_missing(master):
    """Test that the whole master contact block replaces a nameless one."""
    tailored = restore_contact({"contact": {"fullName": "", "email": "other@example.com"}}, master)

    assert tailored["contact"]["fullName"] == "Jane Doe"
    assert tailored["contact"]["email"] == "jane@example.com"


@pytest.mark.unit
def test_restore_contact_when_block_absent(master):
    assert restore_contact({"summary": {"text": "x"}}, master)["contact"]["fullName"] == "Jane Doe"


@pytest.mark.unit
def test_restore_contact_keeps_named_contact(master):
    tailored = {"contact": {"fullName": "J. Doe", "email": ""}}

    assert restore_contact(tailored, master)["contact"] == {"fullName": "J. Doe", "email": ""}


@pytest.mark.unit
def test_restore_contact_noop_for_nameless_master():
    tailored = {"contact": {"fullName": ""}}

    assert restore_contact(tailored, create_empty_resume())["contact"] == {"fullName": ""}


@pytest.mark.unit
def test_craft_tailored_resume_repairs_contact(fake_llm, master):
    client, _ = fake_llm('{"contact": {}, "experience": [{"company": "Acme"}]}')

    tailored = craft_tailored_resume(client, master, JOB_DESCRIPTION)

    assert tailored["contact"]["fullName"] == "Jane Doe"
    assert tailored["experience"] == [{"company": "Acme"}]
