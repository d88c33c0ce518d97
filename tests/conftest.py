"""Shared fixtures: a scripted LLM provider, completion clients and a temporary store."""

from pathlib import Path

import pytest

from resumecrafter.contexts.curation import JsonFileStorage, ResumeStore
from resumecrafter.utils.llm import CompletionClient, LLMProvider, LLMResponse, SessionConfig

FIXTURES_PATH = Path(__file__).parent / "fixtures"


class FakeProvider(LLMProvider):
    """
    Scripted stand-in for a real provider.

    Returns queued responses in order; a queued exception is raised instead.
    Every request is recorded in `calls` as (messages, options).
    """

    _provider_prefix = "fake"

    def __init__(self, responses=None, model: str = "fake-model"):
        self.responses = list(responses or [])
        self.calls = []
        self.update_model(model)

    def _call_api(self, messages, options):
        self.calls.append((messages, options))
        if not self.responses:
            raise AssertionError("FakeProvider has no response queued")

        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return LLMResponse(content=response, model=self.model, input_tokens=0, output_tokens=0)


@pytest.fixture
def fake_llm():
    """Factory: fake_llm(*responses) -> (CompletionClient, FakeProvider)."""

    def _make(*responses):
        provider = FakeProvider(responses)
        config = SessionConfig(provider="openai", api_key="test-key", model="fake-model")
        return CompletionClient(config, provider_factory=lambda _config: provider), provider

    return _make


@pytest.fixture
def unconfigured_client():
    """Client without an API key whose provider factory must never run."""

    def _no_provider(_config):
        raise AssertionError("provider built for an unconfigured session")

    return CompletionClient(SessionConfig(provider="openai"), provider_factory=_no_provider)


@pytest.fixture
def store(tmp_path):
    return ResumeStore(JsonFileStorage(tmp_path / "master"))


@pytest.fixture
def linkedin_profile_text():
    return (FIXTURES_PATH / "linkedin_profile.txt").read_text(encoding="utf-8")
