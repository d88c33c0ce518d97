"""
Text-completion provider abstraction and response parsing utilities.

Provides a provider-agnostic chat interface over role-tagged messages, the
session-scoped configuration that selects a provider (held in memory only,
never persisted), and utilities for parsing structured JSON responses.
"""

import json
import os
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

load_dotenv()
OPERATION_SETTINGS_PATH = Path(
    os.getenv("OPERATION_SETTINGS_PATH", Path(__file__).parent / "operation_settings.yaml")
)

MESSAGE_ROLES = ("system", "user", "assistant")

# Provider name -> environment variable holding its API key
API_KEY_ENV_VARS = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}

DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "anthropic": "claude-sonnet-4-20250514",
}

NOT_CONFIGURED_MESSAGE = "No API configuration. Please set up your API key first."


class ConfigurationError(Exception):
    """Raised when the text-completion capability is not set up."""

    pass


class ResponseParseError(ValueError):
    """Raised when a text-completion response is not the structured data expected."""

    pass


# --- Request Types ---


@dataclass
class ChatOptions:
    """Sampling options sent with every chat request."""

    temperature: float = 0.7
    max_tokens: int = 4096

    def __post_init__(self):
        if not 0.0 <= self.temperature <= 1.0:
            raise ValueError(f"temperature must be within [0.0, 1.0], got: {self.temperature}")
        if not isinstance(self.max_tokens, int) or self.max_tokens <= 0:
            raise ValueError(f"max_tokens must be a positive integer, got: {self.max_tokens}")


@dataclass
class SessionConfig:
    """
    Provider selection and credential for the current session.

    Lives only as long as the process that created it. Nothing in the package
    writes it to disk; the canonical record store never sees it.
    """

    provider: Optional[str] = None
    api_key: Optional[str] = field(default=None, repr=False)
    model: Optional[str] = None

    def is_configured(self) -> bool:
        return bool(self.provider and self.api_key and self.model)

    @classmethod
    def from_env(cls, provider: str = None, model: str = None) -> "SessionConfig":
        """
        Build a session config from environment variables.

        Args:
            provider: "openai" or "anthropic" (default: LLM_PROVIDER env var, then "openai")
            model: Model name (default: LLM_MODEL env var, then provider default)
        """
        provider = (provider or os.getenv("LLM_PROVIDER", "openai")).lower()
        key_var = API_KEY_ENV_VARS.get(provider)
        api_key = os.getenv(key_var) if key_var else None
        model = model or os.getenv("LLM_MODEL") or DEFAULT_MODELS.get(provider)
        return cls(provider=provider, api_key=api_key, model=model)


def validate_messages(messages: List[Dict[str, str]]) -> None:
    """Reject messages that are not {"role": <known role>, "content": <str>}."""
    for message in messages:
        role = message.get("role")
        if role not in MESSAGE_ROLES:
            raise ValueError(f"Unknown message role: {role!r}. Use one of {MESSAGE_ROLES}")
        if not isinstance(message.get("content"), str):
            raise ValueError(f"Message content must be a string (role: {role})")


# --- LLM Provider Classes ---


@dataclass
class LLMResponse:
    """Response from an LLM provider."""

    content: str
    model: str
    input_tokens: int
    output_tokens: int


class LLMProvider(ABC):
    """
    Abstract base for LLM providers.

    Subclasses must:
    - Set _provider_prefix class attribute (e.g., "anthropic", "openai")
    - Implement _call_api() for the actual API call
    - Call update_model(model) in __init__ to set model and name
    """

    _provider_prefix: str

    name: str
    model: str

    def update_model(self, model: str):
        """Update the model and refresh the provider name."""
        self.model = model
        self.name = f"{self._provider_prefix}/{model}"

    @abstractmethod
    def _call_api(self, messages: List[Dict[str, str]], options: ChatOptions) -> LLMResponse:
        """Make a single API call. Implemented by subclasses."""
        pass

    def chat(self, messages: List[Dict[str, str]], options: ChatOptions = None) -> str:
        """Send role-tagged messages and return the plain-text completion."""
        validate_messages(messages)
        return self._call_api(messages, options or ChatOptions()).content


class AnthropicProvider(LLMProvider):
    """Anthropic Claude provider."""

    _provider_prefix = "anthropic"

    def __init__(self, api_key: str, model: str = DEFAULT_MODELS["anthropic"]):
        # Lazy import - SDK is only needed when this provider is selected
        try:
            import anthropic
        except ImportError:
            raise ImportError("anthropic package required. Install with: pip install anthropic")

        self.client = anthropic.Anthropic(api_key=api_key)
        self.update_model(model)

    def _call_api(self, messages: List[Dict[str, str]], options: ChatOptions) -> LLMResponse:
        # Claude takes the system prompt out-of-band
        system_prompt = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
        chat_messages = [
            {"role": m["role"], "content": m["content"]} for m in messages if m["role"] != "system"
        ]

        request = {
            "model": self.model,
            "max_tokens": options.max_tokens,
            "temperature": options.temperature,
            "messages": chat_messages,
        }
        if system_prompt:
            request["system"] = system_prompt

        response = self.client.messages.create(**request)
        return LLMResponse(
            content=response.content[0].text if response.content else "",
            model=self.model,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
        )


class OpenAIProvider(LLMProvider):
    """OpenAI GPT provider."""

    _provider_prefix = "openai"

    def __init__(self, api_key: str, model: str = DEFAULT_MODELS["openai"]):
        # Lazy import - SDK is only needed when this provider is selected
        try:
            import openai
        except ImportError:
            raise ImportError("openai package required. Install with: pip install openai")

        self.client = openai.OpenAI(api_key=api_key)
        self.update_model(model)

    def _call_api(self, messages: List[Dict[str, str]], options: ChatOptions) -> LLMResponse:
        response = self.client.chat.completions.create(
            model=self.model,
            max_tokens=options.max_tokens,
            temperature=options.temperature,
            messages=[{"role": m["role"], "content": m["content"]} for m in messages],
        )
        return LLMResponse(
            content=response.choices[0].message.content or "",
            model=self.model,
            input_tokens=response.usage.prompt_tokens,
            output_tokens=response.usage.completion_tokens,
        )


PROVIDERS = {
    "anthropic": AnthropicProvider,
    "openai": OpenAIProvider,
}


# --- Provider Factory ---


def get_provider(config: SessionConfig) -> LLMProvider:
    """
    Get an LLM provider instance for a session.

    Args:
        config: Session configuration (provider, API key, model)

    Returns:
        LLMProvider instance

    Raises:
        ConfigurationError: If the config is incomplete or names an unknown provider
    """
    if not config.is_configured():
        raise ConfigurationError(NOT_CONFIGURED_MESSAGE)

    provider_cls = PROVIDERS.get(config.provider)
    if provider_cls is None:
        raise ConfigurationError(
            f"Unknown provider: {config.provider}. Use one of {', '.join(PROVIDERS)}"
        )

    return provider_cls(api_key=config.api_key, model=config.model)


class CompletionClient:
    """
    Session-scoped access to the configured text-completion capability.

    Injected into every intake/targeting operation that talks to an LLM.
    The provider is built lazily on the first request, after the configuration
    check, so an unconfigured session fails before any network interaction.
    """

    def __init__(
        self,
        config: SessionConfig,
        provider_factory: Callable[[SessionConfig], LLMProvider] = get_provider,
    ):
        self.config = config
        self._provider_factory = provider_factory
        self._provider: Optional[LLMProvider] = None

    def is_configured(self) -> bool:
        return self.config.is_configured()

    def ensure_configured(self) -> None:
        """Raise ConfigurationError unless provider, API key and model are all set."""
        if not self.is_configured():
            raise ConfigurationError(NOT_CONFIGURED_MESSAGE)

    def complete(self, messages: List[Dict[str, str]], options: ChatOptions = None) -> str:
        """Send one request-response exchange and return the raw completion text."""
        self.ensure_configured()
        if self._provider is None:
            self._provider = self._provider_factory(self.config)
        return self._provider.chat(messages, options)


# --- Operation Settings ---

_settings_cache: Dict[str, Dict[str, Any]] = {}


def load_operation_options(operation: str, settings_path: Path = None) -> ChatOptions:
    """
    Load sampling options for a named operation from operation_settings.yaml.

    Args:
        operation: Operation name (e.g., "extract_resume", "tailor_resume")
        settings_path: Optional settings file (default: OPERATION_SETTINGS_PATH)

    Returns:
        ChatOptions for the operation

    Raises:
        FileNotFoundError: If the settings file doesn't exist
        KeyError: If the operation has no entry
    """
    if settings_path is None:
        settings_path = OPERATION_SETTINGS_PATH

    cache_key = str(settings_path)
    if cache_key not in _settings_cache:
        if not settings_path.exists():
            raise FileNotFoundError(f"Operation settings not found at {settings_path}")
        _settings_cache[cache_key] = OmegaConf.to_container(
            OmegaConf.load(settings_path), resolve=True
        )

    settings = _settings_cache[cache_key]
    if operation not in settings:
        raise KeyError(f"No settings for operation '{operation}' in {settings_path}")

    entry = settings[operation]
    return ChatOptions(
        temperature=float(entry.get("temperature", 0.7)),
        max_tokens=int(entry.get("max_tokens", 4096)),
    )


# --- Response Parsing Utilities ---

_CODE_FENCE = re.compile(r"```(?:json)?[ \t]*\n?", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove ```json / ``` fence markers wrapped around an LLM response."""
    return _CODE_FENCE.sub("", text or "").strip()


def parse_json_response(text: str) -> Any:
    """
    Parse a JSON document from an LLM response, handling markdown code fences.

    Args:
        text: Raw completion text

    Returns:
        Parsed JSON value (dict, list, ...)

    Raises:
        ResponseParseError: If the text is not valid JSON after fence stripping
    """
    cleaned = strip_code_fences(text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"Response is not valid JSON: {e.msg}") from e
