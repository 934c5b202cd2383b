"""
LLM provider clients used for theme discovery and categorization.

Two interchangeable providers expose the same `complete()` call:
- Gemini (google-generativeai)
- OpenAI (openai SDK)
"""
from __future__ import annotations

from dataclasses import dataclass

import google.generativeai as genai
import openai

from config.settings import settings
from utils.errors import NetworkError, ProviderNotConfigured, ResponseParseError
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProviderConfig:
    """Credentials and model choices for the LLM providers.

    Only the presence of a key matters for provider selection.
    """
    gemini_api_key: str = ""
    openai_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    openai_model: str = "gpt-4o-mini"
    timeout: float = 60.0

    @classmethod
    def from_settings(cls) -> "ProviderConfig":
        return cls(
            gemini_api_key=settings.GEMINI_API_KEY,
            openai_api_key=settings.OPENAI_API_KEY,
            gemini_model=settings.GEMINI_MODEL,
            openai_model=settings.OPENAI_MODEL,
            timeout=settings.LLM_TIMEOUT_SECONDS,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.gemini_api_key or self.openai_api_key)


class LLMProvider:
    """Base class: a text-completion capability."""

    name = "base"

    def complete(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.3,
        max_tokens: int = 1000,
    ) -> str:
        """Generate a completion for the prompt.

        Raises:
            NetworkError: If the provider is unreachable, times out or rejects the call.
            ResponseParseError: If the provider returns no usable text.
        """
        raise NotImplementedError


class GeminiProvider(LLMProvider):
    """Gemini text generation."""

    name = "Gemini"

    def __init__(self, api_key: str, model: str, timeout: float):
        if not api_key:
            raise ProviderNotConfigured("GEMINI_API_KEY is not set; cannot initialize Gemini client.")
        # The SDK keeps one key per process: the last GeminiProvider built sets it
        genai.configure(api_key=api_key)
        self.model_name = model
        self.timeout = timeout
        self.model = genai.GenerativeModel(model_name=model)

    def complete(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.3,
        max_tokens: int = 1000,
    ) -> str:
        # Gemini gets the system instructions inlined ahead of the prompt
        text = f"{system_prompt}\n\n{prompt}" if system_prompt else prompt
        try:
            response = self.model.generate_content(
                text,
                generation_config=genai.types.GenerationConfig(
                    temperature=temperature,
                    max_output_tokens=max_tokens,
                ),
                request_options={"timeout": self.timeout},
            )
        except Exception as e:
            raise NetworkError(f"Gemini request failed: {e}") from e

        try:
            content = response.text
        except ValueError as e:
            # Raised when the response has no candidates (e.g. blocked by safety filters)
            raise ResponseParseError(f"Unexpected response format from Gemini: {e}") from e

        if not content or not content.strip():
            raise ResponseParseError("Gemini returned an empty response")
        return content.strip()


class OpenAIProvider(LLMProvider):
    """OpenAI chat completions."""

    name = "OpenAI"

    def __init__(self, api_key: str, model: str, timeout: float):
        if not api_key:
            raise ProviderNotConfigured("OPENAI_API_KEY is not set; cannot initialize OpenAI client.")
        self.model_name = model
        self.client = openai.OpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    def complete(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.3,
        max_tokens: int = 1000,
    ) -> str:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        try:
            response = self.client.chat.completions.create(
                model=self.model_name,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.OpenAIError as e:
            raise NetworkError(f"OpenAI request failed: {e}") from e

        if not response.choices or response.choices[0].message is None:
            raise ResponseParseError("Unexpected response format from OpenAI")
        content = response.choices[0].message.content or ""
        if not content.strip():
            raise ResponseParseError("OpenAI returned an empty response")
        return content.strip()


def select_provider(config: ProviderConfig) -> LLMProvider:
    """Pick the provider for a config: Gemini first, then OpenAI.

    Raises:
        ProviderNotConfigured: If no key is configured (no network call is made).
    """
    if config.gemini_api_key:
        logger.info(f"Using Gemini ({config.gemini_model}) for theme analysis")
        return GeminiProvider(config.gemini_api_key, config.gemini_model, config.timeout)
    if config.openai_api_key:
        logger.info(f"Using OpenAI ({config.openai_model}) for theme analysis")
        return OpenAIProvider(config.openai_api_key, config.openai_model, config.timeout)
    logger.error("No AI service configured. Set either OPENAI_API_KEY or GEMINI_API_KEY")
    raise ProviderNotConfigured()
