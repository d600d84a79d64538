"""
LLM Engine — remote text generation (google.genai SDK).

Defines the contract the triage core expects from a text-generation
service and the Gemini implementation of it:
  - ``complete(prompt, params) -> str``, raising on any failure
  - per-call generation parameters (token budget, sampling, penalty)
  - a client-side timeout, so a slow service fails like any other error

The generator and synthesizer treat every exception from ``complete`` the
same way: the remote attempt failed and the local fallback takes over.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from google import genai
from google.genai import types

logger = logging.getLogger(__name__)


class RemoteGenerationError(RuntimeError):
    """The remote service failed, timed out or returned nothing usable."""


@dataclass(frozen=True)
class GenerationParams:
    max_new_tokens: int = 300
    temperature: float = 0.7
    top_p: float = 0.9
    repetition_penalty: float = 1.0
    model: Optional[str] = None  # overrides the client's default model


CHAT_PARAMS = GenerationParams(
    max_new_tokens=300, temperature=0.7, top_p=0.9, repetition_penalty=1.1
)
REPORT_PARAMS = GenerationParams(
    max_new_tokens=600, temperature=0.3, top_p=0.8, repetition_penalty=1.05
)
HEALTH_CHECK_PARAMS = GenerationParams(max_new_tokens=10, temperature=0.1)


class TextGenerationClient(Protocol):
    def complete(self, prompt: str, params: GenerationParams) -> str:
        ...


class GeminiClient:
    """Text generation through the Google Gemini API."""

    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-2.0-flash",
        timeout_ms: int = 20000,
        use_penalties: bool = False,
    ):
        if not api_key:
            raise ValueError(
                "Google API key is required. Set GOOGLE_API_KEY in your .env file.\n"
                "Get a key at: https://aistudio.google.com/apikey"
            )
        self.model_name = model_name
        self.timeout_ms = timeout_ms
        # Not every Gemini model accepts frequency_penalty
        self.use_penalties = use_penalties
        self.client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=timeout_ms),
        )

    def _build_config(self, params: GenerationParams) -> types.GenerateContentConfig:
        options = {
            "temperature": params.temperature,
            "top_p": params.top_p,
            "max_output_tokens": params.max_new_tokens,
        }
        if self.use_penalties and params.repetition_penalty != 1.0:
            options["frequency_penalty"] = params.repetition_penalty - 1.0
        return types.GenerateContentConfig(**options)

    def complete(self, prompt: str, params: GenerationParams) -> str:
        """
        Generate a completion for ``prompt``.

        Raises:
            RemoteGenerationError: on transport errors, timeouts, API errors
                or an empty completion.
        """
        model = params.model or self.model_name
        try:
            response = self.client.models.generate_content(
                model=model,
                contents=prompt,
                config=self._build_config(params),
            )
            text = response.text
        except Exception as e:
            raise RemoteGenerationError(f"{model}: {e}") from e

        if not text or not text.strip():
            raise RemoteGenerationError(f"{model}: empty completion")

        usage = getattr(response, "usage_metadata", None)
        if usage:
            logger.info(
                "Gemini completion — tokens: prompt=%s completion=%s total=%s",
                usage.prompt_token_count,
                usage.candidates_token_count,
                usage.total_token_count,
            )
        return text

    def health_check(self) -> bool:
        """Send a tiny request to verify the service answers."""
        try:
            return bool(self.complete("Test", HEALTH_CHECK_PARAMS))
        except RemoteGenerationError as e:
            logger.error("AI service health check failed: %s", e)
            return False
