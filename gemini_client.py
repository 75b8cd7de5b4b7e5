"""Google Gemini backend for the paper assistant."""

from __future__ import annotations

import logging
import os
from typing import Any

from google import genai
from google.genai import types

from backend import ensure_tools_compatible
from models import GenerationProfile
from profiles import PRO_TIER

GEMINI_FAST_MODEL = os.getenv("GEMINI_FAST_MODEL", "gemini-2.5-flash")
GEMINI_PRO_MODEL = os.getenv("GEMINI_PRO_MODEL", "gemini-3-pro-preview")

LOGGER = logging.getLogger(__name__)


class GeminiBackend:
    """Single-shot ``generate_content`` calls against the Gemini API."""

    def __init__(
        self,
        client: genai.Client,
        fast_model: str = GEMINI_FAST_MODEL,
        pro_model: str = GEMINI_PRO_MODEL,
    ):
        self.client = client
        self.fast_model = fast_model
        self.pro_model = pro_model

    @classmethod
    def from_env(cls) -> GeminiBackend:
        """Construct a backend from GEMINI_API_KEY (or GOOGLE_API_KEY)."""
        api_key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
        if not api_key:
            raise RuntimeError("GEMINI_API_KEY environment variable is required")
        return cls(client=genai.Client(api_key=api_key))

    def model_for(self, profile: GenerationProfile) -> str:
        return self.pro_model if profile.tier == PRO_TIER else self.fast_model

    def generate(
        self,
        model: str,
        prompt: str,
        profile: GenerationProfile,
        system_instruction: str | None = None,
        response_schema: Any | None = None,
    ) -> types.GenerateContentResponse:
        """Send one prompt and return the raw reply; errors propagate."""
        config = build_generate_config(profile, system_instruction, response_schema)
        LOGGER.debug(
            "Calling Gemini model=%s profile=%s search=%s",
            model,
            profile.name,
            profile.retrieval_augmented,
        )
        return self.client.models.generate_content(
            model=model,
            contents=prompt,
            config=config,
        )


def build_generate_config(
    profile: GenerationProfile,
    system_instruction: str | None = None,
    response_schema: Any | None = None,
) -> types.GenerateContentConfig:
    """Translate a GenerationProfile into a GenerateContentConfig.

    Raises:
        ValueError: if web search and a response schema are both requested.
    """
    ensure_tools_compatible(profile, response_schema)

    kwargs: dict[str, Any] = {}
    if profile.temperature is not None:
        kwargs["temperature"] = profile.temperature
    if profile.top_p is not None:
        kwargs["top_p"] = profile.top_p
    if profile.top_k is not None:
        kwargs["top_k"] = profile.top_k
    if profile.max_output_tokens is not None:
        kwargs["max_output_tokens"] = profile.max_output_tokens
    if system_instruction:
        kwargs["system_instruction"] = system_instruction

    if profile.retrieval_augmented:
        kwargs["tools"] = [types.Tool(google_search=types.GoogleSearch())]
    elif response_schema is not None:
        kwargs["response_schema"] = response_schema
        kwargs["response_mime_type"] = "application/json"

    return types.GenerateContentConfig(**kwargs)
