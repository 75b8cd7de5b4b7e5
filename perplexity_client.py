"""Perplexity Sonar backend for the paper assistant.

Replies are converted into the google-genai reply model so the rest of the
assistant handles both backends the same way.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import requests
from google.genai import types

from backend import ensure_tools_compatible
from models import GenerationProfile
from profiles import PRO_TIER

PERPLEXITY_API_URL = "https://api.perplexity.ai/chat/completions"
PERPLEXITY_FAST_MODEL = os.getenv("PERPLEXITY_FAST_MODEL", "sonar")
PERPLEXITY_PRO_MODEL = os.getenv("PERPLEXITY_PRO_MODEL", "sonar-pro")
REQUEST_TIMEOUT_SECONDS = int(os.getenv("PERPLEXITY_TIMEOUT_SECONDS", "60"))

LOGGER = logging.getLogger(__name__)


class PerplexityBackend:
    """Single-shot chat completion calls against the Perplexity API."""

    def __init__(
        self,
        api_key: str,
        session: requests.Session | None = None,
        fast_model: str = PERPLEXITY_FAST_MODEL,
        pro_model: str = PERPLEXITY_PRO_MODEL,
        timeout: int = REQUEST_TIMEOUT_SECONDS,
    ):
        self.api_key = api_key
        self.session = session or requests.Session()
        self.fast_model = fast_model
        self.pro_model = pro_model
        self.timeout = timeout

    @classmethod
    def from_env(cls) -> PerplexityBackend:
        api_key = os.getenv("PERPLEXITY_API_KEY")
        if not api_key:
            raise RuntimeError("PERPLEXITY_API_KEY environment variable is required")
        return cls(api_key=api_key)

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
        """Send one prompt and return the reply as a GenerateContentResponse."""
        payload = build_payload(model, prompt, profile, system_instruction, response_schema)
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        LOGGER.debug("Calling Perplexity model=%s profile=%s", model, profile.name)
        response = self.session.post(
            PERPLEXITY_API_URL,
            headers=headers,
            json=payload,
            timeout=self.timeout,
        )
        response.raise_for_status()
        return to_genai_response(response.json())


def build_payload(
    model: str,
    prompt: str,
    profile: GenerationProfile,
    system_instruction: str | None = None,
    response_schema: Any | None = None,
) -> dict[str, Any]:
    """Build the chat-completions request body for one call."""
    ensure_tools_compatible(profile, response_schema)

    messages: list[dict[str, str]] = []
    if system_instruction:
        messages.append({"role": "system", "content": system_instruction})
    messages.append({"role": "user", "content": prompt})

    payload: dict[str, Any] = {"model": model, "messages": messages}
    if profile.temperature is not None:
        payload["temperature"] = profile.temperature
    if profile.top_p is not None:
        payload["top_p"] = profile.top_p
    if profile.top_k is not None:
        payload["top_k"] = profile.top_k
    if profile.max_output_tokens is not None:
        payload["max_tokens"] = profile.max_output_tokens

    # Sonar models search by default; only grounded calls keep it on.
    if not profile.retrieval_augmented:
        payload["disable_search"] = True
        if response_schema is not None:
            payload["response_format"] = {
                "type": "json_schema",
                "json_schema": {"schema": response_schema},
            }
    return payload


def to_genai_response(body: dict[str, Any]) -> types.GenerateContentResponse:
    """Map a chat-completions body onto the Gemini reply model."""
    try:
        content = body["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise RuntimeError(f"Unexpected Perplexity response shape: {body}") from exc

    chunks = _grounding_chunks(body)
    candidate = types.Candidate(
        content=types.Content(role="model", parts=[types.Part(text=content or "")]),
        grounding_metadata=types.GroundingMetadata(grounding_chunks=chunks) if chunks else None,
    )
    return types.GenerateContentResponse(candidates=[candidate])


def _grounding_chunks(body: dict[str, Any]) -> list[types.GroundingChunk]:
    """Prefer structured search_results; older replies only carry citation URLs."""
    chunks: list[types.GroundingChunk] = []
    for result in body.get("search_results") or []:
        if not isinstance(result, dict):
            continue
        chunks.append(
            types.GroundingChunk(
                web=types.GroundingChunkWeb(uri=result.get("url"), title=result.get("title"))
            )
        )
    if chunks:
        return chunks

    for url in body.get("citations") or []:
        if isinstance(url, str):
            chunks.append(types.GroundingChunk(web=types.GroundingChunkWeb(uri=url, title=url)))
    return chunks
