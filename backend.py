"""Contract shared by the generative-text backends."""

from __future__ import annotations

from typing import Any, Protocol

from models import GenerationProfile


class Backend(Protocol):
    """One request/response exchange with a text-generation API.

    ``generate`` returns the raw reply (a google-genai
    ``GenerateContentResponse`` or an object of the same shape) and lets any
    transport or API error propagate unchanged.
    """

    def model_for(self, profile: GenerationProfile) -> str: ...

    def generate(
        self,
        model: str,
        prompt: str,
        profile: GenerationProfile,
        system_instruction: str | None = None,
        response_schema: Any | None = None,
    ) -> Any: ...


def ensure_tools_compatible(profile: GenerationProfile, response_schema: Any | None) -> None:
    """Reject a web-search tool combined with a structured-output schema."""
    if profile.retrieval_augmented and response_schema is not None:
        raise ValueError(
            f"Profile {profile.name!r} enables web search; a response schema "
            "cannot be attached to the same request"
        )
