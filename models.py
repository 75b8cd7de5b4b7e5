"""Shared typed models for the paper assistant."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class PaperRef:
    """Paper record owned by the caller; only read here, never mutated."""

    title: str
    authors: tuple[str, ...]
    publication_date: str
    abstract: str
    source_venue: str | None = None
    external_url: str | None = None
    full_text: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PaperRef:
        """Build a PaperRef from a catalog entry (camelCase or snake_case keys)."""
        title = data.get("title")
        if not title:
            raise ValueError("Paper entry is missing a title")

        authors = data.get("authors") or ()
        if isinstance(authors, str):
            authors = [a.strip() for a in authors.split(",") if a.strip()]

        return cls(
            title=str(title),
            authors=tuple(str(a) for a in authors),
            publication_date=str(data.get("publication_date") or data.get("date") or ""),
            abstract=str(data.get("abstract") or ""),
            source_venue=data.get("source_venue") or data.get("source"),
            external_url=data.get("external_url") or data.get("url"),
            full_text=data.get("full_text") or data.get("fullText"),
        )


@dataclass(frozen=True, slots=True)
class GenerationProfile:
    """Sampling configuration for one backend call.

    Sampling fields left as None fall back to the backend's own defaults.
    ``tier`` selects the model identifier ("fast" or "pro").
    """

    name: str
    tier: str
    temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None
    max_output_tokens: int | None = None
    retrieval_augmented: bool = False


@dataclass(frozen=True, slots=True)
class GroundingSource:
    """A web source the backend cited for a retrieval-augmented answer."""

    uri: str
    title: str


@dataclass(frozen=True, slots=True)
class TextResult:
    """Normalized generated text plus any cited sources.

    ``fallback`` is True when the backend produced no text and ``text`` holds
    the operation's fixed fallback string instead.
    """

    text: str
    sources: tuple[GroundingSource, ...] = field(default_factory=tuple)
    fallback: bool = False


@dataclass(frozen=True, slots=True)
class PromptRequest:
    """Everything the backend needs for one call, minus the model id."""

    prompt: str
    profile: GenerationProfile
    system_instruction: str | None = None
