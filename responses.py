"""Normalization of raw backend replies.

Replies follow the google-genai shape, but every nested field is optional:
``reply.candidates[0].grounding_metadata.grounding_chunks[i].web.uri``. Each
level is checked before it is read.
"""

from __future__ import annotations

import logging
from typing import Any

from models import GroundingSource, TextResult

NO_SEARCH_RESULTS_TEXT = "No results found."
NO_ANALYSIS_TEXT = "Analysis could not be generated."
NO_COMPARISON_TEXT = "Comparison could not be generated."
NO_CITATION_TEXT = "Could not generate citations."

LOGGER = logging.getLogger(__name__)


def extract_text(reply: Any) -> str | None:
    """Return the generated text, or None when the reply carries none."""
    if reply is None:
        return None
    try:
        text = getattr(reply, "text", None)
    except ValueError:
        # Some SDK versions raise on replies without text parts.
        return None
    if not isinstance(text, str) or not text.strip():
        return None
    return text


def extract_sources(reply: Any) -> tuple[GroundingSource, ...]:
    """Collect cited web sources, keeping only chunks with a usable URI.

    Input order is preserved. Missing metadata at any level yields ().
    """
    candidates = getattr(reply, "candidates", None)
    if not candidates:
        return ()

    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) if metadata is not None else None
    if not chunks:
        return ()

    sources: list[GroundingSource] = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        if web is None:
            continue
        uri = getattr(web, "uri", None)
        if not isinstance(uri, str) or not uri.strip():
            continue
        title = getattr(web, "title", None)
        sources.append(GroundingSource(uri=uri, title=title if isinstance(title, str) and title else uri))

    dropped = len(chunks) - len(sources)
    if dropped:
        LOGGER.debug("Dropped %s grounding chunks without a web URI", dropped)
    return tuple(sources)


def to_text_result(reply: Any, fallback: str, with_sources: bool = False) -> TextResult:
    """Map a reply to a TextResult, substituting ``fallback`` for empty text."""
    text = extract_text(reply)
    sources = extract_sources(reply) if with_sources else ()
    if text is None:
        return TextResult(text=fallback, sources=sources, fallback=True)
    return TextResult(text=text, sources=sources)


def to_text(reply: Any, fallback: str) -> str:
    return to_text_result(reply, fallback).text
