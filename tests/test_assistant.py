"""Tests for the ResearchAssistant operations against a mocked backend."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from google.genai import types

from assistant import CITATION_ERROR_TEXT, ResearchAssistant
from errors import AnalysisFailed, CitationFailed, ComparisonFailed, OperationError, SearchFailed
from models import GroundingSource, PaperRef
from profiles import HIGH_FIDELITY_PROFILE, PRO_TIER, SEARCH_PROFILE

_PAPER = PaperRef(
    title="BERT: Pre-training of Deep Bidirectional Transformers",
    authors=("Jacob Devlin", "Ming-Wei Chang"),
    publication_date="2018-10-11",
    abstract="We introduce a new language representation model called BERT.",
    source_venue="NAACL",
    external_url="https://arxiv.org/abs/1810.04805",
)


def _reply(text: str | None, chunks: list[types.GroundingChunk] | None = None):
    parts = [types.Part(text=text)] if text is not None else []
    metadata = types.GroundingMetadata(grounding_chunks=chunks) if chunks is not None else None
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(
                content=types.Content(role="model", parts=parts),
                grounding_metadata=metadata,
            )
        ]
    )


def _backend(reply=None, error: Exception | None = None) -> MagicMock:
    backend = MagicMock()
    backend.model_for.side_effect = lambda profile: "pro-model" if profile.tier == PRO_TIER else "fast-model"
    if error is not None:
        backend.generate.side_effect = error
    else:
        backend.generate.return_value = reply
    return backend


# ---------------------------------------------------------------------------
# search
# ---------------------------------------------------------------------------

def test_search_scenario_returns_text_and_filtered_sources() -> None:
    reply = _reply(
        "Summary...",
        [
            types.GroundingChunk(web=types.GroundingChunkWeb(uri="https://arxiv.org/x", title="Paper X")),
            types.GroundingChunk(),
        ],
    )
    backend = _backend(reply)

    result = ResearchAssistant(backend).search("quantum error correction")

    kwargs = backend.generate.call_args.kwargs
    assert kwargs["profile"] is SEARCH_PROFILE
    assert kwargs["profile"].retrieval_augmented is True
    assert kwargs["model"] == "fast-model"
    assert result.text == "Summary..."
    assert result.sources == (GroundingSource(uri="https://arxiv.org/x", title="Paper X"),)


def test_search_empty_reply_returns_fallback() -> None:
    result = ResearchAssistant(_backend(_reply(None))).search("anything")

    assert result.text == "No results found."
    assert result.sources == ()
    assert result.fallback is True


def test_search_failure_raises_search_failed() -> None:
    backend = _backend(error=ConnectionError("socket closed"))

    with pytest.raises(SearchFailed) as excinfo:
        ResearchAssistant(backend).search("anything")

    assert excinfo.value.tag == "SearchFailed"
    assert "socket closed" not in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, ConnectionError)


# ---------------------------------------------------------------------------
# analyze
# ---------------------------------------------------------------------------

def test_analyze_returns_generated_text() -> None:
    backend = _backend(_reply("## Key Objectives\n..."))

    result = ResearchAssistant(backend).analyze("paper body", focus="methods")

    assert result == "## Key Objectives\n..."
    kwargs = backend.generate.call_args.kwargs
    assert "Focus specifically on: methods" in kwargs["prompt"]
    assert kwargs["system_instruction"]
    assert kwargs["profile"].retrieval_augmented is False


def test_analyze_embeds_exactly_capped_text() -> None:
    backend = _backend(_reply("ok"))

    ResearchAssistant(backend).analyze("q" * 12_000)

    prompt = backend.generate.call_args.kwargs["prompt"]
    assert "q" * 10_000 + "... (truncated for context window if needed)" in prompt
    assert "q" * 10_001 not in prompt


def test_analyze_empty_reply_is_idempotent_fallback() -> None:
    assistant = ResearchAssistant(_backend(_reply("")))

    assert assistant.analyze("text") == "Analysis could not be generated."
    assert assistant.analyze("text") == "Analysis could not be generated."


def test_analyze_failure_raises_analysis_failed() -> None:
    with pytest.raises(AnalysisFailed):
        ResearchAssistant(_backend(error=RuntimeError("500 INTERNAL"))).analyze("text")


def test_analyze_paper_uses_title_and_abstract_without_full_text() -> None:
    backend = _backend(_reply("ok"))

    ResearchAssistant(backend).analyze_paper(_PAPER)

    prompt = backend.generate.call_args.kwargs["prompt"]
    assert "Title: BERT: Pre-training of Deep Bidirectional Transformers" in prompt
    assert "Abstract: We introduce a new language representation model called BERT." in prompt


# ---------------------------------------------------------------------------
# compare
# ---------------------------------------------------------------------------

def test_compare_scenario_truncates_both_texts_and_uses_pro_model() -> None:
    backend = _backend(_reply("Comparison"))

    result = ResearchAssistant(backend).compare("A", "m" * 6000, "B", "n" * 6000)

    kwargs = backend.generate.call_args.kwargs
    assert result == "Comparison"
    assert kwargs["profile"] is HIGH_FIDELITY_PROFILE
    assert kwargs["model"] == "pro-model"
    assert "m" * 5000 + "..." in kwargs["prompt"]
    assert "n" * 5000 + "..." in kwargs["prompt"]
    assert "m" * 5001 not in kwargs["prompt"]
    assert "n" * 5001 not in kwargs["prompt"]


def test_compare_empty_reply_returns_fallback() -> None:
    result = ResearchAssistant(_backend(_reply(None))).compare("A", "a", "B", "b")
    assert result == "Comparison could not be generated."


def test_compare_failure_raises_comparison_failed() -> None:
    with pytest.raises(ComparisonFailed):
        ResearchAssistant(_backend(error=TimeoutError())).compare("A", "a", "B", "b")


@pytest.mark.parametrize("count", [0, 1, 3])
def test_compare_papers_requires_exactly_two(count: int) -> None:
    backend = _backend(_reply("ok"))

    with pytest.raises(ValueError, match="exactly two"):
        ResearchAssistant(backend).compare_papers([_PAPER] * count)

    backend.generate.assert_not_called()


def test_compare_papers_prefers_full_text() -> None:
    with_text = PaperRef(
        title="Full", authors=(), publication_date="", abstract="short", full_text="the full body"
    )
    backend = _backend(_reply("ok"))

    ResearchAssistant(backend).compare_papers([with_text, _PAPER])

    prompt = backend.generate.call_args.kwargs["prompt"]
    assert "Paper 1: Full\nthe full body..." in prompt
    assert f"Paper 2: {_PAPER.title}\n{_PAPER.abstract}..." in prompt


# ---------------------------------------------------------------------------
# cite
# ---------------------------------------------------------------------------

def test_cite_returns_generated_markdown() -> None:
    backend = _backend(_reply("### APA 7\n..."))

    assert ResearchAssistant(backend).cite(_PAPER) == "### APA 7\n..."
    assert backend.generate.call_args.kwargs["profile"].temperature == pytest.approx(0.1)


def test_cite_with_failing_backend_returns_error_text() -> None:
    backend = _backend(error=ConnectionError("unreachable"))

    assert ResearchAssistant(backend).cite(_PAPER) == "Error generating citations."
    assert CITATION_ERROR_TEXT == "Error generating citations."


def test_cite_strict_raises_citation_failed() -> None:
    backend = _backend(error=ConnectionError("unreachable"))

    with pytest.raises(CitationFailed):
        ResearchAssistant(backend).cite(_PAPER, strict=True)


def test_cite_empty_reply_returns_fallback() -> None:
    assert ResearchAssistant(_backend(_reply(""))).cite(_PAPER) == "Could not generate citations."


# ---------------------------------------------------------------------------
# shared behaviour
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    ("call", "error_type"),
    [
        (lambda a: a.search("q"), SearchFailed),
        (lambda a: a.analyze("t"), AnalysisFailed),
        (lambda a: a.compare("A", "a", "B", "b"), ComparisonFailed),
    ],
)
def test_failures_surface_only_operation_errors(call, error_type) -> None:
    assistant = ResearchAssistant(_backend(error=ValueError("malformed reply")))

    with pytest.raises(OperationError) as excinfo:
        call(assistant)

    assert type(excinfo.value) is error_type


def test_each_operation_makes_exactly_one_backend_call() -> None:
    backend = _backend(_reply("ok"))
    assistant = ResearchAssistant(backend)

    assistant.search("q")
    assistant.analyze("t")
    assistant.compare("A", "a", "B", "b")
    assistant.cite(_PAPER)

    assert backend.generate.call_count == 4
