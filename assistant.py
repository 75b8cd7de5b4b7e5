"""Public entry points: search, analyze, compare and cite papers.

Every operation is one linear pass: build the prompt, call the backend once,
normalize the reply. Backend failures are re-raised as the operation's own
OperationError subclass; nothing is cached or retried.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from backend import Backend
from errors import AnalysisFailed, CitationFailed, ComparisonFailed, SearchFailed
from models import PaperRef, PromptRequest, TextResult
from prompts import (
    build_analysis_request,
    build_citation_request,
    build_comparison_request,
    build_search_request,
    paper_analysis_text,
    paper_comparison_text,
)
from responses import (
    NO_ANALYSIS_TEXT,
    NO_CITATION_TEXT,
    NO_COMPARISON_TEXT,
    NO_SEARCH_RESULTS_TEXT,
    to_text,
    to_text_result,
)

CITATION_ERROR_TEXT = "Error generating citations."

LOGGER = logging.getLogger(__name__)


class ResearchAssistant:
    """Stateless façade over one injected backend."""

    def __init__(self, backend: Backend):
        self.backend = backend

    def _invoke(self, request: PromptRequest):
        model = self.backend.model_for(request.profile)
        return self.backend.generate(
            model=model,
            prompt=request.prompt,
            profile=request.profile,
            system_instruction=request.system_instruction,
        )

    def search(self, query: str) -> TextResult:
        """Find recent papers for a query; the result carries cited web sources."""
        LOGGER.info("Searching papers for query=%r", query)
        try:
            reply = self._invoke(build_search_request(query))
        except Exception as exc:
            LOGGER.exception("Search failed for query=%r", query)
            raise SearchFailed() from exc

        result = to_text_result(reply, NO_SEARCH_RESULTS_TEXT, with_sources=True)
        LOGGER.info("Search returned %s sources (fallback=%s)", len(result.sources), result.fallback)
        return result

    def analyze(self, paper_text: str, focus: str | None = None) -> str:
        LOGGER.info("Analyzing paper text (%s chars, focus=%r)", len(paper_text), focus)
        try:
            reply = self._invoke(build_analysis_request(paper_text, focus))
        except Exception as exc:
            LOGGER.exception("Analysis failed")
            raise AnalysisFailed() from exc
        return to_text(reply, NO_ANALYSIS_TEXT)

    def compare(self, title_a: str, text_a: str, title_b: str, text_b: str) -> str:
        LOGGER.info("Comparing papers %r and %r", title_a, title_b)
        try:
            reply = self._invoke(build_comparison_request(title_a, text_a, title_b, text_b))
        except Exception as exc:
            LOGGER.exception("Comparison failed for %r vs %r", title_a, title_b)
            raise ComparisonFailed() from exc
        return to_text(reply, NO_COMPARISON_TEXT)

    def cite(self, paper: PaperRef, strict: bool = False) -> str:
        """Return APA, MLA and BibTeX citations as Markdown.

        On backend failure this returns CITATION_ERROR_TEXT unless ``strict``
        is set, in which case CitationFailed is raised like the other
        operations.
        """
        LOGGER.info("Generating citations for %r", paper.title)
        try:
            reply = self._invoke(build_citation_request(paper))
        except Exception as exc:
            if strict:
                LOGGER.exception("Citation generation failed for %r", paper.title)
                raise CitationFailed() from exc
            LOGGER.warning("Citation generation failed for %r: %s", paper.title, exc)
            return CITATION_ERROR_TEXT
        return to_text(reply, NO_CITATION_TEXT)

    def analyze_paper(self, paper: PaperRef, focus: str | None = None) -> str:
        """Analyze a catalog paper, using its full text when available."""
        return self.analyze(paper_analysis_text(paper), focus)

    def compare_papers(self, papers: Sequence[PaperRef]) -> str:
        """Compare a selection; runs only when exactly two papers are selected."""
        if len(papers) != 2:
            raise ValueError(f"Comparison needs exactly two papers, got {len(papers)}")
        first, second = papers
        return self.compare(
            first.title,
            paper_comparison_text(first),
            second.title,
            paper_comparison_text(second),
        )
