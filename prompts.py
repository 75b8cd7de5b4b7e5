"""Prompt construction for the assistant operations.

Each builder turns one call shape into a PromptRequest. Paper text that can be
arbitrarily long is cut to a fixed cap before it is embedded, so prompt size
stays bounded whatever the caller passes in.
"""

from __future__ import annotations

from models import PaperRef, PromptRequest
from profiles import CITATION_PROFILE, FAST_PROFILE, HIGH_FIDELITY_PROFILE, SEARCH_PROFILE

ANALYSIS_TEXT_LIMIT = 10_000
COMPARISON_TEXT_LIMIT = 5_000

ANALYSIS_TRUNCATION_MARKER = "... (truncated for context window if needed)"
COMPARISON_TRUNCATION_MARKER = "..."

SEARCH_DATE_WINDOW = "2024-2025"
DEFAULT_CITATION_SOURCE = "Journal Article"

ANALYSIS_SYSTEM_PROMPT = (
    "You are an expert academic researcher helping to summarize complex papers "
    "and identify connectivity between works."
)

COMPARISON_SYSTEM_PROMPT = "You are a critical reviewer comparing two research documents."

_STRUCTURED_SUMMARY = (
    "Provide a structured summary including: Key Objectives, Methodology, "
    "Main Findings, and Implications."
)

_CONTEXTUAL_REFERENCES = (
    'Additionally, include a section titled "## Key Contextual References" listing '
    "3-5 foundational papers, prior works, or related studies that would be relevant "
    "citations for this topic (based on the context provided)."
)


def truncate(text: str, limit: int) -> str:
    """Return at most the first ``limit`` characters of text."""
    return text[:limit]


def build_search_request(query: str) -> PromptRequest:
    prompt = (
        f'Find the latest academic papers, journals, or preprints related to: "{query}".\n'
        f"Focus on recent developments ({SEARCH_DATE_WINDOW}).\n"
        "Provide a summary list of the top 3-5 papers found.\n"
        "For each paper, clearly state the Title, Authors (if available), "
        "and a brief Abstract/Summary."
    )
    return PromptRequest(prompt=prompt, profile=SEARCH_PROFILE)


def build_analysis_request(paper_text: str, focus: str | None = None) -> PromptRequest:
    """Build the analysis prompt; the paper text is capped at ANALYSIS_TEXT_LIMIT."""
    instruction = f"Focus specifically on: {focus}" if focus else _STRUCTURED_SUMMARY
    prompt = (
        "Analyze the following academic text/abstract.\n"
        f"{instruction}\n\n"
        f"{_CONTEXTUAL_REFERENCES}\n\n"
        "Text:\n"
        f"{truncate(paper_text, ANALYSIS_TEXT_LIMIT)}{ANALYSIS_TRUNCATION_MARKER}"
    )
    return PromptRequest(
        prompt=prompt,
        profile=FAST_PROFILE,
        system_instruction=ANALYSIS_SYSTEM_PROMPT,
    )


def build_comparison_request(
    title_a: str, text_a: str, title_b: str, text_b: str
) -> PromptRequest:
    """Build the comparison prompt; each text is capped at COMPARISON_TEXT_LIMIT."""
    prompt = (
        "Compare and contrast the following two academic papers.\n"
        "Structure the comparison by:\n"
        "1. Research Objective Similarity/Difference\n"
        "2. Methodology Comparison\n"
        "3. Key Results Contrast\n"
        "4. Unique Contributions of each\n\n"
        f"Paper 1: {title_a}\n"
        f"{truncate(text_a, COMPARISON_TEXT_LIMIT)}{COMPARISON_TRUNCATION_MARKER}\n\n"
        f"Paper 2: {title_b}\n"
        f"{truncate(text_b, COMPARISON_TEXT_LIMIT)}{COMPARISON_TRUNCATION_MARKER}"
    )
    return PromptRequest(
        prompt=prompt,
        profile=HIGH_FIDELITY_PROFILE,
        system_instruction=COMPARISON_SYSTEM_PROMPT,
    )


def build_citation_request(paper: PaperRef) -> PromptRequest:
    # Bibliographic fields are short, embedded verbatim.
    prompt = (
        "Generate citation formats for the following academic paper in APA 7, MLA 9, "
        "and BibTeX formats.\n"
        "Return the output formatted as clear Markdown with headers for each format.\n\n"
        f"Title: {paper.title}\n"
        f"Authors: {', '.join(paper.authors)}\n"
        f"Date: {paper.publication_date}\n"
        f"Source: {paper.source_venue or DEFAULT_CITATION_SOURCE}\n"
        f"URL: {paper.external_url or ''}"
    )
    return PromptRequest(prompt=prompt, profile=CITATION_PROFILE)


def paper_analysis_text(paper: PaperRef) -> str:
    """Pick the text to analyze: full text when present, else title and abstract.

    A leading context line tells the model which of the two it is reading.
    """
    if paper.full_text and paper.full_text.strip():
        return f"Analyze the following full academic paper text:\n\n{paper.full_text}"
    return (
        "Analyze the following academic paper abstract (full text unavailable):\n\n"
        f"Title: {paper.title}\n\nAbstract: {paper.abstract}"
    )


def paper_comparison_text(paper: PaperRef) -> str:
    return paper.full_text or paper.abstract
