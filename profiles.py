"""Named generation presets used by the assistant operations."""

from __future__ import annotations

from models import GenerationProfile

FAST_TIER = "fast"
PRO_TIER = "pro"

# Exploratory preset: search, analysis.
FAST_PROFILE = GenerationProfile(
    name="fast",
    tier=FAST_TIER,
    temperature=0.7,
    top_p=0.95,
    top_k=40,
    max_output_tokens=8192,
)

# Lower temperature on the higher-capability model, for paper comparison.
HIGH_FIDELITY_PROFILE = GenerationProfile(
    name="high_fidelity",
    tier=PRO_TIER,
    temperature=0.5,
    top_p=0.95,
    top_k=64,
    max_output_tokens=8192,
)

SEARCH_PROFILE = GenerationProfile(
    name="search",
    tier=FAST_TIER,
    temperature=FAST_PROFILE.temperature,
    top_p=FAST_PROFILE.top_p,
    top_k=FAST_PROFILE.top_k,
    max_output_tokens=FAST_PROFILE.max_output_tokens,
    retrieval_augmented=True,
)

# Citation output must be format-stable, so only temperature is pinned.
CITATION_PROFILE = GenerationProfile(
    name="citation",
    tier=FAST_TIER,
    temperature=0.1,
)

PROFILES: dict[str, GenerationProfile] = {
    profile.name: profile
    for profile in (FAST_PROFILE, HIGH_FIDELITY_PROFILE, SEARCH_PROFILE, CITATION_PROFILE)
}
