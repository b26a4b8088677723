"""Scan profile definitions.

This module handles the named sampling profiles:
- summary: quick node-wide largest-object survey
- deep: thorough single region analysis
- top-n: the few largest entries of a region
Each profile fixes the sample budget, the small partition cap and top-K size.
"""
from dataclasses import dataclass
from dataclasses import field
from dataclasses import replace
from typing import Dict
from typing import Optional

from heap_region_advisor.analytics.sampling import DEFAULT_SMALL_PARTITION_THRESHOLD
from heap_region_advisor.analytics.sampling import SamplingEngine


@dataclass(frozen=True)
class ScanProfile:
    name: str
    target_sample_budget: int
    small_partition_cap: int
    top_k: int
    prefer_bounded_fetch: bool = field(default=True)
    small_partition_threshold: int = field(default=DEFAULT_SMALL_PARTITION_THRESHOLD)

    def sampling_engine(self) -> SamplingEngine:
        return SamplingEngine(
            target_sample_budget=self.target_sample_budget,
            small_partition_threshold=self.small_partition_threshold,
            small_partition_cap=self.small_partition_cap,
            prefer_bounded_fetch=self.prefer_bounded_fetch,
        )


PROFILES: Dict[str, ScanProfile] = {
    "summary": ScanProfile(
        name="summary", target_sample_budget=100, small_partition_cap=100, top_k=1
    ),
    "deep": ScanProfile(
        name="deep",
        target_sample_budget=100_000,
        small_partition_cap=10_000,
        top_k=10,
    ),
    "top-n": ScanProfile(
        name="top-n",
        target_sample_budget=100_000,
        small_partition_cap=10_000,
        top_k=3,
    ),
}


def get_profile(
    name: str,
    top_k: Optional[int] = None,
    target_sample_budget: Optional[int] = None,
) -> ScanProfile:
    """Look up a profile by name, optionally overriding its top-K and budget."""
    if name not in PROFILES:
        raise ValueError(
            f"Unknown profile '{name}'. Choose one of: {', '.join(PROFILES)}"
        )
    profile = PROFILES[name]
    overrides = {}
    if top_k is not None:
        overrides["top_k"] = top_k
    if target_sample_budget is not None:
        overrides["target_sample_budget"] = target_sample_budget
        overrides["small_partition_cap"] = min(
            profile.small_partition_cap, target_sample_budget
        )
    return replace(profile, **overrides)
