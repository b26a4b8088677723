"""Sampling plan selection for cache partitions.

Partition sizes range from empty to many millions of entries, so the engine
picks one of three strategies per partition:
- FULL_SCAN: small partitions are read in iteration order up to a fixed cap
- BOUNDED_FETCH: large partitions use the store's bulk fetch with a limit
- STRIDE_SAMPLE: large partitions without bulk fetch are read every
  ``interval`` keys until the sample budget is spent
"""

import logging
from typing import Any
from typing import Iterable
from typing import Iterator
from typing import Tuple

from heap_region_advisor.models.scan import ScanPlan
from heap_region_advisor.models.scan import ScanStrategy

logger = logging.getLogger(__name__)

DEFAULT_TARGET_SAMPLE_BUDGET = 100
DEFAULT_SMALL_PARTITION_THRESHOLD = 10_000
DEFAULT_SMALL_PARTITION_CAP = 100


class SamplingEngine:
    """Chooses which entries of a partition are examined."""

    def __init__(
        self,
        target_sample_budget: int = DEFAULT_TARGET_SAMPLE_BUDGET,
        small_partition_threshold: int = DEFAULT_SMALL_PARTITION_THRESHOLD,
        small_partition_cap: int = DEFAULT_SMALL_PARTITION_CAP,
        prefer_bounded_fetch: bool = True,
    ):
        if target_sample_budget < 1:
            raise ValueError(
                f"target_sample_budget must be >= 1, got {target_sample_budget}"
            )
        if small_partition_cap < 1:
            raise ValueError(
                f"small_partition_cap must be >= 1, got {small_partition_cap}"
            )
        self.target_sample_budget = target_sample_budget
        self.small_partition_threshold = small_partition_threshold
        self.small_partition_cap = small_partition_cap
        self.prefer_bounded_fetch = prefer_bounded_fetch

    def interval_for(self, total_entries: int) -> int:
        """Stride between examined ordinals: ``max(1, total // budget)``."""
        return max(1, total_entries // self.target_sample_budget)

    def plan(self, total_entries: int, supports_bounded_fetch: bool = False) -> ScanPlan:
        """Select the strategy for a partition holding ``total_entries``."""
        if total_entries <= self.small_partition_threshold:
            strategy = ScanStrategy.FULL_SCAN
            interval = 1
            limit = min(self.small_partition_cap, self.target_sample_budget)
        else:
            interval = self.interval_for(total_entries)
            limit = self.target_sample_budget
            if supports_bounded_fetch and self.prefer_bounded_fetch:
                strategy = ScanStrategy.BOUNDED_FETCH
            else:
                strategy = ScanStrategy.STRIDE_SAMPLE

        plan = ScanPlan(
            strategy=strategy,
            total_entries=total_entries,
            interval=interval,
            limit=limit,
        )
        logger.debug(
            "Planned %s for %d entries (interval=%d, limit=%d)",
            strategy.value,
            total_entries,
            interval,
            limit,
        )
        return plan

    def candidates(
        self, plan: ScanPlan, keys: Iterable[Any]
    ) -> Iterator[Tuple[int, Any]]:
        """
        Yield ``(ordinal, key)`` for every key the plan examines.

        The caller stops consuming once its sample limit is reached; absent
        values do not count against the budget, so the limit is not applied
        here.
        """
        for ordinal, key in enumerate(keys):
            if plan.should_examine(ordinal):
                yield ordinal, key
