import logging
import time
from typing import Any
from typing import Iterator
from typing import Optional
from typing import Tuple

from heap_region_advisor.collectors.datasource import IDataSource
from heap_region_advisor.models.partition import Partition
from heap_region_advisor.models.sample import Sample
from heap_region_advisor.models.scan import PartitionSummary
from heap_region_advisor.models.scan import ScanPlan
from heap_region_advisor.models.scan import ScanStatus
from heap_region_advisor.models.scan import ScanStrategy

from .base import BaseSizeEstimator
from .base import ExcludeFilter
from .sampling import SamplingEngine
from .topk import TopKSelector

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 10


class _Accumulator:
    """Running totals of one scan."""

    def __init__(self, top_k: int):
        self.selector = TopKSelector(top_k)
        self.total_size = 0
        self.sampled_count = 0
        self.failed_count = 0
        self.last_error: Optional[str] = None


class PartitionScanner:
    """
    Drives one partition through the sampling plan, the size estimator and a
    private top-K selector.
    """

    def __init__(
        self,
        datasource: IDataSource,
        estimator: BaseSizeEstimator,
        sampling_engine: Optional[SamplingEngine] = None,
        top_k: int = DEFAULT_TOP_K,
        exclude_filter: Optional[ExcludeFilter] = None,
    ):
        self.datasource = datasource
        self.estimator = estimator
        self.sampling_engine = sampling_engine or SamplingEngine()
        self.top_k = top_k
        self.exclude_filter = exclude_filter

    def scan(self, partition: Partition) -> PartitionSummary:
        """Scan a partition. Never raises for data source failures."""
        started = time.monotonic()
        name = partition.full_path
        try:
            total_entries = self.datasource.entry_count(partition)
        except Exception as e:
            logger.error(
                "Error counting entries of partition %s: %s", name, e, exc_info=True
            )
            return PartitionSummary.failed(
                name, 0, str(e), elapsed_secs=time.monotonic() - started
            )

        if total_entries == 0:
            logger.debug("Skipping empty partition: %s", name)
            return PartitionSummary.empty(name)

        plan = self.sampling_engine.plan(
            total_entries, self.datasource.supports_bounded_fetch
        )
        logger.info(
            "Analyzing partition %s with %d entries using %s",
            name,
            total_entries,
            plan.strategy.value,
        )

        acc = _Accumulator(self.top_k)
        try:
            for identifier, value in self._values(partition, plan):
                if value is None:
                    continue
                self._measure(identifier, value, acc)
                if acc.sampled_count >= plan.limit:
                    break
        except Exception as e:
            logger.error("Error analyzing partition %s: %s", name, e, exc_info=True)
            return PartitionSummary.failed(
                name,
                total_entries,
                str(e),
                plan=plan,
                elapsed_secs=time.monotonic() - started,
            )

        elapsed = time.monotonic() - started
        logger.debug(
            "Sampled %d entries (%d failed) in partition %s",
            acc.sampled_count,
            acc.failed_count,
            name,
        )
        if acc.sampled_count == 0 and acc.failed_count > 0:
            return PartitionSummary.failed(
                name,
                total_entries,
                f"no entry could be sized: {acc.last_error}",
                plan=plan,
                elapsed_secs=elapsed,
            )

        return PartitionSummary(
            partition_name=name,
            total_entries=total_entries,
            sampled_count=acc.sampled_count,
            top_k=tuple(acc.selector.result()),
            average_sampled_size_bytes=(
                acc.total_size / acc.sampled_count if acc.sampled_count else None
            ),
            status=ScanStatus.SUCCESS,
            plan=plan,
            failed_count=acc.failed_count,
            elapsed_secs=elapsed,
        )

    def _values(
        self, partition: Partition, plan: ScanPlan
    ) -> Iterator[Tuple[str, Any]]:
        """Yield ``(identifier, value)`` pairs selected by the plan."""
        if plan.strategy is ScanStrategy.BOUNDED_FETCH:
            values = self.datasource.fetch_bounded(partition, plan.limit)
            for ordinal, value in enumerate(values):
                yield f"{partition.full_path}#{ordinal}", value
            return

        keys = self.datasource.iterate_keys(partition)
        for _, key in self.sampling_engine.candidates(plan, keys):
            yield str(key), self.datasource.get(partition, key)

    def _measure(self, identifier: str, value: Any, acc: _Accumulator) -> None:
        try:
            size = self.estimator.estimate_size(value, self.exclude_filter)
        except Exception as e:
            acc.failed_count += 1
            acc.last_error = str(e)
            logger.warning("Skipping entry %s: %s", identifier, e)
            return
        acc.total_size += size
        acc.sampled_count += 1
        acc.selector.offer(
            Sample(identifier=identifier, type_name=type(value).__name__, size_bytes=size)
        )
