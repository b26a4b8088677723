"""Shared fixtures: fake estimators and data sources."""
from typing import Any
from typing import Iterator
from typing import List
from typing import Optional

import pytest

from heap_region_advisor.analytics.base import BaseSizeEstimator
from heap_region_advisor.analytics.base import ExcludeFilter
from heap_region_advisor.collectors.datasource import IDataSource
from heap_region_advisor.models.partition import Partition

MIB = 1024 * 1024


class ValueSizeEstimator(BaseSizeEstimator):
    """Treats each integer value as its own size; negative values fail."""

    def __init__(self):
        self.calls = 0

    def estimate_size(
        self, value: Any, exclude_filter: Optional[ExcludeFilter] = None
    ) -> int:
        self.calls += 1
        if value < 0:
            raise RuntimeError(f"sizer exploded on {value}")
        return int(value)


class RangeDataSource(IDataSource):
    """A single large partition whose keys are ``range(total)``."""

    def __init__(self, total: int, value: int = 100, bounded_fetch: bool = False):
        self.total = total
        self.value = value
        self.bounded_fetch = bounded_fetch
        self.gets = 0
        self.partition = Partition(name="big", full_path="/big")

    def member_name(self) -> str:
        return "range-member"

    def list_partitions(self) -> List[Partition]:
        return [self.partition]

    def entry_count(self, partition: Partition) -> int:
        return self.total

    def iterate_keys(self, partition: Partition) -> Iterator[Any]:
        return iter(range(self.total))

    def get(self, partition: Partition, key: Any) -> Any:
        self.gets += 1
        return self.value

    @property
    def supports_bounded_fetch(self) -> bool:
        return self.bounded_fetch

    def fetch_bounded(self, partition: Partition, limit: int) -> List[Any]:
        return [self.value] * min(limit, self.total)


@pytest.fixture
def estimator() -> ValueSizeEstimator:
    return ValueSizeEstimator()


@pytest.fixture
def range_source():
    return RangeDataSource


@pytest.fixture
def mib() -> int:
    return MIB
