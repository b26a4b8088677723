"""Data models describing how a partition was sampled and what was found.

This module contains:
- ScanStrategy: the sampling variant chosen for a partition
- ScanPlan: the static plan (strategy, stride interval, sample limit)
- ScanStatus: terminal state of a partition scan
- PartitionSummary: the immutable result of scanning one partition
"""

from dataclasses import asdict
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import Any
from typing import Dict
from typing import Optional
from typing import Tuple

from heap_region_advisor.models.sample import Sample
from heap_region_advisor.utils.conversions import bytes_to_mib


class ScanStrategy(str, Enum):
    FULL_SCAN = "FULL_SCAN"
    STRIDE_SAMPLE = "STRIDE_SAMPLE"
    BOUNDED_FETCH = "BOUNDED_FETCH"


class ScanStatus(str, Enum):
    EMPTY = "EMPTY"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


@dataclass(frozen=True)
class ScanPlan:
    """
    Sampling plan for one partition.

    ``interval`` is the stride between examined ordinals and ``limit`` the
    maximum number of samples to collect.
    """

    strategy: ScanStrategy
    total_entries: int
    interval: int
    limit: int

    def should_examine(self, ordinal: int) -> bool:
        return ordinal % self.interval == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "strategy": self.strategy.value,
            "total_entries": self.total_entries,
            "interval": self.interval,
            "limit": self.limit,
        }


@dataclass(frozen=True)
class PartitionSummary:
    """Result of scanning a single partition. Sizes are in bytes."""

    partition_name: str
    total_entries: int
    sampled_count: int
    top_k: Tuple[Sample, ...]
    average_sampled_size_bytes: Optional[float]
    status: ScanStatus
    error_message: Optional[str] = field(default=None)
    plan: Optional[ScanPlan] = field(default=None)
    failed_count: int = field(default=0)
    elapsed_secs: float = field(default=0.0)

    @classmethod
    def empty(cls, partition_name: str) -> "PartitionSummary":
        return cls(
            partition_name=partition_name,
            total_entries=0,
            sampled_count=0,
            top_k=(),
            average_sampled_size_bytes=None,
            status=ScanStatus.EMPTY,
        )

    @classmethod
    def failed(
        cls,
        partition_name: str,
        total_entries: int,
        error_message: str,
        plan: Optional[ScanPlan] = None,
        elapsed_secs: float = 0.0,
    ) -> "PartitionSummary":
        return cls(
            partition_name=partition_name,
            total_entries=total_entries,
            sampled_count=0,
            top_k=(),
            average_sampled_size_bytes=None,
            status=ScanStatus.ERROR,
            error_message=error_message,
            plan=plan,
            elapsed_secs=elapsed_secs,
        )

    @property
    def largest(self) -> Optional[Sample]:
        return self.top_k[0] if self.top_k else None

    @property
    def max_size_bytes(self) -> Optional[int]:
        """Size of the largest sample, or None when nothing was sampled."""
        return self.top_k[0].size_bytes if self.top_k else None

    @property
    def max_size_mb(self) -> Optional[float]:
        if self.max_size_bytes is None:
            return None
        return bytes_to_mib(self.max_size_bytes)

    @property
    def average_sampled_size_mb(self) -> Optional[float]:
        if self.average_sampled_size_bytes is None:
            return None
        return bytes_to_mib(self.average_sampled_size_bytes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data["status"] = self.status.value
        data["top_k"] = [sample.to_dict() for sample in self.top_k]
        data["plan"] = self.plan.to_dict() if self.plan else None
        data["max_size_bytes"] = self.max_size_bytes
        data["max_size_mb"] = self.max_size_mb
        data["average_sampled_size_mb"] = self.average_sampled_size_mb
        return data
