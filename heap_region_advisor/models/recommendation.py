from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import Any
from typing import Dict
from typing import Optional
from typing import Tuple

from heap_region_advisor.models.scan import PartitionSummary
from heap_region_advisor.models.scan import ScanStatus
from heap_region_advisor.utils.conversions import bytes_to_mib


class RegionSizeLabel(str, Enum):
    REGION_16M = "16M"
    REGION_32M = "32M"
    REGION_32M_WITH_WARNING = "32M_WITH_WARNING"

    @property
    def region_size(self) -> str:
        """The G1 region size to configure, without the warning suffix."""
        return "16M" if self is RegionSizeLabel.REGION_16M else "32M"


@dataclass(frozen=True)
class Recommendation:
    """
    Data class to hold a heap region size recommendation derived from the
    largest observed object.
    """

    region_size_label: RegionSizeLabel
    reason_text: str
    max_size_bytes: int

    @property
    def jvm_flag(self) -> str:
        return f"-XX:G1HeapRegionSize={self.region_size_label.region_size}"

    @property
    def has_warning(self) -> bool:
        return self.region_size_label is RegionSizeLabel.REGION_32M_WITH_WARNING

    @property
    def max_size_mb(self) -> float:
        return bytes_to_mib(self.max_size_bytes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "region_size_label": self.region_size_label.value,
            "reason_text": self.reason_text,
            "jvm_flag": self.jvm_flag,
            "max_size_bytes": self.max_size_bytes,
            "max_size_mb": self.max_size_mb,
        }


@dataclass(frozen=True)
class NodeReport:
    """Analysis of every partition hosted by one cache member."""

    member_name: str
    partition_summaries: Tuple[PartitionSummary, ...]
    overall_max_size_bytes: int
    recommendation: Recommendation
    error_message: Optional[str] = field(default=None)
    elapsed_secs: float = field(default=0.0)

    @property
    def failed(self) -> bool:
        return self.error_message is not None

    @property
    def overall_max_size_mb(self) -> float:
        return bytes_to_mib(self.overall_max_size_bytes)

    @property
    def failed_partitions(self) -> Tuple[PartitionSummary, ...]:
        return tuple(
            summary
            for summary in self.partition_summaries
            if summary.status is ScanStatus.ERROR
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "member_name": self.member_name,
            "partition_summaries": [
                summary.to_dict() for summary in self.partition_summaries
            ],
            "overall_max_size_bytes": self.overall_max_size_bytes,
            "overall_max_size_mb": self.overall_max_size_mb,
            "recommendation": self.recommendation.to_dict(),
            "error_message": self.error_message,
            "elapsed_secs": self.elapsed_secs,
        }


@dataclass(frozen=True)
class ClusterReport:
    """Cluster-wide roll-up of node reports."""

    node_reports: Tuple[NodeReport, ...]
    cluster_max_size_bytes: int
    recommendation: Recommendation
    largest_member: Optional[str] = field(default=None)
    mean_node_max_bytes: Optional[float] = field(default=None)
    p95_node_max_bytes: Optional[float] = field(default=None)

    @property
    def cluster_max_size_mb(self) -> float:
        return bytes_to_mib(self.cluster_max_size_bytes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "node_reports": [report.to_dict() for report in self.node_reports],
            "cluster_max_size_bytes": self.cluster_max_size_bytes,
            "cluster_max_size_mb": self.cluster_max_size_mb,
            "recommendation": self.recommendation.to_dict(),
            "largest_member": self.largest_member,
            "mean_node_max_bytes": self.mean_node_max_bytes,
            "p95_node_max_bytes": self.p95_node_max_bytes,
        }
