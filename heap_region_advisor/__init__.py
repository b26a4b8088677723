"""Heap region size advisor for distributed key-value caches."""

from heap_region_advisor.api import analyze_cluster
from heap_region_advisor.api import analyze_partition
from heap_region_advisor.api import summarize_node
from heap_region_advisor.api import top_entries

__version__ = "0.1.0"

__all__ = [
    "analyze_cluster",
    "analyze_partition",
    "summarize_node",
    "top_entries",
    "__version__",
]
