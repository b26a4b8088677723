"""Dictionary backed data source for embedded caches and tests."""
import itertools
from typing import Any
from typing import Dict
from typing import Iterator
from typing import List
from typing import Mapping

from heap_region_advisor.models.partition import Partition
from heap_region_advisor.models.partition import build_partition_tree
from heap_region_advisor.models.partition import normalize_path

from .datasource import IDataSource


class InMemoryDataSource(IDataSource):
    """
    Serves partitions from plain mappings keyed by full path, e.g.
    ``{"/orders": {...}, "/orders/archive": {...}}``.
    """

    def __init__(
        self,
        regions: Mapping[str, Mapping[Any, Any]],
        member_name: str = "local",
        bounded_fetch: bool = False,
    ):
        self._regions: Dict[str, Mapping[Any, Any]] = {
            normalize_path(path): entries for path, entries in regions.items()
        }
        self._member_name = member_name
        self._bounded_fetch = bounded_fetch

    def _entries(self, partition: Partition) -> Mapping[Any, Any]:
        try:
            return self._regions[partition.full_path]
        except KeyError:
            raise KeyError(f"Unknown partition: {partition.full_path}") from None

    def member_name(self) -> str:
        return self._member_name

    def list_partitions(self) -> List[Partition]:
        return build_partition_tree(self._regions)

    def entry_count(self, partition: Partition) -> int:
        return len(self._entries(partition))

    def iterate_keys(self, partition: Partition) -> Iterator[Any]:
        # Snapshot so writers can keep mutating the mapping during a scan.
        return iter(tuple(self._entries(partition)))

    def get(self, partition: Partition, key: Any) -> Any:
        return self._entries(partition).get(key)

    @property
    def supports_bounded_fetch(self) -> bool:
        return self._bounded_fetch

    def fetch_bounded(self, partition: Partition, limit: int) -> List[Any]:
        if not self._bounded_fetch:
            return super().fetch_bounded(partition, limit)
        return list(itertools.islice(self._entries(partition).values(), limit))
