from abc import ABC
from abc import abstractmethod
from typing import Any
from typing import Iterator
from typing import List

from heap_region_advisor.models.partition import Partition


class IDataSource(ABC):
    """
    Interface for cache members whose partitions can be sampled.

    Implementations are read-only views of a live cache: entry counts may be
    stale by the time iteration finishes.
    """

    @abstractmethod
    def member_name(self) -> str:
        """Name of the cache member this source reads from."""
        pass

    @abstractmethod
    def list_partitions(self) -> List[Partition]:
        """List the root partitions; nested partitions hang off ``children``."""
        pass

    @abstractmethod
    def entry_count(self, partition: Partition) -> int:
        """Get the number of entries currently held by a partition."""
        pass

    @abstractmethod
    def iterate_keys(self, partition: Partition) -> Iterator[Any]:
        """Lazily iterate the keys of a partition. Not restartable."""
        pass

    @abstractmethod
    def get(self, partition: Partition, key: Any) -> Any:
        """Get the value stored under ``key``, or None when absent."""
        pass

    @property
    def supports_bounded_fetch(self) -> bool:
        """Whether ``fetch_bounded`` is cheaper than per-key retrieval."""
        return False

    def fetch_bounded(self, partition: Partition, limit: int) -> List[Any]:
        """Fetch at most ``limit`` values of a partition in one bulk call."""
        raise NotImplementedError(
            f"{type(self).__name__} does not support bounded fetch"
        )
