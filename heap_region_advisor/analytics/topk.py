import heapq
import itertools
from typing import List
from typing import Optional
from typing import Set
from typing import Tuple

from heap_region_advisor.models.sample import Sample


class TopKSelector:
    """
    Retains the K largest samples of an unbounded stream.

    Backed by a list-based binary min-heap of at most K items, so memory stays
    O(K) and each offer costs O(log K) however long the stream is.
    """

    def __init__(self, k: int):
        if k < 0:
            raise ValueError(f"k must be >= 0, got {k}")
        self.k = k
        # (size_bytes, -arrival, sample): among equal sizes the latest arrival
        # sits on top and is evicted first. Sample objects are never compared.
        self._heap: List[Tuple[int, int, Sample]] = []
        self._held: Set[str] = set()
        self._arrival = itertools.count()

    def __len__(self) -> int:
        return len(self._heap)

    @property
    def is_full(self) -> bool:
        return len(self._heap) >= self.k

    @property
    def min_size(self) -> Optional[int]:
        """Smallest size currently held, or None when empty."""
        return self._heap[0][0] if self._heap else None

    def offer(self, sample: Sample) -> bool:
        """Offer a sample. Returns True if it was retained."""
        if self.k == 0 or sample.identifier in self._held:
            return False
        item = (sample.size_bytes, -next(self._arrival), sample)
        if len(self._heap) < self.k:
            heapq.heappush(self._heap, item)
        elif sample.size_bytes > self._heap[0][0]:
            evicted = heapq.heapreplace(self._heap, item)
            self._held.discard(evicted[2].identifier)
        else:
            return False
        self._held.add(sample.identifier)
        return True

    def result(self) -> List[Sample]:
        """Held samples, largest first. Equal sizes keep arrival order."""
        return [
            item[2] for item in sorted(self._heap, key=lambda item: (-item[0], -item[1]))
        ]
