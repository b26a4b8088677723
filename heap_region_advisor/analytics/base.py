from abc import ABC
from abc import abstractmethod
from typing import Any
from typing import Callable
from typing import Optional

# Returns True when ``candidate`` (reached from ``parent``) must be left out of
# the size computation.
ExcludeFilter = Callable[[Any, Any], bool]


class BaseSizeEstimator(ABC):
    """Abstract base class for all value size estimators."""

    @abstractmethod
    def estimate_size(
        self, value: Any, exclude_filter: Optional[ExcludeFilter] = None
    ) -> int:
        """Estimates the deep in-memory size of ``value`` in bytes."""
        pass
