"""Concrete value size estimators.

- DeepSizeEstimator: deep resident size of a Python object graph (pympler)
- SerializedSizeEstimator: size of the value's serialized form, for values
  that arrive over a wire transport and are stored serialized by the cache
"""

import gc
import json
import pickle
import types
from typing import Any
from typing import Optional

from pympler import asizeof

from heap_region_advisor.exceptions import EstimationError

from .base import BaseSizeEstimator
from .base import ExcludeFilter

# Shared interpreter objects that must never be charged to a value.
_SKIPPED_TYPES = (
    type,
    types.ModuleType,
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.CodeType,
    types.FrameType,
)


class DeepSizeEstimator(BaseSizeEstimator):
    """Sizes the full object graph reachable from a value."""

    def estimate_size(
        self, value: Any, exclude_filter: Optional[ExcludeFilter] = None
    ) -> int:
        try:
            if exclude_filter is None:
                return asizeof.asizeof(value)
            return self._filtered_size(value, exclude_filter)
        except Exception as e:
            raise EstimationError(
                f"Could not size value of type {type(value).__name__}: {e}"
            ) from e

    def _filtered_size(self, value: Any, exclude_filter: ExcludeFilter) -> int:
        """Walk referents, pruning every edge the filter rejects."""
        seen = {id(value)}
        total = asizeof.flatsize(value)
        pending = [value]
        while pending:
            parent = pending.pop()
            for child in gc.get_referents(parent):
                if id(child) in seen or isinstance(child, _SKIPPED_TYPES):
                    continue
                seen.add(id(child))
                if exclude_filter(parent, child):
                    continue
                total += asizeof.flatsize(child)
                pending.append(child)
        return total


class SerializedSizeEstimator(BaseSizeEstimator):
    """
    Sizes the serialized form of a value: compact JSON when the value is JSON
    compatible, pickle otherwise. The exclude filter does not apply to a flat
    byte stream and is ignored.
    """

    def estimate_size(
        self, value: Any, exclude_filter: Optional[ExcludeFilter] = None
    ) -> int:
        try:
            return len(json.dumps(value, separators=(",", ":")).encode("utf-8"))
        except (TypeError, ValueError):
            pass
        try:
            return len(pickle.dumps(value, protocol=pickle.HIGHEST_PROTOCOL))
        except Exception as e:
            raise EstimationError(
                f"Could not serialize value of type {type(value).__name__}: {e}"
            ) from e


ESTIMATORS = {
    "deep": DeepSizeEstimator,
    "serialized": SerializedSizeEstimator,
}


def get_estimator(name: str) -> BaseSizeEstimator:
    """Instantiate an estimator by its configuration name."""
    try:
        return ESTIMATORS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown estimator '{name}'. Choose one of: {', '.join(sorted(ESTIMATORS))}"
        ) from None
