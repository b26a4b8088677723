import pytest
from pympler import asizeof

from heap_region_advisor.analytics import estimators
from heap_region_advisor.analytics.estimators import DeepSizeEstimator
from heap_region_advisor.analytics.estimators import SerializedSizeEstimator
from heap_region_advisor.analytics.estimators import get_estimator
from heap_region_advisor.exceptions import EstimationError


class Order:
    def __init__(self, lines, cache_meta):
        self.lines = lines
        self.cache_meta = cache_meta


def test_deep_size_grows_with_content():
    estimator = DeepSizeEstimator()
    small = estimator.estimate_size(list(range(10)))
    large = estimator.estimate_size(list(range(10_000)))
    assert 0 < small < large


def test_deep_size_counts_nested_objects():
    estimator = DeepSizeEstimator()
    flat = estimator.estimate_size(Order(lines=[], cache_meta=None))
    nested = estimator.estimate_size(Order(lines=["x" * 1000] * 5 + ["y" * 5000], cache_meta=None))
    assert nested > flat + 5000


def test_filter_excluding_everything_leaves_flat_size():
    value = {"a": "x" * 10_000}
    size = DeepSizeEstimator().estimate_size(value, lambda parent, child: True)
    assert size == asizeof.flatsize(value)


def test_filter_prunes_housekeeping_objects():
    meta = {"stats": "z" * 100_000}
    order = Order(lines=[1, 2, 3], cache_meta=meta)
    estimator = DeepSizeEstimator()

    unfiltered = estimator.estimate_size(order, lambda parent, child: False)
    filtered = estimator.estimate_size(order, lambda parent, child: child is meta)

    assert unfiltered - filtered >= 100_000


def test_deep_size_failure_is_wrapped(monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(estimators.asizeof, "asizeof", explode)
    with pytest.raises(EstimationError, match="boom"):
        DeepSizeEstimator().estimate_size([1, 2, 3])


def test_serialized_size_of_json_value():
    assert SerializedSizeEstimator().estimate_size({"a": 1}) == len('{"a":1}')


def test_serialized_size_falls_back_to_pickle():
    assert SerializedSizeEstimator().estimate_size({1, 2, 3}) > 0


def test_serialized_size_failure_is_wrapped():
    with pytest.raises(EstimationError):
        SerializedSizeEstimator().estimate_size(lambda: None)


def test_get_estimator():
    assert isinstance(get_estimator("deep"), DeepSizeEstimator)
    assert isinstance(get_estimator("serialized"), SerializedSizeEstimator)
    with pytest.raises(ValueError, match="Unknown estimator"):
        get_estimator("exact")
