import random

import pytest

from heap_region_advisor.analytics.topk import TopKSelector
from heap_region_advisor.models.sample import Sample


def _sample(identifier, size):
    return Sample(identifier=identifier, type_name="bytes", size_bytes=size)


def test_zero_capacity_is_always_empty():
    selector = TopKSelector(0)
    for i in range(10):
        assert not selector.offer(_sample(f"k{i}", i))
    assert selector.result() == []


def test_negative_capacity_rejected():
    with pytest.raises(ValueError):
        TopKSelector(-1)


def test_fewer_offers_than_capacity():
    selector = TopKSelector(5)
    for identifier, size in [("a", 3), ("b", 9), ("c", 1)]:
        selector.offer(_sample(identifier, size))
    assert [s.size_bytes for s in selector.result()] == [9, 3, 1]


def test_keeps_largest():
    selector = TopKSelector(3)
    for i, size in enumerate([5, 1, 9, 3, 7, 2]):
        selector.offer(_sample(f"k{i}", size))
    assert [s.size_bytes for s in selector.result()] == [9, 7, 5]
    assert selector.min_size == 5
    assert selector.is_full


def test_equal_size_does_not_evict():
    selector = TopKSelector(1)
    assert selector.offer(_sample("first", 5))
    assert not selector.offer(_sample("second", 5))
    assert [s.identifier for s in selector.result()] == ["first"]


def test_ties_keep_arrival_order():
    selector = TopKSelector(3)
    selector.offer(_sample("a", 100))
    selector.offer(_sample("b", 5_000_000))
    selector.offer(_sample("c", 100))
    selector.offer(_sample("d", 100))
    assert [s.identifier for s in selector.result()] == ["b", "a", "c"]


def test_duplicate_identifier_ignored():
    selector = TopKSelector(3)
    assert selector.offer(_sample("a", 10))
    assert not selector.offer(_sample("a", 20))
    assert len(selector) == 1


def test_result_does_not_consume_state():
    selector = TopKSelector(2)
    selector.offer(_sample("a", 1))
    selector.offer(_sample("b", 2))
    assert selector.result() == selector.result()


@pytest.mark.parametrize("k", [0, 1, 3, 10, 50])
@pytest.mark.parametrize("seed", [1, 7, 42])
def test_random_streams(k, seed):
    rng = random.Random(seed)
    samples = [_sample(f"k{i}", rng.randint(0, 1000)) for i in range(rng.randint(0, 200))]
    selector = TopKSelector(k)
    for sample in samples:
        selector.offer(sample)

    result = selector.result()
    sizes = [s.size_bytes for s in result]
    assert len(result) == min(k, len(samples))
    assert sizes == sorted(sizes, reverse=True)
    assert sizes == sorted((s.size_bytes for s in samples), reverse=True)[:k]

    kept = {s.identifier for s in result}
    discarded = [s.size_bytes for s in samples if s.identifier not in kept]
    if result and discarded:
        assert min(sizes) >= max(discarded)


def test_eviction_prefers_latest_of_equal_sizes():
    selector = TopKSelector(3)
    for identifier in ("a", "b", "c"):
        selector.offer(_sample(identifier, 100))
    selector.offer(_sample("big", 5_000_000))
    assert [s.identifier for s in selector.result()] == ["big", "a", "b"]
