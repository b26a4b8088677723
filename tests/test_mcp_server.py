import json

import pytest

from heap_region_advisor import mcp_server
from heap_region_advisor.collectors.in_memory import InMemoryDataSource

MIB = 1024 * 1024


@pytest.fixture(autouse=True)
def fake_client(monkeypatch):
    def client(base_url=None):
        url = base_url or "http://localhost:7070"
        size = 20 * MIB if "big" in url else 10
        return InMemoryDataSource({"/orders": {"k": b"x" * size}}, member_name=url)

    monkeypatch.setattr(mcp_server, "_get_client", client)


def test_summarize_cache_node():
    data = json.loads(mcp_server.summarize_cache_node())
    assert data["member_name"] == "http://localhost:7070"
    assert data["recommendation"]["region_size_label"] == "16M"


def test_analyze_cache_region():
    data = json.loads(mcp_server.analyze_cache_region("/orders", top_k=1))
    assert data["partition_name"] == "/orders"
    assert data["top_k"][0]["identifier"] == "k"


def test_summarize_cache_cluster():
    data = json.loads(
        mcp_server.summarize_cache_cluster(["http://small:7070", "http://big:7070"])
    )
    assert data["largest_member"] == "http://big:7070"
    assert data["recommendation"]["region_size_label"] == "32M_WITH_WARNING"


def test_errors_are_returned_as_text():
    assert mcp_server.analyze_cache_region("/missing").startswith(
        "Error analyzing region:"
    )
    assert mcp_server.summarize_cache_node(estimator="exact").startswith(
        "Error summarizing cache node:"
    )
