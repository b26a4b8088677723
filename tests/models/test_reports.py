import json

from heap_region_advisor.analytics.aggregator import merge
from heap_region_advisor.analytics.recommender import recommend
from heap_region_advisor.models.recommendation import NodeReport
from heap_region_advisor.models.sample import Sample
from heap_region_advisor.models.scan import PartitionSummary
from heap_region_advisor.models.scan import ScanPlan
from heap_region_advisor.models.scan import ScanStatus
from heap_region_advisor.models.scan import ScanStrategy

MIB = 1024 * 1024


def _summary():
    return PartitionSummary(
        partition_name="/orders",
        total_entries=50,
        sampled_count=50,
        top_k=(
            Sample("k17", "dict", 5_000_000),
            Sample("k0", "dict", 100),
        ),
        average_sampled_size_bytes=100_098.0,
        status=ScanStatus.SUCCESS,
        plan=ScanPlan(ScanStrategy.FULL_SCAN, 50, 1, 100),
    )


def test_summary_properties():
    summary = _summary()
    assert summary.largest.identifier == "k17"
    assert summary.max_size_bytes == 5_000_000
    assert round(summary.max_size_mb, 3) == 4.768


def test_absent_values_have_no_size():
    empty = PartitionSummary.empty("/sessions")
    assert empty.status is ScanStatus.EMPTY
    assert empty.max_size_bytes is None
    assert empty.max_size_mb is None
    assert empty.average_sampled_size_mb is None


def test_summary_to_dict():
    data = _summary().to_dict()
    assert data["status"] == "SUCCESS"
    assert data["plan"]["strategy"] == "FULL_SCAN"
    assert data["top_k"][0] == {
        "identifier": "k17",
        "type_name": "dict",
        "size_bytes": 5_000_000,
        "size_mb": 5_000_000 / MIB,
    }
    assert data["max_size_bytes"] == 5_000_000


def test_reports_are_json_serializable():
    node = NodeReport(
        member_name="s1",
        partition_summaries=(_summary(), PartitionSummary.failed("/bad", 10, "boom")),
        overall_max_size_bytes=5_000_000,
        recommendation=recommend(5_000_000),
    )
    cluster = merge([node])

    decoded = json.loads(json.dumps(cluster.to_dict()))
    assert decoded["recommendation"]["jvm_flag"] == "-XX:G1HeapRegionSize=16M"
    assert decoded["node_reports"][0]["partition_summaries"][1]["status"] == "ERROR"
    assert decoded["largest_member"] == "s1"
    assert [s.partition_name for s in node.failed_partitions] == ["/bad"]
