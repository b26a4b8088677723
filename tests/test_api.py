import logging

import pyarrow.dataset as ds
import pytest

from heap_region_advisor import analyze_cluster
from heap_region_advisor import analyze_partition
from heap_region_advisor import summarize_node
from heap_region_advisor import top_entries
from heap_region_advisor.collectors.in_memory import InMemoryDataSource
from heap_region_advisor.models.recommendation import RegionSizeLabel
from heap_region_advisor.models.scan import ScanStrategy

MIB = 1024 * 1024


@pytest.fixture
def cache():
    return InMemoryDataSource(
        {
            "/orders": {f"order-{i}": 200 for i in range(40)},
            "/orders/archive": {"old": 12 * MIB},
            "/sessions": {},
        },
        member_name="server-1",
    )


def test_summarize_node(cache, estimator):
    report = summarize_node(cache, estimator=estimator)
    assert report.overall_max_size_bytes == 12 * MIB
    assert report.recommendation.region_size_label is RegionSizeLabel.REGION_32M
    # summary profile keeps only the largest entry per partition
    orders = next(s for s in report.partition_summaries if s.partition_name == "/orders")
    assert len(orders.top_k) == 1


def test_summarize_node_unknown_profile(cache, estimator):
    with pytest.raises(ValueError, match="Unknown profile"):
        summarize_node(cache, profile="exhaustive", estimator=estimator)


def test_analyze_partition(cache, estimator):
    summary = analyze_partition(cache, "orders", top_k=5, estimator=estimator)
    assert summary.partition_name == "/orders"
    assert summary.sampled_count == 40
    assert len(summary.top_k) == 5
    assert summary.average_sampled_size_bytes == 200
    assert summary.plan.strategy is ScanStrategy.FULL_SCAN


def test_analyze_nested_partition(cache, estimator):
    summary = analyze_partition(cache, "/orders/archive", estimator=estimator)
    assert summary.max_size_bytes == 12 * MIB


def test_analyze_partition_not_found(cache, estimator):
    with pytest.raises(ValueError, match="/missing not found on member server-1"):
        analyze_partition(cache, "/missing", estimator=estimator)


def test_top_entries_logs_summary(estimator, caplog):
    source = InMemoryDataSource({"/blobs": {"a": 10, "b": 3 * MIB, "c": 500, "d": 7}})
    with caplog.at_level(logging.INFO, logger="heap_region_advisor"):
        summary = top_entries(source, "/blobs", top_n=2, estimator=estimator)

    assert [s.identifier for s in summary.top_k] == ["b", "c"]
    assert "Top 2 largest entries in region '/blobs'" in caplog.text
    assert "#1 - Key: b (int)" in caplog.text


def test_analyze_cluster(estimator):
    members = [
        InMemoryDataSource({"/r": {"k": 2 * MIB}}, member_name="s1"),
        InMemoryDataSource({"/r": {"k": 20 * MIB}}, member_name="s2"),
        InMemoryDataSource({"/r": {"k": 9 * MIB}}, member_name="s3"),
    ]
    report = analyze_cluster(members, estimator=estimator)

    assert report.cluster_max_size_bytes == 20 * MIB
    assert report.largest_member == "s2"
    assert report.recommendation.region_size_label is (
        RegionSizeLabel.REGION_32M_WITH_WARNING
    )
    assert [n.member_name for n in report.node_reports] == ["s1", "s2", "s3"]


def test_analyze_cluster_without_members():
    report = analyze_cluster([])
    assert report.cluster_max_size_bytes == 0
    assert report.recommendation.region_size_label is RegionSizeLabel.REGION_16M


def test_summarize_node_writes_parquet(cache, estimator, tmp_path):
    sink = tmp_path / "reports"
    logs = tmp_path / "logs"
    summarize_node(
        cache, estimator=estimator, sink_path=str(sink), log_path=str(logs)
    )

    table = ds.dataset(str(sink), format="parquet", partitioning="hive").to_table()
    assert table.num_rows == 3
    assert set(table.column("partition_name").to_pylist()) == {
        "/orders",
        "/orders/archive",
        "/sessions",
    }
    log_table = ds.dataset(str(logs), format="parquet", partitioning="hive").to_table()
    assert log_table.column("processing_status").to_pylist() == ["SUCCEEDED"]
