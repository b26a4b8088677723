import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional
from typing import Sequence

from heap_region_advisor.analytics.aggregator import merge
from heap_region_advisor.analytics.base import BaseSizeEstimator
from heap_region_advisor.analytics.base import ExcludeFilter
from heap_region_advisor.analytics.estimators import DeepSizeEstimator
from heap_region_advisor.analytics.scanner import PartitionScanner
from heap_region_advisor.collectors.datasource import IDataSource
from heap_region_advisor.config.profiles import ScanProfile
from heap_region_advisor.config.profiles import get_profile
from heap_region_advisor.models.partition import normalize_path
from heap_region_advisor.models.recommendation import ClusterReport
from heap_region_advisor.models.recommendation import NodeReport
from heap_region_advisor.models.scan import PartitionSummary
from heap_region_advisor.node_reporter import NodeReporter
from heap_region_advisor.storage.arrow_io import ParquetSink
from heap_region_advisor.storage.arrow_io import processing_log_entry
from heap_region_advisor.utils.formatting import format_cluster_report
from heap_region_advisor.utils.formatting import format_node_report
from heap_region_advisor.utils.formatting import format_top_entries

logger = logging.getLogger(__name__)


def build_scanner(
    datasource: IDataSource,
    profile: ScanProfile,
    estimator: Optional[BaseSizeEstimator] = None,
    exclude_filter: Optional[ExcludeFilter] = None,
) -> PartitionScanner:
    """Wire a partition scanner from a scan profile."""
    return PartitionScanner(
        datasource=datasource,
        estimator=estimator or DeepSizeEstimator(),
        sampling_engine=profile.sampling_engine(),
        top_k=profile.top_k,
        exclude_filter=exclude_filter,
    )


def summarize_node(
    datasource: IDataSource,
    profile: str = "summary",
    top_k: Optional[int] = None,
    target_sample_budget: Optional[int] = None,
    estimator: Optional[BaseSizeEstimator] = None,
    exclude_filter: Optional[ExcludeFilter] = None,
    max_workers: int = 1,
    sink_path: Optional[str] = None,
    log_path: Optional[str] = None,
) -> NodeReport:
    """
    Analyze every partition of one cache member and recommend a region size.

    :param datasource: The member to analyze.
    :param profile: Name of the scan profile ('summary', 'deep' or 'top-n').
    :param top_k: Optional override of the profile's top-K size.
    :param target_sample_budget: Optional override of the profile's sample budget.
    :param estimator: Value size estimator, deep object sizing by default.
    :param exclude_filter: Optional predicate pruning housekeeping objects from sizing.
    :param max_workers: Number of partitions scanned concurrently.
    :param sink_path: Optional path to save the report as Parquet.
    :param log_path: Optional path to save the processing status log.
    :return: A NodeReport; never raises for data source failures.
    """
    scan_profile = get_profile(profile, top_k, target_sample_budget)
    scanner = build_scanner(datasource, scan_profile, estimator, exclude_filter)
    report = NodeReporter(datasource, scanner, max_workers=max_workers).analyze()
    logger.debug("\n".join(format_node_report(report)))

    if sink_path:
        sink = ParquetSink(sink_path, log_path)
        sink.save(report)
        sink.log(processing_log_entry(report))
    return report


def analyze_partition(
    datasource: IDataSource,
    partition_path: str,
    profile: str = "deep",
    top_k: Optional[int] = None,
    target_sample_budget: Optional[int] = None,
    estimator: Optional[BaseSizeEstimator] = None,
    exclude_filter: Optional[ExcludeFilter] = None,
) -> PartitionSummary:
    """
    Analyze a single partition: sample count, average size, largest entries.

    :raises ValueError: when no partition with that path exists on the member.
    """
    scan_profile = get_profile(profile, top_k, target_sample_budget)
    scanner = build_scanner(datasource, scan_profile, estimator, exclude_filter)
    target = normalize_path(partition_path)
    reporter = NodeReporter(datasource, scanner)
    for partition in reporter.discover_partitions():
        if partition.full_path == target:
            return scanner.scan(partition)
    raise ValueError(
        f"Partition {target} not found on member {datasource.member_name()}"
    )


def top_entries(
    datasource: IDataSource,
    partition_path: str,
    top_n: int = 3,
    estimator: Optional[BaseSizeEstimator] = None,
) -> PartitionSummary:
    """Find the ``top_n`` largest entries of a partition and log a summary block."""
    summary = analyze_partition(
        datasource, partition_path, profile="top-n", top_k=top_n, estimator=estimator
    )
    logger.info(format_top_entries(summary, datasource.member_name(), top_n))
    return summary


def analyze_cluster(
    datasources: Sequence[IDataSource],
    profile: str = "summary",
    top_k: Optional[int] = None,
    target_sample_budget: Optional[int] = None,
    estimator: Optional[BaseSizeEstimator] = None,
    max_workers: Optional[int] = None,
    sink_path: Optional[str] = None,
    log_path: Optional[str] = None,
) -> ClusterReport:
    """
    Analyze each member as an independent task, then merge the node reports.

    :param datasources: One data source per cache member.
    :param max_workers: Members analyzed concurrently, all of them by default.
    """
    scan_profile = get_profile(profile, top_k, target_sample_budget)

    def analyze_member(datasource: IDataSource) -> NodeReport:
        scanner = build_scanner(datasource, scan_profile, estimator)
        return NodeReporter(datasource, scanner).analyze()

    if datasources:
        workers = max_workers or len(datasources)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            node_reports = list(pool.map(analyze_member, datasources))
    else:
        node_reports = []

    cluster_report = merge(node_reports)
    logger.info("\n".join(format_cluster_report(cluster_report)))
    if sink_path:
        sink = ParquetSink(sink_path, log_path)
        sink.save(cluster_report)
        for node_report in cluster_report.node_reports:
            sink.log(processing_log_entry(node_report))
    return cluster_report
