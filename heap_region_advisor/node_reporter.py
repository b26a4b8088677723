import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List
from typing import Set

from heap_region_advisor.analytics.recommender import recommend
from heap_region_advisor.analytics.scanner import PartitionScanner
from heap_region_advisor.collectors.datasource import IDataSource
from heap_region_advisor.models.partition import Partition
from heap_region_advisor.models.recommendation import NodeReport
from heap_region_advisor.utils.conversions import format_mib

logger = logging.getLogger(__name__)


class NodeReporter:
    """Orchestrates the analysis of every partition hosted by one cache member."""

    def __init__(
        self,
        datasource: IDataSource,
        scanner: PartitionScanner,
        max_workers: int = 1,
    ):
        self.datasource = datasource
        self.scanner = scanner
        self.max_workers = max(1, max_workers)

    def _member_name(self) -> str:
        try:
            return self.datasource.member_name()
        except Exception as e:
            logger.warning("Could not determine member name: %s", e)
            return "unknown"

    def discover_partitions(self) -> List[Partition]:
        """
        Every partition reachable from the roots, depth first, each listed
        once even when reachable through several paths.
        """
        discovered: List[Partition] = []
        seen: Set[str] = set()
        pending = list(reversed(self.datasource.list_partitions()))
        while pending:
            partition = pending.pop()
            if partition.full_path in seen:
                continue
            seen.add(partition.full_path)
            discovered.append(partition)
            pending.extend(reversed(partition.children))
        return discovered

    def analyze(self) -> NodeReport:
        """
        Scan all partitions and derive the node recommendation.

        Always returns a report; a failure to enumerate partitions yields an
        error report instead of raising.
        """
        started = time.monotonic()
        member_name = self._member_name()
        logger.info("Starting analysis on member: %s", member_name)

        try:
            partitions = self.discover_partitions()
        except Exception as e:
            logger.error(
                "Error listing partitions on member %s: %s", member_name, e, exc_info=True
            )
            return NodeReport(
                member_name=member_name,
                partition_summaries=(),
                overall_max_size_bytes=0,
                recommendation=recommend(0),
                error_message=f"Error listing partitions: {e}",
                elapsed_secs=time.monotonic() - started,
            )

        logger.info("Found %d partitions to analyze", len(partitions))
        if self.max_workers > 1 and len(partitions) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                summaries = tuple(pool.map(self.scanner.scan, partitions))
        else:
            summaries = tuple(self.scanner.scan(partition) for partition in partitions)

        overall_max = max(
            (summary.max_size_bytes or 0 for summary in summaries), default=0
        )
        recommendation = recommend(overall_max)
        if recommendation.has_warning:
            logger.warning(
                "Found object larger than 16MB on member %s: %s MB",
                member_name,
                format_mib(overall_max),
            )
        logger.info(
            "Analysis complete on member %s. Largest object: %d bytes (%s MB). Recommendation: %s",
            member_name,
            overall_max,
            format_mib(overall_max),
            recommendation.region_size_label.value,
        )
        return NodeReport(
            member_name=member_name,
            partition_summaries=summaries,
            overall_max_size_bytes=overall_max,
            recommendation=recommendation,
            elapsed_secs=time.monotonic() - started,
        )
