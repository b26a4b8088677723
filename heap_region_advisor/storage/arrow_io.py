"""Arrow/Parquet storage layer for node and cluster reports.

This module handles report persistence, one row per scanned partition.
"""
import logging
from datetime import date
from datetime import datetime
from typing import Any
from typing import Dict
from typing import List
from typing import Optional
from typing import Union

import pyarrow as pa
import pyarrow.parquet as pq
import s3fs

from heap_region_advisor.models.recommendation import ClusterReport
from heap_region_advisor.models.recommendation import NodeReport

from .datasink import IDataSink

logger = logging.getLogger(__name__)

REPORT_SCHEMA = pa.schema(
    [
        pa.field("member_name", pa.string()),
        pa.field("partition_name", pa.string(), nullable=True),
        pa.field("status", pa.string()),
        pa.field("strategy", pa.string(), nullable=True),
        pa.field("total_entries", pa.int64()),
        pa.field("sampled_count", pa.int64()),
        pa.field("failed_count", pa.int64()),
        pa.field("average_size_bytes", pa.float64(), nullable=True),
        pa.field("max_size_bytes", pa.int64(), nullable=True),
        pa.field("max_size_mb", pa.float64(), nullable=True),
        pa.field("largest_identifier", pa.string(), nullable=True),
        pa.field("largest_type", pa.string(), nullable=True),
        pa.field("error_message", pa.string(), nullable=True),
        pa.field("node_max_size_bytes", pa.int64()),
        pa.field("node_region_size_label", pa.string()),
        pa.field("cluster_max_size_bytes", pa.int64(), nullable=True),
        pa.field("cluster_region_size_label", pa.string(), nullable=True),
        pa.field("metrics_collection_dt", pa.date32()),
    ]
)

LOG_SCHEMA = pa.schema(
    [
        pa.field("member_name", pa.string()),
        pa.field("processed_timestamp", pa.timestamp("ms")),
        pa.field("processing_status", pa.string()),
        pa.field("failure_reason", pa.string(), nullable=True),
        pa.field("processed_date", pa.date32()),
    ]
)


def _node_rows(
    report: NodeReport,
    collection_dt: date,
    cluster: Optional[ClusterReport] = None,
) -> List[Dict[str, Any]]:
    common = {
        "member_name": report.member_name,
        "node_max_size_bytes": report.overall_max_size_bytes,
        "node_region_size_label": report.recommendation.region_size_label.value,
        "cluster_max_size_bytes": cluster.cluster_max_size_bytes if cluster else None,
        "cluster_region_size_label": (
            cluster.recommendation.region_size_label.value if cluster else None
        ),
        "metrics_collection_dt": collection_dt,
    }
    if report.failed:
        return [
            {
                **common,
                "partition_name": None,
                "status": "ERROR",
                "strategy": None,
                "total_entries": 0,
                "sampled_count": 0,
                "failed_count": 0,
                "average_size_bytes": None,
                "max_size_bytes": None,
                "max_size_mb": None,
                "largest_identifier": None,
                "largest_type": None,
                "error_message": report.error_message,
            }
        ]
    rows = []
    for summary in report.partition_summaries:
        largest = summary.largest
        rows.append(
            {
                **common,
                "partition_name": summary.partition_name,
                "status": summary.status.value,
                "strategy": summary.plan.strategy.value if summary.plan else None,
                "total_entries": summary.total_entries,
                "sampled_count": summary.sampled_count,
                "failed_count": summary.failed_count,
                "average_size_bytes": summary.average_sampled_size_bytes,
                "max_size_bytes": summary.max_size_bytes,
                "max_size_mb": summary.max_size_mb,
                "largest_identifier": largest.identifier if largest else None,
                "largest_type": largest.type_name if largest else None,
                "error_message": summary.error_message,
            }
        )
    return rows


class ParquetSink(IDataSink):
    """
    A data sink that writes report rows to a Parquet dataset.
    """

    def __init__(self, sink_location: str, log_location: Optional[str] = None):
        """
        Initializes the sink with a target location.
        :param sink_location: The root path for the Parquet dataset (e.g., 's3://my-bucket/my-path/').
        :param log_location: The root path for the Parquet processing logs.
        """
        self.sink_location = sink_location.rstrip("/")
        self.log_location = log_location.rstrip("/") if log_location else ""
        self.filesystem = (
            s3fs.S3FileSystem()
            if self.sink_location.startswith("s3://")
            or self.log_location.startswith("s3://")
            else None
        )

    def _target(self, location: str):
        """Root path and filesystem for a location; s3fs takes bucket/key paths."""
        if location.startswith("s3://"):
            return location[len("s3://") :], self.filesystem
        return location, None

    def to_table(self, data: Union[NodeReport, ClusterReport]) -> pa.Table:
        collection_dt = datetime.now().date()
        if isinstance(data, ClusterReport):
            rows = [
                row
                for node in data.node_reports
                for row in _node_rows(node, collection_dt, cluster=data)
            ]
        elif isinstance(data, NodeReport):
            rows = _node_rows(data, collection_dt)
        else:
            raise TypeError("Data must be a NodeReport or ClusterReport object")

        table_data = {name: [row[name] for row in rows] for name in REPORT_SCHEMA.names}
        return pa.Table.from_pydict(table_data, schema=REPORT_SCHEMA)

    def save(self, data: Union[NodeReport, ClusterReport]) -> None:
        """
        Saves the report to a partitioned Parquet dataset.
        The dataset is partitioned by 'metrics_collection_dt'.
        """
        table = self.to_table(data)
        if table.num_rows == 0:
            logger.info("No report rows to write")
            return

        logger.info(f"Writing {table.num_rows} report rows to {self.sink_location}")
        root_path, filesystem = self._target(self.sink_location)
        pq.write_to_dataset(
            table,
            root_path=root_path,
            filesystem=filesystem,
            partition_cols=["metrics_collection_dt"],
            existing_data_behavior="overwrite_or_ignore",
        )

    def log(self, log_data: Dict[str, Any]) -> None:
        """Log the member analysis status"""
        if not self.log_location:
            return

        log_table_data = {key: [log_data.get(key)] for key in LOG_SCHEMA.names}
        table = pa.Table.from_pydict(log_table_data, schema=LOG_SCHEMA)
        logger.info(f"Writing processing logs to {self.log_location}")
        root_path, filesystem = self._target(self.log_location)
        pq.write_to_dataset(
            table,
            root_path=root_path,
            filesystem=filesystem,
            partition_cols=["processed_date"],
            existing_data_behavior="overwrite_or_ignore",
        )


def processing_log_entry(report: NodeReport) -> Dict[str, Any]:
    """Build the processing-log row for a node report."""
    now = datetime.now()
    now = now.replace(microsecond=now.microsecond - now.microsecond % 1000)
    return {
        "member_name": report.member_name,
        "processed_timestamp": now,
        "processing_status": "FAILED" if report.failed else "SUCCEEDED",
        "failure_reason": report.error_message,
        "processed_date": now.date(),
    }
