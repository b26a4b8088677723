"""Plain text rendering of node, cluster and top-N reports."""
from typing import List

from heap_region_advisor.models.recommendation import ClusterReport
from heap_region_advisor.models.recommendation import NodeReport
from heap_region_advisor.models.recommendation import Recommendation
from heap_region_advisor.models.scan import PartitionSummary
from heap_region_advisor.models.scan import ScanStatus
from heap_region_advisor.utils.conversions import bytes_to_mib
from heap_region_advisor.utils.conversions import format_bytes
from heap_region_advisor.utils.conversions import format_mib

RULE = "=" * 80
THIN_RULE = "-" * 80


def format_recommendation(recommendation: Recommendation) -> List[str]:
    lines = [
        f"LARGEST OBJECT: {format_bytes(recommendation.max_size_bytes)} bytes "
        f"({format_mib(recommendation.max_size_bytes)} MB)"
    ]
    if recommendation.has_warning:
        lines.append("WARNING: Object > 16MB will be humongous with 32M regions!")
    lines.append(
        f"RECOMMENDATION: Use {recommendation.jvm_flag} ({recommendation.reason_text})"
    )
    return lines


def format_partition_line(summary: PartitionSummary) -> str:
    name = summary.partition_name
    if summary.status is ScanStatus.ERROR:
        return f"{name}: ERROR - {summary.error_message}"
    if summary.status is ScanStatus.EMPTY:
        return f"{name}: empty"
    if summary.max_size_bytes is None:
        return (
            f"{name} ({format_bytes(summary.total_entries)} entries): "
            "no values sampled"
        )
    return (
        f"{name} ({format_bytes(summary.total_entries)} entries, "
        f"{format_bytes(summary.sampled_count)} sampled): "
        f"max={format_bytes(summary.max_size_bytes)} bytes "
        f"({format_mib(summary.max_size_bytes)} MB), "
        f"avg={summary.average_sampled_size_bytes:,.0f} bytes "
        f"({format_mib(summary.average_sampled_size_bytes)} MB)"
    )


def format_node_report(report: NodeReport) -> List[str]:
    """Render a node report as the lines sent back to the operator."""
    lines = [f"Analyzing on member: {report.member_name}", ""]
    if report.failed:
        lines.append(f"Error on member {report.member_name}: {report.error_message}")
        return lines
    lines.extend(
        format_partition_line(summary)
        for summary in report.partition_summaries
        if summary.status is not ScanStatus.EMPTY
    )
    lines.append("")
    lines.extend(format_recommendation(report.recommendation))
    return lines


def format_cluster_report(report: ClusterReport) -> List[str]:
    lines = [f"Cluster members analyzed: {len(report.node_reports)}", ""]
    for node in report.node_reports:
        status = f"ERROR - {node.error_message}" if node.failed else "ok"
        lines.append(
            f"{node.member_name}: max={format_bytes(node.overall_max_size_bytes)} bytes "
            f"({format_mib(node.overall_max_size_bytes)} MB) [{status}]"
        )
    lines.append("")
    if report.largest_member:
        lines.append(f"Largest object held by member: {report.largest_member}")
    lines.extend(format_recommendation(report.recommendation))
    return lines


def format_top_entries(summary: PartitionSummary, member_name: str, top_n: int) -> str:
    """Render the top-N block: rank, key and size of each entry plus totals."""
    lines = [
        "",
        RULE,
        f"SUMMARY: Top {top_n} largest entries in region "
        f"'{summary.partition_name}' on member '{member_name}'",
        RULE,
    ]
    total_size = 0
    for rank, sample in enumerate(summary.top_k, start=1):
        total_size += sample.size_bytes
        lines.append(f"#{rank} - Key: {sample.identifier} ({sample.type_name})")
        lines.append(
            f"     Size: {format_bytes(sample.size_bytes)} bytes "
            f"({bytes_to_mib(sample.size_bytes):.2f} MB)"
        )
        lines.append("")
    lines.append(THIN_RULE)
    lines.append(
        f"Total size of top {len(summary.top_k)} entries: {format_bytes(total_size)} "
        f"bytes ({bytes_to_mib(total_size):.2f} MB)"
    )
    lines.append(
        f"Total execution time: {summary.elapsed_secs * 1000:,.0f} ms "
        f"({summary.elapsed_secs:.2f} seconds)"
    )
    lines.append(RULE)
    return "\n".join(lines)
