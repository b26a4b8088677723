# cli.py
import argparse
import json
import sys
from typing import List
from typing import Optional

import urllib3
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from heap_region_advisor.analytics.estimators import get_estimator
from heap_region_advisor.api import analyze_cluster
from heap_region_advisor.api import analyze_partition
from heap_region_advisor.api import summarize_node
from heap_region_advisor.api import top_entries
from heap_region_advisor.collectors.geode_rest import GeodeRestClient
from heap_region_advisor.config.loader import AdvisorConfig
from heap_region_advisor.config.loader import load_config
from heap_region_advisor.config.profiles import PROFILES
from heap_region_advisor.exceptions import AdvisorError
from heap_region_advisor.models.recommendation import ClusterReport
from heap_region_advisor.models.recommendation import NodeReport
from heap_region_advisor.models.recommendation import Recommendation
from heap_region_advisor.models.scan import PartitionSummary
from heap_region_advisor.models.scan import ScanStatus
from heap_region_advisor.utils.conversions import format_bytes
from heap_region_advisor.utils.conversions import format_mib
from heap_region_advisor.utils.logging import setup_logging

console = Console()


def _client(config: AdvisorConfig, base_url: Optional[str] = None) -> GeodeRestClient:
    return GeodeRestClient(
        base_url or config.base_url,
        member_name=None if base_url else config.member_name,
        timeout=config.timeout,
        verify=config.verify_ssl,
    )


def _recommendation_panel(recommendation: Recommendation, title: str) -> Panel:
    rec_table = Table(show_header=False, box=None)
    rec_table.add_column("Metric", style="cyan bold")
    rec_table.add_column("Value", style="green")
    rec_table.add_row(
        "Largest Object",
        f"{format_bytes(recommendation.max_size_bytes)} bytes "
        f"({format_mib(recommendation.max_size_bytes)} MB)",
    )
    style = "red" if recommendation.has_warning else "green"
    rec_table.add_row(
        "Region Size", f"[{style}]{recommendation.region_size_label.value}[/]"
    )
    rec_table.add_row("JVM Option", recommendation.jvm_flag)
    rec_table.add_row("Reason", recommendation.reason_text)
    return Panel(
        rec_table,
        title=title,
        expand=False,
        border_style="red" if recommendation.has_warning else "green",
    )


def _partition_table(summaries: List[PartitionSummary]) -> Table:
    table = Table(
        title="Partitions", show_header=True, header_style="bold magenta"
    )
    table.add_column("Partition", style="cyan")
    table.add_column("Entries", justify="right")
    table.add_column("Sampled", justify="right")
    table.add_column("Strategy")
    table.add_column("Avg (bytes)", justify="right")
    table.add_column("Max (bytes)", justify="right")
    table.add_column("Max (MB)", justify="right")
    table.add_column("Status")

    for summary in summaries:
        if summary.status is ScanStatus.EMPTY:
            continue
        status = (
            f"[red]ERROR: {escape(summary.error_message or '')}[/]"
            if summary.status is ScanStatus.ERROR
            else "[green]SUCCESS[/]"
        )
        table.add_row(
            summary.partition_name,
            format_bytes(summary.total_entries),
            format_bytes(summary.sampled_count),
            summary.plan.strategy.value if summary.plan else "-",
            f"{summary.average_sampled_size_bytes:,.0f}"
            if summary.average_sampled_size_bytes is not None
            else "-",
            format_bytes(summary.max_size_bytes)
            if summary.max_size_bytes is not None
            else "-",
            f"{summary.max_size_mb:.3f}" if summary.max_size_mb is not None else "-",
            status,
        )
    return table


def _entries_table(summary: PartitionSummary) -> Table:
    table = Table(
        title=f"Largest Entries in {summary.partition_name}",
        show_header=True,
        header_style="bold yellow",
    )
    table.add_column("#", justify="right")
    table.add_column("Key", style="cyan")
    table.add_column("Type")
    table.add_column("Size (bytes)", justify="right")
    table.add_column("Size (MB)", justify="right")
    for rank, sample in enumerate(summary.top_k, start=1):
        table.add_row(
            str(rank),
            escape(sample.identifier),
            sample.type_name,
            format_bytes(sample.size_bytes),
            f"{sample.size_mb:.2f}",
        )
    return table


def _print_node_report(report: NodeReport) -> None:
    console.rule(f"[bold magenta]Member: {report.member_name}[/]")
    if report.failed:
        console.print(f"[bold red]Error:[/bold red] {escape(report.error_message)}")
        return
    console.print(_partition_table(list(report.partition_summaries)))
    console.print(
        _recommendation_panel(report.recommendation, "Recommendation Summary")
    )


def _print_partition_summary(summary: PartitionSummary) -> None:
    console.rule(f"[bold magenta]Partition: {summary.partition_name}[/]")
    console.print(_partition_table([summary]))
    if summary.top_k:
        console.print(_entries_table(summary))
    if summary.status is ScanStatus.EMPTY:
        console.print("[yellow]Partition is empty[/]")


def _print_cluster_report(report: ClusterReport) -> None:
    for node in report.node_reports:
        _print_node_report(node)

    grid = Table.grid(expand=True)
    grid.add_column()
    grid.add_column(justify="right")
    grid.add_row("Members:", str(len(report.node_reports)))
    grid.add_row("Largest Object Held By:", str(report.largest_member or "-"))
    if report.mean_node_max_bytes is not None:
        grid.add_row("Mean Node Max (bytes):", f"{report.mean_node_max_bytes:,.0f}")
        grid.add_row("p95 Node Max (bytes):", f"{report.p95_node_max_bytes:,.0f}")
    console.print(Panel(grid, title="Cluster Overview", border_style="blue"))
    console.print(
        _recommendation_panel(report.recommendation, "Cluster Recommendation")
    )


def _print_json(data: dict) -> None:
    console.print_json(json.dumps(data, default=str))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Cache entry size profiler and G1 heap region size advisor"
    )
    parser.add_argument("--config", type=str, help="Path to a YAML config file")
    parser.add_argument(
        "--base-url", type=str, help="Cache member REST base URL (e.g., http://host:7070)"
    )
    parser.add_argument("--member-name", type=str, help="Name to report for the member")
    parser.add_argument(
        "--estimator",
        type=str,
        choices=["deep", "serialized"],
        help="How value sizes are estimated",
    )
    parser.add_argument(
        "--sink-path",
        type=str,
        help="Path to save report parquet files (e.g., s3://bucket/path)",
    )
    parser.add_argument(
        "--log-path",
        type=str,
        help="Path to save processing logs (e.g., s3://bucket/path)",
    )
    parser.add_argument("--timeout", type=int, help="HTTP timeout in seconds")
    parser.add_argument(
        "--insecure",
        action="store_true",
        help="Skip TLS certificate verification",
    )
    parser.add_argument(
        "--json", action="store_true", help="Print the report as JSON"
    )
    parser.add_argument("--log-level", type=str, default="WARNING")

    subparsers = parser.add_subparsers(dest="command", required=True)

    summarize = subparsers.add_parser(
        "summarize", help="Largest object across every region of a member"
    )
    summarize.add_argument("--profile", type=str, choices=list(PROFILES))
    summarize.add_argument("--top-k", type=int)
    summarize.add_argument("--budget", type=int, help="Target sample budget")
    summarize.add_argument("--max-workers", type=int)

    region = subparsers.add_parser(
        "analyze-region", help="Sampled size distribution of one region"
    )
    region.add_argument("region", type=str, help="Region path, e.g. /orders")
    region.add_argument("--profile", type=str, choices=list(PROFILES), default="deep")
    region.add_argument("--top-k", type=int)
    region.add_argument("--budget", type=int, help="Target sample budget")

    top_n = subparsers.add_parser("top-n", help="The N largest entries of a region")
    top_n.add_argument("region", type=str, help="Region path, e.g. /orders")
    top_n.add_argument("--top-n", type=int, default=3)

    cluster = subparsers.add_parser(
        "cluster", help="Analyze several members and merge the results"
    )
    cluster.add_argument(
        "--node",
        type=str,
        action="append",
        dest="nodes",
        required=True,
        help="REST base URL of a member; repeat for each member",
    )
    cluster.add_argument("--profile", type=str, choices=list(PROFILES))
    cluster.add_argument("--budget", type=int, help="Target sample budget")

    return parser


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        config = load_config(args.config).with_overrides(
            base_url=args.base_url,
            member_name=args.member_name,
            estimator=args.estimator,
            sink_path=args.sink_path,
            log_path=args.log_path,
            timeout=args.timeout,
            verify_ssl=False if args.insecure else None,
            profile=getattr(args, "profile", None)
            if args.command in ("summarize", "cluster")
            else None,
            top_k=getattr(args, "top_k", None) if args.command == "summarize" else None,
            target_sample_budget=getattr(args, "budget", None)
            if args.command in ("summarize", "cluster")
            else None,
            max_workers=getattr(args, "max_workers", None),
        )
        if not config.verify_ssl:
            urllib3.disable_warnings()
        estimator = get_estimator(config.estimator)

        if args.command == "summarize":
            with console.status("[bold green]Sampling regions..."):
                report = summarize_node(
                    _client(config),
                    profile=config.profile,
                    top_k=config.top_k,
                    target_sample_budget=config.target_sample_budget,
                    estimator=estimator,
                    max_workers=config.max_workers,
                    sink_path=config.sink_path,
                    log_path=config.log_path,
                )
            if args.json:
                _print_json(report.to_dict())
            else:
                _print_node_report(report)
            if report.failed:
                sys.exit(1)

        elif args.command == "analyze-region":
            with console.status(f"[bold green]Sampling region {args.region}..."):
                summary = analyze_partition(
                    _client(config),
                    args.region,
                    profile=args.profile,
                    top_k=args.top_k,
                    target_sample_budget=args.budget,
                    estimator=estimator,
                )
            if args.json:
                _print_json(summary.to_dict())
            else:
                _print_partition_summary(summary)

        elif args.command == "top-n":
            with console.status(f"[bold green]Sizing entries of {args.region}..."):
                summary = top_entries(
                    _client(config), args.region, top_n=args.top_n, estimator=estimator
                )
            if args.json:
                _print_json(summary.to_dict())
            else:
                _print_partition_summary(summary)
                console.print(
                    f"[bold cyan]Total execution time: {summary.elapsed_secs:.2f} seconds[/]"
                )

        elif args.command == "cluster":
            with console.status("[bold green]Analyzing cluster members..."):
                report = analyze_cluster(
                    [_client(config, node) for node in args.nodes],
                    profile=config.profile,
                    target_sample_budget=config.target_sample_budget,
                    estimator=estimator,
                    sink_path=config.sink_path,
                    log_path=config.log_path,
                )
            if args.json:
                _print_json(report.to_dict())
            else:
                _print_cluster_report(report)

    except (AdvisorError, ValueError, FileNotFoundError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}", style="red")
        sys.exit(1)


if __name__ == "__main__":
    main()
