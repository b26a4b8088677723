import json
from typing import List
from typing import Optional

from mcp.server.fastmcp import FastMCP

from heap_region_advisor.analytics.estimators import get_estimator
from heap_region_advisor.api import analyze_cluster
from heap_region_advisor.api import analyze_partition
from heap_region_advisor.api import summarize_node
from heap_region_advisor.collectors.geode_rest import GeodeRestClient

# Initialize FastMCP server
mcp = FastMCP("heap-region-advisor")


def _get_client(base_url: Optional[str] = None) -> GeodeRestClient:
    """Helper to get a GeodeRestClient instance."""
    url = base_url or "http://localhost:7070"
    return GeodeRestClient(url)


@mcp.tool()
def summarize_cache_node(
    base_url: Optional[str] = None,
    profile: str = "summary",
    estimator: str = "deep",
) -> str:
    """
    Find the largest object across all regions of a cache member and recommend
    a G1 heap region size.

    Args:
        base_url: REST base URL of the cache member. Defaults to http://localhost:7070.
        profile: Scan profile: 'summary' (quick), 'deep' or 'top-n'.
        estimator: 'deep' (object graph size) or 'serialized' (wire size).
    """
    try:
        report = summarize_node(
            _get_client(base_url), profile=profile, estimator=get_estimator(estimator)
        )
        return json.dumps(report.to_dict(), indent=2)
    except Exception as e:
        return f"Error summarizing cache node: {str(e)}"


@mcp.tool()
def analyze_cache_region(
    region: str,
    base_url: Optional[str] = None,
    top_k: int = 10,
    estimator: str = "deep",
) -> str:
    """
    Sample one region: entry count, average size and the largest entries.

    Args:
        region: Region path, e.g. /orders.
        base_url: REST base URL of the cache member. Defaults to http://localhost:7070.
        top_k: Number of largest entries to return.
        estimator: 'deep' (object graph size) or 'serialized' (wire size).
    """
    try:
        summary = analyze_partition(
            _get_client(base_url),
            region,
            top_k=top_k,
            estimator=get_estimator(estimator),
        )
        return json.dumps(summary.to_dict(), indent=2)
    except Exception as e:
        return f"Error analyzing region: {str(e)}"


@mcp.tool()
def summarize_cache_cluster(
    base_urls: List[str],
    profile: str = "summary",
    estimator: str = "deep",
) -> str:
    """
    Analyze several cache members and merge their results into one
    cluster-wide recommendation.

    Args:
        base_urls: REST base URL of every member to analyze.
        profile: Scan profile: 'summary' (quick), 'deep' or 'top-n'.
        estimator: 'deep' (object graph size) or 'serialized' (wire size).
    """
    try:
        report = analyze_cluster(
            [_get_client(url) for url in base_urls],
            profile=profile,
            estimator=get_estimator(estimator),
        )
        return json.dumps(report.to_dict(), indent=2)
    except Exception as e:
        return f"Error summarizing cluster: {str(e)}"


def main():
    mcp.run()


if __name__ == "__main__":
    main()
