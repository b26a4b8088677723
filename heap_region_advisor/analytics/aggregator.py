"""Cross-node reduction of node reports into a cluster report."""
from typing import Iterable

import numpy as np

from heap_region_advisor.models.recommendation import ClusterReport
from heap_region_advisor.models.recommendation import NodeReport

from .recommender import recommend


def merge(node_reports: Iterable[NodeReport]) -> ClusterReport:
    """
    Merge node reports. The reduction is a max, so the input order does not
    change the outcome; reports are kept sorted by member name.
    """
    reports = tuple(sorted(node_reports, key=lambda report: report.member_name))
    if not reports:
        return ClusterReport(
            node_reports=(), cluster_max_size_bytes=0, recommendation=recommend(0)
        )

    node_maxima = np.array(
        [report.overall_max_size_bytes for report in reports], dtype=np.int64
    )
    cluster_max = int(node_maxima.max())
    largest_member = reports[int(np.argmax(node_maxima))].member_name

    return ClusterReport(
        node_reports=reports,
        cluster_max_size_bytes=cluster_max,
        recommendation=recommend(cluster_max),
        largest_member=largest_member,
        mean_node_max_bytes=float(np.mean(node_maxima)),
        p95_node_max_bytes=float(np.percentile(node_maxima, 95)),
    )
