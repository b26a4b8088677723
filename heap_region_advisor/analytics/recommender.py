"""G1 heap region size recommendation.

Region-based collectors treat any object of at least half a region as
humongous. The largest sampled object therefore drives the region size:
- below 8MB fits comfortably in 16MB regions
- 8MB up to 16MB needs 32MB regions
- 16MB and above is humongous even with the 32MB maximum region size
"""

from heap_region_advisor.models.recommendation import Recommendation
from heap_region_advisor.models.recommendation import RegionSizeLabel
from heap_region_advisor.utils.conversions import bytes_to_mib

SMALL_OBJECT_LIMIT_MB = 8.0
HUMONGOUS_LIMIT_MB = 16.0


def recommend(max_size_bytes: int) -> Recommendation:
    """Map the largest observed object size to a region size recommendation."""
    largest_mb = bytes_to_mib(max_size_bytes)
    if largest_mb < SMALL_OBJECT_LIMIT_MB:
        return Recommendation(
            region_size_label=RegionSizeLabel.REGION_16M,
            reason_text="largest object below 8MB",
            max_size_bytes=max_size_bytes,
        )
    if largest_mb < HUMONGOUS_LIMIT_MB:
        return Recommendation(
            region_size_label=RegionSizeLabel.REGION_32M,
            reason_text="largest object between 8 and 16MB",
            max_size_bytes=max_size_bytes,
        )
    return Recommendation(
        region_size_label=RegionSizeLabel.REGION_32M_WITH_WARNING,
        reason_text="object ≥16MB will be classified oversized by a 32MB-region collector",
        max_size_bytes=max_size_bytes,
    )
