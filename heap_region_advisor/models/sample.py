from dataclasses import asdict
from dataclasses import dataclass
from typing import Any
from typing import Dict

from heap_region_advisor.utils.conversions import bytes_to_mib


@dataclass(frozen=True)
class Sample:
    """One examined cache entry: its key, value type and estimated deep size."""

    identifier: str
    type_name: str
    size_bytes: int

    @property
    def size_mb(self) -> float:
        return bytes_to_mib(self.size_bytes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data["size_mb"] = self.size_mb
        return data
