"""Partition (cache region) descriptors and hierarchy helpers."""
from dataclasses import dataclass
from dataclasses import field
from typing import Dict
from typing import Iterable
from typing import List
from typing import Tuple


@dataclass(frozen=True)
class Partition:
    """
    A named subdivision of the cache. Identity is the full path; nested
    partitions are carried in ``children`` but do not take part in equality.
    """

    name: str
    full_path: str
    children: Tuple["Partition", ...] = field(default=(), compare=False)


def normalize_path(path: str) -> str:
    """Normalize a region path to the ``/parent/child`` form."""
    return "/" + path.strip("/")


def parent_path(path: str) -> str:
    return path.rsplit("/", 1)[0]


def build_partition_tree(paths: Iterable[str]) -> List[Partition]:
    """
    Build the partition hierarchy from a flat collection of full paths.

    A path whose parent is not present in the collection becomes a root.
    """
    known = {normalize_path(path) for path in paths}
    normalized = sorted(known)
    children_of: Dict[str, List[str]] = {}
    roots = []
    for path in normalized:
        parent = parent_path(path)
        if parent in known:
            children_of.setdefault(parent, []).append(path)
        else:
            roots.append(path)

    def build(path: str) -> Partition:
        return Partition(
            name=path.rsplit("/", 1)[1],
            full_path=path,
            children=tuple(build(child) for child in children_of.get(path, [])),
        )

    return [build(root) for root in roots]
