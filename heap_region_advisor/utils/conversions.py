"""Unit conversion helpers for byte sizes.

This module provides:
- Bytes to MiB conversion used by the recommendation thresholds
- Human readable byte formatting for reports
"""

BYTES_PER_MIB = 1024 * 1024


def bytes_to_mib(size_bytes: float) -> float:
    """Convert a byte count to MiB (1 MiB = 1048576 bytes)."""
    return size_bytes / float(BYTES_PER_MIB)


def format_bytes(size_bytes: int) -> str:
    """Format a byte count with thousands separators, e.g. 1,048,576."""
    return f"{size_bytes:,}"


def format_mib(size_bytes: float, precision: int = 3) -> str:
    return f"{bytes_to_mib(size_bytes):.{precision}f}"
