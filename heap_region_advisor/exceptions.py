"""Exceptions raised while sampling cache partitions."""


class AdvisorError(Exception):
    """Base class for all heap region advisor errors."""


class EstimationError(AdvisorError):
    """Sizing a single cache value failed. The entry is skipped."""


class DataSourceError(AdvisorError):
    """A cache data source could not be reached or returned a bad response."""
