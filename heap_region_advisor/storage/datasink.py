from abc import ABC
from abc import abstractmethod
from typing import Any


class IDataSink(ABC):
    """
    Interface for data sinks that store analysis reports.
    """

    @abstractmethod
    def save(self, data: Any) -> None:
        """Save the given report to the sink."""
        pass

    @abstractmethod
    def log(self, log_data: Any) -> None:
        """Log the member processing status"""
        pass
