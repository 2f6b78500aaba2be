from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Optional

from procmon.util.time_utils import format_data_point_time


class DataExporter(ABC):
    """Abstract serializer of compiled process data.

    Usage: reset(), add_data_point() for every value, then export().
    """

    @abstractmethod
    def reset(self) -> None:
        pass

    @abstractmethod
    def add_data_point(self, timestamp: datetime, key: str, value: float) -> bool:
        """Returns False if the data point is rejected (e.g. duplicate)"""
        pass

    @abstractmethod
    def export(self) -> Optional[str]:
        pass

    @property
    @abstractmethod
    def extension(self) -> str:
        """File extension including the leading dot"""
        pass


class SeriesExporter(DataExporter):
    """
    Base for exporters that group values per metric.

    Accumulates {metric: {"yyyy-MM-dd HH:mm:ss": value}}. Two data points of
    the same metric falling into the same second are a duplicate.
    """

    def __init__(self) -> None:
        self._data: Dict[str, Dict[str, float]] = {}

    def reset(self) -> None:
        self._data.clear()

    def add_data_point(self, timestamp: datetime, key: str, value: float) -> bool:
        series = self._data.setdefault(key, {})
        time_string = format_data_point_time(timestamp)

        if time_string in series:
            return False

        series[time_string] = value
        return True
