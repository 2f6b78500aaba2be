import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List

from procmon.consts.AttributeKind import AttributeKind
from procmon.exceptions import NotFound
from procmon.models.process_handle import ProcessHandle
from procmon.models.sample import Sample


class AttributeDataSet(ABC):
    """Abstract time series of one metric for one process.

    Subclasses implement record(). Samples are keyed by timestamp, so a
    timestamp appears at most once. Each set guards its table with its own
    lock and never acquires another lock while holding it.
    """

    kind: AttributeKind
    display_name: str

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: Dict[datetime, Sample] = {}

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def remove(self, timestamp: datetime) -> bool:
        """Delete the sample at timestamp. Returns False if there was none."""
        with self._lock:
            return self._records.pop(timestamp, None) is not None

    @abstractmethod
    def record(self, timestamp: datetime, process: ProcessHandle) -> None:
        """
        Sample the process and store the reading under timestamp.

        Raises:
            SamplingError: If the OS query cannot be satisfied
        """
        pass

    def value(self, timestamp: datetime) -> float:
        """
        Raises:
            NotFound: If no sample exists at timestamp
        """
        with self._lock:
            sample = self._records.get(timestamp)
        if sample is None:
            raise NotFound(timestamp, metric=self.display_name)
        return sample.value

    def __getitem__(self, timestamp: datetime) -> float:
        return self.value(timestamp)

    def __contains__(self, timestamp: object) -> bool:
        with self._lock:
            return timestamp in self._records

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def timestamps(self) -> List[datetime]:
        with self._lock:
            return sorted(self._records)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(samples={len(self)})"
