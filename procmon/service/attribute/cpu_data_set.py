from datetime import datetime
from typing import Optional

import psutil

from procmon.consts.AttributeKind import AttributeKind
from procmon.models.process_handle import ProcessHandle
from procmon.models.sample import CpuSample
from procmon.service.attribute.attribute_data_set import AttributeDataSet


class CpuDataSet(AttributeDataSet):
    """
    CPU utilization in percent of the whole machine.

    Each value is the processor time consumed since the previous sample
    divided by the wall time elapsed across all cores:

        value = (delta_cpu_ms / (core_count * delta_wall_ms)) * 100

    The first sample has no predecessor and uses itself as baseline, so its
    value is 0.
    """

    kind = AttributeKind.CPU
    display_name = "CPU usage"

    def __init__(self, core_count: Optional[int] = None) -> None:
        super().__init__()
        self.core_count = core_count or psutil.cpu_count() or 1
        self._last_recorded: Optional[datetime] = None

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
            self._last_recorded = None

    def remove(self, timestamp: datetime) -> bool:
        with self._lock:
            removed = self._records.pop(timestamp, None) is not None
            if timestamp == self._last_recorded:
                self._last_recorded = max(self._records, default=None)
            return removed

    def record(self, timestamp: datetime, process: ProcessHandle) -> None:
        # Read outside the lock, raises SamplingError if the process is gone
        usage = process.cpu_times_total()

        with self._lock:
            if self._last_recorded is not None:
                last = self._records[self._last_recorded]
                last_time, last_usage = last.timestamp, last.usage
            else:
                last_time, last_usage = timestamp, usage

            used_ms = (usage - last_usage) * 1000.0
            elapsed_ms = (timestamp - last_time).total_seconds() * 1000.0

            if elapsed_ms > 0:
                value = (used_ms / (self.core_count * elapsed_ms)) * 100.0
            else:
                value = 0.0

            self._records[timestamp] = CpuSample(timestamp=timestamp, value=value, usage=usage)
            if self._last_recorded is None or timestamp > self._last_recorded:
                self._last_recorded = timestamp

    @property
    def last_recorded(self) -> Optional[datetime]:
        with self._lock:
            return self._last_recorded
