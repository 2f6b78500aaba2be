from datetime import datetime

from procmon.consts.AttributeKind import AttributeKind
from procmon.models.process_handle import ProcessHandle
from procmon.models.sample import Sample
from procmon.service.attribute.attribute_data_set import AttributeDataSet


class MemoryDataSet(AttributeDataSet):
    """Virtual memory size in bytes, recorded verbatim"""

    kind = AttributeKind.MEMORY
    display_name = "Memory usage"

    def record(self, timestamp: datetime, process: ProcessHandle) -> None:
        value = float(process.virtual_memory_size())
        with self._lock:
            # Re-recording a timestamp overwrites it
            self._records[timestamp] = Sample(timestamp=timestamp, value=value)
