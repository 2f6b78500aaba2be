"""Per-process CPU and memory recording with file export."""

from procmon.config import ConfigLoader, MonitorConfig
from procmon.consts import AttributeKind, ExporterKind
from procmon.exceptions import InvalidExporter, NotFound, ProcmonError, SamplingError
from procmon.models import CompiledSnapshot, ProcessHandle, PsutilProcessHandle
from procmon.service.attribute import CpuDataSet, MemoryDataSet
from procmon.service.exporter import JsonExporter, find_all, instantiate
from procmon.service.recording import ProcessDataSet, ProcessScheduler
from procmon.service.watcher import ProcessWatcher, WatcherLease
from procmon.session import MonitorSession

__version__ = "0.1.0"

__all__ = [
    "AttributeKind",
    "CompiledSnapshot",
    "ConfigLoader",
    "CpuDataSet",
    "ExporterKind",
    "InvalidExporter",
    "JsonExporter",
    "MemoryDataSet",
    "MonitorConfig",
    "MonitorSession",
    "NotFound",
    "ProcessDataSet",
    "ProcessHandle",
    "ProcessScheduler",
    "ProcessWatcher",
    "ProcmonError",
    "PsutilProcessHandle",
    "SamplingError",
    "WatcherLease",
    "find_all",
    "instantiate",
]
