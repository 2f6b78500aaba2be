"""
Monitor session.

Wires the watcher, the scheduler and one ProcessDataSet per watched process
from a single MonitorConfig. This is the entry point a display layer uses.
"""
import threading
from pathlib import Path
from typing import Dict, Hashable, List, Optional

from procmon.config.config_loader import ConfigLoader
from procmon.config.monitor_config import MonitorConfig
from procmon.consts.ExporterKind import ExporterKind
from procmon.models.process_handle import ProcessHandle
from procmon.service.attribute.registry import create_attribute_data_sets
from procmon.service.exporter.registry import instantiate
from procmon.service.recording.process_data_set import ProcessDataSet
from procmon.service.recording.process_scheduler import ProcessScheduler
from procmon.service.watcher.process_watcher import ProcessWatcher, WatcherLease
from procmon.util.log_config import configure_package_logging, setup_logger

logger = setup_logger(__name__)


class MonitorSession:

    def __init__(self, config: Optional[MonitorConfig] = None):
        self.config = config or ConfigLoader.default().config_data

        log_file = Path(self.config.log_file) if self.config.log_file else None
        configure_package_logging("procmon", level=self.config.log_level, log_file=log_file)

        self.watcher = ProcessWatcher(poll_interval=self.config.watch_interval)
        self.scheduler = ProcessScheduler.from_config(self.config)
        self._lease = WatcherLease(self.watcher)

        self._lock = threading.Lock()
        self._data_sets: Dict[int, ProcessDataSet] = {}
        self._open = False

    def open(self) -> "MonitorSession":
        with self._lock:
            if self._open:
                return self
            self._open = True
        self._lease.acquire()
        return self

    def close(self) -> None:
        """Stop every recording and, if opened, release the watcher"""
        with self._lock:
            was_open = self._open
            self._open = False
            data_sets = list(self._data_sets.values())
            self._data_sets.clear()

        for data_set in data_sets:
            data_set.stop_recording()
        self.scheduler.shutdown()

        if was_open:
            self._lease.release()

    def __enter__(self) -> "MonitorSession":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def watch(self, process: ProcessHandle) -> ProcessDataSet:
        """
        Start recording the configured metrics of process.

        Returns the existing data set if the process is already watched.
        """
        with self._lock:
            data_set = self._data_sets.get(process.pid)
            if data_set is None:
                data_set = ProcessDataSet(process, scheduler=self.scheduler, export_dir=self.config.export_dir)
                for attribute in create_attribute_data_sets(self.config.attributes):
                    data_set.add_attribute_data_set(attribute)
                self._data_sets[process.pid] = data_set

        # Also restarts a data set whose loop was stopped by a failed tick
        data_set.start_recording()
        return data_set

    def unwatch(self, pid: int) -> bool:
        with self._lock:
            data_set = self._data_sets.pop(pid, None)
        if data_set is None:
            return False
        data_set.stop_recording()
        return True

    def data_set(self, pid: int) -> Optional[ProcessDataSet]:
        with self._lock:
            return self._data_sets.get(pid)

    @property
    def watched_pids(self) -> List[int]:
        with self._lock:
            return list(self._data_sets)

    def export(self, pid: int, kind: Hashable = ExporterKind.JSON) -> Optional[Path]:
        data_set = self.data_set(pid)
        if data_set is None:
            return None
        return data_set.export(instantiate(kind))


if __name__ == "__main__":

    # python3 -m procmon.session

    import os
    import time

    from procmon.models.process_handle import PsutilProcessHandle

    with MonitorSession() as session:
        data_set = session.watch(PsutilProcessHandle.from_pid(os.getpid()))
        time.sleep(3)
        snapshot = data_set.compile()
        logger.info(f"Recorded {len(snapshot)} frame(s): {snapshot.metric_names}")
        path = session.export(os.getpid())
        logger.info(f"Export written to {path}")
