"""
Process Data Set Module

Records a fixed set of metrics for one process and turns the recorded frames
into exportable snapshots. Sampling is driven by the shared ProcessScheduler,
or by calling record() directly.
"""
import itertools
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from procmon.consts.AttributeKind import AttributeKind
from procmon.exceptions import NotFound
from procmon.models.compiled_snapshot import CompiledSnapshot
from procmon.models.process_handle import ProcessHandle
from procmon.service.attribute.attribute_data_set import AttributeDataSet
from procmon.service.exporter.data_exporter import DataExporter
from procmon.service.recording.process_scheduler import ProcessScheduler, default_scheduler
from procmon.util.events import EventHook
from procmon.util.file_utils import export_file_path, write_text
from procmon.util.log_config import setup_logger
from procmon.util.time_utils import next_frame_time

logger = setup_logger(__name__)

_dataset_ids = itertools.count()
_export_pool = ThreadPoolExecutor(max_workers=2, thread_name_prefix="export")


class ProcessDataSet:
    """Time series of several metrics for one process.

    A frame (timestamp) is committed only when every attribute data set
    recorded it. on_data_recorded(timestamp) fires synchronously on the thread
    that called record(), which is a scheduler tick thread while recording.
    """

    def __init__(
        self,
        process: ProcessHandle,
        scheduler: Optional[ProcessScheduler] = None,
        export_dir: Union[str, Path, None] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Args:
            process: Handle of the process to record
            scheduler: Scheduler driving record(); defaults to the shared one
            export_dir: Directory for export(); defaults to "<cwd>/exports"
            clock: Source of frame timestamps (local wall time by default)
        """
        self.id = next(_dataset_ids)
        self._process = process
        self._scheduler = scheduler or default_scheduler()
        self.export_dir = export_dir
        self._clock = clock

        self._lock = threading.Lock()
        self._frames: List[datetime] = []
        self._attribute_data_sets: Dict[AttributeKind, AttributeDataSet] = {}

        self.on_data_recorded: EventHook[datetime] = EventHook("data recorded")

    @property
    def process(self) -> ProcessHandle:
        return self._process

    @property
    def attribute_data_sets(self) -> List[AttributeDataSet]:
        with self._lock:
            return list(self._attribute_data_sets.values())

    @property
    def frame_count(self) -> int:
        with self._lock:
            return len(self._frames)

    @property
    def start_time(self) -> Optional[datetime]:
        """Timestamp of the first committed frame"""
        with self._lock:
            return self._frames[0] if self._frames else None

    @property
    def is_recording(self) -> bool:
        return self._scheduler.is_registered(self._process.pid, self.id)

    def add_attribute_data_set(self, data_set: AttributeDataSet) -> bool:
        """
        Register a metric. Call before recording starts.

        Returns:
            False if a data set of the same kind is already registered
        """
        with self._lock:
            if data_set.kind in self._attribute_data_sets:
                return False

            data_set.clear()
            self._attribute_data_sets[data_set.kind] = data_set
            return True

    def start_recording(self) -> bool:
        """Returns False if this data set is already recording"""
        started = self._scheduler.register(self._process, self.id, self.record)
        if started:
            logger.info(f"Data set {self.id} started recording PID {self._process.pid}")
        return started

    def stop_recording(self) -> bool:
        """Returns False if this data set was not recording"""
        stopped = self._scheduler.unregister(self._process.pid, self.id)
        if stopped:
            logger.info(f"Data set {self.id} stopped recording PID {self._process.pid}")
        return stopped

    def record(self) -> bool:
        """
        Record one frame on every attribute data set.

        Returns:
            True if a frame was committed or the process already exited,
            False if there is nothing to record or a metric could not be read
            (no partial frame is kept in that case)
        """
        if self._process.has_exited():
            return True

        with self._lock:
            if not self._attribute_data_sets:
                return False

            now = next_frame_time(self._clock(), self._frames[-1] if self._frames else None)
            recorded: List[AttributeDataSet] = []

            for data_set in self._attribute_data_sets.values():
                try:
                    data_set.record(now, self._process)
                except Exception as e:
                    logger.warning(f"PID {self._process.pid}: failed to record {data_set.display_name}: {e}")
                    for done in recorded:
                        done.remove(now)
                    return False

                recorded.append(data_set)

            self._frames.append(now)

        self.on_data_recorded.fire(now)
        return True

    def clear(self) -> None:
        with self._lock:
            self._frames.clear()
            for data_set in self._attribute_data_sets.values():
                data_set.clear()

    def compile(self) -> CompiledSnapshot:
        """
        Build {timestamp: {metric name: value}} for every committed frame.

        A metric without a sample at some frame (e.g. removed afterwards) is
        left out of that frame.
        """
        with self._lock:
            frames: Dict[datetime, Dict[str, float]] = {}
            for frame_time in self._frames:
                frame: Dict[str, float] = {}
                for data_set in self._attribute_data_sets.values():
                    try:
                        frame[data_set.display_name] = data_set.value(frame_time)
                    except NotFound:
                        continue

                frames[frame_time] = frame

        return CompiledSnapshot(frames)

    def export(self, exporter: DataExporter) -> Optional[Path]:
        """
        Write the compiled data through exporter.

        Returns:
            Path of the written file, or None if nothing was recorded or the
            exporter rejected a data point

        Raises:
            OSError: If the file cannot be written
        """
        data = self._exported_data(exporter)
        if data is None:
            return None

        path = self._export_path(exporter.extension)
        if path is None:
            return None

        write_text(path, data)
        logger.info(f"Exported {self.frame_count} frame(s) of PID {self._process.pid} to {path}")
        return path

    def export_async(self, exporter: DataExporter) -> "Future[Optional[Path]]":
        """export() on a worker thread; errors surface through the future"""
        return _export_pool.submit(self.export, exporter)

    def _exported_data(self, exporter: DataExporter) -> Optional[str]:
        exporter.reset()
        try:
            for timestamp, key, value in self.compile().to_rows():
                if not exporter.add_data_point(timestamp, key, value):
                    logger.warning(f"{type(exporter).__name__} rejected data point {key} @ {timestamp}")
                    return None

            return exporter.export()
        finally:
            exporter.reset()

    def _export_path(self, extension: str) -> Optional[Path]:
        start_time = self.start_time
        if start_time is None:
            return None

        return export_file_path(start_time, extension, self.export_dir)

    def __repr__(self) -> str:
        return f"ProcessDataSet(id={self.id}, pid={self._process.pid}, frames={self.frame_count})"
