"""
Per-process sampling scheduler.

Runs one background loop per PID. Every ProcessDataSet recording that PID
registers its record callback here, and each tick runs all callbacks for the
PID concurrently and waits for them before sleeping until the next tick.
"""
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from procmon.models.process_handle import ProcessHandle
from procmon.util.log_config import setup_logger

logger = setup_logger(__name__)

DEFAULT_SAMPLING_INTERVAL = 0.5  # seconds between ticks while recording
DEFAULT_IDLE_INTERVAL = 0.001  # seconds between checks while no callback is attached

RecordCallback = Callable[[], bool]


@dataclass
class SchedulerEntry:
    """Scheduler state of one PID"""
    process: ProcessHandle
    callbacks: Dict[int, RecordCallback] = field(default_factory=dict)
    thread: Optional[threading.Thread] = None
    stop_event: threading.Event = field(default_factory=threading.Event)


class ProcessScheduler:
    """Process-keyed table of sampling loops.

    A single lock guards the table of every PID, so callbacks can be added or
    removed from any thread while a tick is running. Callbacks are copied out
    under the lock and executed without it; they may call register() and
    unregister() themselves.

    If any callback of a tick returns False or raises, the loop of that PID
    ends and its entry is dropped. Data sets must register again to resume.
    """

    def __init__(
        self,
        sampling_interval: float = DEFAULT_SAMPLING_INTERVAL,
        idle_interval: float = DEFAULT_IDLE_INTERVAL,
    ):
        self.sampling_interval = sampling_interval
        self.idle_interval = idle_interval
        self._lock = threading.Lock()
        self._entries: Dict[int, SchedulerEntry] = {}

    @classmethod
    def from_config(cls, config) -> "ProcessScheduler":
        return cls(sampling_interval=config.sampling_interval, idle_interval=config.idle_interval)

    def register(self, process: ProcessHandle, dataset_id: int, callback: RecordCallback) -> bool:
        """
        Attach a record callback to the loop of process, starting the loop if needed.

        Returns:
            False if dataset_id is already registered for this process
        """
        pid = process.pid
        with self._lock:
            entry = self._entries.get(pid)
            if entry is None:
                entry = self._start_entry(process)
            elif dataset_id in entry.callbacks:
                return False

            entry.callbacks[dataset_id] = callback

        logger.debug(f"Data set {dataset_id} attached to PID {pid}")
        return True

    def unregister(self, pid: int, dataset_id: int) -> bool:
        """
        Detach a record callback. The loop of pid exits after its next tick
        once no callback is left.

        Returns:
            False if dataset_id was not registered for pid
        """
        with self._lock:
            entry = self._entries.get(pid)
            if entry is None or dataset_id not in entry.callbacks:
                return False

            del entry.callbacks[dataset_id]

        logger.debug(f"Data set {dataset_id} detached from PID {pid}")
        return True

    def is_registered(self, pid: int, dataset_id: int) -> bool:
        with self._lock:
            entry = self._entries.get(pid)
            return entry is not None and dataset_id in entry.callbacks

    def is_scheduled(self, pid: int) -> bool:
        with self._lock:
            return pid in self._entries

    def callback_count(self, pid: int) -> int:
        with self._lock:
            entry = self._entries.get(pid)
            return len(entry.callbacks) if entry else 0

    def scheduled_pids(self) -> List[int]:
        with self._lock:
            return list(self._entries)

    def shutdown(self) -> None:
        """
        Stop every loop and wait for them to exit.

        Must not be called from inside a record callback, since the loop
        waits for its callbacks before it can observe the stop request.
        """
        with self._lock:
            entries = list(self._entries.values())
            self._entries.clear()

        for entry in entries:
            entry.stop_event.set()
        for entry in entries:
            if entry.thread is not None and entry.thread is not threading.current_thread():
                entry.thread.join()

        if entries:
            logger.info(f"Scheduler shut down ({len(entries)} loop(s) stopped)")

    def _start_entry(self, process: ProcessHandle) -> SchedulerEntry:
        # Caller holds self._lock
        entry = SchedulerEntry(process=process)
        entry.thread = threading.Thread(
            target=self._run,
            args=(entry,),
            name=f"PID {process.pid} recorder",
            daemon=True,
        )
        self._entries[process.pid] = entry
        entry.thread.start()
        logger.info(f"Recording loop started for PID {process.pid}")
        return entry

    def _drop_entry(self, entry: SchedulerEntry) -> None:
        # Caller holds self._lock. A newer entry for the same PID is left alone.
        pid = entry.process.pid
        if self._entries.get(pid) is entry:
            del self._entries[pid]

    def _run(self, entry: SchedulerEntry) -> None:
        """Main loop of one PID (runs in background thread)"""
        pid = entry.process.pid
        recording = False

        with ThreadPoolExecutor(thread_name_prefix=f"PID {pid} tick") as pool:
            try:
                while not entry.stop_event.is_set():
                    if recording:
                        with self._lock:
                            if not entry.callbacks:
                                # Dropped under the same lock so no register() can slip in
                                self._drop_entry(entry)
                                logger.info(f"Recording loop for PID {pid} finished (no data sets left)")
                                return
                            callbacks = list(entry.callbacks.items())

                        if not self._tick(pool, pid, callbacks):
                            with self._lock:
                                self._drop_entry(entry)
                            logger.error(f"Recording loop for PID {pid} stopped: one or more data sets failed to record")
                            return

                        interval = self.sampling_interval
                    else:
                        with self._lock:
                            recording = bool(entry.callbacks)
                        interval = 0 if recording else self.idle_interval

                    if entry.stop_event.wait(interval):
                        break
            finally:
                with self._lock:
                    self._drop_entry(entry)

    def _tick(self, pool: ThreadPoolExecutor, pid: int, callbacks: List) -> bool:
        futures = {pool.submit(callback): dataset_id for dataset_id, callback in callbacks}
        wait(futures)

        succeeded = True
        for future, dataset_id in futures.items():
            error = future.exception()
            if error is not None:
                logger.error(f"Data set {dataset_id} of PID {pid} raised: {error!r}")
                succeeded = False
            elif not future.result():
                logger.warning(f"Data set {dataset_id} of PID {pid} failed to record")
                succeeded = False

        logger.debug(f"Tick for PID {pid}: {len(futures)} data set(s), ok={succeeded}")
        return succeeded


_default_scheduler: Optional[ProcessScheduler] = None
_default_scheduler_lock = threading.Lock()


def default_scheduler() -> ProcessScheduler:
    """Scheduler shared by data sets that are not given one explicitly"""
    global _default_scheduler
    with _default_scheduler_lock:
        if _default_scheduler is None:
            _default_scheduler = ProcessScheduler()
        return _default_scheduler
