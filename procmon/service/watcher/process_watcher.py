"""
Process Watcher Module

Polls the OS process table in a background thread and reports processes that
appear and disappear. One ProcessWatcher object owns at most one loop thread;
the application creates it once and hands it to whoever needs the events.
"""
import threading
from typing import Callable, Dict, Iterable, List, Optional

import psutil

from procmon.models.process_handle import ProcessHandle, PsutilProcessHandle
from procmon.util.events import EventHook
from procmon.util.log_config import setup_logger

logger = setup_logger(__name__)

DEFAULT_POLL_INTERVAL = 0.1  # seconds


def _attach(pid: int) -> Optional[ProcessHandle]:
    try:
        return PsutilProcessHandle.from_pid(pid)
    except psutil.NoSuchProcess:
        # Exited between enumeration and attach
        return None


class ProcessWatcher:
    """Reports new and stopped processes by diffing the process table.

    Events (both fired synchronously on the watcher thread, handlers must
    return quickly since a slow handler delays the next poll):

        on_new_process(handle)    a PID was seen for the first time
        on_process_stopped(pid)   a previously seen PID is gone
    """

    def __init__(
        self,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        list_pids: Callable[[], Iterable[int]] = psutil.pids,
        attach: Callable[[int], Optional[ProcessHandle]] = _attach,
    ):
        """
        Initialize the watcher (does not start it).

        Args:
            poll_interval: Seconds between two process table snapshots
            list_pids: Returns the PIDs currently in the process table
            attach: Builds a handle for a PID, or None if it already exited
        """
        self.poll_interval = poll_interval
        self._list_pids = list_pids
        self._attach = attach

        self._lock = threading.Lock()
        self._known: Dict[int, ProcessHandle] = {}
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

        self.on_new_process: EventHook[ProcessHandle] = EventHook("new process")
        self.on_process_stopped: EventHook[int] = EventHook("process stopped")

    @property
    def is_watching(self) -> bool:
        with self._lock:
            return self._thread is not None

    @property
    def known_processes(self) -> List[ProcessHandle]:
        with self._lock:
            return list(self._known.values())

    def start_watching(self) -> bool:
        """
        Start the watcher thread.

        Returns:
            False if the watcher is already running, True otherwise
        """
        with self._lock:
            if self._thread is not None:
                return False

            self._stop_event.clear()
            self._thread = threading.Thread(target=self._watch_loop, name="Process watcher", daemon=True)
            self._thread.start()

        logger.info(f"Process watcher started (interval={self.poll_interval}s)")
        return True

    def stop_watching(self) -> bool:
        """
        Stop the watcher thread and wait for it to exit.

        Blocks for at most one in-flight poll. When called from an event
        handler the loop is only signalled, since the thread cannot join itself.

        Returns:
            False if the watcher was not running, True otherwise
        """
        with self._lock:
            thread = self._thread
            if thread is None:
                return False

        self._stop_event.set()
        if thread is not threading.current_thread():
            thread.join()

        logger.info("Process watcher stopped")
        return True

    def _watch_loop(self):
        """Main polling loop (runs in background thread)"""
        try:
            while True:
                try:
                    self._poll()
                except psutil.Error as e:
                    logger.warning(f"Process table poll failed: {e}")

                if self._stop_event.wait(self.poll_interval):
                    break
        finally:
            with self._lock:
                self._thread = None

    def _poll(self):
        current = set(self._list_pids())

        # Only this thread mutates the known set, so the diff stays valid
        # after the lock is released for event delivery
        with self._lock:
            known = set(self._known)

        for pid in sorted(current - known):
            handle = self._attach(pid)
            if handle is None:
                continue

            self.on_new_process.fire(handle)
            with self._lock:
                self._known[pid] = handle

        for pid in sorted(known - current):
            self.on_process_stopped.fire(pid)
            with self._lock:
                del self._known[pid]


class WatcherLease:
    """Reference-counted scoped use of a ProcessWatcher.

    The first acquire() starts the watcher, the matching last release() stops
    it. Works as a context manager:

        with lease:
            ...
    """

    def __init__(self, watcher: ProcessWatcher):
        self.watcher = watcher
        self._holders = 0
        self._lock = threading.Lock()

    @property
    def holders(self) -> int:
        with self._lock:
            return self._holders

    def acquire(self) -> "WatcherLease":
        with self._lock:
            if self._holders == 0:
                self.watcher.start_watching()
            self._holders += 1
        return self

    def release(self) -> None:
        """
        Raises:
            RuntimeError: If released more often than acquired
        """
        with self._lock:
            if self._holders == 0:
                raise RuntimeError("WatcherLease released more times than acquired")
            self._holders -= 1
            if self._holders == 0:
                self.watcher.stop_watching()

    def __enter__(self) -> ProcessWatcher:
        self.acquire()
        return self.watcher

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


if __name__ == "__main__":

    # python3 -m procmon.service.watcher.process_watcher

    import time

    watcher = ProcessWatcher()
    watcher.on_new_process.subscribe(lambda handle: logger.info(f"+ {handle.pid} {handle.name()}"))
    watcher.on_process_stopped.subscribe(lambda pid: logger.info(f"- {pid}"))

    with WatcherLease(watcher):
        time.sleep(5)
