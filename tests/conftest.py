import subprocess
import sys
import threading
import time
from datetime import datetime, timedelta
from typing import Callable, Iterator, List

import pytest

from procmon.exceptions import SamplingError
from procmon.models.sample import Sample
from procmon.service.attribute.attribute_data_set import AttributeDataSet
from procmon.service.recording.process_scheduler import ProcessScheduler


class FakeProcess:
    """ProcessHandle with scripted readings"""

    def __init__(self, pid: int = 4242, cpu_seconds: float = 0.0, vms: int = 1024):
        self.pid = pid
        self.cpu_seconds = cpu_seconds
        self.vms = vms
        self.exited = False
        self.broken = False

    def name(self) -> str:
        return "fake"

    def has_exited(self) -> bool:
        return self.exited

    def cpu_times_total(self) -> float:
        if self.broken:
            raise SamplingError("gone", pid=self.pid, metric="cpu")
        return self.cpu_seconds

    def virtual_memory_size(self) -> int:
        if self.broken:
            raise SamplingError("gone", pid=self.pid, metric="memory")
        return self.vms


class FlakyDataSet(AttributeDataSet):
    """Attribute set that fails while `failing` is set"""

    kind = "flaky"
    display_name = "Flaky"

    def __init__(self) -> None:
        super().__init__()
        self.failing = False

    def record(self, timestamp, process) -> None:
        if self.failing:
            raise SamplingError("scripted failure", pid=process.pid, metric="flaky")
        with self._lock:
            self._records[timestamp] = Sample(timestamp=timestamp, value=1.0)


class StepClock:
    """Clock advancing by a fixed step on every call"""

    def __init__(self, start: datetime = datetime(2024, 1, 2, 3, 4, 5), step: timedelta = timedelta(seconds=1)):
        self.current = start - step
        self.step = step

    def __call__(self) -> datetime:
        self.current += self.step
        return self.current


def wait_until(predicate: Callable[[], bool], timeout: float = 5.0, interval: float = 0.01) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


class Recorder:
    """Thread-safe event sink"""

    def __init__(self) -> None:
        self.items: List = []
        self._lock = threading.Lock()

    def __call__(self, item) -> None:
        with self._lock:
            self.items.append(item)

    def count(self, item) -> int:
        with self._lock:
            return self.items.count(item)


@pytest.fixture
def fake_process() -> FakeProcess:
    return FakeProcess()


@pytest.fixture
def scheduler() -> Iterator[ProcessScheduler]:
    scheduler = ProcessScheduler(sampling_interval=0.02, idle_interval=0.001)
    yield scheduler
    scheduler.shutdown()


@pytest.fixture
def child_process() -> Iterator[subprocess.Popen]:
    """A Python child that keeps running until killed"""
    process = subprocess.Popen(
        [sys.executable, "-c", "import time\nwhile True: time.sleep(0.05)"],
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )
    yield process
    if process.poll() is None:
        process.kill()
    process.wait()
