"""
Process handles.

The recording engine only reads processes through the small ProcessHandle
protocol. PsutilProcessHandle is the implementation backed by psutil; tests
and embedding applications may supply their own.
"""
from typing import Protocol, runtime_checkable

import psutil

from procmon.exceptions import SamplingError


@runtime_checkable
class ProcessHandle(Protocol):
    """Read-only view of a live OS process"""

    @property
    def pid(self) -> int:
        ...

    def name(self) -> str:
        ...

    def has_exited(self) -> bool:
        ...

    def cpu_times_total(self) -> float:
        """Cumulative processor time (user + system) in seconds"""
        ...

    def virtual_memory_size(self) -> int:
        """Virtual memory size in bytes"""
        ...


class PsutilProcessHandle:
    """ProcessHandle backed by a psutil.Process"""

    def __init__(self, process: psutil.Process):
        self._process = process
        self._pid = process.pid

    @classmethod
    def from_pid(cls, pid: int) -> "PsutilProcessHandle":
        """
        Attach to a running process.

        Raises:
            psutil.NoSuchProcess: If no process with this PID exists
        """
        return cls(psutil.Process(pid))

    @property
    def pid(self) -> int:
        return self._pid

    @property
    def process(self) -> psutil.Process:
        return self._process

    def name(self) -> str:
        try:
            return self._process.name()
        except psutil.Error:
            return f"<{self._pid}>"

    def has_exited(self) -> bool:
        # is_running() also guards against PID reuse
        if not self._process.is_running():
            return True
        try:
            return self._process.status() == psutil.STATUS_ZOMBIE
        except psutil.NoSuchProcess:
            return True
        except psutil.AccessDenied:
            return False

    def cpu_times_total(self) -> float:
        try:
            times = self._process.cpu_times()
        except psutil.Error as e:
            raise SamplingError(f"Could not read processor time: {e}", pid=self._pid, metric="cpu") from e
        return times.user + times.system

    def virtual_memory_size(self) -> int:
        try:
            return self._process.memory_info().vms
        except psutil.Error as e:
            raise SamplingError(f"Could not read memory info: {e}", pid=self._pid, metric="memory") from e

    def __repr__(self) -> str:
        return f"PsutilProcessHandle(pid={self._pid})"
