"""
Process monitor exceptions.

Errors raised by the recording engine and the export pipeline. Sampling
errors are recovered inside ProcessDataSet.record(); the others reach callers.
"""
from datetime import datetime
from typing import Optional


class ProcmonError(Exception):
    """
    Base exception for all process monitor errors.

    Attributes:
        message: Human-readable error description
        pid: Process ID associated with the error (if applicable)
    """

    def __init__(self, message: str, pid: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.pid = pid

    def __str__(self) -> str:
        if self.pid is not None:
            return f"{self.message} (PID: {self.pid})"
        return self.message


class SamplingError(ProcmonError):
    """An OS query for one metric could not be satisfied, e.g. the process exited mid-read."""

    def __init__(self, message: str, pid: Optional[int] = None, metric: Optional[str] = None) -> None:
        super().__init__(message, pid)
        self.metric = metric


class NotFound(ProcmonError, KeyError):
    """No sample exists at the requested timestamp."""

    def __init__(self, timestamp: datetime, metric: Optional[str] = None) -> None:
        message = f"No sample at {timestamp.isoformat()}"
        if metric:
            message = f"{metric}: {message}"
        super().__init__(message)
        self.timestamp = timestamp
        self.metric = metric

    def __str__(self) -> str:
        return self.message


class InvalidExporter(ProcmonError, ValueError):
    """The requested exporter kind cannot be instantiated."""

    def __init__(self, message: str, kind: object = None) -> None:
        super().__init__(message)
        self.kind = kind
