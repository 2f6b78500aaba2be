from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Sample:
    """Single metric reading of one process"""
    timestamp: datetime
    value: float


@dataclass(frozen=True)
class CpuSample(Sample):
    """CPU reading, keeps the raw cumulative processor time for the next delta"""
    usage: float = 0.0  # Cumulative processor time in seconds
