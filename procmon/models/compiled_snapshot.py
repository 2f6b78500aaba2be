"""Read-only export of a process data set's committed frames."""

from datetime import datetime
from types import MappingProxyType
from collections.abc import Mapping
from typing import Dict, Iterator, List, Tuple


class CompiledSnapshot(Mapping):
    """
    Immutable mapping: committed frame timestamp -> {metric name -> value}.

    Frames iterate in commit order. Snapshots are built on demand by
    ProcessDataSet.compile() and never stored by the data set.
    """

    def __init__(self, frames: Dict[datetime, Dict[str, float]]):
        self._frames = {
            timestamp: MappingProxyType(dict(frame))
            for timestamp, frame in frames.items()
        }

    def __getitem__(self, timestamp: datetime) -> Mapping[str, float]:
        return self._frames[timestamp]

    def __iter__(self) -> Iterator[datetime]:
        return iter(self._frames)

    def __len__(self) -> int:
        return len(self._frames)

    @property
    def timestamps(self) -> List[datetime]:
        return list(self._frames)

    @property
    def metric_names(self) -> List[str]:
        """Metric names in first-seen order"""
        names: Dict[str, None] = {}
        for frame in self._frames.values():
            for name in frame:
                names.setdefault(name)
        return list(names)

    def series(self, metric: str) -> List[Tuple[datetime, float]]:
        """(timestamp, value) pairs of one metric, skipping frames without it"""
        return [
            (timestamp, frame[metric])
            for timestamp, frame in self._frames.items()
            if metric in frame
        ]

    def to_rows(self) -> Iterator[Tuple[datetime, str, float]]:
        """Every (timestamp, metric, value) triple in commit order"""
        for timestamp, frame in self._frames.items():
            for metric, value in frame.items():
                yield timestamp, metric, value

    def __repr__(self) -> str:
        return f"CompiledSnapshot(frames={len(self._frames)}, metrics={self.metric_names})"
