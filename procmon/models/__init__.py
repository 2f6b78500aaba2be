"""Models for process monitor data structures."""

from .compiled_snapshot import CompiledSnapshot
from .process_handle import ProcessHandle, PsutilProcessHandle
from .sample import CpuSample, Sample

__all__ = ["CompiledSnapshot", "CpuSample", "ProcessHandle", "PsutilProcessHandle", "Sample"]
