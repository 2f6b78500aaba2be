from dataclasses import dataclass, field
from typing import List, Optional

from procmon.consts.AttributeKind import AttributeKind


@dataclass
class MonitorConfig:
    watch_interval: float = 0.1  # Process table poll period (seconds)
    sampling_interval: float = 1.0  # Scheduler tick period while recording (seconds)
    idle_interval: float = 0.001  # Scheduler poll period while no dataset is attached (seconds)
    export_dir: str = "exports"
    attributes: List[AttributeKind] = field(default_factory=lambda: [AttributeKind.CPU, AttributeKind.MEMORY])
    log_level: str = "INFO"
    log_file: Optional[str] = None
