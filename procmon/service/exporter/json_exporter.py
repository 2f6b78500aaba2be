import json
from typing import Optional

from procmon.service.exporter.data_exporter import SeriesExporter


class JsonExporter(SeriesExporter):
    """Writes {"<metric>": {"<yyyy-MM-dd HH:mm:ss>": value, ...}, ...}"""

    def export(self) -> Optional[str]:
        return json.dumps(self._data, indent=2)

    @property
    def extension(self) -> str:
        return ".json"
