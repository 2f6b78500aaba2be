from typing import Optional

import pandas as pd

from procmon.service.exporter.data_exporter import SeriesExporter


class CsvExporter(SeriesExporter):
    """One row per timestamp, one column per metric"""

    def export(self) -> Optional[str]:
        df = pd.DataFrame(self._data)
        df.index.name = "timestamp"
        # The fixed timestamp format sorts chronologically as text
        df = df.sort_index()
        return df.to_csv(lineterminator="\n")

    @property
    def extension(self) -> str:
        return ".csv"
