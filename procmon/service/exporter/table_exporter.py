from typing import Optional

from tabulate import tabulate

from procmon.service.exporter.data_exporter import SeriesExporter


class TableExporter(SeriesExporter):
    """Plain-text table, readable in a terminal or as markdown"""

    def export(self) -> Optional[str]:
        metrics = list(self._data)
        timestamps = sorted({ts for series in self._data.values() for ts in series})

        rows = [
            [ts] + [self._data[metric].get(ts) for metric in metrics]
            for ts in timestamps
        ]
        headers = ["timestamp"] + metrics
        return tabulate(rows, headers=headers, tablefmt="github", missingval="", floatfmt=".2f") + "\n"

    @property
    def extension(self) -> str:
        return ".txt"
