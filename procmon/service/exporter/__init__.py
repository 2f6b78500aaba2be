from .csv_exporter import CsvExporter
from .data_exporter import DataExporter, SeriesExporter
from .json_exporter import JsonExporter
from .registry import EXPORTER_REGISTRY, find_all, instantiate, register_exporter
from .table_exporter import TableExporter

__all__ = [
    "CsvExporter",
    "DataExporter",
    "EXPORTER_REGISTRY",
    "JsonExporter",
    "SeriesExporter",
    "TableExporter",
    "find_all",
    "instantiate",
    "register_exporter",
]
