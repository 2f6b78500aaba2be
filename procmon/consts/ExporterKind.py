from enum import Enum


class ExporterKind(Enum):
    JSON = "json"
    CSV = "csv"
    TABLE = "table"
