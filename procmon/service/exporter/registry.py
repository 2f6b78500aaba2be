"""
Exporter registry.

Each ExporterKind maps to a constructor and an optional display name. The
table is filled at import time; register_exporter() adds more.
"""
from dataclasses import dataclass
from typing import Callable, Dict, Hashable, Optional

from procmon.consts.ExporterKind import ExporterKind
from procmon.exceptions import InvalidExporter
from procmon.service.exporter.csv_exporter import CsvExporter
from procmon.service.exporter.data_exporter import DataExporter
from procmon.service.exporter.json_exporter import JsonExporter
from procmon.service.exporter.table_exporter import TableExporter


@dataclass(frozen=True)
class ExporterRegistration:
    factory: Callable[[], DataExporter]
    display_name: Optional[str] = None

    @property
    def resolved_name(self) -> str:
        """Explicit display name, else the name of the implementation"""
        if self.display_name:
            return self.display_name
        return getattr(self.factory, "__name__", type(self.factory).__name__)


EXPORTER_REGISTRY: Dict[Hashable, ExporterRegistration] = {
    ExporterKind.JSON: ExporterRegistration(JsonExporter, "JSON"),
    ExporterKind.CSV: ExporterRegistration(CsvExporter, "CSV"),
    ExporterKind.TABLE: ExporterRegistration(TableExporter),
}


def register_exporter(kind: Hashable, factory: Callable[[], DataExporter], display_name: Optional[str] = None) -> None:
    EXPORTER_REGISTRY[kind] = ExporterRegistration(factory, display_name)


def find_all() -> Dict[Hashable, str]:
    """Map of exporter kind -> display name"""
    return {kind: registration.resolved_name for kind, registration in EXPORTER_REGISTRY.items()}


def _lookup(kind: Hashable) -> Optional[ExporterRegistration]:
    registration = EXPORTER_REGISTRY.get(kind)
    if registration is None and isinstance(kind, str):
        try:
            registration = EXPORTER_REGISTRY.get(ExporterKind(kind))
        except ValueError:
            pass
    return registration


def instantiate(kind: Hashable) -> DataExporter:
    """
    Build a fresh exporter of the given kind.

    Raises:
        InvalidExporter: If the kind is unknown, its factory cannot be called
                         without arguments, or it does not produce a DataExporter
    """
    registration = _lookup(kind)
    if registration is None:
        raise InvalidExporter(f"No exporter registered for {kind!r}", kind=kind)

    if not callable(registration.factory):
        raise InvalidExporter(f"Exporter factory for {kind!r} is not callable", kind=kind)

    try:
        exporter = registration.factory()
    except TypeError as e:
        raise InvalidExporter(
            f"{registration.resolved_name} does not have a constructor without parameters", kind=kind
        ) from e

    if not isinstance(exporter, DataExporter):
        raise InvalidExporter(f"{registration.resolved_name} does not implement DataExporter", kind=kind)

    return exporter
