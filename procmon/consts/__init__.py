"""Constant enumerations shared across the process monitor."""

from .AttributeKind import AttributeKind
from .ExporterKind import ExporterKind

__all__ = ["AttributeKind", "ExporterKind"]
