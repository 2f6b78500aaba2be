"""
Attribute data set registry.

Maps each AttributeKind to the constructor of its data set. New metrics are
added by registering a factory here; no discovery happens at runtime.
"""
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List

from procmon.consts.AttributeKind import AttributeKind
from procmon.service.attribute.attribute_data_set import AttributeDataSet
from procmon.service.attribute.cpu_data_set import CpuDataSet
from procmon.service.attribute.memory_data_set import MemoryDataSet


@dataclass(frozen=True)
class AttributeRegistration:
    factory: Callable[[], AttributeDataSet]
    display_name: str


ATTRIBUTE_REGISTRY: Dict[AttributeKind, AttributeRegistration] = {
    AttributeKind.CPU: AttributeRegistration(CpuDataSet, CpuDataSet.display_name),
    AttributeKind.MEMORY: AttributeRegistration(MemoryDataSet, MemoryDataSet.display_name),
}


def find_all_attributes() -> Dict[AttributeKind, str]:
    return {kind: registration.display_name for kind, registration in ATTRIBUTE_REGISTRY.items()}


def create_attribute_data_set(kind: AttributeKind) -> AttributeDataSet:
    """
    Raises:
        KeyError: If no data set is registered for kind
    """
    registration = ATTRIBUTE_REGISTRY.get(kind)
    if registration is None:
        raise KeyError(f"No attribute data set registered for {kind}")
    return registration.factory()


def create_attribute_data_sets(kinds: Iterable[AttributeKind]) -> List[AttributeDataSet]:
    return [create_attribute_data_set(kind) for kind in kinds]
