from .attribute_data_set import AttributeDataSet
from .cpu_data_set import CpuDataSet
from .memory_data_set import MemoryDataSet
from .registry import ATTRIBUTE_REGISTRY, create_attribute_data_set, create_attribute_data_sets, find_all_attributes

__all__ = [
    "ATTRIBUTE_REGISTRY",
    "AttributeDataSet",
    "CpuDataSet",
    "MemoryDataSet",
    "create_attribute_data_set",
    "create_attribute_data_sets",
    "find_all_attributes",
]
