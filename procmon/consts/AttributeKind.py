from enum import Enum


class AttributeKind(Enum):
    CPU = "cpu"
    MEMORY = "memory"
