"""Data models for resolved ROS1 message fields."""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any


class PrimitiveType(str, Enum):
    """ROS1 primitive wire types.

    ``ARRAY`` and ``COMPLEX`` are sentinels: ``ARRAY`` is the data type of
    every array descriptor, ``COMPLEX`` is the element type of arrays whose
    elements are a nested message.
    """

    BOOL = "bool"
    INT8 = "int8"
    UINT8 = "uint8"
    INT16 = "int16"
    UINT16 = "uint16"
    INT32 = "int32"
    UINT32 = "uint32"
    INT64 = "int64"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    CHAR = "char"
    BYTE = "byte"
    STRING = "string"
    TIME = "time"
    DURATION = "duration"

    # Sentinels, never produced from a schema token
    ARRAY = "array"
    COMPLEX = "complex"

    @property
    def is_sentinel(self) -> bool:
        return self in (PrimitiveType.ARRAY, PrimitiveType.COMPLEX)

    @property
    def size(self) -> int | None:
        """Fixed wire width in bytes, or None for variable-length types."""
        return _TYPE_SIZES.get(self)


_TYPE_SIZES = {
    PrimitiveType.BOOL: 1,
    PrimitiveType.INT8: 1,
    PrimitiveType.UINT8: 1,
    PrimitiveType.CHAR: 1,
    PrimitiveType.BYTE: 1,
    PrimitiveType.INT16: 2,
    PrimitiveType.UINT16: 2,
    PrimitiveType.INT32: 4,
    PrimitiveType.UINT32: 4,
    PrimitiveType.FLOAT32: 4,
    PrimitiveType.INT64: 8,
    PrimitiveType.UINT64: 8,
    PrimitiveType.FLOAT64: 8,
    # secs + nsecs, two 32 bit integers
    PrimitiveType.TIME: 8,
    PrimitiveType.DURATION: 8,
}

# Schema token -> primitive type. Sentinels are deliberately absent.
PRIMITIVE_TYPES: dict[str, PrimitiveType] = {
    member.value: member for member in PrimitiveType if not member.is_sentinel
}


def lookup_primitive(type_name: str) -> PrimitiveType | None:
    """Return the primitive type for a schema token, or None for composites.

    Only the first letter is matched case-insensitively, so ``Int32`` maps to
    ``INT32`` while ``INT32`` does not.
    """
    if not type_name:
        return None
    return PRIMITIVE_TYPES.get(type_name[0].lower() + type_name[1:])


@dataclass(frozen=True)
class FieldDescriptor(ABC):
    """A named field of a resolved message definition."""

    name: str

    @property
    @abstractmethod
    def data_type(self) -> PrimitiveType: ...

    def renamed(self, prefix: str) -> "FieldDescriptor":
        """Return a copy named ``<prefix>.<name>`` with the same kind."""
        return replace(self, name=f"{prefix}.{self.name}")

    @abstractmethod
    def to_dict(self) -> dict[str, Any]: ...


@dataclass(frozen=True)
class ScalarField(FieldDescriptor):
    """A single primitive value."""

    primitive_type: PrimitiveType

    @property
    def data_type(self) -> PrimitiveType:
        return self.primitive_type

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "type": self.primitive_type.value}

    def __str__(self) -> str:
        return f"{self.primitive_type.value} {self.name}"


@dataclass(frozen=True)
class ArrayField(FieldDescriptor):
    """A fixed or dynamic length sequence.

    ``elements`` is the template a decoder repeats for every array item. For
    primitive arrays it holds a single scalar, for arrays of a nested message
    it holds that message's fields (already prefixed with this field's name).
    """

    elements: tuple[FieldDescriptor, ...]
    element_type: PrimitiveType
    fixed_length: int | None = None

    @property
    def data_type(self) -> PrimitiveType:
        return PrimitiveType.ARRAY

    @property
    def is_fixed_length(self) -> bool:
        return self.fixed_length is not None

    @property
    def is_dynamic(self) -> bool:
        return self.fixed_length is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": PrimitiveType.ARRAY.value,
            "element_type": self.element_type.value,
            "fixed_length": self.fixed_length,
            "elements": [element.to_dict() for element in self.elements],
        }

    def __str__(self) -> str:
        length = "" if self.fixed_length is None else str(self.fixed_length)
        return f"{self.element_type.value}[{length}] {self.name}"


def iter_fields(
    fields: Iterable[FieldDescriptor], depth: int = 0
) -> Iterator[tuple[int, FieldDescriptor]]:
    """Walk a descriptor tree depth-first, yielding ``(depth, descriptor)``."""
    for field in fields:
        yield depth, field
        if isinstance(field, ArrayField):
            yield from iter_fields(field.elements, depth + 1)
