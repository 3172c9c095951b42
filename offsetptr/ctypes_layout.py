"""Descriptions of C data types and how they are laid out in a byte buffer."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import Any, Union

_SCALAR_CODES = frozenset("bBhHiIlLqQfde?")


def _round_up(value: int, alignment: int) -> int:
    return -(-value // alignment) * alignment


def _is_ctype(obj: object) -> bool:
    return isinstance(obj, (ScalarType, ArrayType, StructType))


@dataclass(frozen=True)
class ScalarType:
    """A fixed-size scalar stored little-endian, described by a struct code."""

    name: str
    fmt: str

    def __post_init__(self) -> None:
        if self.fmt not in _SCALAR_CODES:
            raise ValueError(f"unsupported scalar format {self.fmt!r}")

    def size(self) -> int:
        return struct.calcsize("<" + self.fmt)

    def _alignment(self) -> int:
        return self.size()

    def _check_bounds(self, buffer: Any, offset: int) -> None:
        if offset < 0 or offset + self.size() > len(buffer):
            raise IndexError(
                f"{self.name} at offset {offset} lies outside a buffer of {len(buffer)} bytes"
            )

    def unpack(self, buffer: Any, offset: int) -> Any:
        """Read one value of this type from ``buffer`` at ``offset``."""
        self._check_bounds(buffer, offset)
        (value,) = struct.unpack_from("<" + self.fmt, buffer, offset)
        return value

    def pack(self, buffer: Any, offset: int, value: Any) -> None:
        """Write ``value`` as this type into ``buffer`` at ``offset``."""
        self._check_bounds(buffer, offset)
        try:
            struct.pack_into("<" + self.fmt, buffer, offset, value)
        except (struct.error, OverflowError) as exc:
            raise ValueError(f"cannot store {value!r} as {self.name}: {exc}") from exc


@dataclass(frozen=True)
class ArrayType:
    """A fixed-length array of one element type."""

    element: CType
    length: int

    def __post_init__(self) -> None:
        if not _is_ctype(self.element):
            raise TypeError(f"{self.element!r} is not a C type")
        if self.length < 0:
            raise ValueError("array length must not be negative")

    def size(self) -> int:
        return self.element.size() * self.length

    def _alignment(self) -> int:
        return self.element._alignment()


@dataclass(frozen=True)
class StructType:
    """A struct whose fields are placed at their natural alignment."""

    name: str
    fields: tuple[tuple[str, CType], ...]
    _offsets: dict[str, int] = field(init=False, repr=False, compare=False)
    _size: int = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple((n, t) for n, t in self.fields))
        offsets: dict[str, int] = {}
        position = 0
        for name, ctype in self.fields:
            if not _is_ctype(ctype):
                raise TypeError(f"field {name!r} has no C type: {ctype!r}")
            if name in offsets:
                raise ValueError(f"duplicate field {name!r} in struct {self.name}")
            position = _round_up(position, ctype._alignment())
            offsets[name] = position
            position += ctype.size()
        object.__setattr__(self, "_offsets", offsets)
        object.__setattr__(self, "_size", _round_up(position, self._alignment()))

    def _alignment(self) -> int:
        return max((ctype._alignment() for _, ctype in self.fields), default=1)

    def size(self) -> int:
        return self._size

    def offset_of(self, name: str) -> int:
        try:
            return self._offsets[name]
        except KeyError:
            raise KeyError(f"struct {self.name} has no field {name!r}") from None

    def field_type(self, name: str) -> CType:
        for field_name, ctype in self.fields:
            if field_name == name:
                return ctype
        raise KeyError(f"struct {self.name} has no field {name!r}")


CType = Union[ScalarType, ArrayType, StructType]


def sizeof(ctype: CType) -> int:
    """Return the size in bytes of a C type."""
    if not _is_ctype(ctype):
        raise TypeError(f"{ctype!r} is not a C type")
    return ctype.size()


I8 = ScalarType("int8", "b")
U8 = ScalarType("uint8", "B")
I16 = ScalarType("int16", "h")
U16 = ScalarType("uint16", "H")
I32 = ScalarType("int32", "i")
U32 = ScalarType("uint32", "I")
I64 = ScalarType("int64", "q")
U64 = ScalarType("uint64", "Q")
FLOAT = ScalarType("float", "f")
DOUBLE = ScalarType("double", "d")