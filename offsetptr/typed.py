"""32-bit offset pointers that carry the type of what they point at."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from offsetptr.ctypes_layout import ArrayType, CType, ScalarType, StructType, sizeof

_U32_MASK = 0xFFFF_FFFF


class U32BitPtrCommon:
    """An unsigned 32-bit offset from the base shared by every typed pointer.

    Host addresses are indices into the base buffer; offsets are relative to
    the start index given to :meth:`rebase`.
    """

    _buffer: Any = None
    _start: int = 0

    def __init__(self, value: int | U32BitPtrCommon | None = 0) -> None:
        if value is None:
            self._offset = 0
        elif isinstance(value, U32BitPtrCommon):
            self._offset = value._offset
        else:
            self._offset = value & _U32_MASK

    @classmethod
    def rebase(cls, buffer: Any, start: int = 0) -> None:
        """Set the buffer and start index shared by all typed pointers."""
        if start < 0:
            raise ValueError("start must not be negative")
        U32BitPtrCommon._buffer = buffer
        U32BitPtrCommon._start = start

    def raw(self) -> int:
        return self._offset

    def host_ptr(self) -> int:
        return U32BitPtrCommon._start + self._offset

    def _rebase_host(self, host_address: int) -> None:
        self._offset = (host_address - U32BitPtrCommon._start) & _U32_MASK

    @staticmethod
    def _memory() -> Any:
        if U32BitPtrCommon._buffer is None:
            raise RuntimeError("no base buffer; call rebase() first")
        return U32BitPtrCommon._buffer

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._offset:#x})"


class TypedU32BitPtr(U32BitPtrCommon):
    """A pointer whose arithmetic steps by the size of its element type."""

    def __init__(self, ctype: CType, value: int | U32BitPtrCommon | None = 0) -> None:
        self._step = sizeof(ctype)
        self.ctype = ctype
        super().__init__(value)

    def assign(self, host_address: int) -> TypedU32BitPtr:
        """Point at ``host_address``, storing it relative to the base."""
        self._rebase_host(host_address)
        return self

    def cast(self, ctype: CType) -> TypedU32BitPtr:
        return TypedU32BitPtr(ctype, self)

    def _require_scalar(self) -> ScalarType:
        if not isinstance(self.ctype, ScalarType):
            raise TypeError(f"{self.ctype!r} is not a scalar type")
        return self.ctype

    def read(self) -> Any:
        ctype = self._require_scalar()
        return ctype.unpack(self._memory(), self.host_ptr())

    def deref(self) -> Any:
        """Return the pointed-to value: a scalar, a list or a dict of fields."""
        ctype = self.ctype
        if isinstance(ctype, ScalarType):
            return ctype.unpack(self._memory(), self.host_ptr())
        if isinstance(ctype, ArrayType):
            return [self._element(index).deref() for index in range(ctype.length)]
        return {name: self.field(name).deref() for name, _ in ctype.fields}

    def store(self, value: Any) -> TypedU32BitPtr:
        """Write ``value`` where this pointer points."""
        ctype = self.ctype
        if isinstance(ctype, ScalarType):
            ctype.pack(self._memory(), self.host_ptr(), value)
        elif isinstance(ctype, ArrayType):
            if not isinstance(value, Sequence) or len(value) != ctype.length:
                raise ValueError(f"expected a sequence of {ctype.length} elements")
            for index, item in enumerate(value):
                self._element(index).store(item)
        else:
            names = [name for name, _ in ctype.fields]
            if not isinstance(value, Mapping) or set(value) != set(names):
                raise ValueError(f"expected a mapping with fields {names}")
            for name in names:
                self.field(name).store(value[name])
        return self

    def field(self, name: str) -> TypedU32BitPtr:
        if not isinstance(self.ctype, StructType):
            raise TypeError(f"{self.ctype!r} has no fields")
        return TypedU32BitPtr(
            self.ctype.field_type(name), self._offset + self.ctype.offset_of(name)
        )

    def _element(self, index: int) -> TypedU32BitPtr:
        element = self.ctype.element
        return TypedU32BitPtr(element, self._offset + index * sizeof(element))

    def __getitem__(self, index: int) -> Any:
        return (self + index).deref()

    def __setitem__(self, index: int, value: Any) -> None:
        (self + index).store(value)

    def __iadd__(self, delta: int) -> TypedU32BitPtr:
        if not isinstance(delta, int):
            return NotImplemented
        self._offset = (self._offset + delta * self._step) & _U32_MASK
        return self

    def __isub__(self, delta: int) -> TypedU32BitPtr:
        if not isinstance(delta, int):
            return NotImplemented
        self._offset = (self._offset - delta * self._step) & _U32_MASK
        return self

    def __add__(self, delta: int) -> TypedU32BitPtr:
        if not isinstance(delta, int):
            return NotImplemented
        result = TypedU32BitPtr(self.ctype, self)
        result += delta
        return result

    __radd__ = __add__

    def __sub__(self, other: int | TypedU32BitPtr) -> Any:
        if isinstance(other, TypedU32BitPtr):
            self._check_same_type(other)
            # A byte difference, computed in 32-bit unsigned arithmetic.
            return (self._offset - other._offset) & _U32_MASK
        if isinstance(other, int):
            result = TypedU32BitPtr(self.ctype, self)
            result -= other
            return result
        return NotImplemented

    def _check_same_type(self, other: TypedU32BitPtr) -> None:
        if other.ctype != self.ctype:
            raise TypeError("pointers to different types cannot be combined")

    def __eq__(self, other: object) -> bool:
        if other is None:
            return self._offset == 0
        if isinstance(other, TypedU32BitPtr):
            self._check_same_type(other)
            return self._offset == other._offset
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if other is None:
            return False
        if isinstance(other, TypedU32BitPtr):
            self._check_same_type(other)
            return self._offset < other._offset
        return NotImplemented

    def __gt__(self, other: object) -> bool:
        if other is None:
            return self._offset > 0
        if isinstance(other, TypedU32BitPtr):
            self._check_same_type(other)
            return other._offset < self._offset
        return NotImplemented

    def __repr__(self) -> str:
        name = getattr(self.ctype, "name", "?")
        return f"TypedU32BitPtr({name}, {self._offset:#x})"


class VoidU32BitPtr(U32BitPtrCommon):
    """An untyped pointer without arithmetic; any typed pointer converts to it."""

    def assign(self, host_address: int) -> VoidU32BitPtr:
        """Point at ``host_address``, storing it relative to the base."""
        self._rebase_host(host_address)
        return self

    def cast(self, ctype: CType) -> TypedU32BitPtr:
        return TypedU32BitPtr(ctype, self)

    def __eq__(self, other: object) -> bool:
        if other is None:
            return self._offset == 0
        if isinstance(other, U32BitPtrCommon):
            return self._offset == other._offset
        return NotImplemented