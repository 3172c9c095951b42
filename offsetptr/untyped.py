"""A 32-bit offset into a shared base buffer whose arithmetic is in bytes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from offsetptr.ctypes_layout import ScalarType

_U32_MASK = 0xFFFF_FFFF


@dataclass(eq=False)
class PtrReference:
    """A view of scalar elements starting at a host address."""

    ctype: ScalarType
    buffer: Any
    address: int

    def set(self, value: Any) -> PtrReference:
        self.ctype.pack(self.buffer, self.address, value)
        return self

    def get(self) -> Any:
        return self.ctype.unpack(self.buffer, self.address)

    def _element_address(self, index: int) -> int:
        return self.address + index * self.ctype.size()

    def __getitem__(self, index: int) -> Any:
        return self.ctype.unpack(self.buffer, self._element_address(index))

    def __setitem__(self, index: int, value: Any) -> None:
        self.ctype.pack(self.buffer, self._element_address(index), value)


class U32BitPtr:
    """An unsigned 32-bit offset from the base shared by all such pointers.

    Host addresses are indices into the base buffer; offsets are relative to
    the start index given to :meth:`rebase`.
    """

    _buffer: Any = None
    _start: int = 0

    def __init__(self, value: int | U32BitPtr | None = 0) -> None:
        if value is None:
            self._offset = 0
        elif isinstance(value, U32BitPtr):
            self._offset = value._offset
        else:
            self._offset = value & _U32_MASK

    @classmethod
    def rebase(cls, buffer: Any, start: int = 0) -> None:
        """Set the buffer and start index that all pointers are relative to."""
        if start < 0:
            raise ValueError("start must not be negative")
        U32BitPtr._buffer = buffer
        U32BitPtr._start = start

    def raw(self) -> int:
        return self._offset

    def host_ptr(self) -> int:
        return U32BitPtr._start + self._offset

    def assign(self, host_address: int) -> U32BitPtr:
        """Point at ``host_address``, storing it relative to the base."""
        self._offset = (host_address - U32BitPtr._start) & _U32_MASK
        return self

    @staticmethod
    def _memory() -> Any:
        if U32BitPtr._buffer is None:
            raise RuntimeError("no base buffer; call rebase() first")
        return U32BitPtr._buffer

    def read_as(self, ctype: ScalarType) -> Any:
        if not isinstance(ctype, ScalarType):
            raise TypeError(f"{ctype!r} is not a scalar type")
        return ctype.unpack(self._memory(), self.host_ptr())

    def as_(self, ctype: ScalarType) -> PtrReference:
        if not isinstance(ctype, ScalarType):
            raise TypeError(f"{ctype!r} is not a scalar type")
        return PtrReference(ctype, self._memory(), self.host_ptr())

    def __iadd__(self, delta: int) -> U32BitPtr:
        if not isinstance(delta, int):
            return NotImplemented
        self._offset = (self._offset + delta) & _U32_MASK
        return self

    def __isub__(self, delta: int) -> U32BitPtr:
        if not isinstance(delta, int):
            return NotImplemented
        self._offset = (self._offset - delta) & _U32_MASK
        return self

    def __add__(self, delta: int) -> U32BitPtr:
        if not isinstance(delta, int):
            return NotImplemented
        result = U32BitPtr(self)
        result += delta
        return result

    def __sub__(self, other: int | U32BitPtr) -> Any:
        if isinstance(other, U32BitPtr):
            # The difference is computed in 32-bit unsigned arithmetic.
            return (self._offset - other._offset) & _U32_MASK
        if isinstance(other, int):
            result = U32BitPtr(self)
            result -= other
            return result
        return NotImplemented

    def __eq__(self, other: object) -> bool:
        if other is None:
            return self._offset == 0
        if isinstance(other, U32BitPtr):
            return self._offset == other._offset
        return NotImplemented

    def __repr__(self) -> str:
        return f"U32BitPtr({self._offset:#x})"