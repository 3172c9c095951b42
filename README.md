# offsetptr

Pointers that are stored as unsigned 32-bit offsets from a shared base,
not as host addresses. The base is a byte buffer (a `bytearray` or any
writable buffer) plus a start index into it. Each pointer holds only its
offset, so rebasing moves every pointer of that flavour at once.

The package has no dependencies beyond the standard library.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Describing memory: `offsetptr.ctypes_layout`

- `ScalarType(name, fmt)`: a little-endian scalar described by a `struct`
  format code (one of `b B h H i I l L q Q f d e ?`). `size()` gives its
  byte size; `unpack(buffer, offset)` and `pack(buffer, offset, value)`
  read and write it. An access outside the buffer raises `IndexError`; a
  value that does not fit raises `ValueError`.
- `ArrayType(element, length)`: a fixed-length array; `size()` is the
  element size times the length.
- `StructType(name, fields)`: `fields` is a sequence of `(name, type)`
  pairs. Each field is placed at its natural alignment and the total size
  is rounded up to the struct's alignment. `offset_of(name)` and
  `field_type(name)` look a field up and raise `KeyError` for an unknown
  name.
- `sizeof(ctype)`: the byte size of any of these types.

Ready-made scalars: `I8`, `U8`, `I16`, `U16`, `I32`, `U32`, `I64`, `U64`,
`FLOAT`, `DOUBLE`.

## Typed pointers: `offsetptr.typed`

`U32BitPtrCommon.rebase(buffer, start=0)` sets the base shared by every
typed and void pointer. `raw()` returns a pointer's offset and
`host_ptr()` the index it resolves to in the buffer (`start + offset`).
Reading or writing before any base has been set raises `RuntimeError`.

`TypedU32BitPtr(ctype, value=0)` points at a value of `ctype`. `value` may
be an offset, another pointer, or `None` for null.

- `+`, `-`, `+=`, `-=` with an integer step by the size of `ctype`;
  subtracting two pointers of the same type gives their difference in
  bytes.
- `read()` returns a scalar; `deref()` returns a scalar, a list for an
  array or a dict for a struct; `store(value)` writes any of those back.
- `ptr[i]` reads and `ptr[i] = v` writes the `i`-th element.
- `field(name)` returns a pointer to a struct field; `cast(ctype)`
  returns a pointer of another type at the same offset.
- `==`, `<` and `>` compare offsets. `None` counts as the null pointer.
  Comparing or subtracting pointers to different types raises `TypeError`.
- `assign(host_address)` points at a buffer index, storing it relative to
  the base.

`VoidU32BitPtr(value=0)` holds an offset with no element type and no
arithmetic. Any typed pointer converts to it, it compares equal to any
pointer with the same offset, and `cast(ctype)` turns it back into a typed
pointer.

```python
from offsetptr.ctypes_layout import FLOAT, U32, ArrayType, StructType
from offsetptr.typed import TypedU32BitPtr, U32BitPtrCommon, VoidU32BitPtr

OBJECT = StructType("Object", (
    ("mask", U32), ("value", U32), ("stack_top", U32), ("flags", U32),
    ("stack", ArrayType(U32, 8)), ("time", FLOAT),
))

memory = bytearray(1024 * 1024)
U32BitPtrCommon.rebase(memory)

obj = TypedU32BitPtr(OBJECT, 0)
obj.field("value").store(0xDEADBEEF)
obj.field("time").store(0.5)

stack = obj.field("stack").cast(U32)
stack.raw()                       # 16
stack[2] = 5
stack[2]                          # 5
(stack + 8).cast(FLOAT).read()    # 0.5
(stack - 3).read()                # 0xDEADBEEF
stack - 4 == None                 # True
VoidU32BitPtr(obj) == stack - 4   # True
```

## Byte pointers: `offsetptr.untyped`

`U32BitPtr` has its own base, set with `U32BitPtr.rebase(buffer, start=0)`,
separate from the typed pointers' base. Its arithmetic is in bytes, and
the type is given at the point of access:

- `read_as(scalar)` reads one scalar at the pointer.
- `as_(scalar)` returns a `PtrReference` with `get()`, `set(value)` and
  indexing by element.
- `raw()`, `host_ptr()`, `assign(host_address)`, `+`, `-`, `+=`, `-=`,
  and `==` (with `None` as null) behave as for typed pointers, but in bytes.

```python
from offsetptr.ctypes_layout import FLOAT, U32
from offsetptr.untyped import U32BitPtr

memory = bytearray(64)
U32BitPtr.rebase(memory)

p = U32BitPtr(16)
p.as_(U32)[2] = 5
(p + 8).read_as(U32)              # 5
(p + 32).as_(FLOAT).set(0.5)
(p + 32).read_as(FLOAT)           # 0.5
```

## Arithmetic

All offsets follow 32-bit unsigned arithmetic: stepping below zero wraps
around, and the difference of two pointers is also taken modulo 2**32.

## What it does not do

The package is a library only; it has no command. It does not allocate
memory or manage object lifetimes: it reads and writes within the one
buffer it is given, and a host address is just an index into that buffer.