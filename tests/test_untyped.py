import pytest

from offsetptr.ctypes_layout import FLOAT, U32, ArrayType, StructType, sizeof
from offsetptr.untyped import PtrReference, U32BitPtr

OBJECT = StructType(
    "Object",
    (
        ("mask", U32),
        ("value", U32),
        ("stack_top", U32),
        ("flags", U32),
        ("stack", ArrayType(U32, 8)),
        ("time", FLOAT),
    ),
)


def _build_default(buffer, base):
    U32.pack(buffer, base + OBJECT.offset_of("value"), 0xDEADBEEF)
    FLOAT.pack(buffer, base + OBJECT.offset_of("time"), 0.5)


@pytest.fixture
def memory():
    buffer = bytearray(1024 * 1024)
    U32BitPtr.rebase(buffer, 0)
    _build_default(buffer, 0)
    return buffer


def test_source_scenario(memory):
    stack_top = U32BitPtr()
    stack_top.assign(OBJECT.offset_of("stack"))
    assert stack_top.raw() == 16

    U32.pack(memory, OBJECT.offset_of("stack") + 2 * sizeof(U32), 0x5)
    assert stack_top.as_(U32)[2] == 0x5

    float_ptr = stack_top + sizeof(OBJECT.field_type("stack"))
    assert float_ptr.read_as(FLOAT) == 0.5

    stack_top -= sizeof(U32) + sizeof(U32) + sizeof(U32)
    assert stack_top.read_as(U32) == 0xDEADBEEF

    assert stack_top - sizeof(U32) == None  # noqa: E711


def test_ptr_reference_set_and_get(memory):
    ref = U32BitPtr(OBJECT.offset_of("flags")).as_(U32)
    ref.set(42)
    assert ref.get() == 42
    assert U32.unpack(memory, OBJECT.offset_of("flags")) == 42


def test_ptr_reference_index_assignment(memory):
    ref = U32BitPtr(OBJECT.offset_of("stack")).as_(U32)
    ref[3] = 9
    assert U32.unpack(memory, OBJECT.offset_of("stack") + 3 * sizeof(U32)) == 9
    assert ref[3] == 9


def test_ptr_reference_holds_host_address(memory):
    ref = U32BitPtr(8).as_(U32)
    assert isinstance(ref, PtrReference)
    assert ref.address == 8


def test_arithmetic_is_in_bytes():
    ptr = U32BitPtr(10)
    assert (ptr + 3).raw() == 13
    assert (ptr - 3).raw() == 7
    assert ptr.raw() == 10


def test_arithmetic_wraps_at_32_bits():
    assert (U32BitPtr(0) - 1).raw() == 0xFFFFFFFF
    assert (U32BitPtr(0xFFFFFFFF) + 1).raw() == 0


def test_pointer_difference_is_unsigned():
    first = U32BitPtr(20)
    second = U32BitPtr(12)
    assert first - second == 8
    assert second - first == 2**32 - 8


def test_equality_and_null():
    assert U32BitPtr(4) == U32BitPtr(4)
    assert not (U32BitPtr(4) == U32BitPtr(5))
    assert U32BitPtr(None) == None  # noqa: E711
    assert U32BitPtr(None).raw() == 0


def test_rebase_with_start_offset():
    buffer = bytearray(256)
    U32BitPtr.rebase(buffer, 100)
    ptr = U32BitPtr().assign(116)
    assert ptr.raw() == 16
    assert ptr.host_ptr() == 116
    U32.pack(buffer, 116, 77)
    assert ptr.read_as(U32) == 77


def test_read_as_requires_scalar(memory):
    with pytest.raises(TypeError):
        U32BitPtr(0).read_as(OBJECT)
    with pytest.raises(TypeError):
        U32BitPtr(0).as_(ArrayType(U32, 2))


def test_read_without_base_raises():
    U32BitPtr.rebase(None)
    with pytest.raises(RuntimeError):
        U32BitPtr(0).read_as(U32)


def test_read_past_end_raises():
    U32BitPtr.rebase(bytearray(8))
    with pytest.raises(IndexError):
        U32BitPtr(6).read_as(U32)