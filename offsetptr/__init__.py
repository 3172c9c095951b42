"""32-bit offset pointers and C type layouts over a rebasable byte buffer."""

__version__ = "0.1.0"
__all__ = ["ctypes_layout", "typed", "untyped"]