"""
Hash functions used to place nodes and keys on the ring.

A hash function is anything with a `compute(value: str) -> int` method
returning a signed 32-bit integer. Two implementations are provided:

- BuiltinHashFunction folds Python's own `hash()` into 32 bits. It is fast,
  but string hashing is salted per process, so two processes only agree on
  placement when PYTHONHASHSEED is fixed.
- Fnv132HashFunction is FNV-1a (32 bits) followed by an avalanche step.
  Its output is stable across processes and platforms, which makes it the
  default for rings shared by independent clients.
"""

from typing import Iterator, Protocol

MASK_32 = 0xFFFFFFFF

FNV_32_OFFSET_BASIS = 2166136261
FNV_32_PRIME = 16777619


def to_int32(value: int) -> int:
    """Reinterpret the low 32 bits of `value` as a signed (two's complement) integer."""
    value &= MASK_32
    return value - (1 << 32) if value & 0x80000000 else value


def to_uint32(value: int) -> int:
    """Map a signed hash onto the non-negative ring space [0, 2**32)."""
    return value & MASK_32


def _utf16_code_units(value: str) -> Iterator[int]:
    data = value.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


class HashFunction(Protocol):
    def compute(self, value: str) -> int:
        ...


class BuiltinHashFunction:
    """Python's built-in string hash, truncated to a signed 32-bit integer."""

    def compute(self, value: str) -> int:
        return to_int32(hash(value))

    def __repr__(self) -> str:
        return type(self).__name__


class Fnv132HashFunction:
    """
    FNV-1a over the UTF-16 code units of the value, with a final avalanche
    (shift/xor/add) pass to spread the bits of short inputs.

    All arithmetic wraps at 32 bits, right shifts propagate the sign bit.
    """

    def compute(self, value: str) -> int:
        h = FNV_32_OFFSET_BASIS
        for unit in _utf16_code_units(value):
            h = ((h ^ unit) * FNV_32_PRIME) & MASK_32

        h = (h + (h << 13)) & MASK_32
        h = (h ^ (to_int32(h) >> 7)) & MASK_32
        h = (h + (h << 3)) & MASK_32
        h = (h ^ (to_int32(h) >> 17)) & MASK_32
        h = (h + (h << 5)) & MASK_32

        return to_int32(h)

    def __repr__(self) -> str:
        return type(self).__name__


_BUILTIN_HASH_FUNCTION = BuiltinHashFunction()
_FNV1_32_HASH_FUNCTION = Fnv132HashFunction()


def builtin_hash_function() -> BuiltinHashFunction:
    return _BUILTIN_HASH_FUNCTION


def fnv1_32_hash_function() -> Fnv132HashFunction:
    return _FNV1_32_HASH_FUNCTION
