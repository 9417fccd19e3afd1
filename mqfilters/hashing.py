"""Multi-index hash generation using Kirsch-Mitzenmacher double hashing.

Two independent hash families (MurmurHash3 via mmh3 and xxHash64) are
evaluated once per key. All ``k`` bit positions are then derived from the
pair as ``(h1 + i * h2) mod m``, so a large ``k`` costs arithmetic only.
"""
from __future__ import annotations

import numbers
import struct
from typing import Hashable, Iterator, Tuple

import mmh3
import xxhash

from .errors import QueryFilterError

DEFAULT_SEED1 = 12345
DEFAULT_SEED2 = 67890

_MAX_SEED1 = (1 << 32) - 1
_MAX_SEED2 = (1 << 64) - 1

_TAG_STR = b"u"
_TAG_BYTES = b"b"
_TAG_INT = b"i"
_TAG_FLOAT = b"f"
_TAG_TUPLE = b"t"
_TAG_FROZENSET = b"s"
_TAG_HASH = b"h"


def _encode_int(value: int) -> bytes:
    length = (value.bit_length() + 8) // 8
    return _TAG_INT + value.to_bytes(length, "big", signed=True)


def _encode_hash(value: Hashable) -> bytes:
    return _TAG_HASH + struct.pack(">q", hash(value))


def _encode_number(value: numbers.Number) -> bytes:
    # Equal numbers of any type must share one form: integral values as int,
    # values exactly representable as a double as float, the rest by their
    # numeric hash, which is deterministic and equal for equal numbers.
    if isinstance(value, numbers.Integral):
        return _encode_int(int(value))
    if isinstance(value, numbers.Complex) and not isinstance(value, numbers.Real):
        if value.imag != 0:
            return _encode_hash(value)
        value = value.real
    if isinstance(value, float):
        if value.is_integer():
            return _encode_int(int(value))
        return _TAG_FLOAT + struct.pack(">d", value)
    try:
        integral = int(value)
    except (OverflowError, ValueError):
        integral = None
    if integral is not None and integral == value:
        return _encode_int(integral)
    try:
        as_float = float(value)
    except (OverflowError, ValueError):
        return _encode_hash(value)
    if as_float == value:
        return _TAG_FLOAT + struct.pack(">d", as_float)
    return _encode_hash(value)


def _encode_items(tag: bytes, parts: list[bytes]) -> bytes:
    out = bytearray(tag)
    out += struct.pack(">I", len(parts))
    for part in parts:
        out += struct.pack(">I", len(part))
        out += part
    return bytes(out)


def encode_key(key: Hashable) -> bytes:
    """Return the stable byte form of ``key`` that gets hashed.

    Keys that compare equal in Python encode identically, across numeric
    types too (``1``, ``1.0``, ``True``, ``Decimal(1)``, ``Fraction(1)`` and
    ``1+0j``). ``str`` is encoded as UTF-8 rather than through the randomised
    builtin ``hash()``, so positions are stable across processes. Every form
    carries a one-byte type tag, so ``"abc"`` and ``b"abc"`` differ.
    """
    if isinstance(key, (bytes, bytearray, memoryview)):
        return _TAG_BYTES + bytes(key)
    if isinstance(key, str):
        return _TAG_STR + key.encode("utf-8")
    if isinstance(key, numbers.Number):
        return _encode_number(key)
    if isinstance(key, tuple):
        return _encode_items(_TAG_TUPLE, [encode_key(item) for item in key])
    if isinstance(key, frozenset):
        return _encode_items(_TAG_FROZENSET, sorted(encode_key(item) for item in key))
    # Anything else falls back to its own hash; raises TypeError if unhashable.
    return _encode_hash(key)


class DoubleHasher:
    """Seeded pair of hash functions used to derive every bit position.

    ``seed1`` seeds MurmurHash3 (32-bit seed) and ``seed2`` seeds xxHash64
    (64-bit seed). The pair is fixed for the lifetime of the hasher.
    """

    __slots__ = ("_seed1", "_seed2")

    def __init__(self, seed1: int = DEFAULT_SEED1, seed2: int = DEFAULT_SEED2) -> None:
        for name, seed, upper in (("seed1", seed1, _MAX_SEED1), ("seed2", seed2, _MAX_SEED2)):
            if isinstance(seed, bool) or not isinstance(seed, int):
                raise QueryFilterError(f"{name} must be an integer, got {seed!r}")
            if not (0 <= seed <= upper):
                raise QueryFilterError(f"{name} must be in [0, {upper}], got {seed}")
        self._seed1 = seed1
        self._seed2 = seed2

    @property
    def seeds(self) -> Tuple[int, int]:
        return self._seed1, self._seed2

    def hash_pair(self, key: Hashable) -> Tuple[int, int]:
        """Return the two base hashes ``(h1, h2)`` of ``key``."""
        data = encode_key(key)
        h1 = mmh3.hash64(data, self._seed1, signed=False)[0]
        h2 = xxhash.xxh64(data, seed=self._seed2).intdigest()
        return h1, h2

    def hash_iter(self, key: Hashable, count: int, modulus: int) -> Iterator[int]:
        """Yield ``count`` positions in ``[0, modulus)`` for ``key``.

        ``modulus`` must be positive; it is not checked here.
        """
        h1, h2 = self.hash_pair(key)
        h1 %= modulus
        h2 %= modulus
        # A zero step would put every position on h1.
        if h2 == 0:
            h2 = 1

        for i in range(count):
            yield (h1 + i * h2) % modulus

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DoubleHasher):
            return NotImplemented
        return self.seeds == other.seeds

    def __hash__(self) -> int:
        return hash(self.seeds)

    def __repr__(self) -> str:
        return f"DoubleHasher(seed1={self._seed1}, seed2={self._seed2})"
