"""Fixed-size packed bit array backing the Bloom filter."""
from __future__ import annotations

from .errors import QueryFilterError
from .sizing import MAX_SIZE


class BitSet:
    """Bit array packed into a ``bytearray``.

    Bit ``i`` lives in byte ``i >> 3`` under mask ``1 << (i & 7)``. The array
    is allocated once and never resized. Bits can only be cleared all at
    once, and the number of set bits is tracked as bits flip so
    :meth:`population_count` is exact and O(1).
    """

    __slots__ = ("_size", "_bit_array", "_ones")

    def __init__(self, size: int) -> None:
        if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
            raise QueryFilterError(f"size must be a positive integer, got {size!r}")
        if size > MAX_SIZE:
            raise QueryFilterError(f"size must be at most {MAX_SIZE}, got {size}")
        self._size = size
        self._bit_array = bytearray((size + 7) // 8)
        self._ones = 0

    def _locate(self, index: int) -> tuple[int, int]:
        if not 0 <= index < self._size:
            raise IndexError(f"bit index {index} out of range for size {self._size}")
        return index >> 3, 1 << (index & 7)

    def set(self, index: int) -> bool:
        """Set bit ``index``. Returns ``True`` if it was previously unset."""
        byte_index, mask = self._locate(index)
        if self._bit_array[byte_index] & mask:
            return False
        self._bit_array[byte_index] |= mask
        self._ones += 1
        return True

    def test(self, index: int) -> bool:
        byte_index, mask = self._locate(index)
        return bool(self._bit_array[byte_index] & mask)

    def clear_all(self) -> None:
        """Reset every bit to 0."""
        self._bit_array[:] = bytes(len(self._bit_array))
        self._ones = 0

    def population_count(self) -> int:
        return self._ones

    def __len__(self) -> int:
        return self._size

    @property
    def bit_array(self) -> memoryview:
        """Read-only view of the packed bytes (for inspection)."""
        return memoryview(self._bit_array).toreadonly()

    def __repr__(self) -> str:
        return f"BitSet(size={self._size}, ones={self._ones})"
