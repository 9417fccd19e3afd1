"""Sizing math for Bloom filters.

Converts between capacity (``n``), bit count (``m``) and hash count (``k``)
for a target false positive rate (``p``):

* ``m = ceil(-n * ln(p) / ln(2)^2)``
* ``n = round(m * ln(2)^2 / -ln(p))``
* ``k = ceil(m / n * ln(2))``

These run once, at construction time.
"""
from __future__ import annotations

import math
import sys
from dataclasses import dataclass

from .errors import QueryFilterError

LN2 = math.log(2)

# Largest size, count or bit index a filter can address.
MAX_SIZE = sys.maxsize


def round_half_up(value: float) -> int:
    """Round a non-negative float to the nearest integer, halves away from zero."""
    floor = math.floor(value)
    return floor + 1 if value - floor >= 0.5 else floor


def _check_positive(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise QueryFilterError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise QueryFilterError(f"{name} must be positive, got {value}")
    if value > MAX_SIZE:
        raise QueryFilterError(f"{name} must be at most {MAX_SIZE}, got {value}")


def _check_fp_rate(fp_rate: float) -> None:
    if isinstance(fp_rate, bool) or not isinstance(fp_rate, (int, float)):
        raise QueryFilterError(f"fp_rate must be a number, got {fp_rate!r}")
    if not (0.0 < fp_rate < 1.0):
        raise QueryFilterError(f"fp_rate must be in (0, 1), got {fp_rate}")


def optimal_bit_count(capacity: int, fp_rate: float) -> int:
    """Return the number of bits (``m``) needed to hold ``capacity`` items at ``fp_rate``."""
    _check_positive("capacity", capacity)
    _check_fp_rate(fp_rate)
    n = float(capacity)
    bit_count = int(math.ceil(-n * math.log(fp_rate) / (LN2 * LN2)))
    if bit_count > MAX_SIZE:
        raise QueryFilterError(
            f"capacity {capacity} at fp_rate {fp_rate} needs {bit_count} bits, more than {MAX_SIZE}"
        )
    return bit_count


def optimal_capacity(bit_count: int, fp_rate: float) -> int:
    """Return how many items (``n``) ``bit_count`` bits can hold at ``fp_rate``.

    Approximate inverse of :func:`optimal_bit_count`. May be 0 when
    ``bit_count`` is too small for the requested rate.
    """
    _check_positive("bit_count", bit_count)
    _check_fp_rate(fp_rate)
    m = float(bit_count)
    return round_half_up(m * (LN2 * LN2) / -math.log(fp_rate))


def optimal_hash_count(capacity: int, bit_count: int) -> int:
    """Return the optimal number of hash functions (``k``), never less than 1.

    Positions are derived by double hashing, so ``k`` only costs index
    arithmetic, not extra hash evaluations.
    """
    _check_positive("capacity", capacity)
    _check_positive("bit_count", bit_count)
    k = int(math.ceil(bit_count / capacity * LN2))
    return max(1, k)


def expected_fp_rate(capacity: int, bit_count: int, hash_count: int) -> float:
    """Classical false positive estimate ``(1 - e^(-k*n/m))^k``."""
    _check_positive("bit_count", bit_count)
    _check_positive("hash_count", hash_count)
    if capacity <= 0:
        return 0.0
    return (1.0 - math.exp(-hash_count * capacity / bit_count)) ** hash_count


@dataclass(frozen=True)
class FilterConfig:
    """Immutable sizing of one filter: ``n``, ``p``, ``m`` and ``k``."""

    capacity: int
    fp_rate: float
    bit_count: int
    hash_count: int

    @classmethod
    def for_capacity(cls, capacity: int, fp_rate: float) -> "FilterConfig":
        bit_count = optimal_bit_count(capacity, fp_rate)
        hash_count = optimal_hash_count(capacity, bit_count)
        return cls(
            capacity=capacity,
            fp_rate=float(fp_rate),
            bit_count=bit_count,
            hash_count=hash_count,
        )

    @classmethod
    def for_byte_size(cls, size: int, fp_rate: float) -> "FilterConfig":
        """Size a filter from a memory budget of ``size`` bytes.

        The budget is turned into a capacity first, and ``m``/``k`` are then
        derived from that capacity, so the resulting bit count can differ
        slightly from ``size * 8``.
        """
        _check_positive("size", size)
        capacity = max(1, optimal_capacity(size * 8, fp_rate))
        return cls.for_capacity(capacity, fp_rate)

    @property
    def byte_size(self) -> int:
        return (self.bit_count + 7) // 8

    @property
    def expected_fp_rate(self) -> float:
        """False positive rate expected once ``capacity`` keys are inserted."""
        return expected_fp_rate(self.capacity, self.bit_count, self.hash_count)
