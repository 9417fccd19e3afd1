"""Bloom filter built on double hashing over a packed bit array.

The filter is sized from a capacity (or a byte budget) and a target false
positive rate, hashes every key with a seeded :class:`DoubleHasher`, and
stores only bit positions, never the keys themselves.

Not thread-safe: concurrent readers are fine, but any ``insert`` or
``clear`` must be serialised by the caller.
"""
from __future__ import annotations

import logging
import math
import sys
from typing import Optional, Tuple

from .bitset import BitSet
from .capabilities import ClearableQueryFilter, InsertableQueryFilter, K
from .hashing import DoubleHasher
from .errors import QueryFilterError
from .sizing import FilterConfig, round_half_up

logger = logging.getLogger(__name__)

DEFAULT_FP_RATE = 0.01

# Returned by the cardinality estimate once every bit is set.
SATURATED_CARDINALITY = sys.maxsize


class BloomFilter(InsertableQueryFilter[K], ClearableQueryFilter[K]):
    """Standard Bloom filter supporting insert, query and clear.

    Keys cannot be removed individually; :meth:`clear` is the only way to
    reset bits.
    """

    def __init__(
        self,
        capacity: int,
        fp_rate: float = DEFAULT_FP_RATE,
        hasher: Optional[DoubleHasher] = None,
        *,
        config: Optional[FilterConfig] = None,
    ) -> None:
        """Initialize a Bloom filter.

        Args:
            capacity: Expected number of distinct keys.
            fp_rate: Target false positive rate, strictly between 0 and 1.
            hasher: Seeded hash source. Defaults to ``DoubleHasher()``.
            config: Precomputed sizing. When given, ``capacity`` and
                ``fp_rate`` are ignored.

        Raises:
            QueryFilterError: If the configuration is invalid.
        """
        if config is None:
            config = FilterConfig.for_capacity(capacity, fp_rate)
        self._config = config
        self._hasher = hasher if hasher is not None else DoubleHasher()
        self._bits = BitSet(config.bit_count)
        logger.debug(
            "Created Bloom filter: capacity=%d fp_rate=%g bits=%d hashes=%d seeds=%s",
            config.capacity,
            config.fp_rate,
            config.bit_count,
            config.hash_count,
            self._hasher.seeds,
        )

    @classmethod
    def new(cls, capacity: int, fp_rate: float = DEFAULT_FP_RATE) -> "BloomFilter[K]":
        return cls.with_capacity(capacity, fp_rate)

    @classmethod
    def with_capacity(cls, capacity: int, fp_rate: float = DEFAULT_FP_RATE) -> "BloomFilter[K]":
        """Create a filter for ``capacity`` keys at ``fp_rate``."""
        return cls.with_capacity_and_hasher(capacity, fp_rate, DoubleHasher())

    @classmethod
    def with_size(cls, size: int, fp_rate: float = DEFAULT_FP_RATE) -> "BloomFilter[K]":
        """Create a filter fitting a budget of ``size`` bytes at ``fp_rate``."""
        return cls.with_size_and_hasher(size, fp_rate, DoubleHasher())

    @classmethod
    def with_seeds(
        cls, capacity: int, fp_rate: float, seeds: Tuple[int, int]
    ) -> "BloomFilter[K]":
        """Create a filter whose hasher uses an explicit seed pair."""
        try:
            seed1, seed2 = seeds
        except (TypeError, ValueError):
            raise QueryFilterError(f"seeds must be a pair of integers, got {seeds!r}") from None
        return cls.with_capacity_and_hasher(capacity, fp_rate, DoubleHasher(seed1, seed2))

    @classmethod
    def with_capacity_and_hasher(
        cls, capacity: int, fp_rate: float, hasher: DoubleHasher
    ) -> "BloomFilter[K]":
        config = FilterConfig.for_capacity(capacity, fp_rate)
        return cls(config.capacity, config.fp_rate, hasher, config=config)

    @classmethod
    def with_size_and_hasher(
        cls, size: int, fp_rate: float, hasher: DoubleHasher
    ) -> "BloomFilter[K]":
        config = FilterConfig.for_byte_size(size, fp_rate)
        return cls(config.capacity, config.fp_rate, hasher, config=config)

    @property
    def config(self) -> FilterConfig:
        return self._config

    @property
    def capacity(self) -> int:
        return self._config.capacity

    @property
    def fp_rate(self) -> float:
        return self._config.fp_rate

    @property
    def bit_count(self) -> int:
        return self._config.bit_count

    @property
    def hash_count(self) -> int:
        return self._config.hash_count

    @property
    def byte_size(self) -> int:
        return self._config.byte_size

    @property
    def hasher(self) -> DoubleHasher:
        return self._hasher

    def _indices(self, key: K):
        return self._hasher.hash_iter(key, self._config.hash_count, self._config.bit_count)

    def contains(self, key: K) -> bool:
        """Return ``True`` if ``key`` may be present, ``False`` if definitely absent."""
        # Short-circuits on the first unset bit.
        for index in self._indices(key):
            if not self._bits.test(index):
                return False
        return True

    def insert(self, key: K) -> None:
        """Insert ``key``. Inserting the same key again changes nothing."""
        for index in self._indices(key):
            self._bits.set(index)

    def clear(self) -> None:
        """Forget every inserted key."""
        self._bits.clear_all()

    def population_count(self) -> int:
        """Number of bits currently set."""
        return self._bits.population_count()

    def is_empty(self) -> bool:
        return self._bits.population_count() == 0

    def approx_current_capacity(self) -> int:
        """Estimate how many distinct keys were inserted since the last clear.

        Uses ``-(m / k) * ln(1 - ones / m)``. When every bit is set the
        logarithm is undefined and :data:`SATURATED_CARDINALITY` is returned.
        """
        m = float(self._config.bit_count)
        k = float(self._config.hash_count)
        ones = self._bits.population_count()
        if ones >= self._config.bit_count:
            logger.warning(
                "Bloom filter saturated (%d of %d bits set); cardinality estimate is unbounded",
                ones,
                self._config.bit_count,
            )
            return SATURATED_CARDINALITY
        count = -(m / k) * math.log(1.0 - ones / m)
        return round_half_up(count)

    approx_cardinality = approx_current_capacity

    def approx_fp_rate(self) -> float:
        """Current false positive probability given the fill ratio, ``(ones / m)^k``."""
        fill = self._bits.population_count() / self._config.bit_count
        return fill ** self._config.hash_count

    @property
    def bit_array(self) -> memoryview:
        """Expose the underlying packed bits for inspection."""
        return self._bits.bit_array

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(capacity={self.capacity}, fp_rate={self.fp_rate}, "
            f"bit_count={self.bit_count}, hash_count={self.hash_count}, "
            f"ones={self.population_count()})"
        )
