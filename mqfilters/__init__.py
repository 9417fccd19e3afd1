"""Approximate membership query filters."""
from mqfilters.bitset import BitSet
from mqfilters.bloom_filter import DEFAULT_FP_RATE, SATURATED_CARDINALITY, BloomFilter
from mqfilters.capabilities import (
    ClearableQueryFilter,
    InsertableQueryFilter,
    QueryFilter,
    RemovableQueryFilter,
)
from mqfilters.errors import QueryFilterError
from mqfilters.hashing import DEFAULT_SEED1, DEFAULT_SEED2, DoubleHasher, encode_key
from mqfilters.sizing import (
    FilterConfig,
    expected_fp_rate,
    optimal_bit_count,
    optimal_capacity,
    optimal_hash_count,
)

__all__ = [
    "BitSet",
    "BloomFilter",
    "ClearableQueryFilter",
    "DEFAULT_FP_RATE",
    "DEFAULT_SEED1",
    "DEFAULT_SEED2",
    "DoubleHasher",
    "FilterConfig",
    "InsertableQueryFilter",
    "QueryFilter",
    "QueryFilterError",
    "RemovableQueryFilter",
    "SATURATED_CARDINALITY",
    "encode_key",
    "expected_fp_rate",
    "optimal_bit_count",
    "optimal_capacity",
    "optimal_hash_count",
]
