"""Empirical Bloom filter suite.

Splits a set of unique synthetic keys 80/20, builds a filter sized for the
inserted 80%, and reports:

1. Inserted keys that the filter fails to report (must be none)
2. False positive rate on the held-out 20% (never inserted)
3. Cardinality estimate against the true number of inserted keys
4. Sizing and memory footprint
5. Insert and query throughput

Run with ``python -m mqfilters.benchmark``.
"""
from __future__ import annotations

import itertools
import time
import uuid
from typing import Any, Callable, Dict, Iterable, Tuple

from mqfilters.bloom_filter import DEFAULT_FP_RATE, BloomFilter


def generate_synthetic_data(n: int = 100_000) -> list[str]:
    """Generate ``n`` unique random string keys."""
    # UUIDs are virtually guaranteed to be unique
    return [str(uuid.uuid4()) for _ in range(n)]


def build_split(
    keys: list[str], fp_rate: float = DEFAULT_FP_RATE
) -> Tuple[BloomFilter, list[str], list[str]]:
    """Sort ``keys``, insert the first 80% into a filter sized for them.

    Returns (bloom_filter, inserted_keys, held_out_keys).
    """
    keys = sorted(keys)
    split = int(len(keys) * 0.8)
    inserted = keys[:split]
    held_out = keys[split:]

    bloom: BloomFilter = BloomFilter.with_capacity(max(1, len(inserted)), fp_rate)
    bloom.update(inserted)

    return bloom, inserted, held_out


def _timed(operation: Callable[[str], Any], keys: Iterable[str]) -> Tuple[int, float]:
    count = 0
    start = time.perf_counter()
    for key in keys:
        operation(key)
        count += 1
    return count, time.perf_counter() - start


def _rate(count: int, seconds: float) -> float:
    return count / seconds if seconds > 0 else float("inf")


def check_membership(bloom: BloomFilter, inserted: list[str]) -> Dict[str, Any]:
    """Count inserted keys the filter does not report as members."""
    print("[1] False negatives")
    false_negatives = [key for key in inserted if not bloom.contains(key)]
    print(f"  Keys inserted: {len(inserted)}")
    print(f"  Reported absent: {len(false_negatives)}")
    if false_negatives:
        print(f"  First absent keys: {false_negatives[:5]}")
    print()
    return {"train_count": len(inserted), "missing": len(false_negatives)}


def measure_false_positives(
    bloom: BloomFilter, inserted: list[str], held_out: list[str]
) -> Dict[str, Any]:
    """Measure the empirical false positive rate on keys never inserted."""
    print("[2] False positive rate")
    inserted_set = set(inserted)
    never_inserted = [key for key in held_out if key not in inserted_set]

    if not never_inserted:
        print("  No held-out keys to query.")
        print()
        return {"held_out": 0, "false_positives": 0, "fp_rate": 0.0}

    false_positives = sum(1 for key in never_inserted if key in bloom)
    fpr = false_positives / len(never_inserted)

    print(f"  Held-out keys: {len(never_inserted)}")
    print(f"  False positives: {false_positives}")
    print(f"  Observed rate: {fpr:.6f} (configured {bloom.fp_rate})")
    print()
    return {"held_out": len(never_inserted), "false_positives": false_positives, "fp_rate": fpr}


def check_cardinality(bloom: BloomFilter, inserted: list[str]) -> Dict[str, Any]:
    """Compare the cardinality estimate with the number of inserted keys."""
    print("[3] Cardinality estimate")
    estimate = bloom.approx_cardinality()
    error = estimate - len(inserted)
    print(f"  Inserted: {len(inserted)}")
    print(f"  Estimated: {estimate}")
    print(f"  Error: {error:+d}")
    print()
    return {"inserted": len(inserted), "estimate": estimate, "error": error}


def show_properties(bloom: BloomFilter, inserted: list[str]) -> Dict[str, Any]:
    """Report sizing and memory footprint."""
    print("[4] Sizing")
    bytes_len = len(bloom.bit_array)
    per_key = bytes_len / len(inserted) if inserted else 0.0

    print(f"  Capacity (n): {bloom.capacity}")
    print(f"  Bits (m): {bloom.bit_count}")
    print(f"  Hashes (k): {bloom.hash_count}")
    print(f"  Bits set: {bloom.population_count()}")
    print(f"  Memory: {bytes_len} bytes ({bytes_len / (1024 * 1024):.2f} MiB)")
    print(f"  Bytes per key: {per_key:.4f}")
    print()
    return {
        "bit_count": bloom.bit_count,
        "byte_size": bytes_len,
        "hash_count": bloom.hash_count,
        "bytes_per_key": per_key,
    }


def measure_performance(
    bloom: BloomFilter, inserted: list[str], held_out: list[str], query_ops: int = 1_000_000
) -> Dict[str, Any]:
    """Time inserts into a fresh filter with the same sizing, then ``query_ops`` lookups."""
    print("[5] Throughput")
    fresh: BloomFilter = BloomFilter.with_capacity_and_hasher(
        bloom.capacity, bloom.fp_rate, bloom.hasher
    )

    insert_count, insert_time = _timed(fresh.insert, inserted)
    queries = itertools.islice(itertools.cycle(held_out), query_ops) if held_out else ()
    query_count, query_time = _timed(fresh.contains, queries)

    insert_rate = _rate(insert_count, insert_time)
    query_rate = _rate(query_count, query_time)
    print(f"  insert: {insert_count} keys in {insert_time:.4f}s ({insert_rate:,.0f} keys/s)")
    print(f"  contains: {query_count} keys in {query_time:.4f}s ({query_rate:,.0f} keys/s)")
    print()

    return {
        "insert_count": insert_count,
        "insert_time": insert_time,
        "insert_ops_per_sec": insert_rate,
        "query_count": query_count,
        "query_time": query_time,
        "query_ops_per_sec": query_rate,
    }


def run_all(
    n: int = 100_000, fp_rate: float = DEFAULT_FP_RATE, query_ops: int = 1_000_000
) -> Dict[str, Dict[str, Any]]:
    """Run the whole suite on ``n`` synthetic keys."""
    keys = generate_synthetic_data(n)

    print("=" * 60)
    print(f"Bloom filter suite: {len(keys)} keys, fp_rate={fp_rate}")
    print("=" * 60)
    print()

    bloom, inserted, held_out = build_split(keys, fp_rate)

    results = {
        "membership": check_membership(bloom, inserted),
        "false_positives": measure_false_positives(bloom, inserted, held_out),
        "cardinality": check_cardinality(bloom, inserted),
        "properties": show_properties(bloom, inserted),
        "performance": measure_performance(bloom, inserted, held_out, query_ops),
    }

    print("=" * 60)
    print("Suite completed successfully!")
    print("=" * 60)
    return results


if __name__ == "__main__":
    run_all()
