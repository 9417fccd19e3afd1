from typing import Hashable, Set

import pytest

from mqfilters import BloomFilter
from mqfilters.capabilities import (
    ClearableQueryFilter,
    InsertableQueryFilter,
    QueryFilter,
    RemovableQueryFilter,
)


class ExactSetFilter(InsertableQueryFilter[Hashable], RemovableQueryFilter[Hashable]):
    """Exact filter used to check that host code is filter-agnostic."""

    def __init__(self) -> None:
        self._keys: Set[Hashable] = set()

    def contains(self, key: Hashable) -> bool:
        return key in self._keys

    def insert(self, key: Hashable) -> None:
        self._keys.add(key)

    def remove(self, key: Hashable) -> None:
        self._keys.discard(key)


def first_sighting(seen: InsertableQueryFilter, key: Hashable) -> bool:
    """Host code written against the insertable capability only."""
    if seen.contains(key):
        return False
    seen.insert(key)
    return True


class TestCapabilities:
    def test_bloom_filter_capabilities(self) -> None:
        bf = BloomFilter(100, 0.01)
        assert isinstance(bf, QueryFilter)
        assert isinstance(bf, InsertableQueryFilter)
        assert isinstance(bf, ClearableQueryFilter)
        assert not isinstance(bf, RemovableQueryFilter)
        assert not hasattr(bf, "remove")

    @pytest.mark.parametrize("cls", [QueryFilter, InsertableQueryFilter, ClearableQueryFilter, RemovableQueryFilter])
    def test_interfaces_are_abstract(self, cls) -> None:
        with pytest.raises(TypeError):
            cls()

    def test_incomplete_implementation_is_rejected(self) -> None:
        class QueryOnly(InsertableQueryFilter[str]):
            def contains(self, key: str) -> bool:
                return False

        with pytest.raises(TypeError):
            QueryOnly()

    @pytest.mark.parametrize("factory", [lambda: BloomFilter(100, 0.01), ExactSetFilter])
    def test_filters_are_interchangeable(self, factory) -> None:
        seen = factory()
        assert first_sighting(seen, "a") is True
        assert first_sighting(seen, "a") is False
        assert first_sighting(seen, "b") is True
        assert "a" in seen

    def test_update_inserts_every_key(self) -> None:
        exact = ExactSetFilter()
        exact.update(["x", "y"])
        assert "x" in exact and "y" in exact

    def test_removal_on_removable_filter(self) -> None:
        exact = ExactSetFilter()
        exact.insert("gone")
        exact.remove("gone")
        assert "gone" not in exact
