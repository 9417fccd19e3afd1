"""Capability interfaces for approximate membership query filters.

Each interface describes one family of operations. Concrete filters subclass
only the ones they support, and host code should accept the narrowest
interface it needs so that another filter (counting, cuckoo, ...) can be
dropped in without changes.

False positives are allowed by every implementation. False negatives are not.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Hashable, Iterable, TypeVar

K = TypeVar("K", bound=Hashable)


class QueryFilter(ABC, Generic[K]):
    """A filter that can be asked whether a key is a member of the set."""

    @abstractmethod
    def contains(self, key: K) -> bool:
        """Return ``True`` if ``key`` is believed to be in the filter.

        ``False`` is definitive. ``True`` may be a false positive.
        """

    def __contains__(self, key: object) -> bool:
        return self.contains(key)  # type: ignore[arg-type]


class InsertableQueryFilter(QueryFilter[K]):
    """A filter that supports adding keys."""

    @abstractmethod
    def insert(self, key: K) -> None:
        """Insert ``key`` into the filter."""

    def update(self, keys: Iterable[K]) -> None:
        """Insert all ``keys`` into the filter."""
        for key in keys:
            self.insert(key)


class RemovableQueryFilter(QueryFilter[K]):
    """A filter that supports removing individual keys."""

    @abstractmethod
    def remove(self, key: K) -> None:
        """Remove ``key`` from the filter."""


class ClearableQueryFilter(QueryFilter[K]):
    """A filter that can forget every key at once."""

    @abstractmethod
    def clear(self) -> None:
        """Remove all keys from the filter."""
