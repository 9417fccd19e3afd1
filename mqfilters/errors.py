"""Error type shared by every membership query filter."""
from __future__ import annotations


class QueryFilterError(ValueError):
    """A filter operation failed.

    The single error kind used across filter implementations. It carries a
    free-text ``message`` and subclasses :class:`ValueError`, so code that
    already guards construction with ``except ValueError`` keeps working.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message
