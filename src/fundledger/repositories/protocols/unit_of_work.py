"""Unit of work protocol."""

from typing import Protocol


class UnitOfWork(Protocol):
    """
    Transactional boundary around repository writes.

    Used as a context manager: commits on normal exit, rolls back when the
    block raises. Repositories only flush; nothing is durable until the
    enclosing unit of work commits.
    """

    def __enter__(self) -> "UnitOfWork":
        ...

    def __exit__(self, exc_type, exc, tb) -> bool:
        ...
