"""Lazy converting wrapper around a motor cursor."""

import inspect
from typing import Any, AsyncIterator, Callable, Generic, Mapping, TypeVar

T = TypeVar("T")


class MappedCursor(Generic[T]):
    """
    Forward-only async cursor that converts each document as it arrives.

    Nothing is fetched until iteration starts and documents are converted
    one at a time, so the driver keeps streaming in batches. Like the driver
    cursor it wraps, it can be consumed only once.
    """

    def __init__(self, cursor: Any, transform: Callable[[Mapping[str, Any]], T]):
        self._cursor = cursor
        self._transform = transform
        self._iterator: AsyncIterator[Mapping[str, Any]] | None = None

    @property
    def cursor(self) -> Any:
        """Underlying driver cursor."""
        return self._cursor

    def __aiter__(self) -> "MappedCursor[T]":
        return self

    async def __anext__(self) -> T:
        if self._iterator is None:
            self._iterator = self._cursor.__aiter__()
        doc = await self._iterator.__anext__()
        return self._transform(doc)

    async def to_list(self, length: int | None = None) -> list[T]:
        docs = await self._cursor.to_list(length=length)
        return [self._transform(doc) for doc in docs]

    def sort(self, *args: Any, **kwargs: Any) -> "MappedCursor[T]":
        self._cursor.sort(*args, **kwargs)
        return self

    def skip(self, skip: int) -> "MappedCursor[T]":
        self._cursor.skip(skip)
        return self

    def limit(self, limit: int) -> "MappedCursor[T]":
        self._cursor.limit(limit)
        return self

    def batch_size(self, batch_size: int) -> "MappedCursor[T]":
        self._cursor.batch_size(batch_size)
        return self

    async def close(self) -> None:
        result = self._cursor.close()
        if inspect.isawaitable(result):
            await result
