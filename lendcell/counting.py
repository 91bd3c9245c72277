"""Lending a value across threads, tracked by an atomic borrow count.

An :class:`AtomicLendCell` owns a value and hands out :class:`AtomicBorrowCell`
objects that refer to it. Every live borrow is counted. Dropping the owner
while borrows remain raises :class:`OutstandingBorrowError`.
"""

from __future__ import annotations

import threading
from typing import Any, Generic, TypeVar

T = TypeVar("T")

__all__ = ["OutstandingBorrowError", "AtomicLendCell", "AtomicBorrowCell"]


class OutstandingBorrowError(RuntimeError):
    """Raised when an owner is dropped while borrows of it still exist."""


class _Counter:
    """A thread-safe borrow counter that can be closed once it reaches zero."""

    __slots__ = ("_lock", "_value", "_closed")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0
        self._closed = False

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def increment(self) -> None:
        with self._lock:
            if self._closed:
                raise RuntimeError("cannot borrow from a dropped AtomicLendCell")
            self._value += 1

    def decrement(self) -> None:
        with self._lock:
            self._value -= 1

    def close(self) -> None:
        with self._lock:
            if self._value > 0:
                raise OutstandingBorrowError(
                    "An AtomicBorrowCell outlives the AtomicLendCell which issues it!"
                )
            self._closed = True


class AtomicLendCell(Generic[T]):
    """Owns a value and lends it out, counting the borrows it has issued."""

    def __init__(self, data: T) -> None:
        self._data = data
        self._counter = _Counter()

    def __repr__(self) -> str:
        return f"AtomicLendCell({self._data!r}, borrows={self._counter.value})"

    @property
    def borrow_count(self) -> int:
        """The number of borrows currently outstanding."""
        return self._counter.value

    @property
    def dropped(self) -> bool:
        """Whether the cell has been dropped."""
        return self._counter.closed

    def as_ref(self) -> T:
        """Return the contained value without issuing a borrow."""
        if self._counter.closed:
            raise RuntimeError("AtomicLendCell has been dropped")
        return self._data

    def borrow(self) -> AtomicBorrowCell[T]:
        """Issue a new counted borrow of the contained value."""
        return self._lend(self._data)

    def borrow_deref(self) -> AtomicBorrowCell[Any]:
        """Issue a borrow of the value that the contained reference points at.

        The contained value must itself expose ``as_ref()``.
        """
        resolve = getattr(self._data, "as_ref", None)
        if not callable(resolve):
            raise TypeError(
                f"{type(self._data).__name__!r} object does not refer to another value"
            )
        return self._lend(resolve())

    def _lend(self, target: Any) -> AtomicBorrowCell[Any]:
        self._counter.increment()
        return AtomicBorrowCell(target, self._counter)

    def drop(self) -> None:
        """Drop the cell; raises if any borrow is still outstanding."""
        self._counter.close()

    def __enter__(self) -> AtomicLendCell[T]:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.drop()


class AtomicBorrowCell(Generic[T]):
    """A counted borrow of a value held by an :class:`AtomicLendCell`."""

    def __init__(self, data: T, counter: _Counter) -> None:
        self._data = data
        self._counter = counter
        self._lock = threading.Lock()
        self._released = False

    def __repr__(self) -> str:
        state = "released" if self._released else repr(self._data)
        return f"AtomicBorrowCell({state})"

    @property
    def released(self) -> bool:
        """Whether this borrow has been dropped."""
        return self._released

    def as_ref(self) -> T:
        """Return the borrowed value."""
        if self._released:
            raise RuntimeError("AtomicBorrowCell has already been dropped")
        return self._data

    def clone(self) -> AtomicBorrowCell[T]:
        """Issue another borrow of the same value, counting it with the owner."""
        with self._lock:
            if self._released:
                raise RuntimeError("cannot clone a dropped AtomicBorrowCell")
            self._counter.increment()
        return AtomicBorrowCell(self._data, self._counter)

    def drop(self) -> None:
        """Release this borrow; further calls do nothing."""
        with self._lock:
            if self._released:
                return
            self._released = True
        self._counter.decrement()

    def __enter__(self) -> AtomicBorrowCell[T]:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.drop()

    def __del__(self) -> None:
        if hasattr(self, "_lock"):
            self.drop()