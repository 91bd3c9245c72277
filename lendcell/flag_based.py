"""Lending a value across threads, guarded by a single liveness flag.

An :class:`AtomicLendCell` owns a value and hands out :class:`AtomicBorrowCell`
objects that refer to it. No per-borrow count is kept: the owner only records
whether it is still alive, and borrows check that flag when they are used or
dropped, raising :class:`OwnerDroppedError` if the owner is gone.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Generic, TypeVar

T = TypeVar("T")

__all__ = ["OwnerDroppedError", "AtomicLendCell", "AtomicBorrowCell"]


class OwnerDroppedError(RuntimeError):
    """Raised when a borrow is used or dropped after its owner was dropped."""


class AtomicLendCell(Generic[T]):
    """Owns a value and lends it out, tracking only its own liveness."""

    def __init__(self, data: T) -> None:
        self._data = data
        self._alive = threading.Event()
        self._alive.set()

    def __repr__(self) -> str:
        state = "alive" if self._alive.is_set() else "dropped"
        return f"AtomicLendCell({self._data!r}, {state})"

    @property
    def alive(self) -> bool:
        """Whether the cell has not yet been dropped."""
        return self._alive.is_set()

    def as_ref(self) -> T:
        """Return the contained value without issuing a borrow."""
        if not self._alive.is_set():
            raise OwnerDroppedError("AtomicLendCell has been dropped")
        return self._data

    def borrow(self) -> AtomicBorrowCell[T]:
        """Issue a borrow of the contained value."""
        return AtomicBorrowCell(self._data, self._alive)

    def borrow_deref(self) -> AtomicBorrowCell[Any]:
        """Issue a borrow of the value that the contained reference points at.

        The contained value must itself expose ``as_ref()``.
        """
        resolve = getattr(self._data, "as_ref", None)
        if not callable(resolve):
            raise TypeError(
                f"{type(self._data).__name__!r} object does not refer to another value"
            )
        return AtomicBorrowCell(resolve(), self._alive)

    def drop(self) -> None:
        """Mark the cell as no longer alive."""
        self._alive.clear()
        # Let borrows in other threads observe the change.
        time.sleep(0)

    def __enter__(self) -> AtomicLendCell[T]:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.drop()


class AtomicBorrowCell(Generic[T]):
    """A borrow of a value held by an :class:`AtomicLendCell`."""

    def __init__(self, data: T, owner_alive: threading.Event) -> None:
        self._data = data
        self._owner_alive = owner_alive
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
        """Return the borrowed value, checking that the owner is still alive."""
        if self._released:
            raise RuntimeError("AtomicBorrowCell has already been dropped")
        if not self._owner_alive.is_set():
            raise OwnerDroppedError(
                "Attempting to access AtomicBorrowCell after owner was dropped"
            )
        return self._data

    def clone(self) -> AtomicBorrowCell[T]:
        """Issue another borrow of the same value and liveness flag."""
        if self._released:
            raise RuntimeError("cannot clone a dropped AtomicBorrowCell")
        return AtomicBorrowCell(self._data, self._owner_alive)

    def drop(self) -> None:
        """Release this borrow; raises if the owner was dropped first."""
        with self._lock:
            if self._released:
                return
            self._released = True
        if not self._owner_alive.is_set():
            raise OwnerDroppedError("AtomicBorrowCell dropped after its owner was dropped")

    def __enter__(self) -> AtomicBorrowCell[T]:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.drop()