# lendcell

`lendcell` lets one owner give read-only access to a value to other threads,
with separate owner and borrower roles. The owner is an `AtomicLendCell`.
Each handle it gives out is an `AtomicBorrowCell`. A borrow can be cloned and
passed to worker threads. The package offers two variants with the same
interface, and each one detects a different way that a borrow can outlive its
owner.

## `lendcell.counting`: borrow count

The owner keeps a thread-safe count of its live borrows. `borrow()`,
`borrow_deref()` and `clone()` each add one to the count. Dropping a borrow
subtracts one. A borrow that is garbage-collected without being dropped is
released automatically. If `drop()` is called on the owner while the count is
above zero, it raises `OutstandingBorrowError` and the owner stays usable.
After a successful drop, calling `as_ref()` or `borrow()` on the owner raises
`RuntimeError`.

```python
import threading
from lendcell.counting import AtomicLendCell

cell = AtomicLendCell(4)

def worker(borrow):
    with borrow:
        print(borrow.as_ref())

threads = [threading.Thread(target=worker, args=(cell.borrow(),)) for _ in range(2)]
for t in threads:
    t.start()
for t in threads:
    t.join()

print(cell.borrow_count)  # 0
cell.drop()               # succeeds: every borrow has been dropped
```

The extra read-only properties are `AtomicLendCell.borrow_count`,
`AtomicLendCell.dropped` and `AtomicBorrowCell.released`.

## `lendcell.flag_based`: liveness flag

The owner keeps only an "alive" flag and counts nothing, so cloning a borrow
adds no bookkeeping. Dropping the owner always succeeds. After that, these
calls raise `OwnerDroppedError`: `as_ref()` on a borrow, the first `drop()` on
a borrow, and `as_ref()` on the owner.

```python
from lendcell.flag_based import AtomicLendCell, OwnerDroppedError

cell = AtomicLendCell(42)
borrow = cell.borrow()
assert borrow.as_ref() == 42

cell.drop()
try:
    borrow.as_ref()
except OwnerDroppedError:
    print("owner is gone")
```

The extra read-only properties are `AtomicLendCell.alive` and
`AtomicBorrowCell.released`.

## Common interface

Both modules define `AtomicLendCell` and `AtomicBorrowCell` with the same methods.

`AtomicLendCell(data)`:

- `as_ref()` returns the value without creating a borrow.
- `borrow()` returns an `AtomicBorrowCell` for the value.
- `borrow_deref()` is for a cell whose value has its own `as_ref()` method,
  such as another cell or borrow. The borrow it returns points at the result
  of that `as_ref()` call. If the value has no such method, it raises
  `TypeError`.
- `drop()` ends the owner's lifetime.
- When the cell is used as a context manager, it is dropped on exit.

`AtomicBorrowCell`:

- `as_ref()` returns the borrowed value. After the borrow has been dropped, it
  raises `RuntimeError`.
- `clone()` returns another borrow of the same value. Calling it on a dropped
  borrow raises `RuntimeError`.
- `drop()` releases the borrow. A second call does nothing.
- When the borrow is used as a context manager, it is dropped on exit.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```