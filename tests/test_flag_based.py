import threading
import time

import pytest

from lendcell.flag_based import AtomicLendCell, OwnerDroppedError


def _spawn_reader(borrow):
    """Start a thread reading the borrow; the outcome dict gets 'value' or 'error'."""
    outcome = {}

    def work():
        try:
            outcome["value"] = borrow.as_ref()
        except OwnerDroppedError as exc:
            outcome["error"] = exc

    reader = threading.Thread(target=work)
    reader.start()
    return reader, outcome


def test_epoch_borrow():
    cell = AtomicLendCell(4)
    started = [_spawn_reader(cell.borrow()) for _ in range(2)]
    for reader, _ in started:
        reader.join()
    assert [outcome for _, outcome in started] == [{"value": 4}, {"value": 4}]


def test_epoch_safety():
    data = [42]
    seen = []

    cell = AtomicLendCell(data)
    borrow = cell.borrow()
    assert borrow.as_ref()[0] == 42

    def hold():
        seen.append(data[0])
        time.sleep(0.05)

    handle = threading.Thread(target=hold)
    handle.start()

    cell.drop()

    with pytest.raises(OwnerDroppedError):
        borrow.as_ref()

    handle.join()
    assert seen == [42]


def test_borrow_dropped_after_owner_raises():
    cell = AtomicLendCell("value")
    borrow = cell.borrow()
    cell.drop()
    with pytest.raises(OwnerDroppedError):
        borrow.drop()
    assert borrow.released


def test_borrow_dropped_before_owner_is_fine():
    cell = AtomicLendCell("value")
    borrow = cell.borrow()
    for _ in range(2):
        borrow.drop()
    cell.drop()
    assert borrow.released
    assert not cell.alive


def test_owner_access_after_drop_raises():
    cell = AtomicLendCell(1)
    assert cell.as_ref() == 1
    cell.drop()
    with pytest.raises(OwnerDroppedError):
        cell.as_ref()


@pytest.mark.parametrize("use", [lambda b: b.as_ref(), lambda b: b.clone()])
def test_released_borrow_refuses(use):
    owner = AtomicLendCell(3)
    released = owner.borrow()
    released.drop()
    with pytest.raises(RuntimeError):
        use(released)
    assert released.released is True
    assert owner.as_ref() == 3


def test_clone_shares_value_and_liveness():
    payload = {"a": 1}
    cell = AtomicLendCell(payload)
    copy = cell.borrow().clone()
    assert copy.as_ref() is payload
    cell.drop()
    with pytest.raises(OwnerDroppedError):
        copy.as_ref()


def test_context_managers():
    with AtomicLendCell(10) as cell:
        with cell.borrow() as borrow:
            assert borrow.as_ref() == 10
        assert borrow.released
        assert cell.alive
    assert not cell.alive


def test_borrow_context_exiting_after_owner_dropped_raises():
    cell = AtomicLendCell(10)
    with pytest.raises(OwnerDroppedError):
        with cell.borrow() as borrow:
            assert borrow.as_ref() == 10
            cell.drop()


def test_borrow_deref_borrows_referenced_value():
    inner = AtomicLendCell([1, 2, 3])
    outer = AtomicLendCell(inner)
    deref = outer.borrow_deref()
    assert deref.as_ref() == [1, 2, 3]
    assert deref.as_ref() is inner.as_ref()
    outer.drop()
    with pytest.raises(OwnerDroppedError):
        deref.as_ref()


def test_borrow_deref_requires_reference():
    with pytest.raises(TypeError):
        AtomicLendCell(7).borrow_deref()


def test_borrows_see_owner_drop_from_other_thread():
    cell = AtomicLendCell(5)
    borrow = cell.borrow()

    reader, before = _spawn_reader(borrow)
    reader.join()
    assert before == {"value": 5}

    cell.drop()
    assert not cell.alive

    reader, after = _spawn_reader(borrow)
    reader.join()
    assert "value" not in after
    assert isinstance(after["error"], OwnerDroppedError)