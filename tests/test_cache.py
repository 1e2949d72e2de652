"""Tests for the write-once cell."""

from __future__ import annotations

import pytest

from hygiene.cache import OnceCell


def test_once_cell_initializes_once() -> None:
    cell: OnceCell[int] = OnceCell()
    calls = []

    def init() -> int:
        calls.append(1)
        return 42

    assert not cell.is_set()
    assert cell.get() is None
    assert cell.get_or_init(init) == 42
    assert cell.get_or_init(init) == 42
    assert cell.is_set()
    assert cell.get() == 42
    assert calls == [1]


def test_once_cell_stays_unset_when_init_fails() -> None:
    cell: OnceCell[str] = OnceCell()

    def boom() -> str:
        raise RuntimeError("nope")

    with pytest.raises(RuntimeError):
        cell.get_or_init(boom)

    assert not cell.is_set()
    assert cell.get_or_init(lambda: "ok") == "ok"
