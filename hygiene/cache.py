"""Write-once cells for snapshots computed at most once per run."""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

T = TypeVar("T")


class _Unset:
    def __repr__(self) -> str:
        return "<unset>"


_UNSET = _Unset()


class OnceCell(Generic[T]):
    """Holds a value that is computed on first access and reused afterwards.

    The cell is meant for single-threaded use. There is no invalidation: the
    data it snapshots (git index, Cargo manifests) is assumed not to change
    while a run is in progress. If the initializer raises, the cell stays
    unset and the next access retries.
    """

    __slots__ = ("_value",)

    def __init__(self) -> None:
        self._value: T | _Unset = _UNSET

    def is_set(self) -> bool:
        return not isinstance(self._value, _Unset)

    def get(self) -> T | None:
        if isinstance(self._value, _Unset):
            return None
        return self._value

    def get_or_init(self, init: Callable[[], T]) -> T:
        if isinstance(self._value, _Unset):
            self._value = init()
        return self._value

    def __repr__(self) -> str:
        return f"OnceCell({self._value!r})"


__all__ = ["OnceCell"]
