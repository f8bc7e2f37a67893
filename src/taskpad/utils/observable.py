"""Minimal publish/subscribe value holder."""

from __future__ import annotations

from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class Observable(Generic[T]):
    """Holds a current value and notifies listeners whenever it is replaced.

    New subscribers are called immediately with the current value.
    """

    def __init__(self, value: T):
        self._value = value
        self._listeners: list[Callable[[T], None]] = []
        self._detach: Callable[[], None] | None = None

    @property
    def value(self) -> T:
        return self._value

    def next(self, value: T) -> None:
        """Replace the value and notify every listener."""
        self._value = value
        for listener in list(self._listeners):
            listener(value)

    def _attach(self, listener: Callable[[T], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def subscribe(self, listener: Callable[[T], None]) -> Callable[[], None]:
        """Register ``listener``; returns a function that unsubscribes it."""
        unsubscribe = self._attach(listener)
        listener(self._value)
        return unsubscribe

    def map(self, fn: Callable[[T], R]) -> Observable[R]:
        """Derived observable recomputed from this one on every change.

        Call :meth:`close` on the result to stop following this one.
        """
        derived: Observable[R] = Observable(fn(self._value))
        derived._detach = self._attach(lambda value: derived.next(fn(value)))
        return derived

    def close(self) -> None:
        """Detach from the source of a derived observable and drop listeners."""
        if self._detach is not None:
            self._detach()
            self._detach = None
        self._listeners.clear()
