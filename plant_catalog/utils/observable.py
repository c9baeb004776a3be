"""
Minimal observable values with explicit subscriptions.

Live store queries hand out an `Observable`; consumers subscribe a callback and
receive the current value immediately plus every later emission. `map` derives
a new observable that re-applies a transform on each upstream emission, which
is how the repository attaches the custom sort to a live query. A derived
observable follows its upstream only while it has observers of its own; with
none, `value` is computed from the upstream on demand.

Usage:
    source = MutableObservable([3, 1, 2])
    doubled = source.map(lambda xs: [x * 2 for x in xs])
    subscription = doubled.subscribe(print)   # prints [6, 2, 4]
    source.emit([5])                          # prints [10]
    subscription.dispose()
"""

from __future__ import annotations

import itertools
import threading
from typing import Callable, Dict, Generic, Optional, TypeVar

from plant_catalog.utils.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T")
U = TypeVar("U")

Observer = Callable[[T], None]

_MISSING = object()


class Subscription:
    """Handle returned by `Observable.subscribe`; `dispose` is idempotent."""

    def __init__(self, on_dispose: Callable[[], None]) -> None:
        self._on_dispose: Optional[Callable[[], None]] = on_dispose

    @property
    def disposed(self) -> bool:
        return self._on_dispose is None

    def dispose(self) -> None:
        callback, self._on_dispose = self._on_dispose, None
        if callback is not None:
            callback()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()


class Observable(Generic[T]):
    """
    Read side of an observable value.

    Observers are called synchronously, in subscription order, on the thread
    that emits. A failing observer is logged and skipped.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._observers: Dict[int, Observer[T]] = {}
        self._ids = itertools.count()
        self._value: object = _MISSING

    @property
    def value(self) -> Optional[T]:
        """Latest emitted value, or None before the first emission."""
        current = self._current()
        return None if current is _MISSING else current  # type: ignore[return-value]

    @property
    def has_value(self) -> bool:
        return self._current() is not _MISSING

    @property
    def observer_count(self) -> int:
        with self._lock:
            return len(self._observers)

    def subscribe(self, observer: Observer[T]) -> Subscription:
        """Register `observer`; it is called at once if a value is already present."""
        with self._lock:
            observer_id = next(self._ids)
            self._observers[observer_id] = observer
            current = self._value
        log.debug("Added observer", extra={"observer_id": observer_id})
        if current is not _MISSING:
            self._notify(observer_id, observer, current)  # type: ignore[arg-type]
        return Subscription(lambda: self._remove(observer_id))

    def map(self, transform: Callable[[T], U]) -> "Observable[U]":
        """Derived observable holding `transform(value)` for every upstream value."""
        return _MappedObservable(self, transform)

    def _current(self) -> object:
        return self._value

    def _remove(self, observer_id: int) -> None:
        with self._lock:
            removed = self._observers.pop(observer_id, None)
        if removed is not None:
            log.debug("Removed observer", extra={"observer_id": observer_id})

    def _publish(self, value: T) -> None:
        with self._lock:
            self._value = value
            observers = list(self._observers.items())
        for observer_id, observer in observers:
            self._notify(observer_id, observer, value)

    @staticmethod
    def _notify(observer_id: int, observer: Observer[T], value: T) -> None:
        try:
            observer(value)
        except Exception:
            log.exception("Error in observer callback", extra={"observer_id": observer_id})


class MutableObservable(Observable[T]):
    """Observable whose owner pushes new values with `emit`."""

    def __init__(self, initial: object = _MISSING) -> None:
        super().__init__()
        if initial is not _MISSING:
            self._value = initial

    def emit(self, value: T) -> None:
        self._publish(value)


class _MappedObservable(Observable[U], Generic[T, U]):
    """Subscribed to the upstream only while it has at least one observer."""

    def __init__(self, upstream: Observable[T], transform: Callable[[T], U]) -> None:
        super().__init__()
        self._transform = transform
        self.upstream = upstream
        self._upstream_subscription: Optional[Subscription] = None

    def subscribe(self, observer: Observer[U]) -> Subscription:
        with self._lock:
            if self._upstream_subscription is None:
                # Replays the upstream value into self._value before the observer is added.
                self._upstream_subscription = self.upstream.subscribe(self._on_upstream)
        return super().subscribe(observer)

    def _current(self) -> object:
        with self._lock:
            if self._upstream_subscription is not None:
                return self._value
        upstream = self.upstream._current()
        return _MISSING if upstream is _MISSING else self._transform(upstream)  # type: ignore[arg-type]

    def _remove(self, observer_id: int) -> None:
        super()._remove(observer_id)
        with self._lock:
            if self._observers or self._upstream_subscription is None:
                return
            subscription, self._upstream_subscription = self._upstream_subscription, None
            self._value = _MISSING
        subscription.dispose()
        log.debug("Released upstream subscription")

    def _on_upstream(self, value: T) -> None:
        self._publish(self._transform(value))


__all__ = ["MutableObservable", "Observable", "Subscription"]
