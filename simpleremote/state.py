from __future__ import annotations

import logging
import threading
from typing import Callable, Generic, List, Optional, TypeVar


log = logging.getLogger("simpleremote.state")

T = TypeVar("T")


class StateChannel(Generic[T]):
    """Thread-safe last-value channel.

    New observers receive the most recent value immediately; after that
    every `post` is delivered in registration order. Observers see the
    latest value, not a guaranteed full history.

    Deliveries are serialised: a post from another thread waits until the
    current round of callbacks finishes, so the last value an observer
    receives always equals `value`. Callbacks must not wait on another
    thread that posts to the same channel.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._delivery_lock = threading.RLock()
        self._value: Optional[T] = None
        self._has_value = False
        self._observers: List[Callable[[T], None]] = []

    @property
    def value(self) -> Optional[T]:
        """Return the most recently posted value, or None."""
        with self._lock:
            return self._value

    def post(self, value: T) -> None:
        """Store `value` and notify observers."""
        with self._delivery_lock:
            with self._lock:
                self._value = value
                self._has_value = True
                observers = list(self._observers)
            for cb in observers:
                self._deliver(cb, value)

    def observe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Register `callback` and return a function that unregisters it."""
        with self._delivery_lock:
            with self._lock:
                self._observers.append(callback)
                has_value = self._has_value
                current = self._value
            if has_value:
                self._deliver(callback, current)  # type: ignore[arg-type]

        def _unsubscribe() -> None:
            self.remove_observer(callback)

        return _unsubscribe

    def remove_observer(self, callback: Callable[[T], None]) -> None:
        """Unregister `callback`; unknown callbacks are ignored."""
        with self._lock:
            try:
                self._observers.remove(callback)
            except ValueError:
                pass

    @staticmethod
    def _deliver(callback: Callable[[T], None], value: T) -> None:
        """Call one observer, logging its failure."""
        try:
            callback(value)
        except Exception:
            log.exception("state observer failed")
