# src/smarttask/core/observable.py

"""
Change notification for the in-memory stores.

Readers (the console connector, tests) subscribe to a store and get called after
each mutation. Mutations made inside ``batch()`` produce a single notification
when the outermost batch exits, so a multi-step update is observed all at once.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable, Iterator

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class Observable:
    def __init__(self) -> None:
        self._listeners: list[Listener] = []
        self._batch_depth = 0
        self._dirty = False

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return _unsubscribe

    @contextlib.contextmanager
    def batch(self) -> Iterator[None]:
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._dirty:
                self._dirty = False
                self._emit()

    def _changed(self) -> None:
        if self._batch_depth:
            self._dirty = True
            return
        self._emit()

    def _emit(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("Store listener failed (%s)", type(self).__name__)
