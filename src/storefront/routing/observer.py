"""Ordered subscriber list for navigation state changes."""

import logging
from collections.abc import Callable

logger = logging.getLogger("storefront.navigation")

Subscriber = Callable[[], object]


class Observer:
    """An explicit, ordered list of zero-argument callbacks.

    ``notify()`` calls every subscriber in subscription order. A failing
    subscriber is logged and does not stop the others.
    """

    __slots__ = ("_subscribers",)

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    def __len__(self) -> int:
        return len(self._subscribers)

    def subscribe(self, fn: Subscriber) -> Callable[[], None]:
        """Add *fn* and return a callable that removes it again."""
        self._subscribers.append(fn)
        return lambda: self.unsubscribe(fn)

    def unsubscribe(self, fn: Subscriber) -> bool:
        """Remove the first registration of *fn*. Returns whether it was found."""
        try:
            self._subscribers.remove(fn)
        except ValueError:
            return False
        return True

    def notify(self) -> None:
        # Snapshot: subscribers may unsubscribe themselves while notified
        for fn in tuple(self._subscribers):
            try:
                fn()
            except Exception:
                logger.exception("Navigation subscriber %r raised", fn)
