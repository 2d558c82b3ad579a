from __future__ import annotations

from collections.abc import Callable
from typing import Any

ChangeCallback = Callable[[Any, str], None]


class ChangeNotifier:
    """Synchronous, ordered delivery of property-change notifications.

    Callbacks receive ``(sender, field_name)`` on the caller's stack in the
    order they subscribed.
    """

    def __init__(self) -> None:
        self._callbacks: list[ChangeCallback] = []

    def subscribe(self, callback: ChangeCallback) -> None:
        self._callbacks.append(callback)

    def unsubscribe(self, callback: ChangeCallback) -> bool:
        """Remove ``callback``; returns False if it was never subscribed."""
        try:
            self._callbacks.remove(callback)
        except ValueError:
            return False
        return True

    def notify(self, sender: Any, field_name: str) -> None:
        # Copy so a callback may unsubscribe itself mid-delivery
        for cb in list(self._callbacks):
            cb(sender, field_name)

    def __len__(self) -> int:
        return len(self._callbacks)
