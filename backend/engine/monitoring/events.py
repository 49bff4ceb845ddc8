"""Topic-based publish/subscribe for engine output."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable

logger = logging.getLogger(__name__)

TELEMETRY = "telemetry"
GRID = "grid"
NOTIFICATION = "notification"

TOPICS = (TELEMETRY, GRID, NOTIFICATION)

Listener = Callable[[Any], None]


class EventBus:
    """Synchronous fan-out of engine events to subscribers.

    Listeners run inline on the publishing tick, so they must be quick.
    A listener that raises is logged and skipped; the remaining listeners
    and the tick itself carry on.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def subscribe(self, topic: str, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` on ``topic``; returns an unsubscribe callable."""
        if topic not in TOPICS:
            raise ValueError(f"Unknown topic {topic!r}; expected one of {TOPICS}")
        self._listeners[topic].append(listener)

        def _unsubscribe() -> None:
            try:
                self._listeners[topic].remove(listener)
            except ValueError:
                pass  # already removed

        return _unsubscribe

    def publish(self, topic: str, payload: Any) -> None:
        for listener in list(self._listeners[topic]):
            try:
                listener(payload)
            except Exception:
                logger.exception("Listener %r failed on topic %s", listener, topic)
