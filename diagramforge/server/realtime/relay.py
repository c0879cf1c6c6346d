"""
Relay — publish/subscribe handle shared by the REST and Socket.IO layers.

One Relay is created when the app is built and passed explicitly to whatever
needs to publish (routes) or subscribe (the Socket.IO fan-out).  There is no
module-level instance.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

Listener = Callable[[str, Dict[str, Any]], None]


class Relay:
    def __init__(self) -> None:
        self._listeners: List[Listener] = []

    # ------------------------------------------------------------------
    # Listener registration
    # ------------------------------------------------------------------

    def subscribe(self, callback: Listener) -> None:
        """Register a callback that receives every published (event, payload)."""
        self._listeners.append(callback)

    def unsubscribe(self, callback: Listener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    # ------------------------------------------------------------------
    # Publish
    # ------------------------------------------------------------------

    def publish(self, event: str, payload: Dict[str, Any]) -> None:
        """Stamp the payload with a millisecond timestamp and broadcast it."""
        if "ts" not in payload:
            payload["ts"] = _now_ms()
        for cb in list(self._listeners):
            try:
                cb(event, payload)
            except Exception:
                # A broken listener must not fail the request that published.
                logger.exception("relay listener failed for %s", event)


def _now_ms() -> int:
    return int(time.time() * 1000)
