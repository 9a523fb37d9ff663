"""
Event bus for studio domain events.

Synchronous in-process pub/sub. Handlers run immediately in the publisher's
thread, after the publisher's store write has finished. Handler errors are
logged but never propagate: the primary operation is already saved.
"""

import logging
from typing import Callable, Dict, List

from core.events import StudioEvent

logger = logging.getLogger(__name__)


class EventBus:
    """
    In-process event bus for studio domain events.

    Subscribe by event class (or its name), publish by event instance.
    Handlers are called synchronously in subscription order.
    """

    def __init__(self):
        self._subscribers: Dict[str, List[Callable]] = {}

    @staticmethod
    def _name(event_type: type[StudioEvent] | str) -> str:
        return event_type if isinstance(event_type, str) else event_type.__name__

    def subscribe(self, event_type: type[StudioEvent] | str, callback: Callable) -> None:
        """
        Subscribe to events of a specific type.

        Args:
            event_type: Event class, or its name (e.g. 'PaymentRecorded')
            callback: Function to call when event is published
        """
        self._subscribers.setdefault(self._name(event_type), []).append(callback)

    def publish(self, event: StudioEvent) -> None:
        """
        Publish an event to all subscribers of that type.

        Args:
            event: StudioEvent instance to publish
        """
        event_type = event.__class__.__name__

        for callback in list(self._subscribers.get(event_type, [])):
            try:
                callback(event)
            except Exception:
                logger.exception(
                    "Handler %s failed for %s (event_id=%s)",
                    getattr(callback, "__name__", repr(callback)),
                    event_type,
                    event.event_id,
                )
