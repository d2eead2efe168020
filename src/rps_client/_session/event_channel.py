# Area: Session
"""
rps_client._session.event_channel — Typed event channel
=======================================================

Delivers session events to subscribers. Subscribers run synchronously,
in subscription order, on the thread that publishes (the host's tick).
"""

import logging
from typing import Callable, List, Optional, Tuple, Type

from ..events import SessionEvent

logger = logging.getLogger("rps_client.session.events")

Subscriber = Callable[[SessionEvent], None]


class EventChannel:
    """
    Registry of event subscribers.

    Usage:
        channel = EventChannel()
        channel.subscribe(on_any)
        channel.subscribe(on_result, RoundResult)
        channel.publish(RoundResult(...))
    """

    def __init__(self):
        """Initialize channel with no subscribers."""
        self._subscribers: List[Tuple[Subscriber, Optional[Type[SessionEvent]]]] = []

    def subscribe(
        self,
        callback: Subscriber,
        event_type: Optional[Type[SessionEvent]] = None,
    ) -> None:
        """
        Register a subscriber.

        Args:
            callback: Called with each matching event
            event_type: Only deliver events of this class (all if None)
        """
        self._subscribers.append((callback, event_type))
        name = event_type.__name__ if event_type else "all events"
        logger.debug(f"Subscribed {callback!r} to {name}")

    def unsubscribe(self, callback: Subscriber) -> None:
        """Remove every registration of a subscriber.

        Bound methods match by equality, so unsubscribe(view.on_event)
        undoes subscribe(view.on_event).
        """
        self._subscribers = [
            (cb, et) for cb, et in self._subscribers if cb != callback
        ]

    def publish(self, event: SessionEvent) -> int:
        """
        Deliver an event to matching subscribers.

        A subscriber that raises is logged and skipped; the others still
        receive the event.

        Returns:
            Number of subscribers that received the event
        """
        delivered = 0
        for callback, event_type in list(self._subscribers):
            if event_type is not None and not isinstance(event, event_type):
                continue
            try:
                callback(event)
                delivered += 1
            except Exception as e:
                logger.error(
                    f"Subscriber {callback!r} failed on {type(event).__name__}: {e}",
                    exc_info=True,
                )
        return delivered

    def __len__(self) -> int:
        return len(self._subscribers)
