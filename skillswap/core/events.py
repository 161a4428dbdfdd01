import logging
from typing import Any, Callable, Dict, List

from fastapi import Request

logger = logging.getLogger("events")

COURSES_TOPIC = "courses.refresh"
NOTIFICATIONS_TOPIC = "notifications.created"
MATCHES_TOPIC = "matches.updated"


def chat_topic(match_id: int) -> str:
    return f"chat.{match_id}"


class RefreshNotifier:
    """
    In-process subject that fans events out to subscribers.

    One instance is created per application and reached through
    ``request.app.state.notifier``. Subscribers register per topic, or for
    every topic with ``"*"``, and get back a callable that removes them.
    """

    WILDCARD = "*"

    def __init__(self):
        self._listeners: Dict[str, List[Callable[[str, Any], None]]] = {}

    def subscribe(self, topic: str, callback: Callable[[str, Any], None]) -> Callable[[], None]:
        self._listeners.setdefault(topic, []).append(callback)

        def unsubscribe():
            listeners = self._listeners.get(topic, [])
            if callback in listeners:
                listeners.remove(callback)

        return unsubscribe

    def listener_count(self, topic: str) -> int:
        return len(self._listeners.get(topic, []))

    def publish(self, topic: str, payload: Any = None) -> int:
        """Call every subscriber of ``topic``; return how many were called."""
        callbacks = list(self._listeners.get(topic, [])) + list(self._listeners.get(self.WILDCARD, []))
        logger.info(f"Publishing '{topic}' to {len(callbacks)} listener(s)")
        for callback in callbacks:
            try:
                callback(topic, payload)
            except Exception:
                logger.exception(f"Listener failed for topic '{topic}'")
        return len(callbacks)


def get_notifier(request: Request) -> RefreshNotifier:
    notifier = getattr(request.app.state, "notifier", None)
    if notifier is None:
        notifier = RefreshNotifier()
        request.app.state.notifier = notifier
    return notifier
