"""In-process change feed for row-level insert/update notifications"""

import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from rent_assist.domain.models import ChangeEvent

logger = logging.getLogger(__name__)

Handler = Callable[[ChangeEvent], None]


@dataclass
class _Subscription:
    table: str
    filter: Dict[str, Any]
    handler: Handler


class ChangeFeed:
    """
    Table watchers for the persistence layer.

    Subscribers register a table and an equality filter over record fields;
    repositories publish once each write commits. Handler errors are logged and do
    not reach the writer or other subscribers.
    """

    def __init__(self):
        self._subscriptions: Dict[str, _Subscription] = {}
        self._lock = threading.Lock()

    def subscribe(self, table: str, filter: Optional[Dict[str, Any]], handler: Handler) -> str:
        """Register ``handler`` for changes to ``table`` matching ``filter``; returns an unsubscribe token"""
        token = str(uuid.uuid4())
        with self._lock:
            self._subscriptions[token] = _Subscription(table=table, filter=dict(filter or {}), handler=handler)
        return token

    def unsubscribe(self, token: str) -> bool:
        with self._lock:
            return self._subscriptions.pop(token, None) is not None

    def publish(self, event: ChangeEvent) -> int:
        """Deliver ``event`` to matching subscribers; returns the number notified"""
        with self._lock:
            matching = [
                sub for sub in self._subscriptions.values()
                if sub.table == event.table and _matches(sub.filter, event.record)
            ]

        for sub in matching:
            try:
                sub.handler(event)
            except Exception:
                logger.exception("Change feed handler failed", extra={"table": event.table, "action": event.action})

        return len(matching)


def _matches(filter: Dict[str, Any], record: Dict[str, Any]) -> bool:
    return all(record.get(key) == value for key, value in filter.items())


change_feed = ChangeFeed()
