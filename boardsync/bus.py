"""
Intent bus: the single funnel for structural changes on a board.

Components publish intents; the board's root listener handles REPARENT and
the persistence listener maps the six structural intents onto gateway calls.

Delivery is synchronous and FIFO. An intent published from inside a callback
is queued and delivered once the current intent has reached every subscriber,
so listeners always observe intents in emission order.
"""
import logging
from collections import deque
from enum import Enum
from typing import Callable, Deque, Dict, List, Tuple, Any

logger = logging.getLogger(__name__)


class IntentType(Enum):
    """Closed set of intents carried by the bus."""
    REPARENT = "reparent"

    CARD_CREATE = "card-create"                # addCardToDb
    CARD_UPDATE = "card-update"                # updateCardInDb
    CARD_DELETE = "card-delete"                # removeCardFromDb
    CONTAINER_CREATE = "container-create"      # addCardContainerToDb
    CONTAINER_UPDATE = "container-update"      # updateCardContainerInDb
    CONTAINER_DELETE = "container-delete"      # removeCardContainerFromDb

    @property
    def is_persistence(self) -> bool:
        return self is not IntentType.REPARENT


class EventBus:
    """Typed publish/subscribe with deterministic listener ordering."""

    def __init__(self):
        self.subscribers: Dict[IntentType, List[Callable]] = {}
        self._queue: Deque[Tuple[IntentType, Dict[str, Any]]] = deque()
        self._dispatching = False

    def subscribe(self, intent: IntentType, callback: Callable) -> None:
        """Register a callback for an intent. Callbacks run in registration order."""
        if intent not in self.subscribers:
            self.subscribers[intent] = []
        self.subscribers[intent].append(callback)

    def unsubscribe(self, intent: IntentType, callback: Callable) -> None:
        callbacks = self.subscribers.get(intent, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def subscriber_count(self, intent: IntentType) -> int:
        return len(self.subscribers.get(intent, []))

    def publish(self, intent: IntentType, **data) -> None:
        """Queue an intent and drain the queue unless a drain is already running."""
        self._queue.append((intent, data))
        if self._dispatching:
            return

        self._dispatching = True
        try:
            while self._queue:
                current, payload = self._queue.popleft()
                self._deliver(current, payload)
        finally:
            self._dispatching = False

    def _deliver(self, intent: IntentType, data: Dict[str, Any]) -> None:
        callbacks = list(self.subscribers.get(intent, []))
        if not callbacks:
            logger.debug(f"No subscribers for {intent.value}")
            return
        for callback in callbacks:
            try:
                callback(**data)
            except Exception:
                logger.exception(f"Error in {intent.value} callback")
