"""
Persistence gateway: create / update / remove / list against the two REST
collections (cards, columns) of the persistence service.

Write model is at-most-once and fire-and-forget:
    - every call issues exactly one request
    - a non-2xx response, transport error or undecodable body is logged and
      the call returns its failure value (None / False / [])
    - nothing is retried and the caller's local state is never rolled back

PersistenceListener maps the six structural intents onto gateway calls and
runs them on an executor so the board never waits on the network.
"""
import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor, wait
from typing import Any, Callable, Dict, List, Optional, Set

import requests

from .bus import EventBus, IntentType
from .schema import EntityKind

logger = logging.getLogger(__name__)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# PersistenceGateway — HTTP client
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class PersistenceGateway:
    """JSON-over-HTTP client for the cards and columns collections."""

    def __init__(
        self,
        base_url: str = "http://localhost:3000/",
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.timeout = timeout
        self.session = session or requests.Session()

    def _url(self, kind: EntityKind, entity_id: Optional[str] = None) -> str:
        if entity_id is None:
            return f"{self.base_url}{kind.collection}/"
        return f"{self.base_url}{kind.collection}/{entity_id}"

    def _request(self, method: str, url: str, **kwargs) -> Optional[requests.Response]:
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.warning(f"{method} {url} failed: {e}")
            return None
        if not response.ok:
            logger.warning(f"{method} {url} returned {response.status_code}")
            return None
        return response

    def _json(self, method: str, url: str, **kwargs) -> Optional[Any]:
        response = self._request(method, url, **kwargs)
        if response is None:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.warning(f"{method} {url} returned invalid JSON: {e}")
            return None

    def create(self, kind: EntityKind, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """POST a new entity. Returns the stored entity, or None on failure."""
        return self._json("POST", self._url(kind), json=payload)

    def update(self, kind: EntityKind, entity_id: str, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """PATCH a subset of fields. Returns the stored entity, or None on failure."""
        return self._json("PATCH", self._url(kind, entity_id), json=payload)

    def remove(self, kind: EntityKind, entity_id: str) -> bool:
        """DELETE one entity. Returns True on a 2xx response."""
        return self._request("DELETE", self._url(kind, entity_id)) is not None

    def list(self, kind: EntityKind) -> List[Dict[str, Any]]:
        """GET every entity of a kind. Failure -> []."""
        data = self._json("GET", self._url(kind))
        if not isinstance(data, list):
            if data is not None:
                logger.warning(f"Expected a list of {kind.collection}, got {type(data).__name__}")
            return []
        return data

    def close(self) -> None:
        self.session.close()


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Executors
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class InlineExecutor(Executor):
    """Runs each call immediately on the caller's thread (tests, one-shot CLI)."""

    def submit(self, fn, *args, **kwargs) -> Future:
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# PersistenceListener — intent -> gateway call
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class PersistenceListener:
    """
    Subscribes to the six structural intents and forwards each one to the
    gateway. Calls are independent: they may finish in any order, and the
    last response to arrive wins on the server.
    """

    def __init__(self, bus: EventBus, gateway: PersistenceGateway, executor: Optional[Executor] = None):
        self.bus = bus
        self.gateway = gateway
        self.executor = executor or InlineExecutor()
        self._pending: Set[Future] = set()
        self._lock = threading.Lock()

        self._handlers: Dict[IntentType, Callable] = {
            IntentType.CARD_CREATE: self._on_card_create,
            IntentType.CARD_UPDATE: self._on_card_update,
            IntentType.CARD_DELETE: self._on_card_delete,
            IntentType.CONTAINER_CREATE: self._on_container_create,
            IntentType.CONTAINER_UPDATE: self._on_container_update,
            IntentType.CONTAINER_DELETE: self._on_container_delete,
        }
        for intent, handler in self._handlers.items():
            bus.subscribe(intent, handler)

    @classmethod
    def threaded(cls, bus: EventBus, gateway: PersistenceGateway, max_workers: int = 4) -> "PersistenceListener":
        pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="boardsync-io")
        return cls(bus, gateway, executor=pool)

    def detach(self) -> None:
        for intent, handler in self._handlers.items():
            self.bus.unsubscribe(intent, handler)

    # ── intent handlers ──────────────────────────────────────

    def _on_card_create(self, **payload) -> None:
        self._submit(f"create card {payload.get('id')}", self.gateway.create, EntityKind.CARD, payload)

    def _on_card_update(self, id: str, **fields) -> None:
        self._submit(f"update card {id}", self.gateway.update, EntityKind.CARD, id, {"id": id, **fields})

    def _on_card_delete(self, id: str) -> None:
        self._submit(f"remove card {id}", self.gateway.remove, EntityKind.CARD, id)

    def _on_container_create(self, **payload) -> None:
        self._submit(f"create column {payload.get('id')}", self.gateway.create, EntityKind.CONTAINER, payload)

    def _on_container_update(self, id: str, **fields) -> None:
        self._submit(f"update column {id}", self.gateway.update, EntityKind.CONTAINER, id, {"id": id, **fields})

    def _on_container_delete(self, id: str) -> None:
        self._submit(f"remove column {id}", self.gateway.remove, EntityKind.CONTAINER, id)

    # ── completion ───────────────────────────────────────────

    def _submit(self, label: str, fn: Callable, *args) -> Future:
        future = self.executor.submit(fn, *args)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(lambda f: self._on_done(label, f))
        return future

    def _on_done(self, label: str, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)
        error = future.exception()
        if error is not None:
            logger.error(f"{label}: gateway raised {error!r}")
            return
        if future.result():
            logger.info(f"{label}: ok")
        else:
            logger.info(f"{label}: not applied remotely (local state kept)")

    def flush(self, timeout: Optional[float] = None) -> None:
        """Block until every call issued so far has completed."""
        with self._lock:
            pending = list(self._pending)
        if pending:
            wait(pending, timeout=timeout)

    def close(self) -> None:
        self.flush()
        self.executor.shutdown(wait=True)
