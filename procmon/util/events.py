"""
Synchronous publish/subscribe hooks.

Handlers run on the thread that fires the event, in subscription order. A
handler that raises is logged and does not stop delivery to the others.
"""
import threading
from typing import Callable, Generic, List, TypeVar

from procmon.util.log_config import setup_logger

logger = setup_logger(__name__)

T = TypeVar("T")


class EventHook(Generic[T]):

    def __init__(self, name: str):
        self.name = name
        self._handlers: List[Callable[[T], None]] = []
        self._lock = threading.Lock()

    def subscribe(self, handler: Callable[[T], None]) -> None:
        with self._lock:
            self._handlers.append(handler)

    def unsubscribe(self, handler: Callable[[T], None]) -> bool:
        with self._lock:
            try:
                self._handlers.remove(handler)
            except ValueError:
                return False
            return True

    def fire(self, payload: T) -> None:
        # Snapshot so handlers may (un)subscribe while being called
        with self._lock:
            handlers = list(self._handlers)
        for handler in handlers:
            try:
                handler(payload)
            except Exception:
                logger.exception(f"Handler {handler!r} for '{self.name}' raised")

    def __len__(self) -> int:
        with self._lock:
            return len(self._handlers)
