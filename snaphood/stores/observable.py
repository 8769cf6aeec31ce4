"""
Minimal observer base for the client stores.
"""
import logging
import threading
from typing import Any, Callable

logger = logging.getLogger(__name__)


class Observable:
    """Holds listeners and notifies them after every state replacement."""

    def __init__(self):
        self._listeners: list[Callable[[Any], None]] = []
        self._listeners_lock = threading.Lock()

    def add_listener(self, listener: Callable[[Any], None]) -> Callable[[], None]:
        """
        Register a listener.

        Returns:
            callable: Removes the listener when called
        """
        with self._listeners_lock:
            self._listeners = self._listeners + [listener]

        def remove():
            with self._listeners_lock:
                self._listeners = [fn for fn in self._listeners if fn is not listener]

        return remove

    def notify(self, value: Any = None):
        for listener in self._listeners:
            try:
                listener(value)
            except Exception:
                logger.exception(f"Listener {listener!r} failed")
