"""
Device position acquisition: a one-shot fix that gates posting and a
continuous watch that drives the user's live marker.
"""
import itertools
import logging
import threading
import time
from typing import Callable, Optional

from ..config import LOCATE_MAXIMUM_AGE_SECONDS, LOCATE_TIMEOUT_SECONDS
from ..exceptions import PositionError
from ..models.identity import Position
from ..stores.observable import Observable

logger = logging.getLogger(__name__)

DENIED_MESSAGE = "Location access denied. Please enable location services."
WATCH_DENIED_MESSAGE = "Location access denied. Please enable location services to see your position on the map."
UNAVAILABLE_MESSAGE = "Unable to retrieve your location. Please check your location settings."
UNSUPPORTED_MESSAGE = "Geolocation is not supported by this device."


class ReportedPositionSource:
    """
    Position source fed from outside the process.

    The browser (through the HTTP surface) or the CLI reports fixes and errors
    here; one-shot requests block until a fresh enough fix arrives. A one-shot
    request fails only on an error reported after it started.
    """

    def __init__(self):
        self._position: Optional[Position] = None
        self._error: Optional[PositionError] = None
        self._error_seq = 0
        self._condition = threading.Condition()
        self._watchers: dict[int, tuple[Callable, Callable]] = {}
        self._ids = itertools.count(1)

    def report(self, position: Position):
        with self._condition:
            self._position = position
            self._error = None
            self._condition.notify_all()
            watchers = list(self._watchers.values())
        for on_position, _ in watchers:
            on_position(position)

    def report_error(self, error: PositionError):
        with self._condition:
            self._error = error
            self._error_seq += 1
            self._condition.notify_all()
            watchers = list(self._watchers.values())
        for _, on_error in watchers:
            on_error(error)

    def get_current_position(self, timeout: float = LOCATE_TIMEOUT_SECONDS,
                             maximum_age: float = LOCATE_MAXIMUM_AGE_SECONDS,
                             high_accuracy: bool = True) -> Position:
        """
        Return a fix no older than maximum_age, waiting up to timeout for one.

        Raises:
            PositionError: On an error reported while waiting or when the
                timeout expires
        """
        deadline = time.monotonic() + timeout
        with self._condition:
            seen = self._error_seq
            while True:
                if self._position is not None and self._position.age() <= maximum_age:
                    return self._position
                if self._error_seq != seen:
                    raise self._error
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise PositionError(PositionError.TIMEOUT, "Timed out waiting for a position")
                self._condition.wait(remaining)

    def watch_position(self, on_position: Callable[[Position], None],
                       on_error: Callable[[PositionError], None]) -> int:
        with self._condition:
            watch_id = next(self._ids)
            self._watchers[watch_id] = (on_position, on_error)
            current = self._position
        if current is not None:
            on_position(current)
        return watch_id

    def clear_watch(self, watch_id: int):
        with self._condition:
            self._watchers.pop(watch_id, None)

    @property
    def watch_count(self) -> int:
        return len(self._watchers)


class GeolocationTracker(Observable):
    """Tracks the posting position and the live position separately."""

    def __init__(self, source=None, timeout: float = LOCATE_TIMEOUT_SECONDS,
                 maximum_age: float = LOCATE_MAXIMUM_AGE_SECONDS):
        super().__init__()
        self.source = source
        self.timeout = timeout
        self.maximum_age = maximum_age
        self.position: Optional[Position] = None
        self.live_position: Optional[Position] = None
        self.error: Optional[str] = None
        self.permission_denied = False
        self._watch_id: Optional[int] = None
        self._watch_error = False

    def locate(self) -> Optional[Position]:
        """
        Acquire a one-shot high-accuracy fix. Failures are recorded in error;
        nothing is retried.
        """
        if self.source is None:
            self.error = UNSUPPORTED_MESSAGE
            self.notify(self)
            return None

        try:
            position = self.source.get_current_position(
                timeout=self.timeout, maximum_age=self.maximum_age, high_accuracy=True
            )
        except PositionError as e:
            logger.warning(f"Could not get location: {e}")
            self.error = DENIED_MESSAGE if e.permission_denied else UNAVAILABLE_MESSAGE
            self.permission_denied = e.permission_denied
            self._watch_error = False
            self.notify(self)
            return None

        self.position = position
        self.error = None
        self.permission_denied = False
        self._watch_error = False
        self.notify(self)
        return position

    def start_watching(self):
        if self.source is None:
            self.error = UNSUPPORTED_MESSAGE
            self.notify(self)
            return
        if self._watch_id is None:
            self._watch_id = self.source.watch_position(self._on_live_position, self._on_live_error)

    def stop_watching(self):
        if self._watch_id is not None:
            self.source.clear_watch(self._watch_id)
            self._watch_id = None

    @property
    def watching(self) -> bool:
        return self._watch_id is not None

    def _on_live_position(self, position: Position):
        self.live_position = position
        # a live fix only clears errors raised by the watch
        if self._watch_error:
            self.error = None
            self._watch_error = False
        self.notify(self)

    def _on_live_error(self, error: PositionError):
        logger.warning(f"Location error: {error}")
        self.error = WATCH_DENIED_MESSAGE if error.permission_denied else UNAVAILABLE_MESSAGE
        self._watch_error = True
        self.notify(self)
