"""
Post store: the current snap collection, kept in sync with the change feed.
"""
import logging
import threading
from typing import Optional

from ..models.snap import SnapView, join_profiles
from .observable import Observable

logger = logging.getLogger(__name__)


class PostStore(Observable):
    """
    Holds every snap joined with its author profile.

    Each change-feed notification triggers a full refresh. Refreshes are not
    coalesced: when several overlap, whichever finishes last determines the
    collection.
    """

    def __init__(self, snap_service):
        super().__init__()
        self.snap_service = snap_service
        self._snaps: tuple[SnapView, ...] = ()
        self._error: Optional[str] = None
        self._watch = None
        self._watch_lock = threading.Lock()

    @property
    def snaps(self) -> tuple[SnapView, ...]:
        return self._snaps

    @property
    def error(self) -> Optional[str]:
        return self._error

    def get(self, snap_id: str) -> Optional[SnapView]:
        for snap in self._snaps:
            if snap.id == snap_id:
                return snap
        return None

    def refresh(self):
        """Re-read all snaps and profiles and replace the collection."""
        try:
            rows = self.snap_service.list_snaps()
        except Exception as e:
            logger.error(f"Error fetching snaps: {e}")
            self._error = "Failed to load snaps"
            return

        try:
            profiles = self.snap_service.list_profiles()
        except Exception as e:
            logger.warning(f"Error fetching profiles, showing snaps without authors: {e}")
            profiles = {}

        self._snaps = join_profiles(rows, profiles)
        self._error = None
        logger.info(f"Loaded {len(self._snaps)} snaps")
        self.notify(self._snaps)

    def subscribe(self):
        """Start listening to the snaps change feed."""
        with self._watch_lock:
            if self._watch is not None:
                return
            self._watch = self.snap_service.watch_snaps(self._on_feed_change)

    def unsubscribe(self):
        """Close the change-feed subscription if one is open."""
        with self._watch_lock:
            watch, self._watch = self._watch, None
        if watch is not None:
            watch.unsubscribe()
            logger.info("Unsubscribed from snaps change feed")

    @property
    def subscribed(self) -> bool:
        return self._watch is not None

    def _on_feed_change(self):
        self.refresh()
