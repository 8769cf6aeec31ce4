"""
The map session wires the stores, devices and presenter into one client view.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from .devices.capture import CaptureController
from .devices.geolocation import GeolocationTracker
from .exceptions import SnaphoodError, error_message
from .presenters.clustering import ClusterPresenter, MapIcons
from .services.session_service import SessionAccessor
from .services.submission_service import SubmissionService
from .stores.address_store import AddressStore
from .stores.comment_store import CommentStore
from .stores.post_store import PostStore

logger = logging.getLogger(__name__)


class MapSession:
    """
    One signed-in user's map view.

    Every change of the snap collection fans out to one address lookup per
    snap and one comment thread load per snap, run on the session executor so
    a refresh never waits for them.
    """

    def __init__(self, snap_service, storage_service, geocoding_service, identity_provider,
                 camera, position_source, icons: Optional[MapIcons] = None, executor=None):
        self.session = SessionAccessor(identity_provider)
        self.post_store = PostStore(snap_service)
        self.address_store = AddressStore(geocoding_service)
        self.comment_store = CommentStore(snap_service, self.session)
        self.geolocation = GeolocationTracker(position_source)
        self.capture = CaptureController(camera, self.geolocation)
        self.presenter = ClusterPresenter(icons or MapIcons.default(), storage_service)
        self.submission = SubmissionService(self.session, storage_service, snap_service, self.post_store)
        self.executor = executor or ThreadPoolExecutor(max_workers=4, thread_name_prefix="snaphood")
        self.error: Optional[str] = None
        self.mounted = False
        self._remove_listener = self.post_store.add_listener(self._on_snaps_changed)

    def mount(self):
        """Start the change feed, the initial load and both location modes."""
        if self.mounted:
            return
        self.mounted = True
        try:
            self.post_store.subscribe()
        except SnaphoodError as e:
            logger.error(f"Could not subscribe to the snaps change feed: {e}")
            self.report(e)
        self._dispatch(self.post_store.refresh)
        self._dispatch(self.geolocation.locate)
        self.geolocation.start_watching()
        logger.info("Map session mounted")

    def close(self):
        """Release the camera, the location watch and the change feed."""
        self.capture.close()
        self.geolocation.stop_watching()
        self.post_store.unsubscribe()
        self._remove_listener()
        self.executor.shutdown(wait=False, cancel_futures=True)
        self.mounted = False
        logger.info("Map session closed")

    def report(self, error: Exception) -> str:
        """Turn an error into the banner message and return it."""
        self.error = error_message(error)
        return self.error

    def dismiss_error(self):
        self.error = None

    @property
    def banner(self) -> Optional[str]:
        return self.error or self.post_store.error or self.geolocation.error

    def view(self) -> dict:
        """Map view-model: frame, markers, own position and banner."""
        user = self.session.current_user()
        markers = self.presenter.present(self.post_store.snaps, self.address_store, self.comment_store)
        return {
            "map": self.presenter.map_frame(),
            "markers": [marker.to_dict() for marker in markers],
            "user_location": self.presenter.user_marker(self.geolocation.live_position),
            "can_post": self.geolocation.position is not None,
            "camera": {
                "state": self.capture.state.value,
                "use_front_camera": self.capture.use_front_camera
            },
            "user": user.to_dict() if user else None,
            "error": self.banner
        }

    def snap_detail(self, snap_id: str) -> Optional[dict]:
        view = self.post_store.get(snap_id)
        if view is None:
            return None
        return self.presenter.detail(view, self.address_store, self.comment_store).to_dict()

    def feed(self) -> list[dict]:
        return self.presenter.feed(self.post_store.snaps)

    def submit_snap(self, description: Optional[str], image: Optional[bytes] = None) -> str:
        """
        Publish the captured still (or the given image) at the posting position.

        The still is discarded only after a successful submit.
        """
        position = self.geolocation.position
        snap_id = self.submission.submit(
            image if image is not None else self.capture.photo,
            description,
            position.latitude if position else None,
            position.longitude if position else None
        )
        self.capture.discard()
        self.error = None
        return snap_id

    def _on_snaps_changed(self, snaps):
        self._dispatch(self.address_store.resolve_all, snaps)
        self.comment_store.load_threads((view.id for view in snaps), dispatch=self._dispatch)

    def _dispatch(self, fn, *args):
        try:
            future = self.executor.submit(fn, *args)
        except RuntimeError:
            logger.warning(f"Session closed, dropping {getattr(fn, '__name__', fn)}")
            return None
        future.add_done_callback(self._log_failure)
        return future

    @staticmethod
    def _log_failure(future):
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.error(f"Background task failed: {error}")
