"""
Comment store: per-snap threads, drafts and submit state.
"""
import logging
import threading
from typing import Callable, Iterable, Optional

from ..exceptions import SaveError, SubmitInProgressError
from ..models.comment import CommentView
from ..utils.validators import validate_comment
from .observable import Observable

logger = logging.getLogger(__name__)


class CommentStore(Observable):
    """
    Holds comment threads for the visible snaps.

    All per-snap mappings are replaced on write, never mutated in place.
    """

    def __init__(self, snap_service, session_accessor):
        super().__init__()
        self.snap_service = snap_service
        self.session = session_accessor
        self._threads: dict[str, tuple[CommentView, ...]] = {}
        self._drafts: dict[str, str] = {}
        self._submitting: frozenset = frozenset()
        self._lock = threading.Lock()

    def thread(self, snap_id: str) -> tuple[CommentView, ...]:
        return self._threads.get(snap_id, ())

    def draft(self, snap_id: str) -> str:
        return self._drafts.get(snap_id, "")

    def is_submitting(self, snap_id: str) -> bool:
        return snap_id in self._submitting

    def load_thread(self, snap_id: str):
        """Fetch a snap's comments with commenter names and replace its thread."""
        try:
            rows = self.snap_service.list_comments(snap_id)
            profiles = {}
            if rows:
                try:
                    profiles = self.snap_service.get_profiles(row.user_id for row in rows)
                except Exception as e:
                    logger.warning(f"Could not load commenter names for snap {snap_id}: {e}")
        except Exception as e:
            logger.error(f"Failed to load comments for snap {snap_id}: {e}")
            return

        thread = tuple(
            CommentView(comment=row, user_name=profiles[row.user_id].name if row.user_id in profiles else None)
            for row in rows
        )
        with self._lock:
            self._threads = {**self._threads, snap_id: thread}
        self.notify(snap_id)

    def load_threads(self, snap_ids: Iterable[str], dispatch: Optional[Callable] = None):
        """
        Load the thread of every given snap, one load per snap.

        Args:
            snap_ids: Snaps whose threads are loaded
            dispatch: Called as dispatch(fn, snap_id) to run each load
                elsewhere; loads run inline when omitted
        """
        for snap_id in snap_ids:
            if dispatch is None:
                self.load_thread(snap_id)
            else:
                dispatch(self.load_thread, snap_id)

    def set_draft(self, snap_id: str, text: str):
        with self._lock:
            self._drafts = {**self._drafts, snap_id: text}
        self.notify(snap_id)

    def submit(self, snap_id: str) -> str:
        """
        Post the draft comment for a snap.

        The draft is cleared only after a successful insert; on any failure it
        is left as it was.

        Returns:
            str: ID of the created comment

        Raises:
            ValidationError: If the draft is blank or too long
            NotSignedInError: If nobody is signed in
            SubmitInProgressError: If a submit for this snap is outstanding
            SaveError: If the insert fails
        """
        text = validate_comment(self.draft(snap_id))

        with self._lock:
            if snap_id in self._submitting:
                raise SubmitInProgressError(f"A comment is already being posted on snap {snap_id}")
            self._submitting = self._submitting | {snap_id}
        self.notify(snap_id)

        try:
            user = self.session.require_user()
            try:
                comment_id = self.snap_service.create_comment(snap_id, user.id, text)
            except SaveError:
                raise
            except Exception as e:
                logger.error(f"Comment insert failed for snap {snap_id}: {e}")
                raise SaveError("Failed to post comment")

            with self._lock:
                self._drafts = {**self._drafts, snap_id: ""}
        finally:
            with self._lock:
                self._submitting = self._submitting - {snap_id}
            self.notify(snap_id)

        self.load_thread(snap_id)
        return comment_id
