"""
Snap service for Firestore database operations.
"""
import logging
from typing import Callable, Iterable
from google.cloud import firestore

from ..config import COMMENTS_COLLECTION, PROFILES_COLLECTION, SNAPS_COLLECTION
from ..exceptions import SaveError, ServiceUnavailableError
from ..models.comment import CommentRow
from ..models.snap import ProfileRow, SnapRow, SnapSubmission
from .. import gcp_clients

logger = logging.getLogger(__name__)


class SnapService:
    """Service for reading and writing snaps, comments and profiles in Firestore."""

    def __init__(self, firestore_client=None):
        """
        Initialize snap service.

        Args:
            firestore_client: Firestore client (or None to use global client)
        """
        self.firestore = firestore_client or gcp_clients.firestore_client

    def _client(self):
        if not self.firestore:
            raise ServiceUnavailableError("Firestore")
        return self.firestore

    def list_snaps(self) -> list[SnapRow]:
        """
        Fetch every snap, newest first.

        Returns:
            list: SnapRow objects ordered by created_at descending

        Raises:
            ServiceUnavailableError: If Firestore client is not initialized
        """
        query = self._client().collection(SNAPS_COLLECTION)
        query = query.order_by("created_at", direction=firestore.Query.DESCENDING)
        return [SnapRow.from_firestore_doc(doc.id, doc.to_dict() or {}) for doc in query.stream()]

    def list_profiles(self) -> dict[str, ProfileRow]:
        """
        Fetch every author profile.

        Returns:
            dict: ProfileRow objects keyed by user id
        """
        docs = self._client().collection(PROFILES_COLLECTION).stream()
        return {doc.id: ProfileRow.from_firestore_doc(doc.id, doc.to_dict() or {}) for doc in docs}

    def get_profiles(self, user_ids: Iterable[str]) -> dict[str, ProfileRow]:
        """
        Fetch the profiles of the given users.

        Args:
            user_ids: User ids to look up; duplicates are ignored

        Returns:
            dict: ProfileRow objects keyed by user id, for the profiles that exist
        """
        unique_ids = sorted(set(uid for uid in user_ids if uid))
        if not unique_ids:
            return {}

        client = self._client()
        refs = [client.collection(PROFILES_COLLECTION).document(uid) for uid in unique_ids]
        profiles = {}
        for doc in client.get_all(refs):
            if doc.exists:
                profiles[doc.id] = ProfileRow.from_firestore_doc(doc.id, doc.to_dict() or {})
        return profiles

    def create_snap(self, submission: SnapSubmission) -> str:
        """
        Insert a new snap.

        Args:
            submission: Validated snap fields

        Returns:
            str: Document ID of created snap

        Raises:
            ServiceUnavailableError: If Firestore client is not initialized
            SaveError: If the insert fails
        """
        client = self._client()
        try:
            doc_ref = client.collection(SNAPS_COLLECTION).document()
            doc_ref.set(submission.to_firestore_document())
            logger.info(f"Created snap document: {doc_ref.id}")
            return doc_ref.id
        except Exception as e:
            logger.error(f"Failed to create snap: {e}")
            raise SaveError(f"Failed to save snap: {str(e)}")

    def list_comments(self, snap_id: str) -> list[CommentRow]:
        """
        Fetch the comment thread of a snap, oldest first.

        Args:
            snap_id: Snap document ID

        Returns:
            list: CommentRow objects ordered by created_at ascending
        """
        query = self._client().collection(COMMENTS_COLLECTION)
        query = query.where(filter=firestore.FieldFilter("snap_id", "==", snap_id))
        query = query.order_by("created_at", direction=firestore.Query.ASCENDING)
        return [CommentRow.from_firestore_doc(doc.id, doc.to_dict() or {}) for doc in query.stream()]

    def create_comment(self, snap_id: str, user_id: str, text: str) -> str:
        """
        Insert a comment on a snap.

        Raises:
            ServiceUnavailableError: If Firestore client is not initialized
            SaveError: If the insert fails
        """
        client = self._client()
        try:
            doc_ref = client.collection(COMMENTS_COLLECTION).document()
            doc_ref.set({
                "snap_id": snap_id,
                "user_id": user_id,
                "text": text,
                "created_at": firestore.SERVER_TIMESTAMP
            })
            logger.info(f"Created comment {doc_ref.id} on snap {snap_id}")
            return doc_ref.id
        except Exception as e:
            logger.error(f"Failed to create comment on snap {snap_id}: {e}")
            raise SaveError("Failed to post comment")

    def watch_snaps(self, on_change: Callable[[], None]):
        """
        Subscribe to row changes on the snaps collection.

        The callback carries no payload; any insert, update or delete fires it.

        Args:
            on_change: Called from the listener thread on every change

        Returns:
            Watch: Handle whose unsubscribe() closes the subscription
        """
        def _on_snapshot(col_snapshot, changes, read_time):
            logger.info(f"Snaps change feed delivered {len(changes)} change(s)")
            on_change()

        watch = self._client().collection(SNAPS_COLLECTION).on_snapshot(_on_snapshot)
        logger.info("Subscribed to snaps change feed")
        return watch
