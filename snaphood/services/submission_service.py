"""
Submission pipeline: validate, upload the still, insert the snap, refresh.
"""
import logging
import time
from typing import Callable, Optional

from ..config import IMAGE_CONTENT_TYPE, IMAGE_EXTENSION
from ..exceptions import SaveError, ServiceUnavailableError, StorageError
from ..models.snap import SnapSubmission
from ..utils.url_helpers import upload_path
from ..utils.validators import validate_coordinates, validate_description, validate_image

logger = logging.getLogger(__name__)


class SubmissionService:
    """Publishes a captured still as a snap."""

    def __init__(self, session_accessor, storage_service, snap_service, post_store,
                 clock: Optional[Callable[[], float]] = None):
        """
        Initialize submission service.

        Args:
            session_accessor: Resolves the signed-in identity
            storage_service: Uploads the still image
            snap_service: Inserts the snap record
            post_store: Refreshed after a successful insert
            clock: Returns the current time in seconds (defaults to time.time)
        """
        self.session = session_accessor
        self.storage_service = storage_service
        self.snap_service = snap_service
        self.post_store = post_store
        self.clock = clock or time.time

    def submit(self, image: Optional[bytes], description: Optional[str], lat, lng) -> str:
        """
        Publish a snap.

        Preconditions are checked in order (image, description, coordinates,
        identity) before any network call. An image uploaded before a failed
        insert is left in storage.

        Returns:
            str: ID of the created snap

        Raises:
            ValidationError: If a precondition fails
            NotSignedInError: If nobody is signed in
            StorageError: If the upload fails
            SaveError: If the insert fails
        """
        image = validate_image(image)
        description = validate_description(description)
        lat, lng = validate_coordinates(lat, lng)
        user = self.session.require_user()

        path = upload_path(user.id, int(self.clock() * 1000), IMAGE_EXTENSION)
        try:
            image_path = self.storage_service.upload(path, image, IMAGE_CONTENT_TYPE)
        except ServiceUnavailableError:
            raise
        except StorageError:
            raise StorageError("Failed to upload image")

        submission = SnapSubmission(
            user_id=user.id,
            image_path=image_path,
            description=description,
            lat=lat,
            lng=lng
        )
        try:
            snap_id = self.snap_service.create_snap(submission)
        except ServiceUnavailableError:
            raise
        except SaveError:
            logger.warning(f"Snap insert failed; image left at {image_path}")
            raise SaveError("Failed to save snap")

        logger.info(f"Published snap {snap_id} by {user.id}")
        self.post_store.refresh()
        return snap_id
