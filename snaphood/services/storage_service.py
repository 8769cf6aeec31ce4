"""
Storage service for handling image uploads to Google Cloud Storage.
"""
import logging

from ..config import IMAGE_CONTENT_TYPE, IMAGES_BUCKET
from ..exceptions import StorageError, ServiceUnavailableError
from ..utils.url_helpers import public_object_url
from .. import gcp_clients

logger = logging.getLogger(__name__)


class StorageService:
    """Service for managing snap image uploads."""

    def __init__(self, storage_client=None, bucket_name: str = "", storage_base: str = ""):
        """
        Initialize storage service.

        Args:
            storage_client: GCS storage client (or None to use global client)
            bucket_name: Name of the GCS bucket backing the images bucket
            storage_base: Base URL that public object URLs are built from
        """
        self.storage_client = storage_client or gcp_clients.storage_client
        self.bucket_name = bucket_name or gcp_clients.STORAGE_BUCKET
        self.storage_base = storage_base or gcp_clients.STORAGE_BASE_URL

    def upload(self, path: str, data: bytes, content_type: str = IMAGE_CONTENT_TYPE) -> str:
        """
        Upload bytes to the given object path, overwriting any existing object.

        Args:
            path: Object path chosen by the caller
            data: Object contents
            content_type: MIME type stored with the object

        Returns:
            str: The object path

        Raises:
            ServiceUnavailableError: If storage client is not initialized
            StorageError: If upload fails
        """
        if not self.storage_client:
            raise ServiceUnavailableError("Storage")

        try:
            bucket = self.storage_client.bucket(self.bucket_name)
            blob = bucket.blob(path)
            blob.upload_from_string(data, content_type=content_type)

            logger.info(f"Successfully uploaded image to gs://{self.bucket_name}/{path}")
            return path

        except Exception as e:
            logger.error(f"Failed to upload image to GCS: {e}")
            raise StorageError(f"Failed to upload image: {str(e)}")

    def public_url(self, path: str) -> str:
        """Public URL of an object in the images bucket."""
        return public_object_url(self.storage_base, IMAGES_BUCKET, path)
