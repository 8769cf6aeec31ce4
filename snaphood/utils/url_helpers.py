"""
URL helper utilities for the Snaphood application.
"""


def public_object_url(storage_base: str, bucket: str, path: str) -> str:
    """
    Build the public URL of a stored object.

    Args:
        storage_base: Storage base URL (no trailing slash needed)
        bucket: Bucket name
        path: Object path relative to the bucket

    Returns:
        str: URL in the form <storage-base>/object/public/<bucket>/<path>
    """
    return f"{storage_base.rstrip('/')}/object/public/{bucket}/{path.lstrip('/')}"


def gcs_public_url(bucket: str, path: str) -> str:
    """
    Convert a bucket and object path to the public GCS HTTPS URL.

    Args:
        bucket: GCS bucket name
        path: Object path inside the bucket

    Returns:
        str: https://storage.googleapis.com/<bucket>/<path>
    """
    return f"https://storage.googleapis.com/{bucket}/{path.lstrip('/')}"


def upload_path(user_id: str, timestamp_ms: int, extension: str = "png") -> str:
    """Object path for an upload, namespaced by author and time."""
    return f"user-{user_id}/{timestamp_ms}.{extension}"
