"""
Input validation functions for the Snaphood application.
"""
from typing import Any, Optional

from ..config import MAX_COMMENT_LENGTH, MAX_DESCRIPTION_LENGTH, MAX_IMAGE_SIZE_MB
from ..exceptions import ValidationError
from ..models.snap import coerce_coordinate


def validate_image(image: Optional[bytes], max_size_mb: int = MAX_IMAGE_SIZE_MB) -> bytes:
    """
    Validate a captured or uploaded still image.

    Args:
        image: Encoded image bytes
        max_size_mb: Maximum image size in megabytes

    Returns:
        bytes: The image bytes

    Raises:
        ValidationError: If the image is missing or too large
    """
    if not image:
        raise ValidationError("image", "A photo is required")

    max_size_bytes = max_size_mb * 1024 * 1024
    if len(image) > max_size_bytes:
        raise ValidationError("image", f"Image size ({len(image) / 1024 / 1024:.2f}MB) exceeds maximum ({max_size_mb}MB)")

    return image


def validate_description(description: Optional[str], max_length: int = MAX_DESCRIPTION_LENGTH) -> str:
    """
    Validate a snap description.

    Args:
        description: Free text entered by the user
        max_length: Maximum allowed length

    Returns:
        str: The trimmed description

    Raises:
        ValidationError: If the description is blank or too long
    """
    trimmed = (description or "").strip()
    if not trimmed:
        raise ValidationError("description", "A description is required")

    if len(trimmed) > max_length:
        raise ValidationError("description", f"Description exceeds maximum length of {max_length} characters")

    return trimmed


def validate_coordinates(lat: Any, lng: Any) -> tuple[float, float]:
    """
    Validate and convert latitude/longitude coordinates.

    Args:
        lat: Latitude as number or numeric string
        lng: Longitude as number or numeric string

    Returns:
        tuple: (latitude, longitude) as floats

    Raises:
        ValidationError: If coordinates are missing, non-numeric or out of range
    """
    if lat is None or lng is None or lat == "" or lng == "":
        raise ValidationError("coordinates", "Location is required to post a snap")

    lat_float = coerce_coordinate(lat)
    lng_float = coerce_coordinate(lng)
    if lat_float is None or lng_float is None:
        raise ValidationError("coordinates", "Latitude and longitude must be numeric")

    if not (-90 <= lat_float <= 90):
        raise ValidationError("latitude", f"Latitude must be between -90 and 90, got {lat_float}")

    if not (-180 <= lng_float <= 180):
        raise ValidationError("longitude", f"Longitude must be between -180 and 180, got {lng_float}")

    return lat_float, lng_float


def validate_comment(text: Optional[str], max_length: int = MAX_COMMENT_LENGTH) -> str:
    """
    Validate comment text.

    Args:
        text: Draft comment text
        max_length: Maximum allowed length

    Returns:
        str: The trimmed comment

    Raises:
        ValidationError: If the comment is not text, blank or too long
    """
    if text is not None and not isinstance(text, str):
        raise ValidationError("text", "Comment must be text")

    trimmed = (text or "").strip()
    if not trimmed:
        raise ValidationError("text", "Comment cannot be empty")

    if len(trimmed) > max_length:
        raise ValidationError("text", f"Comment exceeds maximum length of {max_length} characters")

    return trimmed
