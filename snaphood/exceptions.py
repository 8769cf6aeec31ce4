"""
Custom exception classes for the Snaphood application.
"""


class SnaphoodError(Exception):
    """Base exception for all Snaphood errors."""
    pass


class ValidationError(SnaphoodError):
    """Raised when input validation fails."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class NotSignedInError(SnaphoodError):
    """Raised when a write is attempted without a signed-in identity."""

    def __init__(self, message: str = "Not signed in"):
        super().__init__(message)


class AuthenticationError(SnaphoodError):
    """Raised when the OAuth sign-in flow fails."""
    pass


class StorageError(SnaphoodError):
    """Raised when object storage operations fail."""
    pass


class SaveError(SnaphoodError):
    """Raised when a record insert fails."""
    pass


class GeocodingError(SnaphoodError):
    """Raised when the reverse geocoding transport fails."""
    pass


class ServiceUnavailableError(SnaphoodError):
    """Raised when required service clients are not initialized."""

    def __init__(self, service_name: str):
        self.service_name = service_name
        super().__init__(f"{service_name} service is not available")


class SubmitInProgressError(SnaphoodError):
    """Raised when a submit is already outstanding for the same target."""
    pass


class PermissionDeniedError(SnaphoodError):
    """Raised when the user denies access to a device."""
    pass


class CameraPermissionError(PermissionDeniedError):
    """Raised when camera access is denied."""

    def __init__(self, message: str = "Failed to access camera. Please check camera permissions."):
        super().__init__(message)


class LocationPermissionError(PermissionDeniedError):
    """Raised when geolocation access is denied."""

    def __init__(self, message: str = "Location access denied. Please enable location services."):
        super().__init__(message)


class CaptureError(SnaphoodError):
    """Raised when a camera frame cannot be captured."""
    pass


class CameraUnavailableError(CaptureError):
    """Raised when the camera device cannot be opened."""
    pass


class LocationUnavailableError(SnaphoodError):
    """Raised when no device position is known."""

    def __init__(self, message: str = "Location is not available. Please enable location services."):
        super().__init__(message)


class PositionError(SnaphoodError):
    """Raised by a position source, carrying a W3C Geolocation error code."""

    PERMISSION_DENIED = 1
    POSITION_UNAVAILABLE = 2
    TIMEOUT = 3

    def __init__(self, code: int, message: str = ""):
        self.code = code
        self.message = message
        super().__init__(message or f"Position error {code}")

    @property
    def permission_denied(self) -> bool:
        return self.code == self.PERMISSION_DENIED


def error_message(error: Exception) -> str:
    """User-facing message for an error raised anywhere in the app."""
    if isinstance(error, ValidationError):
        return error.message
    if isinstance(error, PositionError):
        return error.message or str(error)
    return str(error)
