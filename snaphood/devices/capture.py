"""
Capture controller: camera lifecycle from preview to still image.
"""
import enum
import logging
import threading
from contextlib import ExitStack
from typing import Optional

import cv2

from ..config import CAMERA_IDEAL_HEIGHT, CAMERA_IDEAL_WIDTH, IMAGE_EXTENSION
from ..exceptions import (
    CaptureError, LocationPermissionError, LocationUnavailableError, PermissionDeniedError
)
from .camera import CameraStream, FacingMode

logger = logging.getLogger(__name__)


class CaptureState(str, enum.Enum):
    IDLE = "idle"
    PREVIEWING = "previewing"
    CAPTURED = "captured"


def mirror_horizontally(frame):
    return cv2.flip(frame, 1)


def encode_still(frame) -> bytes:
    ok, buffer = cv2.imencode(f".{IMAGE_EXTENSION}", frame)
    if not ok:
        raise CaptureError("Failed to capture photo. Please try again.")
    return buffer.tobytes()


class CaptureController:
    """
    State machine over IDLE, PREVIEWING and CAPTURED.

    At most one camera stream is held at a time. The stream lives in an
    ExitStack that is closed on every path out of PREVIEWING.
    """

    def __init__(self, camera, geolocation, width: int = CAMERA_IDEAL_WIDTH,
                 height: int = CAMERA_IDEAL_HEIGHT):
        self.camera = camera
        self.geolocation = geolocation
        self.width = width
        self.height = height
        self.use_front_camera = False
        self.state = CaptureState.IDLE
        self.photo: Optional[bytes] = None
        self._stream: Optional[CameraStream] = None
        self._resources = ExitStack()
        self._lock = threading.RLock()

    @property
    def facing_mode(self) -> FacingMode:
        return FacingMode.USER if self.use_front_camera else FacingMode.ENVIRONMENT

    @property
    def stream_open(self) -> bool:
        return self._stream is not None and self._stream.active

    def open_camera(self):
        """
        Start the live preview.

        Raises:
            LocationPermissionError: If location access was denied
            LocationUnavailableError: If no device position is known yet
            PermissionDeniedError: If camera access is denied
            CaptureError: If the device cannot be opened
        """
        with self._lock:
            if self.state == CaptureState.PREVIEWING:
                return
            if self.geolocation.position is None:
                if self.geolocation.permission_denied:
                    raise LocationPermissionError()
                raise LocationUnavailableError()
            self.photo = None
            self._acquire()
            self.state = CaptureState.PREVIEWING

    def flip(self):
        """Toggle front/back camera, re-acquiring the stream while previewing."""
        with self._lock:
            self.use_front_camera = not self.use_front_camera
            if self.state == CaptureState.PREVIEWING:
                self._acquire()

    def capture(self) -> bytes:
        """
        Take a still from the live preview and close the camera.

        Front-camera frames are mirrored so the still is right-reading.

        Returns:
            bytes: The encoded still image

        Raises:
            CaptureError: If no frame is available or encoding fails
        """
        with self._lock:
            if self.state != CaptureState.PREVIEWING or not self.stream_open:
                raise CaptureError("Camera not ready. Please try again.")

            frame = self._stream.read_frame()
            if frame is None:
                raise CaptureError("Camera not ready. Please try again.")

            if self.use_front_camera:
                frame = mirror_horizontally(frame)
            photo = encode_still(frame)

            self._release()
            self.photo = photo
            self.state = CaptureState.CAPTURED
            logger.info(f"Captured {frame.shape[1]}x{frame.shape[0]} still ({len(photo)} bytes)")
            return photo

    def discard(self):
        """Drop the preview or the captured still and return to IDLE."""
        with self._lock:
            self._release()
            self.photo = None
            self.state = CaptureState.IDLE

    def retake(self):
        self.discard()
        self.open_camera()

    def close(self):
        self.discard()

    def _acquire(self):
        self._release()
        resources = ExitStack()
        try:
            self._stream = resources.enter_context(
                self.camera.open(self.facing_mode, self.width, self.height)
            )
        except PermissionDeniedError:
            resources.close()
            self._stream = None
            self.state = CaptureState.IDLE
            logger.warning("Camera access denied")
            raise
        except Exception as e:
            resources.close()
            self._stream = None
            self.state = CaptureState.IDLE
            logger.error(f"Camera error: {e}")
            if isinstance(e, CaptureError):
                raise
            raise CaptureError("Failed to access camera. Please check camera permissions.")
        self._resources = resources

    def _release(self):
        self._resources.close()
        self._resources = ExitStack()
        self._stream = None
