"""
Camera device access through OpenCV.

A stream is a scoped resource: use it as a context manager so every track is
stopped when the block exits, however it exits.
"""
import enum
import logging
import os
from typing import Optional

import cv2

from ..config import CAMERA_IDEAL_HEIGHT, CAMERA_IDEAL_WIDTH
from ..exceptions import CameraPermissionError, CameraUnavailableError
from .. import gcp_clients

logger = logging.getLogger(__name__)


class FacingMode(str, enum.Enum):
    USER = "user"
    ENVIRONMENT = "environment"


class VideoTrack:
    """One OpenCV capture handle."""

    def __init__(self, capture, label: str = ""):
        self.capture = capture
        self.label = label
        self.live = True

    def read(self):
        if not self.live:
            return None
        ok, frame = self.capture.read()
        return frame if ok else None

    def stop(self):
        if self.live:
            self.capture.release()
            self.live = False
            logger.info(f"Stopped camera track {self.label}")


class CameraStream:
    """A set of tracks acquired together and released together."""

    def __init__(self, tracks: list, facing_mode: FacingMode = FacingMode.ENVIRONMENT):
        self.tracks = list(tracks)
        self.facing_mode = facing_mode

    @property
    def active(self) -> bool:
        return any(track.live for track in self.tracks)

    def read_frame(self):
        """Current frame of the first track at its native resolution, or None."""
        if not self.tracks:
            return None
        return self.tracks[0].read()

    def stop(self):
        for track in self.tracks:
            track.stop()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False


class OpenCVCamera:
    """Opens camera streams on local video devices."""

    def __init__(self, front_index: Optional[int] = None, back_index: Optional[int] = None):
        self.front_index = gcp_clients.FRONT_CAMERA_INDEX if front_index is None else front_index
        self.back_index = gcp_clients.BACK_CAMERA_INDEX if back_index is None else back_index

    def open(self, facing_mode: FacingMode, width: int = CAMERA_IDEAL_WIDTH,
             height: int = CAMERA_IDEAL_HEIGHT) -> CameraStream:
        """
        Acquire a stream for the requested facing mode.

        Args:
            facing_mode: Front (user) or back (environment) sensor
            width: Preferred frame width
            height: Preferred frame height

        Returns:
            CameraStream: The open stream

        Raises:
            CameraPermissionError: If the device exists but is not accessible
            CameraUnavailableError: If the device cannot be opened
        """
        index = self.front_index if facing_mode == FacingMode.USER else self.back_index
        capture = cv2.VideoCapture(index)
        if not capture.isOpened():
            capture.release()
            device = f"/dev/video{index}"
            if os.path.exists(device) and not os.access(device, os.R_OK | os.W_OK):
                logger.warning(f"Camera device {device} is not accessible")
                raise CameraPermissionError()
            logger.error(f"Could not open camera device {index} ({facing_mode.value})")
            raise CameraUnavailableError("Failed to access camera. Please check camera permissions.")

        capture.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
        logger.info(f"Opened camera device {index} ({facing_mode.value})")
        return CameraStream([VideoTrack(capture, label=f"video{index}")], facing_mode=facing_mode)
