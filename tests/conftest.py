"""
Shared fixtures and fakes for the Snaphood tests.
"""
from concurrent.futures import Future
from datetime import datetime, timezone
from unittest.mock import MagicMock

import cv2
import numpy as np
import pytest

from snaphood.devices.camera import CameraStream, FacingMode
from snaphood.devices.geolocation import ReportedPositionSource
from snaphood.map_session import MapSession
from snaphood.models.comment import CommentRow
from snaphood.models.identity import Identity
from snaphood.models.snap import ProfileRow, SnapRow, SnapView


class ImmediateExecutor:
    """Runs submitted work on the calling thread."""

    def __init__(self):
        self.submitted = []
        self.shut_down = False

    def submit(self, fn, *args, **kwargs):
        self.submitted.append(fn)
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future

    def shutdown(self, wait=True, cancel_futures=False):
        self.shut_down = True


class FakeIdentityProvider:
    def __init__(self, identity=None, error=None):
        self.identity = identity
        self.error = error

    def get_user(self):
        if self.error:
            raise self.error
        return self.identity


class FakeTrack:
    def __init__(self, frame):
        self.frame = frame
        self.live = True

    def read(self):
        return self.frame if self.live else None

    def stop(self):
        self.live = False


class FakeCamera:
    """
    Camera whose front sensor delivers mirrored frames of a known scene.
    """

    def __init__(self, scene, error=None):
        self.scene = scene
        self.error = error
        self.streams = []
        self.max_open = 0
        self.requests = []

    @property
    def open_count(self):
        return sum(1 for stream in self.streams if stream.active)

    def open(self, facing_mode, width, height):
        self.requests.append((facing_mode, width, height))
        if self.error:
            raise self.error
        frame = cv2.flip(self.scene, 1) if facing_mode == FacingMode.USER else self.scene.copy()
        stream = CameraStream([FakeTrack(frame)], facing_mode=facing_mode)
        self.streams.append(stream)
        self.max_open = max(self.max_open, self.open_count)
        return stream


def make_snap(snap_id="snap1", user_id="user1", lat=37.7749, lng=-122.4194,
              description="Sunset over the bay", image_url="user-user1/1700000000000.png",
              created_at=None, author=None):
    row = SnapRow(
        id=snap_id,
        user_id=user_id,
        image_url=image_url,
        description=description,
        lat=lat,
        lng=lng,
        created_at=created_at or datetime(2024, 5, 1, 18, 30, 5, tzinfo=timezone.utc)
    )
    return SnapView(snap=row, author=author)


def make_comment(comment_id="c1", snap_id="snap1", user_id="user2", text="Nice!", created_at=None):
    return CommentRow(
        id=comment_id,
        snap_id=snap_id,
        user_id=user_id,
        text=text,
        created_at=created_at or datetime(2024, 5, 1, 19, 0, 0, tzinfo=timezone.utc)
    )


@pytest.fixture
def scene():
    """An asymmetric 4x6 BGR image so any mirroring is detectable."""
    return np.arange(4 * 6 * 3, dtype=np.uint8).reshape((4, 6, 3))


@pytest.fixture
def identity():
    return Identity(id="user1", name="Ana", avatar_url="https://example.com/ana.png")


@pytest.fixture
def snap_service():
    service = MagicMock()
    service.list_snaps.return_value = []
    service.list_profiles.return_value = {}
    service.list_comments.return_value = []
    service.get_profiles.return_value = {}
    return service


@pytest.fixture
def storage_service():
    service = MagicMock()
    service.upload.side_effect = lambda path, data, content_type="image/png": path
    service.public_url.side_effect = lambda path: f"/storage/object/public/images/{path}"
    return service


@pytest.fixture
def geocoding_service():
    service = MagicMock()
    service.reverse_geocode.return_value = "Market Street, San Francisco"
    return service


@pytest.fixture
def executor():
    return ImmediateExecutor()


@pytest.fixture
def position_source():
    return ReportedPositionSource()


@pytest.fixture
def map_session(snap_service, storage_service, geocoding_service, identity, scene,
                position_source, executor):
    return MapSession(
        snap_service=snap_service,
        storage_service=storage_service,
        geocoding_service=geocoding_service,
        identity_provider=FakeIdentityProvider(identity),
        camera=FakeCamera(scene),
        position_source=position_source,
        executor=executor
    )


@pytest.fixture
def profile():
    return ProfileRow(id="user1", name="Ana", avatar_url="https://example.com/ana.png")
