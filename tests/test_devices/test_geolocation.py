"""
Tests for position acquisition.
"""
import threading
from unittest.mock import MagicMock

import pytest
from snaphood.devices.geolocation import (
    DENIED_MESSAGE, UNAVAILABLE_MESSAGE, UNSUPPORTED_MESSAGE, WATCH_DENIED_MESSAGE,
    GeolocationTracker, ReportedPositionSource
)
from snaphood.exceptions import PositionError
from snaphood.models.identity import Position


def run_while_reporting(target, report):
    """Run target on a worker thread, calling report until it returns."""
    results = []
    worker = threading.Thread(target=lambda: results.append(target()))
    worker.start()
    while worker.is_alive():
        report()
        worker.join(0.02)
    return results[0]


class TestReportedPositionSource:
    """Tests for the externally fed source."""

    def test_returns_reported_fix(self, position_source):
        position = Position(1.0, 2.0)
        position_source.report(position)
        assert position_source.get_current_position(timeout=0.01) == position

    def test_stale_fix_times_out(self, position_source):
        position_source.report(Position(1.0, 2.0, timestamp=0.0))

        with pytest.raises(PositionError) as exc_info:
            position_source.get_current_position(timeout=0.01, maximum_age=300)

        assert exc_info.value.code == PositionError.TIMEOUT

    def test_reported_error(self, position_source):
        """An error reported while a request waits fails that request."""
        def request():
            try:
                return position_source.get_current_position(timeout=5)
            except PositionError as e:
                return e

        error = run_while_reporting(
            request,
            lambda: position_source.report_error(PositionError(PositionError.PERMISSION_DENIED, "denied"))
        )

        assert isinstance(error, PositionError)
        assert error.permission_denied

    def test_earlier_error_does_not_fail_request(self, position_source):
        """An error reported before the request started is not raised to it."""
        position_source.report_error(PositionError(PositionError.TIMEOUT, "watch timed out"))
        position = Position(1.0, 2.0)
        timer = threading.Timer(0.1, position_source.report, args=[position])
        timer.start()

        try:
            assert position_source.get_current_position(timeout=5) == position
        finally:
            timer.cancel()

    def test_earlier_error_then_timeout(self, position_source):
        position_source.report_error(PositionError(PositionError.PERMISSION_DENIED, "denied"))

        with pytest.raises(PositionError) as exc_info:
            position_source.get_current_position(timeout=0.01)

        assert exc_info.value.code == PositionError.TIMEOUT

    def test_watch_receives_current_and_later_fixes(self, position_source):
        first, second = Position(1.0, 2.0), Position(3.0, 4.0)
        position_source.report(first)
        on_position = MagicMock()

        watch_id = position_source.watch_position(on_position, MagicMock())
        position_source.report(second)
        position_source.clear_watch(watch_id)
        position_source.report(Position(5.0, 6.0))

        assert [call[0][0] for call in on_position.call_args_list] == [first, second]
        assert position_source.watch_count == 0


class TestGeolocationTracker:
    """Tests for GeolocationTracker."""

    def test_locate(self, position_source):
        tracker = GeolocationTracker(position_source, timeout=0.01)
        position_source.report(Position(37.7749, -122.4194))

        assert tracker.locate().latitude == 37.7749
        assert tracker.position is not None
        assert tracker.error is None

    def test_locate_denied(self, position_source):
        tracker = GeolocationTracker(position_source, timeout=5)

        result = run_while_reporting(
            tracker.locate,
            lambda: position_source.report_error(PositionError(PositionError.PERMISSION_DENIED))
        )

        assert result is None
        assert tracker.error == DENIED_MESSAGE
        assert tracker.permission_denied
        assert tracker.position is None

    def test_locate_survives_earlier_watch_error(self, position_source):
        """A watch timeout before locate does not fail the posting fix."""
        tracker = GeolocationTracker(position_source, timeout=5)
        tracker.start_watching()
        position_source.report_error(PositionError(PositionError.TIMEOUT))
        assert tracker.error == UNAVAILABLE_MESSAGE

        timer = threading.Timer(0.2, position_source.report, args=[Position(1.0, 2.0)])
        timer.start()
        try:
            position = tracker.locate()
        finally:
            timer.cancel()

        assert position is not None
        assert (position.latitude, position.longitude) == (1.0, 2.0)
        assert tracker.position == position
        assert tracker.error is None

    def test_locate_timeout(self, position_source):
        tracker = GeolocationTracker(position_source, timeout=0.01)
        assert tracker.locate() is None
        assert tracker.error == UNAVAILABLE_MESSAGE

    def test_no_source(self):
        tracker = GeolocationTracker(None)
        assert tracker.locate() is None
        assert tracker.error == UNSUPPORTED_MESSAGE

    def test_live_position_is_separate(self, position_source):
        tracker = GeolocationTracker(position_source, timeout=0.01)
        tracker.start_watching()
        tracker.start_watching()

        position_source.report(Position(1.0, 2.0))

        assert position_source.watch_count == 1
        assert tracker.live_position == Position(1.0, 2.0, timestamp=tracker.live_position.timestamp)
        assert tracker.position is None

    def test_watch_error(self, position_source):
        tracker = GeolocationTracker(position_source)
        tracker.start_watching()

        position_source.report_error(PositionError(PositionError.PERMISSION_DENIED))

        assert tracker.error == WATCH_DENIED_MESSAGE

    def test_live_fix_clears_watch_error(self, position_source):
        tracker = GeolocationTracker(position_source)
        tracker.start_watching()
        position_source.report_error(PositionError(PositionError.POSITION_UNAVAILABLE))
        assert tracker.error == UNAVAILABLE_MESSAGE

        position_source.report(Position(1.0, 2.0))

        assert tracker.error is None
        assert tracker.live_position is not None

    def test_live_fix_keeps_locate_error(self, position_source):
        """A failed posting fix stays on the banner after live fixes arrive."""
        tracker = GeolocationTracker(position_source, timeout=0.01)
        tracker.start_watching()
        assert tracker.locate() is None

        position_source.report(Position(1.0, 2.0))

        assert tracker.error == UNAVAILABLE_MESSAGE
        assert tracker.position is None

    def test_stop_watching(self, position_source):
        tracker = GeolocationTracker(position_source)
        tracker.start_watching()
        tracker.stop_watching()

        assert not tracker.watching
        assert position_source.watch_count == 0
