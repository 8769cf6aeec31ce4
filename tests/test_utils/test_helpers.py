"""
Tests for geo and URL helpers.
"""
from snaphood.utils.geo_helpers import cluster_key, format_position, key_to_position
from snaphood.utils.url_helpers import gcs_public_url, public_object_url, upload_path


class TestClusterKey:
    """Tests for coordinate bucketing."""

    def test_nearby_points_share_a_key(self):
        """Both points round to (37.775, -122.419)."""
        assert cluster_key(37.77491, -122.41941) == "37.775,-122.419"
        assert cluster_key(37.77494, -122.41943) == "37.775,-122.419"

    def test_distant_point_has_another_key(self):
        assert cluster_key(37.780, -122.420) == "37.780,-122.420"
        assert cluster_key(37.780, -122.420) != cluster_key(37.77491, -122.41941)

    def test_key_round_trip_position(self):
        assert key_to_position("37.775,-122.419") == (37.775, -122.419)

    def test_format_position(self):
        assert format_position(37.7749, -122.4194) == "(37.77490, -122.41940)"


class TestUrls:
    """Tests for storage URLs and upload paths."""

    def test_public_object_url_shape(self):
        url = public_object_url("https://abc.example.co/storage/v1", "images", "user-u1/1.png")
        assert url == "https://abc.example.co/storage/v1/object/public/images/user-u1/1.png"

    def test_public_object_url_normalizes_slashes(self):
        assert public_object_url("/storage/", "images", "/a.png") == "/storage/object/public/images/a.png"

    def test_gcs_public_url(self):
        assert gcs_public_url("bucket", "user-u1/1.png") == "https://storage.googleapis.com/bucket/user-u1/1.png"

    def test_upload_paths_differ_by_timestamp(self):
        """Two uploads by the same author at different times get different paths."""
        first = upload_path("u1", 1700000000000)
        second = upload_path("u1", 1700000000001)
        assert first == "user-u1/1700000000000.png"
        assert second == "user-u1/1700000000001.png"
        assert first != second
