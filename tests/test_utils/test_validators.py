"""
Tests for validation functions.
"""
import pytest
from snaphood.utils.validators import (
    validate_comment, validate_coordinates, validate_description, validate_image
)
from snaphood.exceptions import ValidationError


class TestValidateImage:
    """Tests for image validation."""

    def test_valid_image(self):
        assert validate_image(b"\x89PNG data") == b"\x89PNG data"

    @pytest.mark.parametrize("image", [None, b""])
    def test_missing_image(self, image):
        with pytest.raises(ValidationError) as exc_info:
            validate_image(image)
        assert exc_info.value.field == "image"

    def test_image_too_large(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_image(b"x" * (1024 * 1024 + 1), max_size_mb=1)
        assert "exceeds maximum" in exc_info.value.message


class TestValidateDescription:
    """Tests for description validation."""

    def test_description_is_trimmed(self):
        assert validate_description("  Sunset over the bay  ") == "Sunset over the bay"

    @pytest.mark.parametrize("description", [None, "", "   ", "\n\t"])
    def test_blank_description(self, description):
        with pytest.raises(ValidationError) as exc_info:
            validate_description(description)
        assert exc_info.value.field == "description"

    def test_description_at_limit(self):
        assert len(validate_description("a" * 500)) == 500

    def test_description_too_long(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_description("a" * 501)
        assert "500" in exc_info.value.message


class TestValidateCoordinates:
    """Tests for coordinate validation."""

    def test_valid_coordinates(self):
        """Test valid latitude and longitude."""
        lat, lng = validate_coordinates("37.7749", -122.4194)
        assert lat == 37.7749
        assert lng == -122.4194

    def test_boundary_coordinates(self):
        """Test boundary values."""
        assert validate_coordinates("90", "180") == (90.0, 180.0)
        assert validate_coordinates(-90, -180) == (-90.0, -180.0)

    def test_zero_is_a_valid_coordinate(self):
        assert validate_coordinates(0, 0) == (0.0, 0.0)

    @pytest.mark.parametrize("lat,lng", [(None, 10), (10, None), ("", "10")])
    def test_missing_coordinates(self, lat, lng):
        with pytest.raises(ValidationError) as exc_info:
            validate_coordinates(lat, lng)
        assert exc_info.value.field == "coordinates"

    def test_non_numeric_latitude(self):
        """Test non-numeric latitude."""
        with pytest.raises(ValidationError) as exc_info:
            validate_coordinates("abc", "10")
        assert exc_info.value.field == "coordinates"
        assert "numeric" in exc_info.value.message.lower()

    def test_latitude_out_of_range(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_coordinates("91", "10")
        assert exc_info.value.field == "latitude"

    def test_longitude_out_of_range(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_coordinates("10", "-181")
        assert exc_info.value.field == "longitude"


class TestValidateComment:
    """Tests for comment validation."""

    def test_comment_is_trimmed(self):
        assert validate_comment("  hello ") == "hello"

    def test_blank_comment(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_comment("   ")
        assert exc_info.value.field == "text"

    def test_comment_too_long(self):
        with pytest.raises(ValidationError):
            validate_comment("a" * 301)

    @pytest.mark.parametrize("text", [123, ["hi"], {"text": "hi"}])
    def test_comment_not_text(self, text):
        with pytest.raises(ValidationError) as exc_info:
            validate_comment(text)
        assert exc_info.value.field == "text"
