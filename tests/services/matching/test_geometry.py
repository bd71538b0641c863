"""Tests for coordinate remapping between surfaces."""
import pytest

from facescan.domain.entities.face import BoundingBox, ImageDimensions
from facescan.services.matching.geometry import (
    detection_scale_for,
    display_scale_for,
    padded_crop_box,
    to_detection_space,
    to_display_space,
    to_source_space,
)


class TestRemapping:
    """Test suite for box scaling."""

    def test_source_space_divides_by_detection_scale(self):
        box = BoundingBox(left=300, top=150, width=90, height=120)
        source = to_source_space(box, 1.5)
        assert source.left == pytest.approx(200)
        assert source.top == pytest.approx(100)
        assert source.width == pytest.approx(60)
        assert source.height == pytest.approx(80)

    def test_round_trip_through_detection_space(self):
        box = BoundingBox(left=12.5, top=40, width=33, height=41)
        back = to_source_space(to_detection_space(box, 2.25), 2.25)
        assert back.left == pytest.approx(box.left)
        assert back.top == pytest.approx(box.top)
        assert back.width == pytest.approx(box.width)
        assert back.height == pytest.approx(box.height)

    def test_display_space_multiplies(self):
        box = BoundingBox(left=100, top=200, width=50, height=60)
        shown = to_display_space(box, 0.5)
        assert (shown.left, shown.top, shown.width, shown.height) == (50, 100, 25, 30)

    @pytest.mark.parametrize("scale", [0, -1.0])
    def test_non_positive_scale_rejected(self, scale):
        with pytest.raises(ValueError):
            to_source_space(BoundingBox(left=0, top=0, width=10, height=10), scale)


class TestScaleFactors:
    """Test suite for upscale and preview factors."""

    def test_small_image_is_upscaled_to_min_side(self):
        assert detection_scale_for(ImageDimensions(width=800, height=600), 900) == pytest.approx(1.5)

    def test_large_image_is_never_shrunk(self):
        assert detection_scale_for(ImageDimensions(width=4000, height=3000), 900) == 1.0

    def test_preview_fits_max_width(self):
        assert display_scale_for(ImageDimensions(width=2200, height=1000), 1100) == pytest.approx(0.5)
        assert display_scale_for(ImageDimensions(width=640, height=480), 1100) == 1.0


class TestPaddedCropBox:
    """Test suite for enrollment thumbnail crops."""

    def test_pad_grows_with_face_size(self):
        dims = ImageDimensions(width=2000, height=2000)
        crop = padded_crop_box(BoundingBox(left=500, top=500, width=200, height=200), dims)
        # pad = round(0.18 * 200) = 36
        assert (crop.left, crop.top, crop.width, crop.height) == (464, 464, 272, 272)

    def test_small_faces_get_minimum_pad(self):
        dims = ImageDimensions(width=1000, height=1000)
        crop = padded_crop_box(BoundingBox(left=100, top=100, width=30, height=30), dims)
        assert (crop.left, crop.top, crop.width, crop.height) == (88, 88, 54, 54)

    def test_crop_is_clipped_to_image(self):
        dims = ImageDimensions(width=300, height=200)
        crop = padded_crop_box(BoundingBox(left=5, top=150, width=100, height=60), dims)
        assert crop.left == 0
        assert crop.top >= 0
        assert crop.left + crop.width <= dims.width
        assert crop.top + crop.height <= dims.height
