"""
Unit Tests for Image Operations

Tests the Pillow-backed operations used by filter variants:
- Cloning and dimension metadata
- Affine transforms and rotation with background fill
- Mirrors, grayscale and blur
- Region extraction and crop grid tiling
"""

import math
import unittest

from PIL import Image

from conftest import make_gradient_image
from IA_Libs.FilterLib.image_ops import (
    MissingDimensionMetadata,
    affine_transform,
    clamp_crop_sizes,
    clone_image,
    crop_grid,
    extract_region,
    gaussian_blur,
    get_image_dimension,
    grid_origins,
    mirror_horizontal,
    mirror_vertical,
    rotate_image,
    to_grayscale,
)
from IA_Libs.FilterLib.variant_builder import scale_matrix, shear_matrix


class TestCloneAndDimension(unittest.TestCase):
    """Test cloning and dimension lookup."""

    def test_clone_is_independent(self):
        """Drawing on the clone leaves the source untouched."""
        source = make_gradient_image(20, 10)
        before = source.tobytes()

        clone = clone_image(source)
        clone.putpixel((0, 0), (1, 2, 3))

        self.assertIsNot(clone, source)
        self.assertEqual(source.tobytes(), before)

    def test_clone_rejects_non_image(self):
        """Test that non-image input raises TypeError."""
        with self.assertRaises(TypeError):
            clone_image("not an image")

    def test_dimension(self):
        """Test width and height lookup."""
        self.assertEqual(get_image_dimension(make_gradient_image(200, 150)), (200, 150))

    def test_missing_dimension(self):
        """Test that a zero-sized image has no usable dimension."""
        with self.assertRaises(MissingDimensionMetadata):
            get_image_dimension(Image.new("RGB", (0, 0)))

    def test_missing_dimension_is_value_error(self):
        """Test that callers can catch the error as ValueError."""
        with self.assertRaises(ValueError):
            get_image_dimension(object())


class TestAffineTransform(unittest.TestCase):
    """Test affine transforms."""

    def test_scale_output_size(self):
        """Test non-uniform scale changes each axis independently."""
        image = make_gradient_image(100, 80)
        result = affine_transform(image, scale_matrix(0.5, 2), "#000000")
        self.assertEqual(result.size, (50, 160))

    def test_identity_keeps_size(self):
        """Test identity matrix keeps the canvas size."""
        image = make_gradient_image(64, 48)
        result = affine_transform(image, scale_matrix(1, 1), "#000000")
        self.assertEqual(result.size, (64, 48))

    def test_shear_grows_canvas(self):
        """Test a 16 degree x shear widens a square image."""
        image = make_gradient_image(100, 100)
        result = affine_transform(image, shear_matrix(16, 0), "#000000")
        self.assertEqual(result.size, (128, 100))

    def test_exposed_region_uses_background(self):
        """Test exposed corners take the background color."""
        image = make_gradient_image(100, 100)
        white = affine_transform(image, shear_matrix(16, 0), "#ffffff")
        black = affine_transform(image, shear_matrix(16, 0), "#000000")
        self.assertEqual(white.getpixel((0, 0)), (255, 255, 255))
        self.assertEqual(black.getpixel((0, 0)), (0, 0, 0))

    def test_transparent_background_adds_alpha(self):
        """Test a translucent fill converts RGB to RGBA."""
        image = make_gradient_image(100, 100)
        result = affine_transform(image, shear_matrix(0, 16), "#00000000")
        self.assertEqual(result.mode, "RGBA")
        self.assertEqual(result.getpixel((0, 0))[3], 0)

    def test_source_not_modified(self):
        """Test the input image is left untouched."""
        image = make_gradient_image(50, 40)
        before = image.tobytes()
        affine_transform(image, shear_matrix(16, 16), "#ffffff")
        self.assertEqual(image.tobytes(), before)
        self.assertEqual(image.mode, "RGB")

    def test_singular_matrix(self):
        """Test that a non-invertible matrix raises ValueError."""
        with self.assertRaises(ValueError):
            affine_transform(make_gradient_image(10, 10), [[1, 1], [1, 1]], "#000000")

    def test_invalid_background(self):
        """Test that an unknown color raises ValueError."""
        with self.assertRaises(ValueError):
            affine_transform(make_gradient_image(10, 10), scale_matrix(1, 1), "not-a-color")


class TestRotateImage(unittest.TestCase):
    """Test rotation."""

    def test_quarter_turn_is_clockwise(self):
        """Test positive degrees rotate clockwise with canvas expansion."""
        image = make_gradient_image(200, 150)
        result = rotate_image(image, 90, "#ffffff")

        self.assertEqual(result.size, (150, 200))
        # Source top-left ends up top-right
        self.assertEqual(result.getpixel((149, 0)), image.getpixel((0, 0)))

    def test_zero_degrees_is_copy(self):
        """Test a zero rotation keeps the pixels."""
        image = make_gradient_image(30, 20)
        result = rotate_image(image, 0, "#ffffff")
        self.assertEqual(result.tobytes(), image.tobytes())

    def test_odd_angle_grows_canvas(self):
        """Test a 15 degree rotation expands the canvas."""
        image = make_gradient_image(100, 100)
        result = rotate_image(image, 15, "#00000000")
        self.assertGreater(result.width, 100)
        self.assertGreater(result.height, 100)
        self.assertEqual(result.mode, "RGBA")


class TestMirrorAndGrayscale(unittest.TestCase):
    """Test mirrors and grayscale conversion."""

    def test_mirror_vertical(self):
        """Test top and bottom rows swap."""
        image = make_gradient_image(20, 10)
        result = mirror_vertical(image)
        self.assertEqual(result.getpixel((3, 0)), image.getpixel((3, 9)))

    def test_mirror_horizontal(self):
        """Test left and right columns swap."""
        image = make_gradient_image(20, 10)
        result = mirror_horizontal(image)
        self.assertEqual(result.getpixel((0, 4)), image.getpixel((19, 4)))

    def test_grayscale_without_alpha(self):
        """Test RGB converts to L."""
        self.assertEqual(to_grayscale(make_gradient_image(8, 8)).mode, "L")

    def test_grayscale_keeps_alpha(self):
        """Test RGBA converts to LA."""
        image = make_gradient_image(8, 8).convert("RGBA")
        self.assertEqual(to_grayscale(image).mode, "LA")


class TestGaussianBlur(unittest.TestCase):
    """Test Gaussian blur."""

    def test_blur_changes_pixels(self):
        """Test blur smooths a hard edge."""
        image = Image.new("RGB", (20, 20), (0, 0, 0))
        image.paste((255, 255, 255), (10, 0, 20, 20))
        result = gaussian_blur(image, 2)
        self.assertEqual(result.size, image.size)
        self.assertNotEqual(result.getpixel((10, 10)), (255, 255, 255))

    def test_small_sigma_rejected(self):
        """Test sigma below 1 raises ValueError."""
        with self.assertRaises(ValueError):
            gaussian_blur(make_gradient_image(8, 8), 0.5)

    def test_palette_image(self):
        """Test palette images are converted before blurring."""
        image = make_gradient_image(16, 16).convert("P")
        self.assertEqual(gaussian_blur(image, 1).mode, "RGBA")


class TestExtractRegion(unittest.TestCase):
    """Test region extraction."""

    def test_extract(self):
        """Test the extracted pixels match the source."""
        image = make_gradient_image(50, 40)
        region = extract_region(image, 10, 5, 20, 15)
        self.assertEqual(region.size, (20, 15))
        self.assertEqual(region.getpixel((0, 0)), image.getpixel((10, 5)))

    def test_out_of_bounds(self):
        """Test a region leaving the image raises ValueError."""
        image = make_gradient_image(50, 40)
        with self.assertRaises(ValueError):
            extract_region(image, 40, 0, 20, 10)
        with self.assertRaises(ValueError):
            extract_region(image, -1, 0, 10, 10)

    def test_empty_region(self):
        """Test a zero-sized region raises ValueError."""
        with self.assertRaises(ValueError):
            extract_region(make_gradient_image(50, 40), 0, 0, 0, 10)


class TestCropGrid(unittest.TestCase):
    """Test crop size clamping and grid tiling."""

    def test_clamp_and_deduplicate(self):
        """Test oversized and infinite sizes collapse onto the full image."""
        sizes = clamp_crop_sizes(200, 150, [(math.inf, math.inf), (100, 100), (500, 500)])
        self.assertEqual(sizes, [(200, 150), (100, 100)])

    def test_null_and_zero_mean_full_dimension(self):
        """Test None and 0 select the full dimension."""
        self.assertEqual(clamp_crop_sizes(200, 150, [(None, 0)]), [(200, 150)])

    def test_grid_origins_align_last_tile(self):
        """Test the last tile is shifted back onto the edge."""
        self.assertEqual(grid_origins(250, 100), [0, 100, 150])
        self.assertEqual(grid_origins(150, 100), [0, 50])
        self.assertEqual(grid_origins(200, 100), [0, 100])
        self.assertEqual(grid_origins(100, 100), [0])

    def test_crop_grid_tiles(self):
        """Test a 250x150 image splits into six 100x100 tiles."""
        image = make_gradient_image(250, 150)
        tiles = crop_grid(image, [(100, 100)])

        self.assertEqual(len(tiles), 6)
        for tile in tiles:
            self.assertEqual(tile.size, (100, 100))
        # Row-major: second tile starts at x=100 on the top row
        self.assertEqual(tiles[1].getpixel((0, 0)), image.getpixel((100, 0)))
        # Last tile is aligned to the bottom-right corner
        self.assertEqual(tiles[-1].getpixel((99, 99)), image.getpixel((249, 149)))

    def test_crop_grid_multiple_sizes(self):
        """Test tiles are grouped by size in request order."""
        image = make_gradient_image(200, 150)
        tiles = crop_grid(image, [(None, None), (100, 100)])

        self.assertEqual(len(tiles), 1 + 4)
        self.assertEqual(tiles[0].size, (200, 150))
        self.assertEqual(tiles[1].size, (100, 100))


if __name__ == '__main__':
    unittest.main()
