"""
Tests for the seed fill engine and image fill helpers.

Tests cover:
- Containment on small images
- Neighbour visiting order
- Termination with and without the visited set
- Color and texture paints
- Filling transparent regions with masks
- Non-RGBA canvases and scratch images
"""

import unittest

import pytest
from PIL import Image

from RP_Libs.FillLib.flood_fill import (
    fill_region,
    fill_transparent,
    flood_fill,
    flood_fill_image,
    make_boundary_function,
    make_fill_function,
)
from RP_Libs.RasterLib.raster_models import Bounds, Point

RED = (255, 0, 0, 255)


def _filled_points(image):
    return {
        (x, y)
        for y in range(image.height)
        for x in range(image.width)
        if image.getpixel((x, y))[3] != 0
    }


class TestFloodFillContainment(unittest.TestCase):
    """Test which pixels a flood fill reaches."""

    def test_fills_all_of_transparent_3x3_from_center(self):
        source = Image.new("RGBA", (3, 3))

        result = flood_fill_image(source, (1, 1), RED)

        self.assertEqual(len(_filled_points(result)), 9)
        self.assertEqual(set(result.getdata()), {RED})

    def test_fills_ring_around_opaque_center_from_corner(self):
        source = Image.new("RGBA", (3, 3))
        source.putpixel((1, 1), (0, 0, 0, 255))

        result = flood_fill_image(source, (0, 0), RED)

        expected = {(x, y) for x in range(3) for y in range(3)} - {(1, 1)}
        self.assertEqual(_filled_points(result), expected)
        self.assertEqual(result.getpixel((1, 1)), (0, 0, 0, 0))

    def test_does_not_cross_opaque_wall(self):
        source = Image.new("RGBA", (5, 3))
        for y in range(3):
            source.putpixel((2, y), (0, 0, 0, 255))

        result = flood_fill_image(source, (0, 1), RED)

        self.assertEqual(_filled_points(result), {(x, y) for x in range(2) for y in range(3)})

    def test_origin_is_filled_even_if_opaque(self):
        source = Image.new("RGBA", (3, 3), (0, 0, 0, 255))

        result = flood_fill_image(source, (1, 1), RED)

        self.assertEqual(_filled_points(result), {(1, 1)})

    def test_source_not_modified(self):
        source = Image.new("RGBA", (4, 4))
        before = source.tobytes()

        flood_fill_image(source, (0, 0), RED)

        self.assertEqual(source.tobytes(), before)

    def test_origin_outside_bounds_raises(self):
        with self.assertRaises(ValueError):
            flood_fill_image(Image.new("RGBA", (3, 3)), (3, 0), RED)


class TestFloodFillEngine(unittest.TestCase):
    """Test the abstract stack-based engine."""

    def test_pushes_right_left_down_up(self):
        calls = []
        flood_fill(
            (1, 1),
            Bounds(0, 0, 3, 3),
            calls.append,
            lambda point: point in {(2, 1), (0, 1), (1, 2), (1, 0)},
        )
        # Last pushed is popped first
        self.assertEqual(calls, [Point(1, 1), Point(1, 0), Point(1, 2), Point(0, 1), Point(2, 1)])

    def test_visited_set_bounds_calls_for_constant_predicate(self):
        calls = []

        count = flood_fill((0, 0), Bounds(0, 0, 4, 4), calls.append, lambda point: True)

        self.assertEqual(count, 16)
        self.assertEqual(len(set(calls)), 16)

    def test_raw_mode_relies_on_predicate(self):
        filled = set()

        def fill(point):
            filled.add(point)

        def should_fill(point):
            return point not in filled

        count = flood_fill((0, 0), Bounds(0, 0, 3, 3), fill, should_fill, skip_visited=False)

        self.assertEqual(filled, {Point(x, y) for x in range(3) for y in range(3)})
        self.assertGreaterEqual(count, 9)

    def test_bounds_offset_from_origin(self):
        calls = []
        flood_fill((5, 5), Bounds(4, 4, 2, 2), calls.append, lambda point: True)
        self.assertEqual(set(calls), {Point(4, 4), Point(5, 4), Point(4, 5), Point(5, 5)})


class TestFillFunctions(unittest.TestCase):
    """Test paint and boundary helpers."""

    def test_color_fill_accepts_rgb(self):
        image = Image.new("RGBA", (2, 2))
        make_fill_function(image, (10, 20, 30))(Point(1, 1))
        self.assertEqual(image.getpixel((1, 1)), (10, 20, 30, 255))

    def test_texture_tiles_modulo_size(self):
        texture = Image.new("RGBA", (2, 2))
        texture.putpixel((0, 0), (1, 1, 1, 255))
        texture.putpixel((1, 0), (2, 2, 2, 255))
        texture.putpixel((0, 1), (3, 3, 3, 255))
        texture.putpixel((1, 1), (4, 4, 4, 255))
        image = Image.new("RGBA", (5, 5))

        result = flood_fill_image(image, (0, 0), texture)

        self.assertEqual(result.getpixel((4, 4)), (1, 1, 1, 255))
        self.assertEqual(result.getpixel((3, 2)), (2, 2, 2, 255))
        self.assertEqual(result.getpixel((2, 3)), (3, 3, 3, 255))

    def test_unknown_paint_raises(self):
        with self.assertRaises(ValueError):
            make_fill_function(Image.new("RGBA", (2, 2)), "red")

    def test_invalid_color_raises(self):
        with self.assertRaises(ValueError):
            make_fill_function(Image.new("RGBA", (2, 2)), (300, 0, 0, 255))

    def test_boundary_checks_source_and_output(self):
        source = Image.new("RGBA", (2, 1))
        output = Image.new("RGBA", (2, 1))
        source.putpixel((0, 0), (0, 0, 0, 1))
        output.putpixel((1, 0), (0, 0, 0, 1))

        is_fillable = make_boundary_function(source, output)

        self.assertFalse(is_fillable(Point(0, 0)))
        self.assertFalse(is_fillable(Point(1, 0)))

    def test_fill_region_writes_scratch_in_place(self):
        canvas = Image.new("RGBA", (3, 1))
        canvas.putpixel((1, 0), (0, 0, 0, 255))
        scratch = Image.new("RGBA", (3, 1))

        count = fill_region(canvas, scratch, (0, 0), RED)

        self.assertEqual(count, 1)
        self.assertEqual(scratch.getpixel((0, 0)), RED)
        self.assertEqual(scratch.getpixel((2, 0)), (0, 0, 0, 0))

    def test_fill_region_size_mismatch(self):
        with self.assertRaises(ValueError):
            fill_region(Image.new("RGBA", (3, 3)), Image.new("RGBA", (2, 2)), (0, 0))

    def test_fill_region_with_custom_boundary(self):
        canvas = Image.new("RGBA", (4, 1))
        scratch = Image.new("RGBA", (4, 1))

        fill_region(canvas, scratch, (0, 0), RED, boundary=lambda point: point.x < 2)

        self.assertEqual(_filled_points(scratch), {(0, 0), (1, 0)})


class TestFillTransparent:
    """Tests for fill_transparent."""

    def test_fills_only_transparent_pixels(self):
        image = Image.new("RGBA", (2, 2))
        image.putpixel((0, 0), (0, 255, 0, 255))
        image.putpixel((1, 0), (0, 255, 0, 1))

        result = fill_transparent(image, RED)

        assert result.getpixel((0, 0)) == (0, 255, 0, 255)
        assert result.getpixel((1, 0)) == (0, 255, 0, 1)
        assert result.getpixel((0, 1)) == RED
        assert result.getpixel((1, 1)) == RED

    def test_respects_mask(self):
        image = Image.new("RGBA", (2, 1))
        mask = Image.new("L", (2, 1))
        mask.putpixel((1, 0), 255)

        result = fill_transparent(image, RED, mask)

        assert result.getpixel((0, 0)) == (0, 0, 0, 0)
        assert result.getpixel((1, 0)) == RED

    def test_mask_size_mismatch(self):
        with pytest.raises(ValueError):
            fill_transparent(Image.new("RGBA", (2, 2)), RED, Image.new("L", (3, 3)))


class TestFillModes:
    """Tests for canvases and scratch images that are not RGBA."""

    def test_rgb_canvas_is_read_as_opaque(self):
        canvas = Image.new("RGB", (3, 3), (10, 20, 30))
        scratch = Image.new("RGBA", (3, 3))

        filled = fill_region(canvas, scratch, (1, 1), RED)

        assert filled == 1
        assert _filled_points(scratch) == {(1, 1)}
        assert canvas.mode == "RGB"

    def test_flood_fill_image_accepts_rgb_source(self):
        result = flood_fill_image(Image.new("RGB", (2, 2)), (0, 0), RED)
        assert result.mode == "RGBA"
        assert _filled_points(result) == {(0, 0)}

    def test_rgb_scratch_is_rejected(self):
        with pytest.raises(ValueError, match="RGBA"):
            fill_region(Image.new("RGBA", (2, 2)), Image.new("RGB", (2, 2)), (0, 0), RED)

    def test_boundary_function_rejects_rgb_output(self):
        with pytest.raises(ValueError):
            make_boundary_function(Image.new("RGBA", (2, 2)), Image.new("RGB", (2, 2)))


if __name__ == "__main__":
    unittest.main()
