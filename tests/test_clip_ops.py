import base64

import cv2
import numpy as np

from Model.clip_ops import bounding_box, extract_polygon, polygon_mask, rect_points


def test_bounding_box():
    assert bounding_box([(10, 20), (70, 5), (30, 60)]) == (10.0, 5.0, 70.0, 60.0)


def test_triangle_output_matches_bounding_box(rgba_100):
    res = extract_polygon(rgba_100, [(10, 10), (70, 20), (30, 60)])
    assert res is not None
    assert abs(res.width - 60) <= 1
    assert abs(res.height - 50) <= 1
    assert res.origin == (10, 10)


def test_axis_aligned_square_keeps_full_interior(rgba_100):
    res = extract_polygon(rgba_100, [(10, 10), (90, 10), (90, 90), (10, 90)])
    assert (res.width, res.height) == (80, 80)
    assert np.all(res.pixels[..., 3] == 255)
    assert np.array_equal(res.pixels, rgba_100[10:90, 10:90])


def test_pixels_outside_polygon_are_transparent(rgba_100):
    res = extract_polygon(rgba_100, [(0, 0), (40, 0), (0, 40)])
    assert (res.width, res.height) == (40, 40)
    assert res.pixels[1, 1, 3] == 255
    assert np.array_equal(res.pixels[1, 1], rgba_100[1, 1])
    assert tuple(res.pixels[38, 38]) == (0, 0, 0, 0)


def test_extract_is_idempotent_and_pure(rgba_100):
    before = rgba_100.copy()
    pts = [(12.5, 8.0), (80.2, 30.7), (44.0, 91.3), (5.0, 60.0)]
    pts_copy = list(pts)
    a = extract_polygon(rgba_100, pts)
    b = extract_polygon(rgba_100, pts)
    assert a.png_bytes == b.png_bytes
    assert np.array_equal(rgba_100, before)
    assert pts == pts_copy


def test_fewer_than_three_points_is_rejected(rgba_100):
    assert extract_polygon(rgba_100, []) is None
    assert extract_polygon(rgba_100, [(10, 10), (90, 90)]) is None


def test_degenerate_polygon_gives_no_result(rgba_100):
    assert extract_polygon(rgba_100, [(10, 10), (50, 10), (90, 10)]) is None
    assert extract_polygon(rgba_100, [(20, 20), (20, 20), (20, 20)]) is None


def test_box_partly_outside_the_image(rgba_100):
    res = extract_polygon(rgba_100, rect_points(-10, -10, 60, 60))
    assert (res.width, res.height) == (60, 60)
    assert res.origin == (-10, -10)
    # Outside the source image: transparent
    assert tuple(res.pixels[5, 5]) == (0, 0, 0, 0)
    # Inside: copied from the source, shifted by the origin
    assert np.array_equal(res.pixels[20, 20], rgba_100[10, 10])


def test_png_and_data_url_round_trip(rgba_100, tmp_path):
    res = extract_polygon(rgba_100, [(10, 10), (60, 10), (35, 50)])
    assert res.data_url.startswith("data:image/png;base64,")
    raw = base64.b64decode(res.data_url.split(",", 1)[1])
    assert raw == res.png_bytes

    decoded = cv2.imdecode(np.frombuffer(raw, np.uint8), cv2.IMREAD_UNCHANGED)
    assert decoded.shape == (res.height, res.width, 4)
    assert np.array_equal(cv2.cvtColor(decoded, cv2.COLOR_BGRA2RGBA), res.pixels)

    out = res.save(tmp_path / "cropped-image.png")
    assert out.read_bytes() == res.png_bytes


def test_rect_points_order():
    assert rect_points(1, 2, 10, 20) == [(1, 2), (11, 2), (11, 22), (1, 22)]


def test_polygon_mask_is_translated_by_origin():
    mask = polygon_mask([(10, 10), (20, 10), (20, 20), (10, 20)], 10, 10, origin=(10, 10))
    assert mask.shape == (10, 10)
    assert np.all(mask == 255)
    assert not polygon_mask([(0, 0), (5, 5)], 10, 10).any()
