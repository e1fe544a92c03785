"""Tests for homography compute/apply."""

import cv2
import numpy as np
import pytest

from laserstrike.api.config import TargetSpec
from laserstrike.api.types import OrderedQuad, Point
from laserstrike.calib.corners import order_corners
from laserstrike.calib.homography import Homography, apply_homography, compute_homography

QUADS = [
    [(100, 100), (500, 100), (500, 400), (100, 400)],
    [(120, 90), (480, 110), (520, 420), (90, 380)],
    [(150, 60), (560, 130), (500, 450), (90, 380)],
    [(10.5, 20.25), (900.0, 5.0), (850.75, 700.0), (30.0, 640.5)],
]


def _quad(xy):
    return OrderedQuad(*[Point(float(x), float(y)) for x, y in xy])


class TestComputeHomography:
    """Tests for compute_homography."""

    @pytest.mark.parametrize("xy", QUADS)
    def test_corners_round_trip(self, xy, target):
        src = order_corners([Point(x, y) for x, y in xy])
        h = compute_homography(src, target)
        assert h is not None
        for s, d in zip(src.points, target.corners().points):
            mapped = apply_homography(h, s)
            assert mapped is not None
            assert mapped.x == pytest.approx(d.x, abs=1e-6)
            assert mapped.y == pytest.approx(d.y, abs=1e-6)

    def test_scenario_rectangle(self, target):
        h = compute_homography(_quad(QUADS[0]), target)
        center = apply_homography(h, Point(300, 250))
        assert center.x == pytest.approx(250.0)
        assert center.y == pytest.approx(350.0)

    def test_explicit_destination_quad(self):
        dst = _quad([(0, 0), (10, 0), (10, 10), (0, 10)])
        h = compute_homography(_quad(QUADS[1]), dst)
        p = apply_homography(h, Point(520, 420))
        assert (p.x, p.y) == pytest.approx((10.0, 10.0))

    def test_collinear_source_fails(self, target):
        src = _quad([(0, 0), (100, 0), (200, 0), (300, 0)])
        assert compute_homography(src, target) is None

    def test_three_collinear_fails(self, target):
        src = _quad([(0, 0), (100, 0), (200, 0), (100, 100)])
        assert compute_homography(src, target) is None

    def test_repeated_point_fails(self, target):
        src = _quad([(0, 0), (0, 0), (100, 100), (0, 100)])
        assert compute_homography(src, target) is None

    def test_requires_ordered_quad(self, target):
        with pytest.raises(TypeError):
            compute_homography([Point(0, 0)] * 4, target)

    def test_matrix_is_read_only(self, target):
        h = compute_homography(_quad(QUADS[0]), target)
        with pytest.raises(ValueError):
            h.matrix[0, 0] = 5.0

    def test_inverse_maps_back(self, target):
        h = compute_homography(_quad(QUADS[2]), target)
        inv = h.inverse()
        p = apply_homography(inv, Point(500, 700))
        assert (p.x, p.y) == pytest.approx((500.0, 450.0), abs=1e-4)

    @pytest.mark.parametrize("xy", QUADS)
    def test_agrees_with_opencv_point_mapping(self, xy, target):
        h = compute_homography(order_corners([Point(x, y) for x, y in xy]), target)
        pts = np.array([[[300.0, 250.0]], [[200.0, 300.0]], [[420.0, 150.0]]])
        expected = cv2.perspectiveTransform(pts, np.asarray(h.matrix)).reshape(-1, 2)
        for (x, y), (u, v) in zip(pts.reshape(-1, 2), expected):
            mapped = apply_homography(h, Point(x, y))
            assert (mapped.x, mapped.y) == pytest.approx((u, v), abs=1e-6)

    def test_normalised_matrix(self, target):
        h = compute_homography(_quad(QUADS[1]), target)
        assert h.matrix[2, 2] == pytest.approx(1.0)


class TestApplyHomography:
    """Tests for apply_homography."""

    def test_identity(self):
        h = Homography(np.eye(3))
        assert apply_homography(h, Point(3.5, -2.0)) == Point(3.5, -2.0)

    def test_zero_w_is_invalid(self):
        # w = x - 100, so x = 100 maps to infinity
        h = Homography(np.array([[1.0, 0, 0], [0, 1.0, 0], [1.0, 0, -100.0]]))
        assert apply_homography(h, Point(100.0, 5.0)) is None
        assert apply_homography(h, Point(101.0, 5.0)) is not None

    def test_non_finite_is_invalid(self):
        h = Homography(np.eye(3))
        assert apply_homography(h, Point(float("nan"), 0.0)) is None

    def test_bad_shape_rejected(self):
        with pytest.raises(ValueError):
            Homography(np.eye(2))
