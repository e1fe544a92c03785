"""Tests for quadrilateral selection and the opt-in smoothing policy."""

import pytest

from laserstrike.api.types import Point, PolygonCandidate, QuadSelection
from laserstrike.calib.quad_select import area_floor, select_quadrilateral
from laserstrike.detect.smoothing import QuadStabilityPolicy


def _poly(n, area, offset=0.0):
    verts = tuple(Point(float(i) + offset, float(i * i)) for i in range(n))
    return PolygonCandidate(vertices=verts, area=area)


class TestSelectQuadrilateral:
    """Tests for select_quadrilateral."""

    def test_largest_quad_wins(self):
        small, big = _poly(4, 3000), _poly(4, 9000, offset=1)
        sel = select_quadrilateral([small, big], min_area=2000)
        assert sel.found.points == big.vertices
        assert sel.potential is None

    def test_potential_is_largest_non_quad(self):
        quad = _poly(4, 2500)
        pent, hexa = _poly(5, 8000), _poly(6, 5000)
        sel = select_quadrilateral([quad, hexa, pent], min_area=2000)
        assert sel.found.points == quad.vertices
        assert sel.potential == pent.vertices

    def test_floor_is_exclusive(self):
        sel = select_quadrilateral([_poly(4, 2000), _poly(3, 2000)], min_area=2000)
        assert sel == QuadSelection()

    def test_tie_keeps_first_encountered(self):
        first, second = _poly(4, 5000), _poly(4, 5000, offset=7)
        sel = select_quadrilateral([first, second], min_area=100)
        assert sel.found.points == first.vertices

    def test_fractional_floor_uses_frame_area(self):
        cand = _poly(4, 20000)
        # 10% of 640x480 = 30720 > 20000
        assert not select_quadrilateral([cand], min_area=0.1, frame_area=640 * 480).is_found
        assert select_quadrilateral([cand], min_area=0.05, frame_area=640 * 480).is_found

    def test_fractional_floor_without_frame_area_raises(self):
        with pytest.raises(ValueError):
            area_floor(0.1, None)

    def test_empty(self):
        assert select_quadrilateral([]) == QuadSelection()

    def test_stateless_between_calls(self):
        cand = _poly(4, 5000)
        assert select_quadrilateral([cand]).is_found
        assert not select_quadrilateral([]).is_found
        assert select_quadrilateral([cand]).is_found


class TestQuadStabilityPolicy:
    """Tests for QuadStabilityPolicy."""

    @pytest.fixture
    def found(self):
        return select_quadrilateral([_poly(4, 5000)])

    def test_needs_consecutive_frames_to_confirm(self, found):
        policy = QuadStabilityPolicy(confirm_frames=3, release_frames=2)
        assert not policy.update(found).is_found
        assert not policy.update(found).is_found
        assert policy.update(found).is_found

    def test_miss_resets_confirmation(self, found):
        policy = QuadStabilityPolicy(confirm_frames=2, release_frames=2)
        policy.update(found)
        policy.update(QuadSelection())
        assert not policy.update(found).is_found

    def test_holds_through_short_dropouts(self, found):
        policy = QuadStabilityPolicy(confirm_frames=1, release_frames=2)
        assert policy.update(found).is_found
        held = policy.update(QuadSelection())
        assert held.found == found.found
        assert not policy.update(QuadSelection()).is_found

    def test_reset(self, found):
        policy = QuadStabilityPolicy(confirm_frames=1, release_frames=5)
        policy.update(found)
        policy.reset()
        assert not policy.update(QuadSelection()).is_found

    def test_invalid_counts(self):
        with pytest.raises(ValueError):
            QuadStabilityPolicy(confirm_frames=0)
