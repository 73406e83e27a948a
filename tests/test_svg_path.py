"""Tests for SVG path flattening."""

import numpy as np
import pytest

from etherloop.utils.svg_path import OutlineError, find_first_path_d, load_first_path, parse_path_d


class TestLines:
    def test_absolute_closed(self):
        (poly,) = parse_path_d("M0 0 L10 0 L10 10 Z")
        assert poly.tolist() == [[0, 0], [10, 0], [10, 10], [0, 0]]

    def test_relative_with_implicit_lineto(self):
        (poly,) = parse_path_d("m1 1 10 0 0 10z")
        assert poly.tolist() == [[1, 1], [11, 1], [11, 11], [1, 1]]

    def test_horizontal_vertical(self):
        (poly,) = parse_path_d("M0,0 H5 V5 h-5 z")
        assert poly.tolist() == [[0, 0], [5, 0], [5, 5], [0, 5], [0, 0]]

    def test_compact_numbers(self):
        (poly,) = parse_path_d("M-1-1L.5.5l1e1-2")
        np.testing.assert_allclose(poly, [[-1, -1], [0.5, 0.5], [10.5, -1.5]])

    def test_multiple_subpaths(self):
        polys = parse_path_d("M0 0 L1 0 M5 5 L6 5")
        assert len(polys) == 2
        assert polys[1].tolist() == [[5, 5], [6, 5]]

    def test_drawing_after_close_starts_at_subpath_start(self):
        polys = parse_path_d("M0 0 L4 0 L4 4 Z L0 -4")
        assert polys[1].tolist() == [[0, 0], [0, -4]]


class TestCurves:
    def test_cubic_ends_at_endpoint(self):
        (poly,) = parse_path_d("M0 0 C0 10 10 10 10 0", curve_steps=16)
        assert len(poly) == 17
        np.testing.assert_allclose(poly[-1], [10, 0])
        assert poly[:, 1].max() == pytest.approx(7.5)

    def test_smooth_cubic_reflects_control_point(self):
        (poly,) = parse_path_d("M0 0 C0 10 10 10 10 0 S20 -10 20 0", curve_steps=16)
        np.testing.assert_allclose(poly[-1], [20, 0])
        assert poly[:, 1].min() == pytest.approx(-7.5)

    def test_quadratic_and_smooth_quadratic(self):
        (poly,) = parse_path_d("M0 0 Q5 10 10 0 T20 0", curve_steps=10)
        np.testing.assert_allclose(poly[-1], [20, 0])
        assert poly[:, 1].max() == pytest.approx(5.0)
        assert poly[:, 1].min() == pytest.approx(-5.0)

    def test_arc_stays_on_circle(self):
        (poly,) = parse_path_d("M0 0 A5 5 0 0 1 10 0")
        np.testing.assert_allclose(poly[-1], [10, 0])
        d = np.hypot(poly[:, 0] - 5, poly[:, 1])
        np.testing.assert_allclose(d, 5.0, atol=1e-9)

    def test_arc_packed_flags(self):
        (a,) = parse_path_d("M0 0 a5 5 0 0110 0")
        (b,) = parse_path_d("M0 0 a 5 5 0 0 1 10 0")
        np.testing.assert_allclose(a, b)

    def test_arc_radius_scaled_up_when_too_small(self):
        (poly,) = parse_path_d("M0 0 A1 1 0 0 1 10 0")
        np.testing.assert_allclose(poly[-1], [10, 0])
        d = np.hypot(poly[:, 0] - 5, poly[:, 1])
        np.testing.assert_allclose(d, 5.0, atol=1e-9)

    def test_zero_radius_arc_is_a_line(self):
        (poly,) = parse_path_d("M0 0 A0 5 0 0 1 10 0")
        assert poly.tolist() == [[0, 0], [10, 0]]


class TestErrors:
    @pytest.mark.parametrize("d", ["10 10", "M0 0 L10", "M0 0 A5 5 0 2 1 10 0", "M0 0 Z 5 5", "M0 0 L1e400 0"])
    def test_malformed(self, d):
        with pytest.raises(OutlineError):
            parse_path_d(d)

    def test_degenerate_arc_radius_raises_outline_error(self):
        with pytest.raises(OutlineError, match="overflow"):
            parse_path_d("M0 0 A1 1e-200 0 0 1 10 10")

    def test_missing_path_element(self):
        import xml.etree.ElementTree as ET

        with pytest.raises(OutlineError):
            find_first_path_d(ET.fromstring("<svg><circle r='3'/></svg>"))

    def test_load_first_path_uses_first_element(self, tmp_path):
        f = tmp_path / "two.svg"
        f.write_text(
            '<svg xmlns="http://www.w3.org/2000/svg">'
            '<path d="M0 0 L3 0"/><path d="M100 100 L200 200"/></svg>'
        )
        polys = load_first_path(f)
        assert len(polys) == 1
        assert polys[0].tolist() == [[0, 0], [3, 0]]

    def test_load_first_path_rejects_bad_xml(self, tmp_path):
        f = tmp_path / "bad.svg"
        f.write_text("<svg><path")
        with pytest.raises(OutlineError):
            load_first_path(f)
