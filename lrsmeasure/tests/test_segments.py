import math
import sys
import unittest
from unittest import TestCase

import numpy as np
from lrsmeasure import Geometry, LRSPoint, LRSLine, LRSMultiLine, LinearMeasureProgress


class TestLRSPoint(TestCase):

    def test_z_as_measure(self):
        point = LRSPoint(1, 2, 3)
        self.assertIsNone(point.z)
        self.assertEqual(point.m, 3)

    def test_z_and_measure(self):
        point = LRSPoint(1, 2, 3, 4)
        self.assertEqual((point.z, point.m), (3, 4))

    def test_from_coords(self):
        point = LRSPoint.from_coords(1, 2, 3)
        self.assertEqual(point.coords, (1.0, 2.0, 3, None))

    def test_from_geometry(self):
        point = LRSPoint.from_geometry(Geometry.from_wkt('SRID=3857;POINT (1 2 NULL 5)'))
        self.assertEqual(point.coords, (1.0, 2.0, None, 5.0))
        self.assertEqual(point.srid, 3857)
        self.assertEqual(point.to_geometry().wkt, 'POINT (1 2 NULL 5)')

    def test_approx_eq(self):
        point = LRSPoint(1, 2, 7, 3)
        self.assertTrue(point.approx_eq(LRSPoint(1, 2, None, 3)))
        self.assertFalse(point.approx_eq(LRSPoint(1, 2, None, 3.1)))
        self.assertFalse(point.approx_eq(LRSPoint.from_coords(1, 2)))
        self.assertFalse(point.approx_eq(None))

    def test_approx_eq_epsilon(self):
        point = LRSPoint(0, 0, None, 0)
        eps = sys.float_info.epsilon
        self.assertTrue(point.approx_eq(LRSPoint(eps / 2, 0, None, 0)))
        self.assertFalse(point.approx_eq(LRSPoint(eps, 0, None, 0)))
        self.assertFalse(point.approx_eq(LRSPoint(0, 0, None, eps)))

    def test_subtract(self):
        res = LRSPoint(1, 2, None, 3).subtract(LRSPoint(4, 6, None, 9))
        self.assertEqual((res.x, res.y, res.m), (3, 4, None))

    def test_distance(self):
        self.assertEqual(LRSPoint(0, 0).distance_to(LRSPoint(3, 4)), 5)

    def test_measure_undefined(self):
        point = LRSPoint.from_coords(0, 0)
        point.scale_measure(2)
        point.translate_measure(2)
        self.assertIsNone(point.m)

    def test_slope(self):
        point = LRSPoint(0, 0)
        point.set_slope(LRSPoint(2, 1))
        self.assertEqual(point.slope, 0.5)
        point.set_slope(LRSPoint(0, 1))
        self.assertTrue(math.isinf(point.slope))


class TestLRSLine(TestCase):

    def test_length(self):
        line = LRSLine(points=[LRSPoint(0, 0, None, 0), LRSPoint(3, 4, None, 5)])
        self.assertEqual(line.length, 5)
        line.add_point(LRSPoint(3, 10, None, 11))
        self.assertEqual(line.length, 11)

    def test_chord_lengths(self):
        line = LRSLine.from_geometry(Geometry.from_wkt('LINESTRING (0 0, 3 4, 3 10)'))
        np.testing.assert_allclose(line.chord_lengths, [5, 6])
        self.assertEqual(len(LRSLine().chord_lengths), 0)

    def test_measures(self):
        line = LRSLine.from_geometry(Geometry.from_wkt(wkt_decreasing))
        self.assertEqual((line.start_m, line.end_m), (20, 0))
        self.assertEqual((line.min_m, line.max_m), (0, 20))
        self.assertIs(line.measure_progress, LinearMeasureProgress.DECREASING)
        self.assertEqual(LRSLine().start_m, 0)

    def test_point_at_m(self):
        line = LRSLine.from_geometry(Geometry.from_wkt(wkt_decreasing))
        self.assertEqual(line.point_at_m(10).x, 10)
        self.assertIsNone(line.point_at_m(5))

    def test_reverse(self):
        line = LRSLine.from_geometry(Geometry.from_wkt(wkt_decreasing))
        line.reverse()
        self.assertEqual([p.m for p in line], [0, 10, 20])

    def test_scale_translate(self):
        line = LRSLine.from_geometry(Geometry.from_wkt(wkt_decreasing))
        line.scale_measure(-1)
        line.translate_measure(20)
        self.assertEqual([p.m for p in line], [0, 10, 20])

    def test_remove_collinear_points(self):
        line = LRSLine.from_geometry(Geometry.from_wkt(
            'LINESTRING (0 0 NULL 0, 1 1 NULL 1, 2 2 NULL 2, 2 5 NULL 5, 2 6 NULL 6)'))
        line.remove_collinear_points()
        self.assertEqual([(p.x, p.y) for p in line], [(0, 0), (2, 2), (2, 6)])
        self.assertAlmostEqual(line.length, 2 * 2 ** 0.5 + 4)

    def test_remove_collinear_points_reversal(self):
        for wkt in ['LINESTRING (0 0 NULL 0, 10 0 NULL 10, 0 0 NULL 20)',
                    'LINESTRING (0 0 NULL 0, 0 10 NULL 10, 0 5 NULL 15)']:
            line = LRSLine.from_geometry(Geometry.from_wkt(wkt))
            line.remove_collinear_points()
            self.assertEqual(len(line), 3, msg=wkt)

    def test_is_within_range(self):
        line = LRSLine.from_geometry(Geometry.from_wkt(wkt_increasing))
        self.assertTrue(line.is_within_range(5, 15))
        self.assertFalse(line.is_completely_in_range)
        self.assertTrue(line.is_within_range(20, 0))
        self.assertTrue(line.is_completely_in_range)
        self.assertFalse(line.is_within_range(20, 30))
        self.assertFalse(line.is_within_range(30, 40))

    def test_is_within_range_clip_points(self):
        line = LRSLine.from_geometry(Geometry.from_wkt(wkt_increasing))
        self.assertFalse(line.is_within_range(20, 30))
        clip_point = LRSPoint(10, 0, None, 10)
        self.assertTrue(line.is_within_range(20, 30, clip_start_point=clip_point))

    def test_to_geometry(self):
        line = LRSLine.from_geometry(Geometry.from_wkt(wkt_increasing))
        self.assertEqual(line.to_geometry().wkt, wkt_increasing)
        point = LRSLine(points=[LRSPoint(1, 1, None, 1)])
        self.assertEqual(point.to_geometry().wkt, 'POINT (1 1 NULL 1)')

    def test_compute_parallel_line(self):
        line = LRSLine.from_geometry(Geometry.from_wkt(wkt_increasing))
        res = line.compute_parallel_line(2, LinearMeasureProgress.INCREASING)
        for point, expected in zip(res, [(0, 2, 0), (10, 2, 10), (20, 2, 20)]):
            self.assertAlmostEqual(point.x, expected[0])
            self.assertAlmostEqual(point.y, expected[1])
            self.assertEqual(point.m, expected[2])


class TestLRSMultiLine(TestCase):

    def test_add_line(self):
        multi_line = LRSMultiLine()
        multi_line.add_line(LRSLine(points=[LRSPoint(0, 0, None, 0)]))
        self.assertTrue(multi_line.is_empty)
        multi_line.add_line(LRSLine.from_geometry(Geometry.from_wkt(wkt_increasing)))
        self.assertEqual(len(multi_line), 1)
        self.assertFalse(multi_line.is_multi)

    def test_endpoints(self):
        multi_line = LRSMultiLine.from_geometry(Geometry.from_wkt(wkt_multi))
        self.assertEqual((multi_line.start_m, multi_line.end_m), (0, 30))
        self.assertEqual(multi_line.start_point.x, 0)
        self.assertEqual(multi_line.end_point.x, 30)
        self.assertEqual(multi_line.length, 20)

    def test_remove(self):
        multi_line = LRSMultiLine.from_geometry(Geometry.from_wkt(wkt_multi))
        line = multi_line.remove_first()
        self.assertEqual(line.end_m, 10)
        self.assertEqual(multi_line.to_geometry().kind, 'LineString')

    def test_reverse_lines_and_points(self):
        multi_line = LRSMultiLine.from_geometry(Geometry.from_wkt(wkt_multi))
        multi_line.reverse_lines_and_points()
        self.assertEqual(
            multi_line.to_geometry().wkt,
            'MULTILINESTRING ((30 0 NULL 30, 20 0 NULL 20), (10 0 NULL 10, 0 0 NULL 0))')

    def test_reverse_lines(self):
        multi_line = LRSMultiLine.from_geometry(Geometry.from_wkt(wkt_multi))
        multi_line.reverse_lines()
        self.assertEqual(multi_line.start_m, 20)

    def test_scale_translate(self):
        multi_line = LRSMultiLine.from_geometry(Geometry.from_wkt(wkt_multi))
        multi_line.scale_measure(2)
        multi_line.translate_measure(-5)
        self.assertEqual((multi_line.start_m, multi_line.end_m), (-5, 55))


# Define standard unit test variables
wkt_increasing = 'LINESTRING (0 0 NULL 0, 10 0 NULL 10, 20 0 NULL 20)'
wkt_decreasing = 'LINESTRING (20 0 NULL 20, 10 0 NULL 10, 0 0 NULL 0)'
wkt_multi = 'MULTILINESTRING ((0 0 NULL 0, 10 0 NULL 10), (20 0 NULL 20, 30 0 NULL 30))'

if __name__ == '__main__':
    unittest.main()
