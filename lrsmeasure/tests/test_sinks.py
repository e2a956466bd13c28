import unittest
from unittest import TestCase

from lrsmeasure import Geometry, GeometryBuilder, LinearMeasureProgress
from lrsmeasure.common import LRSTypeError, MeasureRangeError
from lrsmeasure.sinks.base import ShapeContext, is_top_level, emit_lines
from lrsmeasure.sinks.transform import (
    ShiftSink, ScaleMeasureSink, TranslateMeasureSink, ResetMeasureSink,
    ConvertXYZToXYMSink, LRSTypeCheckSink)
from lrsmeasure.sinks.buffered import (
    ReverseSink, ReverseAndTranslateSink, PopulateMeasuresSink,
    BuildLRSMultiLineSink, BuildMultiLineFromLinesSink, LineStringMergeSink)
from lrsmeasure.sinks.analysis import (
    ValidateLinearMeasureSink, LocateMeasureSink, LocateAlongSink, SplitSink)
from lrsmeasure.sinks.clip import ClipMeasureSink, ClipMultiLineSink
from lrsmeasure.sinks.offset import OffsetSink
from lrsmeasure.base.segments import LRSLine


def run(wkt, factory):
    builder = GeometryBuilder()
    Geometry.from_wkt(wkt).populate(factory(builder))
    return builder.geometry if builder.is_constructed else None


class TestShapeContext(TestCase):

    def test_member(self):
        context = ShapeContext.member('LineString', 1, 2)
        self.assertTrue(context.is_member)
        self.assertTrue(context.is_last_member)
        self.assertFalse(context.is_first_member)
        self.assertFalse(is_top_level(context))

    def test_top(self):
        context = ShapeContext.top('MultiLineString')
        self.assertFalse(context.is_member)
        self.assertTrue(is_top_level(context))
        self.assertTrue(is_top_level(None))

    def test_emit_lines(self):
        lines = [LRSLine.from_geometry(g) for g in Geometry.from_wkt(wkt_multi).lines]
        builder = GeometryBuilder()
        emit_lines(builder, 4326, 'MultiLineString', lines)
        self.assertEqual(builder.geometry.wkt, wkt_multi)


class TestTransformSinks(TestCase):

    def test_shift(self):
        res = run('POLYGON ((0 0, 1 0, 1 1, 0 0))', lambda b: ShiftSink(b, 1, 2))
        self.assertEqual(res.wkt, 'POLYGON ((1 2, 2 2, 2 3, 1 2))')

    def test_scale(self):
        res = run('LINESTRING (0 0 NULL 1, 1 0, 2 0 NULL 3)', lambda b: ScaleMeasureSink(b, -2))
        self.assertEqual([c[3] for c in res.coords], [-2, None, -6])

    def test_translate(self):
        res = run('LINESTRING (0 0 NULL 1, 1 0, 2 0 NULL 3)', lambda b: TranslateMeasureSink(b, 5))
        self.assertEqual([c[3] for c in res.coords], [6, 5, 8])

    def test_reset(self):
        res = run(wkt_line, ResetMeasureSink)
        self.assertEqual(res.wkt, 'LINESTRING (0 0, 10 0, 20 0)')
        with self.assertRaises(LRSTypeError):
            run(wkt_multi, ResetMeasureSink)

    def test_convert_xyz(self):
        res = run('LINESTRING (0 0 1, 1 0 2 7)', ConvertXYZToXYMSink)
        self.assertEqual(res.coords, [(0, 0, None, 1), (1, 0, 2, 7)])

    def test_type_check(self):
        with self.assertRaises(LRSTypeError):
            run('POLYGON ((0 0, 1 0, 1 1, 0 0))', LRSTypeCheckSink)
        with self.assertRaises(LRSTypeError):
            run('POINT (0 0)', lambda b: LRSTypeCheckSink(b, kinds={'LineString'}))
        self.assertEqual(run(wkt_line, LRSTypeCheckSink).wkt, wkt_line)


class TestBufferedSinks(TestCase):

    def test_reverse(self):
        res = run(wkt_multi, ReverseSink)
        self.assertEqual(
            res.wkt, 'MULTILINESTRING ((30 0 NULL 30, 20 0 NULL 20), (10 0 NULL 10, 0 0 NULL 0))')

    def test_reverse_and_translate(self):
        res = run('LINESTRING (0 0 NULL 0, 10 0)', lambda b: ReverseAndTranslateSink(b, 5))
        self.assertEqual(res.wkt, 'LINESTRING (10 0 NULL 5, 0 0 NULL 5)')

    def test_populate(self):
        res = run('MULTILINESTRING ((0 0, 10 0), (20 0, 30 0))',
                  lambda b: PopulateMeasuresSink(b, 100, 200))
        self.assertEqual([c[3] for c in res.coords], [100, 150, 150, 200])

    def test_populate_zero_length(self):
        with self.assertWarns(RuntimeWarning):
            res = run('LINESTRING (1 1, 1 1)', lambda b: PopulateMeasuresSink(b, 5, 10))
        self.assertEqual([c[3] for c in res.coords], [5, 5])

    def test_populate_point(self):
        res = run('POINT (1 1)', lambda b: PopulateMeasuresSink(b, 5, 10))
        self.assertEqual(res.m, 10)

    def test_build_lrs_multi_line(self):
        sink = BuildLRSMultiLineSink()
        Geometry.from_wkt(wkt_multi).populate(sink)
        self.assertEqual(len(sink.multi_line), 2)
        self.assertEqual(sink.multi_line.end_m, 30)

    def test_build_multi_line_from_lines(self):
        builder = GeometryBuilder()
        sink = BuildMultiLineFromLinesSink(builder, 2)
        for line in Geometry.from_wkt(wkt_multi).lines:
            line.populate(sink)
        self.assertEqual(builder.geometry.wkt, wkt_multi)

    def test_line_string_merge(self):
        builder = GeometryBuilder()
        Geometry.from_wkt('LINESTRING (0 0 NULL 0, 10 0 NULL 10)').populate(
            LineStringMergeSink(builder, True))
        self.assertFalse(builder.is_constructed)
        Geometry.from_wkt('LINESTRING (10 0 NULL 10, 20 0 NULL 20)').populate(
            LineStringMergeSink(builder, False))
        self.assertEqual(builder.geometry.wkt, wkt_line)


class TestAnalysisSinks(TestCase):

    def test_validate(self):
        sink = ValidateLinearMeasureSink()
        Geometry.from_wkt('LINESTRING (0 0 NULL 5, 1 0 NULL 5, 2 0 NULL 3)').populate(sink)
        self.assertTrue(sink.is_linear)
        self.assertIs(sink.progress, LinearMeasureProgress.DECREASING)

    def test_validate_not_linear(self):
        sink = ValidateLinearMeasureSink()
        Geometry.from_wkt('LINESTRING (0 0 NULL 5, 1 0 NULL 6, 2 0 NULL 3)').populate(sink)
        self.assertFalse(sink.is_linear)

    def test_validate_invalid_type(self):
        with self.assertRaises(LRSTypeError):
            Geometry.from_wkt('POLYGON ((0 0 0, 1 0 1, 1 1 2, 0 0 0))').populate(
                ValidateLinearMeasureSink())

    def test_validate_forward(self):
        builder = GeometryBuilder()
        Geometry.from_wkt(wkt_line).populate(ValidateLinearMeasureSink(builder))
        self.assertEqual(builder.geometry.wkt, wkt_line)

    def test_locate_measure(self):
        res = run(wkt_line, lambda b: LocateMeasureSink(b, 15))
        self.assertEqual(res.wkt, 'POINT (15 0 NULL 15)')

    def test_locate_measure_snap(self):
        res = run(wkt_line, lambda b: LocateMeasureSink(b, 9.8, tolerance=0.5))
        self.assertEqual(res.wkt, 'POINT (10 0 NULL 10)')

    def test_locate_measure_not_found(self):
        self.assertIsNone(run(wkt_line, lambda b: LocateMeasureSink(b, 25)))

    def test_locate_along(self):
        res = run('LINESTRING (0 0, 10 0, 10 10)', lambda b: LocateAlongSink(b, 15))
        self.assertEqual(res.wkt, 'POINT (10 5)')

    def test_locate_along_invalid(self):
        with self.assertRaises(MeasureRangeError):
            LocateAlongSink(GeometryBuilder(), -1)
        with self.assertRaises(MeasureRangeError):
            run('LINESTRING (0 0, 10 0)', lambda b: LocateAlongSink(b, 11))
        with self.assertRaises(LRSTypeError):
            run(wkt_multi, lambda b: LocateAlongSink(b, 1))

    def test_split(self):
        before, after = GeometryBuilder(), GeometryBuilder()
        Geometry.from_wkt(wkt_line).populate(SplitSink(before, after, 5))
        self.assertEqual(before.geometry.wkt, 'LINESTRING (0 0 NULL 0, 5 0 NULL 5)')
        self.assertEqual(
            after.geometry.wkt, 'LINESTRING (5 0 NULL 5, 10 0 NULL 10, 20 0 NULL 20)')

    def test_split_vertex(self):
        before, after = GeometryBuilder(), GeometryBuilder()
        Geometry.from_wkt(wkt_line).populate(SplitSink(before, after, 10))
        self.assertEqual(before.geometry.wkt, 'LINESTRING (0 0 NULL 0, 10 0 NULL 10)')
        self.assertEqual(after.geometry.wkt, 'LINESTRING (10 0 NULL 10, 20 0 NULL 20)')


class TestClipSinks(TestCase):

    def test_clip_inside_segment(self):
        res = run(wkt_line, lambda b: ClipMeasureSink(b, 12, 14))
        self.assertEqual(res.wkt, 'LINESTRING (12 0 NULL 12, 14 0 NULL 14)')

    def test_clip_decreasing(self):
        res = run('LINESTRING (20 0 NULL 20, 10 0 NULL 10, 0 0 NULL 0)',
                  lambda b: ClipMeasureSink(b, 5, 15))
        self.assertEqual(res.wkt, 'LINESTRING (15 0 NULL 15, 10 0 NULL 10, 5 0 NULL 5)')

    def test_clip_snap(self):
        res = run(wkt_line, lambda b: ClipMeasureSink(b, 5, 10.2, tolerance=0.5))
        self.assertEqual(res.wkt, 'LINESTRING (5 0 NULL 5, 10 0 NULL 10)')
        res = run(wkt_line, lambda b: ClipMeasureSink(
            b, 5, 10.2, tolerance=0.5, retain_clip_measure=True))
        self.assertEqual(res.wkt, 'LINESTRING (5 0 NULL 5, 10 0 NULL 10.2)')

    def test_clip_point(self):
        res = run(wkt_line, lambda b: ClipMeasureSink(b, 5, 5))
        self.assertEqual(res.wkt, 'POINT (5 0 NULL 5)')

    def test_clip_outside(self):
        self.assertIsNone(run(wkt_line, lambda b: ClipMeasureSink(b, 30, 40)))

    def test_clip_requires_line(self):
        with self.assertRaises(LRSTypeError):
            run(wkt_multi, lambda b: ClipMeasureSink(b, 5, 15))

    def test_clip_multi(self):
        res = run(wkt_multi, lambda b: ClipMultiLineSink(b, 5, 25))
        self.assertEqual(
            res.wkt, 'MULTILINESTRING ((5 0 NULL 5, 10 0 NULL 10), (20 0 NULL 20, 25 0 NULL 25))')

    def test_clip_multi_single_member(self):
        res = run(wkt_multi, lambda b: ClipMultiLineSink(b, 22, 28))
        self.assertEqual(res.wkt, 'LINESTRING (22 0 NULL 22, 28 0 NULL 28)')


class TestOffsetSink(TestCase):

    def test_offset_multi(self):
        res = run(wkt_multi, lambda b: OffsetSink(b, 1, LinearMeasureProgress.INCREASING))
        self.assertEqual(res.kind, 'MultiLineString')
        for x, y, z, m in res.coords:
            self.assertAlmostEqual(y, 1)
            self.assertAlmostEqual(x, m)

    def test_offset_requires_linear(self):
        with self.assertRaises(LRSTypeError):
            run('POINT (0 0 NULL 0)', lambda b: OffsetSink(b, 1, LinearMeasureProgress.INCREASING))


# Define standard unit test variables
wkt_line = 'LINESTRING (0 0 NULL 0, 10 0 NULL 10, 20 0 NULL 20)'
wkt_multi = 'MULTILINESTRING ((0 0 NULL 0, 10 0 NULL 10), (20 0 NULL 20, 30 0 NULL 30))'

if __name__ == '__main__':
    unittest.main()
