"""
===============================================================================

Module featuring sink stages which analyze a streamed geometry rather than
transform it: validating that measures progress monotonically, locating the
point at a measure or at a planar distance along a line, and splitting a
linear geometry at a measure.


Classes
-------
ValidateLinearMeasureSink, LocateMeasureSink, LocateAlongSink, SplitSink


Dependencies
------------
None


Development
-----------
Created:
10/18/2026

Modified:
10/18/2026

===============================================================================
"""


################
# DEPENDENCIES #
################

from lrsmeasure import common
from lrsmeasure.common import LRSTypeError, LinearMeasureProgress, MeasureRangeError
from lrsmeasure.sinks.base import (
    GeometrySink, CollectingSink, emit_lines, is_top_level)
from lrsmeasure.base.segments import LRSPoint, LRSLine


class ValidateLinearMeasureSink(GeometrySink):
    """
    Test whether measures progress monotonically over every vertex of a
    geometry, in traversal order and across the members of multi-part
    shapes. The direction of progression is taken from the first change of
    measure; any later change in the opposite direction marks the geometry as
    not linear. The result is available through the is_linear attribute once
    the geometry has been streamed.

    Parameters
    ----------
    target : GeometrySink, optional
        A downstream stage receiving every event unchanged.
    """

    def __init__(self, target=None):
        self.target = target
        self.is_linear = True
        self.direction = 0
        self._last_m = None

    def _check(self, m):
        if m is not None and self._last_m is not None:
            diff = m - self._last_m
            if diff != 0:
                sign = 1 if diff > 0 else -1
                if self.direction == 0:
                    self.direction = sign
                elif sign != self.direction:
                    self.is_linear = False
        if m is not None:
            self._last_m = m

    @property
    def progress(self):
        if self.direction > 0:
            return LinearMeasureProgress.INCREASING
        elif self.direction < 0:
            return LinearMeasureProgress.DECREASING
        return LinearMeasureProgress.NONE

    def set_srid(self, srid):
        if self.target is not None:
            self.target.set_srid(srid)

    def begin_shape(self, kind, context=None):
        if not kind in common.shape_kinds_lrs:
            raise LRSTypeError(common.msg_lrs_types)
        if self.target is not None:
            self.target.begin_shape(kind, context)

    def begin_part(self, x, y, z=None, m=None):
        self._check(m)
        if self.target is not None:
            self.target.begin_part(x, y, z, m)

    def line_to(self, x, y, z=None, m=None):
        self._check(m)
        if self.target is not None:
            self.target.line_to(x, y, z, m)

    def end_part(self):
        if self.target is not None:
            self.target.end_part()

    def end_shape(self, context=None):
        if self.target is not None:
            self.target.end_shape(context)


class LocateMeasureSink(GeometrySink):
    """
    Find the point at a measure along a linear geometry, emitting it to the
    target as a Point once the geometry has ended. The point is interpolated
    over the measure fraction of the first segment whose measures enclose the
    requested measure, snapping to either vertex of the segment when within
    the tolerance of it. Interpolated points carry no Z value.

    Parameters
    ----------
    target : GeometrySink
        The downstream stage receiving the located point.
    measure : float
        The measure to locate.
    tolerance : float, default 0.0
        The distance within which the located point snaps to a vertex.
    """

    def __init__(self, target, measure, tolerance=0.0):
        self.target = target
        self.measure = measure
        self.tolerance = tolerance
        self.srid = None
        self.found = None
        self._last = None

    def set_srid(self, srid):
        self.srid = srid

    def begin_shape(self, kind, context=None):
        if not kind in common.shape_kinds_lrs:
            raise LRSTypeError(common.msg_lrs_types)

    def begin_part(self, x, y, z=None, m=None):
        if self.found is None and m is not None and m == self.measure:
            self.found = (x, y, z, m)
        self._last = (x, y, z, m)

    def line_to(self, x, y, z=None, m=None):
        if self.found is None:
            lx, ly, lz, lm = self._last
            if lm is not None and m is not None and \
                    common.is_within_range(self.measure, lm, m):
                self.found = self._locate(self._last, (x, y, z, m))
        self._last = (x, y, z, m)

    def _locate(self, last, current):
        lx, ly, lz, lm = last
        x, y, z, m = current
        px, py = common.interpolate_by_measure(lx, ly, lm, x, y, m, self.measure)
        if common.is_within_tolerance(px, py, lx, ly, self.tolerance):
            return last
        elif common.is_within_tolerance(px, py, x, y, self.tolerance):
            return current
        return (px, py, None, self.measure)

    def end_part(self):
        pass

    def end_shape(self, context=None):
        if is_top_level(context) and self.found is not None:
            x, y, z, m = self.found
            emit_lines(self.target, self.srid, 'Point',
                       [LRSLine(self.srid, [LRSPoint.from_coords(x, y, z, m, self.srid)])])


class LocateAlongSink(GeometrySink):
    """
    Find the point at a planar distance along a LineString, emitting it to
    the target as a two dimensional Point once the line has ended.

    Parameters
    ----------
    target : GeometrySink
        The downstream stage receiving the located point.
    distance : float
        The planar distance to travel from the start of the line.
    """

    def __init__(self, target, distance):
        if distance < 0:
            raise MeasureRangeError(common.msg_distance_positive)
        self.target = target
        self.distance = distance
        self.srid = None
        self.found = None
        self._last = None

    def set_srid(self, srid):
        self.srid = srid

    def begin_shape(self, kind, context=None):
        if kind != 'LineString':
            raise LRSTypeError(common.msg_linestring_only)

    def begin_part(self, x, y, z=None, m=None):
        self._last = (x, y)
        if self.distance == 0:
            self.found = (x, y)

    def line_to(self, x, y, z=None, m=None):
        if self.found is not None:
            return
        lx, ly = self._last
        length = ((x - lx) ** 2 + (y - ly) ** 2) ** 0.5
        if length < self.distance:
            # Step along the line
            self.distance -= length
            self._last = (x, y)
        else:
            self.found = common.interpolate_by_distance(lx, ly, x, y, self.distance)

    def end_part(self):
        pass

    def end_shape(self, context=None):
        if self.found is None:
            raise MeasureRangeError(common.msg_distance_length)
        x, y = self.found
        emit_lines(self.target, self.srid, 'Point',
                   [LRSLine(self.srid, [LRSPoint.from_coords(x, y, srid=self.srid)])])


class SplitSink(CollectingSink):
    """
    Split a linear geometry at a measure into the portion traversed before
    the measure and the portion traversed after it, emitted to two separate
    targets. Each member line of a multi line string is split independently;
    members lying wholly on one side of the measure contribute only to that
    side. The point at the measure closes the first portion and opens the
    second. A portion without any line is not emitted.

    Parameters
    ----------
    target_before, target_after : GeometrySink
        The downstream stages receiving each portion.
    measure : float
        The measure at which to split.
    """

    def __init__(self, target_before, target_after, measure):
        super().__init__()
        self.target_before = target_before
        self.target_after = target_after
        self.measure = measure

    def begin_shape(self, kind, context=None):
        if not kind in common.shape_kinds_linear:
            raise LRSTypeError(common.msg_linear_types)
        super().begin_shape(kind, context)

    def flush(self):
        measure = self.measure
        lines = [line for line in self.parts if line.is_line]
        if len(lines) == 0:
            return
        decreasing = lines[-1].end_m < lines[0].start_m
        before, after = [], []
        for line in lines:
            lo, hi = line.min_m, line.max_m
            if (hi <= measure and not decreasing) or (lo >= measure and decreasing):
                before.append(line)
            elif (lo >= measure and not decreasing) or (hi <= measure and decreasing):
                after.append(line)
            else:
                line_before, line_after = self._split_line(line)
                before.append(line_before)
                after.append(line_after)
        self._emit(self.target_before, before)
        self._emit(self.target_after, after)

    def _split_line(self, line):
        measure = self.measure
        points = line.points
        for i in range(1, len(points)):
            prev, point = points[i - 1], points[i]
            if not common.is_within_range(measure, prev.m, point.m):
                continue
            if prev.m == measure:
                return LRSLine(self.srid, points[:i]), LRSLine(self.srid, points[i - 1:])
            elif point.m == measure:
                return LRSLine(self.srid, points[:i + 1]), LRSLine(self.srid, points[i:])
            x, y = common.interpolate_by_measure(
                prev.x, prev.y, prev.m, point.x, point.y, point.m, measure)
            return (
                LRSLine(self.srid, points[:i] + [LRSPoint(x, y, None, measure, self.srid)]),
                LRSLine(self.srid, [LRSPoint(x, y, None, measure, self.srid)] + points[i:]),
            )
        raise MeasureRangeError(
            common.msg_measure_not_in_range.format(measure, line.start_m, line.end_m))

    def _emit(self, target, lines):
        lines = [line for line in lines if line.is_line]
        if len(lines) == 0:
            return
        kind = 'LineString' if len(lines) == 1 else 'MultiLineString'
        emit_lines(target, self.srid, kind, lines)
