"""
===============================================================================

Module featuring the LRS segment data model: points carrying an optional
measure, lines as ordered sequences of points with a tracked planar length
and multi lines as ordered sequences of lines. These classes are built fresh
by each operation, from streamed geometry events or by direct construction,
and converted back to Geometry objects once the operation completes.


Classes
-------
LRSPoint, LRSLine, LRSMultiLine


Dependencies
------------
numpy, copy


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

from __future__ import annotations
import copy
import math
import numpy as np
from lrsmeasure import common
from lrsmeasure.common import LinearMeasureProgress
from lrsmeasure.geometry import Geometry
from lrsmeasure.base import parallel


class LRSPoint(object):
    """
    Point with an optional measure. When constructed without an explicit
    measure, a provided Z value is interpreted as the measure instead.

    Parameters
    ----------
    x, y : float
        The planar coordinates of the point.
    z : float, optional
        The Z value of the point, or its measure when m is not provided.
    m : float, optional
        The measure of the point.
    srid : int, optional
        The spatial reference identifier of the point.
    """

    __slots__ = ('x', 'y', 'z', 'm', 'srid', 'slope', 'offset_bearing',
                 'offset_angle', 'offset_distance')

    def __init__(self, x, y, z=None, m=None, srid=None):
        self.x = float(x)
        self.y = float(y)
        self.z = z if m is not None else None
        self.m = m if m is not None else z
        self.srid = common.get_srid(srid)
        self.slope = None
        self.offset_bearing = None
        self.offset_angle = 0.0
        self.offset_distance = 0.0

    def __repr__(self):
        return f'LRSPoint({self.x}, {self.y}, {self.z}, {self.m})'

    @classmethod
    def from_coords(cls, x, y, z=None, m=None, srid=None):
        """
        Create a point keeping its Z and M values as they are, without
        interpreting a Z value as the measure.
        """
        point = cls(x, y, srid=srid)
        point.z, point.m = z, m
        return point

    @classmethod
    def from_geometry(cls, geom):
        """
        Create a point from a Point geometry, keeping its Z and M values as
        they are.
        """
        return cls.from_coords(geom.x, geom.y, geom.z, geom.m, geom.srid)

    def to_geometry(self):
        return Geometry.point(self.x, self.y, self.z, self.m, srid=self.srid)

    @property
    def coords(self):
        return (self.x, self.y, self.z, self.m)

    def approx_eq(self, other, epsilon=None):
        """
        Test whether two points are equal within the measure epsilon on their
        x, y and m values. Z values are ignored.
        """
        if other is None:
            return False
        if (self.m is None) != (other.m is None):
            return False
        res = common.is_close(self.x, other.x, epsilon) and \
            common.is_close(self.y, other.y, epsilon)
        if self.m is not None:
            res = res and common.is_close(self.m, other.m, epsilon)
        return res

    def subtract(self, other):
        """
        Return the planar vector from this point to another point, as a point
        without Z or M values.
        """
        return LRSPoint(other.x - self.x, other.y - self.y, srid=self.srid)

    def distance_to(self, other):
        return math.hypot(other.x - self.x, other.y - self.y)

    def is_within_tolerance(self, other, tolerance):
        return common.is_within_tolerance(
            self.x, self.y, other.x, other.y, tolerance)

    def translate_measure(self, offset):
        if self.m is not None:
            self.m += offset

    def scale_measure(self, factor):
        if self.m is not None:
            self.m *= factor

    def set_slope(self, next_point):
        """
        Set the slope of the segment from this point to the next point.
        Vertical segments have an infinite slope.
        """
        dx = next_point.x - self.x
        self.slope = math.inf if dx == 0 else (next_point.y - self.y) / dx

    def set_offset_bearing(self, next_point):
        if next_point is not None:
            self.offset_bearing = parallel.get_offset_bearing(self, next_point)

    def set_offset_angle(self, prev_point, progress):
        prev_bearing = None if prev_point is None else prev_point.offset_bearing
        self.offset_angle = parallel.get_offset_angle(
            self.offset_bearing, prev_bearing, progress)

    def set_offset_distance(self, offset):
        self.offset_distance = parallel.get_offset_distance(
            offset, self.offset_bearing, self.offset_angle)

    def copy(self, deep=False):
        """
        Create an exact copy of the object instance.

        Parameters
        ----------
        deep : bool, default False
            Whether the created copy should be a deep copy.
        """
        return copy.deepcopy(self) if deep else copy.copy(self)


class LRSLine(object):
    """
    Ordered sequence of LRS points with a planar length accumulated as points
    are added.

    Parameters
    ----------
    srid : int, optional
        The spatial reference identifier of the line.
    points : list of LRSPoint, optional
        The points of the line.
    """

    def __init__(self, srid=None, points=None):
        self.srid = common.get_srid(srid)
        self.points = []
        self.length = 0.0
        self.is_in_range = False
        self.is_completely_in_range = False
        for point in points or []:
            self.add_point(point)

    def __len__(self):
        return len(self.points)

    def __iter__(self):
        return iter(self.points)

    def __getitem__(self, index):
        return self.points[index]

    def __repr__(self):
        return f'<LRSLine {len(self)} points, length={self.length}>'

    @classmethod
    def from_geometry(cls, geom):
        """
        Create a line from a LineString or Point geometry.
        """
        line = cls(srid=geom.srid)
        for x, y, z, m in geom.coords:
            line.add_coords(x, y, z, m)
        return line

    @property
    def is_empty(self):
        return len(self.points) == 0

    @property
    def is_point(self):
        return len(self.points) == 1

    @property
    def is_line(self):
        return len(self.points) >= 2

    def add_point(self, point):
        """
        Append a point to the end of the line, accumulating the planar length.
        """
        if len(self.points) > 0:
            self.length += self.points[-1].distance_to(point)
        self.points.append(point)

    def add_coords(self, x, y, z=None, m=None):
        self.add_point(LRSPoint.from_coords(x, y, z, m, self.srid))

    @property
    def start_point(self):
        return self.points[0] if self.points else None

    @property
    def end_point(self):
        return self.points[-1] if self.points else None

    @property
    def start_m(self):
        """
        Return the measure of the first point, defaulting to 0.
        """
        if self.is_empty or self.points[0].m is None:
            return 0.0
        return self.points[0].m

    @property
    def end_m(self):
        """
        Return the measure of the last point, defaulting to 0.
        """
        if self.is_empty or self.points[-1].m is None:
            return 0.0
        return self.points[-1].m

    @property
    def min_m(self):
        return min(self.start_m, self.end_m)

    @property
    def max_m(self):
        return max(self.start_m, self.end_m)

    @property
    def measure_progress(self):
        start, end = self.start_m, self.end_m
        if end > start:
            return LinearMeasureProgress.INCREASING
        elif end < start:
            return LinearMeasureProgress.DECREASING
        return LinearMeasureProgress.NONE

    @property
    def chord_lengths(self):
        """
        Return the planar length of each segment of the line.
        """
        if len(self.points) < 2:
            return np.array([], dtype=float)
        xy = np.array([(p.x, p.y) for p in self.points], dtype=float)
        return np.sqrt((np.diff(xy, axis=0) ** 2).sum(axis=1))

    def _update_length(self):
        self.length = float(self.chord_lengths.sum())

    def point_at_m(self, m):
        """
        Return the first point carrying the given measure, or None.
        """
        for point in self.points:
            if point.m is not None and common.is_close(point.m, m):
                return point
        return None

    def reverse(self):
        """
        Reverse the order of the points of the line in place.
        """
        self.points.reverse()

    def scale_measure(self, factor):
        for point in self.points:
            point.scale_measure(factor)

    def translate_measure(self, offset):
        for point in self.points:
            point.translate_measure(offset)

    def calculate_slope(self):
        """
        Compute the slope at each point of the line, toward the next point.
        The last point's slope is computed toward the first point.
        """
        n = len(self.points)
        for i, point in enumerate(self.points):
            point.set_slope(self.points[(i + 1) % n])

    def remove_collinear_points(self):
        """
        Remove interior points where the segments before and after the point
        share the same slope and bearing. Points where the line turns back on
        itself share a slope but not a bearing, and are kept. The first and
        last points are always kept.
        """
        if len(self.points) < 3:
            return
        self.calculate_slope()
        for point, next_point in zip(self.points[:-1], self.points[1:]):
            point.set_offset_bearing(next_point)
        kept = [self.points[0]]
        for i in range(1, len(self.points) - 1):
            prev_point, point = self.points[i - 1], self.points[i]
            if not (_same_slope(prev_point.slope, point.slope) and
                    _same_bearing(point.offset_bearing, prev_point.offset_bearing)):
                kept.append(point)
        kept.append(self.points[-1])
        self.points = kept
        self._update_length()

    def is_within_range(self, start_m, end_m, clip_start_point=None,
                        clip_end_point=None):
        """
        Determine whether the line overlaps a measure range, caching the
        result on the is_in_range and is_completely_in_range attributes.

        A point counts toward the overlap if its measure lies within the
        range or it equals one of the clip boundary points. Each segment
        strictly straddling a range boundary also counts. The line is in range
        if the count exceeds one, and completely in range if every point lies
        within the range.

        Parameters
        ----------
        start_m, end_m : float
            The bounds of the measure range, in either order.
        clip_start_point, clip_end_point : LRSPoint, optional
            The points located at the range bounds.
        """
        lo, hi = min(start_m, end_m), max(start_m, end_m)
        count = 0
        inside = 0
        last_m = None
        for point in self.points:
            m = 0.0 if point.m is None else point.m
            if lo <= m <= hi:
                inside += 1
                count += 1
            elif point.approx_eq(clip_start_point) or point.approx_eq(clip_end_point):
                count += 1
            if last_m is not None:
                for bound in (lo, hi):
                    if min(last_m, m) < bound < max(last_m, m):
                        count += 1
            last_m = m
        self.is_in_range = count > 1
        self.is_completely_in_range = inside == len(self.points)
        return self.is_in_range

    def compute_parallel_line(self, offset, progress, tolerance=0.0):
        """
        Return a new line parallel to this line at the lateral offset.

        Parameters
        ----------
        offset : float
            The lateral offset; positive values are placed to the left of the
            direction of travel.
        progress : LinearMeasureProgress
            The measure progression of the geometry the line belongs to.
        tolerance : float, default 0.0
            The distance below which two bend points are considered
            coincident.
        """
        res = LRSLine(srid=self.srid)
        for x, y, m in parallel.compute_parallel_points(
                self.points, offset, progress, tolerance):
            res.add_coords(x, y, None, m)
        return res

    def to_geometry(self):
        """
        Convert the line to a LineString geometry, or a Point geometry if it
        holds a single point.
        """
        coords = [p.coords for p in self.points]
        if self.is_point:
            return Geometry('Point', [coords], self.srid)
        return Geometry('LineString', [coords] if coords else [], self.srid)

    def copy(self, deep=False):
        """
        Create an exact copy of the object instance.

        Parameters
        ----------
        deep : bool, default False
            Whether the created copy should be a deep copy.
        """
        return copy.deepcopy(self) if deep else copy.copy(self)


class LRSMultiLine(object):
    """
    Ordered sequence of LRS lines. Only lines with at least two points are
    accepted as members.

    Parameters
    ----------
    srid : int, optional
        The spatial reference identifier of the multi line.
    lines : list of LRSLine, optional
        The member lines.
    """

    def __init__(self, srid=None, lines=None):
        self.srid = common.get_srid(srid)
        self.lines = []
        self.add_lines(lines or [])

    def __len__(self):
        return len(self.lines)

    def __iter__(self):
        return iter(self.lines)

    def __getitem__(self, index):
        return self.lines[index]

    def __repr__(self):
        return f'<LRSMultiLine {len(self)} lines, length={self.length}>'

    @classmethod
    def from_geometry(cls, geom):
        """
        Create a multi line from a LineString or MultiLineString geometry.
        """
        return cls(geom.srid, [LRSLine.from_geometry(g) for g in geom.lines])

    def add_line(self, line):
        """
        Append a line, ignoring lines with fewer than two points.
        """
        if line.is_line:
            self.lines.append(line)

    def add_lines(self, lines):
        for line in lines:
            self.add_line(line)

    @property
    def is_empty(self):
        return len(self.lines) == 0

    @property
    def is_multi(self):
        return len(self.lines) > 1

    @property
    def length(self):
        return sum(line.length for line in self.lines)

    @property
    def first_line(self):
        return self.lines[0] if self.lines else None

    @property
    def last_line(self):
        return self.lines[-1] if self.lines else None

    @property
    def start_point(self):
        return self.first_line.start_point if self.lines else None

    @property
    def end_point(self):
        return self.last_line.end_point if self.lines else None

    @property
    def start_m(self):
        return self.first_line.start_m if self.lines else 0.0

    @property
    def end_m(self):
        return self.last_line.end_m if self.lines else 0.0

    def remove_first(self):
        return self.lines.pop(0)

    def remove_last(self):
        return self.lines.pop(-1)

    def scale_measure(self, factor):
        for line in self.lines:
            line.scale_measure(factor)

    def translate_measure(self, offset):
        for line in self.lines:
            line.translate_measure(offset)

    def reverse_lines(self):
        """
        Reverse the order of the member lines in place.
        """
        self.lines.reverse()

    def reverse_lines_and_points(self):
        """
        Reverse the order of the member lines and of the points within each
        line in place.
        """
        self.lines.reverse()
        for line in self.lines:
            line.reverse()

    def remove_collinear_points(self):
        for line in self.lines:
            line.remove_collinear_points()

    def to_geometry(self):
        """
        Convert the multi line to a MultiLineString geometry, or a LineString
        geometry if it holds a single line.
        """
        if len(self.lines) == 1:
            return self.lines[0].to_geometry()
        parts = [[p.coords for p in line] for line in self.lines]
        return Geometry('MultiLineString', parts, self.srid)

    def copy(self, deep=False):
        """
        Create an exact copy of the object instance.

        Parameters
        ----------
        deep : bool, default False
            Whether the created copy should be a deep copy.
        """
        return copy.deepcopy(self) if deep else copy.copy(self)


#
# Helper functions
#

def _same_slope(a, b):
    if math.isinf(a) or math.isinf(b):
        return math.isinf(a) and math.isinf(b)
    return math.isclose(a, b, rel_tol=1e-9, abs_tol=common.measure_epsilon)

def _same_bearing(bearing, prev_bearing):
    return math.isclose(
        parallel.get_deflection(bearing, prev_bearing), 0, abs_tol=1e-9)
