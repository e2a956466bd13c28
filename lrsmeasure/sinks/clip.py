"""
===============================================================================

Module featuring the sink stages and routines used to clip linear geometries
to a range of measures. ClipMeasureSink clips a single LineString, where the
range has already been reconciled with the measures of the line, while
ClipMultiLineSink clips each member of a MultiLineString overlapping the
range. The clip_linear routine wraps both stages with the reconciliation of
the requested range against the measure extent of the geometry.


Classes
-------
ClipMeasureSink, ClipMultiLineSink


Dependencies
------------
warnings


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

import warnings
from lrsmeasure import common
from lrsmeasure.common import LRSTypeError, LinearMeasureProgress
from lrsmeasure.geometry import GeometryBuilder
from lrsmeasure.sinks.base import CollectingSink, emit_lines
from lrsmeasure.sinks.analysis import LocateMeasureSink
from lrsmeasure.base.segments import LRSPoint, LRSLine


class ClipMeasureSink(CollectingSink):
    """
    Clip a LineString to a range of measures. Vertices with measures within
    the range are kept; where a range bound falls between two vertices, a
    vertex is synthesized at the bound by interpolating over the measure
    fraction of the segment. A synthesized vertex within the tolerance of an
    existing vertex is replaced by that vertex. When the range collapses to
    a single measure, the result is a Point. Nothing is emitted when the line
    does not overlap the range.

    Parameters
    ----------
    target : GeometrySink
        The downstream stage.
    start_m, end_m : float
        The bounds of the measure range, in either order.
    tolerance : float, default 0.0
        The distance within which a synthesized vertex is replaced by an
        existing vertex.
    retain_clip_measure : bool, default False
        Whether vertices substituted for a synthesized vertex take the
        measure of the range bound instead of their own.
    """

    def __init__(self, target, start_m, end_m, tolerance=0.0,
                 retain_clip_measure=False):
        super().__init__()
        self.target = target
        self.start_m = min(start_m, end_m)
        self.end_m = max(start_m, end_m)
        self.tolerance = tolerance
        self.retain_clip_measure = retain_clip_measure

    @property
    def is_point(self):
        return self.start_m == self.end_m

    def begin_shape(self, kind, context=None):
        if kind != 'LineString':
            raise LRSTypeError(common.msg_linestring)
        super().begin_shape(kind, context)

    def flush(self):
        for line in self.parts:
            res = self.clip(line)
            if res.is_empty:
                continue
            kind = 'Point' if (res.is_point or self.is_point) else 'LineString'
            emit_lines(self.target, self.srid, kind, [res])

    def _within(self, m):
        return self.start_m <= m <= self.end_m

    def _snap(self, x, y, m, vertex):
        # Replace a synthesized vertex by an existing vertex
        res = LRSPoint.from_coords(vertex.x, vertex.y, vertex.z, vertex.m, self.srid)
        if self.retain_clip_measure:
            res.m = m
        return res

    def clip(self, line):
        """
        Clip an LRSLine to the measure range, returning the clipped LRSLine.
        """
        points = line.points
        res = LRSLine(srid=self.srid)
        if len(points) == 0:
            return res
        decreasing = line.measure_progress is LinearMeasureProgress.DECREASING
        entry_m = self.end_m if decreasing else self.start_m
        exit_m = self.start_m if decreasing else self.end_m
        tolerance = self.tolerance

        # Find the entry vertex
        index = None
        if self._within(points[0].m):
            res.add_point(points[0].copy())
            index = 1
        else:
            for i in range(1, len(points)):
                prev, point = points[i - 1], points[i]
                if prev.m == point.m or \
                        not common.is_within_range(entry_m, prev.m, point.m):
                    continue
                x, y = common.interpolate_by_measure(
                    prev.x, prev.y, prev.m, point.x, point.y, point.m, entry_m)
                if common.is_within_tolerance(x, y, prev.x, prev.y, tolerance):
                    res.add_point(self._snap(x, y, entry_m, prev))
                    index = i
                elif common.is_within_tolerance(x, y, point.x, point.y, tolerance):
                    res.add_point(self._snap(x, y, entry_m, point))
                    index = i + 1
                else:
                    res.add_point(LRSPoint(x, y, None, entry_m, self.srid))
                    index = i
                break
        if index is None or self.is_point:
            return res

        # Copy vertices up to the exit vertex
        for i in range(index, len(points)):
            point = points[i]
            if self._within(point.m):
                res.add_point(point.copy())
                if point.m == exit_m:
                    break
                continue
            prev = points[i - 1]
            x, y = common.interpolate_by_measure(
                prev.x, prev.y, prev.m, point.x, point.y, point.m, exit_m)
            if common.is_within_tolerance(x, y, prev.x, prev.y, tolerance):
                if self.retain_clip_measure and len(res) > 1:
                    res.end_point.m = exit_m
            elif common.is_within_tolerance(x, y, point.x, point.y, tolerance):
                res.add_point(self._snap(x, y, exit_m, point))
            else:
                res.add_point(LRSPoint(x, y, None, exit_m, self.srid))
            break
        return res


class ClipMultiLineSink(CollectingSink):
    """
    Clip each member of a MultiLineString to a range of measures. Members
    lying completely within the range are kept whole, members partially
    overlapping the range are clipped to the intersection of the range with
    their own measure extent, and other members are dropped. The surviving
    members are emitted as a MultiLineString, or as a single LineString when
    only one survives. Members reduced to a single point are dropped when
    any member line survives.

    Parameters
    ----------
    target : GeometrySink
        The downstream stage.
    start_m, end_m : float
        The bounds of the measure range, in either order.
    tolerance : float, default 0.0
        The distance within which synthesized vertices are replaced by
        existing vertices.
    retain_clip_measure : bool, default False
        Whether vertices substituted for a synthesized vertex take the
        measure of the range bound instead of their own.
    clip_start_point, clip_end_point : LRSPoint, optional
        The points located at the range bounds, counted toward the range
        membership of each member.
    """

    def __init__(self, target, start_m, end_m, tolerance=0.0,
                 retain_clip_measure=False, clip_start_point=None,
                 clip_end_point=None):
        super().__init__()
        self.target = target
        self.start_m = min(start_m, end_m)
        self.end_m = max(start_m, end_m)
        self.tolerance = tolerance
        self.retain_clip_measure = retain_clip_measure
        self.clip_start_point = clip_start_point
        self.clip_end_point = clip_end_point

    def begin_shape(self, kind, context=None):
        if not kind in common.shape_kinds_linear:
            raise LRSTypeError(common.msg_linear_types)
        super().begin_shape(kind, context)

    def flush(self):
        lines, points = [], []
        for line in self.parts:
            line.is_within_range(
                self.start_m, self.end_m, self.clip_start_point, self.clip_end_point)
            if not line.is_in_range:
                continue
            if line.is_completely_in_range:
                lines.append(line)
                continue
            geom = clip_linear(
                line.to_geometry(),
                max(self.start_m, line.min_m),
                min(self.end_m, line.max_m),
                tolerance=self.tolerance,
                retain_clip_measure=self.retain_clip_measure,
            )
            if geom is None:
                continue
            elif geom.is_point:
                points.append(LRSLine.from_geometry(geom))
            else:
                lines.append(LRSLine.from_geometry(geom))

        # Emit surviving members
        if len(lines) == 0:
            if len(points) > 0:
                emit_lines(self.target, self.srid, 'Point', points[:1])
            return
        if len(points) > 0:
            warnings.warn(
                f'Clipping to measures {self.start_m} : {self.end_m} reduced '
                f'{len(points)} member line(s) to a point; these members were '
                'dropped', RuntimeWarning)
        kind = 'LineString' if len(lines) == 1 else 'MultiLineString'
        emit_lines(self.target, self.srid, kind, lines)


#
# Routines
#

def locate_point(geom, measure, tolerance=0.0):
    """
    Return the Point geometry at a measure along a geometry, or None when no
    segment of the geometry encloses the measure.
    """
    builder = GeometryBuilder()
    geom.populate(LocateMeasureSink(builder, measure, tolerance))
    return builder.geometry if builder.is_constructed else None

def clip_linear(geom, start_m, end_m, tolerance=0.0, retain_clip_measure=False):
    """
    Clip a measured LineString or MultiLineString geometry to a range of
    measures.

    The requested range is first reconciled with the measure extent of the
    geometry: a bound beyond the extent is clamped to it, while a bound
    falling short of the extent yields no result. A range covering the whole
    extent returns the geometry unchanged, and a range collapsing onto one end
    of the geometry returns the point at that end.

    Parameters
    ----------
    geom : Geometry
        The LineString or MultiLineString to clip, carrying measures on every
        vertex.
    start_m, end_m : float
        The bounds of the measure range, in either order.
    tolerance : float, default 0.0
        The distance within which synthesized vertices are replaced by
        existing vertices.
    retain_clip_measure : bool, default False
        Whether vertices substituted for a synthesized vertex take the
        measure of the range bound instead of their own.

    Returns
    -------
    Geometry or None
        The clipped LineString or MultiLineString, a Point, or None when the
        range does not overlap the geometry.
    """
    if start_m > end_m:
        start_m, end_m = end_m, start_m
    if geom.measure_progress is LinearMeasureProgress.DECREASING:
        geom_start, geom_end = geom.end_measure, geom.start_measure
    else:
        geom_start, geom_end = geom.start_measure, geom.end_measure
    if start_m == geom_start and end_m == geom_end:
        return geom

    # Clamp bounds extending beyond the geometry
    start_beyond = start_m < geom_start
    end_beyond = end_m > geom_end
    if not common.is_within_range(start_m, geom_start, geom_end):
        if start_beyond or _is_extreme(start_m, geom_start, geom_end):
            start_m = geom_start
        else:
            return None
    if not common.is_within_range(end_m, geom_start, geom_end):
        if end_beyond or _is_extreme(end_m, geom_start, geom_end):
            end_m = geom_end
        else:
            return None
    if start_m == geom_start and end_m == geom_end:
        return geom

    # Address ranges collapsing onto one end of the geometry
    if start_m == end_m and (start_beyond or end_beyond):
        return locate_point(geom, geom_start if start_beyond else geom_end)

    # Locate the range bounds for the membership test of multi-line members
    start_point = end_point = None
    if start_m != end_m and geom.is_multilinestring:
        start_point = locate_point(geom, start_m, tolerance)
        end_point = locate_point(geom, end_m, tolerance)

    # Clip the geometry
    builder = GeometryBuilder()
    if geom.is_multilinestring:
        sink = ClipMultiLineSink(
            builder, start_m, end_m, tolerance, retain_clip_measure,
            clip_start_point=_as_lrs_point(start_point),
            clip_end_point=_as_lrs_point(end_point),
        )
    else:
        sink = ClipMeasureSink(
            builder, start_m, end_m, tolerance, retain_clip_measure)
    geom.populate(sink)
    return builder.geometry if builder.is_constructed else None


#
# Helper functions
#

def _is_extreme(m, geom_start, geom_end):
    return common.is_close(m, geom_start) or common.is_close(m, geom_end)

def _as_lrs_point(geom):
    return None if geom is None else LRSPoint.from_geometry(geom)
