"""
===============================================================================

Module featuring the linear referencing functions of the lrsmeasure package.
Each function accepts Geometry objects or well-known text, validates the
shape kinds, SRIDs and dimensions of its inputs and runs a pipeline of sink
stages ending in a GeometryBuilder to produce its result.

Geometries carrying Z values but no measures (e.g., 'LINESTRING (0 0 0, 10 0
10)') are interpreted as measured geometries, with the Z value of each vertex
read as its measure. Two dimensional geometries are rejected by operations
which depend on measures.


Classes
-------
None


Dependencies
------------
None


Examples
--------
Clip a measured line string to a range of measures.
>>> clip('LINESTRING (10 1 NULL 10, 25 1 NULL 25)', 10, 15).wkt
'LINESTRING (10 1 NULL 10, 15 1 NULL 15)'

Merge two line strings into a single line with continuous measures.
>>> merge('LINESTRING (10 1 NULL 10, 25 1 NULL 25)',
...       'LINESTRING (30 1 NULL 30, 40 1 NULL 40)').wkt
'LINESTRING (10 1 NULL 10, 25 1 NULL 25, 40 1 NULL 35)'


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
from lrsmeasure.common import (
    LRSErrorCode, LinearMeasureProgress, MergePosition, MergeInputType,
    DimensionalInfo, LRSTypeError, SRIDMismatchError, MeasureRangeError,
    DimensionError, LRSError)
from lrsmeasure.geometry import Geometry, GeometryBuilder, as_geometry
from lrsmeasure.sinks.transform import (
    ScaleMeasureSink, TranslateMeasureSink, ResetMeasureSink, LRSTypeCheckSink)
from lrsmeasure.sinks.buffered import (
    ReverseSink, ReverseAndTranslateSink, PopulateMeasuresSink,
    BuildLRSMultiLineSink, BuildMultiLineFromLinesSink, LineStringMergeSink)
from lrsmeasure.sinks.analysis import ValidateLinearMeasureSink, SplitSink
from lrsmeasure.sinks.clip import clip_linear, locate_point
from lrsmeasure.sinks.offset import OffsetSink
from lrsmeasure.base.segments import LRSMultiLine


#
# Measure algebra
#

def clip(geom, start_m, end_m, tolerance=None):
    """
    Clip a linear geometry to a range of measures.

    Vertices with measures within the range are kept and vertices are
    synthesized where the range bounds fall between two vertices. Bounds
    beyond the measure extent of the geometry are clamped to it. Ranges
    spanning less than the tolerance are still clipped; the tolerance only
    decides whether a synthesized vertex is replaced by an existing one.

    Parameters
    ----------
    geom : Geometry or str
        The Point, LineString or MultiLineString to clip.
    start_m, end_m : float
        The bounds of the measure range, in either order.
    tolerance : float, optional
        The distance within which synthesized vertices are replaced by
        existing vertices. If not provided, common.default_tolerance will be
        used.

    Returns
    -------
    Geometry or None
        The clipped geometry, a Point when the range collapses to a single
        measure, or None when the range does not overlap the geometry.
    """
    geom = _normalize(as_geometry(geom))
    _check_lrs_type(geom)
    tolerance = common.get_tolerance(tolerance)

    # Address point geometries
    if geom.is_point:
        m = geom.m
        if start_m == end_m:
            if m == start_m:
                return geom
            raise MeasureRangeError(
                common.msg_measure_not_in_range.format(start_m, m, m))
        return geom if common.is_within_range(m, start_m, end_m) else None

    _check_lrs_segment(geom)
    return clip_linear(geom, start_m, end_m, tolerance=tolerance)

def split(geom, m):
    """
    Split a linear geometry at a measure.

    Parameters
    ----------
    geom : Geometry or str
        The Point, LineString or MultiLineString to split.
    m : float
        The measure at which to split the geometry. Must lie within the
        measure extent of the geometry.

    Returns
    -------
    tuple
        The portions of the geometry before and after the measure, in
        traversal order. Either portion is None when the measure falls on the
        corresponding end of the geometry. Both portions are None when
        splitting a point at its own measure.
    """
    geom = _normalize(as_geometry(geom))
    _check_lrs_type(geom)
    if geom.is_point:
        if geom.m != m:
            raise MeasureRangeError(
                common.msg_measure_not_in_range.format(m, geom.m, geom.m))
        return None, None

    _check_lrs_segment(geom)
    _check_measure_in_range(geom, m)
    before, after = GeometryBuilder(), GeometryBuilder()
    geom.populate(SplitSink(before, after, m))
    return (
        before.geometry if before.is_constructed else None,
        after.geometry if after.is_constructed else None,
    )

def merge(geom1, geom2, tolerance=None):
    """
    Merge two linear geometries into one geometry with continuous measures.

    The measures of the second geometry are negated when its measures
    progress in the opposite direction of the first geometry's measures, and
    shifted so that they continue from the first geometry at the connection.
    When the geometries are connected, the second geometry is reoriented as
    needed to follow the first geometry from the connected endpoints.

    Two line strings always merge into a single line string; the first vertex
    of the trailing line, which coincides in measure with the last vertex of
    the leading line, is dropped. Disconnected merges involving a multi line
    string produce a multi line string.

    Parameters
    ----------
    geom1, geom2 : Geometry or str
        The geometries to merge. If either is a Point, the other geometry is
        returned.
    tolerance : float, optional
        The distance within which endpoints are considered connected. If not
        provided, common.default_tolerance will be used.
    """
    geom1 = _normalize(as_geometry(geom1))
    geom2 = _normalize(as_geometry(geom2))
    _check_lrs_type(geom1, geom2)
    _check_srid(geom1, geom2)
    tolerance = common.get_tolerance(tolerance)

    # Address point geometries
    if geom1.is_point:
        return geom2
    if geom2.is_point:
        return geom1

    position = _get_merge_position(geom1, geom2, tolerance)
    if _get_merge_input_type(geom1, geom2) is MergeInputType.LS_LS:
        return _merge_lines(geom1, geom2, position)[0]
    elif position is MergePosition.NONE:
        return _merge_disconnected(geom1, geom2)
    return _merge_connected_multi(geom1, geom2, position)

def populate_measures(geom, start_m=None, end_m=None):
    """
    Assign measures to every vertex of a geometry by linear interpolation
    over its planar length.

    Parameters
    ----------
    geom : Geometry or str
        The Point, LineString or MultiLineString to measure. Existing
        measures are replaced.
    start_m : float, optional
        The measure of the first vertex. Defaults to 0.
    end_m : float, optional
        The measure of the last vertex. Defaults to the planar length of the
        geometry.
    """
    geom = _normalize(as_geometry(geom), require_measure=False)
    _check_lrs_type(geom)
    start_m = 0.0 if start_m is None else start_m
    end_m = geom.length if end_m is None else end_m
    return _run(geom, lambda target: PopulateMeasuresSink(target, start_m, end_m))

def reset_measure(geom):
    """
    Remove the measures of every vertex of a line string.
    """
    geom = _normalize(as_geometry(geom), require_measure=False)
    _check_line(geom)
    return _run(geom, ResetMeasureSink)

def scale_measure(geom, factor):
    """
    Multiply the measures of every vertex of a geometry by a factor.
    """
    geom = _normalize(as_geometry(geom))
    return _run(geom, lambda target: LRSTypeCheckSink(ScaleMeasureSink(target, factor)))

def translate_measure(geom, offset):
    """
    Add an offset to the measures of every vertex of a geometry. Vertices
    without a measure receive the offset as their measure.
    """
    geom = _normalize(as_geometry(geom), require_measure=False)
    return _run(geom, lambda target: LRSTypeCheckSink(TranslateMeasureSink(target, offset)))

def reverse_linear_geometry(geom):
    """
    Reverse the order of the vertices of a linear geometry and the order of
    its member lines. Points are returned unchanged.
    """
    geom = _normalize(as_geometry(geom))
    _check_lrs_type(geom)
    if geom.is_point:
        return geom
    return _run(geom, ReverseSink)

def reverse_and_translate(geom, offset):
    """
    Reverse a linear geometry, then add an offset to the measures of every
    vertex.
    """
    geom = _normalize(as_geometry(geom))
    _check_lrs_type(geom)
    return _run(geom, lambda target: ReverseAndTranslateSink(target, offset))

def get_start_measure(geom):
    """
    Return the measure of the first vertex of a geometry, defaulting to 0.
    """
    geom = _normalize(as_geometry(geom))
    _check_lrs_type(geom)
    return geom.start_measure

def get_end_measure(geom):
    """
    Return the measure of the last vertex of a geometry, defaulting to its
    planar length.
    """
    geom = _normalize(as_geometry(geom))
    _check_lrs_type(geom)
    return geom.end_measure

def validate(geom):
    """
    Validate the measures of an LRS geometry.

    Parameters
    ----------
    geom : Geometry or str
        The Point, LineString or MultiLineString to validate.

    Returns
    -------
    LRSErrorCode
        VALID when measures progress monotonically over every vertex,
        MEASURE_NOT_DEFINED when any vertex lacks a measure, including two
        dimensional input,
        MEASURE_NOT_LINEAR when measures change direction and INVALID for
        empty or planar invalid geometries.
    """
    geom = as_geometry(geom)
    _check_lrs_type(geom)
    if geom.dimension is DimensionalInfo.NONE:
        return LRSErrorCode.INVALID
    geom = _normalize(geom, require_measure=False)
    if not geom.is_valid:
        return LRSErrorCode.INVALID
    if not geom.has_measure_values:
        return LRSErrorCode.MEASURE_NOT_DEFINED
    sink = ValidateLinearMeasureSink()
    geom.populate(sink)
    return LRSErrorCode.VALID if sink.is_linear else LRSErrorCode.MEASURE_NOT_LINEAR


#
# Location and connectivity
#

def locate_at_measure(geom, m):
    """
    Return the point at a measure along a geometry.

    Parameters
    ----------
    geom : Geometry or str
        The Point, LineString or MultiLineString along which to locate.
    m : float
        The measure to locate. Unlike clip, measures beyond the measure
        extent of the geometry are not clamped.

    Returns
    -------
    Geometry
        The located Point. Interpolated points carry no Z value.
    """
    geom = _normalize(as_geometry(geom))
    _check_lrs_type(geom)
    _check_measure_in_range(geom, m)
    if geom.is_point:
        return geom
    res = locate_point(geom, m)
    # Address measures falling in a gap between member lines
    if res is None:
        raise MeasureRangeError(
            f'Measure {m} does not fall on any member line of the geometry.')
    return res

def interpolate_between_measure(start_point, end_point, m):
    """
    Return the point at a measure between two measured points, by linear
    interpolation over the measure fraction. The resulting point carries no
    Z value.
    """
    start_point = _normalize(as_geometry(start_point))
    end_point = _normalize(as_geometry(end_point))
    _check_point(start_point, end_point)
    _check_srid(start_point, end_point)
    if not common.is_within_range(m, start_point.m, end_point.m):
        raise MeasureRangeError(
            common.msg_measure_not_in_range.format(m, start_point.m, end_point.m))
    x, y = common.interpolate_by_measure(
        start_point.x, start_point.y, start_point.m,
        end_point.x, end_point.y, end_point.m, m)
    return Geometry.point(x, y, None, m, srid=start_point.srid)

def is_valid_point(geom):
    """
    Test whether a geometry is a non-empty, valid Point carrying a measure,
    either explicitly or as the third ordinate of a three dimensional point.
    """
    geom = as_geometry(geom)
    if not geom.is_point or geom.is_empty or not geom.is_valid:
        return False
    if geom.m is not None:
        return True
    return geom.dimension is DimensionalInfo.XYZ

def get_merge_position(geom1, geom2, tolerance=None):
    """
    Return the position at which two geometries connect, as a MergePosition.
    Endpoints connect when they coincide, or when they lie within the
    tolerance of each other on both the x and y axes.
    """
    geom1 = _normalize(as_geometry(geom1), require_measure=False)
    geom2 = _normalize(as_geometry(geom2), require_measure=False)
    _check_lrs_type(geom1, geom2)
    _check_srid(geom1, geom2)
    return _get_merge_position(geom1, geom2, common.get_tolerance(tolerance))

def is_connected(geom1, geom2, tolerance=None):
    """
    Test whether two geometries are spatially connected at any pair of their
    endpoints.

    Parameters
    ----------
    geom1, geom2 : Geometry or str
        The geometries to test. Measures are not required.
    tolerance : float, optional
        The distance on each of the x and y axes within which two endpoints
        are considered connected. If not provided, common.default_tolerance
        will be used.
    """
    return get_merge_position(geom1, geom2, tolerance) is not MergePosition.NONE


#
# Offset
#

def offset(geom, start_m, end_m, offset, tolerance=None):
    """
    Return the portion of a linear geometry within a range of measures,
    displaced laterally by a signed offset.

    Parameters
    ----------
    geom : Geometry or str
        The LineString or MultiLineString to offset.
    start_m, end_m : float
        The bounds of the measure range, in either order.
    offset : float
        The lateral offset; positive values are placed to the left of the
        direction of travel.
    tolerance : float, optional
        The distance within which clip vertices are replaced by existing
        vertices. If not provided, common.default_tolerance will be used.

    Returns
    -------
    Geometry or None
        The offset geometry, a Point when the range collapses to a single
        measure, or None when the range does not overlap the geometry.
    """
    geom = as_geometry(geom)
    if geom.is_point:
        raise LRSError(LRSErrorCode.INVALID)
    _check_linear(geom)
    geom = _normalize(geom)
    tolerance = common.get_tolerance(tolerance)
    _check_lrs_segment(geom)

    clipped = clip_linear(
        geom, start_m, end_m, tolerance=tolerance, retain_clip_measure=True)
    if clipped is None:
        return None
    progress = geom.measure_progress
    factory = lambda target: OffsetSink(target, offset, progress, tolerance)

    # Address clipped points using the bearings of the whole geometry
    if clipped.is_point:
        return locate_point(_run(geom, factory), clipped.m)

    multi_line = LRSMultiLine.from_geometry(clipped)
    if clipped.num_points > 2:
        multi_line.remove_collinear_points()
    return _run(multi_line.to_geometry(), factory)


#
# Helper functions
#

def _normalize(geom, require_measure=True):
    """
    Return the geometry with Z values read as measures when the geometry is
    three dimensional without measures. Two dimensional geometries raise a
    DimensionError when measures are required.
    """
    dimension = geom.dimension
    if dimension is DimensionalInfo.XYZ:
        return geom.to_xym()
    elif dimension is DimensionalInfo.XY and require_measure:
        raise DimensionError(
            f'{common.msg_dimensions}; got {dimension.description} coordinates.')
    return geom

def _run(geom, factory):
    # Populate the geometry through a pipeline ending in a builder
    builder = GeometryBuilder()
    geom.populate(factory(builder))
    return builder.geometry

def _check_lrs_type(*geoms):
    for geom in geoms:
        if not geom.is_lrs_type:
            raise LRSTypeError(common.msg_lrs_types)

def _check_linear(*geoms):
    for geom in geoms:
        if not geom.is_linear:
            raise LRSTypeError(common.msg_linear_types)

def _check_line(*geoms):
    for geom in geoms:
        if not geom.is_linestring:
            raise LRSTypeError(common.msg_linestring)

def _check_point(*geoms):
    for geom in geoms:
        if not geom.is_point:
            raise LRSTypeError(common.msg_point)

def _check_srid(geom1, geom2):
    if geom1.srid != geom2.srid:
        raise SRIDMismatchError()

def _check_measure_in_range(geom, m):
    start, end = geom.start_measure, geom.end_measure
    if not common.is_within_range(m, start, end):
        raise MeasureRangeError(
            common.msg_measure_not_in_range.format(m, start, end))

def _check_lrs_segment(geom):
    code = validate(geom)
    if code is not LRSErrorCode.VALID:
        raise LRSError(code)

def _get_merge_input_type(geom1, geom2):
    if geom1.is_linestring:
        return MergeInputType.LS_LS if geom2.is_linestring else MergeInputType.LS_MLS
    return MergeInputType.MLS_LS if geom2.is_linestring else MergeInputType.MLS_MLS

def _is_connected_point(point1, point2, tolerance):
    return (point1.x == point2.x and point1.y == point2.y) or \
        common.is_within_tolerance(point1.x, point1.y, point2.x, point2.y, tolerance)

def _get_merge_position(geom1, geom2, tolerance):
    start1, end1 = geom1.start_point, geom1.end_point
    start2, end2 = geom2.start_point, geom2.end_point
    if start1 is None or start2 is None:
        return MergePosition.NONE
    start_start = _is_connected_point(start1, start2, tolerance)
    start_end = _is_connected_point(start1, end2, tolerance)
    end_start = _is_connected_point(end1, start2, tolerance)
    end_end = _is_connected_point(end1, end2, tolerance)

    # Later matches take precedence
    position = MergePosition.NONE
    if start_start:
        position = MergePosition.START_START
    if start_end:
        position = MergePosition.START_END
    if end_start:
        position = MergePosition.END_START
    if end_end:
        position = MergePosition.END_END
    if start_start and end_end:
        position = MergePosition.BOTH_ENDS
    if start_end and end_start:
        position = MergePosition.CROSS_ENDS
    return position

def _merge_lines(geom1, geom2, position):
    """
    Merge two line strings into a single line string, returning the merged
    geometry and the measure offset applied to the second line.
    """
    same_direction = geom1.same_direction(geom2)
    if position in (MergePosition.END_END, MergePosition.BOTH_ENDS,
                    MergePosition.START_START):
        # Second line is traversed from its end
        if same_direction:
            geom2 = _run(geom2, lambda target: ScaleMeasureSink(target, -1))
        if position is MergePosition.START_START:
            offset_m = geom1.start_measure - geom2.start_measure
        else:
            offset_m = geom1.end_measure - geom2.end_measure
        geom2 = _run(geom2, lambda target: ReverseAndTranslateSink(target, offset_m))
    else:
        if not same_direction:
            geom2 = _run(geom2, lambda target: ScaleMeasureSink(target, -1))
        if position is MergePosition.START_END:
            offset_m = geom1.start_measure - geom2.end_measure
        else:
            offset_m = geom1.end_measure - geom2.start_measure
        geom2 = _run(geom2, lambda target: TranslateMeasureSink(target, offset_m))

    # Second line leads when connected at the start of the first line
    if position in (MergePosition.START_START, MergePosition.START_END):
        leading, trailing = geom2, geom1
    else:
        leading, trailing = geom1, geom2
    builder = GeometryBuilder()
    leading.populate(LineStringMergeSink(builder, True))
    trailing.populate(LineStringMergeSink(builder, False))
    return builder.geometry, offset_m

def _build_multi_line(geom):
    sink = BuildLRSMultiLineSink()
    geom.populate(sink)
    return sink.multi_line

def _merge_connected_multi(geom1, geom2, position):
    """
    Merge two connected linear geometries, at least one of which is a multi
    line string, by merging their connected member lines.
    """
    multi_line1 = _build_multi_line(geom1)
    multi_line2 = _build_multi_line(geom2)
    reverse = position in (MergePosition.END_END, MergePosition.BOTH_ENDS,
                           MergePosition.START_START)
    at_end = position in (MergePosition.END_END, MergePosition.BOTH_ENDS,
                          MergePosition.END_START, MergePosition.CROSS_ENDS)
    from_start = position in (MergePosition.END_START, MergePosition.CROSS_ENDS,
                              MergePosition.START_START)

    # Negate measures of the second geometry to follow the first geometry
    same_direction = geom1.same_direction(geom2)
    if same_direction == reverse:
        multi_line2.scale_measure(-1)

    line1 = multi_line1.remove_last() if at_end else multi_line1.remove_first()
    line2 = multi_line2.remove_first() if from_start else multi_line2.remove_last()
    merged, offset_m = _merge_lines(line1.to_geometry(), line2.to_geometry(), position)

    if reverse:
        multi_line2.reverse_lines_and_points()
    multi_line2.translate_measure(offset_m)
    merged_lines = LRSMultiLine.from_geometry(merged).lines
    if at_end:
        lines = multi_line1.lines + merged_lines + multi_line2.lines
    else:
        lines = multi_line2.lines + merged_lines + multi_line1.lines
    return LRSMultiLine(geom1.srid, lines).to_geometry()

def _merge_disconnected(geom1, geom2):
    """
    Combine two disconnected linear geometries into a multi line string,
    shifting the measures of the second geometry to continue those of the
    first geometry.
    """
    same_direction = geom1.same_direction(geom2)
    progress = geom1.measure_progress
    if not same_direction:
        geom2 = _run(geom2, lambda target: ScaleMeasureSink(target, -1))
    offset_m = geom1.end_measure - geom2.start_measure
    if not same_direction or \
            (progress is LinearMeasureProgress.INCREASING and offset_m > 0) or \
            (progress is LinearMeasureProgress.DECREASING and offset_m < 0):
        geom2 = _run(geom2, lambda target: TranslateMeasureSink(target, offset_m))

    lines = geom1.lines + geom2.lines
    builder = GeometryBuilder()
    sink = BuildMultiLineFromLinesSink(builder, len(lines))
    for line in lines:
        line.populate(sink)
    return builder.geometry
