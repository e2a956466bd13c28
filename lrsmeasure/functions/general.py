"""
===============================================================================

Module featuring general planar geometry functions which locate positions by
planar distance rather than by measure, shift and reverse geometries and
construct measured geometries from three dimensional well-known text.


Classes
-------
None


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
from lrsmeasure.common import LRSTypeError, SRIDMismatchError, MeasureRangeError
from lrsmeasure.geometry import Geometry, GeometryBuilder, as_geometry
from lrsmeasure.sinks.transform import ShiftSink, ConvertXYZToXYMSink
from lrsmeasure.sinks.buffered import ReverseSink
from lrsmeasure.sinks.analysis import LocateAlongSink


def interpolate_between(start, end, distance):
    """
    Return the point at a planar distance from a start point in the direction
    of an end point.

    Parameters
    ----------
    start, end : Geometry or str
        The Point geometries to interpolate between. Must share an SRID.
    distance : float
        The distance to travel from the start point. Must be positive and
        no greater than the distance between the two points.

    Returns
    -------
    Geometry
        The two dimensional Point at the distance.
    """
    start, end = as_geometry(start), as_geometry(end)
    if not start.is_point or not end.is_point:
        raise LRSTypeError(common.msg_point)
    if start.srid != end.srid:
        raise SRIDMismatchError()
    length = start.distance(end)
    if distance > length:
        raise MeasureRangeError(common.msg_distance_exceeds)
    elif distance < 0:
        raise MeasureRangeError(common.msg_distance_positive)
    x, y = common.interpolate_by_distance(start.x, start.y, end.x, end.y, distance)
    return Geometry.point(x, y, srid=start.srid)

def locate_along(geom, distance):
    """
    Return the two dimensional point at a planar distance along a line
    string, travelling from its first vertex.
    """
    geom = as_geometry(geom)
    if not geom.is_linestring:
        raise LRSTypeError(common.msg_linestring_only)
    builder = GeometryBuilder()
    geom.populate(LocateAlongSink(builder, distance))
    return builder.geometry

def shift_geometry(geom, x_shift, y_shift):
    """
    Shift the x and y ordinates of every vertex of a geometry.

    Parameters
    ----------
    geom : Geometry or str
        The geometry to shift. Any geometry kind is accepted.
    x_shift, y_shift : float
        The amounts by which to shift x and y ordinates.
    """
    geom = as_geometry(geom)
    builder = GeometryBuilder()
    geom.populate(ShiftSink(builder, x_shift, y_shift))
    return builder.geometry

def reverse_linestring(geom):
    """
    Reverse the order of the vertices of a line string.
    """
    geom = as_geometry(geom)
    if not geom.is_linestring:
        raise LRSTypeError(common.msg_linestring_only)
    builder = GeometryBuilder()
    geom.populate(ReverseSink(builder))
    return builder.geometry

def geom_from_xym_text(text, srid=None):
    """
    Create a measured geometry from three dimensional well-known text, where
    the third ordinate of each vertex is its measure.

    Parameters
    ----------
    text : str
        The well-known text to parse, e.g., 'LINESTRING (0 0 0, 10 0 10)'.
    srid : int, optional
        The spatial reference identifier of the geometry. If not provided,
        common.default_srid will be used.
    """
    geom = Geometry.from_wkt(text, srid=srid)
    builder = GeometryBuilder()
    geom.populate(ConvertXYZToXYMSink(builder))
    return builder.geometry
