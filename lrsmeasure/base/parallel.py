"""
===============================================================================

Module featuring the trigonometry used to compute lines parallel to a linear
geometry at a signed lateral offset. Each vertex carries an offset bearing
toward the next vertex, an offset angle bisecting the turn at the vertex and
an offset distance scaling the lateral offset to account for that turn. The
parallel vertex is found by travelling the offset distance from the vertex
along the offset angle.

Bearings and angles are expressed in compass degrees, measured clockwise
from north. Positive offsets are placed to the left of the direction of
travel.


Classes
-------
None


Dependencies
------------
math, warnings


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

import math
import warnings
from lrsmeasure import common
from lrsmeasure.common import LinearMeasureProgress


def get_offset_bearing(point, next_point):
    """
    Return the compass bearing from a point toward the next point, in degrees
    within [0, 360).
    """
    dx = next_point.x - point.x
    dy = next_point.y - point.y
    return (90 - math.degrees(math.atan2(dy, dx)) + 360) % 360

def get_offset_angle(bearing, prev_bearing, progress):
    """
    Return the offset angle of a vertex, bisecting the turn between the
    bearing of the previous vertex and the vertex's own bearing. Where either
    bearing is undefined (at line endpoints), the defined bearing is rotated
    by 90 degrees.

    Parameters
    ----------
    bearing : float or None
        The offset bearing of the vertex, undefined for the last vertex.
    prev_bearing : float or None
        The offset bearing of the previous vertex.
    progress : LinearMeasureProgress
        The measure progression of the line, selecting the side on which the
        angle is computed.
    """
    increasing = progress is LinearMeasureProgress.INCREASING
    if bearing is None and prev_bearing is None:
        raise ValueError('At least one bearing must be defined')
    if bearing is None:
        angle = prev_bearing - 90 if increasing else prev_bearing + 90
    elif prev_bearing is None:
        angle = bearing - 90 if increasing else bearing + 90
    elif increasing:
        angle = 360 + bearing - (360 - ((prev_bearing + 180) - bearing)) / 2
    else:
        angle = bearing + ((prev_bearing + 180) - bearing) / 2
    return angle % 360

def get_offset_sine(bearing, angle):
    """
    Return the sine of the angle between a vertex's bearing and its offset
    angle. An undefined bearing is taken as 0.
    """
    bearing = 0.0 if bearing is None else bearing
    return math.sin(math.radians(((bearing - angle) + 360) % 360))

def get_offset_distance(offset, bearing, angle):
    """
    Return the distance to travel from a vertex along its offset angle so
    that the parallel vertex lies at the lateral offset from both adjoining
    segments. Returns None where the angle runs parallel to the bearing and
    no such distance exists.
    """
    sine = get_offset_sine(bearing, angle)
    if abs(sine) <= 1e-12:
        return None
    return offset / sine

def get_parallel_coords(x, y, distance, angle):
    """
    Return the coordinates reached by travelling a distance from (x, y) along
    a compass angle.
    """
    radians = math.radians(90 - angle)
    return x + distance * math.cos(radians), y + distance * math.sin(radians)

def get_deflection(bearing, prev_bearing):
    """
    Return the absolute change of direction, in degrees within [0, 180],
    between two consecutive bearings.
    """
    return abs(((bearing - prev_bearing + 540) % 360) - 180)

def compute_parallel_points(points, offset, progress, tolerance=0.0):
    """
    Compute the vertices of a line parallel to the provided points at a
    lateral offset, returning a list of (x, y, m) tuples. The offset bearing,
    angle and distance of each input point are updated in the process.

    Vertices at sharp bends, where the direction changes by more than
    common.bend_threshold degrees, are replaced by bend points: one point
    perpendicular to the incoming segment, one point perpendicular to the
    outgoing segment and, where those two are farther apart than the
    tolerance, a point between them along the offset angle. All bend points
    carry the measure of their vertex.

    Since the offset angle bisects the turn, the angle between a vertex's
    bearing and its offset angle is 90 degrees plus half the signed
    deflection. A deflection beyond 90 degrees thus moves that angle outside
    45 to 135 degrees, which is the window of offset angles the bend points
    replace. Vertices where the offset distance is undefined are also
    treated as sharp bends.

    Parameters
    ----------
    points : list of LRSPoint
        The points of the line, at least two.
    offset : float
        The lateral offset of the parallel line.
    progress : LinearMeasureProgress
        The measure progression of the line.
    tolerance : float, default 0.0
        The distance below which two bend points are considered coincident.
    """
    n = len(points)
    if n < 2:
        raise ValueError('Parallel line computation requires at least two points')
    increasing = progress is LinearMeasureProgress.INCREASING

    # Compute bearings, angles and distances
    for i in range(n - 1):
        points[i].set_offset_bearing(points[i + 1])
    points[-1].offset_bearing = None
    for i in range(n - 1):
        points[i + 1].set_offset_angle(points[i], progress)
    points[0].set_offset_angle(points[-1], progress)
    for point in points[:-1]:
        point.set_offset_distance(offset)
    points[-1].offset_distance = offset if increasing else -offset

    # Build parallel points
    res = []
    bends = 0
    for i, point in enumerate(points):
        prev_bearing = points[i - 1].offset_bearing if i > 0 else None
        sharp = (
            0 < i < n - 1 and (
                point.offset_distance is None or
                get_deflection(point.offset_bearing, prev_bearing) > common.bend_threshold
            )
        )
        if sharp:
            res.extend(_get_bend_points(point, prev_bearing, offset, increasing, tolerance))
            bends += 1
        else:
            x, y = get_parallel_coords(
                point.x, point.y, point.offset_distance, point.offset_angle)
            res.append((x, y, point.m))
    if bends > 0:
        warnings.warn(
            f'Offset line has {bends} sharp bend(s) exceeding '
            f'{common.bend_threshold} degrees; bend points were constructed',
            RuntimeWarning)
    return res


#
# Helper functions
#

def _get_bend_points(point, prev_bearing, offset, increasing, tolerance):
    """
    Return the bend points replacing a vertex at a sharp bend.
    """
    rotation = -90 if increasing else 90
    distance = offset if increasing else -offset
    x_in, y_in = get_parallel_coords(
        point.x, point.y, distance, (prev_bearing + rotation) % 360)
    x_out, y_out = get_parallel_coords(
        point.x, point.y, distance, (point.offset_bearing + rotation) % 360)
    res = [(x_in, y_in, point.m)]
    if math.hypot(x_out - x_in, y_out - y_in) > tolerance:
        sine = get_offset_sine(point.offset_bearing, point.offset_angle)
        sign = math.copysign(1, sine) if sine != 0 else (1 if increasing else -1)
        x_mid, y_mid = get_parallel_coords(
            point.x, point.y, offset * sign, point.offset_angle)
        res.append((x_mid, y_mid, point.m))
    res.append((x_out, y_out, point.m))
    return res
