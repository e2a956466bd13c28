"""
===============================================================================

Module featuring global settings, constants, enumerations and exception
classes shared across the lrsmeasure package. Global modifiable variables are
read at call time, so updating them (e.g., lrsmeasure.common.default_tolerance
= 0.1) changes the defaults of all subsequent operations.


Classes
-------
LinearMeasureProgress, MergePosition, MergeInputType, DimensionalInfo,
LRSErrorCode, LRSTypeError, SRIDMismatchError, MeasureRangeError,
DimensionError, LRSError, WKTParseError


Dependencies
------------
sys, enum


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

import sys
from enum import Enum, IntEnum


# Global modifiable variables
default_srid = 4326
default_tolerance = 0.5
measure_epsilon = sys.float_info.epsilon
bend_threshold = 90.0

# Global constants
shape_kinds_all = {'Point', 'LineString', 'MultiLineString', 'Polygon',
                   'MultiPoint', 'GeometryCollection'}
shape_kinds_lrs = {'Point', 'LineString', 'MultiLineString'}
shape_kinds_linear = {'LineString', 'MultiLineString'}
wkt_null = 'NULL'
wkt_keywords = {
    'POINT': 'Point',
    'LINESTRING': 'LineString',
    'MULTILINESTRING': 'MultiLineString',
    'POLYGON': 'Polygon',
    'MULTIPOINT': 'MultiPoint',
    'GEOMETRYCOLLECTION': 'GeometryCollection',
}
wkt_flags = {'Z', 'M', 'ZM'}

# Error messages
msg_linestring = "LINESTRING is currently the only spatial type supported"
msg_lrs_types = ("POINT, LINESTRING or MULTILINE STRING is currently the only "
                 "spatial type supported")
msg_linear_types = ("LINESTRING or MULTILINE STRING is currently the only "
                    "spatial type supported")
msg_point = "Start and End geometry must be a point."
msg_srid = "SRID's of geography\\geometry objects doesn't match"
msg_measure_range = "Measure not withing range."
msg_measure_not_in_range = ("{0} is not within the measure range {1} : {2} of "
                            "the linear geometry.")
msg_distance_exceeds = ("The distance value provided exceeds the distance "
                        "between the two points.")
msg_distance_positive = "The distance must be positive."
msg_dimensions = ("Cannot operate on 2 Dimensional co-ordinates without "
                  "measure values")
msg_linestring_only = "This operation may only be executed on LineString instances."
msg_distance_length = ("Distance provided is greater than the length of the "
                       "LineString.")


################
# ENUMERATIONS #
################

class LinearMeasureProgress(Enum):
    """
    Direction in which measure values progress along a linear geometry.
    """
    NONE = 0
    INCREASING = 1
    DECREASING = 2


class MergePosition(IntEnum):
    """
    Position at which two linear geometries connect, named by the endpoint of
    the first geometry followed by the endpoint of the second geometry.
    """
    NONE = 0
    START_START = 1
    START_END = 2
    END_START = 3
    END_END = 4
    BOTH_ENDS = 5
    CROSS_ENDS = 6


class MergeInputType(IntEnum):
    """
    Combination of linear geometry kinds supplied to a merge operation.
    """
    LS_LS = 0
    LS_MLS = 1
    MLS_LS = 2
    MLS_MLS = 3


class DimensionalInfo(Enum):
    """
    Ordinate layout of a geometry, named by the ordinates carried by its
    vertices.
    """
    NONE = 'NONE'
    XY = '2D'
    XYZ = '3D'
    XYM = '2DM'
    XYZM = '3DM'

    @property
    def description(self):
        return _dimension_descriptions[self]


_dimension_descriptions = {
    DimensionalInfo.NONE: 'No dimensions',
    DimensionalInfo.XY: '2 dimensional (x, y)',
    DimensionalInfo.XYZ: '3 dimensional (x, y, z)',
    DimensionalInfo.XYM: '2 dimensional with measure (x, y, m)',
    DimensionalInfo.XYZM: '3 dimensional with measure (x, y, z, m)',
}


class LRSErrorCode(IntEnum):
    """
    Result codes of LRS segment validation.
    """
    VALID = 1
    INVALID = 2
    MEASURE_NOT_DEFINED = 3
    MEASURE_NOT_LINEAR = 4

    @property
    def message(self):
        return _error_code_messages[self]


_error_code_messages = {
    LRSErrorCode.VALID: 'Valid LRS segment',
    LRSErrorCode.INVALID: 'Invalid LRS segment',
    LRSErrorCode.MEASURE_NOT_DEFINED: 'Measure is not defined',
    LRSErrorCode.MEASURE_NOT_LINEAR: 'Measure is not linear',
}


##############
# EXCEPTIONS #
##############

class LRSTypeError(TypeError):
    """
    Raised when a shape kind is not supported by an operation.
    """
    pass


class SRIDMismatchError(ValueError):
    """
    Raised when two geometries with different SRIDs are combined.
    """
    def __init__(self, message=msg_srid):
        super().__init__(message)


class MeasureRangeError(ValueError):
    """
    Raised when a measure or distance falls outside the allowed range.
    """
    pass


class DimensionError(ValueError):
    """
    Raised when a geometry lacks the measure ordinate an operation requires.
    """
    def __init__(self, message=msg_dimensions):
        super().__init__(message)


class LRSError(ValueError):
    """
    Raised for invalid LRS segments or measures, carrying an LRSErrorCode
    describing the failure.
    """
    def __init__(self, code=LRSErrorCode.INVALID, message=None):
        self.code = LRSErrorCode(code)
        super().__init__(self.code.message if message is None else message)


class WKTParseError(ValueError):
    """
    Raised for malformed well-known text.
    """
    pass


#
# Helper functions
#

def get_tolerance(tolerance=None):
    """
    Return the provided tolerance, or the global default when None.
    """
    if tolerance is None:
        return default_tolerance
    if tolerance < 0:
        raise ValueError(f'Tolerance must be non-negative; got {tolerance}')
    return tolerance

def get_srid(srid=None):
    """
    Return the provided SRID, or the global default when None.
    """
    return default_srid if srid is None else int(srid)

def is_close(a, b, epsilon=None):
    """
    Test whether two values are equal within the measure epsilon.
    """
    epsilon = measure_epsilon if epsilon is None else epsilon
    return abs(a - b) < epsilon

def is_within_range(value, a, b):
    """
    Test whether a value lies within the inclusive range bounded by a and b,
    in either order.
    """
    return min(a, b) <= value <= max(a, b)

def is_within_tolerance(x1, y1, x2, y2, tolerance):
    """
    Test whether two coordinates lie within the tolerance of each other on
    both the x and y axes.
    """
    return abs(x1 - x2) <= tolerance and abs(y1 - y2) <= tolerance

def interpolate_by_measure(x1, y1, m1, x2, y2, m2, m):
    """
    Return the planar coordinates at a measure between two vertices, by
    linear interpolation over the measure fraction.
    """
    fraction = 0.0 if m2 == m1 else (m - m1) / (m2 - m1)
    return x1 + (x2 - x1) * fraction, y1 + (y2 - y1) * fraction

def interpolate_by_distance(x1, y1, x2, y2, distance):
    """
    Return the planar coordinates at a distance from the first vertex toward
    the second vertex, by linear interpolation over the distance fraction.
    """
    length = ((x2 - x1) ** 2 + (y2 - y1) ** 2) ** 0.5
    fraction = 0.0 if length == 0 else distance / length
    return x1 * (1 - fraction) + x2 * fraction, y1 * (1 - fraction) + y2 * fraction
