"""
===============================================================================

Module featuring streaming sink stages which transform each vertex or shape
event independently and forward it downstream without buffering.


Classes
-------
ShiftSink, ScaleMeasureSink, TranslateMeasureSink, ResetMeasureSink,
ConvertXYZToXYMSink, LRSTypeCheckSink


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
from lrsmeasure.common import LRSTypeError
from lrsmeasure.sinks.base import ForwardingSink


class ShiftSink(ForwardingSink):
    """
    Shift the x and y ordinates of every vertex by a constant amount.

    Parameters
    ----------
    target : GeometrySink
        The downstream stage.
    x_shift, y_shift : float
        The amounts by which to shift x and y ordinates.
    """

    def __init__(self, target, x_shift, y_shift):
        super().__init__(target)
        self.x_shift = x_shift
        self.y_shift = y_shift

    def transform(self, x, y, z, m):
        return x + self.x_shift, y + self.y_shift, z, m


class ScaleMeasureSink(ForwardingSink):
    """
    Multiply every defined measure by a factor. Undefined measures are
    forwarded unchanged.
    """

    def __init__(self, target, factor):
        super().__init__(target)
        self.factor = factor

    def transform(self, x, y, z, m):
        return x, y, z, (None if m is None else m * self.factor)


class TranslateMeasureSink(ForwardingSink):
    """
    Add an offset to every measure. Undefined measures are treated as 0, so
    that the offset becomes the measure of the vertex.
    """

    def __init__(self, target, offset):
        super().__init__(target)
        self.offset = offset

    def transform(self, x, y, z, m):
        return x, y, z, (self.offset if m is None else m + self.offset)


class ResetMeasureSink(ForwardingSink):
    """
    Remove the measure of every vertex of a line string.
    """

    def begin_shape(self, kind, context=None):
        if kind != 'LineString':
            raise LRSTypeError(common.msg_linestring)
        super().begin_shape(kind, context)

    def transform(self, x, y, z, m):
        return x, y, z, None


class ConvertXYZToXYMSink(ForwardingSink):
    """
    Reinterpret the Z value of vertices without a measure as their measure.
    Vertices which already carry a measure are forwarded unchanged.
    """

    def transform(self, x, y, z, m):
        if m is None and z is not None:
            return x, y, None, z
        return x, y, z, m


class LRSTypeCheckSink(ForwardingSink):
    """
    Reject shapes whose kind is not among the allowed kinds.

    Parameters
    ----------
    target : GeometrySink
        The downstream stage.
    kinds : set, optional
        The allowed shape kinds. Defaults to the LRS kinds: Point, LineString
        and MultiLineString.
    message : str, optional
        The error message raised for unsupported kinds.
    """

    def __init__(self, target, kinds=None, message=None):
        super().__init__(target)
        self.kinds = common.shape_kinds_lrs if kinds is None else set(kinds)
        self.message = common.msg_lrs_types if message is None else message

    def begin_shape(self, kind, context=None):
        if not kind in self.kinds:
            raise LRSTypeError(self.message)
        super().begin_shape(kind, context)
