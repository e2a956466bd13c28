"""
===============================================================================

Module featuring the sink stage computing lines parallel to a linear
geometry at a signed lateral offset.


Classes
-------
OffsetSink


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
from lrsmeasure.sinks.base import CollectingSink, emit_lines


class OffsetSink(CollectingSink):
    """
    Replace each line of a linear geometry with the line parallel to it at a
    lateral offset. Parallel vertices carry the measures of the vertices they
    were computed from.

    Parameters
    ----------
    target : GeometrySink
        The downstream stage.
    offset : float
        The lateral offset; positive values are placed to the left of the
        direction of travel.
    progress : LinearMeasureProgress
        The measure progression of the original geometry, used for every
        line.
    tolerance : float, default 0.0
        The distance below which two bend points are considered coincident.
    """

    def __init__(self, target, offset, progress, tolerance=0.0):
        super().__init__()
        self.target = target
        self.offset = offset
        self.progress = progress
        self.tolerance = tolerance

    def begin_shape(self, kind, context=None):
        if not kind in common.shape_kinds_linear:
            raise LRSTypeError(common.msg_linear_types)
        super().begin_shape(kind, context)

    def flush(self):
        lines = [
            line.compute_parallel_line(self.offset, self.progress, self.tolerance)
            for line in self.parts if line.is_line
        ]
        if len(lines) == 0:
            return
        kind = 'LineString' if len(lines) == 1 else 'MultiLineString'
        emit_lines(self.target, self.srid, kind, lines)
