"""
===============================================================================

Module featuring sink stages which buffer whole shapes before emitting them
downstream, for operations that depend on the complete geometry such as
reversing vertex order or distributing measures over the total length.


Classes
-------
ReverseSink, ReverseAndTranslateSink, PopulateMeasuresSink,
BuildLRSMultiLineSink, BuildMultiLineFromLinesSink, LineStringMergeSink


Dependencies
------------
numpy, warnings


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

import numpy as np
import warnings
from lrsmeasure.common import LRSTypeError
from lrsmeasure import common
from lrsmeasure.sinks.base import (
    GeometrySink, CollectingSink, ShapeContext, emit_lines, is_top_level)
from lrsmeasure.base.segments import LRSMultiLine


class ReverseSink(CollectingSink):
    """
    Reverse the order of the vertices of each part and the order of the
    members of multi-part shapes. Points are forwarded unchanged.

    Parameters
    ----------
    target : GeometrySink
        The downstream stage.
    """

    def __init__(self, target):
        super().__init__()
        self.target = target

    def flush(self):
        lines = self.parts[::-1]
        for line in lines:
            line.reverse()
        emit_lines(self.target, self.srid, self.kind, lines)


class ReverseAndTranslateSink(ReverseSink):
    """
    Reverse a shape as ReverseSink does, then add an offset to every measure.
    Undefined measures are treated as 0.
    """

    def __init__(self, target, offset):
        super().__init__(target)
        self.offset = offset

    def flush(self):
        for line in self.parts:
            for point in line:
                point.m = self.offset if point.m is None else point.m + self.offset
        super().flush()


class PopulateMeasuresSink(CollectingSink):
    """
    Assign measures to every vertex by linear interpolation over planar
    length, from the start measure at the first vertex to the end measure at
    the last vertex. Measures are continuous across the members of multi-part
    shapes; the gaps between members do not count toward the length.

    Parameters
    ----------
    target : GeometrySink
        The downstream stage.
    start_m, end_m : float
        The measures of the first and last vertices.
    """

    def __init__(self, target, start_m, end_m):
        super().__init__()
        self.target = target
        self.start_m = start_m
        self.end_m = end_m

    def flush(self):
        start_m, end_m = self.start_m, self.end_m
        if self.kind == 'Point':
            for line in self.parts:
                for point in line:
                    point.m = end_m
            emit_lines(self.target, self.srid, self.kind, self.parts)
            return

        # Compute cumulative lengths along all parts
        total = sum(line.length for line in self.parts)
        if total == 0:
            warnings.warn(
                'Populating measures on a zero-length geometry; all vertices '
                f'receive the start measure {start_m}', RuntimeWarning)
        cumulative = 0.0
        for line in self.parts:
            lengths = cumulative + np.append(0, line.chord_lengths.cumsum())
            if total == 0:
                measures = np.full(len(lengths), start_m, dtype=float)
            else:
                measures = start_m + lengths / total * (end_m - start_m)
            for point, m in zip(line, measures):
                point.m = float(m)
            cumulative = lengths[-1]

        # Enforce exact bounding measures
        if len(self.parts) > 0 and len(self.parts[0]) > 0:
            self.parts[0][0].m = start_m
            if total > 0:
                self.parts[-1][-1].m = end_m
        emit_lines(self.target, self.srid, self.kind, self.parts)


class BuildLRSMultiLineSink(CollectingSink):
    """
    Collect a linear shape into an LRSMultiLine, available through the
    multi_line attribute once the shape has ended. Parts with fewer than two
    vertices remain available through the parts attribute.
    """

    def __init__(self):
        super().__init__()
        self.multi_line = None

    def flush(self):
        self.multi_line = LRSMultiLine(srid=self.srid, lines=self.parts)


class BuildMultiLineFromLinesSink(GeometrySink):
    """
    Combine a known number of separately streamed LineString geometries into
    a single MultiLineString. The first line opens the multi line string and
    the last line closes it.

    Parameters
    ----------
    target : GeometrySink
        The downstream stage.
    line_count : int
        The number of line strings which will be streamed.
    """

    def __init__(self, target, line_count):
        self.target = target
        self.line_count = line_count
        self.line_index = 0
        self._context = ShapeContext.top('MultiLineString')

    def set_srid(self, srid):
        if self.line_index == 0:
            self.target.set_srid(srid)

    def begin_shape(self, kind, context=None):
        if kind != 'LineString':
            raise LRSTypeError(common.msg_linestring)
        if self.line_index == 0:
            self.target.begin_shape('MultiLineString', self._context)
        member = ShapeContext.member(kind, self.line_index, self.line_count)
        self.target.begin_shape(kind, member)

    def begin_part(self, x, y, z=None, m=None):
        self.target.begin_part(x, y, z, m)

    def line_to(self, x, y, z=None, m=None):
        self.target.line_to(x, y, z, m)

    def end_part(self):
        self.target.end_part()

    def end_shape(self, context=None):
        member = ShapeContext.member('LineString', self.line_index, self.line_count)
        self.target.end_shape(member)
        self.line_index += 1
        if self.line_index == self.line_count:
            self.target.end_shape(self._context)


class LineStringMergeSink(GeometrySink):
    """
    Join two separately streamed LineString geometries into a single line
    string. The first segment opens the line and emits all of its vertices;
    the second segment drops its first vertex, which coincides with the seam,
    emits the rest and closes the line.

    Parameters
    ----------
    target : GeometrySink
        The downstream stage, shared by the sinks of both segments.
    is_first_segment : bool
        Whether this sink receives the leading segment.
    """

    def __init__(self, target, is_first_segment):
        self.target = target
        self.is_first_segment = is_first_segment

    def set_srid(self, srid):
        if self.is_first_segment:
            self.target.set_srid(srid)

    def begin_shape(self, kind, context=None):
        if kind != 'LineString':
            raise LRSTypeError(common.msg_linestring)
        if self.is_first_segment:
            self.target.begin_shape(kind, context)

    def begin_part(self, x, y, z=None, m=None):
        if self.is_first_segment:
            self.target.begin_part(x, y, z, m)

    def line_to(self, x, y, z=None, m=None):
        self.target.line_to(x, y, z, m)

    def end_part(self):
        if not self.is_first_segment:
            self.target.end_part()

    def end_shape(self, context=None):
        if not self.is_first_segment and is_top_level(context):
            self.target.end_shape(context)
