"""
===============================================================================

Module featuring the geometry sink interface used to stream geometry
construction events through composable processing stages. A geometry replays
itself into a sink through Geometry.populate; each stage owns the stage it
forwards to, and the final stage is typically a GeometryBuilder which
collects the events back into a Geometry.

Every stage receives the following events, in order:

    set_srid(srid)
    begin_shape(kind, context)
        begin_part(x, y, z, m)
        line_to(x, y, z, m) ...
        end_part()
    end_shape(context)

Members of a multi-part shape (e.g., the lines of a MultiLineString) are
announced by a nested begin_shape / end_shape pair whose ShapeContext carries
the member index and member count.


Classes
-------
ShapeContext, GeometrySink, ForwardingSink, CollectingSink


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


class ShapeContext(object):
    """
    Position of a shape within the geometry being streamed. Top-level shapes
    carry no member index; members of a multi-part shape carry their index
    and the number of members in the parent shape.

    Parameters
    ----------
    kind : str
        The kind of the shape, e.g., 'LineString'.
    index : int, optional
        The index of the shape within its parent multi-part shape.
    count : int, optional
        The number of members in the parent multi-part shape.
    """

    __slots__ = ('kind', 'index', 'count')

    def __init__(self, kind, index=None, count=None):
        self.kind = kind
        self.index = index
        self.count = count

    def __repr__(self):
        if self.is_member:
            return f'ShapeContext({self.kind}, {self.index + 1} of {self.count})'
        return f'ShapeContext({self.kind})'

    @classmethod
    def top(cls, kind):
        return cls(kind)

    @classmethod
    def member(cls, kind, index, count):
        return cls(kind, index=index, count=count)

    @property
    def is_member(self):
        return self.index is not None

    @property
    def is_first_member(self):
        return self.is_member and self.index == 0

    @property
    def is_last_member(self):
        return self.is_member and self.index == self.count - 1


def is_top_level(context):
    """
    Test whether a begin_shape / end_shape event belongs to a top-level shape.
    """
    return context is None or not context.is_member


class GeometrySink(object):
    """
    Interface for consumers of geometry construction events.
    """

    def set_srid(self, srid):
        raise NotImplementedError

    def begin_shape(self, kind, context=None):
        raise NotImplementedError

    def begin_part(self, x, y, z=None, m=None):
        raise NotImplementedError

    def line_to(self, x, y, z=None, m=None):
        raise NotImplementedError

    def end_part(self):
        raise NotImplementedError

    def end_shape(self, context=None):
        raise NotImplementedError


class ForwardingSink(GeometrySink):
    """
    Base class for stages which forward every event downstream, passing each
    vertex through the transform method.

    Parameters
    ----------
    target : GeometrySink
        The downstream stage receiving the transformed events.
    """

    def __init__(self, target):
        self.target = target

    def transform(self, x, y, z, m):
        return x, y, z, m

    def set_srid(self, srid):
        self.target.set_srid(srid)

    def begin_shape(self, kind, context=None):
        self.target.begin_shape(kind, context)

    def begin_part(self, x, y, z=None, m=None):
        self.target.begin_part(*self.transform(x, y, z, m))

    def line_to(self, x, y, z=None, m=None):
        self.target.line_to(*self.transform(x, y, z, m))

    def end_part(self):
        self.target.end_part()

    def end_shape(self, context=None):
        self.target.end_shape(context)


class CollectingSink(GeometrySink):
    """
    Base class for stages which need the whole shape before producing output.
    Every part is buffered as an LRSLine; once the top-level shape ends, the
    flush method is called with the buffered parts.
    """

    def __init__(self):
        self.srid = None
        self.kind = None
        self.parts = []
        self._part = None

    def _new_line(self):
        # Deferred import to keep the sink interface free of data model imports
        from lrsmeasure.base.segments import LRSLine
        return LRSLine(srid=self.srid)

    def set_srid(self, srid):
        self.srid = srid

    def begin_shape(self, kind, context=None):
        if is_top_level(context):
            self.kind = kind
            self.parts = []

    def begin_part(self, x, y, z=None, m=None):
        self._part = self._new_line()
        self._part.add_coords(x, y, z, m)

    def line_to(self, x, y, z=None, m=None):
        if self._part is None:
            raise ValueError('line_to called before begin_part')
        self._part.add_coords(x, y, z, m)

    def end_part(self):
        self.parts.append(self._part)
        self._part = None

    def end_shape(self, context=None):
        if is_top_level(context):
            self.flush()

    def flush(self):
        raise NotImplementedError


#
# Helper functions
#

def emit_lines(target, srid, kind, lines):
    """
    Replay a list of LRS lines into a sink as a single shape of the given
    kind. Multi-line shapes announce each line as a member LineString.
    """
    target.set_srid(srid)
    context = ShapeContext.top(kind)
    target.begin_shape(kind, context)
    if kind in ('MultiLineString', 'MultiPoint'):
        member_kind = 'LineString' if kind == 'MultiLineString' else 'Point'
        count = len(lines)
        for index, line in enumerate(lines):
            member = ShapeContext.member(member_kind, index, count)
            target.begin_shape(member_kind, member)
            _emit_part(target, line)
            target.end_shape(member)
    else:
        for line in lines:
            _emit_part(target, line)
    target.end_shape(context)

def _emit_part(target, line):
    points = line.points
    first = points[0]
    target.begin_part(first.x, first.y, first.z, first.m)
    for point in points[1:]:
        target.line_to(point.x, point.y, point.z, point.m)
    target.end_part()
