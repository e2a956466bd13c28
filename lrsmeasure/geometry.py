"""
===============================================================================

Module featuring the Geometry class, a lightweight planar geometry value with
optional Z and M ordinates per vertex, along with its well-known text (WKT)
reader and writer and the GeometryBuilder sink used to construct geometries
from streamed construction events. Planar predicates (validity, length,
distance and spatial equality) are computed with shapely on the x/y
ordinates of the geometry.

WKT follows the SQL Server convention for measured geometries, where a fourth
ordinate is always the measure and NULL may stand in for a missing Z value.
Tagged forms (e.g., 'LINESTRING M (...)') and an EWKT SRID prefix (e.g.,
'SRID=4326;POINT (1 2)') are also accepted.


Classes
-------
Geometry, GeometryBuilder


Dependencies
------------
shapely, copy


Examples
--------
Parse a measured line string and retrieve its measure extents.
>>> geom = Geometry.from_wkt('LINESTRING (10 1 NULL 10, 25 1 NULL 25)')
>>> geom.start_measure, geom.end_measure
(10.0, 25.0)


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
import shapely.geometry as sg
from lrsmeasure import common
from lrsmeasure.common import (
    LinearMeasureProgress, DimensionalInfo, LRSTypeError, WKTParseError)
from lrsmeasure.sinks.base import GeometrySink, ShapeContext, is_top_level
from lrsmeasure.sinks.transform import ConvertXYZToXYMSink


class Geometry(object):
    """
    Planar geometry with optional Z and M ordinates.

    Parameters
    ----------
    kind : str
        The kind of geometry, one of 'Point', 'LineString', 'MultiLineString',
        'Polygon', 'MultiPoint' or 'GeometryCollection'.
    parts : list, optional
        The parts of the geometry. For all kinds except geometry collections,
        each part is a list of (x, y, z, m) coordinate tuples, where z and m
        may be None: a point has one part with one coordinate, a line string
        has one part, a multi line string or a multi point has one part per
        member and a polygon has one part per ring. For geometry collections,
        each part is a member Geometry. An empty list produces an empty
        geometry.
    srid : int, optional
        The spatial reference identifier of the geometry. If not provided,
        common.default_srid will be used.
    """

    def __init__(self, kind, parts=None, srid=None):
        self.kind = kind
        self.parts = parts
        self.srid = srid

    def __str__(self):
        return self.wkt

    def __repr__(self):
        return f'<Geometry SRID={self.srid} {self.wkt}>'

    @property
    def kind(self):
        return self._kind

    @kind.setter
    def kind(self, kind):
        if not kind in common.shape_kinds_all:
            raise ValueError(
                f"Invalid geometry kind '{kind}'; must be one of "
                f"{sorted(common.shape_kinds_all)}")
        self._kind = kind

    @property
    def parts(self):
        return self._parts

    @parts.setter
    def parts(self, parts):
        if parts is None:
            parts = []
        if self.kind == 'GeometryCollection':
            for part in parts:
                if not isinstance(part, Geometry):
                    raise TypeError(
                        'GeometryCollection parts must be Geometry objects')
            self._parts = list(parts)
        else:
            self._parts = [[_as_coord(c) for c in part] for part in parts]
        if self.kind == 'Point' and len(self._parts) > 0:
            if len(self._parts) != 1 or len(self._parts[0]) != 1:
                raise ValueError('Point geometry must have exactly one coordinate')

    @property
    def srid(self):
        return self._srid

    @srid.setter
    def srid(self, srid):
        self._srid = common.get_srid(srid)

    @classmethod
    def from_wkt(cls, text, srid=None):
        """
        Create a geometry from well-known text.

        Parameters
        ----------
        text : str
            The well-known text to parse, optionally prefixed with an EWKT
            SRID tag (e.g., 'SRID=4326;').
        srid : int, optional
            The spatial reference identifier of the geometry. Takes precedence
            over an EWKT SRID tag. If neither is provided,
            common.default_srid will be used.
        """
        if not isinstance(text, str):
            raise TypeError(f'WKT must be a string; got {type(text)}')
        # Address EWKT SRID prefix
        text = text.strip()
        if text.upper().startswith('SRID='):
            prefix, _, text = text.partition(';')
            try:
                tagged = int(prefix[5:])
            except ValueError:
                raise WKTParseError(f"Invalid SRID tag '{prefix}'")
            srid = tagged if srid is None else srid
        tokens = _tokenize(text)
        if len(tokens) == 0:
            raise WKTParseError('Empty well-known text')
        geom, pos = _read_geometry(tokens, 0, common.get_srid(srid))
        if pos != len(tokens):
            raise WKTParseError(
                f"Unexpected token '{tokens[pos]}' at position {pos}")
        return geom

    @classmethod
    def from_shapely(cls, geom, srid=None):
        """
        Create a geometry from a shapely geometry. Third ordinates of the
        shapely geometry are read as Z values.

        Parameters
        ----------
        geom : shapely.geometry.base.BaseGeometry
            The shapely geometry to convert.
        srid : int, optional
            The spatial reference identifier of the geometry.
        """
        kind = geom.geom_type
        if kind == 'GeometryCollection':
            return cls(kind, [cls.from_shapely(g, srid) for g in geom.geoms], srid)
        if geom.is_empty:
            return cls(kind, [], srid)
        if kind in ('Point', 'LineString'):
            parts = [list(geom.coords)]
        elif kind in ('MultiLineString', 'MultiPoint'):
            parts = [list(g.coords) for g in geom.geoms]
        elif kind == 'Polygon':
            parts = [list(geom.exterior.coords)] + \
                [list(ring.coords) for ring in geom.interiors]
        else:
            raise LRSTypeError(f'Unsupported shapely geometry type {kind}')
        return cls(kind, parts, srid)

    @classmethod
    def point(cls, x, y, z=None, m=None, srid=None):
        """
        Create a point geometry.
        """
        return cls('Point', [[(x, y, z, m)]], srid)

    @classmethod
    def linestring(cls, coords, srid=None):
        """
        Create a line string geometry from a list of coordinates.
        """
        return cls('LineString', [coords], srid)

    @classmethod
    def multilinestring(cls, lines, srid=None):
        """
        Create a multi line string geometry from a list of coordinate lists.
        """
        return cls('MultiLineString', lines, srid)

    @property
    def wkt(self):
        """
        Return the well-known text representation of the geometry. Measured
        geometries are written with four ordinates, using NULL for missing Z
        values.
        """
        keyword = _wkt_keyword(self.kind)
        if self.is_empty:
            return f'{keyword} EMPTY'
        if self.kind == 'GeometryCollection':
            return f'{keyword} (' + ', '.join(g.wkt for g in self.parts) + ')'
        size = 4 if self.has_m else 3 if self.has_z else 2
        texts = [_wkt_coords(part, size) for part in self.parts]
        if self.kind in ('Point', 'LineString'):
            return f'{keyword} ({texts[0]})'
        return f'{keyword} (' + ', '.join(f'({t})' for t in texts) + ')'

    @property
    def ewkt(self):
        """
        Return the extended well-known text representation of the geometry,
        prefixed with its SRID.
        """
        return f'SRID={self.srid};{self.wkt}'

    @property
    def coords(self):
        """
        Return a flat list of all (x, y, z, m) coordinate tuples of the
        geometry, in traversal order.
        """
        if self.kind == 'GeometryCollection':
            return [c for g in self.parts for c in g.coords]
        return [c for part in self.parts for c in part]

    @property
    def num_points(self):
        return len(self.coords)

    @property
    def num_parts(self):
        return len(self.parts)

    @property
    def is_empty(self):
        return self.num_points == 0

    @property
    def is_point(self):
        return self.kind == 'Point'

    @property
    def is_linestring(self):
        return self.kind == 'LineString'

    @property
    def is_multilinestring(self):
        return self.kind == 'MultiLineString'

    @property
    def is_collection(self):
        return self.kind == 'GeometryCollection'

    @property
    def is_lrs_type(self):
        return self.kind in common.shape_kinds_lrs

    @property
    def is_linear(self):
        return self.kind in common.shape_kinds_linear

    @property
    def has_z(self):
        return any(c[2] is not None for c in self.coords)

    @property
    def has_m(self):
        return any(c[3] is not None for c in self.coords)

    @property
    def has_measure_values(self):
        """
        Whether every vertex of the geometry carries a measure value.
        """
        coords = self.coords
        return len(coords) > 0 and all(c[3] is not None for c in coords)

    @property
    def dimension(self):
        """
        Return the ordinate layout of the geometry as a DimensionalInfo.
        """
        if self.is_empty:
            return DimensionalInfo.NONE
        has_z, has_m = self.has_z, self.has_m
        if has_z and has_m:
            return DimensionalInfo.XYZM
        elif has_m:
            return DimensionalInfo.XYM
        elif has_z:
            return DimensionalInfo.XYZ
        return DimensionalInfo.XY

    @property
    def x(self):
        return self._point_coord()[0]

    @property
    def y(self):
        return self._point_coord()[1]

    @property
    def z(self):
        return self._point_coord()[2]

    @property
    def m(self):
        return self._point_coord()[3]

    def _point_coord(self):
        if not self.is_point:
            raise LRSTypeError(
                f'Ordinate access requires a Point geometry; got {self.kind}')
        if self.is_empty:
            raise ValueError('Empty Point geometry has no ordinates')
        return self.parts[0][0]

    @property
    def lines(self):
        """
        Return the member lines of a linear geometry as a list of LineString
        geometries.
        """
        if not self.is_linear:
            raise LRSTypeError(common.msg_linear_types)
        return [Geometry('LineString', [part], self.srid) for part in self.parts]

    def point_n(self, index):
        """
        Return the vertex at the given index, in traversal order, as a Point
        geometry.
        """
        return Geometry('Point', [[self.coords[index]]], self.srid)

    @property
    def start_point(self):
        if self.is_empty:
            return None
        return self.point_n(0)

    @property
    def end_point(self):
        if self.is_empty:
            return None
        return self.point_n(-1)

    @property
    def start_measure(self):
        """
        Return the measure of the first vertex, defaulting to 0.
        """
        if self.is_empty:
            return 0.0
        m = self.coords[0][3]
        return 0.0 if m is None else m

    @property
    def end_measure(self):
        """
        Return the measure of the last vertex, defaulting to the planar length
        of the geometry.
        """
        if self.is_empty:
            return 0.0
        m = self.coords[-1][3]
        return self.length if m is None else m

    @property
    def measure_progress(self):
        """
        Return the direction in which measures progress from the first to the
        last vertex.
        """
        start, end = self.start_measure, self.end_measure
        if end > start:
            return LinearMeasureProgress.INCREASING
        elif end < start:
            return LinearMeasureProgress.DECREASING
        return LinearMeasureProgress.NONE

    def same_direction(self, other):
        """
        Test whether two geometries have the same measure progression.
        """
        return self.measure_progress == other.measure_progress

    @property
    def length(self):
        """
        Return the planar length of the geometry.
        """
        if self.is_empty:
            return 0.0
        return self.to_shapely().length

    @property
    def is_valid(self):
        """
        Whether the geometry is planar valid, as determined by shapely.
        """
        if self.kind == 'GeometryCollection':
            return all(g.is_valid for g in self.parts)
        # Address degenerate parts which shapely cannot construct
        if self.kind in common.shape_kinds_linear:
            if any(len(part) < 2 for part in self.parts):
                return False
        elif self.kind == 'Polygon':
            if any(len(ring) < 4 for ring in self.parts):
                return False
        return self.to_shapely().is_valid

    def to_shapely(self):
        """
        Convert the geometry to a planar shapely geometry, dropping Z and M
        ordinates.
        """
        kind = self.kind
        if kind == 'GeometryCollection':
            return sg.GeometryCollection([g.to_shapely() for g in self.parts])
        parts = [[(c[0], c[1]) for c in part] for part in self.parts]
        if self.is_empty:
            return getattr(sg, kind)()
        if kind == 'Point':
            return sg.Point(parts[0][0])
        elif kind == 'LineString':
            return sg.LineString(parts[0])
        elif kind == 'MultiLineString':
            return sg.MultiLineString(parts)
        elif kind == 'MultiPoint':
            return sg.MultiPoint([part[0] for part in parts])
        elif kind == 'Polygon':
            return sg.Polygon(parts[0], parts[1:])

    def distance(self, other):
        """
        Return the planar distance between two geometries.
        """
        return self.to_shapely().distance(other.to_shapely())

    def equals(self, other):
        """
        Test whether two geometries are spatially equal in the x/y plane,
        ignoring Z and M ordinates and vertex order.
        """
        return self.to_shapely().equals(other.to_shapely())

    def equals_exact(self, other, tolerance=0.0):
        """
        Test whether two geometries have the same kind, SRID and structure,
        with all ordinates equal within the given tolerance. Missing
        ordinates are only equal to other missing ordinates.
        """
        if self.kind != other.kind or self.srid != other.srid:
            return False
        if len(self.parts) != len(other.parts):
            return False
        if self.kind == 'GeometryCollection':
            return all(a.equals_exact(b, tolerance)
                       for a, b in zip(self.parts, other.parts))
        for part_a, part_b in zip(self.parts, other.parts):
            if len(part_a) != len(part_b):
                return False
            for ca, cb in zip(part_a, part_b):
                for va, vb in zip(ca, cb):
                    if (va is None) != (vb is None):
                        return False
                    if va is not None and abs(va - vb) > tolerance:
                        return False
        return True

    def to_xym(self):
        """
        Return a copy of the geometry where vertices with a Z value but no M
        value carry the Z value as their measure instead.
        """
        builder = GeometryBuilder()
        self.populate(ConvertXYZToXYMSink(builder))
        return builder.geometry

    def populate(self, sink):
        """
        Replay the geometry into a sink as a stream of construction events.

        Parameters
        ----------
        sink : GeometrySink
            The sink receiving the events.
        """
        sink.set_srid(self.srid)
        self._populate_shape(sink, ShapeContext.top(self.kind))

    def _populate_shape(self, sink, context):
        sink.begin_shape(self.kind, context)
        if self.kind == 'GeometryCollection':
            count = len(self.parts)
            for index, geom in enumerate(self.parts):
                member = ShapeContext.member(geom.kind, index, count)
                geom._populate_shape(sink, member)
        elif self.kind in ('MultiLineString', 'MultiPoint'):
            member_kind = 'LineString' if self.kind == 'MultiLineString' else 'Point'
            count = len(self.parts)
            for index, part in enumerate(self.parts):
                member = ShapeContext.member(member_kind, index, count)
                sink.begin_shape(member_kind, member)
                _populate_part(sink, part)
                sink.end_shape(member)
        else:
            for part in self.parts:
                _populate_part(sink, part)
        sink.end_shape(context)

    def copy(self, deep=False):
        """
        Create an exact copy of the object instance.

        Parameters
        ----------
        deep : bool, default False
            Whether the created copy should be a deep copy.
        """
        return copy.deepcopy(self) if deep else copy.copy(self)


class GeometryBuilder(GeometrySink):
    """
    Sink which collects streamed construction events into a Geometry. The
    constructed geometry is available through the geometry property once the
    top-level shape has ended.
    """

    def __init__(self):
        self.srid = None
        self._stack = []
        self._part = None
        self._geometry = None

    def set_srid(self, srid):
        self.srid = srid

    def begin_shape(self, kind, context=None):
        self._stack.append((kind, []))

    def begin_part(self, x, y, z=None, m=None):
        if len(self._stack) == 0:
            raise ValueError('begin_part called before begin_shape')
        self._part = [(x, y, z, m)]

    def line_to(self, x, y, z=None, m=None):
        if self._part is None:
            raise ValueError('line_to called before begin_part')
        self._part.append((x, y, z, m))

    def end_part(self):
        self._stack[-1][1].append(self._part)
        self._part = None

    def end_shape(self, context=None):
        kind, parts = self._stack.pop()
        geom = Geometry(kind, parts, self.srid)
        if len(self._stack) > 0:
            parent_kind, parent_parts = self._stack[-1]
            if parent_kind == 'GeometryCollection':
                parent_parts.append(geom)
            else:
                parent_parts.extend(geom.parts)
        elif is_top_level(context):
            self._geometry = geom

    @property
    def is_constructed(self):
        return self._geometry is not None

    @property
    def geometry(self):
        if self._geometry is None:
            raise ValueError('No geometry has been constructed')
        return self._geometry


#
# Helper functions
#

def _as_coord(coord):
    """
    Normalize a coordinate sequence of 2 to 4 values into an (x, y, z, m)
    tuple of floats, where z and m may be None.
    """
    values = tuple(coord)
    if not 2 <= len(values) <= 4:
        raise ValueError(f'Coordinates must have 2 to 4 values; got {values}')
    values = values + (None,) * (4 - len(values))
    x, y, z, m = values
    if x is None or y is None:
        raise ValueError('Coordinate x and y values must be defined')
    return (
        float(x),
        float(y),
        None if z is None else float(z),
        None if m is None else float(m),
    )

def _populate_part(sink, part):
    x, y, z, m = part[0]
    sink.begin_part(x, y, z, m)
    for x, y, z, m in part[1:]:
        sink.line_to(x, y, z, m)
    sink.end_part()

def _format_ordinate(value):
    if value is None:
        return common.wkt_null
    text = repr(float(value))
    return text[:-2] if text.endswith('.0') else text

def _wkt_coords(part, size):
    return ', '.join(
        ' '.join(_format_ordinate(v) for v in coord[:size]) for coord in part)

def _wkt_keyword(kind):
    for keyword, value in common.wkt_keywords.items():
        if value == kind:
            return keyword

def _tokenize(text):
    for char in '(),':
        text = text.replace(char, f' {char} ')
    return text.split()

def _read_geometry(tokens, pos, srid):
    """
    Read a tagged geometry from the token list, returning the geometry and
    the position of the next unread token.
    """
    keyword = tokens[pos].upper()
    if not keyword in common.wkt_keywords:
        raise WKTParseError(f"Unsupported geometry keyword '{tokens[pos]}'")
    kind = common.wkt_keywords[keyword]
    pos += 1
    # Read ordinate flag
    flag = None
    if pos < len(tokens) and tokens[pos].upper() in common.wkt_flags:
        flag = tokens[pos].upper()
        pos += 1
    if pos >= len(tokens):
        raise WKTParseError(f'Unexpected end of well-known text after {keyword}')
    if tokens[pos].upper() == 'EMPTY':
        return Geometry(kind, [], srid), pos + 1
    # Read geometry collection members
    if kind == 'GeometryCollection':
        pos = _expect(tokens, pos, '(')
        members = []
        while True:
            member, pos = _read_geometry(tokens, pos, srid)
            members.append(member)
            if _peek(tokens, pos) == ',':
                pos += 1
                continue
            pos = _expect(tokens, pos, ')')
            return Geometry(kind, members, srid), pos
    # Read nested coordinate lists
    nested, pos = _read_nested(tokens, pos, flag)
    if kind == 'Point':
        if len(nested) != 1 or not isinstance(nested[0], tuple):
            raise WKTParseError('POINT must contain exactly one coordinate')
        parts = [nested]
    elif kind == 'LineString':
        _check_depth(nested, 1, keyword)
        parts = [nested]
    elif kind == 'MultiPoint':
        parts = [[c] if isinstance(c, tuple) else c for c in nested]
        for part in parts:
            _check_depth(part, 1, keyword)
            if len(part) != 1:
                raise WKTParseError('MULTIPOINT members must be single coordinates')
    else:
        _check_depth(nested, 2, keyword)
        parts = nested
    return Geometry(kind, parts, srid), pos

def _read_nested(tokens, pos, flag):
    """
    Read a parenthesized list of coordinates or of nested lists.
    """
    pos = _expect(tokens, pos, '(')
    items = []
    while True:
        if _peek(tokens, pos) == '(':
            item, pos = _read_nested(tokens, pos, flag)
        else:
            item, pos = _read_coord(tokens, pos, flag)
        items.append(item)
        token = _peek(tokens, pos)
        if token == ',':
            pos += 1
        elif token == ')':
            return items, pos + 1
        else:
            raise WKTParseError(f"Expected ',' or ')' at position {pos}; got {token}")

def _read_coord(tokens, pos, flag):
    """
    Read a single coordinate, interpreting its ordinates according to the
    tag flag of the geometry.
    """
    values = []
    while _peek(tokens, pos) not in (',', ')', None):
        token = tokens[pos]
        if token.upper() == common.wkt_null:
            values.append(None)
        else:
            try:
                values.append(float(token))
            except ValueError:
                raise WKTParseError(f"Invalid ordinate '{token}' at position {pos}")
        pos += 1
    if not 2 <= len(values) <= 4:
        raise WKTParseError(
            f'Coordinates must have 2 to 4 ordinates; got {len(values)}')
    if values[0] is None or values[1] is None:
        raise WKTParseError('Coordinate x and y ordinates cannot be NULL')
    if len(values) == 3 and flag == 'M':
        values = [values[0], values[1], None, values[2]]
    values = values + [None] * (4 - len(values))
    return tuple(values), pos

def _check_depth(items, depth, keyword):
    for item in items:
        if (depth == 1) != isinstance(item, tuple):
            raise WKTParseError(f'Invalid nesting of coordinates for {keyword}')
        if depth > 1:
            _check_depth(item, depth - 1, keyword)

def _peek(tokens, pos):
    return tokens[pos] if pos < len(tokens) else None

def _expect(tokens, pos, token):
    if _peek(tokens, pos) != token:
        raise WKTParseError(
            f"Expected '{token}' at position {pos}; got {_peek(tokens, pos)}")
    return pos + 1

def as_geometry(geom, srid=None):
    """
    Return the input as a Geometry, parsing well-known text where provided.
    """
    if isinstance(geom, Geometry):
        return geom
    elif isinstance(geom, str):
        return Geometry.from_wkt(geom, srid=srid)
    raise TypeError(
        f'Input geometry must be a Geometry object or well-known text; got '
        f'{type(geom)}')
