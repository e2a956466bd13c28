from __future__ import annotations
import pandas as pd
from lrsmeasure.geometry import as_geometry
from lrsmeasure.functions import lrs


@pd.api.extensions.register_series_accessor("lrs")
class LRSSeriesAccessor(object):
    """
    Linear Referencing System (LRS) accessor class for applying measure
    operations element-wise over a Series of geometries. Elements may be
    Geometry objects or well-known text; missing elements (None or NaN) are
    returned as None.

    Examples
    --------
    >>> s = pd.Series(['LINESTRING (0 0 NULL 0, 10 0 NULL 10)', None])
    >>> s.lrs.clip(2, 5).lrs.wkt.tolist()
    ['LINESTRING (2 0 NULL 2, 5 0 NULL 5)', None]
    """

    def __init__(self, obj):
        self._validate(obj)
        self._obj = obj

    @staticmethod
    def _validate(obj):
        """
        Validate the input series.
        """
        for value in obj:
            if not _is_missing(value):
                as_geometry(value)

    def _apply(self, func, *args, **kwargs):
        return self._obj.apply(
            lambda value: None if _is_missing(value) else func(value, *args, **kwargs))

    @property
    def geometry(self):
        """
        Return the series with every element converted to a Geometry.
        """
        return self._apply(as_geometry)

    @property
    def wkt(self):
        """
        Return the well-known text of every geometry.
        """
        return self._apply(lambda value: as_geometry(value).wkt)

    @property
    def start_measure(self):
        return self._apply(lrs.get_start_measure)

    @property
    def end_measure(self):
        return self._apply(lrs.get_end_measure)

    def clip(self, start_m, end_m, tolerance=None):
        """
        Clip every geometry to a range of measures.
        """
        return self._apply(lrs.clip, start_m, end_m, tolerance=tolerance)

    def locate(self, m):
        """
        Locate the point at a measure along every geometry.
        """
        return self._apply(lrs.locate_at_measure, m)

    def populate(self, start_m=None, end_m=None):
        """
        Assign measures to every vertex of every geometry by linear
        interpolation over its planar length.
        """
        return self._apply(lrs.populate_measures, start_m, end_m)

    def reset(self):
        return self._apply(lrs.reset_measure)

    def scale(self, factor):
        return self._apply(lrs.scale_measure, factor)

    def translate(self, offset):
        return self._apply(lrs.translate_measure, offset)

    def reverse(self):
        return self._apply(lrs.reverse_linear_geometry)

    def validate(self):
        """
        Validate the measures of every geometry, returning LRSErrorCode
        values. The result has object dtype so that missing elements do not
        coerce the codes to floats.
        """
        values = [None if _is_missing(value) else lrs.validate(value)
                  for value in self._obj]
        return pd.Series(
            values, index=self._obj.index, name=self._obj.name, dtype=object)


#
# Helper functions
#

def _is_missing(value):
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False
