from lrsmeasure.common import (
    LRSErrorCode, LinearMeasureProgress, MergePosition, MergeInputType,
    DimensionalInfo, LRSTypeError, SRIDMismatchError, MeasureRangeError,
    DimensionError, LRSError, WKTParseError)
from lrsmeasure.geometry import Geometry, GeometryBuilder, as_geometry
from lrsmeasure.base.segments import LRSPoint, LRSLine, LRSMultiLine
from lrsmeasure.functions.lrs import (
    clip, split, merge, populate_measures, reset_measure, scale_measure,
    translate_measure, reverse_linear_geometry, reverse_and_translate,
    get_start_measure, get_end_measure, validate, locate_at_measure,
    interpolate_between_measure, is_valid_point, get_merge_position,
    is_connected, offset)
from lrsmeasure.functions.general import (
    interpolate_between, locate_along, shift_geometry, reverse_linestring,
    geom_from_xym_text)
from lrsmeasure.base.accessor import LRSSeriesAccessor
