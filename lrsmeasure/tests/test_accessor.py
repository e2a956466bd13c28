import unittest
from unittest import TestCase

import pandas as pd
from lrsmeasure import Geometry
from lrsmeasure.common import LRSErrorCode, WKTParseError


class TestAccessor(TestCase):

    def test_geometry(self):
        res = pd.Series(wkt_values).lrs.geometry
        self.assertIsInstance(res.iloc[0], Geometry)
        self.assertTrue(pd.isna(res.iloc[2]))

    def test_wkt(self):
        res = pd.Series([Geometry.from_wkt(wkt_values[0]), None]).lrs.wkt
        self.assertEqual(res.iloc[0], wkt_values[0])
        self.assertTrue(pd.isna(res.iloc[1]))

    def test_clip(self):
        res = pd.Series(wkt_values).lrs.clip(2, 5).lrs.wkt
        self.assertEqual(res.iloc[0], 'LINESTRING (2 0 NULL 2, 5 0 NULL 5)')
        self.assertEqual(res.iloc[1], 'LINESTRING (5 5 NULL 5, 5 2 NULL 2)')
        self.assertTrue(pd.isna(res.iloc[2]))

    def test_measures(self):
        s = pd.Series(wkt_values)
        self.assertEqual(s.lrs.start_measure.iloc[1], 10)
        self.assertEqual(s.lrs.end_measure.iloc[0], 10)
        self.assertTrue(pd.isna(s.lrs.end_measure.iloc[2]))

    def test_validate(self):
        res = pd.Series(wkt_values[:2] + ['LINESTRING (2 2 6, 2 4 2, 8 4 8)']).lrs.validate()
        self.assertEqual(res.iloc[0], LRSErrorCode.VALID)
        self.assertEqual(res.iloc[2], LRSErrorCode.MEASURE_NOT_LINEAR)

    def test_validate_missing(self):
        res = pd.Series(wkt_values).lrs.validate()
        self.assertEqual(res.dtype, object)
        self.assertIs(res.iloc[0], LRSErrorCode.VALID)
        self.assertIs(res.iloc[1], LRSErrorCode.VALID)
        self.assertIsNone(res.iloc[2])

    def test_locate(self):
        res = pd.Series(wkt_values[:2]).lrs.locate(5).lrs.wkt
        self.assertEqual(res.tolist(), ['POINT (5 0 NULL 5)', 'POINT (5 5 NULL 5)'])

    def test_transforms(self):
        s = pd.Series(wkt_values[:1])
        self.assertEqual(s.lrs.scale(2).lrs.end_measure.iloc[0], 20)
        self.assertEqual(s.lrs.translate(1).lrs.start_measure.iloc[0], 1)
        self.assertEqual(s.lrs.reverse().lrs.start_measure.iloc[0], 10)
        self.assertEqual(
            s.lrs.reset().lrs.wkt.iloc[0], 'LINESTRING (0 0, 10 0)')
        self.assertEqual(
            s.lrs.reset().lrs.populate(100, 200).lrs.end_measure.iloc[0], 200)

    def test_invalid_values(self):
        with self.assertRaises(WKTParseError):
            pd.Series(['NOT WKT']).lrs
        with self.assertRaises(TypeError):
            pd.Series([5]).lrs


# Define standard unit test variables
wkt_values = [
    'LINESTRING (0 0 NULL 0, 10 0 NULL 10)',
    'LINESTRING (5 10 NULL 10, 5 0 NULL 0)',
    None,
]

if __name__ == '__main__':
    unittest.main()
