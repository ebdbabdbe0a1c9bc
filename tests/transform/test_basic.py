"""
Tests for the closed-form WGS84 <-> Web Mercator transformations
"""

import math

import pytest

from tilegrid.core.crs import CRS, WEB_MERCATOR_CRS, WGS84_CRS
from tilegrid.core.exceptions import UnsupportedTransformError
from tilegrid.transform.basic import (
    BasicTransformer,
    IdentityTransformer,
    lonlat_to_merc,
    merc_to_lonlat,
)

HALF_WORLD = 20037508.342789244


class TestLonLatToMerc:
    """Test lonlat_to_merc"""

    def test_origin(self):
        """Test (0, 0) maps to the projection origin"""
        point = lonlat_to_merc(0.0, 0.0)
        assert point.x == 0.0
        assert point.y == pytest.approx(0.0, abs=1e-9)

    def test_antimeridian(self):
        """Test 180 degrees maps to half the world width"""
        assert lonlat_to_merc(180.0, 0.0).x == pytest.approx(HALF_WORLD)
        assert lonlat_to_merc(-180.0, 0.0).x == pytest.approx(-HALF_WORLD)

    def test_mercator_limit(self):
        """Test the Web Mercator latitude limit maps to the square extent"""
        point = lonlat_to_merc(0.0, 85.0511287798066)
        assert point.y == pytest.approx(HALF_WORLD)

    def test_poles_not_clamped(self):
        """Test the poles project to infinity instead of a clamped value"""
        assert lonlat_to_merc(0.0, 90.0).y == math.inf
        assert lonlat_to_merc(0.0, -90.0).y == -math.inf
        assert lonlat_to_merc(0.0, 89.9999).y > 3 * HALF_WORLD

    def test_inverse(self):
        """Test merc_to_lonlat undoes lonlat_to_merc"""
        x, y = lonlat_to_merc(159.31, -42.0)
        lon, lat = merc_to_lonlat(x, y)
        assert lon == pytest.approx(159.31)
        assert lat == pytest.approx(-42.0)


class TestBasicTransformer:
    """Test BasicTransformer"""

    def test_supported_pairs(self):
        """Test WGS84 <-> Web Mercator in both directions"""
        assert BasicTransformer.supports(WGS84_CRS, WEB_MERCATOR_CRS)
        assert BasicTransformer.supports(CRS.from_epsg(4326), WEB_MERCATOR_CRS)
        assert BasicTransformer.supports(WEB_MERCATOR_CRS, WGS84_CRS)
        assert BasicTransformer.supports(CRS.from_epsg(900913), WGS84_CRS)

    def test_unsupported_pair(self):
        """Test other pairs are refused"""
        assert not BasicTransformer.supports(WGS84_CRS, CRS.from_epsg(3035))
        with pytest.raises(UnsupportedTransformError):
            BasicTransformer(WGS84_CRS, CRS.from_epsg(3035))

    def test_forward(self):
        """Test point transformation to Web Mercator"""
        transformer = BasicTransformer(WGS84_CRS, WEB_MERCATOR_CRS)
        x, y = transformer.transform(159.31, -42.0)
        assert x == pytest.approx(17734308.1, rel=1e-7)
        assert y == pytest.approx(-5160979.4, rel=1e-4)

    def test_transform_bounds(self):
        """Test box transformation to WGS84"""
        transformer = BasicTransformer(WEB_MERCATOR_CRS, WGS84_CRS)
        left, bottom, right, top = transformer.transform_bounds(
            -HALF_WORLD, -HALF_WORLD, HALF_WORLD, HALF_WORLD
        )
        assert left == pytest.approx(-180.0)
        assert right == pytest.approx(180.0)
        assert bottom == pytest.approx(-85.0511287798066)
        assert top == pytest.approx(85.0511287798066)


class TestIdentityTransformer:
    """Test IdentityTransformer"""

    def test_passthrough(self):
        """Test coordinates are returned unchanged"""
        transformer = IdentityTransformer(WEB_MERCATOR_CRS)
        assert transformer.transform(1.0, 2.0) == (1.0, 2.0)
        assert transformer.transform_bounds(1.0, 2.0, 3.0, 4.0) == (1.0, 2.0, 3.0, 4.0)
        assert transformer.target == WEB_MERCATOR_CRS
