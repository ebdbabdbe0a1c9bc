"""
Tests for Tms tile <-> coordinate operations
"""

import math

import pytest

from tilegrid.core.crs import CRS, WEB_MERCATOR_CRS
from tilegrid.core.exceptions import (
    InvalidZoomError,
    OutOfRangeError,
    UnsupportedTransformError,
    ZoomNotFoundError,
)
from tilegrid.core.types import BoundingBox, Tile
from tilegrid.grid.base import TileGrid
from tilegrid.grid.models import TileMatrixSet
from tilegrid.grid.tms import Tms

HALF_WORLD = 20037508.342789244


class TestMetadata:
    """Test Tms accessors"""

    def test_web_mercator(self, mercator):
        assert mercator.identifier == "WebMercatorQuad"
        assert mercator.crs == WEB_MERCATOR_CRS
        assert mercator.minzoom == 0
        assert mercator.maxzoom == 24
        assert len(mercator.matrices) == 25

    def test_protocol(self, mercator):
        """Test Tms satisfies the TileGrid protocol"""
        assert isinstance(mercator, TileGrid)

    def test_matrix(self, mercator):
        matrix = mercator.matrix(4)
        assert matrix.matrix_width == 16
        assert matrix.tile_width == 256

    def test_matrix_not_found(self, mercator):
        with pytest.raises(ZoomNotFoundError) as excinfo:
            mercator.matrix(25)
        assert excinfo.value.zoom == 25

    def test_to_dict(self, mercator):
        data = mercator.to_dict()
        assert data["id"] == "WebMercatorQuad"
        assert Tms.from_dict(data).definition == mercator.definition


class TestResolution:
    """Test resolution and zoom search"""

    def test_resolution(self, mercator):
        """Test resolution matches the cell size of every level"""
        for matrix in mercator.matrices:
            assert mercator.resolution(matrix) == pytest.approx(matrix.cell_size)
        assert mercator.resolution(0) == pytest.approx(156543.03392804097)

    def test_geographic_resolution(self, crs84):
        """Test degree grids convert the scale denominator with metersPerUnit"""
        assert crs84.resolution(0) == pytest.approx(0.703125)

    @pytest.mark.parametrize(
        "name",
        [
            "WebMercatorQuad",
            "WorldCRS84Quad",
            "WGS1984Quad",
            "WorldMercatorWGS84Quad",
            "EuropeanETRS89_LAEAQuad",
        ],
    )
    def test_monotonic(self, registry, name):
        """Test resolution decreases strictly with zoom"""
        tms = registry.lookup(name)
        resolutions = [tms.resolution(m) for m in tms.matrices]
        assert all(a > b for a, b in zip(resolutions, resolutions[1:]))

    @pytest.mark.parametrize("name", ["WebMercatorQuad", "WorldCRS84Quad", "EuropeanETRS89_LAEAQuad"])
    def test_zoom_for_own_resolution(self, registry, name):
        """Test the resolution of a level finds that level"""
        tms = registry.lookup(name)
        for matrix in tms.matrices:
            assert tms.zoom_for_res(tms.resolution(matrix)) == matrix.zoom

    def test_zoom_for_res(self, mercator):
        assert mercator.zoom_for_res(10.0) == 14
        assert mercator.zoom_for_res(10.0, "lower") == 13
        assert mercator.zoom_for_res(10.0, "upper") == 14
        assert mercator.zoom_for_res(5000.0) == 5
        assert mercator.zoom_for_res(5000.0, "lower") == 4

    def test_zoom_for_res_clamps(self, mercator):
        """Test out-of-range resolutions return the boundary zoom"""
        assert mercator.zoom_for_res(1e9) == 0
        assert mercator.zoom_for_res(1e-5) == 24
        assert mercator.zoom_for_res(10.0, max_z=12) == 12
        assert mercator.zoom_for_res(1e9, min_z=5) == 5

    def test_zoom_for_res_empty_range(self, mercator):
        with pytest.raises(InvalidZoomError):
            mercator.zoom_for_res(10.0, min_z=10, max_z=5)


class TestTileBounds:
    """Test tile <-> coordinate conversions on Web Mercator"""

    def test_xy_bounds(self, mercator):
        """Test native bounds are computed without drift"""
        assert tuple(mercator.xy_bounds(Tile(10, 10, 4))) == (
            5009377.085697308,
            -7514065.628545959,
            7514065.628545959,
            -5009377.085697308,
        )

    def test_bounds(self, mercator):
        """Test quad tile corners land exactly on their longitudes"""
        assert tuple(mercator.bounds(Tile(10, 10, 4))) == (
            45.0,
            -55.77657301866769,
            67.5,
            -40.97989806962013,
        )
        assert tuple(mercator.ul(Tile(10, 10, 4))) == (45.0, -40.97989806962013)
        assert tuple(mercator.bounds(Tile(0, 0, 0)))[::2] == (-180.0, 180.0)

    def test_bounds_custom_mercator_grid(self):
        """Test Web Mercator grids that are not the world quad tree are transformed"""
        tms = Tms.custom([0.0, 0.0, 1000.0, 1000.0], "EPSG:3857", maxzoom=2)
        bounds = tms.bounds(Tile(0, 0, 0))
        assert bounds.left == pytest.approx(0.0, abs=1e-12)
        assert bounds.right == pytest.approx(0.008983152841195214)
        assert tms.ul(Tile(0, 0, 0)).x == pytest.approx(0.0, abs=1e-12)

    def test_bounds_idempotent(self, mercator):
        """Test repeated calls give bit identical results"""
        assert mercator.bounds(Tile(10, 10, 4)) == mercator.bounds(Tile(10, 10, 4))

    def test_sample_tile(self, mercator, sample_tile):
        assert list(mercator.xy_bounds(sample_tile)) == pytest.approx(
            [-1017529.7205322663, 7005300.768279833, -978393.962050256, 7044436.526761846]
        )
        assert list(mercator.bounds(sample_tile)) == pytest.approx(
            [-9.140625, 53.12040528310657, -8.7890625, 53.33087298301705]
        )

    def test_ul(self, mercator, sample_tile):
        assert list(mercator.xy_ul(sample_tile)) == pytest.approx(
            [-1017529.7205322663, 7044436.526761846]
        )
        assert list(mercator.ul(sample_tile)) == pytest.approx([-9.140625, 53.33087298301705])

    def test_tile(self, mercator):
        assert mercator.tile(159.31, -42.0, 4) == Tile(15, 10, 4)
        assert mercator.xy_tile(17734308.1, -5160979.4, 4) == Tile(15, 10, 4)
        assert mercator.tile(-179.0, 85.0, 5) == Tile(0, 0, 5)
        assert mercator.tile(20.0, 15.0, 5) == Tile(17, 14, 5)

    def test_roundtrip(self, mercator):
        """Test the center of a tile falls in that tile"""
        for z in range(4):
            for x in range(2**z):
                for y in range(2**z):
                    center = mercator.xy_bounds(Tile(x, y, z)).center
                    assert mercator.xy_tile(center.x, center.y, z) == Tile(x, y, z)

    def test_no_clamping(self, mercator):
        """Test points outside the grid give out-of-range indices"""
        tile = mercator.xy_tile(-3 * HALF_WORLD, 3 * HALF_WORLD, 1)
        assert tile.x < 0
        assert tile.y < 0
        with pytest.raises(OutOfRangeError):
            mercator.xy_tile(-3 * HALF_WORLD, 3 * HALF_WORLD, 1, validate=True)

    def test_pole(self, mercator):
        """Test a pole has no tile index"""
        with pytest.raises(OutOfRangeError):
            mercator.tile(10.0, 90.0, 2)

    def test_matrix_bounds(self, mercator):
        assert list(mercator.matrix_bounds(3)) == pytest.approx(
            [-HALF_WORLD, -HALF_WORLD, HALF_WORLD, HALF_WORLD]
        )

    def test_tuple_tiles(self, mercator):
        """Test plain tuples are accepted as tiles"""
        assert mercator.xy_bounds((10, 10, 4)) == mercator.xy_bounds(Tile(10, 10, 4))


class TestProjection:
    """Test xy, lnglat and grid extents"""

    def test_xy_lnglat(self, mercator):
        x, y = mercator.xy(-9.140625, 53.33087298301705)
        assert x == pytest.approx(-1017529.7205322663)
        assert y == pytest.approx(7044436.526761846)
        lon, lat = mercator.lnglat(x, y)
        assert lon == pytest.approx(-9.140625)
        assert lat == pytest.approx(53.33087298301705)

    def test_bbox(self, mercator):
        assert list(mercator.xy_bbox) == pytest.approx(
            [-HALF_WORLD, -HALF_WORLD, HALF_WORLD, HALF_WORLD]
        )
        assert list(mercator.bbox) == pytest.approx(
            [-180.0, -85.0511287798066, 180.0, 85.0511287798066]
        )

    def test_truncate_lnglat(self, mercator):
        lon, lat = mercator.truncate_lnglat(200.0, -95.0)
        assert lon == pytest.approx(180.0)
        assert lat == pytest.approx(-85.0511287798066)

    def test_lnglat_truncate(self, mercator):
        lon, lat = mercator.lnglat(3 * HALF_WORLD, 0.0, truncate=True)
        assert lon == pytest.approx(180.0)

    def test_intersect_tms(self, mercator):
        assert mercator.intersect_tms(BoundingBox(0.0, 0.0, 1.0, 1.0))
        assert not mercator.intersect_tms((3e7, 0.0, 4e7, 1.0))


class TestValidity:
    """Test tile validation and neighbourhood"""

    def test_is_valid(self, mercator):
        assert mercator.is_valid(Tile(0, 0, 0))
        assert mercator.is_valid(Tile(15, 15, 4))
        assert not mercator.is_valid(Tile(1, 0, 0))
        assert not mercator.is_valid(Tile(-1, 0, 1))
        assert not mercator.is_valid(Tile(0, 0, 25))

    def test_check_tile(self, mercator):
        assert mercator.check_tile((1, 1, 1)) == Tile(1, 1, 1)
        with pytest.raises(OutOfRangeError):
            mercator.check_tile(Tile(2, 0, 1))
        with pytest.raises(ZoomNotFoundError):
            mercator.check_tile(Tile(0, 0, 25))

    def test_neighbors(self, mercator):
        assert set(mercator.neighbors(Tile(0, 0, 1))) == {
            Tile(0, 1, 1),
            Tile(1, 0, 1),
            Tile(1, 1, 1),
        }
        assert len(mercator.neighbors(Tile(1, 1, 2))) == 8
        assert mercator.neighbors(Tile(0, 0, 0)) == []

    def test_parent(self, mercator, sample_tile):
        assert mercator.parent(sample_tile) == [Tile(243, 166, 9)]
        assert mercator.parent(sample_tile, zoom=8)[0] == Tile(121, 83, 8)
        assert mercator.parent(Tile(0, 0, 0)) == []

    def test_parent_invalid_zoom(self, mercator, sample_tile):
        with pytest.raises(InvalidZoomError):
            mercator.parent(sample_tile, zoom=10)
        with pytest.raises(InvalidZoomError):
            mercator.parent(sample_tile, zoom=8.5)

    def test_children(self, mercator):
        assert set(mercator.children(Tile(243, 166, 9))) == {
            Tile(486, 332, 10),
            Tile(486, 333, 10),
            Tile(487, 332, 10),
            Tile(487, 333, 10),
        }
        assert len(mercator.children(Tile(243, 166, 9), zoom=11)) == 16

    def test_children_invalid_zoom(self, mercator):
        with pytest.raises(InvalidZoomError):
            mercator.children(Tile(243, 166, 9), zoom=8)


class TestFeature:
    """Test GeoJSON features"""

    def test_feature(self, mercator, sample_tile):
        pytest.importorskip("shapely")
        feat = mercator.feature(sample_tile)
        assert feat["type"] == "Feature"
        assert feat["id"] == "10/486/332"
        assert feat["geometry"]["type"] == "Polygon"
        assert len(feat["geometry"]["coordinates"][0]) == 5
        assert feat["bbox"] == pytest.approx(
            [-9.140625, 53.12040528310657, -8.7890625, 53.33087298301705]
        )
        assert feat["properties"]["grid_name"] == "WebMercatorQuad"
        assert feat["properties"]["grid_crs"] == "EPSG:3857"

    def test_feature_options(self, mercator, sample_tile):
        pytest.importorskip("shapely")
        feat = mercator.feature(
            sample_tile, projected=True, precision=1, fid="a", props={"source": "test"}
        )
        assert feat["id"] == "a"
        assert feat["properties"]["source"] == "test"
        assert feat["crs"]["properties"]["name"] == "urn:ogc:def:crs:EPSG:0:3857"
        assert feat["bbox"][0] == pytest.approx(-1017529.7)

    def test_feature_buffer(self, mercator):
        pytest.importorskip("shapely")
        feat = mercator.feature(Tile(0, 0, 1), buffer=1.0)
        assert feat["bbox"][0] == pytest.approx(-181.0)


class TestAxisOrder:
    """Test grids whose CRS lists latitude or northing first"""

    def test_wgs1984_origin(self, wgs1984):
        assert wgs1984.definition.crs_axis_inverted
        assert list(wgs1984.xy_bounds(Tile(0, 0, 0))) == pytest.approx(
            [-180.0, -90.0, 0.0, 90.0], abs=1e-9
        )
        assert list(wgs1984.xy_bbox) == pytest.approx([-180.0, -90.0, 180.0, 90.0])

    def test_same_tiles_as_crs84(self, wgs1984, crs84):
        """Test latitude first axis order does not change tile indices"""
        for lon, lat, z in [(10.0, 20.0, 1), (-120.5, -33.2, 5), (179.0, 89.0, 3)]:
            assert wgs1984.tile(lon, lat, z) == crs84.tile(lon, lat, z)
        assert wgs1984.tile(10.0, 20.0, 1) == Tile(2, 0, 1)

    def test_laea_native(self, laea):
        """Test native operations need no transformation"""
        assert list(laea.xy_bbox) == pytest.approx([2000000.0, 1000000.0, 6500000.0, 5500000.0])
        assert list(laea.xy_bounds(Tile(0, 0, 0))) == pytest.approx(
            [2000000.0, 1000000.0, 6500000.0, 5500000.0]
        )
        assert laea.xy_tile(4321000.0, 3210000.0, 1) == Tile(1, 1, 1)


class TestLazyTransform:
    """Test transformations are only required by geographic operations"""

    def test_native_without_transform(self, laea):
        """Test a grid in a CRS without transform path still works natively"""
        assert laea.zoom_for_res(1000.0) == 4
        assert laea.matrix_bounds(0).width == pytest.approx(4500000.0)
        with pytest.raises(UnsupportedTransformError):
            laea.bounds(Tile(0, 0, 0))
        with pytest.raises(UnsupportedTransformError):
            laea.tile(10.0, 52.0, 3)

    def test_unknown_crs(self, mercator):
        """Test a grid in a CRS no backend knows can be constructed"""
        data = mercator.to_dict()
        data["crs"] = "EPSG:999999"
        data.pop("boundingBox")
        tms = Tms(TileMatrixSet.from_dict(data))
        assert tms.xy_tile(1000.0, -1000.0, 1) == Tile(1, 1, 1)
        with pytest.raises(UnsupportedTransformError):
            tms.bounds(Tile(0, 0, 0))

    def test_general_backend(self, registry):
        """Test geographic operations on LAEA through rasterio"""
        pytest.importorskip("rasterio")
        tms = registry.lookup("EuropeanETRS89_LAEAQuad")
        assert tms.tile(10.0, 52.0, 1) == Tile(1, 1, 1)
        bounds = tms.bounds(Tile(1, 1, 1))
        assert bounds.left < 10.0 < bounds.right
        assert math.isfinite(bounds.top)

    def test_geographic_crs(self, mercator):
        """Test a different geographic CRS"""
        tms = Tms(mercator.definition, geographic_crs=CRS.from_epsg(4326))
        assert tms.tile(159.31, -42.0, 4) == Tile(15, 10, 4)
