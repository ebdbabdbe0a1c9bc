"""
TileMatrixSet operations

Tms wraps an immutable TileMatrixSet and answers the questions asked of a
tile grid: which tile covers a point, which area a tile covers, which zoom
fits a resolution, which tiles cover a box.

Operations in the grid's native CRS never need a coordinate transformation.
Geographic operations go through a Transformer that is created on first use,
so a grid in a CRS nobody can project still loads and works natively.
"""

import functools
import logging
import math
from typing import Any, Optional, Sequence, Union

from tilegrid.core.crs import CRS, WGS84_CRS, meters_per_unit
from tilegrid.core.exceptions import (
    InvalidDefinitionError,
    InvalidZoomError,
    OutOfRangeError,
    QuadKeyError,
    ZoomNotFoundError,
)
from tilegrid.core.types import BoundingBox, Coords, Tile
from tilegrid.grid import hilbert, quadkey
from tilegrid.grid.iterator import TileRange
from tilegrid.grid.models import (
    CORNER_BOTTOM_LEFT,
    CORNER_TOP_LEFT,
    BoundingBox2D,
    TileMatrix,
    TileMatrixSet,
    axes_inverted,
)
from tilegrid.grid.zoom import ZoomLevelStrategy, zoom_for_resolution
from tilegrid.transform import Transformer, get_transformer
from tilegrid.transform.basic import is_web_mercator, is_wgs84, lonlat_to_merc, merc_tile_ul

logger = logging.getLogger(__name__)

# Try to import shapely for GeoJSON features
try:
    from shapely.geometry import box, mapping

    SHAPELY_AVAILABLE = True
except ImportError:
    SHAPELY_AVAILABLE = False

# Standard rendering pixel size in meters (0.28mm)
SCREEN_PIXEL_SIZE = 0.28e-3

# Nudge applied to geographic box edges so that the bounds of a tile
# select only that tile
LL_EPSILON = 1e-11

WEB_MERCATOR_HALF_WIDTH = lonlat_to_merc(180.0, 0.0).x

TileLike = Union[Tile, Sequence[int]]


def _tile_arg(tile: TileLike) -> Tile:
    if isinstance(tile, Tile):
        return tile
    return Tile(*tile)


class Tms:
    """
    Tile grid operations for a TileMatrixSet

    Coordinates are always given and returned in x/y (easting/northing,
    lon/lat) order, whatever the axis order of the CRS.

    Args:
        definition: TileMatrixSet to operate on
        geographic_crs: CRS used by the geographic operations (default: CRS84)
        transform_backend: Transform backend override ("auto", "basic",
            "rasterio"), None to use the configured one

    Examples:
        >>> from tilegrid import lookup
        >>> tms = lookup("WebMercatorQuad")
        >>> tms.tile(159.31, -42.0, 4)
        Tile(x=15, y=10, z=4)
        >>> tms.xy_bounds(Tile(10, 10, 4))
        BoundingBox(left=5009377.085697..., bottom=-7514065.628545..., ...)
    """

    def __init__(
        self,
        definition: TileMatrixSet,
        geographic_crs: CRS = WGS84_CRS,
        transform_backend: Optional[str] = None,
    ):
        self.definition = definition
        self.geographic_crs = geographic_crs
        self.transform_backend = transform_backend
        self._invert_axis = definition.crs_axis_inverted
        self._is_quadtree = quadkey.check_quadkey_support(definition.tile_matrices)

    def __repr__(self):
        return f"<Tms {self.identifier} ({self.crs})>"

    @classmethod
    def from_dict(cls, data: dict[str, Any], **kwargs) -> "Tms":
        return cls(TileMatrixSet.from_dict(data), **kwargs)

    @classmethod
    def from_json(cls, text: str, **kwargs) -> "Tms":
        return cls(TileMatrixSet.from_json(text), **kwargs)

    def to_dict(self) -> dict[str, Any]:
        return self.definition.to_dict()

    # Metadata

    @property
    def identifier(self) -> str:
        return self.definition.id

    @property
    def crs(self) -> CRS:
        return self.definition.crs

    @property
    def matrices(self) -> tuple[TileMatrix, ...]:
        return self.definition.tile_matrices

    @property
    def minzoom(self) -> int:
        return self.matrices[0].zoom

    @property
    def maxzoom(self) -> int:
        return self.matrices[-1].zoom

    @property
    def is_quadtree(self) -> bool:
        """Check if the grid is a regular 2x2 quad tree (quadkeys supported)"""
        return self._is_quadtree

    @functools.cached_property
    def _from_geographic(self) -> Transformer:
        return get_transformer(self.geographic_crs, self.crs, self.transform_backend)

    @functools.cached_property
    def _to_geographic(self) -> Transformer:
        return get_transformer(self.crs, self.geographic_crs, self.transform_backend)

    def matrix(self, zoom: int) -> TileMatrix:
        """
        Get the TileMatrix of a zoom level

        Raises:
            ZoomNotFoundError: If the set has no matrix for the zoom
        """
        matrix = self.definition.matrix_for_zoom(zoom)
        if matrix is None:
            raise ZoomNotFoundError(zoom, self.identifier)
        return matrix

    def resolution(self, matrix: Union[TileMatrix, int]) -> float:
        """
        Tile resolution in CRS units per pixel

        From note g in http://docs.opengeospatial.org/is/17-083r2/17-083r2.html#table_2:
            The pixel size of the tile can be obtained from the scaleDenominator
            by multiplying the later by 0.28 10-3 / metersPerUnit.
        """
        if not isinstance(matrix, TileMatrix):
            matrix = self.matrix(matrix)
        return matrix.scale_denominator * SCREEN_PIXEL_SIZE / meters_per_unit(matrix.crs or self.crs)

    def _origin(self, matrix: TileMatrix) -> Coords:
        first, second = matrix.point_of_origin
        if self._invert_axis:
            return Coords(second, first)
        return Coords(first, second)

    def _tile_span(self, matrix: TileMatrix) -> tuple[float, float]:
        res = self.resolution(matrix)
        return res * matrix.tile_width, res * matrix.tile_height

    def matrix_bounds(self, zoom: int) -> BoundingBox:
        """Extent covered by all the tiles of a zoom level, in the grid CRS"""
        matrix = self.matrix(zoom)
        origin = self._origin(matrix)
        span_x, span_y = self._tile_span(matrix)
        width = span_x * matrix.matrix_width
        height = span_y * matrix.matrix_height
        if matrix.corner_of_origin == CORNER_BOTTOM_LEFT:
            return BoundingBox(origin.x, origin.y, origin.x + width, origin.y + height)
        return BoundingBox(origin.x, origin.y - height, origin.x + width, origin.y)

    def zoom_for_res(
        self,
        res: float,
        strategy: Union[str, ZoomLevelStrategy] = ZoomLevelStrategy.NEAREST,
        min_z: Optional[int] = None,
        max_z: Optional[int] = None,
    ) -> int:
        """
        Get the zoom level for a resolution

        Args:
            res: Resolution in CRS units per pixel
            strategy: "nearest" (or "auto"), "lower" or "upper"
            min_z: Lowest zoom to consider (default: minzoom)
            max_z: Highest zoom to consider (default: maxzoom)

        Returns:
            Zoom level, clamped to [min_z, max_z] for out-of-range resolutions

        Raises:
            InvalidZoomError: If no zoom level lies between min_z and max_z
        """
        levels = [
            (m.zoom, self.resolution(m))
            for m in self.matrices
            if (min_z is None or m.zoom >= min_z) and (max_z is None or m.zoom <= max_z)
        ]
        if not levels:
            raise InvalidZoomError(
                f"No zoom level between {min_z} and {max_z} in {self.identifier}"
            )
        return zoom_for_resolution(levels, res, strategy)

    # Projections

    def xy(self, lon: float, lat: float, truncate: bool = False) -> Coords:
        """Transform geographic longitude and latitude into the grid CRS"""
        if truncate:
            lon, lat = self.truncate_lnglat(lon, lat)
        return Coords(*self._from_geographic.transform(lon, lat))

    def lnglat(self, x: float, y: float, truncate: bool = False) -> Coords:
        """Transform a point in the grid CRS into geographic longitude and latitude"""
        lon, lat = self._to_geographic.transform(x, y)
        if truncate:
            return self.truncate_lnglat(lon, lat)
        return Coords(lon, lat)

    def truncate_lnglat(self, lon: float, lat: float) -> Coords:
        """Clamp a geographic point to the grid's geographic bounds"""
        bbox = self.bbox
        lon = min(max(lon, bbox.left), bbox.right)
        lat = min(max(lat, bbox.bottom), bbox.top)
        return Coords(lon, lat)

    # Extents

    @functools.cached_property
    def xy_bbox(self) -> BoundingBox:
        """
        Extent of the grid in its CRS

        The declared bounding box when the set has one, the extent of the
        lowest zoom matrix otherwise.
        """
        bounding_box = self.definition.bounding_box
        if bounding_box is None:
            return self.matrix_bounds(self.minzoom)

        inverted = (
            axes_inverted(bounding_box.ordered_axes)
            if bounding_box.ordered_axes
            else self._invert_axis
        )
        (ll_a, ll_b), (ur_a, ur_b) = bounding_box.lower_left, bounding_box.upper_right
        if inverted:
            left, bottom, right, top = ll_b, ll_a, ur_b, ur_a
        else:
            left, bottom, right, top = ll_a, ll_b, ur_a, ur_b

        if bounding_box.crs is not None and bounding_box.crs != self.crs:
            transformer = get_transformer(bounding_box.crs, self.crs, self.transform_backend)
            left, bottom, right, top = transformer.transform_bounds(left, bottom, right, top)

        return BoundingBox(left, bottom, right, top)

    @functools.cached_property
    def bbox(self) -> BoundingBox:
        """Extent of the grid in the geographic CRS"""
        return BoundingBox(*self._to_geographic.transform_bounds(*self.xy_bbox))

    def intersect_tms(self, bbox: Union[BoundingBox, Sequence[float]]) -> bool:
        """Check if a box in the grid CRS overlaps the grid extent (touching does not count)"""
        left, bottom, right, top = bbox
        extent = self.xy_bbox
        return (
            left < extent.right
            and right > extent.left
            and top > extent.bottom
            and bottom < extent.top
        )

    # Point <-> tile

    def xy_tile(self, x: float, y: float, zoom: int, validate: bool = False) -> Tile:
        """
        Get the tile containing a point in the grid CRS

        Indices are not clamped: a point outside of the grid gives a tile
        outside of the matrix.

        Args:
            x: Easting in the grid CRS
            y: Northing in the grid CRS
            zoom: Zoom level
            validate: Raise if the tile is outside the matrix

        Raises:
            ZoomNotFoundError: If the zoom level is not in the set
            OutOfRangeError: If a coordinate is not finite, or if the tile is
                outside the matrix and `validate` is set
        """
        if not (math.isfinite(x) and math.isfinite(y)):
            raise OutOfRangeError(f"Cannot compute a tile index for ({x}, {y})")

        matrix = self.matrix(zoom)
        origin = self._origin(matrix)
        span_x, span_y = self._tile_span(matrix)

        xtile = math.floor((x - origin.x) / span_x)
        if matrix.corner_of_origin == CORNER_BOTTOM_LEFT:
            ytile = math.floor((y - origin.y) / span_y)
        else:
            ytile = math.floor((origin.y - y) / span_y)

        tile = Tile(xtile, ytile, zoom)
        if validate:
            self.check_tile(tile)
        return tile

    def tile(
        self, lon: float, lat: float, zoom: int, truncate: bool = False, validate: bool = False
    ) -> Tile:
        """
        Get the tile containing a geographic point

        Raises:
            UnsupportedTransformError: If the point cannot be projected to the grid CRS
        """
        x, y = self.xy(lon, lat, truncate=truncate)
        return self.xy_tile(x, y, zoom, validate=validate)

    def xy_ul(self, tile: TileLike) -> Coords:
        """Upper left corner of a tile in the grid CRS"""
        tile = _tile_arg(tile)
        matrix = self.matrix(tile.z)
        origin = self._origin(matrix)
        span_x, span_y = self._tile_span(matrix)

        x = origin.x + tile.x * span_x
        if matrix.corner_of_origin == CORNER_BOTTOM_LEFT:
            y = origin.y + (tile.y + 1) * span_y
        else:
            y = origin.y - tile.y * span_y
        return Coords(x, y)

    def ul(self, tile: TileLike) -> Coords:
        """
        Upper left corner of a tile in the geographic CRS

        Web Mercator quad levels use the closed-form tile corner formula, so
        tile edges land exactly on round longitudes.
        """
        tile = _tile_arg(tile)
        if self._is_mercator_quad_level(self.matrix(tile.z)):
            return merc_tile_ul(tile.x, tile.y, tile.z)
        x, y = self.xy_ul(tile)
        return self.lnglat(x, y)

    @functools.cached_property
    def _mercator_geographic(self) -> bool:
        return (
            is_web_mercator(self.crs)
            and is_wgs84(self.geographic_crs)
            and self.transform_backend != "rasterio"
        )

    def _is_mercator_quad_level(self, matrix: TileMatrix) -> bool:
        """Check if a level covers the Web Mercator world with 2**z x 2**z tiles"""
        if not self._mercator_geographic:
            return False
        if matrix.crs is not None and matrix.crs != self.crs:
            return False
        if matrix.corner_of_origin != CORNER_TOP_LEFT:
            return False
        if not matrix.matrix_width == matrix.matrix_height == 2**matrix.zoom:
            return False

        origin = self._origin(matrix)
        span_x, span_y = self._tile_span(matrix)
        return (
            math.isclose(origin.x, -WEB_MERCATOR_HALF_WIDTH, rel_tol=1e-9)
            and math.isclose(origin.y, WEB_MERCATOR_HALF_WIDTH, rel_tol=1e-9)
            and math.isclose(span_x * matrix.matrix_width, 2 * WEB_MERCATOR_HALF_WIDTH, rel_tol=1e-9)
            and math.isclose(span_y * matrix.matrix_height, 2 * WEB_MERCATOR_HALF_WIDTH, rel_tol=1e-9)
        )

    def xy_bounds(self, tile: TileLike) -> BoundingBox:
        """
        Bounding box of a tile in the grid CRS

        Computed from the tile's own matrix, so values do not drift with
        the zoom level.
        """
        tile = _tile_arg(tile)
        matrix = self.matrix(tile.z)
        origin = self._origin(matrix)
        span_x, span_y = self._tile_span(matrix)

        left = origin.x + tile.x * span_x
        right = origin.x + (tile.x + 1) * span_x
        if matrix.corner_of_origin == CORNER_BOTTOM_LEFT:
            bottom = origin.y + tile.y * span_y
            top = origin.y + (tile.y + 1) * span_y
        else:
            top = origin.y - tile.y * span_y
            bottom = origin.y - (tile.y + 1) * span_y
        return BoundingBox(left, bottom, right, top)

    def bounds(self, tile: TileLike) -> BoundingBox:
        """
        Bounding box of a tile in the geographic CRS

        The upper left and lower right corners are transformed.

        Raises:
            UnsupportedTransformError: If the grid CRS cannot be projected
        """
        tile = _tile_arg(tile)
        if self._is_mercator_quad_level(self.matrix(tile.z)):
            left, top = merc_tile_ul(tile.x, tile.y, tile.z)
            right, bottom = merc_tile_ul(tile.x + 1, tile.y + 1, tile.z)
            return BoundingBox(left, bottom, right, top)

        xy = self.xy_bounds(tile)
        left, top = self._to_geographic.transform(xy.left, xy.top)
        right, bottom = self._to_geographic.transform(xy.right, xy.bottom)
        return BoundingBox(left, bottom, right, top)

    def feature(
        self,
        tile: TileLike,
        projected: bool = False,
        buffer: Optional[float] = None,
        precision: Optional[int] = None,
        fid: Optional[str] = None,
        props: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """
        GeoJSON Feature for a tile

        Args:
            tile: Tile
            projected: Use grid CRS coordinates instead of geographic ones
            buffer: Distance added on every side of the tile
            precision: Number of decimal places to round the coordinates to
            fid: Feature id (default: "z/x/y")
            props: Extra feature properties

        Returns:
            GeoJSON Feature dict

        Raises:
            ImportError: If shapely is not installed
        """
        if not SHAPELY_AVAILABLE:
            raise ImportError("shapely is required for tile features. Install with: pip install shapely")

        tile = _tile_arg(tile)
        west, south, east, north = self.xy_bounds(tile)
        if not projected:
            west, south, east, north = self._to_geographic.transform_bounds(west, south, east, north)

        if buffer:
            west -= buffer
            south -= buffer
            east += buffer
            north += buffer

        if precision is not None and precision >= 0:
            west, south, east, north = (round(v, precision) for v in (west, south, east, north))

        xyz = str(tile)
        feat: dict[str, Any] = {
            "type": "Feature",
            "bbox": [west, south, east, north],
            "id": xyz,
            "geometry": mapping(box(west, south, east, north)),
            "properties": {
                "title": f"XYZ tile {xyz}",
                "grid_name": self.identifier,
                "grid_crs": self.crs.to_string(),
            },
        }
        if projected:
            feat["crs"] = {"type": "name", "properties": {"name": self.crs.to_urn()}}
        if props:
            feat["properties"].update(props)
        if fid is not None:
            feat["id"] = fid
        return feat

    # Tile validity and hierarchy

    def is_valid(self, tile: TileLike) -> bool:
        """Check if a tile exists in the grid"""
        x, y, z = _tile_arg(tile)
        matrix = self.definition.matrix_for_zoom(z)
        if matrix is None or x < 0 or y < 0:
            return False
        return x < matrix.matrix_width and y < matrix.matrix_height

    def check_tile(self, tile: TileLike) -> Tile:
        """
        Raise if a tile does not exist in the grid

        Raises:
            ZoomNotFoundError: If the zoom level is not in the set
            OutOfRangeError: If x or y is outside the matrix
        """
        tile = _tile_arg(tile)
        matrix = self.matrix(tile.z)
        if not (0 <= tile.x < matrix.matrix_width and 0 <= tile.y < matrix.matrix_height):
            raise OutOfRangeError(
                f"Tile {tile} is outside of the {matrix.matrix_width}x{matrix.matrix_height} "
                f"matrix of zoom {tile.z} in {self.identifier}"
            )
        return tile

    def neighbors(self, tile: TileLike) -> list[Tile]:
        """The (up to 8) tiles surrounding a tile at the same zoom"""
        tile = _tile_arg(tile)
        matrix = self.matrix(tile.z)
        tiles = []
        for x in (tile.x - 1, tile.x, tile.x + 1):
            for y in (tile.y - 1, tile.y, tile.y + 1):
                if x == tile.x and y == tile.y:
                    continue
                if 0 <= x < matrix.matrix_width and 0 <= y < matrix.matrix_height:
                    tiles.append(Tile(x, y, tile.z))
        return tiles

    def _covering_tiles(self, bbox: BoundingBox, nudge: float, zoom: int) -> list[Tile]:
        ul = self.xy_tile(bbox.left + nudge, bbox.top - nudge, zoom)
        lr = self.xy_tile(bbox.right - nudge, bbox.bottom + nudge, zoom)
        return [
            Tile(x, y, zoom)
            for x in range(ul.x, lr.x + 1)
            for y in range(min(ul.y, lr.y), max(ul.y, lr.y) + 1)
        ]

    def parent(self, tile: TileLike, zoom: Optional[int] = None) -> list[Tile]:
        """
        Get the parent tiles of a tile

        Grids that are not quad trees can have several parents.

        Args:
            tile: Tile
            zoom: Zoom of the parents (default: tile zoom - 1)

        Returns:
            Parent tiles, empty for a tile at minzoom

        Raises:
            InvalidZoomError: If zoom is not an integer lower than the tile's zoom
        """
        tile = _tile_arg(tile)
        if tile.z == self.minzoom:
            return []
        if zoom is not None and (tile.z <= zoom or zoom != int(zoom)):
            raise InvalidZoomError("zoom must be an integer and less than that of the input tile")

        target_zoom = tile.z - 1 if zoom is None else int(zoom)
        nudge = self.resolution(self.matrix(tile.z)) / 10
        return self._covering_tiles(self.xy_bounds(tile), nudge, target_zoom)

    def children(self, tile: TileLike, zoom: Optional[int] = None) -> list[Tile]:
        """
        Get the children tiles of a tile

        Args:
            tile: Tile
            zoom: Zoom of the children (default: tile zoom + 1)

        Raises:
            InvalidZoomError: If zoom is not an integer greater than the tile's zoom
        """
        tile = _tile_arg(tile)
        if zoom is not None and (tile.z > zoom or zoom != int(zoom)):
            raise InvalidZoomError("zoom must be an integer and greater than that of the input tile")

        target_zoom = tile.z + 1 if zoom is None else int(zoom)
        nudge = self.resolution(self.matrix(tile.z)) / 10
        return self._covering_tiles(self.xy_bounds(tile), nudge, target_zoom)

    # Tile ranges

    def tile_limits(
        self,
        bbox: BoundingBox,
        zoom: int,
        geographic: bool = False,
        truncate: bool = False,
    ) -> tuple[int, int, int, int]:
        """
        Index limits of the tiles covering a box at a zoom level

        The box edges are nudged inwards so that a box matching tile edges
        does not pick up the next row or column, and the limits are clamped
        to the matrix.

        Returns:
            (x_min, x_max, y_min, y_max), both ends included
        """
        matrix = self.matrix(zoom)
        if geographic:
            ul = self.tile(bbox.left + LL_EPSILON, bbox.top - LL_EPSILON, zoom, truncate=truncate)
            lr = self.tile(bbox.right - LL_EPSILON, bbox.bottom + LL_EPSILON, zoom, truncate=truncate)
        else:
            nudge = self.resolution(matrix) / 10
            ul = self.xy_tile(bbox.left + nudge, bbox.top - nudge, zoom)
            lr = self.xy_tile(bbox.right - nudge, bbox.bottom + nudge, zoom)

        x_min = max(ul.x, 0)
        x_max = min(lr.x, matrix.matrix_width - 1)
        y_min = max(min(ul.y, lr.y), 0)
        y_max = min(max(ul.y, lr.y), matrix.matrix_height - 1)
        return x_min, x_max, y_min, y_max

    @staticmethod
    def _clip(bbox: Sequence[float], extent: BoundingBox) -> Optional[BoundingBox]:
        left, bottom, right, top = bbox
        clipped = BoundingBox(
            max(left, extent.left),
            max(bottom, extent.bottom),
            min(right, extent.right),
            min(top, extent.top),
        )
        if clipped.left > clipped.right or clipped.bottom > clipped.top:
            return None
        return clipped

    def tiles(
        self, bbox: Union[BoundingBox, Sequence[float]], z_min: int, z_max: int
    ) -> TileRange:
        """
        Tiles covering a box in the grid CRS

        Args:
            bbox: (left, bottom, right, top) in the grid CRS
            z_min: First zoom level
            z_max: Zoom level after the last one, `z_min >= z_max` gives no tiles

        Returns:
            TileRange

        Raises:
            ZoomNotFoundError: If a zoom of the range is not in the set
        """
        if z_min >= z_max:
            return TileRange(self, [], z_min, z_max)
        clipped = self._clip(bbox, self.xy_bbox)
        return TileRange(self, [clipped] if clipped else [], z_min, z_max)

    def geographic_tiles(
        self,
        bbox: Union[BoundingBox, Sequence[float]],
        z_min: int,
        z_max: int,
        truncate: bool = False,
    ) -> TileRange:
        """
        Tiles covering a geographic box

        A box with west > east crosses the antimeridian and is split in two.

        Args:
            bbox: (west, south, east, north) in the geographic CRS
            z_min: First zoom level
            z_max: Zoom level after the last one, `z_min >= z_max` gives no tiles
            truncate: Clamp coordinates to the grid's geographic bounds

        Raises:
            ZoomNotFoundError: If a zoom of the range is not in the set
            UnsupportedTransformError: If the grid CRS cannot be projected
        """
        if z_min >= z_max:
            return TileRange(self, [], z_min, z_max, geographic=True, truncate=truncate)

        west, south, east, north = bbox
        extent = self.bbox
        if west > east:
            parts = [(extent.left, south, east, north), (west, south, extent.right, north)]
        else:
            parts = [(west, south, east, north)]

        clipped = [c for c in (self._clip(p, extent) for p in parts) if c is not None]
        return TileRange(self, clipped, z_min, z_max, geographic=True, truncate=truncate)

    # Addressing schemes

    def quadkey(self, tile: TileLike) -> str:
        """
        Get the quadkey of a tile

        Keys are counted from the single tile of the pyramid, so grids that
        start above zoom 0 get shorter keys.

        Raises:
            QuadKeyError: If the grid is not a quad tree
        """
        self._require_quadtree()
        return quadkey.tile_to_quadkey(_tile_arg(tile), self._quadkey_offset)

    def quadkey_to_tile(self, qk: str) -> Tile:
        """
        Get the tile corresponding to a quadkey

        Raises:
            QuadKeyError: If the grid is not a quad tree, the quadkey is
                malformed or it addresses a zoom below minzoom
        """
        self._require_quadtree()
        tile = quadkey.quadkey_to_tile(qk, self._quadkey_offset)
        if tile.z < self.minzoom:
            raise QuadKeyError(
                f"Quadkey {qk!r} is too short for {self.identifier} (minzoom {self.minzoom})"
            )
        return tile

    @functools.cached_property
    def _quadkey_offset(self) -> int:
        return quadkey.zoom_offset(self.minzoom, self.matrices[0])

    def _require_quadtree(self):
        if not self._is_quadtree:
            raise QuadKeyError(
                f"TileMatrixSet {self.identifier} doesn't support 2 x 2 quadkeys"
            )

    def hilbert_id(self, tile: TileLike) -> int:
        """Hilbert (PMTiles) id of a tile"""
        return hilbert.tile_id(_tile_arg(tile))

    def hilbert_to_tile(self, h: int) -> Tile:
        """Tile of a Hilbert (PMTiles) id"""
        return hilbert.id_to_tile(h)

    # Custom grids

    @staticmethod
    def _extent_bbox(
        extent: Sequence[float],
        crs: CRS,
        extent_crs: Optional[CRS],
        transform_backend: Optional[str] = None,
    ) -> BoundingBox:
        left, bottom, right, top = extent
        if extent_crs is not None and extent_crs != crs:
            transformer = get_transformer(extent_crs, crs, transform_backend)
            left, bottom, right, top = transformer.transform_bounds(left, bottom, right, top)
        return BoundingBox(left, bottom, right, top)

    @staticmethod
    def _axis_order(x: float, y: float, inverted: bool) -> tuple[float, float]:
        return (y, x) if inverted else (x, y)

    @classmethod
    def custom(
        cls,
        extent: Sequence[float],
        crs: Any,
        tile_width: int = 256,
        tile_height: int = 256,
        matrix_scale: Sequence[int] = (1, 1),
        extent_crs: Any = None,
        minzoom: int = 0,
        maxzoom: int = 24,
        title: Optional[str] = None,
        id: str = "Custom",
        ordered_axes: Optional[Sequence[str]] = None,
        screen_pixel_size: float = SCREEN_PIXEL_SIZE,
        decimation_base: int = 2,
        corner_of_origin: str = CORNER_TOP_LEFT,
        geographic_crs: CRS = WGS84_CRS,
        transform_backend: Optional[str] = None,
    ) -> "Tms":
        """
        Build a regular grid over an extent

        Zoom 0 has `matrix_scale` tiles; each following level multiplies
        the matrix size by `decimation_base`.

        Args:
            extent: (left, bottom, right, top) of the grid
            crs: Grid CRS (CRS, "EPSG:n", URI or EPSG code)
            tile_width: Tile width in pixels
            tile_height: Tile height in pixels
            matrix_scale: Number of tiles (columns, rows) at zoom 0
            extent_crs: CRS of `extent` when it differs from `crs`
            minzoom: First zoom level
            maxzoom: Last zoom level
            title: Grid title
            id: Grid identifier
            ordered_axes: Axis names of the CRS, e.g. ("Lat", "Lon")
            screen_pixel_size: Rendering pixel size in meters
            decimation_base: Ratio between the matrix sizes of two levels
            corner_of_origin: "topLeft" or "bottomLeft"
            geographic_crs: CRS used by the geographic operations
            transform_backend: Transform backend used for `extent_crs` and by
                the returned grid

        Raises:
            InvalidDefinitionError: If the parameters do not make a valid grid

        Examples:
            >>> tms = Tms.custom([-180.0, -90.0, 180.0, 90.0], "EPSG:4326",
            ...                  matrix_scale=[2, 1], maxzoom=5)
            >>> tms.matrix(1).matrix_width
            4
        """
        crs = CRS.from_user_input(crs)
        extent_crs = CRS.from_user_input(extent_crs) if extent_crs is not None else None
        if decimation_base <= 1:
            raise InvalidDefinitionError(
                "Custom TileMatrixSet requires a decimation base that is greater than 1"
            )

        bbox = cls._extent_bbox(extent, crs, extent_crs, transform_backend)
        inverted = axes_inverted(tuple(ordered_axes) if ordered_axes else None)
        y_origin = bbox.bottom if corner_of_origin == CORNER_BOTTOM_LEFT else bbox.top
        origin = cls._axis_order(bbox.left, y_origin, inverted)

        width = abs(bbox.right - bbox.left)
        height = abs(bbox.top - bbox.bottom)
        mpu = meters_per_unit(crs)

        matrices = []
        for zoom in range(minzoom, maxzoom + 1):
            factor = decimation_base**zoom
            res = max(
                width / (tile_width * matrix_scale[0]) / factor,
                height / (tile_height * matrix_scale[1]) / factor,
            )
            matrices.append(
                TileMatrix(
                    id=str(zoom),
                    scale_denominator=res * mpu / screen_pixel_size,
                    cell_size=res,
                    point_of_origin=origin,
                    tile_width=tile_width,
                    tile_height=tile_height,
                    matrix_width=matrix_scale[0] * factor,
                    matrix_height=matrix_scale[1] * factor,
                    corner_of_origin=corner_of_origin,
                )
            )

        axes = tuple(ordered_axes) if ordered_axes else None
        definition = TileMatrixSet(
            id=id,
            crs=crs,
            tile_matrices=tuple(matrices),
            title=title or "Custom TileMatrixSet",
            ordered_axes=axes,
            bounding_box=BoundingBox2D(
                lower_left=cls._axis_order(bbox.left, bbox.bottom, inverted),
                upper_right=cls._axis_order(bbox.right, bbox.top, inverted),
                crs=crs,
                ordered_axes=axes,
            ),
        )
        logger.debug("Built custom TileMatrixSet %s with %d levels", id, len(matrices))
        return cls(definition, geographic_crs=geographic_crs, transform_backend=transform_backend)

    @classmethod
    def custom_resolutions(
        cls,
        extent: Sequence[float],
        crs: Any,
        resolutions: Sequence[Union[float, tuple[int, float]]],
        tile_width: int = 256,
        tile_height: int = 256,
        extent_crs: Any = None,
        title: Optional[str] = None,
        id: str = "Custom",
        ordered_axes: Optional[Sequence[str]] = None,
        geographic_crs: CRS = WGS84_CRS,
        transform_backend: Optional[str] = None,
    ) -> "Tms":
        """
        Build a grid from a list of resolutions

        The origin is the top left corner of the extent; each level gets as
        many tiles as needed to cover the extent.

        Args:
            extent: (left, bottom, right, top) of the grid
            crs: Grid CRS
            resolutions: Resolution per level, either plain values (zoom is
                the list index) or (zoom, resolution) pairs
            tile_width: Tile width in pixels
            tile_height: Tile height in pixels
            extent_crs: CRS of `extent` when it differs from `crs`
            title: Grid title
            id: Grid identifier
            ordered_axes: Axis names of the CRS
            geographic_crs: CRS used by the geographic operations
            transform_backend: Transform backend used for `extent_crs` and by
                the returned grid

        Raises:
            InvalidDefinitionError: If the resolutions are not positive and
                strictly decreasing with zoom, or zooms repeat
        """
        crs = CRS.from_user_input(crs)
        extent_crs = CRS.from_user_input(extent_crs) if extent_crs is not None else None

        bbox = cls._extent_bbox(extent, crs, extent_crs, transform_backend)
        inverted = axes_inverted(tuple(ordered_axes) if ordered_axes else None)
        origin = cls._axis_order(bbox.left, bbox.top, inverted)
        mpu = meters_per_unit(crs)

        matrices = []
        for index, item in enumerate(resolutions):
            if isinstance(item, (tuple, list)):
                zoom, res = item
            else:
                zoom, res = index, item
            if not res > 0:
                raise InvalidDefinitionError(f"Resolution of zoom {zoom} must be positive, got {res}")

            unit_width = tile_width * res
            unit_height = tile_height * res
            matrices.append(
                TileMatrix(
                    id=str(zoom),
                    scale_denominator=res * mpu / SCREEN_PIXEL_SIZE,
                    cell_size=res,
                    point_of_origin=origin,
                    tile_width=tile_width,
                    tile_height=tile_height,
                    matrix_width=math.ceil((bbox.width - 0.01 * unit_width) / unit_width),
                    matrix_height=math.ceil((bbox.height - 0.01 * unit_height) / unit_height),
                )
            )

        axes = tuple(ordered_axes) if ordered_axes else None
        definition = TileMatrixSet(
            id=id,
            crs=crs,
            tile_matrices=tuple(matrices),
            title=title or "Custom TileMatrixSet",
            ordered_axes=axes,
            bounding_box=BoundingBox2D(
                lower_left=cls._axis_order(bbox.left, bbox.bottom, inverted),
                upper_right=cls._axis_order(bbox.right, bbox.top, inverted),
                crs=crs,
                ordered_axes=axes,
            ),
        )
        return cls(definition, geographic_crs=geographic_crs, transform_backend=transform_backend)
