"""
TileGrid - OGC TileMatrixSet tile grid calculations

Converts between coordinates, zoom levels and tile indices for named or
custom OGC Two Dimensional Tile Matrix Set grids.

Quick Start:
    >>> import tilegrid
    >>>
    >>> tms = tilegrid.lookup("WebMercatorQuad")
    >>> tile = tms.tile(159.31, -42.0, 4)  # Tile(x=15, y=10, z=4)
    >>> tms.bounds(tile)
    >>>
    >>> # All tiles of a box, zoom 0 to 5
    >>> for t in tms.tiles(tms.xy_bbox, 0, 6):
    ...     print(t)
"""

from tilegrid.core import (
    CRS,
    BoundingBox,
    Coords,
    InvalidDefinitionError,
    InvalidZoomError,
    NotFoundError,
    OutOfRangeError,
    QuadKeyError,
    Tile,
    TileGridError,
    UnsupportedTransformError,
    ZoomNotFoundError,
)
from tilegrid.grid import (
    HilbertRange,
    TileMatrix,
    TileMatrixSet,
    TileRange,
    Tms,
    ZoomLevelStrategy,
)
from tilegrid.registry import TileMatrixSets, get_registry, lookup, register
from tilegrid.transform import lonlat_to_merc, merc_to_lonlat

__version__ = "0.1.0"

__all__ = [
    "BoundingBox",
    "CRS",
    "Coords",
    "HilbertRange",
    "InvalidDefinitionError",
    "InvalidZoomError",
    "NotFoundError",
    "OutOfRangeError",
    "QuadKeyError",
    "Tile",
    "TileGridError",
    "TileMatrix",
    "TileMatrixSet",
    "TileMatrixSets",
    "TileRange",
    "Tms",
    "UnsupportedTransformError",
    "ZoomLevelStrategy",
    "ZoomNotFoundError",
    "__version__",
    "get_registry",
    "lookup",
    "lonlat_to_merc",
    "merc_to_lonlat",
    "register",
]
