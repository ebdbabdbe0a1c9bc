"""
TileGrid Core Module

Value types, CRS identifiers and exceptions.
"""

from tilegrid.core.crs import CRS, WEB_MERCATOR_CRS, WGS84_CRS, meters_per_unit
from tilegrid.core.exceptions import (
    InvalidDefinitionError,
    InvalidZoomError,
    NotFoundError,
    OutOfRangeError,
    QuadKeyError,
    TileGridError,
    UnsupportedTransformError,
    ZoomNotFoundError,
)
from tilegrid.core.types import BoundingBox, Coords, Tile

__all__ = [
    # Types
    "BoundingBox",
    "Coords",
    "Tile",
    # CRS
    "CRS",
    "WEB_MERCATOR_CRS",
    "WGS84_CRS",
    "meters_per_unit",
    # Exceptions
    "TileGridError",
    "NotFoundError",
    "ZoomNotFoundError",
    "OutOfRangeError",
    "UnsupportedTransformError",
    "InvalidDefinitionError",
    "InvalidZoomError",
    "QuadKeyError",
]
