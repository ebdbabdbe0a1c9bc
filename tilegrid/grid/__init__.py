"""
TileGrid Grid Module

TileMatrixSet model, tile <-> coordinate operations and tile addressing.
"""

from tilegrid.grid.base import TileGrid
from tilegrid.grid.hilbert import HilbertRange
from tilegrid.grid.iterator import TileRange
from tilegrid.grid.models import BoundingBox2D, TileMatrix, TileMatrixSet
from tilegrid.grid.tms import Tms
from tilegrid.grid.zoom import ZoomLevelStrategy

__all__ = [
    "BoundingBox2D",
    "HilbertRange",
    "TileGrid",
    "TileMatrix",
    "TileMatrixSet",
    "TileRange",
    "Tms",
    "ZoomLevelStrategy",
]
