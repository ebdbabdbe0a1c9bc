"""
Tile Grid Protocol

Tile <-> coordinate interface shared by tile grids.
"""

from typing import Protocol, runtime_checkable

from tilegrid.core.types import BoundingBox, Tile


@runtime_checkable
class TileGrid(Protocol):
    """
    Tile grid over a coordinate reference system

    A grid is a pyramid of zoom levels, each a regular matrix of tiles.
    Native operations (`xy_*`) use the grid CRS; the others use the
    geographic CRS.
    """

    def xy_tile(self, x: float, y: float, zoom: int) -> Tile:
        """
        Get the tile containing a point in the grid CRS

        Args:
            x: Easting in the grid CRS
            y: Northing in the grid CRS
            zoom: Zoom level

        Returns:
            Tile (indices may lie outside of the matrix)
        """
        ...

    def tile(self, lon: float, lat: float, zoom: int) -> Tile:
        """
        Get the tile containing a geographic point

        Args:
            lon: Longitude in decimal degrees
            lat: Latitude in decimal degrees
            zoom: Zoom level
        """
        ...

    def xy_bounds(self, tile: Tile) -> BoundingBox:
        """
        Get the bounds of a tile in the grid CRS

        Returns:
            Bounding box as (left, bottom, right, top)
        """
        ...

    def bounds(self, tile: Tile) -> BoundingBox:
        """Get the bounds of a tile in the geographic CRS"""
        ...

    def zoom_for_res(self, res: float) -> int:
        """
        Get the zoom level that best matches a resolution

        Args:
            res: Resolution in grid CRS units per pixel

        Examples:
            156543.03 (Web Mercator) → 0
        """
        ...
