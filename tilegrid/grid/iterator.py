"""
Tile range iteration

A TileRange lists the tiles covering one or more boxes over a range of
zoom levels. Tile limits are computed per zoom while iterating, so a range
over deep zooms costs nothing until it is consumed.
"""

from typing import TYPE_CHECKING, Iterator, Sequence

from tilegrid.core.types import BoundingBox, Tile

if TYPE_CHECKING:
    from tilegrid.grid.tms import Tms


class TileRange:
    """
    Lazy, restartable sequence of tiles

    Zoom levels run from `z_min` (included) to `z_max` (excluded). A range
    with `z_min >= z_max` is empty.

    Tiles are yielded zoom by zoom, column by column, row by row.

    Every zoom of the range is looked up when the range is built, so a
    missing level fails before the first tile is produced.

    Attributes:
        tms: Tms the tiles belong to
        bboxes: Boxes to cover, already clipped to the grid extent
        geographic: True if the boxes are in the geographic CRS
        truncate: Clamp geographic coordinates to the grid bounds

    Raises:
        ZoomNotFoundError: If a zoom of the range is not in the set

    Examples:
        >>> tiles = tms.tiles(tms.xy_bbox, 0, 2)
        >>> len(tiles)
        5
        >>> [str(t) for t in tiles][:2]
        ['0/0/0', '1/0/0']
    """

    def __init__(
        self,
        tms: "Tms",
        bboxes: Sequence[BoundingBox],
        z_min: int,
        z_max: int,
        geographic: bool = False,
        truncate: bool = False,
    ):
        self.tms = tms
        self.bboxes = tuple(bboxes)
        self.z_min = z_min
        self.z_max = z_max
        self.geographic = geographic
        self.truncate = truncate
        for zoom in self.zooms:
            tms.matrix(zoom)

    @property
    def zooms(self) -> range:
        return range(self.z_min, self.z_max)

    def limits(self, zoom: int) -> list[tuple[int, int, int, int]]:
        """(x_min, x_max, y_min, y_max) for each box at a zoom level"""
        return [
            self.tms.tile_limits(bbox, zoom, geographic=self.geographic, truncate=self.truncate)
            for bbox in self.bboxes
        ]

    def __iter__(self) -> Iterator[Tile]:
        for zoom in self.zooms:
            for x_min, x_max, y_min, y_max in self.limits(zoom):
                for x in range(x_min, x_max + 1):
                    for y in range(y_min, y_max + 1):
                        yield Tile(x, y, zoom)

    def __len__(self) -> int:
        count = 0
        for zoom in self.zooms:
            for x_min, x_max, y_min, y_max in self.limits(zoom):
                if x_max >= x_min and y_max >= y_min:
                    count += (x_max - x_min + 1) * (y_max - y_min + 1)
        return count

    def __repr__(self):
        return (
            f"TileRange({self.tms.identifier}, zooms=[{self.z_min}, {self.z_max}), "
            f"bboxes={len(self.bboxes)})"
        )
