"""
Hilbert tile ids

PMTiles v3 numbering: tiles of a full quad pyramid are numbered zoom by
zoom, and within a zoom along a Hilbert curve. The id of (0, 0, 0) is 0,
zoom 1 starts at 1, zoom 2 at 5, and so on.
"""

from typing import Iterator, Tuple

from tilegrid.core.types import Tile


def base_id(zoom: int) -> int:
    """Number of tiles in all zoom levels below `zoom`"""
    return (4**zoom - 1) // 3


def _rotate(n: int, x: int, y: int, rx: int, ry: int) -> Tuple[int, int]:
    if ry == 0:
        if rx == 1:
            x = n - 1 - x
            y = n - 1 - y
        x, y = y, x
    return x, y


def xy_to_hilbert(x: int, y: int, zoom: int) -> int:
    """Position of (x, y) along the Hilbert curve filling a 2**zoom square"""
    n = 1 << zoom
    d = 0
    s = n >> 1
    while s > 0:
        rx = 1 if x & s else 0
        ry = 1 if y & s else 0
        d += s * s * ((3 * rx) ^ ry)
        x, y = _rotate(n, x, y, rx, ry)
        s >>= 1
    return d


def hilbert_to_xy(d: int, zoom: int) -> Tuple[int, int]:
    """(x, y) at position `d` of the Hilbert curve filling a 2**zoom square"""
    n = 1 << zoom
    x = y = 0
    t = d
    s = 1
    while s < n:
        rx = 1 & (t // 2)
        ry = 1 & (t ^ rx)
        x, y = _rotate(s, x, y, rx, ry)
        x += s * rx
        y += s * ry
        t //= 4
        s <<= 1
    return x, y


def tile_id(tile: Tile) -> int:
    """
    Hilbert id of a tile

    Examples:
        >>> tile_id(Tile(1, 0, 1))
        4
        >>> tile_id(Tile(0, 0, 20))
        366503875925
    """
    if tile.z == 0:
        return 0
    return base_id(tile.z) + xy_to_hilbert(tile.x, tile.y, tile.z)


def id_to_tile(h: int) -> Tile:
    """
    Tile of a Hilbert id

    Raises:
        ValueError: If the id is negative
    """
    if h < 0:
        raise ValueError(f"Hilbert id must be positive, got {h}")
    zoom = 0
    while h >= base_id(zoom + 1):
        zoom += 1
    x, y = hilbert_to_xy(h - base_id(zoom), zoom)
    return Tile(x, y, zoom)


class HilbertRange:
    """
    Every tile of a quad pyramid, in Hilbert id order

    Both zoom bounds are included; `z_min > z_max` gives no tiles.
    The range can be iterated any number of times.

    Examples:
        >>> [str(t) for t in HilbertRange(1, 1)]
        ['1/0/0', '1/0/1', '1/1/1', '1/1/0']
    """

    def __init__(self, z_min: int, z_max: int):
        self.z_min = z_min
        self.z_max = z_max

    def __iter__(self) -> Iterator[Tile]:
        for zoom in range(self.z_min, self.z_max + 1):
            for d in range(4**zoom):
                x, y = hilbert_to_xy(d, zoom)
                yield Tile(x, y, zoom)

    def __len__(self) -> int:
        if self.z_min > self.z_max:
            return 0
        return base_id(self.z_max + 1) - base_id(self.z_min)

    def __repr__(self):
        return f"HilbertRange({self.z_min}, {self.z_max})"
