"""
Quadkey addressing

Bing Maps style quadkeys for grids that form a regular quad tree.
"""

from typing import Sequence

from tilegrid.core.exceptions import QuadKeyError
from tilegrid.core.types import Tile
from tilegrid.grid.models import TileMatrix


def _is_power_of_two(number: int) -> bool:
    return number > 0 and (number & (number - 1)) == 0


def check_quadkey_support(matrices: Sequence[TileMatrix]) -> bool:
    """
    Check if a list of matrices forms a quad tree

    Every level must be square with a power of two width, and each level
    must be twice as wide as the previous one.
    """
    return all(
        m.matrix_width == m.matrix_height
        and _is_power_of_two(m.matrix_width)
        and m.matrix_width * 2 == matrices[i + 1].matrix_width
        for i, m in enumerate(matrices[:-1])
    )


def zoom_offset(minzoom: int, min_matrix: TileMatrix) -> int:
    """
    Zoom level whose quadkey is the empty string

    0 for grids with a single tile at zoom 0. A grid starting at zoom 2
    with a 1x1 matrix has offset 2; one starting at zoom 2 with a 4x4
    matrix has offset 0.
    """
    return minzoom - (min_matrix.matrix_width.bit_length() - 1)


def tile_to_quadkey(tile: Tile, offset: int = 0) -> str:
    """
    Get the quadkey of a tile

    Args:
        tile: Tile
        offset: Zoom level of the empty quadkey (see `zoom_offset`)

    Examples:
        >>> tile_to_quadkey(Tile(486, 332, 10))
        '0313102310'
    """
    digits = []
    for i in range(tile.z - offset, 0, -1):
        digit = 0
        mask = 1 << (i - 1)
        if tile.x & mask:
            digit += 1
        if tile.y & mask:
            digit += 2
        digits.append(str(digit))
    return "".join(digits)


def quadkey_to_tile(quadkey: str, offset: int = 0) -> Tile:
    """
    Get the tile corresponding to a quadkey

    An empty quadkey is the tile (0, 0) of zoom `offset`.

    Raises:
        QuadKeyError: If the quadkey contains a digit other than 0-3
    """
    if len(quadkey) == 0:
        return Tile(0, 0, offset)

    xtile, ytile = 0, 0
    for i, digit in enumerate(reversed(quadkey)):
        mask = 1 << i
        if digit == "1":
            xtile = xtile | mask
        elif digit == "2":
            ytile = ytile | mask
        elif digit == "3":
            xtile = xtile | mask
            ytile = ytile | mask
        elif digit != "0":
            raise QuadKeyError(f"Unexpected quadkey digit: {digit!r}")

    return Tile(xtile, ytile, len(quadkey) + offset)
