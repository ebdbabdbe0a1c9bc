"""
Coordinate and extent primitives

Plain value types shared by every module. No CRS is attached: the caller
knows which coordinate reference system the numbers belong to.
"""

from dataclasses import dataclass
from typing import Iterator, Optional


@dataclass(frozen=True)
class Coords:
    """
    A x,y coordinates pair

    Attributes:
        x: Horizontal coordinate in the caller's CRS units
        y: Vertical coordinate in the caller's CRS units

    Examples:
        >>> Coords(-90.3, 10.5)
        Coords(x=-90.3, y=10.5)
    """

    x: float
    y: float

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y


@dataclass(frozen=True)
class BoundingBox:
    """
    A left, bottom, right, top box

    Zero-extent boxes are legal. NaN and infinite values are carried through
    untouched by every operation.

    Examples:
        >>> BoundingBox(-180.0, -90.0, 180.0, 90.0).center
        Coords(x=0.0, y=0.0)
    """

    left: float
    bottom: float
    right: float
    top: float

    def __iter__(self) -> Iterator[float]:
        yield self.left
        yield self.bottom
        yield self.right
        yield self.top

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.top - self.bottom

    @property
    def center(self) -> Coords:
        return Coords((self.left + self.right) / 2, (self.bottom + self.top) / 2)

    def contains(self, point: Coords) -> bool:
        """Check if a point lies inside the box (edges included)"""
        x, y = point
        return self.left <= x <= self.right and self.bottom <= y <= self.top

    def intersects(self, other: "BoundingBox") -> bool:
        """Check if two boxes overlap (touching edges count)"""
        return (
            self.left <= other.right
            and self.right >= other.left
            and self.bottom <= other.top
            and self.top >= other.bottom
        )

    def union(self, other: "BoundingBox") -> "BoundingBox":
        """Smallest box covering both boxes"""
        return BoundingBox(
            min(self.left, other.left),
            min(self.bottom, other.bottom),
            max(self.right, other.right),
            max(self.top, other.top),
        )

    def intersection(self, other: "BoundingBox") -> Optional["BoundingBox"]:
        """
        Overlapping part of two boxes

        Returns:
            The shared box, or None when the boxes are disjoint
        """
        if not self.intersects(other):
            return None
        return BoundingBox(
            max(self.left, other.left),
            max(self.bottom, other.bottom),
            min(self.right, other.right),
            min(self.top, other.top),
        )


@dataclass(frozen=True)
class Tile:
    """
    TileMatrixSet X,Y,Z tile indices

    Indices are not checked against any matrix at construction time;
    see Tms.check_tile for that.

    Examples:
        >>> x, y, z = Tile(486, 332, 10)
    """

    x: int
    y: int
    z: int

    def __iter__(self) -> Iterator[int]:
        yield self.x
        yield self.y
        yield self.z

    def __str__(self) -> str:
        return f"{self.z}/{self.x}/{self.y}"
