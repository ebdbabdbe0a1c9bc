"""
Coordinate Transformer Protocol

Abstract transformation interface for multiple backends (closed-form, rasterio).
"""

from typing import Protocol, Tuple

from tilegrid.core.crs import CRS


class Transformer(Protocol):
    """
    Project coordinates from one CRS to another

    Implementations are created for a fixed (source, target) pair and keep no
    other state, so a single instance can be shared freely.
    Coordinates are always in x/y (lon/lat) order regardless of the CRS axis
    order.
    """

    source: CRS
    target: CRS

    def transform(self, x: float, y: float) -> Tuple[float, float]:
        """
        Transform a single point

        Raises:
            UnsupportedTransformError: If the backend cannot project the point
        """
        ...

    def transform_bounds(
        self, left: float, bottom: float, right: float, top: float
    ) -> Tuple[float, float, float, float]:
        """
        Transform a bounding box

        Returns:
            (left, bottom, right, top) in the target CRS
        """
        ...
