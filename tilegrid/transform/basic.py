"""
Closed-form transformations

Spherical Mercator formulas for the WGS84 <-> Web Mercator pair. No projection
library is needed for grids in these two CRS.

Latitudes are not clamped: +-90 degrees project to +-inf and values close to
the poles to very large northings.
"""

import math
from typing import Optional, Tuple

from tilegrid.core.crs import CRS
from tilegrid.core.exceptions import UnsupportedTransformError
from tilegrid.core.types import Coords

# Spherical Mercator earth radius in meters
EARTH_RADIUS_M = 6378137.0

MERCATOR_SRIDS = {3857, 900913, 3785, 102100}


def lonlat_to_merc(lon: float, lat: float) -> Coords:
    """
    Returns the Spherical Mercator (x, y) in meters

    Examples:
        >>> lonlat_to_merc(180.0, 0.0).x
        20037508.342789244
    """
    x = EARTH_RADIUS_M * math.radians(lon)
    if lat <= -90:
        y = -math.inf
    elif lat >= 90:
        y = math.inf
    else:
        y = EARTH_RADIUS_M * math.log(math.tan((math.pi * 0.25) + (0.5 * math.radians(lat))))
    return Coords(x, y)


def merc_to_lonlat(x: float, y: float) -> Coords:
    """Returns the geographic (lon, lat) in degrees of a Spherical Mercator point"""
    lon = math.degrees(x / EARTH_RADIUS_M)
    lat = math.degrees(math.atan(math.sinh(y / EARTH_RADIUS_M)))
    return Coords(lon, lat)


def merc_tile_ul(x: int, y: int, zoom: int) -> Coords:
    """
    Geographic (lon, lat) of the upper left corner of a Web Mercator quad tile

    Computed from the tile indices alone, without going through meters.

    Examples:
        >>> merc_tile_ul(486, 332, 10)
        Coords(x=-9.140625, y=53.33087298301705)
    """
    n = 2.0**zoom
    lon = x / n * 360.0 - 180.0
    lat = math.degrees(math.atan(math.sinh(math.pi * (1 - 2 * y / n))))
    return Coords(lon, lat)


def is_web_mercator(crs: CRS) -> bool:
    return crs.authority == "EPSG" and crs.srid in MERCATOR_SRIDS


def is_wgs84(crs: CRS) -> bool:
    return crs.srid == 4326


class IdentityTransformer:
    """Transformer between a CRS and itself, or two names of the same CRS"""

    def __init__(self, source: CRS, target: Optional[CRS] = None):
        self.source = source
        self.target = target or source

    def transform(self, x: float, y: float) -> Tuple[float, float]:
        return x, y

    def transform_bounds(
        self, left: float, bottom: float, right: float, top: float
    ) -> Tuple[float, float, float, float]:
        return left, bottom, right, top

    def __repr__(self):
        return f"IdentityTransformer({self.source})"


class BasicTransformer:
    """
    Closed-form WGS84 <-> Web Mercator transformer

    Both directions are monotonic per axis, so transforming the two corners
    of a box gives its exact transformed extent.

    Raises:
        UnsupportedTransformError: For any other CRS pair
    """

    def __init__(self, source: CRS, target: CRS):
        if is_wgs84(source) and is_web_mercator(target):
            self._forward = True
        elif is_web_mercator(source) and is_wgs84(target):
            self._forward = False
        else:
            raise UnsupportedTransformError(
                f"Unsupported transformation from `{source}` to `{target}`: "
                "closed-form transforms only cover WGS84 <-> Web Mercator"
            )
        self.source = source
        self.target = target

    @classmethod
    def supports(cls, source: CRS, target: CRS) -> bool:
        return (is_wgs84(source) and is_web_mercator(target)) or (
            is_web_mercator(source) and is_wgs84(target)
        )

    def transform(self, x: float, y: float) -> Tuple[float, float]:
        point = lonlat_to_merc(x, y) if self._forward else merc_to_lonlat(x, y)
        return point.x, point.y

    def transform_bounds(
        self, left: float, bottom: float, right: float, top: float
    ) -> Tuple[float, float, float, float]:
        minx, miny = self.transform(left, bottom)
        maxx, maxy = self.transform(right, top)
        return minx, miny, maxx, maxy

    def __repr__(self):
        return f"BasicTransformer({self.source} -> {self.target})"

