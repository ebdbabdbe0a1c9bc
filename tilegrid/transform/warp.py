"""
General coordinate transformations using rasterio

Backs every CRS pair the closed-form formulas do not cover. rasterio is
optional at runtime: without it, grids still load and every native-CRS
operation works; only the transforming calls fail.
"""

import functools
import logging
from typing import Optional, Tuple

from tilegrid.core.crs import CRS
from tilegrid.core.exceptions import UnsupportedTransformError

logger = logging.getLogger(__name__)

try:
    import rasterio.crs
    import rasterio.warp
    from rasterio.errors import CRSError, RasterioError

    RASTERIO_AVAILABLE = True
except ImportError:
    RASTERIO_AVAILABLE = False


def _require_rasterio():
    if not RASTERIO_AVAILABLE:
        raise UnsupportedTransformError(
            "rasterio is required for this transformation. Install with: pip install rasterio"
        )


@functools.lru_cache(maxsize=128)
def _rasterio_crs(crs: CRS) -> "rasterio.crs.CRS":
    _require_rasterio()
    try:
        if crs.srid is not None and (crs.authority == "EPSG" or crs.is_geographic):
            return rasterio.crs.CRS.from_epsg(crs.srid)
        return rasterio.crs.CRS.from_user_input(crs.to_string())
    except CRSError as e:
        raise UnsupportedTransformError(f"Unknown CRS `{crs}`: {e}") from e


@functools.lru_cache(maxsize=128)
def crs_linear_unit(crs: CRS) -> Optional[Tuple[str, Optional[float]]]:
    """
    Linear unit of a CRS

    Returns:
        (unit name, meters per unit) with the factor None for unknown units,
        ("degree", None) for geographic CRS, or None when rasterio is not
        available or does not know the CRS
    """
    if not RASTERIO_AVAILABLE:
        return None
    try:
        rcrs = _rasterio_crs(crs)
    except UnsupportedTransformError:
        logger.debug("Unit lookup skipped, rasterio does not know %s", crs)
        return None
    if rcrs.is_geographic:
        return "degree", None
    try:
        name, factor = rcrs.linear_units_factor
    except CRSError:
        return None
    return name, factor


class WarpTransformer:
    """
    Transformer for any CRS pair rasterio (GDAL/PROJ) understands

    Examples:
        >>> t = WarpTransformer(CRS.from_epsg(4326), CRS.from_epsg(32631))
        >>> x, y = t.transform(3.0, 0.0)
    """

    # Points added along each edge when transforming a box
    DENSIFY_PTS = 21

    def __init__(self, source: CRS, target: CRS):
        self.source = source
        self.target = target
        self._src = _rasterio_crs(source)
        self._dst = _rasterio_crs(target)

    def transform(self, x: float, y: float) -> Tuple[float, float]:
        try:
            xs, ys = rasterio.warp.transform(self._src, self._dst, [x], [y])
        except (CRSError, RasterioError) as e:
            raise UnsupportedTransformError(
                f"Transformation from `{self.source}` to `{self.target}` failed: {e}"
            ) from e
        return xs[0], ys[0]

    def transform_bounds(
        self, left: float, bottom: float, right: float, top: float
    ) -> Tuple[float, float, float, float]:
        try:
            return tuple(
                rasterio.warp.transform_bounds(
                    self._src,
                    self._dst,
                    left,
                    bottom,
                    right,
                    top,
                    densify_pts=self.DENSIFY_PTS,
                )
            )
        except (CRSError, RasterioError) as e:
            raise UnsupportedTransformError(
                f"Transformation from `{self.source}` to `{self.target}` failed: {e}"
            ) from e

    def __repr__(self):
        return f"WarpTransformer({self.source} -> {self.target})"
