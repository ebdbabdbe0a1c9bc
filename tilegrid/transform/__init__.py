"""
TileGrid Transform Module

Coordinate transformations between a grid's native CRS and geographic CRS.
"""

import logging
from typing import Optional

from tilegrid.config import get_settings
from tilegrid.core.crs import CRS
from tilegrid.core.exceptions import UnsupportedTransformError
from tilegrid.transform.base import Transformer
from tilegrid.transform.basic import (
    BasicTransformer,
    IdentityTransformer,
    is_wgs84,
    lonlat_to_merc,
    merc_tile_ul,
    merc_to_lonlat,
)
from tilegrid.transform.warp import RASTERIO_AVAILABLE, WarpTransformer

logger = logging.getLogger(__name__)


def get_transformer(source: CRS, target: CRS, backend: Optional[str] = None) -> Transformer:
    """
    Create a Transformer for a CRS pair

    Args:
        source: CRS of the input coordinates
        target: CRS of the output coordinates
        backend: "auto", "basic" or "rasterio" (default: TILEGRID_TRANSFORM_BACKEND)

    Returns:
        Transformer instance

    Raises:
        UnsupportedTransformError: If no transform path exists for the pair
    """
    backend = backend or get_settings().transform_backend

    if source == target or (is_wgs84(source) and is_wgs84(target)):
        return IdentityTransformer(source, target)

    if backend != "rasterio" and BasicTransformer.supports(source, target):
        return BasicTransformer(source, target)

    if backend == "basic":
        raise UnsupportedTransformError(
            f"Unsupported transformation from `{source}` to `{target}` with the basic backend"
        )

    if not RASTERIO_AVAILABLE:
        logger.debug("No general transform backend for %s -> %s", source, target)
        raise UnsupportedTransformError(
            f"Unsupported transformation from `{source}` to `{target}`: "
            "install rasterio for transformations outside WGS84 <-> Web Mercator"
        )

    logger.debug("Using rasterio transformer for %s -> %s", source, target)
    return WarpTransformer(source, target)


__all__ = [
    "BasicTransformer",
    "IdentityTransformer",
    "RASTERIO_AVAILABLE",
    "Transformer",
    "WarpTransformer",
    "get_transformer",
    "lonlat_to_merc",
    "merc_tile_ul",
    "merc_to_lonlat",
]
