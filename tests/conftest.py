"""
TileGrid Test Configuration

Shared pytest fixtures for all tests.
"""

import pytest

from tilegrid.grid.tms import Tms
from tilegrid.registry import TileMatrixSets


@pytest.fixture
def registry():
    """Fresh registry with the built-in grids only"""
    return TileMatrixSets()


@pytest.fixture
def mercator(registry) -> Tms:
    """Standard Web Mercator grid"""
    return registry.lookup("WebMercatorQuad")


@pytest.fixture
def crs84(registry) -> Tms:
    """World CRS84 grid (2x1 tiles at zoom 0)"""
    return registry.lookup("WorldCRS84Quad")


@pytest.fixture
def wgs1984(registry) -> Tms:
    """EPSG:4326 world grid with latitude first axis order"""
    return registry.lookup("WGS1984Quad")


@pytest.fixture
def laea(registry) -> Tms:
    """European LAEA grid, restricted to the closed-form transforms"""
    return Tms(registry.get("EuropeanETRS89_LAEAQuad"), transform_backend="basic")


@pytest.fixture
def sample_tile():
    """Standard test tile"""
    return (486, 332, 10)
