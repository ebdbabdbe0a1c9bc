"""
Tests for Hilbert (PMTiles) tile ids
"""

import pytest

from tilegrid.core.types import Tile
from tilegrid.grid.hilbert import HilbertRange, base_id, id_to_tile, tile_id


class TestTileId:
    """Test tile_id and id_to_tile"""

    @pytest.mark.parametrize(
        "tile,expected",
        [
            (Tile(0, 0, 0), 0),
            (Tile(1, 0, 1), 4),
            (Tile(1, 3, 2), 11),
            (Tile(3, 0, 3), 26),
            (Tile(0, 0, 20), 366503875925),
            (Tile(0, 0, 21), 1466015503701),
            (Tile(0, 0, 28), 24019198012642645),
        ],
    )
    def test_tile_id(self, tile, expected):
        assert tile_id(tile) == expected
        assert id_to_tile(expected) == tile

    def test_base_id(self):
        """Test zoom levels start after the full pyramid above them"""
        assert [base_id(z) for z in range(5)] == [0, 1, 5, 21, 85]

    def test_zoom_3_roundtrip(self):
        """Test every zoom 3 id maps back to its tile"""
        ids = {tile_id(Tile(x, y, 3)) for x in range(8) for y in range(8)}
        assert ids == set(range(21, 85))
        for h in ids:
            assert tile_id(id_to_tile(h)) == h

    def test_negative(self):
        with pytest.raises(ValueError):
            id_to_tile(-1)


class TestHilbertRange:
    """Test HilbertRange iteration"""

    def test_order(self):
        tiles = [tuple(t) for t in HilbertRange(0, 2)]
        assert tiles == [
            (0, 0, 0),
            (0, 0, 1),
            (0, 1, 1),
            (1, 1, 1),
            (1, 0, 1),
            (0, 0, 2),
            (1, 0, 2),
            (1, 1, 2),
            (0, 1, 2),
            (0, 2, 2),
            (0, 3, 2),
            (1, 3, 2),
            (1, 2, 2),
            (2, 2, 2),
            (2, 3, 2),
            (3, 3, 2),
            (3, 2, 2),
            (3, 1, 2),
            (2, 1, 2),
            (2, 0, 2),
            (3, 0, 2),
        ]

    def test_single_zoom(self):
        assert [tuple(t) for t in HilbertRange(1, 1)] == [(0, 0, 1), (0, 1, 1), (1, 1, 1), (1, 0, 1)]

    def test_len(self):
        assert len(HilbertRange(0, 2)) == 21
        assert len(list(HilbertRange(0, 2))) == 21

    def test_empty(self):
        """Test an inverted zoom range is empty"""
        assert list(HilbertRange(21, 20)) == []
        assert len(HilbertRange(21, 20)) == 0

    def test_ids_follow_iteration(self):
        """Test iteration order is the id order"""
        assert [tile_id(t) for t in HilbertRange(0, 3)] == list(range(85))

    def test_tms_hilbert(self, mercator):
        assert mercator.hilbert_id((1, 3, 2)) == 11
        assert mercator.hilbert_to_tile(26) == Tile(3, 0, 3)
