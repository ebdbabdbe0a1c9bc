"""
TileGrid Exceptions

Exception hierarchy for error handling.
"""


class TileGridError(Exception):
    """Base exception for TileGrid"""

    pass


class NotFoundError(TileGridError, KeyError):
    """Unknown TileMatrixSet name"""

    def __str__(self):
        # KeyError quotes its message, keep it readable
        return str(self.args[0]) if self.args else ""


class ZoomNotFoundError(TileGridError, KeyError):
    """Zoom level not defined in the TileMatrixSet"""

    def __init__(self, zoom: int, identifier: str = ""):
        self.zoom = zoom
        self.identifier = identifier
        msg = f"TileMatrix not found for zoom level {zoom}"
        if identifier:
            msg += f" in {identifier}"
        super().__init__(msg)

    def __str__(self):
        return str(self.args[0])


class OutOfRangeError(TileGridError, ValueError):
    """Tile index outside of the matrix width/height"""

    pass


class UnsupportedTransformError(TileGridError):
    """No coordinate transformation available between two CRS"""

    pass


class InvalidDefinitionError(TileGridError, ValueError):
    """TileMatrixSet definition violates the model invariants"""

    pass


class InvalidZoomError(TileGridError, ValueError):
    """Zoom argument is invalid for the requested operation"""

    pass


class QuadKeyError(TileGridError):
    """Quadkeys unsupported by the grid or quadkey malformed"""

    pass
