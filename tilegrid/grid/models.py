"""
TileMatrixSet data model

OGC Two Dimensional Tile Matrix Set (17-083r4, TMS 2.0) documents as
immutable Python objects.

Instances are frozen and hold their matrices in tuples, so a TileMatrixSet can
be shared between threads and copied by reference.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from tilegrid.core.crs import CRS
from tilegrid.core.exceptions import InvalidDefinitionError

CORNER_TOP_LEFT = "topLeft"
CORNER_BOTTOM_LEFT = "bottomLeft"


def axes_inverted(ordered_axes: Optional[tuple[str, str]]) -> bool:
    """Check if the first axis is the northing/latitude axis"""
    if not ordered_axes:
        return False
    return ordered_axes[0].upper() in ("Y", "LAT", "N")


def _parse_crs(value: Any) -> CRS:
    try:
        return CRS.from_user_input(value)
    except ValueError as e:
        raise InvalidDefinitionError(str(e)) from e


@dataclass(frozen=True)
class BoundingBox2D:
    """
    Minimum bounding rectangle of a 2D resource

    Corner coordinates follow the axis order of the CRS (or orderedAxes).
    """

    lower_left: tuple[float, float]
    upper_right: tuple[float, float]
    crs: Optional[CRS] = None
    ordered_axes: Optional[tuple[str, str]] = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "lowerLeft": list(self.lower_left),
            "upperRight": list(self.upper_right),
        }
        if self.crs is not None:
            d["crs"] = self.crs.to_uri()
        if self.ordered_axes:
            d["orderedAxes"] = list(self.ordered_axes)
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BoundingBox2D":
        return cls(
            lower_left=tuple(float(v) for v in data["lowerLeft"]),
            upper_right=tuple(float(v) for v in data["upperRight"]),
            crs=_parse_crs(data["crs"]) if data.get("crs") else None,
            ordered_axes=tuple(data["orderedAxes"]) if data.get("orderedAxes") else None,
        )


@dataclass(frozen=True)
class TileMatrix:
    """
    One zoom level of a TileMatrixSet

    Attributes:
        id: Zoom level identifier ("0", "1", ...)
        scale_denominator: Scale denominator at the standard 0.28mm pixel size
        cell_size: Resolution in CRS units per pixel
        point_of_origin: Origin corner, in CRS axis order
        tile_width: Tile width in pixels
        tile_height: Tile height in pixels
        matrix_width: Number of tile columns
        matrix_height: Number of tile rows
        corner_of_origin: "topLeft" (rows go down) or "bottomLeft" (rows go up)
        crs: Per-level CRS override, None to use the set's CRS
    """

    id: str
    scale_denominator: float
    cell_size: float
    point_of_origin: tuple[float, float]
    tile_width: int
    tile_height: int
    matrix_width: int
    matrix_height: int
    corner_of_origin: str = CORNER_TOP_LEFT
    crs: Optional[CRS] = None
    title: Optional[str] = None
    description: Optional[str] = None
    keywords: Optional[tuple[str, ...]] = None

    def __post_init__(self):
        try:
            zoom = int(self.id)
        except ValueError:
            raise InvalidDefinitionError(f"Invalid tile zoom identifier: `{self.id}`")
        if zoom < 0:
            raise InvalidDefinitionError(f"Invalid tile zoom identifier: `{self.id}`")
        if not self.scale_denominator > 0 or not self.cell_size > 0:
            raise InvalidDefinitionError(
                f"TileMatrix {self.id}: scaleDenominator and cellSize must be positive"
            )
        for name in ("tile_width", "tile_height", "matrix_width", "matrix_height"):
            if getattr(self, name) < 1:
                raise InvalidDefinitionError(f"TileMatrix {self.id}: {name} must be positive")
        if self.corner_of_origin not in (CORNER_TOP_LEFT, CORNER_BOTTOM_LEFT):
            raise InvalidDefinitionError(
                f"TileMatrix {self.id}: invalid cornerOfOrigin `{self.corner_of_origin}`"
            )

    @property
    def zoom(self) -> int:
        return int(self.id)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {}
        if self.title:
            d["title"] = self.title
        if self.description:
            d["description"] = self.description
        if self.keywords:
            d["keywords"] = list(self.keywords)
        d["id"] = self.id
        d["scaleDenominator"] = self.scale_denominator
        d["cellSize"] = self.cell_size
        if self.corner_of_origin != CORNER_TOP_LEFT:
            d["cornerOfOrigin"] = self.corner_of_origin
        d["pointOfOrigin"] = list(self.point_of_origin)
        d["tileWidth"] = self.tile_width
        d["tileHeight"] = self.tile_height
        d["matrixWidth"] = self.matrix_width
        d["matrixHeight"] = self.matrix_height
        if self.crs is not None:
            d["crs"] = self.crs.to_uri()
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TileMatrix":
        if data.get("variableMatrixWidths"):
            raise InvalidDefinitionError(
                f"TileMatrix {data.get('id')}: variableMatrixWidths are not supported"
            )
        try:
            return cls(
                id=str(data["id"]),
                scale_denominator=float(data["scaleDenominator"]),
                cell_size=float(data["cellSize"]),
                point_of_origin=tuple(float(v) for v in data["pointOfOrigin"]),
                tile_width=int(data["tileWidth"]),
                tile_height=int(data["tileHeight"]),
                matrix_width=int(data["matrixWidth"]),
                matrix_height=int(data["matrixHeight"]),
                corner_of_origin=data.get("cornerOfOrigin", CORNER_TOP_LEFT),
                crs=_parse_crs(data["crs"]) if data.get("crs") else None,
                title=data.get("title"),
                description=data.get("description"),
                keywords=tuple(data["keywords"]) if data.get("keywords") else None,
            )
        except KeyError as e:
            raise InvalidDefinitionError(f"TileMatrix is missing field {e}") from e


@dataclass(frozen=True)
class TileMatrixSet:
    """
    A named, ordered collection of TileMatrix

    Matrices are stored sorted by zoom. Construction checks the invariants:
    at least one matrix, unique zoom identifiers, and scale denominators
    strictly decreasing as zoom increases.

    Examples:
        >>> tms = TileMatrixSet.from_json(Path("WebMercatorQuad.json").read_text())
        >>> tms.matrix_for_zoom(4).matrix_width
        16
    """

    id: str
    crs: CRS
    tile_matrices: tuple[TileMatrix, ...]
    title: Optional[str] = None
    description: Optional[str] = None
    keywords: Optional[tuple[str, ...]] = None
    uri: Optional[str] = None
    ordered_axes: Optional[tuple[str, str]] = None
    well_known_scale_set: Optional[str] = None
    bounding_box: Optional[BoundingBox2D] = None
    _by_zoom: dict[int, TileMatrix] = field(
        default=None, init=False, repr=False, compare=False, hash=False
    )

    def __post_init__(self):
        if not self.tile_matrices:
            raise InvalidDefinitionError(f"TileMatrixSet {self.id} has no tile matrices")

        matrices = tuple(sorted(self.tile_matrices, key=lambda m: m.zoom))
        by_zoom: dict[int, TileMatrix] = {}
        for m in matrices:
            if m.zoom in by_zoom:
                raise InvalidDefinitionError(
                    f"TileMatrixSet {self.id}: duplicate zoom identifier `{m.id}`"
                )
            by_zoom[m.zoom] = m

        for previous, current in zip(matrices, matrices[1:]):
            if current.scale_denominator >= previous.scale_denominator:
                raise InvalidDefinitionError(
                    f"TileMatrixSet {self.id}: resolution must decrease as zoom increases "
                    f"(zoom {previous.id}: {previous.scale_denominator}, "
                    f"zoom {current.id}: {current.scale_denominator})"
                )

        # Use object.__setattr__ because dataclass is frozen
        object.__setattr__(self, "tile_matrices", matrices)
        object.__setattr__(self, "_by_zoom", by_zoom)

    @property
    def crs_axis_inverted(self) -> bool:
        """Check if CRS has inverted AXIS (lat,lon) instead of (lon,lat)."""
        return axes_inverted(self.ordered_axes)

    @property
    def zooms(self) -> list[int]:
        return list(self._by_zoom)

    def matrix_for_zoom(self, zoom: int) -> Optional[TileMatrix]:
        return self._by_zoom.get(zoom)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {}
        if self.title:
            d["title"] = self.title
        if self.description:
            d["description"] = self.description
        if self.keywords:
            d["keywords"] = list(self.keywords)
        d["id"] = self.id
        if self.uri:
            d["uri"] = self.uri
        d["crs"] = self.crs.to_uri()
        if self.ordered_axes:
            d["orderedAxes"] = list(self.ordered_axes)
        if self.well_known_scale_set:
            d["wellKnownScaleSet"] = self.well_known_scale_set
        if self.bounding_box is not None:
            d["boundingBox"] = self.bounding_box.to_dict()
        d["tileMatrices"] = [m.to_dict() for m in self.tile_matrices]
        return d

    def to_json(self, **kwargs) -> str:
        return json.dumps(self.to_dict(), **kwargs)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TileMatrixSet":
        """
        Build a TileMatrixSet from a parsed TMS 2.0 document

        Raises:
            InvalidDefinitionError: If a required field is missing or an
                invariant is violated
        """
        try:
            return cls(
                id=data["id"],
                crs=_parse_crs(data["crs"]),
                tile_matrices=tuple(TileMatrix.from_dict(m) for m in data["tileMatrices"]),
                title=data.get("title"),
                description=data.get("description"),
                keywords=tuple(data["keywords"]) if data.get("keywords") else None,
                uri=data.get("uri"),
                ordered_axes=tuple(data["orderedAxes"]) if data.get("orderedAxes") else None,
                well_known_scale_set=data.get("wellKnownScaleSet"),
                bounding_box=(
                    BoundingBox2D.from_dict(data["boundingBox"])
                    if data.get("boundingBox")
                    else None
                ),
            )
        except KeyError as e:
            raise InvalidDefinitionError(f"TileMatrixSet is missing field {e}") from e

    @classmethod
    def from_json(cls, text: str) -> "TileMatrixSet":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise InvalidDefinitionError(f"Invalid TileMatrixSet JSON: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "TileMatrixSet":
        return cls.from_json(Path(path).read_text())
