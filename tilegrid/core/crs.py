"""
Coordinate Reference System identifiers

TileMatrixSet documents name their CRS with a URI
(``http://www.opengis.net/def/crs/EPSG/0/3857``); users tend to type
``EPSG:3857``. Both end up as the same CRS value here.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Optional

from tilegrid.core.exceptions import UnsupportedTransformError

logger = logging.getLogger(__name__)

OGC_CRS_URI = "http://www.opengis.net/def/crs"

# WGS84 semi-major axis in meters
SEMI_MAJOR_METRE = 6378137.0

# Geographic CRS with degree units that are known without a projection backend
_DEGREE_CRS = {
    ("EPSG", "4326"),
    ("EPSG", "4258"),
    ("EPSG", "4269"),
    ("EPSG", "4283"),
    ("EPSG", "4167"),
    ("OGC", "CRS84"),
}

_DEFAULT_VERSIONS = {"EPSG": "0", "OGC": "1.3"}

_URI_RE = re.compile(r"^https?://www\.opengis\.net/def/crs/([^/]+)/([^/]+)/([^/]+)/?$", re.I)
_URN_RE = re.compile(r"^urn:ogc:def:crs:([^:]+):([^:]*):([^:]+)$", re.I)


@dataclass(frozen=True)
class CRS:
    """
    Coordinate reference system identifier

    Only the (authority, code) pair takes part in equality, so the same CRS
    read from a URI and from an ``EPSG:n`` string compares equal.

    Attributes:
        authority: Registering authority (e.g., "EPSG", "OGC")
        code: Code within the authority (e.g., "3857", "CRS84")
        version: Authority version used when rendering a URI

    Examples:
        >>> CRS.from_string("http://www.opengis.net/def/crs/EPSG/0/3857")
        CRS('EPSG:3857')
        >>> CRS.from_epsg(3857) == CRS.from_string("urn:ogc:def:crs:EPSG::3857")
        True
    """

    authority: str
    code: str
    version: str = "0"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CRS):
            return NotImplemented
        return (self.authority, self.code) == (other.authority, other.code)

    def __hash__(self) -> int:
        return hash((self.authority, self.code))

    def __repr__(self) -> str:
        return f"CRS({self.to_string()!r})"

    def __str__(self) -> str:
        return self.to_string()

    @classmethod
    def from_epsg(cls, code: int) -> "CRS":
        return cls("EPSG", str(int(code)), "0")

    @classmethod
    def from_string(cls, value: str) -> "CRS":
        """
        Parse a CRS identifier

        Args:
            value: OGC URI, OGC URN, or ``AUTHORITY:CODE`` string

        Returns:
            CRS

        Raises:
            ValueError: If the string is not a recognised CRS identifier
        """
        text = value.strip()

        match = _URI_RE.match(text)
        if match:
            authority, version, code = match.groups()
            return cls._build(authority, code, version)

        match = _URN_RE.match(text)
        if match:
            authority, version, code = match.groups()
            return cls._build(authority, code, version or None)

        if text.upper() == "CRS84":
            return cls._build("OGC", "CRS84")

        parts = text.split(":")
        if len(parts) == 2 and all(parts):
            return cls._build(parts[0], parts[1])

        raise ValueError(f"Invalid CRS identifier: {value!r}")

    @classmethod
    def from_user_input(cls, value: Any) -> "CRS":
        """
        Build a CRS from a string, an ``{"uri": ...}`` mapping, an EPSG
        integer or any object exposing ``to_authority()`` (rasterio CRS).
        """
        if isinstance(value, CRS):
            return value
        if isinstance(value, int):
            return cls.from_epsg(value)
        if isinstance(value, str):
            return cls.from_string(value)
        if isinstance(value, dict) and "uri" in value:
            return cls.from_string(value["uri"])
        if hasattr(value, "to_authority"):
            authority = value.to_authority()
            if authority:
                return cls._build(*authority)
        raise ValueError(f"Unsupported CRS input: {value!r}")

    @classmethod
    def _build(cls, authority: str, code: str, version: Optional[str] = None) -> "CRS":
        authority = authority.upper()
        if version is None:
            version = _DEFAULT_VERSIONS.get(authority, "0")
        return cls(authority, code, version)

    @property
    def srid(self) -> Optional[int]:
        """Numeric code, CRS84 mapped to 4326"""
        if self.authority == "OGC" and self.code == "CRS84":
            return 4326
        if self.code.isdigit():
            return int(self.code)
        return None

    @property
    def is_geographic(self) -> bool:
        return (self.authority, self.code) in _DEGREE_CRS

    def to_string(self) -> str:
        return f"{self.authority}:{self.code}"

    def to_uri(self) -> str:
        return f"{OGC_CRS_URI}/{self.authority}/{self.version}/{self.code}"

    def to_urn(self) -> str:
        return f"urn:ogc:def:crs:{self.authority}:{self.version}:{self.code}"


WGS84_CRS = CRS("OGC", "CRS84", "1.3")
WEB_MERCATOR_CRS = CRS.from_epsg(3857)


def meters_per_unit(crs: CRS) -> float:
    """
    Coefficient to convert CRS units into meters (metersPerUnit)

    From note g in http://docs.opengeospatial.org/is/17-083r2/17-083r2.html#table_2:
    if the CRS uses meters as units of measure for the horizontal dimensions,
    then metersPerUnit=1; if it has degrees, then metersPerUnit=2pa/360
    (a is the Earth maximum radius of the ellipsoid).

    Units of CRS outside the built-in table are looked up with rasterio when it
    is installed; without it they are assumed to be meters.

    Raises:
        UnsupportedTransformError: If the CRS unit has no known conversion
    """
    if crs.is_geographic:
        return 2 * math.pi * SEMI_MAJOR_METRE / 360.0

    from tilegrid.transform.warp import crs_linear_unit

    unit = crs_linear_unit(crs)
    if unit is None:
        return 1.0

    name, factor = unit
    if name == "degree":
        return 2 * math.pi * SEMI_MAJOR_METRE / 360.0
    if factor is None:
        raise UnsupportedTransformError(f"CRS {crs} with unit name `{name}` is not supported")
    return factor
