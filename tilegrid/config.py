"""
TileGrid configuration

Settings are read from environment variables:

- TILEMATRIXSET_DIRECTORY: directory of extra ``*.json`` TileMatrixSet
  documents added to the built-in catalog on first access
- TILEGRID_TRANSFORM_BACKEND: ``auto`` (default), ``basic`` or ``rasterio``
"""

import os
from pathlib import Path
from typing import Final, Mapping, Optional

from pydantic import BaseModel, ConfigDict, field_validator

TMS_DIRECTORY_ENV: Final[str] = "TILEMATRIXSET_DIRECTORY"
TRANSFORM_BACKEND_ENV: Final[str] = "TILEGRID_TRANSFORM_BACKEND"

TRANSFORM_BACKENDS = ("auto", "basic", "rasterio")


class Settings(BaseModel):
    """
    Runtime settings

    Attributes:
        tms_directory: Directory with user TileMatrixSet JSON documents
        transform_backend: Which transform implementation to use
            - auto: closed-form for WGS84 <-> Web Mercator, rasterio otherwise
            - basic: closed-form only, other CRS pairs are unsupported
            - rasterio: rasterio for every CRS pair

    Raises:
        ValueError: If the transform backend is unknown
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    tms_directory: Optional[Path] = None
    transform_backend: str = "auto"

    @field_validator("transform_backend")
    @classmethod
    def _validate_backend(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in TRANSFORM_BACKENDS:
            raise ValueError(
                f"Invalid transform backend: {value!r}. "
                f"Should be one of {'|'.join(TRANSFORM_BACKENDS)}"
            )
        return value

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        directory = env.get(TMS_DIRECTORY_ENV) or None
        return cls(
            tms_directory=Path(directory) if directory else None,
            transform_backend=env.get(TRANSFORM_BACKEND_ENV, "auto"),
        )


def get_settings() -> Settings:
    """Current settings, re-read from the environment on every call"""
    return Settings.from_env()
