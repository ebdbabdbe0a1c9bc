"""
TileMatrixSet registry

Process-wide catalog of named grids. The built-in definitions shipped in
``tilegrid/data`` (and any user definitions found in
``TILEMATRIXSET_DIRECTORY``) are parsed on first access, once.

Reads go to an immutable snapshot of the catalog; registration builds a new
snapshot under a lock and swaps it in, so lookups never wait on a
registration.
"""

import logging
import threading
from importlib import resources
from pathlib import Path
from typing import Optional, Union

from tilegrid.config import get_settings
from tilegrid.core.exceptions import InvalidDefinitionError, NotFoundError
from tilegrid.grid.models import TileMatrixSet
from tilegrid.grid.tms import Tms

logger = logging.getLogger(__name__)


def _load_builtins() -> dict[str, Tms]:
    catalog = {}
    data_dir = resources.files("tilegrid") / "data"
    for entry in sorted(data_dir.iterdir(), key=lambda e: e.name):
        if not entry.name.endswith(".json"):
            continue
        name = entry.name[: -len(".json")]
        catalog[name] = Tms(TileMatrixSet.from_json(entry.read_text()))
    return catalog


def _load_directory(directory: Path) -> dict[str, Tms]:
    catalog = {}
    if not directory.is_dir():
        logger.warning("TileMatrixSet directory %s does not exist, skipping", directory)
        return catalog
    for path in sorted(directory.glob("*.json")):
        try:
            catalog[path.stem] = Tms(TileMatrixSet.from_json_file(path))
        except (InvalidDefinitionError, OSError) as e:
            logger.warning("Skipping TileMatrixSet file %s: %s", path, e)
    return catalog


class TileMatrixSets:
    """
    Registry of named TileMatrixSets

    Args:
        user_directory: Directory of extra ``*.json`` definitions
            (default: TILEMATRIXSET_DIRECTORY setting)
        load_builtins: Include the built-in definitions

    Examples:
        >>> registry = TileMatrixSets()
        >>> registry.lookup("WebMercatorQuad") is registry.lookup("WebMercatorQuad")
        True
        >>> "WorldCRS84Quad" in registry.list()
        True
    """

    def __init__(
        self,
        user_directory: Optional[Union[str, Path]] = None,
        load_builtins: bool = True,
    ):
        self._user_directory = Path(user_directory) if user_directory else None
        self._include_builtins = load_builtins
        self._catalog: Optional[dict[str, Tms]] = None
        self._lock = threading.Lock()

    def _entries(self) -> dict[str, Tms]:
        catalog = self._catalog
        if catalog is not None:
            return catalog

        with self._lock:
            if self._catalog is None:
                self._catalog = self._initial_catalog()
            return self._catalog

    def _initial_catalog(self) -> dict[str, Tms]:
        catalog = _load_builtins() if self._include_builtins else {}
        logger.debug("Loaded %d built-in TileMatrixSets", len(catalog))

        directory = self._user_directory or get_settings().tms_directory
        if directory is not None:
            user = _load_directory(directory)
            logger.debug("Loaded %d TileMatrixSets from %s", len(user), directory)
            catalog.update(user)
        return catalog

    def get(self, name: str) -> TileMatrixSet:
        """
        Get a TileMatrixSet definition by name

        Raises:
            NotFoundError: If no grid has that name
        """
        return self.lookup(name).definition

    def lookup(self, name: str) -> Tms:
        """
        Get the Tms of a named grid

        Repeated lookups of a name return the same object until the name is
        registered again.

        Raises:
            NotFoundError: If no grid has that name
        """
        try:
            return self._entries()[name]
        except KeyError:
            raise NotFoundError(f"Invalid TileMatrixSet name: {name}") from None

    def list(self) -> list[str]:
        """List all registered grid names."""
        return sorted(self._entries())

    def register(
        self,
        name: str,
        tms: Union[Tms, TileMatrixSet],
        overwrite: bool = False,
    ) -> Tms:
        """
        Register a grid under a name

        Args:
            name: Registry name
            tms: Tms or TileMatrixSet to register
            overwrite: Replace an existing grid with the same name

        Returns:
            The registered Tms

        Raises:
            InvalidDefinitionError: If the name is taken and overwrite is False
        """
        if isinstance(tms, TileMatrixSet):
            tms = Tms(tms)

        self._entries()
        with self._lock:
            if name in self._catalog and not overwrite:
                raise InvalidDefinitionError(f"{name} is already a registered TMS")
            catalog = dict(self._catalog)
            catalog[name] = tms
            self._catalog = catalog

        logger.info("Registered TileMatrixSet: %s", name)
        return tms

    def __contains__(self, name: object) -> bool:
        return name in self._entries()

    def __len__(self) -> int:
        return len(self._entries())


# Global registry instance
_global_registry = TileMatrixSets()


def get_registry() -> TileMatrixSets:
    """Get the global TileMatrixSet registry."""
    return _global_registry


def lookup(name: str) -> Tms:
    """
    Get a named grid from the global registry

    Examples:
        >>> tms = lookup("WebMercatorQuad")
        >>> tms.maxzoom
        24
    """
    return _global_registry.lookup(name)


def register(name: str, tms: Union[Tms, TileMatrixSet], overwrite: bool = False) -> Tms:
    """Register a grid in the global registry."""
    return _global_registry.register(name, tms, overwrite=overwrite)
