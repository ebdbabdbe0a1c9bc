"""
Zoom level search

Maps a ground resolution to the zoom level that serves it best.
"""

from enum import Enum
from typing import Sequence, Tuple, Union

# Relative tolerance under which a resolution matches a level exactly
RESOLUTION_TOLERANCE = 1e-8


class ZoomLevelStrategy(Enum):
    """
    How to pick a zoom level when no level matches the resolution exactly

    - NEAREST: the level whose resolution ratio to the target is smallest,
      ties go to the finer level
    - LOWER: the largest zoom whose resolution is >= target (coarser or equal)
    - UPPER: the smallest zoom whose resolution is <= target (finer or equal)
    """

    NEAREST = "nearest"
    LOWER = "lower"
    UPPER = "upper"

    @classmethod
    def parse(cls, value: Union[str, "ZoomLevelStrategy"]) -> "ZoomLevelStrategy":
        """
        Accept a strategy or its name ("auto" is an alias of "nearest")

        Raises:
            ValueError: If the name is not a known strategy
        """
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower()
        if name == "auto":
            return cls.NEAREST
        try:
            return cls(name)
        except ValueError:
            raise ValueError(
                f"Invalid zoom level strategy: {value!r}. Should be one of auto|nearest|lower|upper"
            ) from None


def zoom_for_resolution(
    levels: Sequence[Tuple[int, float]],
    resolution: float,
    strategy: Union[str, ZoomLevelStrategy] = ZoomLevelStrategy.NEAREST,
) -> int:
    """
    Select a zoom level for a resolution

    Out-of-range targets are clamped: a resolution coarser than every level
    returns the first zoom, one finer than every level the last zoom,
    whatever the strategy.

    Args:
        levels: (zoom, resolution) pairs ordered by zoom, resolution decreasing
        resolution: Target resolution in CRS units per pixel
        strategy: Selection strategy

    Returns:
        Zoom level

    Raises:
        ValueError: If levels is empty or the strategy is unknown

    Examples:
        >>> zoom_for_resolution([(0, 100.0), (1, 50.0), (2, 25.0)], 30.0)
        2
        >>> zoom_for_resolution([(0, 100.0), (1, 50.0), (2, 25.0)], 30.0, "lower")
        1
    """
    strategy = ZoomLevelStrategy.parse(strategy)
    if not levels:
        raise ValueError("No zoom levels to choose from")

    coarser = None
    finer = None
    for zoom, level_res in levels:
        if abs(resolution - level_res) / level_res <= RESOLUTION_TOLERANCE:
            return zoom
        if level_res > resolution:
            coarser = (zoom, level_res)
        elif finer is None:
            finer = (zoom, level_res)

    if finer is None:
        return levels[-1][0]
    if coarser is None:
        return levels[0][0]

    if strategy is ZoomLevelStrategy.LOWER:
        return coarser[0]
    if strategy is ZoomLevelStrategy.UPPER:
        return finer[0]

    if coarser[1] / resolution < resolution / finer[1]:
        return coarser[0]
    return finer[0]
