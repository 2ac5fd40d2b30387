"""
Augmentation presets and value helpers.

AGGRESSIVE_OPTIONS covers a large but tractable combination space (720
combinations before crop tiling) and shows the recommended settings for
production augmentation. DEFAULT_OPTIONS is the lighter set written by
`--init`.
"""

import math
from typing import Dict, List, Sequence

from IA_Libs.FilterLib.filter_models import AugmentationOptions


def value_range(start: float, stop: float, step: float) -> List[float]:
    """
    Inclusive range from start to stop.

    The sign of step is flipped when needed so the range always walks toward
    stop. start == stop gives a single value.

    Example:
        >>> value_range(10, 0, 5)
        [10, 5, 0]
    """
    if step == 0:
        raise ValueError("step cannot be zero")
    if start == stop:
        return [start]

    step = abs(step) if stop > start else -abs(step)
    values = []
    value = start
    while (step > 0 and value <= stop) or (step < 0 and value >= stop):
        values.append(value)
        value += step
    return values


def range_around(center: float, radius: float, step: float) -> List[float]:
    """
    Values spreading out from a center, up to radius inclusive.

    Example:
        >>> range_around(0, 15, 15)
        [0, -15, 15]
    """
    step = abs(step)
    if step == 0:
        raise ValueError("step cannot be zero")

    values = [center]
    offset = step
    while offset <= radius:
        values.append(center - offset)
        values.append(center + offset)
        offset += step
    return values


def expand_crop_size(sizes: Sequence[float]) -> List[List[float]]:
    """
    Turn a size ladder into square and neighbouring rectangular crop sizes.

    Example:
        >>> expand_crop_size([math.inf, 200, 100])
        [[inf, inf], [inf, 200], [200, inf], [200, 200], [200, 100], [100, 200], [100, 100], [100, 100]]
    """
    if not sizes:
        return []

    result = [[sizes[0], sizes[0]]]
    for i in range(1, len(sizes)):
        result.append([sizes[i - 1], sizes[i]])
        result.append([sizes[i], sizes[i - 1]])
        result.append([sizes[i], sizes[i]])
    result.append([sizes[-1], sizes[-1]])
    return result


def _shear_ladder(angles: Sequence[float]) -> List[List[float]]:
    pairs: List[List[float]] = []
    for angle in angles:
        if angle == 0:
            pairs.append([0, 0])
        else:
            pairs.append([0, angle])
            pairs.append([angle, 0])
    return pairs


AGGRESSIVE_OPTIONS = AugmentationOptions(
    scale=[(s, s) for s in (0.75, 1.0, 1.5)],
    crop=[(s, s) for s in (math.inf, 100)],
    shear=[tuple(pair) for pair in _shear_ladder([0, 8, 16])],
    rotate=range_around(0, 15, 15),
    grayscale="both",
    flip_x=True,
    flip_y=True,
    blur=[0, 1],
)

DEFAULT_OPTIONS = AugmentationOptions(
    scale=[(0.75, 0.75), (1.0, 1.0)],
    crop=[(None, None), (150, 150)],
    shear=[(0, 0), (16, 0), (0, 16)],
    rotate=[0],
    grayscale="always",
    flip_x=True,
    flip_y=False,
    blur=[0],
)

PRESETS: Dict[str, AugmentationOptions] = {
    "aggressive": AGGRESSIVE_OPTIONS,
    "default": DEFAULT_OPTIONS,
}


def list_presets() -> List[str]:
    """Sorted names of the built-in presets."""
    return sorted(PRESETS)


def get_preset(name: str) -> AugmentationOptions:
    """
    Look up a preset by name.

    Returns:
        A copy of the preset options, safe to modify

    Raises:
        KeyError: If no preset has this name
    """
    key = str(name).strip().lower()
    if key not in PRESETS:
        raise KeyError(
            f"Unknown preset '{name}'. Available presets: {', '.join(list_presets())}"
        )
    return AugmentationOptions.from_dict(PRESETS[key].to_dict())
