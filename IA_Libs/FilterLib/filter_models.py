"""
Filter data models for Image Augment.

This module defines the core data structures shared by the variant builder
and the combination engine.

Classes:
    Single: Variant result holding exactly one image
    Many: Variant result holding an ordered list of images
    FilterGroup: A named, ordered set of mutually exclusive filter variants
    AugmentationOptions: Declarative options compiled into filter groups

Type Aliases:
    FilterVariant: Callable taking one image and returning a VariantResult
    VariantResult: Either Single or Many
"""

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from IA_Libs.constants import (
    DEFAULT_BACKGROUND,
    GRAYSCALE_MODES,
    FIELD_BACKGROUND,
    FIELD_SCALE,
    FIELD_CROP,
    FIELD_SHEAR,
    FIELD_ROTATE,
    FIELD_GRAYSCALE,
    FIELD_FLIP_X,
    FIELD_FLIP_Y,
    FIELD_BLUR,
)


@dataclass
class Single:
    """Result of a variant that maps one image to one image."""
    image: Any


@dataclass
class Many:
    """Result of a variant that splits one image into several (e.g. crop tiles)."""
    images: List[Any] = field(default_factory=list)

    def __post_init__(self):
        self.images = list(self.images)

    def __len__(self) -> int:
        return len(self.images)


VariantResult = Union[Single, Many]
FilterVariant = Callable[[Any], VariantResult]

Pair = Tuple[float, float]
CropPair = Tuple[Optional[float], Optional[float]]


@dataclass
class FilterGroup:
    """A named group of filter variants; exactly one is chosen per combination.

    Attributes:
        name: Group name (e.g. 'scale', 'crop')
        variants: Ordered, non-empty list of variant callables
    """
    name: str
    variants: List[FilterVariant] = field(default_factory=list)

    def __post_init__(self):
        self.variants = list(self.variants)
        if not self.variants:
            raise ValueError(f"Filter group '{self.name}' must have at least one variant")
        for index, variant in enumerate(self.variants):
            if not callable(variant):
                raise ValueError(
                    f"Variant {index} of filter group '{self.name}' is not callable: {type(variant)}"
                )

    def __len__(self) -> int:
        return len(self.variants)


def _to_pairs(value: Any, name: str) -> List[Tuple[Any, Any]]:
    pairs = []
    for entry in value:
        if not isinstance(entry, (list, tuple)) or len(entry) != 2:
            raise ValueError(f"{name} entries must be [x, y] pairs, got {entry!r}")
        pairs.append((entry[0], entry[1]))
    return pairs


def _crop_value_to_json(value: Optional[float]) -> Optional[float]:
    # JSON has no Infinity; null means "full dimension"
    if value is None or math.isinf(value):
        return None
    return value


@dataclass
class AugmentationOptions:
    """Declarative augmentation settings.

    Attributes:
        background: Fill colors for regions exposed by scale, shear and rotate
                    (empty = single fully transparent color)
        scale: (width factor, height factor) pairs
        crop: (width, height) pixel pairs; None, 0 or inf means full dimension
        shear: (x degrees, y degrees) pairs
        rotate: Rotation degrees (positive = clockwise)
        grayscale: 'always', 'never', 'both' or None
        flip_x: Add a horizontal mirror group
        flip_y: Add a vertical mirror group
        blur: Gaussian sigmas (values below 1 are a no-op)
    """
    background: List[str] = field(default_factory=list)
    scale: Optional[List[Pair]] = None
    crop: Optional[List[CropPair]] = None
    shear: Optional[List[Pair]] = None
    rotate: Optional[List[float]] = None
    grayscale: Optional[str] = None
    flip_x: bool = False
    flip_y: bool = False
    blur: Optional[List[float]] = None

    def effective_background(self) -> List[str]:
        """Background colors to expand over, falling back to transparent."""
        if self.background:
            return list(self.background)
        return [DEFAULT_BACKGROUND]

    def validate(self) -> None:
        """
        Check option values.

        Raises:
            ValueError: If any option has an invalid shape or value
        """
        for color in self.background:
            if not isinstance(color, str) or not color.strip():
                raise ValueError(f"background colors must be non-empty strings, got {color!r}")

        if self.scale is not None:
            for w, h in _to_pairs(self.scale, FIELD_SCALE):
                if w <= 0 or h <= 0:
                    raise ValueError(f"scale factors must be positive, got [{w}, {h}]")

        if self.crop is not None:
            for w, h in _to_pairs(self.crop, FIELD_CROP):
                for value in (w, h):
                    if value is not None and value < 0:
                        raise ValueError(f"crop sizes cannot be negative, got [{w}, {h}]")

        if self.shear is not None:
            _to_pairs(self.shear, FIELD_SHEAR)

        if self.grayscale is not None and self.grayscale not in GRAYSCALE_MODES:
            raise ValueError(
                f"grayscale must be one of {', '.join(GRAYSCALE_MODES)}, got {self.grayscale!r}"
            )

        for name, flag in ((FIELD_FLIP_X, self.flip_x), (FIELD_FLIP_Y, self.flip_y)):
            if not isinstance(flag, bool):
                raise ValueError(f"{name} must be true or false, got {flag!r}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-ready dictionary using config file keys."""
        data: Dict[str, Any] = {}
        if self.background:
            data[FIELD_BACKGROUND] = list(self.background)
        if self.scale is not None:
            data[FIELD_SCALE] = [[w, h] for w, h in self.scale]
        if self.crop is not None:
            data[FIELD_CROP] = [
                [_crop_value_to_json(w), _crop_value_to_json(h)] for w, h in self.crop
            ]
        if self.shear is not None:
            data[FIELD_SHEAR] = [[x, y] for x, y in self.shear]
        if self.rotate is not None:
            data[FIELD_ROTATE] = list(self.rotate)
        if self.grayscale is not None:
            data[FIELD_GRAYSCALE] = self.grayscale
        data[FIELD_FLIP_X] = self.flip_x
        data[FIELD_FLIP_Y] = self.flip_y
        if self.blur is not None:
            data[FIELD_BLUR] = list(self.blur)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AugmentationOptions":
        """
        Create from a config dictionary. Unknown keys are ignored.

        Raises:
            ValueError: If the resulting options fail validation
        """
        def pairs(key: str) -> Optional[List[Tuple[Any, Any]]]:
            value = data.get(key)
            if value is None:
                return None
            return _to_pairs(value, key)

        def numbers(key: str) -> Optional[List[float]]:
            value = data.get(key)
            if value is None:
                return None
            return [float(v) for v in value]

        options = cls(
            background=list(data.get(FIELD_BACKGROUND) or []),
            scale=pairs(FIELD_SCALE),
            crop=pairs(FIELD_CROP),
            shear=pairs(FIELD_SHEAR),
            rotate=numbers(FIELD_ROTATE),
            grayscale=data.get(FIELD_GRAYSCALE),
            flip_x=data.get(FIELD_FLIP_X, data.get("flip_x", False)),
            flip_y=data.get(FIELD_FLIP_Y, data.get("flip_y", False)),
            blur=numbers(FIELD_BLUR),
        )
        options.validate()
        return options
