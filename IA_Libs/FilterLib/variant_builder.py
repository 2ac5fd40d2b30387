"""
Variant Builder for Image Augment.

Compiles AugmentationOptions into an ordered list of FilterGroups. Each
recognized option has one construction rule; the rules live in FILTER_RULES
in the order the groups are applied to an image:

    scale -> crop -> shear -> flipY -> flipX -> rotate -> grayscale -> blur

Transforms do not commute (rotate-then-crop is not crop-then-rotate), so the
order of FILTER_RULES is part of the output.

Example:
    >>> options = AugmentationOptions(rotate=[-15, 0, 15], flip_x=True)
    >>> groups = build_filter_groups(options)
    >>> [(g.name, len(g)) for g in groups]
    [('flipX', 2), ('rotate', 3)]
"""

import logging
import math
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from IA_Libs.constants import (
    GRAYSCALE_ALWAYS,
    GRAYSCALE_BOTH,
    MIN_BLUR_SIGMA,
    GROUP_SCALE,
    GROUP_CROP,
    GROUP_SHEAR,
    GROUP_FLIP_Y,
    GROUP_FLIP_X,
    GROUP_ROTATE,
    GROUP_GRAYSCALE,
    GROUP_BLUR,
)
from IA_Libs.FilterLib.filter_models import (
    AugmentationOptions,
    FilterGroup,
    FilterVariant,
    Many,
    Single,
)
from IA_Libs.FilterLib.image_ops import (
    affine_transform,
    crop_grid,
    gaussian_blur,
    mirror_horizontal,
    mirror_vertical,
    rotate_image,
    to_grayscale,
)

logger = logging.getLogger(__name__)

# A rule reads the options (and the resolved background colors) and returns
# its group, or None when the option is absent or empty
GroupRule = Callable[[AugmentationOptions, List[str]], Optional[FilterGroup]]


def identity(image: Any) -> Single:
    """Variant that leaves the image unchanged."""
    return Single(image)


def _affine_variant(matrix: List[List[float]], background: str) -> FilterVariant:
    def apply(image: Any) -> Single:
        return Single(affine_transform(image, matrix, background))
    return apply


def _rotate_variant(degrees: float, background: str) -> FilterVariant:
    def apply(image: Any) -> Single:
        return Single(rotate_image(image, degrees, background))
    return apply


def _crop_variant(sizes: Sequence[Tuple[Optional[float], Optional[float]]]) -> FilterVariant:
    sizes = list(sizes)

    def apply(image: Any) -> Many:
        return Many(crop_grid(image, sizes))
    return apply


def _blur_variant(sigma: float) -> FilterVariant:
    # The blur primitive needs sigma >= 1; smaller values are a no-op
    if sigma < MIN_BLUR_SIGMA:
        return identity

    def apply(image: Any) -> Single:
        return Single(gaussian_blur(image, sigma))
    return apply


def _vertical_mirror(image: Any) -> Single:
    return Single(mirror_vertical(image))


def _horizontal_mirror(image: Any) -> Single:
    return Single(mirror_horizontal(image))


def _grayscale(image: Any) -> Single:
    return Single(to_grayscale(image))


def shear_matrix(x_degrees: float, y_degrees: float) -> List[List[float]]:
    """Affine matrix for a shear given in degrees (linear, not tangent, term)."""
    return [
        [1.0, -x_degrees / 180 * math.pi],
        [-y_degrees / 180 * math.pi, 1.0],
    ]


def scale_matrix(width_factor: float, height_factor: float) -> List[List[float]]:
    """Affine matrix for a non-uniform scale."""
    return [
        [float(width_factor), 0.0],
        [0.0, float(height_factor)],
    ]


def _build_scale_group(options: AugmentationOptions, background: List[str]) -> Optional[FilterGroup]:
    if not options.scale:
        return None
    variants = [
        _affine_variant(scale_matrix(w, h), color)
        for w, h in options.scale
        for color in background
    ]
    return FilterGroup(GROUP_SCALE, variants)


def _build_crop_group(options: AugmentationOptions, background: List[str]) -> Optional[FilterGroup]:
    if not options.crop:
        return None
    # One variant for all sizes; it fans out into tiles at run time
    return FilterGroup(GROUP_CROP, [_crop_variant(options.crop)])


def _build_shear_group(options: AugmentationOptions, background: List[str]) -> Optional[FilterGroup]:
    if not options.shear:
        return None
    variants = [
        _affine_variant(shear_matrix(x, y), color)
        for x, y in options.shear
        for color in background
    ]
    return FilterGroup(GROUP_SHEAR, variants)


def _build_flip_y_group(options: AugmentationOptions, background: List[str]) -> Optional[FilterGroup]:
    if not options.flip_y:
        return None
    return FilterGroup(GROUP_FLIP_Y, [identity, _vertical_mirror])


def _build_flip_x_group(options: AugmentationOptions, background: List[str]) -> Optional[FilterGroup]:
    if not options.flip_x:
        return None
    return FilterGroup(GROUP_FLIP_X, [identity, _horizontal_mirror])


def _build_rotate_group(options: AugmentationOptions, background: List[str]) -> Optional[FilterGroup]:
    if not options.rotate:
        return None
    variants = [
        _rotate_variant(degrees, color)
        for degrees in options.rotate
        for color in background
    ]
    return FilterGroup(GROUP_ROTATE, variants)


def _build_grayscale_group(options: AugmentationOptions, background: List[str]) -> Optional[FilterGroup]:
    if options.grayscale == GRAYSCALE_ALWAYS:
        return FilterGroup(GROUP_GRAYSCALE, [_grayscale])
    if options.grayscale == GRAYSCALE_BOTH:
        return FilterGroup(GROUP_GRAYSCALE, [identity, _grayscale])
    return None


def _build_blur_group(options: AugmentationOptions, background: List[str]) -> Optional[FilterGroup]:
    if not options.blur:
        return None
    return FilterGroup(GROUP_BLUR, [_blur_variant(sigma) for sigma in options.blur])


FILTER_RULES: Tuple[Tuple[str, GroupRule], ...] = (
    (GROUP_SCALE, _build_scale_group),
    (GROUP_CROP, _build_crop_group),
    (GROUP_SHEAR, _build_shear_group),
    (GROUP_FLIP_Y, _build_flip_y_group),
    (GROUP_FLIP_X, _build_flip_x_group),
    (GROUP_ROTATE, _build_rotate_group),
    (GROUP_GRAYSCALE, _build_grayscale_group),
    (GROUP_BLUR, _build_blur_group),
)


def build_filter_groups(
    options: Union[AugmentationOptions, Dict[str, Any], None] = None,
) -> List[FilterGroup]:
    """
    Build the ordered filter groups for a set of augmentation options.

    Options that are absent or empty contribute no group. When nothing is
    selected an empty list is returned and a warning is logged; the engine
    then yields the unmodified source image once.

    Args:
        options: AugmentationOptions, a config dictionary, or None

    Returns:
        List of FilterGroups in application order

    Raises:
        ValueError: If the options are invalid
    """
    if options is None:
        options = AugmentationOptions()
    elif isinstance(options, dict):
        options = AugmentationOptions.from_dict(options)
    else:
        options.validate()

    background = options.effective_background()

    groups: List[FilterGroup] = []
    for name, rule in FILTER_RULES:
        group = rule(options, background)
        if group is None:
            continue
        groups.append(group)
        logger.debug(f"Built filter group '{name}' with {len(group)} variant(s)")

    if not groups:
        logger.warning("No filters selected: each source image will be copied unchanged")

    return groups
