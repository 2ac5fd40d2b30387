"""
FilterLib - Augmentation options and filter groups

This module turns declarative augmentation options into ordered filter
groups and provides the Pillow-backed image operations the variants call.
"""

from IA_Libs.FilterLib.filter_models import (
    AugmentationOptions,
    FilterGroup,
    Many,
    Single,
)
from IA_Libs.FilterLib.image_ops import MissingDimensionMetadata
from IA_Libs.FilterLib.variant_builder import FILTER_RULES, build_filter_groups
from IA_Libs.FilterLib.presets import (
    AGGRESSIVE_OPTIONS,
    DEFAULT_OPTIONS,
    expand_crop_size,
    get_preset,
    list_presets,
    range_around,
    value_range,
)

__all__ = [
    "AugmentationOptions",
    "FilterGroup",
    "Many",
    "Single",
    "MissingDimensionMetadata",
    "FILTER_RULES",
    "build_filter_groups",
    "AGGRESSIVE_OPTIONS",
    "DEFAULT_OPTIONS",
    "expand_crop_size",
    "get_preset",
    "list_presets",
    "range_around",
    "value_range",
]
