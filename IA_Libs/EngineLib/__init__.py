"""
EngineLib - Filter combination engine

This module enumerates every combination of one variant per filter group
and lazily yields the augmented images.
"""

from IA_Libs.EngineLib.combination_engine import (
    CombinationEnumerator,
    CombinationIndex,
    InvalidVariantResult,
    augment_image,
    count_combinations,
    describe_filter_groups,
    get_engine_summary,
    iter_combination_indices,
)

__all__ = [
    "CombinationEnumerator",
    "CombinationIndex",
    "InvalidVariantResult",
    "augment_image",
    "count_combinations",
    "describe_filter_groups",
    "get_engine_summary",
    "iter_combination_indices",
]
