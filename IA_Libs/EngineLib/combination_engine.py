"""
Combination Engine for Image Augment.

Enumerates every combination of one variant per filter group and applies
the chosen variants to a source image, group by group. A variant may split
an image into several (crop tiles), so the working set can grow while a
combination is applied.

Combinations are visited in odometer order: the combination index is a
mixed-radix counter with one digit per group, and the last group varies
fastest. For groups of sizes 2 and 3 the order is
(0,0), (0,1), (0,2), (1,0), (1,1), (1,2).

The enumeration is lazy. CombinationEnumerator holds the counter and
produces one combination's images per next_batch() call; augment_image()
wraps it as a generator. Nothing is retried: an exception raised by a
variant propagates to the caller and ends the enumeration.

Example:
    >>> groups = build_filter_groups(AugmentationOptions(flip_x=True, grayscale="both"))
    >>> images = list(augment_image(source, groups))
    >>> len(images)
    4
"""

import logging
from typing import Any, Iterator, List, Optional, Sequence, Tuple

from IA_Libs.constants import GROUP_CROP
from IA_Libs.FilterLib.filter_models import FilterGroup, Many, Single
from IA_Libs.FilterLib.image_ops import clone_image

logger = logging.getLogger(__name__)


class InvalidVariantResult(TypeError):
    """Raised when a variant returns neither an image nor a sequence of images."""


def _is_image(value: Any) -> bool:
    return hasattr(value, "mode") and hasattr(value, "size") and hasattr(value, "copy")


class CombinationIndex:
    """
    Mixed-radix counter selecting one variant per group.

    Digit i ranges over [0, radices[i]). increment() advances the last digit
    and carries leftward; it returns False once the counter overflows past
    the first digit.
    """

    def __init__(self, radices: Sequence[int]):
        self.radices = [int(r) for r in radices]
        for position, radix in enumerate(self.radices):
            if radix < 1:
                raise ValueError(f"Digit {position} must have a radix of at least 1, got {radix}")
        self.digits = [0] * len(self.radices)

    def increment(self) -> bool:
        for position in range(len(self.digits) - 1, -1, -1):
            self.digits[position] += 1
            if self.digits[position] < self.radices[position]:
                return True
            self.digits[position] = 0
        return False

    def as_tuple(self) -> Tuple[int, ...]:
        return tuple(self.digits)

    def __len__(self) -> int:
        return len(self.digits)

    def __repr__(self) -> str:
        return f"CombinationIndex(digits={self.digits}, radices={self.radices})"


def _expand_result(result: Any, group: FilterGroup, variant_index: int) -> List[Any]:
    """Flatten a variant result into a list of images."""
    if isinstance(result, Single):
        images = [result.image]
    elif isinstance(result, Many):
        images = list(result.images)
    elif _is_image(result):
        images = [result]
    elif isinstance(result, (list, tuple)):
        images = list(result)
    else:
        raise InvalidVariantResult(
            f"Variant {variant_index} of group '{group.name}' returned {type(result).__name__}; "
            f"expected an image or a sequence of images"
        )

    for image in images:
        if not _is_image(image):
            raise InvalidVariantResult(
                f"Variant {variant_index} of group '{group.name}' produced "
                f"{type(image).__name__} instead of an image"
            )
    return images


class CombinationEnumerator:
    """
    Explicit enumeration state for one source image.

    Each next_batch() call applies the combination selected by the current
    index to a fresh clone of the source and returns the resulting images,
    then advances the index. Returns None once every combination has been
    produced. Instances are single-use.
    """

    def __init__(self, image: Any, filter_groups: Sequence[FilterGroup]):
        self.image = image
        self.filter_groups = list(filter_groups)
        self.index = CombinationIndex([len(group) for group in self.filter_groups])
        self.finished = False
        self.combination_count = 0

    def current_indices(self) -> Tuple[int, ...]:
        return self.index.as_tuple()

    def apply_current(self) -> List[Any]:
        """Apply the combination selected by the current index."""
        images = [clone_image(self.image)]
        for group, variant_index in zip(self.filter_groups, self.index.digits):
            variant = group.variants[variant_index]
            expanded: List[Any] = []
            for image in images:
                expanded.extend(_expand_result(variant(image), group, variant_index))
            images = expanded
        return images

    def next_batch(self) -> Optional[List[Any]]:
        if self.finished:
            return None

        indices = self.current_indices()
        try:
            images = self.apply_current()
        except Exception:
            self.finished = True
            raise

        self.combination_count += 1
        logger.debug(f"Combination {indices} produced {len(images)} image(s)")

        if not self.index.increment():
            self.finished = True
        return images

    def __iter__(self) -> Iterator[List[Any]]:
        while True:
            batch = self.next_batch()
            if batch is None:
                return
            yield batch


def augment_image(image: Any, filter_groups: Sequence[FilterGroup]) -> Iterator[Any]:
    """
    Lazily produce every augmented image for one source image.

    Yields count_combinations(filter_groups) images when no variant splits
    its input, more when a crop group tiles it. An empty group list yields a
    single unmodified copy of the source.

    Args:
        image: Source PIL Image (never modified)
        filter_groups: Ordered filter groups from build_filter_groups()

    Yields:
        PIL Images in odometer order

    Raises:
        InvalidVariantResult: If a variant breaks the result contract
        Exception: Anything raised by a variant, unchanged
    """
    for batch in CombinationEnumerator(image, filter_groups):
        for augmented in batch:
            yield augmented


def iter_combination_indices(filter_groups: Sequence[FilterGroup]) -> Iterator[Tuple[int, ...]]:
    """Digit tuples in the order augment_image() visits them."""
    index = CombinationIndex([len(group) for group in filter_groups])
    while True:
        yield index.as_tuple()
        if not index.increment():
            return


def count_combinations(filter_groups: Sequence[FilterGroup]) -> int:
    """Number of combinations (product of group sizes; 1 for no groups)."""
    total = 1
    for group in filter_groups:
        total *= len(group)
    return total


def describe_filter_groups(filter_groups: Sequence[FilterGroup]) -> List[Tuple[str, int]]:
    """(name, variant count) for each group."""
    return [(group.name, len(group)) for group in filter_groups]


def get_engine_summary(filter_groups: Sequence[FilterGroup]) -> str:
    """
    Human-readable summary of the filter groups.

    Example:
        >>> print(get_engine_summary(groups))
        Filter Groups:
          1. scale (2 variants)
          2. crop (1 variant) [splits images]
        Combinations per image: 2
    """
    lines = ["Filter Groups:"]
    if not filter_groups:
        lines.append("  (none - source images are copied unchanged)")

    for position, group in enumerate(filter_groups, start=1):
        count = len(group)
        marker = " [splits images]" if group.name == GROUP_CROP else ""
        lines.append(f"  {position}. {group.name} ({count} variant{'s' if count != 1 else ''}){marker}")

    lines.append(f"Combinations per image: {count_combinations(filter_groups)}")
    return "\n".join(lines)
