"""
Image handle operations for Image Augment.

Thin wrappers over Pillow used by the filter variants. Every function returns
a new image and leaves its input untouched, so an image handle may be shared
between variants and combinations.

Functions:
    clone_image: Independent copy of an image
    get_image_dimension: Width/height of an image, or MissingDimensionMetadata
    affine_transform: 2x2 affine matrix with background fill
    rotate_image: Rotate by degrees (clockwise) with background fill
    mirror_vertical / mirror_horizontal: Flip top-bottom / left-right
    to_grayscale: Grayscale conversion keeping alpha
    gaussian_blur: Gaussian blur by sigma (sigma >= 1)
    extract_region: Rectangular extract
    clamp_crop_sizes: Clamp and deduplicate requested crop sizes
    grid_origins: Tile origins along one axis, last tile aligned to the edge
    crop_grid: Split an image into grid tiles for every requested size
"""

import math
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np
from PIL import Image, ImageColor, ImageFilter

from IA_Libs.constants import MIN_BLUR_SIGMA


class MissingDimensionMetadata(ValueError):
    """Raised when an image handle cannot report a usable width and height."""


def _check_image(image: Any) -> None:
    if not hasattr(image, "copy") or not hasattr(image, "mode"):
        raise TypeError(f"Expected PIL Image, got {type(image)}")


def clone_image(image: Any) -> Any:
    """Return an independent copy of the image."""
    _check_image(image)
    return image.copy()


def get_image_dimension(image: Any) -> Tuple[int, int]:
    """
    Read the pixel dimensions of an image.

    Args:
        image: PIL Image

    Returns:
        (width, height)

    Raises:
        MissingDimensionMetadata: If width or height is missing or zero
    """
    width = getattr(image, "width", None)
    height = getattr(image, "height", None)
    if not width or not height:
        raise MissingDimensionMetadata(
            f"Missing image dimension metadata (width={width}, height={height})"
        )
    return int(width), int(height)


def _prepare_fill(image: Any, background: str) -> Tuple[Any, Any]:
    """Convert the image so it can hold the background color; return (image, fillcolor)."""
    try:
        color = ImageColor.getrgb(background)
    except ValueError as e:
        raise ValueError(f"Invalid background color {background!r}: {e}") from e

    if image.mode not in ("L", "LA", "RGB", "RGBA"):
        image = image.convert("RGBA")

    # A translucent fill needs an alpha channel
    if len(color) == 4 and color[3] < 255 and image.mode in ("L", "RGB"):
        image = image.convert(image.mode + "A")

    return image, ImageColor.getcolor(background, image.mode)


def affine_transform(image: Any, matrix: Sequence[Sequence[float]], background: str) -> Any:
    """
    Apply a 2x2 affine matrix, growing the canvas to fit the transformed image.

    The matrix maps input coordinates to output coordinates:
        [a b]   x' = a*x + b*y
        [c d]   y' = c*x + d*y

    a/d scale the x/y axis, b/c shear along x/y.

    Args:
        image: PIL Image
        matrix: [[a, b], [c, d]]
        background: Color string for regions outside the source

    Returns:
        Transformed PIL Image

    Raises:
        ValueError: If the matrix is not invertible or the color is invalid
    """
    _check_image(image)
    width, height = get_image_dimension(image)

    forward = np.asarray(matrix, dtype=float).reshape(2, 2)
    try:
        inverse = np.linalg.inv(forward)
    except np.linalg.LinAlgError as e:
        raise ValueError(f"Affine matrix is not invertible: {matrix}") from e

    corners = np.array([[0, width, 0, width], [0, 0, height, height]], dtype=float)
    mapped = forward @ corners
    low = mapped.min(axis=1)
    high = mapped.max(axis=1)
    out_size = (
        max(1, int(round(high[0] - low[0]))),
        max(1, int(round(high[1] - low[1]))),
    )

    # Pillow wants the output -> input mapping
    offset = inverse @ low
    data = (
        float(inverse[0, 0]), float(inverse[0, 1]), float(offset[0]),
        float(inverse[1, 0]), float(inverse[1, 1]), float(offset[1]),
    )

    image, fill = _prepare_fill(image, background)
    return image.transform(
        out_size,
        Image.Transform.AFFINE,
        data,
        resample=Image.Resampling.BICUBIC,
        fillcolor=fill,
    )


def rotate_image(image: Any, degrees: float, background: str) -> Any:
    """Rotate clockwise by degrees, expanding the canvas and filling with background."""
    _check_image(image)
    image, fill = _prepare_fill(image, background)
    # Pillow rotates counter-clockwise
    return image.rotate(
        -float(degrees),
        resample=Image.Resampling.BICUBIC,
        expand=True,
        fillcolor=fill,
    )


def mirror_vertical(image: Any) -> Any:
    """Flip top to bottom."""
    _check_image(image)
    return image.transpose(Image.Transpose.FLIP_TOP_BOTTOM)


def mirror_horizontal(image: Any) -> Any:
    """Flip left to right."""
    _check_image(image)
    return image.transpose(Image.Transpose.FLIP_LEFT_RIGHT)


def to_grayscale(image: Any) -> Any:
    """Convert to grayscale, keeping the alpha channel when there is one."""
    _check_image(image)
    has_alpha = image.mode in ("RGBA", "LA", "PA") or "transparency" in image.info
    return image.convert("LA" if has_alpha else "L")


def gaussian_blur(image: Any, sigma: float) -> Any:
    """
    Apply Gaussian blur.

    Args:
        image: PIL Image
        sigma: Standard deviation in pixels (>= 1)

    Returns:
        Blurred PIL Image

    Raises:
        ValueError: If sigma < 1
        TypeError: If image not PIL Image
    """
    _check_image(image)

    if sigma < MIN_BLUR_SIGMA:
        raise ValueError(f"sigma must be >= {MIN_BLUR_SIGMA}, got {sigma}")

    if image.mode == "P":
        image = image.convert("RGBA")

    return image.filter(ImageFilter.GaussianBlur(radius=sigma))


def extract_region(image: Any, left: int, top: int, width: int, height: int) -> Any:
    """
    Extract a rectangle from the image.

    Raises:
        ValueError: If the rectangle is empty or leaves the image bounds
    """
    _check_image(image)
    image_width, image_height = get_image_dimension(image)

    if width <= 0 or height <= 0:
        raise ValueError(f"Extract size must be positive, got {width}x{height}")
    if left < 0 or top < 0 or left + width > image_width or top + height > image_height:
        raise ValueError(
            f"Extract region {width}x{height}+{left}+{top} is outside "
            f"the {image_width}x{image_height} image"
        )

    return image.crop((left, top, left + width, top + height))


def _clamp_crop_value(value: Optional[float], limit: int) -> int:
    # None, 0 and infinity all mean "full dimension"
    if not value or math.isinf(value):
        return limit
    return max(1, int(min(value, limit)))


def clamp_crop_sizes(
    width: int,
    height: int,
    sizes: Sequence[Tuple[Optional[float], Optional[float]]],
) -> List[Tuple[int, int]]:
    """
    Clamp requested crop sizes to the image and drop repeats.

    Different requests can collapse onto the same size after clamping
    (e.g. infinity and 500 on a 200x150 image); each size is kept once,
    at its first position.

    Args:
        width: Image width
        height: Image height
        sizes: Requested (w, h) pairs

    Returns:
        Ordered list of distinct (w, h) pairs
    """
    seen = set()
    clamped: List[Tuple[int, int]] = []
    for w, h in sizes:
        size = (_clamp_crop_value(w, width), _clamp_crop_value(h, height))
        if size in seen:
            continue
        seen.add(size)
        clamped.append(size)
    return clamped


def grid_origins(length: int, tile: int) -> List[int]:
    """
    Tile origins along one axis.

    Origins step by `tile` from 0; the last tile is shifted back so it ends
    on the edge instead of overflowing.

    Example:
        >>> grid_origins(250, 100)
        [0, 100, 150]
    """
    return [
        position if position + tile < length else length - tile
        for position in range(0, length, tile)
    ]


def crop_grid(image: Any, sizes: Sequence[Tuple[Optional[float], Optional[float]]]) -> List[Any]:
    """
    Split the image into non-overlapping grid tiles for every requested size.

    Tiles are produced size by size, row by row, left to right.

    Raises:
        MissingDimensionMetadata: If the image dimensions cannot be read
    """
    width, height = get_image_dimension(image)

    tiles = []
    for tile_width, tile_height in clamp_crop_sizes(width, height, sizes):
        for top in grid_origins(height, tile_height):
            for left in grid_origins(width, tile_width):
                tiles.append(extract_region(image, left, top, tile_width, tile_height))
    return tiles
