"""
Pytest configuration and shared fixtures for Image Augment tests.

This module provides shared test images, recording filter variants and
source directories used across multiple test modules.
"""

from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from IA_Libs.FilterLib.filter_models import FilterGroup, Single


def make_gradient_image(width: int, height: int) -> Image.Image:
    """RGB image where red follows x and green follows y, so every pixel differs."""
    xs = np.linspace(0, 255, width, dtype=np.float64)
    ys = np.linspace(0, 255, height, dtype=np.float64)
    array = np.zeros((height, width, 3), dtype=np.uint8)
    array[:, :, 0] = xs[np.newaxis, :].astype(np.uint8)
    array[:, :, 1] = ys[:, np.newaxis].astype(np.uint8)
    array[:, :, 2] = 128
    return Image.fromarray(array)


def tagging_variant(label: str):
    """Variant that copies its input and appends label to info['trail']."""
    def apply(image):
        out = image.copy()
        out.info["trail"] = tuple(image.info.get("trail", ())) + (label,)
        return Single(out)
    return apply


def tagging_group(name: str, size: int) -> FilterGroup:
    """Group of `size` tagging variants labelled '<name><i>'."""
    return FilterGroup(name, [tagging_variant(f"{name}{i}") for i in range(size)])


@pytest.fixture
def gradient_image():
    """A 200x150 RGB gradient image."""
    return make_gradient_image(200, 150)


@pytest.fixture
def small_image():
    """A 40x30 RGB gradient image, small enough for large combination runs."""
    return make_gradient_image(40, 30)


@pytest.fixture
def source_dir(tmp_path) -> Path:
    """
    Provide a directory with two PNG sources and files that must be skipped.

    Returns:
        Path to the source directory
    """
    src = tmp_path / "raw"
    src.mkdir()
    make_gradient_image(40, 30).save(src / "alpha.png")
    make_gradient_image(32, 32).save(src / "beta.png")
    (src / "notes.txt").write_text("not an image")
    (src / "run.log").write_text("not an image either")
    return src
