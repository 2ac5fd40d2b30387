"""
Config file storage for Image Augment.

Augmentation options are kept in a JSON file (config.json by default).
Whole-line `//` comments are allowed so the generated template can document
every key and carry commented-out alternatives.

Functions:
    load_options: Load and validate options from a config file
    save_options: Write options to a config file as plain JSON
    init_config: Write the commented config template
"""

import json
import logging
from pathlib import Path
from typing import Union

from IA_Libs.constants import CONFIG_COMMENT_PREFIX, CONFIG_FILE_NAME
from IA_Libs.FilterLib.filter_models import AugmentationOptions

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

CONFIG_TEMPLATE = """{
  // "background": ["#00000000", "#88888888", "#ffffffff"],
  "scale": [
    [0.75, 0.75],
    [1, 1]
  ],
  "crop": [
    [null, null],
    [150, 150]
  ],
  "shear": [
    [0, 0],
    // [-16, 0],
    [16, 0],
    // [0, -16],
    [0, 16]
  ],
  "rotate": [0],
  "grayscale": "always",
  "flipX": true,
  "flipY": false,
  "blur": [0]
}
// Options (every key is optional; absent or empty keys add no filter group):
//
// background: list of colors for regions exposed by scale, shear and rotate.
//   Default ["#00000000"] (transparent). Every color multiplies those groups.
// scale: list of [width, height] factors, applied before crop.
//   e.g. [[0.8, 1.2]] for 80% width and 120% height
// crop: list of [width, height] in pixels, applied after scale.
//   null means the full image dimension. Each size tiles the image into a grid.
// shear: list of [x, y] in degrees, applied after crop.
//   e.g. [[0, 0], [-16, 0], [16, 0], [0, -16], [0, 16]]
// rotate: list of degrees (positive is clockwise), e.g. [-15, 0, 15]
// grayscale: "always", "never" or "both"
// flipX: true to add a horizontally mirrored copy of every image
// flipY: true to add a vertically mirrored copy of every image
// blur: list of Gaussian sigmas; values below 1 leave the image unblurred
//   e.g. [0, 1]
"""


def strip_comments(text: str) -> str:
    """Drop whole-line `//` comments."""
    return "\n".join(
        line for line in text.splitlines()
        if not line.lstrip().startswith(CONFIG_COMMENT_PREFIX)
    )


def load_options(path: PathLike = CONFIG_FILE_NAME) -> AugmentationOptions:
    """
    Load augmentation options from a config file.

    Args:
        path: Path to the config file

    Returns:
        Validated AugmentationOptions

    Raises:
        FileNotFoundError: If the config file does not exist
        ValueError: If the file is not valid JSON or holds invalid options
    """
    config_path = Path(path)
    if not config_path.is_file():
        raise FileNotFoundError(
            f"Config file not found: {config_path}. Use --init to create one."
        )

    text = config_path.read_text(encoding="utf-8")
    try:
        data = json.loads(strip_comments(text))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(
            f"Config file {config_path} must contain a JSON object, got {type(data).__name__}"
        )

    options = AugmentationOptions.from_dict(data)
    logger.debug(f"Loaded options from {config_path}")
    return options


def save_options(path: PathLike, options: AugmentationOptions) -> Path:
    """Write options to a config file as plain JSON, replacing any existing file."""
    config_path = Path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(options.to_dict(), f, indent=2)
        f.write("\n")
    return config_path


def init_config(path: PathLike = CONFIG_FILE_NAME) -> Path:
    """
    Write the commented config template.

    Raises:
        FileExistsError: If the config file already exists
    """
    config_path = Path(path)
    if config_path.exists():
        raise FileExistsError(f"Config file already exists at {config_path}")

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(CONFIG_TEMPLATE, encoding="utf-8")
    logger.info(f"Config file initialized at {config_path}")
    return config_path
