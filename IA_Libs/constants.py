"""
Constants and configuration values for Image Augment.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the application.
"""

# Fill color for regions exposed by scale, shear and rotate
DEFAULT_BACKGROUND = "#00000000"

# Grayscale modes
GRAYSCALE_ALWAYS = "always"
GRAYSCALE_NEVER = "never"
GRAYSCALE_BOTH = "both"
GRAYSCALE_MODES = (GRAYSCALE_ALWAYS, GRAYSCALE_NEVER, GRAYSCALE_BOTH)

# Blur sigmas below this value are treated as no-op
MIN_BLUR_SIGMA = 1.0

# Filter group names, in application order
GROUP_SCALE = "scale"
GROUP_CROP = "crop"
GROUP_SHEAR = "shear"
GROUP_FLIP_Y = "flipY"
GROUP_FLIP_X = "flipX"
GROUP_ROTATE = "rotate"
GROUP_GRAYSCALE = "grayscale"
GROUP_BLUR = "blur"
GROUP_ORDER = (
    GROUP_SCALE,
    GROUP_CROP,
    GROUP_SHEAR,
    GROUP_FLIP_Y,
    GROUP_FLIP_X,
    GROUP_ROTATE,
    GROUP_GRAYSCALE,
    GROUP_BLUR,
)

# Config file field names
FIELD_BACKGROUND = "background"
FIELD_SCALE = "scale"
FIELD_CROP = "crop"
FIELD_SHEAR = "shear"
FIELD_ROTATE = "rotate"
FIELD_GRAYSCALE = "grayscale"
FIELD_FLIP_X = "flipX"
FIELD_FLIP_Y = "flipY"
FIELD_BLUR = "blur"

# Config file
CONFIG_FILE_NAME = "config.json"
CONFIG_COMMENT_PREFIX = "//"

# Directory defaults
DEFAULT_SRC_DIR = "./images/raw"
DEFAULT_OUT_DIR = "./images/augmented"

# Source files with these extensions are never treated as images
IGNORED_EXTENSIONS = {".txt", ".log"}

# File naming: <stem>-<index><ext>
OUTPUT_INDEX_SEPARATOR = "-"

# Pillow format names by extension, used when saving
SAVE_FORMATS = {
    ".png": "PNG",
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".bmp": "BMP",
    ".gif": "GIF",
    ".tif": "TIFF",
    ".tiff": "TIFF",
    ".webp": "WEBP",
}
DEFAULT_JPEG_QUALITY = 95
