"""
Directory Driver for Image Augment.

Runs the combination engine over every source image in a directory and
saves each augmented image as `<stem>-<index><ext>` in the output
directory, where index counts the images produced for that source file in
enumeration order.

Files are processed one at a time by default. With max_workers > 1 source
files are spread over a bounded thread pool; each file has its own engine
and no state is shared between files, so the output is the same as a
sequential run.

Example:
    >>> groups = build_filter_groups(load_options("config.json"))
    >>> result = scan_directory("images/raw", "images/augmented", groups)
    >>> result.image_count
    240
"""

import concurrent.futures
import logging
import math
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Sequence, Union

from PIL import Image
from tqdm import tqdm

from IA_Libs.constants import (
    DEFAULT_JPEG_QUALITY,
    IGNORED_EXTENSIONS,
    OUTPUT_INDEX_SEPARATOR,
    SAVE_FORMATS,
)
from IA_Libs.EngineLib.combination_engine import (
    augment_image,
    count_combinations,
    get_engine_summary,
)
from IA_Libs.FilterLib.filter_models import FilterGroup

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass
class ScanResult:
    """Outcome of a directory run.

    Attributes:
        file_count: Number of source files found
        image_count: Number of augmented images written
        failed_files: Source files whose augmentation failed
    """
    file_count: int = 0
    image_count: int = 0
    failed_files: List[Path] = field(default_factory=list)


def format_duration(milliseconds: float) -> str:
    """
    Format a duration for progress output.

    Example:
        >>> format_duration(90000)
        '1.5 min'
    """
    time_ms = math.ceil(milliseconds)
    if time_ms < 1000:
        return f"{time_ms} ms"
    if time_ms < 1000 * 60:
        return f"{time_ms / 1000:.1f} sec"
    if time_ms < 1000 * 60 * 60:
        return f"{time_ms / 1000 / 60:.1f} min"
    return f"{time_ms / 1000 / 60 / 60:.1f} hr"


def list_source_files(src_dir: PathLike) -> List[Path]:
    """
    Regular files in src_dir, sorted by name.

    Text and log files are skipped silently; other files whose extension
    Pillow does not recognize are skipped with a warning.
    """
    readable = Image.registered_extensions()
    files = []
    for path in sorted(Path(src_dir).iterdir()):
        if not path.is_file():
            continue
        suffix = path.suffix.lower()
        if suffix in IGNORED_EXTENSIONS:
            continue
        if suffix not in readable:
            logger.warning(f"Skipping {path.name}: unsupported image format")
            continue
        files.append(path)
    return files


def output_path_for(out_dir: PathLike, source_path: Path, index: int) -> Path:
    """Output file for the index-th augmented image of source_path."""
    return Path(out_dir) / f"{source_path.stem}{OUTPUT_INDEX_SEPARATOR}{index}{source_path.suffix}"


def save_image(image: Any, path: Path) -> Path:
    """
    Save an image, converting the mode when the target format needs it.

    Raises:
        OSError: If the file cannot be written
    """
    save_format = SAVE_FORMATS.get(path.suffix.lower())
    kwargs = {}

    if save_format == "JPEG":
        kwargs["quality"] = DEFAULT_JPEG_QUALITY
        if image.mode not in ("RGB", "L"):
            image = image.convert("RGB")
    elif save_format in ("BMP", "GIF") and image.mode == "LA":
        image = image.convert("RGBA")

    try:
        image.save(path, format=save_format, **kwargs)
    except (OSError, ValueError) as e:
        raise OSError(f"Failed to save image to {path}: {str(e)}") from e
    return path


def augment_file(source_path: PathLike, out_dir: PathLike, filter_groups: Sequence[FilterGroup]) -> int:
    """
    Augment one source file and save every resulting image.

    Returns:
        Number of images written

    Raises:
        OSError: If the source cannot be read or an output cannot be written
        Exception: Anything raised while applying the filters
    """
    source_path = Path(source_path)
    with Image.open(source_path) as opened:
        source = opened.copy()

    written = 0
    for index, augmented in enumerate(augment_image(source, filter_groups)):
        save_image(augmented, output_path_for(out_dir, source_path, index))
        written += 1
    return written


def scan_directory(
    src_dir: PathLike,
    out_dir: PathLike,
    filter_groups: Sequence[FilterGroup],
    verbose: bool = True,
    max_workers: int = 1,
    stop_on_error: bool = False,
) -> ScanResult:
    """
    Augment every source image in a directory.

    A file that fails is logged and recorded in ScanResult.failed_files and
    the run continues with the next file, unless stop_on_error is set.

    Args:
        src_dir: Directory with source images
        out_dir: Directory for augmented images (created if missing)
        filter_groups: Filter groups from build_filter_groups()
        verbose: Show a progress bar and log a summary
        max_workers: Number of files processed at once (1 = sequential)
        stop_on_error: Re-raise the first per-file failure, cancelling files
                       still queued in the thread pool

    Returns:
        ScanResult with file and image counts

    Raises:
        NotADirectoryError: If src_dir is not a directory
        ValueError: If max_workers < 1
    """
    src_path = Path(src_dir)
    out_path = Path(out_dir)

    if not src_path.is_dir():
        raise NotADirectoryError(f"Source directory does not exist: {src_path}")
    if max_workers < 1:
        raise ValueError(f"max_workers must be at least 1, got {max_workers}")

    out_path.mkdir(parents=True, exist_ok=True)
    filter_groups = list(filter_groups)

    if verbose:
        logger.info(f"Augmenting images in {src_path} -> {out_path}")
        logger.info(get_engine_summary(filter_groups))

    files = list_source_files(src_path)
    result = ScanResult(file_count=len(files))
    start_time = time.monotonic()

    def record_failure(path: Path, error: Exception) -> None:
        result.failed_files.append(path)
        logger.error(f"Failed to augment {path.name}: {error}")
        if stop_on_error:
            raise error

    with tqdm(total=len(files), desc="Augmenting images", unit="file", disable=not verbose) as progress:
        if max_workers == 1 or len(files) <= 1:
            for path in files:
                try:
                    result.image_count += augment_file(path, out_path, filter_groups)
                except Exception as e:
                    record_failure(path, e)
                progress.update(1)
                progress.set_postfix(images=result.image_count)
        else:
            with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
                futures = {
                    executor.submit(augment_file, path, out_path, filter_groups): path
                    for path in files
                }
                for future in concurrent.futures.as_completed(futures):
                    path = futures[future]
                    try:
                        result.image_count += future.result()
                    except Exception as e:
                        if stop_on_error:
                            # Files not yet started are dropped; running ones finish
                            for pending in futures:
                                pending.cancel()
                        record_failure(path, e)
                    progress.update(1)
                    progress.set_postfix(images=result.image_count)

    result.failed_files.sort()
    elapsed_ms = (time.monotonic() - start_time) * 1000

    if verbose:
        logger.info(
            f"Generated {result.image_count:,} augmented images from "
            f"{result.file_count:,} source images in {format_duration(elapsed_ms)} "
            f"({count_combinations(filter_groups)} combinations per image)"
        )
        if result.failed_files:
            logger.warning(f"{len(result.failed_files)} source file(s) failed")

    return result
