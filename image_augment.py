"""
Image Augment command line tool.

Expands every image in a source directory into all combinations of the
configured filters (scale, crop, shear, flip, rotate, grayscale, blur).

Usage:
    python image_augment.py --init
    python image_augment.py --run [--srcDir DIR] [--outDir DIR] [--quiet]
    python image_augment.py --run --preset aggressive --workers 4
"""

import argparse
import logging
import sys
from typing import List, Optional

from IA_Libs import __version__
from IA_Libs.constants import CONFIG_FILE_NAME, DEFAULT_OUT_DIR, DEFAULT_SRC_DIR
from IA_Libs.DriverLib.config_store import init_config, load_options
from IA_Libs.DriverLib.directory_driver import scan_directory
from IA_Libs.FilterLib.presets import get_preset, list_presets
from IA_Libs.FilterLib.variant_builder import build_filter_groups

logger = logging.getLogger("image_augment")

PROG_NAME = "image-augment"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG_NAME,
        description="Generate an augmented image dataset from every combination of filters.",
        epilog=(
            "Use --init to generate a default config file, then edit it. "
            "The config file must exist in run mode unless --preset is given."
        ),
    )
    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"{PROG_NAME} v{__version__}",
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "-i", "--init",
        dest="mode", action="store_const", const="init",
        help="Initialize a configuration file.",
    )
    mode.add_argument(
        "-r", "--run",
        dest="mode", action="store_const", const="run",
        help="Augment every image in the source directory.",
    )

    parser.add_argument(
        "-s", "--srcDir",
        dest="src_dir", default=DEFAULT_SRC_DIR,
        help=f"Source directory (default: {DEFAULT_SRC_DIR})",
    )
    parser.add_argument(
        "-o", "--outDir",
        dest="out_dir", default=DEFAULT_OUT_DIR,
        help=f"Output directory (default: {DEFAULT_OUT_DIR})",
    )
    parser.add_argument(
        "-c", "--config",
        default=CONFIG_FILE_NAME,
        help=f"Config file (default: {CONFIG_FILE_NAME})",
    )
    parser.add_argument(
        "-p", "--preset",
        choices=list_presets(),
        help="Use a built-in preset instead of the config file",
    )
    parser.add_argument(
        "-w", "--workers",
        type=int, default=1,
        help="Number of source files processed at once (default: 1)",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Disable progress output and informational logging.",
    )
    return parser


def _configure_logging(quiet: bool) -> None:
    logging.basicConfig(
        level=logging.WARNING if quiet else logging.INFO,
        format="%(levelname)s: %(message)s",
    )


def run(args: argparse.Namespace) -> int:
    try:
        options = get_preset(args.preset) if args.preset else load_options(args.config)
        filter_groups = build_filter_groups(options)
    except (FileNotFoundError, KeyError, ValueError) as e:
        logger.error(str(e))
        return 1

    try:
        result = scan_directory(
            args.src_dir,
            args.out_dir,
            filter_groups,
            verbose=not args.quiet,
            max_workers=args.workers,
        )
    except (NotADirectoryError, ValueError) as e:
        logger.error(str(e))
        return 1

    return 1 if result.failed_files else 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    argv = sys.argv[1:] if argv is None else list(argv)

    if not argv:
        print(f"{PROG_NAME} v{__version__}", file=sys.stderr)
        print("Error: missing arguments", file=sys.stderr)
        print(f'Run "{PROG_NAME} --help" to see detailed help message', file=sys.stderr)
        return 1

    args = parser.parse_args(argv)
    _configure_logging(args.quiet)

    if args.mode == "init":
        try:
            init_config(args.config)
        except FileExistsError as e:
            logger.error(str(e))
            return 1
        return 0

    if args.mode == "run":
        return run(args)

    print(f"{PROG_NAME} v{__version__}", file=sys.stderr)
    print("Error: missing mode argument (--init or --run)", file=sys.stderr)
    print(f'Run "{PROG_NAME} --help" to see detailed help message', file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
