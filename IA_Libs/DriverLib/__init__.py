"""
DriverLib - Directory processing and config files

This module handles scanning source directories, writing augmented
images and loading the augmentation config file.
"""

from IA_Libs.DriverLib.config_store import (
    init_config,
    load_options,
    save_options,
)
from IA_Libs.DriverLib.directory_driver import (
    ScanResult,
    augment_file,
    format_duration,
    list_source_files,
    scan_directory,
)

__all__ = [
    "init_config",
    "load_options",
    "save_options",
    "ScanResult",
    "augment_file",
    "format_duration",
    "list_source_files",
    "scan_directory",
]
