"""
IA_Libs - Image Augment Library Modules

This package contains core functionality for the Image Augment project,
organized into specialized sub-packages:

- FilterLib: Augmentation options, filter groups and the image operations they call
- EngineLib: Combination engine that enumerates every filter combination
- DriverLib: Directory scanning, config files and progress reporting
"""

__version__ = "0.1.0"
