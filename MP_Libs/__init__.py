"""
MP_Libs - MagicPhotos Library Modules

This package contains the editing core of MagicPhotos, organized into
specialized sub-packages:

- ImageEditingLib: Pixel-level effects, brush geometry, undo log and image I/O
- EditorsLib: Interactive editors, async effect generation and event surface
"""

__version__ = "0.1.0"
