# cclabel/__init__.py
# cclabel package root
"""
cclabel - Connected-Component Labeling Toolkit

Subpackages:
    core - Pure algorithms (flood-fill and two-pass labeling, area filter)
           plus the image I/O and batch helpers around them

Quick start:
    python -m cclabel label -I binary.png -O labels.png
    python -m cclabel filter -I binary.png -O filtered.png --min-size 50

    # Or use core algorithms directly:
    from cclabel.core import label, labelTwoPass, filterByArea
"""

# Re-export commonly used items from core for convenience
from .core import (
    DEFAULTS,
    DimensionMismatch,
    InvalidArgument,
    LabelingError,
    filterByArea,
    label,
    label_batch_parallel,
    label_batch_sequential,
    labelImage,
    labelTwoPass,
    labelsToImage,
    loadImage,
    remapLabels,
    removeSmallAreas,
    saveImage,
    toMask,
)

__version__ = "0.1.0"

__all__ = [
    # Labeling
    "DEFAULTS",
    "label",
    "labelTwoPass",
    "labelImage",
    "remapLabels",
    # Filtering
    "filterByArea",
    "removeSmallAreas",
    # Errors
    "LabelingError",
    "InvalidArgument",
    "DimensionMismatch",
    # Image I/O
    "loadImage",
    "toMask",
    "labelsToImage",
    "saveImage",
    # Batch
    "label_batch_parallel",
    "label_batch_sequential",
]
