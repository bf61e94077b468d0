# cclabel/core/filtering.py
# Area filtering of labeled components - pure callables with no I/O or GUI dependencies

from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

import numpy as np

from .errors import DimensionMismatch, InvalidArgument
from .grid import LabelMap, Mask, ensure_labels_int32
from .labeling import DEFAULTS, labelImage

logger = logging.getLogger(__name__)


def _countTable(labels: LabelMap) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Labels present in the grid, per-cell index into them, and pixel count per label.
    Sized by the number of distinct labels, not by the largest label value.
    """
    values, inverse, counts = np.unique(labels.ravel(), return_inverse=True, return_counts=True)
    return values, inverse.ravel(), counts


def _labelCounts(labels: LabelMap) -> Dict[int, int]:
    """Label -> pixel count for every foreground label (background 0 skipped)."""
    values, _, counts = _countTable(labels)
    return {int(v): int(c) for v, c in zip(values, counts) if v != 0}


def _checkMinSize(minSize) -> int:
    if isinstance(minSize, (bool, np.bool_)) or not isinstance(minSize, (int, np.integer)):
        raise InvalidArgument(f"minSize must be an integer, got {type(minSize).__name__}")
    if minSize <= 0:
        raise InvalidArgument(f"minSize must be positive, got {minSize}")
    return int(minSize)


def filterByArea(
    labels,
    minSize: int,
    expectedShape: Optional[Tuple[int, int]] = None
) -> Mask:
    """
    Keep the foreground cells whose component holds at least minSize pixels.

    labels: HxW label grid (0 = background), from either labeler.
    expectedShape: optional (rows, cols) the grid must have.
    Returns a new bool mask of the same shape. An all-background result is valid.
    """
    minSize = _checkMinSize(minSize)
    labs = ensure_labels_int32(labels)
    if expectedShape is not None and labs.shape != tuple(expectedShape):
        raise DimensionMismatch(expectedShape, labs.shape)

    if labs.size == 0:
        return np.zeros(labs.shape, dtype=bool)

    # First scan: label -> pixel count
    values, inverse, counts = _countTable(labs)

    # Second scan: keep LUT gathered per cell
    keep = (counts >= minSize) & (values != 0)
    out = keep[inverse].reshape(labs.shape)

    logger.debug(
        "Area filter (minSize=%d): kept %d of %d components",
        minSize, int(np.count_nonzero(keep)), int(np.count_nonzero(values))
    )
    return out


def removeSmallAreas(
    mask,
    minArea: int = int(DEFAULTS["filter"]["minSize"]),
    method: str = str(DEFAULTS["labeling"]["method"])
) -> np.ndarray:
    """Remove 4-connected components smaller than minArea. Returns uint8 with FG=255."""
    labels = labelImage(mask, method=method)
    kept = filterByArea(labels, minArea, expectedShape=labels.shape)
    if kept.size > 0 and not kept.any():
        logger.warning("Filtered image is empty: no component reaches %d pixels", minArea)
    return kept.astype(np.uint8) * 255
