# cclabel/core/grid.py
# Grid primitives shared by the labelers and the area filter (dtype contracts, neighbourhood)

from __future__ import annotations

from typing import Tuple

import numpy as np

from .errors import InvalidArgument

# Type aliases for clarity
Mask = np.ndarray  # np.bool_, shape (H,W), True = foreground
LabelMap = np.ndarray  # np.int32, shape (H,W), 0=background, >0 = component label

# 4-connectivity: up, down, left, right
NEIGHBORS_4: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))

_INT32_MAX = np.iinfo(np.int32).max


# ============================================================================
# Dtype Normalization Helpers
# ============================================================================

def ensure_mask_bool(mask) -> Mask:
    """
    Normalize a mask to the canonical boolean grid used by the labelers.

    Handles:
    - bool → copied as-is
    - uint8 {0, 255} / {0, 1} → nonzero is foreground
    - any other numeric dtype → nonzero is foreground
    - nested lists → converted through numpy

    The caller's object is never modified; a fresh array is always returned.

    Raises:
        InvalidArgument: if the input is not two-dimensional
    """
    m = np.asarray(mask)
    if m.ndim != 2:
        raise InvalidArgument(f"mask must be 2-D (rows x cols), got {m.ndim}-D input")
    if m.dtype == np.bool_:
        return m.copy()
    return m != 0


def ensure_labels_int32(labels) -> LabelMap:
    """
    Normalize labels to canonical int32 format with background=0.

    Handles:
    - Any int or bool dtype → int32
    - Float grids holding whole numbers → int32

    Args:
        labels: Input label grid

    Returns:
        np.ndarray of dtype int32, background=0, components > 0

    Raises:
        InvalidArgument: non 2-D grid, negative or fractional labels, labels beyond int32
    """
    lab = np.asarray(labels)
    if lab.ndim != 2:
        raise InvalidArgument(f"label grid must be 2-D (rows x cols), got {lab.ndim}-D input")
    if lab.size == 0:
        return np.zeros(lab.shape, dtype=np.int32)

    if lab.dtype.kind == "f":
        if not np.all(np.isfinite(lab)) or not np.all(lab == np.floor(lab)):
            raise InvalidArgument("label grid must hold whole numbers")
    elif lab.dtype.kind not in "biu":
        raise InvalidArgument(f"label grid has unsupported dtype {lab.dtype}")

    if lab.min() < 0:
        raise InvalidArgument("label grid must not contain negative labels")
    if lab.max() > _INT32_MAX:
        raise InvalidArgument("label grid holds labels beyond the int32 range")

    return lab.astype(np.int32, copy=False)
