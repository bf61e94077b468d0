# cclabel/core/labeling.py
# Connected-component labeling (4-connectivity) - pure callables with no I/O or GUI dependencies
# Safe for headless testing, multiprocessing, and parallelism

from __future__ import annotations

import logging
from typing import Callable, Dict

import numpy as np

from .errors import InvalidArgument
from .grid import NEIGHBORS_4, LabelMap, ensure_labels_int32, ensure_mask_bool
from .unionfind import UnionFind

logger = logging.getLogger(__name__)

# --------------------- Defaults (edit freely) ---------------------
DEFAULTS: Dict[str, Dict[str, float | int | bool | str]] = {
    "io": {
        "byteThreshold": 127,    # 8-bit pixels > this are foreground
        "floatThreshold": 0.5,   # normalized float pixels > this are foreground
    },
    "labeling": {
        "method": "floodfill",   # "floodfill" | "twopass"
        "contiguous": False,     # renumber labels 1..N after labeling
    },
    "filter": {
        "minSize": 1,            # smallest component (px) kept by the area filter
    },
    "batch": {
        "maxWorkers": 0,         # 0 = min(cpu_count, number of images)
    },
}
# ------------------------------------------------------------------


def _emptyLabels(shape) -> LabelMap:
    return np.zeros(shape, dtype=np.int32)


# --------------------- Flood fill ---------------------------------

def label(mask) -> LabelMap:
    """
    Label 4-connected foreground components with an iterative flood fill.

    Components are numbered 1..N in the order their first cell is met in a
    row-major scan. The frontier is an explicit list, so a single component
    covering the whole image needs no call-stack depth.
    Returns int32 labels, 0 = background.

    Memory: the mask and the label grid are worked on as nested Python lists
    (one object pointer per cell), so peak use is several times the int32
    output, about 16 bytes per cell plus the frontier. Tile or bound very
    large rasters before calling.
    """
    fg = ensure_mask_bool(mask)
    rows, cols = fg.shape
    logger.debug("Starting flood-fill labeling on %dx%d mask", rows, cols)
    if fg.size == 0 or not fg.any():
        return _emptyLabels((rows, cols))

    present = fg.tolist()
    out = [[0] * cols for _ in range(rows)]
    currentLabel = 1

    for i in range(rows):
        rowFg = present[i]
        rowOut = out[i]
        for j in range(cols):
            if not rowFg[j] or rowOut[j] != 0:
                continue
            logger.debug("Found new component at (%d,%d) with label %d", i, j, currentLabel)

            # Cells are labelled when pushed: the label grid is the visited guard
            rowOut[j] = currentLabel
            stack = [(i, j)]
            while stack:
                r, c = stack.pop()
                for dr, dc in NEIGHBORS_4:
                    nr = r + dr
                    nc = c + dc
                    if 0 <= nr < rows and 0 <= nc < cols and present[nr][nc] and out[nr][nc] == 0:
                        out[nr][nc] = currentLabel
                        stack.append((nr, nc))

            currentLabel += 1

    logger.debug("Flood-fill labeling done: %d components", currentLabel - 1)
    return np.array(out, dtype=np.int32).reshape(rows, cols)


# --------------------- Two-pass union-find ------------------------

def labelTwoPass(mask) -> LabelMap:
    """
    Label 4-connected foreground components with the classic two-pass algorithm.

    Pass 1 assigns provisional labels from the left and above neighbours and
    records equivalences (smaller root wins). The union-find is then flattened
    and pass 2 swaps every provisional label for its root through a lookup table.

    Labels are NOT contiguous: each component keeps the provisional label of its
    first cell in raster order, and absorbed labels leave gaps. Use remapLabels()
    when 1..N numbering is needed; remapLabels(labelTwoPass(m)) == label(m).

    Memory: like label(), pass 1 runs on nested Python lists, so peak use is
    several times the int32 output plus one union-find slot per provisional
    label. Tile or bound very large rasters before calling.
    """
    fg = ensure_mask_bool(mask)
    rows, cols = fg.shape
    logger.debug("Starting two-pass labeling on %dx%d mask", rows, cols)
    if fg.size == 0 or not fg.any():
        return _emptyLabels((rows, cols))

    present = fg.tolist()
    provisional = [[0] * cols for _ in range(rows)]
    uf = UnionFind()

    # Pass 1: provisional labels, equivalences into the union-find
    for i in range(rows):
        rowFg = present[i]
        rowLab = provisional[i]
        above = provisional[i - 1] if i > 0 else None
        for j in range(cols):
            if not rowFg[j]:
                continue
            left = rowLab[j - 1] if j > 0 else 0
            up = above[j] if above is not None else 0

            if left == 0 and up == 0:
                rowLab[j] = uf.makeSet()
            elif up == 0:
                rowLab[j] = uf.find(left)
            elif left == 0:
                rowLab[j] = uf.find(up)
            else:
                rowLab[j] = uf.union(left, up)

    # Pass 1.5: every entry points directly at its root
    roots = uf.flatten()
    logger.debug("Union-find resolved: %d provisional labels", len(uf))

    # Pass 2: relabel through a LUT (index 0 stays background)
    lut = np.asarray(roots, dtype=np.int32)
    labels = lut[np.array(provisional, dtype=np.int32).reshape(rows, cols)]

    logger.debug("Two-pass labeling done: max label %d", int(labels.max()))
    return labels


# --------------------- Renumbering --------------------------------

def remapLabels(labels) -> LabelMap:
    """
    Renumber a label grid to contiguous 1..N by order of first appearance
    (row-major). Background stays 0. The partition is unchanged.
    """
    labs = ensure_labels_int32(labels)
    if labs.size == 0:
        return _emptyLabels(labs.shape)

    flat = labs.ravel()
    values, firstIdx, inverse = np.unique(flat, return_index=True, return_inverse=True)

    # Rank the non-zero values by where they first show up
    newValues = np.zeros(values.shape[0], dtype=np.int32)
    nz = values > 0
    order = np.argsort(firstIdx[nz], kind="stable")
    ranks = np.empty(order.shape[0], dtype=np.int32)
    ranks[order] = np.arange(1, order.shape[0] + 1, dtype=np.int32)
    newValues[nz] = ranks

    return newValues[inverse.ravel()].reshape(labs.shape)


# --------------------- Dispatcher ---------------------------------

LABELERS: Dict[str, Callable[[np.ndarray], LabelMap]] = {
    "floodfill": label,
    "twopass": labelTwoPass,
}


def labelImage(mask, method: str = "floodfill", contiguous: bool = False) -> LabelMap:
    """
    Run the named labeler ("floodfill" | "twopass") on a mask.
    contiguous=True renumbers the result to 1..N in discovery order.
    """
    try:
        labeler = LABELERS[method]
    except KeyError:
        raise InvalidArgument(f"Unknown labeling method: {method}") from None

    labels = labeler(mask)
    if contiguous:
        labels = remapLabels(labels)
    return labels
