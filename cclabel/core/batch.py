# cclabel/core/batch.py
# Parallel batch labeling using ProcessPoolExecutor, one worker per mask
# All functions are top-level and picklable for multiprocessing

from __future__ import annotations

import logging
import os
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Callable, List, Optional, Tuple

import numpy as np

from .filtering import filterByArea
from .labeling import DEFAULTS, labelImage

logger = logging.getLogger(__name__)

# Type aliases for clarity
BinaryMask = np.ndarray  # np.bool_, shape (H,W)
LabelMap = np.ndarray  # np.int32, shape (H,W), 0=background
ProgressCallback = Callable[[int, int], None]  # (completed, total) -> None


# ---------- Worker functions (must be top-level for pickle) ----------

def _label_single_mask(
    mask: np.ndarray,
    method: str = "floodfill",
    min_size: Optional[int] = None,
    contiguous: bool = False,
    image_index: int = 0
) -> Tuple[int, LabelMap, Optional[BinaryMask]]:
    """
    Label one mask and optionally area-filter it.
    Returns (index, labels, filtered_or_None).

    This function is designed to be called in a worker process.
    """
    labels = labelImage(mask, method=method, contiguous=contiguous)
    filtered = None
    if min_size is not None:
        filtered = filterByArea(labels, min_size, expectedShape=labels.shape)
    return (image_index, labels, filtered)


def _label_single_mask_wrapper(args: Tuple) -> Tuple:
    """Unpacks args tuple for ProcessPoolExecutor.submit()."""
    return _label_single_mask(*args)


# ---------- Public API ----------

def label_batch_parallel(
    masks: List[np.ndarray],
    method: str = str(DEFAULTS["labeling"]["method"]),
    min_size: Optional[int] = None,
    contiguous: bool = bool(DEFAULTS["labeling"]["contiguous"]),
    max_workers: Optional[int] = None,
    progress_callback: Optional[ProgressCallback] = None
) -> Tuple[List[Optional[LabelMap]], List[Optional[BinaryMask]]]:
    """
    Label multiple masks in parallel using ProcessPoolExecutor.

    Parameters:
    -----------
    masks : List[np.ndarray]
        2-D masks, nonzero = foreground.
    method : str
        "floodfill" or "twopass".
    min_size : int, optional
        If given, also area-filter each label grid with this threshold.
    contiguous : bool
        Renumber labels 1..N after labeling.
    max_workers : int, optional
        Max parallel workers. Defaults to min(cpu_count, len(masks)).
    progress_callback : Callable[[int, int], None], optional
        Called with (completed_count, total_count) after each mask finishes.

    Returns:
    --------
    labels_list : List[Optional[np.ndarray]]
        Label grids (int32) in input order; None where a mask failed.
    filtered_list : List[Optional[np.ndarray]]
        Filtered bool masks, or None if min_size is None or the mask failed.

    A failing mask is logged and skipped on both the in-process and the
    pooled path; the other masks are still labeled.
    """
    n = len(masks)
    if n == 0:
        return [], []

    # Determine worker count
    if not max_workers:
        max_workers = int(DEFAULTS["batch"]["maxWorkers"]) or min(os.cpu_count() or 4, n)
    max_workers = max(1, min(max_workers, n))

    args_list = [(masks[i], method, min_size, contiguous, i) for i in range(n)]

    # Results placeholders (maintain order)
    labels_list: List[Optional[np.ndarray]] = [None] * n
    filtered_list: List[Optional[np.ndarray]] = [None] * n

    completed = 0

    # For small batches or single worker, skip multiprocessing overhead
    if n <= 2 or max_workers <= 1:
        for i, args in enumerate(args_list):
            try:
                idx, labels, filtered = _label_single_mask(*args)
                labels_list[idx] = labels
                filtered_list[idx] = filtered
            except Exception:
                # Same policy as the pool: log, leave None, keep going
                logger.exception("Error labeling mask %d", i)
            completed += 1
            if progress_callback:
                progress_callback(completed, n)
    else:
        logger.debug("Labeling %d masks with %d workers", n, max_workers)
        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            futures = {
                executor.submit(_label_single_mask_wrapper, args): i
                for i, args in enumerate(args_list)
            }

            for future in as_completed(futures):
                try:
                    idx, labels, filtered = future.result()
                    labels_list[idx] = labels
                    filtered_list[idx] = filtered
                except Exception:
                    # Log but continue with other masks
                    logger.exception("Error labeling mask %d", futures[future])

                completed += 1
                if progress_callback:
                    progress_callback(completed, n)

    return labels_list, filtered_list


def label_batch_sequential(
    masks: List[np.ndarray],
    method: str = str(DEFAULTS["labeling"]["method"]),
    min_size: Optional[int] = None,
    contiguous: bool = bool(DEFAULTS["labeling"]["contiguous"]),
    progress_callback: Optional[ProgressCallback] = None
) -> Tuple[List[Optional[LabelMap]], List[Optional[BinaryMask]]]:
    """
    Label multiple masks sequentially (no multiprocessing).
    Same interface as label_batch_parallel for easy swapping.
    """
    return label_batch_parallel(
        masks=masks,
        method=method,
        min_size=min_size,
        contiguous=contiguous,
        max_workers=1,
        progress_callback=progress_callback
    )
