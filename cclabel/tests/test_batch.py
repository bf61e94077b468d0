# cclabel/tests/test_batch.py
# Unit tests for core/batch.py - parallel batch labeling

import os
import sys
import unittest

import numpy as np

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from core.batch import (
    _label_single_mask,
    label_batch_parallel,
    label_batch_sequential,
)
from core.labeling import label


def _make_blobs_mask(h=60, w=60, n=3, seed=0) -> np.ndarray:
    """Create a mask with n separate square blobs of growing size."""
    mask = np.zeros((h, w), dtype=bool)
    for k in range(n):
        y0 = 2 + k * 18
        size = 4 + k * 4
        mask[y0:y0 + size, 5 + seed:5 + seed + size] = True
    return mask


class TestLabelSingleMask(unittest.TestCase):
    """Tests for the worker function _label_single_mask."""

    def test_returns_tuple_of_three(self):
        result = _label_single_mask(_make_blobs_mask())
        self.assertIsInstance(result, tuple)
        self.assertEqual(len(result), 3)

    def test_index_preserved(self):
        result = _label_single_mask(_make_blobs_mask(), image_index=42)
        self.assertEqual(result[0], 42)

    def test_labels_are_int32(self):
        _, labels, _ = _label_single_mask(_make_blobs_mask(), method="twopass")
        self.assertEqual(labels.dtype, np.int32)
        self.assertEqual(len(np.unique(labels[labels > 0])), 3)

    def test_filtered_none_without_min_size(self):
        _, _, filtered = _label_single_mask(_make_blobs_mask())
        self.assertIsNone(filtered)

    def test_filtered_with_min_size(self):
        # blobs: 16, 64, 144 px
        _, _, filtered = _label_single_mask(_make_blobs_mask(), min_size=50)
        self.assertEqual(filtered.dtype, np.bool_)
        self.assertEqual(int(filtered.sum()), 64 + 144)


class TestLabelBatchSequential(unittest.TestCase):
    """Tests for label_batch_sequential."""

    def test_empty_list_returns_empty(self):
        labels, filtered = label_batch_sequential([])
        self.assertEqual(len(labels), 0)
        self.assertEqual(len(filtered), 0)

    def test_multiple_masks(self):
        masks = [_make_blobs_mask(seed=i) for i in range(5)]
        labels, filtered = label_batch_sequential(masks)
        self.assertEqual(len(labels), 5)
        self.assertEqual(len(filtered), 5)
        for m, lab in zip(masks, labels):
            np.testing.assert_array_equal(lab, label(m))

    def test_progress_callback_called(self):
        masks = [_make_blobs_mask() for _ in range(3)]
        progress_calls = []
        def cb(completed, total):
            progress_calls.append((completed, total))
        label_batch_sequential(masks, progress_callback=cb)
        self.assertEqual(len(progress_calls), 3)
        self.assertEqual(progress_calls[-1], (3, 3))

    def test_failed_mask_logged_and_skipped(self):
        masks = [_make_blobs_mask(), np.zeros((2, 2, 2))]
        progress_calls = []
        with self.assertLogs("core.batch", level="ERROR") as cm:
            labels, filtered = label_batch_sequential(
                masks, min_size=20, progress_callback=lambda d, t: progress_calls.append((d, t))
            )
        self.assertIn("Error labeling mask 1", cm.output[0])
        np.testing.assert_array_equal(labels[0], label(masks[0]))
        self.assertIsNotNone(filtered[0])
        self.assertIsNone(labels[1])
        self.assertIsNone(filtered[1])
        self.assertEqual(progress_calls[-1], (2, 2))


class TestLabelBatchParallel(unittest.TestCase):
    """Tests for label_batch_parallel (uses ProcessPoolExecutor)."""

    def test_empty_list_returns_empty(self):
        labels, filtered = label_batch_parallel([])
        self.assertEqual(len(labels), 0)

    def test_single_mask_works(self):
        labels, _ = label_batch_parallel([_make_blobs_mask()], max_workers=1)
        self.assertEqual(len(labels), 1)
        self.assertEqual(labels[0].dtype, np.int32)

    def test_results_match_sequential(self):
        """Parallel and sequential should produce identical results, in input order."""
        masks = [_make_blobs_mask(seed=i, n=1 + i % 3) for i in range(4)]
        lab_seq, fil_seq = label_batch_sequential(masks, method="twopass", min_size=20)
        lab_par, fil_par = label_batch_parallel(masks, method="twopass", min_size=20, max_workers=2)
        for i in range(4):
            np.testing.assert_array_equal(lab_seq[i], lab_par[i])
            np.testing.assert_array_equal(fil_seq[i], fil_par[i])

    def test_failed_mask_leaves_none(self):
        masks = [_make_blobs_mask(), np.zeros((2, 2, 2)), _make_blobs_mask()]
        with self.assertLogs("core.batch", level="ERROR"):
            labels, _ = label_batch_parallel(masks, max_workers=2)
        self.assertIsNotNone(labels[0])
        self.assertIsNone(labels[1])
        self.assertIsNotNone(labels[2])

    def test_max_workers_respected(self):
        masks = [_make_blobs_mask() for _ in range(6)]
        labels, _ = label_batch_parallel(masks, max_workers=1)
        self.assertEqual(len(labels), 6)
        labels2, _ = label_batch_parallel(masks, max_workers=3)
        self.assertEqual(len(labels2), 6)


if __name__ == "__main__":
    unittest.main()
