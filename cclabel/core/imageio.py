# cclabel/core/imageio.py
# Image <-> grid conversions, file I/O and display windows around the labeling core
# The labelers never see pixel formats: every image becomes a bool mask here first

from __future__ import annotations

import logging
from typing import Dict, Optional

import cv2
import numpy as np

from .grid import Mask, ensure_labels_int32, ensure_mask_bool
from .labeling import DEFAULTS, remapLabels

logger = logging.getLogger(__name__)

# Type aliases for clarity
ImageArray = np.ndarray  # np.uint8 or np.float32, shape (H,W) grayscale or (H,W,3) BGR


def loadImage(path: str, asGray: bool = True) -> ImageArray:
    """Load an image with OpenCV, keeping 8-bit or float depth.
    If asGray=True, loads grayscale; else returns BGR color."""
    flag = cv2.IMREAD_GRAYSCALE if asGray else cv2.IMREAD_COLOR
    img = cv2.imread(path, flag | cv2.IMREAD_ANYDEPTH)
    if img is None:
        raise FileNotFoundError(f"Could not read image: {path}")
    logger.debug("Read %s: shape=%s dtype=%s", path, img.shape, img.dtype)
    return img


def _toGray(img: ImageArray) -> ImageArray:
    if img.ndim == 3 and img.shape[2] == 1:
        return img[:, :, 0]
    if img.ndim == 3:
        return cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)
    return img


def toMask(img: ImageArray, threshold: Optional[float] = None) -> Mask:
    """
    Threshold an image into the canonical bool Mask.

    - bool → as-is
    - float → pixel > floatThreshold (normalized 0..1 scale)
    - uint8 / other ints → pixel > byteThreshold (0..255 scale)
    - uint16 → byteThreshold rescaled to 0..65535
    - BGR → converted to gray first
    threshold overrides the default cutoff for the detected representation.
    """
    img = _toGray(np.asarray(img))
    if img.dtype == np.bool_:
        return ensure_mask_bool(img)
    if img.dtype.kind == "f":
        cut = float(DEFAULTS["io"]["floatThreshold"]) if threshold is None else float(threshold)
    elif img.dtype == np.uint16 and threshold is None:
        # 16-bit scans: same cutoff, rescaled from 0..255 to 0..65535
        cut = float(DEFAULTS["io"]["byteThreshold"]) * 257.0
    else:
        cut = float(DEFAULTS["io"]["byteThreshold"]) if threshold is None else float(threshold)
    return ensure_mask_bool(img > cut)


def maskToImage(mask) -> np.ndarray:
    """Binary mask (uint8 0/255) from any mask-like grid."""
    return ensure_mask_bool(mask).astype(np.uint8) * 255


def labelsToImage(labels) -> np.ndarray:
    """
    Label grid → float32 in [0, 1], each label divided by the largest one.
    Background stays 0, so a single component covering the image is all 1.0.
    All-zero stays zero.
    """
    labs = ensure_labels_int32(labels)
    maxLabel = int(labs.max()) if labs.size else 0
    if maxLabel == 0:
        return np.zeros(labs.shape, dtype=np.float32)
    return labs.astype(np.float32) / np.float32(maxLabel)


def _componentPalette(n: int) -> np.ndarray:
    """(n+1, 3) BGR palette: row 0 black, rows 1..n spread around the hue circle."""
    palette = np.zeros((n + 1, 3), dtype=np.uint8)
    if n == 0:
        return palette
    hues = (np.arange(n, dtype=np.float64) * 0.618033988749895) % 1.0
    hsv = np.empty((n, 1, 3), dtype=np.uint8)
    hsv[:, 0, 0] = (hues * 180.0).astype(np.uint8)  # OpenCV hue range is 0..179
    hsv[:, 0, 1] = 200
    hsv[:, 0, 2] = 255
    palette[1:] = cv2.cvtColor(hsv, cv2.COLOR_HSV2BGR).reshape(n, 3)
    return palette


def labelsToColor(labels, bgGray: Optional[np.ndarray] = None, alpha: float = 0.45) -> np.ndarray:
    """
    One color per component, in discovery order, so both labelers render alike.
    If bgGray (HxW uint8) is given, components are alpha-blended over it and
    background cells show bgGray unchanged. Returns BGR uint8.
    """
    labs = remapLabels(labels)
    n = int(labs.max()) if labs.size else 0

    if bgGray is None:
        return _componentPalette(n)[labs]

    base = cv2.cvtColor(bgGray, cv2.COLOR_GRAY2BGR) if bgGray.ndim == 2 else bgGray.copy()
    if n == 0:
        return base
    color = _componentPalette(n)[labs]
    a = float(np.clip(alpha, 0.0, 1.0))
    blended = cv2.addWeighted(base, 1.0 - a, color, a, 0.0)
    fg = labs > 0
    base[fg] = blended[fg]
    return base


def saveImage(img: np.ndarray, path: str) -> None:
    """Write bool, uint8 or float [0, 1] images. Floats are scaled to 8-bit."""
    out = np.asarray(img)
    if out.dtype == np.bool_:
        out = out.astype(np.uint8) * 255
    elif out.dtype.kind == "f":
        out = np.clip(np.rint(out * 255.0), 0, 255).astype(np.uint8)
    elif out.dtype != np.uint8:
        out = np.clip(out, 0, 255).astype(np.uint8)
    if not cv2.imwrite(path, out):
        raise OSError(f"Could not write image: {path}")
    logger.debug("Wrote %s: shape=%s", path, out.shape)


def showImages(images: Dict[str, np.ndarray], wait: bool = True) -> None:
    """Open one OpenCV window per (title, image); block on a key press, then close them."""
    for title, img in images.items():
        cv2.imshow(title, img)
    if wait:
        cv2.waitKey(0)
        cv2.destroyAllWindows()
