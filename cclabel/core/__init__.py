# cclabel/core/__init__.py
# Core algorithms package - pure callables with no GUI dependencies
# Safe for headless testing, multiprocessing, and parallelism

from .batch import (
    label_batch_parallel,
    label_batch_sequential,
)
from .errors import (
    DimensionMismatch,
    InvalidArgument,
    LabelingError,
)
from .filtering import (
    filterByArea,
    removeSmallAreas,
)
from .grid import (
    NEIGHBORS_4,
    ensure_labels_int32,
    ensure_mask_bool,
)
from .imageio import (
    labelsToColor,
    labelsToImage,
    loadImage,
    maskToImage,
    saveImage,
    showImages,
    toMask,
)
from .labeling import (
    DEFAULTS,
    LABELERS,
    label,
    labelImage,
    labelTwoPass,
    remapLabels,
)
from .unionfind import UnionFind

__all__ = [
    # labeling
    "DEFAULTS",
    "LABELERS",
    "label",
    "labelTwoPass",
    "labelImage",
    "remapLabels",
    # filtering
    "filterByArea",
    "removeSmallAreas",
    # primitives
    "NEIGHBORS_4",
    "UnionFind",
    "ensure_mask_bool",
    "ensure_labels_int32",
    # errors
    "LabelingError",
    "InvalidArgument",
    "DimensionMismatch",
    # image collaborator
    "loadImage",
    "toMask",
    "maskToImage",
    "labelsToImage",
    "labelsToColor",
    "saveImage",
    "showImages",
    # batch parallel
    "label_batch_parallel",
    "label_batch_sequential",
]
