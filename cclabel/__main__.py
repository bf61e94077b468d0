# cclabel/__main__.py
# Entry point for running cclabel as a module: python -m cclabel
"""
cclabel - Connected-Component Labeling Toolkit

Usage:
    python -m cclabel label  -I binary.png -O out.png [--method twopass] [-S]
    python -m cclabel filter -I binary.png -O filtered.png --min-size 50 [-S]
    python -m cclabel batch  -O outdir [--min-size 50] [--workers 4] a.png b.png ...
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from .core import (
    DEFAULTS,
    LABELERS,
    LabelingError,
    label_batch_parallel,
    labelImage,
    labelsToColor,
    labelsToImage,
    loadImage,
    maskToImage,
    remapLabels,
    removeSmallAreas,
    saveImage,
    showImages,
    toMask,
)


def _add_common(ap: argparse.ArgumentParser) -> None:
    ap.add_argument(
        "--method",
        type=str,
        default=str(DEFAULTS["labeling"]["method"]),
        choices=sorted(LABELERS),
        help="Labeling algorithm",
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="Log debug messages")


def _cmd_label(ns: argparse.Namespace) -> int:
    print(f"Reading image: {ns.inputImage}")
    image = loadImage(ns.inputImage)
    print(f"Image read successfully. Size: {image.shape[1]}x{image.shape[0]} Type: {image.dtype}")

    print(f"Applying {ns.method} labeling...")
    mask = toMask(image)
    labels = labelImage(mask, method=ns.method, contiguous=ns.contiguous)
    components = int(remapLabels(labels).max()) if labels.size else 0
    print(f"Labeling done. Components: {components}")
    if components > 255 and not ns.color:
        print("Warning: more than 255 components, some share a gray level in the 8-bit output!")

    res_image = labelsToColor(labels) if ns.color else labelsToImage(labels)
    print(f"Writing output image: {ns.outputImage}")
    saveImage(res_image, ns.outputImage)

    if ns.show:
        showImages({
            "Input Image": image,
            "Output Image": res_image,
            "Components": labelsToColor(labels, bgGray=maskToImage(mask)),
        })

    print("Done!")
    return 0


def _cmd_filter(ns: argparse.Namespace) -> int:
    print(f"Reading image: {ns.inputImage}")
    image = loadImage(ns.inputImage)

    res = removeSmallAreas(toMask(image), minArea=ns.min_size, method=ns.method)
    if not res.any():
        print("Warning: the filtered image is empty, no component reaches the size threshold.")

    print(f"Writing output image: {ns.outputImage}")
    saveImage(res, ns.outputImage)

    if ns.show:
        showImages({"Input Image": image, "Filtered Image": res})

    print("Done!")
    return 0


def _cmd_batch(ns: argparse.Namespace) -> int:
    os.makedirs(ns.outputDir, exist_ok=True)
    masks = [toMask(loadImage(p)) for p in ns.inputs]

    def _progress(done: int, total: int) -> None:
        print(f"[{done}/{total}] labeled")

    labels_list, filtered_list = label_batch_parallel(
        masks,
        method=ns.method,
        min_size=ns.min_size,
        max_workers=ns.workers or None,
        progress_callback=_progress,
    )

    failed = 0
    for path, labels, filtered in zip(ns.inputs, labels_list, filtered_list):
        stem = os.path.splitext(os.path.basename(path))[0]
        if labels is None:
            print(f"Error: could not label {path}", file=sys.stderr)
            failed += 1
            continue
        saveImage(labelsToImage(labels), os.path.join(ns.outputDir, f"{stem}_labels.png"))
        if filtered is not None:
            saveImage(maskToImage(filtered), os.path.join(ns.outputDir, f"{stem}_filtered.png"))

    print("Done!")
    return 1 if failed else 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="cclabel", description="Connected component labelling (4 connectivity)")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("label", help="Label connected components and write them as a gray image")
    p.add_argument("-I", "--inputImage", default="binary.png", help="Input image filename")
    p.add_argument("-O", "--outputImage", default="out.png", help="Output image filename")
    p.add_argument("-S", "--show", action="store_true", help="Display input and output images in new windows")
    p.add_argument("--contiguous", action="store_true", help="Renumber labels 1..N before writing")
    p.add_argument("--color", action="store_true", help="Write one color per component instead of gray levels")
    _add_common(p)
    p.set_defaults(func=_cmd_label)

    p = sub.add_parser("filter", help="Delete connected components smaller than --min-size pixels")
    p.add_argument("-I", "--inputImage", default="binary.png", help="Input image filename")
    p.add_argument("-O", "--outputImage", default="filtered.png", help="Output image filename")
    p.add_argument("-S", "--show", action="store_true", help="Display input and output images in new windows")
    p.add_argument("--min-size", type=int, default=int(DEFAULTS["filter"]["minSize"]), help="Smallest component kept (pixels)")
    _add_common(p)
    p.set_defaults(func=_cmd_filter)

    p = sub.add_parser("batch", help="Label many images in parallel, one worker per image")
    p.add_argument("inputs", nargs="+", help="Input image filenames")
    p.add_argument("-O", "--outputDir", default="out", help="Directory receiving <name>_labels.png files")
    p.add_argument("--min-size", type=int, default=None, help="Also write <name>_filtered.png with this threshold")
    p.add_argument("--workers", type=int, default=int(DEFAULTS["batch"]["maxWorkers"]), help="0 = one per CPU")
    _add_common(p)
    p.set_defaults(func=_cmd_batch)

    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ns = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return ns.func(ns)
    except (LabelingError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
