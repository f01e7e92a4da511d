"""Label image export.

PNG files are written top-down, so the GL readback (row 0 at the bottom)
is flipped before saving.
"""
import logging
import os
from typing import Optional

import numpy as np
from PIL import Image

from swingline.config import LABELS
from swingline.labels import decode_labels

log = logging.getLogger(__name__)


def colorize(labels, seed: Optional[int] = None,
             sentinel: int = LABELS['sentinel']) -> np.ndarray:
    """Map site labels to a random RGB palette; sentinel pixels become black.

    Raw label colours of neighbouring sites differ by one in the red byte,
    which is invisible on screen. This is for viewing only.
    """
    lab = np.asarray(labels)
    uncovered = lab == sentinel
    top = int(lab[~uncovered].max()) + 1 if np.any(~uncovered) else 1
    rng = np.random.default_rng(seed)
    palette = rng.integers(32, 256, size=(top, 3), dtype=np.uint8)
    out = np.zeros(lab.shape + (3,), dtype=np.uint8)
    out[~uncovered] = palette[lab[~uncovered]]
    return out


def save_labels_png(path, label_image, colorized: bool = False,
                    seed: Optional[int] = None,
                    sentinel: int = LABELS['sentinel']) -> str:
    """Write an (h, w, 3) uint8 label image to `path` as PNG.

    With `colorized=True` the labels are decoded and mapped through
    `colorize` first. Returns the path written.
    """
    rgb = np.asarray(label_image, dtype=np.uint8)
    if rgb.ndim != 3 or rgb.shape[2] != 3:
        raise ValueError(f'label image must have shape (h, w, 3), got {rgb.shape}')
    if colorized:
        rgb = colorize(decode_labels(rgb), seed=seed, sentinel=sentinel)

    path = os.fspath(path)
    out_dir = os.path.dirname(path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    Image.fromarray(np.ascontiguousarray(rgb[::-1])).save(path, format='PNG')
    log.info('wrote label image %s (%dx%d)', path, rgb.shape[1], rgb.shape[0])
    return path
