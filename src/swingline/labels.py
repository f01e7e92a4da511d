"""Base-256 site-index <-> RGB label codec.

The label pass writes site `i` as R = i % 256, G = (i // 256) % 256 and
B = (i // 65536) % 256. These helpers are the CPU side of that encoding and
accept scalars or numpy arrays.
"""
from typing import Tuple

import numpy as np

from swingline.config import LABELS

MAX_LABELS = LABELS['max_labels']


def encode_index(index: int) -> Tuple[int, int, int]:
    """Encode a single site index as an (r, g, b) byte triple."""
    index = int(index)
    if not 0 <= index < MAX_LABELS:
        raise ValueError(f'label index {index} outside [0, {MAX_LABELS})')
    return index & 0xFF, (index >> 8) & 0xFF, (index >> 16) & 0xFF


def decode_rgb(r: int, g: int, b: int) -> int:
    return int(r) | (int(g) << 8) | (int(b) << 16)


def encode_labels(indices) -> np.ndarray:
    """Vectorised `encode_index`; returns an (..., 3) uint8 array."""
    idx = np.asarray(indices)
    if idx.size and (idx.min() < 0 or idx.max() >= MAX_LABELS):
        raise ValueError(f'label indices must lie in [0, {MAX_LABELS})')
    idx = idx.astype(np.uint32)
    out = np.empty(idx.shape + (3,), dtype=np.uint8)
    out[..., 0] = idx & 0xFF
    out[..., 1] = (idx >> 8) & 0xFF
    out[..., 2] = (idx >> 16) & 0xFF
    return out


def decode_labels(rgb) -> np.ndarray:
    """Decode an (..., 3) uint8 label image into (...) uint32 indices."""
    a = np.asarray(rgb)
    if a.shape[-1] < 3:
        raise ValueError(f'expected at least 3 channels, got shape {a.shape}')
    a = a[..., :3].astype(np.uint32)
    return a[..., 0] | (a[..., 1] << 8) | (a[..., 2] << 16)


def sentinel_color(sentinel: int = LABELS['sentinel']) -> Tuple[float, float, float]:
    """Normalised float RGB used to clear the label attachment."""
    r, g, b = encode_index(sentinel)
    return r / 255.0, g / 255.0, b / 255.0


def check_site_count(count: int, sentinel: int = LABELS['sentinel']) -> None:
    """Reject site counts that would overflow or collide with the sentinel."""
    if not 0 <= sentinel < MAX_LABELS:
        raise ValueError(f'sentinel label {sentinel} outside [0, {MAX_LABELS})')
    if count < 1:
        raise ValueError(f'need at least one site, got {count}')
    if count > MAX_LABELS:
        raise ValueError(f'{count} sites exceed the {MAX_LABELS} label ceiling')
    if sentinel < count:
        raise ValueError(
            f'sentinel label {sentinel:#08x} collides with site indices 0..{count - 1}'
        )
