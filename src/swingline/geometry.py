"""Cone, quad and site geometry for the Voronoi passes.

Everything here is plain numpy and returns 'f4' arrays ready to hand to
`ctx.buffer(...)`. Nothing in this module touches the GPU.
"""
from collections.abc import Mapping
from typing import Optional

import numpy as np


def build_cone(n: int, radius: float = 1.0) -> np.ndarray:
    """Vertices of a cone drawn as a triangle fan.

    Vertex 0 is the apex (0, 0, -1), nearest the viewer. Vertices 1..n+1
    run around the base circle at depth +1; the last one repeats angle 0 so
    the fan closes. `radius` scales x/y only, so depth stays linear in the
    planar distance from the apex.

    Returns a flat float32 array of length (n + 2) * 3.
    """
    n = int(n)
    if n < 3:
        raise ValueError(f'cone resolution must be >= 3, got {n}')
    if not radius > 0:
        raise ValueError(f'cone radius must be positive, got {radius}')

    verts = np.empty((n + 2, 3), dtype=np.float64)
    verts[0] = (0.0, 0.0, -1.0)
    angle = 2.0 * np.pi * np.arange(n + 1) / n
    verts[1:, 0] = radius * np.cos(angle)
    verts[1:, 1] = radius * np.sin(angle)
    verts[1:, 2] = 1.0
    # exact closure; cos/sin of 2*pi are not bit-equal to angle 0
    verts[-1] = verts[1]
    return verts.astype('f4').ravel()


def build_quad() -> np.ndarray:
    """Full-viewport quad as a 4-vertex triangle fan."""
    return np.array([
        [-1.0, -1.0],
        [1.0, -1.0],
        [1.0, 1.0],
        [-1.0, 1.0],
    ], dtype='f4')


def build_instances(m: int, seed: Optional[int] = None) -> np.ndarray:
    """Random site offsets, each component uniform in [-1, 1].

    Returns an (m, 2) float32 array; row i is site i.
    """
    m = int(m)
    if m < 1:
        raise ValueError(f'site count must be >= 1, got {m}')
    rng = np.random.default_rng(seed)
    return rng.uniform(-1.0, 1.0, size=(m, 2)).astype('f4')


def as_sites(points) -> np.ndarray:
    """Validate caller-supplied site positions.

    Accepts an (m, 2) array-like or a mapping {index: (x, y)} whose keys are
    exactly 0..m-1; the mapping is ordered by key. Returns the same shape
    and dtype as `build_instances`.
    """
    if isinstance(points, Mapping):
        keys = sorted(points)
        if keys != list(range(len(keys))):
            raise ValueError('site mapping keys must be exactly 0..N-1')
        points = [points[k] for k in keys]

    sites = np.asarray(points, dtype=np.float64)
    if sites.ndim != 2 or sites.shape[1] != 2 or sites.shape[0] < 1:
        raise ValueError(f'sites must have shape (m, 2), got {sites.shape}')
    if not np.all(np.isfinite(sites)):
        raise ValueError('site coordinates must be finite')
    if np.any(np.abs(sites) > 1.0):
        raise ValueError('site coordinates must lie in [-1, 1]')
    return sites.astype('f4')
