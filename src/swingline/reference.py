"""CPU nearest-site labels used to check the rasterized Voronoi diagram.

Pixel centres are evaluated with a scipy cKDTree, the same nearest-neighbour
rasterization trick used for turning scattered nodes into grids. Arrays are
laid out like the GPU readback: row 0 is the bottom of the viewport.
"""
import numpy as np
from scipy.spatial import cKDTree

from swingline.geometry import as_sites


def pixel_centers(width: int, height: int) -> np.ndarray:
    """NDC coordinates of every pixel centre, shape (height, width, 2)."""
    xs = (np.arange(width) + 0.5) * (2.0 / width) - 1.0
    ys = (np.arange(height) + 0.5) * (2.0 / height) - 1.0
    gx, gy = np.meshgrid(xs, ys)
    return np.stack([gx, gy], axis=-1)


def _query(sites, width, height, k):
    pts = as_sites(sites).astype(np.float64)
    tree = cKDTree(pts)
    q = pixel_centers(width, height).reshape(-1, 2)
    k = min(k, len(pts))
    dists, inds = tree.query(q, k=k)
    return dists.reshape(height, width, -1), inds.reshape(height, width, -1)


def nearest_labels(sites, width: int, height: int) -> np.ndarray:
    """Index of the nearest site for each pixel centre, (height, width) uint32."""
    _, inds = _query(sites, width, height, k=1)
    return inds[..., 0].astype(np.uint32)


def label_margin(sites, width: int, height: int) -> np.ndarray:
    """Second-nearest minus nearest distance per pixel (inf with one site).

    Small margins mark pixels on or near a Voronoi edge, where ties and the
    polygonal cone approximation may legitimately pick the neighbour.
    """
    dists, _ = _query(sites, width, height, k=2)
    if dists.shape[-1] < 2:
        return np.full((height, width), np.inf)
    return dists[..., 1] - dists[..., 0]


def coverage_radius(sites, width: int, height: int) -> float:
    """Smallest cone radius that reaches every pixel centre and corner.

    A cone whose rim is exactly this far out still leaves the farthest
    point on the far plane, so callers should add a little slack.
    """
    pts = as_sites(sites).astype(np.float64)
    tree = cKDTree(pts)
    q = pixel_centers(width, height).reshape(-1, 2)
    corners = np.array([[-1.0, -1.0], [1.0, -1.0], [1.0, 1.0], [-1.0, 1.0]])
    d, _ = tree.query(np.vstack([q, corners]), k=1)
    return float(np.max(d))


def agreement(gpu_labels, sites, min_margin: float = 0.0) -> float:
    """Fraction of confidently-labelled pixels where the GPU matches the CPU.

    Only pixels whose `label_margin` exceeds `min_margin` are compared.
    Returns 1.0 when no pixel qualifies.
    """
    gpu = np.asarray(gpu_labels)
    height, width = gpu.shape
    ref = nearest_labels(sites, width, height)
    mask = label_margin(sites, width, height) > min_margin
    if not np.any(mask):
        return 1.0
    return float(np.mean(gpu[mask] == ref[mask]))
