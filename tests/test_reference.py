import math

import numpy as np

from swingline import reference


def test_pixel_centers_layout():
    c = reference.pixel_centers(4, 2)
    assert c.shape == (2, 4, 2)
    assert np.allclose(c[0, 0], (-0.75, -0.5))
    assert np.allclose(c[1, 3], (0.75, 0.5))


def test_nearest_labels_left_right_split():
    sites = np.array([[-0.5, 0.0], [0.5, 0.0]])
    lab = reference.nearest_labels(sites, 8, 4)
    assert lab.dtype == np.uint32
    assert np.all(lab[:, :4] == 0)
    assert np.all(lab[:, 4:] == 1)


def test_label_margin_single_site_is_infinite():
    m = reference.label_margin([[0.0, 0.0]], 4, 4)
    assert np.all(np.isinf(m))


def test_label_margin_is_small_on_bisector():
    sites = np.array([[-0.5, 0.0], [0.5, 0.0]])
    m = reference.label_margin(sites, 8, 2)
    # pixel columns 3 and 4 straddle x = 0
    assert np.all(m[:, 3:5] < m[:, 0:1])


def test_coverage_radius_single_centered_site():
    r = reference.coverage_radius([[0.0, 0.0]], 16, 16)
    assert math.isclose(r, math.sqrt(2.0))


def test_agreement_counts_confident_pixels_only():
    sites = np.array([[-0.5, 0.0], [0.5, 0.0]])
    ref = reference.nearest_labels(sites, 8, 4)
    assert reference.agreement(ref, sites) == 1.0
    flipped = ref.copy()
    flipped[:, 3:5] = 1 - flipped[:, 3:5]
    # boundary columns excluded by the margin filter
    assert reference.agreement(flipped, sites, min_margin=0.5) == 1.0
    assert reference.agreement(flipped, sites) < 1.0
