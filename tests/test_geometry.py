import math

import numpy as np
import pytest

from swingline import geometry


def test_cone_vertex_count_and_apex():
    n = 16
    cone = geometry.build_cone(n)
    assert cone.dtype == np.float32
    assert cone.shape == ((n + 2) * 3,)
    verts = cone.reshape(-1, 3)
    assert tuple(verts[0]) == (0.0, 0.0, -1.0)
    assert np.all(verts[1:, 2] == 1.0)


def test_cone_base_ring_angles():
    n = 8
    verts = geometry.build_cone(n).reshape(-1, 3)
    for i in range(n + 1):
        angle = 2 * math.pi * i / n
        assert abs(verts[i + 1, 0] - math.cos(angle)) < 1e-6
        assert abs(verts[i + 1, 1] - math.sin(angle)) < 1e-6
    # fan closes exactly on the first base vertex
    assert np.array_equal(verts[-1], verts[1])


def test_cone_radius_scales_xy_only():
    verts = geometry.build_cone(6, radius=2.5).reshape(-1, 3)
    r = np.hypot(verts[1:, 0], verts[1:, 1])
    assert np.allclose(r, 2.5, atol=1e-6)
    assert verts[0, 2] == -1.0
    assert np.all(verts[1:, 2] == 1.0)


@pytest.mark.parametrize('n', [0, 1, 2, -5])
def test_cone_rejects_low_resolution(n):
    with pytest.raises(ValueError):
        geometry.build_cone(n)


def test_cone_rejects_non_positive_radius():
    with pytest.raises(ValueError):
        geometry.build_cone(8, radius=0.0)


def test_quad_covers_viewport():
    q = geometry.build_quad()
    assert q.shape == (4, 2)
    assert q.dtype == np.float32
    assert set(map(tuple, q.tolist())) == {(-1, -1), (1, -1), (1, 1), (-1, 1)}


def test_instances_shape_and_range():
    sites = geometry.build_instances(1000, seed=3)
    assert sites.shape == (1000, 2)
    assert sites.dtype == np.float32
    assert sites.min() >= -1.0 and sites.max() <= 1.0
    # both halves of the range are used
    assert sites.min() < -0.9 and sites.max() > 0.9


def test_instances_seed_is_reproducible():
    a = geometry.build_instances(10, seed=42)
    b = geometry.build_instances(10, seed=42)
    c = geometry.build_instances(10, seed=43)
    assert np.array_equal(a, b)
    assert not np.array_equal(a, c)


def test_instances_reject_empty():
    with pytest.raises(ValueError):
        geometry.build_instances(0)


def test_as_sites_from_mapping_orders_by_key():
    sites = geometry.as_sites({1: (0.5, 0.5), 0: (-0.5, 0.25)})
    assert sites.dtype == np.float32
    assert np.allclose(sites, [[-0.5, 0.25], [0.5, 0.5]])


def test_as_sites_rejects_gappy_mapping():
    with pytest.raises(ValueError):
        geometry.as_sites({0: (0, 0), 2: (0.1, 0.1)})


@pytest.mark.parametrize('bad', [
    [[0.0, 0.0, 0.0]],
    [],
    [[1.5, 0.0]],
    [[np.nan, 0.0]],
])
def test_as_sites_rejects_bad_input(bad):
    with pytest.raises(ValueError):
        geometry.as_sites(bad)
