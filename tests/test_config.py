import math

import pytest

from swingline import config


def test_defaults_match_reference_scene():
    d = config.RENDER_DEFAULTS
    assert d['cone_res'] == 64
    assert d['point_count'] == 100
    assert (d['width'], d['height']) == (400, 400)


def test_render_settings_merges_overrides():
    s = config.render_settings(point_count=7, seed=None, width=32)
    assert s['point_count'] == 7
    assert s['width'] == 32
    # None keeps the default
    assert s['seed'] is config.RENDER_DEFAULTS['seed']
    # defaults are not mutated
    assert config.RENDER_DEFAULTS['point_count'] == 100


def test_render_settings_rejects_unknown_keys():
    with pytest.raises(KeyError):
        config.render_settings(points=3)


def test_full_coverage_radius_is_viewport_diagonal():
    assert math.isclose(config.FULL_COVERAGE_RADIUS, math.hypot(2.0, 2.0))
