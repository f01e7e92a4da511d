# -*- coding: utf-8 -*-

"""
swingline/config.py

This module centralizes the tunable parameters of the GPU Voronoi renderer.
Keeping them in one place means the headless renderer, the window viewer
and the command line all start from the same numbers.

Contents:
---------
1. RENDER_DEFAULTS:
   - Tessellation of the cone mesh (`cone_res`), how many sites to scatter
     (`point_count`), the label image size and the cone radius.
   - A larger `cone_res` gives a rounder distance metric; a low value turns
     the cells into k-gon approximations of the true Voronoi regions.

2. GL_REQUIREMENTS:
   - Minimum OpenGL version as moderngl's version code (330 == 3.3 core).
   - Standalone backend: None lets moderngl pick (falling back to EGL on
     Linux when that fails), or a glcontext backend name such as 'egl'.

3. LABELS:
   - The sentinel label written to pixels that no cone covers, and the hard
     ceiling of the 3-channel base-256 encoding.

4. PRESENTATION:
   - Clear colour of the presentation target before the blit.

5. VIEWER:
   - Window title, moderngl-window backend and default export path.

Usage:
------
    from swingline.config import RENDER_DEFAULTS, render_settings

    settings = render_settings(point_count=500, seed=7)

"""
import math

# ───────────────────────────────────────────────────────────────────────────────
# 1) RENDERING DEFAULTS
# ───────────────────────────────────────────────────────────────────────────────
RENDER_DEFAULTS = {
    'cone_res': 64,           # segments around the cone base
    'point_count': 100,       # number of random sites
    'width': 400,             # label image width (px)
    'height': 400,            # label image height (px)
    'cone_radius': 1.0,       # base radius of each cone in NDC units
    'seed': None,             # RNG seed for random site placement
}

# radius that covers the viewport for any site set inside [-1, 1]²
FULL_COVERAGE_RADIUS = 2.0 * math.sqrt(2.0)

# ───────────────────────────────────────────────────────────────────────────────
# 2) OPENGL REQUIREMENTS
# ───────────────────────────────────────────────────────────────────────────────
GL_REQUIREMENTS = {
    'require': 330,
    'gl_version': (3, 3),
    'backend': None,
}

# ───────────────────────────────────────────────────────────────────────────────
# 3) LABEL ENCODING
# ───────────────────────────────────────────────────────────────────────────────
LABELS = {
    'sentinel': 0xFFFFFF,     # "no site resolved here" (white)
    'max_labels': 2 ** 24,    # R, G and B bytes, little-endian
}

# ───────────────────────────────────────────────────────────────────────────────
# 4) PRESENTATION PASS
# ───────────────────────────────────────────────────────────────────────────────
PRESENTATION = {
    'clear_color': (0.0, 0.0, 0.0),
}

# ───────────────────────────────────────────────────────────────────────────────
# 5) VIEWER
# ───────────────────────────────────────────────────────────────────────────────
VIEWER = {
    'title': 'swingline',
    'window': 'pygame2',
    'output': 'voronoi.png',
}


def render_settings(**overrides):
    """Return a copy of RENDER_DEFAULTS updated with `overrides`.

    Overrides set to None keep the default. Unknown keys raise KeyError so
    typos in caller code do not silently fall back to defaults.
    """
    settings = dict(RENDER_DEFAULTS)
    for key, value in overrides.items():
        if key not in settings:
            raise KeyError(f'unknown render setting: {key!r}')
        if value is not None:
            settings[key] = value
    return settings
