"""GPU Voronoi renderer: resource provisioning, label pass and presentation.

Label pass
    Every site is an instance of one shared cone (apex nearest the viewer,
    base ring at the far plane). Depth testing keeps, per pixel, the cone
    surface closest to the viewer, which is the nearest site in the plane.
    The vertex shader colours each instance with its base-256 encoded index,
    so the colour attachment ends up holding a label image.

Presentation pass
    A full-screen quad copies the label texture to a target framebuffer with
    `texelFetch` at integer pixel coordinates, so labels are never filtered.

Framebuffer bindings and enable flags are only changed inside
`moderngl.Scope` blocks, which restore the previous state on exit. The
presentation pass binds the label texture to unit 0 itself.

Usage:
    ctx = create_context()
    with VoronoiRenderer(ctx, build_instances(100, seed=1)) as r:
        r.render_labels()
        labels = r.read_labels()
"""
import logging
from typing import Optional

import moderngl
import numpy as np

from swingline.config import LABELS, PRESENTATION, RENDER_DEFAULTS
from swingline.context import create_context
from swingline.errors import FramebufferIncompleteError
from swingline.geometry import as_sites, build_cone, build_quad
from swingline.labels import check_site_count, decode_labels, sentinel_color
from swingline.shaders import (BLIT_FRAGMENT_SHADER, QUAD_VERTEX_SHADER,
                               VORONOI_FRAGMENT_SHADER, VORONOI_VERTEX_SHADER,
                               build_program)

log = logging.getLogger(__name__)


class VoronoiRenderer:
    """Owns every GPU object needed to label and present one site set.

    Parameters
    ----------
    ctx : moderngl.Context
        Active context (3.3 core or newer). Not released by the renderer.
    sites : array-like, shape (m, 2)
        Site positions in normalised device coordinates. Row i is site i.
    width, height : int
        Label image size in pixels.
    cone_res : int
        Segments around each cone base.
    cone_radius : float
        Cone base radius in NDC. Must be large enough to cover the viewport
        for the given sites; uncovered pixels silently keep the sentinel.
    sentinel : int
        Label written to pixels no cone reaches.
    """

    # release order: dependents before the objects they reference
    _gpu_objects = ('_label_scope', 'voronoi_vao', 'quad_vao',
                    'cone_vbo', 'instance_vbo', 'quad_vbo',
                    'framebuffer', 'present_target',
                    'label_texture', 'depth_texture',
                    'voronoi_prog', 'blit_prog')

    def __init__(self, ctx: moderngl.Context, sites,
                 width: int = RENDER_DEFAULTS['width'],
                 height: int = RENDER_DEFAULTS['height'],
                 cone_res: int = RENDER_DEFAULTS['cone_res'],
                 cone_radius: float = RENDER_DEFAULTS['cone_radius'],
                 sentinel: int = LABELS['sentinel']):
        width, height = int(width), int(height)
        if width < 1 or height < 1:
            raise ValueError(f'label image size must be positive, got {width}x{height}')

        self.ctx = ctx
        self.sites = as_sites(sites)
        self.site_count = len(self.sites)
        check_site_count(self.site_count, sentinel)
        self.sentinel = int(sentinel)
        self.size = (width, height)
        self.cone_res = int(cone_res)
        self.cone_radius = float(cone_radius)

        # geometry is validated before any GPU object exists
        cone = build_cone(self.cone_res, self.cone_radius)

        try:
            self._build_pipeline(cone)
            self._provision()
        except Exception:
            self.release()
            raise
        log.debug('voronoi renderer ready: %d sites, %dx%d, cone_res=%d, radius=%.3f',
                  self.site_count, width, height, self.cone_res, self.cone_radius)

    def _build_pipeline(self, cone):
        """Compile both programs and upload the cone, instance and quad buffers."""
        ctx = self.ctx
        self.voronoi_prog = build_program(ctx, VORONOI_VERTEX_SHADER, VORONOI_FRAGMENT_SHADER,
                                          name='voronoi')
        self.blit_prog = build_program(ctx, QUAD_VERTEX_SHADER, BLIT_FRAGMENT_SHADER,
                                       name='blit')
        self.blit_prog['tex'].value = 0

        self.cone_vbo = ctx.buffer(cone.tobytes())
        self.instance_vbo = ctx.buffer(self.sites.tobytes())
        self.voronoi_vao = ctx.vertex_array(
            self.voronoi_prog,
            [
                (self.cone_vbo, '3f', 'pos'),
                (self.instance_vbo, '2f/i', 'offset'),
            ],
        )

        self.quad_vbo = ctx.buffer(build_quad().tobytes())
        self.quad_vao = ctx.vertex_array(self.blit_prog, [(self.quad_vbo, '2f', 'pos')])

    # ------------------------------------------------------------------
    # resource provisioning
    # ------------------------------------------------------------------
    def _provision(self):
        """Allocate the label/depth textures and the offscreen targets."""
        ctx = self.ctx
        self.label_texture = ctx.texture(self.size, 3, dtype='f1')
        self.label_texture.filter = (moderngl.NEAREST, moderngl.NEAREST)
        self.label_texture.repeat_x = False
        self.label_texture.repeat_y = False

        self.depth_texture = ctx.depth_texture(self.size)
        # plain depth reads, not shadow comparisons
        self.depth_texture.compare_func = ''

        try:
            self.framebuffer = ctx.framebuffer(
                color_attachments=[self.label_texture],
                depth_attachment=self.depth_texture,
            )
        except moderngl.Error as e:
            raise FramebufferIncompleteError(f'framebuffer is incomplete: {e}') from e

        # headless presentation target; the viewer presents to ctx.screen instead
        self.present_target = ctx.simple_framebuffer(self.size, components=4)

        self._label_scope = ctx.scope(self.framebuffer, enable_only=moderngl.DEPTH_TEST)
        log.debug('provisioned label/depth textures and framebuffer at %dx%d', *self.size)

    # ------------------------------------------------------------------
    # passes
    # ------------------------------------------------------------------
    def render_labels(self) -> None:
        """Label pass: draw every cone instance into the offscreen target."""
        r, g, b = sentinel_color(self.sentinel)
        with self._label_scope:
            self.ctx.depth_func = '<'
            self.framebuffer.clear(r, g, b, 1.0, depth=1.0)
            self.voronoi_vao.render(moderngl.TRIANGLE_FAN,
                                    vertices=self.cone_res + 2,
                                    instances=self.site_count)
        log.debug('label pass drew %d cone instances', self.site_count)

    def present(self, target: Optional[moderngl.Framebuffer] = None) -> None:
        """Presentation pass: copy the label texture into `target` texel by texel.

        `target` defaults to the renderer's own offscreen presentation
        framebuffer; the viewer passes the window's screen framebuffer.
        """
        if target is None:
            target = self.present_target
        # one scope per call: targets come and go (window resizes, released fbos)
        scope = self.ctx.scope(target, enable_only=moderngl.NOTHING)
        try:
            with scope:
                target.clear(*PRESENTATION['clear_color'], 1.0)
                self.label_texture.use(0)
                self.quad_vao.render(moderngl.TRIANGLE_FAN, vertices=4)
        finally:
            scope.release()

    def render(self) -> np.ndarray:
        """Run the label pass and return the decoded labels."""
        self.render_labels()
        return self.read_labels()

    # ------------------------------------------------------------------
    # readback
    # ------------------------------------------------------------------
    def read_label_image(self) -> np.ndarray:
        """Raw (height, width, 3) uint8 label image, row 0 at the bottom."""
        width, height = self.size
        raw = self.label_texture.read(alignment=1)
        return np.frombuffer(raw, dtype=np.uint8).reshape(height, width, 3).copy()

    def read_labels(self) -> np.ndarray:
        """Decoded (height, width) uint32 site indices (sentinel where uncovered)."""
        return decode_labels(self.read_label_image())

    def read_depth(self) -> np.ndarray:
        width, height = self.size
        raw = self.depth_texture.read(alignment=1)
        return np.frombuffer(raw, dtype=np.float32).reshape(height, width).copy()

    def read_presented(self, target: Optional[moderngl.Framebuffer] = None) -> np.ndarray:
        """RGB contents of a presentation target as (height, width, 3) uint8."""
        if target is None:
            target = self.present_target
        width, height = target.size
        raw = target.read(components=3, alignment=1)
        return np.frombuffer(raw, dtype=np.uint8).reshape(height, width, 3).copy()

    # ------------------------------------------------------------------
    # lifetime
    # ------------------------------------------------------------------
    def release(self):
        """Free every GPU object owned by the renderer (not the context).

        Also runs when construction fails part-way, so objects that were
        never created are skipped.
        """
        for name in self._gpu_objects:
            obj = self.__dict__.pop(name, None)
            if obj is not None:
                obj.release()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()


def render_voronoi(sites, width: int = RENDER_DEFAULTS['width'],
                   height: int = RENDER_DEFAULTS['height'],
                   cone_res: int = RENDER_DEFAULTS['cone_res'],
                   cone_radius: float = RENDER_DEFAULTS['cone_radius'],
                   sentinel: int = LABELS['sentinel'],
                   ctx: Optional[moderngl.Context] = None) -> np.ndarray:
    """One-shot helper: sites in, decoded (height, width) labels out.

    Creates (and releases) a standalone context when `ctx` is not given.
    """
    own_ctx = ctx is None
    if own_ctx:
        ctx = create_context()
    try:
        with VoronoiRenderer(ctx, sites, width, height, cone_res, cone_radius,
                             sentinel) as renderer:
            return renderer.render()
    finally:
        if own_ctx:
            ctx.release()
