"""Window viewer for the GPU Voronoi diagram.

Uses moderngl-window to own the window, the event loop and buffer swaps.
The label pass runs once when the window opens; every frame afterwards only
re-runs the presentation pass into the window framebuffer.

Usage:
    python -m swingline.cli --sites 200

Controls: S=save label image, Q/ESC=quit
"""
import logging

import moderngl_window as mglw

from swingline.config import GL_REQUIREMENTS, LABELS, RENDER_DEFAULTS, VIEWER
from swingline.context import check_version
from swingline.export import save_labels_png
from swingline.geometry import build_instances
from swingline.render import VoronoiRenderer

log = logging.getLogger(__name__)


class VoronoiViewer(mglw.WindowConfig):
    """OpenGL window that displays a label image rendered on its context."""

    gl_version = GL_REQUIREMENTS['gl_version']
    title = VIEWER['title']
    window_size = (RENDER_DEFAULTS['width'], RENDER_DEFAULTS['height'])
    aspect_ratio = None
    resizable = False
    vsync = True
    render_context = None  # set by the caller before run_window_config

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        settings = self.render_context or {}
        check_version(self.ctx, GL_REQUIREMENTS['require'])

        width = settings.get('width', RENDER_DEFAULTS['width'])
        height = settings.get('height', RENDER_DEFAULTS['height'])
        sites = settings.get('sites')
        if sites is None:
            sites = build_instances(settings.get('point_count', RENDER_DEFAULTS['point_count']),
                                    seed=settings.get('seed'))
        self.output = settings.get('output', VIEWER['output'])
        self.colorized = settings.get('colorize', False)
        self.seed = settings.get('seed')

        self.renderer = VoronoiRenderer(
            self.ctx, sites, width, height,
            cone_res=settings.get('cone_res', RENDER_DEFAULTS['cone_res']),
            cone_radius=settings.get('cone_radius', RENDER_DEFAULTS['cone_radius']),
            sentinel=settings.get('sentinel', LABELS['sentinel']),
        )
        self.renderer.render_labels()
        log.info('rendered %d sites at %dx%d', self.renderer.site_count, width, height)

    def on_render(self, time, frametime):
        self.renderer.present(self.wnd.fbo)

    def on_key_event(self, key, action, modifiers):
        keys = self.wnd.keys
        if action != keys.ACTION_PRESS:
            return
        if key == keys.S:
            save_labels_png(self.output, self.renderer.read_label_image(),
                            colorized=self.colorized, seed=self.seed,
                            sentinel=self.renderer.sentinel)
        elif key in (keys.Q, keys.ESCAPE):
            self.wnd.close()

    def on_close(self):
        self.renderer.release()


def run_viewer(settings: dict, window: str = VIEWER['window']) -> None:
    """Open the viewer window and block until it is closed."""
    VoronoiViewer.render_context = settings
    width = settings.get('width', RENDER_DEFAULTS['width'])
    height = settings.get('height', RENDER_DEFAULTS['height'])
    VoronoiViewer.window_size = (width, height)
    mglw.run_window_config(
        VoronoiViewer,
        args=(
            '--window', window,
            '--size', f'{width}x{height}',
        ),
    )
