"""Command line entry point.

    swingline --sites 500 --cone-res 128 --headless --output out/voronoi.png

Headless runs render once on a standalone context and optionally write the
label image; otherwise the viewer window opens. All fatal setup errors end
up here and become a non-zero exit code.
"""
import argparse
import logging
import sys

import numpy as np

from swingline.config import (GL_REQUIREMENTS, LABELS, RENDER_DEFAULTS, VIEWER,
                              render_settings)
from swingline.context import create_context
from swingline.errors import SwinglineError
from swingline.export import save_labels_png
from swingline.geometry import build_instances
from swingline.render import VoronoiRenderer

log = logging.getLogger(__name__)


def _hex_int(text):
    return int(text, 16)


def build_parser():
    parser = argparse.ArgumentParser(prog='swingline',
                                     description='GPU cone-rasterization Voronoi diagram')
    parser.add_argument('--sites', '-m', type=int, default=None,
                        help=f"number of random sites (default {RENDER_DEFAULTS['point_count']})")
    parser.add_argument('--cone-res', '-n', type=int, default=None,
                        help=f"cone tessellation (default {RENDER_DEFAULTS['cone_res']})")
    parser.add_argument('--cone-radius', type=float, default=None,
                        help=f"cone base radius in NDC (default {RENDER_DEFAULTS['cone_radius']})")
    parser.add_argument('--width', type=int, default=None)
    parser.add_argument('--height', type=int, default=None)
    parser.add_argument('--seed', type=int, default=None)
    parser.add_argument('--sentinel', type=_hex_int, default=LABELS['sentinel'],
                        help='hex label for uncovered pixels (default ffffff)')
    parser.add_argument('--output', '-o', type=str, default=None,
                        help='PNG path for the label image')
    parser.add_argument('--colorize', action='store_true',
                        help='save a random-palette image instead of raw labels')
    parser.add_argument('--headless', action='store_true',
                        help='render once offscreen, no window')
    parser.add_argument('--backend', type=str, default=GL_REQUIREMENTS['backend'],
                        help='standalone OpenGL backend for --headless, e.g. egl or x11 '
                             '(default: platform default, then egl on Linux)')
    parser.add_argument('--verbose', '-v', action='store_true')
    return parser


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(message)s',
    )


def run_headless(settings: dict, sites, sentinel: int, output=None,
                 colorized: bool = False, backend=None) -> np.ndarray:
    """Render once on a standalone context; returns the decoded labels."""
    ctx = create_context(standalone=True, backend=backend)
    try:
        log.info('OpenGL %s (%s)', ctx.info.get('GL_VERSION'), ctx.info.get('GL_RENDERER'))
        with VoronoiRenderer(ctx, sites, settings['width'], settings['height'],
                             cone_res=settings['cone_res'],
                             cone_radius=settings['cone_radius'],
                             sentinel=sentinel) as renderer:
            renderer.render_labels()
            labels = renderer.read_labels()
            uncovered = int(np.count_nonzero(labels == sentinel))
            log.info('labelled %dx%d image with %d sites (%d distinct labels, %d uncovered px)',
                     settings['width'], settings['height'], len(renderer.sites),
                     len(np.unique(labels[labels != sentinel])), uncovered)
            if output:
                save_labels_png(output, renderer.read_label_image(), colorized=colorized,
                                seed=settings['seed'], sentinel=sentinel)
            return labels
    finally:
        ctx.release()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        settings = render_settings(
            point_count=args.sites,
            cone_res=args.cone_res,
            cone_radius=args.cone_radius,
            width=args.width,
            height=args.height,
            seed=args.seed,
        )
        sites = build_instances(settings['point_count'], seed=settings['seed'])
    except ValueError as e:
        log.error('invalid arguments: %s', e)
        return 2

    try:
        if args.headless:
            run_headless(settings, sites, args.sentinel, output=args.output,
                         colorized=args.colorize, backend=args.backend)
        else:
            from swingline.viewer import run_viewer
            settings.update(sites=sites, sentinel=args.sentinel, colorize=args.colorize,
                            output=args.output or VIEWER['output'])
            run_viewer(settings)
    except ValueError as e:
        log.error('invalid arguments: %s', e)
        return 2
    except SwinglineError as e:
        log.error('Error: %s', e)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
