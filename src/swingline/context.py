"""OpenGL context provider.

Headless callers (tests, the `--headless` CLI path) get a standalone
context; the viewer attaches to the context moderngl-window already made
current. Either way the context must be at least OpenGL 3.3 core.

moderngl's default standalone backend on Linux needs an X display. When it
cannot open one and no backend was requested, creation is retried on EGL,
which works on display-less hosts with a Mesa or vendor EGL driver.
"""
import logging
import sys
from typing import Optional

import moderngl

from swingline.config import GL_REQUIREMENTS
from swingline.errors import ContextCreationError, ContextVersionError

log = logging.getLogger(__name__)

FALLBACK_BACKEND = 'egl'


def check_version(ctx: moderngl.Context, require: int = GL_REQUIREMENTS['require']) -> None:
    """Raise ContextVersionError if `ctx` is older than `require` (e.g. 330)."""
    if ctx.version_code < require:
        raise ContextVersionError(require, ctx.version_code)


def _standalone(require: int, backend: Optional[str]) -> moderngl.Context:
    if backend is None:
        return moderngl.create_standalone_context(require=require)
    return moderngl.create_standalone_context(require=require, backend=backend)


def create_context(standalone: bool = True,
                   require: int = GL_REQUIREMENTS['require'],
                   backend: Optional[str] = GL_REQUIREMENTS['backend']) -> moderngl.Context:
    """Create (or attach to) a moderngl context of at least `require`.

    `backend` selects a glcontext backend for standalone contexts ('egl',
    'x11', ...). Left as None, the platform default is tried first and, on
    Linux, EGL second.
    """
    try:
        if not standalone:
            ctx = moderngl.create_context(require=require)
        elif backend is not None or not sys.platform.startswith('linux'):
            ctx = _standalone(require, backend)
        else:
            try:
                ctx = _standalone(require, None)
            except Exception as e:
                log.info('default OpenGL backend unavailable (%s), trying %s',
                         e, FALLBACK_BACKEND)
                ctx = _standalone(require, FALLBACK_BACKEND)
    except Exception as e:
        # glcontext backends raise plain Exceptions when no display/EGL is
        # usable, moderngl.Error when the driver is too old
        raise ContextCreationError(f'failed to create OpenGL context: {e}') from e

    check_version(ctx, require)
    info = ctx.info
    log.debug('OpenGL %s on %s (%s)', info.get('GL_VERSION'), info.get('GL_RENDERER'),
              info.get('GL_VENDOR'))
    return ctx
