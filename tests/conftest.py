import pytest

from swingline.context import create_context
from swingline.errors import SwinglineError


@pytest.fixture(scope='session')
def gl_ctx():
    """Standalone OpenGL 3.3 context shared by the GPU tests."""
    try:
        ctx = create_context(standalone=True)
    except SwinglineError as e:
        pytest.skip(f'no usable OpenGL 3.3 context: {e}')
    yield ctx
    ctx.release()
