import numpy as np
import pytest

from swingline import cli
from swingline.errors import ContextCreationError


def test_parser_defaults():
    args = cli.build_parser().parse_args([])
    assert args.sites is None
    assert args.sentinel == 0xFFFFFF
    assert not args.headless
    assert args.backend is None


def test_parser_reads_hex_sentinel():
    args = cli.build_parser().parse_args(['--sentinel', '00ffff', '--headless', '-m', '5'])
    assert args.sentinel == 0x00FFFF
    assert args.sites == 5
    assert args.headless


def test_main_rejects_bad_site_count():
    assert cli.main(['--headless', '--sites', '0']) == 2


def test_main_rejects_colliding_sentinel(gl_ctx):
    assert cli.main(['--headless', '--sites', '10', '--sentinel', '5',
                     '--width', '16', '--height', '16']) == 2


def test_main_turns_setup_errors_into_exit_code(monkeypatch):
    def boom(standalone=True, backend=None):
        raise ContextCreationError('failed to create OpenGL context: no EGL')

    monkeypatch.setattr(cli, 'create_context', boom)
    assert cli.main(['--headless', '--sites', '3']) == 1


def test_parser_reads_backend():
    args = cli.build_parser().parse_args(['--headless', '--backend', 'egl'])
    assert args.backend == 'egl'


def test_main_passes_backend_to_context(monkeypatch):
    seen = {}

    def no_context(standalone=True, backend=None):
        seen['standalone'] = standalone
        seen['backend'] = backend
        raise ContextCreationError('failed to create OpenGL context: no EGL')

    monkeypatch.setattr(cli, 'create_context', no_context)
    assert cli.main(['--headless', '--sites', '3', '--backend', 'egl']) == 1
    assert seen == {'standalone': True, 'backend': 'egl'}


def test_main_headless_writes_png(tmp_path, gl_ctx):
    out = tmp_path / 'voronoi.png'
    rc = cli.main(['--headless', '--sites', '5', '--seed', '1', '--width', '32',
                   '--height', '32', '--cone-radius', '3.0', '--output', str(out)])
    assert rc == 0
    assert out.exists()


def test_run_headless_returns_labels(gl_ctx):
    settings = {'width': 24, 'height': 16, 'cone_res': 32, 'cone_radius': 3.0, 'seed': 0}
    sites = np.array([[-0.5, 0.0], [0.5, 0.0]], dtype='f4')
    labels = cli.run_headless(settings, sites, sentinel=0xFFFFFF)
    assert labels.shape == (16, 24)
    assert set(np.unique(labels).tolist()) == {0, 1}
    assert labels[8, 2] == 0
    assert labels[8, 21] == 1
