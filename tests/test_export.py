import numpy as np
import pytest
from PIL import Image

from swingline import export
from swingline.labels import encode_labels


def test_save_labels_png_flips_to_top_down(tmp_path):
    lab = np.array([[0, 1, 2], [3, 4, 5]], dtype=np.uint32)  # row 0 = bottom
    rgb = encode_labels(lab)
    out = export.save_labels_png(tmp_path / 'sub' / 'labels.png', rgb)
    img = np.asarray(Image.open(out).convert('RGB'))
    assert img.shape == (2, 3, 3)
    assert np.array_equal(img[0], rgb[1])
    assert np.array_equal(img[1], rgb[0])


def test_save_labels_png_rejects_wrong_shape(tmp_path):
    with pytest.raises(ValueError):
        export.save_labels_png(tmp_path / 'x.png', np.zeros((4, 4), dtype=np.uint8))


def test_colorize_sentinel_is_black():
    lab = np.array([[0, 1], [0xFFFFFF, 1]], dtype=np.uint32)
    rgb = export.colorize(lab, seed=1)
    assert rgb.shape == (2, 2, 3)
    assert np.all(rgb[1, 0] == 0)
    # same label, same colour
    assert np.array_equal(rgb[0, 1], rgb[1, 1])
    assert rgb[0, 0].max() >= 32


def test_save_colorized(tmp_path):
    lab = np.array([[0, 1], [1, 0]], dtype=np.uint32)
    out = export.save_labels_png(tmp_path / 'c.png', encode_labels(lab), colorized=True, seed=3)
    img = np.asarray(Image.open(out).convert('RGB'))
    assert np.array_equal(img[0, 0], img[1, 1])
