"""
swingline: discrete Voronoi diagrams by cone rasterization on the GPU.

Each site is drawn as an instanced cone; depth testing picks the nearest
site per pixel and the instance index, encoded as an RGB colour, becomes
that pixel's label.
"""

__version__ = "0.1.0"

from swingline.errors import (
    SwinglineError, EnvironmentSetupError, ContextCreationError,
    ContextVersionError, FramebufferIncompleteError, ShaderBuildError,
)
from swingline.geometry import build_cone, build_quad, build_instances, as_sites
from swingline.labels import encode_index, decode_rgb, encode_labels, decode_labels

__all__ = [
    "SwinglineError", "EnvironmentSetupError", "ContextCreationError",
    "ContextVersionError", "FramebufferIncompleteError", "ShaderBuildError",
    "build_cone", "build_quad", "build_instances", "as_sites",
    "encode_index", "decode_rgb", "encode_labels", "decode_labels",
    "__version__",
]
