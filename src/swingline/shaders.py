"""GLSL sources for the label pass and the presentation blit, plus the
program builder.
"""
import logging

import moderngl

from swingline.errors import ShaderBuildError

log = logging.getLogger(__name__)

# Voronoi label pass: shared cone mesh, per-instance offset
VORONOI_VERTEX_SHADER = """
#version 330 core
layout(location=0) in vec3 pos;
layout(location=1) in vec2 offset;

out vec3 color_;

void main()
{
    gl_Position = vec4(pos.xy + offset, pos.z, 1.0);

    // site index -> base-256 little-endian colour
    int r = gl_InstanceID % 256;
    int g = (gl_InstanceID / 256) % 256;
    int b = (gl_InstanceID / 65536) % 256;
    color_ = vec3(r / 255.0, g / 255.0, b / 255.0);
}
"""

VORONOI_FRAGMENT_SHADER = """
#version 330 core
in vec3 color_;
layout(location=0) out vec4 color;

void main()
{
    color = vec4(color_, 1.0);
}
"""

# Presentation pass: full-screen quad, integer texel fetch
QUAD_VERTEX_SHADER = """
#version 330 core
layout(location=0) in vec2 pos;

void main()
{
    gl_Position = vec4(pos, 0.0, 1.0);
}
"""

BLIT_FRAGMENT_SHADER = """
#version 330 core
layout(location=0) out vec4 color;
layout(pixel_center_integer) in vec4 gl_FragCoord;

uniform sampler2D tex;

void main()
{
    ivec2 last = textureSize(tex, 0) - ivec2(1);
    ivec2 texel = clamp(ivec2(gl_FragCoord.xy), ivec2(0), last);
    vec4 t = texelFetch(tex, texel, 0);
    color = vec4(t.xyz, 1.0);
}
"""


def build_program(ctx: moderngl.Context, vertex_shader: str, fragment_shader: str,
                  name: str = 'program') -> moderngl.Program:
    """Compile and link a vertex/fragment pair.

    moderngl reports compile and link failures as `moderngl.Error` carrying
    the driver log; those become `ShaderBuildError`.
    """
    try:
        prog = ctx.program(vertex_shader=vertex_shader, fragment_shader=fragment_shader)
    except moderngl.Error as e:
        raise ShaderBuildError(name, str(e)) from e
    log.debug('built shader program %s (glo=%s)', name, prog.glo)
    return prog
