"""Per-pixel color resolution and the render kernel.

For each pixel the kernel casts a primary ray, resolves the nearest hit among
the scene's shapes and shades it:

    - hit: the surface normal remapped from [-1, 1] to [0, 1] and used as RGB
    - miss: a vertical white to sky-blue gradient by ray elevation

Optional anti-aliasing averages the base sample with ``n`` jittered samples.
Each jittered sample draws one random offset in [0, 1) and applies it to both
pixel coordinates. Random numbers come from Taichi's per-thread generator, so
parallel pixels never share generator state.

The kernel's outermost loop runs in parallel over all pixels. Each iteration
writes only its own (i, j) slot, so the result does not depend on scheduling.

Example:
    >>> import numpy as np
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycanvas.core.integrator import render_kernel
    >>> colors = np.zeros((width, height, 3), dtype=np.float32)
    >>> render_kernel(colors, *shape_args, anti_aliasing, *camera.view_args(), 0.0, 3.0)
"""

import taichi as ti
import taichi.math as tm

from raycanvas.camera.camera import View, beam, make_view
from raycanvas.core.ray import Ray
from raycanvas.core.vector import color3, unit_vector, vec3
from raycanvas.scene.intersection import intersect_scene

# =============================================================================
# Rendering Constants
# =============================================================================

# Default acceptance window for the ray parameter.
# Geometry further than 3 units along a ray needs a larger window (Canvas.set_clip).
T_MIN = 0.0
T_MAX = 3.0

# Anti-aliasing sample counts are stored as an unsigned byte
MAX_ANTI_ALIASING = 255


# =============================================================================
# Shading
# =============================================================================


@ti.func
def background_color(ray: Ray) -> color3:
    """Compute the background gradient for a ray that hit nothing.

    Args:
        ray: The escaping ray.

    Returns:
        (1 - t) * white + t * (0.5, 0.7, 1.0) with t = 0.5 * (unit_y + 1).
    """
    unit_direction = unit_vector(ray.direction)
    t = 0.5 * (unit_direction.y + 1.0)
    return (1.0 - t) * color3(1.0, 1.0, 1.0) + t * color3(0.5, 0.7, 1.0)


@ti.func
def shade_normal(normal: vec3) -> color3:
    """Map a unit normal to an RGB color in [0, 1]."""
    return 0.5 * (normal + vec3(1.0, 1.0, 1.0))


@ti.func
def color_at(
    ray: Ray,
    kinds: ti.template(),
    centers: ti.template(),
    radii: ti.template(),
    colors: ti.template(),
    count: ti.i32,
    t_min: ti.f32,
    t_max: ti.f32,
) -> color3:
    """Resolve the color seen along a ray.

    Args:
        ray: The primary ray.
        kinds: Shape kind tags.
        centers: Shape centers.
        radii: Shape radii.
        colors: Shape colors.
        count: Number of live shapes.
        t_min: Lower bound of the accepted ray parameter.
        t_max: Upper bound of the accepted ray parameter.

    Returns:
        The shaded color of the nearest hit, or the background gradient.
    """
    rec = intersect_scene(ray, kinds, centers, radii, colors, count, t_min, t_max)
    result = background_color(ray)
    if rec.hit == 1:
        result = shade_normal(rec.normal)
    return result


@ti.func
def pixel_coordinates(i: ti.f32, j: ti.f32, width: ti.i32, height: ti.i32) -> tm.vec2:
    """Convert (possibly jittered) pixel coordinates to viewport (u, v).

    The denominators are clamped to 1 so single-pixel edges stay finite.
    """
    u = i / ti.cast(ti.max(width - 1, 1), ti.f32)
    v = j / ti.cast(ti.max(height - 1, 1), ti.f32)
    return tm.vec2(u, v)


@ti.func
def jitter_coordinates(
    i: ti.f32, j: ti.f32, offset: ti.f32, width: ti.i32, height: ti.i32
) -> tm.vec2:
    """Viewport (u, v) of a pixel shifted by one offset along both axes."""
    return pixel_coordinates(i + offset, j + offset, width, height)


@ti.func
def sample_pixel(
    view: View,
    i: ti.i32,
    j: ti.i32,
    width: ti.i32,
    height: ti.i32,
    anti_aliasing: ti.i32,
    kinds: ti.template(),
    centers: ti.template(),
    radii: ti.template(),
    colors: ti.template(),
    count: ti.i32,
    t_min: ti.f32,
    t_max: ti.f32,
) -> color3:
    """Compute the final color of one pixel.

    The base sample is taken at the exact pixel coordinates. With
    ``anti_aliasing > 0``, that many extra samples are added, each offset in
    both axes by the same random value in [0, 1), and the sum is divided by
    ``anti_aliasing + 1``.

    Returns:
        The averaged pixel color.
    """
    fi = ti.cast(i, ti.f32)
    fj = ti.cast(j, ti.f32)

    uv = pixel_coordinates(fi, fj, width, height)
    accumulated = color_at(
        beam(view, uv.x, uv.y), kinds, centers, radii, colors, count, t_min, t_max
    )

    if anti_aliasing > 0:
        for _ in range(anti_aliasing):
            offset = ti.random(ti.f32)
            jittered = jitter_coordinates(fi, fj, offset, width, height)
            accumulated += color_at(
                beam(view, jittered.x, jittered.y),
                kinds,
                centers,
                radii,
                colors,
                count,
                t_min,
                t_max,
            )
        accumulated = accumulated * (1.0 / ti.cast(anti_aliasing + 1, ti.f32))

    return accumulated


# =============================================================================
# Kernels
# =============================================================================


@ti.kernel
def render_kernel(
    output: ti.types.ndarray(dtype=vec3, ndim=2),
    kinds: ti.types.ndarray(dtype=ti.i32, ndim=1),
    centers: ti.types.ndarray(dtype=vec3, ndim=1),
    radii: ti.types.ndarray(dtype=ti.f32, ndim=1),
    colors: ti.types.ndarray(dtype=vec3, ndim=1),
    count: ti.i32,
    anti_aliasing: ti.i32,
    origin: vec3,
    horizontal: vec3,
    vertical: vec3,
    focal_length: ti.f32,
    rotation: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
):
    """Render every pixel of the canvas into ``output[i, j]``.

    Args:
        output: Color buffer of shape (width, height) with vec3 elements.
        kinds: Shape kind tags.
        centers: Shape centers.
        radii: Shape radii.
        colors: Shape colors.
        count: Number of live shapes.
        anti_aliasing: Extra jittered samples per pixel (0 disables).
        origin: Camera position.
        horizontal: Viewport width vector.
        vertical: Viewport height vector.
        focal_length: Camera focal length.
        rotation: Camera rotation angles.
        t_min: Lower bound of the accepted ray parameter.
        t_max: Upper bound of the accepted ray parameter.
    """
    width = output.shape[0]
    height = output.shape[1]
    view = make_view(origin, horizontal, vertical, focal_length, rotation)

    for i, j in ti.ndrange(width, height):
        output[i, j] = sample_pixel(
            view,
            i,
            j,
            width,
            height,
            anti_aliasing,
            kinds,
            centers,
            radii,
            colors,
            count,
            t_min,
            t_max,
        )


@ti.kernel
def probe_kernel(
    result: ti.types.ndarray(dtype=ti.f32, ndim=1),
    u: ti.f32,
    v: ti.f32,
    kinds: ti.types.ndarray(dtype=ti.i32, ndim=1),
    centers: ti.types.ndarray(dtype=vec3, ndim=1),
    radii: ti.types.ndarray(dtype=ti.f32, ndim=1),
    colors: ti.types.ndarray(dtype=vec3, ndim=1),
    count: ti.i32,
    origin: vec3,
    horizontal: vec3,
    vertical: vec3,
    focal_length: ti.f32,
    rotation: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
):
    """Trace a single ray at (u, v) and write its details to ``result``.

    Layout of ``result`` (13 floats):
        [0] hit flag, [1] time, [2:5] entry, [5:8] normal, [8] front face,
        [9] shape index, [10:13] shaded color.
    """
    view = make_view(origin, horizontal, vertical, focal_length, rotation)
    ray = beam(view, u, v)
    rec = intersect_scene(ray, kinds, centers, radii, colors, count, t_min, t_max)
    color = color_at(ray, kinds, centers, radii, colors, count, t_min, t_max)

    result[0] = ti.cast(rec.hit, ti.f32)
    result[1] = rec.time
    for k in ti.static(range(3)):
        result[2 + k] = rec.entry[k]
        result[5 + k] = rec.normal[k]
        result[10 + k] = color[k]
    result[8] = ti.cast(rec.front_face, ti.f32)
    result[9] = ti.cast(rec.shape_index, ti.f32)
