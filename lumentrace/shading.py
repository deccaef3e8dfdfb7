"""
Recursive Whitted-style shading.

cast_ray combines four terms weighted by the material albedo:
- Diffuse: Lambert cosine from every unshadowed light
- Specular: colorless Phong highlight from every unshadowed light
- Reflection: recursively traced mirror ray
- Refraction: recursively traced Snell ray

The result is linear HDR color; clamping happens in the renderer.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

from .vec3 import Vec3, Point3, Color, reflect, refract
from .ray import Ray
from .scene import Scene, scene_intersect
from .lights import Light
from .environment import Environment

# Recursion stops once the depth exceeds this
DEFAULT_MAX_DEPTH = 4

# Secondary ray origins are pushed off the surface by this distance
SURFACE_OFFSET = 1e-3

WHITE = Color(1.0, 1.0, 1.0)


@dataclass(frozen=True)
class LightingTerms:
    """Summed light intensities at a surface point."""
    diffuse: float
    specular: float


def offset_origin(point: Point3, normal: Vec3, direction: Vec3) -> Point3:
    """Move `point` off the surface onto the side `direction` leaves toward."""
    if direction.dot(normal) < 0:
        return point - normal * SURFACE_OFFSET
    return point + normal * SURFACE_OFFSET


def is_shadowed(scene: Scene, point: Point3, normal: Vec3, light: Light) -> bool:
    """True if any geometry lies between `point` and `light`."""
    light_dir = light.direction_from(point)
    light_distance = light.distance_from(point)

    shadow_origin = offset_origin(point, normal, light_dir)
    blocker = scene_intersect(scene, Ray(shadow_origin, light_dir))
    if blocker is None:
        return False
    return (blocker.point - shadow_origin).length() < light_distance


def direct_lighting(
    scene: Scene,
    point: Point3,
    normal: Vec3,
    view_dir: Vec3,
    specular_exponent: float
) -> LightingTerms:
    """Sum diffuse and specular intensities over the unshadowed lights.

    Args:
        scene: Scene holding the lights and potential occluders
        point: Surface point being shaded
        normal: Unit surface normal at `point`
        view_dir: Direction of the incoming ray
        specular_exponent: Phong exponent of the surface
    """
    diffuse = 0.0
    specular = 0.0

    for light in scene.lights:
        if is_shadowed(scene, point, normal, light):
            continue

        light_dir = light.direction_from(point)
        diffuse += light.intensity * max(0.0, light_dir.dot(normal))

        highlight = max(0.0, reflect(light_dir, normal).dot(view_dir))
        specular += light.intensity * highlight ** specular_exponent

    return LightingTerms(diffuse, specular)


def secondary_directions(direction: Vec3, normal: Vec3, refractive_index: float) -> Tuple[Vec3, Vec3]:
    """Mirror and transmitted directions for a ray hitting a surface."""
    reflect_dir = reflect(direction, normal).normalize()
    refract_dir = refract(direction, normal, refractive_index).normalize()
    return reflect_dir, refract_dir


def cast_ray(
    ray: Ray,
    scene: Scene,
    background: Environment,
    depth: int = 0,
    max_depth: int = DEFAULT_MAX_DEPTH
) -> Color:
    """Compute the color seen along a ray.

    Args:
        ray: The ray to trace (unit direction)
        scene: The scene to trace against
        background: Source of color for rays that escape the scene
        depth: Recursion depth of this ray (0 for camera rays)
        max_depth: Rays deeper than this return the background directly

    Returns:
        Linear, unclamped color
    """
    # Surfaces are shaded at depths 0..max_depth; the ray one level deeper
    # returns the background untraced
    if depth > max_depth:
        return background.sample(ray.direction)

    hit = scene_intersect(scene, ray)
    if hit is None:
        return background.sample(ray.direction)

    material = hit.material
    point, normal = hit.point, hit.normal

    reflect_dir, refract_dir = secondary_directions(
        ray.direction, normal, material.refractive_index
    )

    # Zero-weight branches contribute exactly nothing, so they are not traced
    if material.reflective_weight == 0:
        reflect_color = Color(0, 0, 0)
    else:
        reflect_color = cast_ray(
            Ray(offset_origin(point, normal, reflect_dir), reflect_dir),
            scene, background, depth + 1, max_depth
        )

    # Total internal reflection leaves nothing to transmit
    if material.refractive_weight == 0 or refract_dir.is_zero():
        refract_color = Color(0, 0, 0)
    else:
        refract_color = cast_ray(
            Ray(offset_origin(point, normal, refract_dir), refract_dir),
            scene, background, depth + 1, max_depth
        )

    terms = direct_lighting(scene, point, normal, ray.direction, material.specular_exponent)

    return (
        material.diffuse_color * (terms.diffuse * material.diffuse_weight)
        + WHITE * (terms.specular * material.specular_weight)
        + reflect_color * material.reflective_weight
        + refract_color * material.refractive_weight
    )
