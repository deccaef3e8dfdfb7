"""
Scene container and nearest-hit queries.

A Scene is built once and never mutated while rendering, so it can be
shared freely between render threads.
"""

from __future__ import annotations
from dataclasses import dataclass
import math
from typing import Optional, Sequence, Tuple

from .ray import Ray
from .shapes import Checkerboard, HitRecord, Hittable
from .lights import Light

# Anything farther than this is treated as background
DEFAULT_HORIZON = 1000.0


@dataclass(frozen=True)
class Scene:
    """An immutable collection of shapes and lights.

    Attributes:
        objects: Shapes tested in order; equal distances keep the first one
        lights: Point lights, contributions are summed
        checkerboard: Optional bounded floor
        horizon: Hits at or beyond this distance count as misses
    """
    objects: Tuple[Hittable, ...] = ()
    lights: Tuple[Light, ...] = ()
    checkerboard: Optional[Checkerboard] = None
    horizon: float = DEFAULT_HORIZON

    @classmethod
    def build(
        cls,
        objects: Sequence[Hittable] = (),
        lights: Sequence[Light] = (),
        checkerboard: Optional[Checkerboard] = None,
        horizon: float = DEFAULT_HORIZON
    ) -> Scene:
        """Create a scene from any sequences, freezing them into tuples."""
        return cls(tuple(objects), tuple(lights), checkerboard, horizon)

    def __len__(self) -> int:
        return len(self.objects)


def scene_intersect(scene: Scene, ray: Ray) -> Optional[HitRecord]:
    """Find the closest intersection among all shapes and the floor.

    Args:
        scene: The scene to search
        ray: Ray with a unit-length direction

    Returns:
        The nearest HitRecord closer than the scene horizon, or None
    """
    closest_hit: Optional[HitRecord] = None
    closest_t = math.inf

    for obj in scene.objects:
        hit_record = obj.hit(ray, closest_t)
        if hit_record is not None:
            closest_hit = hit_record
            closest_t = hit_record.t

    if scene.checkerboard is not None:
        floor_hit = scene.checkerboard.hit(ray, closest_t)
        if floor_hit is not None:
            closest_hit = floor_hit
            closest_t = floor_hit.t

    if closest_t >= scene.horizon:
        return None
    return closest_hit
