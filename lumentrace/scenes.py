"""Built-in scenes."""

from __future__ import annotations
from typing import List, Optional

from .vec3 import Vec3, Point3
from .shapes import Checkerboard, Hittable, Sphere
from .lights import Light
from .materials import GLASS, IVORY, MIRROR, RED_RUBBER
from .scene import Scene


def create_reference_scene(
    checkerboard: bool = True,
    extra_objects: Optional[List[Hittable]] = None
) -> Scene:
    """Four spheres over a checkerboard floor, lit by three lights.

    Args:
        checkerboard: Include the bounded checkerboard floor
        extra_objects: Additional shapes appended after the spheres
    """
    objects: List[Hittable] = [
        Sphere(Point3(-3.0, 0.0, -16.0), 2.0, IVORY),
        Sphere(Point3(-1.0, -1.5, -12.0), 2.0, GLASS),
        Sphere(Point3(1.5, -0.5, -18.0), 3.0, RED_RUBBER),
        Sphere(Point3(7.0, 5.0, -18.0), 4.0, MIRROR),
    ]
    if extra_objects:
        objects.extend(extra_objects)

    lights = [
        Light(Point3(-20, 20, 20), 1.5),
        Light(Point3(30, 50, -25), 1.8),
        Light(Point3(30, 20, 30), 1.7),
    ]

    return Scene.build(objects, lights, Checkerboard() if checkerboard else None)


# Placement that fits a unit-sized mesh between the spheres
MESH_OFFSET = Vec3(-1.8, -2.7, -10.0)
