"""
Camera module for generating primary rays.

A pinhole camera sitting at the world origin and looking down -Z,
with +Y up and +X to the right. Only the vertical field of view and
the image size are configurable.
"""

from __future__ import annotations
import math
from .vec3 import Vec3, Point3
from .ray import Ray


class Camera:
    """A fixed perspective camera at the origin."""

    def __init__(self, width: int, height: int, fov: float = math.pi / 2):
        """Create a camera.

        Args:
            width: Image width in pixels
            height: Image height in pixels
            fov: Vertical field of view in radians, in (0, pi)
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Image size must be positive, got {width}x{height}")
        if not 0 < fov < math.pi:
            raise ValueError(f"Field of view must be in (0, pi), got {fov}")

        self.width = width
        self.height = height
        self.fov = fov
        self.origin = Point3(0, 0, 0)

        self.aspect_ratio = width / height
        self.half_height = math.tan(fov / 2.0)
        self.half_width = self.half_height * self.aspect_ratio

    def direction(self, i: int, j: int) -> Vec3:
        """Unit direction through the center of pixel (i, j).

        Args:
            i: Column, 0 = left
            j: Row, 0 = top
        """
        x = (2 * (i + 0.5) / self.width - 1) * self.half_width
        y = -(2 * (j + 0.5) / self.height - 1) * self.half_height
        return Vec3(x, y, -1).normalize()

    def get_ray(self, i: int, j: int) -> Ray:
        """Primary ray for pixel (i, j)."""
        return Ray(self.origin, self.direction(i, j))

    def __repr__(self) -> str:
        return f"Camera({self.width}x{self.height}, fov={math.degrees(self.fov):.1f} deg)"
