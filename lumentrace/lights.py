"""
Light sources for the ray tracer.

Only point lights are supported: a position and a scalar intensity.
They produce hard shadows and are not attenuated with distance.
"""

from __future__ import annotations
from dataclasses import dataclass

from .vec3 import Vec3, Point3


@dataclass(frozen=True)
class Light:
    """A white point light."""
    position: Point3
    intensity: float = 1.0

    def __post_init__(self):
        if self.intensity < 0:
            raise ValueError(f"Light intensity must be >= 0, got {self.intensity}")

    def direction_from(self, point: Point3) -> Vec3:
        """Unit vector from `point` toward the light."""
        return (self.position - point).normalize()

    def distance_from(self, point: Point3) -> float:
        return (self.position - point).length()
