"""
Surface material model.

A material splits the outgoing light into four weighted terms:
diffuse, specular (Phong highlight), mirror reflection and refraction.
The weights are stored as a Vec4 albedo and are not required to sum to one.

Materials are immutable and meant to be shared between shapes.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict

from .vec3 import Vec4, Color


@dataclass(frozen=True)
class Material:
    """Phong-style material with reflection and refraction weights.

    Attributes:
        diffuse_color: Linear RGB base color
        albedo: Weights of the diffuse, specular, reflective and refractive terms
        specular_exponent: Sharpness of the specular highlight
        refractive_index: Index of refraction of the interior (1.0 = vacuum)
    """
    diffuse_color: Color = field(default_factory=lambda: Color(0, 0, 0))
    albedo: Vec4 = field(default_factory=lambda: Vec4(1, 0, 0, 0))
    specular_exponent: float = 0.0
    refractive_index: float = 1.0

    def __post_init__(self):
        if self.specular_exponent < 0:
            raise ValueError(f"specular_exponent must be >= 0, got {self.specular_exponent}")
        if self.refractive_index <= 0:
            raise ValueError(f"refractive_index must be > 0, got {self.refractive_index}")

    @property
    def diffuse_weight(self) -> float:
        return self.albedo[0]

    @property
    def specular_weight(self) -> float:
        return self.albedo[1]

    @property
    def reflective_weight(self) -> float:
        return self.albedo[2]

    @property
    def refractive_weight(self) -> float:
        return self.albedo[3]


IVORY = Material(
    diffuse_color=Color(0.4, 0.4, 0.3),
    albedo=Vec4(0.6, 0.3, 0.1, 0.0),
    specular_exponent=50.0,
    refractive_index=1.0,
)

GLASS = Material(
    diffuse_color=Color(0.6, 0.7, 0.8),
    albedo=Vec4(0.0, 0.5, 0.1, 0.8),
    specular_exponent=125.0,
    refractive_index=1.5,
)

RED_RUBBER = Material(
    diffuse_color=Color(0.3, 0.1, 0.1),
    albedo=Vec4(0.9, 0.1, 0.0, 0.0),
    specular_exponent=10.0,
    refractive_index=1.0,
)

MIRROR = Material(
    diffuse_color=Color(1.0, 1.0, 1.0),
    albedo=Vec4(0.0, 10.0, 0.8, 0.0),
    specular_exponent=1425.0,
    refractive_index=1.0,
)

PRESETS: Dict[str, Material] = {
    'ivory': IVORY,
    'glass': GLASS,
    'red_rubber': RED_RUBBER,
    'mirror': MIRROR,
}
