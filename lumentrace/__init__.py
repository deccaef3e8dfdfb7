"""
LumenTrace - A Python Whitted-style Ray Tracer

A recursive CPU ray tracer with support for:
- Spheres, triangle meshes and a checkerboard floor
- Phong diffuse/specular shading with hard shadows
- Recursive mirror reflection and Snell refraction
- Solid color and equirectangular environment backgrounds
- Multi-threaded tile rendering
- YAML/JSON scene descriptions
"""

__version__ = "0.1.0"
__author__ = "LumenTrace Team"

from .vec3 import Vec3, Vec4, Point3, Color, reflect, refract
from .ray import Ray
from .materials import Material, IVORY, GLASS, RED_RUBBER, MIRROR, PRESETS
from .lights import Light
from .shapes import HitRecord, Hittable, Sphere, Triangle, TriangleMesh, Checkerboard
from .scene import Scene, scene_intersect
from .environment import Environment, SolidColorEnvironment, EquirectangularEnvironment, load_environment
from .shading import cast_ray, direct_lighting, is_shadowed, offset_origin
from .camera import Camera
from .tonemapping import (
    ToneMapper, ToneMappingOperator, LinearToneMapper, MaxChannelToneMapper,
    create_tone_mapper, quantize, tone_map
)
from .renderer import Renderer, RenderSettings, get_platform_info
from .mesh_loader import MeshLoader, MeshLoadError, load_mesh, parse_mesh
from .scene_parser import SceneParser, SceneParseError, SceneDescription, load_scene, parse_scene
from .scenes import create_reference_scene
