"""
Scene description language parser.

Supports a YAML (or JSON) scene description with:
- Render settings
- Materials library (built-in presets or custom definitions)
- Objects (spheres and triangle meshes)
- Lights
- Checkerboard floor and background

Example scene file:
```yaml
render:
  width: 640
  height: 480
  fov: 90
  max_depth: 4

materials:
  matte_green:
    diffuse_color: [0.1, 0.5, 0.1]
    albedo: [0.9, 0.1, 0.0, 0.0]
    specular_exponent: 10

objects:
  - type: sphere
    center: [-3, 0, -16]
    radius: 2
    material: ivory
  - type: mesh
    file: duck.obj
    material: glass
    offset: [0, -2, -10]

lights:
  - position: [-20, 20, 20]
    intensity: 1.5

checkerboard: true
background: [0.2, 0.7, 0.8]
```
"""

from __future__ import annotations
import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .vec3 import Vec3, Vec4, Color
from .shapes import Checkerboard, Hittable, Sphere
from .lights import Light
from .materials import Material, PRESETS
from .scene import DEFAULT_HORIZON, Scene
from .environment import Environment, SolidColorEnvironment, load_environment
from .mesh_loader import MeshLoadError, load_mesh
from .renderer import RenderSettings

logger = logging.getLogger(__name__)


class SceneParseError(Exception):
    """Error during scene parsing."""
    pass


@dataclass
class SceneDescription:
    """Everything a scene file describes."""
    scene: Scene
    background: Environment
    settings: RenderSettings


def _to_float(value: Any, what: str) -> float:
    """Convert a scalar field, reporting bad values as SceneParseError."""
    if isinstance(value, bool):
        raise SceneParseError(f"Invalid {what}: {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise SceneParseError(f"Invalid {what}: {value!r}") from e


def _to_int(value: Any, what: str) -> int:
    if isinstance(value, bool):
        raise SceneParseError(f"Invalid {what}: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise SceneParseError(f"Invalid {what}: {value!r}") from e


def _require_dict(data: Any, what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise SceneParseError(f"{what} must be a mapping, got: {data!r}")
    return data


def _require_list(data: Any, what: str) -> List[Any]:
    if not isinstance(data, list):
        raise SceneParseError(f"{what} must be a list, got: {data!r}")
    return data


class SceneParser:
    """Parser for scene description files."""

    def __init__(self, base_dir: Optional[Path] = None):
        """Create a parser.

        Args:
            base_dir: Directory that relative mesh and texture paths resolve against
        """
        self.base_dir = base_dir if base_dir is not None else Path.cwd()
        self.materials: Dict[str, Material] = dict(PRESETS)

    def parse_file(self, filepath: str) -> SceneDescription:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (YAML or JSON)

        Returns:
            SceneDescription with scene, background and render settings
        """
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        self.base_dir = path.parent
        content = path.read_text()

        try:
            if path.suffix == '.json':
                data = json.loads(content)
            else:
                data = yaml.safe_load(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SceneParseError(f"Cannot read {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise SceneParseError(f"Scene file must contain a mapping: {filepath}")

        try:
            return self.parse_dict(data)
        except SceneParseError as e:
            raise SceneParseError(f"{filepath}: {e}") from e

    def parse_dict(self, data: Dict[str, Any]) -> SceneDescription:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            SceneDescription with scene, background and render settings

        Raises:
            SceneParseError: On any missing, malformed or out-of-range value
        """
        data = _require_dict(data, "Scene")

        # Parse materials first (objects reference them)
        if 'materials' in data:
            self._parse_materials(_require_dict(data['materials'], "materials"))

        objects = [
            self._parse_object(_require_dict(obj, f"objects[{n}]"))
            for n, obj in enumerate(_require_list(data.get('objects', []), "objects"))
        ]
        lights = [
            self._parse_light(_require_dict(light, f"lights[{n}]"))
            for n, light in enumerate(_require_list(data.get('lights', []), "lights"))
        ]

        checkerboard = self._parse_checkerboard(data.get('checkerboard', False))
        horizon = _to_float(data.get('horizon', DEFAULT_HORIZON), "horizon")

        scene = Scene.build(objects, lights, checkerboard, horizon)
        background = self._parse_background(data.get('background'))
        settings = self._parse_settings(_require_dict(data.get('render', {}), "render"))

        logger.debug(
            "Parsed scene: %d objects, %d lights, checkerboard=%s",
            len(objects), len(lights), checkerboard is not None
        )
        return SceneDescription(scene, background, settings)

    def _parse_vec3(self, data: Any, what: str = "vector") -> Vec3:
        """Parse a Vec3 from various formats."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"{what} must have 3 components, got {len(data)}")
            return Vec3(*(_to_float(c, what) for c in data))
        elif isinstance(data, dict):
            return Vec3(
                _to_float(data.get('x', 0), what),
                _to_float(data.get('y', 0), what),
                _to_float(data.get('z', 0), what)
            )
        else:
            raise SceneParseError(f"Cannot parse {what} from: {data!r}")

    def _parse_color(self, data: Any) -> Color:
        """Parse a Color from a list, an r/g/b mapping or a hex string."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Color must have 3 components, got {len(data)}")
            return Color(*(_to_float(c, "color") for c in data))
        elif isinstance(data, dict):
            return Color(
                _to_float(data.get('r', 0), "color"),
                _to_float(data.get('g', 0), "color"),
                _to_float(data.get('b', 0), "color")
            )
        elif isinstance(data, str):
            # Handle hex colors
            if data.startswith('#') and len(data) == 7:
                try:
                    r, g, b = (int(data[k:k + 2], 16) / 255.0 for k in (1, 3, 5))
                except ValueError as e:
                    raise SceneParseError(f"Invalid hex color: {data}") from e
                return Color(r, g, b)
            raise SceneParseError(f"Cannot parse color from string: {data}")
        else:
            raise SceneParseError(f"Cannot parse Color from: {data!r}")

    def _parse_albedo(self, data: Any) -> Vec4:
        if not isinstance(data, (list, tuple)) or len(data) != 4:
            raise SceneParseError(f"Albedo must have 4 components, got: {data!r}")
        return Vec4(*(_to_float(c, "albedo") for c in data))

    def _parse_materials(self, materials_data: Dict[str, Any]) -> None:
        """Parse materials section."""
        for name, mat_data in materials_data.items():
            self.materials[name] = self._parse_material(
                _require_dict(mat_data, f"material '{name}'")
            )

    def _parse_material(self, mat_data: Dict[str, Any]) -> Material:
        """Build a material, optionally starting from a named preset."""
        base = Material()
        if 'preset' in mat_data:
            base = self._get_material(mat_data['preset'])

        diffuse_color = base.diffuse_color
        if 'diffuse_color' in mat_data:
            diffuse_color = self._parse_color(mat_data['diffuse_color'])

        albedo = base.albedo
        if 'albedo' in mat_data:
            albedo = self._parse_albedo(mat_data['albedo'])

        specular_exponent = _to_float(
            mat_data.get('specular_exponent', base.specular_exponent), "specular_exponent"
        )
        refractive_index = _to_float(
            mat_data.get('refractive_index', base.refractive_index), "refractive_index"
        )

        try:
            return Material(
                diffuse_color=diffuse_color,
                albedo=albedo,
                specular_exponent=specular_exponent,
                refractive_index=refractive_index
            )
        except ValueError as e:
            raise SceneParseError(f"Invalid material: {e}") from e

    def _get_material(self, mat_ref: Any) -> Material:
        """Get a material by name or inline definition."""
        if mat_ref is None:
            return Material()
        if isinstance(mat_ref, str):
            if mat_ref not in self.materials:
                raise SceneParseError(f"Unknown material: {mat_ref}")
            return self.materials[mat_ref]
        elif isinstance(mat_ref, dict):
            return self._parse_material(mat_ref)
        else:
            raise SceneParseError(f"Invalid material reference: {mat_ref!r}")

    def _parse_object(self, obj_data: Dict[str, Any]) -> Hittable:
        """Parse one entry of the objects section."""
        obj_type = obj_data.get('type', 'sphere')
        if not isinstance(obj_type, str):
            raise SceneParseError(f"Invalid object type: {obj_type!r}")
        obj_type = obj_type.lower()
        material = self._get_material(obj_data.get('material'))

        if obj_type == 'sphere':
            center = self._parse_vec3(obj_data.get('center', [0, 0, 0]), "sphere center")
            radius = _to_float(obj_data.get('radius', 1.0), "sphere radius")
            try:
                return Sphere(center, radius, material)
            except ValueError as e:
                raise SceneParseError(str(e)) from e

        elif obj_type == 'mesh':
            if 'file' not in obj_data:
                raise SceneParseError("Mesh object needs a 'file'")
            offset = None
            if 'offset' in obj_data:
                offset = self._parse_vec3(obj_data['offset'], "mesh offset")
            scale = _to_float(obj_data.get('scale', 1.0), "mesh scale")
            try:
                return load_mesh(self.base_dir / str(obj_data['file']), material, scale, offset)
            except (FileNotFoundError, MeshLoadError) as e:
                raise SceneParseError(str(e)) from e

        else:
            raise SceneParseError(f"Unknown object type: {obj_type}")

    def _parse_light(self, light_data: Dict[str, Any]) -> Light:
        """Parse one point light."""
        position = self._parse_vec3(light_data.get('position', [0, 5, 0]), "light position")
        intensity = _to_float(light_data.get('intensity', 1.0), "light intensity")
        try:
            return Light(position, intensity)
        except ValueError as e:
            raise SceneParseError(str(e)) from e

    def _parse_checkerboard(self, data: Any) -> Optional[Checkerboard]:
        """Parse the checkerboard entry: a bool or a mapping of overrides."""
        if data is True:
            return Checkerboard()
        if not data:
            return None
        if not isinstance(data, dict):
            raise SceneParseError(f"Invalid checkerboard: {data!r}")

        kwargs: Dict[str, Any] = {}
        for key in ('height', 'half_width', 'z_near', 'z_far', 'tone_scale'):
            if key in data:
                kwargs[key] = _to_float(data[key], f"checkerboard {key}")
        for key in ('odd_color', 'even_color'):
            if key in data:
                kwargs[key] = self._parse_color(data[key])
        return Checkerboard(**kwargs)

    def _parse_background(self, data: Any) -> Environment:
        """Parse the background: a color or `{envmap: path}`."""
        if data is None:
            return SolidColorEnvironment()
        if isinstance(data, dict) and 'envmap' in data:
            path = self.base_dir / str(data['envmap'])
            try:
                return load_environment(path)
            except FileNotFoundError as e:
                raise SceneParseError(str(e)) from e
            except (OSError, ValueError) as e:
                # Pillow reports unreadable or truncated images as OSError
                raise SceneParseError(f"Cannot read environment map {path}: {e}") from e
        return SolidColorEnvironment(self._parse_color(data))

    def _parse_settings(self, settings_data: Dict[str, Any]) -> RenderSettings:
        """Parse render settings section."""
        width = _to_int(settings_data.get('width', 1024), "render width")
        height = _to_int(settings_data.get('height', 768), "render height")
        fov = math.radians(_to_float(settings_data.get('fov', 90), "render fov"))
        max_depth = _to_int(settings_data.get('max_depth', 4), "render max_depth")
        tile_size = _to_int(settings_data.get('tile_size', 32), "render tile_size")
        num_threads = _to_int(settings_data.get('threads', 0), "render threads")

        try:
            return RenderSettings(
                width=width,
                height=height,
                fov=fov,
                max_depth=max_depth,
                tile_size=tile_size,
                num_threads=num_threads
            )
        except ValueError as e:
            raise SceneParseError(f"Invalid render settings: {e}") from e


def load_scene(filepath: str) -> SceneDescription:
    """Convenience function to load a scene file.

    Args:
        filepath: Path to the scene file

    Returns:
        SceneDescription
    """
    parser = SceneParser()
    return parser.parse_file(filepath)


def parse_scene(data: Dict[str, Any], base_dir: Optional[Path] = None) -> SceneDescription:
    """Convenience function to parse a scene from a dictionary.

    Args:
        data: Scene description dictionary
        base_dir: Directory for relative mesh and texture paths

    Returns:
        SceneDescription
    """
    parser = SceneParser(base_dir)
    return parser.parse_dict(data)
