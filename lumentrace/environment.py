"""
Background sources for rays that leave the scene.

Implements:
- Solid color backgrounds
- Equirectangular environment maps (direction -> texel lookup)
"""

from __future__ import annotations
from abc import ABC, abstractmethod
import logging
import math
from pathlib import Path
from typing import Tuple, Union

import numpy as np

from .vec3 import Vec3, Color

logger = logging.getLogger(__name__)

DEFAULT_BACKGROUND = Color(0.2, 0.7, 0.8)


class Environment(ABC):
    """Abstract base class for background sources."""

    @abstractmethod
    def sample(self, direction: Vec3) -> Color:
        """Get the environment color for a given direction.

        Args:
            direction: The direction to sample (normalized)

        Returns:
            Color value from the environment
        """
        pass


class SolidColorEnvironment(Environment):
    """A constant background color."""

    def __init__(self, color: Color = DEFAULT_BACKGROUND):
        self.color = color

    def sample(self, direction: Vec3) -> Color:
        return self.color

    def __repr__(self) -> str:
        return f"SolidColorEnvironment({self.color})"


class EquirectangularEnvironment(Environment):
    """A latitude/longitude environment texture.

    The texture is stored as a float array of shape (height, width, 3)
    and sampled with nearest-texel lookup, no filtering.
    """

    def __init__(self, data: np.ndarray):
        """Create an environment map from texel data.

        Args:
            data: Array of shape (height, width, 3) or (height, width) of
                linear colors; extra channels (alpha) are dropped
        """
        data = np.asarray(data, dtype=np.float64)
        if data.ndim == 2:
            data = np.stack([data] * 3, axis=-1)
        elif data.ndim != 3 or data.shape[2] < 3:
            raise ValueError(f"Environment map must be (H, W, 3), got shape {data.shape}")
        else:
            data = data[:, :, :3]

        if data.shape[0] == 0 or data.shape[1] == 0:
            raise ValueError("Environment map is empty")

        self._data = data
        self._height, self._width = data.shape[:2]

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def direction_to_uv(self, direction: Vec3) -> Tuple[float, float]:
        """Map a unit direction to texture coordinates in [0, 1]."""
        u = 0.5 + math.atan2(direction.z, direction.x) / (2 * math.pi)
        v = 0.5 - math.asin(max(-1.0, min(1.0, direction.y))) / math.pi
        return u, v

    def texel(self, u: float, v: float) -> Tuple[int, int]:
        """Texel (column, row) for UV coordinates, clamped to the image."""
        i = min(max(int(u * self._width), 0), self._width - 1)
        j = min(max(int(v * self._height), 0), self._height - 1)
        return i, j

    def sample(self, direction: Vec3) -> Color:
        i, j = self.texel(*self.direction_to_uv(direction))
        return Color.from_array(self._data[j, i].copy())

    def __repr__(self) -> str:
        return f"EquirectangularEnvironment({self._width}x{self._height})"


def load_environment(filename: Union[str, Path]) -> EquirectangularEnvironment:
    """Load an equirectangular environment map from an image file.

    Pixels are converted to RGB and scaled from 8-bit to [0, 1].

    Raises:
        FileNotFoundError: If the file does not exist
    """
    from PIL import Image

    path = Path(filename)
    if not path.exists():
        raise FileNotFoundError(f"Environment map not found: {filename}")

    with Image.open(path) as img:
        data = np.array(img.convert("RGB"), dtype=np.float64) / 255.0

    logger.debug("Loaded environment map %s (%dx%d)", path, data.shape[1], data.shape[0])
    return EquirectangularEnvironment(data)
