"""
Renderer module - drives the shading engine over the image.

Implements:
- One primary ray per pixel through a fixed pinhole camera
- Multi-threaded tile-based rendering
- Tone mapping to 8-bit and image output
"""

from __future__ import annotations
import logging
import math
import os
import platform
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

import numpy as np

from .camera import Camera
from .environment import Environment, SolidColorEnvironment
from .scene import Scene
from .shading import DEFAULT_MAX_DEPTH, cast_ray
from .tonemapping import ToneMappingOperator, tone_map

logger = logging.getLogger(__name__)

Tile = Tuple[int, int, int, int]


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 1024
    height: int = 768
    fov: float = math.pi / 2  # vertical, radians
    max_depth: int = DEFAULT_MAX_DEPTH
    tile_size: int = 32
    num_threads: int = 0  # 0 = auto-detect
    tone_mapping: ToneMappingOperator = ToneMappingOperator.MAX_CHANNEL

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image size must be positive, got {self.width}x{self.height}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")
        if self.tile_size <= 0:
            raise ValueError(f"tile_size must be positive, got {self.tile_size}")
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4


class Renderer:
    """Whitted ray tracing renderer with multi-threading support."""

    def __init__(self, settings: Optional[RenderSettings] = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self.camera = Camera(self.settings.width, self.settings.height, self.settings.fov)
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def render_pixel(self, scene: Scene, background: Environment, i: int, j: int) -> np.ndarray:
        """Shade the primary ray through pixel (i, j)."""
        color = cast_ray(
            self.camera.get_ray(i, j), scene, background, 0, self.settings.max_depth
        )
        return color.to_array()

    def render(self, scene: Scene, background: Optional[Environment] = None) -> np.ndarray:
        """Render the scene and return the framebuffer.

        Args:
            scene: The scene to render
            background: Color source for escaping rays (default solid sky blue)

        Returns:
            HDR image as numpy array of shape (height, width, 3), unclamped
        """
        if background is None:
            background = SolidColorEnvironment()

        width = self.settings.width
        height = self.settings.height

        image = np.zeros((height, width, 3), dtype=np.float64)

        tiles = self._generate_tiles(width, height)
        total_tiles = len(tiles)
        completed_tiles = [0]  # Use list for mutable in closure
        progress_lock = threading.Lock()

        logger.info(
            "Rendering %dx%d, %d objects, %d lights, %d tiles on %d threads",
            width, height, len(scene.objects), len(scene.lights),
            total_tiles, self.settings.num_threads
        )

        def render_tile(tile: Tile) -> Tuple[Tile, np.ndarray]:
            """Render a single tile."""
            x0, y0, x1, y1 = tile
            tile_image = np.zeros((y1 - y0, x1 - x0, 3), dtype=np.float64)

            for j in range(y0, y1):
                for i in range(x0, x1):
                    tile_image[j - y0, i - x0] = self.render_pixel(scene, background, i, j)

            with progress_lock:
                completed_tiles[0] += 1
                done = completed_tiles[0]
                logger.debug("Tile %s done (%d/%d)", tile, done, total_tiles)
                if self._progress_callback:
                    self._progress_callback(done / total_tiles)

            return tile, tile_image

        # Pixels are independent, so tiles can run in any order
        if self.settings.num_threads > 1:
            with ThreadPoolExecutor(max_workers=self.settings.num_threads) as executor:
                results = list(executor.map(render_tile, tiles))
        else:
            results = [render_tile(tile) for tile in tiles]

        # Combine tiles into final image
        for tile, tile_image in results:
            x0, y0, x1, y1 = tile
            image[y0:y1, x0:x1] = tile_image

        logger.info("Render finished")
        return image

    def _generate_tiles(self, width: int, height: int) -> List[Tile]:
        """Generate tiles for parallel rendering.

        Args:
            width: Image width
            height: Image height

        Returns:
            List of tiles as (x0, y0, x1, y1) tuples
        """
        tile_size = self.settings.tile_size
        tiles = []

        for y in range(0, height, tile_size):
            for x in range(0, width, tile_size):
                x1 = min(x + tile_size, width)
                y1 = min(y + tile_size, height)
                tiles.append((x, y, x1, y1))

        return tiles

    def to_ldr(self, hdr_image: np.ndarray) -> np.ndarray:
        """Convert the HDR framebuffer to 8-bit RGB.

        Args:
            hdr_image: HDR image array (float64)

        Returns:
            LDR image as uint8 array
        """
        return tone_map(hdr_image, self.settings.tone_mapping)

    def save_image(self, image: np.ndarray, filename: Union[str, Path]) -> None:
        """Save image to file.

        Args:
            image: Image array (HDR float or LDR uint8)
            filename: Output filename (extension determines format, e.g. .png, .ppm)
        """
        from PIL import Image as PILImage

        if image.dtype != np.uint8:
            image = self.to_ldr(image)

        PILImage.fromarray(image).save(str(filename))
        logger.info("Saved %s", filename)


def get_platform_info() -> dict:
    """Get information about the current platform.

    Returns:
        Dictionary with platform details
    """
    return {
        'system': platform.system(),
        'machine': platform.machine(),
        'python_version': platform.python_version(),
        'cpu_count': os.cpu_count(),
    }
