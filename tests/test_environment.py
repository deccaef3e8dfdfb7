"""Tests for background sources."""

import pytest
import math
import numpy as np
from PIL import Image

from lumentrace.vec3 import Vec3, Color
from lumentrace.environment import (
    DEFAULT_BACKGROUND, SolidColorEnvironment, EquirectangularEnvironment, load_environment
)


def make_texture(width=4, height=2):
    """Texture whose red channel is the column and green channel the row."""
    data = np.zeros((height, width, 3))
    for j in range(height):
        for i in range(width):
            data[j, i] = (i, j, 0.5)
    return data


class TestSolidColorEnvironment:
    """Test solid color environment."""

    def test_returns_constant_color(self):
        env = SolidColorEnvironment(Color(0.5, 0.3, 0.1))
        assert env.sample(Vec3(0, 1, 0)) == Color(0.5, 0.3, 0.1)

    def test_direction_independent(self):
        env = SolidColorEnvironment(Color(1, 0, 0))
        assert env.sample(Vec3(0, 1, 0)) == env.sample(Vec3(0, 0, -1))

    def test_default_sky(self):
        assert SolidColorEnvironment().sample(Vec3(0, 0, -1)) == Color(0.2, 0.7, 0.8)
        assert DEFAULT_BACKGROUND == Color(0.2, 0.7, 0.8)


class TestEquirectangularEnvironment:
    """Test equirectangular texture lookup."""

    @pytest.fixture
    def env(self):
        return EquirectangularEnvironment(make_texture())

    def test_size(self, env):
        assert env.width == 4
        assert env.height == 2

    def test_uv_mapping(self, env):
        u, v = env.direction_to_uv(Vec3(1, 0, 0))
        assert (u, v) == (0.5, 0.5)
        u, v = env.direction_to_uv(Vec3(0, 0, -1))
        assert math.isclose(u, 0.25)
        assert math.isclose(v, 0.5)

    def test_up_maps_to_top_row(self, env):
        _, v = env.direction_to_uv(Vec3(0, 1, 0))
        assert math.isclose(v, 0.0)
        assert env.sample(Vec3(0, 1, 0)) == Color(2, 0, 0.5)

    def test_sample_equator(self, env):
        assert env.sample(Vec3(1, 0, 0)) == Color(2, 1, 0.5)
        assert env.sample(Vec3(0, 0, -1)) == Color(1, 1, 0.5)

    def test_clamped_to_bounds(self, env):
        # Straight down maps to v = 1, which is one row past the end
        assert env.texel(*env.direction_to_uv(Vec3(0, -1, 0))) == (2, 1)
        # -X maps to u = 1
        assert env.texel(*env.direction_to_uv(Vec3(-1, 0, 0))) == (3, 1)
        assert env.texel(-0.5, 2.0) == (0, 1)

    def test_grayscale_expanded(self):
        env = EquirectangularEnvironment(np.full((2, 4), 0.25))
        assert env.sample(Vec3(1, 0, 0)) == Color(0.25, 0.25, 0.25)

    def test_alpha_dropped(self):
        env = EquirectangularEnvironment(np.ones((2, 4, 4)))
        assert env.sample(Vec3(1, 0, 0)) == Color(1, 1, 1)

    def test_invalid_shape(self):
        with pytest.raises(ValueError):
            EquirectangularEnvironment(np.ones((2, 4, 2)))

    def test_empty(self):
        with pytest.raises(ValueError):
            EquirectangularEnvironment(np.ones((0, 4, 3)))


class TestLoadEnvironment:
    """Test loading environment maps from image files."""

    def test_load_png(self, tmp_path):
        pixels = np.zeros((2, 4, 3), dtype=np.uint8)
        pixels[1, 2] = (255, 0, 51)
        path = tmp_path / "env.png"
        Image.fromarray(pixels).save(path)

        env = load_environment(path)
        assert env.width == 4 and env.height == 2
        assert env.sample(Vec3(1, 0, 0)) == Color(1.0, 0.0, 0.2)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_environment(tmp_path / "missing.png")
