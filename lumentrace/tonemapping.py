"""
Tone mapping operators for HDR to LDR conversion.

Implements:
- Linear clamping
- Max-channel normalization (hue-preserving highlight compression)
- Quantization to 8-bit
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from enum import Enum

import numpy as np


class ToneMappingOperator(Enum):
    """Available tone mapping operators."""
    LINEAR = "linear"
    MAX_CHANNEL = "max_channel"


class ToneMapper(ABC):
    """Abstract base class for tone mapping operators."""

    @abstractmethod
    def apply(self, hdr_image: np.ndarray) -> np.ndarray:
        """Apply tone mapping to HDR image.

        Args:
            hdr_image: HDR image (H, W, 3), linear float values

        Returns:
            LDR image (H, W, 3), values in [0, 1]
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of the operator."""
        pass


class LinearToneMapper(ToneMapper):
    """Simple linear clamping (no tone mapping).

    Just clamps values to [0, 1] range.
    """

    @property
    def name(self) -> str:
        return "Linear"

    def apply(self, hdr_image: np.ndarray) -> np.ndarray:
        """Clamp HDR values to [0, 1]."""
        return np.clip(hdr_image, 0.0, 1.0)


class MaxChannelToneMapper(ToneMapper):
    """Rescale over-bright pixels by their largest channel.

    A pixel whose brightest channel exceeds 1 is divided by that channel,
    so bright highlights keep their hue instead of clipping to white.
    The result is then clamped to [0, 1] to remove negative values.
    """

    @property
    def name(self) -> str:
        return "Max Channel"

    def apply(self, hdr_image: np.ndarray) -> np.ndarray:
        image = np.asarray(hdr_image, dtype=np.float64)
        peak = image.max(axis=-1, keepdims=True)
        scale = np.where(peak > 1.0, peak, 1.0)
        return np.clip(image / scale, 0.0, 1.0)


def create_tone_mapper(operator: ToneMappingOperator) -> ToneMapper:
    """Factory for tone mappers."""
    if operator == ToneMappingOperator.LINEAR:
        return LinearToneMapper()
    if operator == ToneMappingOperator.MAX_CHANNEL:
        return MaxChannelToneMapper()
    raise ValueError(f"Unknown tone mapping operator: {operator}")


def quantize(ldr_image: np.ndarray) -> np.ndarray:
    """Convert [0, 1] floats to uint8, truncating like an integer cast."""
    return (np.clip(ldr_image, 0.0, 1.0) * 255).astype(np.uint8)


def tone_map(
    hdr_image: np.ndarray,
    operator: ToneMappingOperator = ToneMappingOperator.MAX_CHANNEL
) -> np.ndarray:
    """Tone map an HDR framebuffer straight to 8-bit RGB."""
    return quantize(create_tone_mapper(operator).apply(hdr_image))
