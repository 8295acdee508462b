"""
Randomization Engine
====================
Per-render source of every random value used while composing a document.

A new engine (and a new numpy Generator) is created for each render, so
concurrent renders never share random state. Passing a seed makes a
render fully reproducible.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence, Tuple

import numpy as np
from loguru import logger

from .config_manager import SignatureProfile, TextFieldProfile, WatermarkProfile


NUMBER_RANGE = (64 * 64, 512 * 512)
HOUR_RANGE = (8, 19)
MINUTE_STEP = 5


@dataclass(frozen=True)
class RenderParameters:
    """Sampled values for a single field occurrence or overlay copy"""
    dx: float = 0.0
    dy: float = 0.0
    scale: float = 1.0
    rotation: float = 0.0
    opacity: float = 1.0


class RandomizationEngine:
    """Samples uniform values from [min, max) ranges."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def uniform(self, name: str, value_range: Sequence[float]) -> float:
        """
        Sample a float from ``[min, max)``.

        Degenerate ranges (max <= min) return min without consuming
        randomness.
        """
        low, high = float(value_range[0]), float(value_range[1])
        if high <= low:
            value = low
        else:
            value = float(self._rng.uniform(low, high))
        logger.debug(f"sampled {name}={value:.3f}")
        return value

    def integer(self, name: str, value_range: Sequence[int]) -> int:
        """Sample an integer from ``[min, max)``; degenerate ranges return min."""
        low, high = int(value_range[0]), int(value_range[1])
        if high <= low:
            value = low
        else:
            value = int(self._rng.integers(low, high))
        logger.debug(f"sampled {name}={value}")
        return value

    # =========================================================================
    # Per-occurrence parameters
    # =========================================================================

    def text_parameters(self, field: str, profile: TextFieldProfile) -> RenderParameters:
        dx = self.uniform(f"{field}.jitter_x", profile.jitter_x)
        dy = self.uniform(f"{field}.jitter_y", profile.jitter_y)
        size = self.uniform(f"{field}.font_size", profile.font_size)
        return RenderParameters(dx=dx, dy=dy, scale=size)

    def signature_parameters(self, profile: SignatureProfile) -> RenderParameters:
        dx = self.uniform("signature.jitter_x", profile.jitter_x)
        dy = self.uniform("signature.jitter_y", profile.jitter_y)
        scale = self.uniform("signature.scale", profile.scale)
        return RenderParameters(dx=dx, dy=dy, scale=scale)

    def watermark_count(self, profile: WatermarkProfile) -> int:
        return max(0, self.integer("watermark.count", profile.count))

    def watermark_parameters(self, profile: WatermarkProfile) -> RenderParameters:
        scale = self.uniform("watermark.scale", profile.scale)
        rotation = self.uniform("watermark.rotation", profile.rotation)
        opacity = self.uniform("watermark.opacity", profile.opacity)
        return RenderParameters(scale=scale, rotation=rotation, opacity=opacity)

    def point(self, name: str, x_range: Sequence[float], y_range: Sequence[float]) -> Tuple[float, float]:
        return self.uniform(f"{name}.x", x_range), self.uniform(f"{name}.y", y_range)

    # =========================================================================
    # Computed strings
    # =========================================================================

    def document_number(self) -> str:
        return str(self.integer("number", NUMBER_RANGE))

    def year_suffix(self, today: Optional[date] = None) -> str:
        """Two-digit suffix of the current year, e.g. '25'."""
        today = today or date.today()
        return f"{today.year % 100:02d}"

    def time_string(self) -> str:
        """Office-hours time on a five minute grid, formatted HH:MM."""
        hour = self.integer("time.hour", HOUR_RANGE)
        minute = self.integer("time.minute", (0, 60 // MINUTE_STEP)) * MINUTE_STEP
        return f"{hour:02d}:{minute:02d}"
