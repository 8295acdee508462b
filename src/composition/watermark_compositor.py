"""
Watermark Compositor
====================
Draws scaled, rotated and faded copies of the watermark asset onto the
canvas background.

Rotation uses inverse mapping: every destination pixel inside the rotated
footprint is mapped back into the unrotated watermark and sampled there,
so the rotated copy has no holes. Only the footprint's bounding box
(clipped to the canvas) is visited.

Placement strategies:
- none: the stage is skipped
- safe_area: copy centers stay inside an inset region and keep a minimum
  distance from each other, resampled a bounded number of times
- unconstrained: centers may fall anywhere, including partly or fully
  off-canvas
"""

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np
from loguru import logger

from .blending import alpha_over
from .config_manager import PlacementStrategy, WatermarkProfile
from .randomization import RandomizationEngine, RenderParameters
from .stamp_compositor import resize_asset


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class PlacementResult:
    """Outcome of a bounded placement search"""
    center: Tuple[float, float]
    attempts: int
    satisfied: bool


@dataclass(frozen=True)
class WatermarkPlacement:
    """One rendered watermark copy"""
    center: Tuple[float, float]
    origin: Tuple[int, int]
    size: Tuple[int, int]
    parameters: RenderParameters
    pixels_written: int


# =============================================================================
# Geometry
# =============================================================================

def rotated_half_extent(width: float, height: float, angle: float) -> Tuple[float, float]:
    """Half width/height of the axis-aligned box around a rotated rectangle."""
    theta = math.radians(angle)
    cos_t, sin_t = abs(math.cos(theta)), abs(math.sin(theta))
    return (width * cos_t + height * sin_t) / 2.0, (width * sin_t + height * cos_t) / 2.0


def blend_rotated(
    canvas: np.ndarray,
    patch: np.ndarray,
    origin: Tuple[int, int],
    angle: float,
    opacity: float = 1.0,
) -> int:
    """
    Blend ``patch`` rotated by ``angle`` degrees about its own center, in place.

    ``origin`` is the top-left corner of the unrotated patch on the canvas,
    so at angle 0 this is an axis-aligned blit at ``origin``. Positive
    angles turn clockwise on screen. Source alpha is scaled by ``opacity``;
    fully transparent source pixels are skipped.

    Returns:
        Number of canvas pixels written
    """
    canvas_h, canvas_w = canvas.shape[:2]
    p_h, p_w = patch.shape[:2]
    if p_h == 0 or p_w == 0:
        return 0

    center_x = origin[0] + p_w / 2.0
    center_y = origin[1] + p_h / 2.0
    half_w, half_h = rotated_half_extent(p_w, p_h, angle)

    x0 = max(0, math.floor(center_x - half_w))
    y0 = max(0, math.floor(center_y - half_h))
    x1 = min(canvas_w, math.ceil(center_x + half_w))
    y1 = min(canvas_h, math.ceil(center_y + half_h))
    if x1 <= x0 or y1 <= y0:
        return 0

    theta = math.radians(angle)
    cos_t, sin_t = math.cos(theta), math.sin(theta)

    ys, xs = np.mgrid[y0:y1, x0:x1]
    dx = xs + 0.5 - center_x
    dy = ys + 0.5 - center_y

    # rotate destination offsets by -theta back into the patch frame
    src_x = np.floor(cos_t * dx + sin_t * dy + p_w / 2.0).astype(np.int64)
    src_y = np.floor(-sin_t * dx + cos_t * dy + p_h / 2.0).astype(np.int64)

    inside = (src_x >= 0) & (src_x < p_w) & (src_y >= 0) & (src_y < p_h)
    if not inside.any():
        return 0

    src_pixels = patch[src_y[inside], src_x[inside]]
    visible = src_pixels[:, 3] > 0
    if not visible.any():
        return 0

    dst_y = ys[inside][visible]
    dst_x = xs[inside][visible]
    src_pixels = src_pixels[visible]

    canvas[dst_y, dst_x] = alpha_over(
        canvas[dst_y, dst_x], src_pixels[:, :3], src_pixels[:, 3], opacity
    )
    return int(dst_y.size)


# =============================================================================
# Placement
# =============================================================================

def safe_area(canvas_width: int, canvas_height: int, margin: float) -> Tuple[float, float, float, float]:
    """(x_min, y_min, x_max, y_max) of the canvas inset by ``margin`` on each side."""
    return (
        canvas_width * margin,
        canvas_height * margin,
        canvas_width * (1.0 - margin),
        canvas_height * (1.0 - margin),
    )


def place_in_safe_area(
    engine: RandomizationEngine,
    area: Tuple[float, float, float, float],
    existing: Sequence[Tuple[float, float]],
    min_distance: float,
    max_attempts: int,
) -> PlacementResult:
    """
    Sample a center inside ``area`` at least ``min_distance`` from ``existing``.

    At most ``max_attempts`` samples are drawn (minimum one); when all of
    them conflict the last one is accepted. Zero-size or inverted areas
    collapse onto their (x_min, y_min) corner.
    """
    x_min, y_min, x_max, y_max = area
    attempts = max(1, int(max_attempts))
    center = (x_min, y_min)

    for attempt in range(1, attempts + 1):
        center = engine.point("watermark.center", (x_min, x_max), (y_min, y_max))
        if all(math.hypot(center[0] - px, center[1] - py) >= min_distance for px, py in existing):
            return PlacementResult(center=center, attempts=attempt, satisfied=True)

    logger.debug(
        f"Watermark placement kept overlapping after {attempts} attempts, "
        f"accepting ({center[0]:.1f}, {center[1]:.1f})"
    )
    return PlacementResult(center=center, attempts=attempts, satisfied=False)


def place_unconstrained(
    engine: RandomizationEngine,
    canvas_size: Tuple[int, int],
    patch_size: Tuple[int, int],
) -> PlacementResult:
    """Sample a center anywhere on the canvas extended by half the patch size."""
    canvas_w, canvas_h = canvas_size
    p_w, p_h = patch_size
    center = engine.point(
        "watermark.center",
        (-p_w / 2.0, canvas_w + p_w / 2.0),
        (-p_h / 2.0, canvas_h + p_h / 2.0),
    )
    return PlacementResult(center=center, attempts=1, satisfied=True)


# =============================================================================
# Compositor
# =============================================================================

class WatermarkCompositor:
    """Renders the configured number of watermark copies."""

    def __init__(self, watermark: np.ndarray, profile: WatermarkProfile):
        self.watermark = watermark
        self.profile = profile

    @property
    def strategy(self) -> PlacementStrategy:
        return self.profile.placement

    def draw(self, canvas: np.ndarray, engine: RandomizationEngine) -> List[WatermarkPlacement]:
        """Draw every watermark copy onto ``canvas`` and describe where they went."""
        if self.strategy == PlacementStrategy.NONE:
            return []

        canvas_h, canvas_w = canvas.shape[:2]
        area = safe_area(canvas_w, canvas_h, self.profile.safe_margin)
        count = engine.watermark_count(self.profile)
        placements: List[WatermarkPlacement] = []

        for _ in range(count):
            params = engine.watermark_parameters(self.profile)
            patch = resize_asset(self.watermark, params.scale)
            if patch is None:
                continue
            p_h, p_w = patch.shape[:2]

            if self.strategy == PlacementStrategy.SAFE_AREA:
                result = place_in_safe_area(
                    engine,
                    area,
                    [p.center for p in placements],
                    self.profile.min_distance,
                    self.profile.max_attempts,
                )
            else:
                result = place_unconstrained(engine, (canvas_w, canvas_h), (p_w, p_h))

            origin = (
                int(round(result.center[0] - p_w / 2.0)),
                int(round(result.center[1] - p_h / 2.0)),
            )
            written = blend_rotated(canvas, patch, origin, params.rotation, params.opacity)
            placements.append(WatermarkPlacement(
                center=result.center,
                origin=origin,
                size=(p_w, p_h),
                parameters=params,
                pixels_written=written,
            ))

        return placements
