"""
Alpha compositing primitives shared by the text, stamp and watermark
compositors.
"""

from typing import NamedTuple, Optional, Tuple, Union

import numpy as np


ArrayLike = Union[np.ndarray, float, int, Tuple[int, ...]]


class PasteRegion(NamedTuple):
    """Matching canvas and patch windows of a clipped paste"""
    canvas: Tuple[slice, slice]
    patch: Tuple[slice, slice]


def alpha_over(
    background: np.ndarray,
    foreground_rgb: ArrayLike,
    foreground_alpha: ArrayLike = 255,
    attenuation: ArrayLike = 1.0,
) -> np.ndarray:
    """
    Composite a foreground over RGBA background pixels.

    out_rgb = fg * a + bg * (1 - a), with a = alpha / 255 * attenuation.
    out_alpha = max(a * 255, background alpha), so opaque backgrounds stay
    opaque and faded sources stay faint over transparent ones.

    Args:
        background: RGBA uint8 pixels, shape (..., 4)
        foreground_rgb: RGB values broadcastable to (..., 3)
        foreground_alpha: uint8 alpha broadcastable to (...)
        attenuation: multiplier in [0, 1] broadcastable to (...)

    Returns:
        New RGBA uint8 array with the background's shape
    """
    pixel_shape = background.shape[:-1]

    src_alpha = np.broadcast_to(
        np.clip(np.asarray(foreground_alpha), 0, 255).astype(np.uint8), pixel_shape
    )
    a = src_alpha.astype(np.float32) / 255.0 * np.asarray(attenuation, dtype=np.float32)
    a = np.clip(a, 0.0, 1.0)[..., np.newaxis]

    fg = np.asarray(foreground_rgb, dtype=np.float32)
    bg = background[..., :3].astype(np.float32)
    rgb = fg * a + bg * (1.0 - a)

    out = np.empty_like(background)
    out[..., :3] = np.clip(rgb, 0, 255).astype(np.uint8)
    out[..., 3] = np.maximum(np.rint(a[..., 0] * 255.0).astype(np.uint8), background[..., 3])
    return out


def clip_paste_region(
    x: int,
    y: int,
    width: int,
    height: int,
    canvas_width: int,
    canvas_height: int,
) -> Optional[PasteRegion]:
    """Intersect a patch placed at (x, y) with the canvas; None if disjoint."""
    x_start_bg = max(x, 0)
    y_start_bg = max(y, 0)
    x_end_bg = min(x + width, canvas_width)
    y_end_bg = min(y + height, canvas_height)
    eff_w = x_end_bg - x_start_bg
    eff_h = y_end_bg - y_start_bg

    if eff_w <= 0 or eff_h <= 0:
        return None

    x_start_patch = x_start_bg - x
    y_start_patch = y_start_bg - y
    return PasteRegion(
        canvas=(slice(y_start_bg, y_end_bg), slice(x_start_bg, x_end_bg)),
        patch=(slice(y_start_patch, y_start_patch + eff_h), slice(x_start_patch, x_start_patch + eff_w)),
    )


def blend_patch(
    canvas: np.ndarray,
    patch: np.ndarray,
    x: int,
    y: int,
    attenuation: float = 1.0,
) -> bool:
    """
    Alpha-blend an RGBA patch axis-aligned onto the canvas at (x, y), in place.

    Pixels falling outside the canvas are dropped.

    Returns:
        True if any part of the patch landed on the canvas
    """
    canvas_h, canvas_w = canvas.shape[:2]
    region = clip_paste_region(int(x), int(y), patch.shape[1], patch.shape[0], canvas_w, canvas_h)
    if region is None:
        return False

    src = patch[region.patch]
    roi = canvas[region.canvas]
    canvas[region.canvas] = alpha_over(roi, src[..., :3], src[..., 3], attenuation)
    return True
