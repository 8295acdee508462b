"""
Stamp Compositor
================
Resizes the signature asset and blends it axis-aligned onto the canvas.
"""

import math
from typing import Optional

import cv2
import numpy as np

from .blending import blend_patch
from .layout import Anchor


def resize_asset(asset: np.ndarray, scale: float) -> Optional[np.ndarray]:
    """
    Resize an RGBA asset by ``scale`` with Lanczos resampling.

    Returns:
        The resized array (at least 1x1), the asset itself for scale 1.0,
        or None for non-positive or non-finite scales.
    """
    if not math.isfinite(scale) or scale <= 0:
        return None
    if scale == 1.0:
        return asset

    h, w = asset.shape[:2]
    new_w = max(1, int(round(w * scale)))
    new_h = max(1, int(round(h * scale)))
    if (new_w, new_h) == (w, h):
        return asset
    return cv2.resize(asset, (new_w, new_h), interpolation=cv2.INTER_LANCZOS4)


class StampCompositor:
    """Places the signature stamp."""

    def __init__(self, signature: np.ndarray):
        self.signature = signature

    def draw(self, canvas: np.ndarray, anchor: Anchor, scale: float) -> bool:
        """
        Blend the signature scaled by ``scale`` with its top-left at ``anchor``.

        Returns:
            True if any part of the stamp landed on the canvas
        """
        stamp = resize_asset(self.signature, scale)
        if stamp is None:
            return False
        return blend_patch(canvas, stamp, math.floor(anchor.x), math.floor(anchor.y))
