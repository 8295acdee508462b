"""
Glyph Compositor
================
Rasterizes text glyph by glyph with antialiased coverage and alpha-blends
it onto the canvas as opaque ink.
"""

import math
from typing import Optional, Sequence, Tuple

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from .asset_store import GlyphFont
from .blending import alpha_over, clip_paste_region
from .layout import Anchor


def rasterize_glyph(
    face: ImageFont.FreeTypeFont,
    char: str,
) -> Optional[Tuple[np.ndarray, int, int]]:
    """
    Coverage mask of a single glyph.

    Returns:
        (coverage, left, top) where coverage is a uint8 (h, w) mask and
        (left, top) is its offset from the pen position on the baseline,
        or None for glyphs without ink (spaces).
    """
    left, top, right, bottom = face.getbbox(char, anchor="ls")
    width, height = right - left, bottom - top
    if width <= 0 or height <= 0:
        return None

    mask = Image.new("L", (width, height), 0)
    ImageDraw.Draw(mask).text((-left, -top), char, font=face, fill=255, anchor="ls")
    return np.asarray(mask, dtype=np.uint8), left, top


class GlyphCompositor:
    """Draws strings in a single ink color using the shared font."""

    def __init__(self, font: GlyphFont, color: Sequence[int]):
        self.font = font
        self.color = np.asarray(color[:3], dtype=np.float32)

    def draw(self, canvas: np.ndarray, text: str, anchor: Anchor, size: float) -> int:
        """
        Draw ``text`` with its visual top-left at ``anchor``.

        Glyph pixels outside the canvas are skipped.

        Returns:
            Number of glyphs that put ink on the canvas
        """
        if not text:
            return 0

        face = self.font.at_size(size)
        ascent, _ = face.getmetrics()
        canvas_h, canvas_w = canvas.shape[:2]

        pen_x = float(anchor.x)
        baseline = float(anchor.y) + ascent
        drawn = 0

        for char in text:
            if char.isspace():
                char = " "
            elif not char.isprintable():
                continue

            glyph = rasterize_glyph(face, char)
            if glyph is not None:
                coverage, left, top = glyph
                gx = math.floor(pen_x) + left
                gy = math.floor(baseline) + top
                region = clip_paste_region(gx, gy, coverage.shape[1], coverage.shape[0], canvas_w, canvas_h)
                if region is not None:
                    weights = coverage[region.patch].astype(np.float32) / 255.0
                    blended = alpha_over(canvas[region.canvas], self.color, 255, weights)
                    # ink is opaque wherever the glyph covers the pixel
                    blended[..., 3][weights > 0] = 255
                    canvas[region.canvas] = blended
                    drawn += 1

            pen_x += face.getlength(char)
            # past the right edge nothing else can land on the canvas
            if pen_x > canvas_w + face.size:
                break

        return drawn
