"""
Document Renderer
=================
Runs one render: clone the template, draw every text field, stamp the
signature, lay down the watermarks and encode the canvas.

The renderer only holds read-only state (assets, profile, layout), so a
single instance can serve concurrent renders from any number of threads.
"""

import time
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, List, Optional

import numpy as np
from loguru import logger

from .asset_store import AssetStore
from .config_manager import RenderProfile
from .encoder import encode_png
from .exceptions import GenerationError, RasterizationError
from .glyph_compositor import GlyphCompositor
from .layout import DEFAULT_LAYOUT, FieldName, LayoutTable
from .randomization import RandomizationEngine
from .stamp_compositor import StampCompositor
from .watermark_compositor import WatermarkCompositor, WatermarkPlacement


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class DocumentFields:
    """User supplied text, already trimmed and validated"""
    name: str
    address: str
    issuer: str


@dataclass(frozen=True)
class RenderedDocument:
    """Encoded output of one render"""
    data: bytes
    width: int
    height: int
    media_type: str = "image/png"


# =============================================================================
# Renderer
# =============================================================================

class DocumentRenderer:
    """
    Composes documents from shared assets.

    Stage order is fixed: text fields (layout order), signature,
    watermarks. Each stage draws its random values from the render's own
    RandomizationEngine, so a seeded render is byte-for-byte reproducible.
    """

    def __init__(
        self,
        assets: AssetStore,
        profile: Optional[RenderProfile] = None,
        layout: Optional[LayoutTable] = None,
        clock: Callable[[], date] = date.today,
    ):
        self.assets = assets
        self.profile = profile or RenderProfile()
        self.layout = layout or DEFAULT_LAYOUT
        self.clock = clock

        self.glyphs = GlyphCompositor(assets.font, self.profile.text_color)
        self.stamp = StampCompositor(assets.signature)
        self.watermarks = WatermarkCompositor(assets.watermark, self.profile.watermark)

    def field_values(self, fields: DocumentFields, engine: RandomizationEngine) -> Dict[FieldName, str]:
        """Text printed for every field, including the generated ones."""
        number = engine.document_number()
        return {
            FieldName.NAME: fields.name,
            FieldName.ADDRESS: fields.address,
            FieldName.ISSUER: fields.issuer,
            FieldName.NUMBER: number,
            FieldName.YEAR: engine.year_suffix(self.clock()),
            FieldName.TIME: engine.time_string(),
        }

    def render_canvas(self, fields: DocumentFields, engine: RandomizationEngine) -> np.ndarray:
        """
        Compose the document and return the raw RGBA canvas.

        Raises:
            RasterizationError: if any drawing stage fails
        """
        canvas = self.assets.new_canvas()
        try:
            values = self.field_values(fields, engine)
            self._draw_text_fields(canvas, values, engine)
            self._draw_signature(canvas, engine)
            self._draw_watermarks(canvas, engine)
        except GenerationError:
            raise
        except Exception as e:
            raise RasterizationError(f"Failed to compose document: {e}") from e
        return canvas

    def render(self, fields: DocumentFields, seed: Optional[int] = None) -> RenderedDocument:
        """
        Render and encode one document.

        Raises:
            GenerationError: on any rasterization or encoding failure
        """
        start_time = time.time()
        engine = RandomizationEngine(seed)
        canvas = self.render_canvas(fields, engine)

        width, height = self.assets.template_size
        data = encode_png(canvas, (width, height), self.profile.png_compression)

        processing_time = (time.time() - start_time) * 1000
        logger.info(f"Successfully generated image for: {fields.name} ({processing_time:.0f} ms)")
        return RenderedDocument(data=data, width=width, height=height)

    # =========================================================================
    # Stages
    # =========================================================================

    def _draw_text_fields(
        self,
        canvas: np.ndarray,
        values: Dict[FieldName, str],
        engine: RandomizationEngine,
    ):
        for field_name in self.layout.fields:
            text = values.get(field_name, "")
            profile = self.profile.field_profile(field_name)
            for anchor in self.layout.anchors(field_name):
                params = engine.text_parameters(field_name.value, profile)
                self.glyphs.draw(canvas, text, anchor.shifted(params.dx, params.dy), params.scale)

    def _draw_signature(self, canvas: np.ndarray, engine: RandomizationEngine):
        if not self.profile.signature.enabled:
            return
        for anchor in self.layout.signature_anchors:
            params = engine.signature_parameters(self.profile.signature)
            self.stamp.draw(canvas, anchor.shifted(params.dx, params.dy), params.scale)

    def _draw_watermarks(self, canvas: np.ndarray, engine: RandomizationEngine) -> List[WatermarkPlacement]:
        placements = self.watermarks.draw(canvas, engine)
        if placements:
            logger.debug(f"Placed {len(placements)} watermark copies ({self.watermarks.strategy.value})")
        return placements
