"""
Document compositor.

Synthesizes a document image from a fixed template by overlaying:
- Randomly jittered text fields rendered with a shared font
- A resized signature stamp
- Scaled, rotated, faded watermark copies
and encodes the result as PNG.
"""

from .asset_store import AssetPaths, AssetStore, GlyphFont
from .config_manager import (
    PlacementStrategy,
    ProfileConfig,
    RenderProfile,
    SignatureProfile,
    TextFieldProfile,
    WatermarkProfile,
)
from .encoder import encode_png
from .exceptions import (
    AssetLoadError,
    CompositionError,
    ConfigurationError,
    EncodingError,
    GenerationError,
    RasterizationError,
)
from .layout import DEFAULT_LAYOUT, Anchor, FieldName, LayoutTable
from .randomization import RandomizationEngine, RenderParameters
from .renderer import DocumentFields, DocumentRenderer, RenderedDocument

__version__ = "1.0.0"

__all__ = [
    'AssetPaths',
    'AssetStore',
    'GlyphFont',
    'PlacementStrategy',
    'ProfileConfig',
    'RenderProfile',
    'SignatureProfile',
    'TextFieldProfile',
    'WatermarkProfile',
    'encode_png',
    'AssetLoadError',
    'CompositionError',
    'ConfigurationError',
    'EncodingError',
    'GenerationError',
    'RasterizationError',
    'DEFAULT_LAYOUT',
    'Anchor',
    'FieldName',
    'LayoutTable',
    'RandomizationEngine',
    'RenderParameters',
    'DocumentFields',
    'DocumentRenderer',
    'RenderedDocument',
]
