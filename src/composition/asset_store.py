"""
Asset Store
===========
Loads the template, signature and watermark rasters plus the text font
once at startup. Everything returned here is read-only and shared by all
concurrent renders; no file I/O happens after loading.
"""

import io
import math
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple, Union

import cv2
import numpy as np
from loguru import logger
from PIL import ImageFont

from .exceptions import AssetLoadError


PathLike = Union[str, os.PathLike]

DEFAULT_ASSETS_DIR = "assets"
MIN_FONT_SIZE = 1.0
FONT_SIZE_STEP = 0.1
FACE_CACHE_SIZE = 512


@dataclass(frozen=True)
class AssetPaths:
    """File-system locations of the four startup assets"""
    template: str
    signature: str
    watermark: str
    font: str

    @classmethod
    def from_env(cls, assets_dir: str = DEFAULT_ASSETS_DIR) -> "AssetPaths":
        """Resolve paths from TEMPLATE_PATH, SIGNATURE_PATH, WATERMARK_PATH and FONT_PATH."""
        return cls(
            template=os.environ.get("TEMPLATE_PATH", os.path.join(assets_dir, "template.png")),
            signature=os.environ.get("SIGNATURE_PATH", os.path.join(assets_dir, "signature.png")),
            watermark=os.environ.get("WATERMARK_PATH", os.path.join(assets_dir, "watermark.png")),
            font=os.environ.get("FONT_PATH", os.path.join(assets_dir, "font.ttf")),
        )


# =============================================================================
# Loading Helpers
# =============================================================================

def to_rgba(image: np.ndarray) -> np.ndarray:
    """Convert an OpenCV decoded image (gray, BGR or BGRA) to 8-bit RGBA."""
    if image.dtype == np.uint16:
        image = (image >> 8).astype(np.uint8)
    elif image.dtype != np.uint8:
        raise ValueError(f"unsupported pixel depth {image.dtype}")

    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)

    channels = image.shape[2]
    if channels == 1:
        return cv2.cvtColor(image[:, :, 0], cv2.COLOR_GRAY2RGBA)
    if channels == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)
    if channels == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)
    raise ValueError(f"unsupported channel count {channels}")


def load_raster(path: PathLike) -> np.ndarray:
    """
    Decode an image file into a read-only RGBA array.

    Raises:
        AssetLoadError: if the file is missing or cannot be decoded
    """
    path = str(path)
    if not os.path.isfile(path):
        raise AssetLoadError(path, "file not found")

    image = cv2.imread(path, cv2.IMREAD_UNCHANGED)
    if image is None:
        raise AssetLoadError(path, "cannot decode image")

    try:
        rgba = to_rgba(image)
    except ValueError as e:
        raise AssetLoadError(path, str(e)) from e

    if rgba.shape[0] == 0 or rgba.shape[1] == 0:
        raise AssetLoadError(path, "image has no pixels")

    rgba = np.ascontiguousarray(rgba)
    rgba.setflags(write=False)
    return rgba


class GlyphFont:
    """
    Parsed TrueType/OpenType font kept in memory.

    Sized faces are built from the in-memory bytes, so rendering at any
    size never touches the disk. Sizes are quantized to FONT_SIZE_STEP and
    each sized face is parsed once.
    """

    def __init__(self, data: bytes, source: str = "<memory>"):
        self._data = bytes(data)
        self.source = source
        # Parse once so a corrupt font fails at startup
        self._reference = ImageFont.truetype(io.BytesIO(self._data), size=32)
        self._faces = lru_cache(maxsize=FACE_CACHE_SIZE)(self._load_face)

    @classmethod
    def from_file(cls, path: PathLike) -> "GlyphFont":
        path = str(path)
        try:
            with open(path, "rb") as f:
                data = f.read()
        except OSError as e:
            raise AssetLoadError(path, f"cannot read font: {e}") from e

        try:
            return cls(data, source=path)
        except (OSError, ValueError) as e:
            raise AssetLoadError(path, f"cannot parse font: {e}") from e

    @property
    def family(self) -> str:
        return " ".join(name for name in self._reference.getname() if name)

    def _load_face(self, size: float) -> ImageFont.FreeTypeFont:
        return ImageFont.truetype(io.BytesIO(self._data), size=size)

    def at_size(self, size: float) -> ImageFont.FreeTypeFont:
        """Return a face of the font scaled to ``size`` pixels, rounded to FONT_SIZE_STEP."""
        size = float(size)
        if not math.isfinite(size):
            size = MIN_FONT_SIZE
        steps = round(max(size, MIN_FONT_SIZE) / FONT_SIZE_STEP)
        return self._faces(round(steps * FONT_SIZE_STEP, 2))


# =============================================================================
# Asset Store
# =============================================================================

@dataclass(frozen=True)
class AssetStore:
    """Immutable handle to every decoded startup asset"""
    template: np.ndarray
    signature: np.ndarray
    watermark: np.ndarray
    font: GlyphFont

    @classmethod
    def load(cls, paths: AssetPaths) -> "AssetStore":
        """
        Decode all assets, failing fast on the first bad one.

        Raises:
            AssetLoadError: if any asset is missing, unreadable or corrupt
        """
        template = load_raster(paths.template)
        signature = load_raster(paths.signature)
        watermark = load_raster(paths.watermark)
        font = GlyphFont.from_file(paths.font)

        store = cls(template=template, signature=signature, watermark=watermark, font=font)
        logger.info(
            f"Assets loaded: template {store.template_size[0]}x{store.template_size[1]}, "
            f"signature {signature.shape[1]}x{signature.shape[0]}, "
            f"watermark {watermark.shape[1]}x{watermark.shape[0]}, font '{font.family}'"
        )
        return store

    @property
    def template_size(self) -> Tuple[int, int]:
        """(width, height) of the template and of every canvas"""
        return self.template.shape[1], self.template.shape[0]

    def new_canvas(self) -> np.ndarray:
        """Private writable copy of the template for one render."""
        return self.template.copy()
