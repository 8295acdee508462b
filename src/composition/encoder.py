"""
PNG encoder for finished canvases.
"""

from typing import Optional, Tuple

import cv2
import numpy as np

from .exceptions import EncodingError


DEFAULT_PNG_COMPRESSION = 3


def encode_png(
    canvas: np.ndarray,
    expected_size: Optional[Tuple[int, int]] = None,
    compression: int = DEFAULT_PNG_COMPRESSION,
) -> bytes:
    """
    Serialize an RGBA uint8 canvas to PNG bytes.

    Args:
        canvas: (H, W, 4) uint8 RGBA array
        expected_size: (width, height) the canvas must have, if given
        compression: PNG compression level 0-9

    Raises:
        EncodingError: if the buffer is malformed or the encoder fails
    """
    if not isinstance(canvas, np.ndarray):
        raise EncodingError(f"Canvas must be a numpy array, got {type(canvas).__name__}")
    if canvas.ndim != 3 or canvas.shape[2] != 4:
        raise EncodingError(f"Canvas must have shape (H, W, 4), got {canvas.shape}")
    if canvas.dtype != np.uint8:
        raise EncodingError(f"Canvas must be uint8, got {canvas.dtype}")

    height, width = canvas.shape[:2]
    if width == 0 or height == 0:
        raise EncodingError("Canvas has no pixels")
    if expected_size is not None and (width, height) != tuple(expected_size):
        raise EncodingError(
            f"Canvas is {width}x{height}, expected {expected_size[0]}x{expected_size[1]}"
        )

    level = min(9, max(0, int(compression)))
    try:
        bgra = cv2.cvtColor(canvas, cv2.COLOR_RGBA2BGRA)
        ok, buffer = cv2.imencode(".png", bgra, [cv2.IMWRITE_PNG_COMPRESSION, level])
    except cv2.error as e:
        raise EncodingError(f"Failed to encode PNG: {e}") from e

    if not ok:
        raise EncodingError("Failed to encode PNG")
    return buffer.tobytes()
