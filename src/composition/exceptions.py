"""
Error taxonomy for the document compositor.

Startup failures (assets, profile) are fatal; generation failures are
per-request and never leave a partial image behind.
"""


class CompositionError(Exception):
    """Base class for all compositor errors."""
    pass


class AssetLoadError(CompositionError):
    """A startup asset is missing, unreadable or cannot be decoded."""

    def __init__(self, path: str, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Failed to load asset '{self.path}': {reason}")


class ConfigurationError(CompositionError):
    """The render profile file exists but cannot be parsed or validated."""
    pass


class GenerationError(CompositionError):
    """A single render failed; the request gets no image."""
    pass


class RasterizationError(GenerationError):
    """Unexpected failure while drawing onto the canvas."""
    pass


class EncodingError(GenerationError):
    """The encoder rejected the canvas buffer."""
    pass
