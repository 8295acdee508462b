"""
Configuration manager for render profiles.

A render profile holds every randomization range used while composing a
document: per-field jitter and font size, signature scale and watermark
placement. Profiles are loaded from YAML once at startup and shared
read-only by all renders.
"""
import os
import threading
from enum import Enum
from typing import Dict, Optional, Tuple

import yaml
from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigurationError
from .layout import FieldName


DEFAULT_PROFILE_PATH = "config/render_profile.yaml"


# =============================================================================
# Enums
# =============================================================================

class PlacementStrategy(str, Enum):
    """How watermark copies are positioned on the canvas"""
    NONE = "none"
    SAFE_AREA = "safe_area"
    UNCONSTRAINED = "unconstrained"


# =============================================================================
# Profile Models
# =============================================================================

class TextFieldProfile(BaseModel):
    """Randomization ranges for one text field, all [min, max)"""
    jitter_x: Tuple[float, float] = Field((-2.0, 3.0), description="Horizontal jitter in pixels")
    jitter_y: Tuple[float, float] = Field((-2.0, 2.0), description="Vertical jitter in pixels")
    font_size: Tuple[float, float] = Field((26.0, 38.0), description="Font size in pixels")


class SignatureProfile(BaseModel):
    """Signature stamp ranges"""
    enabled: bool = Field(True, description="Draw the signature stamp")
    scale: Tuple[float, float] = Field((0.9, 1.1), description="Resize factor")
    jitter_x: Tuple[float, float] = Field((-4.0, 4.0), description="Horizontal jitter in pixels")
    jitter_y: Tuple[float, float] = Field((-4.0, 4.0), description="Vertical jitter in pixels")


class WatermarkProfile(BaseModel):
    """Background watermark ranges and placement policy"""
    placement: PlacementStrategy = Field(PlacementStrategy.SAFE_AREA, description="none|safe_area|unconstrained")
    count: Tuple[int, int] = Field((3, 7), description="Number of copies [min, max)")
    scale: Tuple[float, float] = Field((0.8, 1.2), description="Resize factor")
    rotation: Tuple[float, float] = Field((-45.0, 45.0), description="Rotation in degrees")
    opacity: Tuple[float, float] = Field((0.08, 0.2), description="Alpha multiplier")
    safe_margin: float = Field(0.1, ge=0, le=0.5, description="Inset of the safe area as a fraction of canvas size")
    min_distance: float = Field(250.0, ge=0, description="Minimum distance between copy centers (safe_area only)")
    max_attempts: int = Field(25, ge=1, le=1000, description="Resample attempts per copy before accepting overlap")


DEFAULT_FIELD_PROFILES: Dict[FieldName, TextFieldProfile] = {
    FieldName.NAME: TextFieldProfile(jitter_x=(-2.0, 3.0), jitter_y=(-2.0, 2.0), font_size=(26.0, 38.0)),
    FieldName.ADDRESS: TextFieldProfile(jitter_x=(-2.0, 4.0), jitter_y=(-2.0, 2.0), font_size=(26.0, 34.0)),
    FieldName.ISSUER: TextFieldProfile(jitter_x=(-2.0, 3.0), jitter_y=(-2.0, 2.0), font_size=(26.0, 38.0)),
    FieldName.NUMBER: TextFieldProfile(jitter_x=(-2.0, 5.0), jitter_y=(-2.2, 1.0), font_size=(36.0, 48.0)),
    FieldName.YEAR: TextFieldProfile(jitter_x=(-1.7, 1.7), jitter_y=(-1.2, 1.2), font_size=(32.0, 37.0)),
    FieldName.TIME: TextFieldProfile(jitter_x=(-2.0, 8.0), jitter_y=(-2.2, 2.2), font_size=(27.0, 34.0)),
}


def _default_field_profiles() -> Dict[FieldName, TextFieldProfile]:
    return {name: profile.model_copy() for name, profile in DEFAULT_FIELD_PROFILES.items()}


class RenderProfile(BaseModel):
    """Complete set of render parameters"""
    text_color: Tuple[int, int, int] = Field((0, 50, 150), description="RGB ink color for all text")
    fields: Dict[FieldName, TextFieldProfile] = Field(default_factory=_default_field_profiles)
    signature: SignatureProfile = Field(default_factory=SignatureProfile)
    watermark: WatermarkProfile = Field(default_factory=WatermarkProfile)
    png_compression: int = Field(3, ge=0, le=9, description="PNG compression level")

    @field_validator("text_color")
    @classmethod
    def _check_color(cls, value):
        if any(c < 0 or c > 255 for c in value):
            raise ValueError("text_color channels must be within 0-255")
        return value

    @field_validator("fields", mode="before")
    @classmethod
    def _merge_field_defaults(cls, value):
        # Partial overrides keep the defaults of untouched fields and keys
        if not isinstance(value, dict):
            return value
        merged = {name.value: profile.model_dump() for name, profile in DEFAULT_FIELD_PROFILES.items()}
        for key, override in value.items():
            key = key.value if isinstance(key, FieldName) else str(key)
            if isinstance(override, TextFieldProfile):
                override = override.model_dump()
            merged[key] = {**merged.get(key, {}), **(override or {})}
        return merged

    def field_profile(self, field_name: FieldName) -> TextFieldProfile:
        return self.fields.get(field_name) or DEFAULT_FIELD_PROFILES[field_name]


# =============================================================================
# Loader
# =============================================================================

class ProfileConfig:
    """Loads a RenderProfile from YAML with thread-safe reload."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to the profile YAML file. If None, uses the
                RENDER_PROFILE_CONFIG environment variable or the default
                location.
        """
        if config_path is None:
            config_path = os.environ.get("RENDER_PROFILE_CONFIG", DEFAULT_PROFILE_PATH)

        self.config_path = str(config_path)
        self._lock = threading.Lock()
        self._profile: Optional[RenderProfile] = None
        self._load_config()

    def _load_config(self):
        """Load the profile from YAML, falling back to defaults if absent."""
        if not os.path.exists(self.config_path):
            logger.info(f"No render profile at {self.config_path}, using defaults")
            self._profile = RenderProfile()
            return

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot read render profile {self.config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Render profile {self.config_path} must be a mapping")

        try:
            self._profile = RenderProfile.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid render profile {self.config_path}: {e}") from e

        logger.info(f"Render profile loaded from {self.config_path}")

    @property
    def profile(self) -> RenderProfile:
        with self._lock:
            return self._profile

    def reload(self):
        """Reload configuration from file."""
        with self._lock:
            self._load_config()

    def get_config_dict(self) -> dict:
        """Get the entire profile as a plain dictionary."""
        return self.profile.model_dump(mode="json")
