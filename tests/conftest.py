"""
Shared fixtures for all tests.

This module provides synthetic assets (template, signature, watermark and a
real TrueType font) used across unit, integration, and e2e tests.
"""
import pytest
import sys
from datetime import date
from pathlib import Path

import cv2
import numpy as np
from PIL import Image

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from composition import AssetPaths, AssetStore, DocumentRenderer, RenderProfile  # noqa: E402


TEMPLATE_SIZE = (1000, 1200)  # (width, height)
PAPER_COLOR = (240, 240, 240)
FIXED_DAY = date(2025, 6, 2)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests of a single module")
    config.addinivalue_line("markers", "integration: tests of the HTTP service in-process")
    config.addinivalue_line("markers", "e2e: full render pipeline tests")


# =============================================================================
# Image Fixtures
# =============================================================================

def make_template() -> np.ndarray:
    """Opaque uniform paper, RGB."""
    width, height = TEMPLATE_SIZE
    return np.full((height, width, 3), PAPER_COLOR, dtype=np.uint8)


def make_signature() -> np.ndarray:
    """Dark scribble on a transparent 200x80 RGBA canvas."""
    sig = np.zeros((80, 200, 4), dtype=np.uint8)
    cv2.ellipse(sig, (60, 40), (45, 20), 0, 0, 360, (20, 20, 20, 255), 3)
    cv2.line(sig, (90, 60), (190, 15), (20, 20, 20, 255), 4)
    return sig


def make_watermark() -> np.ndarray:
    """Gray disc on a transparent 240x240 RGBA canvas."""
    mark = np.zeros((240, 240, 4), dtype=np.uint8)
    cv2.circle(mark, (120, 120), 100, (90, 90, 90, 255), -1)
    return mark


def find_test_font() -> Path:
    """DejaVu Sans shipped with matplotlib (covers Latin and Cyrillic)."""
    import matplotlib

    font_path = Path(matplotlib.get_data_path()) / "fonts" / "ttf" / "DejaVuSans.ttf"
    if not font_path.exists():
        pytest.skip("DejaVuSans.ttf not available")
    return font_path


@pytest.fixture(scope="session")
def font_path():
    return find_test_font()


@pytest.fixture(scope="session")
def asset_dir(tmp_path_factory, font_path):
    """Directory holding template.png, signature.png, watermark.png and font.ttf."""
    directory = tmp_path_factory.mktemp("assets")
    Image.fromarray(make_template()).save(directory / "template.png")
    Image.fromarray(make_signature()).save(directory / "signature.png")
    Image.fromarray(make_watermark()).save(directory / "watermark.png")
    (directory / "font.ttf").write_bytes(font_path.read_bytes())
    return directory


@pytest.fixture(scope="session")
def asset_paths(asset_dir):
    return AssetPaths(
        template=str(asset_dir / "template.png"),
        signature=str(asset_dir / "signature.png"),
        watermark=str(asset_dir / "watermark.png"),
        font=str(asset_dir / "font.ttf"),
    )


@pytest.fixture(scope="session")
def assets(asset_paths):
    return AssetStore.load(asset_paths)


@pytest.fixture
def canvas(assets):
    """Fresh writable canvas cloned from the template."""
    return assets.new_canvas()


@pytest.fixture
def renderer(assets):
    return DocumentRenderer(assets, RenderProfile(), clock=lambda: FIXED_DAY)


@pytest.fixture
def asset_env(monkeypatch, asset_paths, tmp_path):
    """Point the service environment at the test assets."""
    monkeypatch.setenv("TEMPLATE_PATH", asset_paths.template)
    monkeypatch.setenv("SIGNATURE_PATH", asset_paths.signature)
    monkeypatch.setenv("WATERMARK_PATH", asset_paths.watermark)
    monkeypatch.setenv("FONT_PATH", asset_paths.font)
    monkeypatch.setenv("RENDER_PROFILE_CONFIG", str(tmp_path / "missing_profile.yaml"))
    return asset_paths


def ink_mask(image: np.ndarray) -> np.ndarray:
    """Pixels tinted by the blue text ink (the paper and overlays are gray)."""
    return image[..., 2].astype(np.int32) - image[..., 0].astype(np.int32) > 30


@pytest.fixture
def ink():
    return ink_mask
