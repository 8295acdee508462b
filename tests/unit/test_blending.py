"""
Unit tests for the shared alpha compositing primitive.

These tests verify the alpha-over identities every compositor relies on
and the clipping of pastes against the canvas.
"""
import pytest
import numpy as np

from composition.blending import alpha_over, blend_patch, clip_paste_region


def all_backgrounds() -> np.ndarray:
    """Every 8-bit level in each RGB channel, with varied alpha."""
    levels = np.arange(256, dtype=np.uint8)
    bg = np.zeros((3, 256, 4), dtype=np.uint8)
    for channel in range(3):
        bg[channel, :, channel] = levels
        bg[channel, :, (channel + 1) % 3] = levels[::-1]
    bg[..., 3] = levels
    return bg


@pytest.mark.unit
class TestAlphaOver:
    """Tests for alpha_over."""

    def test_opaque_foreground_replaces_background(self):
        """Alpha 255 yields exactly the foreground color."""
        bg = all_backgrounds()
        out = alpha_over(bg, (0, 50, 150), 255)

        assert np.all(out[..., 0] == 0)
        assert np.all(out[..., 1] == 50)
        assert np.all(out[..., 2] == 150)
        assert np.all(out[..., 3] == 255)

    def test_transparent_foreground_keeps_background(self):
        """Alpha 0 leaves the background untouched."""
        bg = all_backgrounds()
        out = alpha_over(bg, (0, 50, 150), 0)

        assert np.array_equal(out, bg)

    def test_zero_attenuation_keeps_background(self):
        """Opaque source fully attenuated leaves RGB unchanged."""
        bg = all_backgrounds()
        out = alpha_over(bg, (255, 255, 255), 255, 0.0)

        assert np.array_equal(out[..., :3], bg[..., :3])

    def test_transparent_composite_is_idempotent(self):
        """Repeated alpha 0 composites change nothing."""
        bg = all_backgrounds()
        once = alpha_over(bg, (10, 20, 30), 0)
        twice = alpha_over(once, (10, 20, 30), 0)

        assert np.array_equal(once, twice)

    def test_opaque_composite_twice_equals_once(self):
        """Compositing an opaque color twice equals doing it once."""
        bg = all_backgrounds()
        once = alpha_over(bg, (10, 20, 30), 255)
        twice = alpha_over(once, (10, 20, 30), 255)

        assert np.array_equal(once, twice)

    def test_half_alpha_interpolates(self):
        """Partial alpha is a linear mix of foreground and background."""
        bg = np.array([[[200, 100, 0, 255]]], dtype=np.uint8)
        out = alpha_over(bg, (0, 0, 200), 255, 0.5)

        assert out[0, 0, 0] == 100
        assert out[0, 0, 1] == 50
        assert out[0, 0, 2] == 100

    def test_output_alpha_is_max(self):
        """Destination alpha is the max of source and background alpha."""
        bg = np.array([[[0, 0, 0, 100], [0, 0, 0, 200]]], dtype=np.uint8)
        out = alpha_over(bg, (255, 255, 255), np.array([[150, 150]], dtype=np.uint8))

        assert out[0, 0, 3] == 150
        assert out[0, 1, 3] == 200

    def test_attenuation_scales_output_alpha(self):
        """A faded source over a transparent pixel stays translucent."""
        bg = np.zeros((1, 2, 4), dtype=np.uint8)
        bg[0, 1, 3] = 200
        out = alpha_over(bg, (100, 100, 100), 255, 0.2)

        assert out[0, 0, 3] == 51
        assert out[0, 1, 3] == 200

    def test_does_not_modify_input(self):
        bg = all_backgrounds()
        original = bg.copy()
        alpha_over(bg, (1, 2, 3), 255)

        assert np.array_equal(bg, original)


@pytest.mark.unit
class TestClipPasteRegion:
    """Tests for clip_paste_region."""

    def test_fully_inside(self):
        region = clip_paste_region(10, 20, 30, 40, 100, 100)

        assert region.canvas == (slice(20, 60), slice(10, 40))
        assert region.patch == (slice(0, 40), slice(0, 30))

    def test_negative_offset_crops_patch(self):
        region = clip_paste_region(-5, -10, 30, 40, 100, 100)

        assert region.canvas == (slice(0, 30), slice(0, 25))
        assert region.patch == (slice(10, 40), slice(5, 30))

    def test_overflow_crops_patch(self):
        region = clip_paste_region(90, 95, 30, 40, 100, 100)

        assert region.canvas == (slice(95, 100), slice(90, 100))
        assert region.patch == (slice(0, 5), slice(0, 10))

    @pytest.mark.parametrize("x,y", [(-30, 0), (0, -40), (100, 0), (0, 100), (-1000, 5000)])
    def test_disjoint_returns_none(self, x, y):
        assert clip_paste_region(x, y, 30, 40, 100, 100) is None


@pytest.mark.unit
class TestBlendPatch:
    """Tests for blend_patch bounds safety."""

    def test_out_of_bounds_fuzz(self):
        """Random offsets, many far off-canvas, never raise."""
        rng = np.random.default_rng(3)
        canvas = np.full((50, 60, 4), 128, dtype=np.uint8)
        patch = rng.integers(0, 256, (20, 25, 4), dtype=np.uint8)

        for x, y in rng.integers(-200, 260, (200, 2)):
            blend_patch(canvas, patch, int(x), int(y))

        assert canvas.shape == (50, 60, 4)

    def test_disjoint_patch_leaves_canvas(self):
        canvas = np.full((50, 60, 4), 128, dtype=np.uint8)
        patch = np.full((10, 10, 4), 255, dtype=np.uint8)

        assert blend_patch(canvas, patch, -10, 0) is False
        assert blend_patch(canvas, patch, 60, 49) is False
        assert np.all(canvas == 128)

    def test_partial_patch_writes_visible_part(self):
        canvas = np.zeros((50, 60, 4), dtype=np.uint8)
        patch = np.full((10, 10, 4), 255, dtype=np.uint8)

        assert blend_patch(canvas, patch, -5, -5) is True
        assert np.all(canvas[:5, :5] == 255)
        assert np.all(canvas[5:, :] == 0)
        assert np.all(canvas[:, 5:] == 0)
