import numpy as np
import pytest

from spriteportal.core import BackgroundModel, PixelBuffer
from spriteportal.core import background


def test_sample_reads_top_left_pixel():
    pixels = np.zeros((4, 4, 4), dtype=np.uint8)
    pixels[0, 0] = (12, 34, 56, 255)
    model = background.sample(PixelBuffer(pixels), tolerance=10)
    assert model.color == (12, 34, 56)
    assert model.tolerance == 10
    assert model.radius == pytest.approx(25.5)


def test_low_alpha_is_always_background():
    model = BackgroundModel(color=(255, 255, 255), tolerance=0)
    assert background.classify((0, 0, 0, 19), model) is True
    assert background.classify((0, 0, 0, 20), model) is False


def test_tolerance_radius_boundary():
    model = BackgroundModel(color=(255, 255, 255), tolerance=10)
    assert background.classify((230, 255, 255, 255), model) is True
    assert background.classify((229, 255, 255, 255), model) is False


def test_zero_tolerance_matches_exact_color_only():
    model = BackgroundModel(color=(10, 20, 30), tolerance=0)
    assert background.classify((10, 20, 30, 255), model) is True
    assert background.classify((10, 20, 31, 255), model) is False


def test_mask_agrees_with_classify():
    rng = np.random.default_rng(7)
    region = rng.integers(0, 256, size=(12, 9, 4), dtype=np.uint8)
    model = BackgroundModel(color=(128, 128, 128), tolerance=35)
    mask = background.background_mask(region, model)
    expected = [[background.classify(region[y, x], model) for x in range(9)] for y in range(12)]
    assert mask.tolist() == expected
