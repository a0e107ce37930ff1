from pathlib import Path

import pytest

from spriteportal.core.errors import ConfigurationError, ValidationError
from spriteportal.utils import file_tools, validators


def test_parse_size_accepts_x_and_comma():
    assert validators.parse_size("80x100") == (80, 100)
    assert validators.parse_size(" 8 , 9 ") == (8, 9)
    assert validators.parse_size("") is None


@pytest.mark.parametrize("value", ["80", "axb", "0x5", "1x2x3"])
def test_parse_size_rejects_bad_values(value):
    with pytest.raises(ValidationError):
        validators.parse_size(value)


def test_grid_and_portal_validation():
    validators.validate_grid(1, 1)
    validators.validate_portal(1, 1)
    with pytest.raises(ConfigurationError):
        validators.validate_grid(1, 0)
    with pytest.raises(ConfigurationError):
        validators.validate_portal(0, 1)


def test_tolerance_range():
    validators.validate_tolerance(0)
    validators.validate_tolerance(100)
    validators.validate_tolerance(None)
    with pytest.raises(ConfigurationError):
        validators.validate_tolerance(100.1)


def test_default_output_path_sits_next_to_sheet():
    assert file_tools.default_output_path(Path("art/hero.png")) == Path("art/hero_clean.png")
    assert file_tools.default_output_path(Path("hero.gif"), "webp", tag="mask") == Path("hero_mask.webp")


def test_format_output_filename_fields():
    name = file_tools.format_output_filename(Path("hero.png"), "{stem}_{width}.{ext}", width=32)
    assert name == "hero_32.png"
    assert file_tools.format_output_filename(Path("hero.gif"), None) == "hero.png"
