import numpy as np
import pytest

from spriteportal.core import GridConfig, PixelBuffer, PortalSize
from spriteportal.core.errors import ConfigurationError, ValidationError
from spriteportal.core.session import SheetSession


def _sheet():
    pixels = np.full((100, 500, 4), 255, dtype=np.uint8)
    pixels[40:61, 215:226] = (255, 0, 0, 255)
    return PixelBuffer(pixels)


def test_defaults_follow_first_load():
    session = SheetSession(_sheet())
    assert session.grid == GridConfig(5, 1)
    assert session.portal == PortalSize(100, 100)
    assert session.tolerance == 20
    assert session.center is True
    assert session.output_cols == 5
    assert session.fps == 8


def test_output_columns_follow_grid_changes():
    session = SheetSession(_sheet(), output_cols=2)
    assert session.output_cols == 2
    session.set_grid(10, 1)
    assert session.output_cols == 10


def test_analyze_current_frame():
    session = SheetSession(_sheet(), portal=PortalSize(80, 100), tolerance=10)
    result = session.analyze(2)
    assert session.frame_rect(2).x == 210
    assert result.bounding_box() == (5, 40, 15, 60)


def test_preview_mask_is_none_for_empty_frame():
    session = SheetSession(_sheet(), portal=PortalSize(80, 100), tolerance=10)
    assert session.preview_mask(0) is None
    mask = session.preview_mask(2)
    assert mask.size == (80, 100)
    assert np.count_nonzero(mask.pixels[..., 3]) == 11 * 21


def test_frame_index_out_of_range():
    session = SheetSession(_sheet())
    with pytest.raises(ValidationError):
        session.analyze(5)


def test_smart_clean_replaces_sheet_and_resets_tolerance():
    session = SheetSession(_sheet(), portal=PortalSize(80, 100), tolerance=10, output_cols=2)
    outcome = session.smart_clean()

    assert session.sheet is outcome.sheet
    assert session.sheet.size == (160, 300)
    assert session.grid == GridConfig(2, 3)
    assert session.output_cols == 2
    assert session.tolerance == 0
    assert outcome.empty_frames == [0, 1, 3, 4]


def test_second_clean_keeps_foreground():
    session = SheetSession(_sheet(), portal=PortalSize(80, 100), tolerance=10)
    first = session.smart_clean().sheet.pixels.copy()
    session.smart_clean()
    assert np.array_equal(session.sheet.pixels, first)


def test_export_gif_defaults_next_to_source(tmp_path):
    session = SheetSession(_sheet(), portal=PortalSize(80, 100), source_path=tmp_path / "sheet.png")
    path = session.export_gif()
    assert path == tmp_path / "animation_80x100.gif"
    assert path.exists()


def test_invalid_parameters_raise():
    with pytest.raises(ConfigurationError):
        SheetSession(_sheet(), cols=0)
    with pytest.raises(ConfigurationError):
        SheetSession(_sheet(), tolerance=-1)
    with pytest.raises(ConfigurationError):
        SheetSession(_sheet(), portal=PortalSize(0, 5))
