import json

import numpy as np
from PIL import Image

from spriteportal import cli


def _write_sheet(path):
    pixels = np.full((100, 500, 4), 255, dtype=np.uint8)
    pixels[40:61, 215:226] = (255, 0, 0, 255)
    Image.fromarray(pixels).save(path)
    return path


def test_build_parser_creates_arguments(tmp_path):
    parser = cli.build_parser()
    args = parser.parse_args(
        ["clean", "sheet.png", "out.png", "--cols", "4", "--portal", "80x100", "--no-center", "--dry-run"]
    )
    assert args.command == "clean"
    assert args.input.name == "sheet.png"
    assert args.output.name == "out.png"
    assert args.cols == 4
    assert args.portal == "80x100"
    assert args.center is False
    assert args.tolerance is None
    assert args.dry_run is True


def test_clean_dry_run_returns_zero_without_reading(capsys):
    assert cli.main(["clean", "missing.png", "--tolerance", "30", "--dry-run"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["tolerance"] == 30
    assert payload["cols"] == 5


def test_clean_writes_sheet_manifest_and_gif(tmp_path):
    source = _write_sheet(tmp_path / "sheet.png")
    output = tmp_path / "clean.png"
    manifest = tmp_path / "clean.json"
    gif = tmp_path / "clean.gif"

    code = cli.main(
        [
            "clean",
            str(source),
            str(output),
            "--portal",
            "80x100",
            "--tolerance",
            "10",
            "--output-cols",
            "3",
            "--manifest",
            str(manifest),
            "--gif",
            str(gif),
        ]
    )

    assert code == 0
    with Image.open(output) as image:
        assert image.size == (240, 200)
        cleaned = np.array(image.convert("RGBA"))
    # frame 2 lands in the third cell, centered at (40, 50)
    assert (cleaned[40:61, 160 + 35 : 160 + 46] == (255, 0, 0, 255)).all()
    assert np.count_nonzero(cleaned[..., 3]) == 11 * 21
    data = json.loads(manifest.read_text(encoding="utf-8"))
    assert data["meta"]["rows"] == 2
    assert data["frames"]["frame_0002"]["pixel_count"] == 11 * 21
    assert gif.exists()


def test_clean_uses_settings_file(tmp_path):
    source = _write_sheet(tmp_path / "sheet.png")
    settings = tmp_path / "settings.json"
    settings.write_text(json.dumps({"portal": "80x100", "tolerance": 10, "center": False}), encoding="utf-8")

    assert cli.main(["clean", str(source), "--settings", str(settings)]) == 0
    with Image.open(tmp_path / "sheet_clean.png") as image:
        cleaned = np.array(image.convert("RGBA"))
    assert cleaned.shape == (100, 400, 4)
    assert (cleaned[40:61, 160 + 5 : 160 + 16] == (255, 0, 0, 255)).all()


def test_clean_reports_missing_input(tmp_path):
    assert cli.main(["clean", str(tmp_path / "missing.png")]) == 2


def test_clean_reports_invalid_settings(tmp_path):
    source = _write_sheet(tmp_path / "sheet.png")
    assert cli.main(["clean", str(source), "--tolerance", "150"]) == 2


def test_preview_writes_mask(tmp_path):
    source = _write_sheet(tmp_path / "sheet.png")
    output = tmp_path / "mask.png"
    assert cli.main(["preview", str(source), str(output), "--frame", "2", "--portal", "80x100", "--tolerance", "10"]) == 0
    with Image.open(output) as image:
        mask = np.array(image.convert("RGBA"))
    assert mask.shape == (100, 80, 4)
    assert tuple(mask[50, 10]) == (255, 0, 0, 100)
    assert np.count_nonzero(mask[..., 3]) == 11 * 21


def test_preview_rejects_out_of_range_frame(tmp_path):
    source = _write_sheet(tmp_path / "sheet.png")
    assert cli.main(["preview", str(source), str(tmp_path / "mask.png"), "--frame", "9"]) == 2


def test_animate_writes_default_gif(tmp_path):
    source = _write_sheet(tmp_path / "sheet.png")
    assert cli.main(["animate", str(source), "--fps", "12"]) == 0
    assert (tmp_path / "animation_100x100.gif").exists()
