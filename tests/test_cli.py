"""
End-to-end tests for the palette-swap command line.
"""

import numpy as np
import pytest

from palette_swap.cli import OPERATIONS, list_input_images, main, parse_cli_args
from palette_swap.image_io import load_image_rgba, save_image_rgba

BLACK = (0, 0, 0)
GRAY = (128, 128, 128)
WHITE = (255, 255, 255)


@pytest.fixture
def three_colour_png(tmp_path):
    """4x4 opaque PNG of black, gray and white."""
    rows = [
        [BLACK, BLACK, GRAY, WHITE],
        [GRAY, WHITE, BLACK, GRAY],
        [WHITE, GRAY, GRAY, BLACK],
        [BLACK, WHITE, WHITE, GRAY],
    ]
    rgb = np.array(rows, dtype=np.uint8)
    alpha = np.full((4, 4), 255, dtype=np.uint8)
    return save_image_rgba(tmp_path / "tiles.png", rgb, alpha), rgb


def test_defaults():
    args = parse_cli_args(["in.png"])
    assert args.op == "generate"
    assert args.mode_quantity == 4
    assert args.seed is None
    assert args.out is None


def test_generate_writes_output(three_colour_png, capsys):
    src, rgb = three_colour_png
    assert main([str(src), "--seed", "3"]) == 0

    out_path = src.with_name("tiles_swapped.png")
    assert out_path.is_file()
    out_rgb, out_alpha = load_image_rgba(out_path)
    assert out_rgb.shape == rgb.shape
    assert np.all(out_alpha == 255)

    # pixels that shared a colour still share one
    for colour in (BLACK, GRAY, WHITE):
        where = np.all(rgb == colour, axis=-1)
        assert len(np.unique(out_rgb[where], axis=0)) == 1

    captured = capsys.readouterr()
    assert "Palette: [" in captured.out


def test_seed_is_reproducible(three_colour_png, tmp_path):
    src, _ = three_colour_png
    a, b = tmp_path / "a.png", tmp_path / "b.png"
    assert main([str(src), "--seed", "11", "--out", str(a)]) == 0
    assert main([str(src), "--seed", "11", "--out", str(b)]) == 0
    assert np.array_equal(load_image_rgba(a)[0], load_image_rgba(b)[0])


@pytest.mark.parametrize("op", OPERATIONS)
def test_every_operation_runs(three_colour_png, tmp_path, op):
    src, _ = three_colour_png
    out = tmp_path / f"{op}.png"
    assert main([str(src), "--op", op, "--seed", "1", "--out", str(out), "--debug"]) == 0
    assert out.is_file()


def test_none_keeps_colours(three_colour_png, tmp_path):
    src, rgb = three_colour_png
    out = tmp_path / "same.png"
    assert main([str(src), "--op", "none", "--out", str(out)]) == 0
    assert np.array_equal(load_image_rgba(out)[0], rgb)


def test_palette_import_maps_darkest_first(three_colour_png, tmp_path):
    src, rgb = three_colour_png
    out = tmp_path / "mapped.png"
    code = main(
        [str(src), "--op", "none", "--palette", "[#FF0000,#00FF00,#0000FF]", "--out", str(out)]
    )
    assert code == 0
    out_rgb = load_image_rgba(out)[0]
    for src_colour, new_colour in ((BLACK, [255, 0, 0]), (GRAY, [0, 255, 0]), (WHITE, [0, 0, 255])):
        where = np.all(rgb == src_colour, axis=-1)
        assert np.all(out_rgb[where] == new_colour)


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "nope.png")]) == 2
    assert "[error] not found" in capsys.readouterr().err


def test_wrong_palette_count(three_colour_png, capsys):
    src, _ = three_colour_png
    assert main([str(src), "--palette", "[#FF0000]"]) == 2
    assert "[error]" in capsys.readouterr().err


def test_bad_mode_quantity(three_colour_png):
    src, _ = three_colour_png
    assert main([str(src), "--mode-quantity", "0"]) == 2


def test_fully_transparent_image(tmp_path, capsys):
    rgb = np.zeros((2, 2, 3), dtype=np.uint8)
    alpha = np.zeros((2, 2), dtype=np.uint8)
    src = save_image_rgba(tmp_path / "clear.png", rgb, alpha)
    assert main([str(src)]) == 2
    assert "no visible pixels" in capsys.readouterr().err


def test_transparent_pixels_untouched(tmp_path):
    rgb = np.array([[BLACK, (12, 34, 56)], [WHITE, BLACK]], dtype=np.uint8)
    alpha = np.array([[255, 0], [255, 255]], dtype=np.uint8)
    src = save_image_rgba(tmp_path / "holes.png", rgb, alpha)
    out = tmp_path / "holes_out.png"
    assert main([str(src), "--seed", "2", "--out", str(out)]) == 0
    out_rgb, out_alpha = load_image_rgba(out)
    assert out_rgb[0, 1].tolist() == [12, 34, 56]
    assert np.array_equal(out_alpha, alpha)


class TestFolderMode:
    def _write(self, folder, name, colours):
        rgb = np.array([colours], dtype=np.uint8)
        alpha = np.full(rgb.shape[:2], 255, dtype=np.uint8)
        return save_image_rgba(folder / name, rgb, alpha)

    def test_processes_each_image(self, tmp_path):
        src = tmp_path / "in"
        src.mkdir()
        self._write(src, "a.png", [BLACK, WHITE])
        self._write(src, "b.png", [GRAY, WHITE, BLACK])
        self._write(src, "c_swapped.png", [BLACK])
        (src / "notes.txt").write_text("skip me")
        outdir = tmp_path / "out"

        assert main([str(src), "--outdir", str(outdir), "--seed", "4"]) == 0
        assert sorted(p.name for p in outdir.iterdir()) == ["a_swapped.png", "b_swapped.png"]

    def test_lists_images_by_name(self, tmp_path):
        for name in ("B.png", "a.jpg", "x_swapped.png", "readme.md"):
            (tmp_path / name).write_bytes(b"")
        assert [p.name for p in list_input_images(tmp_path)] == ["a.jpg", "B.png"]

    def test_one_failure_sets_exit_status(self, tmp_path, capsys):
        self._write(tmp_path, "ok.png", [BLACK, WHITE])
        (tmp_path / "broken.png").write_bytes(b"not a png")
        assert main([str(tmp_path), "--seed", "1"]) == 2
        assert (tmp_path / "ok_swapped.png").is_file()
        assert "broken.png" in capsys.readouterr().err

    def test_out_rejected_for_folder(self, tmp_path):
        assert main([str(tmp_path), "--out", str(tmp_path / "x.png")]) == 2
