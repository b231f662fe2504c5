import random
import re

import pytest

from colors import PaletteColorAssigner, RandomHueColorAssigner, hsv_to_hex

HEX = re.compile(r"^#[0-9a-f]{6}$")


def test_hsv_to_hex():
    assert hsv_to_hex(0.0, 1.0, 1.0) == "#ff0000"
    assert hsv_to_hex(0.0, 0.0, 0.0) == "#000000"


def test_random_hue_is_reproducible_with_seeded_rng():
    a = RandomHueColorAssigner(random.Random(7))
    b = RandomHueColorAssigner(random.Random(7))
    colors = [a.next_color() for _ in range(5)]

    assert colors == [b.next_color() for _ in range(5)]
    assert all(HEX.match(c) for c in colors)


def test_random_hue_keeps_colors_vibrant():
    assigner = RandomHueColorAssigner(random.Random(1))
    for _ in range(20):
        c = assigner.next_color()
        channels = [int(c[i:i + 2], 16) for i in (1, 3, 5)]
        # value 0.9 -> brightest channel 230; saturation 0.7 -> darkest 69
        assert max(channels) == 230
        assert min(channels) == 69


def test_palette_cycles():
    assigner = PaletteColorAssigner(["#000001", "#000002"])
    assert [assigner.next_color() for _ in range(3)] == ["#000001", "#000002", "#000001"]


def test_empty_palette_rejected():
    with pytest.raises(ValueError):
        PaletteColorAssigner([])
