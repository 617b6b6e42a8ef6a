"""Tests for palette synthesis and editing."""

import random

import pytest

from color_space import hex_to_hsl
from palette import PaletteState, Swatch, make_palette, palette_colors
from synthesize import (
    PRESETS, apply_preset, generate_from_base, hue_offsets, move_adjacent,
    randomize, reorder, set_color, toggle_lock,
)


def test_analogous_offsets_span_sixty_degrees():
    assert hue_offsets("analogous", 5) == [-30, -15, 0, 15, 30]
    assert hue_offsets("analogous", 3) == [-30, 0, 30]
    assert hue_offsets("analogous", 1) == [0]


def test_complementary_offsets():
    assert hue_offsets("complementary", 3) == [-20, 0, 180]
    assert hue_offsets("complementary", 4) == [-30, 0, 30, 180]
    assert hue_offsets("complementary", 7) == [-30, 0, 30, 180, 210, 210, 210]


def test_short_tables_repeat_last_offset():
    assert hue_offsets("triadic", 5) == [0, 120, 240, 240, 240]
    assert hue_offsets("tetradic", 3) == [0, 90, 180]
    assert hue_offsets("tetradic", 6) == [0, 90, 180, 270, 270, 270]
    assert hue_offsets("monochrome", 4) == [0, 0, 0, 0]


def test_unknown_algorithm_raises():
    with pytest.raises(ValueError):
        hue_offsets("pentadic", 5)


def test_triadic_scenario():
    state = PaletteState(base_color="#06A92F", algorithm="triadic", count=3)
    palette = generate_from_base(state)
    assert palette_colors(palette) == ["#06A92F", "#2F06A9", "#A92F06"]
    hues = [hex_to_hsl(s.color)[0] for s in palette]
    assert hues[0] == pytest.approx(135.09, abs=0.5)
    assert hues[1] == pytest.approx(255.09, abs=0.5)
    assert hues[2] == pytest.approx(15.09, abs=0.5)


def test_generation_is_deterministic():
    state = PaletteState(base_color="#3366CC", algorithm="complementary", count=7,
                         saturation_shift=-10, lightness_shift=12)
    assert generate_from_base(state) == generate_from_base(state)


def test_monochrome_sweeps_dark_to_light():
    state = PaletteState(base_color="#3366CC", algorithm="monochrome", count=5)
    lightness = [hex_to_hsl(s.color)[2] for s in generate_from_base(state)]
    assert lightness == sorted(lightness)
    assert lightness[0] < lightness[-1]


def test_saturation_and_lightness_stay_in_range():
    for shift in (-40, 40):
        state = PaletteState(base_color="#FF0000", algorithm="monochrome", count=10,
                             saturation_shift=shift, lightness_shift=shift)
        for swatch in generate_from_base(state):
            _, s, l = hex_to_hsl(swatch.color)
            assert 0 <= s <= 100
            assert 0 <= l <= 100


def test_state_bounds_are_clamped():
    state = PaletteState(count=1, saturation_shift=99, lightness_shift=-99)
    assert state.count == 3
    assert state.saturation_shift == 40
    assert state.lightness_shift == -40
    assert PaletteState(count=50).count == 10


def test_locked_swatch_survives_regeneration():
    palette = (Swatch("#111111"), Swatch("#123456", locked=True), Swatch("#222222"))
    state = PaletteState(base_color="#FF0000", algorithm="tetradic", count=4, palette=palette)
    result = generate_from_base(state)
    assert result[1] == Swatch("#123456", locked=True)
    assert len(result) == 4
    assert not result[3].locked

    result = generate_from_base(state.update(base_color="#00FF00", saturation_shift=30))
    assert result[1] == Swatch("#123456", locked=True)


def test_shrinking_count_retains_tail():
    state = PaletteState(base_color="#3366CC", count=6)
    full = generate_from_base(state)
    shrunk = generate_from_base(state.update(count=3, palette=tuple(full)))
    assert len(shrunk) == 6
    assert shrunk[3:] == full[3:]


def test_randomize_respects_locks_and_window():
    palette = make_palette(["#111111", "#222222", "#333333", "#444444", "#555555"])
    palette[0] = Swatch("#ABCDEF", locked=True)
    state = PaletteState(count=3, palette=tuple(palette))
    result = randomize(state, random.Random(7))
    assert result[0] == Swatch("#ABCDEF", locked=True)
    assert result[3:] == palette[3:]
    assert len(result) == 5


def test_randomize_pads_short_palette():
    state = PaletteState(count=6, palette=tuple(make_palette(["#111111"])))
    result = randomize(state, random.Random(1))
    assert len(result) == 6
    assert not any(s.locked for s in result)


def test_randomize_is_reproducible_with_seed():
    state = PaletteState(count=5)
    assert randomize(state, random.Random(3)) == randomize(state, random.Random(3))


def test_reorder_is_an_insertion_move():
    palette = make_palette(["#AA0000", "#BB0000", "#CC0000", "#DD0000", "#EE0000"])
    result = reorder(palette, 5, 0, 3)
    assert palette_colors(result) == ["#BB0000", "#CC0000", "#DD0000", "#AA0000", "#EE0000"]


def test_reorder_clamps_into_active_window():
    palette = make_palette(["#AA0000", "#BB0000", "#CC0000", "#DD0000", "#EE0000", "#FF0000"])
    result = reorder(palette, 4, -3, 99)
    assert palette_colors(result) == ["#BB0000", "#CC0000", "#DD0000", "#AA0000", "#EE0000", "#FF0000"]


def test_move_adjacent_swaps_neighbours():
    palette = make_palette(["#AA0000", "#BB0000", "#CC0000"])
    assert palette_colors(move_adjacent(palette, 3, 1, 1)) == ["#AA0000", "#CC0000", "#BB0000"]
    assert palette_colors(move_adjacent(palette, 3, 0, -1)) == ["#AA0000", "#BB0000", "#CC0000"]


def test_toggle_lock_and_set_color():
    palette = make_palette(["#AA0000", "#BB0000", "#CC0000"])
    palette = toggle_lock(palette, 2)
    assert palette[2].locked
    palette = set_color(palette, 2, "oops")
    assert palette[2] == Swatch("#000000", locked=True)


def test_apply_preset():
    state = apply_preset(PaletteState(), "Ocean")
    assert state.colors == PRESETS["Ocean"]
    assert state.base_color == "#0EA5E9"
    assert state.count == 5
    with pytest.raises(KeyError):
        apply_preset(state, "Plaid")
