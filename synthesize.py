"""
Palette synthesis from a base color.

Each harmony algorithm maps to a list of hue offsets applied to the base
hue. Saturation and lightness shifts are applied globally; monochrome
varies lightness per swatch instead of hue. Locked swatches are never
overwritten.
"""

import logging
import random
from typing import Optional

from color_space import clamp, hex_to_hsl, hsl_to_hex, random_hex
from palette import (
    ANALOGOUS, COMPLEMENTARY, MONOCHROME, TETRADIC, TRIADIC,
    MAX_COUNT, MIN_COUNT, PaletteState, Swatch, clamp_count, make_palette, parse_hex,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

COMPLEMENTARY_TRIPLE = [-20, 0, 180]
COMPLEMENTARY_TABLE = [-30, 0, 30, 180, 210]
TRIADIC_TABLE = [0, 120, 240]
TETRADIC_TABLE = [0, 90, 180, 270]

ANALOGOUS_SPAN = 60  # Degrees covered end to end, centred on the base hue
MONOCHROME_SPREAD = 20  # Lightness points spread across the whole run

PRESETS = {
    "Brand": ["#0EE9BF", "#0EDCE9", "#0EA5E9", "#0E6EE9", "#0E38E9"],
    "Pastel": ["#FFE5EC", "#EDE7F6", "#E0F2F1", "#FFF9C4", "#F8BBD0"],
    "Neon": ["#39FF14", "#FF2079", "#00FFFF", "#FCEE09", "#FF6EC7"],
    "Earth": ["#7F5539", "#9C6644", "#B08968", "#E6CCB2", "#EDE0D4"],
    "Ocean": ["#0EA5E9", "#0891B2", "#155E75", "#0B7285", "#74C0FC"],
    "Sunset": ["#FF6B6B", "#F06595", "#CC5DE8", "#845EF7", "#5C7CFA"],
}


# =============================================================================
# Hue offsets
# =============================================================================

def _fit_table(table: list[float], n: int) -> list[float]:
    """Truncate to n, repeating the last offset when the table is short."""
    if n <= len(table):
        return list(table[:n])
    return list(table) + [table[-1]] * (n - len(table))


def hue_offsets(algorithm: str, n: int) -> list[float]:
    """Hue offsets in degrees for n swatches."""
    if algorithm == ANALOGOUS:
        if n <= 1:
            return [0.0] * max(n, 0)
        half = ANALOGOUS_SPAN / 2
        return [-half + ANALOGOUS_SPAN * i / (n - 1) for i in range(n)]
    if algorithm == COMPLEMENTARY:
        table = COMPLEMENTARY_TRIPLE if n == 3 else COMPLEMENTARY_TABLE
        return _fit_table(table, n)
    if algorithm == TRIADIC:
        return _fit_table(TRIADIC_TABLE, n)
    if algorithm == TETRADIC:
        return _fit_table(TETRADIC_TABLE, n)
    if algorithm == MONOCHROME:
        return [0.0] * n
    raise ValueError(f"Unknown algorithm: {algorithm!r}")


# =============================================================================
# Generation
# =============================================================================

def base_colors(state: PaletteState) -> list[str]:
    """Compute the unlocked target color for every index of the active window."""
    base_h, base_s, base_l = hex_to_hsl(state.base_color)
    n = clamp_count(state.count)

    s = clamp(base_s + state.saturation_shift, 0, 100)
    shifted_l = base_l + state.lightness_shift

    colors = []
    for i, offset in enumerate(hue_offsets(state.algorithm, n)):
        h = (base_h + offset) % 360
        if state.algorithm == MONOCHROME:
            l = clamp(shifted_l + (i - (n - 1) / 2) * (MONOCHROME_SPREAD / n), 0, 100)
        else:
            l = clamp(shifted_l, 0, 100)
        colors.append(hsl_to_hex(h, s, l))
    return colors


def _merge(previous: tuple, computed: list[str]) -> list[Swatch]:
    """Overlay computed colors onto the previous palette, honouring locks."""
    merged = []
    for i, color in enumerate(computed):
        existing = previous[i] if i < len(previous) else None
        if existing is not None and existing.locked:
            merged.append(existing)
        else:
            merged.append(Swatch(color))
    # Retain entries beyond the active window
    merged.extend(previous[len(computed):])
    return merged


def generate_from_base(state: PaletteState) -> list[Swatch]:
    """Regenerate the palette from the base color, algorithm and shifts."""
    computed = base_colors(state)
    logger.debug("generated %s x%d from %s: %s",
                 state.algorithm, len(computed), state.base_color, computed)
    return _merge(state.palette, computed)


def fill_window(state: PaletteState) -> list[Swatch]:
    """Pad the palette up to count with unlocked base colors, leaving existing swatches alone."""
    palette = list(state.palette)
    if len(palette) < state.count:
        computed = base_colors(state)
        palette.extend(Swatch(c) for c in computed[len(palette):])
    return palette


def randomize(state: PaletteState, rng: Optional[random.Random] = None) -> list[Swatch]:
    """Replace every unlocked active swatch with a uniformly random color."""
    rng = rng or random.Random()
    palette = list(state.palette)
    for i in range(state.count):
        if i >= len(palette):
            palette.append(Swatch(random_hex(rng)))
        elif not palette[i].locked:
            palette[i] = Swatch(random_hex(rng))
    return palette


# =============================================================================
# Editing
# =============================================================================

def _clamp_index(index: int, count: int, length: int) -> int:
    return int(clamp(index, 0, min(count, length) - 1))


def reorder(palette: list[Swatch], count: int, from_index: int, to_index: int) -> list[Swatch]:
    """Insertion move inside the active window (drag and drop)."""
    palette = list(palette)
    if not palette:
        return palette
    src = _clamp_index(from_index, count, len(palette))
    dst = _clamp_index(to_index, count, len(palette))
    swatch = palette.pop(src)
    palette.insert(dst, swatch)
    return palette


def move_adjacent(palette: list[Swatch], count: int, index: int, delta: int) -> list[Swatch]:
    """Swap a swatch with its neighbour at index + delta (keyboard move)."""
    palette = list(palette)
    if not palette:
        return palette
    src = _clamp_index(index, count, len(palette))
    dst = _clamp_index(index + delta, count, len(palette))
    palette[src], palette[dst] = palette[dst], palette[src]
    return palette


def toggle_lock(palette: list[Swatch], index: int) -> list[Swatch]:
    palette = list(palette)
    if 0 <= index < len(palette):
        swatch = palette[index]
        palette[index] = Swatch(swatch.color, not swatch.locked)
    return palette


def set_color(palette: list[Swatch], index: int, color: str) -> list[Swatch]:
    """Manually edit one swatch; malformed input becomes black."""
    palette = list(palette)
    if 0 <= index < len(palette):
        palette[index] = Swatch(parse_hex(color), palette[index].locked)
    return palette


def apply_preset(state: PaletteState, name: str) -> PaletteState:
    """Load a named preset: its colors become the palette and the first is the base."""
    if name not in PRESETS:
        raise KeyError(f"Unknown preset: {name}")
    colors = PRESETS[name][:MAX_COUNT]
    return state.update(
        base_color=colors[0],
        count=max(MIN_COUNT, len(colors)),
        palette=tuple(make_palette(colors)),
    )
