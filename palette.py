"""
Palette session data model.

A Palette is an ordered list of Swatch. Only palette[0:count] is active;
entries past count are kept so raising count again restores them.
"""

from dataclasses import dataclass, field, replace
from typing import Optional

from color_space import clamp, coerce_hex, normalize_hex


# =============================================================================
# Constants
# =============================================================================

ANALOGOUS = "analogous"
COMPLEMENTARY = "complementary"
TRIADIC = "triadic"
TETRADIC = "tetradic"
MONOCHROME = "monochrome"

ALGORITHMS = (ANALOGOUS, COMPLEMENTARY, TRIADIC, TETRADIC, MONOCHROME)

ALGORITHM_LABELS = {
    ANALOGOUS: "Analogous",
    COMPLEMENTARY: "Complementary",
    TRIADIC: "Triadic",
    TETRADIC: "Tetradic",
    MONOCHROME: "Monochrome",
}

MIN_COUNT = 3
MAX_COUNT = 10
SHIFT_LIMIT = 40

DEFAULT_BASE = "#06A92F"
DEFAULT_ALGORITHM = ANALOGOUS
DEFAULT_COUNT = 5


# =============================================================================
# Errors
# =============================================================================

class PaletteError(ValueError):
    """Base class for recoverable palette failures."""


class MalformedColor(PaletteError):
    """A color string is not '#RRGGBB'."""


class InsufficientDistinctColors(PaletteError):
    """Image extraction produced fewer than the minimum number of colors."""


class InvalidImportList(PaletteError):
    """Pasted/imported text held fewer than the minimum number of hex codes."""


class ClipboardOrShareUnavailable(PaletteError):
    """The preferred clipboard or share capability is missing."""


# =============================================================================
# Bounds
# =============================================================================

def clamp_count(count) -> int:
    return int(clamp(int(count), MIN_COUNT, MAX_COUNT))


def clamp_shift(shift) -> int:
    return int(clamp(int(round(shift)), -SHIFT_LIMIT, SHIFT_LIMIT))


def parse_hex(value, strict: bool = False) -> str:
    """Canonical hex; malformed input becomes black unless strict."""
    if strict:
        result = normalize_hex(value)
        if result is None:
            raise MalformedColor(f"Not a hex color: {value!r}")
        return result
    return coerce_hex(value)


def parse_algorithm(value: Optional[str], default: str = DEFAULT_ALGORITHM) -> str:
    if isinstance(value, str) and value.lower() in ALGORITHMS:
        return value.lower()
    return default


# =============================================================================
# Swatch / PaletteState
# =============================================================================

@dataclass(frozen=True)
class Swatch:
    """One palette entry with its own lock flag."""
    color: str
    locked: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'color', parse_hex(self.color))


def make_palette(colors: list[str], locked: bool = False) -> list[Swatch]:
    """Build a palette from hex strings with a uniform lock flag."""
    return [Swatch(c, locked) for c in colors]


def palette_colors(palette: list[Swatch]) -> list[str]:
    return [s.color for s in palette]


@dataclass(frozen=True)
class PaletteState:
    """The mutable-by-replacement session value driven by the controller."""
    base_color: str = DEFAULT_BASE
    algorithm: str = DEFAULT_ALGORITHM
    count: int = DEFAULT_COUNT
    saturation_shift: int = 0
    lightness_shift: int = 0
    palette: tuple = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, 'base_color', parse_hex(self.base_color))
        object.__setattr__(self, 'algorithm', parse_algorithm(self.algorithm))
        object.__setattr__(self, 'count', clamp_count(self.count))
        object.__setattr__(self, 'saturation_shift', clamp_shift(self.saturation_shift))
        object.__setattr__(self, 'lightness_shift', clamp_shift(self.lightness_shift))
        object.__setattr__(self, 'palette', tuple(self.palette))

    @property
    def active(self) -> list[Swatch]:
        """The active swatch window palette[0:count]."""
        return list(self.palette[:self.count])

    @property
    def colors(self) -> list[str]:
        """Hex values of the active window."""
        return palette_colors(self.active)

    def update(self, **changes) -> 'PaletteState':
        """Return a copy with changes applied (and re-clamped)."""
        return replace(self, **changes)
