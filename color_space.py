"""
Color space conversion: hex <-> RGB <-> HSL.

Hue is expressed in degrees [0, 360), saturation and lightness in percent
[0, 100]. RGB channels are integers 0-255 and hex strings are canonical
uppercase '#RRGGBB'.
"""

import math
import random
import re
from typing import Optional


# =============================================================================
# Constants
# =============================================================================

HEX_PATTERN = re.compile(r'^#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$')
STRICT_HEX_PATTERN = re.compile(r'^#[0-9A-Fa-f]{6}$')

BLACK = '#000000'
WHITE = '#FFFFFF'


# =============================================================================
# Helpers
# =============================================================================

def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return min(high, max(low, value))


def round_half_up(value: float) -> int:
    """Round to nearest integer, halves away from zero for positive values."""
    return int(math.floor(value + 0.5))


# =============================================================================
# Hex <-> RGB
# =============================================================================

def is_valid_hex(value) -> bool:
    """True if value is a '#RRGGBB' string (case-insensitive)."""
    return isinstance(value, str) and STRICT_HEX_PATTERN.match(value) is not None


def normalize_hex(value, default: Optional[str] = None) -> Optional[str]:
    """Canonicalize a hex string ('abc123' or '#abc123' -> '#ABC123').

    Returns default when the value cannot be parsed.
    """
    if not isinstance(value, str):
        return default
    m = HEX_PATTERN.match(value.strip())
    if not m:
        return default
    return '#' + ''.join(m.groups()).upper()


def coerce_hex(value) -> str:
    """Canonical hex for valid input, black otherwise."""
    return normalize_hex(value, default=BLACK)


def hex_to_rgb(hex_str: str) -> tuple[int, int, int]:
    """Convert a hex string to an (r, g, b) tuple.

    Malformed input degrades to black instead of raising.
    """
    if not isinstance(hex_str, str):
        return (0, 0, 0)
    m = HEX_PATTERN.match(hex_str.strip())
    if not m:
        return (0, 0, 0)
    return tuple(int(part, 16) for part in m.groups())


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Convert RGB channels to '#RRGGBB', clamping and rounding each channel."""
    channels = [int(clamp(round_half_up(c), 0, 255)) for c in (r, g, b)]
    return '#{:02X}{:02X}{:02X}'.format(*channels)


def random_hex(rng: Optional[random.Random] = None) -> str:
    """Uniformly random 24-bit color."""
    rng = rng or random
    return '#{:06X}'.format(rng.randrange(0x1000000))


# =============================================================================
# RGB <-> HSL
# =============================================================================

def rgb_to_hsl(r: float, g: float, b: float) -> tuple[float, float, float]:
    """Convert RGB (0-255) to HSL (degrees, percent, percent)."""
    r, g, b = r / 255.0, g / 255.0, b / 255.0
    high = max(r, g, b)
    low = min(r, g, b)
    l = (high + low) / 2

    # Achromatic: hue and saturation are undefined, report 0
    if high == low:
        return 0.0, 0.0, l * 100

    d = high - low
    s = d / (2 - high - low) if l > 0.5 else d / (high + low)
    if high == r:
        h = (g - b) / d + (6 if g < b else 0)
    elif high == g:
        h = (b - r) / d + 2
    else:
        h = (r - g) / d + 4
    h /= 6

    return (h * 360) % 360, s * 100, l * 100


def _hue_to_channel(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_to_rgb(h: float, s: float, l: float) -> tuple[int, int, int]:
    """Convert HSL (degrees, percent, percent) to integer RGB (0-255)."""
    h = (h % 360) / 360
    s = clamp(s, 0, 100) / 100
    l = clamp(l, 0, 100) / 100

    if s == 0:
        r = g = b = l
    else:
        q = l * (1 + s) if l < 0.5 else l + s - l * s
        p = 2 * l - q
        r = _hue_to_channel(p, q, h + 1 / 3)
        g = _hue_to_channel(p, q, h)
        b = _hue_to_channel(p, q, h - 1 / 3)

    return (
        int(clamp(round_half_up(r * 255), 0, 255)),
        int(clamp(round_half_up(g * 255), 0, 255)),
        int(clamp(round_half_up(b * 255), 0, 255)),
    )


def hex_to_hsl(hex_str: str) -> tuple[float, float, float]:
    """Convert hex to HSL."""
    return rgb_to_hsl(*hex_to_rgb(hex_str))


def hsl_to_hex(h: float, s: float, l: float) -> str:
    """Convert HSL to hex."""
    return rgb_to_hex(*hsl_to_rgb(h, s, l))
