"""
WCAG 2 contrast model.

Relative luminance, contrast ratio, text-color choice, conformance badges
and the full N x N contrast matrix for a palette.
"""

from typing import Optional

import numpy as np

from color_space import BLACK, WHITE, hex_to_rgb, normalize_hex


# =============================================================================
# Constants
# =============================================================================

AAA_RATIO = 7.0
AA_RATIO = 4.5
AA_LARGE_RATIO = 3.0

BADGE_AAA = "AAA"
BADGE_AA = "AA"
BADGE_AA_LARGE = "AA Large"
BADGE_LOW = "Low"

# Minimum ratio a cell must reach to survive a matrix filter
FILTER_THRESHOLDS = {
    "AA": AA_RATIO,
    "AAA": AAA_RATIO,
}


# =============================================================================
# Luminance and ratio
# =============================================================================

def _linearize(channel: float) -> float:
    c = channel / 255.0
    return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(color: str) -> float:
    """WCAG relative luminance of a hex color, in [0, 1]."""
    r, g, b = hex_to_rgb(color)
    return 0.2126 * _linearize(r) + 0.7152 * _linearize(g) + 0.0722 * _linearize(b)


def contrast_ratio(fg: str, bg: str) -> float:
    """WCAG contrast ratio between two colors, in [1, 21]. Symmetric."""
    l1 = relative_luminance(fg)
    l2 = relative_luminance(bg)

    lighter = max(l1, l2)
    darker = min(l1, l2)

    return (lighter + 0.05) / (darker + 0.05)


def best_text_color(bg: str) -> str:
    """White or black, whichever reads better on bg. Ties go to white."""
    if contrast_ratio(WHITE, bg) >= contrast_ratio(BLACK, bg):
        return WHITE
    return BLACK


def badge(ratio: float) -> str:
    """Classify a contrast ratio into a WCAG conformance band."""
    if ratio >= AAA_RATIO:
        return BADGE_AAA
    elif ratio >= AA_RATIO:
        return BADGE_AA
    elif ratio >= AA_LARGE_RATIO:
        return BADGE_AA_LARGE
    return BADGE_LOW


def swatch_badges(colors: list[str]) -> list[dict]:
    """Live badge data for each swatch: readable text color and its rating."""
    badges = []
    for color in colors:
        text = best_text_color(color)
        ratio = contrast_ratio(text, color)
        badges.append({
            'hex': normalize_hex(color, default=BLACK),
            'text': text,
            'ratio': ratio,
            'badge': badge(ratio),
        })
    return badges


# =============================================================================
# Contrast matrix
# =============================================================================

def contrast_matrix(colors: list[str]) -> np.ndarray:
    """
    Full pairwise contrast table.

    Returns:
        Array of shape (n, n) where [row, col] = contrast_ratio(colors[row], colors[col]).
        The diagonal is exactly 1.
    """
    lum = np.array([relative_luminance(c) for c in colors], dtype=np.float64)
    lighter = np.maximum.outer(lum, lum)
    darker = np.minimum.outer(lum, lum)
    matrix = (lighter + 0.05) / (darker + 0.05)
    np.fill_diagonal(matrix, 1.0)
    return matrix


def filter_matrix(matrix: np.ndarray, threshold: Optional[str] = None) -> np.ndarray:
    """
    Hide cells failing a conformance threshold.

    Args:
        matrix: Output of contrast_matrix()
        threshold: None (keep all), "AA" (hide < 4.5) or "AAA" (hide < 7)

    Returns:
        Copy of the matrix with failing cells set to NaN; shape is unchanged.
    """
    result = np.array(matrix, dtype=np.float64, copy=True)
    if threshold is None:
        return result
    if threshold not in FILTER_THRESHOLDS:
        raise ValueError(f"Unknown contrast filter: {threshold!r}")
    result[result < FILTER_THRESHOLDS[threshold]] = np.nan
    return result
