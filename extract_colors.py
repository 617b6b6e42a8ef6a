#!/usr/bin/env python3
"""
Extract a diverse palette from an image.

Pixels are bucketed by exact hex value, ranked by frequency and then
greedily accepted only if they sit far enough (Euclidean RGB) from every
color already chosen.
"""

import logging
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image
from scipy.spatial.distance import cdist

from color_space import rgb_to_hex
from palette import (
    MAX_COUNT, MIN_COUNT, InsufficientDistinctColors, PaletteState, make_palette,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

WORKING_SIZE = 64  # Longest side after downsampling
ALPHA_THRESHOLD = 200  # Pixels below this alpha are ignored
DIVERSITY_THRESHOLD = 40.0  # Minimum RGB distance between accepted colors
MIN_TARGET = 5  # Always try to accept at least this many colors

# Image size limits (security: prevent decompression bombs)
MAX_IMAGE_PIXELS = 50_000_000  # 50 megapixels
MAX_IMAGE_DIMENSION = 10_000  # 10k pixels per side


ImageLike = Union[Image.Image, np.ndarray]


# =============================================================================
# Loading
# =============================================================================

def load_image(image_path: Union[str, Path]) -> Image.Image:
    """
    Decode an image file.

    Raises:
        FileNotFoundError: If image file doesn't exist
        ValueError: If file is not a valid image or exceeds size limits
    """
    try:
        img = Image.open(image_path)
    except FileNotFoundError:
        raise FileNotFoundError(f"Image not found: {image_path}")
    except Exception as e:
        raise ValueError(f"Could not open image: {e}")

    width, height = img.size
    if width > MAX_IMAGE_DIMENSION or height > MAX_IMAGE_DIMENSION:
        raise ValueError(
            f"Image dimensions {width}x{height} exceed maximum "
            f"{MAX_IMAGE_DIMENSION}x{MAX_IMAGE_DIMENSION}"
        )
    if width * height > MAX_IMAGE_PIXELS:
        raise ValueError(
            f"Image has {width * height:,} pixels, exceeding maximum {MAX_IMAGE_PIXELS:,}"
        )

    try:
        img.load()
    except OSError as e:
        raise ValueError(f"Could not decode image: {e}")
    return img


class PillowImageDecoder:
    """Image decoder backed by Pillow."""

    def decode(self, source: Union[str, Path]) -> Image.Image:
        return load_image(source)


# =============================================================================
# Quantization
# =============================================================================

def _to_rgba(image: ImageLike) -> Image.Image:
    if isinstance(image, np.ndarray):
        image = Image.fromarray(image.astype(np.uint8))
    return image.convert('RGBA')


def downsample(image: ImageLike, size: int = WORKING_SIZE) -> np.ndarray:
    """
    Shrink the image so its longest side is at most size.

    Nearest-neighbour resampling keeps every sampled pixel an actual image
    color. Returns an (h, w, 4) uint8 RGBA array.
    """
    img = _to_rgba(image)
    if img.width > size or img.height > size:
        img = img.copy()
        img.thumbnail((size, size), Image.Resampling.NEAREST)
    return np.array(img)


def frequency_map(pixels: np.ndarray, alpha_threshold: int = ALPHA_THRESHOLD) -> list[tuple[str, int]]:
    """
    Count opaque pixels per exact color.

    Args:
        pixels: (h, w, 4) RGBA array
        alpha_threshold: Minimum alpha for a pixel to be counted

    Returns:
        List of (hex, count) sorted by count descending; ties keep raster
        scan order of first appearance.
    """
    flat = pixels.reshape(-1, 4)
    opaque = flat[flat[:, 3] >= alpha_threshold, :3].astype(np.int64)
    if len(opaque) == 0:
        return []

    packed = (opaque[:, 0] << 16) | (opaque[:, 1] << 8) | opaque[:, 2]
    values, first_seen, counts = np.unique(packed, return_index=True, return_counts=True)

    # Primary key: count descending; secondary: first appearance ascending
    order = np.lexsort((first_seen, -counts))

    return [
        (rgb_to_hex((v >> 16) & 0xFF, (v >> 8) & 0xFF, v & 0xFF), int(c))
        for v, c in zip(values[order], counts[order])
    ]


# =============================================================================
# Diverse selection
# =============================================================================

def select_diverse(candidates: list[str], limit: int,
                   threshold: float = DIVERSITY_THRESHOLD) -> list[str]:
    """
    Greedily accept candidates that are farther than threshold from every
    color already accepted.
    """
    accepted: list[str] = []
    accepted_rgb = np.empty((0, 3), dtype=np.float64)

    for hex_val in candidates:
        if len(accepted) >= limit:
            break
        h = hex_val.lstrip('#')
        rgb = np.array([[int(h[i:i + 2], 16) for i in (0, 2, 4)]], dtype=np.float64)
        if len(accepted) and not (cdist(rgb, accepted_rgb)[0] > threshold).all():
            continue
        accepted.append(hex_val)
        accepted_rgb = np.vstack([accepted_rgb, rgb])

    return accepted


def extract_palette(image: ImageLike, target_count: int = MIN_TARGET) -> list[str]:
    """
    Extract a diverse palette from a decoded image.

    Args:
        image: PIL image or (h, w, 3|4) array
        target_count: Desired number of colors (at least MIN_TARGET are sought)

    Returns:
        Hex colors, most frequent first.

    Raises:
        InsufficientDistinctColors: If fewer than MIN_COUNT colors survive
    """
    pixels = downsample(image)
    buckets = frequency_map(pixels)
    limit = max(MIN_TARGET, int(target_count))

    colors = select_diverse([hex_val for hex_val, _ in buckets], limit)
    logger.debug("extracted %d of %d buckets from %dx%d sample",
                 len(colors), len(buckets), pixels.shape[1], pixels.shape[0])

    if len(colors) < MIN_COUNT:
        raise InsufficientDistinctColors(
            f"Only {len(colors)} distinct color(s) found; need at least {MIN_COUNT}"
        )
    return colors


def state_from_extraction(state: PaletteState, colors: list[str]) -> PaletteState:
    """New state holding the extracted colors, every swatch locked."""
    colors = colors[:MAX_COUNT]
    return state.update(
        count=min(MAX_COUNT, len(colors)),
        palette=tuple(make_palette(colors, locked=True)),
    )


def extract_file(image_path: Union[str, Path], target_count: int = MIN_TARGET) -> list[str]:
    """Load an image file and extract its palette."""
    return extract_palette(load_image(image_path), target_count)


if __name__ == '__main__':
    import sys

    if len(sys.argv) < 2:
        print("Usage: extract_colors.py IMAGE [COUNT]", file=sys.stderr)
        sys.exit(2)

    count = int(sys.argv[2]) if len(sys.argv) > 2 else MIN_TARGET
    try:
        for hex_val in extract_file(sys.argv[1], count):
            print(hex_val)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
