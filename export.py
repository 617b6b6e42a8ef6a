"""
Palette export formats and import-text parsing.

All exporters work on the active swatch window.
"""

import json
import re
from pathlib import Path

from PIL import Image, ImageDraw

from color_space import clamp, hex_to_rgb
from contrast import best_text_color
from palette import MAX_COUNT, MIN_COUNT, InvalidImportList, PaletteState, Swatch


# =============================================================================
# Constants
# =============================================================================

PALETTE_NAME = "ToolCite Palette"
CSS_PREFIX = "--tc-color-"
IMPORT_PATTERN = re.compile(r'#?\b([0-9a-fA-F]{6})\b')

SWATCH_WIDTH = 180
SWATCH_HEIGHT = 120


# =============================================================================
# Text formats
# =============================================================================

def to_json(swatches: list[Swatch]) -> str:
    """JSON array of {hex, locked}."""
    return json.dumps([{'hex': s.color, 'locked': s.locked} for s in swatches], indent=2)


def to_csv(swatches: list[Swatch]) -> str:
    """CSV with header index,hex,r,g,b; indices start at 1."""
    lines = ["index,hex,r,g,b"]
    for i, s in enumerate(swatches, 1):
        r, g, b = hex_to_rgb(s.color)
        lines.append(f"{i},{s.color},{r},{g},{b}")
    return "\n".join(lines)


def to_gpl(swatches: list[Swatch], name: str = PALETTE_NAME) -> str:
    """GIMP palette (.gpl) text."""
    columns = int(clamp(len(swatches), MIN_COUNT, MAX_COUNT))
    lines = [
        "GIMP Palette",
        f"Name: {name}",
        f"Columns: {columns}",
        "#",
    ]
    for i, s in enumerate(swatches, 1):
        r, g, b = hex_to_rgb(s.color)
        lines.append(f"{r} {g} {b} Color {i}")
    return "\n".join(lines) + "\n"


def to_css_vars(swatches: list[Swatch]) -> str:
    """CSS custom properties on :root."""
    lines = [":root {"]
    for i, s in enumerate(swatches, 1):
        lines.append(f"  {CSS_PREFIX}{i}: {s.color};")
    lines.append("}")
    return "\n".join(lines)


def to_tailwind(swatches: list[Swatch]) -> str:
    """Tailwind config snippet exposing the palette as tc.c1..cN."""
    lines = [
        '// usage: class="text-tc-c1 bg-tc-c2"',
        "export default {",
        "  theme: {",
        "    extend: {",
        "      colors: {",
        "        tc: {",
    ]
    for i, s in enumerate(swatches, 1):
        lines.append(f'          c{i}: "{s.color}",')
    lines.extend(["        }", "      }", "    }", "  }", "}"])
    return "\n".join(lines)


def to_hex_list(swatches: list[Swatch]) -> str:
    return "\n".join(s.color for s in swatches)


FORMATS = {
    'json': to_json,
    'csv': to_csv,
    'gpl': to_gpl,
    'css': to_css_vars,
    'tailwind': to_tailwind,
    'hex': to_hex_list,
}

EXTENSIONS = {
    'json': '.json',
    'csv': '.csv',
    'gpl': '.gpl',
    'css': '.css',
    'tailwind': '.js',
    'hex': '.txt',
}


def export_state(state: PaletteState, fmt: str) -> str:
    """Render the active window of state in a named text format."""
    if fmt not in FORMATS:
        raise ValueError(f"Unknown export format: {fmt!r} (choose from {', '.join(FORMATS)})")
    return FORMATS[fmt](state.active)


# =============================================================================
# Image export
# =============================================================================

def render_strip(swatches: list[Swatch], width: int = SWATCH_WIDTH,
                 height: int = SWATCH_HEIGHT, labels: bool = True) -> Image.Image:
    """Horizontal strip of swatches, optionally labelled with their hex."""
    img = Image.new('RGB', (max(1, width * len(swatches)), height), (255, 255, 255))
    draw = ImageDraw.Draw(img)

    for i, s in enumerate(swatches):
        x = i * width
        draw.rectangle([x, 0, x + width - 1, height - 1], fill=hex_to_rgb(s.color))
        if labels:
            bbox = draw.textbbox((0, 0), s.color)
            text_width = bbox[2] - bbox[0]
            draw.text((x + (width - text_width) // 2, height - 20), s.color,
                      fill=hex_to_rgb(best_text_color(s.color)))

    return img


def save_strip(swatches: list[Swatch], output_path) -> Path:
    path = Path(output_path)
    render_strip(swatches).save(path, format='PNG')
    return path


# =============================================================================
# Import
# =============================================================================

def parse_import_text(text: str) -> list[str]:
    """
    Pull hex codes out of pasted text (one per line, comma separated, CSS...).

    Raises:
        InvalidImportList: If fewer than MIN_COUNT codes are found
    """
    colors = ['#' + m.upper() for m in IMPORT_PATTERN.findall(text or '')]
    if len(colors) < MIN_COUNT:
        raise InvalidImportList(
            f"Found {len(colors)} hex code(s); need at least {MIN_COUNT}"
        )
    return colors[:MAX_COUNT]
