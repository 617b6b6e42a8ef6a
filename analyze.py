#!/usr/bin/env python3
"""
Palette accessibility report.

Builds a palette (from a base color, an image or an explicit color list),
scores every swatch and swatch pair against WCAG 2 and renders the result
as prose for the terminal and as a standalone HTML page.
Three stages: Build Palette → Accessibility Analysis → Render
"""

from dataclasses import dataclass, field
from html import escape
from typing import Optional

import numpy as np

from color_space import hex_to_hsl, hex_to_rgb
from contrast import badge, contrast_matrix, filter_matrix, swatch_badges
from controller import recompute
from extract_colors import MIN_TARGET, extract_file, state_from_extraction
from palette import (
    ALGORITHM_LABELS, ALGORITHMS, DEFAULT_ALGORITHM, DEFAULT_BASE, DEFAULT_COUNT,
    PaletteState, make_palette,
)
from share import encode_query


# =============================================================================
# Constants
# =============================================================================

MAX_CONTRAST_PAIRS = 6  # Strongest pairs listed in the report

BADGE_CLASSES = {
    'AAA': 'badge-aaa',
    'AA': 'badge-aa',
    'AA Large': 'badge-aa-large',
}


# =============================================================================
# Stage 1: Build Palette
# =============================================================================

def build_state(base: str = DEFAULT_BASE, algorithm: str = DEFAULT_ALGORITHM,
                count: int = DEFAULT_COUNT, saturation: int = 0, lightness: int = 0,
                image_path: Optional[str] = None,
                colors: Optional[list[str]] = None) -> PaletteState:
    """
    Stage 1: Produce the palette state to report on.

    An image takes precedence over explicit colors, which take precedence
    over generation from the base color.

    Raises:
        FileNotFoundError: If the image file doesn't exist
        ValueError: If the image is unreadable or yields too few colors
    """
    state = PaletteState(
        base_color=base,
        algorithm=algorithm,
        count=count,
        saturation_shift=saturation,
        lightness_shift=lightness,
    )
    if image_path:
        return state_from_extraction(state, extract_file(image_path, max(MIN_TARGET, count)))
    if colors:
        return state.update(count=len(colors), palette=tuple(make_palette(colors)))
    return recompute(state)


# =============================================================================
# Stage 2: Accessibility Analysis
# =============================================================================

@dataclass
class ContrastPair:
    """A pair of palette colors and how well they read together."""
    color_a: str
    color_b: str
    contrast_ratio: float
    wcag_level: str


@dataclass
class PaletteReport:
    """Output of Stage 2."""
    state: PaletteState
    badges: list  # swatch_badges() records for the active window
    matrix: np.ndarray  # Full n x n contrast table
    visible: np.ndarray  # Matrix after the threshold filter (NaN = hidden)
    threshold: Optional[str]
    contrast_pairs: list = field(default_factory=list)

    @property
    def colors(self) -> list[str]:
        return self.state.colors


def find_contrast_pairs(colors: list[str], matrix: np.ndarray,
                        limit: int = MAX_CONTRAST_PAIRS) -> list[ContrastPair]:
    """Distinct color pairs ordered by contrast, strongest first."""
    pairs = []
    n = len(colors)
    for i in range(n):
        for j in range(i + 1, n):
            ratio = float(matrix[i, j])
            pairs.append(ContrastPair(colors[i], colors[j], ratio, badge(ratio)))
    pairs.sort(key=lambda p: -p.contrast_ratio)
    return pairs[:limit]


def analyze_palette(state: PaletteState, threshold: Optional[str] = None) -> PaletteReport:
    """Stage 2: Score each swatch and every swatch pair."""
    colors = state.colors
    matrix = contrast_matrix(colors)
    return PaletteReport(
        state=state,
        badges=swatch_badges(colors),
        matrix=matrix,
        visible=filter_matrix(matrix, threshold),
        threshold=threshold,
        contrast_pairs=find_contrast_pairs(colors, matrix),
    )


# =============================================================================
# Stage 3: Render
# =============================================================================

def render(report: PaletteReport) -> str:
    """Stage 3: Render the report as prose."""
    state = report.state
    lines = []

    lines.append(f"SCHEME: {ALGORITHM_LABELS[state.algorithm]}")
    lines.append(f"Base: {state.base_color} | Count: {state.count} | "
                 f"Saturation shift: {state.saturation_shift:+d} | Lightness shift: {state.lightness_shift:+d}")
    lines.append(f"Share: ?{encode_query(state)}")
    lines.append("")

    lines.append("COLORS:")
    lines.append("")
    for i, (swatch, info) in enumerate(zip(state.active, report.badges), 1):
        h, s, l = hex_to_hsl(swatch.color)
        lock = " [locked]" if swatch.locked else ""
        lines.append(f"{i}. {swatch.color}{lock}")
        lines.append(f"  RGB: {hex_to_rgb(swatch.color)} | HSL: ({h:.0f}°, {s:.0f}%, {l:.0f}%)")
        lines.append(f"  Text: {info['text']} at {info['ratio']:.2f}:1 (WCAG {info['badge']})")
    lines.append("")

    lines.append("CONTRAST MATRIX:")
    if report.threshold:
        lines.append(f"(cells below {report.threshold} hidden)")
    lines.append("")
    header = " " * 9 + " ".join(f"{c:>8}" for c in report.colors)
    lines.append(header)
    for row_color, row in zip(report.colors, report.visible):
        cells = " ".join("       -" if np.isnan(v) else f"{v:8.2f}" for v in row)
        lines.append(f"{row_color:>8} {cells}")
    lines.append("")

    if report.contrast_pairs:
        lines.append("Contrast pairs (strongest first):")
        for pair in report.contrast_pairs:
            lines.append(f"  - {pair.color_a} / {pair.color_b}: "
                         f"Ratio {pair.contrast_ratio:.2f}:1 (WCAG {pair.wcag_level})")

    return "\n".join(lines)


def render_html(report: PaletteReport, title: str = "Palette") -> str:
    """Stage 3b: Render the report as HTML."""
    safe_title = escape(title)
    state = report.state

    css = """
        * { box-sizing: border-box; margin: 0; padding: 0; }
        body {
            font-family: system-ui, -apple-system, sans-serif;
            background: #f5f5f5;
            color: #333;
            line-height: 1.5;
            padding: 2rem;
            max-width: 900px;
            margin: 0 auto;
        }
        h1 { font-size: 1.5rem; margin-bottom: 0.5rem; }
        h2 { font-size: 1.2rem; margin: 2rem 0 1rem; border-bottom: 1px solid #ddd; padding-bottom: 0.5rem; }
        .meta { color: #666; font-size: 0.9rem; margin-bottom: 1rem; }
        .palette-strip {
            display: flex;
            height: 120px;
            border-radius: 8px;
            overflow: hidden;
            box-shadow: 0 2px 8px rgba(0,0,0,0.1);
            margin: 1.5rem 0;
        }
        .palette-strip .swatch {
            flex: 1;
            display: flex;
            flex-direction: column;
            align-items: center;
            justify-content: flex-end;
            padding: 0.5rem;
            font-size: 0.75rem;
            font-weight: 500;
        }
        table.matrix { border-collapse: collapse; font-size: 0.8rem; font-family: monospace; }
        table.matrix th, table.matrix td { padding: 0.4rem 0.6rem; text-align: center; }
        table.matrix td.hidden { color: transparent; }
        .contrast-pair {
            background: #fff;
            border-radius: 8px;
            padding: 1rem;
            margin-bottom: 0.75rem;
            box-shadow: 0 1px 3px rgba(0,0,0,0.08);
        }
        .contrast-demo {
            padding: 1rem;
            border-radius: 6px;
            margin-bottom: 0.5rem;
            font-size: 1.1rem;
        }
        .contrast-demo .sample { font-weight: 600; }
        .contrast-info { font-size: 0.85rem; color: #666; }
        .contrast-badge {
            display: inline-block;
            padding: 0.15rem 0.4rem;
            border-radius: 4px;
            font-size: 0.75rem;
            font-weight: 600;
            margin-left: 0.5rem;
        }
        .badge-aaa { background: #22c55e; color: #fff; }
        .badge-aa { background: #3b82f6; color: #fff; }
        .badge-aa-large { background: #f59e0b; color: #fff; }
        .badge-fail { background: #ef4444; color: #fff; }
    """

    lines = [
        '<!DOCTYPE html>',
        '<html lang="en">',
        '<head>',
        '  <meta charset="UTF-8">',
        '  <meta name="viewport" content="width=device-width, initial-scale=1.0">',
        f'  <title>Palette: {safe_title}</title>',
        f'  <style>{css}</style>',
        '</head>',
        '<body>',
    ]

    lines.append(f'<h1>{ALGORITHM_LABELS[state.algorithm]}</h1>')
    lines.append(f'<p class="meta">Source: {safe_title}</p>')
    lines.append(f'<p class="meta">Base: {state.base_color} | {state.count} colors | '
                 f'Saturation {state.saturation_shift:+d} | Lightness {state.lightness_shift:+d}</p>')

    # Palette strip with live badges
    lines.append('<div class="palette-strip">')
    for swatch, info in zip(state.active, report.badges):
        badge_class = BADGE_CLASSES.get(info['badge'], 'badge-fail')
        lock = ' &#128274;' if swatch.locked else ''
        lines.append(f'  <div class="swatch" style="background:{swatch.color}; color:{info["text"]}">'
                     f'{swatch.color}{lock}'
                     f'<span class="contrast-badge {badge_class}">{info["badge"]}</span></div>')
    lines.append('</div>')

    # Matrix
    lines.append('<h2>Contrast Matrix</h2>')
    if report.threshold:
        lines.append(f'<p class="meta">Showing pairs meeting {report.threshold}</p>')
    lines.append('<table class="matrix">')
    lines.append('  <tr><th></th>' + ''.join(
        f'<th style="background:{c}; color:{info["text"]}">{c}</th>'
        for c, info in zip(report.colors, report.badges)) + '</tr>')
    for row_color, row, info in zip(report.colors, report.visible, report.badges):
        cells = []
        for col_color, value in zip(report.colors, row):
            if np.isnan(value):
                cells.append('<td class="hidden">–</td>')
            else:
                cells.append(f'<td style="background:{row_color}; color:{col_color}" '
                             f'title="{badge(value)}">{value:.2f}</td>')
        lines.append(f'  <tr><th style="background:{row_color}; color:{info["text"]}">{row_color}</th>'
                     + ''.join(cells) + '</tr>')
    lines.append('</table>')

    # Pairs
    if report.contrast_pairs:
        lines.append('<h2>Contrast Pairs</h2>')
        for pair in report.contrast_pairs:
            badge_class = BADGE_CLASSES.get(pair.wcag_level, 'badge-fail')
            lines.append('<div class="contrast-pair">')
            lines.append(f'  <div class="contrast-demo" style="background:{pair.color_a}; color:{pair.color_b}">')
            lines.append('    <span class="sample">Aa</span> Sample text for readability')
            lines.append('  </div>')
            lines.append(f'  <div class="contrast-info">{pair.color_a} / {pair.color_b}: '
                         f'{pair.contrast_ratio:.2f}:1 <span class="contrast-badge {badge_class}">{pair.wcag_level}</span></div>')
            lines.append('</div>')

    lines.append('</body>')
    lines.append('</html>')

    return '\n'.join(lines)


# =============================================================================
# Main Pipeline
# =============================================================================

def run_pipeline(threshold: Optional[str] = None, **build_args) -> PaletteReport:
    """Run stages 1-2."""
    return analyze_palette(build_state(**build_args), threshold)


# =============================================================================
# CLI
# =============================================================================

def main(argv=None):
    import argparse
    import logging
    import sys
    from pathlib import Path

    from export import FORMATS, export_state, save_strip

    parser = argparse.ArgumentParser(
        description='Generate a color palette and report its WCAG contrast.'
    )
    parser.add_argument('--base', '-b', default=DEFAULT_BASE, help='Base color (hex)')
    parser.add_argument('--algorithm', '-a', choices=ALGORITHMS, default=DEFAULT_ALGORITHM)
    parser.add_argument('--count', '-n', type=int, default=DEFAULT_COUNT, help='Swatch count (3-10)')
    parser.add_argument('--saturation', '-s', type=int, default=0, help='Saturation shift (-40..40)')
    parser.add_argument('--lightness', '-l', type=int, default=0, help='Lightness shift (-40..40)')
    parser.add_argument('--input', '-i', help='Extract the palette from this image instead')
    parser.add_argument('--colors', help='Comma-separated hex list to report on')
    parser.add_argument('--filter', choices=['AA', 'AAA'], help='Hide matrix cells below this level')
    parser.add_argument('--format', '-f', choices=sorted(FORMATS),
                        help='Print the palette in an export format instead of the report')
    parser.add_argument(
        '--output', '-o',
        nargs='?',
        const=True,
        default=None,
        help='Write HTML report. Optionally specify path, otherwise palette-report.html.'
    )
    parser.add_argument('--png', help='Also write a PNG swatch strip to this path')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')

    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(name)s: %(message)s')

    colors = [c.strip() for c in args.colors.split(',')] if args.colors else None

    try:
        report = run_pipeline(
            threshold=args.filter,
            base=args.base,
            algorithm=args.algorithm,
            count=args.count,
            saturation=args.saturation,
            lightness=args.lightness,
            image_path=args.input,
            colors=colors,
        )
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error building palette: {e}", file=sys.stderr)
        sys.exit(1)

    if args.format:
        print(export_state(report.state, args.format))
    else:
        print(render(report))

    if args.png:
        try:
            print(f"\nWrote: {save_strip(report.state.active, args.png)}")
        except OSError as e:
            print(f"Error writing PNG: {e}", file=sys.stderr)
            sys.exit(1)

    if args.output:
        if args.output is True:
            output_path = Path(args.input).with_name(f"{Path(args.input).stem}-palette.html") \
                if args.input else Path('palette-report.html')
        else:
            output_path = Path(args.output)

        try:
            output_path.write_text(render_html(report, args.input or report.state.base_color))
            print(f"\nWrote: {output_path}")
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            sys.exit(1)


if __name__ == '__main__':
    main()
