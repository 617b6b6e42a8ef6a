"""
Mirror palette state into URL query parameters and back.

Parameters: base, a (algorithm), n (count), s / l (shifts) and colors
(comma-separated hex list of the active swatches).
"""

from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

from color_space import coerce_hex
from palette import PaletteState, make_palette, parse_algorithm


def encode_query(state: PaletteState, include_colors: bool = True) -> str:
    """Serialize state as a query string (without the leading '?')."""
    params = [
        ('base', state.base_color),
        ('a', state.algorithm),
        ('n', str(state.count)),
        ('s', str(state.saturation_shift)),
        ('l', str(state.lightness_shift)),
    ]
    if include_colors and state.palette:
        params.append(('colors', ','.join(state.colors)))
    return urlencode(params)


def _first(params: dict, key: str):
    values = params.get(key)
    return values[0] if values else None


def _int_or_none(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def decode_query(query: str, defaults: PaletteState = None) -> PaletteState:
    """
    Rebuild state from a query string.

    Missing or unparsable parameters fall back to defaults. When colors is
    present it populates the swatches; invalid entries become #000000.
    """
    state = defaults or PaletteState()
    params = parse_qs(query.lstrip('?'), keep_blank_values=True)

    changes = {}
    base = _first(params, 'base')
    if base:
        changes['base_color'] = coerce_hex(base)
    algorithm = _first(params, 'a')
    if algorithm:
        changes['algorithm'] = parse_algorithm(algorithm, state.algorithm)
    for key, attr in (('n', 'count'), ('s', 'saturation_shift'), ('l', 'lightness_shift')):
        value = _int_or_none(_first(params, key))
        if value is not None:
            changes[attr] = value

    colors = _first(params, 'colors')
    if colors:
        hexes = [coerce_hex(c) for c in colors.split(',')]
        changes['palette'] = tuple(make_palette(hexes))
        if 'count' not in changes:
            changes['count'] = len(hexes)

    return state.update(**changes)


def share_url(base_url: str, state: PaletteState) -> str:
    """Replace base_url's query string with the encoded state."""
    parts = urlsplit(base_url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, encode_query(state), parts.fragment))
