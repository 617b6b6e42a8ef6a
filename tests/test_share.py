"""Tests for share-link query encoding."""

from urllib.parse import parse_qs

from palette import PaletteState, make_palette
from share import decode_query, encode_query, share_url


def test_round_trip_preserves_state():
    state = PaletteState(
        base_color="#06A92F", algorithm="tetradic", count=4,
        saturation_shift=-12, lightness_shift=7,
        palette=tuple(make_palette(["#112233", "#445566", "#778899", "#AABBCC"])),
    )
    decoded = decode_query(encode_query(state))
    assert decoded.base_color == "#06A92F"
    assert decoded.algorithm == "tetradic"
    assert decoded.count == 4
    assert decoded.saturation_shift == -12
    assert decoded.lightness_shift == 7
    assert decoded.colors == state.colors


def test_colors_are_percent_encoded():
    state = PaletteState(palette=tuple(make_palette(["#112233"] * 5)))
    query = encode_query(state)
    assert "%23112233" in query
    assert parse_qs(query)["colors"][0].split(",")[0] == "#112233"


def test_invalid_colors_become_black():
    state = decode_query("colors=%23ff0000,zzz,%2300ff00")
    assert state.colors == ["#FF0000", "#000000", "#00FF00"]
    assert state.count == 3
    assert not any(s.locked for s in state.palette)

    state = decode_query("colors=%23FF0000,,%2300FF00,%230000FF")
    assert state.colors == ["#FF0000", "#000000", "#00FF00", "#0000FF"]
    assert state.count == 4


def test_out_of_range_parameters_are_clamped():
    state = decode_query("?n=99&s=-100&l=500&a=bogus&base=nothex")
    assert state.count == 10
    assert state.saturation_shift == -40
    assert state.lightness_shift == 40
    assert state.algorithm == "analogous"
    assert state.base_color == "#000000"


def test_missing_parameters_keep_defaults():
    state = decode_query("n=abc")
    assert state == PaletteState()


def test_share_url_replaces_query():
    url = share_url("https://example.com/tools/palette?old=1#top", PaletteState())
    assert url.startswith("https://example.com/tools/palette?base=%2306A92F&a=analogous")
    assert "old=1" not in url
    assert url.endswith("#top")
