"""Tests for the palette controller."""

import random
from urllib.parse import parse_qs

import numpy as np
from PIL import Image

from controller import PaletteController, recompute
from extract_colors import PillowImageDecoder
from palette import ClipboardOrShareUnavailable, PaletteState
from share import encode_query
from store import MemoryStore
from synthesize import base_colors


class FakeDecoder:
    def __init__(self, image):
        self.image = image

    def decode(self, source):
        if source == 'missing':
            raise FileNotFoundError(source)
        return self.image


class RecordingClipboard:
    def __init__(self):
        self.texts = []

    def write(self, text):
        self.texts.append(text)


class BrokenClipboard:
    def write(self, text):
        raise ClipboardOrShareUnavailable("no clipboard API")


class RecordingDownloader:
    def __init__(self):
        self.files = []

    def download(self, filename, content, mime_type):
        self.files.append((filename, content, mime_type))


def bands():
    img = Image.new('RGB', (60, 10))
    img.paste((255, 0, 0), (0, 0, 30, 10))
    img.paste((0, 255, 0), (30, 0, 50, 10))
    img.paste((0, 0, 255), (50, 0, 60, 10))
    return img


def test_initial_state_is_generated():
    controller = PaletteController()
    assert len(controller.state.palette) == 5
    assert controller.state == recompute(PaletteState())


def test_recompute_is_idempotent():
    state = recompute(PaletteState(algorithm="triadic", count=3))
    assert recompute(state) == state


def test_controls_recompute_in_order():
    controller = PaletteController()
    controller.set_algorithm("triadic")
    controller.set_count(3)
    controller.set_base_color("#06A92F")
    assert controller.state.colors == ["#06A92F", "#2F06A9", "#A92F06"]
    assert len(controller.state.palette) == 5


def test_failed_extraction_leaves_state_intact():
    controller = PaletteController(image_decoder=FakeDecoder(Image.new('RGB', (8, 8), (17, 34, 51))))
    before = controller.state
    assert not controller.load_image('solid.png')
    assert controller.state == before
    assert controller.pop_notices()[0].level == 'error'


def test_decode_failure_is_reported():
    controller = PaletteController(image_decoder=FakeDecoder(bands()))
    before = controller.state
    assert not controller.load_image('missing')
    assert controller.state == before
    assert controller.notices[0].level == 'error'
    controller.dismiss(0)
    assert controller.notices == []


def test_extracted_colors_are_locked_against_recompute():
    controller = PaletteController(image_decoder=FakeDecoder(bands()))
    assert controller.load_image('bands.png')
    assert controller.state.colors == ['#FF0000', '#00FF00', '#0000FF']
    assert controller.state.count == 3

    controller.set_base_color("#123456")
    controller.set_algorithm("tetradic")
    assert controller.state.colors == ['#FF0000', '#00FF00', '#0000FF']
    controller.randomize()
    assert controller.state.colors == ['#FF0000', '#00FF00', '#0000FF']


def test_randomize_uses_injected_rng():
    a = PaletteController(rng=random.Random(5))
    b = PaletteController(rng=random.Random(5))
    assert a.randomize() == b.randomize()


def test_invalid_import_keeps_palette():
    controller = PaletteController()
    before = controller.state
    assert not controller.import_text("#ffffff only")
    assert controller.state == before

    assert controller.import_text("#111111 #222222 #333333 #444444")
    assert controller.state.colors == ["#111111", "#222222", "#333333", "#444444"]


def test_stale_update_is_dropped():
    controller = PaletteController()
    older = controller.begin()
    newer = controller.begin()
    latest = PaletteState(base_color="#FF0000")
    assert controller.apply(newer, latest)
    assert not controller.apply(older, PaletteState(base_color="#00FF00"))
    assert controller.state == latest


def test_share_link_freezes_explicit_colors():
    controller = PaletteController.from_query("base=06A92F&n=3&colors=%23111111,%23222222,%23333333")
    assert controller.frozen
    assert controller.state.colors == ["#111111", "#222222", "#333333"]

    controller.set_base_color("#FF0000")
    assert controller.state.colors == ["#111111", "#222222", "#333333"]

    controller.generate()
    assert not controller.frozen
    assert controller.state.colors != ["#111111", "#222222", "#333333"]


def test_clipboard_falls_back():
    fallback = RecordingClipboard()
    controller = PaletteController(clipboard=BrokenClipboard(), fallback_clipboard=fallback)
    assert controller.copy('hex')
    assert fallback.texts == ["\n".join(controller.state.colors)]

    url = controller.share("https://example.com/palette")
    assert fallback.texts[-1] == url


def test_clipboard_unavailable_is_not_fatal():
    controller = PaletteController(clipboard=BrokenClipboard())
    assert not controller.copy('csv')
    assert controller.notices[-1].level == 'error'


def test_download():
    downloader = RecordingDownloader()
    controller = PaletteController(downloader=downloader)
    assert controller.download('gpl')
    filename, content, _ = downloader.files[0]
    assert filename == 'palette.gpl'
    assert content.startswith("GIMP Palette")


def test_history_and_favorites():
    controller = PaletteController(history=MemoryStore(5), favorites=MemoryStore(50))
    snap = controller.save_history()
    controller.save_history()
    assert len(controller.history.load()) == 1

    controller.save_favorite("Greens")
    assert controller.favorites.load()[0].name == "Greens"

    controller.set_base_color("#FF0000")
    controller.load_snapshot(snap)
    assert controller.state.colors == snap.colors


def test_preset_colors_follow_later_control_changes():
    controller = PaletteController()
    controller.apply_preset("Neon")
    assert controller.state.colors == ['#39FF14', '#FF2079', '#00FFFF', '#FCEE09', '#FF6EC7']
    assert not controller.frozen

    controller.set_base_color("#123456")
    assert controller.state.colors == base_colors(controller.state)
    assert controller.state.colors[0] != '#39FF14'

    controller.apply_preset("Plaid")
    assert controller.notices[-1].level == 'error'


def test_imported_colors_are_locked_against_recompute():
    controller = PaletteController()
    assert controller.import_text("#111111 #222222 #333333")
    controller.set_base_color("#FF0000")
    controller.set_algorithm("triadic")
    assert controller.state.colors == ["#111111", "#222222", "#333333"]
    assert not controller.frozen


def test_loading_snapshot_lifts_share_link_freeze():
    controller = PaletteController.from_query("n=3&colors=%23111111,%23222222,%23333333")
    snap = controller.save_history()
    controller.load_snapshot(snap)
    assert not controller.frozen

    controller.set_base_color("#06A92F")
    assert controller.state.colors == base_colors(controller.state)


def test_growing_count_while_frozen_fills_new_positions():
    controller = PaletteController.from_query("n=3&colors=%23111111,%23222222,%23333333")
    controller.set_count(6)
    state = controller.state
    assert state.count == 6
    assert len(state.colors) == 6
    assert state.colors[:3] == ["#111111", "#222222", "#333333"]
    assert state.colors[3:] == base_colors(state)[3:]
    assert not any(s.locked for s in state.active[3:])
    assert parse_qs(encode_query(state))['colors'][0].count(',') == 5


def test_truncated_image_leaves_state_intact(tmp_path):
    noise = np.random.default_rng(0).integers(0, 256, size=(200, 200, 3), dtype=np.uint8)
    full = tmp_path / 'full.png'
    Image.fromarray(noise).save(full)
    data = full.read_bytes()
    truncated = tmp_path / 'truncated.png'
    truncated.write_bytes(data[:len(data) // 2])

    controller = PaletteController(image_decoder=PillowImageDecoder())
    before = controller.state
    assert not controller.load_image(truncated)
    assert controller.state == before
    assert controller.notices[-1].level == 'error'
