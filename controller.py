"""
Palette controller.

Owns the PaletteState for one tool session, applies control changes in
order through the pure recompute() function, and talks to the outside
world only through injected capabilities (image decoder, clipboard, file
downloader, snapshot stores). Failures never escape: they leave the state
untouched and queue a dismissible Notice.
"""

import logging
import random
from dataclasses import dataclass
from typing import Optional, Protocol

from export import EXTENSIONS, export_state, parse_import_text
from extract_colors import MIN_TARGET, extract_palette, state_from_extraction
from palette import (
    ClipboardOrShareUnavailable, InsufficientDistinctColors, InvalidImportList,
    PaletteState, make_palette,
)
from share import decode_query, share_url
from store import MemoryStore, Snapshot, HISTORY_CAPACITY, FAVORITES_CAPACITY, push
import synthesize

logger = logging.getLogger(__name__)


# =============================================================================
# Capabilities
# =============================================================================

class ImageDecoder(Protocol):
    def decode(self, source):
        """Return a PIL image or RGBA array; raise OSError or ValueError if unreadable."""
        ...


class ClipboardWriter(Protocol):
    def write(self, text: str) -> None:
        """Put text on the clipboard; raise ClipboardOrShareUnavailable if it can't."""
        ...


class FileDownloader(Protocol):
    def download(self, filename: str, content, mime_type: str) -> None:
        """Hand content (str or bytes) to the user as a file named filename."""
        ...


MIME_TYPES = {
    'json': 'application/json',
    'csv': 'text/csv',
    'css': 'text/css',
    'tailwind': 'text/javascript',
}


@dataclass
class Notice:
    """Transient, dismissible message for the user."""
    level: str  # 'info', 'error'
    message: str


# =============================================================================
# Pure recompute
# =============================================================================

def recompute(state: PaletteState) -> PaletteState:
    """Regenerate unlocked swatches for state. Idempotent for a fixed state."""
    return state.update(palette=tuple(synthesize.generate_from_base(state)))


# =============================================================================
# Controller
# =============================================================================

class PaletteController:
    """Drives a PaletteState in response to discrete user actions."""

    def __init__(self, state: Optional[PaletteState] = None,
                 image_decoder: Optional[ImageDecoder] = None,
                 clipboard: Optional[ClipboardWriter] = None,
                 fallback_clipboard: Optional[ClipboardWriter] = None,
                 downloader: Optional[FileDownloader] = None,
                 history=None, favorites=None,
                 rng: Optional[random.Random] = None):
        self.image_decoder = image_decoder
        self.clipboard = clipboard
        self.fallback_clipboard = fallback_clipboard
        self.downloader = downloader
        self.history = history if history is not None else MemoryStore(HISTORY_CAPACITY)
        self.favorites = favorites if favorites is not None else MemoryStore(FAVORITES_CAPACITY)
        self.rng = rng or random.Random()
        self.notices: list[Notice] = []
        # Set only while swatches come from a share-link color list;
        # control changes then leave the palette alone until generate().
        self.frozen = False
        self._generation = 0
        self._applied = 0
        self.state = recompute(state or PaletteState())

    @classmethod
    def from_query(cls, query: str, **kwargs) -> 'PaletteController':
        """Seed a controller from share-link query parameters."""
        state = decode_query(query)
        controller = cls(state=state, **kwargs)
        if state.palette:
            # The explicit colors win over the first recompute
            controller.state = state
            controller.frozen = True
        return controller

    # -- ordering ----------------------------------------------------------

    def begin(self) -> int:
        """Reserve a generation number for an update about to be computed."""
        self._generation += 1
        return self._generation

    def apply(self, ticket: int, state: PaletteState) -> bool:
        """Install state unless a newer update has already been applied."""
        if ticket < self._applied:
            logger.debug("dropping stale update %d (applied %d)", ticket, self._applied)
            return False
        self._applied = ticket
        self.state = state
        return True

    def _commit(self, state: PaletteState, regenerate: bool = True) -> PaletteState:
        ticket = self.begin()
        if regenerate and not self.frozen:
            state = recompute(state)
        else:
            state = state.update(palette=tuple(synthesize.fill_window(state)))
        self.apply(ticket, state)
        return self.state

    # -- notices -----------------------------------------------------------

    def notify(self, message: str, level: str = 'info') -> None:
        self.notices.append(Notice(level, message))

    def dismiss(self, index: int = 0) -> None:
        if 0 <= index < len(self.notices):
            del self.notices[index]

    def pop_notices(self) -> list[Notice]:
        notices, self.notices = self.notices, []
        return notices

    # -- controls ----------------------------------------------------------

    def set_base_color(self, color: str) -> PaletteState:
        return self._commit(self.state.update(base_color=color))

    def set_algorithm(self, algorithm: str) -> PaletteState:
        return self._commit(self.state.update(algorithm=algorithm))

    def set_count(self, count: int) -> PaletteState:
        return self._commit(self.state.update(count=count))

    def set_saturation_shift(self, shift: int) -> PaletteState:
        return self._commit(self.state.update(saturation_shift=shift))

    def set_lightness_shift(self, shift: int) -> PaletteState:
        return self._commit(self.state.update(lightness_shift=shift))

    # -- actions -----------------------------------------------------------

    def generate(self) -> PaletteState:
        """Explicit 'generate from base'; also lifts a share-link freeze."""
        self.frozen = False
        self._commit(self.state)
        self.notify("Generated palette from base color")
        return self.state

    def randomize(self) -> PaletteState:
        palette = synthesize.randomize(self.state, self.rng)
        self._commit(self.state.update(palette=tuple(palette)), regenerate=False)
        self.notify("Randomized unlocked colors")
        return self.state

    def toggle_lock(self, index: int) -> PaletteState:
        palette = synthesize.toggle_lock(list(self.state.palette), index)
        return self._commit(self.state.update(palette=tuple(palette)), regenerate=False)

    def set_swatch_color(self, index: int, color: str) -> PaletteState:
        palette = synthesize.set_color(list(self.state.palette), index, color)
        return self._commit(self.state.update(palette=tuple(palette)), regenerate=False)

    def reorder(self, from_index: int, to_index: int) -> PaletteState:
        palette = synthesize.reorder(list(self.state.palette), self.state.count, from_index, to_index)
        return self._commit(self.state.update(palette=tuple(palette)), regenerate=False)

    def move_adjacent(self, index: int, delta: int) -> PaletteState:
        palette = synthesize.move_adjacent(list(self.state.palette), self.state.count, index, delta)
        return self._commit(self.state.update(palette=tuple(palette)), regenerate=False)

    def apply_preset(self, name: str) -> PaletteState:
        try:
            state = synthesize.apply_preset(self.state, name)
        except KeyError as e:
            self.notify(str(e.args[0]), 'error')
            return self.state
        self.frozen = False
        self._commit(state, regenerate=False)
        self.notify(f"{name} preset applied")
        return self.state

    # -- image / import ----------------------------------------------------

    def load_image(self, source, target_count: int = MIN_TARGET) -> bool:
        """Decode source and replace the palette with its extracted colors."""
        ticket = self.begin()
        try:
            if self.image_decoder is None:
                raise ValueError("No image decoder available")
            image = self.image_decoder.decode(source)
            colors = extract_palette(image, target_count)
        except InsufficientDistinctColors as e:
            self.notify(f"Not enough distinct colors in image: {e}", 'error')
            return False
        except (OSError, ValueError) as e:
            self.notify(f"Could not read image: {e}", 'error')
            return False

        if not self.apply(ticket, state_from_extraction(self.state, colors)):
            return False
        self.notify(f"Extracted {len(colors)} colors from image")
        return True

    def import_text(self, text: str) -> bool:
        """Replace the palette with hex codes parsed from pasted text."""
        try:
            colors = parse_import_text(text)
        except InvalidImportList as e:
            self.notify(str(e), 'error')
            return False
        self.frozen = False
        palette = tuple(make_palette(colors, locked=True))
        self._commit(self.state.update(count=len(colors), palette=palette), regenerate=False)
        self.notify(f"Imported {len(colors)} colors")
        return True

    # -- clipboard / share / download -------------------------------------

    def copy_text(self, text: str) -> bool:
        """Write text with the clipboard, falling back to the alternate writer."""
        for writer in (self.clipboard, self.fallback_clipboard):
            if writer is None:
                continue
            try:
                writer.write(text)
            except ClipboardOrShareUnavailable as e:
                logger.debug("clipboard writer unavailable: %s", e)
                continue
            self.notify("Copied to clipboard")
            return True
        self.notify("Clipboard unavailable", 'error')
        return False

    def copy(self, fmt: str = 'hex') -> bool:
        return self.copy_text(export_state(self.state, fmt))

    def share(self, base_url: str) -> str:
        """Copy a share link for the current state and return it."""
        url = share_url(base_url, self.state)
        self.copy_text(url)
        return url

    def download(self, fmt: str, stem: str = 'palette') -> bool:
        if self.downloader is None:
            self.notify("Download unavailable", 'error')
            return False
        content = export_state(self.state, fmt)
        self.downloader.download(stem + EXTENSIONS[fmt], content, MIME_TYPES.get(fmt, 'text/plain'))
        self.notify(f"{stem}{EXTENSIONS[fmt]} downloaded")
        return True

    # -- history / favorites ----------------------------------------------

    def save_history(self) -> Snapshot:
        snapshot = Snapshot.from_state(self.state)
        push(self.history, snapshot)
        self.notify("Session saved")
        return snapshot

    def save_favorite(self, name: Optional[str] = None) -> Snapshot:
        snapshot = Snapshot.from_state(self.state, name)
        push(self.favorites, snapshot)
        self.notify("Added to favorites")
        return snapshot

    def load_snapshot(self, snapshot: Snapshot) -> PaletteState:
        self.frozen = False
        self._commit(snapshot.to_state(), regenerate=False)
        self.notify(f"Loaded {snapshot.name}")
        return self.state
