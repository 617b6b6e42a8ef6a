"""
History and favorites snapshots, persisted best-effort as JSON files.

The engine only relies on load() -> list and save(list). Lists are kept
most-recent-first, deduplicated by color sequence and capped.
"""

import json
import logging
import secrets
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Optional

from palette import ALGORITHM_LABELS, PaletteState, make_palette

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

HISTORY_CAPACITY = 5
FAVORITES_CAPACITY = 50

DEFAULT_DIR = Path.home() / ".palette-engine"
HISTORY_FILE = "history.json"
FAVORITES_FILE = "favorites.json"


# =============================================================================
# Snapshot
# =============================================================================

@dataclass
class Snapshot:
    """A named copy of a palette state."""
    id: str
    name: str
    base: str
    algorithm: str
    count: int
    saturation_shift: int
    lightness_shift: int
    colors: list = field(default_factory=list)
    created: float = 0.0

    @classmethod
    def from_state(cls, state: PaletteState, name: Optional[str] = None) -> 'Snapshot':
        colors = state.colors
        if name is None:
            label = ALGORITHM_LABELS.get(state.algorithm, state.algorithm)
            name = f"{label} • {colors[0] if colors else state.base_color}"
        return cls(
            id=secrets.token_hex(3),
            name=name,
            base=state.base_color,
            algorithm=state.algorithm,
            count=state.count,
            saturation_shift=state.saturation_shift,
            lightness_shift=state.lightness_shift,
            colors=list(colors),
            created=time.time(),
        )

    @classmethod
    def from_dict(cls, data: dict) -> 'Snapshot':
        return cls(
            id=str(data['id']),
            name=str(data.get('name', '')),
            base=data['base'],
            algorithm=data['algorithm'],
            count=int(data['count']),
            saturation_shift=int(data.get('saturation_shift', 0)),
            lightness_shift=int(data.get('lightness_shift', 0)),
            colors=list(data.get('colors', [])),
            created=float(data.get('created', 0.0)),
        )

    def to_state(self, locked: bool = False) -> PaletteState:
        return PaletteState(
            base_color=self.base,
            algorithm=self.algorithm,
            count=self.count,
            saturation_shift=self.saturation_shift,
            lightness_shift=self.lightness_shift,
            palette=tuple(make_palette(self.colors, locked=locked)),
        )


# =============================================================================
# Stores
# =============================================================================

class MemoryStore:
    """In-process store; the default when nothing is persisted."""

    def __init__(self, capacity: int):
        self.capacity = capacity
        self._items: list[Snapshot] = []

    def load(self) -> list[Snapshot]:
        return list(self._items)

    def save(self, items: list[Snapshot]) -> None:
        self._items = list(items)[:self.capacity]


class PaletteStore:
    """JSON-file backed snapshot list."""

    def __init__(self, path, capacity: int):
        self.path = Path(path)
        self.capacity = capacity

    def load(self) -> list[Snapshot]:
        """Read snapshots; unreadable or corrupt files load as empty."""
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding='utf-8'))
            return [Snapshot.from_dict(d) for d in data][:self.capacity]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Ignoring unreadable palette store %s: %s", self.path, e)
            return []

    def save(self, items: list[Snapshot]) -> None:
        """Write snapshots; failures are logged, not raised."""
        payload = [asdict(s) for s in list(items)[:self.capacity]]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload, indent=2), encoding='utf-8')
        except OSError as e:
            logger.warning("Could not write palette store %s: %s", self.path, e)


def history_store(directory=DEFAULT_DIR) -> PaletteStore:
    return PaletteStore(Path(directory) / HISTORY_FILE, HISTORY_CAPACITY)


def favorites_store(directory=DEFAULT_DIR) -> PaletteStore:
    return PaletteStore(Path(directory) / FAVORITES_FILE, FAVORITES_CAPACITY)


# =============================================================================
# List operations
# =============================================================================

def push(store, snapshot: Snapshot) -> list[Snapshot]:
    """Insert snapshot first, drop entries with the same colors, cap, save."""
    key = [c.upper() for c in snapshot.colors]
    items = [s for s in store.load() if [c.upper() for c in s.colors] != key]
    items = [snapshot] + items
    items = items[:store.capacity]
    store.save(items)
    return items


def remove(store, snapshot_id: str) -> list[Snapshot]:
    items = [s for s in store.load() if s.id != snapshot_id]
    store.save(items)
    return items


def find(store, snapshot_id: str) -> Optional[Snapshot]:
    return next((s for s in store.load() if s.id == snapshot_id), None)


def clear(store) -> None:
    store.save([])
