# autoradio/player/queue.py
"""
Simple in-memory play queue.

Stands in for a real player's queue: it exposes the read side the engine
needs (items + current_index) and the append action the engine calls when
it found a track. Used by the CLI and by tests.
"""

from __future__ import annotations
import threading
from typing import Dict, Iterable, List, Optional, Tuple

from autoradio.radio.models import QueueItem
from autoradio.radio.provider import EnqueueAction


class PlayQueue(EnqueueAction):
    """
    Usage:
      q = PlayQueue.from_pairs([("Boards of Canada", "Roygbiv")])
      engine.select_and_enqueue(q, settings, q)
      q.advance()
    """

    def __init__(self, items: Optional[Iterable[QueueItem]] = None, current_index: int = 0):
        self._items: List[QueueItem] = list(items or [])
        self.current_index = current_index
        self.thumbnails: Dict[Tuple[str, str], str] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, str]], current_index: Optional[int] = None) -> "PlayQueue":
        """(artist, track) pairs; current defaults to the last one."""
        items = [QueueItem(artist_name=a, track_name=t) for a, t in pairs]
        if current_index is None:
            current_index = max(len(items) - 1, 0)
        return cls(items, current_index=current_index)

    @property
    def items(self) -> Tuple[QueueItem, ...]:
        # tuple so callers get a snapshot, not our list
        with self._lock:
            return tuple(self._items)

    def __len__(self):
        return len(self._items)

    def current(self) -> Optional[QueueItem]:
        with self._lock:
            if 0 <= self.current_index < len(self._items):
                return self._items[self.current_index]
            return None

    # -------------------------
    # host actions
    # -------------------------
    def append(self, artist_name: str, track_name: str, thumbnail_url: str = "") -> None:
        with self._lock:
            self._items.append(QueueItem(artist_name=artist_name, track_name=track_name))
            if thumbnail_url:
                self.thumbnails[(artist_name, track_name)] = thumbnail_url

    def advance(self) -> bool:
        """Move to the next item. False when already on the last one."""
        with self._lock:
            if self.current_index + 1 >= len(self._items):
                return False
            self.current_index += 1
            return True
