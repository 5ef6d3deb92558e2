# autoradio/radio/provider.py
"""
Interfaces the engine talks to. Concrete providers live elsewhere
(autoradio/lastfm/client.py), the host queue lives in autoradio/player/queue.py.
"""

from abc import ABC, abstractmethod
from typing import List

from autoradio.radio.models import Artist, Track


class ProviderError(Exception):
    """A similarity lookup failed (network, API error payload, bad response, timeout)."""
    pass


class SimilarityProvider(ABC):
    """Source of similar tracks / artists. Implementations raise ProviderError on failure."""

    @abstractmethod
    def similar_tracks(self, artist_name: str, track_name: str, limit: int) -> List[Track]:
        """Tracks similar to the given one, best match first. May be empty."""
        pass

    @abstractmethod
    def similar_artists(self, artist_name: str) -> List[Artist]:
        """Similar artists, most relevant first."""
        pass

    @abstractmethod
    def top_tracks(self, artist_name: str) -> List[Track]:
        """An artist's most popular tracks, most popular first."""
        pass


class EnqueueAction(ABC):
    """Host side action that appends a track to the play queue."""

    @abstractmethod
    def append(self, artist_name: str, track_name: str, thumbnail_url: str) -> None:
        pass
