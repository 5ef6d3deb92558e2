# autoradio/radio/models.py
"""
Small models shared by the autoradio engine, the providers and the queue.

Last.fm returns slightly different shapes depending on the endpoint:
- track.getSimilar items carry a "match" score and an {"name": ...} artist
- artist.getTopTracks items have no match score at all
- artist.getSimilar items carry "match" but no tracks

Track / Artist normalize what the engine needs and keep the original payload
in `raw` for everything else. They are frozen: the engine only reads them.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Union


def _score(value: Any) -> float:
    """Last.fm sends match scores as strings ("0.42"). Bad or negative values count as 0."""
    try:
        score = float(value)
    except (TypeError, ValueError):
        return 0.0
    if score != score or score < 0:  # NaN or negative
        return 0.0
    return score


def _artist_name(value: Any) -> str:
    # "artist" is an object on most endpoints but a plain string on a few
    if isinstance(value, dict):
        return value.get("name") or value.get("#text") or ""
    if isinstance(value, str):
        return value
    return ""


def _thumbnail(images: Any) -> str:
    if isinstance(images, list) and images and isinstance(images[0], dict):
        return images[0].get("#text") or ""
    return ""


@dataclass(frozen=True)
class Track:
    """
    A candidate track as returned by a similarity provider.
    match_score is the provider's similarity weight (0-1 for Last.fm).
    """
    artist_name: str
    name: str
    match_score: float = 0.0
    thumbnail_url: str = ""
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def key(self):
        return (self.artist_name, self.name)

    @classmethod
    def from_lastfm(cls, payload: Dict[str, Any]) -> "Track":
        return cls(
            artist_name=_artist_name(payload.get("artist")),
            name=payload.get("name") or "",
            match_score=_score(payload.get("match")),
            thumbnail_url=_thumbnail(payload.get("image")),
            raw=payload,
        )


@dataclass(frozen=True)
class Artist:
    name: str
    match_score: float = 0.0
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_lastfm(cls, payload: Dict[str, Any]) -> "Artist":
        return cls(
            name=payload.get("name") or "",
            match_score=_score(payload.get("match")),
            raw=payload,
        )


@dataclass(frozen=True)
class QueueItem:
    """Read-only projection of one entry of the host's play queue."""
    artist_name: str
    track_name: str

    def key(self):
        return (self.artist_name, self.track_name)


@dataclass(frozen=True)
class TuningParameters:
    """
    Per-call knobs derived from the craziness score.

    track_deviation / artist_deviation: how far down a ranked list we sample
    impacting_track_count: how many queue items (before the current one) seed the search
    similar_results_limit: how many similar tracks we ask for per seed
    """
    track_deviation: float
    impacting_track_count: int
    similar_results_limit: int
    artist_deviation: float


def compute_parameters(craziness: Union[int, float] = 10) -> TuningParameters:
    """
    Map the user-facing craziness knob (roughly 0-100) onto the tuning values.

    track_deviation is the raw score, not score / 100 like artist_deviation.
    Anything above 1 just means "whole list" once truncate() clamps it.
    """
    return TuningParameters(
        track_deviation=craziness,
        impacting_track_count=int(101 - craziness),
        similar_results_limit=int(craziness),
        artist_deviation=craziness / 100,
    )


# -------------------------
# selection result
# -------------------------
@dataclass(frozen=True)
class Found:
    track: Track
    artist_name: str
    source: str  # "tracks" or "artist"


@dataclass(frozen=True)
class NotFound:
    reason: str = "No similar track or artist were found."


SelectionResult = Union[Found, NotFound]


# -------------------------
# small helpers
# -------------------------
def _as_list(items: Any) -> List[Any]:
    # Last.fm collapses single-result lists into a bare object
    if items is None:
        return []
    if isinstance(items, dict):
        return [items]
    return list(items)


def normalize_tracks(items: Optional[Iterable[Dict[str, Any]]]) -> List[Track]:
    """Raw Last.fm track objects -> Track list. Entries without a name are dropped."""
    out = []
    for it in _as_list(items):
        if not isinstance(it, dict):
            continue
        tr = Track.from_lastfm(it)
        if tr.name and tr.artist_name:
            out.append(tr)
    return out


def normalize_artists(items: Optional[Iterable[Dict[str, Any]]]) -> List[Artist]:
    out = []
    for it in _as_list(items):
        if not isinstance(it, dict):
            continue
        ar = Artist.from_lastfm(it)
        if ar.name:
            out.append(ar)
    return out
