# autoradio/radio/engine.py
"""
Autoradio engine: picks the next track to append to a play queue.

Design notes:
- First tier: ask the provider for tracks similar to the last few queue items,
  merge, drop what's already queued, and draw one weighted by match score.
- Second tier (only if the first found nothing): pick a similar artist to the
  current track and draw one of its top tracks not already queued.
- Otherwise NotFound. Provider failures are logged, never raised to the caller.
- All knobs come from TuningParameters built per call, so the engine holds no
  per-call state and select() can run concurrently.
"""

from __future__ import annotations
import logging
import random
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from typing import Callable, List, Optional, Sequence, TypeVar

from autoradio.radio.models import (
    Found,
    NotFound,
    QueueItem,
    SelectionResult,
    Track,
    TuningParameters,
    compute_parameters,
)
from autoradio.radio.provider import EnqueueAction, ProviderError, SimilarityProvider
from autoradio.radio.sampling import truncate, uniform_sample, weighted_sample

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_CRAZINESS = 10


def is_queued(track: Track, queue_items: Sequence[QueueItem]) -> bool:
    """Exact (case-sensitive) artist + title match against the queue."""
    for item in queue_items:
        if item.artist_name == track.artist_name and item.track_name == track.name:
            return True
    return False


class AutoradioEngine:
    def __init__(
        self,
        provider: SimilarityProvider,
        *,
        provider_timeout: Optional[float] = 15.0,
        max_workers: int = 8,
        rng_seed: Optional[int] = None,
    ):
        """
        provider: where similar tracks / artists come from
        provider_timeout: seconds each wait on a provider call may take (None waits forever).
            Counted from when the engine starts waiting on that call, not from when the
            call was submitted, so a fanned-out call may run longer in total.
        max_workers: thread pool size for the per-seed fan-out
        rng_seed: optional seed for deterministic picks (for tests)
        """
        self.provider = provider
        self.provider_timeout = provider_timeout
        self._rng = random.Random(rng_seed)
        self._pool = ThreadPoolExecutor(max_workers=max(1, int(max_workers)), thread_name_prefix="autoradio")

    def close(self):
        # don't block on hung provider calls
        self._pool.shutdown(wait=False, cancel_futures=True)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    # -----------------------
    # public entry
    # -----------------------
    def select(self, queue, settings=None) -> SelectionResult:
        """
        Run the two-tier selection over a snapshot of `queue`
        (anything with .items and .current_index). Raises ProviderError.
        """
        items: List[QueueItem] = list(queue.items)
        current_index = queue.current_index
        craziness = getattr(settings, "autoradio_craziness", None)
        params = compute_parameters(DEFAULT_CRAZINESS if craziness is None else craziness)

        if not items or current_index is None or not (0 <= current_index < len(items)):
            return NotFound("Queue has no current track.")
        current = items[current_index]

        logger.debug("Autoradio params for %s - %s: %s", current.artist_name, current.track_name, params)

        track = self.aggregate(items, current_index, params)
        if track is not None:
            return Found(track=track, artist_name=track.artist_name, source="tracks")

        logger.info("No similar track found for the queue, falling back to similar artists of %s", current.artist_name)
        track = self.resolve_via_artist(current, items, params)
        if track is not None:
            return Found(track=track, artist_name=track.artist_name, source="artist")

        return NotFound()

    def select_and_enqueue(self, queue, settings, enqueue: EnqueueAction) -> SelectionResult:
        """
        select() then append the pick to the host queue.
        Failures are logged and reported through the returned result only.
        """
        try:
            result = self.select(queue, settings)
        except Exception as e:
            logger.error("Autoradio failed to select a track: %s", e, exc_info=True)
            return NotFound(f"Provider error: {e}")

        if isinstance(result, NotFound):
            logger.warning("Autoradio: %s", result.reason)
            return result

        track = result.track
        enqueue.append(result.artist_name, track.name, track.thumbnail_url)
        logger.info("Autoradio queued %s - %s (via %s)", result.artist_name, track.name, result.source)
        return result

    # -----------------------
    # first tier: similar tracks
    # -----------------------
    def aggregate(self, items: Sequence[QueueItem], current_index: int, params: TuningParameters) -> Optional[Track]:
        """
        Similar tracks for the current item and up to impacting_track_count items
        before it, merged, best score first, minus anything already queued.
        """
        lowest = max(0, current_index - params.impacting_track_count)
        seeds = [items[i] for i in range(current_index, lowest - 1, -1)]
        limit = params.similar_results_limit

        # fan out, then wait for every seed; one failure fails the whole step
        futures = [
            self._pool.submit(self.provider.similar_tracks, seed.artist_name, seed.track_name, limit)
            for seed in seeds
        ]
        merged: List[Track] = []
        try:
            for seed, fut in zip(seeds, futures):
                tracks = self._wait(fut, f"similar tracks for {seed.artist_name} - {seed.track_name}")
                if limit > 0:
                    tracks = tracks[:limit]
                merged.extend(tracks)
        except BaseException:
            # don't leave the rest of the lookups queued on the shared pool
            for fut in futures:
                fut.cancel()
            raise

        # stable sort, so equal scores keep seed order
        merged.sort(key=lambda t: t.match_score, reverse=True)
        candidates = [t for t in merged if not is_queued(t, items)]
        logger.debug("%d similar tracks from %d seeds, %d not queued", len(merged), len(seeds), len(candidates))

        if not candidates:
            return None
        return weighted_sample(truncate(candidates, params.track_deviation), self._rng)

    # -----------------------
    # second tier: similar artists
    # -----------------------
    def resolve_via_artist(self, current: QueueItem, items: Sequence[QueueItem], params: TuningParameters) -> Optional[Track]:
        """
        Random similar artist (within artist_deviation), then a random top track of
        theirs (within track_deviation) that isn't queued. Calls are sequential.
        """
        artists = self._call(self.provider.similar_artists, current.artist_name,
                             what=f"similar artists for {current.artist_name}")
        artist = uniform_sample(truncate(artists, params.artist_deviation), self._rng)
        if artist is None:
            return None

        top = self._call(self.provider.top_tracks, artist.name, what=f"top tracks for {artist.name}")
        candidates = [t for t in top if not is_queued(t, items)]
        logger.debug("Fallback artist %s: %d top tracks, %d not queued", artist.name, len(top), len(candidates))
        return uniform_sample(truncate(candidates, params.track_deviation), self._rng)

    # -----------------------
    # helpers
    # -----------------------
    def _call(self, fn: Callable[..., T], *args, what: str) -> T:
        return self._wait(self._pool.submit(fn, *args), what)

    def _wait(self, fut, what: str):
        try:
            return fut.result(timeout=self.provider_timeout)
        except FutureTimeout:
            fut.cancel()
            raise ProviderError(f"Timed out after {self.provider_timeout}s fetching {what}") from None


def select_and_enqueue_next_track(queue, settings, enqueue: EnqueueAction, provider: SimilarityProvider, **engine_kwargs) -> SelectionResult:
    """One-shot helper: builds a throwaway engine, selects, enqueues."""
    with AutoradioEngine(provider, **engine_kwargs) as engine:
        return engine.select_and_enqueue(queue, settings, enqueue)
