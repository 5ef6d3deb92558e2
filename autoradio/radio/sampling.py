# autoradio/radio/sampling.py
"""sampling utils: deviation slicing, score-weighted pick, uniform pick"""

import math
import random
from bisect import bisect_right
from itertools import accumulate
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")


def truncate(items: Sequence[T], ratio: float) -> List[T]:
    """
    Keep the top of a ranked list. ratio 0 -> first item only, 1 -> everything.
    Ratios outside [0, 1] are clamped.
    """
    if not items:
        return []
    ratio = min(max(ratio, 0.0), 1.0)
    # half-up, not banker's rounding
    keep = math.floor((len(items) - 1) * ratio + 0.5) + 1
    return list(items[:keep])


def uniform_sample(items: Sequence[T], rng=random) -> Optional[T]:
    if not items:
        return None
    return items[rng.randrange(len(items))]


def weighted_sample(items: Sequence[T], rng=random) -> Optional[T]:
    """
    Pick one item with probability proportional to its match_score.
    If every score is 0 there is nothing to weight by, so pick uniformly.
    """
    if not items:
        return None
    cumulative = list(accumulate(max(getattr(it, "match_score", 0.0), 0.0) for it in items))
    total = cumulative[-1]
    if total <= 0:
        return uniform_sample(items, rng)
    r = rng.random() * total
    # first index whose running sum is past r, skips zero-weight entries
    idx = bisect_right(cumulative, r)
    return items[min(idx, len(items) - 1)]
