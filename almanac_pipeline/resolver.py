from __future__ import annotations
import logging
from typing import Iterable, List, Optional, Sequence, Tuple
import numpy as np

from .chain import MappingChain
from .config import ResolverParams
from .errors import BruteForceLimitError, ConfigError, InvalidRangeError
from .range_map import Interval, interval_from_length

logger = logging.getLogger(__name__)

SeedRange = Tuple[int, int]  # (start, length)

def ranges_to_intervals(ranges: Iterable[SeedRange]) -> List[Interval]:
    """Validate (start, length) pairs up front and turn them into half-open intervals."""
    intervals = [interval_from_length(start, length) for (start, length) in ranges]
    if not intervals:
        raise InvalidRangeError("no seed ranges given")
    return intervals

class RangeResolver:
    """Lowest final value over discrete seeds or seed ranges.

    Strategies:
      split       propagate whole intervals, splitting at rule boundaries
      brute       resolve every integer, optionally with a per-scan locality cache
      vectorized  resolve every integer in numpy batches
    All three return the same minimum.
    """

    def __init__(self, chain: MappingChain, params: Optional[ResolverParams] = None):
        self.chain = chain
        self.params = (params or ResolverParams()).validate()

    def minimum_over_seeds(self, seeds: Sequence[int]) -> int:
        if not len(seeds):
            raise InvalidRangeError("no seeds given")
        return min(self.chain.resolve(int(s)) for s in seeds)

    def minimum_over_ranges(self, ranges: Sequence[SeedRange]) -> int:
        intervals = ranges_to_intervals(ranges)
        strategy = self.params.strategy
        if strategy == "split":
            return self._minimum_split(intervals)
        if strategy == "brute":
            return self._minimum_brute(intervals)
        if strategy == "vectorized":
            return self._minimum_vectorized(intervals)
        raise ConfigError(f"unknown strategy {strategy!r}")

    def _minimum_split(self, intervals: List[Interval]) -> int:
        final = self.chain.resolve_intervals(intervals)
        return min(s for (s, _) in final)

    def _check_bound(self, intervals: List[Interval]):
        total = sum(e - s for (s, e) in intervals)
        bound = self.params.max_brute_values
        if bound is not None and total > bound:
            raise BruteForceLimitError(f"{total} seed values exceed the enumeration bound {bound}")
        logger.debug("enumerating %d seed value(s) in %d range(s)", total, len(intervals))

    def _minimum_brute(self, intervals: List[Interval]) -> int:
        self._check_bound(intervals)
        best = None
        for (s, e) in intervals:
            # fresh cache per range: it assumes one increasing scan
            cache = self.chain.new_cache() if self.params.use_cache else None
            for seed in range(s, e):
                loc = self.chain.resolve(seed, cache)
                if best is None or loc < best:
                    best = loc
        return best

    def _minimum_vectorized(self, intervals: List[Interval]) -> int:
        self._check_bound(intervals)
        chunk = max(1, int(self.params.chunk_size))
        best = None
        for (s, e) in intervals:
            for lo in range(s, e, chunk):
                hi = min(e, lo + chunk)
                locs = self.chain.resolve_array(np.arange(lo, hi, dtype=np.int64))
                m = int(locs.min())
                if best is None or m < best:
                    best = m
        return best
