from __future__ import annotations
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple
import numpy as np

from .errors import InvalidRangeError

# Half-open: (start, end) covers start <= v < end
Interval = Tuple[int, int]
Segment = Tuple[Interval, int]

def interval_from_length(start: int, length: int) -> Interval:
    """Build [start, start+length) from a (start, length) pair. Length must be > 0."""
    start, length = int(start), int(length)
    if length <= 0:
        raise InvalidRangeError(f"range starting at {start} has non-positive length {length}")
    return (start, start + length)

def contains(interval: Interval, value: int) -> bool:
    return interval[0] <= value < interval[1]

def intersect(a: Interval, b: Interval) -> Optional[Interval]:
    s = max(a[0], b[0])
    e = min(a[1], b[1])
    if s < e:
        return (s, e)
    return None

def split_interval(interval: Interval, bounds: Interval) -> Tuple[List[Interval], Optional[Interval]]:
    """Split interval against bounds.

    Returns (outside, inside): the pieces left and right of bounds (zero, one
    or two of them) and the overlapping piece, or None when they are disjoint.
    """
    s, e = interval
    inside = intersect(interval, bounds)
    if inside is None:
        return ([interval] if s < e else []), None
    outside = []
    if s < inside[0]:
        outside.append((s, inside[0]))
    if inside[1] < e:
        outside.append((inside[1], e))
    return outside, inside

def normalize_intervals(intervals: Iterable[Interval]) -> List[Interval]:
    """Drop empty intervals, sort, and merge overlapping or touching ones."""
    xs = sorted((int(s), int(e)) for (s, e) in intervals if s < e)
    if not xs:
        return []
    merged = []
    cs, ce = xs[0]
    for s, e in xs[1:]:
        if s <= ce:
            ce = max(ce, e)
        else:
            merged.append((cs, ce))
            cs, ce = s, e
    merged.append((cs, ce))
    return merged

def subtract_intervals(pieces: List[Interval], cut: Interval) -> List[Interval]:
    out = []
    for piece in pieces:
        outside, _ = split_interval(piece, cut)
        out.extend(outside)
    return out


@dataclass(frozen=True)
class Rule:
    """One interval mapping: [source_start, source_start+length) -> destination_start + offset."""
    source_start: int
    length: int
    destination_start: int

    def __post_init__(self):
        if self.length <= 0:
            raise InvalidRangeError(
                f"rule at source {self.source_start} has non-positive length {self.length}"
            )

    @classmethod
    def from_row(cls, row: Sequence[int]) -> "Rule":
        """Build from the almanac row order: destination_start, source_start, length."""
        dest, src, length = row
        return cls(source_start=int(src), length=int(length), destination_start=int(dest))

    @property
    def source_end(self) -> int:
        return self.source_start + self.length

    @property
    def source_range(self) -> Interval:
        return (self.source_start, self.source_end)

    @property
    def destination_range(self) -> Interval:
        return (self.destination_start, self.destination_start + self.length)

    @property
    def offset(self) -> int:
        return self.destination_start - self.source_start

    def covers(self, value: int) -> bool:
        return contains(self.source_range, value)

    def apply(self, value: int) -> int:
        return self.destination_start + (value - self.source_start)


@dataclass
class RuleCache:
    """Last matched piece of one table, as (source_start, source_end, destination_start).

    Only a speed hint for monotonic scans; results never depend on it.
    """
    last: Optional[Tuple[int, int, int]] = None
    rule: Optional[Rule] = None

    def hit(self, value: int) -> Optional[int]:
        if self.last is None:
            return None
        s, e, d = self.last
        if s <= value < e:
            return d + (value - s)
        return None

    def store(self, source_start: int, source_end: int, destination_start: int, rule: Optional[Rule] = None):
        self.last = (source_start, source_end, destination_start)
        self.rule = rule

    def clear(self):
        self.last = None
        self.rule = None


@dataclass(frozen=True)
class MappingTable:
    """One domain transition, e.g. seed-to-soil.

    Rule sources are expected not to overlap. If they do, the first rule in
    table order wins, on the point, interval and array paths alike.
    """
    name: str
    rules: Tuple[Rule, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "rules", tuple(self.rules))
        owned = self.owned_segments()
        object.__setattr__(self, "_owned", owned)
        object.__setattr__(self, "_starts", [s for (s, _), _ in owned])

    @staticmethod
    def from_rows(name: str, rows: Iterable[Sequence[int]]) -> "MappingTable":
        return MappingTable(name, tuple(Rule.from_row(r) for r in rows))

    @property
    def source_domain(self) -> str:
        return self.name.split("-to-")[0]

    @property
    def destination_domain(self) -> str:
        return self.name.split("-to-")[-1]

    def lookup(self, source: int, cache: Optional[RuleCache] = None) -> Optional[Rule]:
        """Rule that owns source, or None. With a cache: cache first, then search."""
        if cache is None:
            for rule in self.rules:
                if rule.covers(source):
                    return rule
            return None
        if cache.rule is not None and cache.hit(source) is not None:
            return cache.rule
        # owned segments: disjoint, sorted, first-wins already applied
        i = bisect_right(self._starts, source) - 1
        if i >= 0:
            (s, e), rule = self._owned[i]
            if source < e:
                cache.store(s, e, rule.apply(s), rule)
                return rule
        return None

    def map(self, source: int, cache: Optional[RuleCache] = None) -> int:
        """Map one value; anything no rule covers maps to itself."""
        if cache is not None:
            hit = cache.hit(source)
            if hit is not None:
                return hit
        rule = self.lookup(source, cache)
        if rule is None:
            return source
        return rule.apply(source)

    def map_intervals(self, intervals: Iterable[Interval]) -> List[Interval]:
        """Map a set of intervals, splitting each one at every rule boundary it crosses."""
        res = []
        for iv in intervals:
            pending = [iv]
            for rule in self.rules:
                if not pending:
                    break
                nxt = []
                for piece in pending:
                    outside, inside = split_interval(piece, rule.source_range)
                    if inside is not None:
                        res.append((inside[0] + rule.offset, inside[1] + rule.offset))
                    nxt.extend(outside)
                pending = nxt
            # leftovers: identity
            res.extend(pending)
        return normalize_intervals(res)

    def map_array(self, values: np.ndarray) -> np.ndarray:
        x = np.asarray(values, dtype=np.int64)
        out = x.copy()
        done = np.zeros(x.shape, dtype=bool)
        for rule in self.rules:
            mask = (x >= rule.source_start) & (x < rule.source_end) & ~done
            out[mask] = x[mask] + rule.offset
            done |= mask
        return out

    def owned_segments(self) -> List[Tuple[Interval, Rule]]:
        """Disjoint source pieces, each with the rule that owns it under first-wins."""
        covered: List[Interval] = []
        owned = []
        for rule in self.rules:
            pieces = [rule.source_range]
            for c in covered:
                pieces = subtract_intervals(pieces, c)
            owned.extend((p, rule) for p in pieces)
            covered.append(rule.source_range)
        owned.sort(key=lambda t: t[0])
        return owned

    def segments(self) -> List[Segment]:
        """Disjoint (source interval, offset) pieces with first-wins overlap resolution."""
        return [(p, rule.offset) for (p, rule) in self.owned_segments()]

    def compose(self, other: "MappingTable", name: Optional[str] = None) -> "MappingTable":
        """Return a table equivalent to applying self then other.
        self: A -> B; other: B -> C; result: A -> C
        """
        mine = self.segments()
        theirs = other.segments()
        composed = []
        # A-values that self moves: push their B-image through other
        for (s, e), off in mine:
            pending = [(s + off, e + off)]
            for bounds, toff in theirs:
                nxt = []
                for piece in pending:
                    outside, inside = split_interval(piece, bounds)
                    if inside is not None:
                        composed.append((inside[0] - off, inside[1] - off, off + toff))
                    nxt.extend(outside)
                pending = nxt
            composed.extend((a - off, b - off, off) for (a, b) in pending)
        # A-values self leaves alone but other moves
        for bounds, toff in theirs:
            pending = [bounds]
            for own, _ in mine:
                pending = subtract_intervals(pending, own)
            composed.extend((a, b, toff) for (a, b) in pending)
        composed.sort()
        rules = [
            Rule(source_start=a, length=b - a, destination_start=a + off)
            for (a, b, off) in composed if off != 0
        ]
        if name is None:
            name = f"{self.source_domain}-to-{other.destination_domain}"
        return MappingTable(name, tuple(rules))
