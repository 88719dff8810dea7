from __future__ import annotations
import logging
from dataclasses import dataclass
from functools import reduce
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple
import numpy as np

from .errors import ChainConfigError
from .range_map import Interval, MappingTable, RuleCache, normalize_intervals

logger = logging.getLogger(__name__)

STAGE_NAMES: Tuple[str, ...] = (
    "seed-to-soil",
    "soil-to-fertilizer",
    "fertilizer-to-water",
    "water-to-light",
    "light-to-temperature",
    "temperature-to-humidity",
    "humidity-to-location",
)

ChainCache = Tuple[RuleCache, ...]

def table_key(name: str) -> str:
    """'seed-to-soil map' -> 'seed-to-soil'."""
    name = name.strip()
    if name.endswith(" map"):
        name = name[: -len(" map")].rstrip()
    return name

def _check_links(stage_names: Sequence[str]):
    for prev, cur in zip(stage_names, stage_names[1:]):
        if prev.split("-to-")[-1] != cur.split("-to-")[0]:
            raise ChainConfigError(f"stage {cur!r} does not continue from {prev!r}")

@dataclass(frozen=True)
class MappingChain:
    """Fixed sequence of tables, seed -> ... -> location.

    Names are only used while assembling; after that stages are positional.
    """
    stages: Tuple[MappingTable, ...]

    @staticmethod
    def from_tables(
        tables: Mapping[str, MappingTable],
        stage_names: Sequence[str] = STAGE_NAMES,
    ) -> "MappingChain":
        if not stage_names:
            raise ChainConfigError("no stages configured")
        stage_names = [table_key(n) for n in stage_names]
        _check_links(stage_names)
        by_key = {table_key(k): t for k, t in tables.items()}
        missing = [n for n in stage_names if n not in by_key]
        if missing:
            raise ChainConfigError("missing stage table(s): " + ", ".join(missing))
        stages = tuple(by_key[n] for n in stage_names)
        logger.debug(
            "assembled chain %s (%s rules)",
            " -> ".join(stage_names),
            sum(len(t.rules) for t in stages),
        )
        return MappingChain(stages)

    @property
    def domains(self) -> List[str]:
        return [self.stages[0].source_domain] + [t.destination_domain for t in self.stages]

    def new_cache(self) -> ChainCache:
        """One locality cache cell per stage, owned by whoever runs the scan."""
        return tuple(RuleCache() for _ in self.stages)

    def resolve(self, seed: int, cache: Optional[ChainCache] = None) -> int:
        value = seed
        if cache is None:
            for table in self.stages:
                value = table.map(value)
        else:
            for table, cell in zip(self.stages, cache):
                value = table.map(value, cell)
        return value

    def trace(self, seed: int) -> List[int]:
        """Value in every domain, seed first and location last."""
        values = [seed]
        for table in self.stages:
            values.append(table.map(values[-1]))
        return values

    def resolve_array(self, values: np.ndarray) -> np.ndarray:
        x = np.asarray(values, dtype=np.int64)
        for table in self.stages:
            x = table.map_array(x)
        return x

    def trace_intervals(self, intervals: Iterable[Interval]) -> List[List[Interval]]:
        """Interval set before the first stage and after each stage."""
        current = normalize_intervals(intervals)
        out = [current]
        for table in self.stages:
            current = table.map_intervals(current)
            logger.debug("%s: %d interval(s)", table.name, len(current))
            out.append(current)
        return out

    def resolve_intervals(self, intervals: Iterable[Interval]) -> List[Interval]:
        return self.trace_intervals(intervals)[-1]

    def compose(self) -> MappingTable:
        """Fold every stage into one seed-to-location table."""
        return reduce(lambda a, b: a.compose(b), self.stages)
