from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .config import PipelineConfig
from .chain import MappingChain
from .errors import InvalidRangeError
from .io_utils import Almanac
from .range_map import Interval
from .resolver import RangeResolver, ranges_to_intervals

logger = logging.getLogger(__name__)

@dataclass
class AlmanacResult:
    chain: MappingChain
    strategy: str
    # discrete mode; repeated seeds share one entry in seed_locations
    seed_locations: Dict[int, int]
    seed_count: int
    lowest_location_seeds: int
    # range mode (None when skipped)
    seed_ranges: Optional[List[Tuple[int, int]]] = None
    lowest_location_ranges: Optional[int] = None
    # interval set per domain, seed first
    stage_intervals: Dict[str, List[Interval]] = field(default_factory=dict)

    def summary(self) -> dict:
        return {
            "lowest_location_seeds": int(self.lowest_location_seeds),
            "lowest_location_ranges": (
                None if self.lowest_location_ranges is None else int(self.lowest_location_ranges)
            ),
            "strategy": self.strategy,
            "seed_locations": {str(k): int(v) for k, v in self.seed_locations.items()},
            "seed_count": int(self.seed_count),
            "range_count": 0 if self.seed_ranges is None else len(self.seed_ranges),
        }

class AlmanacPipeline:
    def __init__(self, config: Optional[PipelineConfig] = None):
        self.cfg = config or PipelineConfig()

    def build_chain(self, almanac: Almanac) -> MappingChain:
        return MappingChain.from_tables(almanac.tables, self.cfg.chain.stages)

    def run(self, almanac: Almanac) -> AlmanacResult:
        cfg = self.cfg
        chain = self.build_chain(almanac)
        resolver = RangeResolver(chain, cfg.resolver)

        # 1) Discrete seeds
        seed_locations = {s: chain.resolve(s) for s in almanac.seeds}
        lowest_seeds = resolver.minimum_over_seeds(almanac.seeds)
        logger.info("lowest location over %d seed(s): %d", len(almanac.seeds), lowest_seeds)

        result = AlmanacResult(
            chain=chain,
            strategy=cfg.resolver.strategy,
            seed_locations=seed_locations,
            seed_count=len(almanac.seeds),
            lowest_location_seeds=lowest_seeds,
        )

        # 2) Seed ranges
        try:
            ranges = almanac.seed_ranges()
        except InvalidRangeError:
            if cfg.resolver.require_ranges:
                raise
            logger.warning("seed row cannot be read as ranges, skipping range mode")
            return result

        # Interval sets per domain always come from interval splitting,
        # whichever strategy computes the minimum.
        per_stage = chain.trace_intervals(ranges_to_intervals(ranges))
        if cfg.resolver.strategy == "split":
            lowest_ranges = min(s for (s, _) in per_stage[-1])
        else:
            lowest_ranges = resolver.minimum_over_ranges(ranges)
        logger.info("lowest location over %d seed range(s): %d", len(ranges), lowest_ranges)

        result.seed_ranges = ranges
        result.lowest_location_ranges = lowest_ranges
        result.stage_intervals = dict(zip(chain.domains, per_stage))
        return result
