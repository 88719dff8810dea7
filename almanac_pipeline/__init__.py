from .errors import (
    AlmanacError, AlmanacParseError, ChainConfigError, InvalidRangeError, BruteForceLimitError,
    ConfigError
)
from .config import STRATEGIES, ChainParams, ResolverParams, PipelineConfig, load_config_yaml
from .range_map import (
    Interval, Rule, RuleCache, MappingTable,
    interval_from_length, contains, intersect, split_interval, normalize_intervals
)
from .chain import STAGE_NAMES, ChainCache, MappingChain, table_key
from .resolver import RangeResolver, ranges_to_intervals
from .pipeline import AlmanacPipeline, AlmanacResult
from .plotting import plot_stage_intervals
from .io_utils import Almanac, parse_almanac, load_almanac, save_result_json
