from dataclasses import dataclass, field
from typing import List, Optional, Literal
import yaml

from .chain import STAGE_NAMES
from .errors import ConfigError

STRATEGIES = ("split", "brute", "vectorized")

@dataclass
class ChainParams:
    stages: List[str] = field(default_factory=lambda: list(STAGE_NAMES))

@dataclass
class ResolverParams:
    strategy: Literal["split", "brute", "vectorized"] = "split"
    use_cache: bool = True              # locality cache for the brute scan
    chunk_size: int = 1_000_000         # values per numpy batch (vectorized)
    max_brute_values: Optional[int] = None   # None = no bound on enumeration
    require_ranges: bool = True         # odd seed count fails instead of skipping range mode

    def validate(self) -> "ResolverParams":
        if self.strategy not in STRATEGIES:
            raise ConfigError(f"unknown strategy {self.strategy!r}, expected one of: " + ", ".join(STRATEGIES))
        if int(self.chunk_size) <= 0:
            raise ConfigError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.max_brute_values is not None and int(self.max_brute_values) < 0:
            raise ConfigError(f"max_brute_values must not be negative, got {self.max_brute_values}")
        return self

@dataclass
class PipelineConfig:
    log_level: str = "WARNING"
    chain: ChainParams = field(default_factory=ChainParams)
    resolver: ResolverParams = field(default_factory=ResolverParams)

def load_config_yaml(path: str) -> PipelineConfig:
    """Load config from a YAML file into PipelineConfig dataclasses."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    def merge_dataclass(dc_cls, values):
        obj = dc_cls()
        for k, v in (values or {}).items():
            if hasattr(obj, k):
                setattr(obj, k, v)
        return obj

    chain_cfg = merge_dataclass(ChainParams, data.get("chain"))
    resolver_cfg = merge_dataclass(ResolverParams, data.get("resolver")).validate()

    cfg = PipelineConfig(
        log_level=str(data.get("log_level", "WARNING")).upper(),
        chain=chain_cfg,
        resolver=resolver_cfg,
    )
    return cfg
