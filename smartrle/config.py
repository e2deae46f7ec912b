"""
Codec configuration.

All thresholds of the pipeline live here so the stages stay free of
magic numbers. The defaults define the standard artifact format.
"""

from dataclasses import dataclass, asdict, fields
from typing import Dict, Any

from smartrle.errors import ConfigError


@dataclass(frozen=True)
class CodecConfig:
    """Immutable settings shared by every call on a codec instance"""

    # Pattern substitution
    max_patterns: int = 30
    min_pattern_frequency: int = 5
    min_pattern_length: int = 5
    max_pattern_length: int = 12
    pattern_length_divisor: int = 40

    # Run-length thresholds
    block_run_threshold: int = 4
    char_run_threshold: int = 6

    # Header
    header_compress_threshold: int = 1024
    header_growth_budget: int = 8 * 1024
    gzip_level: int = 9

    # Distinct-value caps for combined-log fields
    path_cap: int = 5000
    referer_cap: int = 1000
    agent_cap: int = 1000

    # Aggressive character remap (off in the default pipeline)
    char_map: bool = False
    char_map_size: int = 5

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if f.type is bool or isinstance(value, bool):
                continue
            if not isinstance(value, int) or value < 0:
                raise ConfigError(f"{f.name} must be a non-negative integer, got {value!r}")
        if self.min_pattern_length < 1:
            raise ConfigError("min_pattern_length must be at least 1")
        if self.max_pattern_length < self.min_pattern_length:
            raise ConfigError("max_pattern_length must be >= min_pattern_length")
        if self.pattern_length_divisor < 1:
            raise ConfigError("pattern_length_divisor must be at least 1")
        if self.block_run_threshold < 2 or self.char_run_threshold < 2:
            raise ConfigError("run thresholds must be at least 2")
        if not 0 <= self.gzip_level <= 9:
            raise ConfigError(f"gzip_level must be 0-9, got {self.gzip_level}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CodecConfig':
        """Create from a settings dictionary, rejecting unknown keys"""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


DEFAULT_CONFIG = CodecConfig()
