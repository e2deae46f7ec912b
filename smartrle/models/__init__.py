"""
Data models for SmartRLE.

This module contains pure data structures with no business logic.
"""

from dataclasses import dataclass, field as dataclass_field
from typing import List, Dict, Optional, Tuple

__all__ = [
    'SENTINEL',
    'FIELD_TAGS',
    'SideTable',
    'ApacheTimestampTable',
    'CompressionContext',
    'CompressionStats',
]


# Wraps every generated code in the encoded stream
SENTINEL = '\x1f'

# Placeholder families, in header order
FIELD_TAGS = (
    'TS',    # generic "YYYY-MM-DD HH:MM:SS[,mmm]" timestamps
    'IP',    # IPv4 literals
    'UUID',
    'ID',    # numeric literals of 6+ digits
    'ADDR',  # combined-log client address
    'MTH',   # HTTP method
    'PATH',  # request path
    'ST',    # status code
    'REF',   # referer
    'UA',    # user agent
    'ATS',   # verbatim Apache timestamps (decode fallback only)
    'LIT',   # escaped literals
)


@dataclass
class SideTable:
    """Ordered, append-only list of original values with exact-repeat reuse."""
    values: List[str] = dataclass_field(default_factory=list)
    index: Dict[str, int] = dataclass_field(default_factory=dict, repr=False)

    def register(self, value: str) -> Tuple[int, bool]:
        """Return (index, is_new) for value, appending it on first sight."""
        if value in self.index:
            return self.index[value], False
        self.index[value] = len(self.values)
        self.values.append(value)
        return self.index[value], True

    def get(self, position: int) -> Optional[str]:
        if 0 <= position < len(self.values):
            return self.values[position]
        return None

    def load(self, values: List[str]):
        """Replace contents with values parsed from a header."""
        self.values = list(values)
        self.index = {}
        for i, value in enumerate(self.values):
            self.index.setdefault(value, i)

    def __len__(self):
        return len(self.values)


@dataclass
class ApacheTimestampTable:
    """Base epoch + one shared UTC offset + per-occurrence deltas (seconds)."""
    base_epoch: Optional[int] = None
    offset: Optional[str] = None  # e.g. "+0300"
    deltas: List[int] = dataclass_field(default_factory=list)

    @property
    def is_set(self) -> bool:
        return self.base_epoch is not None and self.offset is not None


@dataclass
class CompressionContext:
    """
    Per-call state for one compress or decompress invocation.

    Created empty, filled stage by stage (or from a parsed header) and
    discarded when the call returns. Never shared between calls.
    """
    tables: Dict[str, SideTable] = dataclass_field(
        default_factory=lambda: {tag: SideTable() for tag in FIELD_TAGS}
    )
    apache: ApacheTimestampTable = dataclass_field(default_factory=ApacheTimestampTable)

    # code -> literal, insertion order = discovery order
    patterns: Dict[str, str] = dataclass_field(default_factory=dict)
    line_templates: Dict[str, str] = dataclass_field(default_factory=dict)
    dictionary_codes: Dict[str, str] = dataclass_field(default_factory=dict)
    char_map: Dict[str, str] = dataclass_field(default_factory=dict)

    # Document metadata
    line_terminator: str = '\n'
    trailing_terminator: bool = False

    # Guardrail state
    path_mapping: bool = True
    referer_mapping: bool = True
    agent_mapping: bool = True
    header_growth: int = 0

    def table(self, tag: str) -> SideTable:
        return self.tables[tag]

    def disable_costly_mappings(self):
        self.path_mapping = False
        self.referer_mapping = False
        self.agent_mapping = False


@dataclass
class CompressionStats:
    """Statistics about one compression operation"""
    original_size: int
    compressed_size: int
    compression_ratio: float
    compression_time: float
    line_count: int
    pattern_count: int
    header_compressed: bool = False

    @property
    def ratio_percent(self) -> float:
        """Compressed size as a percentage of the original."""
        if self.original_size == 0:
            return 0.0
        return self.compressed_size / self.original_size * 100

    def __repr__(self):
        return (f"CompressionStats(ratio={self.compression_ratio:.2f}x, "
                f"time={self.compression_time:.3f}s, lines={self.line_count})")
