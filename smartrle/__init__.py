"""
SmartRLE - Reversible, Domain-Aware Compression for Log Files

Extracts repeating structure from log text (combined access-log fields,
timestamps, addresses, identifiers, repeated lines and substrings) and
encodes it compactly, with a side-channel header that restores the exact
original text.

MCP Architecture:
- Models: Pure data structures (CompressionContext, SideTable, CompressionStats)
- Protocols: Interface contracts (StageProtocol)
- Context: Domain implementations (Normalization, Encoding, Header)
- Services: Application orchestration (SmartRLECodec, benchmark harness)
- CLI: User interface (compress, decompress, benchmark, smoke commands)
"""

__version__ = "1.0.0"
__license__ = "MIT"

# Core MCP layers
from smartrle import models, protocols
from smartrle.config import CodecConfig, DEFAULT_CONFIG
from smartrle.errors import SmartRLEError, ConfigError, InputTypeError
from smartrle.models import CompressionContext, CompressionStats
from smartrle.services import SmartRLECodec, Codec, compress, decompress, legacy_decompress

__all__ = [
    # MCP Architecture
    'models',
    'protocols',
    'CodecConfig',
    'DEFAULT_CONFIG',
    'SmartRLEError',
    'ConfigError',
    'InputTypeError',
    'CompressionContext',
    'CompressionStats',
    'SmartRLECodec',
    'Codec',
    'compress',
    'decompress',
    'legacy_decompress',
]
