"""
Services layer - application orchestration.
"""

from smartrle.services.codec import SmartRLECodec, compress, decompress
from smartrle.services.legacy import legacy_decompress
from smartrle.services.benchmark import (
    BenchmarkResult,
    SmokeResult,
    SMOKE_SAMPLES,
    run_benchmark,
    run_smoke,
)

# Provide consistent naming
Codec = SmartRLECodec

__all__ = [
    'SmartRLECodec',
    'compress',
    'decompress',
    'legacy_decompress',
    'BenchmarkResult',
    'SmokeResult',
    'SMOKE_SAMPLES',
    'run_benchmark',
    'run_smoke',
    # Aliases
    'Codec',
]
