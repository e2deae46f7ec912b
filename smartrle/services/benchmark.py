"""
Benchmark and smoke harnesses

Benchmark: compress + decompress one document with SmartRLE, check the
round trip and compare sizes and timings against gzip and Zstandard.

Smoke: run the fixed sample strings through the codec and report ratios.
"""

import gzip
import time
from dataclasses import dataclass
from typing import List, Optional, Tuple

import zstandard as zstd

from smartrle.services.codec import SmartRLECodec

# (name, text) pairs fed by the smoke harness
SMOKE_SAMPLES = (
    ("Repeated characters",
     "aaaaaabbbbbbccccccdddddddeeeeeeffffffggggggghhhhhhiiiiiiijjjjjj"),
    ("Repeated sentence",
     "the quick brown fox jumps over the lazy dog. "
     "the quick brown fox jumps over the lazy dog. "
     "the quick brown fox jumps over the lazy dog."),
    ("ABAB pattern",
     "ab" * 31),
    ("Lorem ipsum",
     "Lorem ipsum dolor sit amet, consectetur adipiscing elit. "
     "Sed do eiusmod tempor incididunt ut labore et dolore magna aliqua."),
)


def percent(part: int, whole: int) -> float:
    if whole == 0:
        return 0.0
    return part * 100.0 / whole


@dataclass
class BenchmarkResult:
    """Sizes (bytes) and timings (ms) for one benchmarked document"""
    original_bytes: int
    smartrle_bytes: int
    gzip_bytes: int
    zstd_bytes: int
    compress_ms: float
    decompress_ms: float
    gzip_ms: float
    zstd_ms: float
    correct: bool

    @property
    def smartrle_percent(self) -> float:
        return percent(self.smartrle_bytes, self.original_bytes)

    @property
    def gzip_percent(self) -> float:
        return percent(self.gzip_bytes, self.original_bytes)

    @property
    def zstd_percent(self) -> float:
        return percent(self.zstd_bytes, self.original_bytes)


@dataclass
class SmokeResult:
    name: str
    original_length: int
    compressed_length: int
    correct: bool

    @property
    def ratio_percent(self) -> float:
        return percent(self.compressed_length, self.original_length)


def compress_with_gzip(data: bytes, level: int = 9) -> Tuple[bytes, float]:
    """Compress with gzip, returning (payload, elapsed ms)"""
    start = time.perf_counter()
    compressed = gzip.compress(data, compresslevel=level)
    return compressed, (time.perf_counter() - start) * 1000


def compress_with_zstd(data: bytes, level: int = 19) -> Tuple[bytes, float]:
    """Compress with Zstandard, returning (payload, elapsed ms)"""
    start = time.perf_counter()
    cctx = zstd.ZstdCompressor(level=level)
    compressed = cctx.compress(data)
    return compressed, (time.perf_counter() - start) * 1000


def run_benchmark(text: str, codec: Optional[SmartRLECodec] = None,
                  warmup: bool = True, zstd_level: int = 19) -> BenchmarkResult:
    """
    Time SmartRLE against gzip and Zstandard on one document

    Args:
        text: Document to compress
        codec: Codec to benchmark (default configuration if omitted)
        warmup: Run one untimed compression first
        zstd_level: Zstandard compression level
    """
    codec = codec or SmartRLECodec()
    data = text.encode('utf-8', errors='surrogatepass')

    if warmup:
        codec.compress(text)

    t0 = time.perf_counter()
    artifact = codec.compress(text)
    t1 = time.perf_counter()
    restored = codec.decompress(artifact)
    t2 = time.perf_counter()

    gzipped, gzip_ms = compress_with_gzip(data)
    zstd_data, zstd_ms = compress_with_zstd(data, zstd_level)

    return BenchmarkResult(
        original_bytes=len(data),
        smartrle_bytes=len(artifact.encode('utf-8', errors='surrogatepass')),
        gzip_bytes=len(gzipped),
        zstd_bytes=len(zstd_data),
        compress_ms=(t1 - t0) * 1000,
        decompress_ms=(t2 - t1) * 1000,
        gzip_ms=gzip_ms,
        zstd_ms=zstd_ms,
        correct=restored == text,
    )


def run_smoke(codec: Optional[SmartRLECodec] = None, verbose: bool = False) -> List[SmokeResult]:
    """Compress every smoke sample and check it decompresses unchanged"""
    codec = codec or SmartRLECodec()
    results = []
    for name, text in SMOKE_SAMPLES:
        artifact = codec.compress(text)
        result = SmokeResult(
            name=name,
            original_length=len(text),
            compressed_length=len(artifact),
            correct=codec.decompress(artifact) == text,
        )
        results.append(result)
        if verbose:
            mark = "✓" if result.correct else "✗"
            print(f"{mark} {name}: {result.original_length} → {result.compressed_length} chars "
                  f"({result.ratio_percent:.2f}%)")
    return results
