"""
Performance benchmarks for compression and decompression
"""

import pytest
import time

from smartrle.services import SmartRLECodec, run_benchmark


@pytest.mark.benchmark
class TestPerformanceBenchmarks:
    """Benchmark codec throughput"""

    def test_compression_throughput(self, access_logs, benchmark):
        """Benchmark compression throughput"""
        codec = SmartRLECodec()
        text = '\n'.join(access_logs * 10)

        artifact = benchmark(codec.compress, text)

        assert codec.decompress(artifact) == text
        throughput = len(access_logs) * 10 / benchmark.stats.stats.mean
        assert throughput > 100

    def test_decompression_speed(self, access_logs, benchmark):
        """Benchmark decompression of a prepared artifact"""
        codec = SmartRLECodec()
        text = '\n'.join(access_logs * 10)
        artifact = codec.compress(text)

        restored = benchmark(codec.decompress, artifact)

        assert restored == text
        assert benchmark.stats.stats.mean < 1.0

    @pytest.mark.parametrize("line_count", [100, 1000, 5000])
    def test_scalability(self, line_count):
        """Test compression scalability with different document sizes"""
        text = '\n'.join(
            f"2023-10-10 13:{i // 60 % 60:02d}:{i % 60:02d} INFO worker-{i % 8} processed job {1000000 + i}"
            for i in range(line_count)
        )
        codec = SmartRLECodec()

        start = time.perf_counter()
        artifact = codec.compress(text)
        elapsed = time.perf_counter() - start

        assert codec.decompress(artifact) == text
        throughput = line_count / elapsed
        assert throughput > 200, f"Throughput {throughput:.0f} lines/sec is too low"

    def test_varied_access_log(self):
        """Pattern search stays fast on a large log with many distinct fields"""
        text = '\n'.join(
            f'10.{i % 7}.{i % 251}.{i % 97} - - [10/Oct/2023:13:{i // 60 % 60:02d}:{i % 60:02d} +0300] '
            f'"GET /api/v{i % 3}/items/{i * 7919 % 100003}?page={i % 13} HTTP/1.1" {200 + i % 5} {i * 31 % 65536} '
            f'"https://example.com/ref/{i % 211}" "client/{i % 17}.{i % 5}"'
            for i in range(10000)
        )
        codec = SmartRLECodec()

        start = time.perf_counter()
        artifact = codec.compress(text)
        elapsed = time.perf_counter() - start

        assert codec.decompress(artifact) == text
        throughput = 10000 / elapsed
        assert throughput > 1000, f"Throughput {throughput:.0f} lines/sec is too low"

    def test_benchmark_harness_reports_sizes(self, access_logs):
        """The harness reports a correct round trip and sane sizes"""
        result = run_benchmark('\n'.join(access_logs * 5), warmup=False, zstd_level=3)

        assert result.correct
        assert result.smartrle_bytes < result.original_bytes
        assert 0 < result.gzip_percent < 100
        assert 0 < result.zstd_percent < 100
