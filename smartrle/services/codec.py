"""
SmartRLE Codec: reversible, domain-aware compression for log text

Pipeline (compress):
1. Normalize structured fields into placeholders + side tables
2. Static dictionary substitution
3. Block RLE over whole lines
4. Frequent-pattern substitution
5. Line templates with run coding
6. Character RLE
7. Character map (opt-in)

The artifact is header + "\\n[DATA]\\n" + payload, where the header
carries every table needed to undo the stages in mirrored order.
"""

import time
from typing import List, Optional, Tuple

from smartrle.config import CodecConfig, DEFAULT_CONFIG
from smartrle.errors import InputTypeError
from smartrle.models import CompressionContext, CompressionStats
from smartrle.protocols import StageProtocol
from smartrle.context.normalization import FieldNormalizer
from smartrle.context.encoding import (
    DictionaryStage, BlockRLEStage, PatternStage,
    LineTemplateStage, CharRLEStage, CharMapStage,
)
from smartrle.context.header import HeaderCodec, DATA_DELIMITER
from smartrle.services.legacy import legacy_decompress


def _utf8_size(text: str) -> int:
    return len(text.encode('utf-8', errors='surrogatepass'))


class SmartRLECodec:
    """
    Compress and decompress log text

    The codec only holds configuration; every call builds its own
    CompressionContext, so one instance can serve concurrent callers.
    """

    def __init__(self, config: Optional[CodecConfig] = None, **overrides):
        if config is None:
            config = CodecConfig(**overrides) if overrides else DEFAULT_CONFIG
        elif overrides:
            config = CodecConfig.from_dict({**config.to_dict(), **overrides})
        self.config = config

        self.normalizer = FieldNormalizer(config)
        self.header_codec = HeaderCodec(config)

        self.stages: List[StageProtocol] = [
            self.normalizer,
            DictionaryStage(),
            BlockRLEStage(config),
            PatternStage(config),
            LineTemplateStage(),
            CharRLEStage(config),
        ]
        if config.char_map:
            self.stages.append(CharMapStage(config))

        # Character map decoding is a no-op unless the header carries CHARMAP
        self.decode_stages: List[StageProtocol] = list(reversed(self.stages))
        if not config.char_map:
            self.decode_stages.insert(0, CharMapStage(config))

    def compress(self, text: str, verbose: bool = False) -> str:
        """
        Compress text into a self-describing artifact

        Args:
            text: Log text (any line terminator style)
            verbose: Print stage-by-stage progress

        Returns:
            Artifact string; "" for empty input
        """
        artifact, _ = self._compress(text, verbose)
        return artifact

    def compress_with_stats(self, text: str, verbose: bool = False) -> Tuple[str, CompressionStats]:
        """Compress text and report sizes, ratio and timing"""
        start = time.perf_counter()
        artifact, ctx = self._compress(text, verbose)
        elapsed = time.perf_counter() - start

        original_size = _utf8_size(text)
        compressed_size = _utf8_size(artifact)
        stats = CompressionStats(
            original_size=original_size,
            compressed_size=compressed_size,
            compression_ratio=original_size / compressed_size if compressed_size > 0 else 0.0,
            compression_time=elapsed,
            line_count=self._line_count(text),
            pattern_count=len(ctx.patterns) if ctx else 0,
            header_compressed=HeaderCodec.is_compressed(artifact),
        )

        if verbose:
            print(f"\n✅ Compression complete!")
            print(f"  • Original size: {stats.original_size:,} bytes")
            print(f"  • Compressed size: {stats.compressed_size:,} bytes ({stats.ratio_percent:.2f}%)")
            print(f"  • Compression ratio: {stats.compression_ratio:.2f}x")
            print(f"  • Time: {stats.compression_time:.3f}s")

        return artifact, stats

    def _compress(self, text: str, verbose: bool) -> Tuple[str, Optional[CompressionContext]]:
        if not isinstance(text, str):
            raise InputTypeError(f"compress() expects str, got {type(text).__name__}")
        if not text:
            return "", None

        ctx = CompressionContext()
        body = self._split_terminators(text, ctx)

        if verbose:
            print(f"🗜️  Starting compression of {self._line_count(text)} lines...")

        total = len(self.stages)
        for step, stage in enumerate(self.stages, 1):
            body = stage.encode(body, ctx)
            if verbose:
                print(f"  [{step}/{total}] {stage.name}: {len(body):,} chars")

        if verbose:
            if not ctx.path_mapping:
                print(f"     Guardrail: path/referer/agent mapping disabled "
                      f"(header growth {ctx.header_growth:,} chars)")
            print(f"     Patterns: {len(ctx.patterns)}, line templates: {len(ctx.line_templates)}")

        header = self.header_codec.encode(ctx)
        if verbose and HeaderCodec.is_compressed(header):
            print(f"     Header self-compressed to {len(header):,} chars")

        return header + DATA_DELIMITER + body, ctx

    def decompress(self, artifact: str, verbose: bool = False) -> str:
        """
        Restore the exact original text from an artifact

        Artifacts without the data delimiter are handed to the lossy
        legacy decoder.
        """
        if not isinstance(artifact, str):
            raise InputTypeError(f"decompress() expects str, got {type(artifact).__name__}")
        if not artifact:
            return ""

        header, sep, body = artifact.partition(DATA_DELIMITER)
        if not sep:
            if verbose:
                print("⚠️  No header found, using legacy decoder (lossy)")
            return legacy_decompress(artifact)

        ctx = self.header_codec.decode(header, CompressionContext())

        total = len(self.decode_stages)
        for step, stage in enumerate(self.decode_stages, 1):
            body = stage.decode(body, ctx)
            if verbose:
                print(f"  [{step}/{total}] undo {stage.name}: {len(body):,} chars")

        return self._restore_terminators(body, ctx)

    def read_header(self, artifact: str) -> Optional[CompressionContext]:
        """Parse only the header of an artifact; None when it has none"""
        header, sep, _ = artifact.partition(DATA_DELIMITER)
        if not sep:
            return None
        return self.header_codec.decode(header, CompressionContext())

    @staticmethod
    def _split_terminators(text: str, ctx: CompressionContext) -> str:
        newlines = text.count('\n')
        if newlines and text.count('\r\n') == newlines:
            ctx.line_terminator = '\r\n'
            text = text.replace('\r\n', '\n')
        if text.endswith('\n'):
            ctx.trailing_terminator = True
            text = text[:-1]
        return text

    @staticmethod
    def _restore_terminators(body: str, ctx: CompressionContext) -> str:
        if ctx.trailing_terminator:
            body += '\n'
        if ctx.line_terminator == '\r\n':
            body = body.replace('\n', '\r\n')
        return body

    @staticmethod
    def _line_count(text: str) -> int:
        if not text:
            return 0
        return text.count('\n') + (0 if text.endswith('\n') else 1)


_default_codec = None


def _codec() -> SmartRLECodec:
    global _default_codec
    if _default_codec is None:
        _default_codec = SmartRLECodec()
    return _default_codec


def compress(text: str) -> str:
    """Compress text with the default configuration"""
    return _codec().compress(text)


def decompress(artifact: str) -> str:
    """Decompress an artifact produced by compress()"""
    return _codec().decompress(artifact)
