"""
Frequency-driven pattern substitution.

Works on the flattened block-RLE stream: for each substring length from
the minimum up to min(max, max(min, len/divisor)), substrings occurring at
least min_pattern_frequency times become numbered pattern codes (P00, P01,
...) in order of descending frequency, until the per-document cap is hit.
A candidate whose non-overlapping occurrences have dropped below the
minimum through earlier substitutions is skipped and gets no code.

Candidates never overlap an existing sentinel-wrapped code, so every code
in the stream stays a well-formed pair and decoding is a single pass.
"""

from collections import Counter
from typing import List

from smartrle.config import CodecConfig, DEFAULT_CONFIG
from smartrle.models import CompressionContext, SENTINEL
from smartrle.protocols import StageProtocol
from smartrle.context.encoding.escaping import expand_codes


class PatternStage(StageProtocol):
    """Replace frequent substrings with sentinel-wrapped P<nn> codes"""

    name = "patterns"

    def __init__(self, config: CodecConfig = DEFAULT_CONFIG):
        self.config = config

    def max_length(self, text: str) -> int:
        cfg = self.config
        return min(cfg.max_pattern_length,
                   max(cfg.min_pattern_length, len(text) // cfg.pattern_length_divisor))

    def encode(self, text: str, ctx: CompressionContext) -> str:
        cfg = self.config
        max_length = self.max_length(text)
        # Even indexes are literal text, odd indexes are existing codes
        parts = text.split(SENTINEL)

        for length in range(cfg.min_pattern_length, max_length + 1):
            if len(ctx.patterns) >= cfg.max_patterns:
                break

            counts = self._count_substrings(parts[::2], length)
            candidates = [s for s, freq in counts.items() if freq >= cfg.min_pattern_frequency]
            # Stable sort keeps first-seen order between equal frequencies
            candidates.sort(key=lambda s: counts[s], reverse=True)

            # Candidates hold no sentinel, so no match crosses a join point
            literal = SENTINEL.join(parts[::2])
            for candidate in candidates:
                if len(ctx.patterns) >= cfg.max_patterns:
                    break
                # Earlier substitutions may have consumed most occurrences
                if literal.count(candidate) < cfg.min_pattern_frequency:
                    continue
                code = f"P{len(ctx.patterns):02d}"
                ctx.patterns[code] = candidate
                parts = self._substitute(parts, candidate, code)
                literal = SENTINEL.join(parts[::2])
        return SENTINEL.join(parts)

    def decode(self, text: str, ctx: CompressionContext) -> str:
        return expand_codes(text, ctx.patterns)

    @staticmethod
    def _count_substrings(segments: List[str], length: int) -> Counter:
        counts = Counter()
        for segment in segments:
            if len(segment) >= length:
                counts.update(segment[i:i + length] for i in range(len(segment) - length + 1))
        return counts

    @staticmethod
    def _substitute(parts: List[str], candidate: str, code: str) -> List[str]:
        """Replace candidate in every literal part, keeping codes at odd indexes"""
        out = []
        for i, part in enumerate(parts):
            if i % 2 or candidate not in part:
                out.append(part)
                continue
            pieces = part.split(candidate)
            out.append(pieces[0])
            for piece in pieces[1:]:
                out.append(code)
                out.append(piece)
        return out
