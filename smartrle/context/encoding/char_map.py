"""
Aggressive character remap (opt-in, off in the default pipeline).

Frequent multi-byte characters are swapped for single-byte control
characters that do not occur in the payload, scored by
frequency x (utf8_length - 1) so the largest byte savings win.
"""

from collections import Counter

from smartrle.config import CodecConfig, DEFAULT_CONFIG
from smartrle.models import CompressionContext, SENTINEL
from smartrle.protocols import StageProtocol

# Control characters usable as codes: not \t \n \r and never the sentinel
CODE_POOL = tuple(chr(b) for b in range(1, 32) if chr(b) not in '\t\n\r' + SENTINEL)


def _utf8_length(char: str) -> int:
    return len(char.encode('utf-8', errors='surrogatepass'))


class CharMapStage(StageProtocol):
    """Map frequent multi-byte characters onto unused control characters"""

    name = "char-map"

    def __init__(self, config: CodecConfig = DEFAULT_CONFIG):
        self.size = config.char_map_size

    def encode(self, text: str, ctx: CompressionContext) -> str:
        counts = Counter(text)
        free_codes = [code for code in CODE_POOL if code not in counts]

        scored = [
            (char, freq * (_utf8_length(char) - 1))
            for char, freq in counts.items()
            if freq >= 2 and _utf8_length(char) > 1
        ]
        scored.sort(key=lambda item: item[1], reverse=True)

        for (char, _), code in zip(scored[:self.size], free_codes):
            ctx.char_map[code] = char

        if not ctx.char_map:
            return text
        return text.translate({ord(char): code for code, char in ctx.char_map.items()})

    def decode(self, text: str, ctx: CompressionContext) -> str:
        if not ctx.char_map:
            return text
        return text.translate({ord(code): char for code, char in ctx.char_map.items()})
