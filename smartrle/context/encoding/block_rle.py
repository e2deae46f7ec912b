"""
Whole-line block run-length encoding.

Runs of identical lines collapse to B<count>:<escaped-line>; and every
other line is emitted as S<escaped-line>; . The output carries no line
terminators, so every later stage sees the document as one unit.
"""

import re
from itertools import groupby

from smartrle.config import CodecConfig, DEFAULT_CONFIG
from smartrle.models import CompressionContext
from smartrle.protocols import StageProtocol
from smartrle.context.encoding.escaping import (
    escape_token, unescape_token, run_length, run_chunks
)

_BLOCK_HEADER = re.compile(r'B([0-9]+):')

# Token body up to the first unescaped ';' (or end of text)
_BODY = re.compile(r'((?:[^\\;]|\\.)*)(;|\\?\Z)', re.DOTALL)


class BlockRLEStage(StageProtocol):
    """Run-length encoding where the repeated unit is a whole line"""

    name = "block-rle"

    def __init__(self, config: CodecConfig = DEFAULT_CONFIG):
        self.threshold = config.block_run_threshold

    def encode(self, text: str, ctx: CompressionContext) -> str:
        out = []
        for line, group in groupby(text.split('\n')):
            count = sum(1 for _ in group)
            escaped = escape_token(line)
            if count >= self.threshold:
                out.extend(f"B{n}:{escaped};" for n in run_chunks(count))
            else:
                out.extend([f"S{escaped};"] * count)
        return ''.join(out)

    def decode(self, text: str, ctx: CompressionContext) -> str:
        lines = []
        pos = 0
        n = len(text)
        while pos < n:
            block = _BLOCK_HEADER.match(text, pos)
            if block:
                count = run_length(block.group(1))
                body_start = block.end()
            elif text[pos] == 'S':
                count = 1
                body_start = pos + 1
            else:
                # Not a token: keep whatever is left as one literal line
                lines.append(unescape_token(text[pos:]))
                break
            body = _BODY.match(text, body_start)
            if count is None:
                # Count out of range: the token stays as one literal line
                lines.append(text[pos:body.end()])
            else:
                lines.extend([unescape_token(body.group(1))] * count)
            pos = body.end()
        return '\n'.join(lines)
