"""
Character-level run-length encoding.

A run of at least char_run_threshold identical characters becomes
R:<escaped-char>:<count>; and shorter runs are copied verbatim. In
verbatim text a backslash is doubled and an 'R' directly followed by ':'
is escaped, so literal text can never be read back as a run token.

Runs longer than MAX_RUN_LENGTH are split over several tokens; a token
whose count exceeds it decodes to its own text.
"""

import re

from smartrle.config import CodecConfig, DEFAULT_CONFIG
from smartrle.models import CompressionContext
from smartrle.protocols import StageProtocol
from smartrle.context.encoding.escaping import (
    escape_token, unescape_char, run_length, run_chunks
)

# Either an escaped verbatim character or a complete run token
_DECODE_TOKEN = re.compile(r'\\(.)|R:(?:\\(.)|(.)):([0-9]+);', re.DOTALL)


class CharRLEStage(StageProtocol):
    """Collapse long runs of a single character"""

    name = "char-rle"

    def __init__(self, config: CodecConfig = DEFAULT_CONFIG):
        self.threshold = config.char_run_threshold
        self._run = re.compile(r'(.)\1{%d,}' % (self.threshold - 1), re.DOTALL)

    def encode(self, text: str, ctx: CompressionContext) -> str:
        out = []
        pos = 0
        for match in self._run.finditer(text):
            char = match.group(1)
            out.append(self._verbatim(text[pos:match.start()], following=char))
            escaped = escape_token(char)
            out.extend(f"R:{escaped}:{n};" for n in run_chunks(match.end() - match.start()))
            pos = match.end()
        out.append(self._verbatim(text[pos:], following=''))
        return ''.join(out)

    def decode(self, text: str, ctx: CompressionContext) -> str:
        if 'R' not in text and '\\' not in text:
            return text
        return _DECODE_TOKEN.sub(self._expand, text)

    @staticmethod
    def _verbatim(segment: str, following: str) -> str:
        segment = segment.replace('\\', '\\\\').replace('R:', '\\R:')
        if following == ':' and segment.endswith('R'):
            segment = segment[:-1] + '\\R'
        return segment

    @staticmethod
    def _expand(match) -> str:
        escaped, run_escaped, run_char, count = match.groups()
        if escaped is not None:
            return unescape_char(escaped)
        count = run_length(count)
        if count is None:
            return match.group(0)
        char = unescape_char(run_escaped) if run_escaped is not None else run_char
        return char * count
