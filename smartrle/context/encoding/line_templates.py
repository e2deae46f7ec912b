"""
Line-template deduplication with run compression.

Every line value seen at least twice gets a code L<n>; consecutive
identical tokens collapse into R|<token>|<count>|. In the default pipeline
the block-RLE stage has already removed all terminators, so this stage
sees a single line; it still implements the general algorithm.

Literal lines that could be read back as a code, a run, or an escaped
literal are prefixed with a backslash.
"""

import re
from collections import Counter
from itertools import groupby

from smartrle.models import CompressionContext, SENTINEL
from smartrle.protocols import StageProtocol
from smartrle.context.encoding.escaping import wrap_code, run_length, run_chunks

_CODE_TOKEN = re.compile(re.escape(SENTINEL) + r'(L[0-9]+)' + re.escape(SENTINEL))
_RUN_TOKEN = re.compile(r'R\|(.*)\|([0-9]+)\|', re.DOTALL)

LITERAL_ESCAPE = '\\'


class LineTemplateStage(StageProtocol):
    """Code repeated lines and compress runs of identical tokens"""

    name = "line-templates"

    def encode(self, text: str, ctx: CompressionContext) -> str:
        lines = text.split('\n')
        counts = Counter(lines)

        codes = {}
        for line in lines:
            if counts[line] >= 2 and line not in codes:
                code = f"L{len(ctx.line_templates)}"
                ctx.line_templates[code] = line
                codes[line] = wrap_code(code)

        tokens = [codes[line] if line in codes else self._escape_literal(line) for line in lines]

        out = []
        for token, group in groupby(tokens):
            for run in run_chunks(sum(1 for _ in group)):
                if run >= 2:
                    out.append(f"R|{token}|{run}|")
                else:
                    out.append(token)
        return '\n'.join(out)

    def decode(self, text: str, ctx: CompressionContext) -> str:
        out = []
        for line in text.split('\n'):
            run = _RUN_TOKEN.fullmatch(line)
            count = run_length(run.group(2)) if run else None
            if count is not None:
                out.extend([self._decode_token(run.group(1), ctx)] * count)
            else:
                out.append(self._decode_token(line, ctx))
        return '\n'.join(out)

    @staticmethod
    def _escape_literal(line: str) -> str:
        if (line.startswith(LITERAL_ESCAPE) or line.startswith('R|')
                or _CODE_TOKEN.fullmatch(line)):
            return LITERAL_ESCAPE + line
        return line

    @staticmethod
    def _decode_token(token: str, ctx: CompressionContext) -> str:
        if token.startswith(LITERAL_ESCAPE):
            return token[1:]
        code = _CODE_TOKEN.fullmatch(token)
        if code:
            return ctx.line_templates.get(code.group(1), token)
        return token
