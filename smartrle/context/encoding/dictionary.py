"""
Static dictionary substitution.

A fixed table of common short English fragments, each mapped to a
3-character code. Matching is case-sensitive and whole-word only. The
table is shared and read-only; only the codes a document actually used
are written to its header.
"""

import re
from types import MappingProxyType

from smartrle.models import CompressionContext
from smartrle.protocols import StageProtocol
from smartrle.context.encoding.escaping import wrap_code, expand_codes

_WORDS = (
    "the", "and", "ing", "ion", "ent", "for", "you", "not",
    "are", "but", "had", "was", "one", "our", "her", "all",
)

# word -> code
STATIC_DICTIONARY = MappingProxyType({word: f"D{i:02d}" for i, word in enumerate(_WORDS)})

_WORD_PATTERN = re.compile(r'\b(' + '|'.join(_WORDS) + r')\b')


class DictionaryStage(StageProtocol):
    """Whole-word replacement of static dictionary entries"""

    name = "dictionary"

    def encode(self, text: str, ctx: CompressionContext) -> str:
        def substitute(match):
            word = match.group(1)
            code = STATIC_DICTIONARY[word]
            ctx.dictionary_codes[code] = word
            return wrap_code(code)

        return _WORD_PATTERN.sub(substitute, text)

    def decode(self, text: str, ctx: CompressionContext) -> str:
        return expand_codes(text, ctx.dictionary_codes)
