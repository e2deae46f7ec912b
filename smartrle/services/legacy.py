"""
Best-effort decoder for header-less artifacts of the first SmartRLE format.

That format was not reversible: dictionary matching ignored case, and
pattern and character codes were never recorded. Only two steps can be
undone:
- R<char><count> runs, where count is the code point of the third char
- bare D00..D15 dictionary codes

Anything else is returned unchanged, so the output is lossy by nature.
"""

from smartrle.context.encoding.dictionary import STATIC_DICTIONARY

# code -> word
LEGACY_DICTIONARY = {code: word for word, code in STATIC_DICTIONARY.items()}


def decode_legacy_runs(text: str) -> str:
    out = []
    i = 0
    n = len(text)
    while i < n:
        if text[i] == 'R' and i + 2 < n:
            out.append(text[i + 1] * ord(text[i + 2]))
            i += 3
        else:
            out.append(text[i])
            i += 1
    return ''.join(out)


def decode_legacy_dictionary(text: str) -> str:
    for code, word in LEGACY_DICTIONARY.items():
        text = text.replace(code, word)
    return text


def legacy_decompress(artifact: str) -> str:
    """Decode an artifact without a header (lossy)"""
    if not artifact:
        return ""
    return decode_legacy_dictionary(decode_legacy_runs(artifact))
