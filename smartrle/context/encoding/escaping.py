"""
Escaping helpers shared by the structural encoders and the header codec.

Two independent schemes:
- Token escaping (block RLE bodies, character-RLE run characters):
  newline -> \\n, carriage return -> \\r, and | : ; \\ are backslash-escaped.
- Header value escaping: backslash, comma and newline are escaped so that
  values can be comma-joined on a single KEY:value line.
"""

import re
from typing import List, Optional

from smartrle.models import SENTINEL

# Largest count a decoder expands from a single run token
MAX_RUN_LENGTH = 1 << 24

_TOKEN_ESCAPES = str.maketrans({
    '\\': '\\\\',
    '\n': '\\n',
    '\r': '\\r',
    '|': '\\|',
    ':': '\\:',
    ';': '\\;',
})

_UNESCAPES = {'n': '\n', 'r': '\r'}

_ESCAPED_CHAR = re.compile(r'\\(.)', re.DOTALL)

_VALUE_ESCAPES = str.maketrans({
    '\\': '\\\\',
    ',': '\\,',
    '\n': '\\n',
})


def escape_token(text: str) -> str:
    """Escape text for use inside a ';'-terminated token"""
    return text.translate(_TOKEN_ESCAPES)


def unescape_char(char: str) -> str:
    """Map the character following a backslash back to its original"""
    return _UNESCAPES.get(char, char)


def unescape_token(text: str) -> str:
    """Reverse escape_token(); a trailing lone backslash is kept literally"""
    if '\\' not in text:
        return text
    return _ESCAPED_CHAR.sub(lambda m: unescape_char(m.group(1)), text)


def escape_value(value: str) -> str:
    """Escape one header list item"""
    return value.translate(_VALUE_ESCAPES)


def join_values(values: List[str]) -> str:
    return ','.join(escape_value(v) for v in values)


def split_values(text: str) -> List[str]:
    """
    Split a comma-joined header value, honouring backslash escapes

    Examples:
        >>> split_values('a,b\\\\,c')
        ['a', 'b,c']
        >>> split_values('')
        ['']
    """
    items = []
    current = []
    i = 0
    n = len(text)
    while i < n:
        c = text[i]
        if c == '\\' and i + 1 < n:
            current.append(unescape_char(text[i + 1]))
            i += 2
            continue
        if c == ',':
            items.append(''.join(current))
            current = []
        else:
            current.append(c)
        i += 1
    items.append(''.join(current))
    return items


def wrap_code(code: str) -> str:
    """Surround a generated code with the sentinel on both sides"""
    return f"{SENTINEL}{code}{SENTINEL}"


def run_length(digits: str) -> Optional[int]:
    """
    Parse the count of a run token; None when it is out of range

    Examples:
        >>> run_length('12')
        12
        >>> run_length('9' * 20) is None
        True
    """
    if len(digits) > len(str(MAX_RUN_LENGTH)):
        return None
    count = int(digits)
    return count if count <= MAX_RUN_LENGTH else None


def run_chunks(count: int) -> List[int]:
    """Split a run into counts that run_length() accepts"""
    full, rest = divmod(count, MAX_RUN_LENGTH)
    return [MAX_RUN_LENGTH] * full + ([rest] if rest else [])


def expand_codes(text: str, table: dict) -> str:
    """
    Replace sentinel-wrapped codes found in table with their values.

    Sentinels are read strictly in pairs, left to right, so a code can never
    be confused with literal text that happens to sit between two codes.
    Codes missing from table, and an unpaired trailing sentinel, are kept.
    """
    if SENTINEL not in text or not table:
        return text
    parts = text.split(SENTINEL)
    last = len(parts) - 1
    out = []
    for i, part in enumerate(parts):
        if i % 2 == 0:
            out.append(part)
        elif i == last:
            out.append(SENTINEL + part)
        elif part in table:
            out.append(table[part])
        else:
            out.append(wrap_code(part))
    return ''.join(out)
