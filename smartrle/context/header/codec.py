"""
Header Codec: serialize the compression context as KEY:value lines

Plain header layout (every line ends with a newline):

    [SMARTRLE_HEADER]
    VERSION:2
    EOL:LF
    TRAILING:0
    ATS_BASE:1696935336        (only when Apache timestamps were coded)
    ATS_OFFSET:+0300
    ATS_DELTAS:0,5,12
    IP:10.0.0.1,10.0.0.2       (one line per non-empty side table)
    DICT:D00=the,D01=and
    PAT:P00=S__IP,...
    LINE:L0=...
    CHARMAP:1=e9,2=20ac        (hex code points)

When the plain header reaches header_compress_threshold characters it is
gzipped and carried as base64 under the [SMARTRLE_HEADERGZ] marker.
"""

import base64
import binascii
import gzip
import re
import zlib
from typing import Dict, List

from smartrle.config import CodecConfig, DEFAULT_CONFIG
from smartrle.models import CompressionContext, FIELD_TAGS
from smartrle.context.encoding.escaping import join_values, split_values

HEADER_MARKER = '[SMARTRLE_HEADER]'
COMPRESSED_HEADER_MARKER = '[SMARTRLE_HEADERGZ]'
DATA_DELIMITER = '\n[DATA]\n'
FORMAT_VERSION = '2'

_OFFSET_PATTERN = re.compile(r'[+-][0-9]{4}')

# header key -> context attribute holding a code -> value mapping
_PAIR_KEYS = (
    ('DICT', 'dictionary_codes'),
    ('PAT', 'patterns'),
    ('LINE', 'line_templates'),
)


def _parse_int(value: str, default=None):
    try:
        return int(value)
    except ValueError:
        return default


class HeaderCodec:
    """Build and parse artifact headers"""

    def __init__(self, config: CodecConfig = DEFAULT_CONFIG):
        self.config = config

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    def render_plain(self, ctx: CompressionContext) -> str:
        """Plain-text header for ctx, before any self-compression"""
        eol = 'CRLF' if ctx.line_terminator == '\r\n' else 'LF'
        lines = [
            HEADER_MARKER,
            f"VERSION:{FORMAT_VERSION}",
            f"EOL:{eol}",
            f"TRAILING:{1 if ctx.trailing_terminator else 0}",
        ]

        if ctx.apache.is_set:
            lines.append(f"ATS_BASE:{ctx.apache.base_epoch}")
            lines.append(f"ATS_OFFSET:{ctx.apache.offset}")
            lines.append(f"ATS_DELTAS:{','.join(str(d) for d in ctx.apache.deltas)}")

        for tag in FIELD_TAGS:
            table = ctx.table(tag)
            if len(table):
                lines.append(f"{tag}:{join_values(table.values)}")

        for key, attr in _PAIR_KEYS:
            mapping = getattr(ctx, attr)
            if mapping:
                lines.append(f"{key}:{join_values([f'{code}={value}' for code, value in mapping.items()])}")

        if ctx.char_map:
            pairs = ','.join(f"{ord(code):x}={ord(char):x}" for code, char in ctx.char_map.items())
            lines.append(f"CHARMAP:{pairs}")

        return ''.join(line + '\n' for line in lines)

    def encode(self, ctx: CompressionContext) -> str:
        """
        Final header text for ctx

        Returns:
            The plain header, or its gzip+base64 form when the plain text
            is at least header_compress_threshold characters long
        """
        plain = self.render_plain(ctx)
        if len(plain) < self.config.header_compress_threshold:
            return plain

        packed = gzip.compress(plain.encode('utf-8', errors='surrogatepass'),
                               compresslevel=self.config.gzip_level, mtime=0)
        return f"{COMPRESSED_HEADER_MARKER}\nB64:{base64.b64encode(packed).decode('ascii')}\n"

    @staticmethod
    def is_compressed(header: str) -> bool:
        return header.startswith(COMPRESSED_HEADER_MARKER)

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    def decode(self, header: str, ctx: CompressionContext) -> CompressionContext:
        """Populate ctx from header text; malformed parts fall back to defaults"""
        if self.is_compressed(header):
            header = self._inflate(header)

        fields: Dict[str, str] = {}
        for line in header.split('\n'):
            key, sep, value = line.partition(':')
            if sep:
                fields[key] = value

        ctx.line_terminator = '\r\n' if fields.get('EOL') == 'CRLF' else '\n'
        ctx.trailing_terminator = fields.get('TRAILING') == '1'

        self._decode_apache(fields, ctx)

        for tag in FIELD_TAGS:
            if tag in fields:
                ctx.table(tag).load(split_values(fields[tag]))

        for key, attr in _PAIR_KEYS:
            if key in fields:
                getattr(ctx, attr).update(self._split_pairs(fields[key]))

        if 'CHARMAP' in fields:
            for pair in fields['CHARMAP'].split(','):
                code, _, char = pair.partition('=')
                code_point = _parse_int_hex(code)
                char_point = _parse_int_hex(char)
                if code_point is not None and char_point is not None:
                    ctx.char_map[chr(code_point)] = chr(char_point)

        return ctx

    @staticmethod
    def _inflate(header: str) -> str:
        _, _, rest = header.partition('\n')
        payload = rest.strip()
        if payload.startswith('B64:'):
            payload = payload[4:]
        try:
            return gzip.decompress(base64.b64decode(payload, validate=True)).decode('utf-8', errors='surrogatepass')
        except (binascii.Error, OSError, EOFError, zlib.error, UnicodeDecodeError):
            return ''

    @staticmethod
    def _decode_apache(fields: Dict[str, str], ctx: CompressionContext):
        base = _parse_int(fields.get('ATS_BASE', ''))
        offset = fields.get('ATS_OFFSET', '')
        if base is None or not _OFFSET_PATTERN.fullmatch(offset):
            return
        ctx.apache.base_epoch = base
        ctx.apache.offset = offset
        deltas = fields.get('ATS_DELTAS', '')
        if deltas:
            ctx.apache.deltas = [_parse_int(d, 0) for d in deltas.split(',')]

    @staticmethod
    def _split_pairs(value: str) -> List:
        pairs = []
        for item in split_values(value):
            code, sep, literal = item.partition('=')
            if sep:
                pairs.append((code, literal))
        return pairs


def _parse_int_hex(value: str):
    try:
        return int(value, 16)
    except ValueError:
        return None
