"""
Field Normalizer: replace structured substrings with indexed placeholders

Each line is processed in a fixed order:
0. Escape literals: sentinel characters and text that already looks like
   a placeholder move into the LIT table (__LIT<n>__)
1. Combined access-log records: address, method, path, status, referer
   and user agent are deduplicated into their own side tables
2. Apache bracketed timestamps: stored as deltas from one base epoch
3. Generic extractors: timestamps, IPv4, UUIDs, numbers of 6+ digits

Every extractor only fires after a non-word character, so the text in
front of a placeholder can never combine with it into another one. That
keeps denormalization a single left-to-right pass.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from smartrle.config import CodecConfig, DEFAULT_CONFIG
from smartrle.models import CompressionContext, FIELD_TAGS, SENTINEL
from smartrle.protocols import StageProtocol
from smartrle.context.encoding.escaping import escape_value

MONTHS = ('Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
          'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec')
_MONTH_INDEX = {name: i + 1 for i, name in enumerate(MONTHS)}

_TAGS = '|'.join(FIELD_TAGS)

PLACEHOLDER_PATTERN = re.compile(r'__(' + _TAGS + r')([0-9]+)__')

# Placeholder look-alikes and sentinels in raw text. A look-alike prefix
# directly in front of a sentinel is taken along with it.
LITERAL_PATTERN = re.compile(
    r'__(?:' + _TAGS + r')[0-9]+(?:__|_?' + re.escape(SENTINEL) + r')|' + re.escape(SENTINEL)
)
_LITERAL_REF = re.compile(r'__LIT([0-9]+)__')

COMBINED_LOG_PATTERN = re.compile(
    r'(?P<addr>\S+) (?P<ident>\S+) (?P<user>\S+) '
    r'\[(?P<time>[^\]]+)\] '
    r'"(?P<method>[A-Z]+) (?P<path>[^" ]+)(?: (?P<protocol>HTTP/[0-9.]+))?" '
    r'(?P<status>[0-9]{3}) (?P<size>[0-9]+|-)'
    r'(?: "(?P<referer>[^"]*)" "(?P<agent>[^"]*)")?',
    re.ASCII,
)

APACHE_TIMESTAMP_PATTERN = re.compile(
    r'\[([0-9]{2}/[A-Z][a-z]{2}/[0-9]{4}:[0-9]{2}:[0-9]{2}:[0-9]{2} [+-][0-9]{4})\]'
)

GENERIC_EXTRACTORS = (
    ('TS', re.compile(r'\b[0-9]{4}-[0-9]{2}-[0-9]{2} [0-9]{2}:[0-9]{2}:[0-9]{2}(?:,[0-9]{3})?\b', re.ASCII)),
    ('IP', re.compile(r'\b(?:[0-9]{1,3}\.){3}[0-9]{1,3}\b', re.ASCII)),
    ('UUID', re.compile(
        r'\b[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}\b', re.ASCII)),
    ('ID', re.compile(r'\b[0-9]{6,}\b', re.ASCII)),
)

# group name -> (table tag, cap setting, guardrail flag)
_COMBINED_FIELDS = (
    ('addr', 'ADDR', None, None),
    ('method', 'MTH', None, None),
    ('path', 'PATH', 'path_cap', 'path_mapping'),
    ('status', 'ST', None, None),
    ('referer', 'REF', 'referer_cap', 'referer_mapping'),
    ('agent', 'UA', 'agent_cap', 'agent_mapping'),
)


def parse_apache_timestamp(value: str) -> Optional[Tuple[int, str]]:
    """
    Parse "dd/Mon/yyyy:HH:MM:SS +ZZZZ" into (epoch seconds, offset string)

    Returns None when the value is not a valid calendar date.

    Example:
        >>> parse_apache_timestamp("10/Oct/2023:13:55:36 +0300")
        (1696935336, '+0300')
    """
    try:
        day, month_name, rest = value.split('/', 2)
        year, hour, minute, second_offset = rest.split(':', 3)
        second, offset = second_offset.split(' ')
        month = _MONTH_INDEX[month_name]
        sign = -1 if offset[0] == '-' else 1
        tz = timezone(sign * timedelta(hours=int(offset[1:3]), minutes=int(offset[3:5])))
        dt = datetime(int(year), month, int(day), int(hour), int(minute), int(second), tzinfo=tz)
        return int(dt.timestamp()), offset
    except (ValueError, KeyError, IndexError, OverflowError):
        return None


def format_apache_timestamp(epoch: int, offset: str) -> str:
    """Inverse of parse_apache_timestamp()"""
    sign = -1 if offset[0] == '-' else 1
    tz = timezone(sign * timedelta(hours=int(offset[1:3]), minutes=int(offset[3:5])))
    dt = datetime.fromtimestamp(epoch, tz)
    return (f"{dt.day:02d}/{MONTHS[dt.month - 1]}/{dt.year:04d}:"
            f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} {offset}")


class FieldNormalizer(StageProtocol):
    """
    Replace structured fields with __TAG<n>__ placeholders

    Side tables are append-only and reuse the existing index on an exact
    repeat. Path, referer and user-agent tables are capped, and switched
    off entirely once the serialized tables outgrow header_growth_budget.
    """

    name = "normalize"

    def __init__(self, config: CodecConfig = DEFAULT_CONFIG):
        self.config = config

    def encode(self, text: str, ctx: CompressionContext) -> str:
        return '\n'.join(self.normalize_line(line, ctx) for line in text.split('\n'))

    def normalize_line(self, line: str, ctx: CompressionContext) -> str:
        line = LITERAL_PATTERN.sub(lambda m: self._placeholder('LIT', m.group(0), ctx), line)
        line = self._extract_combined(line, ctx)
        line = APACHE_TIMESTAMP_PATTERN.sub(lambda m: self._apache_timestamp(m, ctx), line)
        for tag, pattern in GENERIC_EXTRACTORS:
            line = pattern.sub(lambda m, tag=tag: self._placeholder(tag, m.group(0), ctx), line)
        return line

    def decode(self, text: str, ctx: CompressionContext) -> str:
        if '__' not in text:
            return text
        return PLACEHOLDER_PATTERN.sub(lambda m: self._expand(m, ctx), text)

    # ------------------------------------------------------------------
    # Encoding helpers
    # ------------------------------------------------------------------

    def _placeholder(self, tag: str, value: str, ctx: CompressionContext) -> str:
        position, is_new = ctx.table(tag).register(value)
        if is_new:
            self._grow(ctx, len(escape_value(value)) + 1)
        return f"__{tag}{position}__"

    def _grow(self, ctx: CompressionContext, size: int):
        ctx.header_growth += size
        if ctx.header_growth > self.config.header_growth_budget and ctx.path_mapping:
            ctx.disable_costly_mappings()

    def _extract_combined(self, line: str, ctx: CompressionContext) -> str:
        match = COMBINED_LOG_PATTERN.fullmatch(line)
        if not match:
            return line

        pieces = []
        last = 0
        for group, tag, cap_setting, flag in _COMBINED_FIELDS:
            start, end = match.span(group)
            if start < 0:
                continue
            # Fields are stored exactly as they appeared in the input
            value = _LITERAL_REF.sub(lambda m: self._literal(m, ctx), match.group(group))
            if flag is not None:
                if not getattr(ctx, flag):
                    continue
                table = ctx.table(tag)
                if value not in table.index and len(table) >= getattr(self.config, cap_setting):
                    continue
            pieces.append(line[last:start])
            pieces.append(self._placeholder(tag, value, ctx))
            last = end
        pieces.append(line[last:])
        return ''.join(pieces)

    @staticmethod
    def _literal(match, ctx: CompressionContext) -> str:
        value = ctx.table('LIT').get(int(match.group(1)))
        return match.group(0) if value is None else value

    def _apache_timestamp(self, match, ctx: CompressionContext) -> str:
        value = match.group(1)
        parsed = parse_apache_timestamp(value)
        if parsed is None:
            return match.group(0)
        epoch, offset = parsed

        apache = ctx.apache
        if not apache.is_set:
            apache.base_epoch = epoch
            apache.offset = offset
            self._grow(ctx, len(str(epoch)) + len(offset) + 2)
        elif offset != apache.offset:
            # One shared offset per document: others stay literal
            return match.group(0)

        delta = epoch - apache.base_epoch
        try:
            exact = format_apache_timestamp(apache.base_epoch + delta, apache.offset) == value
        except (ValueError, OverflowError, OSError):
            exact = False
        if not exact:
            return match.group(0)

        apache.deltas.append(delta)
        self._grow(ctx, len(str(delta)) + 1)
        return f"[__ATS{len(apache.deltas) - 1}__]"

    # ------------------------------------------------------------------
    # Decoding helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _expand(match, ctx: CompressionContext) -> str:
        tag = match.group(1)
        position = int(match.group(2))

        if tag == 'ATS' and ctx.apache.is_set:
            apache = ctx.apache
            if position >= len(apache.deltas):
                return match.group(0)
            try:
                return format_apache_timestamp(apache.base_epoch + apache.deltas[position],
                                               apache.offset)
            except (ValueError, OverflowError, OSError, IndexError):
                return match.group(0)

        value = ctx.table(tag).get(position)
        return match.group(0) if value is None else value
