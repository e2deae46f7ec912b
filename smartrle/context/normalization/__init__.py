"""
Field normalization for structured log content.
"""

from smartrle.context.normalization.normalizer import (
    FieldNormalizer,
    PLACEHOLDER_PATTERN,
    parse_apache_timestamp,
    format_apache_timestamp,
)

__all__ = [
    'FieldNormalizer',
    'PLACEHOLDER_PATTERN',
    'parse_apache_timestamp',
    'format_apache_timestamp',
]
