"""Artifact header serialization"""

from smartrle.context.header.codec import (
    HeaderCodec,
    HEADER_MARKER,
    COMPRESSED_HEADER_MARKER,
    DATA_DELIMITER,
    FORMAT_VERSION,
)

__all__ = [
    'HeaderCodec',
    'HEADER_MARKER',
    'COMPRESSED_HEADER_MARKER',
    'DATA_DELIMITER',
    'FORMAT_VERSION',
]
