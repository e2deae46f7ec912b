"""
Context layer - domain-specific implementations.
"""

from smartrle.context.encoding import (
    DictionaryStage, BlockRLEStage, PatternStage,
    LineTemplateStage, CharRLEStage, CharMapStage,
)
from smartrle.context.normalization import FieldNormalizer
from smartrle.context.header import HeaderCodec

__all__ = [
    'DictionaryStage',
    'BlockRLEStage',
    'PatternStage',
    'LineTemplateStage',
    'CharRLEStage',
    'CharMapStage',
    'FieldNormalizer',
    'HeaderCodec',
]
