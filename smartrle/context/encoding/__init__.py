"""
Structural encoders, applied in pipeline order.
"""

from smartrle.context.encoding.dictionary import DictionaryStage, STATIC_DICTIONARY
from smartrle.context.encoding.block_rle import BlockRLEStage
from smartrle.context.encoding.patterns import PatternStage
from smartrle.context.encoding.line_templates import LineTemplateStage
from smartrle.context.encoding.char_rle import CharRLEStage
from smartrle.context.encoding.char_map import CharMapStage

__all__ = [
    'DictionaryStage',
    'STATIC_DICTIONARY',
    'BlockRLEStage',
    'PatternStage',
    'LineTemplateStage',
    'CharRLEStage',
    'CharMapStage',
]
