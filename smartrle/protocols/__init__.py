"""
Protocols (interfaces) for SmartRLE components.

This module defines abstract contracts that implementations must follow.
"""

from abc import ABC, abstractmethod
from smartrle.models import CompressionContext

__all__ = [
    'StageProtocol',
]


class StageProtocol(ABC):
    """Protocol for one reversible pipeline stage."""

    @abstractmethod
    def encode(self, text: str, ctx: CompressionContext) -> str:
        """
        Transform text, recording whatever the inverse needs in ctx.

        Args:
            text: Full output of the previous stage
            ctx: Per-call compression context

        Returns:
            Encoded text
        """
        pass

    @abstractmethod
    def decode(self, text: str, ctx: CompressionContext) -> str:
        """
        Undo encode() using only what the header restored into ctx.

        Args:
            text: Encoded text
            ctx: Context rebuilt from the header

        Returns:
            Text as it was before encode()
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Return stage name for progress output."""
        pass
