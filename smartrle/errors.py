"""
Exception types raised by SmartRLE.

Decoding never raises on malformed fragments; these cover caller mistakes.
"""


class SmartRLEError(Exception):
    """Base class for SmartRLE errors."""


class ConfigError(SmartRLEError, ValueError):
    """Invalid codec configuration."""


class InputTypeError(SmartRLEError, TypeError):
    """compress/decompress called with something other than str."""
