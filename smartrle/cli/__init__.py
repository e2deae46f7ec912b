"""
CLI layer - command-line interface.
"""

from smartrle.cli.commands import compress, decompress, inspect, benchmark, smoke

__all__ = ['compress', 'decompress', 'inspect', 'benchmark', 'smoke']
