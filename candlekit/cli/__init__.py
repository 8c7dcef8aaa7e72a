"""CLI commands for candlekit.

This package provides the command-line interface for building OHLCV
candles from trade files.
"""

from candlekit.cli.main import cli, main

__all__ = ["cli", "main"]
