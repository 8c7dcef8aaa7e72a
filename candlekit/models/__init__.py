"""Data models for candlekit."""

from candlekit.models.candle import Candle
from candlekit.models.period import TIMEFRAMES, TimePeriod, parse_timeframe
from candlekit.models.trade import Trade

__all__ = [
    "Candle",
    "TIMEFRAMES",
    "TimePeriod",
    "Trade",
    "parse_timeframe",
]
