"""candlekit: OHLCV candle aggregation for trade data."""

from candlekit.models import Candle, TimePeriod, Trade

__all__ = ["Candle", "TimePeriod", "Trade"]
__version__ = "0.1.0"
